from math import prod

import pytest

from ufel.arr import A, S, V
from ufel.errors import DomainError, LengthError, NYIError, RankError
from ufel.form import Form, Ori
import ufel.funs as f

class TestMoveAxes:
    def test_permute(self):
        a = A([2, 3], range(6))
        b = f.move_axes(a, [1, 0])
        assert b == A([3, 2], [0, 3, 1, 4, 2, 5])

    def test_round_trip(self):
        shape = [2, 3, 4]
        a = A(shape, range(prod(shape)))
        b = f.move_axes(a, [2, 0, 1])
        assert b.form == Form.normal([3, 4, 2])
        assert f.move_axes(b, [1, 2, 0]) == a

    def test_identity_shares_buffer(self):
        a = A([2, 3], range(6))
        b = f.move_axes(a, [0, 1])
        assert b == a
        assert not a.data.is_unique()

    def test_missing_axes_follow(self):
        a = A([2, 3, 4], range(24))
        assert f.move_axes(a, [1]) == f.move_axes(a, [1, 0, 2])

    def test_diagonal(self):
        a = A([3, 3], range(9))
        assert f.move_axes(a, [0, 0]) == V([0, 4, 8])

    def test_diagonal_takes_smallest_axis(self):
        a = A([2, 3], range(6))
        assert f.move_axes(a, [0, 0]) == V([0, 4])

    def test_empty(self):
        a = A([0, 3], [])
        b = f.move_axes(a, [1, 0])
        assert b.form == Form.normal([3, 0])
        assert b.to_list() == []

    def test_rank_too_small(self):
        with pytest.raises(RankError):
            f.move_axes(V([1, 2]), [1])

    def test_keeps_grid(self):
        a = A(Form.grid([[2, 3], [4, 5]]), range(120))
        b = f.move_axes(a, [0, 2, 1, 3])
        assert b.form == Form.grid([[2, 4], [3, 5]])

class TestTranspose:
    def test_matrix(self):
        a = A([2, 2], [1, 2, 3, 4])
        assert f.transpose(a, Ori.HORI) == A([2, 2], [1, 3, 2, 4])

    def test_rank3(self):
        a = A([2, 3, 4], range(24))
        b = f.transpose(a, Ori.HORI)
        assert b.form == Form.normal([4, 2, 3])
        assert b.to_list()[:4] == [0, 4, 8, 12]

    def test_list_unchanged(self):
        assert f.transpose(V([1, 2, 3]), Ori.HORI) == V([1, 2, 3])

    def test_scalar(self):
        assert f.transpose(S(4), Ori.HORI) == S(4)

    def test_vertical_rotates_groups(self):
        a = A(Form.grid([[2, 3], [4, 5]]), range(120))
        assert f.transpose(a, Ori.VERT).form == Form.grid([[4, 5], [2, 3]])

    def test_horizontal_rotates_within_groups(self):
        a = A(Form.grid([[2, 3], [4, 5]]), range(120))
        assert f.transpose(a, Ori.HORI).form == Form.grid([[3, 2], [5, 4]])

class TestSwap:
    def test_normal(self):
        a = A([2, 3], range(6))
        b = f.swap(a)
        assert b.form == Form.grid([[2], [3]])
        assert b.to_list() == list(range(6))

    def test_swap_twice(self):
        a = A(Form.grid([[2, 3], [4, 5]]), range(120))
        b = f.swap(a)
        assert b.form == Form.grid([[2, 4], [3, 5]])
        assert f.swap(b) == a

    def test_scalar(self):
        assert f.swap(S(1)) == S(1)

class TestChunk:
    def test_size(self):
        b = f.chunk(V(range(6)), S(2), Ori.HORI)
        assert b.form == Form.grid([[3], [2]])
        assert b.to_list() == list(range(6))

    def test_count(self):
        b = f.chunk(V(range(6)), S(-2), Ori.HORI)
        assert b.form == Form.grid([[2], [3]])

    def test_matrix(self):
        a = A([4, 6], range(24))
        b = f.chunk(a, V([2, 3]), Ori.HORI)
        assert b.form == Form.grid([[2, 2], [2, 3]])
        assert b.form.elems() == 24

    def test_not_dividing(self):
        with pytest.raises(LengthError):
            f.chunk(V(range(6)), S(4), Ori.HORI)

    def test_zero(self):
        with pytest.raises(LengthError):
            f.chunk(V(range(6)), S(0), Ori.HORI)

    def test_count_not_dividing(self):
        with pytest.raises(LengthError):
            f.chunk(V(range(6)), S(-4), Ori.HORI)

    def test_count_of_empty_axis(self):
        with pytest.raises(LengthError, match='Chunk size -1 does not evenly divide axis 0 size 0'):
            f.chunk(A([0], []), S(-1), Ori.HORI)

    def test_size_of_empty_axis(self):
        b = f.chunk(A([0], []), S(2), Ori.HORI)
        assert b.form == Form.grid([[0], [2]])
        assert b.to_list() == []

    def test_too_many_sizes(self):
        with pytest.raises(LengthError):
            f.chunk(V(range(6)), V([2, 3]), Ori.HORI)

    def test_non_integer(self):
        with pytest.raises(DomainError):
            f.chunk(V(range(6)), S(1.5), Ori.HORI)

    def test_size_rank(self):
        with pytest.raises(RankError):
            f.chunk(V(range(6)), A([1, 1], [2]), Ori.HORI)

    def test_vertical_not_implemented(self):
        with pytest.raises(NYIError):
            f.chunk(V(range(6)), S(2), Ori.VERT)

class TestFirst:
    def test_horizontal(self):
        assert f.first(A([2, 3], range(6)), Ori.HORI) == V([0, 1, 2])

    def test_list(self):
        assert f.first(V([7, 8]), Ori.HORI) == S(7)

    def test_vertical_of_normal(self):
        assert f.first(A([2, 3], range(6)), Ori.VERT) == S(0)

    def test_vertical_of_column(self):
        a = A(Form.grid([[2], [3]]), range(6))
        assert f.first(a, Ori.VERT) == V([0, 1, 2])

    def test_vertical_of_grid(self):
        a = A(Form.grid([[2, 3], [2, 2]]), range(24))
        assert f.first(a, Ori.VERT) == A([2, 2], [0, 1, 2, 3])

    def test_horizontal_of_grid(self):
        a = A(Form.grid([[2, 2], [2, 2]]), range(16))
        b = f.first(a, Ori.HORI)
        assert b.form == Form.grid([[2], [2]])
        assert b.to_list() == [0, 1, 4, 5]

    def test_empty(self):
        with pytest.raises(DomainError):
            f.first(A([0], []), Ori.HORI)

class TestRange:
    def test_scalar(self):
        assert f.range_(S(4)) == V([0, 1, 2, 3])

    def test_zero(self):
        assert f.range_(S(0)).to_list() == []

    def test_coordinates(self):
        b = f.range_(V([2, 3]))
        assert b.form == Form.normal([2, 3, 2])
        assert b.to_list()[:6] == [0, 0, 0, 1, 0, 2]

    def test_negative(self):
        with pytest.raises(DomainError):
            f.range_(S(-1))

    def test_rank(self):
        with pytest.raises(RankError):
            f.range_(A([1, 1], [2]))

class TestFormQueries:
    def test_length(self):
        a = A(Form.grid([[2, 3], [4, 5]]), range(120))
        assert f.length(a, Ori.HORI) == S(8)
        assert f.length(a, Ori.VERT) == S(6)

    def test_shape(self):
        a = A(Form.grid([[2, 3], [4, 5]]), range(120))
        assert f.shape(a, Ori.HORI) == V([2, 3])
        assert f.shape(a, Ori.VERT) == V([2, 4])

    def test_form_of(self):
        a = A(Form.grid([[2, 3], [4, 5]]), range(120))
        assert f.form_of(a) == A([2, 2], [2, 3, 4, 5])

    def test_deform(self):
        a = A(Form.grid([[2, 3], [4, 5]]), range(120))
        b = f.deform(a, Ori.HORI)
        assert b.form == Form.normal([2, 3, 4, 5])
        assert b.to_list() == a.to_list()
        assert a.form == Form.grid([[2, 3], [4, 5]])
