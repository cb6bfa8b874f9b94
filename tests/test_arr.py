import math

import pytest

from ufel.arr import A, Array, Buffer, S, V, decode, encode, fmt_num
from ufel.errors import NYIError, ShapeError
from ufel.form import Form, Ori

class TestBuffer:
    def test_share_is_copy_on_write(self):
        a = Buffer([1, 2, 3])
        b = a.share()
        assert not a.is_unique()
        b.make_mut()[0] = 9
        assert list(a) == [1, 2, 3]
        assert list(b) == [9, 2, 3]
        assert a.is_unique()
        assert b.is_unique()

    def test_unique_buffer_mutates_in_place(self):
        a = Buffer([1, 2, 3])
        items = a.make_mut()
        items[0] = 7
        assert a.make_mut() is items
        assert list(a) == [7, 2, 3]

    def test_slice(self):
        a = Buffer(range(6))
        assert list(a.slice(0, 6, 2)) == [0, 2, 4]
        assert a.is_unique()

class TestArray:
    def test_scalar(self):
        a = S(5)
        assert a.is_scalar()
        assert a.item() == 5.0
        assert a.form == Form.scalar()

    def test_invariant(self):
        with pytest.raises(AssertionError):
            Array(Form.normal([2, 2]), [1, 2, 3])

    def test_clone_shares_data(self):
        a = V([1, 2, 3])
        b = a.clone()
        assert a == b
        b.make_mut()[1] = 0.0
        assert a.to_list() == [1, 2, 3]
        assert b.to_list() == [1, 0, 3]

    def test_clone_has_own_form(self):
        a = V([1, 2, 3])
        b = a.clone()
        b.form.deform(Ori.VERT)
        assert a.form == Form.normal([3])

    def test_nan_equality(self):
        assert S(math.nan) == S(math.nan)
        assert hash(S(math.nan)) == hash(S(math.nan))
        assert V([1, math.nan]) != V([1, 2])

    def test_equality_needs_same_form(self):
        assert A([2, 2], [1, 2, 3, 4]) != V([1, 2, 3, 4])

    def test_str(self):
        assert str(S(3)) == '3'
        assert str(S(-0.5)) == '-0.5'
        assert str(V([1, 2, 3])) == '[1 2 3]'
        assert str(A([2, 3], range(6))) == '[[2×3] 0 1 2 3 4 5]'
        assert str(Array(Form.empty_list(), [])) == '[]'

    def test_fmt_num(self):
        assert fmt_num(math.nan) == 'NaN'
        assert fmt_num(math.inf) == 'inf'
        assert fmt_num(2.0) == '2'

class TestFromRowArrays:
    def test_literal_list(self):
        a = Array.from_row_arrays([S(1), S(2), S(3)], Ori.HORI)
        assert a.form == Form.normal([3])
        assert a.to_list() == [1, 2, 3]

    def test_matrix(self):
        a = Array.from_row_arrays([V([1, 2]), V([3, 4])], Ori.HORI)
        assert a.form == Form.normal([2, 2])
        assert a.to_list() == [1, 2, 3, 4]

    def test_vertical_rows(self):
        a = Array.from_row_arrays([V([1, 2]), V([3, 4])], Ori.VERT)
        assert a.form == Form.grid([[2], [2]])
        assert a.to_list() == [1, 2, 3, 4]

    def test_no_rows(self):
        a = Array.from_row_arrays([], Ori.HORI)
        assert a.form == Form.empty_list()
        assert a.to_list() == []

    def test_different_row_forms(self):
        with pytest.raises(ShapeError, match='different row forms'):
            Array.from_row_arrays([V([1, 2]), V([1, 2, 3])], Ori.HORI)

    def test_non_normal_rows(self):
        row = A(Form.grid([[2], [2]]), [1, 2, 3, 4])
        with pytest.raises(NYIError):
            Array.from_row_arrays([row, row], Ori.HORI)

class TestIndexing:
    def test_encode(self):
        assert encode([2, 3, 4], 17) == [1, 1, 1]
        assert encode([2, 3], 5) == [1, 2]

    def test_decode(self):
        assert decode([2, 3, 4], [1, 1, 1]) == 17

    def test_round_trip(self):
        shape = [3, 1, 4]
        for i in range(12):
            assert decode(shape, encode(shape, i)) == i
