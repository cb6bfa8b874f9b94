import pytest

from ufel.errors import NYIError
from ufel.form import Form, Ori

class TestForm:
    def test_scalar(self):
        f = Form.scalar()
        assert f.is_scalar()
        assert f.is_normal()
        assert f.elems() == 1
        assert f.shape(Ori.HORI) == []
        assert repr(f) == '[]'

    def test_normal(self):
        f = Form.normal([2, 3])
        assert (f.vert, f.hori, f.dims) == (1, 2, [2, 3])
        assert f.is_normal()
        assert not f.is_list()
        assert f.elems() == 6
        assert repr(f) == '[2×3]'

    def test_list(self):
        assert Form.normal([4]).is_list()
        assert Form.empty_list().is_list()
        assert Form.empty_list().elems() == 0

    def test_grid_repr(self):
        assert repr(Form.grid([[2, 3], [4, 5]])) == '[2×3 4×5]'
        assert repr(Form.grid([[2], [3]])) == '[×2 ×3]'

    def test_invariant(self):
        with pytest.raises(AssertionError):
            Form(2, 2, [1, 2, 3])

    def test_indexing(self):
        f = Form.grid([[2, 3], [4, 5]])
        assert f[0] == [2, 3]
        assert f[1] == [4, 5]
        f[1, 0] = 7
        assert f.dims == [2, 3, 7, 5]

    def test_indexing_out_of_bounds(self):
        with pytest.raises(AssertionError):
            Form.normal([2, 3])[1]

class TestOrientation:
    def test_horizontal_reading(self):
        f = Form.grid([[2, 3], [4, 5]])
        assert f.shape(Ori.HORI) == [2, 3]
        assert f.row_count(Ori.HORI) == 8
        assert f.row_len(Ori.HORI) == 15
        assert f.rank(Ori.HORI) == 2

    def test_vertical_reading(self):
        f = Form.grid([[2, 3], [4, 5]])
        assert f.shape(Ori.VERT) == [2, 4]
        assert f.row_count(Ori.VERT) == 6
        assert f.row_len(Ori.VERT) == 20
        assert f.rank(Ori.VERT) == 2

    def test_rows_cover_all_elements(self):
        f = Form.grid([[2, 3], [4, 5]])
        for ori in Ori:
            assert f.row_count(ori) * f.row_len(ori) == f.elems()

    def test_ori_invert(self):
        assert ~Ori.HORI == Ori.VERT
        assert ~Ori.VERT == Ori.HORI
        assert str(Ori.VERT) == 'vertical'

class TestRow:
    def test_row_horizontal(self):
        assert Form.normal([2, 3]).row(Ori.HORI) == Form.normal([3])
        assert repr(Form.grid([[2, 3], [4, 5]]).row(Ori.HORI)) == '[×3 ×5]'

    def test_row_vertical(self):
        assert Form.grid([[2, 3], [4, 5]]).row(Ori.VERT) == Form.normal([4, 5])

    def test_row_of_list_is_scalar(self):
        assert Form.normal([3]).row(Ori.HORI) == Form.scalar()
        assert Form.normal([3]).row(Ori.VERT) == Form.scalar()

class TestFix:
    def test_fix_scalar(self):
        f = Form.scalar()
        f.fix(Ori.HORI)
        assert f == Form.normal([1])

    def test_fix_horizontal(self):
        f = Form.normal([3])
        f.fix(Ori.HORI)
        assert f == Form.normal([1, 3])

    def test_fix_horizontal_grid(self):
        f = Form.grid([[2, 3], [4, 5]])
        f.fix(Ori.HORI)
        assert f == Form.grid([[1, 2, 3], [1, 4, 5]])

    def test_fix_vertical(self):
        f = Form.normal([3])
        f.fix(Ori.VERT)
        assert f == Form.grid([[1], [3]])
        assert repr(f) == '[×1 ×3]'

    def test_fix_vertical_multi_group(self):
        f = Form.grid([[2, 3], [4, 5]])
        with pytest.raises(NYIError):
            f.fix(Ori.VERT)

class TestDeform:
    def test_deform_horizontal(self):
        f = Form.grid([[2, 3], [4, 5]])
        f.deform(Ori.HORI)
        assert f == Form.normal([2, 3, 4, 5])

    def test_deform_vertical(self):
        f = Form.grid([[2, 3], [4, 5]])
        f.deform(Ori.VERT)
        assert f == Form.grid([[2], [3], [4], [5]])

    def test_deform_keeps_elements(self):
        f = Form.grid([[2, 3], [4, 5]])
        n = f.elems()
        f.deform(Ori.VERT)
        assert f.elems() == n

class TestPrefix:
    def test_prefix(self):
        assert Form.normal([2]).is_prefix_of(Form.normal([2, 3]))
        assert not Form.normal([2, 3]).is_prefix_of(Form.normal([2]))
        assert Form.normal([2]).is_prefix_of(Form.grid([[2], [3]]))

    def test_scalar_is_prefix_of_everything(self):
        assert Form.scalar().is_prefix_of(Form.grid([[2, 3], [4, 5]]))

    def test_not_prefix(self):
        assert not Form.normal([3]).is_prefix_of(Form.normal([2, 3]))
        assert not Form.normal([2]).prefixes_match(Form.normal([3]))

    def test_prefixes_match(self):
        assert Form.normal([2, 3]).prefixes_match(Form.normal([2]))
