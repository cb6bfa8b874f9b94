import math

import pytest

from ufel.arr import A, S, V
from ufel.errors import ShapeError
from ufel.form import Form
from ufel.voc import (Dyadic, DyModifier, Modifier, Monadic, Voc, add, div, eq, mod, mpervade,
                      neg, pervade, sub)

class TestScalarFunctions:
    def test_top_of_stack_comes_first(self):
        assert sub(3.0, 5.0) == 2.0
        assert div(2.0, 6.0) == 3.0

    def test_division_by_zero(self):
        assert div(0.0, 1.0) == math.inf
        assert div(0.0, -1.0) == -math.inf
        assert math.isnan(div(0.0, 0.0))

    def test_mod_is_euclidean(self):
        assert mod(3.0, -1.0) == 2.0
        assert mod(-3.0, 7.0) == 1.0

    def test_eq_nan(self):
        assert eq(math.nan, math.nan) == 1.0

class TestPervade:
    def test_equal_forms(self):
        result = pervade(V([1, 2, 3]), V([10, 20, 30]), add)
        assert result == V([11, 22, 33])

    def test_scalar_with_list(self):
        assert pervade(S(5), V([1, 2, 3]), add) == V([6, 7, 8])

    def test_list_with_scalar_keeps_argument_order(self):
        # a on top: sub(elem, 10) is 10 - elem
        assert pervade(V([1, 2, 3]), S(10), sub) == V([9, 8, 7])
        assert pervade(S(10), V([1, 2, 3]), sub) == V([-9, -8, -7])

    def test_prefix_is_paired_with_each_block(self):
        result = pervade(V([10, 20]), A([2, 3], range(6)), add)
        assert result.form == Form.normal([2, 3])
        assert result.to_list() == [10, 21, 12, 23, 14, 25]

    def test_result_takes_larger_form(self):
        big = A(Form.grid([[2], [3]]), range(6))
        assert pervade(big, V([1, 1]), add).form == big.form

    def test_incompatible(self):
        with pytest.raises(ShapeError, match=r'Forms \[2\] and \[3\] are not compatible'):
            pervade(V([1, 2]), V([1, 2, 3]), add)

    def test_self_equality(self):
        a = A([2, 2], [1, math.nan, 3, 4])
        assert pervade(a, a, eq) == A([2, 2], [1, 1, 1, 1])

class TestMonadicPervade:
    def test_in_place(self):
        a = V([1, -2])
        data = a.data.make_mut()
        result = mpervade(a, neg)
        assert result.data.make_mut() is data
        assert result == V([-1, 2])

    def test_shared_buffer_is_copied(self):
        a = V([1, -2])
        b = a.clone()
        result = mpervade(b, neg)
        assert result == V([-1, 2])
        assert a == V([1, -2])

class TestVoc:
    def test_lookup(self):
        assert Voc.lookup('+') == Dyadic.ADD
        assert Voc.lookup('d') == Modifier.DIP
        assert Voc.lookup('⊃') == DyModifier.FORK
        assert Voc.lookup('`') == Monadic.NEG
        assert Voc.lookup('$') is None

    def test_glyphs_are_unique(self):
        glyphs = Voc.glyphs()
        assert len(glyphs) == len(set(glyphs))

    def test_modifier_set(self):
        assert [m.glyph for m in Modifier] == ['d', 'u', 'r', 's', 'k', ':', 'o', 'b', '&']
        assert [m.glyph for m in DyModifier] == ['⊃', '⊓']

    def test_operands(self):
        assert Modifier.REDUCE.operands == 1
        assert DyModifier.BRACKET.operands == 2

    def test_names(self):
        assert str(Modifier.REDUCE) == 'reduce'
        assert Modifier.REDUCE.title == 'Reduce'
