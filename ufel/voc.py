"""
voc.py

The primitive vocabulary: every glyph, what kind of thing it is, and the
scalar functions the arithmetic and comparison primitives pervade with.

Note on argument order: the runtime pops the top of the stack first, so a
dyadic scalar function is called as f(a, b) where `a` was on top and `b`
below it. `5 3 -` is sub(3, 5) = 5 - 3.

This file contains doctests.

To run the doctests, do:

    python -m ufel.voc [-v]
"""
from enum import Enum
import math
from typing import Callable, Optional, TypeAlias

from ufel.arr import Array
from ufel.errors import ShapeError

Scalar2: TypeAlias = Callable[[float, float], float]
Scalar1: TypeAlias = Callable[[float], float]

#---- dyadic scalar functions: a is the top of the stack, b the one below

def add(a: float, b: float) -> float:
    return b + a

def sub(a: float, b: float) -> float:
    """
    >>> sub(3.0, 5.0)
    2.0
    """
    return b - a

def mul(a: float, b: float) -> float:
    return b * a

def div(a: float, b: float) -> float:
    """
    IEEE division: x/0 is a signed infinity, 0/0 is NaN.

    >>> div(2.0, 6.0), div(0.0, -1.0), div(0.0, 0.0)
    (3.0, -inf, nan)
    """
    if a == 0:
        if b == 0 or math.isnan(b):
            return math.nan
        return math.copysign(math.inf, b) * math.copysign(1.0, a)
    return b / a

def mod(a: float, b: float) -> float:
    """
    Euclidean remainder of b by a, never negative.

    >>> mod(3.0, -1.0), mod(3.0, 7.0)
    (2.0, 1.0)
    """
    if a == 0 or math.isinf(b) or math.isnan(a) or math.isnan(b):
        return math.nan
    r = math.fmod(b, a)
    if r < 0:
        r += abs(a)
    return r

def eq(a: float, b: float) -> float:
    """
    NaN equals itself here, so that every array equals itself elementwise.

    >>> eq(math.nan, math.nan), eq(1.0, 2.0)
    (1.0, 0.0)
    """
    return float(a == b or (math.isnan(a) and math.isnan(b)))

def ne(a: float, b: float) -> float:
    return 1.0 - eq(a, b)

def lt(a: float, b: float) -> float:
    """
    >>> lt(5.0, 3.0)
    1.0
    """
    return float(b < a)

def gt(a: float, b: float) -> float:
    return float(b > a)

def minimum(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return min(a, b)

def maximum(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return max(a, b)

#---- monadic scalar functions

def neg(a: float) -> float:
    return -a

def not_(a: float) -> float:
    return 1.0 - a

def sign(a: float) -> float:
    """
    >>> sign(-4.0), sign(0.0), sign(2.5)
    (-1.0, 1.0, 1.0)
    """
    if math.isnan(a):
        return math.nan
    return math.copysign(1.0, a)

def flipped(f: Scalar2) -> Scalar2:
    def g(a: float, b: float) -> float:
        return f(b, a)
    return g

def pervade(a: Array, b: Array, f: Scalar2) -> Array:
    """
    Apply f element-wise between a and b. Their forms must be equal, or one
    must be a prefix of the other, in which case the smaller array is paired
    positionally with each consecutive block of the larger.

    Case 0: equal forms
    Case 1: a's form is a prefix of b's
    Case 2: b's form is a prefix of a's
    Case 3: shape error

    >>> from ufel.arr import S, V
    >>> print(pervade(S(5), V([1, 2, 3]), add))
    [6 7 8]
    >>> print(pervade(V([1, 2]), V([1, 2, 3]), add))
    Traceback (most recent call last):
    ...
    ufel.errors.ShapeError: Forms [2] and [3] are not compatible
    """
    if a.form == b.form:                                   # Case 0
        return Array(b.form.copy(), [f(x, y) for x, y in zip(a.data, b.data)])

    if a.form.is_prefix_of(b.form):                        # Case 1
        return Array(b.form.copy(), _blockwise(a, b, f))

    if b.form.is_prefix_of(a.form):                        # Case 2
        return Array(a.form.copy(), _blockwise(b, a, lambda y, x: f(x, y)))

    raise ShapeError(f"Forms {a.form!r} and {b.form!r} are not compatible")

def _blockwise(small: Array, big: Array, f: Scalar2) -> list:
    """
    [private]

    f(small_elem, big_elem) over each block of big the size of small
    """
    n = small.form.elems()
    if n == 0:
        return []
    out = []
    items = big.data
    for start in range(0, len(items), n):
        out.extend(f(x, y) for x, y in zip(small.data, items[start:start+n]))
    return out

def mpervade(a: Array, f: Scalar1) -> Array:
    """
    Map f over every element of a. The buffer is updated in place when a is
    its only owner.

    >>> from ufel.arr import V
    >>> print(mpervade(V([1, -2]), neg))
    [-1 2]
    """
    data = a.make_mut()
    for i, x in enumerate(data):
        data[i] = f(x)
    return a

class Primitive(Enum):
    """
    Base for the glyph tables. Each member is (glyph, doc).
    """
    def __init__(self, glyph: str, doc: str) -> None:
        self.glyph = glyph
        self.doc = doc

    @property
    def title(self) -> str:
        return self.name.capitalize()

    def __str__(self) -> str:
        return self.name.lower()

class Monadic(Primitive):
    IDENTITY = ('.', "Return the argument unchanged")
    NEG = ('`', "Negate each element")
    NOT = ('!', "Logical not: 1 - x")
    ABS = ('a', "Absolute value")
    SIGN = ('g', "Sign of each element")
    LEN = ('l', "Number of rows under the current orientation")
    SHAPE = ('h', "Shape under the current orientation")
    FORM = ('f', "The form grid as an array")
    FIRST = ('F', "First row under the current orientation")
    TRANSPOSE = ('t', "Rotate the axes under the current orientation")
    SWAP = ('w', "Swap the vertical and horizontal groups")
    RANGE = ('n', "Range of a number, or coordinates of a shape")
    DEFORM = ('D', "Collapse the form grid")

class Dyadic(Primitive):
    ADD = ('+', "Add")
    SUB = ('-', "Subtract")
    MUL = ('*', "Multiply")
    DIV = ('/', "Divide")
    MOD = ('M', "Modulo")
    EQ = ('=', "Equal")
    NE = ('≠', "Not equal")
    LT = ('<', "Less than")
    GT = ('>', "Greater than")
    MIN = ('↧', "Minimum")
    MAX = ('↥', "Maximum")
    CHUNK = ('c', "Split axes into chunks of the given sizes")

class Modifier(Primitive):
    DIP = ('d', "Call a function below the top value")
    TURN = ('u', "Call a function with the orientation flipped")
    REDUCE = ('r', "Fold rows with a dyadic function")
    SCAN = ('s', "Running fold of rows with a dyadic function")
    SELF = ('k', "Call a function with its argument twice")
    FLIP = (':', "Call a function with its top two arguments swapped")
    ON = ('o', "Call a function, keeping its first argument on top")
    BY = ('b', "Call a function, keeping its last argument below")
    BOTH = ('&', "Call a function on two sets of arguments")

    @property
    def operands(self) -> int:
        return 1

class DyModifier(Primitive):
    FORK = ('⊃', "Call two functions on the same arguments")
    BRACKET = ('⊓', "Call two functions on separate arguments")

    @property
    def operands(self) -> int:
        return 2

class Voc:
    """
    Voc is the global table of scalar functions behind the pervasive
    primitives. This class should not be instantiated.
    """
    monadic: dict[Monadic, Scalar1] = {
        Monadic.NEG:  neg,
        Monadic.NOT:  not_,
        Monadic.ABS:  abs,
        Monadic.SIGN: sign,
    }

    dyadic: dict[Dyadic, Scalar2] = {
        Dyadic.ADD: add,
        Dyadic.SUB: sub,
        Dyadic.MUL: mul,
        Dyadic.DIV: div,
        Dyadic.MOD: mod,
        Dyadic.EQ:  eq,
        Dyadic.NE:  ne,
        Dyadic.LT:  lt,
        Dyadic.GT:  gt,
        Dyadic.MIN: minimum,
        Dyadic.MAX: maximum,
    }

    by_glyph: dict[str, Primitive] = {
        p.glyph: p for t in (Monadic, Dyadic, Modifier, DyModifier) for p in t
    }

    identity: dict[Dyadic, float] = {
        Dyadic.ADD: 0.0,
        Dyadic.SUB: 0.0,
        Dyadic.MOD: 0.0,
        Dyadic.EQ:  0.0,
        Dyadic.NE:  0.0,
        Dyadic.LT:  0.0,
        Dyadic.GT:  0.0,
        Dyadic.MIN: 0.0,
        Dyadic.MUL: 1.0,
        Dyadic.DIV: 1.0,
        Dyadic.MAX: 1.0,
    }

    @classmethod
    def lookup(cls, glyph: str) -> Optional[Primitive]:
        """
        Find the primitive spelled by glyph, if any
        """
        return cls.by_glyph.get(glyph)

    @classmethod
    def glyphs(cls) -> str:
        return ''.join(p.glyph for t in (Monadic, Dyadic, Modifier, DyModifier) for p in t)

if __name__ == "__main__":
    # To run the doctests (verbosely), do
    #
    # python -m ufel.voc -v
    #
    # See: https://docs.python.org/3/library/doctest.html
    import doctest
    doctest.testmod()
