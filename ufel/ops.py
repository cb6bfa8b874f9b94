"""
ops.py

Row-wise folds used by the reduce (r) and scan (s) modifiers.

r - reduce()
s - scan()

Both fold along the leading axis of the current orientation. The operand
must be a plain dyadic primitive, possibly under flip (:).

The fold steps as acc = f(elem, acc): the running value stands where the
deeper stack argument would, so `[1 2 3] r-` is (1-2)-3.

This file contains doctests.

To run the doctests, do:

    python -m ufel.ops [-v]
"""
from typing import Callable

from ufel.arr import Array
from ufel.errors import DomainError, NYIError
from ufel.form import Ori
from ufel.funs import _row_offsets
from ufel.voc import Dyadic, Scalar2, Voc, flipped

def _operand(prim: Dyadic, flip: bool) -> tuple[Scalar2, float]:
    """
    [private]

    The scalar function and identity for a reducible primitive
    """
    if prim == Dyadic.CHUNK:
        raise NYIError("Chunk reduction")
    try:
        fn = Voc.dyadic[prim]
    except KeyError:
        raise DomainError("Function cannot be reduced")
    return (flipped(fn) if flip else fn), Voc.identity[prim]

def _step(fn: Scalar2) -> Callable[[float, float], float]:
    def f(acc: float, elem: float) -> float:
        return fn(elem, acc)
    return f

def reduce(arr: Array, prim: Dyadic, flip: bool, ori: Ori) -> Array:
    """
    Fold the rows of arr under ori.

    >>> from ufel.arr import A, V
    >>> print(reduce(V([1, 2, 3, 4]), Dyadic.ADD, False, Ori.HORI))
    10
    >>> print(reduce(V([1, 2, 3]), Dyadic.SUB, False, Ori.HORI))
    -4
    >>> print(reduce(A([2, 2], [1, 2, 3, 4]), Dyadic.ADD, False, Ori.HORI))
    [4 6]
    >>> print(reduce(A([0, 3], []), Dyadic.MUL, False, Ori.HORI))
    [1 1 1]
    """
    fn, identity = _operand(prim, flip)
    f = _step(fn)
    form = arr.form
    if form.is_scalar():
        return arr
    if 0 in form.dims:
        row_form = form.row(ori)
        return Array(row_form, [identity]*row_form.elems())
    if form.rank(ori) == 1 and form.rank(~ori) == 1:
        data = iter(arr.data)
        acc = next(data)
        for elem in data:
            acc = f(acc, elem)
        return Array.scalar(acc)

    row_form = form.row(ori)
    lead, rest = _row_offsets(form, ori)
    src = arr.data
    acc_row = [src[lead[0] + e] for e in rest]
    for r in lead[1:]:
        acc_row = [f(acc, src[r + e]) for acc, e in zip(acc_row, rest)]
    return Array(row_form, acc_row)

def scan(arr: Array, prim: Dyadic, flip: bool, ori: Ori) -> Array:
    """
    Running fold of the rows of arr under ori. The result has the form of
    arr, and its row k is the fold of rows 0 to k.

    >>> from ufel.arr import A, V
    >>> print(scan(V([1, 2, 3, 4]), Dyadic.ADD, False, Ori.HORI))
    [1 3 6 10]
    >>> print(scan(A([2, 2], [1, 2, 3, 4]), Dyadic.MUL, False, Ori.HORI))
    [[2×2] 1 2 3 8]
    """
    fn, _ = _operand(prim, flip)
    f = _step(fn)
    form = arr.form
    if form.is_scalar() or form.elems() == 0:
        return arr
    lead, rest = _row_offsets(form, ori)
    out = arr.clone()
    data = out.make_mut()
    for prev, r in zip(lead, lead[1:]):
        for e in rest:
            data[r + e] = f(data[prev + e], data[r + e])
    return out

if __name__ == "__main__":
    # To run the doctests (verbosely), do
    #
    # python -m ufel.ops -v
    #
    # See: https://docs.python.org/3/library/doctest.html
    import doctest
    doctest.testmod()
