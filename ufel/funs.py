"""
funs.py

Structural primitives: everything that moves elements between positions
rather than computing new ones.

t - transpose()
w - swap()
c - chunk()
F - first()
n - range_()
l h f D - length(), shape(), form_of(), deform()

All of them, bar first() and range_(), are phrased in terms of move_axes(),
which reorders, merges and drops axes of the form grid in one pass.

This file contains doctests.

To run the doctests, do:

    python -m ufel.funs [-v]
"""
import itertools
from math import prod
from typing import Sequence

from ufel.arr import A, Array, S, V, decode, encode, fmt_num, is_int, strides
from ufel.errors import DomainError, LengthError, NYIError, RankError
from ufel.form import Form, Ori

def move_axes(arr: Array, indices: Sequence[int]) -> Array:
    """
    Move source axis j (counting through the flattened form grid) to
    destination axis indices[j]. Axes not mentioned keep their relative
    order after the mentioned ones. Several source axes sent to the same
    destination are merged along their diagonal, taking the smallest size.

    >>> a = A([2, 3], [0, 1, 2, 3, 4, 5])
    >>> print(move_axes(a, [1, 0]))
    [[3×2] 0 3 1 4 2 5]

    >>> a = A([3, 3], list(range(9)))
    >>> print(move_axes(a, [0, 0]))
    [0 4 8]
    """
    dims = arr.form.dims
    rank = len(dims)
    indices = list(indices)

    duplicates = sum(1 for i, a in enumerate(indices) if a in indices[:i])
    min_rank = (max(indices) + 1 if indices else 0) + duplicates
    if rank < min_rank:
        raise RankError(f"Indices imply a rank of at least {min_rank}, but the array is rank {rank}")

    # Add missing axes
    new_rank = rank - duplicates
    for i in range(new_rank):
        if i not in indices:
            indices.append(i)

    new_dims = [min(dims[j] for j, d in enumerate(indices) if d == i) for i in range(new_rank)]
    if new_rank == arr.form.dims_rank():
        form = Form(arr.form.vert, arr.form.hori, new_dims)
    else:
        form = Form.normal(new_dims)

    # Axes already in their final place at the end need no reordering
    trailing = 0
    for (i, a), b in zip(reversed(list(enumerate(indices))), range(new_rank-1, -1, -1)):
        if a in indices[:i] or a != b:
            break
        trailing += 1

    new_elems = prod(new_dims)
    if new_elems == 0:
        return Array.empty(form)
    if trailing == rank:
        return Array(form, arr.data.share())

    orig_dims = dims[:rank-trailing]
    lead_dims = new_dims[:new_rank-trailing]
    row_len = prod(dims[rank-trailing:])

    src = arr.data
    data = []
    for i in range(new_elems // row_len):
        new_index = encode(lead_dims, i)
        orig_index = [new_index[indices[j]] for j in range(len(orig_dims))]
        start = decode(orig_dims, orig_index) * row_len
        data.extend(src[start:start+row_len])
    return Array(form, data)

def transpose(arr: Array, ori: Ori) -> Array:
    """
    Horizontally, rotate the axes within each group so that the last comes
    first. Vertically, rotate the groups.

    >>> print(transpose(A([2, 2], [1, 2, 3, 4]), Ori.HORI))
    [[2×2] 1 3 2 4]
    """
    if arr.form.is_scalar():
        return arr.clone()
    hori = arr.form.hori
    axes = list(range(arr.form.dims_rank()))
    if ori == Ori.HORI:
        for i in range(0, len(axes), hori):
            axes[i:i+hori] = axes[i+1:i+hori] + axes[i:i+1]
    else:
        axes = axes[hori:] + axes[:hori]
    return move_axes(arr, axes)

def swap(arr: Array) -> Array:
    """
    Exchange the vertical and horizontal readings: the form grid itself is
    transposed.

    >>> print(swap(A([2, 3], list(range(6)))))
    [[×2 ×3] 0 1 2 3 4 5]
    """
    vert, hori = arr.form.vert, arr.form.hori
    if arr.form.is_scalar():
        return arr.clone()
    if vert <= 1 or hori <= 1:
        return Array(Form(hori, vert, arr.form.dims), arr.data.share())
    indices = [0]*(vert*hori)
    for i in range(vert):
        for j in range(hori):
            indices[i*hori + j] = j*vert + i
    moved = move_axes(arr, indices)
    return Array(Form(hori, vert, moved.form.dims), moved.data)

def chunk(arr: Array, size: Array, ori: Ori) -> Array:
    """
    Split each leading axis into (count, size) pairs. The counts stay in the
    first group and the sizes form a new group. A negative size asks for
    that many chunks instead.

    >>> print(chunk(V(list(range(6))), S(2), Ori.HORI))
    [[×3 ×2] 0 1 2 3 4 5]
    >>> print(chunk(V(list(range(6))), S(-2), Ori.HORI))
    [[×2 ×3] 0 1 2 3 4 5]
    """
    if not size.form.is_normal():
        raise RankError(f"Chunk size must be normal, but its form is {size.form!r}")
    if size.form.hori > 1:
        raise RankError(f"Chunk size must be a scalar or list, but its form is {size.form!r}")
    sizes = size.to_list()
    for sz in sizes:
        if not is_int(sz):
            raise DomainError(f"Chunk size must be all integers, but one element is {fmt_num(sz)}")
    shape = arr.form.shape(ori)
    if len(sizes) > len(shape):
        raise LengthError(
            f"Chunk size has too many axes for {ori} shape {Form.normal(shape)!r}")
    if ori == Ori.VERT:
        raise NYIError("vertical chunk")
    if arr.form.is_scalar():
        return arr.clone()

    form = arr.form
    new_dims: list[int] = []
    dests: list[int] = []
    for i in range(form.hori):
        dim = form.dims[i]
        if i < len(sizes):
            n = int(sizes[i])
            sz = n
            if n < 0 and dim % n == 0:
                sz = dim // -n
            # an empty axis has no chunks of size 0
            if sz <= 0 or dim % sz != 0:
                raise LengthError(f"Chunk size {n} does not evenly divide axis {i} size {dim}")
        else:
            sz = 1
        new_dims += [dim // sz, sz]
        dests += [i, i + len(shape)]
    new_dims += form.dims[form.hori:]
    regrouped = Array(Form(form.vert + 1, form.hori, new_dims), arr.data.share())
    return move_axes(regrouped, dests)

def _row_offsets(form: Form, ori: Ori) -> tuple[list[int], list[int]]:
    """
    [private]

    Split flat positions into a row part and an in-row part: element e of
    row r lives at lead[r] + rest[e].

    >>> _row_offsets(Form.grid([[2, 2], [2, 2]]), Ori.HORI)
    ([0, 2, 8, 10], [0, 1, 4, 5])
    """
    st = strides(form.dims)
    leading = set(form.leading_axes(ori))
    def offsets(axes: list[int]) -> list[int]:
        return [sum(c*st[a] for a, c in zip(axes, cvec))
                for cvec in itertools.product(*(range(form.dims[a]) for a in axes))]
    lead_axes = [a for a in range(form.dims_rank()) if a in leading]
    rest_axes = [a for a in range(form.dims_rank()) if a not in leading]
    return offsets(lead_axes), offsets(rest_axes)

def first(arr: Array, ori: Ori) -> Array:
    """
    The first row under ori. Horizontally this is a contiguous prefix of a
    normal array; vertically it takes every element whose first-group axes
    are all zero.

    >>> print(first(A([2, 3], list(range(6))), Ori.HORI))
    [0 1 2]
    >>> print(first(A(Form.grid([[2, 3], [2, 2]]), list(range(24))), Ori.VERT))
    [[2×2] 0 1 2 3]
    """
    form = arr.form
    if form.row_count(ori) == 0:
        raise DomainError("Cannot get first row of an empty array")
    if form.is_scalar():
        return arr.clone()
    row_form = form.row(ori)
    if ori == Ori.HORI and form.is_normal():
        return Array(row_form, arr.data.slice(0, form.row_len(Ori.HORI)))
    if ori == Ori.VERT and (form.hori <= 1 or form.vert <= 1):
        stride = form.row_len(Ori.HORI)
        n = form.row_len(Ori.VERT)
        return Array(row_form, arr.data.slice(0, n*stride, stride))
    _, rest = _row_offsets(form, ori)
    return Array(row_form, [arr.data[e] for e in rest])

def range_(arr: Array) -> Array:
    """
    n - range

    >>> print(range_(S(4)))
    [0 1 2 3]
    >>> print(range_(V([2, 2])))
    [[2×2×2] 0 0 0 1 1 0 1 1]
    """
    if arr.form.normal_rank() not in (0, 1):
        raise RankError(f"Range argument must be a scalar or list, but its form is {arr.form!r}")
    for x in arr.data:
        if not (is_int(x) and x >= 0):
            raise DomainError(f"Range argument must be natural numbers, but one element is {fmt_num(x)}")
    sizes = [int(x) for x in arr.data]
    if arr.form.is_scalar():
        return V(list(range(sizes[0])))
    data: list[int] = []
    for cvec in itertools.product(*(range(n) for n in sizes)):
        data.extend(cvec)
    return A(sizes + [len(sizes)], data)

def length(arr: Array, ori: Ori) -> Array:
    return S(arr.form.row_count(ori))

def shape(arr: Array, ori: Ori) -> Array:
    return V(arr.form.shape(ori))

def form_of(arr: Array) -> Array:
    """
    The form grid as a vert × hori array

    >>> print(form_of(A(Form.grid([[2, 3], [4, 5]]), [0]*120)))
    [[2×2] 2 3 4 5]
    """
    form = arr.form
    return A([form.vert, form.hori], form.dims)

def deform(arr: Array, ori: Ori) -> Array:
    out = arr.clone()
    out.form.deform(ori)
    return out

if __name__ == "__main__":
    # To run the doctests (verbosely), do
    #
    # python -m ufel.funs -v
    #
    # See: https://docs.python.org/3/library/doctest.html
    import doctest
    doctest.testmod()
