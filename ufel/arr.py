from functools import singledispatch
import math
from typing import Any, Iterable, Iterator, Sequence

from ufel.errors import NYIError, ShapeError
from ufel.form import Form, Ori

def strides(shape: Sequence[int]) -> list[int]:
    r = [0 for _ in range(len(shape))]
    u = 1
    for i in range(len(r)-1, -1, -1):
        r[i] = u
        u *= shape[i]
    return r

def encode(shape: Sequence[int], idx: int) -> list[int]:
    """
    Flat index to coordinate vector for the given shape

    >>> encode([2, 3, 4], 17)
    [1, 1, 1]
    """
    coords = [0]*len(shape)
    for i in range(len(shape)-1, -1, -1):
        if shape[i]:
            idx, coords[i] = divmod(idx, shape[i])
    return coords

def decode(shape: Sequence[int], coords: Sequence[int]) -> int:
    """
    Coordinate vector to flat index for the given shape

    >>> decode([2, 3, 4], [1, 1, 1])
    17
    """
    idx = 0
    for dim, c in zip(shape, coords):
        idx = idx*dim + c
    return idx

class _Cell:
    __slots__ = ('items', 'owners')

    def __init__(self, items: list) -> None:
        self.items = items
        self.owners = 1

class Buffer:
    """
    A copy-on-write element buffer. Cloning a buffer with share() is O(1); the
    clones see the same storage until one of them asks for a mutable view with
    make_mut(), at which point it takes a private copy if anyone else still
    holds the storage.

    >>> a = Buffer([1, 2, 3])
    >>> b = a.share()
    >>> b.make_mut()[0] = 9
    >>> list(a), list(b)
    ([1, 2, 3], [9, 2, 3])
    """
    def __init__(self, items: Iterable = ()) -> None:
        self._cell = _Cell(list(items))

    def share(self) -> 'Buffer':
        buf = Buffer.__new__(Buffer)
        buf._cell = self._cell
        self._cell.owners += 1
        return buf

    def is_unique(self) -> bool:
        return self._cell.owners == 1

    def make_mut(self) -> list:
        if self._cell.owners > 1:
            self._cell.owners -= 1
            self._cell = _Cell(list(self._cell.items))
        return self._cell.items

    def slice(self, start: int, stop: int, step: int = 1) -> 'Buffer':
        return Buffer(self._cell.items[start:stop:step])

    def __del__(self) -> None:
        cell = getattr(self, '_cell', None)
        if cell is not None:
            cell.owners -= 1

    def __len__(self) -> int:
        return len(self._cell.items)

    def __iter__(self) -> Iterator:
        return iter(self._cell.items)

    def __getitem__(self, i: Any) -> Any:
        return self._cell.items[i]

    def __repr__(self) -> str:
        return f"Buffer({self._cell.items!r})"

@singledispatch
def elem_eq(a: Any, b: Any) -> bool:
    return a == b

@elem_eq.register
def _(a: float, b: Any) -> bool:
    if math.isnan(a):
        return isinstance(b, float) and math.isnan(b)
    return a == b

@singledispatch
def elem_hash(a: Any) -> int:
    return hash(a)

@elem_hash.register
def _(a: float) -> int:
    if math.isnan(a):
        return hash('NaN')
    return hash(a)

def fmt_num(x: float) -> str:
    """
    >>> fmt_num(3.0), fmt_num(-0.5), fmt_num(float('-inf'))
    ('3', '-0.5', '-inf')
    """
    if math.isnan(x):
        return 'NaN'
    if math.isinf(x):
        return 'inf' if x > 0 else '-inf'
    if x == int(x):
        return str(int(x))
    return repr(x)

class Array:
    """
    An Array is a Form together with a flat, copy-on-write buffer of elements,
    laid out row-major over form.dims. A scalar holds exactly one element.
    """
    def __init__(self, form: Form, data: Buffer|Iterable) -> None:
        self.form = form
        self.data = data if isinstance(data, Buffer) else Buffer(data)
        self.validate()

    def validate(self) -> None:
        assert len(self.data) == self.form.elems(), \
            f"Form {self.form!r} has {self.form.elems()} elements but data has {len(self.data)}"

    @classmethod
    def scalar(cls, x: Any) -> 'Array':
        return cls(Form.scalar(), [x])

    @classmethod
    def empty(cls, form: Form) -> 'Array':
        assert form.elems() == 0
        return cls(form, [])

    @classmethod
    def from_row_arrays(cls, rows: Iterable['Array'], ori: Ori) -> 'Array':
        """
        Build an array one rank higher from rows that all share one normal
        form. The new leading axis goes where fix() puts it under `ori`.

        >>> print(Array.from_row_arrays([V([1, 2]), V([3, 4])], Ori.HORI))
        [[2×2] 1 2 3 4]
        >>> print(Array.from_row_arrays([V([1, 2]), V([3, 4])], Ori.VERT))
        [[×2 ×2] 1 2 3 4]
        """
        rows = list(rows)
        if not rows:
            return cls(Form.empty_list(), [])
        first = rows[0]
        if not first.form.is_normal():
            raise NYIError("non-normal array creation")
        data: list = []
        for row in rows:
            if row.form != first.form:
                raise ShapeError(
                    f"Cannot create array with different row forms {first.form!r} and {row.form!r}")
            data.extend(row.data)
        form = first.form.copy()
        form.fix(ori)
        form[0, 0] = len(rows)
        return cls(form, data)

    def clone(self) -> 'Array':
        return Array(self.form.copy(), self.data.share())

    def make_mut(self) -> list:
        return self.data.make_mut()

    def is_scalar(self) -> bool:
        return self.form.is_scalar()

    def item(self) -> Any:
        assert self.form.elems() == 1
        return self.data[0]

    def to_list(self) -> list:
        return list(self.data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Array):
            return NotImplemented
        return self.form == other.form and all(elem_eq(a, b) for a, b in zip(self.data, other.data))

    def __hash__(self) -> int:
        return hash((self.form, tuple(elem_hash(e) for e in self.data)))

    def __repr__(self) -> str:
        return f"Array({self.form!r}, {list(self.data)!r})"

    def __str__(self) -> str:
        def fmt(e: Any) -> str:
            return fmt_num(e) if isinstance(e, float) else str(e)
        if self.form.is_scalar():
            return fmt(self.data[0])
        head = '' if self.form.is_list() else f"{self.form!r} "
        return '[' + head + ' '.join(fmt(e) for e in self.data) + ']'

def S(x: Any) -> Array:
    """
    Scalar
    """
    return Array.scalar(float(x) if isinstance(x, int) else x)

def V(data: Sequence) -> Array:
    """
    List
    """
    return Array(Form.normal([len(data)]), [float(x) if isinstance(x, int) else x for x in data])

def A(shape: list[int]|Form, data: Sequence) -> Array:
    """
    Array of the given normal shape, or of an explicit Form
    """
    form = shape if isinstance(shape, Form) else Form.normal(shape)
    return Array(form, [float(x) if isinstance(x, int) else x for x in data])

def is_int(x: Any) -> bool:
    return isinstance(x, (int, float)) and not math.isnan(x) and not math.isinf(x) and x == int(x)
