"""
form.py

The shape of a Ufel array is not a single axis list but a grid of axis
sizes: `vert` groups of `hori` axes each, stored flattened, row-major, so
that axis j of group i is `dims[i*hori + j]`.

    Form(2, 2, [2, 3, 4, 5])    # groups [2, 3] and [4, 5]

The grid can be read two ways, selected by an orientation (Ori):

    horizontal: the shape is the first group; the leading axis of a row is
                the first axis of *every* group
    vertical:   the shape is the leading axis of each group; the leading
                "axis" of a row is the whole first group

Element data is laid out row-major over `dims` in group order.

A form with at most one group is "normal" and behaves like an ordinary
rank-`hori` shape.
"""
from enum import Enum
from math import prod
from typing import Iterator, Optional, Sequence

from ufel.errors import NYIError

class Ori(Enum):
    HORI = 0
    VERT = 1

    def __invert__(self) -> 'Ori':
        return Ori.VERT if self == Ori.HORI else Ori.HORI

    def __str__(self) -> str:
        return 'horizontal' if self == Ori.HORI else 'vertical'

class Form:
    def __init__(self, vert: int, hori: int, dims: Sequence[int]) -> None:
        self.vert = vert
        self.hori = hori
        self.dims = list(dims)
        self.validate()

    @classmethod
    def scalar(cls) -> 'Form':
        return cls(0, 0, [])

    @classmethod
    def empty_list(cls) -> 'Form':
        return cls(1, 1, [0])

    @classmethod
    def normal(cls, dims: Sequence[int]) -> 'Form':
        """
        An ordinary shape: a single group.

        >>> Form.normal([2, 3])
        [2×3]
        """
        return cls(1, len(dims), dims)

    @classmethod
    def grid(cls, groups: Sequence[Sequence[int]]) -> 'Form':
        """
        >>> Form.grid([[2, 3], [4, 5]])
        [2×3 4×5]
        """
        hori = len(groups[0]) if groups else 0
        return cls(len(groups), hori, [d for g in groups for d in g])

    def validate(self) -> None:
        assert self.vert * self.hori == len(self.dims), \
            f"Form is {self.vert}x{self.hori} but has {len(self.dims)} elements"

    def copy(self) -> 'Form':
        return Form(self.vert, self.hori, self.dims)

    def elems(self) -> int:
        return prod(self.dims)

    def groups(self) -> Iterator[list[int]]:
        """
        Generator. Yield each group (row of the grid) in turn.
        """
        step = max(self.hori, 1)
        for i in range(0, len(self.dims), step):
            yield self.dims[i:i+step]

    def row_count(self, ori: Ori) -> int:
        if ori == Ori.HORI:
            return prod(g[0] for g in self.groups() if g)
        return next((prod(g) for g in self.groups()), 1)

    def row_len(self, ori: Ori) -> int:
        if ori == Ori.HORI:
            return prod(d for g in self.groups() for d in g[1:])
        return prod(d for g in list(self.groups())[1:] for d in g)

    def shape(self, ori: Ori) -> list[int]:
        if ori == Ori.HORI:
            return next(self.groups(), [])
        return [g[0] for g in self.groups() if g]

    def leading_axes(self, ori: Ori) -> list[int]:
        """
        Positions in `dims` of the axes that index rows under `ori`.

        >>> Form.grid([[2, 3], [4, 5]]).leading_axes(Ori.HORI)
        [0, 2]
        >>> Form.grid([[2, 3], [4, 5]]).leading_axes(Ori.VERT)
        [0, 1]
        """
        if self.is_scalar():
            return []
        if ori == Ori.HORI:
            return [i*self.hori for i in range(self.vert)]
        return list(range(self.hori))

    def is_scalar(self) -> bool:
        return self.vert == 0 or self.hori == 0

    def is_normal(self) -> bool:
        return self.vert <= 1 or self.hori == 0

    def is_list(self) -> bool:
        return self.normal_rank() == 1

    def as_normal(self) -> Optional[list[int]]:
        if self.is_scalar():
            return []
        if not self.is_normal():
            return None
        return self[0]

    def normal_rank(self) -> Optional[int]:
        return self.hori if self.is_normal() else None

    def rank(self, ori: Ori) -> int:
        return self.hori if ori == Ori.HORI else self.vert

    def dims_rank(self) -> int:
        """
        The total number of axes
        """
        return self.vert * self.hori

    def row(self, ori: Ori) -> 'Form':
        """
        The form of one row: drop the leading axis under `ori`.

        >>> Form.grid([[2, 3], [4, 5]]).row(Ori.HORI)
        [×3 ×5]
        >>> Form.grid([[2, 3], [4, 5]]).row(Ori.VERT)
        [4×5]
        """
        if ori == Ori.HORI:
            hori = max(self.hori - 1, 0)
            dims = [d for g in self.groups() for d in g[1:]] if self.hori else []
            form = Form(self.vert, hori, dims)
        else:
            vert = max(self.vert - 1, 0)
            form = Form(vert, self.hori, self.dims[self.hori:] if vert else [])
        return Form.scalar() if form.is_scalar() else form

    def fix(self, ori: Ori) -> None:
        """
        Insert a new leading axis of size 1 under `ori`, in place.
        """
        if self.is_scalar():
            self.vert, self.hori, self.dims = 1, 1, [1]
        elif ori == Ori.HORI:
            self.dims = [d for g in self.groups() for d in [1] + g]
            self.hori += 1
        else:
            if self.vert > 1:
                raise NYIError(f"vertical fix of a {self.vert}-group form")
            self.dims = [1]*self.hori + self.dims
            self.vert += 1
        self.validate()

    def deform(self, ori: Ori) -> None:
        """
        Collapse the grid into a single group (horizontal) or a single column
        (vertical), in place. The axis order, and so the data layout, is
        unchanged.
        """
        if self.is_scalar():
            self.vert, self.hori, self.dims = 0, 0, []
        elif ori == Ori.HORI:
            self.hori *= self.vert
            self.vert = 1
        else:
            self.vert *= self.hori
            self.hori = 1
        self.validate()

    def is_prefix_of(self, other: 'Form') -> bool:
        if not (self.vert <= other.vert and self.hori <= other.hori):
            return False
        for i in range(self.vert):
            for j in range(self.hori):
                if self[i][j] != other[i][j]:
                    return False
        return True

    def prefixes_match(self, other: 'Form') -> bool:
        return self.is_prefix_of(other) or other.is_prefix_of(self)

    def __getitem__(self, index: int) -> list[int]:
        assert 0 <= index < self.vert, f"Index {index} out of bounds of {self.vert} form rows"
        return self.dims[index*self.hori:(index+1)*self.hori]

    def __setitem__(self, key: tuple[int, int], value: int) -> None:
        (i, j) = key
        assert 0 <= i < self.vert, f"Index {i} out of bounds of {self.vert} form rows"
        assert 0 <= j < self.hori, f"Index {j} out of bounds of {self.hori} form columns"
        self.dims[i*self.hori + j] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Form):
            return NotImplemented
        return (self.vert, self.hori, self.dims) == (other.vert, other.hori, other.dims)

    def __hash__(self) -> int:
        return hash((self.vert, self.hori, tuple(self.dims)))

    def __repr__(self) -> str:
        normal = self.as_normal()
        if normal is not None:
            return '[' + '×'.join(map(str, normal)) + ']'
        groups = []
        for g in self.groups():
            if self.hori == 1:
                groups.append(f"×{g[0]}")
            else:
                groups.append('×'.join(map(str, g)))
        return '[' + ' '.join(groups) + ']'
