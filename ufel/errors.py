"""
errors.py

Two kinds of failure live here.

Array-level errors (ArrayError and friends) are raised by the pure array
code in form.py, arr.py, voc.py, funs.py and ops.py. They know nothing
about source text. The runtime catches them at the innermost executing
node and re-raises them as a located RunError.

Located errors (UfelError and its phase subclasses) carry a human-readable
position and the offending source line, and are what the user finally sees:

    Runtime error at 1:7: Forms [2] and [3] are not compatible
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, Optional

class ArrayError(Exception):
    pass

class ShapeError(ArrayError):
    pass

class RankError(ArrayError):
    pass

class LengthError(ArrayError):
    pass

class DomainError(ArrayError):
    pass

class NYIError(ArrayError):
    """
    Raised by the orientation paths that are deliberately left unimplemented,
    e.g. a vertical chunk.
    """
    def __init__(self, what: str) -> None:
        super().__init__(f"{what} is not yet implemented")

class ErrorKind(Enum):
    LEX = 'Lex'
    PARSE = 'Parse'
    COMPILE = 'Compile'
    RUN = 'Runtime'

@dataclass(frozen=True)
class HumanLoc:
    line: int
    col: int

@dataclass(frozen=True)
class HumanSpan:
    start: HumanLoc
    end: HumanLoc
    src: Optional[Path] = None  # None for inline text

    def __str__(self) -> str:
        prefix = f"{self.src}:" if self.src is not None else ''
        return f"{prefix}{self.start.line}:{self.start.col}"

class UfelError(Exception):
    kind: ErrorKind = ErrorKind.RUN

    def __init__(self, message: str, span: Optional[HumanSpan] = None, line: str = '') -> None:
        super().__init__(message)
        self.message = message
        self.span = span
        self.line = line
        self.multi: list['UfelError'] = []

    def __str__(self) -> str:
        if self.span is None:
            return f"{self.kind.value} error: {self.message}"
        return f"{self.kind.value} error at {self.span}: {self.message}"

    def __iter__(self) -> Iterator['UfelError']:
        yield self
        yield from self.multi

    @staticmethod
    def from_iter(errors: Iterable['UfelError']) -> Optional['UfelError']:
        """
        Fold a number of errors into one. The first is the primary error, the
        rest are attached to it.
        """
        errors = list(errors)
        if not errors:
            return None
        primary = errors[0]
        for e in errors[1:]:
            primary.multi.extend(e)
        return primary

class LexError(UfelError):
    kind = ErrorKind.LEX

class ParseError(UfelError):
    kind = ErrorKind.PARSE

class CompileError(UfelError):
    kind = ErrorKind.COMPILE

class RunError(UfelError):
    kind = ErrorKind.RUN
