from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Any, Generic, Optional, TypeVar

from ufel.errors import HumanLoc, HumanSpan, LexError, UfelError
from ufel.voc import Primitive, Voc

T = TypeVar('T')

class TokenType(Enum):
    PRIMITIVE = auto()
    NUMBER = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    BAR = auto()
    NEWLINE = auto()

TOK: dict[str, TokenType] = {
    "(":  TokenType.LPAREN,
    ")":  TokenType.RPAREN,
    "[":  TokenType.LBRACKET,
    "]":  TokenType.RBRACKET,
    "|":  TokenType.BAR,
    "\n": TokenType.NEWLINE,
}

WHITESPACE = ' \t\r'

@dataclass(frozen=True)
class Span:
    """
    Character offsets [start, end) into input number `src`
    """
    start: int
    end: int
    src: int = 0

    def merge(self, other: 'Span') -> 'Span':
        assert self.src == other.src, "Cannot merge spans from different inputs"
        return Span(min(self.start, other.start), max(self.end, other.end), self.src)

    def sp(self, value: T) -> 'Sp[T]':
        return Sp(value, self)

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"

@dataclass(frozen=True)
class Sp(Generic[T]):
    """
    A value with the span it came from
    """
    value: T
    span: Span

@dataclass(frozen=True)
class Input:
    src: Optional[Path]  # None for inline text
    text: str

class Inputs:
    """
    Every source text loaded so far, so that spans can be turned back into
    line and column numbers.
    """
    def __init__(self) -> None:
        self.inputs: list[Input] = []

    def push(self, input: Input) -> int:
        self.inputs.append(input)
        return len(self.inputs) - 1

    def span_text(self, span: Span) -> str:
        return self.inputs[span.src].text[span.start:span.end]

    def human_loc(self, loc: int, src: int) -> HumanLoc:
        before = self.inputs[src].text[:loc]
        line = before.count('\n') + 1
        col = len(before) - (before.rfind('\n') + 1) + 1
        return HumanLoc(line, col)

    def human_span(self, span: Span) -> HumanSpan:
        return HumanSpan(
            self.human_loc(span.start, span.src),
            self.human_loc(span.end, span.src),
            self.inputs[span.src].src,
        )

    def error(self, span: Span, message: str, kind: type[UfelError]) -> UfelError:
        hspan = self.human_span(span)
        lines = self.inputs[span.src].text.split('\n')
        line = lines[hspan.start.line - 1] if hspan.start.line <= len(lines) else ''
        return kind(message, hspan, line)

    def __len__(self) -> int:
        return len(self.inputs)

    def __getitem__(self, i: int) -> Input:
        return self.inputs[i]

class Token:
    def __init__(self, kind: TokenType, tok: Primitive|str, span: Span) -> None:
        self.kind = kind
        self.tok = tok
        self.span = span

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.tok) == (other.kind, other.tok)

    def __str__(self) -> str:
        return f"Token({self.kind}, {self.tok})"

    __repr__ = __str__

class Tokeniser:
    def __init__(self, inputs: Inputs, src: int) -> None:
        self.inputs = inputs
        self.src = src
        self.chunk = inputs[src].text
        self.pos = 0

    def peek(self) -> str:
        try:
            return self.chunk[self.pos]
        except IndexError:
            return ''

    def digits(self) -> bool:
        start = self.pos
        while self.peek().isascii() and self.peek().isdigit():
            self.pos += 1
        return self.pos > start

    def getnum(self) -> None:
        """
        digits ('.' digits?)? ([eE] '`'? digits)?

        A leading ` is a minus sign, and has already been consumed along with
        the first digit.
        """
        self.digits()
        if self.peek() == '.':
            self.pos += 1
            self.digits()
        reset = self.pos
        if self.peek() in ('e', 'E'):
            self.pos += 1
            if self.peek() == '`':
                self.pos += 1
            if not self.digits():
                self.pos = reset

    def span(self, start: int) -> Span:
        return Span(start, self.pos, self.src)

    def lex(self) -> list[Token]:
        tokens: list[Token] = []
        while self.pos < len(self.chunk):
            start = self.pos
            hd = self.chunk[self.pos]
            self.pos += 1

            if hd in WHITESPACE:
                continue

            if hd in TOK:
                tokens.append(Token(TOK[hd], hd, self.span(start)))
                continue

            if hd.isascii() and hd.isdigit() or hd == '`' and self.peek().isascii() and self.peek().isdigit():
                self.getnum()
                tokens.append(Token(TokenType.NUMBER, self.chunk[start:self.pos], self.span(start)))
                continue

            prim = Voc.lookup(hd)
            if prim is None:
                raise self.inputs.error(self.span(start), f"Invalid character: {hd!r}", LexError)
            tokens.append(Token(TokenType.PRIMITIVE, prim, self.span(start)))

        return tokens

def lex(inputs: Inputs, src: Optional[Path], text: str) -> list[Token]:
    """
    Register text with inputs and tokenise it
    """
    return Tokeniser(inputs, inputs.push(Input(src, text))).lex()
