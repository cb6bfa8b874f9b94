from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, TypeAlias, TypeVar, Union

from ufel.errors import ParseError, UfelError
from ufel.tokeniser import Inputs, Sp, Span, Token, TokenType, lex
from ufel.voc import Dyadic, DyModifier, Modifier, Monadic

T = TypeVar('T')

Line: TypeAlias = list[Sp['Word']]

@dataclass(frozen=True)
class Number:
    value: float

@dataclass(frozen=True)
class Prim:
    prim: Monadic|Dyadic

@dataclass
class Func:
    lines: list[Line] = field(default_factory=list)

@dataclass
class ArrayLit:
    lines: list[Line] = field(default_factory=list)

@dataclass
class Modified:
    modifier: Sp[Modifier|DyModifier]
    args: list[Sp['Word']] = field(default_factory=list)
    pack: bool = False

Word: TypeAlias = Union[Number, Prim, Func, ArrayLit, Modified]

NAMES = {
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
    TokenType.LBRACKET: "'['",
    TokenType.RBRACKET: "']'",
    TokenType.BAR: "'|'",
    TokenType.NEWLINE: "newline",
}

class Parser:
    """
    items    ::= (words NEWLINE*)*
    words    ::= word+
    word     ::= NUMBER | MONADIC | DYADIC | modified | func | array
    func     ::= '(' NEWLINE* (words NEWLINE*)* ')'
    array    ::= '[' NEWLINE* (words NEWLINE*)* ']'
    modified ::= MODIFIER (pack | word{n})
    pack     ::= '(' lines ('|' lines)+ ')'

    A modifier taking n functions reads the next n words as its operands,
    unless the first is a parenthesised pack, in which case each
    bar-separated section is one operand.

    Errors are collected rather than raised: parse() returns whatever it
    could build along with the errors it met.
    """

    def __init__(self, inputs: Inputs, tokens: list[Token]) -> None:
        self.inputs = inputs
        self.tokens = tokens
        self.curr = 0
        self.errors: list[UfelError] = []

    def next_token_map(self, f: Callable[[Token], Optional[T]]) -> Optional[Sp[T]]:
        if self.curr >= len(self.tokens):
            return None
        token = self.tokens[self.curr]
        res = f(token)
        if res is None:
            return None
        self.curr += 1
        return token.span.sp(res)

    def next_token_exact(self, kind: TokenType) -> Optional[Span]:
        sp = self.next_token_map(lambda t: True if t.kind == kind else None)
        return sp.span if sp is not None else None

    def curr_span(self) -> Span:
        if self.curr < len(self.tokens):
            return self.tokens[self.curr].span
        return self.tokens[-1].span

    def expect(self, kind: TokenType) -> Span:
        span = self.next_token_exact(kind)
        if span is None:
            span = self.curr_span()
            self.errors.append(self.inputs.error(span, f"Expected {NAMES[kind]}", ParseError))
        return span

    def newline(self) -> bool:
        seen = False
        while self.next_token_exact(TokenType.NEWLINE) is not None:
            seen = True
        return seen

    def parse_items(self) -> list[Line]:
        self.newline()
        items = []
        while (words := self.parse_words()) is not None:
            items.append(words)
            self.newline()
        return items

    def parse_words(self) -> Optional[Line]:
        words = []
        while (word := self.parse_word()) is not None:
            words.append(word)
        return words or None

    def parse_lines(self) -> list[Line]:
        self.newline()
        lines = []
        while (line := self.parse_words()) is not None:
            lines.append(line)
            self.newline()
        return lines

    def parse_word(self) -> Optional[Sp[Word]]:
        if (num := self.parse_number()) is not None:
            return num
        prim = self.next_token_map(
            lambda t: Prim(t.tok) if t.kind == TokenType.PRIMITIVE and isinstance(t.tok, (Monadic, Dyadic)) else None)
        if prim is not None:
            return prim
        if (modified := self.parse_modified()) is not None:
            return modified
        if (func := self.parse_func(allow_pack=False)) is not None:
            assert not isinstance(func, list)
            return func
        if (open := self.next_token_exact(TokenType.LBRACKET)) is not None:
            lines = self.parse_lines()
            close = self.expect(TokenType.RBRACKET)
            return open.merge(close).sp(ArrayLit(lines))
        return None

    def parse_number(self) -> Optional[Sp[Word]]:
        def number(t: Token) -> Optional[Number]:
            if t.kind != TokenType.NUMBER:
                return None
            assert isinstance(t.tok, str)
            return Number(float(t.tok.replace('`', '-')))
        return self.next_token_map(number)

    def parse_func(self, allow_pack: bool) -> Optional[Sp[Word]|list[Sp[Word]]]:
        """
        A parenthesised function. With allow_pack, a function containing
        bars is returned as the list of its sections instead.
        """
        open = self.next_token_exact(TokenType.LPAREN)
        if open is None:
            return None
        first = self.parse_lines()
        sections: list[tuple[Span, list[Line]]] = []
        if allow_pack:
            while (bar := self.next_token_exact(TokenType.BAR)) is not None:
                sections.append((bar, self.parse_lines()))
        close = self.expect(TokenType.RPAREN)
        if not sections:
            return open.merge(close).sp(Func(first))

        last_word = [w for line in first for w in line][-1:]
        packed = [open.merge(last_word[0].span if last_word else sections[0][0]).sp(Func(first))]
        for i, (bar, lines) in enumerate(sections):
            end = sections[i+1][0] if i + 1 < len(sections) else close
            packed.append(bar.merge(end).sp(Func(lines)))
        return packed

    def parse_modified(self) -> Optional[Sp[Word]]:
        modifier = self.next_token_map(
            lambda t: t.tok if t.kind == TokenType.PRIMITIVE and isinstance(t.tok, (Modifier, DyModifier)) else None)
        if modifier is None:
            return None
        n = modifier.value.operands
        pack = False
        args: list[Sp[Word]] = []
        func = self.parse_func(allow_pack=True)
        if isinstance(func, list):
            pack = True
            args = func
        else:
            if func is not None:
                args.append(func)
            while len(args) < n and (word := self.parse_word()) is not None:
                args.append(word)
        span = modifier.span
        if args:
            span = span.merge(args[-1].span)
        return span.sp(Modified(modifier, args, pack))

def parse(inputs: Inputs, src: Optional[Path], text: str) -> tuple[list[Line], list[UfelError]]:
    """
    Tokenise and parse text. A lexing error ends parsing straight away.
    """
    try:
        tokens = lex(inputs, src, text)
    except UfelError as e:
        return [], [e]
    parser = Parser(inputs, tokens)
    items = parser.parse_items()
    errors = parser.errors
    if parser.curr < len(tokens):
        tok = tokens[parser.curr]
        errors.append(inputs.error(tok.span, f"Unexpected {describe(tok)}", ParseError))
    return items, errors

def describe(tok: Token) -> str:
    if tok.kind == TokenType.PRIMITIVE:
        return f"'{tok.tok.glyph}'"  # type: ignore
    if tok.kind == TokenType.NUMBER:
        return f"number {tok.tok}"
    return NAMES[tok.kind]
