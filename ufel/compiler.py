"""
compiler.py

Turn the surface tree from the parser into an instruction tree.

Each top-level line compiles to a Run of its words and is appended to the
root of the Assembly. A line that fails to compile contributes one error
and compilation carries on with the next, so that independent mistakes are
all reported at once. If anything failed, the whole load fails, nothing
is run and the assembly is left as it was.
"""
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Optional

from ufel.arr import S
from ufel.errors import CompileError, UfelError
from ufel.node import Arr, Dy, DyMod, Mod, Mon, Node, Push, Run, SigNode, sequence, sig
from ufel.parser import ArrayLit, Func, Line, Modified, Number, Prim, Word, parse
from ufel.tokeniser import Inputs, Sp, Span
from ufel.voc import Dyadic, DyModifier, Modifier, Monadic

logger = logging.getLogger(__name__)

@dataclass
class Assembly:
    root: Node = field(default_factory=Run)
    spans: list[Span] = field(default_factory=list)
    inputs: Inputs = field(default_factory=Inputs)

class Compiler:
    def __init__(self, asm: Optional[Assembly] = None) -> None:
        self.asm = asm if asm is not None else Assembly()
        self.errors: list[UfelError] = []

    def load(self, src: Optional[Path], text: str) -> Assembly:
        """
        Parse and compile text, appending to the assembly. Raises the
        aggregated error if parsing or compilation failed.
        """
        items, errors = parse(self.asm.inputs, src, text)
        if (error := UfelError.from_iter(errors)) is not None:
            raise error

        root = self.asm.root
        for item in items:
            try:
                root = sequence([root, self.line(item)])
            except UfelError as e:
                self.errors.append(e)

        errors, self.errors = self.errors, []
        if (error := UfelError.from_iter(errors)) is not None:
            raise error
        self.asm.root = root
        logger.debug("compiled %d line(s) to %s", len(items), self.asm.root)
        return self.asm

    def load_str(self, text: str) -> Assembly:
        return self.load(None, text)

    def line(self, words: Line) -> Node:
        return sequence([self.word(w) for w in words])

    def lines(self, lines: list[Line]) -> Node:
        return sequence([self.line(line) for line in lines])

    def word(self, word: Sp[Word]) -> Node:
        match word.value:
            case Number(n):
                return Push(S(n))
            case Prim(Monadic() as prim):
                return Mon(prim, self.add_span(word.span))
            case Prim(Dyadic() as prim):
                return Dy(prim, self.add_span(word.span))
            case Func(lines):
                return self.lines(lines)
            case ArrayLit(lines):
                inner = self.lines(lines)
                return Arr(sig(inner).outputs, inner, self.add_span(word.span))
            case Modified():
                return self.modified(word.value, word.span)
        raise AssertionError(f"unknown word {word.value!r}")

    def modified(self, modified: Modified, span: Span) -> Node:
        prim = modified.modifier.value
        given = len(modified.args)
        if given != prim.operands:
            self.add_error(span, f"{prim.title} takes {prim.operands} operand(s) but {given} were supplied")
        operands = [SigNode.of(self.word(w)) for w in modified.args[:prim.operands]]
        while len(operands) < prim.operands:
            operands.append(SigNode.of(Run()))
        at = self.add_span(modified.modifier.span)
        if isinstance(prim, Modifier):
            return Mod(prim, operands[0], at)
        assert isinstance(prim, DyModifier)
        return DyMod(prim, operands[0], operands[1], at)

    def add_span(self, span: Span) -> int:
        self.asm.spans.append(span)
        return len(self.asm.spans) - 1

    def add_error(self, span: Span, message: str) -> None:
        self.errors.append(self.asm.inputs.error(span, message, CompileError))
