"""
runtime.py

The Ufel stack machine.

    >>> rt = Ufel()
    >>> rt.run_str('5 3 -')
    >>> print(rt.take_stack()[0])
    2

State is the value stack, the trace of spans of the nodes currently
executing (for locating errors), and the current orientation. The stack
survives between runs, and is left as it was when a run fails.

Argument order: a dyadic primitive pops its top argument first, and passes
it first to the scalar function. `5 3 -` is sub(3, 5) = 5 - 3.
"""
from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Iterator, Optional

import ufel.funs as funs
import ufel.ops as ops
from ufel.arr import Array
from ufel.compiler import Assembly, Compiler
from ufel.errors import ArrayError, RunError
from ufel.form import Ori
from ufel.node import Arr, Dy, DyMod, Mod, Mon, Node, Push, Run, SigNode, as_flipped_dy
from ufel.stack import Stack
from ufel.voc import Dyadic, DyModifier, Modifier, Monadic, Voc, mpervade, pervade

logger = logging.getLogger(__name__)

class Ufel:
    def __init__(self) -> None:
        self.asm = Assembly()
        self.stack = Stack()
        self.trace: list[int] = []
        self.ori = Ori.HORI

    def run(self, src: Optional[Path], text: str) -> None:
        """
        Compile and execute text. Compile errors are raised before anything
        runs.
        """
        self.asm = Compiler().load(src, text)
        logger.debug("running %s", self.asm.root)
        self.exec(self.asm.root)
        logger.debug("finished with %d value(s) on the stack", len(self.stack))

    def run_str(self, text: str) -> None:
        self.run(None, text)

    def run_file(self, path: Path) -> None:
        self.run(path, path.read_text(encoding='utf-8'))

    def exec(self, node: Node) -> None:
        match node:
            case Run(nodes):
                for n in nodes:
                    self.exec(n)
            case Push(val):
                self.push(val.clone())
            case Arr(count, inner, span):
                with self._traced(span):
                    self.exec(inner)
                    rows = self.take(count)
                    self.push(Array.from_row_arrays(rows, self.ori))
            case Mon(prim, span):
                with self._traced(span):
                    self.monadic(prim)
            case Dy(prim, span):
                with self._traced(span):
                    self.dyadic(prim)
            case Mod(prim, f, span):
                with self._traced(span):
                    self.modifier(prim, f)
            case DyMod(prim, f, g, span):
                with self._traced(span):
                    self.dy_modifier(prim, f, g)

    @contextmanager
    def _traced(self, span: int) -> Iterator[None]:
        """
        Attribute errors raised by the array code to the node at span
        """
        self.trace.append(span)
        try:
            yield
        except ArrayError as e:
            logger.debug("array error at span %d: %s", span, e)
            raise self.error(str(e)) from e
        finally:
            self.trace.pop()

    def error(self, message: str) -> RunError:
        if not self.trace:
            return RunError(message)
        span = self.asm.spans[self.trace[-1]]
        err = self.asm.inputs.error(span, message, RunError)
        assert isinstance(err, RunError)
        return err

    def monadic(self, prim: Monadic) -> None:
        a = self.pop(1)
        match prim:
            case Monadic.IDENTITY:
                res = a
            case Monadic.NEG | Monadic.NOT | Monadic.ABS | Monadic.SIGN:
                res = mpervade(a, Voc.monadic[prim])
            case Monadic.LEN:
                res = funs.length(a, self.ori)
            case Monadic.SHAPE:
                res = funs.shape(a, self.ori)
            case Monadic.FORM:
                res = funs.form_of(a)
            case Monadic.FIRST:
                res = funs.first(a, self.ori)
            case Monadic.TRANSPOSE:
                res = funs.transpose(a, self.ori)
            case Monadic.SWAP:
                res = funs.swap(a)
            case Monadic.RANGE:
                res = funs.range_(a)
            case Monadic.DEFORM:
                res = funs.deform(a, self.ori)
        self.push(res)

    def dyadic(self, prim: Dyadic) -> None:
        a = self.pop(1)
        b = self.pop(2)
        if prim == Dyadic.CHUNK:
            res = funs.chunk(b, a, self.ori)
        else:
            res = pervade(a, b, Voc.dyadic[prim])
        self.push(res)

    def modifier(self, prim: Modifier, f: SigNode) -> None:
        match prim:
            case Modifier.DIP:
                a = self.pop(1)
                self.exec(f.node)
                self.push(a)
            case Modifier.TURN:
                ori = self.ori
                self.ori = ~ori
                try:
                    self.exec(f.node)
                finally:
                    self.ori = ori
            case Modifier.SELF:
                a = self.pop(1)
                self.push(a.clone())
                self.push(a)
                self.exec(f.node)
            case Modifier.FLIP:
                a = self.pop(1)
                b = self.pop(2)
                self.push(a)
                self.push(b)
                self.exec(f.node)
            case Modifier.ON:
                a = self.pop(1)
                if f.sig.args > 0:
                    self.push(a.clone())
                self.exec(f.node)
                self.push(a)
            case Modifier.BY:
                if f.sig.args == 0:
                    self.require_height(1)
                else:
                    self.require_height(f.sig.args)
                    self.stack.insert(f.sig.args, self.stack.stack[-f.sig.args].clone())
                self.exec(f.node)
            case Modifier.BOTH:
                top = self.take(f.sig.args)
                self.exec(f.node)
                self.stack.push(top)
                self.exec(f.node)
            case Modifier.REDUCE | Modifier.SCAN:
                self.fold(prim, f)

    def fold(self, prim: Modifier, f: SigNode) -> None:
        if f.sig != (2, 1):
            raise self.error(f"{prim.title} requires a function with signature |2.1, "
                             f"but its signature is {f.sig!r}")
        a = self.pop(1)
        flipped_dy = as_flipped_dy(f.node)
        if flipped_dy is None:
            raise self.error("Function cannot be reduced")
        (dy, flipped) = flipped_dy
        if prim == Modifier.REDUCE:
            self.push(ops.reduce(a, dy, flipped, self.ori))
        else:
            self.push(ops.scan(a, dy, flipped, self.ori))

    def dy_modifier(self, prim: DyModifier, f: SigNode, g: SigNode) -> None:
        match prim:
            case DyModifier.FORK:
                self.require_height(g.sig.args)
                copies = self.stack.copy_n(g.sig.args)
                self.exec(f.node)
                self.stack.push(copies)
                self.exec(g.node)
            case DyModifier.BRACKET:
                top = self.take(g.sig.args)
                self.exec(f.node)
                self.stack.push(top)
                self.exec(g.node)

    def push(self, val: Array) -> None:
        self.stack.push([val])

    def pop(self, n: int) -> Array:
        """
        Pop the top value; n is which argument it is, for the error message
        """
        val = self.stack.pop_one()
        if val is None:
            raise self.error(f"Stack was empty when getting argument {n}")
        return val

    def take(self, n: int) -> list[Array]:
        """
        Pop the top n values, bottom-first
        """
        self.require_height(n)
        return self.stack.pop(n)

    def require_height(self, n: int) -> None:
        if len(self.stack) < n:
            raise self.error(f"Stack was empty when getting argument {n - len(self.stack)}")

    def take_stack(self) -> list[Array]:
        return self.stack.take()
