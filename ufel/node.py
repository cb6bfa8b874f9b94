"""
node.py

The instruction tree the compiler produces and the runtime walks.

    Run(nodes)                a sequence, executed in order
    Push(val)                 push a literal array
    Arr(count, inner, span)   run inner, then gather the top `count` values
                              into one array
    Mon(prim, span)           monadic primitive
    Dy(prim, span)            dyadic primitive
    Mod(prim, f, span)        monadic modifier applied to a function
    DyMod(prim, f, g, span)   dyadic modifier applied to two functions

Spans are indices into the span table of the Assembly; they take no part in
equality or hashing. Nodes are frozen, so sharing a subtree is free.

Every node has a Signature: how many values it takes from the stack and how
many it leaves. It is worked out statically by sig(), by simulating stack
height, and the runtime must move exactly that many values.
"""
from dataclasses import dataclass, field
from typing import Iterable, Optional, TypeAlias, Union

from ufel.arr import Array
from ufel.voc import Dyadic, DyModifier, Modifier, Monadic

@dataclass(frozen=True)
class Signature:
    args: int
    outputs: int

    def __repr__(self) -> str:
        return f"|{self.args}.{self.outputs}"

    def __str__(self) -> str:
        if self.outputs == 1:
            return f"|{self.args}"
        return repr(self)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, tuple):
            return (self.args, self.outputs) == other
        if not isinstance(other, Signature):
            return NotImplemented
        return (self.args, self.outputs) == (other.args, other.outputs)

    def __hash__(self) -> int:
        return hash((self.args, self.outputs))

@dataclass(frozen=True)
class Run:
    nodes: tuple['Node', ...] = ()

    def __str__(self) -> str:
        return '(' + ', '.join(map(str, self.nodes)) + ')'

@dataclass(frozen=True)
class Push:
    val: Array

    def __str__(self) -> str:
        return f"push {self.val}"

@dataclass(frozen=True)
class Arr:
    count: int
    inner: 'Node'
    span: int = field(default=0, compare=False)

    def __str__(self) -> str:
        return f"[{self.inner}]"

@dataclass(frozen=True)
class Mon:
    prim: Monadic
    span: int = field(default=0, compare=False)

    def __str__(self) -> str:
        return str(self.prim)

@dataclass(frozen=True)
class Dy:
    prim: Dyadic
    span: int = field(default=0, compare=False)

    def __str__(self) -> str:
        return str(self.prim)

@dataclass(frozen=True)
class Mod:
    prim: Modifier
    f: 'SigNode'
    span: int = field(default=0, compare=False)

    def __str__(self) -> str:
        return f"{self.prim}({self.f.node})"

@dataclass(frozen=True)
class DyMod:
    prim: DyModifier
    f: 'SigNode'
    g: 'SigNode'
    span: int = field(default=0, compare=False)

    def __str__(self) -> str:
        return f"{self.prim}({self.f.node}, {self.g.node})"

Node: TypeAlias = Union[Run, Push, Arr, Mon, Dy, Mod, DyMod]

@dataclass(frozen=True)
class SigNode:
    node: Node
    sig: Signature

    @classmethod
    def of(cls, node: Node) -> 'SigNode':
        return cls(node, sig(node))

def sequence(nodes: Iterable[Node]) -> Node:
    """
    Join nodes into one, splicing nested runs and unwrapping a lone node.

    >>> from ufel.arr import S
    >>> sequence([Run((Push(S(1)),)), Run(())])
    Push(val=Array([], [1.0]))
    """
    flat: list[Node] = []
    for node in nodes:
        if isinstance(node, Run):
            flat.extend(node.nodes)
        else:
            flat.append(node)
    if len(flat) == 1:
        return flat[0]
    return Run(tuple(flat))

class _Checker:
    def __init__(self) -> None:
        self.height = 0
        self.min_height = 0

    def handle(self, args: int, outputs: int) -> None:
        self.height -= args
        self.min_height = min(self.min_height, self.height)
        self.height += outputs

    def sig(self) -> Signature:
        return Signature(-self.min_height, self.height - self.min_height)

    def node(self, node: Node) -> None:
        match node:
            case Run(nodes):
                for n in nodes:
                    self.node(n)
            case Push():
                self.handle(0, 1)
            case Arr(count, inner):
                self.node(inner)
                self.handle(count, 1)
            case Mon():
                self.handle(1, 1)
            case Dy():
                self.handle(2, 1)
            case Mod(prim, f):
                self.modifier(prim, f.sig)
            case DyMod(DyModifier.FORK, f, g):
                self.handle(max(f.sig.args, g.sig.args), f.sig.outputs + g.sig.outputs)
            case DyMod(DyModifier.BRACKET, f, g):
                self.handle(f.sig.args + g.sig.args, f.sig.outputs + g.sig.outputs)

    def modifier(self, prim: Modifier, f: Signature) -> None:
        match prim:
            case Modifier.DIP:
                self.handle(f.args + 1, f.outputs + 1)
            case Modifier.TURN:
                self.handle(f.args, f.outputs)
            case Modifier.REDUCE | Modifier.SCAN:
                self.handle(1, 1)
            case Modifier.SELF:
                self.handle(1, 2)
                self.handle(f.args, f.outputs)
            case Modifier.FLIP:
                self.handle(2, 2)
                self.handle(f.args, f.outputs)
            case Modifier.ON | Modifier.BY:
                self.handle(max(f.args, 1), f.outputs + 1)
            case Modifier.BOTH:
                self.handle(f.args * 2, f.outputs * 2)

def sig(node: Node) -> Signature:
    """
    The stack effect of a node.

    >>> from ufel.arr import S
    >>> sig(Run((Push(S(1)), Dy(Dyadic.ADD))))
    |1.1
    """
    checker = _Checker()
    checker.node(node)
    return checker.sig()

def as_flipped_dy(node: Node) -> Optional[tuple[Dyadic, bool]]:
    """
    If node is a dyadic primitive, possibly under flip, the primitive and
    whether it is flipped.
    """
    match node:
        case Dy(prim):
            return prim, False
        case Mod(Modifier.FLIP, SigNode(Dy(prim))):
            return prim, True
    return None
