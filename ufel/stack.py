from typing import Optional, Sequence

from ufel.arr import Array

class Stack:
    """
    The value stack. The top is the end of the list.
    """
    def __init__(self) -> None:
        self.stack: list[Array] = []

    def pop(self, n: int = 1) -> list[Array]:
        """
        Remove the top n values, returned bottom-first
        """
        assert n <= len(self.stack)
        v = self.stack[len(self.stack)-n:]
        del self.stack[len(self.stack)-n:]
        return v

    def pop_one(self) -> Optional[Array]:
        return self.stack.pop() if self.stack else None

    def push(self, vals: Sequence[Array]) -> None:
        self.stack.extend(vals)

    def copy_n(self, n: int) -> list[Array]:
        """
        Clones of the top n values, bottom-first
        """
        return [a.clone() for a in self.stack[len(self.stack)-n:]]

    def insert(self, depth: int, val: Array) -> None:
        """
        Put val below the top `depth` values
        """
        self.stack.insert(len(self.stack)-depth, val)

    def take(self) -> list[Array]:
        vals, self.stack = self.stack, []
        return vals

    def __len__(self) -> int:
        return len(self.stack)
