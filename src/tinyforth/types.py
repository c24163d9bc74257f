## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable
from dataclasses import dataclass, field

from .errors import StackUnderflow


class Stack(list):
    """Values are stored bottom (left) to top (right), so the head of the stack is `self[-1]`."""

    def push(self, *values) -> None:
        self.extend(values)

    def take(self, count: int) -> list:
        """Pop `count` values at once and return them bottom-first."""
        if len(self) < count:
            raise StackUnderflow(needed=count, available=len(self))
        if count == 0: return []
        values = self[-count:]
        del self[-count:]
        return values

    def peek(self) -> Any:
        if len(self) == 0:
            raise StackUnderflow(needed=1, available=0)
        return self[-1]

    def __repr__(self):
        return "< " + " ".join(repr(v) for v in self) + " >" if self else "< nil >"


# Source location of a token: filename, line, column.  Never part of node equality.
def _meta():
    return field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class NumberLiteral:
    value: int
    meta: dict | None = _meta()

    def __str__(self): return str(self.value)


@dataclass(frozen=True)
class WordReference:
    name: str
    meta: dict | None = _meta()

    def __str__(self): return self.name


@dataclass(frozen=True)
class Primitive:
    fn: Callable[[Any], None]     # (Context) -> None, mutates the stack in place.
    name: str = field(default='<primitive>', compare=False)
    meta: dict | None = _meta()

    def __str__(self): return self.name


@dataclass(frozen=True)
class Procedure:
    body: tuple                   # tuple[Node, ...], never holds definition markers.
    name: str = field(default='<procedure>', compare=False)
    meta: dict | None = _meta()

    def __str__(self): return self.name


@dataclass(frozen=True)
class DefinitionStart:
    meta: dict | None = _meta()

    def __str__(self): return ':'


@dataclass(frozen=True)
class DefinitionEnd:
    meta: dict | None = _meta()

    def __str__(self): return ';'


Node = NumberLiteral | WordReference | Primitive | Procedure | DefinitionStart | DefinitionEnd

# Nodes a dictionary entry may be bound to.
Binding = Primitive | Procedure
