## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, TypeVar

from .formatting import format_item


## ARITHMETIC
def op_add(b: int, a: int) -> int: return b + a
def op_sub(b: int, a: int) -> int: return b - a
def op_mul(b: int, a: int) -> int: return b * a
# STACK OPERATIONS
X, Y = (TypeVar(v, bound=Any) for v in ('X', 'Y'))
def op_dup(x: X) -> tuple[X, X]: return (x, x)
def op_swap(b: Y, a: X) -> tuple[X, Y]: return (a, b)
def op_over(b: Y, a: X) -> tuple[Y, X, Y]: return (b, a, b)
def op_drop(_: Any) -> None: return None


# INPUT/OUTPUT; takes the whole context as the value stays on the stack.
def prim_dot(ctx) -> None:
    print(format_item(ctx.stack.peek()), file=ctx.output)
