## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Stack, NumberLiteral, WordReference, Primitive, Procedure, DefinitionStart, DefinitionEnd
from .errors import *
from .runtime import Runtime, SAMPLE_PROGRAM


def evaluate(source: str, stack: list | None = None, **kwargs) -> list:
    """Run `source` in a fresh runtime, optionally starting from `stack`, and return the final stack."""
    rt = Runtime(**kwargs)
    rt.stack.push(*(stack or []))
    return rt.from_stack(rt.run(source))
