## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Iterable

from .types import Node, NumberLiteral, WordReference, Primitive, Procedure, DefinitionStart, DefinitionEnd
from .errors import ForthError, InvariantViolation
from .context import Context
from .formatting import show_node_and_stack, show_stack


class _Session:
    """Per-call tracing options; the evaluator itself keeps no state outside the context."""
    __slots__ = ('verbosity', 'steps', 'depth')

    def __init__(self, verbosity=0):
        self.verbosity = verbosity
        self.steps = 0
        self.depth = 0


def _trace(session: _Session | None, node: Node, ctx: Context):
    if session is None: return
    session.steps += 1
    if session.verbosity == 2 or (session.verbosity == 1 and isinstance(node, Procedure)):
        print(f"\033[90m{session.steps:>3} :\033[0m  ", end='')
        show_node_and_stack(node, ctx.stack, depth=session.depth)


def evaluate(node: Node, ctx: Context, session: _Session | None = None) -> None:
    _trace(session, node, ctx)

    match node:
        case NumberLiteral(value=value):
            ctx.stack.push(value)
        case WordReference(name=name):
            # Resolved against the live dictionary every time, so later redefinitions apply.
            binding = ctx.dictionary.lookup(name, meta=node.meta)
            try:
                evaluate(binding, ctx, session)
            except ForthError as exc:
                if exc.forth_token is None: exc.forth_node, exc.forth_token = node, name
                if exc.forth_meta is None: exc.forth_meta = node.meta
                raise
        case Primitive(fn=fn):
            fn(ctx)
        case Procedure(body=body):
            if session is not None: session.depth += 1
            try:
                for n in body:
                    evaluate(n, ctx, session)
            finally:
                if session is not None: session.depth -= 1
        case DefinitionStart() | DefinitionEnd():
            raise InvariantViolation(f"Definition marker `{node}` reached the evaluator outside of a definition.",
                                     forth_node=node, forth_token=str(node), forth_meta=node.meta)
        case _:
            raise InvariantViolation(f"Cannot evaluate `{node!r}`.", forth_node=node)


def evaluate_program(program: Iterable[Node], ctx: Context, verbosity=0, stats=None):
    session = _Session(verbosity) if (verbosity or stats is not None) else None

    for node in program:
        try:
            evaluate(node, ctx, session)
        except ForthError as exc:
            if exc.forth_node is None: exc.forth_node = node
            if exc.forth_token is None: exc.forth_token = str(node)
            if exc.forth_meta is None: exc.forth_meta = node.meta
            raise

    if verbosity > 0:
        print(f"\033[90m{session.steps:>3} :\033[0m  ", end='')
        show_stack(ctx.stack)
    if stats is not None:
        stats['steps'] = stats.get('steps', 0) + session.steps

    return ctx.stack
