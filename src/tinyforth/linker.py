## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Iterable, Iterator

from .types import Node, Procedure, WordReference, DefinitionStart, DefinitionEnd
from .errors import MissingDefinitionName, UnterminatedDefinition, NestedDefinition
from .library import Dictionary


def _capture_definition(start: DefinitionStart, cursor: Iterator[Node]) -> Procedure:
    head = next(cursor, None)
    if not isinstance(head, WordReference):
        found = 'end of input' if head is None else f"`{head}`"
        raise MissingDefinitionName(f"Definition must be followed by a word name, found {found}.",
                                    forth_node=head, forth_token=None if head is None else str(head),
                                    forth_meta=(head or start).meta)
    body = []
    for node in cursor:
        if isinstance(node, DefinitionEnd):
            return Procedure(tuple(body), head.name, head.meta)
        if isinstance(node, DefinitionStart):
            raise NestedDefinition(f"Definition of `{head.name}` cannot contain another definition.",
                                   forth_node=node, forth_token=':', forth_meta=node.meta)
        body.append(node)
    raise UnterminatedDefinition(f"Definition of `{head.name}` is missing its closing `;`.",
                                 forth_node=head, forth_token=head.name, forth_meta=head.meta)


def link_program(nodes: Iterable[Node], lib: Dictionary) -> Iterator[Node]:
    """Yield the top-level nodes to evaluate, binding definitions into `lib` as they are reached.

    Bindings happen lazily at the position of the definition, so when the output is consumed by
    the evaluator one item at a time, definitions and top-level words take effect in source order.
    """
    cursor = iter(nodes)
    for node in cursor:
        if isinstance(node, DefinitionStart):
            proc = _capture_definition(node, cursor)
            lib.define(proc.name, proc)
        else:
            yield node


def is_incomplete(nodes: list[Node]) -> bool:
    """True if the last definition opened is still waiting for its `;`."""
    for node in reversed(nodes):
        if isinstance(node, DefinitionEnd): return False
        if isinstance(node, DefinitionStart): return True
    return False
