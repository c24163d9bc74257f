## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable, TextIO

from .types import Node, Stack, Binding
from .parser import parse
from .linker import link_program
from .library import Dictionary
from .context import Context
from .builtins import load_builtins_library
from .interpreter import evaluate, evaluate_program
from .loader import iter_module_operators


SAMPLE_PROGRAM = ": square dup * ; 2 square ."


class Runtime:
    """Embedding facade around one explicitly owned execution context."""

    def __init__(self, dictionary: Dictionary | None = None, output: TextIO | None = None, extensions: bool = False):
        self.context = Context(stack=Stack(), dictionary=dictionary or load_builtins_library(), output=output)
        # Dotted words `ns.word` may load `ns.py` from FORTH_PATH; off unless asked for.
        if extensions:
            self.context.dictionary.py_module_loader = self._py_loader

    @property
    def dictionary(self) -> Dictionary:
        return self.context.dictionary

    @property
    def stack(self) -> Stack:
        return self.context.stack

    def _py_loader(self, lib: Dictionary, ns: str, op: str, meta: dict | None) -> None:
        for forth_name, py_fn in iter_module_operators(ns, meta=meta):
            lib.add_function(f"{ns}.{forth_name}", py_fn)
        lib.mark_module_loaded(ns)

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run(self, source: str, filename: str | None = None, verbosity: int = 0, stats: dict | None = None) -> Stack:
        # Classification is eager, so a malformed number aborts before anything is evaluated.
        nodes = parse(source, filename=filename)
        return evaluate_program(link_program(nodes, self.dictionary), self.context, verbosity=verbosity, stats=stats)

    def apply(self, node_or_name: Node | str) -> Stack:
        node = self.lookup(node_or_name) if isinstance(node_or_name, str) else node_or_name
        evaluate(node, self.context)
        return self.stack

    # Registration ────────────────────────────────────────────────────────────────────────────
    def register_operation(self, name: str, func: Callable[..., Any]) -> None:
        self.dictionary.add_function(name, func)

    def register_primitive(self, name: str, func: Callable[[Context], None]) -> None:
        self.dictionary.add_primitive(name, func)

    # Introspection ───────────────────────────────────────────────────────────────────────────
    def lookup(self, name: str) -> Binding:
        return self.dictionary.lookup(name)

    def list_words(self) -> list[str]:
        return sorted(self.dictionary.words.keys())

    def to_stack(self, values: list) -> Stack:
        return Stack(values)

    def from_stack(self, stack: Stack) -> list:
        return list(stack)
