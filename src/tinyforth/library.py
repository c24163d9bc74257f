## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable
from dataclasses import dataclass, field

from .types import Binding, Primitive, Procedure
from .errors import UnknownWord, TypeMismatch, InvariantViolation
from .loader import get_stack_effects


def is_module_name(x):
    return x[0].isalpha() and all(ch.isalpha() or ch.isdigit() for ch in x[1:])


@dataclass
class Dictionary:
    words: dict[str, Binding] = field(default_factory=dict)
    py_module_loader: Callable | None = None
    loaded_modules: set[str] = field(default_factory=set)

    def __contains__(self, name: str) -> bool:
        return name in self.words

    # Registration helpers
    def define(self, name: str, node: Binding) -> None:
        """Bind `name` for all future lookups, replacing any previous binding."""
        if not isinstance(node, (Primitive, Procedure)):
            raise InvariantViolation(f"Word `{name}` can only be bound to a primitive or a procedure, got `{node!r}`.",
                                     forth_node=node, forth_token=name)
        self.words[name] = node

    def add_primitive(self, name: str, fn: Callable[[Any], None]) -> None:
        self.define(name, Primitive(fn, name))

    def add_function(self, name: str, fn: Callable[..., Any]) -> None:
        self.define(name, Primitive(_make_wrapper(fn, name), name))

    def _maybe_load_py_module(self, name: str, meta: dict | None) -> None:
        if '.' not in name or self.py_module_loader is None:
            return
        ns, op = name.split('.', 1)
        if ns and is_module_name(ns) and ns not in self.loaded_modules:
            # Load and register all operators from the Python module at once.
            self.py_module_loader(self, ns, op, meta)

    def lookup(self, name: str, *, meta: dict | None = None) -> Binding:
        if name not in self.words:
            self._maybe_load_py_module(name, meta)
        if (node := self.words.get(name)) is not None:
            return node
        raise UnknownWord(f"Word `{name}` not found in dictionary.", forth_token=name, forth_meta=meta)

    def mark_module_loaded(self, ns: str):
        self.loaded_modules.add(ns)


def _make_wrapper(fn: Callable[..., Any], name: str) -> Callable[[Any], None]:
    meta = get_stack_effects(fn=fn, name=name)
    arity, inputs = meta['arity'], meta['inputs']

    match meta['valency']:
        case 0:
            def push(stack, _): pass
        case 1:
            def push(stack, res): stack.push(res)
        case _:
            def push(stack, res): stack.push(*res)

    def w_x(ctx):
        args = ctx.stack.take(arity)
        for i, (actual, expected) in enumerate(zip(args, inputs)):
            if expected is Any or isinstance(actual, expected): continue
            ctx.stack.push(*args)
            type_name = getattr(expected, '__name__', str(expected))
            raise TypeMismatch(f"`{name}` expects {type_name} at position {arity-i} from top, got {type(actual).__name__}.")
        push(ctx.stack, fn(*args))

    w_x.__forth_meta__ = meta
    return w_x
