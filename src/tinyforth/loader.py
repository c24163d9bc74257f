## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os
import inspect
from pathlib import Path
from types import UnionType
from typing import Any, TypeVar, Callable, get_origin, get_args

from .errors import ExtensionError


_EXT_MODULES: dict[str, object] = {}


def _resolve_forth_paths() -> list[Path]:
    parts = [p for p in os.environ.get("FORTH_PATH", "").split(os.pathsep) if p]
    return [Path(os.path.expanduser(os.path.expandvars(p))) for p in parts]

def get_python_name(forth_name: str) -> str:
    """Map a word name to its Python function name."""
    return 'op_'+forth_name.replace('-', '_').replace('!', '_b').replace('?', '_q')


def get_forth_name(py_name: str) -> str:
    """Inverse of `get_python_name` for well-formed operator names."""
    if not py_name.startswith("op_"):
        raise ExtensionError(f"Operator function `{py_name}` requires prefix `op_` by convention.", forth_token=py_name)
    return py_name[3:].replace('_b', '!').replace('_q', '?').replace('_', '-')


def load_extension_module(ns: str, meta: dict | None = None):
    """Import `<ns>.py` from the first `FORTH_PATH` entry that has it, or return None if none does."""
    if ns in _EXT_MODULES: return _EXT_MODULES[ns]

    import importlib.util as importer
    for path in (p / f'{ns}.py' for p in _resolve_forth_paths()):
        if not path.is_file(): continue
        spec = importer.spec_from_file_location(f"tinyforth.ext.{ns}", path)
        if spec is None or spec.loader is None: continue
        module = importer.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            raise ExtensionError(str(e), filename=str(path), forth_token=ns, forth_meta=meta) from e
        _EXT_MODULES[ns] = module
        return module
    return None


def iter_module_operators(ns: str, *, meta: dict | None = None):
    """Yield `(forth_name, py_function)` pairs for all operators in a module for bulk loading."""
    if (py_module := load_extension_module(ns, meta=meta)) is None:
        return
    if not isinstance(getattr(py_module, '__operators__', None), list):
        raise ExtensionError(f"Module `{ns}` is missing operator registry `__operators__`.", forth_token=ns, forth_meta=meta)
    for w in py_module.__operators__:
        if not (py_name := getattr(w, '__name__', '')): continue
        yield get_forth_name(py_name), w


def _normalize_expected_type(tp):
    if tp is inspect.Parameter.empty or tp is Any: return Any
    if isinstance(tp, TypeVar):
        return _normalize_expected_type(tp.__bound__) if tp.__bound__ else Any
    if isinstance(tp, (type, tuple, UnionType)): return tp
    if (origin := get_origin(tp)) is not None and isinstance(origin, type): return origin
    return Any


def get_stack_effects(*, fn: Callable, name: str = None) -> dict:
    """Read the Python signature of an operator to determine its stack effects.

    Arity is the number of positional parameters, popped from the stack bottom-first so the
    last parameter receives the top of the stack.  Valency is 0 for a `None` return, the
    length of a `tuple[...]` return, and 1 otherwise.
    """
    sig = inspect.signature(fn)
    params = [p for p in sig.parameters.values()
              if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)]

    ret_ann = sig.return_annotation
    returns_none = (ret_ann is type(None) or ret_ann is None)
    returns_tuple = (get_origin(ret_ann) is tuple)

    if returns_none:
        outputs: list = []
    else:
        outputs = [_normalize_expected_type(t) for t in (get_args(ret_ann) if returns_tuple else (ret_ann,))]

    return {
        'name': name or getattr(fn, '__name__', '<unnamed>'),
        'arity': len(params),
        'valency': 0 if returns_none else (len(outputs) if returns_tuple else 1),
        'inputs': [_normalize_expected_type(p.annotation) for p in params],
        'outputs': outputs,
    }
