## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from . import operators
from .loader import get_forth_name
from .library import Dictionary


# Symbol spellings get their own dictionary entries, so redefining one leaves the other intact.
SYMBOLS = {'+': operators.op_add, '-': operators.op_sub, '*': operators.op_mul}


def load_builtins_library() -> Dictionary:
    lib = Dictionary()

    # Functions with typed stack effects, wrapped via Dictionary helper.
    for k in dir(operators):
        if not k.startswith('op_'): continue
        lib.add_function(get_forth_name(k), getattr(operators, k))
    for name, fn in SYMBOLS.items():
        lib.add_function(name, fn)

    # Primitives with direct access to the context.
    lib.add_primitive('.', operators.prim_dot)
    return lib
