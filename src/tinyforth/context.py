## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import TextIO
from dataclasses import dataclass, field

from .types import Stack
from .library import Dictionary


@dataclass
class Context:
    """State shared by every evaluation step of one session; primitives receive it whole."""
    stack: Stack = field(default_factory=Stack)
    dictionary: Dictionary = field(default_factory=Dictionary)
    output: TextIO | None = None          # Where `.` writes; standard output if unset.
