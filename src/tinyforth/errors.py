## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘


class ForthError(Exception):
    def __init__(self, message: str = "", *, forth_node=None, forth_token=None, forth_meta=None):
        """Base class for all errors raised by the interpreter."""
        super().__init__(message)
        self.forth_node: object = forth_node
        self.forth_token: str = forth_token
        self.forth_meta: dict = forth_meta


class ForthParseError(ForthError):
    pass

class MalformedNumber(ForthParseError, ValueError):
    pass

class MissingDefinitionName(ForthParseError):
    pass

class UnterminatedDefinition(ForthParseError):
    pass

class NestedDefinition(ForthParseError):
    pass


class UnknownWord(ForthError, NameError):
    pass

class InvariantViolation(ForthError, RuntimeError):
    pass


class StackUnderflow(ForthError, IndexError):
    def __init__(self, message: str = "", *, needed: int = 1, available: int = 0, **kwargs):
        super().__init__(message or f"Stack underflow: needs {needed} item(s), but {available} available.", **kwargs)
        self.needed = needed
        self.available = available

class TypeMismatch(ForthError, TypeError):
    """A value taken from the stack is not of the type an operation expects."""
    pass


class ExtensionError(ForthError, ImportError):
    def __init__(self, message, *, forth_token=None, filename=None, forth_meta=None):
        super().__init__(message, forth_token=forth_token, forth_meta=forth_meta)
        self.filename = filename
