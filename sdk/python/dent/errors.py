"""Error taxonomy for dent parsing and tree access."""

from typing import Optional


class DentError(Exception):
    """Base class for every error raised by the dent engine.

    Carries the source position when one is known so callers can report
    ``path:line:column: message`` without re-parsing.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = path
        self.line = line
        self.column = column

    def __str__(self) -> str:
        where = self.path or "<buffer>"
        if self.line is not None:
            return f"{where}:{self.line}:{self.column}: {self.message}"
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class LexError(DentError):
    pass


class DentSyntaxError(DentError, SyntaxError):
    pass


class UnknownFunctionError(DentError):
    def __init__(self, name: str, **where):
        super().__init__(f"unknown function: @{name}", **where)
        self.name = name


class FunctionArityOrTypeError(DentError):
    pass


class ImportIOError(DentError):
    pass


class ImportCycleError(DentError):
    def __init__(self, chain: list[str], **where):
        super().__init__("import cycle: " + " -> ".join(chain), **where)
        self.chain = chain


class ReleasedHandleError(DentError):
    """A document or a node borrowed from it was used after release."""
