from .engine import Dent, parse, parse_file, register_function
from .document import Document, Node
from .errors import (
    DentError,
    LexError,
    DentSyntaxError,
    UnknownFunctionError,
    FunctionArityOrTypeError,
    ImportIOError,
    ImportCycleError,
    ReleasedHandleError,
)
from .functions import FunctionRegistry
from .types import Kind, ParseContext, kind_of, values_equal
from .serializer import to_text

__all__ = [
    "Dent", "parse", "parse_file", "register_function",
    "Document", "Node",
    "DentError", "LexError", "DentSyntaxError", "UnknownFunctionError",
    "FunctionArityOrTypeError", "ImportIOError", "ImportCycleError", "ReleasedHandleError",
    "FunctionRegistry", "Kind", "ParseContext", "kind_of", "values_equal", "to_text",
]
