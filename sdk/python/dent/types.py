import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

if TYPE_CHECKING:
    from .functions import FunctionRegistry

# Value node types: None, bool, int, float, str, list[Value], dict[str, Value]
# Python's native types map directly; dicts keep insertion order.
Value = Union[None, bool, int, float, str, list, dict]

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1


class Kind(enum.Enum):
    NONE = "none"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STR = "str"
    LIST = "list"
    DICT = "dict"


def kind_of(value: Any) -> Kind:
    # bool before int: True is an int to Python but never to dent
    if value is None:
        return Kind.NONE
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, int):
        return Kind.INT
    if isinstance(value, float):
        return Kind.FLOAT
    if isinstance(value, str):
        return Kind.STR
    if isinstance(value, list):
        return Kind.LIST
    if isinstance(value, dict):
        return Kind.DICT
    raise TypeError(f"not a dent value: {type(value).__name__}")


def check_value(value: Any) -> Value:
    """Validate ``value`` as a dent Value and return a freshly built copy.

    Containers are rebuilt so that the result shares no node with the input,
    which keeps the tree strictly hierarchical whatever a callback returns.
    Raises TypeError or ValueError on anything that is not a Value.
    """
    kind = kind_of(value)
    if kind is Kind.INT and not INT_MIN <= value <= INT_MAX:
        raise ValueError(f"integer out of 64-bit range: {value}")
    if kind is Kind.LIST:
        return [check_value(v) for v in value]
    if kind is Kind.DICT:
        out = {}
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError(f"dict keys must be str, got {type(k).__name__}")
            out[k] = check_value(v)
        return out
    return value


# Callback signature for extension functions: (args, ctx) -> Value
Function = Callable[[list, "ParseContext"], Any]


@dataclass
class ParseContext:
    """Per-parse state handed to every extension function.

    ``import_stack`` holds the resolved paths of files currently being
    parsed, outermost first. ``import_cache`` maps resolved paths to trees
    already parsed during this session; entries are only ever handed out as
    copies.
    """

    registry: "FunctionRegistry"
    path: Optional[Path] = None
    base_dir: Path = field(default_factory=Path.cwd)
    import_stack: list[Path] = field(default_factory=list)
    import_cache: dict[Path, Value] = field(default_factory=dict)
    allow_duplicate_keys: bool = False

    def for_file(self, path: Path) -> "ParseContext":
        """Child context for parsing ``path``, sharing stack and cache."""
        return ParseContext(
            registry=self.registry,
            path=path,
            base_dir=path.parent,
            import_stack=self.import_stack,
            import_cache=self.import_cache,
            allow_duplicate_keys=self.allow_duplicate_keys,
        )

    @property
    def source_name(self) -> Optional[str]:
        return str(self.path) if self.path is not None else None


def values_equal(a: Any, b: Any) -> bool:
    """Structural equality that keeps bool, int and float apart and respects dict order."""
    try:
        ka, kb = kind_of(a), kind_of(b)
    except TypeError:
        return False
    if ka is not kb:
        return False
    if ka is Kind.LIST:
        return len(a) == len(b) and all(values_equal(x, y) for x, y in zip(a, b))
    if ka is Kind.DICT:
        return list(a) == list(b) and all(values_equal(a[k], b[k]) for k in a)
    return a == b
