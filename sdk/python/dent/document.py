"""Owning document handle and borrowed node references.

A ``Document`` owns one parsed tree. Every ``Node`` reached from it is a
borrowed view that is only valid while the document is live: once
``Document.free()`` has run, any use of the document or of a node borrowed
from it raises ``ReleasedHandleError``. Nodes never mutate the tree;
``Node.to_python()`` hands out an independent deep copy.
"""

import copy
import logging
from typing import Any, Iterator, Optional

from .errors import ReleasedHandleError
from .serializer import to_text
from .types import Kind, Value, kind_of, values_equal

logger = logging.getLogger(__name__)


class Document:
    __slots__ = ("_root", "_released", "path")

    def __init__(self, root: Value, path: Optional[str] = None):
        self._root = root
        self._released = False
        self.path = path

    @property
    def released(self) -> bool:
        return self._released

    def _check_live(self) -> None:
        if self._released:
            raise ReleasedHandleError("document has been released")

    @property
    def root(self) -> "Node":
        self._check_live()
        return Node(self, self._root)

    def free(self) -> None:
        """Release the tree. Invalidates every node borrowed from this document."""
        self._check_live()
        self._released = True
        self._root = None
        logger.debug("released document %s", self.path or "<buffer>")

    def to_str(self) -> str:
        self._check_live()
        return to_text(self._root)

    def __enter__(self) -> "Document":
        self._check_live()
        return self

    def __exit__(self, *exc_info) -> None:
        if not self._released:
            self.free()

    def __repr__(self) -> str:
        state = "released" if self._released else kind_of(self._root).value
        return f"<Document {self.path or '<buffer>'} {state}>"


class Node:
    """Borrowed, read-only reference to one value inside a live Document."""

    __slots__ = ("_doc", "_value")

    def __init__(self, doc: Document, value: Value):
        self._doc = doc
        self._value = value

    @property
    def document(self) -> Document:
        return self._doc

    @property
    def value(self) -> Value:
        self._doc._check_live()
        return self._value

    @property
    def kind(self) -> Kind:
        return kind_of(self.value)

    def is_none(self) -> bool:
        return self.kind is Kind.NONE

    def is_str(self) -> bool:
        return self.kind is Kind.STR

    def is_bool(self) -> bool:
        return self.kind is Kind.BOOL

    def is_int(self) -> bool:
        return self.kind is Kind.INT

    def is_float(self) -> bool:
        return self.kind is Kind.FLOAT

    def is_list(self) -> bool:
        return self.kind is Kind.LIST

    def is_dict(self) -> bool:
        return self.kind is Kind.DICT

    # Navigation. get/get_index return None when the step is impossible;
    # __getitem__ raises instead.

    def get(self, key: str) -> Optional["Node"]:
        v = self.value
        if isinstance(v, dict) and key in v:
            return Node(self._doc, v[key])
        return None

    def get_index(self, index: int) -> Optional["Node"]:
        v = self.value
        if isinstance(v, list) and not isinstance(index, bool) and 0 <= index < len(v):
            return Node(self._doc, v[index])
        return None

    def __getitem__(self, item) -> "Node":
        v = self.value
        if isinstance(item, str):
            if not isinstance(v, dict):
                raise TypeError(f"cannot look up key {item!r} in {kind_of(v).value}")
            if item not in v:
                raise KeyError(item)
            return Node(self._doc, v[item])
        if isinstance(item, int) and not isinstance(item, bool):
            if not isinstance(v, list):
                raise TypeError(f"cannot index {kind_of(v).value}")
            if not 0 <= item < len(v):
                raise IndexError(f"index {item} out of range for list of length {len(v)}")
            return Node(self._doc, v[item])
        raise TypeError(f"node indices must be str or int, not {type(item).__name__}")

    def keys(self) -> list[str]:
        v = self.value
        if not isinstance(v, dict):
            raise TypeError(f"{kind_of(v).value} has no keys")
        return list(v)

    def items(self) -> Iterator[tuple[str, "Node"]]:
        v = self.value
        if not isinstance(v, dict):
            raise TypeError(f"{kind_of(v).value} has no items")
        for k, child in v.items():
            yield k, Node(self._doc, child)

    def __iter__(self) -> Iterator:
        """Child nodes of a list, keys of a dict."""
        v = self.value
        if isinstance(v, list):
            for child in v:
                yield Node(self._doc, child)
        elif isinstance(v, dict):
            yield from list(v)
        else:
            raise TypeError(f"{kind_of(v).value} is not iterable")

    def len(self) -> Optional[int]:
        """Children of a list/dict or characters of a string; None otherwise."""
        v = self.value
        if isinstance(v, (list, dict, str)):
            return len(v)
        return None

    def __len__(self) -> int:
        n = self.len()
        if n is None:
            raise TypeError(f"{self.kind.value} has no length")
        return n

    def __bool__(self) -> bool:
        return True

    def is_empty(self) -> Optional[bool]:
        n = self.len()
        return None if n is None else n == 0

    # Strict extraction: exact kind or None, no coercion.

    def as_str(self) -> Optional[str]:
        v = self.value
        return v if kind_of(v) is Kind.STR else None

    def as_bool(self) -> Optional[bool]:
        v = self.value
        return v if kind_of(v) is Kind.BOOL else None

    def as_int(self) -> Optional[int]:
        v = self.value
        return v if kind_of(v) is Kind.INT else None

    def as_float(self) -> Optional[float]:
        v = self.value
        return v if kind_of(v) is Kind.FLOAT else None

    def to_str(self) -> str:
        return to_text(self.value)

    def to_python(self) -> Any:
        return copy.deepcopy(self.value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Node):
            other = other.value
        return values_equal(self.value, other)

    __hash__ = None

    def __repr__(self) -> str:
        if self._doc.released:
            return "<Node released>"
        return f"<Node {self.kind.value} {to_text(self._value)[:60]}>"

