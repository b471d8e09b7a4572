"""Flat accessor surface for hosts that want one function per operation.

Every function here mirrors a boundary operation: ``parse``/``parse_file``
hand back an owning ``Document`` or ``None``, navigation hands back borrowed
``Node`` values, and lookups that cannot succeed return an ``AccessError``
member instead of raising (test with ``isinstance(result, AccessError)``).
Using a node after ``free`` of its document raises ``ReleasedHandleError``;
that is a contract violation, not an access error.
"""

import enum
import logging
import threading
from typing import Optional, Union

from . import engine
from .document import Document, Node
from .errors import DentError
from .types import Kind

logger = logging.getLogger(__name__)

_state = threading.local()


class AccessError(enum.Enum):
    TYPE_MISMATCH = "type mismatch"
    NOT_FOUND = "not found"
    OUT_OF_RANGE = "out of range"


def last_error() -> Optional[DentError]:
    """The error behind the most recent failed parse on this thread."""
    return getattr(_state, "error", None)


def parse(buffer, **kwargs) -> Optional[Document]:
    try:
        doc = engine.parse(buffer, **kwargs)
    except DentError as exc:
        logger.debug("parse failed: %s", exc)
        _state.error = exc
        return None
    _state.error = None
    return doc


def parse_file(path, **kwargs) -> Optional[Document]:
    try:
        doc = engine.parse_file(path, **kwargs)
    except DentError as exc:
        logger.debug("parse_file failed: %s", exc)
        _state.error = exc
        return None
    _state.error = None
    return doc


def free(doc: Document) -> None:
    doc.free()


def get(node: Node, key: str) -> Union[Node, AccessError]:
    if not node.is_dict():
        return AccessError.TYPE_MISMATCH
    child = node.get(key)
    return AccessError.NOT_FOUND if child is None else child


def get_index(node: Node, index: int) -> Union[Node, AccessError]:
    if not node.is_list() or isinstance(index, bool):
        return AccessError.TYPE_MISMATCH
    child = node.get_index(index)
    return AccessError.OUT_OF_RANGE if child is None else child


def is_none(node: Node) -> bool:
    return node.kind is Kind.NONE


def is_str(node: Node) -> bool:
    return node.kind is Kind.STR


def is_bool(node: Node) -> bool:
    return node.kind is Kind.BOOL


def is_int(node: Node) -> bool:
    return node.kind is Kind.INT


def is_float(node: Node) -> bool:
    return node.kind is Kind.FLOAT


def is_list(node: Node) -> bool:
    return node.kind is Kind.LIST


def is_dict(node: Node) -> bool:
    return node.kind is Kind.DICT


def length(node: Node) -> Union[int, AccessError]:
    n = node.len()
    return AccessError.TYPE_MISMATCH if n is None else n


def is_empty(node: Node) -> Union[bool, AccessError]:
    n = node.len()
    return AccessError.TYPE_MISMATCH if n is None else n == 0


def as_str(node: Node) -> Union[str, AccessError]:
    return node.as_str() if node.is_str() else AccessError.TYPE_MISMATCH


def as_bool(node: Node) -> Union[bool, AccessError]:
    return node.as_bool() if node.is_bool() else AccessError.TYPE_MISMATCH


def as_int(node: Node) -> Union[int, AccessError]:
    return node.as_int() if node.is_int() else AccessError.TYPE_MISMATCH


def as_float(node: Node) -> Union[float, AccessError]:
    return node.as_float() if node.is_float() else AccessError.TYPE_MISMATCH


def to_str(node: Node) -> str:
    return node.to_str()


def free_str(s: str) -> None:
    """Release a string from ``as_str``/``to_str``.

    Python strings are garbage collected, so this only exists to keep the
    call pattern of the boundary contract.
    """
