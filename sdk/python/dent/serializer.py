"""Canonical text form of a value tree."""

import math

from .lexer import RESERVED, WHITESPACE, looks_numeric
from .types import Kind, Value, kind_of

_QUOTE_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _bare_ok(s: str) -> bool:
    if not s or s in ("true", "false") or looks_numeric(s):
        return False
    return not any(c in WHITESPACE or c in RESERVED or not c.isprintable() for c in s)


def quote(s: str) -> str:
    out = []
    for ch in s:
        if ch in _QUOTE_ESCAPES:
            out.append(_QUOTE_ESCAPES[ch])
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def format_str(s: str) -> str:
    return s if _bare_ok(s) else quote(s)


def format_key(key: str) -> str:
    # Keys are never classified, so only the lexical restrictions apply.
    if key and not any(c in WHITESPACE or c in RESERVED or not c.isprintable() for c in key):
        return key
    return quote(key)


def format_float(f: float) -> str:
    if math.isnan(f) or math.isinf(f):
        # Not expressible in the notation; re-reads as a string.
        return repr(f)
    text = repr(f)
    if not any(c in text for c in ".eE"):
        text += ".0"
    return text


def to_text(value: Value) -> str:
    """Serialize ``value`` to dent notation.

    Dicts and lists are written on one line with children in iteration
    order. Parsing the result gives back an equal tree, with two exceptions:
    non-finite floats, and None below the top level, which has no literal
    and is written as ``none``. A top-level None is the empty document.
    """
    if value is None:
        return ""
    return _emit(value)


def _emit(value: Value) -> str:
    kind = kind_of(value)
    if kind is Kind.NONE:
        return "none"
    if kind is Kind.BOOL:
        return "true" if value else "false"
    if kind is Kind.INT:
        return str(value)
    if kind is Kind.FLOAT:
        return format_float(value)
    if kind is Kind.STR:
        return format_str(value)
    if kind is Kind.LIST:
        if not value:
            return "[ ]"
        return "[ " + " ".join(_emit(v) for v in value) + " ]"
    if not value:
        return "{ }"
    return "{ " + " ".join(f"{format_key(k)}: {_emit(v)}" for k, v in value.items()) + " }"
