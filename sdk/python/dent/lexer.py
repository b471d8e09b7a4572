"""Tokenizer for dent source text."""

import math
import re
from typing import Iterator, NamedTuple, Optional, Union

from .errors import LexError
from .types import INT_MAX, INT_MIN

PUNCTUATION = {
    "{": "LBRACE",
    "}": "RBRACE",
    "[": "LBRACKET",
    "]": "RBRACKET",
    ":": "COLON",
    "@": "AT",
}
RESERVED = frozenset(PUNCTUATION) | {'"', "#"}
WHITESPACE = frozenset(" \t\r\n")

_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_INT_RE = re.compile(r"-?[0-9]+")
_FLOAT_RE = re.compile(r"-?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class Token(NamedTuple):
    """(kind, value, offset, line, column) with 1-based line and column."""

    kind: str
    value: str
    offset: int
    line: int
    column: int


def classify_bare(text: str) -> Union[bool, int, float, str]:
    """Turn a bare token into a Bool, Int, Float or (fallback) Str."""
    if text == "true":
        return True
    if text == "false":
        return False
    if _INT_RE.fullmatch(text):
        n = int(text)
        if INT_MIN <= n <= INT_MAX:
            return n
        return text
    if _FLOAT_RE.fullmatch(text) and any(c in text for c in ".eE"):
        f = float(text)
        # Overflowing literals stay text, like out-of-range ints.
        return text if math.isinf(f) else f
    return text


def looks_numeric(text: str) -> bool:
    """True for any text shaped like an integer or float literal, in range or not."""
    return bool(_INT_RE.fullmatch(text) or _FLOAT_RE.fullmatch(text))


class _Scanner:
    __slots__ = ("text", "path", "pos", "line", "line_start")

    def __init__(self, text: str, path: Optional[str]):
        self.text = text
        self.path = path
        self.pos = 0
        self.line = 1
        self.line_start = 0

    def column(self, offset: int) -> int:
        return offset - self.line_start + 1

    def error(self, message: str, offset: int) -> LexError:
        return LexError(message, path=self.path, line=self.line, column=self.column(offset))

    def newline(self, offset: int) -> None:
        self.line += 1
        self.line_start = offset + 1

    def quoted(self, start: int) -> str:
        text = self.text
        n = len(text)
        start_line, start_col = self.line, self.column(start)
        i = start + 1
        out: list[str] = []
        while True:
            if i >= n:
                raise LexError(
                    "unterminated string",
                    path=self.path,
                    line=start_line,
                    column=start_col,
                )
            ch = text[i]
            if ch == '"':
                self.pos = i + 1
                return "".join(out)
            if ch == "\n":
                self.newline(i)
            if ch != "\\":
                out.append(ch)
                i += 1
                continue
            if i + 1 >= n:
                raise LexError(
                    "unterminated string",
                    path=self.path,
                    line=start_line,
                    column=start_col,
                )
            esc = text[i + 1]
            if esc in _ESCAPES:
                out.append(_ESCAPES[esc])
                i += 2
                continue
            if esc != "u":
                raise self.error(f"invalid escape \\{esc}", i)
            code = self._hex4(i)
            i += 6
            if 0xD800 <= code <= 0xDBFF and text.startswith("\\u", i):
                low = self._hex4(i)
                if 0xDC00 <= low <= 0xDFFF:
                    code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
                    i += 6
            if 0xD800 <= code <= 0xDFFF:
                raise self.error("invalid escape: unpaired surrogate", i - 6)
            out.append(chr(code))

    def _hex4(self, i: int) -> int:
        digits = self.text[i + 2:i + 6]
        if len(digits) != 4 or not all(c in "0123456789abcdefABCDEF" for c in digits):
            raise self.error(f"invalid escape \\u{digits}", i)
        return int(digits, 16)


def tokenize(text: str, path: Optional[str] = None) -> Iterator[Token]:
    """Yield tokens lazily, ending with a single EOF token.

    Comments and whitespace are dropped. Quoted strings come out as STRING
    with escapes resolved; everything else that is not punctuation is BARE.
    """
    sc = _Scanner(text, path)
    n = len(text)
    while True:
        i = sc.pos
        while i < n:
            ch = text[i]
            if ch == "#":
                while i < n and text[i] != "\n":
                    i += 1
                continue
            if ch not in WHITESPACE:
                break
            if ch == "\n":
                sc.newline(i)
            i += 1
        sc.pos = i
        if i >= n:
            yield Token("EOF", "", i, sc.line, sc.column(i))
            return

        ch = text[i]
        line, col = sc.line, sc.column(i)
        if ch in PUNCTUATION:
            sc.pos = i + 1
            yield Token(PUNCTUATION[ch], ch, i, line, col)
        elif ch == '"':
            value = sc.quoted(i)
            yield Token("STRING", value, i, line, col)
        else:
            j = i
            while j < n and text[j] not in WHITESPACE and text[j] not in RESERVED:
                j += 1
            sc.pos = j
            yield Token("BARE", text[i:j], i, line, col)
