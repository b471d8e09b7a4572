"""Recursive-descent parser for dent. Function calls are expanded in place."""

from collections import deque
from typing import Iterator

from .errors import DentError, DentSyntaxError, FunctionArityOrTypeError, UnknownFunctionError
from .lexer import Token, classify_bare, tokenize
from .types import ParseContext, Value, check_value

_DESCRIBE = {
    "LBRACE": "'{'",
    "RBRACE": "'}'",
    "LBRACKET": "'['",
    "RBRACKET": "']'",
    "COLON": "':'",
    "AT": "'@'",
    "EOF": "end of input",
}


def _describe(tok: Token) -> str:
    if tok.kind == "STRING":
        return f'string "{tok.value}"'
    if tok.kind == "BARE":
        return f"'{tok.value}'"
    return _DESCRIBE[tok.kind]


class _Tokens:
    """Lazy token stream with arbitrary peek; EOF repeats once reached."""

    __slots__ = ("_iter", "_buf")

    def __init__(self, tokens: Iterator[Token]):
        self._iter = tokens
        self._buf: deque[Token] = deque()

    def peek(self, k: int = 0) -> Token:
        while len(self._buf) <= k:
            try:
                self._buf.append(next(self._iter))
            except StopIteration:
                self._buf.append(self._buf[-1])
        return self._buf[k]

    def next(self) -> Token:
        tok = self.peek()
        self._buf.popleft()
        return tok


class Parser:
    def __init__(self, text: str, ctx: ParseContext):
        self.ctx = ctx
        self.tokens = _Tokens(tokenize(text, ctx.source_name))

    def _where(self, tok: Token) -> dict:
        return {"path": self.ctx.source_name, "line": tok.line, "column": tok.column}

    def error(self, message: str, tok: Token) -> DentSyntaxError:
        return DentSyntaxError(message, **self._where(tok))

    def parse_document(self) -> Value:
        """Parse the whole input. Empty input (whitespace/comments only) is None."""
        if self.tokens.peek().kind == "EOF":
            return None
        value = self.parse_value(in_dict=False)
        tok = self.tokens.peek()
        if tok.kind != "EOF":
            raise self.error(f"unexpected {_describe(tok)} after top-level value", tok)
        return value

    def parse_value(self, in_dict: bool) -> Value:
        tok = self.tokens.next()
        kind = tok.kind
        if kind == "LBRACE":
            return self.parse_dict(tok)
        if kind == "LBRACKET":
            return self.parse_list(tok)
        if kind == "AT":
            return self.parse_call(tok, in_dict)
        if kind == "STRING":
            return tok.value
        if kind == "BARE":
            return classify_bare(tok.value)
        if kind == "EOF":
            raise self.error("unexpected end of input", tok)
        raise self.error(f"unexpected {_describe(tok)}", tok)

    def parse_dict(self, opening: Token) -> dict:
        out: dict = {}
        while True:
            tok = self.tokens.next()
            if tok.kind == "RBRACE":
                return out
            if tok.kind == "EOF":
                raise self.error("unterminated dict: missing '}'", opening)
            if tok.kind not in ("BARE", "STRING"):
                raise self.error(f"expected a key, got {_describe(tok)}", tok)
            colon = self.tokens.next()
            if colon.kind != "COLON":
                raise self.error(f"expected ':' after key '{tok.value}', got {_describe(colon)}", colon)
            key = tok.value
            if key in out and not self.ctx.allow_duplicate_keys:
                raise self.error(f"duplicate key '{key}'", tok)
            # Overwriting an existing key keeps its original position.
            out[key] = self.parse_value(in_dict=True)

    def parse_list(self, opening: Token) -> list:
        items: list = []
        while True:
            tok = self.tokens.peek()
            if tok.kind == "RBRACKET":
                self.tokens.next()
                return items
            if tok.kind == "EOF":
                raise self.error("unterminated list: missing ']'", opening)
            items.append(self.parse_value(in_dict=False))

    def _starts_value(self, in_dict: bool) -> bool:
        tok = self.tokens.peek()
        if tok.kind in ("LBRACE", "LBRACKET", "AT"):
            return True
        if tok.kind in ("BARE", "STRING"):
            # Inside a dict, `name:` is the next key, not another argument.
            return not (in_dict and self.tokens.peek(1).kind == "COLON")
        return False

    def parse_call(self, at: Token, in_dict: bool) -> Value:
        name_tok = self.tokens.next()
        if name_tok.kind != "BARE":
            raise self.error(f"expected a function name after '@', got {_describe(name_tok)}", name_tok)
        args: list = []
        while self._starts_value(in_dict):
            args.append(self.parse_value(in_dict))
        return self.invoke(name_tok, args)

    def invoke(self, name_tok: Token, args: list) -> Value:
        name = name_tok.value
        where = self._where(name_tok)
        fn = self.ctx.registry.lookup(name)
        if fn is None:
            raise UnknownFunctionError(name, **where)
        try:
            result = fn(args, self.ctx)
        except DentError as exc:
            # Errors raised without a position point at the call site.
            if exc.line is None and exc.path is None:
                exc.path, exc.line, exc.column = where["path"], where["line"], where["column"]
            raise
        except (TypeError, ValueError, LookupError, ArithmeticError) as exc:
            raise FunctionArityOrTypeError(f"@{name}: {type(exc).__name__}: {exc}", **where) from exc
        try:
            return check_value(result)
        except (TypeError, ValueError) as exc:
            raise FunctionArityOrTypeError(f"@{name} returned an invalid value: {exc}", **where) from exc


def parse_source(text: str, ctx: ParseContext) -> Value:
    """Parse ``text`` into a value tree, expanding every function call."""
    return Parser(text, ctx).parse_document()
