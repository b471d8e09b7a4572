"""Extension function registry and the built-in @import and @merge."""

import copy
import logging
import threading
from pathlib import Path
from typing import Optional

from .errors import FunctionArityOrTypeError, ImportCycleError, ImportIOError
from .lexer import RESERVED, WHITESPACE
from .parser import parse_source
from .types import Function, ParseContext, Value

logger = logging.getLogger(__name__)


def read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ImportIOError(f"cannot decode {path} as UTF-8: {exc.reason}") from exc
    except OSError as exc:
        raise ImportIOError(f"cannot read {path}: {exc.strerror or exc}") from exc


def import_file(target: Path, ctx: ParseContext) -> Value:
    """Parse ``target`` (relative to ``ctx.base_dir``) and return its tree.

    The resolved path is pushed on the shared import stack for the duration
    of the nested parse; finding it already there is a cycle. A file seen
    earlier in the same session comes from the cache, deep-copied.
    """
    path = (ctx.base_dir / target).resolve()
    if path in ctx.import_stack:
        start = ctx.import_stack.index(path)
        chain = [str(p) for p in ctx.import_stack[start:]] + [str(path)]
        raise ImportCycleError(chain)
    if path in ctx.import_cache:
        logger.debug("import cache hit: %s", path)
        return copy.deepcopy(ctx.import_cache[path])

    logger.debug("importing %s (depth %d)", path, len(ctx.import_stack))
    text = read_source(path)
    ctx.import_stack.append(path)
    try:
        value = parse_source(text, ctx.for_file(path))
    finally:
        ctx.import_stack.pop()
    ctx.import_cache[path] = value
    return copy.deepcopy(value)


def builtin_import(args: list, ctx: ParseContext) -> Value:
    if len(args) != 1 or not isinstance(args[0], str):
        raise FunctionArityOrTypeError("@import takes exactly one string argument (a file path)")
    return import_file(Path(args[0]), ctx)


def builtin_merge(args: list, ctx: ParseContext) -> Value:
    if len(args) != 1 or not isinstance(args[0], list):
        raise FunctionArityOrTypeError("@merge takes exactly one list argument")
    parts = args[0]
    if not parts:
        raise FunctionArityOrTypeError("@merge needs at least one list or dict to merge")

    if all(isinstance(p, list) for p in parts):
        merged: list = []
        for p in parts:
            merged.extend(p)
        return merged

    if all(isinstance(p, dict) for p in parts):
        # Later values win; a key keeps the position of its first occurrence.
        out: dict = {}
        for p in parts:
            out.update(p)
        return out

    raise FunctionArityOrTypeError("@merge needs a list whose elements are all lists or all dicts")


BUILTINS: dict[str, Function] = {
    "import": builtin_import,
    "merge": builtin_merge,
}


def _valid_name(name: str) -> bool:
    return bool(name) and not any(c in WHITESPACE or c in RESERVED for c in name)


class FunctionRegistry:
    """Name -> callback table consulted for every ``@name`` call.

    Lookups and registrations take an internal lock so one registry can serve
    concurrent parses. Register functions before parsing starts; there is no
    unregistration.
    """

    def __init__(self, functions: Optional[dict[str, Function]] = None, builtins: bool = True):
        self._lock = threading.RLock()
        self._functions: dict[str, Function] = dict(BUILTINS) if builtins else {}
        for name, fn in (functions or {}).items():
            self.register(name, fn)

    def register(self, name: str, fn: Optional[Function] = None):
        """Register ``fn`` under ``name``; replaces any earlier entry.

        Without ``fn`` this returns a decorator:

            @registry.register("sum")
            def _sum(args, ctx): ...
        """
        if fn is None:
            def decorator(f: Function) -> Function:
                self.register(name, f)
                return f
            return decorator
        if not _valid_name(name):
            raise ValueError(f"invalid function name: {name!r}")
        if not callable(fn):
            raise TypeError(f"function {name!r} is not callable")
        with self._lock:
            self._functions[name] = fn
        logger.debug("registered function @%s", name)
        return fn

    def lookup(self, name: str) -> Optional[Function]:
        with self._lock:
            return self._functions.get(name)

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._functions)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._functions

    def copy(self) -> "FunctionRegistry":
        clone = FunctionRegistry(builtins=False)
        with self._lock:
            clone._functions.update(self._functions)
        return clone
