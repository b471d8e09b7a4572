"""Parser front end: a registry plus the two parse entry points."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from .document import Document
from .errors import LexError
from .functions import FunctionRegistry, read_source
from .parser import parse_source
from .types import Function, ParseContext

logger = logging.getLogger(__name__)

Buffer = Union[str, bytes, bytearray, memoryview]
PathLike = Union[str, os.PathLike]


def _decode(buffer: Buffer) -> str:
    if isinstance(buffer, str):
        return buffer
    try:
        return bytes(buffer).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise LexError(f"input is not valid UTF-8 at byte {exc.start}") from exc


class Dent:
    """A dent parser bound to one function registry.

    The registry starts with the built-ins ``import`` and ``merge`` unless
    ``builtins=False``. Register extra functions before parsing:

        >>> d = Dent()
        >>> d.add_function("count", lambda args, ctx: len(args[0]))
        >>> d.parse("@count [ 1 2 3 ]").root.as_int()
        3
    """

    def __init__(
        self,
        functions: Optional[dict[str, Function]] = None,
        *,
        builtins: bool = True,
        allow_duplicate_keys: bool = False,
    ):
        self.registry = FunctionRegistry(functions, builtins=builtins)
        self.allow_duplicate_keys = allow_duplicate_keys

    def add_function(self, name: str, function: Function) -> None:
        self.registry.register(name, function)

    def _context(self, path: Optional[Path], base_dir: Optional[PathLike], allow_duplicate_keys: Optional[bool]) -> ParseContext:
        if allow_duplicate_keys is None:
            allow_duplicate_keys = self.allow_duplicate_keys
        if base_dir is not None:
            base = Path(base_dir).resolve()
        elif path is not None:
            base = path.parent
        else:
            base = Path.cwd()
        return ParseContext(
            registry=self.registry,
            path=path,
            base_dir=base,
            allow_duplicate_keys=allow_duplicate_keys,
        )

    def parse(
        self,
        buffer: Buffer,
        *,
        base_dir: Optional[PathLike] = None,
        allow_duplicate_keys: Optional[bool] = None,
    ) -> Document:
        """Parse an in-memory buffer.

        ``@import`` paths resolve against ``base_dir``, or the current working
        directory when it is not given. Raises a ``DentError`` subclass on any
        failure; no partial tree is returned.
        """
        text = _decode(buffer)
        ctx = self._context(None, base_dir, allow_duplicate_keys)
        return Document(parse_source(text, ctx))

    def parse_file(
        self,
        path: PathLike,
        *,
        allow_duplicate_keys: Optional[bool] = None,
    ) -> Document:
        """Parse the file at ``path``; its directory is the import base."""
        resolved = Path(path).resolve()
        logger.debug("parsing file %s", resolved)
        text = read_source(resolved)
        ctx = self._context(resolved, None, allow_duplicate_keys)
        # The top-level file is on the import stack so self-imports are cycles.
        ctx.import_stack.append(resolved)
        try:
            root = parse_source(text, ctx)
        finally:
            ctx.import_stack.pop()
        return Document(root, path=str(resolved))


_default = Dent()


def default_engine() -> Dent:
    return _default


def register_function(name: str, function: Optional[Function] = None):
    """Register on the process-wide engine used by ``dent.parse``."""
    return _default.registry.register(name, function)


def parse(buffer: Buffer, **kwargs) -> Document:
    return _default.parse(buffer, **kwargs)


def parse_file(path: PathLike, **kwargs) -> Document:
    return _default.parse_file(path, **kwargs)
