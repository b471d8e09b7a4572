"""Path queries like ``.characters[0].name`` over a parsed document."""

import re
from typing import Union

from .document import Node

_STEP_RE = re.compile(r"\.([^.\[\]]+)|\[(\d+)\]|\.")

Step = Union[str, int]


class QueryError(ValueError):
    pass


def parse_query(query: str) -> list[Step]:
    """Split a query into keys (str) and list indices (int).

    ``""`` and ``"."`` select the root. A leading key may omit its dot.
    """
    text = query.strip()
    if text and text[0] not in ".[":
        text = "." + text
    steps: list[Step] = []
    pos = 0
    while pos < len(text):
        m = _STEP_RE.match(text, pos)
        if not m:
            raise QueryError(f"bad query {query!r} at offset {pos}")
        key, index = m.group(1), m.group(2)
        if key is not None:
            steps.append(key)
        elif index is not None:
            steps.append(int(index))
        elif m.end() < len(text) and text[m.end()] != "[":
            raise QueryError(f"bad query {query!r} at offset {pos}")
        pos = m.end()
    return steps


def resolve(node: Node, steps: list[Step]) -> Node:
    for i, step in enumerate(steps):
        where = _render(steps[:i]) or "."
        if isinstance(step, int):
            if not node.is_list():
                raise QueryError(f"{where} is a {node.kind.value}, not a list")
            child = node.get_index(step)
            if child is None:
                raise QueryError(f"index {step} out of range at {where} (length {len(node)})")
        else:
            if not node.is_dict():
                raise QueryError(f"{where} is a {node.kind.value}, not a dict")
            child = node.get(step)
            if child is None:
                raise QueryError(f"key {step!r} not found at {where}")
        node = child
    return node


def _render(steps: list[Step]) -> str:
    return "".join(f"[{s}]" if isinstance(s, int) else f".{s}" for s in steps)
