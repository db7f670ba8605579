"""
requester/utils/path_lookup.py

WHAT THIS FILE IS FOR
---------------------
Resolve a dotted / indexed path expression against an arbitrary
JSON-like value (dicts, lists, scalars, plain objects).

PATH SYNTAX
-----------
    user.address.city      nested mapping keys
    items.0.name           numeric segment indexes a list
    items[0].name          bracket index, same meaning
    items.#.name           '#' expands a list; the rest of the path is
                           evaluated on every element
    version\\.major        '\\.' is a literal dot inside one segment
    ""                     the empty path resolves to the root value

Mappings are looked up by key, lists by non-negative index, anything
else by attribute.

CONTRACT
--------
`get_path` never raises for data problems. Any step that cannot be
resolved yields None, which callers treat as "absent".
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, List, Optional, Union

Segment = Union[str, int]

EXPAND = "#"

_INDEX_RE = re.compile(r"\[(\d+)\]")


def escape_dots(key: str) -> str:
    """Make every '.' in key a literal character for get_path."""
    return key.replace(".", "\\.")


def split_path(path: str) -> List[Segment]:
    """
    Split a path expression into segments.

    String segments are mapping keys (or '#'); int segments come from
    '[n]' suffixes.
    """
    raw_parts: List[str] = []
    buf: List[str] = []
    i = 0
    while i < len(path):
        ch = path[i]
        if ch == "\\" and i + 1 < len(path) and path[i + 1] == ".":
            buf.append(".")
            i += 2
            continue
        if ch == ".":
            raw_parts.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
        i += 1
    raw_parts.append("".join(buf))

    segments: List[Segment] = []
    for part in raw_parts:
        head, indexes = _split_indexes(part)
        if head or not indexes:
            segments.append(head)
        segments.extend(indexes)
    return segments


def _split_indexes(part: str) -> tuple[str, List[int]]:
    # "items[0][1]" -> ("items", [0, 1]); anything irregular stays a plain key
    pos = part.find("[")
    if pos < 0 or not part.endswith("]"):
        return part, []
    tail = part[pos:]
    indexes = [int(m) for m in _INDEX_RE.findall(tail)]
    if "".join(f"[{n}]" for n in indexes) != tail:
        return part, []
    return part[:pos], indexes


def get_path(data: Any, path: str) -> Optional[Any]:
    """
    Return the value addressed by `path` inside `data`, or None.
    """
    if path == "":
        return data
    return _walk(data, split_path(path))


def _walk(current: Any, segments: Sequence[Segment]) -> Optional[Any]:
    for pos, segment in enumerate(segments):
        if current is None:
            return None

        if segment == EXPAND:
            if not _is_list(current):
                return None
            rest = segments[pos + 1:]
            collected = [v for v in (_walk(item, rest) for item in current) if v is not None]
            return collected or None

        current = _step(current, segment)
    return current


def _step(current: Any, segment: Segment) -> Optional[Any]:
    if isinstance(segment, int):
        return _index(current, segment)

    if isinstance(current, Mapping):
        return current.get(segment)

    if _is_list(current):
        if segment.isdigit():
            return _index(current, int(segment))
        return None

    if not segment or segment.startswith("_"):
        return None
    value = getattr(current, segment, None)
    # methods are not data
    return None if callable(value) else value


def _index(current: Any, idx: int) -> Optional[Any]:
    if not _is_list(current) or idx >= len(current):
        return None
    return current[idx]


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))
