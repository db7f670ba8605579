"""
requester/executor/placeholder_resolver.py

WHAT THIS FILE IS FOR
---------------------
Replace placeholder tokens inside a string with values looked up from an
arbitrary nested structure, or just list the keys the tokens reference.

The token syntax is NOT fixed. Callers pass a regular expression whose
first capture group is the lookup key:

    r"\\{(\\w[\\w.]*)\\}"   ->  "{user.id}"
    r"\\$\\{(\\w+)\\}"      ->  "${name}"
    r":(\\w+)"             ->  "/users/:id"

SUBSTITUTION RULES
------------------
- Every non-overlapping match is processed left to right.
- Capture group 1 is evaluated as a path expression against `data`
  (see requester/utils/path_lookup.py).
- With escape_dots=True every '.' in the key is literal, so "{a.b}"
  looks up the key "a.b" instead of the path a -> b.
- A non-null result replaces the whole matched token with its text form
  (requester/utils/stringify.py).
- A null / missing result leaves the token exactly as it was.
  Unresolved keys are NOT errors: partial data is expected.
- A pattern without a capture group never substitutes anything.

`data` is never mutated.
"""

from __future__ import annotations

import re
from typing import Any, Callable, List, Optional, Pattern, Union

from requester.utils.path_lookup import escape_dots as _escape_dots
from requester.utils.path_lookup import get_path
from requester.utils.settings import Settings, get_settings
from requester.utils.stringify import to_string

PatternLike = Union[str, Pattern[str]]
Lookup = Callable[[Any, str], Optional[Any]]


class PlaceholderResolver:
    """
    Strategy object: one compiled token pattern + one lookup function.

    Raises re.error at construction time if `pattern` is not a valid
    regular expression.
    """

    def __init__(
        self,
        pattern: PatternLike,
        *,
        lookup: Lookup = get_path,
        escape_dots: bool = False,
    ) -> None:
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.lookup = lookup
        self.escape_dots = escape_dots

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PlaceholderResolver":
        """Resolver using the configured placeholder_pattern / escape_placeholder_dots."""
        settings = settings or get_settings()
        return cls(settings.placeholder_pattern, escape_dots=settings.escape_placeholder_dots)

    def substitute(self, data: Any, text: str) -> str:
        if self.pattern.groups < 1:
            return text

        def _replace(match: re.Match) -> str:
            key = match.group(1)
            if key is None:
                return match.group(0)
            if self.escape_dots:
                key = _escape_dots(key)
            value = self.lookup(data, key)
            if value is None:
                return match.group(0)
            return to_string(value)

        return self.pattern.sub(_replace, text)

    def keys(self, text: str) -> List[str]:
        """Capture group 1 of every match, in order, duplicates kept."""
        if self.pattern.groups < 1:
            return []
        return [m.group(1) or "" for m in self.pattern.finditer(text)]


def replace_placeholders(data: Any, text: str, pattern: PatternLike, escape_dots: bool = False) -> str:
    """
    Substitute every token matched by `pattern` in `text` with the value
    its key resolves to inside `data`. Unresolved tokens are kept as-is.

    Example:
        >>> replace_placeholders({"name": "Ann", "id": 42}, "hello {name}, id={id}", r"\\{(\\w+)\\}")
        'hello Ann, id=42'
    """
    return PlaceholderResolver(pattern, escape_dots=escape_dots).substitute(data, text)


def search_placeholders(text: str, pattern: PatternLike) -> List[str]:
    """Return the keys of every token matched by `pattern`, without substituting."""
    return PlaceholderResolver(pattern).keys(text)
