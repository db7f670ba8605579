"""
requester/executor/response_parser.py

Turn a decoded JSON response into the flat {name: text} mapping a
descriptor asks for in `response_extract`.

Every requested name is present in the result. A path that resolves to
nothing (or to null) becomes "". This function never raises.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from requester.utils.path_lookup import get_path
from requester.utils.stringify import to_string


def parse_response_values(response: Any, response_extract: Mapping[str, str]) -> Dict[str, str]:
    parsed: Dict[str, str] = {}
    for name, path in response_extract.items():
        value = get_path(response, path)
        parsed[name] = to_string(value) if value is not None else ""
    return parsed
