"""
requester/utils/stringify.py

Convert resolved values into the text that ends up in URLs, bodies and
extracted response values.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any


def to_string(value: Any) -> str:
    """
    Render `value` as text.

    - None -> ""
    - bool -> "true" / "false"
    - float -> plain decimal, no exponent, integral values without ".0"
    - dict / list / tuple -> compact JSON with sorted keys
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _float_to_string(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (dict, list, tuple)):
        try:
            return json.dumps(value, ensure_ascii=False, separators=(",", ":"), sort_keys=True, default=str)
        except TypeError:
            # mixed key types cannot be sorted
            return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(value)


def _float_to_string(value: float) -> str:
    if value != value:  # NaN
        return "NaN"
    if value in (float("inf"), float("-inf")):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer():
        return str(int(value))
    # repr is the shortest round-trip form; Decimal drops the exponent
    return format(Decimal(repr(value)), "f")
