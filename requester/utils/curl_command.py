"""
requester/utils/curl_command.py

Render an outgoing httpx.Request as an equivalent curl command line so
operators can replay it by hand.
"""

from __future__ import annotations

import shlex
from typing import List

import httpx

# Set by the transport, not by the caller
_SKIPPED_HEADERS = {"host", "content-length"}


def to_curl(request: httpx.Request) -> str:
    """
    Example:
        curl -X 'POST' -d '{"a":1}' -H 'content-type: application/json' 'https://api/x?q=1'
    """
    parts: List[str] = ["curl", "-X", shlex.quote(request.method)]

    body = request.content
    if body:
        parts += ["-d", shlex.quote(body.decode("utf-8", errors="replace"))]

    for name, value in sorted(request.headers.items()):
        if name.lower() in _SKIPPED_HEADERS:
            continue
        parts += ["-H", shlex.quote(f"{name}: {value}")]

    parts.append(shlex.quote(str(request.url)))
    return " ".join(parts)
