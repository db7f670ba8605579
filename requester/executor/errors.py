"""
requester/executor/errors.py

Error kinds raised by Requester.request / Requester.request_sync.

Every error carries `curl`: the debug command captured before the
failure (empty when debug is off or nothing was built yet).
"""

from __future__ import annotations

from typing import Optional


class RequesterError(Exception):
    def __init__(self, message: str, *, curl: str = "") -> None:
        super().__init__(message)
        self.curl = curl


class TemplateRenderError(RequesterError):
    """The body template failed to parse or render."""


class UnsupportedMethodError(RequesterError):
    def __init__(self, method: str, *, curl: str = "") -> None:
        super().__init__("unsupported method", curl=curl)
        self.method = method


class TransportError(RequesterError):
    """Network / client failure (connect, timeout, protocol)."""


class NonSuccessStatusError(RequesterError):
    """
    The server answered with a status other than 200.

    str(exc) is the full response body text.
    """

    def __init__(self, body: str, *, status_code: int, curl: str = "") -> None:
        super().__init__(body, curl=curl)
        self.status_code = status_code
        self.body = body


class DecodeError(RequesterError):
    """The response body is not a JSON object."""

    def __init__(self, message: str, *, curl: str = "", status_code: Optional[int] = None) -> None:
        super().__init__(message, curl=curl)
        self.status_code = status_code
