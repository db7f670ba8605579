"""
requester/executor/request_executor.py

WHAT THIS FILE IS FOR
---------------------
This module executes ONE HTTP call described by a RequestDescriptor and
decodes the JSON response.

It is responsible for:
- Building the outgoing request (default JSON Content-Type, caller
  headers on top, query params, optional templated body)
- Rejecting unsupported methods before any network activity
- Capturing an equivalent curl command when debug is enabled
- Treating any status other than 200 as an error
- Decoding the response body as a JSON object
- Extracting named values from the response (via response_parser)

CALL FLOW
---------
Requester.request(descriptor, client, debug)
  → render_body()            (only if body AND body_variables are non-empty)
  → client.build_request()   (pre-request point: curl captured here)
  → client.send()
  → status / JSON checks
  → RequestResult(response, curl)

ERROR HANDLING RULES
--------------------
- Template failure           → TemplateRenderError (nothing sent)
- Method not in HttpMethod   → UnsupportedMethodError (nothing sent)
- httpx transport failure    → TransportError
- Status != 200              → NonSuccessStatusError (message = body text)
- Body not a JSON object     → DecodeError (JSON null decodes to {})
- Task cancellation          → asyncio.CancelledError, propagated unchanged

Every RequesterError carries the curl command collected so far.
No retries are performed here: one failed attempt is one error.

CLIENT OWNERSHIP
----------------
A caller-supplied httpx client is used as-is: it is never closed and no
hooks are installed on it, so one client may be shared between callers
to the extent httpx allows. When no client is given, one is created for
the call with Settings.http_timeout_seconds and closed afterwards.

WHAT THIS FILE IS NOT FOR
-------------------------
This module MUST NOT:
- Retry, back off or batch requests
- Negotiate content types (Content-Type is always application/json
  unless the caller overrides it)
- Log request or response bodies
"""

from __future__ import annotations

import json
from typing import Any, Dict, NamedTuple, Optional, Union

import httpx
import structlog

from requester.executor.body_renderer import render_body
from requester.executor.errors import (
    DecodeError,
    NonSuccessStatusError,
    TransportError,
    UnsupportedMethodError,
)
from requester.executor.response_parser import parse_response_values
from requester.schemas.request_descriptor import HttpMethod, RequestDescriptor
from requester.utils.curl_command import to_curl
from requester.utils.settings import Settings, get_settings

logger = structlog.get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/json"


class RequestResult(NamedTuple):
    response: Dict[str, Any]
    curl: str


class Requester:
    """
    Executes request descriptors.

    Holds only configuration; every call is independent.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    async def request(
        self,
        descriptor: RequestDescriptor,
        client: Optional[httpx.AsyncClient] = None,
        debug: Optional[bool] = None,
    ) -> RequestResult:
        """
        Perform the call asynchronously.

        Cancel the awaiting task (or wrap it in asyncio.timeout /
        anyio.fail_after) to abort the in-flight request.
        """
        debug = self._debug(debug)

        if client is None:
            async with httpx.AsyncClient(timeout=self.settings.http_timeout_seconds) as own_client:
                return await self.request(descriptor, own_client, debug)

        request = self._build_request(client, descriptor)
        curl = to_curl(request) if debug else ""

        try:
            resp = await client.send(request)
        except httpx.HTTPError as exc:
            self._log_transport_error(request, exc)
            raise TransportError(str(exc) or type(exc).__name__, curl=curl) from exc

        return RequestResult(self._decode(request, resp, curl), curl)

    def request_sync(
        self,
        descriptor: RequestDescriptor,
        client: Optional[httpx.Client] = None,
        debug: Optional[bool] = None,
    ) -> RequestResult:
        """Blocking variant of request(); same contract."""
        debug = self._debug(debug)

        if client is None:
            with httpx.Client(timeout=self.settings.http_timeout_seconds) as own_client:
                return self.request_sync(descriptor, own_client, debug)

        request = self._build_request(client, descriptor)
        curl = to_curl(request) if debug else ""

        try:
            resp = client.send(request)
        except httpx.HTTPError as exc:
            self._log_transport_error(request, exc)
            raise TransportError(str(exc) or type(exc).__name__, curl=curl) from exc

        return RequestResult(self._decode(request, resp, curl), curl)

    def parse_response(self, descriptor: RequestDescriptor, response: Any) -> Dict[str, str]:
        """Extract descriptor.response_extract values from a decoded response."""
        return parse_response_values(response, descriptor.response_extract)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _debug(self, debug: Optional[bool]) -> bool:
        return self.settings.debug_curl if debug is None else debug

    def _build_request(
        self,
        client: Union[httpx.Client, httpx.AsyncClient],
        descriptor: RequestDescriptor,
    ) -> httpx.Request:
        headers = httpx.Headers({"Content-Type": DEFAULT_CONTENT_TYPE})
        for name, value in descriptor.headers.items():
            headers[name] = value

        body = descriptor.body
        if body and descriptor.body_variables:
            body = render_body(body, descriptor.body_variables)

        try:
            method = HttpMethod(descriptor.method)
        except ValueError:
            logger.warning("unsupported_method", method=descriptor.method, url=descriptor.url)
            raise UnsupportedMethodError(descriptor.method) from None

        try:
            # params are added to the query already in the URL, never replace it
            url = httpx.URL(descriptor.url)
            if descriptor.query_params:
                url = url.copy_merge_params(descriptor.query_params)
            return client.build_request(
                method.value,
                url,
                headers=headers,
                content=body.encode("utf-8") if body else None,
            )
        except httpx.InvalidURL as exc:
            logger.warning("request_invalid_url", method=method.value, url=descriptor.url, error=str(exc))
            raise TransportError(str(exc)) from exc

    def _decode(self, request: httpx.Request, resp: httpx.Response, curl: str) -> Dict[str, Any]:
        if resp.status_code != 200:
            logger.warning(
                "request_non_success_status",
                method=request.method,
                url=str(request.url),
                status_code=resp.status_code,
            )
            raise NonSuccessStatusError(resp.text, status_code=resp.status_code, curl=curl)

        try:
            data = json.loads(resp.content)
        except ValueError as exc:
            logger.warning(
                "response_decode_failed",
                method=request.method,
                url=str(request.url),
                error=str(exc),
            )
            raise DecodeError(str(exc), curl=curl, status_code=resp.status_code) from exc

        # JSON null decodes to an empty object
        if data is None:
            data = {}

        if not isinstance(data, dict):
            logger.warning(
                "response_decode_failed",
                method=request.method,
                url=str(request.url),
                error="not a JSON object",
                type=type(data).__name__,
            )
            raise DecodeError(
                f"expected a JSON object, got {type(data).__name__}",
                curl=curl,
                status_code=resp.status_code,
            )

        logger.info(
            "request_sent",
            method=request.method,
            url=str(request.url),
            status_code=resp.status_code,
        )
        return data

    @staticmethod
    def _log_transport_error(request: httpx.Request, exc: httpx.HTTPError) -> None:
        logger.warning(
            "request_failed",
            method=request.method,
            url=str(request.url),
            error=str(exc),
            error_type=type(exc).__name__,
        )
