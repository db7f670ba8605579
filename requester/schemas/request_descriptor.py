# -------------------------------------------------------------------
# requester/schemas/request_descriptor.py
#
# WHAT THIS FILE IS FOR
# --------------------
# This module defines the **request descriptor**: the declarative
# definition of one HTTP call (URL, method, headers, query params,
# body template + variables, and response extraction rules).
#
# WIRE FORMAT
# -----------
# Descriptors are persisted as JSON with these exact field names:
#   url, method, headers, params, body, bodyParam, parseResponseValue
#
# Python code uses snake_case attributes instead:
#   params             -> query_params
#   bodyParam          -> body_variables
#   parseResponseValue -> response_extract
#
# This is implemented via:
#   - alias=<wire name> on each renamed field
#   - populate_by_name=True in model_config
#
# KEY DESIGN DECISIONS
# --------------------
# - Descriptors are frozen: created once by the caller, never mutated
#   while a request is in flight.
# - `method` is kept as the raw string. It is checked against
#   HttpMethod only when the request is dispatched, so an unsupported
#   method is reported by the executor (before any network activity)
#   rather than at load time.
# - JSON null for a mapping field is treated as an empty mapping.
#
# WHAT THIS FILE IS NOT FOR
# ------------------------
# This module does NOT perform HTTP calls, template rendering or
# response parsing. Those live in requester/executor/*.
# -------------------------------------------------------------------

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class HttpMethod(str, Enum):
    """The only HTTP methods a descriptor may dispatch."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class RequestDescriptor(BaseModel):
    """
    Declarative definition of a single HTTP request.

    Supports both wire (camelCase / short) and snake_case field names.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "url": "https://api.example.com/v1/users",
                "method": "POST",
                "headers": {"Authorization": "Bearer token"},
                "params": {"dryRun": "true"},
                "body": '{"name": "{{ name }}"}',
                "bodyParam": {"name": "Ann"},
                "parseResponseValue": {"userId": "data.id"},
            }
        },
    )

    url: str = Field(..., min_length=1, description="Absolute request URL")

    method: str = Field(
        HttpMethod.GET.value,
        description="One of GET, POST, PUT, DELETE, PATCH (case-sensitive)",
    )

    headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Headers applied after the default Content-Type; may override it",
    )

    query_params: Dict[str, str] = Field(
        default_factory=dict,
        alias="params",
        description="Query parameters merged into the URL",
    )

    body: str = Field(
        "",
        description="Raw body, or a jinja2 template when bodyParam is non-empty",
    )

    body_variables: Dict[str, str] = Field(
        default_factory=dict,
        alias="bodyParam",
        description="Template variables for body; empty means body is sent verbatim",
    )

    response_extract: Dict[str, str] = Field(
        default_factory=dict,
        alias="parseResponseValue",
        description="Output name -> path expression evaluated against the JSON response",
    )

    @field_validator("headers", "query_params", "body_variables", "response_extract", mode="before")
    @classmethod
    def _null_mapping_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("body", mode="before")
    @classmethod
    def _null_body_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_json(self) -> str:
        """Serialize using the wire field names."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "RequestDescriptor":
        return cls.model_validate_json(text)


def load_request_descriptor(path: Union[str, Path]) -> RequestDescriptor:
    """
    Load a descriptor from a .json, .yaml or .yml file.

    Raises:
        ValueError: unknown file extension or the document is not a mapping.
        pydantic.ValidationError: the mapping is not a valid descriptor.
    """
    p = Path(path)
    suffix = p.suffix.lower()

    with p.open("r", encoding="utf-8") as f:
        if suffix == ".json":
            data = json.load(f)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            raise ValueError(f"Unsupported descriptor file type: {p.suffix or '<none>'}")

    if not isinstance(data, dict):
        raise ValueError(f"Descriptor file must contain a mapping, got {type(data).__name__}")

    return RequestDescriptor.model_validate(data)
