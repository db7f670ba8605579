"""
requester/executor/body_renderer.py

WHAT THIS FILE IS FOR
---------------------
Render a request body template against the descriptor's body variables.

Templates use jinja2 syntax:

    {"name": "{{ name | upper }}", "id": {{ id | quote }}}

BEHAVIOR
--------
- Unknown variables render as an empty string (jinja2 default Undefined).
- No HTML autoescaping: bodies are JSON / text, not markup.
- Rendering is sandboxed: underscore attributes and unsafe calls fail.
- Syntax errors and errors raised while rendering are reported as
  TemplateRenderError; nothing is sent in that case.

HELPERS
-------
Besides jinja2's built-in filters (upper, lower, trim, replace,
default, join, ...) templates get:

    filters:  quote, squote, b64enc, b64dec, to_json, trim_prefix, trim_suffix
    globals:  now(), uuidv4(), env(name, default="")
"""

from __future__ import annotations

import base64
import json
import os
import uuid
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Mapping

import structlog
from jinja2 import TemplateError, Undefined
from jinja2.sandbox import SandboxedEnvironment

from requester.executor.errors import TemplateRenderError
from requester.utils.stringify import to_string

logger = structlog.get_logger(__name__)


def _quote(value: Any) -> str:
    return json.dumps(to_string(value), ensure_ascii=False)


def _squote(value: Any) -> str:
    return "'" + to_string(value) + "'"


def _b64enc(value: Any) -> str:
    return base64.b64encode(to_string(value).encode("utf-8")).decode("ascii")


def _b64dec(value: Any) -> str:
    return base64.b64decode(to_string(value)).decode("utf-8")


def _to_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _trim_prefix(value: Any, prefix: str) -> str:
    text = to_string(value)
    return text[len(prefix):] if prefix and text.startswith(prefix) else text


def _trim_suffix(value: Any, suffix: str) -> str:
    text = to_string(value)
    return text[: -len(suffix)] if suffix and text.endswith(suffix) else text


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _uuidv4() -> str:
    return str(uuid.uuid4())


def _env(name: str, default: str = "") -> str:
    return os.environ.get(name, default)


@lru_cache(maxsize=1)
def get_environment() -> SandboxedEnvironment:
    # descriptors come from files; templates must not reach Python internals
    env = SandboxedEnvironment(
        autoescape=False,
        undefined=Undefined,
        keep_trailing_newline=True,
    )
    env.filters.update(
        quote=_quote,
        squote=_squote,
        b64enc=_b64enc,
        b64dec=_b64dec,
        to_json=_to_json,
        trim_prefix=_trim_prefix,
        trim_suffix=_trim_suffix,
    )
    env.globals.update(now=_now, uuidv4=_uuidv4, env=_env)
    return env


def render_body(template: str, variables: Mapping[str, Any]) -> str:
    """
    Render `template` with `variables` as the namespace.

    Raises:
        TemplateRenderError: the template does not parse, or rendering fails.
    """
    try:
        return get_environment().from_string(template).render(**dict(variables))
    except TemplateError as exc:
        logger.warning("body_render_failed", error=str(exc))
        raise TemplateRenderError(f"body template error: {exc}") from exc
    except Exception as exc:  # noqa: BLE001
        # expressions and helpers raise plain Python errors, e.g. 1 // 0 or b64dec on bad input
        logger.warning("body_render_failed", error=str(exc))
        raise TemplateRenderError(f"body template error: {exc}") from exc
