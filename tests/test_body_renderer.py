# tests/test_body_renderer.py
from __future__ import annotations

import pytest

from requester.executor.body_renderer import render_body
from requester.executor.errors import TemplateRenderError


def test_renders_variables() -> None:
    assert render_body('{"name": "{{ name }}"}', {"name": "Ann"}) == '{"name": "Ann"}'


def test_unknown_variable_renders_empty() -> None:
    assert render_body('{"name": "{{ missing }}"}', {"name": "Ann"}) == '{"name": ""}'


def test_conditionals_and_loops() -> None:
    tpl = "{% if flag == 'on' %}{% for c in word %}{{ c | upper }}{% endfor %}{% else %}off{% endif %}"
    assert render_body(tpl, {"flag": "on", "word": "ab"}) == "AB"
    assert render_body(tpl, {"flag": "off", "word": "ab"}) == "off"


def test_helper_filters() -> None:
    variables = {"name": 'A"nn', "token": "user:pass", "path": "/api/v1"}
    assert render_body("{{ name | quote }}", variables) == '"A\\"nn"'
    assert render_body("{{ token | b64enc }}", variables) == "dXNlcjpwYXNz"
    assert render_body("{{ 'dXNlcjpwYXNz' | b64dec }}", variables) == "user:pass"
    assert render_body("{{ path | trim_prefix('/api') }}", variables) == "/v1"
    assert render_body("{{ path | trim_suffix('/v1') }}", variables) == "/api"
    assert render_body("{{ missing | default('x') }}", variables) == "x"


def test_helper_globals() -> None:
    assert len(render_body("{{ uuidv4() }}", {"a": "b"})) == 36
    assert "T" in render_body("{{ now() }}", {"a": "b"})


def test_env_global_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REQUESTER_TEST_TOKEN", "secret")
    assert render_body("{{ env('REQUESTER_TEST_TOKEN') }}", {"a": "b"}) == "secret"
    assert render_body("{{ env('REQUESTER_TEST_UNSET', 'dflt') }}", {"a": "b"}) == "dflt"


def test_no_html_autoescape() -> None:
    assert render_body("{{ v }}", {"v": "<a&b>"}) == "<a&b>"


def test_syntax_error_raises_template_render_error() -> None:
    with pytest.raises(TemplateRenderError) as ei:
        render_body("{{ name ", {"name": "Ann"})
    assert ei.value.curl == ""


def test_helper_failure_raises_template_render_error() -> None:
    with pytest.raises(TemplateRenderError):
        render_body("{{ v | b64dec }}", {"v": "abc"})


def test_expression_error_raises_template_render_error() -> None:
    with pytest.raises(TemplateRenderError) as ei:
        render_body("{{ 1 // 0 }}", {"a": "b"})
    assert isinstance(ei.value.__cause__, ZeroDivisionError)


@pytest.mark.parametrize(
    "template",
    [
        "{{ ''.__class__.__mro__ }}",
        "{{ cycler.__init__.__globals__.os.name }}",
    ],
)
def test_templates_cannot_reach_python_internals(template: str) -> None:
    with pytest.raises(TemplateRenderError):
        render_body(template, {"a": "b"})
