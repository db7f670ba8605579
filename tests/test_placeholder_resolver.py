# tests/test_placeholder_resolver.py
from __future__ import annotations

import re

import pytest

from requester.executor.placeholder_resolver import (
    PlaceholderResolver,
    replace_placeholders,
    search_placeholders,
)

BRACES = r"\{(\w+)\}"
DOTTED = r"\{(\w[\w.]*)\}"


def test_replace_substitutes_every_resolved_token() -> None:
    out = replace_placeholders({"name": "Ann", "id": 42}, "hello {name}, id={id}", BRACES)
    assert out == "hello Ann, id=42"


def test_replace_leaves_unresolved_token_untouched() -> None:
    out = replace_placeholders({"name": "Ann"}, "hello {name}, id={id}", BRACES)
    assert out == "hello Ann, id={id}"


def test_replace_leaves_null_value_token_untouched() -> None:
    out = replace_placeholders({"id": None}, "/users/{id}", BRACES)
    assert out == "/users/{id}"


def test_replace_without_matches_returns_input_unchanged() -> None:
    text = "nothing to see here"
    assert replace_placeholders({"a": 1}, text, BRACES) == text


def test_replace_with_none_data_keeps_all_tokens() -> None:
    assert replace_placeholders(None, "{a}-{b}", BRACES) == "{a}-{b}"


def test_replace_follows_nested_paths() -> None:
    data = {"user": {"address": {"city": "Oslo"}}, "items": [{"sku": "A1"}]}
    out = replace_placeholders(data, "{user.address.city}/{items.0.sku}", DOTTED)
    assert out == "Oslo/A1"


def test_escape_dots_treats_dotted_key_as_single_key() -> None:
    data = {"a.b": "literal", "a": {"b": "nested"}}

    assert replace_placeholders(data, "{a.b}", DOTTED) == "nested"
    assert replace_placeholders(data, "{a.b}", DOTTED, escape_dots=True) == "literal"


def test_escape_dots_miss_keeps_token() -> None:
    data = {"a": {"b": "nested"}}
    assert replace_placeholders(data, "{a.b}", DOTTED, escape_dots=True) == "{a.b}"


def test_replace_stringifies_non_string_values() -> None:
    data = {"flag": True, "price": 9.5, "whole": 3.0, "tags": ["x", "y"], "obj": {"b": 1, "a": 2}}
    out = replace_placeholders(data, "{flag} {price} {whole} {tags} {obj}", BRACES)
    assert out == 'true 9.5 3 ["x","y"] {"a":2,"b":1}'


def test_replace_supports_other_token_syntaxes() -> None:
    data = {"id": 7, "name": "bob"}
    assert replace_placeholders(data, "/users/:id", r":(\w+)") == "/users/7"
    assert replace_placeholders(data, "hi ${name}", r"\$\{(\w+)\}") == "hi bob"


def test_replace_does_not_mutate_data() -> None:
    data = {"a": {"b": [1, 2]}}
    replace_placeholders(data, "{a.b}", DOTTED)
    assert data == {"a": {"b": [1, 2]}}


def test_pattern_without_capture_group_substitutes_nothing() -> None:
    assert replace_placeholders({"x": 1}, "{x}", r"\{\w+\}") == "{x}"
    assert search_placeholders("{x}", r"\{\w+\}") == []


def test_invalid_pattern_raises_re_error() -> None:
    with pytest.raises(re.error):
        replace_placeholders({}, "{x}", r"\{(\w+\}")


def test_search_returns_keys_in_order_with_duplicates() -> None:
    keys = search_placeholders("{b} {a} {b} {c.d}", DOTTED)
    assert keys == ["b", "a", "b", "c.d"]


def test_search_with_no_matches_returns_empty_list() -> None:
    assert search_placeholders("plain text", BRACES) == []


def test_resolver_accepts_compiled_pattern_and_custom_lookup() -> None:
    calls: list[str] = []

    def lookup(data, key):
        calls.append(key)
        return data.get(key.upper())

    resolver = PlaceholderResolver(re.compile(BRACES), lookup=lookup)

    assert resolver.substitute({"NAME": "Ann"}, "{name}/{other}") == "Ann/{other}"
    assert calls == ["name", "other"]
    assert resolver.keys("{name}/{other}") == ["name", "other"]


def test_resolver_from_settings_uses_configured_pattern_and_escaping() -> None:
    class _FakeSettings:
        placeholder_pattern = r"<<(\w[\w.]*)>>"
        escape_placeholder_dots = True

    resolver = PlaceholderResolver.from_settings(_FakeSettings())  # type: ignore[arg-type]

    assert resolver.substitute({"a.b": "x", "a": {"b": "y"}}, "<<a.b>> {a}") == "x {a}"
    assert resolver.keys("<<a.b>> <<c>>") == ["a.b", "c"]


def test_optional_group_that_does_not_participate() -> None:
    pattern = r"\{(\w+)?\}"
    assert replace_placeholders({"": "root?", "a": 1}, "{}-{a}", pattern) == "{}-1"
    assert search_placeholders("{}-{a}", pattern) == ["", "a"]
