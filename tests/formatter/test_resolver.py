"""Test lazy template resolution."""

from typing import Optional

import pytest

from promptline.errors import FormatError, ProbeError
from promptline.formatter import ResolvedSegment, Resolution, StringFormatter, Style
from promptline.formatter.resolver import (
    UNRESOLVED,
    resolve,
    resolve_name,
    resolve_variables,
)
from promptline.formatter.template import parse_template

BOLD_149 = Style(fg=149, bold=True)


def meta(name: str) -> Optional[Resolution]:
    if name == "symbol":
        return Resolution.ok("C ")
    return None


def styles(name: str) -> Optional[Resolution]:
    if name == "style":
        return Resolution.ok(BOLD_149)
    return None


class CountingProvider:
    """Value provider that records every name it is asked about."""

    def __init__(self, values: dict[str, str]):
        self.values = values
        self.asked: list[str] = []

    def __call__(self, name: str) -> Optional[Resolution]:
        self.asked.append(name)
        if name in self.values:
            return Resolution.ok(self.values[name])
        return None


def test_plain_prefix_and_styled_symbol():
    segments = resolve(parse_template("via $symbol($style)"), meta, styles)
    assert segments == [
        ResolvedSegment("via ", None),
        ResolvedSegment("C ", BOLD_149),
    ]


def test_bracket_scope_is_equivalent_to_shorthand():
    shorthand = resolve(parse_template("via $symbol($style)"), meta, styles)
    scoped = resolve(parse_template("via [$symbol]($style)"), meta, styles)
    assert shorthand == scoped


def test_empty_template_yields_no_segments():
    assert resolve(parse_template(""), meta, styles) == []


def test_unreferenced_variables_are_never_requested():
    values = CountingProvider({"compiler_name": "gcc", "compiler_version": "v13"})

    resolve(parse_template("via [$symbol]($style)"), meta, styles, values)

    assert values.asked == []


def test_only_referenced_variables_are_requested():
    values = CountingProvider({"compiler_name": "gcc", "compiler_version": "v13"})

    segments = resolve(parse_template("$symbol$compiler_name"), meta, styles, values)

    assert values.asked == ["compiler_name"]
    assert [s.text for s in segments] == ["C ", "gcc"]


def test_each_variable_resolved_once_per_pass():
    values = CountingProvider({"compiler_name": "gcc"})

    segments = resolve(parse_template("$compiler_name/$compiler_name"), value_fn=values)

    assert values.asked == ["compiler_name"]
    assert [s.text for s in segments] == ["gcc", "/", "gcc"]


def test_chain_order_meta_before_style_before_value():
    asked = []

    def first(name):
        asked.append("meta")
        return None

    def second(name):
        asked.append("style")
        return None

    def third(name):
        asked.append("value")
        return Resolution.ok("x")

    resolve(parse_template("$v"), first, second, third)
    assert asked == ["meta", "style", "value"]


def test_first_applicable_provider_wins():
    value_fn = CountingProvider({"symbol": "from values"})
    segments = resolve(parse_template("$symbol"), meta, styles, value_fn)
    assert segments == [ResolvedSegment("C ", None)]
    assert value_fn.asked == []


def test_unknown_variable_renders_empty():
    segments = resolve(parse_template("a$missing b"), meta, styles)
    assert segments == [ResolvedSegment("a", None), ResolvedSegment(" b", None)]


def test_provider_error_aborts_resolution():
    def failing(name):
        if name == "compiler_name":
            return Resolution.fail(ProbeError("cc", "not found in PATH"))
        return None

    with pytest.raises(ProbeError):
        resolve(parse_template("via $symbol $compiler_name"), meta, styles, failing)


def test_error_stops_later_providers():
    later = CountingProvider({"b": "x"})

    def failing(name):
        if name == "a":
            return Resolution.fail(FormatError("boom"))
        return later(name)

    with pytest.raises(FormatError):
        resolve(parse_template("$a $b"), value_fn=failing)
    assert later.asked == []


def test_style_variable_in_text_position_is_an_error():
    with pytest.raises(FormatError, match="is a style"):
        resolve(parse_template("$style"), meta, styles)


def test_text_value_in_style_position_is_parsed():
    def accent(name):
        return Resolution.ok("italic blue") if name == "accent" else None

    segments = resolve(parse_template("[x]($accent)"), value_fn=accent)
    assert segments == [ResolvedSegment("x", Style(fg="blue", italic=True))]


def test_invalid_style_text_is_a_format_error():
    with pytest.raises(FormatError):
        resolve(parse_template("[x](sparkly)"))


def test_nested_styles_inherit_and_override():
    segments = resolve(parse_template("[a [b](blue) c](bold red)"))
    assert segments == [
        ResolvedSegment("a ", Style(fg="red", bold=True)),
        ResolvedSegment("b", Style(fg="blue", bold=True)),
        ResolvedSegment(" c", Style(fg="red", bold=True)),
    ]


def test_style_words_combine_with_style_variable():
    segments = resolve(parse_template("[x]($style underline)"), meta, styles)
    assert segments == [ResolvedSegment("x", Style(fg=149, bold=True, underline=True))]


def test_resolution_is_idempotent():
    template = parse_template("via [$symbol $compiler_name]($style)")
    values = CountingProvider({"compiler_name": "gcc"})

    first = resolve(template, meta, styles, values)
    second = resolve(template, meta, styles, values)

    assert first == second
    assert values.asked == ["compiler_name", "compiler_name"]


def test_resolve_variables_marks_unresolved():
    values = resolve_variables(parse_template("$symbol $nope"), [meta])
    assert values == {"symbol": "C ", "nope": UNRESOLVED}


def test_resolve_name_raises_provider_error():
    error = FormatError("bad")
    with pytest.raises(FormatError):
        resolve_name("x", [lambda name: Resolution.fail(error)])


def test_resolution_attempt_captures_errors():
    def boom():
        raise ProbeError("cc", "exited with status 1")

    resolution = Resolution.attempt(boom)
    assert isinstance(resolution.error, ProbeError)
    assert Resolution.attempt(lambda: "ok") == Resolution.ok("ok")


class TestStringFormatter:
    def test_fluent_registration(self):
        segments = (
            StringFormatter("via [$symbol]($style)")
            .map_meta(lambda var: "C " if var == "symbol" else None)
            .map_style(styles)
            .parse()
        )
        assert segments == [ResolvedSegment("via ", None), ResolvedSegment("C ", BOLD_149)]

    def test_value_providers_tried_in_registration_order(self):
        first = CountingProvider({"a": "1"})
        second = CountingProvider({"a": "2", "b": "3"})

        text = StringFormatter("$a$b").map(first).map(second).render_plain()

        assert text == "13"
        assert first.asked == ["a", "b"]
        assert second.asked == ["b"]

    def test_parse_errors_surface_at_construction(self):
        with pytest.raises(FormatError):
            StringFormatter("[oops")
