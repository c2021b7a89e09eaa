"""Lazy template resolution.

Resolution runs in two explicit steps over an already parsed Template:

1. ``resolve_variables`` asks the provider chain (meta, then style, then
   value) for every variable name the template references, once per name.
   Names the template does not mention are never passed to any provider,
   so a provider that spawns a process only does so when its variable is
   on screen.
2. ``assemble`` walks the token tree and turns literals and resolved values
   into styled segments.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from promptline.errors import FormatError, PromptlineError
from promptline.formatter.style import Style
from promptline.formatter.template import (
    Literal,
    StyleExpr,
    StyleScope,
    Template,
    Token,
    Variable,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """
    Answer of a provider that applies to a variable.

    Providers return None when the variable is not theirs.
    """

    value: Any = None
    error: Optional[PromptlineError] = None

    @classmethod
    def ok(cls, value: Any) -> "Resolution":
        return cls(value=value)

    @classmethod
    def fail(cls, error: PromptlineError) -> "Resolution":
        return cls(error=error)

    @classmethod
    def attempt(cls, compute: Callable[[], Any]) -> "Resolution":
        """Run compute, capturing a Promptline error as a failed resolution."""
        try:
            return cls.ok(compute())
        except PromptlineError as e:
            return cls.fail(e)


Provider = Callable[[str], Optional[Resolution]]


@dataclass(frozen=True)
class ResolvedSegment:
    """One styled piece of rendered output."""

    text: str
    style: Optional[Style] = None


class _Unresolved:
    def __repr__(self) -> str:
        return "UNRESOLVED"


UNRESOLVED = _Unresolved()


def not_applicable(name: str) -> Optional[Resolution]:
    return None


def resolve_name(name: str, chain: list[Provider]) -> Any:
    """
    Resolve one variable through an ordered provider chain.

    Returns:
        The first applicable provider's value, or UNRESOLVED

    Raises:
        PromptlineError: The first applicable provider's error
    """
    for provider in chain:
        resolution = provider(name)
        if resolution is None:
            continue
        if resolution.error is not None:
            raise resolution.error
        return resolution.value
    return UNRESOLVED


def resolve_variables(template: Template, chain: list[Provider]) -> dict[str, Any]:
    """
    Resolve every variable referenced by template, each exactly once.

    Args:
        template: Parsed template
        chain: Providers in the order they should be asked

    Returns:
        Mapping of variable name to value (UNRESOLVED if no provider applied)
    """
    values: dict[str, Any] = {}
    for name in template.ordered_variables():
        values[name] = resolve_name(name, chain)
        logger.debug(f"Resolved ${name} -> {values[name]!r}")
    return values


def _style_text(value: Any) -> str:
    if value is UNRESOLVED or value is None:
        return ""
    if isinstance(value, Style):
        return value.describe()
    return str(value)


def build_style(expr: StyleExpr, values: dict[str, Any]) -> Style:
    """Turn a scope's style expression into a Style, substituting variables."""
    words = [
        part if isinstance(part, str) else _style_text(values[part.name])
        for part in expr.parts
    ]
    return Style.parse(" ".join(words))


def assemble(
    tokens: tuple[Token, ...],
    values: dict[str, Any],
    style: Optional[Style] = None,
) -> list[ResolvedSegment]:
    """
    Turn tokens into segments using already resolved values.

    Raises:
        FormatError: If a style value is used as text, or a style is invalid
    """
    segments: list[ResolvedSegment] = []
    for token in tokens:
        if isinstance(token, Literal):
            segments.append(ResolvedSegment(token.text, style))
        elif isinstance(token, Variable):
            value = values[token.name]
            if isinstance(value, Style):
                raise FormatError(
                    f"Variable ${token.name} is a style and cannot be rendered as text",
                    kind="resolve",
                )
            if value is UNRESOLVED or value is None or value == "":
                continue
            segments.append(ResolvedSegment(str(value), style))
        elif isinstance(token, StyleScope):
            scope_style = (style or Style()).merge(build_style(token.style, values))
            segments.extend(assemble(token.children, values, scope_style))
    return segments


def resolve(
    template: Template,
    meta_fn: Provider = not_applicable,
    style_fn: Provider = not_applicable,
    value_fn: Provider = not_applicable,
) -> list[ResolvedSegment]:
    """
    Resolve a parsed template into styled segments.

    Each referenced variable is offered to meta_fn, then style_fn, then
    value_fn; the first applicable answer wins. Any provider error aborts
    the whole resolution, so partial output is never returned.

    Args:
        template: Parsed template
        meta_fn: Static values from configuration (e.g. a symbol)
        style_fn: Style values
        value_fn: Computed values, possibly backed by external commands

    Returns:
        Segments in template order (empty for an empty template)

    Raises:
        PromptlineError: FormatError, or whatever a provider failed with
    """
    values = resolve_variables(template, [meta_fn, style_fn, value_fn])
    return assemble(template.tokens, values)
