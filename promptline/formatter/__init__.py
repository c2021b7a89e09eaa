"""Format strings: parsing, lazy resolution and styles."""

from typing import Callable, Optional

from promptline.formatter.resolver import Provider, ResolvedSegment, Resolution, resolve
from promptline.formatter.style import Style
from promptline.formatter.template import Template, parse_template


class StringFormatter:
    """
    Parse a format string once, then resolve it through registered providers.

    Usage:
        segments = (
            StringFormatter("via [$symbol]($style)")
            .map_meta(lambda var: "C " if var == "symbol" else None)
            .map_style(lambda var: Resolution.ok(style) if var == "style" else None)
            .parse()
        )
    """

    def __init__(self, format_text: str):
        self.template: Template = parse_template(format_text)
        self._meta: list[Callable[[str], Optional[str]]] = []
        self._styles: list[Provider] = []
        self._values: list[Provider] = []

    def map_meta(self, provider: Callable[[str], Optional[str]]) -> "StringFormatter":
        """Register a provider of static text values."""
        self._meta.append(provider)
        return self

    def map_style(self, provider: Provider) -> "StringFormatter":
        """Register a provider of style values."""
        self._styles.append(provider)
        return self

    def map(self, provider: Provider) -> "StringFormatter":
        """Register a provider of computed values; tried in registration order."""
        self._values.append(provider)
        return self

    def _meta_fn(self, name: str) -> Optional[Resolution]:
        for provider in self._meta:
            value = provider(name)
            if value is not None:
                return Resolution.ok(value)
        return None

    @staticmethod
    def _chain(providers: list[Provider]) -> Provider:
        def chained(name: str) -> Optional[Resolution]:
            for provider in providers:
                resolution = provider(name)
                if resolution is not None:
                    return resolution
            return None

        return chained

    def parse(self) -> list[ResolvedSegment]:
        """Resolve the template. Raises whatever error aborted resolution."""
        return resolve(
            self.template,
            meta_fn=self._meta_fn,
            style_fn=self._chain(self._styles),
            value_fn=self._chain(self._values),
        )

    def render_plain(self) -> str:
        """Resolve and join segment text, dropping styles."""
        return "".join(segment.text for segment in self.parse())


__all__ = [
    "ResolvedSegment",
    "Resolution",
    "StringFormatter",
    "Style",
    "Template",
    "parse_template",
    "resolve",
]
