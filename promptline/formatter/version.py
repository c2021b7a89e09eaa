"""Version string normalization."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from promptline.errors import FormatError
from promptline.formatter import Resolution, StringFormatter

logger = logging.getLogger(__name__)

DEFAULT_VERSION_TEMPLATE = "${raw}"

# Leading numeric components separated by "." or "-", then anything
_VERSION = re.compile(r"^v?(\d+(?:[.-]\d+)*)(.*)$", re.DOTALL)
_COMPONENT = re.compile(r"\d+")


@dataclass(frozen=True)
class VersionSpec:
    """
    How a version is displayed.

    Attributes:
        template: Format string over $raw, $major, $minor, $patch
        components: Keep only this many leading numeric components in $raw
    """

    template: str = DEFAULT_VERSION_TEMPLATE
    components: Optional[int] = None

    def __post_init__(self) -> None:
        if self.components is not None and self.components < 1:
            raise FormatError(
                f"Version component count must be at least 1, got {self.components}",
                kind="version",
            )

    @classmethod
    def parse(cls, text: str) -> "VersionSpec":
        """
        Build a VersionSpec from a configuration value.

        A bare positive integer ("2") sets the component count, anything
        else is a template ("v${raw}").
        """
        stripped = text.strip()
        if stripped.isascii() and stripped.isdecimal() and int(stripped) > 0:
            return cls(components=int(stripped))
        return cls(template=text)


@dataclass(frozen=True)
class ParsedVersion:
    text: str
    components: tuple[str, ...]
    # End offset in text of each component
    ends: tuple[int, ...]

    def truncated(self, count: Optional[int]) -> str:
        if count is None or count > len(self.components):
            return self.text
        return self.text[: self.ends[count - 1]]

    def component(self, index: int) -> str:
        if index < len(self.components):
            return self.components[index]
        return ""


def parse_version(raw: str) -> ParsedVersion:
    """
    Split a loosely formatted version into numeric components.

    Examples:
        "3.1.0-suffix" -> components ("3", "1", "0")
        "v12" -> components ("12",), text "12"

    Raises:
        FormatError: If the text does not start with a number
    """
    text = raw.strip()
    match = _VERSION.match(text)
    if not match:
        raise FormatError.version_error(raw)
    found = list(_COMPONENT.finditer(match.group(1)))
    return ParsedVersion(
        text=text[match.start(1) :],
        components=tuple(m.group(0) for m in found),
        ends=tuple(m.end() for m in found),
    )


def format_version(raw: str, spec: VersionSpec = VersionSpec()) -> str:
    """
    Normalize a raw version string for display.

    With spec.components = n, $raw keeps the first n components
    ("3.1.0-suffix" -> "3.1"); if the version has fewer than n components
    the trimmed input is used unaltered.

    Args:
        raw: Version text as printed by a tool
        spec: Display precision and template

    Returns:
        Formatted version

    Raises:
        FormatError: If raw is not a version or the template is malformed
    """
    parsed = parse_version(raw)
    values = {
        "raw": parsed.truncated(spec.components),
        "major": parsed.component(0),
        "minor": parsed.component(1),
        "patch": parsed.component(2),
    }

    def version_values(name: str) -> Optional[Resolution]:
        if name in values:
            return Resolution.ok(values[name])
        return None

    return StringFormatter(spec.template).map(version_values).render_plain()


def format_module_version(module_name: str, raw: str, spec: VersionSpec) -> str:
    """Format a version for a module, logging which module it failed for."""
    try:
        return format_version(raw, spec)
    except FormatError as e:
        logger.warning(f"Error formatting `{module_name}` version:\n{e}")
        raise
