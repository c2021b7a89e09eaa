"""Style handles for rendered segments."""

import re
from dataclasses import dataclass, fields, replace
from typing import Optional, Union

import click

from promptline.errors import FormatError

Color = Union[str, int, tuple[int, int, int]]

# Style words -> Style attribute
_ATTRIBUTES = {
    "bold": "bold",
    "dimmed": "dim",
    "italic": "italic",
    "underline": "underline",
    "blink": "blink",
    "inverted": "reverse",
    "strikethrough": "strikethrough",
    "hidden": "hidden",
}

_NAMED_COLORS = {
    "black": "black",
    "red": "red",
    "green": "green",
    "yellow": "yellow",
    "blue": "blue",
    "purple": "magenta",
    "magenta": "magenta",
    "cyan": "cyan",
    "white": "white",
}

_HEX_COLOR = re.compile(r"^#([0-9a-fA-F]{6})$")


def parse_color(text: str) -> Color:
    """
    Parse a color word into something click.style accepts.

    Accepts named colors ("red", "bright-blue"), 256-color indexes ("149")
    and "#rrggbb".

    Raises:
        FormatError: If the word is not a color
    """
    lowered = text.lower()
    if lowered in _NAMED_COLORS:
        return _NAMED_COLORS[lowered]
    if lowered.startswith("bright-") and lowered[len("bright-") :] in _NAMED_COLORS:
        return "bright_" + _NAMED_COLORS[lowered[len("bright-") :]]
    if lowered.isascii() and lowered.isdecimal():
        index = int(lowered)
        if 0 <= index <= 255:
            return index
    match = _HEX_COLOR.match(text)
    if match:
        value = match.group(1)
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))
    raise FormatError(f"Invalid color: {text!r}", kind="style")


@dataclass(frozen=True)
class Style:
    """
    Terminal style of one segment.

    Unset attributes (None) inherit from an enclosing style when merged.
    """

    fg: Optional[Color] = None
    bg: Optional[Color] = None
    bold: Optional[bool] = None
    dim: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    blink: Optional[bool] = None
    reverse: Optional[bool] = None
    strikethrough: Optional[bool] = None
    hidden: Optional[bool] = None

    @classmethod
    def parse(cls, text: str) -> "Style":
        """
        Parse a style string such as "bold fg:149" or "149 bold".

        Words are applied left to right; "none" resets everything seen so far.

        Raises:
            FormatError: On an unknown word or color
        """
        style = cls()
        for word in text.split():
            lowered = word.lower()
            if lowered == "none":
                style = cls()
            elif lowered in _ATTRIBUTES:
                style = replace(style, **{_ATTRIBUTES[lowered]: True})
            elif lowered[:3] in ("fg:", "fg=", "bg:", "bg="):
                target = lowered[:2]
                color_text = word[3:]
                if color_text.lower() == "none":
                    style = replace(style, **{target: None})
                else:
                    style = replace(style, **{target: parse_color(color_text)})
            else:
                style = replace(style, fg=parse_color(word))
        return style

    def merge(self, inner: Optional["Style"]) -> "Style":
        """Return this style overridden by every attribute inner sets."""
        if inner is None:
            return self
        overrides = {
            f.name: getattr(inner, f.name)
            for f in fields(inner)
            if getattr(inner, f.name) is not None
        }
        return replace(self, **overrides)

    @property
    def is_plain(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def paint(self, text: str) -> str:
        """Render text with ANSI codes via click.style."""
        if self.is_plain:
            return text
        if self.hidden:
            return " " * len(text)
        return click.style(
            text,
            fg=self.fg,
            bg=self.bg,
            bold=self.bold,
            dim=self.dim,
            italic=self.italic,
            underline=self.underline,
            blink=self.blink,
            reverse=self.reverse,
            strikethrough=self.strikethrough,
        )

    def describe(self) -> str:
        """Style string that parses back to this style."""
        words = [word for word, attr in _ATTRIBUTES.items() if getattr(self, attr)]
        for prefix, color in (("fg", self.fg), ("bg", self.bg)):
            if color is None:
                continue
            if isinstance(color, tuple):
                value = "#" + "".join(f"{part:02x}" for part in color)
            else:
                value = str(color).replace("_", "-")
            words.append(f"{prefix}:{value}")
        return " ".join(words)
