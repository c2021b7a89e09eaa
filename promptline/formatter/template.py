"""Format string parsing.

A format string is made of:

- literal text
- variables: ``$name`` or ``${name}``
- style scopes: ``[inner text]($style bold)``, which may nest
- the shorthand ``$name(style)``, a style scope around one variable
- escapes: a backslash before one of ``$ [ ] ( ) \\``

Parsing produces an immutable token tree. Nothing is resolved here; the
tree only records which variables are referenced and where.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from promptline.errors import FormatError

_NAME_CHARS = re.compile(r"[A-Za-z0-9_]")
_NAME = re.compile(r"^[A-Za-z0-9_]+$")
_ESCAPABLE = "$[]()\\"


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Variable:
    name: str


@dataclass(frozen=True)
class StyleExpr:
    """Style part of a scope: literal style words and style variables, in order."""

    text: str
    parts: tuple[Union[str, Variable], ...] = ()

    @property
    def variables(self) -> tuple[Variable, ...]:
        return tuple(part for part in self.parts if isinstance(part, Variable))


@dataclass(frozen=True)
class StyleScope:
    style: StyleExpr
    children: tuple["Token", ...] = ()


Token = Union[Literal, Variable, StyleScope]


def iter_variable_names(tokens: tuple[Token, ...]) -> Iterator[str]:
    """Yield referenced variable names in template order (duplicates included)."""
    for token in tokens:
        if isinstance(token, Variable):
            yield token.name
        elif isinstance(token, StyleScope):
            for var in token.style.variables:
                yield var.name
            yield from iter_variable_names(token.children)


@dataclass(frozen=True)
class Template:
    """A parsed format string."""

    text: str
    tokens: tuple[Token, ...] = ()
    variables: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", frozenset(iter_variable_names(self.tokens)))

    def references(self, name: str) -> bool:
        """Check whether the template mentions variable name anywhere."""
        return name in self.variables

    def ordered_variables(self) -> list[str]:
        """Distinct variable names in first-reference order."""
        seen: dict[str, None] = {}
        for name in iter_variable_names(self.tokens):
            seen.setdefault(name, None)
        return list(seen)


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def peek(self) -> Optional[str]:
        if self.pos < len(self.text):
            return self.text[self.pos]
        return None

    def parse(self) -> Template:
        tokens = self.parse_sequence(in_scope=False)
        return Template(text=self.text, tokens=tokens)

    def parse_sequence(self, in_scope: bool) -> tuple[Token, ...]:
        tokens: list[Token] = []
        buffer: list[str] = []

        def flush() -> None:
            if buffer:
                tokens.append(Literal("".join(buffer)))
                buffer.clear()

        while True:
            char = self.peek()
            if char is None:
                if in_scope:
                    raise FormatError.parse_error("Unclosed '['", self.pos)
                break
            if char == "\\":
                buffer.append(self.parse_escape())
            elif char == "$":
                flush()
                tokens.append(self.parse_variable_token())
            elif char == "[":
                flush()
                tokens.append(self.parse_scope())
            elif char == "]":
                if not in_scope:
                    raise FormatError.parse_error("Unmatched ']'", self.pos)
                break
            elif char in "()":
                raise FormatError.parse_error(f"Unexpected {char!r}, escape it as '\\{char}'", self.pos)
            else:
                buffer.append(char)
                self.pos += 1

        flush()
        return tuple(tokens)

    def parse_escape(self) -> str:
        start = self.pos
        self.pos += 1
        char = self.peek()
        if char is None or char not in _ESCAPABLE:
            raise FormatError.parse_error(f"Unknown escape sequence '\\{char or ''}'", start)
        self.pos += 1
        return char

    def parse_name(self) -> str:
        start = self.pos
        self.pos += 1  # "$"
        if self.peek() == "{":
            close = self.text.find("}", self.pos)
            if close == -1:
                raise FormatError.parse_error("Unclosed '${'", start)
            name = self.text[self.pos + 1 : close]
            if not _NAME.match(name):
                raise FormatError.parse_error(f"Invalid variable name {name!r}", start)
            self.pos = close + 1
            return name
        name_start = self.pos
        while self.peek() is not None and _NAME_CHARS.match(self.peek() or ""):
            self.pos += 1
        if self.pos == name_start:
            raise FormatError.parse_error("Expected a variable name after '$'", start)
        return self.text[name_start : self.pos]

    def parse_variable_token(self) -> Token:
        variable = Variable(self.parse_name())
        if self.peek() == "(":
            return StyleScope(style=self.parse_style(), children=(variable,))
        return variable

    def parse_scope(self) -> StyleScope:
        start = self.pos
        self.pos += 1  # "["
        children = self.parse_sequence(in_scope=True)
        self.pos += 1  # "]"
        if self.peek() != "(":
            raise FormatError.parse_error("Style scope '[...]' must be followed by '(style)'", start)
        return StyleScope(style=self.parse_style(), children=children)

    def parse_style(self) -> StyleExpr:
        start = self.pos
        close = self.text.find(")", start)
        if close == -1:
            raise FormatError.parse_error("Unclosed '('", start)
        body = self.text[start + 1 : close]
        if "(" in body:
            raise FormatError.parse_error("Nested '(' in style", start)
        parts: list[Union[str, Variable]] = []
        for word in body.split():
            if word.startswith("$"):
                name = word[2:-1] if word.startswith("${") and word.endswith("}") else word[1:]
                if not _NAME.match(name):
                    raise FormatError.parse_error(f"Invalid style variable {word!r}", start)
                parts.append(Variable(name))
            else:
                parts.append(word)
        self.pos = close + 1
        return StyleExpr(text=body, parts=tuple(parts))


def parse_template(text: str) -> Template:
    """
    Parse a format string into a token tree.

    Args:
        text: Format string, e.g. "via [$symbol]($style)"

    Returns:
        Parsed Template

    Raises:
        FormatError: With kind "parse" for malformed input
    """
    return _Parser(text).parse()
