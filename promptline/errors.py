"""Promptline exception hierarchy with exit codes."""

from typing import Optional

# Exit code constants
EXIT_SUCCESS = 0  # Operation succeeded
EXIT_ERROR = 1  # Generic error / failure
EXIT_USAGE = 5  # Invalid usage / arguments

FORMAT_ERROR_KINDS = ("parse", "version", "style", "resolve")


class PromptlineError(Exception):
    """Base exception for all Promptline errors."""

    def __init__(self, message: str, exit_code: int = EXIT_ERROR):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class ConfigError(PromptlineError):
    """Configuration errors (unreadable file, malformed sections)."""

    exit_code = EXIT_ERROR

    def __init__(self, message: str = "Configuration error"):
        super().__init__(message, exit_code=self.exit_code)


class UserInputError(PromptlineError):
    """Invalid CLI usage / arguments."""

    exit_code = EXIT_USAGE

    def __init__(self, message: str = "Invalid arguments"):
        super().__init__(message, exit_code=self.exit_code)


class FormatError(PromptlineError):
    """
    Template, style or version formatting failure.

    Module-local: the segment builder downgrades it to an absent segment.

    Attributes:
        kind: One of "parse", "version", "style", "resolve"
        column: Zero-based offset into the template text, when known
    """

    def __init__(self, message: str, kind: str = "resolve", column: Optional[int] = None):
        if kind not in FORMAT_ERROR_KINDS:
            raise ValueError(f"Unknown format error kind: {kind}")
        super().__init__(message)
        self.kind = kind
        self.column = column

    @classmethod
    def parse_error(cls, message: str, column: int) -> "FormatError":
        """Build a template parse error pointing at a column."""
        return cls(f"{message} (at column {column})", kind="parse", column=column)

    @classmethod
    def version_error(cls, raw: str) -> "FormatError":
        """Build an error for text that is not a version number."""
        return cls(f"Cannot parse version: {raw!r}", kind="version")


class ProbeError(PromptlineError):
    """External command missing, failed, timed out or produced undecodable output."""

    def __init__(self, command: str, reason: str):
        super().__init__(f"Command `{command}` failed: {reason}")
        self.command = command
        self.reason = reason
