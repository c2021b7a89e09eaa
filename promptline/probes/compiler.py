"""C compiler probes."""

import logging

from promptline.probes.tools import CommandRunner, probe

logger = logging.getLogger(__name__)

DEFAULT_COMPILER = "cc"
UNKNOWN_COMPILER = "Unknown compiler"

# (banner substring, compiler) checked top to bottom, first match wins
COMPILER_RULES: tuple[tuple[str, str], ...] = (
    ("clang", "clang"),
    ("Free Software Foundation", "gcc"),
)


def classify_compiler(banner: str) -> str:
    """
    Name the compiler family that printed a --version banner.

    Args:
        banner: stdout of `<compiler> --version`

    Returns:
        "clang", "gcc" or UNKNOWN_COMPILER
    """
    for needle, identity in COMPILER_RULES:
        if needle in banner:
            return identity
    return UNKNOWN_COMPILER


def compiler_name(runner: CommandRunner, command: str = DEFAULT_COMPILER) -> str:
    """Identify the compiler behind command."""
    name = classify_compiler(probe(runner, command, ["--version"]))
    logger.debug(f"Compiler `{command}` identified as {name}")
    return name


def compiler_version(runner: CommandRunner, command: str = DEFAULT_COMPILER) -> str:
    """Raw compiler version; -dumpversion works for both gcc and clang."""
    return probe(runner, command, ["-dumpversion"]).strip()
