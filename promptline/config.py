"""Configuration loader."""

import configparser
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from promptline.detection import DetectionSpec
from promptline.errors import ConfigError
from promptline.formatter.version import VersionSpec
from promptline.probes.tools import DEFAULT_COMMAND_TIMEOUT

DEFAULT_CONFIG_DIR_NAME = "promptline"
DEFAULT_CONFIG_FILE_NAME = "config"

logger = logging.getLogger(__name__)


@dataclass
class PromptConfig:
    """Promptline configuration."""

    command_timeout: Optional[float] = DEFAULT_COMMAND_TIMEOUT
    modules: dict[str, dict[str, str]] = field(default_factory=dict)
    config_path: Optional[Path] = None

    def module_options(self, name: str) -> dict[str, str]:
        """Raw options of one module's section (empty if absent)."""
        return self.modules.get(name, {})

    def is_disabled(self, name: str) -> bool:
        return parse_bool(self.module_options(name).get("disabled", ""))


@dataclass(frozen=True)
class CConfig:
    """Options of the `c` module."""

    format: str = "via [$symbol]($style)"
    symbol: str = "C "
    style: str = "149 bold"
    version_format: VersionSpec = VersionSpec(template="v${raw}")
    detect_extensions: frozenset[str] = frozenset({"c", "h"})
    detect_files: frozenset[str] = frozenset()
    detect_folders: frozenset[str] = frozenset()
    compiler: str = "cc"

    @property
    def detection(self) -> DetectionSpec:
        return DetectionSpec(
            extensions=self.detect_extensions,
            filenames=self.detect_files,
            foldernames=self.detect_folders,
        )

    @classmethod
    def from_options(cls, options: dict[str, str]) -> "CConfig":
        """
        Build from a config section; missing keys keep their defaults.

        Args:
            options: Raw key/value pairs of the [c] section
        """
        defaults = cls()
        return cls(
            format=_option_str(options, "format", defaults.format),
            symbol=_option_str(options, "symbol", defaults.symbol),
            style=_option_str(options, "style", defaults.style),
            version_format=(
                VersionSpec.parse(unquote(options["version_format"]))
                if "version_format" in options
                else defaults.version_format
            ),
            detect_extensions=_option_set(options, "detect_extensions", defaults.detect_extensions),
            detect_files=_option_set(options, "detect_files", defaults.detect_files),
            detect_folders=_option_set(options, "detect_folders", defaults.detect_folders),
            compiler=_option_str(options, "compiler", defaults.compiler),
        )


def parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def unquote(value: str) -> str:
    """Strip one pair of matching quotes, keeping inner whitespace ('"C "' -> 'C ')."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def parse_list(value: str) -> list[str]:
    """
    Parse a comma-separated option.

    Args:
        value: Comma-separated string (e.g., "c, h")

    Returns:
        Non-empty trimmed items, surrounding quotes removed
    """
    if not value:
        return []
    items = [item.strip().strip("\"'") for item in value.split(",")]
    return [item for item in items if item]


def _option_set(options: dict[str, str], key: str, default: frozenset[str]) -> frozenset[str]:
    if key not in options:
        return default
    return frozenset(parse_list(options[key]))


def _option_str(options: dict[str, str], key: str, default: str) -> str:
    if key not in options:
        return default
    return unquote(options[key])


def _parse_timeout(value: str, source: str) -> Optional[float]:
    """Parse a timeout in milliseconds; 0 disables the timeout."""
    try:
        millis = int(value)
    except ValueError:
        logger.warning(f"Invalid {source} value, using default: {DEFAULT_COMMAND_TIMEOUT}s")
        return DEFAULT_COMMAND_TIMEOUT
    if millis < 0:
        logger.warning(f"{source} must be >=0, using default: {DEFAULT_COMMAND_TIMEOUT}s")
        return DEFAULT_COMMAND_TIMEOUT
    if millis == 0:
        return None
    return millis / 1000


def default_config_path() -> Path:
    """
    Resolve the config file location.

    Order: $PROMPTLINE_CONFIG, $XDG_CONFIG_HOME/promptline/config,
    ~/.config/promptline/config.
    """
    explicit = os.environ.get("PROMPTLINE_CONFIG")
    if explicit:
        return Path(explicit).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / DEFAULT_CONFIG_DIR_NAME / DEFAULT_CONFIG_FILE_NAME


def _parse_config_file(config_path: Path) -> tuple[dict[str, str], dict[str, dict[str, str]]]:
    """
    Parse INI-style config file.

    Returns:
        (DEFAULT section values, per-section values); empty if file is missing

    Raises:
        ConfigError: If the file exists but cannot be parsed
    """
    if not config_path.exists():
        return {}, {}

    # [DEFAULT] holds global settings and must not leak into module sections
    parser = configparser.ConfigParser(interpolation=None, default_section="__none__")
    try:
        parser.read(config_path, encoding="utf-8")
    except (configparser.Error, UnicodeDecodeError, OSError) as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    sections: dict[str, dict[str, str]] = {}
    for section in parser.sections():
        sections[section.lower()] = dict(parser.items(section))
    defaults = sections.pop("default", {})
    return defaults, sections


def get_config(config_path: Optional[Path] = None) -> PromptConfig:
    """
    Get current configuration.

    Resolves from:
    1. Config file (see default_config_path)
    2. Environment variables (PROMPTLINE_COMMAND_TIMEOUT)

    Args:
        config_path: Explicit file to read instead of the default location

    Returns:
        PromptConfig with global settings and raw per-module options

    Raises:
        ConfigError: If the config file is malformed
    """
    path = config_path or default_config_path()
    defaults, sections = _parse_config_file(path)

    command_timeout: Optional[float] = DEFAULT_COMMAND_TIMEOUT
    timeout_str = os.environ.get("PROMPTLINE_COMMAND_TIMEOUT") or defaults.get("command_timeout")
    if timeout_str:
        command_timeout = _parse_timeout(timeout_str, "command_timeout")

    logger.debug(f"Config path: {path}")
    logger.debug(f"Command timeout: {command_timeout}")
    logger.debug(f"Module sections: {list(sections.keys())}")

    return PromptConfig(
        command_timeout=command_timeout,
        modules=sections,
        config_path=path,
    )
