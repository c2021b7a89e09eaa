"""The `c` module: C compiler name and version."""

from typing import Optional

from promptline.config import CConfig
from promptline.context import Context
from promptline.formatter import ResolvedSegment, Resolution, StringFormatter, Style
from promptline.formatter.version import format_module_version
from promptline.probes.compiler import compiler_name, compiler_version
from promptline.segment import ModuleResult, SegmentBuilder

NAME = "c"


def render(context: Context, config: CConfig) -> list[ResolvedSegment]:
    """
    Render the module's format string.

    Compiler variables are only probed when the format references them.

    Raises:
        FormatError: Malformed format, style or compiler version
        ProbeError: The compiler could not be run
    """
    formatter = StringFormatter(config.format)
    template = formatter.template

    def meta(variable: str) -> Optional[str]:
        if variable == "symbol":
            return config.symbol
        return None

    def styles(variable: str) -> Optional[Resolution]:
        if variable == "style":
            return Resolution.attempt(lambda: Style.parse(config.style))
        return None

    def name_value(variable: str) -> Optional[Resolution]:
        if variable == "compiler_name" and template.references(variable):
            return Resolution.attempt(lambda: compiler_name(context, config.compiler))
        return None

    def version_value(variable: str) -> Optional[Resolution]:
        if variable == "compiler_version" and template.references(variable):
            return Resolution.attempt(
                lambda: format_module_version(
                    NAME,
                    compiler_version(context, config.compiler),
                    config.version_format,
                )
            )
        return None

    return formatter.map_meta(meta).map_style(styles).map(name_value).map(version_value).parse()


def module(context: Context) -> ModuleResult:
    """Evaluate the `c` module for the context's directory."""
    if context.config.is_disabled(NAME):
        return ModuleResult.absent(NAME)
    config = CConfig.from_options(context.config.module_options(NAME))
    return SegmentBuilder(NAME, config.detection, lambda ctx: render(ctx, config)).build(context)
