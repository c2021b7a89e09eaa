"""Promptline CLI entrypoint."""

import os
import sys
from pathlib import Path
from typing import Optional

import click

from promptline.config import get_config
from promptline.context import Context
from promptline.errors import EXIT_USAGE, ConfigError
from promptline.logging import get_logger, setup_logging
from promptline.modules import MODULES, get_module, run_module
from promptline.render.colors import echo_error, echo_warning, should_color

logger = get_logger(__name__)


def _current_dir(path: Optional[Path]) -> Path:
    """
    Resolve the directory to render for.

    A shell can sit in a directory that was deleted; os.getcwd() then fails.
    Fall back to $PWD unresolved, whose listing fails too, so every module is
    absent instead of the prompt erroring out.
    """
    try:
        return (path or Path.cwd()).resolve()
    except OSError as e:
        logger.debug(f"Cannot resolve current directory: {e}")
        return path or Path(os.environ.get("PWD") or os.curdir)


def _load_context(path: Optional[Path], config_file: Optional[Path]) -> Context:
    try:
        config = get_config(config_file)
    except ConfigError as e:
        echo_error(e.message)
        sys.exit(e.exit_code)
    return Context(current_dir=_current_dir(path), config=config)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.version_option(package_name="promptline")
def promptline(verbose: bool) -> None:
    """Promptline - shell prompt segments."""
    setup_logging(verbose=verbose)


@promptline.command()
@click.argument("name")
@click.option(
    "--path",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to render for (default: current directory)",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: $PROMPTLINE_CONFIG or ~/.config/promptline/config)",
)
@click.option("--json", "json_output", is_flag=True, help="JSON output")
@click.option("--no-color", is_flag=True, help="Disable ANSI styling")
def module(
    name: str,
    path: Optional[Path],
    config_file: Optional[Path],
    json_output: bool,
    no_color: bool,
) -> None:
    """
    Render a single module.

    Prints nothing when the module does not apply to the directory or fails;
    failures are logged to stderr and the exit code stays 0.
    """
    from promptline.render.json import render_module_json
    from promptline.render.text import render_module

    module_fn = get_module(name)
    if module_fn is None:
        echo_error(f"Unknown module: {name}")
        sys.exit(EXIT_USAGE)

    context = _load_context(path, config_file)
    result = run_module(name, module_fn, context)

    if json_output:
        click.echo(render_module_json(result))
        return

    rendered = render_module(result, color=should_color() and not no_color)
    if rendered is not None:
        click.echo(rendered, nl=False)


@promptline.command()
@click.argument("names", nargs=-1)
@click.option(
    "--path",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to render for (default: current directory)",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file",
)
@click.option("--no-color", is_flag=True, help="Disable ANSI styling")
def prompt(
    names: tuple[str, ...],
    path: Optional[Path],
    config_file: Optional[Path],
    no_color: bool,
) -> None:
    """Render several modules in order (default: all registered modules)."""
    from promptline.render.text import render_prompt

    selected = []
    for name in names or MODULES:
        if get_module(name) is None:
            echo_warning(f"Unknown module: {name}")
            continue
        selected.append(name)

    context = _load_context(path, config_file)
    logger.debug(f"Rendering modules: {selected}")
    click.echo(render_prompt(context, selected, color=should_color() and not no_color), nl=False)


@promptline.command(name="modules")
def list_modules() -> None:
    """List registered modules."""
    for name in sorted(MODULES):
        click.echo(name)


def main() -> None:
    promptline()


if __name__ == "__main__":
    main()
