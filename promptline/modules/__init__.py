"""Prompt modules."""

import logging
from typing import Callable, Optional

from promptline.context import Context
from promptline.modules import c
from promptline.segment import ModuleResult

logger = logging.getLogger(__name__)

Module = Callable[[Context], ModuleResult]

MODULES: dict[str, Module] = {
    c.NAME: c.module,
}


def get_module(name: str) -> Optional[Module]:
    """Look up a registered module by name."""
    return MODULES.get(name)


def run_module(name: str, module: Module, context: Context) -> ModuleResult:
    """
    Evaluate a module, turning any error into a failed result.

    A broken module (bad config value, failing command) must not take the
    rest of the prompt down with it.

    Args:
        name: Module name, for logging
        module: Registered module function
        context: Shared redraw context

    Returns:
        The module's result, or a FAILED result with no segments
    """
    try:
        return module(context)
    except Exception as e:
        logger.warning(f"Error in module `{name}`:\n{e}")
        return ModuleResult.failed(name, str(e))
