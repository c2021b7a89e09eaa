"""Text renderer for prompt segments."""

import logging
from typing import Iterable, Optional

from promptline.context import Context
from promptline.formatter import ResolvedSegment
from promptline.modules import get_module, run_module
from promptline.segment import ModuleResult

logger = logging.getLogger(__name__)


def render_segments(segments: Iterable[ResolvedSegment], color: bool = True) -> str:
    """
    Join segments into one string.

    Args:
        segments: Segments in display order
        color: Paint styled segments with ANSI codes

    Returns:
        Rendered text
    """
    parts = []
    for segment in segments:
        if color and segment.style is not None:
            parts.append(segment.style.paint(segment.text))
        else:
            parts.append(segment.text)
    return "".join(parts)


def render_module(result: ModuleResult, color: bool = True) -> Optional[str]:
    """Render one module result, or None if the module is absent."""
    if result.is_absent:
        return None
    return render_segments(result.segments or [], color=color)


def render_prompt(context: Context, names: Iterable[str], color: bool = True) -> str:
    """
    Render several modules in order.

    Modules that produce no segments are skipped, as are unknown names,
    so the rest of the prompt still renders.

    Args:
        context: Shared redraw context
        names: Module names in display order
        color: Paint styled segments with ANSI codes

    Returns:
        Concatenated output of every module that produced segments
    """
    parts = []
    for name in names:
        module = get_module(name)
        if module is None:
            logger.warning(f"Unknown module `{name}`")
            continue
        rendered = render_module(run_module(name, module, context), color=color)
        if rendered is not None:
            parts.append(rendered)
    return "".join(parts)
