"""JSON renderer with stable schema and versioning."""

import json

from promptline.segment import ModuleResult

JSON_VERSION = 1


def render_module_json(result: ModuleResult) -> str:
    """
    Render a module result as JSON.

    Schema version 1:
      {
        "command": "module",
        "version": 1,
        "module": "c",
        "state": "rendered",
        "segments": [ {"text": ..., "style": ...} ] | null,
        "error": null
      }

    Styles are rendered as style strings ("bold fg:149"), null if unstyled.

    Args:
        result: ModuleResult to render

    Returns:
        JSON string with stable key ordering
    """
    segments = None
    if result.segments is not None:
        segments = [
            {
                "text": segment.text,
                "style": segment.style.describe() if segment.style is not None else None,
            }
            for segment in result.segments
        ]

    output = {
        "command": "module",
        "version": JSON_VERSION,
        "module": result.name,
        "state": result.state.value,
        "segments": segments,
        "error": result.error,
    }
    return json.dumps(output, sort_keys=True)
