"""Test renderer functions in isolation."""

import json
import logging
from pathlib import Path

import click

from promptline.context import Context
from promptline.formatter import ResolvedSegment, Style
from promptline.modules import MODULES, run_module
from promptline.render.json import render_module_json
from promptline.render.text import render_module, render_prompt, render_segments
from promptline.segment import ModuleResult, ModuleState

SEGMENTS = [ResolvedSegment("via ", None), ResolvedSegment("C ", Style(fg=149, bold=True))]


def test_render_segments_color():
    assert render_segments(SEGMENTS) == "via " + click.style("C ", fg=149, bold=True)


def test_render_segments_no_color():
    assert render_segments(SEGMENTS, color=False) == "via C "


def test_render_module_absent():
    result = ModuleResult(name="c", state=ModuleState.NO_MATCH)
    assert render_module(result) is None


def test_render_module_rendered():
    result = ModuleResult(name="c", state=ModuleState.RENDERED, segments=SEGMENTS)
    assert render_module(result, color=False) == "via C "


def test_render_prompt_skips_absent_and_unknown(tmp_path, stub_runner, caplog):
    context = Context(current_dir=tmp_path, runner=stub_runner)
    with caplog.at_level(logging.WARNING):
        output = render_prompt(context, ["nope", "c"], color=False)
    assert output == ""
    assert "Unknown module `nope`" in caplog.text


def test_render_prompt_renders_matching_module(tmp_path, stub_runner):
    (tmp_path / "main.c").touch()
    context = Context(current_dir=tmp_path, runner=stub_runner)
    assert render_prompt(context, ["c"], color=False) == "via C "


def test_render_prompt_survives_failing_module(tmp_path, stub_runner_factory):
    from promptline.config import PromptConfig

    (tmp_path / "main.c").touch()
    config = PromptConfig(modules={"c": {"format": "$compiler_name"}})
    context = Context(current_dir=tmp_path, config=config, runner=stub_runner_factory(fail=True))
    assert render_prompt(context, ["c"], color=False) == ""


def test_render_prompt_survives_module_crash(tmp_path, stub_runner, monkeypatch, caplog):
    def broken(context):
        raise ValueError("invalid literal for int() with base 10: '²'")

    monkeypatch.setitem(MODULES, "broken", broken)
    (tmp_path / "main.c").touch()
    context = Context(current_dir=tmp_path, runner=stub_runner)

    with caplog.at_level(logging.WARNING):
        output = render_prompt(context, ["broken", "c"], color=False)

    assert output == "via C "
    assert "Error in module `broken`" in caplog.text


def test_render_prompt_with_superscript_version_format(tmp_path, stub_runner):
    from promptline.config import PromptConfig

    (tmp_path / "main.c").touch()
    config = PromptConfig(
        modules={"c": {"format": "$compiler_version ", "version_format": "²"}}
    )
    context = Context(current_dir=tmp_path, config=config, runner=stub_runner)
    assert render_prompt(context, ["c"], color=False) == "² "


def test_run_module_turns_errors_into_failed_result():
    def broken(context):
        raise KeyError("bug")

    result = run_module("broken", broken, Context(current_dir=Path(".")))

    assert result.state == ModuleState.FAILED
    assert result.is_absent
    assert "bug" in result.error


def test_render_module_json_rendered():
    result = ModuleResult(name="c", state=ModuleState.RENDERED, segments=SEGMENTS)

    data = json.loads(render_module_json(result))

    assert data == {
        "command": "module",
        "version": 1,
        "module": "c",
        "state": "rendered",
        "segments": [
            {"text": "via ", "style": None},
            {"text": "C ", "style": "bold fg:149"},
        ],
        "error": None,
    }


def test_render_module_json_failed():
    result = ModuleResult(name="c", state=ModuleState.FAILED, error="Command `cc` failed")

    data = json.loads(render_module_json(result))

    assert data["segments"] is None
    assert data["state"] == "failed"
    assert data["error"] == "Command `cc` failed"
