"""Test fixtures and utilities."""

from pathlib import Path
from typing import Callable, Optional, Sequence

import click.testing
import pytest

from promptline.config import PromptConfig
from promptline.context import Context
from promptline.errors import ProbeError
from promptline.probes.tools import CommandOutput


class StubRunner:
    """
    Deterministic CommandRunner.

    Maps "name arg1 arg2" to stdout; unknown commands fail like a missing
    binary. Every call is recorded.
    """

    def __init__(self, outputs: Optional[dict[str, str]] = None, fail: bool = False):
        self.outputs = outputs or {}
        self.fail = fail
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    def exec(self, name: str, args: Sequence[str]) -> CommandOutput:
        self.calls.append((name, tuple(args)))
        key = " ".join([name, *args])
        if self.fail or key not in self.outputs:
            raise ProbeError(name, "not found in PATH")
        return CommandOutput(stdout=self.outputs[key])

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture
def stub_runner() -> StubRunner:
    """Runner that knows a gcc-flavoured `cc`."""
    return StubRunner(
        {
            "cc --version": "cc (GCC) 13.2.1\nCopyright (C) 2023 Free Software Foundation, Inc.\n",
            "cc -dumpversion": "13.2.1\n",
        }
    )


@pytest.fixture
def make_dir(tmp_path: Path) -> Callable[..., Path]:
    """Create a directory holding the given files (and sub-directories ending in '/')."""

    def _make(*names: str) -> Path:
        for name in names:
            if name.endswith("/"):
                (tmp_path / name).mkdir(parents=True, exist_ok=True)
            else:
                (tmp_path / name).touch()
        return tmp_path

    return _make


@pytest.fixture
def make_context() -> Callable[..., Context]:
    """Build a Context with a [c] section and a stub runner."""

    def _make(path: Path, runner: StubRunner, **c_options: str) -> Context:
        config = PromptConfig(modules={"c": dict(c_options)} if c_options else {})
        return Context(current_dir=path, config=config, runner=runner)

    return _make


@pytest.fixture
def runner() -> click.testing.CliRunner:
    """Click CliRunner for testing CLI commands."""
    return click.testing.CliRunner()


@pytest.fixture
def stub_runner_factory() -> type[StubRunner]:
    """The StubRunner class, for tests that need custom outputs."""
    return StubRunner
