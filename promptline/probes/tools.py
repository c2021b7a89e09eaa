"""Subprocess execution utilities."""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence

from promptline.errors import ProbeError

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT = 0.5


@dataclass(frozen=True)
class CommandOutput:
    """Captured output of a finished command."""

    stdout: str
    stderr: str = ""


class CommandRunner(Protocol):
    """Anything that can run an external command once and capture its output."""

    def exec(self, name: str, args: Sequence[str]) -> CommandOutput:
        """
        Run name with args.

        Raises:
            ProbeError: If the command cannot run or fails
        """
        ...


def run_command(
    cmd: list[str],
    cwd: Optional[Path] = None,
    timeout: Optional[float] = DEFAULT_COMMAND_TIMEOUT,
) -> CommandOutput:
    """
    Run a command once and capture its output as text.

    Args:
        cmd: Command and arguments as list (safe, no shell injection)
        cwd: Working directory (optional)
        timeout: Seconds to wait before giving up, None to wait forever

    Returns:
        CommandOutput with decoded stdout/stderr

    Raises:
        ProbeError: If the command is missing, cannot start, times out,
            exits non-zero or prints non-UTF-8 output
    """
    name = cmd[0]
    executable = shutil.which(name)
    if executable is None:
        raise ProbeError(name, "not found in PATH")

    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            [executable, *cmd[1:]],
            capture_output=True,
            check=False,
            cwd=cwd,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise ProbeError(name, f"timed out after {timeout}s") from e
    except OSError as e:
        raise ProbeError(name, f"could not be started: {e}") from e

    logger.debug(f"Exit code: {result.returncode}")
    stderr = result.stderr.decode("utf-8", errors="replace")
    if result.returncode != 0:
        reason = f"exited with status {result.returncode}"
        if stderr.strip():
            reason += f"\n{stderr.strip()}"
        raise ProbeError(name, reason)

    try:
        stdout = result.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ProbeError(name, "output is not valid UTF-8") from e

    return CommandOutput(stdout=stdout, stderr=stderr)


class SubprocessRunner:
    """CommandRunner backed by subprocess; one attempt per call, no caching."""

    def __init__(self, cwd: Optional[Path] = None, timeout: Optional[float] = DEFAULT_COMMAND_TIMEOUT):
        self.cwd = cwd
        self.timeout = timeout

    def exec(self, name: str, args: Sequence[str]) -> CommandOutput:
        return run_command([name, *args], cwd=self.cwd, timeout=self.timeout)


def probe(runner: CommandRunner, name: str, args: Sequence[str]) -> str:
    """
    Run a probe command and return its stdout.

    Raises:
        ProbeError: If the runner reports a failure
    """
    output = runner.exec(name, list(args))
    logger.debug(f"Probe `{name} {' '.join(args)}` returned {len(output.stdout)} bytes")
    return output.stdout
