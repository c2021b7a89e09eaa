"""Per-redraw rendering context."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from promptline.config import PromptConfig
from promptline.detection import DirEntry, list_directory
from promptline.probes.tools import CommandOutput, CommandRunner, SubprocessRunner

logger = logging.getLogger(__name__)


@dataclass
class Context:
    """
    Inputs shared by every module during one prompt redraw.

    Holds no results; each module pass lists and runs commands afresh.
    A Context is itself a CommandRunner: commands go to `runner` when one is
    given, otherwise to a SubprocessRunner in current_dir.
    """

    current_dir: Path
    config: PromptConfig = field(default_factory=PromptConfig)
    runner: Optional[CommandRunner] = None

    def list_directory(self) -> Optional[list[DirEntry]]:
        """Entries of current_dir, or None if it cannot be read."""
        return list_directory(self.current_dir)

    def exec(self, name: str, args: Sequence[str]) -> CommandOutput:
        """
        Run an external command for a module.

        Raises:
            ProbeError: If the command fails
        """
        runner = self.runner
        if runner is None:
            runner = SubprocessRunner(cwd=self.current_dir, timeout=self.config.command_timeout)
        return runner.exec(name, list(args))
