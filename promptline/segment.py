"""Module segment builder: detection, then lazy rendering."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from promptline.context import Context
from promptline.detection import DetectionSpec, matches
from promptline.errors import FormatError, ProbeError
from promptline.formatter import ResolvedSegment

logger = logging.getLogger(__name__)


class ModuleState(str, Enum):
    """States of one module evaluation."""

    UNEVALUATED = "unevaluated"
    DETECTING = "detecting"
    NO_MATCH = "no_match"
    MATCHED = "matched"
    RESOLVING = "resolving"
    RENDERED = "rendered"
    FAILED = "failed"


VALID_TRANSITIONS: dict[ModuleState, set[ModuleState]] = {
    ModuleState.UNEVALUATED: {ModuleState.DETECTING},
    ModuleState.DETECTING: {ModuleState.NO_MATCH, ModuleState.MATCHED},
    ModuleState.MATCHED: {ModuleState.RESOLVING},
    ModuleState.RESOLVING: {ModuleState.RENDERED, ModuleState.FAILED},
    ModuleState.NO_MATCH: set(),
    ModuleState.RENDERED: set(),
    ModuleState.FAILED: set(),
}


class InvalidStateTransitionError(Exception):
    """Raised when a module evaluation attempts an invalid state transition."""

    def __init__(self, module: str, from_state: str, to_state: str) -> None:
        self.module = module
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Invalid state transition for module {module}: {from_state} -> {to_state}")


@dataclass
class ModuleResult:
    """
    Outcome of one module evaluation.

    segments is None when the module produced nothing (no match, disabled
    or failed); the prompt then renders as if the module did not exist.
    """

    name: str
    state: ModuleState
    segments: Optional[list[ResolvedSegment]] = None
    error: Optional[str] = None
    history: list[ModuleState] = field(default_factory=list)

    @property
    def is_absent(self) -> bool:
        return self.segments is None

    @classmethod
    def absent(cls, name: str) -> "ModuleResult":
        return cls(name=name, state=ModuleState.UNEVALUATED, history=[ModuleState.UNEVALUATED])

    @classmethod
    def failed(cls, name: str, error: str) -> "ModuleResult":
        """Result for a module that failed before it could be built."""
        return cls(
            name=name,
            state=ModuleState.FAILED,
            error=error,
            history=[ModuleState.UNEVALUATED],
        )


Renderer = Callable[[Context], list[ResolvedSegment]]


class SegmentBuilder:
    """
    Runs a module through detection and rendering.

    Every build starts from UNEVALUATED; nothing carries over between builds.
    """

    def __init__(self, name: str, detection: DetectionSpec, render: Renderer) -> None:
        self.name = name
        self.detection = detection
        self.render = render

    def _transition(self, history: list[ModuleState], to_state: ModuleState) -> None:
        from_state = history[-1]
        if to_state not in VALID_TRANSITIONS[from_state]:
            raise InvalidStateTransitionError(self.name, from_state.value, to_state.value)
        history.append(to_state)

    def build(self, context: Context) -> ModuleResult:
        """
        Evaluate the module for context.

        Returns:
            ModuleResult; errors raised while rendering are recorded on it,
            never raised
        """
        history = [ModuleState.UNEVALUATED]

        self._transition(history, ModuleState.DETECTING)
        listing = context.list_directory()
        if not matches(listing, self.detection):
            self._transition(history, ModuleState.NO_MATCH)
            logger.debug(f"Module `{self.name}`: no match in {context.current_dir}")
            return ModuleResult(name=self.name, state=ModuleState.NO_MATCH, history=history)

        self._transition(history, ModuleState.MATCHED)
        self._transition(history, ModuleState.RESOLVING)
        try:
            segments = self.render(context)
        except (FormatError, ProbeError) as e:
            self._transition(history, ModuleState.FAILED)
            logger.warning(f"Error in module `{self.name}`:\n{e}")
            return ModuleResult(
                name=self.name,
                state=ModuleState.FAILED,
                error=str(e),
                history=history,
            )
        except Exception as e:
            self._transition(history, ModuleState.FAILED)
            logger.warning(f"Unexpected error in module `{self.name}`: {e!r}")
            return ModuleResult(
                name=self.name,
                state=ModuleState.FAILED,
                error=repr(e),
                history=history,
            )

        self._transition(history, ModuleState.RENDERED)
        logger.debug(f"Module `{self.name}`: {len(segments)} segments")
        return ModuleResult(
            name=self.name,
            state=ModuleState.RENDERED,
            segments=segments,
            history=history,
        )
