"""State machines for the build step and the paths it renders."""

from enum import Enum, auto
from typing import ClassVar

import structlog


logger = structlog.get_logger()


class PathState(Enum):
    """Render lifecycle states of a single path.

    State transitions:
        PENDING -> RENDERING: Renderer invoked
        RENDERING -> WRITTEN: At least one artifact stored
        RENDERING -> SKIPPED: Every artifact name already existed
        RENDERING -> FAILED: Renderer raised or the store refused the write
        WRITTEN -> EXPANDING: Crawl extracting links from the written HTML
        EXPANDING -> EXPANDED: Discovered paths queued, or extraction failed
            and no paths were queued
    """

    PENDING = auto()
    RENDERING = auto()
    WRITTEN = auto()
    SKIPPED = auto()
    FAILED = auto()
    EXPANDING = auto()
    EXPANDED = auto()


class PathStateError(Exception):
    """Raised when an invalid path state transition is attempted."""

    def __init__(self, path: str, from_state: PathState, to_state: PathState) -> None:
        """Initialize the error.

        Args:
            path: The path whose state was changing.
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.path = path
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid path state transition for {path!r}: "
            f"{from_state.name} -> {to_state.name}"
        )


class PathStateMachine:
    """State machine for the render lifecycle of one path.

    WRITTEN is terminal when crawling is disabled.
    """

    VALID_TRANSITIONS: ClassVar[dict[PathState, set[PathState]]] = {
        PathState.PENDING: {PathState.RENDERING},
        PathState.RENDERING: {
            PathState.WRITTEN,
            PathState.SKIPPED,
            PathState.FAILED,
        },
        PathState.WRITTEN: {PathState.EXPANDING},
        PathState.SKIPPED: set(),  # Terminal state
        PathState.FAILED: set(),  # Terminal state
        PathState.EXPANDING: {PathState.EXPANDED},
        PathState.EXPANDED: set(),  # Terminal state
    }

    def __init__(self, path: str, run_id: str, crawl: bool = False) -> None:
        """Initialize the state machine in PENDING state.

        Args:
            path: The path being rendered.
            run_id: Build identifier for logging.
            crawl: Whether WRITTEN continues into link expansion.
        """
        self._path = path
        self._crawl = crawl
        self._state = PathState.PENDING
        self._log = logger.bind(run_id=run_id, component="orchestrator", path=path)

    @property
    def state(self) -> PathState:
        """Get the current state."""
        return self._state

    @property
    def path(self) -> str:
        """Get the path."""
        return self._path

    def can_transition(self, to_state: PathState) -> bool:
        """Check if a transition to the given state is valid.

        Args:
            to_state: The target state.

        Returns:
            True if the transition is valid, False otherwise.
        """
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: PathState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            PathStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.name,
                to_state=to_state.name,
            )
            raise PathStateError(self._path, self._state, to_state)

        old_state = self._state
        self._state = to_state
        self._log.debug(
            "path_state_transition",
            from_state=old_state.name,
            to_state=to_state.name,
        )

    def to_rendering(self) -> None:
        """Transition to RENDERING state."""
        self.transition(PathState.RENDERING)

    def to_written(self) -> None:
        """Transition to WRITTEN state."""
        self.transition(PathState.WRITTEN)

    def to_skipped(self) -> None:
        """Transition to SKIPPED state."""
        self.transition(PathState.SKIPPED)

    def to_failed(self) -> None:
        """Transition to FAILED state."""
        self.transition(PathState.FAILED)

    def to_expanding(self) -> None:
        """Transition to EXPANDING state."""
        self.transition(PathState.EXPANDING)

    def to_expanded(self) -> None:
        """Transition to EXPANDED state."""
        self.transition(PathState.EXPANDED)

    def is_terminal(self) -> bool:
        """Check if the current state is terminal."""
        if self._state == PathState.WRITTEN:
            return not self._crawl
        return not self.VALID_TRANSITIONS[self._state]

    def is_failed(self) -> bool:
        """Check if rendering failed."""
        return self._state == PathState.FAILED


class BuildState(Enum):
    """Build step lifecycle states.

    State transitions:
        BUILD_PENDING -> LOADING_RENDERER: Begin loading the renderer
        LOADING_RENDERER -> RENDERING: Renderer loaded, begin rendering paths
        RENDERING -> BUILD_DONE: Every path reached a terminal state
        LOADING_RENDERER/RENDERING -> BUILD_FAILED: No renderer, or the
            orchestrator itself raised
    """

    BUILD_PENDING = auto()
    LOADING_RENDERER = auto()
    RENDERING = auto()
    BUILD_DONE = auto()
    BUILD_FAILED = auto()


class BuildStateError(Exception):
    """Raised when an invalid build state transition is attempted."""

    def __init__(self, from_state: BuildState, to_state: BuildState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid build state transition: {from_state.name} -> {to_state.name}"
        )


class BuildStateMachine:
    """State machine for the build step.

    Path failures do not fail the build; BUILD_DONE only means every
    path was processed.
    """

    VALID_TRANSITIONS: ClassVar[dict[BuildState, set[BuildState]]] = {
        BuildState.BUILD_PENDING: {
            BuildState.LOADING_RENDERER,
            BuildState.BUILD_FAILED,
        },
        BuildState.LOADING_RENDERER: {
            BuildState.RENDERING,
            BuildState.BUILD_FAILED,
        },
        BuildState.RENDERING: {
            BuildState.BUILD_DONE,
            BuildState.BUILD_FAILED,
        },
        BuildState.BUILD_DONE: set(),  # Terminal state
        BuildState.BUILD_FAILED: set(),  # Terminal state
    }

    def __init__(self, run_id: str) -> None:
        """Initialize the state machine in BUILD_PENDING state.

        Args:
            run_id: Unique build identifier for logging.
        """
        self._run_id = run_id
        self._state = BuildState.BUILD_PENDING
        self._log = logger.bind(run_id=run_id, component="builder")

    @property
    def state(self) -> BuildState:
        """Get the current state."""
        return self._state

    def transition(self, to_state: BuildState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            BuildStateError: If the transition is invalid.
        """
        if to_state not in self.VALID_TRANSITIONS.get(self._state, set()):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.name,
                to_state=to_state.name,
            )
            raise BuildStateError(self._state, to_state)

        old_state = self._state
        self._state = to_state
        self._log.info(
            "build_state_transition",
            from_state=old_state.name,
            to_state=to_state.name,
        )

    def is_terminal(self) -> bool:
        """Check if the current state is terminal."""
        return self._state in (BuildState.BUILD_DONE, BuildState.BUILD_FAILED)
