"""Lifecycle of a build configuration file load."""

from enum import Enum, auto
from typing import ClassVar

import structlog

from static_site_builder.config.constants import COMPONENT_CONFIG


logger = structlog.get_logger()


class ConfigState(Enum):
    """Steps a configuration file goes through.

    State transitions:
        UNLOADED -> READING: File is being read from disk
        READING -> PARSED: YAML decoded into a mapping
        PARSED -> VALIDATED: Mapping accepted by the BuildConfig schema
        VALIDATED -> READY: Relative paths resolved against the file's directory
        READING/PARSED/VALIDATED -> FAILED: Missing file, bad YAML, bad schema
    """

    UNLOADED = auto()
    READING = auto()
    PARSED = auto()
    VALIDATED = auto()
    READY = auto()
    FAILED = auto()


class ConfigStateError(Exception):
    """Raised when the loader moves through its steps out of order."""

    def __init__(self, from_state: ConfigState, to_state: ConfigState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Config loader cannot go from {from_state.name} to {to_state.name}"
        )


class ConfigStateMachine:
    """Tracks one ConfigLoader.load() call.

    A loader is single use: READY and FAILED accept no further moves.
    """

    VALID_TRANSITIONS: ClassVar[dict[ConfigState, frozenset[ConfigState]]] = {
        ConfigState.UNLOADED: frozenset({ConfigState.READING}),
        ConfigState.READING: frozenset({ConfigState.PARSED, ConfigState.FAILED}),
        ConfigState.PARSED: frozenset({ConfigState.VALIDATED, ConfigState.FAILED}),
        ConfigState.VALIDATED: frozenset({ConfigState.READY, ConfigState.FAILED}),
        ConfigState.READY: frozenset(),
        ConfigState.FAILED: frozenset(),
    }

    def __init__(self, run_id: str = "") -> None:
        """Start in UNLOADED.

        Args:
            run_id: Build identifier for logging.
        """
        self._state = ConfigState.UNLOADED
        self._log = logger.bind(run_id=run_id, component=COMPONENT_CONFIG)

    @property
    def state(self) -> ConfigState:
        """Get the current state."""
        return self._state

    def transition(self, to_state: ConfigState) -> None:
        """Move to the next step.

        Args:
            to_state: The target state.

        Raises:
            ConfigStateError: If to_state does not follow the current state.
        """
        if to_state not in self.VALID_TRANSITIONS[self._state]:
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.name,
                to_state=to_state.name,
            )
            raise ConfigStateError(self._state, to_state)

        self._log.debug(
            "config_state_transition",
            from_state=self._state.name,
            to_state=to_state.name,
        )
        self._state = to_state

    def is_done(self) -> bool:
        """Whether the load finished, successfully or not."""
        return not self.VALID_TRANSITIONS[self._state]
