"""Store of runners moving from queued through accepted to finished."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Optional

from gamechain.common import (
    DispatchError,
    EventLog,
    IdentifierSource,
    Runner,
    RunnerPhase,
    RunnerState,
    State,
)


class RunnerErrorKind(enum.Enum):
    """Reasons a runner operation can fail."""

    INTERNAL_ERROR = "InternalError"
    INVALID_STATE = "InvalidState"
    UNKNOWN_RUNNER = "UnknownRunner"


class RunnerError(DispatchError):
    """A runner operation failed."""

    def __init__(self, kind: RunnerErrorKind, message: Optional[str] = None) -> None:
        self.kind = kind
        super().__init__(message or kind.value)


@dataclass(frozen=True)
class StateQueued:
    runner_id: int


@dataclass(frozen=True)
class StateAccepted:
    runner_id: int


@dataclass(frozen=True)
class StateFinished:
    runner_id: int


class NonceIdentifier(IdentifierSource):
    """Hands out increasing identifiers starting at 1."""

    def __init__(self) -> None:
        self.nonce = 0

    def get_identifier(self) -> int:
        self.nonce += 1
        return self.nonce


class FixedIdentifier(IdentifierSource):
    """Always hands out the same identifier."""

    def __init__(self, value) -> None:
        self.value = value

    def get_identifier(self):
        return self.value


def _copy(runner_state: RunnerState) -> RunnerState:
    return RunnerState(runner_state.phase, State(bytes(runner_state.state)))


class Running(Runner):
    """Keeps runners by identifier and records their transitions as events."""

    def __init__(self, events: Optional[EventLog] = None) -> None:
        self.events = events if events is not None else EventLog()
        self._runners: Dict[object, RunnerState] = {}

    def update_state(self, identifier, new_state: RunnerState) -> None:
        """Replace the state of an existing runner."""
        if identifier not in self._runners:
            raise RunnerError(RunnerErrorKind.INTERNAL_ERROR, "mutating storage failed!")
        self._runners[identifier] = _copy(new_state)

    def create(self, initial_state: State, identifiers: IdentifierSource):
        identifier = identifiers.get_identifier()
        if identifier in self._runners:
            return None
        self._runners[identifier] = _copy(RunnerState(RunnerPhase.QUEUED, initial_state))
        self.events.deposit(StateQueued(runner_id=identifier))
        return identifier

    def _advance(self, identifier, source: RunnerPhase, target: RunnerPhase,
                 new_state: Optional[State], event_type) -> None:
        current = self.get_state(identifier)
        if current is None or current.phase is not source:
            raise RunnerError(RunnerErrorKind.INVALID_STATE)
        if new_state is not None:
            self.update_state(identifier, RunnerState(target, new_state))
            self.events.deposit(event_type(runner_id=identifier))
        else:
            self.update_state(identifier, RunnerState(target, current.state))

    def accept(self, identifier, new_state: Optional[State] = None) -> None:
        self._advance(identifier, RunnerPhase.QUEUED, RunnerPhase.ACCEPTED,
                      new_state, StateAccepted)

    def finished(self, identifier, final_state: Optional[State] = None) -> None:
        self._advance(identifier, RunnerPhase.ACCEPTED, RunnerPhase.FINISHED,
                      final_state, StateFinished)

    def remove(self, identifier) -> None:
        if identifier not in self._runners:
            raise RunnerError(RunnerErrorKind.UNKNOWN_RUNNER)
        del self._runners[identifier]

    def get_state(self, identifier) -> Optional[RunnerState]:
        stored = self._runners.get(identifier)
        return _copy(stored) if stored is not None else None