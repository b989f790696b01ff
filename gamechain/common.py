"""Shared types for matchmaking, runners and turn-based games."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

Bracket = int
BracketCounter = int

DEFAULT_BRACKET: Bracket = 0
DEFAULT_PLAYERS = 2
MAX_STATE_LENGTH = 1024


class DispatchError(Exception):
    """Raised when a call cannot be carried out against the stored state."""


class State:
    """An opaque byte payload that is consumed as it is read."""

    def __init__(self, data: bytes = b"") -> None:
        self._data = bytearray(data)

    def read(self, size: int) -> bytes:
        """Remove and return the first ``size`` bytes."""
        if size < 0:
            raise ValueError("cannot read a negative number of bytes")
        if size > len(self._data):
            raise ValueError(
                f"not enough data: wanted {size} bytes, {len(self._data)} left"
            )
        chunk = bytes(self._data[:size])
        del self._data[:size]
        return chunk

    def remaining_len(self) -> int:
        """Number of bytes still held."""
        return len(self._data)

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, State):
            return self._data == other._data
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"State({bytes(self._data)!r})"


class RunnerPhase(enum.Enum):
    """Lifecycle phase of a runner."""

    QUEUED = "Queued"
    ACCEPTED = "Accepted"
    FINISHED = "Finished"


@dataclass(frozen=True)
class RunnerState:
    """A runner's phase together with its stored state."""

    phase: RunnerPhase
    state: State


class FinishKind(enum.Enum):
    """Outcome category of a game."""

    NO = "No"
    WINNER = "Winner"
    DRAW = "Draw"


@dataclass(frozen=True)
class Finished:
    """Whether a game has ended, and who won if anyone."""

    kind: FinishKind
    winner: Any = None

    def __post_init__(self) -> None:
        if self.kind is FinishKind.WINNER and self.winner is None:
            raise ValueError("a winning outcome needs a winner")
        if self.kind is not FinishKind.WINNER and self.winner is not None:
            raise ValueError("only a winning outcome carries a winner")


class EventLog:
    """An ordered record of deposited events."""

    def __init__(self) -> None:
        self._events: List[Any] = []

    def deposit(self, event: Any) -> None:
        """Append an event."""
        self._events.append(event)

    def last(self) -> Optional[Any]:
        """The most recent event, or None when there is none."""
        return self._events[-1] if self._events else None

    def clear(self) -> None:
        """Drop all recorded events."""
        self._events.clear()

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)


class MatchMaker(ABC):
    """Groups queued players into brackets and matches them."""

    @abstractmethod
    def enqueue(self, account_id, bracket: Bracket) -> bool:
        """Queue an account in a bracket; False if it is already queued."""

    @abstractmethod
    def clear_queue(self, bracket: Bracket) -> None:
        """Remove every player queued in a bracket."""

    @abstractmethod
    def is_queued(self, account_id) -> bool:
        """Whether the account is queued in any bracket."""

    @abstractmethod
    def queued_players(self, bracket: Bracket) -> list:
        """Players queued in a bracket."""

    @abstractmethod
    def try_match(self, bracket: Bracket, number_required: int) -> Optional[list]:
        """Take up to ``number_required`` players from a bracket, or None."""


class IdentifierSource(ABC):
    """Provides identifiers for new runners."""

    @abstractmethod
    def get_identifier(self):
        """Return the next identifier."""


class Runner(ABC):
    """Something run off-chain that moves through the runner phases."""

    @abstractmethod
    def create(self, initial_state: State, identifiers: IdentifierSource):
        """Create a queued runner; return its identifier or None."""

    @abstractmethod
    def accept(self, identifier, new_state: Optional[State]) -> None:
        """Mark a queued runner accepted, optionally replacing its state."""

    @abstractmethod
    def finished(self, identifier, final_state: Optional[State]) -> None:
        """Mark an accepted runner finished, optionally replacing its state."""

    @abstractmethod
    def remove(self, identifier) -> None:
        """Remove a runner."""

    @abstractmethod
    def get_state(self, identifier) -> Optional[RunnerState]:
        """The runner's state, or None if unknown."""


class TurnBasedGame(ABC):
    """A game played in turns by a fixed set of players."""

    @abstractmethod
    def init(self, players, seed: Optional[int]):
        """Return the initial state for the players, or None if invalid."""

    @abstractmethod
    def play_turn(self, player, state, turn):
        """Return the state after the turn, or None if the turn is invalid."""

    @abstractmethod
    def is_finished(self, state) -> Finished:
        """Report whether the game has finished."""

    @abstractmethod
    def seed(self, state) -> Optional[int]:
        """The seed held in the state, if any."""