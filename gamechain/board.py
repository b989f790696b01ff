"""Board for turn-based games between players who sit at one board at a time."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterable, Optional, Tuple

from gamechain.common import (
    DispatchError,
    EventLog,
    FinishKind,
    TurnBasedGame,
)


class BoardErrorKind(enum.Enum):
    """Reasons a board call can fail."""

    NOT_ENOUGH_PLAYERS = "NotEnoughPlayers"
    DUPLICATE_PLAYER = "DuplicatePlayer"
    TOO_MANY_PLAYERS = "TooManyPlayers"
    INVALID_STATE_FROM_GAME = "InvalidStateFromGame"
    NOT_PLAYING = "NotPlaying"
    INVALID_TURN = "InvalidTurn"
    INVALID_BOARD = "InvalidBoard"
    PLAYER_ALREADY_IN_GAME = "PlayerAlreadyInGame"
    BOARD_EXISTS = "BoardExists"


class BoardError(DispatchError):
    """A board call failed."""

    def __init__(self, kind: BoardErrorKind, message: Optional[str] = None) -> None:
        self.kind = kind
        super().__init__(message or kind.value)


@dataclass(frozen=True)
class GameCreated:
    """A game has been created for the players."""

    board_id: int
    players: Tuple[Hashable, ...]


@dataclass(frozen=True)
class GameFinished:
    """A game has finished with a winner."""

    board_id: int
    winner: Hashable


@dataclass
class BoardGame:
    """A board's identifier, its players and the current game state."""

    board_id: int
    players: Tuple[Hashable, ...]
    state: Any


def _ensure_signed(sender) -> Hashable:
    if sender is None:
        raise DispatchError("bad origin: call must be signed")
    return sender


class Board:
    """Runs games on boards, locking each player to one board until it is finished."""

    def __init__(self, game: TurnBasedGame, max_players: int = 2,
                 events: Optional[EventLog] = None) -> None:
        if not isinstance(max_players, int) or max_players < 0:
            raise ValueError("max_players must be a non-negative integer")
        self.game = game
        self.max_players = max_players
        self.events = events if events is not None else EventLog()
        self._states: Dict[int, BoardGame] = {}
        self._winners: Dict[int, Hashable] = {}
        self._player_boards: Dict[Hashable, int] = {}
        self._seed: Optional[int] = None

    def new_game(self, sender, board_id: int, players: Iterable[Hashable]) -> None:
        """Create a game on ``board_id`` for a set of players not already playing."""
        _ensure_signed(sender)
        unique = sorted(set(players))
        if not unique:
            raise BoardError(BoardErrorKind.NOT_ENOUGH_PLAYERS)
        if board_id in self._states:
            raise BoardError(BoardErrorKind.BOARD_EXISTS)

        free = [player for player in unique if player not in self._player_boards]
        if len(free) > self.max_players:
            raise BoardError(BoardErrorKind.TOO_MANY_PLAYERS)
        if len(free) != len(unique):
            raise BoardError(BoardErrorKind.PLAYER_ALREADY_IN_GAME)

        state = self.game.init(free, self._seed)
        if state is None:
            raise BoardError(BoardErrorKind.INVALID_STATE_FROM_GAME)

        for player in free:
            self._player_boards[player] = board_id
        seated = tuple(free)
        self._states[board_id] = BoardGame(board_id=board_id, players=seated, state=state)
        self.events.deposit(GameCreated(board_id=board_id, players=seated))

    def play_turn(self, sender, turn) -> None:
        """Play a turn for the sender; record the winner if the turn ends the game."""
        player = _ensure_signed(sender)
        board_id = self._player_boards.get(player)
        if board_id is None:
            raise BoardError(BoardErrorKind.NOT_PLAYING)
        board_game = self._states.get(board_id)
        if board_game is None:
            raise BoardError(BoardErrorKind.INVALID_BOARD)

        new_state = self.game.play_turn(player, board_game.state, turn)
        if new_state is None:
            raise BoardError(BoardErrorKind.INVALID_TURN)
        board_game.state = new_state

        outcome = self.game.is_finished(new_state)
        if outcome.kind is FinishKind.WINNER:
            self._winners[board_id] = outcome.winner
            self._seed = self.game.seed(new_state)
            self.events.deposit(GameFinished(board_id=board_id, winner=outcome.winner))

    def finish_game(self, sender, board_id: int) -> None:
        """Free the board's players and remove the board and its winner."""
        _ensure_signed(sender)
        board_game = self._states.get(board_id)
        if board_game is None:
            raise BoardError(BoardErrorKind.INVALID_BOARD)
        for player in board_game.players:
            self._player_boards.pop(player, None)
        del self._states[board_id]
        self._winners.pop(board_id, None)

    def board_state(self, board_id: int) -> Optional[BoardGame]:
        """The game on a board, or None."""
        return self._states.get(board_id)

    def winner(self, board_id: int) -> Optional[Hashable]:
        """The recorded winner of a board, or None."""
        return self._winners.get(board_id)

    def player_board(self, account_id) -> Optional[int]:
        """The board a player sits at, or None."""
        return self._player_boards.get(account_id)

    def seed(self) -> Optional[int]:
        """The seed carried over from the last finished game, if any."""
        return self._seed