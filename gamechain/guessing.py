"""A two-player number guessing game used to exercise the board."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from gamechain.common import Finished, FinishKind, TurnBasedGame

Guess = int
THE_NUMBER: Guess = 42
MAX_PLAYERS = 2


@dataclass(frozen=True)
class GuessingState:
    """Players, whose turn it is, the solution and the winner if any."""

    players: Tuple[Any, ...]
    next_player: int
    solution: Guess
    winner: Optional[Any] = None


class GuessingGame(TurnBasedGame):
    """Players take turns guessing; the first to guess the solution wins."""

    def init(self, players: Sequence[Any], seed: Optional[int] = None) -> Optional[GuessingState]:
        """Start a game for exactly two players; None for any other number."""
        players = tuple(players)
        if len(players) != MAX_PLAYERS:
            return None
        return GuessingState(players=players, next_player=0, solution=THE_NUMBER, winner=None)

    def play_turn(self, player, state: GuessingState, turn: Guess) -> Optional[GuessingState]:
        """Return the state after ``player`` guesses ``turn``, or None if not allowed."""
        if state.winner is not None:
            return None
        if player not in state.players:
            return None
        if state.players[state.next_player] != player:
            return None
        next_player = (state.next_player + 1) % len(state.players)
        winner = player if state.solution == turn else None
        return dataclasses.replace(state, next_player=next_player, winner=winner)

    def is_finished(self, state: GuessingState) -> Finished:
        """Report the winner, or that the game goes on."""
        if state.winner is None:
            return Finished(FinishKind.NO)
        return Finished(FinishKind.WINNER, state.winner)

    def seed(self, state: GuessingState) -> Optional[int]:
        """The guessing game keeps no seed."""
        return None