"""Registry that queues players, creates games for matches and tracks their outcome."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, List, Optional

from gamechain.codec import (
    ByteReader,
    decode_option,
    decode_uint,
    decode_vec,
    encode_option,
    encode_uint,
    encode_vec,
)
from gamechain.common import (
    DEFAULT_BRACKET,
    DEFAULT_PLAYERS,
    DispatchError,
    IdentifierSource,
    MatchMaker,
    Runner,
    RunnerPhase,
    State,
)

logger = logging.getLogger(__name__)

ACCOUNT_WIDTH = 8


class RegistryErrorKind(enum.Enum):
    """Reasons a registry call can fail."""

    ACKNOWLEDGE_BATCH_TOO_LARGE = "AcknowledgeBatchTooLarge"
    NO_GAME_ENTRY = "NoGameEntry"
    ALREADY_QUEUED = "AlreadyQueued"
    INVALID_WINNER = "InvalidWinner"
    NOT_SIGNED_BY_OBSERVER = "NotSignedByObserver"
    INVALID_PAYLOAD = "InvalidPayload"
    INVALID_GAME_STATE = "InvalidGameState"
    FAILED_TO_QUEUE = "FailedToQueue"
    ALREADY_PLAYING = "AlreadyPlaying"


class RegistryError(DispatchError):
    """A registry call failed."""

    def __init__(self, kind: RegistryErrorKind, message: Optional[str] = None) -> None:
        self.kind = kind
        super().__init__(message or kind.value)


def _encode_account(account: int) -> bytes:
    return encode_uint(account, ACCOUNT_WIDTH)


def _decode_account(reader) -> int:
    return decode_uint(reader, ACCOUNT_WIDTH)


@dataclass
class Game:
    """A game's players, the TEE that accepted it and its winner.

    Accounts are unsigned 64-bit integers in the encoded form.
    """

    tee_id: Optional[int] = None
    players: List[int] = field(default_factory=list)
    winner: Optional[int] = None

    def encode(self) -> bytes:
        """Encode as tee id option, player list and winner option."""
        return (
            encode_option(self.tee_id, _encode_account)
            + encode_vec(self.players, _encode_account)
            + encode_option(self.winner, _encode_account)
        )


def decode_game(data: bytes) -> Game:
    """Decode a game written by :meth:`Game.encode`; trailing bytes are ignored."""
    reader = ByteReader(bytes(data))
    tee_id = decode_option(reader, _decode_account)
    players = decode_vec(reader, _decode_account)
    winner = decode_option(reader, _decode_account)
    return Game(tee_id=tee_id, players=players, winner=winner)


def _ensure_signed(who) -> Hashable:
    if who is None:
        raise DispatchError("bad origin: call must be signed")
    return who


class GameRegistry:
    """Matches queued players into games run by a runner and records the results."""

    def __init__(self, matchmaker: MatchMaker, runner: Runner,
                 identifiers: IdentifierSource, max_acknowledge_batch: int = 2) -> None:
        if not isinstance(max_acknowledge_batch, int) or max_acknowledge_batch < 0:
            raise ValueError("max_acknowledge_batch must be a non-negative integer")
        self.matchmaker = matchmaker
        self.runner = runner
        self.identifiers = identifiers
        self.max_acknowledge_batch = max_acknowledge_batch
        self._queued: Optional[List[Hashable]] = None
        self._players: Dict[Hashable, Hashable] = {}

    def queue(self, who) -> None:
        """Queue a player and, if enough are waiting, create a game for a match."""
        who = _ensure_signed(who)
        if who in self._players:
            raise RegistryError(RegistryErrorKind.ALREADY_PLAYING)
        if not self.matchmaker.enqueue(who, DEFAULT_BRACKET):
            raise RegistryError(RegistryErrorKind.ALREADY_QUEUED)

        players = self.matchmaker.try_match(DEFAULT_BRACKET, DEFAULT_PLAYERS)
        if players is None:
            return
        identifier = self.runner.create(
            State(Game(players=list(players)).encode()), self.identifiers
        )
        if identifier is None:
            raise RegistryError(RegistryErrorKind.FAILED_TO_QUEUE)
        for player in players:
            self._players[player] = identifier
        if self._queued is None:
            self._queued = []
        self._queued.append(identifier)

    def drop_game(self, who, game_id) -> None:
        """Remove a game's runner; fails if the runner is unknown."""
        _ensure_signed(who)
        self.runner.remove(game_id)

    def ack_game(self, who, game_ids: Iterable[Hashable], shard_id=None) -> None:
        """Accept every queued game in the batch, recording ``who`` as its TEE."""
        who = _ensure_signed(who)
        game_ids = list(game_ids)
        if len(game_ids) > self.max_acknowledge_batch:
            raise RegistryError(RegistryErrorKind.ACKNOWLEDGE_BATCH_TOO_LARGE)

        self._queued = None

        for game_id in game_ids:
            runner_state = self.runner.get_state(game_id)
            if runner_state is None or runner_state.phase is not RunnerPhase.QUEUED:
                continue
            try:
                game = decode_game(bytes(runner_state.state))
            except ValueError:
                continue
            game.tee_id = who
            try:
                self.runner.accept(game_id, State(game.encode()))
            except DispatchError as error:
                logger.debug("Accepting %r failed with error: %s", game_id, error)

    def finish_game(self, who, game_id, winner, shard_id=None) -> None:
        """Record the winner of an accepted game and free its players."""
        _ensure_signed(who)
        runner_state = self.runner.get_state(game_id)
        if runner_state is None:
            raise RegistryError(RegistryErrorKind.NO_GAME_ENTRY)
        if runner_state.phase is not RunnerPhase.ACCEPTED:
            raise RegistryError(RegistryErrorKind.INVALID_GAME_STATE)
        try:
            game = decode_game(bytes(runner_state.state))
        except ValueError as error:
            raise RegistryError(RegistryErrorKind.INVALID_PAYLOAD) from error
        if winner not in game.players:
            raise RegistryError(RegistryErrorKind.INVALID_WINNER)

        game.winner = winner
        for player in game.players:
            self._players.pop(player, None)
        self.runner.finished(game_id, State(game.encode()))

    def player_game(self, account_id) -> Optional[Hashable]:
        """The game a player is in, or None."""
        return self._players.get(account_id)

    def queued(self) -> Optional[List[Hashable]]:
        """Games created but not yet acknowledged, or None when there are none."""
        return list(self._queued) if self._queued is not None else None