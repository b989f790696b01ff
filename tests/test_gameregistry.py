import pytest

from gamechain.common import DispatchError, RunnerPhase, RunnerState, State
from gamechain.gameregistry import (
    Game,
    GameRegistry,
    RegistryError,
    RegistryErrorKind,
    decode_game,
)
from gamechain.matchmaker import MatchMaking
from gamechain.runner import FixedIdentifier, RunnerError, RunnerErrorKind, Running

ALICE = 1
BOB = 2
TEE_ID = 7
GLOBAL_IDENTIFIER = 1
SHARD = b"\x00" * 32


@pytest.fixture
def setup():
    runner = Running()
    registry = GameRegistry(
        MatchMaking(), runner, FixedIdentifier(GLOBAL_IDENTIFIER), max_acknowledge_batch=2
    )
    return registry, runner


def test_should_queue_player(setup):
    registry, runner = setup
    registry.queue(ALICE)
    with pytest.raises(RegistryError) as exc:
        registry.queue(ALICE)
    assert exc.value.kind is RegistryErrorKind.ALREADY_QUEUED
    assert runner.get_state(GLOBAL_IDENTIFIER) is None


def test_should_create_game(setup):
    registry, runner = setup
    registry.queue(ALICE)
    assert registry.queued() is None
    registry.queue(BOB)
    assert registry.queued() == [GLOBAL_IDENTIFIER]
    with pytest.raises(RegistryError) as exc:
        registry.queue(ALICE)
    assert exc.value.kind is RegistryErrorKind.ALREADY_PLAYING
    state = runner.get_state(GLOBAL_IDENTIFIER)
    assert state == RunnerState(RunnerPhase.QUEUED, State(Game(players=[ALICE, BOB]).encode()))
    assert registry.player_game(ALICE) == GLOBAL_IDENTIFIER
    assert registry.player_game(BOB) == GLOBAL_IDENTIFIER


def test_should_allow_game_to_be_acknowledged(setup):
    registry, runner = setup
    registry.queue(ALICE)
    registry.queue(BOB)
    assert registry.queued() == [GLOBAL_IDENTIFIER]
    registry.ack_game(TEE_ID, [GLOBAL_IDENTIFIER], SHARD)
    assert registry.queued() is None
    game = Game(players=[ALICE, BOB], tee_id=TEE_ID, winner=None)
    assert runner.get_state(GLOBAL_IDENTIFIER) == RunnerState(
        RunnerPhase.ACCEPTED, State(game.encode())
    )


def test_should_return_batch_too_large(setup):
    registry, _ = setup
    with pytest.raises(RegistryError) as exc:
        registry.ack_game(
            TEE_ID, [GLOBAL_IDENTIFIER, GLOBAL_IDENTIFIER, GLOBAL_IDENTIFIER], SHARD
        )
    assert exc.value.kind is RegistryErrorKind.ACKNOWLEDGE_BATCH_TOO_LARGE


def test_should_finish_game(setup):
    registry, runner = setup
    registry.queue(ALICE)
    registry.queue(BOB)
    registry.ack_game(TEE_ID, [GLOBAL_IDENTIFIER], SHARD)
    registry.finish_game(TEE_ID, GLOBAL_IDENTIFIER, ALICE, SHARD)
    game = Game(players=[ALICE, BOB], tee_id=TEE_ID, winner=ALICE)
    assert runner.get_state(GLOBAL_IDENTIFIER) == RunnerState(
        RunnerPhase.FINISHED, State(game.encode())
    )
    assert registry.player_game(ALICE) is None
    assert registry.player_game(BOB) is None


def test_finish_game_without_entry(setup):
    registry, _ = setup
    with pytest.raises(RegistryError) as exc:
        registry.finish_game(TEE_ID, GLOBAL_IDENTIFIER, ALICE, SHARD)
    assert exc.value.kind is RegistryErrorKind.NO_GAME_ENTRY


def test_finish_game_before_acknowledgement(setup):
    registry, _ = setup
    registry.queue(ALICE)
    registry.queue(BOB)
    with pytest.raises(RegistryError) as exc:
        registry.finish_game(TEE_ID, GLOBAL_IDENTIFIER, ALICE, SHARD)
    assert exc.value.kind is RegistryErrorKind.INVALID_GAME_STATE


def test_finish_game_with_invalid_winner(setup):
    registry, _ = setup
    registry.queue(ALICE)
    registry.queue(BOB)
    registry.ack_game(TEE_ID, [GLOBAL_IDENTIFIER], SHARD)
    with pytest.raises(RegistryError) as exc:
        registry.finish_game(TEE_ID, GLOBAL_IDENTIFIER, 99, SHARD)
    assert exc.value.kind is RegistryErrorKind.INVALID_WINNER
    assert registry.player_game(ALICE) == GLOBAL_IDENTIFIER


def test_finish_game_with_invalid_payload():
    runner = Running()
    registry = GameRegistry(MatchMaking(), runner, FixedIdentifier(5))
    runner.create(State(b"\x05"), FixedIdentifier(5))
    runner.accept(5)
    with pytest.raises(RegistryError) as exc:
        registry.finish_game(TEE_ID, 5, ALICE, SHARD)
    assert exc.value.kind is RegistryErrorKind.INVALID_PAYLOAD


def test_ack_skips_unknown_and_undecodable_games():
    runner = Running()
    registry = GameRegistry(MatchMaking(), runner, FixedIdentifier(5))
    runner.create(State(b"\x05"), FixedIdentifier(5))
    registry.ack_game(TEE_ID, [5, 6], SHARD)
    assert runner.get_state(5).phase is RunnerPhase.QUEUED
    assert runner.get_state(6) is None


def test_drop_game_removes_runner(setup):
    registry, runner = setup
    registry.queue(ALICE)
    registry.queue(BOB)
    registry.drop_game(TEE_ID, GLOBAL_IDENTIFIER)
    assert runner.get_state(GLOBAL_IDENTIFIER) is None
    with pytest.raises(RunnerError) as exc:
        registry.drop_game(TEE_ID, GLOBAL_IDENTIFIER)
    assert exc.value.kind is RunnerErrorKind.UNKNOWN_RUNNER


def test_failed_to_queue_when_identifier_taken(setup):
    registry, runner = setup
    runner.create(State(b""), FixedIdentifier(GLOBAL_IDENTIFIER))
    registry.queue(ALICE)
    with pytest.raises(RegistryError) as exc:
        registry.queue(BOB)
    assert exc.value.kind is RegistryErrorKind.FAILED_TO_QUEUE


def test_unsigned_call_is_rejected(setup):
    registry, _ = setup
    with pytest.raises(DispatchError):
        registry.queue(None)


def test_game_encoding_is_pinned():
    game = Game(players=[1, 2])
    expected = (
        b"\x00"
        + b"\x08"
        + b"\x01\x00\x00\x00\x00\x00\x00\x00"
        + b"\x02\x00\x00\x00\x00\x00\x00\x00"
        + b"\x00"
    )
    assert game.encode() == expected


def test_game_round_trip():
    game = Game(tee_id=TEE_ID, players=[ALICE, BOB], winner=BOB)
    assert decode_game(game.encode()) == game


def test_decode_game_rejects_truncated_data():
    with pytest.raises(ValueError):
        decode_game(b"\x01\x07")