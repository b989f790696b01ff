import pytest

from gamechain.codec import decode_vec, encode_vec, encode_uint, decode_uint
from gamechain.common import (
    EventLog,
    Finished,
    FinishKind,
    IdentifierSource,
    MatchMaker,
    Runner,
    RunnerPhase,
    RunnerState,
    State,
    TurnBasedGame,
)


def test_state_read_drains_bytes():
    state = State(b"abcdef")
    assert state.read(2) == b"ab"
    assert state.remaining_len() == 4
    assert bytes(state) == b"cdef"


def test_state_read_too_much_raises():
    state = State(b"ab")
    with pytest.raises(ValueError):
        state.read(3)
    assert bytes(state) == b"ab"


def test_state_equality_and_conversion():
    assert State(b"xyz") == State(b"xyz")
    assert not (State(b"xyz") == State(b"xy"))
    assert bytes(State(b"payload")) == b"payload"
    assert len(State()) == 0


def test_state_is_decodable_input():
    encoded = encode_vec([5, 6, 7], lambda v: encode_uint(v, 4))
    state = State(encoded)
    assert decode_vec(state, lambda r: decode_uint(r, 4)) == [5, 6, 7]
    assert state.remaining_len() == 0


def test_runner_state_equality():
    a = RunnerState(RunnerPhase.QUEUED, State(b"s"))
    b = RunnerState(RunnerPhase.QUEUED, State(b"s"))
    c = RunnerState(RunnerPhase.ACCEPTED, State(b"s"))
    assert a == b
    assert not (a == c)


def test_finished_winner_requires_player():
    with pytest.raises(ValueError):
        Finished(FinishKind.WINNER)
    with pytest.raises(ValueError):
        Finished(FinishKind.DRAW, winner=3)
    assert Finished(FinishKind.WINNER, winner=3).winner == 3


def test_event_log_records_in_order():
    log = EventLog()
    assert log.last() is None
    log.deposit("first")
    log.deposit("second")
    assert log.last() == "second"
    assert list(log) == ["first", "second"]
    assert len(log) == 2
    log.clear()
    assert len(log) == 0


@pytest.mark.parametrize(
    "abstract", [MatchMaker, Runner, IdentifierSource, TurnBasedGame]
)
def test_interfaces_are_abstract(abstract):
    with pytest.raises(TypeError):
        abstract()