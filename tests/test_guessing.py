import pytest

from gamechain.common import FinishKind
from gamechain.guessing import THE_NUMBER, GuessingGame, GuessingState

BOB = 2
CHARLIE = 3
ALICE = 1


@pytest.fixture
def game():
    return GuessingGame()


@pytest.fixture
def state(game):
    return game.init([BOB, CHARLIE], None)


def test_init_with_two_players(state):
    assert state == GuessingState(players=(BOB, CHARLIE), next_player=0,
                                  solution=THE_NUMBER, winner=None)


def test_solution_is_the_number(state):
    assert state.solution == 42


@pytest.mark.parametrize("players", [[], [BOB], [ALICE, BOB, CHARLIE]])
def test_init_rejects_wrong_player_count(game, players):
    assert game.init(players, 7) is None


def test_first_player_moves_and_turn_passes(game, state):
    after = game.play_turn(BOB, state, 1)
    assert after.players[after.next_player] == CHARLIE
    assert after.winner is None
    again = game.play_turn(CHARLIE, after, 1)
    assert again.players[again.next_player] == BOB


def test_out_of_turn_player_rejected(game, state):
    assert game.play_turn(CHARLIE, state, 1) is None
    after = game.play_turn(BOB, state, 1)
    assert game.play_turn(BOB, after, 1) is None


def test_outsider_rejected(game, state):
    assert game.play_turn(ALICE, state, THE_NUMBER) is None


def test_correct_guess_wins(game, state):
    after = game.play_turn(BOB, state, THE_NUMBER)
    assert after.winner == BOB
    finished = game.is_finished(after)
    assert finished.kind is FinishKind.WINNER
    assert finished.winner == BOB


def test_no_turns_after_winner(game, state):
    after = game.play_turn(BOB, state, THE_NUMBER)
    assert game.play_turn(CHARLIE, after, THE_NUMBER) is None


def test_unfinished_game(game, state):
    assert game.is_finished(state).kind is FinishKind.NO
    after = game.play_turn(BOB, state, THE_NUMBER + 1)
    assert game.is_finished(after).kind is FinishKind.NO


def test_play_turn_does_not_mutate_input(game, state):
    game.play_turn(BOB, state, THE_NUMBER)
    assert state.winner is None
    assert state.players[state.next_player] == BOB


def test_seed_is_none(game, state):
    assert game.seed(state) is None