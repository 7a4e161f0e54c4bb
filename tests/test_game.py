"""Unit tests for Tic Tac Toe game logic."""

import itertools

import pytest

from tictactoe.game import (
    DRAW,
    ONGOING,
    WINNING_LINES,
    Cell,
    Draw,
    GameState,
    Ongoing,
    Player,
    Win,
    apply_move,
    available_moves,
    evaluate,
    initial_state,
    is_cell_enabled,
    make_board,
    render_board,
    reset,
    status_text,
    status_tone,
    winning_line,
)


def play(*indices):
    state = initial_state()
    for index in indices:
        state = apply_move(state, index)
    return state


def test_initial_state():
    state = initial_state()
    assert state.board == (Cell.EMPTY,) * 9
    assert state.turn is Player.X
    assert state.outcome == ONGOING
    assert available_moves(state) == list(range(9))


@pytest.mark.parametrize("line", WINNING_LINES)
@pytest.mark.parametrize("player", [Player.X, Player.O])
def test_every_line_wins(line, player):
    cells = ["."] * 9
    for index in line:
        cells[index] = player.value
    assert evaluate(make_board(cells)) == Win(player=player, line=line)


def test_full_board_without_line_is_draw():
    assert evaluate(make_board("XXOOOXXOX")) == DRAW


def test_partial_board_without_line_is_ongoing():
    assert evaluate(make_board("XO.......")) == ONGOING
    assert evaluate(make_board(".........")) == ONGOING


def test_win_on_full_board_beats_draw():
    outcome = evaluate(make_board("XOXOXOOXX"))
    assert outcome == Win(player=Player.X, line=(0, 4, 8))


def test_first_line_in_order_is_reported():
    # Unreachable in play, but the evaluator is total.
    assert evaluate(make_board("XXXXXXXXX")) == Win(player=Player.X, line=(0, 1, 2))
    assert evaluate(make_board("OOO...XXX")).line == (0, 1, 2)


def test_evaluate_does_not_mutate_input():
    cells = ["X", "X", "X", "", "", "", "", "", ""]
    evaluate(cells)
    assert cells == ["X", "X", "X", "", "", "", "", "", ""]


def test_make_board_rejects_wrong_length():
    with pytest.raises(ValueError):
        make_board("XO")


def test_first_move_places_x_and_passes_turn():
    state = apply_move(initial_state(), 0)
    assert state.board[0] is Cell.X
    assert state.turn is Player.O
    assert state.outcome == ONGOING


def test_turns_alternate_while_ongoing():
    state = initial_state()
    turns = []
    for index in (4, 0, 2, 6, 3):
        turns.append(state.turn)
        state = apply_move(state, index)
        assert isinstance(state.outcome, Ongoing)
    assert turns == [Player.X, Player.O, Player.X, Player.O, Player.X]


def test_row_win_scenario():
    state = play(0, 3, 1, 4, 2)
    assert state.board == make_board("XXXOO....")
    assert state.outcome == Win(player=Player.X, line=(0, 1, 2))
    assert state.turn is Player.X


def test_draw_scenario():
    # X: 0, 1, 5, 6, 8  O: 2, 3, 4, 7
    state = play(0, 2, 1, 3, 5, 4, 6, 7, 8)
    assert isinstance(state.outcome, Draw)
    assert all(cell != Cell.EMPTY for cell in state.board)


def test_occupied_cell_is_ignored():
    state = play(0)
    assert apply_move(state, 0) is state


@pytest.mark.parametrize("index", [-1, 9, 42])
def test_out_of_range_index_is_ignored(index):
    state = play(0)
    assert apply_move(state, index) is state


def test_finished_game_absorbs_moves():
    won = play(0, 3, 1, 4, 2)
    for index in range(9):
        assert apply_move(won, index) is won

    drawn = play(0, 2, 1, 3, 5, 4, 6, 7, 8)
    assert apply_move(drawn, 0) is drawn


def test_reset_returns_initial_state():
    state = play(0, 3, 1, 4, 2)
    fresh = reset(state)
    assert fresh == initial_state()
    assert reset(reset(state)) == fresh


def test_status_text():
    assert status_text(initial_state()) == "Next turn: X"
    assert status_text(play(0)) == "Next turn: O"
    assert status_text(play(0, 3, 1, 4, 2)) == "Winner: X"
    assert status_text(play(0, 2, 1, 3, 5, 4, 6, 7, 8)) == "It's a draw!"


def test_status_tone():
    assert status_tone(initial_state()) == "x"
    assert status_tone(play(0)) == "o"
    assert status_tone(play(8, 0, 7, 1, 4, 2)) == "o"
    assert status_tone(play(0, 2, 1, 3, 5, 4, 6, 7, 8)) == "draw"


def test_cells_disabled_when_taken_or_finished():
    state = play(4)
    assert not is_cell_enabled(state, 4)
    assert is_cell_enabled(state, 0)

    won = play(0, 3, 1, 4, 2)
    assert not any(is_cell_enabled(won, i) for i in range(9))
    assert available_moves(won) == []
    assert winning_line(won) == (0, 1, 2)
    assert winning_line(state) == ()


def test_render_board():
    assert render_board(make_board("XXXOO....")) == "X|X|X\nO|O|.\n.|.|."


def _brute_force_outcome(board):
    for line in WINNING_LINES:
        marks = {board[i] for i in line}
        if len(marks) == 1 and Cell.EMPTY not in marks:
            return Win(player=Player(board[line[0]].value), line=line)
    if Cell.EMPTY in board:
        return ONGOING
    return DRAW


def test_evaluate_matches_brute_force_on_every_board():
    for cells in itertools.product(list(Cell), repeat=9):
        assert evaluate(cells) == _brute_force_outcome(cells), render_board(cells)


def test_state_derives_outcome_from_board():
    state = GameState(board=make_board("XXX......"))
    assert state.outcome == Win(player=Player.X, line=(0, 1, 2))
    assert apply_move(state, 3) is state


def test_state_rejects_outcome_that_contradicts_board():
    with pytest.raises(ValueError):
        GameState(board=make_board("XXX......"), outcome=ONGOING)
    with pytest.raises(ValueError):
        GameState(board=make_board("........."), outcome=DRAW)


def test_state_rejects_short_board():
    with pytest.raises(ValueError):
        GameState(board=(Cell.EMPTY,) * 8)


@pytest.mark.parametrize("index", [-1, -9, 9])
def test_out_of_range_cell_is_never_enabled(index):
    state = initial_state()
    assert not is_cell_enabled(state, index)
    assert apply_move(state, index) is state
