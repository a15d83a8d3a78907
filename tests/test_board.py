import pytest

from ttt_engine.errors import InvalidMove, MalformedBoard
from ttt_engine.game_basics import Board, Mark, Move, board_from_moves, current_player


def test_empty_cells_row_major_and_restartable():
    b = Board.from_string("100020001")
    first = list(b.empty_cells())
    assert first == [Move(0, 1), Move(0, 2), Move(1, 0), Move(1, 2), Move(2, 0), Move(2, 1)]
    # a second pass starts over
    assert list(b.empty_cells()) == first


def test_apply_then_undo_restores_board():
    b = Board.from_string("100020000")
    before = b.copy()
    b.apply(Move(2, 2), Mark.FIRST)
    assert b[2, 2] is Mark.FIRST
    b.undo(Move(2, 2))
    assert b == before


def test_apply_occupied_cell_fails_without_overwrite():
    b = Board.from_string("100020000")
    with pytest.raises(InvalidMove):
        b.apply(Move(1, 1), Mark.FIRST)
    assert b[1, 1] is Mark.SECOND
    assert b.to_string() == "100020000"


@pytest.mark.parametrize("move", [Move(3, 0), Move(0, 3), Move(-1, 0)])
def test_apply_out_of_range_fails(move):
    b = Board()
    with pytest.raises(InvalidMove):
        b.apply(move, Mark.FIRST)
    assert b == Board()


def test_apply_empty_mark_and_undo_empty_cell_fail():
    b = Board()
    with pytest.raises(InvalidMove):
        b.apply(Move(0, 0), Mark.EMPTY)
    with pytest.raises(InvalidMove):
        b.undo(Move(0, 0))


def test_applied_context_undoes_on_exception():
    b = Board.from_string("100000000")
    with pytest.raises(RuntimeError):
        with b.applied(Move(1, 1), Mark.SECOND):
            assert b[1, 1] is Mark.SECOND
            raise RuntimeError("boom")
    assert b.to_string() == "100000000"


@pytest.mark.parametrize("rows", [
    [[0, 0, 0], [0, 0, 0]],
    [[0, 0], [0, 0], [0, 0]],
    [[0, 0, 0], [0, 3, 0], [0, 0, 0]],
    [[0, 0, 0], [0, "x", 0], [0, 0, 0]],
    [[0, 0, 0], [0, True, 0], [0, 0, 0]],
])
def test_from_rows_rejects_malformed(rows):
    with pytest.raises(MalformedBoard):
        Board.from_rows(rows)


@pytest.mark.parametrize("bad", ["abc", "01234567", "0123456789", "12345678x", "000030000"])
def test_from_string_rejects_malformed(bad):
    with pytest.raises(MalformedBoard):
        Board.from_string(bad)


def test_string_and_rows_agree():
    b = Board.from_rows([[1, 0, 2], [0, 1, 0], [2, 0, 0]])
    assert b.to_string() == "102010200"
    assert b.rows()[0] == (Mark.FIRST, Mark.EMPTY, Mark.SECOND)
    assert b.counts() == (2, 2)


def test_copy_is_independent():
    b = Board()
    c = b.copy()
    c.apply(Move(0, 0), Mark.FIRST)
    assert b[0, 0] is Mark.EMPTY


def test_mark_opponent_and_symbols():
    assert Mark.FIRST.opponent is Mark.SECOND
    assert Mark.SECOND.opponent is Mark.FIRST
    assert (Mark.EMPTY.symbol, Mark.FIRST.symbol, Mark.SECOND.symbol) == ('.', 'X', 'O')
    with pytest.raises(ValueError):
        Mark.EMPTY.opponent


def test_move_index_round_trip_and_current_player():
    assert Move.from_index(5) == Move(1, 2)
    assert Move(2, 1).index == 7
    with pytest.raises(InvalidMove):
        Move.from_index(9)
    b = board_from_moves([(0, 0), (1, 1)])
    assert b.to_string() == "100020000"
    assert current_player(b) is Mark.FIRST
    b.apply(Move(2, 2), Mark.FIRST)
    assert current_player(b) is Mark.SECOND
