import pytest

pytest.importorskip("pytest_benchmark")

from ttt_engine.decision import choose_move  # noqa: E402
from ttt_engine.game_basics import Board, Mark, Move  # noqa: E402
from ttt_engine.search import SearchConfig, search  # noqa: E402


def test_benchmark_choose_move_empty_board(benchmark):
    move = benchmark(choose_move, Board(), Mark.FIRST)
    assert move == Move(1, 1)


def test_benchmark_alphabeta_depth_four(benchmark):
    cfg = SearchConfig(depth=4, algorithm="alphabeta")
    res = benchmark(search, Board.from_string("100000000"), Mark.SECOND, cfg)
    assert res.move is not None
