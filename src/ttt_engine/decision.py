"""
Move selection: the engine entry point and interchangeable strategies.

``choose_move`` is what a game shell calls. Strategies wrap one way of choosing
a move behind the same ``choose_move(board, mark)`` method so shells and the
match runner can swap them freely.
"""
from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Dict, Optional

from .errors import NoLegalMove
from .evaluator import EvaluationWeights
from .game_basics import Board, Mark, Move
from .lines import is_terminal
from .search import DEFAULT_SEARCH_DEPTH, SearchConfig, SearchStats, search


def choose_move(
    board: Board,
    engine_mark: Mark,
    depth: int = DEFAULT_SEARCH_DEPTH,
    weights: Optional[EvaluationWeights] = None,
) -> Move:
    """Return the engine's move for ``engine_mark``.

    Raises NoLegalMove when the board is already decided or full. The board is
    left exactly as it was passed in.
    """
    config = SearchConfig(depth=depth, weights=weights or EvaluationWeights())
    result = search(board, engine_mark, config)
    assert result.move is not None
    return result.move


class Strategy(ABC):
    """One way of choosing a move for a given mark."""

    name = "strategy"

    @abstractmethod
    def choose_move(self, board: Board, mark: Mark) -> Move:
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class MinimaxStrategy(Strategy):
    name = "minimax"

    def __init__(self, config: Optional[SearchConfig] = None):
        self.config = config or SearchConfig(algorithm=self.name)
        self.last_stats = SearchStats()
        self.last_score: Optional[int] = None

    def choose_move(self, board: Board, mark: Mark) -> Move:
        self.last_stats = SearchStats()
        result = search(board, mark, self.config, self.last_stats)
        self.last_score = result.score
        assert result.move is not None
        return result.move


class AlphaBetaStrategy(MinimaxStrategy):
    name = "alphabeta"


class RandomStrategy(Strategy):
    """Uniformly random legal move; a baseline opponent."""

    name = "random"

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    def choose_move(self, board: Board, mark: Mark) -> Move:
        if is_terminal(board):
            raise NoLegalMove(f"No legal move on terminal board {board.to_string()}")
        return self.rng.choice(list(board.empty_cells()))


STRATEGIES: Dict[str, type] = {
    "minimax": MinimaxStrategy,
    "alphabeta": AlphaBetaStrategy,
    "random": RandomStrategy,
}


def make_strategy(name: str, depth: int = DEFAULT_SEARCH_DEPTH, seed: Optional[int] = None) -> Strategy:
    if name not in STRATEGIES:
        raise ValueError(f"Unknown strategy: {name} (choose from {', '.join(STRATEGIES)})")
    if name == "random":
        return RandomStrategy(seed)
    return STRATEGIES[name](SearchConfig(depth=depth, algorithm=name))
