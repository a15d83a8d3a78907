"""ttt_engine package.

Depth-limited minimax move selection for tic-tac-toe, a bitmask line detector,
a line-run heuristic, a text game session and a strategy match runner.

Convenience imports are exposed for common workflows.
"""

from .decision import (
    AlphaBetaStrategy,
    MinimaxStrategy,
    RandomStrategy,
    Strategy,
    choose_move,
    make_strategy,
)
from .errors import EngineError, GameOver, InvalidMove, MalformedBoard, NoLegalMove
from .evaluator import EvaluationWeights, HeuristicEvaluator
from .game import GameSession, GameStatus
from .game_basics import Board, Mark, Move
from .lines import is_terminal, occupies_line, winner
from .search import SearchConfig, SearchResult, search

__all__ = [
    "choose_move",
    "search",
    "SearchConfig",
    "SearchResult",
    "Strategy",
    "MinimaxStrategy",
    "AlphaBetaStrategy",
    "RandomStrategy",
    "make_strategy",
    "Board",
    "Mark",
    "Move",
    "is_terminal",
    "occupies_line",
    "winner",
    "EvaluationWeights",
    "HeuristicEvaluator",
    "GameSession",
    "GameStatus",
    "EngineError",
    "InvalidMove",
    "NoLegalMove",
    "MalformedBoard",
    "GameOver",
]
