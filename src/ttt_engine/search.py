"""
Depth-limited adversarial search over a shared, mutable board.

Teaching notes:
- The engine's own mark maximizes the heuristic score; the opponent minimizes it.
- Leaves are terminal boards or nodes where the remaining depth hits zero.
- Candidates are tried in row-major order; the first one seeds the bound and a later
  candidate replaces it only when strictly better, so ties go to the earliest move.
- Every candidate is applied through Board.applied(), which undoes it on any exit.
"""
from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from typing import Optional

from .errors import NoLegalMove
from .evaluator import EvaluationWeights, HeuristicEvaluator
from .game_basics import CELLS, Board, Mark, Move
from .lines import is_terminal

DEFAULT_SEARCH_DEPTH = 2
MAX_SEARCH_DEPTH = CELLS
ALGORITHMS = ("minimax", "alphabeta")


@dataclass(frozen=True)
class SearchResult:
    score: int
    move: Optional[Move] = None


@dataclass
class SearchStats:
    nodes: int = 0
    leaves: int = 0


@dataclass(frozen=True)
class SearchConfig:
    depth: int = DEFAULT_SEARCH_DEPTH
    algorithm: str = "minimax"
    weights: EvaluationWeights = field(default_factory=EvaluationWeights)

    def __post_init__(self) -> None:
        if not 1 <= self.depth <= MAX_SEARCH_DEPTH:
            raise ValueError(f"Search depth must be in [1, {MAX_SEARCH_DEPTH}]: {self.depth}")
        if self.algorithm not in ALGORITHMS:
            raise ValueError(f"Unknown search algorithm: {self.algorithm}")

    @classmethod
    def from_env(cls, algorithm: Optional[str] = None) -> "SearchConfig":
        """Build a config from TTT_SEARCH_DEPTH / TTT_SEARCH_ALGORITHM, else defaults.

        An explicit ``algorithm`` wins over the environment.
        """
        depth = os.getenv("TTT_SEARCH_DEPTH")
        return cls(
            depth=int(depth) if depth else DEFAULT_SEARCH_DEPTH,
            algorithm=algorithm or os.getenv("TTT_SEARCH_ALGORITHM") or "minimax",
        )


def _leaf(board: Board, depth: int, own: Mark, evaluator: HeuristicEvaluator,
          stats: Optional[SearchStats]) -> Optional[SearchResult]:
    if stats is not None:
        stats.nodes += 1
    if depth == 0 or is_terminal(board):
        if stats is not None:
            stats.leaves += 1
        return SearchResult(evaluator.score(board, own))
    return None


def minimax(
    board: Board,
    depth: int,
    to_move: Mark,
    own: Mark,
    evaluator: HeuristicEvaluator,
    stats: Optional[SearchStats] = None,
) -> SearchResult:
    leaf = _leaf(board, depth, own, evaluator, stats)
    if leaf is not None:
        return leaf
    maximizing = to_move is own
    best: Optional[SearchResult] = None
    for move in board.empty_cells():
        with board.applied(move, to_move):
            child = minimax(board, depth - 1, to_move.opponent, own, evaluator, stats)
        if (
            best is None
            or (maximizing and child.score > best.score)
            or (not maximizing and child.score < best.score)
        ):
            best = SearchResult(child.score, move)
    if best is None:
        # unreachable: a non-terminal board always has an empty cell
        raise NoLegalMove("No empty cell on a non-terminal board")
    return best


def alphabeta(
    board: Board,
    depth: int,
    to_move: Mark,
    own: Mark,
    evaluator: HeuristicEvaluator,
    stats: Optional[SearchStats] = None,
    alpha: float = -math.inf,
    beta: float = math.inf,
) -> SearchResult:
    """Minimax with alpha-beta pruning; same root move and score as minimax()."""
    leaf = _leaf(board, depth, own, evaluator, stats)
    if leaf is not None:
        return leaf
    maximizing = to_move is own
    best: Optional[SearchResult] = None
    for move in board.empty_cells():
        with board.applied(move, to_move):
            child = alphabeta(board, depth - 1, to_move.opponent, own, evaluator, stats, alpha, beta)
        if maximizing:
            if best is None or child.score > best.score:
                best = SearchResult(child.score, move)
            alpha = max(alpha, child.score)
        else:
            if best is None or child.score < best.score:
                best = SearchResult(child.score, move)
            beta = min(beta, child.score)
        if beta <= alpha:
            break
    if best is None:
        raise NoLegalMove("No empty cell on a non-terminal board")
    return best


def search(
    board: Board,
    own: Mark,
    config: Optional[SearchConfig] = None,
    stats: Optional[SearchStats] = None,
) -> SearchResult:
    """Search from ``own``'s turn and return the best root move with its score."""
    cfg = config or SearchConfig()
    own = Mark(own)
    if own is Mark.EMPTY:
        raise ValueError("Engine mark must be FIRST or SECOND")
    if is_terminal(board):
        raise NoLegalMove(f"No legal move on terminal board {board.to_string()}")
    stats = stats if stats is not None else SearchStats()
    evaluator = HeuristicEvaluator(cfg.weights)
    algo = minimax if cfg.algorithm == "minimax" else alphabeta
    result = algo(board, cfg.depth, own, own, evaluator, stats)
    logging.debug(
        "search board=%s own=%s algo=%s depth=%d move=%s score=%d nodes=%d leaves=%d",
        board.to_string(), own.symbol, cfg.algorithm, cfg.depth,
        result.move, result.score, stats.nodes, stats.leaves,
    )
    return result
