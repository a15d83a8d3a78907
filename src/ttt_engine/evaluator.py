"""
Heuristic position scoring.

Each of the 8 lines contributes a signed amount from the engine's point of view:
+1, +10, +100 for an unopposed 1-, 2-, 3-in-a-line of its own mark, the negated
values for the opponent, and 0 for an empty line or one that holds both marks.
The total is an estimate only; it does not tell a won position from a strong one.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .game_basics import Board, Mark
from .lines import WIN_LINES, Line


@dataclass(frozen=True)
class EvaluationWeights:
    """Score for an unopposed run of 1, 2 and 3 cells in one line."""
    run_weights: Tuple[int, int, int] = (1, 10, 100)

    def __post_init__(self) -> None:
        if len(self.run_weights) != 3:
            raise ValueError(f"run_weights needs 3 entries, got {len(self.run_weights)}")
        if any(not isinstance(w, int) or w < 0 for w in self.run_weights):
            raise ValueError(f"run_weights must be non-negative ints: {self.run_weights}")


class HeuristicEvaluator:

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def score_line(self, board: Board, line: Line, own: Mark, opponent: Mark) -> int:
        # run > 0 counts own cells, run < 0 counts opponent cells
        run = 0
        for row, col in line:
            cell = board[row, col]
            if cell == own:
                if run < 0:
                    return 0
                run += 1
            elif cell == opponent:
                if run > 0:
                    return 0
                run -= 1
        if run == 0:
            return 0
        weight = self.weights.run_weights[abs(run) - 1]
        return weight if run > 0 else -weight

    def line_scores(self, board: Board, own: Mark) -> List[int]:
        own = Mark(own)
        opponent = own.opponent
        return [self.score_line(board, line, own, opponent) for line in WIN_LINES]

    def score(self, board: Board, own: Mark) -> int:
        return sum(self.line_scores(board, own))


def evaluate(board: Board, own: Mark) -> int:
    """Score ``board`` for ``own`` with the default weights."""
    return _DEFAULT.score(board, own)


_DEFAULT = HeuristicEvaluator()
