"""
Winning lines and terminal-state detection.

Teaching notes:
- There are 8 lines: 3 rows, 3 columns, 2 diagonals.
- Cell (r, c) maps to bit r*3 + c, so the cells holding one mark pack into a 9-bit int.
- A mark occupies a line when (bits & mask) == mask for that line's mask.
"""
from typing import List, Optional, Tuple

from .game_basics import COLS, Board, Mark

Line = Tuple[Tuple[int, int], Tuple[int, int], Tuple[int, int]]

WIN_LINES: List[Line] = [
    ((0, 0), (0, 1), (0, 2)), ((1, 0), (1, 1), (1, 2)), ((2, 0), (2, 1), (2, 2)),  # rows
    ((0, 0), (1, 0), (2, 0)), ((0, 1), (1, 1), (2, 1)), ((0, 2), (1, 2), (2, 2)),  # cols
    ((0, 0), (1, 1), (2, 2)), ((0, 2), (1, 1), (2, 0)),                            # diagonals
]


def _line_mask(line: Line) -> int:
    mask = 0
    for row, col in line:
        mask |= 1 << (row * COLS + col)
    return mask


LINE_MASKS: List[int] = [_line_mask(line) for line in WIN_LINES]


def mark_bits(board: Board, mark: Mark) -> int:
    mark = Mark(mark)
    bits = 0
    for idx, cell in enumerate(board.cells()):
        if cell is mark:
            bits |= 1 << idx
    return bits


def occupies_line(board: Board, mark: Mark) -> bool:
    bits = mark_bits(board, mark)
    for mask in LINE_MASKS:
        if (bits & mask) == mask:
            return True
    return False


def winner(board: Board) -> Mark:
    """Return the mark that fills a line, or Mark.EMPTY when nobody has."""
    for mark in (Mark.FIRST, Mark.SECOND):
        if occupies_line(board, mark):
            return mark
    return Mark.EMPTY


def is_draw(board: Board) -> bool:
    return not board.has_empty() and winner(board) is Mark.EMPTY


def is_terminal(board: Board) -> bool:
    return (
        occupies_line(board, Mark.FIRST)
        or occupies_line(board, Mark.SECOND)
        or not board.has_empty()
    )


def winning_line(board: Board) -> Optional[Line]:
    for mark in (Mark.FIRST, Mark.SECOND):
        bits = mark_bits(board, mark)
        for line, mask in zip(WIN_LINES, LINE_MASKS):
            if (bits & mask) == mask:
                return line
    return None


def is_valid_state(board: Board) -> bool:
    """True for positions reachable by alternating play with X first."""
    x_count, o_count = board.counts()
    if not (x_count == o_count or x_count == o_count + 1):
        return False
    x_won = occupies_line(board, Mark.FIRST)
    o_won = occupies_line(board, Mark.SECOND)
    if x_won and o_won:
        return False
    if x_won and x_count != o_count + 1:
        return False
    if o_won and x_count != o_count:
        return False
    return True
