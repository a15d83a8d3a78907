"""
Game basics: marks, moves and the mutable 3x3 board.

Teaching notes:
- A cell holds one of three marks: 0=empty, 1=X (first player), 2=O (second player).
- Boards serialize to 9 digits in row-major order, e.g. "100020000".
- The search mutates a single board in place; every apply is paired with an undo.
"""
from __future__ import annotations

from contextlib import contextmanager
from enum import IntEnum
from typing import Iterable, Iterator, List, NamedTuple, Sequence, Tuple

from .errors import InvalidMove, MalformedBoard

ROWS = 3
COLS = 3
CELLS = ROWS * COLS


class Mark(IntEnum):
    EMPTY = 0
    FIRST = 1
    SECOND = 2

    @property
    def opponent(self) -> "Mark":
        if self is Mark.FIRST:
            return Mark.SECOND
        if self is Mark.SECOND:
            return Mark.FIRST
        raise ValueError("EMPTY has no opponent")

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


_SYMBOLS = {Mark.EMPTY: '.', Mark.FIRST: 'X', Mark.SECOND: 'O'}


class Move(NamedTuple):
    row: int
    col: int

    @property
    def index(self) -> int:
        return self.row * COLS + self.col

    @classmethod
    def from_index(cls, idx: int) -> "Move":
        if not 0 <= idx < CELLS:
            raise InvalidMove(f"Cell index out of range: {idx}")
        return cls(idx // COLS, idx % COLS)


def _coerce_mark(value: object) -> Mark:
    if isinstance(value, Mark):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedBoard(f"Not a mark: {value!r}")
    try:
        return Mark(value)
    except ValueError:
        raise MalformedBoard(f"Not a mark: {value!r}") from None


class Board:
    """Fixed 3x3 grid of marks addressed by (row, col)."""

    def __init__(self) -> None:
        self._grid: List[List[Mark]] = [[Mark.EMPTY] * COLS for _ in range(ROWS)]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[object]]) -> "Board":
        if len(rows) != ROWS or any(len(r) != COLS for r in rows):
            raise MalformedBoard(f"Board must be {ROWS}x{COLS}")
        board = cls()
        for r, row in enumerate(rows):
            for c, value in enumerate(row):
                board._grid[r][c] = _coerce_mark(value)
        return board

    @classmethod
    def from_cells(cls, cells: Sequence[object]) -> "Board":
        if len(cells) != CELLS:
            raise MalformedBoard(f"Board must have {CELLS} cells, got {len(cells)}")
        return cls.from_rows([cells[r * COLS:(r + 1) * COLS] for r in range(ROWS)])

    @classmethod
    def from_string(cls, raw: str) -> "Board":
        raw = raw.strip()
        if len(raw) != CELLS or any(ch not in "012" for ch in raw):
            raise MalformedBoard("Invalid board string. Must be 9 chars of 0/1/2.")
        return cls.from_cells([int(ch) for ch in raw])

    def to_string(self) -> str:
        return ''.join(str(int(m)) for m in self.cells())

    def copy(self) -> "Board":
        other = Board()
        other._grid = [row[:] for row in self._grid]
        return other

    def rows(self) -> Tuple[Tuple[Mark, ...], ...]:
        return tuple(tuple(row) for row in self._grid)

    def cells(self) -> List[Mark]:
        return [m for row in self._grid for m in row]

    def counts(self) -> Tuple[int, int]:
        flat = self.cells()
        return flat.count(Mark.FIRST), flat.count(Mark.SECOND)

    def __getitem__(self, pos: Tuple[int, int]) -> Mark:
        row, col = pos
        self._check_bounds(row, col)
        return self._grid[row][col]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        return f"Board({self.to_string()!r})"

    @staticmethod
    def _check_bounds(row: int, col: int) -> None:
        if not (0 <= row < ROWS and 0 <= col < COLS):
            raise InvalidMove(f"Cell out of range: ({row}, {col})")

    def apply(self, move: Move, mark: Mark) -> None:
        row, col = move
        self._check_bounds(row, col)
        mark = _coerce_mark(mark)
        if mark is Mark.EMPTY:
            raise InvalidMove("Cannot place an EMPTY mark; use undo()")
        if self._grid[row][col] is not Mark.EMPTY:
            raise InvalidMove(f"Cell ({row}, {col}) is already occupied")
        self._grid[row][col] = mark

    def undo(self, move: Move) -> None:
        row, col = move
        self._check_bounds(row, col)
        if self._grid[row][col] is Mark.EMPTY:
            raise InvalidMove(f"Cell ({row}, {col}) is already empty")
        self._grid[row][col] = Mark.EMPTY

    @contextmanager
    def applied(self, move: Move, mark: Mark) -> Iterator["Board"]:
        """Apply ``move`` for the duration of the block, undoing it on any exit."""
        self.apply(move, mark)
        try:
            yield self
        finally:
            self.undo(move)

    def empty_cells(self) -> Iterator[Move]:
        for row in range(ROWS):
            for col in range(COLS):
                if self._grid[row][col] is Mark.EMPTY:
                    yield Move(row, col)

    def has_empty(self) -> bool:
        return any(m is Mark.EMPTY for row in self._grid for m in row)


def current_player(board: Board) -> Mark:
    x, o = board.counts()
    return Mark.FIRST if x == o else Mark.SECOND


def board_from_moves(moves: Iterable[Tuple[int, int]], first: Mark = Mark.FIRST) -> Board:
    """Replay alternating moves from an empty board."""
    board = Board()
    mark = first
    for row, col in moves:
        board.apply(Move(row, col), mark)
        mark = mark.opponent
    return board
