"""
A human-vs-engine game session for text front ends.

The session owns the board, applies the human move, asks the engine for its
reply, and tracks whether the game is still running.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Tuple

from .decision import MinimaxStrategy, Strategy
from .errors import GameOver, InvalidMove
from .game_basics import Board, Mark, Move
from .lines import is_draw, occupies_line


class GameStatus(Enum):
    PLAYING = "playing"
    DRAW = "draw"
    FIRST_WON = "first_won"
    SECOND_WON = "second_won"

    @property
    def finished(self) -> bool:
        return self is not GameStatus.PLAYING


class GameSession:

    def __init__(self, engine: Optional[Strategy] = None, human_mark: Mark = Mark.FIRST):
        human_mark = Mark(human_mark)
        if human_mark is Mark.EMPTY:
            raise ValueError("Human mark must be FIRST or SECOND")
        self.engine = engine or MinimaxStrategy()
        self.human_mark = human_mark
        self.engine_mark = human_mark.opponent
        self.board = Board()
        self.status = GameStatus.PLAYING
        self.current = Mark.FIRST
        self.history: List[Tuple[Mark, Move]] = []
        self.reset()

    def reset(self) -> None:
        """Start a new game; the engine opens when it plays X."""
        self.board = Board()
        self.status = GameStatus.PLAYING
        self.current = Mark.FIRST
        self.history = []
        if self.engine_mark is Mark.FIRST:
            self.engine_move()

    def _update(self, mark: Mark) -> None:
        if occupies_line(self.board, mark):
            self.status = GameStatus.FIRST_WON if mark is Mark.FIRST else GameStatus.SECOND_WON
        elif is_draw(self.board):
            self.status = GameStatus.DRAW

    def _place(self, move: Move, mark: Mark) -> None:
        if self.status.finished:
            raise GameOver(f"Game already over: {self.status.value}")
        if mark is not self.current:
            raise InvalidMove(f"It is {self.current.symbol}'s turn, not {mark.symbol}'s")
        self.board.apply(move, mark)
        self.history.append((mark, move))
        self._update(mark)
        self.current = mark.opponent

    def engine_move(self) -> Move:
        move = self.engine.choose_move(self.board, self.engine_mark)
        self._place(move, self.engine_mark)
        logging.debug("engine %s played %s", self.engine_mark.symbol, move)
        return move

    def play(self, row: int, col: int) -> Optional[Move]:
        """Play the human move, then the engine reply if the game goes on."""
        self._place(Move(row, col), self.human_mark)
        if self.status.finished:
            return None
        return self.engine_move()

    def status_message(self) -> str:
        if self.status is GameStatus.PLAYING:
            return f"{self.current.symbol}'s Turn"
        if self.status is GameStatus.DRAW:
            return "It's a Draw!"
        won = Mark.FIRST if self.status is GameStatus.FIRST_WON else Mark.SECOND
        return f"'{won.symbol}' Won!"

    def render(self) -> str:
        lines = []
        for row in self.board.rows():
            lines.append("|".join(" " if m is Mark.EMPTY else m.symbol for m in row))
        return "\n-+-+-\n".join(lines)
