"""
Error types raised by the engine and the game session.

All failures surface synchronously to the caller; nothing is retried.
"""


class EngineError(Exception):
    """Base class for every error raised by ttt_engine."""


class InvalidMove(EngineError, ValueError):
    """A move targets an occupied or out-of-range cell."""


class NoLegalMove(EngineError):
    """A move was requested for a board that is already decided or full."""


class MalformedBoard(EngineError, ValueError):
    """Board input has the wrong shape or holds a value that is not a mark."""


class GameOver(EngineError):
    """A move was played in a session whose game has already ended."""
