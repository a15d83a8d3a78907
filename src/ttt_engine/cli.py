from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Tuple

from .arena import FORMATS, MatchArgs, run_match
from .decision import STRATEGIES, MinimaxStrategy, make_strategy
from .errors import EngineError
from .evaluator import HeuristicEvaluator
from .game import GameSession
from .game_basics import Board, Mark, current_player
from .lines import WIN_LINES, is_terminal, is_valid_state, winner, winning_line
from .paths import runs_dir
from .search import ALGORITHMS, SearchConfig

_MARKS = {"1": Mark.FIRST, "x": Mark.FIRST, "2": Mark.SECOND, "o": Mark.SECOND}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt", description="Tic-tac-toe minimax engine CLI")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )
    p.add_argument("--seed", type=int, default=None, help="Seed for random strategies")

    def add_search_args(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "--depth", type=int, default=None,
            help="Search depth in plies (default: TTT_SEARCH_DEPTH or 2)",
        )
        sp.add_argument(
            "--strategy", choices=sorted(STRATEGIES), default=None,
            help="Move strategy (default: TTT_SEARCH_ALGORITHM or minimax)",
        )

    p_move = sub.add_parser("move", help="Pick the engine move for a board (9 digits, 0=empty,1=X,2=O)")
    p_move.add_argument("--board", required=True, help="Board string, e.g., 100020000")
    p_move.add_argument("--mark", choices=sorted(_MARKS), default=None,
                        help="Engine mark (default: side to move)")
    add_search_args(p_move)

    p_eval = sub.add_parser("evaluate", help="Heuristic score of a board for one mark")
    p_eval.add_argument("--board", required=True, help="Board string, e.g., 100020000")
    p_eval.add_argument("--mark", choices=sorted(_MARKS), default=None,
                        help="Scoring perspective (default: side to move)")

    p_play = sub.add_parser("play", help="Play against the engine on stdin/stdout")
    p_play.add_argument("--human", choices=["x", "o"], default="x", help="Your mark (X moves first)")
    add_search_args(p_play)

    p_arena = sub.add_parser("arena", help="Play strategies against each other and export results")
    p_arena.add_argument("--games", type=int, default=10, help="Number of games (default: 10)")
    p_arena.add_argument("--first", choices=sorted(STRATEGIES), default="minimax")
    p_arena.add_argument("--second", choices=sorted(STRATEGIES), default="random")
    p_arena.add_argument("--depth", type=int, default=None, help="Search depth for search strategies")
    p_arena.add_argument("--out", type=Path, default=None,
                         help="Output directory (default: TTT_RUNS_DIR/match or runs/match)")
    p_arena.add_argument("--format", choices=list(FORMATS), default="csv",
                         help="Export format: csv (default), parquet, both")
    p_arena.add_argument("--no-alternate", dest="alternate", action="store_false",
                         help="Keep --first on X for every game")

    return p


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["pandas", "pyarrow", "hypothesis"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _parse_board(raw: str) -> Optional[Board]:
    try:
        board = Board.from_string(raw)
    except EngineError as e:
        logging.error("%s", e)
        return None
    if not is_valid_state(board):
        logging.error("Board is not a valid reachable state.")
        return None
    return board


def _parse_cell(raw: str) -> Tuple[int, int]:
    parts = raw.replace(",", " ").split()
    if len(parts) != 2:
        raise ValueError(f"Expected 'row col', got {raw!r}")
    return int(parts[0]), int(parts[1])


def _strategy_name(ns: argparse.Namespace) -> str:
    return getattr(ns, "strategy", None) or os.getenv("TTT_SEARCH_ALGORITHM") or "minimax"


def _search_config(ns: argparse.Namespace) -> SearchConfig:
    # non-search strategies (random) still need a valid config for depth
    name = _strategy_name(ns)
    cfg = SearchConfig.from_env(algorithm=name if name in ALGORITHMS else "minimax")
    if ns.depth is not None:
        cfg = replace(cfg, depth=ns.depth)
    return cfg


def _run_move(ns: argparse.Namespace) -> int:
    board = _parse_board(ns.board)
    if board is None:
        return 2
    if is_terminal(board):
        logging.error("Board is terminal; no legal move.")
        return 2
    mark = _MARKS[ns.mark] if ns.mark else current_player(board)
    cfg = _search_config(ns)
    strategy = make_strategy(_strategy_name(ns), depth=cfg.depth, seed=ns.seed)
    move = strategy.choose_move(board, mark)
    score = strategy.last_score if isinstance(strategy, MinimaxStrategy) else None
    logging.info(
        "mark=%s move=%d,%d index=%d score=%s strategy=%s",
        mark.symbol, move.row, move.col, move.index, score, strategy.name,
    )
    return 0


def _run_evaluate(ns: argparse.Namespace) -> int:
    board = _parse_board(ns.board)
    if board is None:
        return 2
    mark = _MARKS[ns.mark] if ns.mark else current_player(board)
    evaluator = HeuristicEvaluator()
    for line, s in zip(WIN_LINES, evaluator.line_scores(board, mark)):
        logging.debug("line=%s score=%d", line, s)
    w = winner(board)
    logging.info(
        "mark=%s score=%d winner=%s terminal=%s",
        mark.symbol,
        evaluator.score(board, mark),
        "-" if w is Mark.EMPTY else w.symbol,
        is_terminal(board),
    )
    return 0


def _run_play(ns: argparse.Namespace) -> int:
    cfg = _search_config(ns)
    engine = make_strategy(_strategy_name(ns), depth=cfg.depth, seed=ns.seed)
    session = GameSession(engine, _MARKS[ns.human])
    print(session.render())
    print(session.status_message())
    while not session.status.finished:
        print("Your move (row col, q to quit): ", end="", flush=True)
        line = sys.stdin.readline()
        if not line:
            print()
            return 0
        raw = line.strip().lower()
        if raw in {"q", "quit"}:
            return 0
        try:
            row, col = _parse_cell(raw)
            reply = session.play(row, col)
        except ValueError as e:
            logging.warning("%s", e)
            continue
        if reply is not None:
            logging.info("engine=%d,%d", reply.row, reply.col)
        print(session.render())
        print(session.status_message())
    line = winning_line(session.board)
    if line is not None:
        logging.info("winning_line=%s", " ".join(f"{r},{c}" for r, c in line))
    return 0


def _run_arena(ns: argparse.Namespace, argv: Optional[list]) -> int:
    depth = _search_config(ns).depth
    out = run_match(MatchArgs(
        out=ns.out if ns.out is not None else runs_dir() / "match",
        games=ns.games,
        first=ns.first,
        second=ns.second,
        depth=depth,
        seed=ns.seed,
        alternate=ns.alternate,
        format=ns.format,
        cli_argv=list(argv) if argv is not None else None,
    ))
    logging.info("Exported match results to: %s", out)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    # Early exits
    if getattr(ns, "version", False):
        from importlib.metadata import PackageNotFoundError, version as _ver

        try:
            print(_ver("ttt-engine"))
        except PackageNotFoundError:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    try:
        if ns.cmd == "move":
            return _run_move(ns)
        if ns.cmd == "evaluate":
            return _run_evaluate(ns)
        if ns.cmd == "play":
            return _run_play(ns)
        if ns.cmd == "arena":
            return _run_arena(ns, argv)
    except (ValueError, RuntimeError) as e:
        logging.error("%s", e)
        return 2

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
