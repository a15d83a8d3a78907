"""
Head-to-head matches between strategies.

Plays a series of full games, writes one row per game (CSV by default,
Parquet when pandas and pyarrow are installed) and a manifest.json with the
tallies and provenance needed to reproduce the run.
"""
from __future__ import annotations

import csv
import hashlib
import importlib.util
import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .decision import Strategy, make_strategy
from .game_basics import Board, Mark
from .lines import is_terminal, winner
from .paths import get_git_commit, get_git_is_dirty, runs_dir
from .search import DEFAULT_SEARCH_DEPTH

MATCH_FORMAT_VERSION = "1.0.0"
FORMATS = ("csv", "parquet", "both")


@dataclass
class MatchArgs:
    out: Path = field(default_factory=lambda: runs_dir() / "match")
    games: int = 10
    first: str = "minimax"
    second: str = "random"
    depth: int = DEFAULT_SEARCH_DEPTH
    seed: Optional[int] = None
    alternate: bool = True
    format: str = "csv"
    cli_argv: List[str] | None = None

    def __post_init__(self) -> None:
        if self.games < 1:
            raise ValueError(f"games must be >= 1: {self.games}")
        if self.format not in FORMATS:
            raise ValueError(f"Unknown export format: {self.format}")


@dataclass
class GameRecord:
    game_id: int
    x_player: str
    o_player: str
    winner: Mark
    moves: List[int]

    @property
    def plies(self) -> int:
        return len(self.moves)

    @property
    def result(self) -> str:
        return "draw" if self.winner is Mark.EMPTY else self.winner.symbol

    def as_row(self) -> Dict[str, Any]:
        return {
            "game_id": self.game_id,
            "x_player": self.x_player,
            "o_player": self.o_player,
            "result": self.result,
            "plies": self.plies,
            "moves": " ".join(map(str, self.moves)),
        }


def play_game(x: Strategy, o: Strategy, game_id: int = 0,
              x_name: str | None = None, o_name: str | None = None) -> GameRecord:
    board = Board()
    players = {Mark.FIRST: x, Mark.SECOND: o}
    to_move = Mark.FIRST
    moves: List[int] = []
    while not is_terminal(board):
        move = players[to_move].choose_move(board, to_move)
        board.apply(move, to_move)
        moves.append(move.index)
        to_move = to_move.opponent
    return GameRecord(
        game_id=game_id,
        x_player=x_name or x.name,
        o_player=o_name or o.name,
        winner=winner(board),
        moves=moves,
    )


def _tally(records: List[GameRecord], label: str) -> Dict[str, int]:
    wins = draws = losses = 0
    for rec in records:
        if rec.winner is Mark.EMPTY:
            draws += 1
            continue
        won_as = rec.x_player if rec.winner is Mark.FIRST else rec.o_player
        if won_as == label:
            wins += 1
        else:
            losses += 1
    return {"wins": wins, "draws": draws, "losses": losses}


def _sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def _write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    fieldnames = ["game_id", "x_player", "o_player", "result", "plies", "moves"]
    with path.open("w", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for r in sorted(rows, key=lambda r: r["game_id"]):
            w.writerow(r)


def run_match(args: MatchArgs) -> Path:
    have_parquet = (
        importlib.util.find_spec("pandas") is not None
        and importlib.util.find_spec("pyarrow") is not None
    )
    if args.format == "parquet" and not have_parquet:
        # fail before any file is written
        raise RuntimeError(
            "Parquet dependencies not available (install pandas and pyarrow). "
            "Use pip install .[parquet] to enable parquet support."
        )

    # slot labels keep tallies apart when both sides run the same strategy
    first_label = f"first:{args.first}"
    second_label = f"second:{args.second}"
    second_seed = None if args.seed is None else args.seed + 1
    first = make_strategy(args.first, depth=args.depth, seed=args.seed)
    second = make_strategy(args.second, depth=args.depth, seed=second_seed)

    records: List[GameRecord] = []
    for game_id in range(args.games):
        if args.alternate and game_id % 2 == 1:
            rec = play_game(second, first, game_id, second_label, first_label)
        else:
            rec = play_game(first, second, game_id, first_label, second_label)
        logging.debug("game=%d result=%s moves=%s", game_id, rec.result, rec.moves)
        records.append(rec)

    tallies = {
        first_label: _tally(records, first_label),
        second_label: _tally(records, second_label),
    }
    logging.info(
        "Played %d games: %s wins=%d draws=%d losses=%d",
        len(records), first_label, tallies[first_label]["wins"],
        tallies[first_label]["draws"], tallies[first_label]["losses"],
    )

    args.out.mkdir(parents=True, exist_ok=True)
    rows = [rec.as_row() for rec in records]
    games_csv = args.out / "games.csv"
    games_parquet = args.out / "games.parquet"
    wrote_csv = False
    wrote_parquet = False

    if args.format in {"csv", "both"}:
        _write_csv(games_csv, rows)
        wrote_csv = True
        logging.info("Wrote %s (%d rows)", games_csv, len(rows))

    if args.format in {"parquet", "both"}:
        if have_parquet:
            import pandas as pd  # type: ignore

            pd.DataFrame(rows).sort_values("game_id").to_parquet(games_parquet, index=False)
            wrote_parquet = True
            logging.info("Wrote %s", games_parquet)
        else:
            logging.warning(
                "Parquet dependencies not available; proceeding with CSV only, "
                "manifest will record parquet_written=false."
            )

    packages: Dict[str, str] = {}
    for pkg in ("pandas", "pyarrow"):
        if importlib.util.find_spec(pkg) is not None:
            ver = getattr(__import__(pkg), "__version__", None)
            if ver:
                packages[pkg] = ver

    files = {
        "games_csv": str(games_csv) if wrote_csv else None,
        "games_parquet": str(games_parquet) if wrote_parquet else None,
    }
    manifest = {
        "format_version": MATCH_FORMAT_VERSION,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "args": {
            "games": args.games,
            "first": args.first,
            "second": args.second,
            "depth": args.depth,
            "seed": args.seed,
            "alternate": args.alternate,
            "format": args.format,
        },
        "cli_argv": args.cli_argv,
        "git_commit": get_git_commit(),
        "git_is_dirty": get_git_is_dirty(),
        "python": {"python_version": sys.version.split(" ")[0], "packages": packages},
        "games": len(records),
        "tallies": tallies,
        "files": files,
        "checksums": {k: _sha256_file(Path(p)) for k, p in files.items() if p is not None},
        "parquet_written": wrote_parquet,
    }
    (args.out / "manifest.json").write_text(json.dumps(manifest, indent=2))
    logging.info("Wrote manifest.json to %s", args.out)
    return args.out
