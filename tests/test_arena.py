import csv
import json
from pathlib import Path

import pytest

from ttt_engine.arena import GameRecord, MatchArgs, play_game, run_match
from ttt_engine.decision import MinimaxStrategy, RandomStrategy
from ttt_engine.game_basics import Mark


def test_play_game_runs_to_the_end():
    rec = play_game(MinimaxStrategy(), RandomStrategy(seed=0), game_id=3)
    assert rec.game_id == 3
    assert rec.x_player == "minimax" and rec.o_player == "random"
    assert 5 <= rec.plies <= 9
    assert len(set(rec.moves)) == rec.plies
    row = rec.as_row()
    assert row["result"] in {"X", "O", "draw"}
    assert row["moves"].split() == [str(m) for m in rec.moves]


def test_self_play_is_deterministic():
    a = play_game(MinimaxStrategy(), MinimaxStrategy())
    b = play_game(MinimaxStrategy(), MinimaxStrategy())
    assert a.moves == b.moves
    assert a.moves[0] == 4


def test_record_result_labels():
    rec = GameRecord(game_id=0, x_player="a", o_player="b", winner=Mark.EMPTY, moves=[4])
    assert rec.result == "draw" and rec.plies == 1
    rec.winner = Mark.SECOND
    assert rec.result == "O"


def test_run_match_writes_csv_and_manifest(tmp_path: Path):
    out = run_match(MatchArgs(out=tmp_path / "m", games=4, first="minimax", second="random", seed=7))
    games_csv = out / "games.csv"
    assert games_csv.exists()
    with games_csv.open() as f:
        rows = list(csv.DictReader(f))
    assert [int(r["game_id"]) for r in rows] == [0, 1, 2, 3]
    # colours swap every game
    assert rows[0]["x_player"] == "first:minimax"
    assert rows[1]["x_player"] == "second:random"

    manifest = json.loads((out / "manifest.json").read_text())
    assert manifest["games"] == 4
    assert manifest["parquet_written"] is False
    for tally in manifest["tallies"].values():
        assert tally["wins"] + tally["draws"] + tally["losses"] == 4
    t = manifest["tallies"]
    assert t["first:minimax"]["wins"] == t["second:random"]["losses"]
    assert manifest["checksums"]["games_csv"]


def test_run_match_reproducible(tmp_path: Path):
    args = dict(games=6, first="alphabeta", second="random", seed=11)
    a = run_match(MatchArgs(out=tmp_path / "a", **args))
    b = run_match(MatchArgs(out=tmp_path / "b", **args))
    assert (a / "games.csv").read_bytes() == (b / "games.csv").read_bytes()


def test_no_alternate_keeps_first_on_x(tmp_path: Path):
    out = run_match(MatchArgs(out=tmp_path / "m", games=3, first="random", second="minimax",
                              seed=1, alternate=False))
    with (out / "games.csv").open() as f:
        assert {r["x_player"] for r in csv.DictReader(f)} == {"first:random"}


def test_match_args_validation(tmp_path: Path):
    with pytest.raises(ValueError):
        MatchArgs(out=tmp_path, games=0)
    with pytest.raises(ValueError):
        MatchArgs(out=tmp_path, format="xlsx")


def _hide_parquet_deps(monkeypatch: pytest.MonkeyPatch) -> None:
    import importlib

    real_find_spec = importlib.util.find_spec

    def fake_find_spec(name: str, package=None):  # type: ignore[override]
        if name in {"pandas", "pyarrow"}:
            return None
        return real_find_spec(name, package)

    monkeypatch.setattr(importlib.util, "find_spec", fake_find_spec)


def test_format_both_graceful_without_parquet_deps(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _hide_parquet_deps(monkeypatch)
    out = run_match(MatchArgs(out=tmp_path / "both", games=2, seed=0, format="both"))
    assert (out / "games.csv").exists()
    assert not (out / "games.parquet").exists()
    assert json.loads((out / "manifest.json").read_text())["parquet_written"] is False


def test_format_parquet_raises_without_deps(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _hide_parquet_deps(monkeypatch)
    out = tmp_path / "pq"
    with pytest.raises(RuntimeError):
        run_match(MatchArgs(out=out, games=2, seed=0, format="parquet"))
    assert not out.exists()


def test_parquet_export_when_available(tmp_path: Path):
    pd = pytest.importorskip("pandas")
    pytest.importorskip("pyarrow")
    out = run_match(MatchArgs(out=tmp_path / "pq", games=2, seed=0, format="parquet"))
    df = pd.read_parquet(out / "games.parquet")
    assert list(df["game_id"]) == [0, 1]
    assert not (out / "games.csv").exists()
