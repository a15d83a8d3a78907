"""Output locations and git provenance for match artifacts.

Environment variables win; otherwise paths resolve against the enclosing git
checkout, falling back to the current working directory when installed.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path


def _find_git_root(start: Path) -> Path | None:
    for cur in [start, *start.parents][:6]:
        if (cur / ".git").exists():
            return cur
    return None


def repo_root() -> Path:
    """TTT_REPO_ROOT -> nearest parent holding .git -> CWD."""
    env = os.getenv("TTT_REPO_ROOT")
    if env:
        return Path(env)
    git_root = _find_git_root(Path(__file__).resolve())
    return git_root if git_root is not None else Path.cwd()


def runs_dir() -> Path:
    """Default directory for match outputs (TTT_RUNS_DIR or <root>/runs)."""
    env = os.getenv("TTT_RUNS_DIR")
    return Path(env) if env else repo_root() / "runs"


def _git(*args: str) -> str | None:
    try:
        return subprocess.check_output(
            ["git", "-C", str(repo_root()), *args],
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=2.0,
        )
    except (OSError, subprocess.SubprocessError):
        return None


def get_git_commit() -> str | None:
    out = _git("rev-parse", "HEAD")
    return out.strip() if out else None


def get_git_is_dirty() -> bool | None:
    """True with uncommitted changes, False when clean, None outside a repo."""
    out = _git("status", "--porcelain")
    if out is None:
        return None
    return len(out.strip()) > 0
