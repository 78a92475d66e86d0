"""Thin wrappers around the git command line."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Raised when a git command exits non-zero."""


def run_git(*args: str, cwd: Path | str | None = None, check: bool = True) -> subprocess.CompletedProcess:
    cmd = ["git", *args]
    logger.debug("running %s", " ".join(cmd))
    try:
        proc = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise GitError("git executable not found") from e

    if check and proc.returncode != 0:
        raise GitError(f"{' '.join(cmd)} failed: {proc.stderr.strip() or proc.stdout.strip()}")
    return proc


def repo_root(path: Path | str | None = None) -> Path | None:
    """Top-level directory of the repository containing `path`, if any."""

    try:
        proc = run_git("rev-parse", "--show-toplevel", cwd=path)
    except GitError:
        return None
    return Path(proc.stdout.strip())


def git_dir(root: Path) -> Path | None:
    """Locate the .git directory for a repository root.

    Handles the plain directory layout directly and falls back to git for
    worktrees and submodules, where `.git` is a file.
    """

    candidate = root / ".git"
    if candidate.is_dir():
        return candidate
    if not candidate.exists():
        return None
    try:
        proc = run_git("rev-parse", "--git-dir", cwd=root)
    except GitError:
        return None
    path = Path(proc.stdout.strip())
    return path if path.is_absolute() else (root / path).resolve()


def staged_files(root: Path) -> list[str]:
    """Paths (relative to root) added, copied, modified or renamed in the index."""

    proc = run_git("diff", "--cached", "--name-only", "--diff-filter=ACMR", "-z", cwd=root)
    return [p for p in proc.stdout.split("\0") if p]


def has_unstaged_changes(root: Path) -> bool:
    proc = run_git("diff", "--quiet", cwd=root, check=False)
    return proc.returncode != 0


def stash_unstaged(root: Path) -> None:
    run_git("stash", "push", "--keep-index", "--quiet", "--message", "hookwarden: unstaged changes", cwd=root)


def restore_stash(root: Path) -> None:
    run_git("reset", "--hard", "--quiet", cwd=root)
    run_git("stash", "pop", "--index", "--quiet", cwd=root)


def has_staged_changes(root: Path, path: str) -> bool:
    """Whether the index differs from HEAD anywhere under `path`, deletions included."""

    proc = run_git("diff", "--cached", "--quiet", "--", path, cwd=root, check=False)
    if proc.returncode not in (0, 1):
        raise GitError(f"git diff --cached -- {path} failed: {proc.stderr.strip()}")
    return proc.returncode == 1


def check_staged_diff(root: Path) -> list[str]:
    """Whitespace errors and conflict markers introduced by the staged diff.

    Only added lines are inspected, so problems already committed are not
    reported again.
    """

    proc = run_git("diff", "--cached", "--check", "--no-color", cwd=root, check=False)
    if proc.returncode == 0:
        return []
    # git echoes each offending line prefixed with "+" after its location
    problems = [line.rstrip(".") for line in proc.stdout.splitlines() if line and not line.startswith("+")]
    if not problems:
        raise GitError(f"git diff --cached --check failed: {proc.stderr.strip()}")
    return problems
