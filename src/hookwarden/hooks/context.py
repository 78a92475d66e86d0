"""Execution contexts: what changed, and how to isolate it while hooks run."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .. import git

logger = logging.getLogger(__name__)


def _matches(path: str, file_types: tuple[str, ...]) -> bool:
    if not file_types:
        return True
    ext = os.path.splitext(path)[1].lstrip(".").lower()
    return ext in file_types


class HookContext:
    """Context over an explicit list of files.

    Used directly when the caller already knows which files to verify (for
    example ``hookwarden run --files``); setup and cleanup do nothing.
    """

    def __init__(self, hook_type_name: str = "pre-commit", files: list[str] | None = None,
                 root: Path | str | None = None) -> None:
        self.hook_type_name = hook_type_name
        self.root = Path(root) if root is not None else Path.cwd()
        self._files = list(files) if files is not None else None

    def _all_files(self) -> list[str]:
        if self._files is None:
            self._files = self._collect_files()
        return self._files

    def _collect_files(self) -> list[str]:
        return []

    def modified_files(self, *file_types: str) -> list[str]:
        types = tuple(t.lstrip(".").lower() for t in file_types)
        return [f for f in self._all_files() if _matches(f, types)]

    def staged_files(self, *file_types: str) -> list[str]:
        return self.modified_files(*file_types)

    def path(self, relative: str) -> Path:
        return self.root / relative

    def has_changes_under(self, directory: str) -> bool:
        base = directory.strip("/")
        return any(f == base or f.startswith(base + "/") for f in self._all_files())

    def check_staged_diff(self) -> list[str] | None:
        """Problems git reports in the staged diff, or None when there is no index to ask."""
        return None

    def setup_environment(self) -> None:
        pass

    def cleanup_environment(self) -> None:
        pass


class PreCommitContext(HookContext):
    """Context for git's pre-commit hook.

    Unstaged edits are stashed during setup so hooks see exactly the content
    that is about to be committed, and restored during cleanup.
    """

    def __init__(self, root: Path | str) -> None:
        super().__init__("pre-commit", root=root)
        self._stashed = False

    def _collect_files(self) -> list[str]:
        return git.staged_files(self.root)

    def has_changes_under(self, directory: str) -> bool:
        # Deletions and renames out of the directory count too
        return git.has_staged_changes(self.root, directory.strip("/") or ".")

    def check_staged_diff(self) -> list[str]:
        return git.check_staged_diff(self.root)

    def setup_environment(self) -> None:
        # Resolve the file list before touching the working tree
        self._all_files()
        if git.has_unstaged_changes(self.root):
            logger.debug("stashing unstaged changes in %s", self.root)
            git.stash_unstaged(self.root)
            self._stashed = True

    def cleanup_environment(self) -> None:
        if not self._stashed:
            return
        logger.debug("restoring unstaged changes in %s", self.root)
        self._stashed = False
        try:
            git.restore_stash(self.root)
        except git.GitError as e:
            raise git.GitError(
                f"{e}\nYour unstaged changes are still in the stash; run `git stash pop --index` to restore them"
            ) from e
