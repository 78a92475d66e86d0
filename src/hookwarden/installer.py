"""Install and remove the git hook scripts that call hookwarden."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from . import git

logger = logging.getLogger(__name__)

MARKER = "# managed by hookwarden"
DEFAULT_HOOK_TYPES = ("pre-commit",)


class InstallError(Exception):
    """Raised when hooks cannot be installed into the target."""


@dataclass
class InstallReport:
    installed: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    backed_up: list[str] = field(default_factory=list)
    restored: list[str] = field(default_factory=list)


def stub_script(hook_type: str) -> str:
    return f"""#!/bin/sh
{MARKER}
exec hookwarden run {hook_type} "$@"
"""


def is_managed(path: Path) -> bool:
    try:
        return MARKER in path.read_text(errors="replace")
    except OSError:
        return False


def _hooks_dir(repo: Path) -> Path:
    gd = git.git_dir(repo)
    if gd is None:
        raise InstallError(f"{repo} is not a git repository")
    return gd / "hooks"


def install(repo: Path, hook_types: tuple[str, ...] = DEFAULT_HOOK_TYPES) -> InstallReport:
    hooks_dir = _hooks_dir(repo)
    hooks_dir.mkdir(exist_ok=True)
    report = InstallReport()

    for hook_type in hook_types:
        target = hooks_dir / hook_type
        if target.exists() and not is_managed(target):
            backup = target.with_name(target.name + ".old")
            if backup.exists():
                raise InstallError(f"{target} exists and {backup.name} is already taken; move one aside")
            target.rename(backup)
            report.backed_up.append(hook_type)
            logger.debug("moved existing %s hook to %s", hook_type, backup)

        target.write_text(stub_script(hook_type))
        target.chmod(0o755)
        report.installed.append(hook_type)

    return report


def uninstall(repo: Path, hook_types: tuple[str, ...] = DEFAULT_HOOK_TYPES) -> InstallReport:
    hooks_dir = _hooks_dir(repo)
    report = InstallReport()

    for hook_type in hook_types:
        target = hooks_dir / hook_type
        if target.exists() and is_managed(target):
            target.unlink()
            report.removed.append(hook_type)

        backup = target.with_name(target.name + ".old")
        if backup.exists() and not target.exists():
            backup.rename(target)
            report.restored.append(hook_type)

    return report
