"""Terminal rendering of runner events.

The runner never formats anything itself; `ConsoleReporter` is the
implementation of its `Reporter` contract used by the CLI.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from .hooks.base import Status
from .hooks.reporting import Reporter
from .hooks.results import Verdict

if TYPE_CHECKING:
    from .hooks.base import HookBase
    from .hooks.loader import LoadWarning
    from .hooks.results import RunResult

__all__ = ["ConsoleReporter", "Reporter"]

_LABELS = {
    Status.GOOD: "OK",
    Status.WARN: "WARNING",
    Status.STOP: "STOP",
    Status.BAD: "FAILED",
    Status.INTERRUPTED: "INTERRUPTED",
}


class ConsoleReporter(Reporter):
    WIDTH = 70

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def _write(self, text: str = "", end: str = "\n") -> None:
        self.stream.write(text + end)
        self.stream.flush()

    def load_warning(self, warning: LoadWarning) -> None:
        self._write(f"⚠  Skipped hook source {warning}")

    def run_started(self, hook_type: str) -> None:
        self._write(f"Running {hook_type} hooks")

    def hook_skipped(self, hook: HookBase) -> None:
        self._write(f"⚠  Skipping {hook.name}")

    def skip_refused(self, hook: HookBase) -> None:
        self._write(f"⚠  Cannot skip {hook.name} since it is required")

    def hook_started(self, hook: HookBase) -> None:
        description = hook.description
        self._write(description + "." * max(self.WIDTH - len(description), 3), end="")

    def hook_finished(self, hook: HookBase, status: Status, message: str) -> None:
        if status is Status.GOOD and hook.quiet:
            return
        self._write(_LABELS[status])
        if status is Status.INTERRUPTED:
            self._write("Hook was interrupted by Ctrl-C; restoring repo state...")
            return
        if message:
            self._write("\n".join(f"    {line}" for line in message.splitlines()))
        elif status is not Status.GOOD:
            self._write(f"    {hook.name} reported {status.value} without a message")

    def run_finished(self, result: RunResult) -> None:
        if not (result.outcomes or result.skipped) and result.setup_error is None and not result.interrupted:
            self._write(f"✓ No applicable {result.hook_type} hooks to run")
            return

        self._write()
        if result.setup_error is not None:
            self._write(f"✗ Could not prepare the {result.hook_type} environment: {result.setup_error}")
        elif result.interrupted:
            self._write("⚠  Hook run interrupted by user")
        elif result.verdict is Verdict.FAIL:
            self._write(f"✗ One or more {result.hook_type} hooks failed")
        elif result.verdict is Verdict.NEEDS_ATTENTION:
            self._write(f"⚠  One or more {result.hook_type} hooks need attention")
            self._write("   If you really want to continue, list the hooks to skip in SKIP")
            self._write("   (space, comma or colon separated, or 'all')")
        else:
            self._write(f"✓ All {result.hook_type} hooks passed")
        self._write()

    def cleanup_failed(self, result: RunResult) -> None:
        self._write(f"✗ Could not restore the working tree after the {result.hook_type} hooks:")
        self._write("\n".join(f"    {line}" for line in (result.cleanup_error or "").splitlines()))
        self._write()
