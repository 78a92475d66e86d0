"""The event contract between the runner and whatever renders its progress."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import HookBase, Status
    from .loader import LoadWarning
    from .results import RunResult


class Reporter:
    """Event sink for a hook run. Every method is a no-op by default.

    Events arrive in order: ``run_started``, then per hook either
    ``hook_skipped`` or (``skip_refused``,) ``hook_started`` and
    ``hook_finished``, then ``run_finished``. ``cleanup_failed``
    follows only when the context could not be restored. A quiet hook's
    ``hook_started`` only arrives once its status is known not to be good.
    """

    def load_warning(self, warning: LoadWarning) -> None:
        pass

    def run_started(self, hook_type: str) -> None:
        pass

    def hook_skipped(self, hook: HookBase) -> None:
        pass

    def skip_refused(self, hook: HookBase) -> None:
        pass

    def hook_started(self, hook: HookBase) -> None:
        pass

    def hook_finished(self, hook: HookBase, status: Status, message: str) -> None:
        pass

    def run_finished(self, result: RunResult) -> None:
        pass

    def cleanup_failed(self, result: RunResult) -> None:
        pass
