from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..config import SKIP_ALL, WardenConfig
from .base import HookBase, HookError, HookResult, Status
from .context import HookContext
from .loader import discover_hooks
from .reporting import Reporter
from .results import HookOutcome, RunResult

logger = logging.getLogger(__name__)


class _Plan(str, Enum):
    RUN = "run"
    SKIP = "skip"
    RUN_REQUIRED = "run-required"
    BROKEN = "broken"


@dataclass
class HookRunner:
    """Runs hooks one after another against a context and records the outcome.

    Hooks that are disabled or have nothing to look at are left out silently.
    A hook named in ``skip`` (or every hook, when ``skip`` contains "all") is
    left out with a notice, unless it is required. A hook that raises is
    recorded as bad and the run carries on; Ctrl-C stops the run at the
    current hook. The context is always cleaned up, and a cleanup that fails
    fails the run.
    """

    context: HookContext
    reporter: Reporter = field(default_factory=Reporter)
    skip: frozenset[str] = frozenset()

    def run(self, hooks: Iterable[HookBase]) -> RunResult:
        result = RunResult(hook_type=self.context.hook_type_name)
        try:
            self._setup_and_run(list(hooks), result)
        finally:
            self._cleanup(result)
        return result

    def _setup_and_run(self, hooks: list[HookBase], result: RunResult) -> None:
        try:
            self.context.setup_environment()
        except KeyboardInterrupt:
            result.interrupted = True
            result.setup_error = "interrupted during setup"
        except Exception as e:
            logger.exception("setting up the %s environment failed", result.hook_type)
            result.setup_error = str(e) or e.__class__.__name__

        if result.setup_error is not None:
            self.reporter.run_finished(result)
            return

        self._run_hooks(hooks, result)

    def _cleanup(self, result: RunResult) -> None:
        try:
            self.context.cleanup_environment()
        except Exception as e:
            logger.exception("cleaning up the %s environment failed", result.hook_type)
            result.cleanup_error = str(e) or e.__class__.__name__
            self.reporter.cleanup_failed(result)

    def _skip_requested(self, hook: HookBase) -> bool:
        return hook.name in self.skip or SKIP_ALL in self.skip

    def _plan(self, hooks: list[HookBase]) -> list[tuple[HookBase, _Plan, str]]:
        plan: list[tuple[HookBase, _Plan, str]] = []
        for hook in hooks:
            if not hook.enabled:
                continue

            try:
                applicable = hook.applies_to(self.context)
            except Exception as e:
                logger.exception("hook %s crashed checking applicability", hook.name)
                plan.append((hook, _Plan.BROKEN, f"Hook raised unexpected error\n{e}"))
                continue
            if not applicable:
                continue

            if self._skip_requested(hook):
                plan.append((hook, _Plan.RUN_REQUIRED if hook.required else _Plan.SKIP, ""))
            else:
                plan.append((hook, _Plan.RUN, ""))
        return plan

    def _run_hooks(self, hooks: list[HookBase], result: RunResult) -> None:
        plan = self._plan(hooks)
        if not plan:
            self.reporter.run_finished(result)
            return

        self.reporter.run_started(result.hook_type)
        for hook, action, message in plan:
            if action is _Plan.SKIP:
                result.skipped.append(hook.name)
                self.reporter.hook_skipped(hook)
                continue
            if action is _Plan.BROKEN:
                self._record(hook, HookResult.bad(message), result, announced=False)
                continue
            if action is _Plan.RUN_REQUIRED:
                self.reporter.skip_refused(hook)

            if not self._run_hook(hook, result):
                # Stop running any more hooks and assume a bad result
                result.interrupted = True
                break

        self.reporter.run_finished(result)

    def _run_hook(self, hook: HookBase, result: RunResult) -> bool:
        """Run one hook; returns False when the user interrupted it."""

        if not hook.quiet:
            self.reporter.hook_started(hook)

        try:
            outcome = self._invoke(hook)
        except KeyboardInterrupt:
            logger.debug("hook %s interrupted", hook.name)
            if hook.quiet:
                self.reporter.hook_started(hook)
            result.record(HookOutcome(hook.name, hook.description, Status.INTERRUPTED))
            self.reporter.hook_finished(hook, Status.INTERRUPTED, "")
            return False

        self._record(hook, outcome, result, announced=not hook.quiet)
        return True

    def _invoke(self, hook: HookBase) -> HookResult:
        try:
            returned = hook.run(self.context)
        except HookError as e:
            logger.debug("hook %s raised HookError: %s", hook.name, e)
            return HookResult.bad(str(e) or f"{hook.name} failed")
        except Exception as e:
            logger.exception("hook %s crashed", hook.name)
            return HookResult.bad(f"Hook raised unexpected error\n{e or e.__class__.__name__}")

        try:
            return HookResult.coerce(returned)
        except ValueError as e:
            return HookResult.bad(str(e))

    def _record(self, hook: HookBase, outcome: HookResult, result: RunResult, announced: bool) -> None:
        # Print the header for quiet hooks once we know the result wasn't good,
        # so the user can tell what failed
        if not announced and outcome.status is not Status.GOOD:
            self.reporter.hook_started(hook)
        result.record(HookOutcome(hook.name, hook.description, outcome.status, outcome.message))
        self.reporter.hook_finished(hook, outcome.status, outcome.message)


def run_hooks(
    context: HookContext,
    config: WardenConfig | None = None,
    reporter: Reporter | None = None,
    skip: frozenset[str] = frozenset(),
    root: Path | None = None,
) -> RunResult:
    """Load the hooks for the context's action and run them.

    Hooks are loaded fresh on every call so configuration and plugin edits
    are always picked up.
    """

    config = config or WardenConfig()
    reporter = reporter or Reporter()
    loaded = discover_hooks(config, root or context.root, context.hook_type_name)
    for warning in loaded.warnings:
        reporter.load_warning(warning)

    return HookRunner(context, reporter, skip).run(loaded.hooks)
