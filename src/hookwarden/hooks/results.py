"""Run results and the verdict aggregation rule.

A run's verdict is derived from the statuses it recorded:

* ``fail`` when the run was interrupted, its context failed to set up or
  clean up, or any hook reported ``bad``;
* ``needs-attention`` when any hook reported ``stop``;
* ``pass`` otherwise (``warn`` is surfaced but never blocks).

``bad`` strictly dominates ``stop`` so a definite failure is never reported
as something that merely needs a human to look at it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from .base import Status


class Verdict(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    NEEDS_ATTENTION = "needs-attention"


def aggregate(statuses: Iterable[Status], interrupted: bool = False) -> Verdict:
    """Collapse per-hook statuses into a single verdict."""

    seen = set(statuses)
    if interrupted or Status.INTERRUPTED in seen or Status.BAD in seen:
        return Verdict.FAIL
    if Status.STOP in seen:
        return Verdict.NEEDS_ATTENTION
    return Verdict.PASS


@dataclass(frozen=True)
class HookOutcome:
    name: str
    description: str
    status: Status
    message: str = ""


@dataclass
class RunResult:
    """Everything one invocation of the runner produced, in execution order."""

    hook_type: str
    outcomes: list[HookOutcome] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    interrupted: bool = False
    setup_error: str | None = None
    cleanup_error: str | None = None

    def record(self, outcome: HookOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def statuses(self) -> list[Status]:
        return [o.status for o in self.outcomes]

    @property
    def verdict(self) -> Verdict:
        if self.setup_error is not None or self.cleanup_error is not None:
            return Verdict.FAIL
        return aggregate(self.statuses, interrupted=self.interrupted)

    @property
    def passed(self) -> bool:
        return self.verdict is Verdict.PASS

    def outcome_for(self, name: str) -> HookOutcome | None:
        for outcome in self.outcomes:
            if outcome.name == name:
                return outcome
        return None

    def exit_code(self, allow_attention: bool = False) -> int:
        """Process exit status for the guarded action: 0 lets it proceed."""

        verdict = self.verdict
        if verdict is Verdict.PASS:
            return 0
        if verdict is Verdict.NEEDS_ATTENTION and allow_attention:
            return 0
        return 1
