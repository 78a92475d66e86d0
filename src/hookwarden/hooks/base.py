from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .context import HookContext


class HookError(Exception):
    """Raised by a hook to report a failure; the runner records it as bad."""


class Status(str, Enum):
    """Outcome of a single hook.

    Ordered by severity: good < warn < stop < bad. ``interrupted`` is only
    ever assigned by the runner, never returned by a hook.
    """

    GOOD = "good"
    WARN = "warn"
    STOP = "stop"
    BAD = "bad"
    INTERRUPTED = "interrupted"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def blocking(self) -> bool:
        return self in (Status.STOP, Status.BAD, Status.INTERRUPTED)


_SEVERITY = {
    Status.GOOD: 0,
    Status.WARN: 1,
    Status.STOP: 2,
    Status.BAD: 3,
    Status.INTERRUPTED: 4,
}


@dataclass(frozen=True)
class HookResult:
    status: Status
    message: str = ""

    @classmethod
    def good(cls, message: str = "") -> HookResult:
        return cls(Status.GOOD, message)

    @classmethod
    def warn(cls, message: str = "") -> HookResult:
        return cls(Status.WARN, message)

    @classmethod
    def stop(cls, message: str = "") -> HookResult:
        return cls(Status.STOP, message)

    @classmethod
    def bad(cls, message: str = "") -> HookResult:
        return cls(Status.BAD, message)

    @classmethod
    def coerce(cls, value: Any) -> HookResult:
        """Normalize whatever a hook returned into a HookResult.

        Accepts a HookResult, a bare Status (or its string value), or a
        ``(status, message)`` pair whose message may be a list of lines.
        Raises ValueError for anything else.
        """

        if isinstance(value, HookResult):
            status, message = value.status, value.message
        elif isinstance(value, tuple) and len(value) == 2:
            status, message = value
        else:
            status, message = value, ""

        try:
            status = Status(status)
        except ValueError:
            raise ValueError(f"Hook didn't return a status (got {value!r})") from None
        if status is Status.INTERRUPTED:
            raise ValueError("Hooks may not report themselves as interrupted")

        return cls(status, _join_message(message))


def _join_message(message: Any) -> str:
    if message is None:
        return ""
    if isinstance(message, (list, tuple)):
        return "\n".join(_join_message(m) for m in message if m is not None).strip("\n")
    return str(message)


@dataclass
class HookBase:
    """Minimal hook contract.

    Subclasses implement `run(self, context) -> HookResult`. Hooks that only
    make sense for certain file types list them (as extensions without the
    dot) in ``file_types``; a hook with no file types always applies.
    """

    name: str
    description: str = ""
    enabled: bool = True
    required: bool = False
    quiet: bool = False
    file_types: tuple[str, ...] = ()
    hook_types: list[str] = field(default_factory=lambda: ["pre-commit"])  # Which guarded actions this hook serves
    params: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.description:
            self.description = f"Running {self.name}"
        self.file_types = tuple(self.file_types)

    def applies_to(self, context: HookContext) -> bool:
        """Return whether the hook has anything to look at in this run."""

        if not self.file_types:
            return True
        return bool(context.modified_files(*self.file_types))

    def staged(self, context: HookContext) -> list[str]:
        """Staged files matching this hook's file types (all when untyped)."""

        return context.staged_files(*self.file_types)

    def run(self, context: HookContext) -> HookResult:
        """Execute the hook.

        Args:
            context: the execution context for this run; treat it as read-only.

        Returns:
            A HookResult. Raise HookError to fail with a message.
        """

        raise NotImplementedError("Hook must implement run(context)")
