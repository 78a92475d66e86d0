"""hookwarden.hooks package - the hook orchestration engine.

This package provides:
- HookBase / HookResult / Status: the contract every hook implements
- loader: discovery of built-in, installed and repository-local hooks
- context: what changed, and setup/cleanup around a run
- orchestrator: HookRunner, which executes hooks and aggregates a verdict
"""

from .base import HookBase, HookError, HookResult, Status
from .context import HookContext, PreCommitContext
from .loader import HookRegistry, LoadWarning, apply_config, discover_hooks, load_hooks
from .orchestrator import HookRunner, run_hooks
from .reporting import Reporter
from .results import HookOutcome, RunResult, Verdict, aggregate

__all__ = [
    "HookBase",
    "HookError",
    "HookResult",
    "Status",
    "HookContext",
    "PreCommitContext",
    "HookRegistry",
    "LoadWarning",
    "apply_config",
    "discover_hooks",
    "load_hooks",
    "HookRunner",
    "run_hooks",
    "Reporter",
    "HookOutcome",
    "RunResult",
    "Verdict",
    "aggregate",
]
