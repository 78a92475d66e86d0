"""Adapter to wrap plain plugin scripts as HookBase implementations.

A repository plugin does not have to subclass HookBase: a module exposing a
``run(context)`` (or ``main(context)``) function is wrapped by
`wrap_module_as_hook`, named after its file. The first line of the module
docstring becomes the description and an optional module-level
``FILE_TYPES`` sequence restricts it to those extensions.
"""

from __future__ import annotations

from collections.abc import Callable
from types import ModuleType
from typing import Any

from .base import HookBase, HookResult


class ScriptHook(HookBase):
    def __init__(self, name: str, runner: Callable[[Any], Any], description: str = "",
                 file_types: tuple[str, ...] = ()) -> None:
        super().__init__(name=name, description=description, file_types=file_types)
        self._runner = runner

    def run(self, context) -> HookResult:
        return HookResult.coerce(self._runner(context))


def wrap_module_as_hook(mod: ModuleType, name: str) -> HookBase | None:
    # find a run function
    runner = None
    if callable(getattr(mod, "run", None)):
        runner = mod.run
    elif callable(getattr(mod, "main", None)):
        runner = mod.main

    if not runner:
        return None

    doc = (mod.__doc__ or "").strip()
    description = doc.splitlines()[0] if doc else ""
    file_types = tuple(getattr(mod, "FILE_TYPES", ()))
    return ScriptHook(name, runner, description=description, file_types=file_types)
