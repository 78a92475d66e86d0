from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
import os
import pkgutil
import sys
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from importlib.metadata import entry_points
from pathlib import Path
from types import ModuleType

from ..config import HookSettings, WardenConfig
from .base import HookBase
from .filesystem_adapter import wrap_module_as_hook

logger = logging.getLogger(__name__)

BUILTIN_PACKAGE = "hookwarden.hooks.implementation"


class HookLoadError(Exception):
    """Raised when a hook source cannot be read at all."""


@dataclass
class DiscoveredHook:
    name: str
    hook: HookBase
    source: str


@dataclass(frozen=True)
class LoadWarning:
    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.source}: {self.message}"


@dataclass
class LoadResult:
    discovered: list[DiscoveredHook] = field(default_factory=list)
    warnings: list[LoadWarning] = field(default_factory=list)

    @property
    def hooks(self) -> list[HookBase]:
        return [d.hook for d in self.discovered]

    @property
    def names(self) -> list[str]:
        return [d.name for d in self.discovered]


class HookRegistry:
    """Name-keyed catalog of hook definitions.

    Registering a name that is already present replaces the definition in
    place: the name keeps the position it was first registered at.
    """

    def __init__(self) -> None:
        self._hooks: dict[str, DiscoveredHook] = {}

    def register(self, hook: HookBase, source: str = "explicit") -> None:
        existing = self._hooks.get(hook.name)
        if existing is not None:
            logger.debug("hook %s from %s overrides %s", hook.name, source, existing.source)
        else:
            logger.debug("registered hook %s from %s", hook.name, source)
        self._hooks[hook.name] = DiscoveredHook(hook.name, hook, source)

    def unregister(self, name: str) -> None:
        if name not in self._hooks:
            raise KeyError(f"Hook {name} is not registered.")
        del self._hooks[name]

    def get(self, name: str) -> DiscoveredHook | None:
        return self._hooks.get(name)

    def names(self) -> list[str]:
        return list(self._hooks)

    def __iter__(self) -> Iterator[DiscoveredHook]:
        return iter(list(self._hooks.values()))

    def __len__(self) -> int:
        return len(self._hooks)

    def __contains__(self, name: object) -> bool:
        return name in self._hooks


def _hook_classes(mod: ModuleType) -> list[type]:
    """Hook classes defined in `mod` itself, in definition order.

    Classes merely imported into the module (a plugin subclassing a built-in
    hook imports its parent) are ignored.
    """

    return [
        obj
        for obj in list(vars(mod).values())
        if inspect.isclass(obj)
        and issubclass(obj, HookBase)
        and obj is not HookBase
        and obj.__module__ == mod.__name__
    ]


class HookSource:
    """One place hook definitions come from."""

    label = "source"

    def __init__(self) -> None:
        self.warnings: list[LoadWarning] = []

    def warn(self, where: str, message: str) -> None:
        self.warnings.append(LoadWarning(where, message))

    def instantiate(self, cls: type, where: str) -> HookBase | None:
        try:
            return cls()
        except TypeError:
            # Skip classes that require constructor args
            return None
        except Exception as e:
            self.warn(where, f"failed to instantiate {cls.__name__}: {e}")
            return None

    def discover(self) -> list[DiscoveredHook]:
        raise NotImplementedError


class BuiltinSource(HookSource):
    """Hook classes in the modules of a package shipped with hookwarden."""

    label = "builtin"

    def __init__(self, package_name: str = BUILTIN_PACKAGE) -> None:
        super().__init__()
        self.package_name = package_name

    def discover(self) -> list[DiscoveredHook]:
        try:
            pkg = importlib.import_module(self.package_name)
        except Exception as e:
            raise HookLoadError(f"cannot import {self.package_name}: {e}") from e

        discovered: list[DiscoveredHook] = []
        if not hasattr(pkg, "__path__"):
            return discovered

        for _finder, name, _ispkg in pkgutil.iter_modules(pkg.__path__, pkg.__name__ + "."):
            try:
                mod = importlib.import_module(name)
            except Exception as e:
                self.warn(name, f"failed to import: {e}")
                continue

            for cls in _hook_classes(mod):
                inst = self.instantiate(cls, name)
                if inst is not None:
                    discovered.append(DiscoveredHook(inst.name, inst, self.label))

        return discovered


class EntryPointSource(HookSource):
    """Hooks published by installed distributions under an entry point group."""

    label = "entrypoint"

    def __init__(self, group: str = "hookwarden.hooks") -> None:
        super().__init__()
        self.group = group

    def discover(self) -> list[DiscoveredHook]:
        discovered: list[DiscoveredHook] = []
        for ep in entry_points(group=self.group):
            where = f"{self.label}:{ep.name}"
            try:
                obj = ep.load()
            except Exception as e:
                self.warn(where, f"failed to load: {e}")
                continue

            # Allow classes as well as factory functions returning HookBase
            try:
                inst = obj()
            except Exception as e:
                self.warn(where, f"failed to instantiate: {e}")
                continue
            if not isinstance(inst, HookBase):
                self.warn(where, f"{ep.value} did not produce a HookBase")
                continue
            discovered.append(DiscoveredHook(inst.name, inst, where))

        return discovered


class DirectorySource(HookSource):
    """Repository-local plugin files, `<directory>/*.py`, in name order.

    A file that fails to import is skipped with a warning; the remaining
    files still load. Files starting with an underscore are helpers and
    are not scanned.
    """

    label = "filesystem"

    def __init__(self, directory: Path | str) -> None:
        super().__init__()
        self.directory = Path(directory)

    def plugin_files(self) -> list[Path]:
        if not self.directory.is_dir():
            return []
        return [
            self.directory / fn
            for fn in sorted(os.listdir(self.directory))
            if fn.endswith(".py") and not fn.startswith("_")
        ]

    def discover(self) -> list[DiscoveredHook]:
        discovered: list[DiscoveredHook] = []
        for path in self.plugin_files():
            where = f"{self.label}:{path.name}"
            try:
                mod = self._import(path)
            except Exception as e:
                self.warn(where, f"failed to import: {e}")
                continue

            found = False
            for cls in _hook_classes(mod):
                inst = self.instantiate(cls, where)
                if inst is not None:
                    discovered.append(DiscoveredHook(inst.name, inst, where))
                    found = True

            if not found:
                wrapped = wrap_module_as_hook(mod, path.stem)
                if wrapped is None:
                    self.warn(where, "defines no hooks")
                else:
                    discovered.append(DiscoveredHook(wrapped.name, wrapped, where))

        return discovered

    def _import(self, path: Path) -> ModuleType:
        name = f"hookwarden_plugins.{self.directory.name.replace('-', '_')}.{path.stem}"
        spec = importlib.util.spec_from_file_location(name, path)
        if not spec or not spec.loader:
            raise HookLoadError(f"cannot build an import spec for {path}")
        mod = importlib.util.module_from_spec(spec)
        sys.modules[name] = mod
        try:
            spec.loader.exec_module(mod)
        except BaseException:
            sys.modules.pop(name, None)
            raise
        return mod


def load_hooks(sources: Iterable[HookSource], hook_type: str | None = None) -> LoadResult:
    """Load and merge hooks from `sources`, in order.

    A later definition with the same name replaces an earlier one without
    moving it; new names are appended in their source's order. A source
    that cannot be loaded is reported as a warning and skipped.
    """

    registry = HookRegistry()
    result = LoadResult()

    for source in sources:
        try:
            discovered = source.discover()
        except Exception as e:
            result.warnings.append(LoadWarning(source.label, str(e)))
            discovered = []
        result.warnings.extend(source.warnings)
        source.warnings = []

        for d in discovered:
            registry.register(d.hook, d.source)

    for warning in result.warnings:
        logger.warning("skipped hook source %s", warning)

    result.discovered = [
        d for d in registry if hook_type is None or hook_type in d.hook.hook_types
    ]
    return result


def apply_config(hook: HookBase, settings: HookSettings | None) -> HookBase:
    """Overlay per-hook configuration onto a freshly loaded hook."""

    if settings is None:
        return hook
    if settings.enabled is not None:
        hook.enabled = settings.enabled
    if settings.required is not None:
        hook.required = settings.required
    if settings.quiet is not None:
        hook.quiet = settings.quiet
    if settings.description:
        hook.description = settings.description
    if settings.file_types is not None:
        hook.file_types = tuple(t.lstrip(".").lower() for t in settings.file_types)
    if settings.params:
        hook.params = {**hook.params, **settings.params}
    return hook


def default_sources(config: WardenConfig, root: Path, hook_type: str) -> list[HookSource]:
    """Built-ins first, then installed plugins, then each plugin directory."""

    sources: list[HookSource] = [BuiltinSource(), EntryPointSource(config.entry_point_group)]
    for directory in config.plugin_directories:
        sources.append(DirectorySource(root / directory / hook_type))
    return sources


def discover_hooks(config: WardenConfig, root: Path, hook_type: str = "pre-commit") -> LoadResult:
    """Load every hook for `hook_type` and apply the repository's settings."""

    result = load_hooks(default_sources(config, root, hook_type), hook_type=hook_type)
    for d in result.discovered:
        apply_config(d.hook, config.hooks.get(d.name))
    return result
