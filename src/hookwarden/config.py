"""
Repository configuration.

Settings are read from ``[tool.hookwarden]`` in pyproject.toml, then
``.hookwarden.toml``, then the developer-local ``.hookwarden.local.toml``;
later files override earlier ones key by key.
"""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError as e:
        raise ImportError(
            "hookwarden requires Python 3.11+ or the 'tomli' package "
            "to parse TOML configuration on Python 3.10. "
            "Install tomli: pip install tomli"
        ) from e

CONFIG_FILE = ".hookwarden.toml"
LOCAL_CONFIG_FILE = ".hookwarden.local.toml"
SKIP_ALL = "all"


class ConfigError(Exception):
    """Raised when configuration cannot be read or is invalid."""


class HookSettings(BaseModel):
    """Per-hook overrides. Unset fields keep the hook's own defaults."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool | None = None
    required: bool | None = None
    quiet: bool | None = None
    description: str | None = None
    file_types: list[str] | None = None
    params: dict[str, Any] = Field(default_factory=dict)


class WardenConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    plugin_directories: list[str] = Field(
        default_factory=lambda: [".githooks"],
        description="Repository plugin directories, searched in order for <dir>/<hook-type>/*.py.",
    )
    entry_point_group: str = Field(default="hookwarden.hooks")
    verify_signatures: bool = Field(
        default=True, description="Refuse to run when plugins or config changed since the last sign."
    )
    allow_attention: bool = Field(
        default=False, description="Let a needs-attention verdict exit successfully."
    )
    hooks: dict[str, HookSettings] = Field(default_factory=dict)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path.name}: {e}") from e
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e


def config_files(root: Path) -> list[Path]:
    """Existing configuration files under root, lowest precedence first."""

    candidates = [root / "pyproject.toml", root / CONFIG_FILE, root / LOCAL_CONFIG_FILE]
    return [p for p in candidates if p.is_file()]


def load_config(root: Path) -> WardenConfig:
    merged: dict[str, Any] = {}
    for path in config_files(root):
        data = _read_toml(path)
        if path.name == "pyproject.toml":
            data = data.get("tool", {}).get("hookwarden", {})
        merged = _deep_merge(merged, data)

    try:
        return WardenConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(f"invalid hookwarden configuration:\n{e}") from e


def parse_skip_directive(value: str | None) -> frozenset[str]:
    """Split a SKIP value ("a b", "a,b", "a:b") into hook names."""

    if not value:
        return frozenset()
    return frozenset(name for name in re.split(r"[:,\s]+", value.strip()) if name)


def skip_from_environment(environ: dict[str, str] | None = None) -> frozenset[str]:
    env = os.environ if environ is None else environ
    return parse_skip_directive(env.get("SKIP") or env.get("SKIP_CHECKS"))
