"""
Test cases for hook discovery and override resolution.
"""

import textwrap
from types import SimpleNamespace

import pytest
from conftest import FakeHook

from hookwarden.config import HookSettings, WardenConfig
from hookwarden.hooks import loader
from hookwarden.hooks.base import Status
from hookwarden.hooks.context import HookContext
from hookwarden.hooks.implementation.whitespace import WhitespaceHook
from hookwarden.hooks.loader import (
    BuiltinSource,
    DirectorySource,
    EntryPointSource,
    HookRegistry,
    HookSource,
    apply_config,
    discover_hooks,
    load_hooks,
)

BUILTIN_NAMES = ["js_console_log", "json_syntax", "python_syntax", "restricted_paths", "whitespace"]


class StaticSource(HookSource):
    """Source returning freshly built fake hooks every time it is asked."""

    def __init__(self, label, *specs):
        super().__init__()
        self.label = label
        self.specs = specs

    def discover(self):
        return [
            loader.DiscoveredHook(name, FakeHook(name, **kwargs), self.label)
            for name, kwargs in self.specs
        ]


class BrokenSource(HookSource):
    label = "broken"

    def discover(self):
        raise loader.HookLoadError("cannot read plugin catalog")


def write_plugin(directory, filename, body):
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(textwrap.dedent(body))
    return path


class TestHookRegistry:
    def test_override_keeps_position(self):
        registry = HookRegistry()
        registry.register(FakeHook("a"), "builtin")
        registry.register(FakeHook("b"), "builtin")
        replacement = FakeHook("a", required=True)
        registry.register(replacement, "filesystem:a.py")

        assert registry.names() == ["a", "b"]
        assert registry.get("a").hook is replacement
        assert registry.get("a").source == "filesystem:a.py"

    def test_unregister_unknown(self):
        with pytest.raises(KeyError):
            HookRegistry().unregister("nope")


class TestLoadHooks:
    def test_later_source_overrides_without_reordering(self):
        builtin = StaticSource("builtin", ("a", {}), ("b", {}), ("c", {}))
        plugins = StaticSource("plugin", ("b", {"quiet": True}), ("d", {}))

        result = load_hooks([builtin, plugins])

        assert result.names == ["a", "b", "c", "d"]
        overridden = result.discovered[1]
        assert overridden.source == "plugin"
        assert overridden.hook.quiet is True

    def test_loading_override_twice_is_idempotent(self):
        builtin = StaticSource("builtin", ("a", {}), ("b", {}))
        plugins = StaticSource("plugin", ("b", {}), ("z", {}))

        once = load_hooks([builtin, plugins])
        twice = load_hooks([builtin, plugins, plugins])

        assert [(d.name, d.source) for d in once.discovered] == [(d.name, d.source) for d in twice.discovered]

    def test_broken_source_is_skipped_with_warning(self):
        result = load_hooks([StaticSource("builtin", ("a", {})), BrokenSource(), StaticSource("plugin", ("b", {}))])

        assert result.names == ["a", "b"]
        assert [w.source for w in result.warnings] == ["broken"]
        assert "cannot read plugin catalog" in result.warnings[0].message

    def test_hook_type_filter(self):
        source = StaticSource("builtin", ("a", {}), ("msg", {"hook_types": ["commit-msg"]}))

        assert load_hooks([source], hook_type="pre-commit").names == ["a"]
        assert load_hooks([source], hook_type="commit-msg").names == ["msg"]
        assert load_hooks([source]).names == ["a", "msg"]


class TestBuiltinSource:
    def test_discovers_shipped_hooks_in_module_order(self):
        result = load_hooks([BuiltinSource()])

        assert result.names == BUILTIN_NAMES
        assert result.warnings == []

    def test_missing_package_is_a_warning(self):
        result = load_hooks([BuiltinSource("hookwarden.no_such_package")])

        assert result.names == []
        assert result.warnings[0].source == "builtin"


class TestDirectorySource:
    def test_loads_hook_classes(self, tmp_path):
        write_plugin(
            tmp_path,
            "ticket.py",
            """
            from hookwarden.hooks.base import HookBase, HookResult


            class TicketHook(HookBase):
                def __init__(self):
                    super().__init__(name="ticket", description="Checking ticket reference")

                def run(self, context):
                    return HookResult.good()
            """,
        )

        result = load_hooks([DirectorySource(tmp_path)])

        assert result.names == ["ticket"]
        assert result.discovered[0].source == "filesystem:ticket.py"

    def test_broken_plugin_does_not_stop_the_others(self, tmp_path):
        write_plugin(tmp_path, "a_broken.py", "this is not python(\n")
        write_plugin(
            tmp_path,
            "b_fine.py",
            """
            \"\"\"Checking that nothing is wrong\"\"\"

            def run(context):
                return "good"
            """,
        )

        result = load_hooks([DirectorySource(tmp_path)])

        assert result.names == ["b_fine"]
        assert result.discovered[0].hook.description == "Checking that nothing is wrong"
        assert [w.source for w in result.warnings] == ["filesystem:a_broken.py"]

    def test_module_without_hooks_is_reported(self, tmp_path):
        write_plugin(tmp_path, "helpers.py", "VALUE = 1\n")
        write_plugin(tmp_path, "_private.py", "raise RuntimeError('never imported')\n")

        result = load_hooks([DirectorySource(tmp_path)])

        assert result.names == []
        assert [w.source for w in result.warnings] == ["filesystem:helpers.py"]

    def test_missing_directory_is_empty(self, tmp_path):
        assert load_hooks([DirectorySource(tmp_path / "absent")]).names == []

    def test_plugin_subclass_overrides_builtin(self, tmp_path):
        write_plugin(
            tmp_path,
            "whitespace.py",
            """
            from hookwarden.hooks.implementation.whitespace import WhitespaceHook


            class StrictWhitespace(WhitespaceHook):
                def __init__(self):
                    super().__init__()
                    self.required = True
            """,
        )

        result = load_hooks([BuiltinSource(), DirectorySource(tmp_path)])

        assert result.names == BUILTIN_NAMES
        whitespace = result.discovered[BUILTIN_NAMES.index("whitespace")]
        assert whitespace.source == "filesystem:whitespace.py"
        assert whitespace.hook.required is True
        assert isinstance(whitespace.hook, WhitespaceHook)

    def test_wrapped_script_runs(self, tmp_path):
        write_plugin(
            tmp_path,
            "no_todo.py",
            """
            FILE_TYPES = ["py"]

            def run(context):
                return "warn", ["TODO left in", "app.py"]
            """,
        )
        hook = load_hooks([DirectorySource(tmp_path)]).hooks[0]

        assert hook.file_types == ("py",)
        result = hook.run(HookContext(files=["app.py"]))
        assert result.status is Status.WARN
        assert result.message == "TODO left in\napp.py"


class TestEntryPointSource:
    def test_loads_classes_and_reports_failures(self, monkeypatch):
        def boom():
            raise ImportError("missing dependency")

        eps = [
            SimpleNamespace(name="good", value="pkg:GoodHook", load=lambda: lambda: FakeHook("from_ep")),
            SimpleNamespace(name="bad", value="pkg:Missing", load=boom),
            SimpleNamespace(name="odd", value="pkg:thing", load=lambda: dict),
        ]
        monkeypatch.setattr(loader, "entry_points", lambda group: eps)

        result = load_hooks([EntryPointSource()])

        assert result.names == ["from_ep"]
        assert result.discovered[0].source == "entrypoint:good"
        assert [w.source for w in result.warnings] == ["entrypoint:bad", "entrypoint:odd"]


class TestApplyConfig:
    def test_settings_override_defaults(self):
        hook = FakeHook("lint", params={"max": 1, "keep": True})

        apply_config(
            hook,
            HookSettings(enabled=False, required=True, quiet=True, file_types=[".PY"], params={"max": 5}),
        )

        assert hook.enabled is False
        assert hook.required is True
        assert hook.quiet is True
        assert hook.file_types == ("py",)
        assert hook.params == {"max": 5, "keep": True}

    def test_unset_fields_leave_hook_alone(self):
        hook = FakeHook("lint", quiet=True)

        apply_config(hook, HookSettings())

        assert hook.enabled is True
        assert hook.quiet is True
        assert hook.description == "Running lint"

    def test_discover_hooks_applies_repository_config(self, tmp_path, monkeypatch):
        monkeypatch.setattr(loader, "entry_points", lambda group: [])
        config = WardenConfig(hooks={"whitespace": HookSettings(enabled=False)})

        result = discover_hooks(config, tmp_path, "pre-commit")

        hooks = {d.name: d.hook for d in result.discovered}
        assert hooks["whitespace"].enabled is False
        assert hooks["python_syntax"].enabled is True
