"""Shared fixtures for hookwarden tests."""

from __future__ import annotations

import shutil
import subprocess

import pytest

from hookwarden.hooks.base import HookBase, HookResult
from hookwarden.hooks.context import HookContext
from hookwarden.reporter import Reporter


class FakeHook(HookBase):
    """Hook whose behaviour is scripted by the test."""

    def __init__(self, name, result=None, *, raises=None, **kwargs):
        super().__init__(name=name, **kwargs)
        self.result = HookResult.good() if result is None else result
        self.raises = raises
        self.calls = 0

    def run(self, context):
        self.calls += 1
        if self.raises is not None:
            raise self.raises
        return self.result


class TrackingContext(HookContext):
    """HookContext that counts setup/cleanup calls and can fail either."""

    def __init__(self, files=None, fail_setup=None, fail_cleanup=None, **kwargs):
        super().__init__(files=files if files is not None else [], **kwargs)
        self.fail_setup = fail_setup
        self.fail_cleanup = fail_cleanup
        self.setups = 0
        self.cleanups = 0

    def setup_environment(self):
        self.setups += 1
        if self.fail_setup is not None:
            raise self.fail_setup

    def cleanup_environment(self):
        self.cleanups += 1
        if self.fail_cleanup is not None:
            raise self.fail_cleanup


class RecordingReporter(Reporter):
    def __init__(self):
        self.events = []

    def load_warning(self, warning):
        self.events.append(("load_warning", warning.source))

    def run_started(self, hook_type):
        self.events.append(("run_started", hook_type))

    def hook_skipped(self, hook):
        self.events.append(("hook_skipped", hook.name))

    def skip_refused(self, hook):
        self.events.append(("skip_refused", hook.name))

    def hook_started(self, hook):
        self.events.append(("hook_started", hook.name))

    def hook_finished(self, hook, status, message):
        self.events.append(("hook_finished", hook.name, status, message))

    def run_finished(self, result):
        self.events.append(("run_finished", result.verdict))

    def cleanup_failed(self, result):
        self.events.append(("cleanup_failed", result.cleanup_error))

    def names(self, event):
        return [e[1] for e in self.events if e[0] == event]


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def context():
    return TrackingContext(files=["app.py", "README.md"])


class GitRepo:
    """A throwaway git repository driven through the real git binary."""

    def __init__(self, root):
        self.root = root

    def git(self, *args):
        proc = subprocess.run(["git", *args], cwd=self.root, capture_output=True, text=True, check=True)
        return proc.stdout

    def write(self, rel, content):
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def read(self, rel):
        return (self.root / rel).read_text()

    def commit(self, files, message="commit"):
        for rel, content in files.items():
            self.write(rel, content)
        self.git("add", *files)
        self.git("commit", "--quiet", "--no-verify", "-m", message)


@pytest.fixture
def git_repo(tmp_path, monkeypatch):
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    for var in ("GIT_DIR", "GIT_WORK_TREE", "GIT_INDEX_FILE"):
        monkeypatch.delenv(var, raising=False)

    repo = GitRepo(tmp_path)
    repo.git("init", "--quiet")
    repo.git("config", "user.name", "Test User")
    repo.git("config", "user.email", "test@example.com")
    repo.git("config", "commit.gpgsign", "false")
    repo.git("config", "core.autocrlf", "false")
    return repo
