"""Catches trailing whitespace and leftover merge conflict markers."""

import re

from ..base import HookBase, HookResult

CONFLICT_MARKER = re.compile(r"^(<{7}|={7}|>{7})( |$)")


class WhitespaceHook(HookBase):
    """Checks only the staged diff (``git diff --check``) inside a repository.

    An explicit file list has no diff to look at, so those files are scanned
    in full.
    """

    def __init__(self):
        super().__init__(
            name="whitespace",
            description="Checking for trailing whitespace and conflict markers",
        )

    def run(self, context) -> HookResult:
        problems = context.check_staged_diff()
        if problems is None:
            problems = self._scan_files(context)

        if problems:
            return HookResult.stop("\n".join(problems))
        return HookResult.good()

    def _scan_files(self, context) -> list:
        problems = []
        for rel in self.staged(context):
            try:
                text = context.path(rel).read_text(encoding="utf-8")
            except (UnicodeDecodeError, FileNotFoundError):
                # binary or vanished files are someone else's problem
                continue

            for line_num, line in enumerate(text.splitlines(), 1):
                if CONFLICT_MARKER.match(line):
                    problems.append(f"{rel}:{line_num}: leftover conflict marker")
                elif line != line.rstrip():
                    problems.append(f"{rel}:{line_num}: trailing whitespace")
        return problems
