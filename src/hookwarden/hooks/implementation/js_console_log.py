"""Flags console.log calls left in staged JavaScript."""

import re

from ..base import HookBase, HookResult

CONSOLE_LOG = re.compile(r"console\.log")
COMMENT_LINE = re.compile(r"^\s*//")
ALLOW_MARKER = "ALLOW_CONSOLE_LOG"


class JsConsoleLogHook(HookBase):
    def __init__(self):
        super().__init__(
            name="js_console_log",
            description="Checking for console.log in JavaScript",
            file_types=("js",),
        )

    def run(self, context) -> HookResult:
        hits = []
        for rel in self.staged(context):
            text = context.path(rel).read_text(encoding="utf-8", errors="replace")
            for line_num, line in enumerate(text.splitlines(), 1):
                if not CONSOLE_LOG.search(line):
                    continue
                # Skip comments and lines explicitly allowed
                if COMMENT_LINE.match(line) or ALLOW_MARKER in line:
                    continue
                hits.append(f"{rel}:{line_num}:{line.strip()}")

        if hits:
            return HookResult.bad("\n".join(hits))
        return HookResult.good()
