"""JSON syntax check for staged .json files."""

import json

from ..base import HookBase, HookResult


class JsonSyntaxHook(HookBase):
    def __init__(self):
        super().__init__(
            name="json_syntax",
            description="Checking JSON syntax",
            file_types=("json",),
        )

    def run(self, context) -> HookResult:
        errors = []
        for rel in self.staged(context):
            try:
                json.loads(context.path(rel).read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                errors.append(f"{rel}:{e.lineno}: {e.msg}")
            except UnicodeDecodeError as e:
                errors.append(f"{rel}: not valid UTF-8 ({e.reason})")

        if errors:
            return HookResult.bad("\n".join(errors))
        return HookResult.good()
