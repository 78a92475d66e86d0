"""Python syntax check for staged .py files."""

from ..base import HookBase, HookResult


class PythonSyntaxHook(HookBase):
    def __init__(self):
        super().__init__(
            name="python_syntax",
            description="Checking Python syntax",
            file_types=("py",),
        )

    def run(self, context) -> HookResult:
        errors = []
        for rel in self.staged(context):
            source = context.path(rel).read_bytes()
            try:
                compile(source, rel, "exec", dont_inherit=True)
            except SyntaxError as e:
                errors.append(f"{rel}:{e.lineno}: {e.msg}")
            except ValueError as e:
                errors.append(f"{rel}: {e}")

        if errors:
            return HookResult.bad("\n".join(errors))
        return HookResult.good()
