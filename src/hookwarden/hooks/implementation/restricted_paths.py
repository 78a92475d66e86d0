"""Asks for confirmation before committing into restricted directories."""

from ..base import HookBase, HookResult


class RestrictedPathsHook(HookBase):
    """Stops the commit when anything under a restricted path is staged.

    The paths come from ``params.paths`` and default to ``vendor``. Deleting
    or moving files out of a restricted path counts as a change to it.
    """

    def __init__(self):
        super().__init__(
            name="restricted_paths",
            description="Checking for changes to restricted paths",
            quiet=True,
            params={"paths": ["vendor"]},
        )

    def run(self, context) -> HookResult:
        for restricted in self.params.get("paths", []):
            if context.has_changes_under(restricted):
                return HookResult.stop(f"changes staged under {restricted}")
        return HookResult.good()
