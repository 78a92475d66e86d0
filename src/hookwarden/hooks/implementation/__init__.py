"""Built-in hook implementations for hookwarden.

Every module in this subpackage is scanned by the loader; each HookBase
subclass defined in it becomes a built-in hook. Repository plugins can
subclass these and re-declare them under the same name to change them.
"""
