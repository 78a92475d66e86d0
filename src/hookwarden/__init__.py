"""
Hookwarden: pluggable pre-commit verification runner

Provides:
- Discovery of hooks from built-ins, installed plugins and repository plugin directories
- Sequential execution with skip, required and quiet handling
- A single pass / fail / needs-attention verdict for the guarded git action
"""

__version__ = "0.1.0"
