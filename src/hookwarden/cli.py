#!/usr/bin/env python3
"""
Hookwarden CLI

Command-line interface for running, listing and installing hookwarden hooks.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__, git
from .config import ConfigError, load_config, skip_from_environment
from .hooks.context import HookContext, PreCommitContext
from .hooks.loader import discover_hooks
from .hooks.orchestrator import run_hooks
from .installer import InstallError, install, uninstall
from .reporter import ConsoleReporter
from .signing import HookSigner, SignatureMismatch

EX_USAGE = 64
EX_CONFIG = 78


def _resolve_root(explicit: str | None) -> Path | None:
    if explicit:
        return Path(explicit).resolve()
    return git.repo_root()


def run_command(args) -> int:
    """Run the hooks for one guarded action and translate the verdict to an exit code."""
    root = _resolve_root(args.root)
    if root is None:
        if not args.files:
            print("You are not in a git repository.", file=sys.stderr)
            print("Run from inside a repository, or pass --files to check specific files.", file=sys.stderr)
            return EX_USAGE
        root = Path.cwd()

    config = load_config(root)

    if args.files:
        # Paths on the command line are relative to where the user is standing
        files = [os.path.relpath(Path(f).resolve(), root.resolve()) for f in args.files]
        context = HookContext(args.hook_type, files=files, root=root)
    elif args.hook_type == "pre-commit":
        context = PreCommitContext(root)
    else:
        print(f"No file source for {args.hook_type} hooks; pass --files.", file=sys.stderr)
        return EX_USAGE

    git_dir = git.git_dir(root)
    if config.verify_signatures and git_dir is not None:
        try:
            HookSigner(root, git_dir, config).verify()
        except SignatureMismatch as e:
            print(f"✗ {e}.", file=sys.stderr)
            print("Review the plugin hooks and configuration, then run `hookwarden sign`.", file=sys.stderr)
            return 1

    result = run_hooks(
        context,
        config=config,
        reporter=ConsoleReporter(),
        skip=skip_from_environment(),
        root=root,
    )
    return result.exit_code(allow_attention=args.allow_attention or config.allow_attention)


def list_command(args) -> int:
    """Print the merged hook list for an action."""
    root = _resolve_root(args.root) or Path.cwd()
    config = load_config(root)
    loaded = discover_hooks(config, root, args.hook_type)

    for warning in loaded.warnings:
        print(f"⚠  Skipped hook source {warning}")

    if not loaded.discovered:
        print(f"No {args.hook_type} hooks found.")
        return 0

    width = max(len(d.name) for d in loaded.discovered)
    for d in loaded.discovered:
        flags = [
            "enabled" if d.hook.enabled else "disabled",
        ]
        if d.hook.required:
            flags.append("required")
        if d.hook.quiet:
            flags.append("quiet")
        print(f"{d.name.ljust(width)}  {d.source:<24} {', '.join(flags)}")
    return 0


def install_command(args) -> int:
    """Install hookwarden's git hook scripts into a repository."""
    repo = Path(args.repo).resolve() if args.repo else git.repo_root()
    if repo is None:
        print("You are not in a git repository.", file=sys.stderr)
        return EX_USAGE

    try:
        report = install(repo, tuple(args.hook_types))
    except InstallError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    for hook_type in report.backed_up:
        print(f"  Moved existing {hook_type} hook to {hook_type}.old")
    for hook_type in report.installed:
        print(f"  ✓ Installed {hook_type} hook")
    print(f"Hookwarden installed in {repo}")
    return 0


def uninstall_command(args) -> int:
    """Remove hookwarden's git hook scripts from a repository."""
    repo = Path(args.repo).resolve() if args.repo else git.repo_root()
    if repo is None:
        print("You are not in a git repository.", file=sys.stderr)
        return EX_USAGE

    try:
        report = uninstall(repo, tuple(args.hook_types))
    except InstallError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    for hook_type in report.removed:
        print(f"  ✓ Removed {hook_type} hook")
    for hook_type in report.restored:
        print(f"  Restored previous {hook_type} hook")
    print(f"Hookwarden removed from {repo}")
    return 0


def sign_command(args) -> int:
    """Vouch for the repository's current plugin hooks and configuration."""
    root = _resolve_root(args.repo)
    git_dir = git.git_dir(root) if root else None
    if root is None or git_dir is None:
        print("You are not in a git repository.", file=sys.stderr)
        return EX_USAGE

    config = load_config(root)
    signer = HookSigner(root, git_dir, config)
    digest = signer.sign()
    print(f"Signed {len(signer.signable_files())} file(s): {digest[:12]}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hookwarden",
        description="Hookwarden: pluggable pre-commit verification runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging on stderr")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Run the hooks for a git action")
    run_parser.add_argument(
        "hook_type", nargs="?", default="pre-commit", help="Action being verified (default: pre-commit)"
    )
    run_parser.add_argument("--files", nargs="+", help="Check these files instead of the staged ones")
    run_parser.add_argument("--root", help="Repository root (default: current repository)")
    run_parser.add_argument(
        "--allow-attention",
        action="store_true",
        help="Exit successfully when hooks only need attention",
    )
    run_parser.set_defaults(func=run_command)

    # List command
    list_parser = subparsers.add_parser("list", help="List the hooks that would run")
    list_parser.add_argument("hook_type", nargs="?", default="pre-commit")
    list_parser.add_argument("--root", help="Repository root (default: current repository)")
    list_parser.set_defaults(func=list_command)

    # Install / uninstall
    for name, func, help_text in (
        ("install", install_command, "Install hookwarden hooks into a repository"),
        ("uninstall", uninstall_command, "Remove hookwarden hooks from a repository"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("repo", nargs="?", help="Repository root (default: current repository)")
        sub.add_argument(
            "--hook-type",
            dest="hook_types",
            action="append",
            default=None,
            help="Git hook to manage; repeatable (default: pre-commit)",
        )
        sub.set_defaults(func=func)

    # Sign command
    sign_parser = subparsers.add_parser("sign", help="Trust the current plugin hooks and configuration")
    sign_parser.add_argument("repo", nargs="?", help="Repository root (default: current repository)")
    sign_parser.set_defaults(func=sign_command)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        return EX_USAGE

    if getattr(args, "hook_types", "unset") is None:
        args.hook_types = ["pre-commit"]

    try:
        return args.func(args)
    except ConfigError as e:
        print(f"✗ {e}", file=sys.stderr)
        return EX_CONFIG
    except git.GitError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
