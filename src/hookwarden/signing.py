"""Tamper detection for repository plugins and configuration.

Plugin hooks are arbitrary Python pulled in from the repository, so a
``git pull`` can change what runs on the next commit. `HookSigner` records a
digest of the plugin files and config when the user vouches for them
(``hookwarden sign``) and refuses to verify once anything changes.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from .config import WardenConfig, config_files

logger = logging.getLogger(__name__)

SIGNATURE_FILE = "hookwarden.signature"


class SignatureMismatch(Exception):
    """Raised when plugins or configuration changed since they were signed."""


class HookSigner:
    def __init__(self, root: Path, git_dir: Path, config: WardenConfig) -> None:
        self.root = root
        self.signature_path = git_dir / SIGNATURE_FILE
        self.config = config

    def plugin_files(self) -> list[Path]:
        files: list[Path] = []
        for directory in self.config.plugin_directories:
            base = self.root / directory
            if base.is_dir():
                files.extend(sorted(p for p in base.rglob("*.py") if p.is_file()))
        return files

    def signable_files(self) -> list[Path]:
        return config_files(self.root) + self.plugin_files()

    def digest(self) -> str:
        sha = hashlib.sha256()
        for path in self.signable_files():
            sha.update(str(path.relative_to(self.root)).encode())
            sha.update(b"\0")
            sha.update(path.read_bytes())
            sha.update(b"\0")
        return sha.hexdigest()

    def stored(self) -> str | None:
        if not self.signature_path.is_file():
            return None
        return self.signature_path.read_text().strip() or None

    def sign(self) -> str:
        digest = self.digest()
        self.signature_path.write_text(digest + "\n")
        logger.debug("signed %d files as %s", len(self.signable_files()), digest)
        return digest

    def verify(self) -> None:
        """Raise SignatureMismatch unless the current files match the signature.

        A repository without plugin files and without a signature has nothing
        to vouch for and always verifies.
        """

        stored = self.stored()
        if stored is None:
            if self.plugin_files():
                raise SignatureMismatch("repository plugin hooks have never been signed")
            return
        if stored != self.digest():
            raise SignatureMismatch("repository plugin hooks or configuration changed since they were signed")
