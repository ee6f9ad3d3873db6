"""
Filesystem-backed vault corpus.

Walks a vault directory for files with the configured extensions and reads
them as UTF-8 text. Hidden directories (".obsidian", ".git", the index
directory itself) are skipped.

Dependencies: pathlib, asyncio
System role: Default live corpus for the index sync engine
"""

import asyncio
import logging
import os
from pathlib import Path

from vault_index.boundary.corpus.models import CorpusFile

logger = logging.getLogger(__name__)


class FileSystemCorpus:
    """Vault directory exposed through the Corpus interface."""

    def __init__(self, root: str | Path, extensions: list[str] | None = None) -> None:
        """
        Initialize corpus over a directory.

        Args:
            root: Vault root directory
            extensions: File extensions to include (default: [".md"])
        """
        self._root = Path(root).expanduser().resolve()
        self._extensions = {
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in (extensions or [".md"])
        }

    @property
    def root(self) -> Path:
        return self._root

    async def list_files(self) -> list[CorpusFile]:
        """List matching files sorted by vault-relative path."""
        return await asyncio.to_thread(self._scan)

    def _scan(self) -> list[CorpusFile]:
        files = []
        for dirpath, dirnames, filenames in os.walk(self._root):
            dirnames[:] = [d for d in dirnames if not d.startswith(".")]
            for filename in filenames:
                full = Path(dirpath) / filename
                if full.suffix.lower() not in self._extensions:
                    continue
                try:
                    mtime = full.stat().st_mtime
                except OSError as e:
                    # vanished between walk and stat
                    logger.warning(f"{__name__}:list_files - Skipping {full}: {e}")
                    continue
                files.append(CorpusFile(path=full.relative_to(self._root).as_posix(), mtime=mtime))
        files.sort(key=lambda f: f.path)
        logger.debug(f"{__name__}:list_files - Found {len(files)} files under {self._root}")
        return files

    async def read_content(self, path: str) -> str:
        """
        Read a vault file as UTF-8 text.

        Raises:
            OSError: When the file is missing or unreadable
        """
        return await asyncio.to_thread(self._resolve(path).read_text, encoding="utf-8")

    def _resolve(self, path: str) -> Path:
        full = (self._root / path).resolve()
        if not full.is_relative_to(self._root):
            raise FileNotFoundError(f"Path escapes the vault root: {path}")
        return full
