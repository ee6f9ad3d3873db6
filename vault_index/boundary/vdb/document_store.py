"""
Persistent document store for the vault index.

Holds every indexed chunk in memory, keyed by source path, and persists the
whole index to a single JSON file on save(). Mutations are visible to reads
immediately; they only become durable after save().

Dependencies: pydantic, vault_index.models, vault_index.core.exceptions
System role: Storage layer behind the index sync engine and retriever
"""

import asyncio
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from vault_index.boundary.vdb.store_schemas import (
    SCHEMA_VERSION,
    SCORE_NORMALIZATION,
    PersistedIndex,
)
from vault_index.core.exceptions import ConfigurationError, StorageError
from vault_index.models.chunk import DocumentChunk
from vault_index.models.index_report import IndexedFileState

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Path-keyed chunk store with whole-file JSON persistence.

    Each path maps to the complete list of its chunks. Replacing or removing
    a path is a single dict assignment, so readers never observe a partially
    replaced chunk set for one path.
    """

    def __init__(
        self,
        index_path: str | Path,
        embedding_dimension: int | None = None,
        embedding_model: str | None = None,
    ) -> None:
        """
        Initialize an empty store bound to an index file.

        Args:
            index_path: JSON file the index is loaded from and saved to
            embedding_dimension: Expected vector dimension (adopted from the
                first embedded chunk or the persisted file when None)
            embedding_model: Embedding model name recorded in the file header
        """
        self._index_path = Path(index_path)
        self._configured_dimension = embedding_dimension
        self._dimension = embedding_dimension
        self._embedding_model = embedding_model
        self._chunks_by_path: dict[str, list[DocumentChunk]] = {}
        self._dirty = False

    @property
    def index_path(self) -> Path:
        return self._index_path

    @property
    def embedding_dimension(self) -> int | None:
        return self._dimension

    @property
    def is_dirty(self) -> bool:
        """True when there are mutations not yet written by save()."""
        return self._dirty

    @property
    def chunk_count(self) -> int:
        return sum(len(chunks) for chunks in self._chunks_by_path.values())

    # -------------------------------------------------
    # Persistence
    # -------------------------------------------------

    async def load(self) -> None:
        """
        Load the persisted index, replacing in-memory state.

        A missing file yields an empty store.

        Raises:
            StorageError: When the file cannot be read or parsed
            ConfigurationError: When the file was written with an incompatible
                schema, dimension, model or score normalization
        """
        persisted = await asyncio.to_thread(self._read_index)
        if persisted is None:
            logger.info(f"{__name__}:load - No index at {self._index_path}, starting empty")
            self._chunks_by_path = {}
            self._dirty = False
            return

        self._check_header(persisted)
        if self._dimension is None:
            self._dimension = persisted.embedding_dimension

        chunks_by_path: dict[str, list[DocumentChunk]] = {}
        for chunk in persisted.chunks:
            chunks_by_path.setdefault(chunk.path, []).append(chunk)
        self._chunks_by_path = chunks_by_path
        self._dirty = False

        logger.info(
            f"{__name__}:load - Loaded {len(persisted.chunks)} chunks for "
            f"{len(chunks_by_path)} paths from {self._index_path}",
            extra={"dimension": self._dimension},
        )

    def _read_index(self) -> PersistedIndex | None:
        """Read and validate the index file (runs in a worker thread)."""
        if not self._index_path.exists():
            return None
        try:
            raw = self._index_path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(
                f"Failed to read index file: {e}",
                operation="load",
                details={"index_path": str(self._index_path)},
            ) from e
        try:
            return PersistedIndex.model_validate_json(raw)
        except ValidationError as e:
            raise StorageError(
                "Index file is corrupt or has an unexpected layout",
                operation="load",
                details={"index_path": str(self._index_path), "errors": len(e.errors())},
            ) from e

    def _check_header(self, persisted: PersistedIndex) -> None:
        """Reject persisted state produced under an incompatible configuration."""
        if persisted.schema_version != SCHEMA_VERSION:
            raise ConfigurationError(
                f"Unsupported index schema version {persisted.schema_version}",
                field="schema_version",
                details={"expected": SCHEMA_VERSION},
            )
        if persisted.score_normalization != SCORE_NORMALIZATION:
            raise ConfigurationError(
                f"Index was scored with '{persisted.score_normalization}'",
                field="score_normalization",
                details={"expected": SCORE_NORMALIZATION},
            )
        if (
            self._dimension is not None
            and persisted.embedding_dimension is not None
            and persisted.embedding_dimension != self._dimension
        ):
            raise ConfigurationError(
                f"Index dimension {persisted.embedding_dimension} does not match "
                f"configured dimension {self._dimension}",
                field="embedding_dimension",
            )
        if (
            self._embedding_model
            and persisted.embedding_model
            and persisted.embedding_model != self._embedding_model
        ):
            raise ConfigurationError(
                f"Index was built with model '{persisted.embedding_model}', "
                f"configured model is '{self._embedding_model}'",
                field="embedding_model",
            )

    async def save(self) -> None:
        """
        Write the whole index to disk atomically.

        Raises:
            StorageError: When the index file cannot be written
        """
        persisted = PersistedIndex(
            embedding_model=self._embedding_model,
            embedding_dimension=self._dimension,
            saved_at=datetime.now(timezone.utc).isoformat(),
            chunks=self.all_chunks(),
        )
        payload = persisted.model_dump_json()
        await asyncio.to_thread(self._write_index, payload)
        self._dirty = False
        logger.info(
            f"{__name__}:save - Saved {len(persisted.chunks)} chunks to {self._index_path}"
        )

    def _write_index(self, payload: str) -> None:
        """Write payload through a temp file and rename (runs in a worker thread)."""
        tmp_name = None
        try:
            self._index_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._index_path.name}.",
                dir=self._index_path.parent,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self._index_path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error(f"{__name__}:save - FAILED: {type(e).__name__}: {e}", exc_info=True)
            raise StorageError(
                f"Failed to write index file: {e}",
                operation="save",
                details={"index_path": str(self._index_path)},
            ) from e

    # -------------------------------------------------
    # Reads
    # -------------------------------------------------

    async def get(self, path: str) -> list[DocumentChunk]:
        """Return the chunks stored for path (empty list when absent)."""
        return list(self._chunks_by_path.get(path, ()))

    async def has_embeddings(self, path: str) -> bool:
        """True iff at least one chunk of path has a non-empty embedding."""
        return any(chunk.has_embedding for chunk in self._chunks_by_path.get(path, ()))

    async def list_indexed_paths(self) -> set[str]:
        """Distinct paths with at least one stored chunk."""
        return {path for path, chunks in self._chunks_by_path.items() if chunks}

    async def snapshot(self) -> dict[str, IndexedFileState]:
        """Per-path (mtime, file_hash, embeddings) baseline for the sync engine."""
        states = {}
        for path, chunks in list(self._chunks_by_path.items()):
            if not chunks:
                continue
            first = chunks[0]
            states[path] = IndexedFileState(
                path=path,
                mtime=first.mtime,
                file_hash=first.file_hash,
                chunk_count=len(chunks),
                has_embeddings=any(chunk.has_embedding for chunk in chunks),
            )
        return states

    def all_chunks(self) -> list[DocumentChunk]:
        """Point-in-time copy of every stored chunk, ordered by path."""
        return [
            chunk
            for path in sorted(self._chunks_by_path)
            for chunk in self._chunks_by_path[path]
        ]

    # -------------------------------------------------
    # Writes
    # -------------------------------------------------

    async def upsert(self, path: str, chunks: list[DocumentChunk]) -> None:
        """
        Replace all chunks of path with chunks.

        Args:
            path: Source file path
            chunks: Complete new chunk set for the path (empty removes it)

        Raises:
            ValueError: When a chunk belongs to another path or ids repeat
            ConfigurationError: When an embedding has the wrong dimension
        """
        new_chunks = list(chunks)
        if not new_chunks:
            await self.remove_docs(path)
            return

        seen_ids = set()
        dimension = self._dimension
        for chunk in new_chunks:
            if chunk.path != path:
                raise ValueError(f"Chunk {chunk.id} belongs to {chunk.path}, not {path}")
            if chunk.id in seen_ids:
                raise ValueError(f"Duplicate chunk id {chunk.id} for {path}")
            seen_ids.add(chunk.id)
            if not chunk.has_embedding:
                continue
            if dimension is None:
                dimension = len(chunk.embedding)
            elif len(chunk.embedding) != dimension:
                raise ConfigurationError(
                    f"Embedding dimension {len(chunk.embedding)} does not match "
                    f"index dimension {dimension}",
                    field="embedding_dimension",
                    details={"path": path, "chunk_id": chunk.id},
                )

        self._dimension = dimension
        self._chunks_by_path[path] = new_chunks
        self._dirty = True

    async def touch(self, path: str, mtime: float) -> None:
        """Refresh the stored mtime of path without touching content or vectors."""
        chunks = self._chunks_by_path.get(path)
        if not chunks:
            return
        self._chunks_by_path[path] = [chunk.model_copy(update={"mtime": mtime}) for chunk in chunks]
        self._dirty = True

    async def remove_docs(self, path: str) -> int:
        """
        Delete all chunks of path. Missing paths are a no-op.

        Returns:
            int: Number of chunks removed
        """
        removed = self._chunks_by_path.pop(path, None)
        if removed is None:
            return 0
        self._dirty = True
        return len(removed)

    async def clear(self) -> None:
        """Remove every chunk from the store."""
        self._chunks_by_path = {}
        self._dimension = self._configured_dimension
        self._dirty = True
