"""
Index sync engine.

Reconciles the document store against the live corpus one file at a time.
Each file is classified by comparing its current content hash with the
stored baseline; only untracked and stale files are re-chunked and
re-embedded, so the cost of a refresh follows the amount of changed
content rather than the size of the vault.

Dependencies: vault_index.boundary, vault_index.core.document_processing
System role: Write path of the vault index
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from enum import Enum

from vault_index.boundary.corpus.models import Corpus, CorpusFile
from vault_index.boundary.embeddings.provider import EmbeddingProvider
from vault_index.boundary.vdb.document_store import DocumentStore
from vault_index.core.document_processing.chunking_task import ChunkDraft, ChunkingTask
from vault_index.core.exceptions import ConcurrencyError, EmbeddingError
from vault_index.models.chunk import DocumentChunk, content_hash, make_chunk_id
from vault_index.models.index_report import IndexedFileState, IndexRunResult

logger = logging.getLogger(__name__)


class FileIndexState(str, Enum):
    """Per-file position in the index lifecycle."""

    UNTRACKED = "untracked"
    INDEXED = "indexed"
    STALE = "stale"
    MISSING = "missing"
    EMPTY = "empty"


def classify_file(
    stored_state: IndexedFileState | None,
    current_hash: str,
    content: str,
) -> FileIndexState:
    """
    Classify a corpus file against its stored baseline.

    MISSING is never returned here: it applies to stored paths that are
    absent from the corpus and is computed by garbage collection.

    Args:
        stored_state: Stored baseline for the path, None when not indexed
        current_hash: sha256 of the current file content
        content: Current file content

    Returns:
        FileIndexState: EMPTY, UNTRACKED, STALE or INDEXED
    """
    if not content.strip():
        return FileIndexState.EMPTY
    if stored_state is None:
        return FileIndexState.UNTRACKED
    if stored_state.file_hash != current_hash or not stored_state.has_embeddings:
        return FileIndexState.STALE
    return FileIndexState.INDEXED


class IndexSyncEngine:
    """
    Runs index mutations against one document store.

    Mutations are single-flight: while one is running, any other mutating
    call fails fast with ConcurrencyError. Reads go straight to the store.
    """

    def __init__(
        self,
        store: DocumentStore,
        corpus: Corpus,
        chunker: ChunkingTask,
        embedding_provider: EmbeddingProvider,
    ) -> None:
        """
        Initialize engine.

        Args:
            store: Document store to reconcile
            corpus: Live corpus (file listing and content reads)
            chunker: Splits file content into chunk drafts
            embedding_provider: Embeds the chunk texts of one file per call
        """
        self._store = store
        self._corpus = corpus
        self._chunker = chunker
        self._embedding_provider = embedding_provider
        self._active_operation: str | None = None
        self._cancel_requested = asyncio.Event()
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def is_busy(self) -> bool:
        return self._active_operation is not None

    @property
    def active_operation(self) -> str | None:
        return self._active_operation

    def request_cancel(self) -> None:
        """
        Ask index_to_store to stop before its next embedding call.

        A request made while no index run is in flight stays pending and
        stops the next run before it embeds anything.
        """
        if self.is_busy:
            logger.info(f"{__name__}:request_cancel - Cancelling {self._active_operation}")
        self._cancel_requested.set()

    async def wait_idle(self) -> None:
        """Return once no mutation is in flight."""
        await self._idle.wait()

    @asynccontextmanager
    async def _exclusive(self, operation: str):
        if self._active_operation is not None:
            logger.warning(
                f"{__name__}:{operation} - Rejected, {self._active_operation} in progress"
            )
            raise ConcurrencyError(operation, self._active_operation)
        self._active_operation = operation
        self._idle.clear()
        try:
            yield
        finally:
            self._active_operation = None
            self._idle.set()

    # -------------------------------------------------
    # Mutations
    # -------------------------------------------------

    async def index_to_store(self, force: bool = False) -> IndexRunResult:
        """
        Bring the store up to date with the corpus.

        Args:
            force: Re-chunk and re-embed every non-empty file

        Returns:
            IndexRunResult: Per-run counters; processed is the number of files
            (re-)indexed or removed because they became empty

        Raises:
            ConcurrencyError: When another mutation is in flight
            ConfigurationError: When the provider returns vectors of the wrong dimension
            StorageError: When the final save fails
        """
        async with self._exclusive("index_to_store"):
            try:
                return await self._run_index(force)
            finally:
                # a cancel is consumed by the run it stopped, never by a later one
                self._cancel_requested.clear()

    async def _run_index(self, force: bool) -> IndexRunResult:
        started = time.perf_counter()
        result = IndexRunResult(force=force)

        files = await self._corpus.list_files()
        baseline = await self._store.snapshot()
        logger.info(
            f"{__name__}:index_to_store - Reconciling {len(files)} files "
            f"against {len(baseline)} indexed paths",
            extra={"force": force},
        )

        for corpus_file in files:
            if not await self._sync_file(corpus_file, baseline.get(corpus_file.path), force, result):
                result.cancelled = True
                logger.info(
                    f"{__name__}:index_to_store - Cancelled after {result.processed} files"
                )
                break

        if self._store.is_dirty:
            await self._store.save()

        result.elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{__name__}:index_to_store - Completed: processed={result.processed} "
            f"skipped={result.skipped} failed={result.failed}",
            extra={"elapsed_ms": round(result.elapsed_ms, 2), "cancelled": result.cancelled},
        )
        return result

    async def _sync_file(
        self,
        corpus_file: CorpusFile,
        stored: IndexedFileState | None,
        force: bool,
        result: IndexRunResult,
    ) -> bool:
        """Reconcile one file, updating result. Returns False when cancelled."""
        path = corpus_file.path
        try:
            content = await self._corpus.read_content(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"{__name__}:_sync_file - Cannot read {path}: {type(e).__name__}: {e}")
            self._record_failure(result, path)
            return True

        file_hash = content_hash(content)
        state = classify_file(stored, file_hash, content)

        if state is FileIndexState.EMPTY:
            if stored is not None:
                await self._store.remove_docs(path)
                result.processed += 1
                result.removed += 1
                logger.info(f"{__name__}:_sync_file - {path} is empty, removed from index")
            else:
                result.skipped += 1
            return True

        if state is FileIndexState.INDEXED and not force:
            if stored.mtime != corpus_file.mtime:
                await self._store.touch(path, corpus_file.mtime)
            result.skipped += 1
            return True

        drafts = self._chunker.chunk(path, content)
        if self._cancel_requested.is_set():
            return False

        try:
            vectors = await self._embedding_provider.embed_documents(
                [draft.content for draft in drafts],
                path=path,
            )
        except EmbeddingError as e:
            logger.warning(f"{__name__}:_sync_file - Embedding failed for {path}: {e}")
            self._record_failure(result, path)
            if stored is None:
                # placeholder chunks keep the file visible as "embedding missing"
                placeholders = [[] for _ in drafts]
                await self._store.upsert(
                    path,
                    self._build_chunks(path, drafts, placeholders, file_hash, corpus_file.mtime),
                )
            return True

        await self._store.upsert(
            path,
            self._build_chunks(path, drafts, vectors, file_hash, corpus_file.mtime),
        )
        result.processed += 1
        logger.debug(
            f"{__name__}:_sync_file - Indexed {path}",
            extra={"state": state.value, "chunks": len(drafts)},
        )
        return True

    @staticmethod
    def _record_failure(result: IndexRunResult, path: str) -> None:
        result.failed += 1
        result.failed_paths.append(path)

    @staticmethod
    def _build_chunks(
        path: str,
        drafts: list[ChunkDraft],
        vectors: list[list[float]],
        file_hash: str,
        mtime: float,
    ) -> list[DocumentChunk]:
        return [
            DocumentChunk(
                id=make_chunk_id(path, draft.start_index),
                path=path,
                content=draft.content,
                embedding=vector,
                content_hash=content_hash(draft.content),
                file_hash=file_hash,
                mtime=mtime,
                metadata=draft.metadata,
            )
            for draft, vector in zip(drafts, vectors)
        ]

    async def garbage_collect(self) -> int:
        """
        Remove indexed paths that no longer exist in the corpus.

        Returns:
            int: Number of paths removed

        Raises:
            ConcurrencyError: When another mutation is in flight
        """
        async with self._exclusive("garbage_collect"):
            corpus_paths = {f.path for f in await self._corpus.list_files()}
            missing = sorted(await self._store.list_indexed_paths() - corpus_paths)

            for path in missing:
                await self._store.remove_docs(path)

            if missing:
                await self._store.save()
            logger.info(f"{__name__}:garbage_collect - Removed {len(missing)} missing paths")
            return len(missing)

    async def clear_index(self) -> None:
        """Drop every chunk and persist the empty index."""
        async with self._exclusive("clear_index"):
            await self._store.clear()
            await self._store.save()
            logger.info(f"{__name__}:clear_index - Index cleared")

    async def remove_docs(self, paths: list[str]) -> int:
        """
        Remove the given paths from the index and save once.

        Returns:
            int: Number of paths that were indexed and are now removed
        """
        async with self._exclusive("remove_docs"):
            removed = 0
            for path in paths:
                if await self._store.remove_docs(path):
                    removed += 1
            if removed:
                await self._store.save()
            logger.info(f"{__name__}:remove_docs - Removed {removed} of {len(paths)} paths")
            return removed

    # -------------------------------------------------
    # Reads
    # -------------------------------------------------

    async def get_indexed_files(self) -> list[str]:
        """Indexed paths in sorted order."""
        return sorted(await self._store.list_indexed_paths())
