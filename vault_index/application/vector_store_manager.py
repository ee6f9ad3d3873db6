"""
Vector store manager.

Facade the host application talks to. Owns the lazily loaded document
store, the index sync engine and the hybrid retriever for one vault, and
notifies subscribers after each completed mutation.

Dependencies: vault_index.core, vault_index.boundary, vault_index.configs
System role: Application-level entry point of the vault index
"""

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from vault_index.application.index_inspection import inspect_index
from vault_index.boundary.corpus.models import Corpus
from vault_index.boundary.embeddings.provider import EmbeddingProvider
from vault_index.boundary.vdb.document_store import DocumentStore
from vault_index.configs.retrieval import RetrievalSettings
from vault_index.core.document_processing.chunking_task import ChunkingTask
from vault_index.core.exceptions import ConcurrencyError
from vault_index.core.index_sync import IndexSyncEngine
from vault_index.core.relevant_notes import find_relevant_notes
from vault_index.core.retriever import HybridRetriever
from vault_index.models.chunk import DocumentChunk
from vault_index.models.index_report import IndexEvent, IndexRunResult, IndexStatusReport
from vault_index.models.retrieval import RelevantNote, RetrievalConfig

logger = logging.getLogger(__name__)

IndexListener = Callable[[IndexEvent], None]


class VectorStoreManager:
    """
    Vault index facade.

    Construct one instance per vault at the composition root and pass it by
    reference; there is no module-level instance.
    """

    def __init__(
        self,
        store: DocumentStore,
        corpus: Corpus,
        chunker: ChunkingTask,
        embedding_provider: EmbeddingProvider,
        default_config: RetrievalConfig | None = None,
    ) -> None:
        """
        Initialize manager.

        Args:
            store: Document store (loaded on first use)
            corpus: Live corpus
            chunker: Chunker used by the sync engine
            embedding_provider: Embedding provider shared by indexing and retrieval
            default_config: Retrieval config used when callers pass none
                (read from RetrievalSettings if None)
        """
        self._store = store
        self._corpus = corpus
        self._engine = IndexSyncEngine(store, corpus, chunker, embedding_provider)
        self._retriever = HybridRetriever(store, embedding_provider)
        self._default_config = default_config
        self._loaded = False
        self._unloaded = False
        self._load_lock = asyncio.Lock()
        self._listeners: list[IndexListener] = []
        self.last_run: IndexRunResult | None = None

    @property
    def engine(self) -> IndexSyncEngine:
        return self._engine

    @property
    def default_config(self) -> RetrievalConfig:
        """Lazy-load retrieval defaults from the environment."""
        if self._default_config is None:
            self._default_config = RetrievalSettings().to_config()
        return self._default_config

    # -------------------------------------------------
    # Store access
    # -------------------------------------------------

    async def get_db(self) -> DocumentStore:
        """
        Return the document store, loading it from disk on first call.

        Raises:
            StorageError: When the index file is unreadable or corrupt
            ConfigurationError: When the index file is incompatible
        """
        if self._loaded:
            return self._store
        async with self._load_lock:
            if not self._loaded:
                await self._store.load()
                self._loaded = True
        return self._store

    async def get_db_ops(self) -> DocumentStore:
        """Store handle for per-path operations (has_embeddings, get, ...)."""
        return await self.get_db()

    # -------------------------------------------------
    # Observers
    # -------------------------------------------------

    def subscribe(self, listener: IndexListener) -> None:
        """Register a callback invoked after every completed mutation."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: IndexListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, name: str, payload: dict[str, Any]) -> None:
        event = IndexEvent(name=name, payload=payload)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"{__name__}:_emit - Listener failed for {name}")

    # -------------------------------------------------
    # Mutations
    # -------------------------------------------------

    async def _prepare_mutation(self, operation: str) -> None:
        """Load the store and refuse mutations once the manager is unloaded."""
        await self.get_db()
        if self._unloaded:
            logger.warning(f"{__name__}:{operation} - Rejected, manager is unloaded")
            raise ConcurrencyError(operation, "onunload")

    async def index_vault_to_vector_store(self, force: bool = False) -> int:
        """
        Index new and changed vault files.

        A request that reaches the engine after onunload() is recorded as a
        cancelled run and never calls the embedding provider.

        Args:
            force: Re-embed every file regardless of its stored state

        Returns:
            int: Number of files (re-)processed

        Raises:
            ConcurrencyError: When another mutation is in flight
        """
        await self.get_db()
        if self._unloaded:
            logger.warning(f"{__name__}:index_vault_to_vector_store - Skipped, manager is unloaded")
            self.last_run = IndexRunResult(force=force, cancelled=True)
            return 0
        result = await self._engine.index_to_store(force=force)
        self.last_run = result
        self._emit("index_completed", result.model_dump())
        return result.processed

    async def garbage_collect_vector_store(self) -> int:
        """Remove index entries for files deleted from the vault."""
        await self._prepare_mutation("garbage_collect")
        removed = await self._engine.garbage_collect()
        self._emit("gc_completed", {"removed": removed})
        return removed

    async def clear_index(self) -> None:
        """Drop the whole index. Irreversible; confirm with the user first."""
        await self._prepare_mutation("clear_index")
        await self._engine.clear_index()
        self.last_run = None
        self._emit("index_cleared", {})

    async def remove_docs(self, path: str) -> None:
        """Remove one file from the index."""
        await self.remove_files([path])

    async def remove_files(self, paths: Sequence[str]) -> int:
        """
        Remove several files from the index with a single save.

        Returns:
            int: Number of files that were indexed and are now removed
        """
        await self._prepare_mutation("remove_docs")
        removed = await self._engine.remove_docs(list(paths))
        self._emit("docs_removed", {"paths": list(paths), "removed": removed})
        return removed

    async def onunload(self) -> None:
        """
        Cancel in-flight indexing, wait for it, and flush unsaved changes.

        Mutations requested afterwards are refused, including ones still
        waiting on the first store load when this runs.
        """
        self._unloaded = True
        self._engine.request_cancel()
        await self._engine.wait_idle()
        if self._loaded and self._store.is_dirty:
            await self._store.save()
        logger.info(f"{__name__}:onunload - Vector store manager unloaded")

    # -------------------------------------------------
    # Reads
    # -------------------------------------------------

    async def get_indexed_files(self) -> list[str]:
        await self.get_db()
        return await self._engine.get_indexed_files()

    async def has_embeddings(self, path: str) -> bool:
        store = await self.get_db()
        return await store.has_embeddings(path)

    async def retrieve(
        self,
        query: str,
        salient_terms: Sequence[str],
        config: RetrievalConfig | Mapping[str, Any] | None = None,
    ) -> list[DocumentChunk]:
        """
        Hybrid search over the index.

        Args:
            query: Free-text query
            salient_terms: Keywords for lexical scoring
            config: Retrieval parameters (defaults from RetrievalSettings)

        Returns:
            list[DocumentChunk]: Ranked chunks, best first
        """
        await self.get_db()
        return await self._retriever.retrieve(query, salient_terms, config or self.default_config)

    async def find_relevant_notes(
        self,
        path: str,
        config: RetrievalConfig | Mapping[str, Any] | None = None,
    ) -> list[RelevantNote]:
        """Notes most similar to the note at path, one entry per note."""
        store = await self.get_db()
        return await find_relevant_notes(store, self._retriever, path, config or self.default_config)

    async def inspect_paths(self, paths: Sequence[str]) -> dict[str, list[DocumentChunk]]:
        """Stored chunks for each path, for debugging (empty list when not indexed)."""
        store = await self.get_db()
        return {path: await store.get(path) for path in paths}

    async def inspect_index(self) -> IndexStatusReport:
        """Classify every vault file as indexed, unindexed or empty."""
        store = await self.get_db()
        return await inspect_index(store, self._corpus)
