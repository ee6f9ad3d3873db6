"""Tests for the VectorStoreManager facade."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from vault_index.application.vector_store_manager import VectorStoreManager
from vault_index.boundary.vdb.document_store import DocumentStore
from vault_index.core.exceptions import ConcurrencyError
from vault_index.models.retrieval import RetrievalConfig


@pytest.fixture
def manager(store, corpus, chunker, provider):
    """Manager over the in-memory corpus with explicit retrieval defaults."""
    return VectorStoreManager(
        store=store,
        corpus=corpus,
        chunker=chunker,
        embedding_provider=provider,
        default_config=RetrievalConfig(min_similarity_score=0.0, max_k=5, text_weight=0.5),
    )


@pytest.fixture
def fruit_corpus(corpus):
    corpus.write("A.md", "apples are red")
    corpus.write("B.md", "bananas are yellow")
    corpus.write("C.md", "")
    return corpus


class TestVectorStoreManagerIndexing:
    """Test mutating operations and notifications."""

    @pytest.mark.asyncio
    async def test_index_vault_returns_processed_count(self, manager, fruit_corpus) -> None:
        """Should index non-empty files and record the run."""
        # Act
        processed = await manager.index_vault_to_vector_store()

        # Assert
        assert processed == 2
        assert manager.last_run.processed == 2
        assert manager.last_run.skipped == 1
        assert await manager.get_indexed_files() == ["A.md", "B.md"]

    @pytest.mark.asyncio
    async def test_listeners_receive_events(self, manager, fruit_corpus) -> None:
        """Should notify subscribers after each completed mutation."""
        # Arrange
        events = []
        manager.subscribe(events.append)

        # Act
        await manager.index_vault_to_vector_store()
        fruit_corpus.delete("B.md")
        await manager.garbage_collect_vector_store()
        await manager.remove_docs("A.md")
        await manager.clear_index()

        # Assert
        assert [e.name for e in events] == [
            "index_completed",
            "gc_completed",
            "docs_removed",
            "index_cleared",
        ]
        assert events[0].payload["processed"] == 2
        assert events[1].payload == {"removed": 1}
        assert events[2].payload == {"paths": ["A.md"], "removed": 1}

    @pytest.mark.asyncio
    async def test_unsubscribe_stops_notifications(self, manager, fruit_corpus) -> None:
        events = []
        manager.subscribe(events.append)
        manager.unsubscribe(events.append)

        await manager.index_vault_to_vector_store()

        assert events == []

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_mutation(self, manager, fruit_corpus) -> None:
        """Should log listener errors and still notify the others."""
        # Arrange
        events = []

        def broken(event):
            raise RuntimeError("listener bug")

        manager.subscribe(broken)
        manager.subscribe(events.append)

        # Act
        processed = await manager.index_vault_to_vector_store()

        # Assert
        assert processed == 2
        assert len(events) == 1

    @pytest.mark.asyncio
    async def test_remove_files_batch(self, manager, fruit_corpus) -> None:
        await manager.index_vault_to_vector_store()

        removed = await manager.remove_files(["A.md", "B.md", "missing.md"])

        assert removed == 2
        assert await manager.get_indexed_files() == []

    @pytest.mark.asyncio
    async def test_busy_engine_rejects_manager_mutation(self, manager, fruit_corpus, embeddings) -> None:
        """Should surface ConcurrencyError from the engine."""
        await manager.get_db()
        embeddings.gate = asyncio.Event()
        run = asyncio.create_task(manager.index_vault_to_vector_store())
        for _ in range(3):
            await asyncio.sleep(0)

        with pytest.raises(ConcurrencyError):
            await manager.clear_index()

        embeddings.gate.set()
        assert await run == 2


class TestVectorStoreManagerReads:
    """Test retrieval, inspection and store access."""

    @pytest.mark.asyncio
    async def test_retrieve_uses_default_config(self, manager, fruit_corpus) -> None:
        await manager.index_vault_to_vector_store()

        results = await manager.retrieve("red fruit", ["red"])

        assert [c.path for c in results] == ["A.md", "B.md"]

    @pytest.mark.asyncio
    async def test_retrieve_with_explicit_config(self, manager, fruit_corpus) -> None:
        await manager.index_vault_to_vector_store()

        results = await manager.retrieve(
            "red fruit",
            ["red"],
            RetrievalConfig(min_similarity_score=0.5, max_k=5, text_weight=0.5),
        )

        assert [c.path for c in results] == ["A.md"]

    @pytest.mark.asyncio
    async def test_has_embeddings(self, manager, fruit_corpus) -> None:
        await manager.index_vault_to_vector_store()

        assert await manager.has_embeddings("A.md") is True
        assert await manager.has_embeddings("C.md") is False

    @pytest.mark.asyncio
    async def test_find_relevant_notes(self, manager, corpus) -> None:
        """Should rank other notes against the source note's embeddings."""
        corpus.write("A.md", "apples are red")
        corpus.write("B.md", "red apples and bananas")
        corpus.write("C.md", "yellow")
        await manager.index_vault_to_vector_store()

        notes = await manager.find_relevant_notes("A.md")

        assert [n.path for n in notes] == ["B.md", "C.md"]

    @pytest.mark.asyncio
    async def test_inspect_paths_returns_stored_chunks(self, manager, fruit_corpus) -> None:
        """Should map each requested path to its stored chunks."""
        await manager.index_vault_to_vector_store()

        chunks_by_path = await manager.inspect_paths(["A.md", "C.md", "missing.md"])

        assert list(chunks_by_path) == ["A.md", "C.md", "missing.md"]
        assert [c.content for c in chunks_by_path["A.md"]] == ["apples are red"]
        assert chunks_by_path["A.md"][0].has_embedding
        assert chunks_by_path["C.md"] == []
        assert chunks_by_path["missing.md"] == []

    @pytest.mark.asyncio
    async def test_inspect_index(self, manager, fruit_corpus) -> None:
        await manager.index_vault_to_vector_store()
        fruit_corpus.write("D.md", "gamma")

        report = await manager.inspect_index()

        assert report.indexed == ["A.md", "B.md"]
        assert report.unindexed == ["D.md"]
        assert report.empty == ["C.md"]

    @pytest.mark.asyncio
    async def test_get_db_loads_store_once(self, store, corpus, chunker, provider) -> None:
        """Should load the store lazily on first access only."""
        # Arrange
        store.load = AsyncMock()
        manager = VectorStoreManager(store, corpus, chunker, provider)

        # Act
        first = await manager.get_db()
        second = await manager.get_db_ops()

        # Assert
        assert first is store
        assert second is store
        store.load.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_default_config_read_from_settings(self, store, corpus, chunker, provider, monkeypatch) -> None:
        """Should build retrieval defaults from RETRIEVAL_ variables when none given."""
        monkeypatch.setenv("RETRIEVAL_MAX_K", "3")
        manager = VectorStoreManager(store, corpus, chunker, provider)

        assert manager.default_config.max_k == 3


class TestVectorStoreManagerUnload:
    """Test onunload shutdown behavior."""

    @pytest.mark.asyncio
    async def test_onunload_flushes_dirty_store(self, manager, index_path, make_chunk) -> None:
        """Should save pending mutations on unload."""
        # Arrange
        store = await manager.get_db()
        await store.upsert("x.md", [make_chunk("x.md", "alpha", [1.0] + [0.0] * 7)])

        # Act
        await manager.onunload()

        # Assert
        reloaded = DocumentStore(index_path)
        await reloaded.load()
        assert await reloaded.list_indexed_paths() == {"x.md"}

    @pytest.mark.asyncio
    async def test_onunload_cancels_in_flight_run(self, manager, fruit_corpus, embeddings, index_path) -> None:
        """Should stop the running index, wait for it and keep completed work."""
        # Arrange
        await manager.get_db()
        embeddings.gate = asyncio.Event()
        run = asyncio.create_task(manager.index_vault_to_vector_store())
        for _ in range(3):
            await asyncio.sleep(0)

        # Act
        unload = asyncio.create_task(manager.onunload())
        await asyncio.sleep(0)
        embeddings.gate.set()
        await unload
        processed = await run

        # Assert
        assert processed == 1
        assert manager.last_run.cancelled is True
        reloaded = DocumentStore(index_path)
        await reloaded.load()
        assert await reloaded.list_indexed_paths() == {"A.md"}

    @pytest.mark.asyncio
    async def test_onunload_during_first_load_stops_pending_run(self, manager, fruit_corpus, embeddings) -> None:
        """Should never embed for a run still waiting on the store load at unload time."""
        # Arrange
        run = asyncio.create_task(manager.index_vault_to_vector_store())
        await asyncio.sleep(0)

        # Act
        await manager.onunload()
        processed = await run

        # Assert
        assert processed == 0
        assert embeddings.document_calls == []
        assert manager.last_run.cancelled is True
        assert await manager.get_indexed_files() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation, args",
        [
            ("garbage_collect_vector_store", ()),
            ("clear_index", ()),
            ("remove_files", (["A.md"],)),
        ],
    )
    async def test_mutations_refused_after_unload(self, manager, fruit_corpus, operation, args) -> None:
        await manager.index_vault_to_vector_store()
        await manager.onunload()

        with pytest.raises(ConcurrencyError) as exc_info:
            await getattr(manager, operation)(*args)

        assert exc_info.value.details["active_operation"] == "onunload"
        assert await manager.get_indexed_files() == ["A.md", "B.md"]
