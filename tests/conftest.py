"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory corpus, keyword-based fake embeddings, temp index path,
store/engine fixtures and a chunk factory
Dependencies: pytest, langchain_core
System role: Test infrastructure and fixture management
"""

import asyncio
import re

import pytest
from langchain_core.embeddings import Embeddings

from vault_index.boundary.corpus.models import CorpusFile
from vault_index.boundary.embeddings.provider import EmbeddingProvider
from vault_index.boundary.vdb.document_store import DocumentStore
from vault_index.core.document_processing.chunking_task import ChunkingTask
from vault_index.core.index_sync import IndexSyncEngine
from vault_index.models.chunk import DocumentChunk, content_hash, make_chunk_id

VOCABULARY = ["apples", "bananas", "red", "yellow", "fruit", "alpha", "beta", "gamma"]
DIMENSION = len(VOCABULARY)
EMBEDDING_MODEL = "keyword-fake"


class KeywordEmbeddings(Embeddings):
    """
    Deterministic embeddings: one dimension per vocabulary word, valued by
    its occurrence count. Text without vocabulary words gets a zero vector.
    """

    def __init__(self) -> None:
        self.document_calls: list[list[str]] = []
        self.query_calls: list[str] = []
        self.fail_on: str | None = None
        self.gate: asyncio.Event | None = None
        self.on_embed = None

    def _vector(self, text: str) -> list[float]:
        words = re.findall(r"\w+", text.lower())
        return [float(words.count(term)) for term in VOCABULARY]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if self.fail_on and any(self.fail_on in text for text in texts):
            raise RuntimeError("429 Resource exhausted")
        self.document_calls.append(list(texts))
        return [self._vector(text) for text in texts]

    def embed_query(self, text: str) -> list[float]:
        self.query_calls.append(text)
        return self._vector(text)

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        if self.gate is not None:
            await self.gate.wait()
        vectors = self.embed_documents(texts)
        if self.on_embed is not None:
            self.on_embed(texts)
        return vectors

    async def aembed_query(self, text: str) -> list[float]:
        return self.embed_query(text)


class InMemoryCorpus:
    """Corpus backed by a dict of path -> (content, mtime)."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self._files: dict[str, tuple[str, float]] = {}
        self.unreadable: set[str] = set()
        for path, content in (files or {}).items():
            self.write(path, content)

    def write(self, path: str, content: str, mtime: float | None = None) -> None:
        previous = self._files.get(path, ("", 0.0))[1]
        self._files[path] = (content, mtime if mtime is not None else previous + 1.0)

    def touch(self, path: str, mtime: float) -> None:
        content, _ = self._files[path]
        self._files[path] = (content, mtime)

    def delete(self, path: str) -> None:
        del self._files[path]

    def mtime(self, path: str) -> float:
        return self._files[path][1]

    async def list_files(self) -> list[CorpusFile]:
        return [CorpusFile(path=path, mtime=self._files[path][1]) for path in sorted(self._files)]

    async def read_content(self, path: str) -> str:
        if path in self.unreadable:
            raise PermissionError(f"Permission denied: {path}")
        if path not in self._files:
            raise FileNotFoundError(path)
        return self._files[path][0]


@pytest.fixture
def embeddings():
    """Keyword fake embeddings with call tracking."""
    return KeywordEmbeddings()


@pytest.fixture
def provider(embeddings):
    """EmbeddingProvider over the keyword fake."""
    return EmbeddingProvider(embeddings, dimension=DIMENSION)


@pytest.fixture
def index_path(tmp_path):
    """Index file location inside a not-yet-existing directory."""
    return tmp_path / "index" / "index.json"


@pytest.fixture
def store(index_path):
    """Empty document store bound to the temp index path."""
    return DocumentStore(index_path, embedding_dimension=DIMENSION, embedding_model=EMBEDDING_MODEL)


@pytest.fixture
def corpus():
    """Empty in-memory corpus."""
    return InMemoryCorpus()


@pytest.fixture
def chunker():
    """Chunker sized so short test notes are a single chunk."""
    return ChunkingTask(chunk_size=200, chunk_overlap=20)


@pytest.fixture
def engine(store, corpus, chunker, provider):
    """Index sync engine wired to the in-memory collaborators."""
    return IndexSyncEngine(store, corpus, chunker, provider)


@pytest.fixture
def make_chunk():
    """
    Factory for stored chunks with explicit embeddings.

    Returns:
        Callable: make_chunk(path, content, embedding, start_index=0, mtime=1.0)
    """

    def _make(
        path: str,
        content: str,
        embedding: list[float],
        start_index: int = 0,
        mtime: float = 1.0,
    ) -> DocumentChunk:
        return DocumentChunk(
            id=make_chunk_id(path, start_index),
            path=path,
            content=content,
            embedding=embedding,
            content_hash=content_hash(content),
            file_hash=content_hash(content),
            mtime=mtime,
            metadata={"title": path.rsplit(".", 1)[0], "chunk_index": 0},
        )

    return _make
