"""
Domain models.

Exports: DocumentChunk, RetrievalConfig, ScoredChunk, RelevantNote,
IndexedFileState, IndexRunResult, IndexStatusReport, IndexEvent
"""

from vault_index.models.chunk import DocumentChunk, content_hash, make_chunk_id
from vault_index.models.index_report import (
    IndexedFileState,
    IndexEvent,
    IndexRunResult,
    IndexStatusReport,
)
from vault_index.models.retrieval import RelevantNote, RetrievalConfig, ScoredChunk

__all__ = [
    "DocumentChunk",
    "content_hash",
    "make_chunk_id",
    "IndexedFileState",
    "IndexEvent",
    "IndexRunResult",
    "IndexStatusReport",
    "RelevantNote",
    "RetrievalConfig",
    "ScoredChunk",
]
