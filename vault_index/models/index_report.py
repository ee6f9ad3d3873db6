"""
Index bookkeeping models.

Stored per-path state used as the sync baseline, run results returned by
mutating operations, and the inspection report.

Dependencies: pydantic
System role: Reporting types for the index sync engine
"""

from typing import Any

from pydantic import BaseModel, Field


class IndexedFileState(BaseModel):
    """What the store believes is indexed for one path."""

    path: str
    mtime: float
    file_hash: str
    chunk_count: int
    has_embeddings: bool


class IndexRunResult(BaseModel):
    """Outcome of one index_to_store run."""

    processed: int = Field(default=0, description="Files (re-)chunked and upserted or removed")
    skipped: int = Field(default=0, description="Unchanged or empty files left untouched")
    failed: int = Field(default=0, description="Files that could not be read or embedded")
    failed_paths: list[str] = Field(default_factory=list)
    removed: int = Field(default=0, description="Previously indexed files that became empty")
    cancelled: bool = Field(default=False, description="Run stopped by request_cancel()")
    force: bool = Field(default=False)
    elapsed_ms: float = Field(default=0.0)


class IndexStatusReport(BaseModel):
    """Classification of every corpus file against the index."""

    indexed: list[str] = Field(default_factory=list)
    missing_embeddings: list[str] = Field(default_factory=list)
    unindexed: list[str] = Field(default_factory=list)
    empty: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.indexed or self.unindexed or self.empty)


class IndexEvent(BaseModel):
    """Notification delivered to VectorStoreManager listeners."""

    name: str = Field(description="index_completed, gc_completed, index_cleared, docs_removed")
    payload: dict[str, Any] = Field(default_factory=dict)
