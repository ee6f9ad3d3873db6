"""
Persisted index schemas.

Pydantic models describing the on-disk JSON layout of the index. The header
fields version the embedding dimension and score normalization so a later
configuration change is detected on load instead of silently mis-scoring.

Dependencies: pydantic
System role: Type definitions for index persistence
"""

from pydantic import BaseModel, Field

from vault_index.models.chunk import DocumentChunk

SCHEMA_VERSION = 1

# (cos + 1) / 2, clipped to [0, 1]; see vault_index.core.scoring
SCORE_NORMALIZATION = "cosine-shift-v1"


class PersistedIndex(BaseModel):
    """Whole-index snapshot written by DocumentStore.save()."""

    schema_version: int = Field(default=SCHEMA_VERSION, description="On-disk format version")
    embedding_model: str | None = Field(default=None, description="Model that produced the vectors")
    embedding_dimension: int | None = Field(
        default=None,
        description="Vector dimension shared by every embedded chunk",
    )
    score_normalization: str = Field(
        default=SCORE_NORMALIZATION,
        description="Cosine-to-[0,1] normalization the vectors were scored with",
    )
    saved_at: str | None = Field(default=None, description="ISO timestamp of the last save")
    chunks: list[DocumentChunk] = Field(default_factory=list)
