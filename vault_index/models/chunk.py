"""
Chunk domain model.

Represents an indexed slice of a vault file with deterministic ID,
content hashes and embedding.

Dependencies: pydantic, hashlib
System role: Document chunk data structure
"""

import hashlib

from pydantic import BaseModel, Field

MetadataValue = str | int | float | bool | None


def content_hash(text: str) -> str:
    """Return the sha256 hex digest of text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def make_chunk_id(path: str, start_index: int) -> str:
    """
    Generate deterministic chunk ID from file path and chunk offset.

    Args:
        path: Vault-relative file path
        start_index: Character offset of the chunk in the file

    Returns:
        str: SHA-256 hash prefix (16 chars)
    """
    hash_input = f"{path}:{start_index}"
    return hashlib.sha256(hash_input.encode("utf-8")).hexdigest()[:16]


class DocumentChunk(BaseModel):
    """Indexed chunk of a vault file."""

    id: str = Field(description="Deterministic chunk identifier (path + offset hash)")
    path: str = Field(description="Vault-relative source file path")
    content: str = Field(description="Chunk text content")
    embedding: list[float] = Field(
        default_factory=list,
        description="Embedding vector (empty when embedding failed)",
    )
    content_hash: str = Field(description="SHA-256 of the chunk content")
    file_hash: str = Field(description="SHA-256 of the whole source file at index time")
    mtime: float = Field(description="Source file modification time at index time")
    metadata: dict[str, MetadataValue] = Field(
        default_factory=dict,
        description="Caller metadata (title, chunk_index, ...), never used for scoring",
    )

    @property
    def has_embedding(self) -> bool:
        """Whether the chunk carries a non-empty vector."""
        return len(self.embedding) > 0
