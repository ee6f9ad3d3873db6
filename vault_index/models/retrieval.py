"""
Retrieval models.

Validated retrieval parameters and ranked result structures.

Dependencies: pydantic
System role: Type definitions for hybrid retrieval
"""

from pydantic import BaseModel, Field, ValidationError

from vault_index.core.exceptions import ConfigurationError
from vault_index.models.chunk import DocumentChunk


class RetrievalConfig(BaseModel):
    """Hybrid retrieval parameters. All fields are required."""

    min_similarity_score: float = Field(
        description="Candidates with a blended score below this are dropped",
        ge=0.0,
        le=1.0,
    )
    max_k: int = Field(description="Maximum number of results", gt=0)
    text_weight: float = Field(
        description="Lexical weight; vector weight is 1 - text_weight",
        ge=0.0,
        le=1.0,
    )

    @property
    def vector_weight(self) -> float:
        """Weight applied to the vector score."""
        return 1.0 - self.text_weight

    @classmethod
    def build(cls, **values: object) -> "RetrievalConfig":
        """
        Validate values into a config.

        Raises:
            ConfigurationError: When any value is missing or out of range
        """
        try:
            return cls(**values)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ()))
            raise ConfigurationError(
                f"Invalid retrieval configuration: {first.get('msg')}",
                field=field or None,
                details={"errors": len(e.errors())},
            ) from e


class ScoredChunk(BaseModel):
    """Chunk with its hybrid scoring breakdown."""

    chunk: DocumentChunk
    vector_score: float = Field(description="Normalized cosine similarity (0.0-1.0)")
    lexical_score: float = Field(description="Fraction of salient terms matched (0.0-1.0)")
    score: float = Field(description="Blended score used for filtering and ranking")

    @property
    def path(self) -> str:
        return self.chunk.path


class RelevantNote(BaseModel):
    """A note similar to a source note, represented by its best chunk."""

    path: str
    score: float
    vector_score: float
    chunk: DocumentChunk
