"""
Index configuration settings.

Manages vault location, index file location, chunking and embedding
model parameters for the index sync engine.

Dependencies: pydantic, pydantic_settings
System role: Indexing configuration for the vault index
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from vault_index.configs.base import BaseSettings


class IndexSettings(BaseSettings):
    """Vault and embedding index configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VAULT_INDEX_",
        case_sensitive=False,
        extra="ignore",
    )

    vault_path: str = Field(default=".", description="Root directory of the vault to index")
    index_path: str = Field(
        default="./.vault_index/index.json",
        description="JSON file holding the persisted index",
    )
    file_extensions: list[str] = Field(
        default=[".md"],
        description="File extensions included in the live corpus",
    )

    # Chunking settings
    chunk_size: int = Field(default=1000, description="Maximum chunk size in characters", gt=0)
    chunk_overlap: int = Field(
        default=200,
        description="Overlap between consecutive chunks",
        ge=0,
    )

    # Embedding settings
    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Google Gemini embedding model ID",
    )
    embedding_dimension: int = Field(
        default=1024,
        description="Embedding vector dimension, fixed for the lifetime of an index",
        gt=0,
    )
