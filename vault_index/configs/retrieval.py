"""
Retrieval configuration settings.

Default hybrid ranking parameters used when a caller does not pass an
explicit RetrievalConfig.

Dependencies: pydantic, pydantic_settings
System role: Hybrid retrieval configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from vault_index.configs.base import BaseSettings
from vault_index.models.retrieval import RetrievalConfig


class RetrievalSettings(BaseSettings):
    """Hybrid retrieval defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    min_similarity_score: float = Field(
        default=0.4,
        description="Minimum blended score for a candidate to be returned (0.0-1.0)",
    )
    max_k: int = Field(default=10, description="Maximum number of results to return")
    text_weight: float = Field(
        default=0.3,
        description="Weight of the lexical score; vector weight is 1 - text_weight",
    )

    def to_config(self) -> RetrievalConfig:
        """
        Build a validated retrieval config from these settings.

        Returns:
            RetrievalConfig: Config object accepted by HybridRetriever

        Raises:
            ConfigurationError: When a setting is out of range
        """
        return RetrievalConfig.build(
            min_similarity_score=self.min_similarity_score,
            max_k=self.max_k,
            text_weight=self.text_weight,
        )
