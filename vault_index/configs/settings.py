"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the vault index
"""

from functools import lru_cache

from pydantic import Field

from vault_index.configs.base import BaseSettings
from vault_index.configs.index import IndexSettings
from vault_index.configs.retrieval import RetrievalSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings, read from the environment when Settings is built
    index: IndexSettings = Field(default_factory=IndexSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from vault_index.configs import get_settings
        settings = get_settings()
    """
    return Settings()
