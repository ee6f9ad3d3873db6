"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from vault_index.configs.index import IndexSettings
from vault_index.configs.retrieval import RetrievalSettings
from vault_index.configs.settings import Settings, get_settings

__all__ = ["IndexSettings", "RetrievalSettings", "Settings", "get_settings"]
