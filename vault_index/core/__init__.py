"""
Core business logic module.

Contains the exception hierarchy, the index sync engine and the hybrid
retriever. All indexing and ranking rules reside here.

Engine classes are imported from their modules directly
(vault_index.core.index_sync, vault_index.core.retriever) so that the
boundary layer can depend on the exceptions without import cycles.
"""

from vault_index.core.exceptions import (
    VaultIndexException,
    StorageError,
    EmbeddingError,
    ConcurrencyError,
    ConfigurationError,
)

__all__ = [
    "VaultIndexException",
    "StorageError",
    "EmbeddingError",
    "ConcurrencyError",
    "ConfigurationError",
]
