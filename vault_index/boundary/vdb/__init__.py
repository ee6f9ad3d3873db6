"""
Index storage boundary layer.

- DocumentStore: path-keyed chunk store persisted as one JSON file
- PersistedIndex: versioned on-disk layout

Dependencies: pydantic
System role: Durable storage for the vault index
"""

from vault_index.boundary.vdb.document_store import DocumentStore
from vault_index.boundary.vdb.store_schemas import (
    SCHEMA_VERSION,
    SCORE_NORMALIZATION,
    PersistedIndex,
)

__all__ = [
    "DocumentStore",
    "PersistedIndex",
    "SCHEMA_VERSION",
    "SCORE_NORMALIZATION",
]
