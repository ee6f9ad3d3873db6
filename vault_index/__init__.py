"""
vault-index: persistent semantic index over a folder of plain-text notes.

Keeps an embedding index in sync with a mutable vault (files added, edited,
renamed and deleted outside the process) and answers hybrid queries that
blend vector similarity with salient-term matching.

Entry point: vault_index.application.VectorStoreManager, usually obtained
from vault_index.dependencies.get_vector_store_manager().
"""

__version__ = "0.1.0"
