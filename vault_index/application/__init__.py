"""
Application layer.

- VectorStoreManager: facade over store, sync engine and retriever
- inspect_index / render_status_markdown: index status report
"""

from vault_index.application.index_inspection import inspect_index, render_status_markdown
from vault_index.application.vector_store_manager import VectorStoreManager

__all__ = ["VectorStoreManager", "inspect_index", "render_status_markdown"]
