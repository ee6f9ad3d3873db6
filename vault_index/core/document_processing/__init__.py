"""
Document processing for the index.

Exports: ChunkingTask, ChunkDraft
"""

from vault_index.core.document_processing.chunking_task import ChunkDraft, ChunkingTask

__all__ = ["ChunkDraft", "ChunkingTask"]
