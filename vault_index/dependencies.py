"""
Dependency injection container.

Factory functions that wire the vault index from settings. The manager is
cached so every caller in one process shares a single instance.

Dependencies: vault_index.configs, vault_index.application, vault_index.boundary
System role: Composition root
"""

from functools import lru_cache

from vault_index.application.vector_store_manager import VectorStoreManager
from vault_index.boundary.corpus.filesystem_corpus import FileSystemCorpus
from vault_index.boundary.embeddings import EmbeddingProvider, get_fixed_dimension_embeddings
from vault_index.boundary.vdb.document_store import DocumentStore
from vault_index.configs import Settings, get_settings
from vault_index.core.document_processing.chunking_task import ChunkingTask
from vault_index.observability.logger import configure_logging


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_document_store(settings: Settings) -> DocumentStore:
    """
    Build the document store for the configured index file.

    Args:
        settings: Application settings

    Returns:
        DocumentStore: Unloaded store (loaded lazily by the manager)
    """
    return DocumentStore(
        index_path=settings.index.index_path,
        embedding_dimension=settings.index.embedding_dimension,
        embedding_model=settings.index.embedding_model,
    )


def get_embedding_provider(settings: Settings) -> EmbeddingProvider:
    """
    Build the embedding provider backed by Gemini embeddings.

    Args:
        settings: Application settings

    Returns:
        EmbeddingProvider: Provider pinned to the configured dimension
    """
    embeddings_cls = get_fixed_dimension_embeddings()
    embeddings = embeddings_cls(
        model=settings.index.embedding_model,
        output_dimensionality=settings.index.embedding_dimension,
    )
    return EmbeddingProvider(embeddings, dimension=settings.index.embedding_dimension)


@lru_cache
def get_vector_store_manager() -> VectorStoreManager:
    """
    Get the vector store manager for the configured vault.

    Returns:
        VectorStoreManager: Shared manager instance
    """
    settings = get_settings_dependency()
    configure_logging(settings.log_level)
    return VectorStoreManager(
        store=get_document_store(settings),
        corpus=FileSystemCorpus(settings.index.vault_path, settings.index.file_extensions),
        chunker=ChunkingTask(
            chunk_size=settings.index.chunk_size,
            chunk_overlap=settings.index.chunk_overlap,
        ),
        embedding_provider=get_embedding_provider(settings),
        default_config=settings.retrieval.to_config(),
    )
