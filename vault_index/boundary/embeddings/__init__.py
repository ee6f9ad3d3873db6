"""
Embedding boundary layer.

- EmbeddingProvider: async adapter over LangChain Embeddings
- FixedDimensionEmbeddings: default Gemini model (imported lazily, since it
  pulls in the Google client)
"""

from vault_index.boundary.embeddings.provider import EmbeddingProvider


def get_fixed_dimension_embeddings():
    """Lazy import for FixedDimensionEmbeddings to avoid loading the Google client."""
    from vault_index.boundary.embeddings.embeddings_wrapper import FixedDimensionEmbeddings
    return FixedDimensionEmbeddings


__all__ = ["EmbeddingProvider", "get_fixed_dimension_embeddings"]
