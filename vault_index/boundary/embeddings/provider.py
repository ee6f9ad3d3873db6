"""
Embedding provider adapter.

Async facade over any LangChain Embeddings implementation. Every provider
failure (rate limit, auth, network) becomes an EmbeddingError; a vector of
the wrong dimension is a ConfigurationError because it can never succeed on
retry.

Dependencies: langchain_core
System role: The only path through which the index requests embeddings
"""

import logging

from langchain_core.embeddings import Embeddings

from vault_index.core.exceptions import ConfigurationError, EmbeddingError

logger = logging.getLogger(__name__)


class EmbeddingProvider:
    """Embeds chunk and query text with a fixed vector dimension."""

    def __init__(self, embeddings: Embeddings, dimension: int | None = None) -> None:
        """
        Initialize provider.

        Args:
            embeddings: LangChain embeddings model
            dimension: Required vector dimension (adopted from the first
                response when None)
        """
        self._embeddings = embeddings
        self._dimension = dimension

    @property
    def dimension(self) -> int | None:
        return self._dimension

    async def embed_query(self, text: str) -> list[float]:
        """
        Embed a query string.

        Raises:
            EmbeddingError: When the provider call fails
            ConfigurationError: When the vector has the wrong dimension
        """
        try:
            vector = await self._embeddings.aembed_query(text)
        except Exception as e:
            logger.error(f"{__name__}:embed_query - FAILED: {type(e).__name__}: {e}")
            raise EmbeddingError(f"Failed to embed query: {e}") from e
        return self._check_dimension(list(vector))

    async def embed_documents(self, texts: list[str], path: str | None = None) -> list[list[float]]:
        """
        Embed the chunk texts of one file in a single provider call.

        Args:
            texts: Chunk texts
            path: Source file path, for error context

        Returns:
            list[list[float]]: One vector per text, in order

        Raises:
            EmbeddingError: When the provider call fails or returns the wrong count
            ConfigurationError: When a vector has the wrong dimension
        """
        if not texts:
            return []
        try:
            vectors = await self._embeddings.aembed_documents(texts)
        except Exception as e:
            logger.warning(f"{__name__}:embed_documents - FAILED for {path}: {type(e).__name__}: {e}")
            raise EmbeddingError(f"Failed to generate embeddings: {e}", path=path) from e

        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Provider returned {len(vectors)} vectors for {len(texts)} texts",
                path=path,
            )
        return [self._check_dimension(list(vector)) for vector in vectors]

    def _check_dimension(self, vector: list[float]) -> list[float]:
        if self._dimension is None:
            self._dimension = len(vector)
        elif len(vector) != self._dimension:
            raise ConfigurationError(
                f"Embedding dimension {len(vector)} does not match configured dimension {self._dimension}",
                field="embedding_dimension",
            )
        return vector
