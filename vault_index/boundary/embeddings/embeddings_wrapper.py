"""
Google Generative AI Embeddings wrapper with fixed output dimensionality.

Wraps GoogleGenerativeAIEmbeddings so every embed call, sync or async,
produces vectors of the configured dimension. An index keeps one dimension
for its whole lifetime, so a drifting dimension would make it unusable.

Dependencies: langchain_google_genai, python-dotenv
System role: Default embedding model for the vault index
"""

import logging
from typing import List

from dotenv import load_dotenv
from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)
load_dotenv()


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """
    Gemini embeddings pinned to one output dimensionality.

    The base class ignores output_dimensionality in the constructor, so the
    value is injected into each call instead (callers may still override it).
    """

    _output_dimensionality: int = 1024

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        output_dimensionality: int = 1024,
        **kwargs,
    ) -> None:
        """
        Args:
            model: Gemini embedding model ID (gemini-embedding-001 allows up to 3072 dims)
            output_dimensionality: Dimension of every returned vector
            **kwargs: Passed through to GoogleGenerativeAIEmbeddings (api key, ...)
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - Gemini embeddings ready",
            extra={"model": model, "dimension": output_dimensionality},
        )

    def _dimension(self, requested: int | None) -> int:
        return requested or self._output_dimensionality

    def embed_documents(
        self,
        texts: List[str],
        *,
        batch_size: int = 100,
        task_type: str | None = None,
        titles: List[str] | None = None,
        output_dimensionality: int | None = None,
    ) -> List[List[float]]:
        return super().embed_documents(
            texts,
            batch_size=batch_size,
            task_type=task_type,
            titles=titles,
            output_dimensionality=self._dimension(output_dimensionality),
        )

    def embed_query(
        self,
        text: str,
        task_type: str | None = None,
        title: str | None = None,
        output_dimensionality: int | None = None,
    ) -> List[float]:
        return super().embed_query(
            text,
            task_type=task_type,
            title=title,
            output_dimensionality=self._dimension(output_dimensionality),
        )

    async def aembed_documents(
        self,
        texts: List[str],
        *,
        batch_size: int = 100,
        task_type: str | None = None,
        titles: List[str] | None = None,
        output_dimensionality: int | None = None,
    ) -> List[List[float]]:
        """Used by EmbeddingProvider.embed_documents (one call per vault file)."""
        return await super().aembed_documents(
            texts,
            batch_size=batch_size,
            task_type=task_type,
            titles=titles,
            output_dimensionality=self._dimension(output_dimensionality),
        )

    async def aembed_query(
        self,
        text: str,
        task_type: str | None = None,
        title: str | None = None,
        output_dimensionality: int | None = None,
    ) -> List[float]:
        """Used by EmbeddingProvider.embed_query (one call per search)."""
        return await super().aembed_query(
            text,
            task_type=task_type,
            title=title,
            output_dimensionality=self._dimension(output_dimensionality),
        )
