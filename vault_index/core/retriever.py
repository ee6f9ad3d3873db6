"""
Hybrid retrieval over the document store.

Scores every embedded chunk by a weighted blend of vector similarity and
salient-term matching in a single pass, then filters by threshold, ranks
with a deterministic total order and truncates. Because both signals are
applied before filtering and truncation, a strong lexical match is never
lost to a vector-only shortlist.

Dependencies: numpy, vault_index.boundary, vault_index.core.scoring
System role: Read path of the vault index
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np

from vault_index.boundary.embeddings.provider import EmbeddingProvider
from vault_index.boundary.vdb.document_store import DocumentStore
from vault_index.core.exceptions import ConfigurationError
from vault_index.core.scoring import blend, compile_terms, lexical_score, normalized_cosine_scores
from vault_index.models.chunk import DocumentChunk
from vault_index.models.retrieval import RetrievalConfig, ScoredChunk

logger = logging.getLogger(__name__)


def resolve_config(config: RetrievalConfig | Mapping[str, Any]) -> RetrievalConfig:
    """Accept a RetrievalConfig or a plain mapping of its fields."""
    if isinstance(config, RetrievalConfig):
        return config
    return RetrievalConfig.build(**dict(config))


def ranking_key(scored: ScoredChunk) -> tuple:
    """Blended score desc, vector score desc, path asc, chunk id asc."""
    return (-scored.score, -scored.vector_score, scored.chunk.path, scored.chunk.id)


class HybridRetriever:
    """Blends vector and lexical scores over every stored chunk."""

    def __init__(self, store: DocumentStore, embedding_provider: EmbeddingProvider) -> None:
        """
        Initialize retriever.

        Args:
            store: Document store to scan
            embedding_provider: Provider used once per query for the query vector
        """
        self._store = store
        self._embedding_provider = embedding_provider

    async def retrieve(
        self,
        query: str,
        salient_terms: Sequence[str],
        config: RetrievalConfig | Mapping[str, Any],
    ) -> list[DocumentChunk]:
        """
        Retrieve ranked chunks for a free-text query.

        Args:
            query: Query text (embedded once)
            salient_terms: Keywords for the lexical half of the score
            config: min_similarity_score, max_k, text_weight

        Returns:
            list[DocumentChunk]: At most max_k chunks, best first

        Raises:
            EmbeddingError: When the query cannot be embedded
            ConfigurationError: When config is invalid or dimensions differ
        """
        scored = await self.retrieve_scored(query, salient_terms, config)
        return [s.chunk for s in scored]

    async def retrieve_scored(
        self,
        query: str,
        salient_terms: Sequence[str],
        config: RetrievalConfig | Mapping[str, Any],
    ) -> list[ScoredChunk]:
        """Same as retrieve() but keeps the per-chunk score breakdown."""
        resolved = resolve_config(config)
        query_vector = await self._embedding_provider.embed_query(query)
        return self.rank(query_vector, salient_terms, resolved)

    def rank(
        self,
        query_vector: Sequence[float],
        salient_terms: Sequence[str],
        config: RetrievalConfig | Mapping[str, Any],
        exclude_paths: Sequence[str] = (),
    ) -> list[ScoredChunk]:
        """
        Score, filter, rank and truncate stored chunks against a query vector.

        Args:
            query_vector: Precomputed query embedding
            salient_terms: Keywords for lexical scoring (may be empty)
            config: Retrieval parameters
            exclude_paths: Source paths whose chunks are not candidates

        Returns:
            list[ScoredChunk]: At most max_k results in deterministic order
        """
        resolved = resolve_config(config)
        excluded = set(exclude_paths)
        candidates = [
            chunk
            for chunk in self._store.all_chunks()
            if chunk.has_embedding and chunk.path not in excluded
        ]
        if not candidates:
            return []

        dimension = len(candidates[0].embedding)
        if len(query_vector) != dimension:
            raise ConfigurationError(
                f"Query vector dimension {len(query_vector)} does not match index dimension {dimension}",
                field="embedding_dimension",
            )

        matrix = np.asarray([chunk.embedding for chunk in candidates], dtype=np.float64)
        vector_scores = normalized_cosine_scores(query_vector, matrix)
        patterns = compile_terms(salient_terms)

        results = []
        for chunk, vector_score in zip(candidates, vector_scores):
            vector_score = float(vector_score)
            lexical = lexical_score(patterns, chunk.content)
            score = blend(vector_score, lexical, resolved.text_weight)
            if score < resolved.min_similarity_score:
                continue
            results.append(
                ScoredChunk(
                    chunk=chunk,
                    vector_score=vector_score,
                    lexical_score=lexical,
                    score=score,
                )
            )

        results.sort(key=ranking_key)
        logger.info(
            f"{__name__}:rank - {len(results)} of {len(candidates)} candidates passed "
            f"threshold {resolved.min_similarity_score}, returning up to {resolved.max_k}",
            extra={"salient_terms": len(patterns), "text_weight": resolved.text_weight},
        )
        return results[: resolved.max_k]
