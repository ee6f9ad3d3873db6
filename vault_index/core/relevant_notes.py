"""
Find notes similar to a given note.

Uses the centroid of the source note's stored chunk embeddings as the query
vector, runs the hybrid ranking with no salient terms and the source note
excluded, and keeps the best chunk per note.

Dependencies: numpy, vault_index.core.retriever
System role: "Find relevant notes to active note" operation
"""

import logging
from collections.abc import Mapping
from typing import Any

import numpy as np

from vault_index.boundary.vdb.document_store import DocumentStore
from vault_index.core.retriever import HybridRetriever, resolve_config
from vault_index.models.retrieval import RelevantNote, RetrievalConfig

logger = logging.getLogger(__name__)


async def find_relevant_notes(
    store: DocumentStore,
    retriever: HybridRetriever,
    path: str,
    config: RetrievalConfig | Mapping[str, Any],
) -> list[RelevantNote]:
    """
    Rank other notes by similarity to the note at path.

    Args:
        store: Document store holding the source note's embeddings
        retriever: Hybrid retriever used for ranking
        path: Source note path
        config: Retrieval parameters; max_k caps the number of notes

    Returns:
        list[RelevantNote]: One entry per note, best first. Empty when the
        source note is not indexed or has no embeddings.
    """
    resolved = resolve_config(config)
    source_vectors = [chunk.embedding for chunk in await store.get(path) if chunk.has_embedding]
    if not source_vectors:
        logger.info(f"{__name__}:find_relevant_notes - No embeddings stored for {path}")
        return []

    centroid = np.mean(np.asarray(source_vectors, dtype=np.float64), axis=0).tolist()

    # rank every chunk, then collapse to notes before applying max_k
    uncapped = resolved.model_copy(update={"max_k": max(store.chunk_count, 1)})
    ranked = retriever.rank(centroid, [], uncapped, exclude_paths=[path])

    notes: list[RelevantNote] = []
    seen_paths = set()
    for scored in ranked:
        if scored.chunk.path in seen_paths:
            continue
        seen_paths.add(scored.chunk.path)
        notes.append(
            RelevantNote(
                path=scored.chunk.path,
                score=scored.score,
                vector_score=scored.vector_score,
                chunk=scored.chunk,
            )
        )
        if len(notes) == resolved.max_k:
            break
    return notes
