"""
Hybrid scoring primitives.

Vector half: cosine similarity mapped to [0, 1] as (cos + 1) / 2. The
mapping is monotonic, so ranking by it equals ranking by raw cosine, and it
is recorded in the persisted index header as "cosine-shift-v1". A zero-norm
vector has cosine 0 against everything (score 0.5).

Lexical half: fraction of distinct salient terms that occur in the chunk as
whole words, case-insensitively.

Dependencies: numpy, re
System role: Pure scoring functions used by the hybrid retriever
"""

import re
from collections.abc import Sequence

import numpy as np


def normalized_cosine_scores(query: Sequence[float], matrix: np.ndarray) -> np.ndarray:
    """
    Score every row of matrix against query.

    Args:
        query: Query vector of dimension d
        matrix: Candidate vectors, shape (n, d)

    Returns:
        np.ndarray: Shape (n,) scores in [0, 1]
    """
    if matrix.size == 0:
        return np.zeros(0, dtype=np.float64)
    q = np.asarray(query, dtype=np.float64)
    row_norms = np.linalg.norm(matrix, axis=1)
    q_norm = np.linalg.norm(q)
    denominators = row_norms * q_norm
    dots = matrix @ q
    cosines = np.divide(dots, denominators, out=np.zeros_like(dots), where=denominators > 0)
    return np.clip((cosines + 1.0) / 2.0, 0.0, 1.0)


def normalized_cosine(query: Sequence[float], vector: Sequence[float]) -> float:
    """Single-vector form of normalized_cosine_scores."""
    matrix = np.asarray([vector], dtype=np.float64)
    return float(normalized_cosine_scores(query, matrix)[0])


def compile_terms(salient_terms: Sequence[str]) -> list[re.Pattern]:
    """
    Build whole-word, case-insensitive matchers for salient terms.

    Blank terms are dropped and duplicates (ignoring case) collapse to one.
    """
    patterns = []
    seen = set()
    for term in salient_terms:
        normalized = term.strip().lower()
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        patterns.append(re.compile(rf"(?<!\w){re.escape(normalized)}(?!\w)", re.IGNORECASE))
    return patterns


def lexical_score(patterns: Sequence[re.Pattern], content: str) -> float:
    """Fraction of patterns found in content; 0.0 when there are no patterns."""
    if not patterns:
        return 0.0
    hits = sum(1 for pattern in patterns if pattern.search(content))
    return hits / len(patterns)


def blend(vector_score: float, lexical: float, text_weight: float) -> float:
    """(1 - text_weight) * vector_score + text_weight * lexical."""
    return (1.0 - text_weight) * vector_score + text_weight * lexical
