"""Scoring helpers for vector search results."""

import math
from typing import Any


def cosine_similarity(vec_a: list[float], vec_b: list[float]) -> float:
    """Compute cosine similarity between two vectors.

    Returns:
        float: Similarity in [-1, 1]; 0.0 for empty, mismatched or zero vectors
    """
    if not vec_a or not vec_b or len(vec_a) != len(vec_b):
        return 0.0

    dot_product = sum(a * b for a, b in zip(vec_a, vec_b))
    norm = math.sqrt(sum(a * a for a in vec_a)) * math.sqrt(sum(b * b for b in vec_b))
    if norm == 0:
        return 0.0
    return dot_product / norm


def result_score(result: dict[str, Any], query_vector: list[float]) -> float:
    """Score a raw RavenDB query result.

    Uses the server's ``@index-score`` when present, otherwise recomputes
    cosine similarity from the stored embedding.
    """
    index_score = result.get("@metadata", {}).get("@index-score")
    if index_score is not None:
        return float(index_score)
    return cosine_similarity(query_vector, result.get("embedding") or [])
