from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Cosine similarity helpers.
"""

from typing import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors; 0.0 when either has zero norm."""
    a_values = np.asarray(a, dtype=np.float64)
    b_values = np.asarray(b, dtype=np.float64)
    if a_values.ndim != 1 or b_values.ndim != 1:
        raise ValueError("Embeddings must be 1D vectors.")
    if a_values.shape[0] != b_values.shape[0]:
        raise ValueError(
            f"Embedding dim mismatch: {a_values.shape[0]} != {b_values.shape[0]}"
        )

    denominator = np.linalg.norm(a_values) * np.linalg.norm(b_values)
    if denominator <= 0.0:
        return 0.0
    return float(np.dot(a_values, b_values) / denominator)


def cosine_scores(query: Sequence[float], vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """Score every row of `vectors` against `query` in one pass."""
    query_values = np.asarray(query, dtype=np.float64)
    if not len(vectors):
        return np.zeros(0, dtype=np.float64)
    matrix = np.asarray(vectors, dtype=np.float64)
    if matrix.ndim != 2 or matrix.shape[1] != query_values.shape[0]:
        raise ValueError("All embeddings must share the query's dimension.")

    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query_values)
    dots = matrix @ query_values
    scores = np.zeros(matrix.shape[0], dtype=np.float64)
    np.divide(dots, norms, out=scores, where=norms > 0.0)
    return scores
