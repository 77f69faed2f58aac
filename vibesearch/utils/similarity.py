"""
Similarity utilities: cosine similarity for vibe matching.

cosine_from_norms() is the single kernel; VectorIndex calls it with norms
precomputed at insert time, cosine_similarity() computes them on the fly.
"""

from typing import Sequence

import numpy as np


def vector_norm(v: np.ndarray) -> float:
    return float(np.linalg.norm(v))


def cosine_from_norms(a: np.ndarray, a_norm: float, b: np.ndarray, b_norm: float) -> float:
    """
    Cosine similarity in [-1, 1] from float64 arrays and their norms.

    Empty, zero-norm, non-finite or length-mismatched inputs score 0.0.
    """
    if a.shape != b.shape or a.size == 0:
        return 0.0
    norm_product = a_norm * b_norm
    if norm_product == 0 or not np.isfinite(norm_product):
        return 0.0
    sim = float(np.dot(a, b) / norm_product)
    if not np.isfinite(sim):
        return 0.0
    # Float error can push |a·a| / |a|² a hair past 1
    return max(-1.0, min(1.0, sim))


def cosine_similarity(v1: Sequence[float], v2: Sequence[float]) -> float:
    """Cosine similarity of two plain vectors; see cosine_from_norms()."""
    if v1 is None or v2 is None:
        return 0.0
    a = np.asarray(v1, dtype=np.float64).ravel()
    b = np.asarray(v2, dtype=np.float64).ravel()
    return cosine_from_norms(a, vector_norm(a), b, vector_norm(b))
