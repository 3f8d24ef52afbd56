"""Cosine similarity between face embeddings."""
from __future__ import annotations

import numpy as np

from facenet_lite.core.exceptions import DimensionMismatch


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Compute the cosine similarity of two embedding vectors.

    The result is the raw value dot(a, b) / (|a| * |b|) and is not clamped
    to [-1, 1]. A zero-magnitude input gives NaN or +/-Inf instead of an
    error; callers comparing degenerate embeddings must check the result
    with ``math.isfinite``.

    Args:
        a: First embedding, any shape (flattened).
        b: Second embedding, any shape (flattened).

    Returns:
        Cosine similarity as a Python float.

    Raises:
        DimensionMismatch: If the flattened vectors differ in length.
    """
    a = np.asarray(a, dtype=np.float32).reshape(-1)
    b = np.asarray(b, dtype=np.float32).reshape(-1)
    if a.size != b.size:
        raise DimensionMismatch(
            f"Cannot compare embeddings of length {a.size} and {b.size}"
        )

    dot = np.dot(a, b)
    mag_a = np.sqrt(np.dot(a, a))
    mag_b = np.sqrt(np.dot(b, b))

    with np.errstate(divide="ignore", invalid="ignore"):
        return float(dot / (mag_a * mag_b))
