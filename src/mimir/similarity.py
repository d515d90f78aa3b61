"""Vector math used by every similarity decision in the cache.

Malformed input (length mismatch, empty vectors, zero magnitude) never
raises: cosine similarity falls back to a neutral ``0.0`` and euclidean
distance to ``inf``, so a bad embedding is simply a non-match.
"""

import math
from collections.abc import Sequence

import numpy as np


def _as_array(v: Sequence[float]) -> np.ndarray:
    return np.asarray(v, dtype=np.float64)


class PreparedVector:
    """A float64 vector with its magnitude computed once.

    Repeated comparisons against the same vector (a stored embedding, or
    the query during a scan) reuse the array and norm.
    """

    __slots__ = ("array", "norm")

    def __init__(self, v: Sequence[float]) -> None:
        self.array = _as_array(v).ravel()
        self.norm = float(np.linalg.norm(self.array))

    def __len__(self) -> int:
        return self.array.shape[0]

    def cosine(self, other: "PreparedVector") -> float:
        """Cosine similarity with the same fallbacks as ``cosine_similarity``."""
        if len(self) != len(other) or len(self) == 0:
            return 0.0
        if self.norm == 0 or other.norm == 0:
            return 0.0

        result = float(np.dot(self.array, other.array)) / (self.norm * other.norm)
        if not math.isfinite(result):
            return 0.0
        return result


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Calculate the cosine similarity between two vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        A value between -1 and 1, where 1 means same direction. Returns
        0.0 when the vectors differ in length, are empty, or either has
        zero magnitude.
    """
    if len(a) != len(b) or len(a) == 0:
        return 0.0
    return PreparedVector(a).cosine(PreparedVector(b))


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Calculate the L2 distance between two vectors.

    Returns:
        The distance, or ``math.inf`` on length mismatch or empty input.
    """
    if len(a) != len(b) or len(a) == 0:
        return math.inf

    return float(np.linalg.norm(_as_array(a) - _as_array(b)))


def normalize(v: Sequence[float]) -> list[float]:
    """Scale a vector to unit length.

    A zero-magnitude vector is returned unchanged.
    """
    arr = _as_array(v)
    norm = float(np.linalg.norm(arr))
    if norm == 0:
        return list(v)
    return (arr / norm).tolist()
