"""Vector math utilities for embedding operations."""
import numpy as np


def cosine_similarity(vec1: list[float], vec2: list[float]) -> float:
    """
    Cosine similarity between two vectors.

    Returns:
        Similarity in range [-1, 1], or 0.0 if vectors have different lengths
        or either vector is zero.
    """
    if len(vec1) != len(vec2):
        return 0.0

    a = np.asarray(vec1, dtype=float)
    b = np.asarray(vec2, dtype=float)

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)

    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(a, b) / (norm_a * norm_b))


def cosine_similarities(query: list[float], vectors: list[list[float]]) -> list[float]:
    """Cosine similarity of one query against many vectors of the same length."""
    if not vectors:
        return []
    if any(len(vec) != len(query) for vec in vectors):
        return [cosine_similarity(query, vec) for vec in vectors]

    q = np.asarray(query, dtype=float)
    m = np.asarray(vectors, dtype=float)

    norms = np.linalg.norm(m, axis=1) * np.linalg.norm(q)
    dots = m @ q
    with np.errstate(divide='ignore', invalid='ignore'):
        sims = np.where(norms == 0, 0.0, dots / norms)
    return [float(s) for s in sims]
