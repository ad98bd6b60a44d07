"""
Pairwise similarity matrix over a weighted corpus.
"""

from typing import Optional, Sequence

import numpy as np

from tab_topics.clustering.weighting import TermWeightModel


def build_similarity_matrix(
    model: TermWeightModel, ids: Optional[Sequence[str]] = None
) -> np.ndarray:
    """
    Compute cosine similarities between all pairs of documents.

    Off-diagonal entries are exactly ``model.similarity`` for the pair, so
    threshold comparisons made on the matrix match the model. The model's
    vectors are cached, so they are built once however many pairs are
    compared.

    Args:
        model: Weighted corpus
        ids: Document ids giving the row/column order (defaults to ``model.ids()``).
            Unknown ids get zero similarity to everything else.

    Returns:
        Symmetric (n, n) array with ones on the diagonal and entries in [0, 1]
    """
    if ids is None:
        ids = model.ids()

    n = len(ids)
    similarities = np.zeros((n, n), dtype=np.float64)
    for i in range(n):
        for j in range(i + 1, n):
            sim = model.similarity(ids[i], ids[j])
            similarities[i, j] = sim
            similarities[j, i] = sim

    np.fill_diagonal(similarities, 1.0)
    return similarities
