"""
Single-linkage agglomerative clustering with a similarity threshold cut.

Two groups merge when their closest pair of members is at least
``threshold`` similar. Passes sweep all pairs of live groups in ascending
index order and repeat until a pass merges nothing. The sweep order makes
the result reproducible; it is not a "most similar pair first" ordering.

Cost is quadratic in the number of live groups per pass, which is fine for
a browsing session (tens to a few hundred tabs) and not meant for large
corpora.
"""

import numpy as np

from tab_topics.config import get_logger

logger = get_logger(__name__)


def max_link(similarities: np.ndarray, group_a: list[int], group_b: list[int]) -> float:
    """Highest similarity between any member of ``group_a`` and any member of ``group_b``."""
    if not group_a or not group_b:
        return 0.0
    return float(similarities[np.ix_(group_a, group_b)].max())


def single_linkage(similarities: np.ndarray, threshold: float) -> list[list[int]]:
    """
    Cluster documents from their pairwise similarities.

    Args:
        similarities: Symmetric (n, n) similarity matrix
        threshold: Minimum max-link similarity for two groups to merge

    Returns:
        Groups of document indices, each sorted ascending, ordered by
        their smallest member

    Raises:
        ValueError: If the matrix is not square
    """
    similarities = np.asarray(similarities, dtype=np.float64)
    if similarities.ndim != 2 or similarities.shape[0] != similarities.shape[1]:
        raise ValueError(
            f"Similarity matrix must be square, got shape {similarities.shape}"
        )

    n = similarities.shape[0]
    groups: list[list[int]] = [[i] for i in range(n)]

    passes = 0
    merged = True
    while merged:
        merged = False
        passes += 1

        for i in range(n):
            if not groups[i]:
                continue

            for j in range(i + 1, n):
                if not groups[j]:
                    continue

                if max_link(similarities, groups[i], groups[j]) >= threshold:
                    groups[i].extend(groups[j])
                    groups[j] = []
                    merged = True

    result = [sorted(group) for group in groups if group]
    logger.debug(
        f"Single-linkage at {threshold}: {n} documents -> {len(result)} groups "
        f"in {passes} passes"
    )
    return result
