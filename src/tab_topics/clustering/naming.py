"""
Deterministic cluster naming from aggregated term weights.
"""

from collections import defaultdict
from typing import Sequence

from tab_topics.clustering.models import FALLBACK_NAME
from tab_topics.clustering.weighting import TermWeightModel


def capitalize(term: str) -> str:
    """Uppercase the first character only ("javaScript" stays camel-cased after it)."""
    if not term:
        return ""
    return term[0].upper() + term[1:]


class ClusterNamer:
    """
    Names clusters after their strongest shared term.

    Each member contributes its ``top_n`` heaviest terms; the term with the
    highest summed weight names the cluster. Names handed out by one namer
    are unique: repeats get " (2)", " (3)", ... in the order they are
    requested.

    Attributes:
        model: Weighted corpus the clusters come from
        ids: Document id for each cluster index
        top_n: Terms taken from each member
        fallback: Label for clusters without any terms
    """

    def __init__(
        self,
        model: TermWeightModel,
        ids: Sequence[str],
        top_n: int = 5,
        fallback: str = FALLBACK_NAME,
    ):
        self.model = model
        self.ids = list(ids)
        self.top_n = top_n
        self.fallback = fallback
        self._taken: set[str] = set()

    def term_scores(self, indices: Sequence[int]) -> dict[str, float]:
        """Summed top-term weights across the cluster's members."""
        scores: dict[str, float] = defaultdict(float)
        for idx in indices:
            for term, weight in self.model.top_terms(self.ids[idx], self.top_n):
                scores[term] += weight
        return dict(scores)

    def label(self, indices: Sequence[int]) -> str:
        """
        Pick the display label for a cluster, without collision handling.

        Args:
            indices: Member document indices

        Returns:
            Capitalized best term (ties alphabetical), or the fallback label
        """
        scores = self.term_scores(indices)
        if not scores:
            return self.fallback

        best_term = min(scores, key=lambda term: (-scores[term], term))
        return capitalize(best_term)

    def reserve(self, name: str) -> None:
        """Mark a name as used so no cluster receives it."""
        self._taken.add(name)

    def name(self, indices: Sequence[int]) -> str:
        """
        Pick a unique display name for a cluster.

        Args:
            indices: Member document indices

        Returns:
            Label, suffixed with " (n)" if already handed out or reserved
        """
        base = self.label(indices)
        name = base
        counter = 2
        while name in self._taken:
            name = f"{base} ({counter})"
            counter += 1

        self._taken.add(name)
        return name
