"""
Unsupervised topical clustering of browser tabs.

This package provides:
- Tab text normalization (clean_title)
- BM25 term weighting and search over a tab corpus (TermWeightModel)
- Single-linkage threshold clustering (single_linkage)
- Deterministic cluster naming and output assembly (TabClusterer, cluster_tabs)
"""

from tab_topics.clustering.models import (
    Tab,
    ClusteringOptions,
    ClusteringResult,
)
from tab_topics.clustering.normalizer import clean_title
from tab_topics.clustering.weighting import TermWeightModel
from tab_topics.clustering.similarity import build_similarity_matrix
from tab_topics.clustering.hierarchical import single_linkage
from tab_topics.clustering.naming import ClusterNamer
from tab_topics.clustering.tab_clusterer import TabClusterer, cluster_tabs

__all__ = [
    "Tab",
    "ClusteringOptions",
    "ClusteringResult",
    "clean_title",
    "TermWeightModel",
    "build_similarity_matrix",
    "single_linkage",
    "ClusterNamer",
    "TabClusterer",
    "cluster_tabs",
]
