"""
Tab clustering pipeline.

This module ties the engine together: tabs are normalized into documents,
weighted against each other with BM25, compared pairwise, merged with
single-linkage clustering and finally named and assembled into an ordered
partition of the input.
"""

from typing import Iterable, Mapping, Optional, Sequence, Union

from tab_topics.config import Settings, get_logger
from tab_topics.clustering.hierarchical import single_linkage
from tab_topics.clustering.models import (
    CATCH_ALL_NAME,
    FALLBACK_NAME,
    ClusteringOptions,
    ClusteringResult,
    Tab,
)
from tab_topics.clustering.naming import ClusterNamer
from tab_topics.clustering.normalizer import clean_title
from tab_topics.clustering.similarity import build_similarity_matrix
from tab_topics.clustering.weighting import DOMAIN_STOP_WORDS, TermWeightModel

logger = get_logger(__name__)

TabLike = Union[Tab, Mapping]


def assemble_groups(
    clusters: Sequence[Sequence[int]],
    tabs: Sequence[TabLike],
    namer: ClusterNamer,
    min_cluster_size: int = 2,
    catch_all: str = CATCH_ALL_NAME,
) -> dict[str, list[TabLike]]:
    """
    Turn index clusters into the ordered, named output mapping.

    Clusters below ``min_cluster_size`` are pooled into the catch-all
    bucket, which comes last. Named clusters are ordered by size, largest
    first, keeping clustering order between equal sizes. Names are handed
    out in clustering order so collision suffixes do not depend on sizes.

    Args:
        clusters: Disjoint index groups covering every tab
        tabs: Caller records the indices refer to; emitted as-is
        namer: Namer bound to the same corpus
        min_cluster_size: Smallest group that gets its own name
        catch_all: Name of the bucket for undersized groups

    Returns:
        Ordered mapping of unique name -> tabs

    Raises:
        RuntimeError: If the clusters are not a partition of ``tabs``
    """
    qualifying = [list(c) for c in clusters if len(c) >= min_cluster_size]
    leftovers = sorted(idx for c in clusters if len(c) < min_cluster_size for idx in c)

    if leftovers:
        namer.reserve(catch_all)

    named = [(namer.name(indices), indices) for indices in qualifying]
    named.sort(key=lambda item: -len(item[1]))

    emitted = [idx for _, indices in named for idx in indices] + leftovers
    if sorted(emitted) != list(range(len(tabs))):
        raise RuntimeError(
            f"Clusters do not partition the input: {len(emitted)} placements for {len(tabs)} tabs"
        )

    groups: dict[str, list[TabLike]] = {
        name: [tabs[idx] for idx in indices] for name, indices in named
    }
    if leftovers:
        groups[catch_all] = [tabs[idx] for idx in leftovers]
    return groups


class TabClusterer:
    """
    Groups a snapshot of tabs into named topical clusters.

    Every call builds its own weighting model, so one clusterer can be
    reused across calls and nothing carries over between them.

    Attributes:
        options: Threshold, minimum cluster size and extra stop words
    """

    def __init__(
        self,
        options: Optional[ClusteringOptions] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the TabClusterer.

        Args:
            options: Clustering options. If not provided, loaded from config.
            settings: Settings to read defaults from when ``options`` is None
        """
        self.options = options or ClusteringOptions.from_settings(settings)

    @staticmethod
    def _coerce(tabs: Iterable[TabLike]) -> list[Tab]:
        return [tab if isinstance(tab, Tab) else Tab.model_validate(tab) for tab in tabs]

    def build_model(self, tabs: Iterable[TabLike]) -> TermWeightModel:
        """
        Build the weighting model for a batch of tabs.

        Args:
            tabs: Tabs to index

        Returns:
            Model keyed by tab id over the cleaned tab titles

        Raises:
            ValueError: If two tabs share an id
        """
        model = TermWeightModel(
            stop_words=DOMAIN_STOP_WORDS | self.options.extra_stop_words
        )
        for tab in self._coerce(tabs):
            if not model.add(tab.id, clean_title(tab.title, tab.url)):
                raise ValueError(f"Duplicate tab id: {tab.id!r}")
        return model

    def cluster(self, tabs: Iterable[TabLike]) -> ClusteringResult:
        """
        Cluster a batch of tabs.

        Mappings are read as tabs, but the groups always hold the caller's
        own records, so the output partitions exactly what was passed in.

        Args:
            tabs: Tabs (or mappings with id/title/url) to group; ids must be unique

        Returns:
            ClusteringResult whose groups partition the input

        Raises:
            ValueError: If two tabs share an id
        """
        records = list(tabs)
        parsed = self._coerce(records)
        threshold = self.options.similarity_threshold
        catch_all_name: Optional[str] = None

        if not records:
            groups: dict[str, list[TabLike]] = {}
        elif len(records) == 1:
            catch_all_name = CATCH_ALL_NAME
            groups = {CATCH_ALL_NAME: list(records)}
        else:
            model = self.build_model(parsed)
            if model.is_empty_vocabulary:
                logger.debug("No usable terms in any tab, skipping clustering")
                catch_all_name = FALLBACK_NAME
                groups = {FALLBACK_NAME: list(records)}
            else:
                ids = [tab.id for tab in parsed]
                similarities = build_similarity_matrix(model, ids)
                clusters = single_linkage(similarities, threshold)
                namer = ClusterNamer(model, ids)
                min_size = self.options.min_cluster_size
                groups = assemble_groups(clusters, records, namer, min_size)
                if any(len(indices) < min_size for indices in clusters):
                    catch_all_name = CATCH_ALL_NAME

        result = ClusteringResult(
            groups=groups,
            catch_all_name=catch_all_name,
            total_tabs_processed=len(records),
            similarity_threshold=threshold,
        )
        logger.info(
            f"Clustered {len(records)} tabs into {len(result.clusters)} groups "
            f"({len(result.catch_all)} unclustered)"
        )
        return result

    def group(self, tabs: Iterable[TabLike]) -> dict[str, list[TabLike]]:
        """Cluster tabs and return only the ordered name -> tabs mapping."""
        return self.cluster(tabs).groups

    def search(self, tabs: Iterable[TabLike], query: str, n: int = 10) -> list[tuple[TabLike, float]]:
        """
        Rank tabs against a free-text query using the same term weights.

        Args:
            tabs: Tabs to search
            query: Free-text query
            n: Maximum number of results

        Returns:
            (caller record, score) pairs, best first
        """
        records = list(tabs)
        parsed = self._coerce(records)
        by_id = {tab.id: record for tab, record in zip(parsed, records)}
        model = self.build_model(parsed)
        return [(by_id[doc_id], score) for doc_id, score in model.search(query, n)]


def cluster_tabs(
    tabs: Iterable[TabLike],
    threshold: Optional[float] = None,
    min_cluster_size: Optional[int] = None,
    extra_stop_words: Optional[Iterable[str]] = None,
) -> dict[str, list[TabLike]]:
    """
    Group tabs into named topical clusters.

    Options left as None fall back to the configured settings.

    Args:
        tabs: Tabs to group; ids must be unique
        threshold: Minimum similarity for merging, in (0, 1]
        min_cluster_size: Smallest group that gets its own name
        extra_stop_words: Additional words to ignore

    Returns:
        Ordered mapping of unique group name -> tabs
    """
    options = ClusteringOptions.from_settings(
        similarity_threshold=threshold,
        min_cluster_size=min_cluster_size,
        extra_stop_words=extra_stop_words,
    )
    return TabClusterer(options).group(tabs)
