"""
Example demonstrating tab clustering with BM25 weighting and single-linkage grouping.

This example shows:
1. Grouping a browsing session into named topical clusters
2. How the similarity threshold changes the grouping
3. Pairwise similarities behind the merges
4. Searching the same tabs with a free-text query
"""

from tab_topics.clustering import (
    ClusteringOptions,
    Tab,
    TabClusterer,
    build_similarity_matrix,
)
from tab_topics.config import get_settings, setup_logging


TABS = [
    # Graph databases
    Tab(id="1", url="https://neo4j.com/docs", title="Neo4j Graph Database Guide"),
    Tab(id="2", url="https://neo4j.com/docs/modeling", title="Graph Database Modeling"),
    Tab(id="3", url="https://neo4j.com/graphacademy", title="Learn Graph Databases - Neo4j"),

    # React
    Tab(id="4", url="https://react.dev/learn", title="React Hooks Tutorial"),
    Tab(id="5", url="https://react.dev/reference/react/hooks", title="React Hooks Reference – React"),

    # Machine learning
    Tab(id="6", url="https://arxiv.org/abs/1706.03762", title="Attention Is All You Need - Transformers Paper"),
    Tab(id="7", url="https://huggingface.co/docs", title="Hugging Face Transformers Documentation"),

    # Strays
    Tab(id="8", url="https://weather.com", title="Weather Forecast"),
    Tab(id="9", url="about:blank", title=""),
]


def print_groups(groups):
    for name, tabs in groups.items():
        print(f"  {name} ({len(tabs)} tabs)")
        for tab in tabs:
            print(f"    - {tab.title or '(untitled)'}")


def main():
    """Run tab clustering example."""
    setup_logging()
    settings = get_settings()

    print("=" * 80)
    print("Tab Clustering Example: BM25 + Single-Linkage")
    print("=" * 80)
    print()

    # =========================================================================
    # Phase 1: Cluster with configured defaults
    # =========================================================================
    print("-" * 80)
    print(f"PHASE 1: Default threshold ({settings.similarity_threshold})")
    print("-" * 80)

    clusterer = TabClusterer()
    result = clusterer.cluster(TABS)
    print_groups(result.groups)
    print()

    # =========================================================================
    # Phase 2: Vary the threshold
    # =========================================================================
    print("-" * 80)
    print("PHASE 2: Threshold sweep")
    print("-" * 80)

    for threshold in (0.1, 0.3, 0.5):
        options = ClusteringOptions(similarity_threshold=threshold)
        groups = TabClusterer(options).group(TABS)
        summary = ", ".join(f"{name}: {len(tabs)}" for name, tabs in groups.items())
        print(f"  {threshold:.2f} -> {summary}")
    print()

    # =========================================================================
    # Phase 3: Similarities behind the merges
    # =========================================================================
    print("-" * 80)
    print("PHASE 3: Most similar pairs")
    print("-" * 80)

    model = clusterer.build_model(TABS)
    ids = [tab.id for tab in TABS]
    similarities = build_similarity_matrix(model, ids)
    pairs = [
        (similarities[i, j], TABS[i].title, TABS[j].title)
        for i in range(len(TABS))
        for j in range(i + 1, len(TABS))
        if similarities[i, j] > 0
    ]
    for score, left, right in sorted(pairs, reverse=True)[:5]:
        print(f"  {score:.3f}  {left}  <->  {right}")
    print()

    # =========================================================================
    # Phase 4: Search
    # =========================================================================
    print("-" * 80)
    print("PHASE 4: Search for 'graph database'")
    print("-" * 80)

    for tab, score in clusterer.search(TABS, "graph database", n=3):
        print(f"  {score:.3f}  {tab.title}")

    print()
    print("=" * 80)
    print("Example complete!")
    print("=" * 80)


if __name__ == "__main__":
    main()
