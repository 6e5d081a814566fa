"""Summary statistics over a built hierarchy graph (pure functions)."""

from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd

from jira_flow.core.graph import HierarchyGraph, links_to_dataframe, nodes_to_dataframe

UNKNOWN_STATUS = "Unknown"


@dataclass(slots=True)
class GraphStats:
    total_nodes: int
    total_links: int
    nodes_by_category: dict[str, int] = field(default_factory=dict)
    links_by_type: dict[str, int] = field(default_factory=dict)
    average_story_points: float = 0.0
    status_distribution: dict[str, int] = field(default_factory=dict)


def _tally(series: pd.Series) -> dict[str, int]:
    counts = series.value_counts(sort=False, dropna=False)
    return {str(k): int(v) for k, v in counts.items()}


def average_story_points(nodes: pd.DataFrame) -> float:
    """Mean of strictly positive story points; 0.0 when no node has any."""
    if nodes.empty or "story_points" not in nodes.columns:
        return 0.0
    points = pd.to_numeric(nodes["story_points"], errors="coerce")
    positive = points[points > 0]
    if positive.empty:
        return 0.0
    return float(positive.mean())


def status_distribution(nodes: pd.DataFrame) -> dict[str, int]:
    if nodes.empty or "status" not in nodes.columns:
        return {}
    statuses = nodes["status"].apply(lambda s: s if isinstance(s, str) and s else UNKNOWN_STATUS)
    return _tally(statuses)


def aggregate_stats(graph: HierarchyGraph) -> GraphStats:
    nodes = nodes_to_dataframe(graph)
    links = links_to_dataframe(graph)
    return GraphStats(
        total_nodes=len(graph.nodes),
        total_links=len(graph.links),
        nodes_by_category=_tally(nodes["category"]) if not nodes.empty else {},
        links_by_type=_tally(links["link_type"]) if not links.empty else {},
        average_story_points=average_story_points(nodes),
        status_distribution=status_distribution(nodes),
    )
