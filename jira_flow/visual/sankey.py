"""Sankey figure builder (plotly) for the hierarchy graph."""

from __future__ import annotations

import plotly.graph_objects as go

from jira_flow.core.graph import HierarchyGraph
from jira_flow.core.hierarchy_config import category_colors

LINK_ALPHA = 0.35
FALLBACK_COLOR = "#7f7f7f"


def _rgba(hex_color: str, alpha: float) -> str:
    value = hex_color.lstrip("#")
    if len(value) != 6:
        value = FALLBACK_COLOR.lstrip("#")
    r, g, b = (int(value[i : i + 2], 16) for i in (0, 2, 4))
    return f"rgba({r},{g},{b},{alpha})"


def _node_label(node) -> str:
    if node.name and node.name != node.id:
        return f"{node.id}: {node.name}"
    return node.id


def build_sankey_figure(graph: HierarchyGraph, *, height: int = 700) -> go.Figure | None:
    if not graph.nodes:
        return None
    colors = category_colors()
    index = {node.id: i for i, node in enumerate(graph.nodes)}
    node_colors = [colors.get(node.category, FALLBACK_COLOR) for node in graph.nodes]

    sources: list[int] = []
    targets: list[int] = []
    values: list[float] = []
    link_colors: list[str] = []
    link_labels: list[str] = []
    for link in graph.links:
        if link.source not in index or link.target not in index:
            continue
        sources.append(index[link.source])
        targets.append(index[link.target])
        values.append(link.value)
        link_colors.append(_rgba(node_colors[index[link.target]], LINK_ALPHA))
        link_labels.append(link.link_type.replace("_", " "))

    fig = go.Figure(
        go.Sankey(
            arrangement="snap",
            node={
                "label": [_node_label(n) for n in graph.nodes],
                "color": node_colors,
                "customdata": [
                    [n.category, n.metadata.get("status") or "Unknown", n.value] for n in graph.nodes
                ],
                "hovertemplate": "%{label}<br>Category: %{customdata[0]}<br>"
                "Status: %{customdata[1]}<br>Value: %{customdata[2]}<extra></extra>",
                "pad": 12,
                "thickness": 14,
            },
            link={
                "source": sources,
                "target": targets,
                "value": values,
                "color": link_colors,
                "label": link_labels,
            },
        )
    )
    fig.update_layout(
        margin={"t": 10, "b": 10, "l": 10, "r": 10},
        height=height,
        hoverlabel={"align": "left"},
    )
    return fig
