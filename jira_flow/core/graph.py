"""Hierarchy graph construction from a flat list of issue records."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

import pandas as pd
import pytz

from .hierarchy import ORPHAN_LINK_TYPE, Category, LinkType, classify_issue_type, resolve_link_type
from .models import IssueRecord

logger = logging.getLogger(__name__)

NODE_COLUMNS = (
    "id",
    "name",
    "category",
    "value",
    "status",
    "priority",
    "assignee",
    "story_points",
    "created",
    "updated",
)
LINK_COLUMNS = ("source", "target", "value", "link_type")


@dataclass(slots=True)
class GraphNode:
    id: str
    name: str | None
    category: Category
    value: float
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class GraphLink:
    source: str
    target: str
    value: float
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def link_type(self) -> LinkType:
        return self.metadata["link_type"]


@dataclass(slots=True)
class GraphMetadata:
    total_issues: int
    project_count: int
    last_updated: str
    jql_filter: str


@dataclass(slots=True)
class HierarchyGraph:
    nodes: list[GraphNode]
    links: list[GraphLink]
    metadata: GraphMetadata

    def node(self, node_id: str) -> GraphNode | None:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready payload; datetimes become ISO-8601 strings."""

        def _plain(value):
            if isinstance(value, datetime):
                return value.isoformat()
            return value

        payload = asdict(self)
        for node in payload["nodes"]:
            node["metadata"] = {k: _plain(v) for k, v in node["metadata"].items()}
        return payload


def _issue_node(record: IssueRecord) -> GraphNode:
    return GraphNode(
        id=record.key,
        name=record.summary,
        category=classify_issue_type(record.issuetype.name),
        value=record.story_points or 1,
        metadata={
            "issue_key": record.key,
            "status": record.status.name,
            "priority": record.priority.name,
            "assignee": record.assignee.display_name if record.assignee else None,
            "story_points": record.story_points,
            "created": record.created,
            "updated": record.updated,
        },
    )


def _link(source: str, target: str, value: float, link_type: LinkType) -> GraphLink:
    return GraphLink(
        source=source,
        target=target,
        value=max(value or 1, 1),
        metadata={"link_type": link_type, "source_key": source, "target_key": target},
    )


def build_graph(records: Iterable[IssueRecord], jql_filter: str = "") -> HierarchyGraph:
    """Turn issue records into a project/feature/epic/story hierarchy graph.

    Every record becomes a node keyed by its issue key (a repeated key
    replaces the earlier node) and every distinct project becomes a node of
    category ``project``. Links run parent -> child when both ends were
    fetched; issues without a parent hang off their project with a
    ``project_to_feature`` link whatever their own category. Parent cycles
    in the source data are kept as-is.

    Parameters
    ----------
    records : iterable of IssueRecord
        Records as returned by ``IssueService.fetch_all``.
    jql_filter : str
        Filter that selected the records, echoed into the metadata.
    """
    records = list(records)
    nodes: dict[str, GraphNode] = {}
    links: list[GraphLink] = []

    for record in records:
        nodes[record.key] = _issue_node(record)

    for record in records:
        if record.parent is None:
            continue
        parent_node = nodes.get(record.parent.key)
        child_node = nodes.get(record.key)
        if parent_node is None or child_node is None:
            continue
        link_type = resolve_link_type(parent_node.category, child_node.category)
        links.append(_link(record.parent.key, record.key, child_node.value, link_type))

    project_nodes: dict[str, GraphNode] = {}
    for record in records:
        key = record.project.key
        if key not in project_nodes:
            project_nodes[key] = GraphNode(
                id=key,
                name=record.project.name,
                category="project",
                value=0,
                metadata={"issue_key": key},
            )

    for record in records:
        issue_node = nodes.get(record.key)
        if issue_node is None or record.parent is not None:
            continue
        if issue_node.category == "project":
            continue
        links.append(_link(record.project.key, record.key, issue_node.value, ORPHAN_LINK_TYPE))

    for key, node in project_nodes.items():
        nodes[key] = node

    metadata = GraphMetadata(
        total_issues=len(records),
        project_count=len(project_nodes),
        last_updated=datetime.now(pytz.UTC).isoformat(),
        jql_filter=jql_filter,
    )
    logger.debug("Built graph: %s nodes, %s links from %s records", len(nodes), len(links), len(records))
    return HierarchyGraph(nodes=list(nodes.values()), links=links, metadata=metadata)


def nodes_to_dataframe(graph: HierarchyGraph) -> pd.DataFrame:
    rows = []
    for n in graph.nodes:
        meta = n.metadata
        rows.append(
            {
                "id": n.id,
                "name": n.name,
                "category": n.category,
                "value": n.value,
                "status": meta.get("status"),
                "priority": meta.get("priority"),
                "assignee": meta.get("assignee"),
                "story_points": meta.get("story_points"),
                "created": meta.get("created"),
                "updated": meta.get("updated"),
            }
        )
    return pd.DataFrame(rows, columns=list(NODE_COLUMNS))


def links_to_dataframe(graph: HierarchyGraph) -> pd.DataFrame:
    rows = [
        {"source": link.source, "target": link.target, "value": link.value, "link_type": link.link_type}
        for link in graph.links
    ]
    return pd.DataFrame(rows, columns=list(LINK_COLUMNS))
