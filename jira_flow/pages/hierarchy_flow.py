"""Hierarchy Flow page: load issues, build the hierarchy graph, and render it as a Sankey."""

from __future__ import annotations

import json
import logging

import pandas as pd
import streamlit as st

from jira_flow.analytics.stats import GraphStats, aggregate_stats
from jira_flow.app import register_page
from jira_flow.core.config import SETTINGS
from jira_flow.core.errors import UpstreamError
from jira_flow.core.graph import HierarchyGraph, links_to_dataframe, nodes_to_dataframe
from jira_flow.core.service import IssueService
from jira_flow.visual.progress import ProgressReporter
from jira_flow.visual.sankey import build_sankey_figure

logger = logging.getLogger(__name__)

PAGE_KEY = "hierarchy_flow"


def _split_csv(text: str) -> list[str] | None:
    items = [part.strip() for part in (text or "").split(",") if part.strip()]
    return items or None


def _counts_frame(counts: dict[str, int], label: str) -> pd.DataFrame:
    frame = pd.DataFrame({label: list(counts.keys()), "count": list(counts.values())})
    return frame.sort_values(by="count", ascending=False)


def choose_filter(
    service: IssueService,
    custom_jql: str,
    project_keys: list[str] | None,
    issue_types: list[str] | None,
) -> str | None:
    """Custom JQL wins; otherwise generate one when any selector was given."""
    if custom_jql.strip():
        return custom_jql.strip()
    if project_keys or issue_types:
        plan = service.plan_filter(project_keys, issue_types)
        if plan.fallback:
            st.warning(f"Could not discover projects/issue types, using fallback filter ({plan.reason}).")
        return plan.jql
    return None


def render_stats(stats: GraphStats, graph: HierarchyGraph) -> None:
    meta = graph.metadata
    cols = st.columns(5)
    cols[0].metric("Total Issues", meta.total_issues)
    cols[1].metric("Projects", meta.project_count)
    cols[2].metric("Nodes", stats.total_nodes)
    cols[3].metric("Links", stats.total_links)
    cols[4].metric("Avg Story Points", f"{stats.average_story_points:.1f}")

    left, middle, right = st.columns(3)
    with left:
        st.caption("Issue types")
        st.dataframe(_counts_frame(stats.nodes_by_category, "category"), hide_index=True)
    with middle:
        st.caption("Relationships")
        st.dataframe(_counts_frame(stats.links_by_type, "link_type"), hide_index=True)
    with right:
        st.caption("Status distribution")
        st.dataframe(_counts_frame(stats.status_distribution, "status"), hide_index=True)
    st.caption(f"Last updated {meta.last_updated} · Filter: `{meta.jql_filter or '(none)'}`")


@register_page("Hierarchy Flow")
def hierarchy_flow_page():
    st.title("Hierarchy Flow")
    st.caption("Project → Feature → Epic → Story flow built from Jira parent links.")
    service: IssueService | None = st.session_state.get("issue_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    with st.expander("Filters", expanded=False):
        projects_text = st.text_input("Project keys (comma separated)", key=f"{PAGE_KEY}_projects")
        types_text = st.text_input("Issue types (comma separated)", key=f"{PAGE_KEY}_types")
        custom_jql = st.text_area("Custom JQL (overrides the fields above)", key=f"{PAGE_KEY}_jql")
    load = st.button("Load Hierarchy", type="primary")

    if load:
        reporter = ProgressReporter("Loading issues from Jira")
        try:
            jql = choose_filter(service, custom_jql, _split_csv(projects_text), _split_csv(types_text))
            graph = service.load_graph(jql, progress=reporter.callback)
            st.session_state[f"{PAGE_KEY}_graph"] = graph
            reporter.complete(
                f"Loaded {graph.metadata.total_issues} issues into "
                f"{len(graph.nodes)} nodes and {len(graph.links)} links."
            )
        except UpstreamError as exc:
            logger.error("Jira API error loading hierarchy: %s", exc)
            reporter.error(f"Failed to fetch issues: {exc}")
            raise

    graph: HierarchyGraph | None = st.session_state.get(f"{PAGE_KEY}_graph")
    if graph is None:
        st.info("Use the controls above to load the hierarchy.")
        return
    if not graph.nodes:
        st.info("No issues matched the current filter.")
        return

    stats = aggregate_stats(graph)
    render_stats(stats, graph)

    if len(graph.nodes) > SETTINGS.large_graph_warn_nodes:
        st.warning(f"Large graph ({len(graph.nodes)} nodes). Rendering may be slow.")
    fig = build_sankey_figure(graph)
    if fig is not None:
        st.plotly_chart(fig, width="stretch")

    nodes_tab, links_tab = st.tabs(["Nodes", "Links"])
    with nodes_tab:
        st.dataframe(nodes_to_dataframe(graph).head(SETTINGS.max_table_rows), hide_index=True)
    with links_tab:
        st.dataframe(links_to_dataframe(graph).head(SETTINGS.max_table_rows), hide_index=True)

    payload = json.dumps(graph.to_dict(), indent=2).encode(SETTINGS.download_encoding)
    st.download_button(
        "Download Graph JSON",
        data=payload,
        file_name="jira_hierarchy_graph.json",
        mime="application/json",
    )
