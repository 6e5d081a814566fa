"""Catalog page: discovered projects, issue types, and a raw search page preview."""

from __future__ import annotations

import logging
from dataclasses import asdict

import pandas as pd
import streamlit as st

from jira_flow.app import register_page
from jira_flow.core.errors import DiscoveryError, UpstreamError
from jira_flow.core.mappers import records_to_dataframe
from jira_flow.core.service import IssueService

logger = logging.getLogger(__name__)


@register_page("Catalog")
def catalog_page():
    st.title("Jira Catalog")
    service: IssueService | None = st.session_state.get("issue_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    projects_col, types_col = st.columns(2)
    with projects_col:
        st.subheader("Projects")
        if st.button("Discover Projects"):
            try:
                projects = service.discover_projects()
                st.dataframe(pd.DataFrame([asdict(p) for p in projects]), hide_index=True)
            except DiscoveryError as exc:
                logger.error("Project discovery failed: %s", exc)
                st.error(str(exc))
    with types_col:
        st.subheader("Issue Types")
        if st.button("Discover Issue Types"):
            try:
                issue_types = service.discover_issue_types()
                st.dataframe(pd.DataFrame([asdict(it) for it in issue_types]), hide_index=True)
            except DiscoveryError as exc:
                logger.error("Issue type discovery failed: %s", exc)
                st.error(str(exc))

    st.markdown("---")
    st.subheader("Raw Search Page")
    jql = st.text_input("JQL (empty = default filter)")
    c1, c2 = st.columns(2)
    start_at = c1.number_input("Start at", min_value=0, value=0, step=50)
    max_results = c2.number_input("Max results", min_value=1, max_value=100, value=50)
    if st.button("Fetch Page"):
        try:
            page = service.fetch_page(int(start_at), int(max_results), jql or None)
        except UpstreamError as exc:
            logger.error("Raw page fetch failed: %s", exc)
            st.error(str(exc))
            return
        st.caption(f"Records {page.offset}–{page.offset + len(page.records)} of {page.total}")
        st.dataframe(records_to_dataframe(page.records), hide_index=True)
