"""IssueService: orchestrates filter generation, paginated fetching, and graph building."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .config import (
    DEFAULT_PAGE_SIZE,
    FALLBACK_JQL,
    HIERARCHY_LEVEL_CUTOFF,
    MAX_DISCOVERED_PROJECTS,
    RECENT_CREATED_WINDOW,
)
from .graph import HierarchyGraph, build_graph
from .jira_client import JiraAPI
from .mappers import map_search_page
from .models import IssueRecord, IssueTypeInfo, ProjectInfo, SearchPage

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int | None, int | None], None]


@dataclass(slots=True, frozen=True)
class FilterPlan:
    """Outcome of filter generation.

    ``fallback`` is True when catalog discovery failed and ``jql`` is the
    fixed permissive filter; ``reason`` then holds the discovery error.
    """

    jql: str
    fallback: bool = False
    reason: str | None = None


def build_jql(project_keys: Sequence[str], issue_type_names: Sequence[str]) -> str:
    parts: list[str] = []
    if project_keys:
        parts.append(f"project in ({','.join(project_keys)})")
    if issue_type_names:
        quoted = ",".join(f'"{name}"' for name in issue_type_names)
        parts.append(f"issuetype in ({quoted})")
    parts.append(f"created >= {RECENT_CREATED_WINDOW}")
    return " AND ".join(parts) + " ORDER BY project ASC, created DESC"


class IssueService:
    def __init__(self, api: JiraAPI, *, jql_filter: str = ""):
        self.api = api
        self.jql_filter = jql_filter

    # ------------------ Catalog Discovery ------------------
    def discover_projects(self) -> list[ProjectInfo]:
        return self.api.discover_projects()

    def discover_issue_types(self) -> list[IssueTypeInfo]:
        return self.api.discover_issue_types()

    # ------------------ Filter Generation ------------------
    def plan_filter(
        self,
        project_keys: Sequence[str] | None = None,
        issue_type_names: Sequence[str] | None = None,
    ) -> FilterPlan:
        """Compose a search filter, discovering projects / issue types when not given.

        Without project keys the first few discovered projects are used;
        without issue types every discovered type ranked in the hierarchy
        table is used. If discovery fails the plan carries ``FALLBACK_JQL``
        instead of a partially built filter.
        """
        try:
            if project_keys is None:
                discovered = self.api.discover_projects()
                project_keys = [p.key for p in discovered[:MAX_DISCOVERED_PROJECTS]]
            if issue_type_names is None:
                issue_type_names = [
                    it.name
                    for it in self.api.discover_issue_types()
                    if it.hierarchy_level < HIERARCHY_LEVEL_CUTOFF
                ]
        except Exception as exc:
            # Any discovery failure yields the fixed fallback, never a partial filter
            logger.warning("Filter discovery failed, using fallback filter: %s", exc)
            return FilterPlan(jql=FALLBACK_JQL, fallback=True, reason=f"{type(exc).__name__}: {exc}")
        jql = build_jql(list(project_keys), list(issue_type_names))
        logger.info("Generated JQL: %s", jql)
        return FilterPlan(jql=jql)

    def generate_filter(
        self,
        project_keys: Sequence[str] | None = None,
        issue_type_names: Sequence[str] | None = None,
    ) -> str:
        return self.plan_filter(project_keys, issue_type_names).jql

    def resolve_filter(self, jql: str | None = None) -> str:
        """Explicit filter, else the configured one, else a generated one."""
        return jql or self.jql_filter or self.generate_filter()

    # ------------------ Fetch Methods ------------------
    def fetch_page(
        self,
        offset: int = 0,
        page_size: int = DEFAULT_PAGE_SIZE,
        jql: str | None = None,
    ) -> SearchPage:
        jql = self.resolve_filter(jql)
        data = self.api.search_page(jql, start_at=offset, max_results=page_size)
        return map_search_page(data, offset=offset, page_size=page_size)

    def fetch_all(
        self,
        jql: str | None = None,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        progress: ProgressCallback | None = None,
    ) -> list[IssueRecord]:
        """Fetch every record matching the filter, one page at a time.

        Pages are requested sequentially until ``offset + page_size`` reaches
        the reported total. Records are concatenated in arrival order without
        deduplication. Any page failure propagates and the partial result is
        dropped.
        """
        jql = self.resolve_filter(jql)
        records: list[IssueRecord] = []
        offset = 0
        pages = 0
        while True:
            page = self.fetch_page(offset, page_size, jql)
            pages += 1
            records.extend(page.records)
            logger.debug("Fetched page at offset %s: %s records (total %s)", offset, len(page.records), page.total)
            if progress:
                progress("Fetching issues from Jira", len(records), page.total)
            if offset + page_size >= page.total:
                break
            offset += page_size
        logger.info("Fetched %s issues in %s page(s)", len(records), pages)
        return records

    # ------------------ Pipeline ------------------
    def load_graph(
        self,
        jql: str | None = None,
        *,
        progress: ProgressCallback | None = None,
    ) -> HierarchyGraph:
        """Fetch all matching issues and build the hierarchy graph from them."""
        if progress:
            progress("Resolving search filter", None, None)
        jql = self.resolve_filter(jql)
        started = time.perf_counter()
        records = self.fetch_all(jql, progress=progress)
        fetched = time.perf_counter()
        if progress:
            progress("Building hierarchy graph", None, None)
        graph = build_graph(records, jql_filter=jql)
        logger.info(
            "Loaded %s issues in %.0fms; graph has %s nodes and %s links (built in %.0fms)",
            len(records),
            (fetched - started) * 1000,
            len(graph.nodes),
            len(graph.links),
            (time.perf_counter() - fetched) * 1000,
        )
        return graph
