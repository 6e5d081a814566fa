"""Central configuration, constants, and Jira connection settings."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from .errors import ConfigError

# =============================================================================
# Jira Connection Settings
# =============================================================================
# Accepted keys for each setting, first match wins (env vars or Streamlit secrets)
SETTING_KEYS: dict[str, Sequence[str]] = {
    "base_url": ("JIRA_BASE_URL", "JIRA_SERVER"),
    "email": ("JIRA_EMAIL",),
    "api_token": ("JIRA_API_TOKEN", "JIRA_TOKEN"),
    "jql_filter": ("JQL_FILTER",),
}

# =============================================================================
# Search / Pagination
# =============================================================================
# Classic offset search: paging relies on startAt/total, which the token-paged
# /search/jql endpoint does not return
SEARCH_ENDPOINT = "/rest/api/3/search"
DEFAULT_PAGE_SIZE: int = 100
REQUEST_TIMEOUT_SECONDS: float = 30.0

# Story points live in a custom field on Jira Cloud
STORY_POINTS_FIELD = "customfield_10016"

JIRA_SEARCH_FIELDS: Sequence[str] = (
    "id",
    "key",
    "summary",
    "description",
    "status",
    "priority",
    "issuetype",
    "project",
    "parent",
    "assignee",
    "reporter",
    "created",
    "updated",
    "resolution",
    "resolutiondate",
    "labels",
    "components",
    "versions",
    STORY_POINTS_FIELD,
)

# =============================================================================
# Query Generation
# =============================================================================
MAX_DISCOVERED_PROJECTS: int = 5
RECENT_CREATED_WINDOW = "-90d"
FALLBACK_JQL = "project is not EMPTY AND created >= -30d ORDER BY created DESC"

# =============================================================================
# Issue Type Hierarchy
# =============================================================================
# Lower level = closer to the root. Types missing here rank as UNKNOWN.
ISSUE_TYPE_HIERARCHY: dict[str, int] = {
    "Project": 0,
    "Feature": 1,
    "Epic": 2,
    "Story": 3,
    "Task": 3,
    "Bug": 3,
    "Sub-task": 4,
}
UNKNOWN_HIERARCHY_LEVEL: int = 999
# Issue types at or above this level are left out of generated filters
HIERARCHY_LEVEL_CUTOFF: int = 900

CATEGORY_COLORS: dict[str, str] = {
    "project": "#1f77b4",
    "feature": "#ff7f0e",
    "epic": "#2ca02c",
    "story": "#d62728",
}


@dataclass(slots=True)
class JiraSettings:
    base_url: str
    email: str
    api_token: str
    jql_filter: str = ""


def _lookup(source: Mapping[str, object], names: Sequence[str]) -> str:
    for name in names:
        value = source.get(name)
        if value:
            return str(value).strip()
    return ""


def load_settings(source: Mapping[str, object] | None = None) -> JiraSettings:
    """Build validated connection settings from a mapping.

    Parameters
    ----------
    source : Mapping or None
        Environment-like mapping (``os.environ``, Streamlit secrets, or a
        plain dict). Defaults to ``os.environ``.

    Returns
    -------
    JiraSettings
        Settings with ``jql_filter`` empty when no filter is configured.

    Raises
    ------
    ConfigError
        If a required key is missing, the base URL is not https, or the
        email address is malformed.
    """
    if source is None:
        source = os.environ
    values = {name: _lookup(source, keys) for name, keys in SETTING_KEYS.items()}

    missing = [SETTING_KEYS[name][0] for name in ("base_url", "email", "api_token") if not values[name]]
    if missing:
        raise ConfigError(f"Missing required settings: {', '.join(missing)}")
    if not values["base_url"].startswith("https://"):
        raise ConfigError("JIRA_BASE_URL must start with https://")
    if "@" not in values["email"]:
        raise ConfigError("JIRA_EMAIL must be a valid email address")

    return JiraSettings(
        base_url=values["base_url"].rstrip("/"),
        email=values["email"],
        api_token=values["api_token"],
        jql_filter=values["jql_filter"],
    )


@dataclass(slots=True)
class AppSettings:
    max_table_rows: int = 1000
    download_encoding: str = "utf-8"
    large_graph_warn_nodes: int = 2000


SETTINGS = AppSettings()
