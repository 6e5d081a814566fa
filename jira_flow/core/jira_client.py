"""Jira API client wrapper (REST v3 offset search + catalog discovery)."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import requests
from jira import JIRA, JIRAError

from .config import DEFAULT_PAGE_SIZE, JIRA_SEARCH_FIELDS, REQUEST_TIMEOUT_SECONDS, SEARCH_ENDPOINT
from .errors import DiscoveryError, UpstreamError
from .hierarchy_config import hierarchy_level
from .models import IssueTypeInfo, ProjectInfo

logger = logging.getLogger(__name__)


def _first_error_message(response: Any) -> str | None:
    """Pull the first human-readable message out of a Jira error payload."""
    if response is None:
        return None
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    messages = payload.get("errorMessages") or []
    if messages:
        return str(messages[0])
    errors = payload.get("errors") or {}
    if isinstance(errors, dict) and errors:
        return str(next(iter(errors.values())))
    message = payload.get("message")
    return str(message) if message else None


class JiraAPI:
    def __init__(self, server: str, email: str, token: str):
        self.server = server.rstrip("/")
        # Retries disabled: a failed page aborts the whole fetch sequence
        self.client = JIRA(
            basic_auth=(email, token),
            options={"server": self.server, "rest_api_version": "3"},
            timeout=REQUEST_TIMEOUT_SECONDS,
            max_retries=0,
        )

    def search_page(
        self,
        jql: str,
        start_at: int = 0,
        max_results: int = DEFAULT_PAGE_SIZE,
        fields: Sequence[str] | None = None,
    ) -> dict[str, Any]:
        """Run one offset-paginated search and return the raw JSON body.

        Raises
        ------
        UpstreamError
            With the first ``errorMessages`` entry when Jira returned a
            structured error, otherwise with the transport's own message.
        """
        session = getattr(self.client, "_session", None)
        if session is None:
            raise UpstreamError("Jira API Error: JIRA session unavailable")
        url = f"{self.server}{SEARCH_ENDPOINT}"
        logger.debug("Search startAt=%s maxResults=%s jql=%s", start_at, max_results, jql)
        params = {
            "jql": jql,
            "startAt": start_at,
            "maxResults": max_results,
            "fields": ",".join(fields or JIRA_SEARCH_FIELDS),
            "expand": "names",
        }
        try:
            resp = session.get(url, params=params)
        except JIRAError as exc:
            message = _first_error_message(getattr(exc, "response", None)) or exc.text or str(exc)
            raise UpstreamError(f"Jira API Error: {message}", status_code=exc.status_code) from exc
        except requests.RequestException as exc:
            raise UpstreamError(f"Jira API Error: {exc}") from exc
        if resp.status_code >= 400:
            message = _first_error_message(resp) or f"HTTP {resp.status_code}: {resp.text[:200]}"
            raise UpstreamError(f"Jira API Error: {message}", status_code=resp.status_code)
        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamError(f"Jira API Error: invalid JSON in search response ({exc})") from exc

    def discover_projects(self) -> list[ProjectInfo]:
        try:
            projects = self.client.projects()
        except (JIRAError, requests.RequestException) as exc:
            message = _first_error_message(getattr(exc, "response", None)) or str(exc)
            raise DiscoveryError(f"Failed to fetch projects: {message}") from exc
        return [
            ProjectInfo(key=p.key, name=getattr(p, "name", None), id=getattr(p, "id", None))
            for p in projects
        ]

    def discover_issue_types(self) -> list[IssueTypeInfo]:
        """List issue types, shallowest hierarchy level first."""
        try:
            issue_types = self.client.issue_types()
        except (JIRAError, requests.RequestException) as exc:
            message = _first_error_message(getattr(exc, "response", None)) or str(exc)
            raise DiscoveryError(f"Failed to fetch issue types: {message}") from exc
        out = [
            IssueTypeInfo(id=getattr(it, "id", None), name=it.name, hierarchy_level=hierarchy_level(it.name))
            for it in issue_types
        ]
        return sorted(out, key=lambda it: it.hierarchy_level)
