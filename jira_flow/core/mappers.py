"""Mapping raw Jira search JSON into IssueRecord / SearchPage instances."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

import pandas as pd

from .config import STORY_POINTS_FIELD
from .hierarchy_config import hierarchy_level
from .models import (
    IssueRecord,
    IssueTypeRef,
    NamedRef,
    ParentRef,
    PriorityRef,
    ProjectRef,
    ResolutionRef,
    SearchPage,
    StatusRef,
    UserRef,
)


def parse_dt(val: Any) -> datetime | None:
    if not val:
        return None
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _story_points(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        points = float(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(points):
        return None
    return points


def _user(value: Any) -> UserRef | None:
    if not isinstance(value, dict):
        return None
    return UserRef(display_name=value.get("displayName"), email=value.get("emailAddress"))


def _named_list(values: Any) -> tuple[NamedRef, ...]:
    out: list[NamedRef] = []
    for item in values or []:
        if not isinstance(item, dict):
            continue
        out.append(NamedRef(name=item.get("name"), id=item.get("id"), release_date=item.get("releaseDate")))
    return tuple(out)


def map_issue(raw: dict[str, Any]) -> IssueRecord:
    fields = raw.get("fields") or {}

    status_raw = fields.get("status") or {}
    priority_raw = fields.get("priority") or {}
    issuetype_name = (fields.get("issuetype") or {}).get("name")
    project_raw = fields.get("project") or {}

    parent = None
    parent_raw = fields.get("parent")
    if isinstance(parent_raw, dict) and parent_raw.get("key"):
        parent = ParentRef(
            id=parent_raw.get("id"),
            key=parent_raw["key"],
            summary=(parent_raw.get("fields") or {}).get("summary"),
        )

    resolution = None
    if fields.get("resolution"):
        resolution = ResolutionRef(
            name=fields["resolution"].get("name"),
            date=parse_dt(fields.get("resolutiondate")),
        )

    return IssueRecord(
        id=raw.get("id"),
        key=raw.get("key"),
        summary=fields.get("summary"),
        description=fields.get("description") if isinstance(fields.get("description"), str) else None,
        status=StatusRef(
            name=status_raw.get("name"),
            category=(status_raw.get("statusCategory") or {}).get("name"),
        ),
        priority=PriorityRef(name=priority_raw.get("name"), id=priority_raw.get("id")),
        issuetype=IssueTypeRef(
            name=issuetype_name,
            hierarchy_level=hierarchy_level(issuetype_name) if issuetype_name else None,
        ),
        project=ProjectRef(
            key=project_raw.get("key"),
            name=project_raw.get("name"),
            id=project_raw.get("id"),
        ),
        parent=parent,
        assignee=_user(fields.get("assignee")),
        reporter=_user(fields.get("reporter")),
        created=parse_dt(fields.get("created")),
        updated=parse_dt(fields.get("updated")),
        resolution=resolution,
        story_points=_story_points(fields.get(STORY_POINTS_FIELD)),
        labels=tuple(fields.get("labels") or ()),
        components=_named_list(fields.get("components")),
        versions=_named_list(fields.get("versions")),
    )


def map_search_page(data: dict[str, Any], *, offset: int = 0, page_size: int = 0) -> SearchPage:
    """Map a search response; ``offset`` / ``page_size`` fill in missing paging fields."""
    issues = data.get("issues") or []
    start_at = data.get("startAt")
    max_results = data.get("maxResults")
    return SearchPage(
        offset=int(start_at) if start_at is not None else offset,
        page_size=int(max_results) if max_results is not None else page_size,
        total=int(data.get("total") or 0),
        records=[map_issue(raw) for raw in issues],
    )


def records_to_dataframe(records: Iterable[IssueRecord]) -> pd.DataFrame:
    rows = []
    for r in records:
        rows.append(
            {
                "key": r.key,
                "summary": r.summary,
                "issuetype": r.issuetype.name,
                "project": r.project.key,
                "parent": r.parent.key if r.parent else None,
                "status": r.status.name,
                "status_category": r.status.category,
                "priority": r.priority.name or "None",
                "assignee": r.assignee.display_name if r.assignee else "Unassigned",
                "reporter": r.reporter.display_name if r.reporter else "Unknown",
                "story_points": r.story_points,
                "created": r.created,
                "updated": r.updated,
                "resolution": r.resolution.name if r.resolution else "Unresolved",
                "labels": ", ".join(sorted({v for v in r.labels if v}, key=str.lower)),
                "components": ", ".join(c.name for c in r.components if c.name),
            }
        )
    return pd.DataFrame(rows)
