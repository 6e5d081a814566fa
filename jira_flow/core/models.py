"""Domain data models for Jira issue records and catalog entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True, frozen=True)
class StatusRef:
    name: str | None
    category: str | None = None


@dataclass(slots=True, frozen=True)
class PriorityRef:
    name: str | None
    id: str | None = None


@dataclass(slots=True, frozen=True)
class IssueTypeRef:
    name: str | None
    hierarchy_level: int | None = None


@dataclass(slots=True, frozen=True)
class ProjectRef:
    key: str
    name: str | None = None
    id: str | None = None


@dataclass(slots=True, frozen=True)
class ParentRef:
    id: str | None
    key: str
    summary: str | None = None


@dataclass(slots=True, frozen=True)
class UserRef:
    display_name: str | None
    email: str | None = None


@dataclass(slots=True, frozen=True)
class ResolutionRef:
    name: str | None
    date: datetime | None = None


@dataclass(slots=True, frozen=True)
class NamedRef:
    """Component or version entry."""

    name: str | None
    id: str | None = None
    release_date: str | None = None


@dataclass(slots=True, frozen=True)
class IssueRecord:
    id: str | None
    key: str
    summary: str | None
    status: StatusRef
    priority: PriorityRef
    issuetype: IssueTypeRef
    project: ProjectRef
    created: datetime | None
    updated: datetime | None
    description: str | None = None
    parent: ParentRef | None = None
    assignee: UserRef | None = None
    reporter: UserRef | None = None
    resolution: ResolutionRef | None = None
    story_points: float | None = None
    labels: tuple[str, ...] = field(default_factory=tuple)
    components: tuple[NamedRef, ...] = field(default_factory=tuple)
    versions: tuple[NamedRef, ...] = field(default_factory=tuple)


@dataclass(slots=True)
class SearchPage:
    offset: int
    page_size: int
    total: int
    records: list[IssueRecord] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class ProjectInfo:
    key: str
    name: str | None
    id: str | None


@dataclass(slots=True, frozen=True)
class IssueTypeInfo:
    id: str | None
    name: str
    hierarchy_level: int
