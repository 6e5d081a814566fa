"""Test configuration ensuring local package import when editable install not active.

If users invoke `pytest` outside the project's virtualenv, we still add the project
root to sys.path so `import jira_flow` works.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from jira_flow.core.models import (  # noqa: E402
    IssueRecord,
    IssueTypeRef,
    ParentRef,
    PriorityRef,
    ProjectRef,
    StatusRef,
    UserRef,
)


@pytest.fixture
def make_record():
    def _make(
        key: str,
        issuetype: str = "Story",
        *,
        project: str = "TEST",
        parent: str | None = None,
        story_points: float | None = None,
        status: str | None = "To Do",
        summary: str | None = None,
    ) -> IssueRecord:
        return IssueRecord(
            id=key.split("-")[-1],
            key=key,
            summary=summary or f"Issue {key}",
            status=StatusRef(name=status, category=status),
            priority=PriorityRef(name="Medium", id="3"),
            issuetype=IssueTypeRef(name=issuetype),
            project=ProjectRef(key=project, name=f"{project} Project", id="10001"),
            created=None,
            updated=None,
            parent=ParentRef(id=None, key=parent, summary=None) if parent else None,
            reporter=UserRef(display_name="Test User", email="test@example.com"),
            story_points=story_points,
        )

    return _make


@pytest.fixture
def raw_issue():
    return {
        "id": "123",
        "key": "TEST-1",
        "fields": {
            "summary": "Test Issue",
            "description": "Test Description",
            "status": {"name": "In Progress", "statusCategory": {"name": "In Progress"}},
            "priority": {"name": "Medium", "id": "3"},
            "issuetype": {"name": "Story"},
            "project": {"key": "TEST", "name": "Test Project", "id": "10001"},
            "reporter": {"displayName": "Test User", "emailAddress": "test@example.com"},
            "created": "2023-01-01T00:00:00Z",
            "updated": "2023-01-02T00:00:00Z",
            "labels": [],
            "components": [],
            "versions": [],
        },
    }
