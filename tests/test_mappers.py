from datetime import UTC, datetime

from jira_flow.core.mappers import map_issue, map_search_page, records_to_dataframe


def test_map_issue_basic(raw_issue):
    record = map_issue(raw_issue)

    assert record.key == "TEST-1"
    assert record.id == "123"
    assert record.summary == "Test Issue"
    assert record.description == "Test Description"
    assert record.status.name == "In Progress"
    assert record.status.category == "In Progress"
    assert record.priority.name == "Medium"
    assert record.issuetype.name == "Story"
    assert record.issuetype.hierarchy_level == 3
    assert record.project.key == "TEST"
    assert record.project.name == "Test Project"
    assert record.parent is None
    assert record.assignee is None
    assert record.reporter.display_name == "Test User"
    assert record.created == datetime(2023, 1, 1, tzinfo=UTC)
    assert record.story_points is None
    assert record.labels == ()


def test_map_issue_parent_story_points_and_resolution(raw_issue):
    fields = raw_issue["fields"]
    fields["parent"] = {"id": "100", "key": "TEST-0", "fields": {"summary": "Parent Epic"}}
    fields["customfield_10016"] = 5
    fields["assignee"] = {"displayName": "Alice", "emailAddress": "alice@example.com"}
    fields["resolution"] = {"name": "Done"}
    fields["resolutiondate"] = "2023-01-03T00:00:00Z"
    fields["labels"] = ["backend", "api"]
    fields["components"] = [{"name": "Core", "id": "7"}]

    record = map_issue(raw_issue)

    assert record.parent.key == "TEST-0"
    assert record.parent.summary == "Parent Epic"
    assert record.story_points == 5.0
    assert record.assignee.display_name == "Alice"
    assert record.resolution.name == "Done"
    assert record.resolution.date == datetime(2023, 1, 3, tzinfo=UTC)
    assert record.labels == ("backend", "api")
    assert record.components[0].name == "Core"


def test_map_issue_tolerates_missing_fields():
    record = map_issue({"key": "X-1", "fields": {"customfield_10016": "n/a"}})
    assert record.key == "X-1"
    assert record.status.name is None
    assert record.issuetype.hierarchy_level is None
    assert record.story_points is None
    assert record.created is None


def test_map_search_page(raw_issue):
    page = map_search_page({"startAt": 0, "maxResults": 100, "total": 1, "issues": [raw_issue]})
    assert page.total == 1
    assert page.page_size == 100
    assert page.records[0].key == "TEST-1"


def test_map_search_page_fills_missing_paging():
    page = map_search_page({"total": 0}, offset=200, page_size=100)
    assert page.offset == 200
    assert page.page_size == 100
    assert page.records == []


def test_records_to_dataframe(raw_issue):
    df = records_to_dataframe([map_issue(raw_issue)])
    assert df.loc[0, "key"] == "TEST-1"
    assert df.loc[0, "assignee"] == "Unassigned"
    assert df.loc[0, "resolution"] == "Unresolved"
