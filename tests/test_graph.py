import json
from dataclasses import replace
from datetime import UTC, datetime

from jira_flow.core.graph import build_graph, links_to_dataframe, nodes_to_dataframe


def _edges(graph):
    return {(link.source, link.target, link.link_type) for link in graph.links}


def test_single_story_links_to_project(make_record):
    graph = build_graph([make_record("TEST-1", "Story")], jql_filter="project = TEST")

    assert len(graph.nodes) == 2
    assert len(graph.links) == 1
    issue = graph.node("TEST-1")
    project = graph.node("TEST")
    assert issue.category == "story"
    assert issue.name == "Issue TEST-1"
    assert project.category == "project"
    assert project.value == 0
    assert _edges(graph) == {("TEST", "TEST-1", "project_to_feature")}
    assert graph.metadata.total_issues == 1
    assert graph.metadata.project_count == 1
    assert graph.metadata.jql_filter == "project = TEST"


def test_parent_child_only_parentless_gets_project_link(make_record):
    records = [
        make_record("TEST-1", "Epic"),
        make_record("TEST-2", "Story", parent="TEST-1"),
    ]
    graph = build_graph(records)

    assert len(graph.nodes) == 3
    assert _edges(graph) == {
        ("TEST", "TEST-1", "project_to_feature"),
        ("TEST-1", "TEST-2", "epic_to_story"),
    }


def test_feature_epic_chain(make_record):
    records = [
        make_record("TEST-1", "Feature"),
        make_record("TEST-2", "Epic", parent="TEST-1"),
        make_record("TEST-3", "Story", parent="TEST-2", story_points=5),
    ]
    graph = build_graph(records)

    assert ("TEST-1", "TEST-2", "feature_to_epic") in _edges(graph)
    story_link = next(link for link in graph.links if link.target == "TEST-3")
    assert story_link.value == 5
    assert story_link.metadata["source_key"] == "TEST-2"
    assert story_link.metadata["target_key"] == "TEST-3"


def test_missing_parent_is_skipped(make_record):
    graph = build_graph([make_record("TEST-2", "Story", parent="TEST-99")])

    # Parent not fetched: no parent link, and the record is not an orphan either
    assert graph.links == []
    assert {n.id for n in graph.nodes} == {"TEST-2", "TEST"}


def test_project_typed_issue_gets_no_project_link(make_record):
    graph = build_graph([make_record("TEST-1", "Project")])
    assert graph.links == []
    assert len(graph.nodes) == 2


def test_duplicate_keys_last_write_wins(make_record):
    records = [
        make_record("TEST-1", "Story", summary="first"),
        make_record("TEST-1", "Epic", summary="second"),
    ]
    graph = build_graph(records)

    assert len(graph.nodes) == 2
    assert graph.node("TEST-1").name == "second"
    assert graph.node("TEST-1").category == "epic"
    assert graph.metadata.total_issues == 2


def test_node_count_is_distinct_issues_plus_projects(make_record):
    records = [
        make_record("A-1", "Epic", project="A"),
        make_record("A-2", "Story", project="A", parent="A-1"),
        make_record("B-1", "Task", project="B"),
        make_record("B-2", "Bug", project="B", parent="B-1"),
        make_record("B-2", "Bug", project="B", parent="B-1"),
        make_record("C-1", "Sub-task", project="C", parent="X-9"),
    ]
    graph = build_graph(records)

    distinct_keys = {r.key for r in records}
    distinct_projects = {r.project.key for r in records}
    assert len(graph.nodes) == len(distinct_keys) + len(distinct_projects)
    assert graph.metadata.project_count == 3
    ids = [n.id for n in graph.nodes]
    assert len(ids) == len(set(ids))
    # Project nodes come after issue nodes
    assert ids[-3:] == ["A", "B", "C"]


def test_every_link_endpoint_exists(make_record):
    records = [
        make_record("A-1", "Feature", project="A"),
        make_record("A-2", "Epic", project="A", parent="A-1"),
        make_record("A-3", "Story", project="A", parent="A-2"),
        make_record("A-4", "Story", project="A", parent="A-404"),
    ]
    graph = build_graph(records)
    ids = {n.id for n in graph.nodes}
    for link in graph.links:
        assert link.source in ids
        assert link.target in ids
        assert link.value >= 1


def test_fractional_story_points_keep_node_value_but_link_floor_is_one(make_record):
    records = [
        make_record("TEST-1", "Epic", story_points=0.5),
        make_record("TEST-2", "Story", parent="TEST-1", story_points=0.5),
    ]
    graph = build_graph(records)
    nodes = {n.id: n for n in graph.nodes}
    links = {(link.source, link.target): link for link in graph.links}

    assert nodes["TEST-2"].value == 0.5
    assert links[("TEST-1", "TEST-2")].value == 1
    assert links[("TEST", "TEST-1")].value == 1


def test_parent_cycle_is_kept(make_record):
    records = [
        make_record("TEST-1", "Story", parent="TEST-2"),
        make_record("TEST-2", "Story", parent="TEST-1"),
    ]
    graph = build_graph(records)
    assert {(link.source, link.target) for link in graph.links} == {("TEST-2", "TEST-1"), ("TEST-1", "TEST-2")}


def test_build_is_idempotent_except_timestamp(make_record):
    records = [
        make_record("TEST-1", "Epic", story_points=8),
        make_record("TEST-2", "Story", parent="TEST-1", story_points=3),
    ]
    first = build_graph(records, "q")
    second = build_graph(records, "q")

    assert first.nodes == second.nodes
    assert first.links == second.links
    assert first.metadata.total_issues == second.metadata.total_issues
    assert first.metadata.jql_filter == second.metadata.jql_filter


def test_value_defaults(make_record):
    records = [
        make_record("TEST-1", "Story", story_points=0),
        make_record("TEST-2", "Story", story_points=13),
    ]
    graph = build_graph(records)
    assert graph.node("TEST-1").value == 1
    assert graph.node("TEST-2").value == 13


def test_empty_input():
    graph = build_graph([])
    assert graph.nodes == []
    assert graph.links == []
    assert graph.metadata.total_issues == 0
    assert nodes_to_dataframe(graph).empty
    assert list(links_to_dataframe(graph).columns) == ["source", "target", "value", "link_type"]


def test_to_dict_is_json_ready(make_record):
    record = replace(make_record("TEST-1", "Story"), created=datetime(2023, 1, 1, tzinfo=UTC))
    payload = build_graph([record]).to_dict()

    assert payload["nodes"][0]["metadata"]["created"] == "2023-01-01T00:00:00+00:00"
    assert payload["links"][0]["metadata"]["link_type"] == "project_to_feature"
    json.dumps(payload)
