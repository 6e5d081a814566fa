from jira_flow.core.graph import build_graph
from jira_flow.visual.sankey import build_sankey_figure


def test_sankey_figure(make_record):
    graph = build_graph(
        [
            make_record("TEST-1", "Epic"),
            make_record("TEST-2", "Story", parent="TEST-1", story_points=3),
        ]
    )
    fig = build_sankey_figure(graph)

    assert fig is not None
    trace = fig.data[0]
    assert len(trace.node.label) == 3
    assert list(trace.link.value) == [3, 1]
    assert trace.node.label[0] == "TEST-1: Issue TEST-1"


def test_sankey_empty_graph():
    assert build_sankey_figure(build_graph([])) is None
