import pytest

from treebuilder.core.exceptions import UnknownNodeKindError
from treebuilder.flowchart.model import Flowchart, NodeKind
from treebuilder.flowchart.routing import Point


def test_flowchart_from_dict_normalizes_nodes_and_edges():
    data = {
        "nodes": [
            {"id": "n1", "kind": "unknown", "label": "Alpha"},
            {"id": "n1", "label": "Beta"},
            {"id": "n2", "type": "decision", "x": 40, "y": "bad"},
        ],
        "edges": [
            {"source": "n1", "target": "n1_1", "label": "Yes"},
            {"from": "n1", "to": "n2"},
            {"from": "n1", "to": "n2"},
            {"from": "n2", "to": "n2"},
            {"from": "missing", "to": "n1"},
        ],
    }

    flowchart = Flowchart.from_dict(data)
    assert len(flowchart.nodes) == 3
    assert flowchart.nodes[0].id == "n1"
    assert flowchart.nodes[1].id != "n1"
    assert flowchart.nodes[0].kind is NodeKind.PROCESS
    assert flowchart.nodes[2].label == "Decision"
    assert flowchart.nodes[2].x == 40.0
    assert flowchart.nodes[2].y == 0.0
    assert len(flowchart.edges) == 2
    assert flowchart.edges[0].label == "Yes"
    assert flowchart.edges[1].label is None


def test_add_node_uses_capitalized_kind_as_default_label(flowchart):
    node = flowchart.add_node("decision", Point(10, 20))

    assert node.kind is NodeKind.DECISION
    assert node.label == "Decision"
    assert (node.x, node.y) == (10, 20)
    assert flowchart.get_node(node.id) is node


def test_add_node_rejects_unknown_kind(flowchart):
    with pytest.raises(UnknownNodeKindError):
        flowchart.add_node("subprocess", Point(0, 0))
    assert len(flowchart) == 0


def test_self_loop_is_ignored(flowchart):
    a = flowchart.add_node("process", Point(0, 0))

    assert flowchart.add_edge(a.id, a.id) is None
    assert flowchart.edges == []


def test_duplicate_edge_is_ignored(flowchart):
    a = flowchart.add_node("start", Point(0, 0))
    b = flowchart.add_node("end", Point(0, 200))

    first = flowchart.add_edge(a.id, b.id)
    second = flowchart.add_edge(a.id, b.id)

    assert first is not None
    assert second is None
    assert len(flowchart.edges) == 1


def test_reverse_direction_is_a_distinct_edge(flowchart):
    a = flowchart.add_node("process", Point(0, 0))
    b = flowchart.add_node("process", Point(0, 200))

    assert flowchart.add_edge(a.id, b.id) is not None
    assert flowchart.add_edge(b.id, a.id) is not None
    assert len(flowchart.edges) == 2


def test_edge_to_missing_node_is_ignored(flowchart):
    a = flowchart.add_node("process", Point(0, 0))

    assert flowchart.add_edge(a.id, "ghost") is None
    assert flowchart.add_edge("ghost", a.id) is None
    assert flowchart.edges == []


def test_decision_edges_are_labeled_by_target_side(flowchart):
    decision = flowchart.add_node("decision", Point(300, 100))
    left = flowchart.add_node("end", Point(100, 300))
    aligned = flowchart.add_node("end", Point(300, 300))
    right = flowchart.add_node("end", Point(500, 300))

    assert flowchart.add_edge(decision.id, left.id).label == "No"
    assert flowchart.add_edge(decision.id, aligned.id).label == "Yes"
    assert flowchart.add_edge(decision.id, right.id).label == "Yes"


def test_non_decision_edges_have_no_label(flowchart):
    a = flowchart.add_node("process", Point(300, 0))
    b = flowchart.add_node("end", Point(0, 200))

    assert flowchart.add_edge(a.id, b.id).label is None


def test_decision_label_is_not_recomputed_after_move(flowchart):
    decision = flowchart.add_node("decision", Point(300, 100))
    target = flowchart.add_node("end", Point(100, 300))
    edge = flowchart.add_edge(decision.id, target.id)

    flowchart.move_node(target.id, Point(900, 300))

    assert edge.label == "No"


def test_delete_node_removes_incident_edges(flowchart):
    a = flowchart.add_node("start", Point(0, 0))
    b = flowchart.add_node("process", Point(0, 200))
    c = flowchart.add_node("end", Point(0, 400))
    flowchart.add_edge(a.id, b.id)
    flowchart.add_edge(b.id, c.id)
    keep = flowchart.add_edge(a.id, c.id)

    assert flowchart.delete_node(b.id) is True

    assert b.id not in flowchart
    assert flowchart.edges == [keep]
    for edge in flowchart.edges:
        assert edge.source != b.id and edge.target != b.id


def test_delete_edge_keeps_endpoints(flowchart):
    a = flowchart.add_node("start", Point(0, 0))
    b = flowchart.add_node("end", Point(0, 200))
    edge = flowchart.add_edge(a.id, b.id)

    assert flowchart.delete_edge(edge.id) is True
    assert flowchart.edges == []
    assert len(flowchart) == 2


def test_edges_for_node_lists_incoming_and_outgoing(flowchart):
    a = flowchart.add_node("start", Point(0, 0))
    b = flowchart.add_node("process", Point(0, 200))
    c = flowchart.add_node("end", Point(0, 400))
    first = flowchart.add_edge(a.id, b.id)
    second = flowchart.add_edge(b.id, c.id)

    assert flowchart.edges_for_node(b.id) == [first, second]
    assert flowchart.edges_for_node(c.id) == [second]
    assert flowchart.edges_for_node("ghost") == []


def test_operations_on_missing_ids_are_noops(flowchart):
    assert flowchart.move_node("ghost", Point(1, 1)) is False
    assert flowchart.relabel_node("ghost", "x") is False
    assert flowchart.delete_node("ghost") is False
    assert flowchart.delete_edge("ghost") is False


def test_ids_are_never_reused():
    issued = iter(["x", "x", "x", "y", "z"])
    flowchart = Flowchart(id_factory=lambda: next(issued))

    first = flowchart.add_node("process", Point(0, 0))
    flowchart.delete_node(first.id)
    second = flowchart.add_node("process", Point(0, 0))

    assert first.id == "x"
    assert second.id == "y"


def test_from_dict_reserves_existing_ids():
    issued = iter(["a", "b", "c"])
    flowchart = Flowchart.from_dict(
        {"nodes": [{"id": "a", "kind": "start"}]},
        id_factory=lambda: next(issued),
    )

    node = flowchart.add_node("end", Point(0, 0))
    assert node.id == "b"


def test_apply_positions_leaves_missing_nodes_untouched(flowchart):
    a = flowchart.add_node("process", Point(5, 5))
    b = flowchart.add_node("process", Point(7, 7))

    flowchart.apply_positions({a.id: Point(100, 200), "ghost": Point(0, 0)})

    assert (a.x, a.y) == (100, 200)
    assert (b.x, b.y) == (7, 7)


def test_clear_removes_everything(flowchart):
    a = flowchart.add_node("start", Point(0, 0))
    b = flowchart.add_node("end", Point(0, 200))
    flowchart.add_edge(a.id, b.id)

    flowchart.clear()

    assert flowchart.nodes == []
    assert flowchart.edges == []


def test_to_dict_shape(flowchart):
    a = flowchart.add_node("start", Point(0, 0), label="Begin")
    b = flowchart.add_node("end", Point(0, 200))
    flowchart.add_edge(a.id, b.id)

    data = flowchart.to_dict()
    assert data["nodes"][0] == {"id": a.id, "kind": "start", "label": "Begin", "x": 0, "y": 0}
    assert data["edges"][0]["source"] == a.id
    assert data["edges"][0]["target"] == b.id
    assert data["edges"][0]["label"] is None
