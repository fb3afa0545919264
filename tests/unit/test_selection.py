from treebuilder.editor.selection import (
    Selection,
    SelectionKind,
    SelectionMachine,
    SelectionPhase,
)
from treebuilder.flowchart.routing import Point


class TestSelectionMachine:
    """Transitions between idle, selected and editing phases."""

    def setup_method(self):
        self.machine = SelectionMachine()

    def test_starts_idle(self):
        assert self.machine.phase is SelectionPhase.IDLE
        assert self.machine.selection is None
        assert self.machine.editing_id is None

    def test_press_node_selects_it(self):
        self.machine.press_node("a")

        assert self.machine.phase is SelectionPhase.NODE_SELECTED
        assert self.machine.selection == Selection("a", SelectionKind.NODE)

    def test_edge_selection_replaces_node_selection(self):
        self.machine.press_node("a")
        self.machine.select_edge("e1")

        assert self.machine.phase is SelectionPhase.EDGE_SELECTED
        assert self.machine.selected_edge_id == "e1"
        assert self.machine.selected_node_id is None

    def test_begin_edit_selects_the_node(self):
        self.machine.select_edge("e1")
        self.machine.begin_edit("a")

        assert self.machine.phase is SelectionPhase.EDITING
        assert self.machine.selected_node_id == "a"
        assert self.machine.editing_id == "a"

    def test_press_same_node_keeps_edit_session(self):
        self.machine.begin_edit("a")
        self.machine.press_node("a")

        assert self.machine.editing_id == "a"

    def test_press_other_node_ends_edit_session(self):
        self.machine.begin_edit("a")
        self.machine.press_node("b")

        assert self.machine.editing_id is None
        assert self.machine.selected_node_id == "b"

    def test_commit_edit_keeps_node_selected(self):
        self.machine.begin_edit("a")
        self.machine.commit_edit()

        assert self.machine.phase is SelectionPhase.NODE_SELECTED
        assert self.machine.selected_node_id == "a"

    def test_press_canvas_clears_everything(self):
        self.machine.begin_edit("a")
        self.machine.press_canvas()

        assert self.machine.phase is SelectionPhase.IDLE
        assert self.machine.editing_id is None


def test_delete_selected_node_cascades(flowchart):
    machine = SelectionMachine()
    a = flowchart.add_node("start", Point(0, 0))
    b = flowchart.add_node("end", Point(0, 200))
    flowchart.add_edge(a.id, b.id)
    machine.press_node(a.id)

    assert machine.delete_selected(flowchart) is True

    assert a.id not in flowchart
    assert flowchart.edges == []
    assert machine.phase is SelectionPhase.IDLE


def test_delete_selected_edge_keeps_nodes(flowchart):
    machine = SelectionMachine()
    a = flowchart.add_node("start", Point(0, 0))
    b = flowchart.add_node("end", Point(0, 200))
    edge = flowchart.add_edge(a.id, b.id)
    machine.select_edge(edge.id)

    assert machine.delete_selected(flowchart) is True

    assert flowchart.edges == []
    assert len(flowchart) == 2
    assert machine.selection is None


def test_delete_is_suppressed_while_editing(flowchart):
    machine = SelectionMachine()
    a = flowchart.add_node("process", Point(0, 0))
    machine.begin_edit(a.id)

    assert machine.delete_selected(flowchart) is False

    assert a.id in flowchart
    assert machine.editing_id == a.id


def test_delete_with_nothing_selected_is_noop(flowchart):
    machine = SelectionMachine()
    flowchart.add_node("process", Point(0, 0))

    assert machine.delete_selected(flowchart) is False
    assert len(flowchart) == 1


def test_forget_missing_drops_deleted_targets(flowchart):
    machine = SelectionMachine()
    a = flowchart.add_node("process", Point(0, 0))
    machine.begin_edit(a.id)

    flowchart.delete_node(a.id)
    machine.forget_missing(flowchart)

    assert machine.phase is SelectionPhase.IDLE


def test_forget_missing_keeps_live_selection(flowchart):
    machine = SelectionMachine()
    a = flowchart.add_node("process", Point(0, 0))
    b = flowchart.add_node("process", Point(0, 200))
    edge = flowchart.add_edge(a.id, b.id)
    machine.select_edge(edge.id)

    machine.forget_missing(flowchart)

    assert machine.selected_edge_id == edge.id
