"""Selection and inline-edit state machine.

Holds at most one selected entity (node or edge) and at most one node in
inline label edit. An editing node is always the selected node.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..flowchart.model import Flowchart
from ..utils.logging import get_logger

logger = get_logger(__name__)


class SelectionKind(str, Enum):
    NODE = "node"
    EDGE = "edge"


class SelectionPhase(str, Enum):
    IDLE = "idle"
    NODE_SELECTED = "node_selected"
    EDGE_SELECTED = "edge_selected"
    EDITING = "editing"


@dataclass(frozen=True)
class Selection:
    target_id: str
    kind: SelectionKind

    def to_dict(self) -> dict:
        return {"target_id": self.target_id, "kind": self.kind.value}


class SelectionMachine:
    """Named transitions over (selection, editing_id)."""

    def __init__(self) -> None:
        self._selection: Optional[Selection] = None
        self._editing_id: Optional[str] = None

    @property
    def selection(self) -> Optional[Selection]:
        return self._selection

    @property
    def editing_id(self) -> Optional[str]:
        return self._editing_id

    @property
    def phase(self) -> SelectionPhase:
        if self._editing_id is not None:
            return SelectionPhase.EDITING
        if self._selection is None:
            return SelectionPhase.IDLE
        if self._selection.kind is SelectionKind.NODE:
            return SelectionPhase.NODE_SELECTED
        return SelectionPhase.EDGE_SELECTED

    @property
    def is_editing(self) -> bool:
        return self._editing_id is not None

    @property
    def selected_node_id(self) -> Optional[str]:
        if self._selection and self._selection.kind is SelectionKind.NODE:
            return self._selection.target_id
        return None

    @property
    def selected_edge_id(self) -> Optional[str]:
        if self._selection and self._selection.kind is SelectionKind.EDGE:
            return self._selection.target_id
        return None

    def reset(self) -> None:
        self._selection = None
        self._editing_id = None

    def press_canvas(self) -> None:
        self.reset()

    def press_node(self, node_id: str) -> None:
        if self._editing_id != node_id:
            self._editing_id = None
        self._selection = Selection(node_id, SelectionKind.NODE)

    def select_node(self, node_id: str) -> None:
        self._editing_id = None
        self._selection = Selection(node_id, SelectionKind.NODE)

    def select_edge(self, edge_id: str) -> None:
        self._editing_id = None
        self._selection = Selection(edge_id, SelectionKind.EDGE)

    def begin_edit(self, node_id: str) -> None:
        self._selection = Selection(node_id, SelectionKind.NODE)
        self._editing_id = node_id

    def commit_edit(self) -> None:
        """Leave inline edit; the edited node stays selected."""
        self._editing_id = None

    def delete_selected(self, flowchart: Flowchart) -> bool:
        """Delete whatever is selected. Suppressed while a label is being edited."""
        if self._editing_id is not None:
            return False
        selection = self._selection
        if selection is None:
            return False

        if selection.kind is SelectionKind.NODE:
            removed = flowchart.delete_node(selection.target_id)
        else:
            removed = flowchart.delete_edge(selection.target_id)
        self.reset()
        logger.debug(
            "Deleted selection",
            extra={"target_id": selection.target_id, "kind": selection.kind, "removed": removed},
        )
        return removed

    def forget_missing(self, flowchart: Flowchart) -> None:
        """Drop selection/edit targets that are no longer in the graph."""
        if self._editing_id is not None and self._editing_id not in flowchart:
            self._editing_id = None
        selection = self._selection
        if selection is None:
            return
        if selection.kind is SelectionKind.NODE:
            gone = selection.target_id not in flowchart
        else:
            gone = flowchart.get_edge(selection.target_id) is None
        if gone:
            self.reset()
