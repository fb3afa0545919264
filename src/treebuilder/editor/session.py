"""Editor session: the single owner of graph, selection and gesture state.

The UI shell feeds input events to `FlowchartEditor.dispatch` and reads back
`FlowchartEditor.snapshot()` for rendering. All state changes go through the
named handlers below; nothing else mutates the flowchart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config.settings import Settings, get_settings
from ..core.exceptions import UnknownNodeKindError
from ..flowchart.layout import LayoutResult, layout_flowchart
from ..flowchart.model import FlowEdge, Flowchart, FlowNode, NodeKind
from ..flowchart.routing import (
    CubicPath,
    NodePoint,
    Point,
    label_anchor,
    path_hit,
    route_between,
)
from ..utils.logging import get_logger
from .events import (
    AutoLayout,
    ClearCanvas,
    DeleteSelected,
    DoubleClick,
    Drop,
    HitKind,
    HitTarget,
    InputEvent,
    KeyDown,
    LabelChanged,
    LabelCommitted,
    PointerDown,
    PointerMove,
    PointerUp,
)
from .pointer import PointerController
from .selection import Selection, SelectionMachine, SelectionPhase

logger = get_logger(__name__)

DELETE_KEYS = frozenset({"Delete", "Backspace"})
CONFIRM_KEY = "Enter"


@dataclass
class EdgeView:
    id: str
    source: str
    target: str
    label: Optional[str]
    path: CubicPath
    label_position: Point

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "label": self.label,
            "path": self.path.to_svg(),
            "label_position": {"x": self.label_position.x, "y": self.label_position.y},
        }


@dataclass
class EditorView:
    """Everything a shell needs to draw one frame."""

    nodes: List[Dict[str, Any]] = field(default_factory=list)
    edges: List[EdgeView] = field(default_factory=list)
    selection: Optional[Selection] = None
    editing_id: Optional[str] = None
    phase: SelectionPhase = SelectionPhase.IDLE
    mode: str = "idle"
    preview: Optional[CubicPath] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": self.nodes,
            "edges": [edge.to_dict() for edge in self.edges],
            "selection": self.selection.to_dict() if self.selection else None,
            "editing_id": self.editing_id,
            "phase": self.phase.value,
            "mode": self.mode,
            "preview": self.preview.to_svg() if self.preview else None,
        }


class FlowchartEditor:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        flowchart: Optional[Flowchart] = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        self.flowchart = flowchart if flowchart is not None else Flowchart()
        self.selection = SelectionMachine()
        self.pointer = PointerController(
            self.flowchart,
            grid_size=self.settings.grid_size,
            node_width=self.settings.node_width,
            node_height=self.settings.node_height,
            tangent=self.settings.route_tangent,
        )

    # ------------------------------------------------------------------
    # Event routing
    # ------------------------------------------------------------------

    def dispatch(self, event: InputEvent) -> None:
        logger.debug("Dispatching event", extra={"event_type": event.type})
        if isinstance(event, PointerDown):
            self.pointer_down(event.position.to_point(), event.target)
        elif isinstance(event, PointerMove):
            self.pointer_move(event.position.to_point())
        elif isinstance(event, PointerUp):
            self.pointer_up(event.target)
        elif isinstance(event, DoubleClick):
            self.double_click(event.target)
        elif isinstance(event, Drop):
            self.drop(event.kind, event.position.to_point())
        elif isinstance(event, KeyDown):
            self.key_down(event.key)
        elif isinstance(event, LabelChanged):
            self.change_label(event.node_id, event.text)
        elif isinstance(event, LabelCommitted):
            self.commit_label(event.node_id)
        elif isinstance(event, DeleteSelected):
            self.delete_selected()
        elif isinstance(event, ClearCanvas):
            self.clear()
        elif isinstance(event, AutoLayout):
            self.auto_layout(event.canvas_width)
        else:
            raise TypeError(f"Unsupported event: {event!r}")

    # ------------------------------------------------------------------
    # Pointer
    # ------------------------------------------------------------------

    def pointer_down(self, position: Point, target: HitTarget) -> None:
        if target.kind is HitKind.HANDLE and target.target_id:
            self._press_handle(target.target_id)
        elif target.kind is HitKind.NODE and target.target_id:
            self._press_node(target.target_id, position)
        elif target.kind is HitKind.EDGE and target.target_id:
            self._press_edge(target.target_id)
        else:
            self.selection.press_canvas()

    def _press_node(self, node_id: str, position: Point) -> None:
        if node_id not in self.flowchart:
            return
        if self.selection.editing_id == node_id:
            # Presses inside the label input belong to the text field.
            return
        if not self.pointer.is_idle:
            return
        self.selection.press_node(node_id)
        self.pointer.begin_drag(node_id, position)

    def _press_handle(self, node_id: str) -> None:
        if node_id not in self.flowchart:
            return
        if self.selection.editing_id == node_id:
            # The handle is hidden while its node is being edited.
            return
        if self.selection.is_editing:
            self.selection.commit_edit()
        self.pointer.begin_connection(node_id)

    def _press_edge(self, edge_id: str) -> None:
        if self.flowchart.get_edge(edge_id) is None:
            return
        self.selection.select_edge(edge_id)

    def pointer_move(self, position: Point) -> None:
        self.pointer.move(position)

    def pointer_up(self, target: Optional[HitTarget] = None) -> Optional[FlowEdge]:
        node_id = target.node_id if target is not None else None
        return self.pointer.release(node_id)

    def double_click(self, target: HitTarget) -> None:
        node_id = target.node_id
        if node_id is None or node_id not in self.flowchart:
            return
        self.pointer.cancel_drag()
        self.selection.begin_edit(node_id)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def drop(self, kind: str, position: Point) -> Optional[FlowNode]:
        """Create a node centered under the drop point and select it."""
        try:
            node_kind = NodeKind.parse(kind)
        except UnknownNodeKindError as exc:
            logger.debug("Ignoring drop", extra={"reason": str(exc)})
            return None
        top_left = Point(
            position.x - self.settings.node_width / 2,
            position.y - self.settings.node_height / 2,
        )
        node = self.flowchart.add_node(node_kind, top_left)
        self.selection.select_node(node.id)
        return node

    def key_down(self, key: str) -> None:
        if key in DELETE_KEYS:
            if self.selection.is_editing:
                return
            self._delete_selection()
        elif key == CONFIRM_KEY and self.selection.is_editing:
            self.selection.commit_edit()

    def change_label(self, node_id: str, text: str) -> bool:
        return self.flowchart.relabel_node(node_id, text)

    def commit_label(self, node_id: Optional[str] = None) -> None:
        editing_id = self.selection.editing_id
        if editing_id is None:
            return
        if node_id is None or node_id == editing_id:
            self.selection.commit_edit()

    def delete_selected(self) -> bool:
        # Activating the delete button takes focus away from an open label input.
        if self.selection.is_editing:
            self.selection.commit_edit()
        return self._delete_selection()

    def _delete_selection(self) -> bool:
        removed = self.selection.delete_selected(self.flowchart)
        self._forget_missing()
        return removed

    def delete_node(self, node_id: str) -> bool:
        removed = self.flowchart.delete_node(node_id)
        self._forget_missing()
        return removed

    def delete_edge(self, edge_id: str) -> bool:
        removed = self.flowchart.delete_edge(edge_id)
        self._forget_missing()
        return removed

    def clear(self) -> None:
        self.flowchart.clear()
        self._forget_missing()
        logger.info("Canvas cleared")

    def auto_layout(self, canvas_width: Optional[float] = None) -> LayoutResult:
        settings = self.settings
        return layout_flowchart(
            self.flowchart,
            canvas_width=canvas_width or settings.canvas_width,
            node_width=settings.node_width,
            node_height=settings.node_height,
            horizontal_gap=settings.horizontal_gap,
            vertical_gap=settings.vertical_gap,
            top_margin=settings.top_margin,
        )

    def _forget_missing(self) -> None:
        self.selection.forget_missing(self.flowchart)
        self.pointer.forget_missing()

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def edge_path(self, edge: FlowEdge) -> Optional[CubicPath]:
        source = self.flowchart.get_node(edge.source)
        target = self.flowchart.get_node(edge.target)
        if source is None or target is None:
            return None
        return route_between(
            NodePoint(source),
            NodePoint(target),
            width=self.settings.node_width,
            height=self.settings.node_height,
            tangent=self.settings.route_tangent,
        )

    def handle_center(self, node: FlowNode) -> Point:
        return Point(node.x + self.settings.node_width, node.y + self.settings.node_height / 2)

    def hit_test(self, point: Point) -> HitTarget:
        """Resolve the element under point, topmost first.

        For shells that only report raw coordinates. Nodes are drawn above
        edges, later nodes above earlier ones, and a handle above its node.
        """
        width = self.settings.node_width
        height = self.settings.node_height
        half_handle = self.settings.handle_size / 2

        for node in reversed(self.flowchart.nodes):
            if node.id != self.selection.editing_id:
                handle = self.handle_center(node)
                if abs(point.x - handle.x) <= half_handle and abs(point.y - handle.y) <= half_handle:
                    return HitTarget(kind=HitKind.HANDLE, target_id=node.id)
            if node.x <= point.x <= node.x + width and node.y <= point.y <= node.y + height:
                return HitTarget(kind=HitKind.NODE, target_id=node.id)

        for edge in reversed(self.flowchart.edges):
            path = self.edge_path(edge)
            if path is not None and path_hit(path, point, self.settings.edge_hit_width):
                return HitTarget(kind=HitKind.EDGE, target_id=edge.id)

        return HitTarget(kind=HitKind.CANVAS)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def snapshot(self) -> EditorView:
        edges: List[EdgeView] = []
        for edge in self.flowchart.edges:
            path = self.edge_path(edge)
            if path is None:
                continue
            edges.append(
                EdgeView(
                    id=edge.id,
                    source=edge.source,
                    target=edge.target,
                    label=edge.label,
                    path=path,
                    label_position=label_anchor(path.start, path.end),
                )
            )
        return EditorView(
            nodes=[node.to_dict() for node in self.flowchart.nodes],
            edges=edges,
            selection=self.selection.selection,
            editing_id=self.selection.editing_id,
            phase=self.selection.phase,
            mode=self.pointer.mode.name,
            preview=self.pointer.preview_path(),
        )
