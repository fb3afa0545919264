"""Flowchart graph model.

Nodes and edges live in plain ordered lists. Removals build new lists and
swap them in, so a reader never sees an edge whose endpoint is gone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Union
from uuid import uuid4

from ..core.exceptions import UnknownNodeKindError
from ..utils.logging import get_logger
from .routing import Point

logger = get_logger(__name__)

DECISION_YES = "Yes"
DECISION_NO = "No"


def generate_id() -> str:
    """Generate an opaque node/edge id."""
    return uuid4().hex


class NodeKind(str, Enum):
    START = "start"
    PROCESS = "process"
    DECISION = "decision"
    END = "end"

    @classmethod
    def parse(cls, value: Union["NodeKind", str]) -> "NodeKind":
        if isinstance(value, NodeKind):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownNodeKindError(
                f"Unknown node kind: {value!r}",
                context={"allowed": [kind.value for kind in cls]},
            ) from None

    @property
    def default_label(self) -> str:
        return self.value.capitalize()


def _coerce_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def _unique_id(prefix: str, used: set[str]) -> str:
    idx = 1
    base = prefix or "node"
    candidate = f"{base}_{idx}"
    while candidate in used:
        idx += 1
        candidate = f"{base}_{idx}"
    used.add(candidate)
    return candidate


@dataclass
class FlowNode:
    id: str
    kind: NodeKind
    label: str
    x: float = 0.0
    y: float = 0.0

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "label": self.label,
            "x": self.x,
            "y": self.y,
        }


@dataclass
class FlowEdge:
    id: str
    source: str
    target: str
    label: Optional[str] = None

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "label": self.label,
        }


def decision_label(source: FlowNode, target: FlowNode) -> Optional[str]:
    """Branch label for a new edge: decision targets on the left are "No"."""
    if source.kind is not NodeKind.DECISION:
        return None
    return DECISION_NO if target.x < source.x else DECISION_YES


@dataclass
class Flowchart:
    nodes: List[FlowNode] = field(default_factory=list)
    edges: List[FlowEdge] = field(default_factory=list)
    id_factory: Callable[[], str] = field(default=generate_id, repr=False, compare=False)
    _issued: set[str] = field(default_factory=set, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._issued.update(node.id for node in self.nodes)
        self._issued.update(edge.id for edge in self.edges)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return any(node.id == node_id for node in self.nodes)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_node(self, node_id: str) -> Optional[FlowNode]:
        return next((node for node in self.nodes if node.id == node_id), None)

    def get_edge(self, edge_id: str) -> Optional[FlowEdge]:
        return next((edge for edge in self.edges if edge.id == edge_id), None)

    def find_edge(self, source_id: str, target_id: str) -> Optional[FlowEdge]:
        return next(
            (e for e in self.edges if e.source == source_id and e.target == target_id),
            None,
        )

    def edges_for_node(self, node_id: str) -> List[FlowEdge]:
        return [edge for edge in self.edges if edge.touches(node_id)]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _new_id(self) -> str:
        candidate = self.id_factory()
        while candidate in self._issued:
            candidate = self.id_factory()
        self._issued.add(candidate)
        return candidate

    def add_node(
        self,
        kind: Union[NodeKind, str],
        position: Point,
        label: Optional[str] = None,
    ) -> FlowNode:
        node_kind = NodeKind.parse(kind)
        node = FlowNode(
            id=self._new_id(),
            kind=node_kind,
            label=node_kind.default_label if label is None else label,
            x=position.x,
            y=position.y,
        )
        self.nodes = [*self.nodes, node]
        logger.debug("Node added", extra={"node_id": node.id, "kind": node_kind.value})
        return node

    def add_edge(self, source_id: str, target_id: str) -> Optional[FlowEdge]:
        """Connect source to target.

        Returns None (and changes nothing) for self-loops, duplicate
        (source, target) pairs and endpoints that are not in the graph.
        """
        if source_id == target_id:
            logger.debug("Ignoring self-loop", extra={"node_id": source_id})
            return None
        if self.find_edge(source_id, target_id) is not None:
            logger.debug(
                "Ignoring duplicate edge",
                extra={"source": source_id, "target": target_id},
            )
            return None
        source = self.get_node(source_id)
        target = self.get_node(target_id)
        if source is None or target is None:
            logger.debug(
                "Ignoring edge with missing endpoint",
                extra={"source": source_id, "target": target_id},
            )
            return None

        edge = FlowEdge(
            id=self._new_id(),
            source=source_id,
            target=target_id,
            label=decision_label(source, target),
        )
        self.edges = [*self.edges, edge]
        logger.debug("Edge added", extra={"edge_id": edge.id, "label": edge.label})
        return edge

    def move_node(self, node_id: str, position: Point) -> bool:
        node = self.get_node(node_id)
        if node is None:
            return False
        node.x = position.x
        node.y = position.y
        return True

    def relabel_node(self, node_id: str, text: str) -> bool:
        node = self.get_node(node_id)
        if node is None:
            return False
        node.label = text
        return True

    def delete_node(self, node_id: str) -> bool:
        """Remove a node together with every edge that references it."""
        if self.get_node(node_id) is None:
            return False
        new_nodes = [n for n in self.nodes if n.id != node_id]
        new_edges = [e for e in self.edges if not e.touches(node_id)]
        removed = len(self.edges) - len(new_edges)
        self.nodes, self.edges = new_nodes, new_edges
        logger.debug("Node deleted", extra={"node_id": node_id, "edges_removed": removed})
        return True

    def delete_edge(self, edge_id: str) -> bool:
        if self.get_edge(edge_id) is None:
            return False
        self.edges = [e for e in self.edges if e.id != edge_id]
        logger.debug("Edge deleted", extra={"edge_id": edge_id})
        return True

    def clear(self) -> None:
        self.nodes, self.edges = [], []
        logger.debug("Flowchart cleared")

    def apply_positions(self, positions: Dict[str, Point]) -> None:
        """Batch position update; nodes missing from positions keep theirs."""
        for node in self.nodes:
            new_pos = positions.get(node.id)
            if new_pos is not None:
                node.x = new_pos.x
                node.y = new_pos.y

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        *,
        id_factory: Callable[[], str] = generate_id,
    ) -> "Flowchart":
        nodes_raw: Iterable[Any] = data.get("nodes") or []
        edges_raw: Iterable[Any] = data.get("edges") or []

        nodes: List[FlowNode] = []
        used_ids: set[str] = set()

        for idx, node in enumerate(nodes_raw):
            if not isinstance(node, dict):
                continue
            raw_id = str(node.get("id") or f"n{idx + 1}")
            node_id = raw_id
            if node_id in used_ids:
                node_id = _unique_id(raw_id, used_ids)
            else:
                used_ids.add(node_id)

            try:
                kind = NodeKind.parse(node.get("kind") or node.get("type") or "process")
            except UnknownNodeKindError:
                kind = NodeKind.PROCESS

            raw_label = node.get("label")
            label = kind.default_label if raw_label is None else str(raw_label)
            x = _coerce_float(node.get("x")) or 0.0
            y = _coerce_float(node.get("y")) or 0.0

            nodes.append(FlowNode(id=node_id, kind=kind, label=label, x=x, y=y))

        node_ids = {node.id for node in nodes}
        edges: List[FlowEdge] = []
        seen_pairs: set[tuple[str, str]] = set()
        for edge in edges_raw:
            if not isinstance(edge, dict):
                continue
            source = edge.get("source") or edge.get("from")
            target = edge.get("target") or edge.get("to")
            if not source or not target:
                continue
            source, target = str(source), str(target)
            if source not in node_ids or target not in node_ids:
                continue
            if source == target or (source, target) in seen_pairs:
                continue
            seen_pairs.add((source, target))

            edge_id = str(edge.get("id") or f"{source}->{target}")
            if edge_id in used_ids:
                edge_id = _unique_id(edge_id, used_ids)
            else:
                used_ids.add(edge_id)

            raw_label = edge.get("label")
            label = str(raw_label) if raw_label else None
            edges.append(FlowEdge(id=edge_id, source=source, target=target, label=label))

        return cls(nodes=nodes, edges=edges, id_factory=id_factory)
