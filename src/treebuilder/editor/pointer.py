"""Pointer gestures: node dragging and connection drawing.

Exactly one of three modes is active. Every press that starts a gesture is
closed by the next global release, wherever the pointer is at that moment.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Union

from ..core.constants import GRID_SIZE, NODE_HEIGHT, NODE_WIDTH
from ..flowchart.model import FlowEdge, Flowchart
from ..flowchart.routing import (
    DEFAULT_TANGENT,
    CubicPath,
    FreePoint,
    NodePoint,
    Point,
    route_between,
)
from ..utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class IdleMode:
    name = "idle"


@dataclass(frozen=True)
class DraggingMode:
    node_id: str
    grab_offset: Point
    name = "dragging"


@dataclass(frozen=True)
class ConnectingMode:
    source_id: str
    name = "connecting"


InteractionMode = Union[IdleMode, DraggingMode, ConnectingMode]


def snap(value: float, grid: int = GRID_SIZE) -> int:
    """Round to the nearest grid multiple, halves rounding up."""
    return math.floor(value / grid + 0.5) * grid


def snap_point(point: Point, grid: int = GRID_SIZE) -> Point:
    return Point(snap(point.x, grid), snap(point.y, grid))


class PointerController:
    def __init__(
        self,
        flowchart: Flowchart,
        *,
        grid_size: int = GRID_SIZE,
        node_width: float = NODE_WIDTH,
        node_height: float = NODE_HEIGHT,
        tangent: float = DEFAULT_TANGENT,
    ) -> None:
        self.flowchart = flowchart
        self.grid_size = grid_size
        self.node_width = node_width
        self.node_height = node_height
        self.tangent = tangent
        self.mode: InteractionMode = IdleMode()
        self.pointer = Point(0, 0)

    @property
    def is_idle(self) -> bool:
        return isinstance(self.mode, IdleMode)

    def move(self, position: Point) -> None:
        self.pointer = position
        mode = self.mode
        if isinstance(mode, DraggingMode):
            target = snap_point(position - mode.grab_offset, self.grid_size)
            self.flowchart.move_node(mode.node_id, target)

    def begin_drag(self, node_id: str, position: Point) -> bool:
        if not self.is_idle:
            return False
        node = self.flowchart.get_node(node_id)
        if node is None:
            return False
        self.pointer = position
        self.mode = DraggingMode(node_id=node_id, grab_offset=position - node.position)
        return True

    def begin_connection(self, node_id: str) -> bool:
        if not self.is_idle or node_id not in self.flowchart:
            return False
        self.mode = ConnectingMode(source_id=node_id)
        return True

    def cancel_drag(self) -> None:
        if isinstance(self.mode, DraggingMode):
            self.mode = IdleMode()

    def release(self, target_node_id: Optional[str] = None) -> Optional[FlowEdge]:
        """End whatever gesture is active.

        A connection is resolved before a drag: a release on a node other than
        the source commits an edge, anything else discards it.
        """
        mode = self.mode
        self.mode = IdleMode()

        if isinstance(mode, ConnectingMode):
            if target_node_id is None or target_node_id == mode.source_id:
                logger.debug("Connection discarded", extra={"source": mode.source_id})
                return None
            return self.flowchart.add_edge(mode.source_id, target_node_id)
        return None

    def preview_path(self) -> Optional[CubicPath]:
        mode = self.mode
        if not isinstance(mode, ConnectingMode):
            return None
        source = self.flowchart.get_node(mode.source_id)
        if source is None:
            return None
        return route_between(
            NodePoint(source),
            FreePoint(self.pointer),
            width=self.node_width,
            height=self.node_height,
            tangent=self.tangent,
        )

    def forget_missing(self) -> None:
        mode = self.mode
        if isinstance(mode, DraggingMode) and mode.node_id not in self.flowchart:
            self.mode = IdleMode()
        elif isinstance(mode, ConnectingMode) and mode.source_id not in self.flowchart:
            self.mode = IdleMode()
