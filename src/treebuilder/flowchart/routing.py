"""Edge geometry: anchor points, cubic routing and hit-testing.

Everything here is pure. The same `route()` output feeds committed edges, the
live connection preview and click hit-testing, so the three never diverge.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Tuple, Union

from ..core.constants import EDGE_HIT_WIDTH, ROUTE_TANGENT

if TYPE_CHECKING:
    from .model import FlowNode

DEFAULT_TANGENT = ROUTE_TANGENT


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class NodePoint:
    """Route endpoint anchored at a node's center."""

    node: "FlowNode"


@dataclass(frozen=True)
class FreePoint:
    """Route endpoint at a raw canvas position (e.g. the live pointer)."""

    point: Point


Endpoint = Union[NodePoint, FreePoint]


def node_center(node: "FlowNode", width: float, height: float) -> Point:
    return Point(node.x + width / 2, node.y + height / 2)


def anchor(endpoint: Endpoint, width: float, height: float) -> Point:
    """Resolve an endpoint to the canvas point a path starts or ends at."""
    if isinstance(endpoint, NodePoint):
        return node_center(endpoint.node, width, height)
    if isinstance(endpoint, FreePoint):
        return endpoint.point
    raise TypeError(f"Unsupported route endpoint: {endpoint!r}")


def _fmt(value: float) -> str:
    value = round(float(value), 3)
    if value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class CubicPath:
    start: Point
    control1: Point
    control2: Point
    end: Point

    def to_svg(self) -> str:
        return (
            f"M {_fmt(self.start.x)} {_fmt(self.start.y)} "
            f"C {_fmt(self.control1.x)} {_fmt(self.control1.y)}, "
            f"{_fmt(self.control2.x)} {_fmt(self.control2.y)}, "
            f"{_fmt(self.end.x)} {_fmt(self.end.y)}"
        )

    def point_at(self, t: float) -> Point:
        u = 1.0 - t
        a = u * u * u
        b = 3 * u * u * t
        c = 3 * u * t * t
        d = t * t * t
        return Point(
            a * self.start.x + b * self.control1.x + c * self.control2.x + d * self.end.x,
            a * self.start.y + b * self.control1.y + c * self.control2.y + d * self.end.y,
        )

    def sample(self, segments: int = 32) -> List[Point]:
        segments = max(1, segments)
        return [self.point_at(i / segments) for i in range(segments + 1)]


def route(p1: Point, p2: Point, tangent: float = DEFAULT_TANGENT) -> CubicPath:
    """Route a cubic curve from p1 to p2.

    Mostly-vertical pairs (|dy| > |dx|) get vertical tangents at both ends,
    everything else gets horizontal tangents.
    """
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    if abs(dy) > abs(dx):
        return CubicPath(
            start=p1,
            control1=Point(p1.x, p1.y + tangent),
            control2=Point(p2.x, p2.y - tangent),
            end=p2,
        )
    return CubicPath(
        start=p1,
        control1=Point(p1.x + tangent, p1.y),
        control2=Point(p2.x - tangent, p2.y),
        end=p2,
    )


def route_between(
    source: Endpoint,
    target: Endpoint,
    *,
    width: float,
    height: float,
    tangent: float = DEFAULT_TANGENT,
) -> CubicPath:
    return route(anchor(source, width, height), anchor(target, width, height), tangent)


def label_anchor(p1: Point, p2: Point) -> Point:
    """Where an edge label is drawn: the straight midpoint between anchors."""
    return Point((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)


def _point_to_segment_distance(point: Point, start: Point, end: Point) -> float:
    dx, dy = end.x - start.x, end.y - start.y
    if dx == 0 and dy == 0:
        return math.hypot(point.x - start.x, point.y - start.y)
    t = ((point.x - start.x) * dx + (point.y - start.y) * dy) / (dx * dx + dy * dy)
    t = max(0.0, min(1.0, t))
    return math.hypot(point.x - (start.x + t * dx), point.y - (start.y + t * dy))


def distance_to_path(path: CubicPath, point: Point, segments: int = 32) -> float:
    samples = path.sample(segments)
    return min(
        _point_to_segment_distance(point, a, b) for a, b in zip(samples, samples[1:])
    )


def path_hit(path: CubicPath, point: Point, stroke_width: float = EDGE_HIT_WIDTH) -> bool:
    """True when point falls inside the path drawn with a stroke of stroke_width."""
    return distance_to_path(path, point) <= stroke_width / 2
