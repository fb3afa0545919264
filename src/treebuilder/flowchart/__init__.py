"""Flowchart domain models, routing and layout."""

from .model import (
    DECISION_NO,
    DECISION_YES,
    FlowEdge,
    Flowchart,
    FlowNode,
    NodeKind,
    decision_label,
    generate_id,
)
from .layout import LayoutResult, assign_levels, compute_layout, layout_flowchart
from .routing import (
    CubicPath,
    FreePoint,
    NodePoint,
    Point,
    anchor,
    label_anchor,
    path_hit,
    route,
    route_between,
)

__all__ = [
    "DECISION_NO",
    "DECISION_YES",
    "FlowEdge",
    "Flowchart",
    "FlowNode",
    "NodeKind",
    "decision_label",
    "generate_id",
    "LayoutResult",
    "assign_levels",
    "compute_layout",
    "layout_flowchart",
    "CubicPath",
    "FreePoint",
    "NodePoint",
    "Point",
    "anchor",
    "label_anchor",
    "path_hit",
    "route",
    "route_between",
]
