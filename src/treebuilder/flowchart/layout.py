"""Hierarchical auto-layout.

Nodes are leveled by breadth-first depth from the roots, grouped into rows,
ordered under their parents and centered on the canvas. Nodes no root can
reach are reported in `LayoutResult.unplaced` and keep their positions.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Tuple

from ..core.constants import (
    CANVAS_WIDTH,
    HORIZONTAL_GAP,
    NODE_HEIGHT,
    NODE_WIDTH,
    TOP_MARGIN,
    VERTICAL_GAP,
)
from ..utils.logging import get_logger
from .model import Flowchart
from .routing import Point

logger = get_logger(__name__)


@dataclass
class LayoutResult:
    levels: Dict[str, int] = field(default_factory=dict)
    rows: List[List[str]] = field(default_factory=list)
    positions: Dict[str, Point] = field(default_factory=dict)
    unplaced: List[str] = field(default_factory=list)


def _parents(flowchart: Flowchart) -> Dict[str, List[str]]:
    parents: Dict[str, List[str]] = {node.id: [] for node in flowchart.nodes}
    for edge in flowchart.edges:
        parents.setdefault(edge.target, []).append(edge.source)
    return parents


def _children(flowchart: Flowchart) -> Dict[str, List[str]]:
    children: Dict[str, List[str]] = {node.id: [] for node in flowchart.nodes}
    for edge in flowchart.edges:
        children.setdefault(edge.source, []).append(edge.target)
    return children


def find_roots(flowchart: Flowchart, parents: Dict[str, List[str]]) -> List[str]:
    roots = [node.id for node in flowchart.nodes if not parents.get(node.id)]
    if not roots and flowchart.nodes:
        # Every node has a parent (e.g. a pure cycle): start from the first one.
        roots = [flowchart.nodes[0].id]
    return roots


def assign_levels(flowchart: Flowchart) -> Dict[str, int]:
    """BFS depth from all roots at once; the first dequeue of a node wins."""
    children = _children(flowchart)
    roots = find_roots(flowchart, _parents(flowchart))

    levels: Dict[str, int] = {}
    queue: Deque[Tuple[str, int]] = deque((root, 0) for root in roots)
    while queue:
        node_id, level = queue.popleft()
        if node_id in levels:
            continue
        levels[node_id] = level
        for child_id in children.get(node_id, []):
            queue.append((child_id, level + 1))
    return levels


def group_rows(flowchart: Flowchart, levels: Dict[str, int]) -> List[List[str]]:
    if not levels:
        return []
    rows: List[List[str]] = [[] for _ in range(max(levels.values()) + 1)]
    for node in flowchart.nodes:
        level = levels.get(node.id)
        if level is not None:
            rows[level].append(node.id)
    return rows


def _avg_parent_x(
    positions: Dict[str, Point], parent_ids: List[str]
) -> Optional[float]:
    if not parent_ids:
        return None
    # A parent not placed yet (same row or below) counts as x=0.
    total = sum(positions[pid].x if pid in positions else 0.0 for pid in parent_ids)
    return total / len(parent_ids)


def _row_sort_key(
    positions: Dict[str, Point], parents: Dict[str, List[str]]
):
    def key(node_id: str) -> Tuple[int, float]:
        avg = _avg_parent_x(positions, parents.get(node_id, []))
        if avg is None:
            return (1, 0.0)
        return (0, avg)

    return key


def compute_layout(
    flowchart: Flowchart,
    *,
    canvas_width: float = CANVAS_WIDTH,
    node_width: float = NODE_WIDTH,
    node_height: float = NODE_HEIGHT,
    horizontal_gap: float = HORIZONTAL_GAP,
    vertical_gap: float = VERTICAL_GAP,
    top_margin: float = TOP_MARGIN,
) -> LayoutResult:
    """Compute new positions without touching the flowchart."""
    if not flowchart.nodes:
        return LayoutResult()

    levels = assign_levels(flowchart)
    rows = group_rows(flowchart, levels)
    parents = _parents(flowchart)
    center_x = canvas_width / 2

    positions: Dict[str, Point] = {}
    for level, row in enumerate(rows):
        if level > 0:
            row.sort(key=_row_sort_key(positions, parents))

        total_width = len(row) * node_width + (len(row) - 1) * horizontal_gap
        current_x = center_x - total_width / 2
        y = top_margin + level * (node_height + vertical_gap)
        for node_id in row:
            positions[node_id] = Point(current_x, y)
            current_x += node_width + horizontal_gap

    unplaced = [node.id for node in flowchart.nodes if node.id not in levels]
    return LayoutResult(levels=levels, rows=rows, positions=positions, unplaced=unplaced)


def layout_flowchart(flowchart: Flowchart, **options: float) -> LayoutResult:
    """Compute the layout and commit every position in one batch."""
    result = compute_layout(flowchart, **options)
    if not result.positions:
        return result

    flowchart.apply_positions(result.positions)
    logger.info(
        "Auto-layout applied",
        extra={
            "nodes": len(result.positions),
            "levels": len(result.rows),
            "unplaced": len(result.unplaced),
        },
    )
    return result
