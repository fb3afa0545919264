"""Interactive editing: input events, selection, pointer gestures and the session.

Usage:
    from treebuilder.editor import FlowchartEditor, parse_event

    editor = FlowchartEditor()
    editor.dispatch(parse_event({"type": "drop", "kind": "start", "position": {"x": 200, "y": 120}}))
    view = editor.snapshot()
"""

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
    Position,
    parse_event,
)
from .pointer import (
    ConnectingMode,
    DraggingMode,
    IdleMode,
    PointerController,
    snap,
    snap_point,
)
from .selection import Selection, SelectionKind, SelectionMachine, SelectionPhase
from .session import EdgeView, EditorView, FlowchartEditor

__all__ = [
    "AutoLayout",
    "ClearCanvas",
    "DeleteSelected",
    "DoubleClick",
    "Drop",
    "HitKind",
    "HitTarget",
    "InputEvent",
    "KeyDown",
    "LabelChanged",
    "LabelCommitted",
    "PointerDown",
    "PointerMove",
    "PointerUp",
    "Position",
    "parse_event",
    "ConnectingMode",
    "DraggingMode",
    "IdleMode",
    "PointerController",
    "snap",
    "snap_point",
    "Selection",
    "SelectionKind",
    "SelectionMachine",
    "SelectionPhase",
    "EdgeView",
    "EditorView",
    "FlowchartEditor",
]
