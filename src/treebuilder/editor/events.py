"""Input events delivered by the UI shell.

Each event is a pydantic model tagged by ``type`` so a shell can send plain
dicts (or JSON) and have them validated through `parse_event`.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from ..core.exceptions import InvalidEventError
from ..flowchart.routing import Point


class HitKind(str, Enum):
    """Which element the pointer was over."""
    CANVAS = "canvas"
    NODE = "node"
    HANDLE = "handle"
    EDGE = "edge"


class Position(BaseModel):
    """Canvas-relative pointer position."""
    x: float = 0.0
    y: float = 0.0

    model_config = {"extra": "forbid"}

    def to_point(self) -> Point:
        return Point(self.x, self.y)


class HitTarget(BaseModel):
    kind: HitKind = HitKind.CANVAS
    target_id: Optional[str] = None

    model_config = {"extra": "forbid"}

    @property
    def node_id(self) -> Optional[str]:
        """Node under the pointer; a handle belongs to its node."""
        if self.kind in (HitKind.NODE, HitKind.HANDLE):
            return self.target_id
        return None


# -----------------------------------------------------------------------------
# Event definitions
# -----------------------------------------------------------------------------


class EventBase(BaseModel):
    model_config = {"extra": "forbid"}


class PointerDown(EventBase):
    type: Literal["pointer_down"] = "pointer_down"
    position: Position = Field(default_factory=Position)
    target: HitTarget = Field(default_factory=HitTarget)


class PointerMove(EventBase):
    type: Literal["pointer_move"] = "pointer_move"
    position: Position = Field(default_factory=Position)


class PointerUp(EventBase):
    type: Literal["pointer_up"] = "pointer_up"
    position: Position = Field(default_factory=Position)
    target: HitTarget = Field(default_factory=HitTarget)


class DoubleClick(EventBase):
    type: Literal["double_click"] = "double_click"
    position: Position = Field(default_factory=Position)
    target: HitTarget = Field(default_factory=HitTarget)


class Drop(EventBase):
    """A palette item dropped on the canvas; kind is checked by the editor."""
    type: Literal["drop"] = "drop"
    kind: str
    position: Position = Field(default_factory=Position)


class KeyDown(EventBase):
    type: Literal["key_down"] = "key_down"
    key: str


class LabelChanged(EventBase):
    type: Literal["label_changed"] = "label_changed"
    node_id: str
    text: str


class LabelCommitted(EventBase):
    """Inline label input lost focus or was confirmed."""
    type: Literal["label_committed"] = "label_committed"
    node_id: Optional[str] = None


class DeleteSelected(EventBase):
    type: Literal["delete_selected"] = "delete_selected"


class ClearCanvas(EventBase):
    type: Literal["clear_canvas"] = "clear_canvas"


class AutoLayout(EventBase):
    type: Literal["auto_layout"] = "auto_layout"
    canvas_width: Optional[float] = Field(default=None, gt=0)


InputEvent = Annotated[
    Union[
        PointerDown,
        PointerMove,
        PointerUp,
        DoubleClick,
        Drop,
        KeyDown,
        LabelChanged,
        LabelCommitted,
        DeleteSelected,
        ClearCanvas,
        AutoLayout,
    ],
    Field(discriminator="type"),
]

_EVENT_ADAPTER: TypeAdapter[Any] = TypeAdapter(InputEvent)


def parse_event(payload: Dict[str, Any]) -> InputEvent:
    try:
        return _EVENT_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise InvalidEventError(
            "Invalid input event",
            context={
                "type": payload.get("type") if isinstance(payload, dict) else None,
                "errors": [err["msg"] for err in exc.errors()],
            },
        ) from exc
