"""Line-oriented shell: one JSON input event per line, one JSON view per line out."""

from __future__ import annotations

import argparse
import json
import sys
from typing import IO, Optional, Sequence

from pydantic import ValidationError

from .config.settings import get_settings
from .core.exceptions import InvalidEventError
from .editor.events import Position, parse_event
from .editor.session import FlowchartEditor
from .utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _resolve_targets(editor: FlowchartEditor, payload: dict) -> dict:
    """Fill in the hit target for pointer events that only carry coordinates."""
    if payload.get("type") not in {"pointer_down", "pointer_up", "double_click"}:
        return payload
    if "target" in payload:
        return payload
    position = Position.model_validate(payload.get("position") or {})
    target = editor.hit_test(position.to_point())
    return {**payload, "target": target.model_dump(mode="json")}


def run(editor: FlowchartEditor, stream: IO[str], out: IO[str]) -> int:
    handled = 0
    for lineno, line in enumerate(stream, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            payload = json.loads(line)
            if not isinstance(payload, dict):
                raise InvalidEventError("Event must be a JSON object")
            event = parse_event(_resolve_targets(editor, payload))
        except (json.JSONDecodeError, InvalidEventError, ValidationError) as exc:
            logger.warning("Skipping line", extra={"line": lineno, "error": str(exc)})
            continue

        editor.dispatch(event)
        handled += 1
        out.write(json.dumps(editor.snapshot().to_dict()) + "\n")
    return handled


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="TreeBuilder event shell")
    parser.add_argument("events", nargs="?", help="File with one JSON event per line (default: stdin)")
    parser.add_argument("--canvas-width", type=float, help="Canvas width used to center auto-layout")
    parser.add_argument("--log-level", help="Root log level (default from settings)")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log records")
    args = parser.parse_args(argv)

    overrides = {}
    if args.canvas_width:
        overrides["canvas_width"] = args.canvas_width
    settings = get_settings(**overrides)
    configure_logging(
        level=args.log_level or settings.log_level,
        json_logs=args.json_logs or settings.json_logs,
    )

    editor = FlowchartEditor(settings)
    if args.events:
        with open(args.events, "r", encoding="utf-8") as stream:
            run(editor, stream, sys.stdout)
    else:
        run(editor, sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
