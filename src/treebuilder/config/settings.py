"""Application settings.

All configuration is sourced from environment variables (and optionally `.env`),
prefixed with ``TREEBUILDER_``. Defaults reproduce the stock canvas geometry.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core import constants
from ..core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Typed environment-backed settings for the editor."""

    model_config = SettingsConfigDict(
        env_prefix="TREEBUILDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Node geometry
    node_width: float = Field(default=constants.NODE_WIDTH, gt=0)
    node_height: float = Field(default=constants.NODE_HEIGHT, gt=0)

    # Interaction
    grid_size: int = Field(default=constants.GRID_SIZE, gt=0)
    handle_size: float = Field(default=constants.HANDLE_SIZE, gt=0)
    edge_hit_width: float = Field(default=constants.EDGE_HIT_WIDTH, gt=0)

    # Routing
    route_tangent: float = Field(default=constants.ROUTE_TANGENT, gt=0)

    # Auto-layout
    horizontal_gap: float = Field(default=constants.HORIZONTAL_GAP, ge=0)
    vertical_gap: float = Field(default=constants.VERTICAL_GAP, ge=0)
    top_margin: float = Field(default=constants.TOP_MARGIN, ge=0)
    canvas_width: float = Field(default=constants.CANVAS_WIDTH, gt=0)

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False


def get_settings(**overrides: Any) -> Settings:
    """Build settings, converting validation failures into ConfigurationError."""
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(
            "Invalid TreeBuilder settings",
            context={"errors": [err["loc"] for err in exc.errors()]},
        ) from exc
