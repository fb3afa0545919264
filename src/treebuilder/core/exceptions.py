"""Custom exception hierarchy for TreeBuilder."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class TreeBuilderException(Exception):
    """Base exception type for all TreeBuilder errors."""

    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return f"{self.message} | context={self.context}"


class ConfigurationError(TreeBuilderException):
    """Raised when configuration is missing or invalid."""


class UnknownNodeKindError(TreeBuilderException):
    """Raised when a node kind is not one of start/process/decision/end."""


class InvalidEventError(TreeBuilderException):
    """Raised when a raw input event payload cannot be parsed."""
