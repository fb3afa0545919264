"""Core types shared across TreeBuilder."""

from .exceptions import (
    ConfigurationError,
    InvalidEventError,
    TreeBuilderException,
    UnknownNodeKindError,
)

__all__ = [
    "ConfigurationError",
    "InvalidEventError",
    "TreeBuilderException",
    "UnknownNodeKindError",
]
