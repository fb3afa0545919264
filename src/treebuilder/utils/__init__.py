"""Utility helpers."""

from .logging import JsonLogFormatter, configure_logging, get_logger

__all__ = ["JsonLogFormatter", "configure_logging", "get_logger"]
