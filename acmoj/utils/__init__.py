"""Utility functions."""

from .terminal import (
    SUCCESS,
    INFO,
    ERROR,
    WARN,
    confirm,
    console,
    format_status_color,
    highlight,
    setup_logging,
)

__all__ = [
    "SUCCESS",
    "INFO",
    "ERROR",
    "WARN",
    "confirm",
    "console",
    "format_status_color",
    "highlight",
    "setup_logging",
]
