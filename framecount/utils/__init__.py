"""Utility helpers for framecount."""

from .logging import configure_logging

__all__ = ["configure_logging"]
