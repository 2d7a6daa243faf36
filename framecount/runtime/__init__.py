"""
Binding to the GStreamer runtime.
"""

from __future__ import annotations

from .gst import Gst, ensure_gst_initialised, is_available, require_gstreamer

__all__ = [
    "Gst",
    "ensure_gst_initialised",
    "is_available",
    "require_gstreamer",
]
