"""
Frame counting media probe.

The package demuxes and decodes a single media file with GStreamer, routes the
first discovered video stream into an ``appsink`` and reports the dimensions
of every decoded frame.  :mod:`framecount.pipeline` hosts the orchestration;
:mod:`framecount.graph` holds the stage helpers it wires together.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
