"""
Graph assembly helpers.

Each submodule encapsulates one portion of the decode graph: the stage arena,
the static source/decode/sink construction, the dynamic video pad linker and
the counting frame sink.
"""

from __future__ import annotations

__all__ = [
    "StageGraph",
    "StageHandle",
    "build_source_and_decoder",
    "build_sink",
    "DynamicPadLinker",
    "FrameSink",
    "FrameObservation",
]

from .stages import StageGraph, StageHandle
from .builder import build_sink, build_source_and_decoder
from .linker import DynamicPadLinker
from .sink import FrameObservation, FrameSink
