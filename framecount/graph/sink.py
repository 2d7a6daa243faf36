"""
Counting frame sink.

``new-sample`` is emitted from the appsink's streaming thread.  With
``sync`` enabled GStreamer delivers samples one at a time in presentation
order, so the handler is never re-entered for the same sink; the lock makes
that assumption hold even on a runtime that does not guarantee it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from ..errors import ExtractionFailure, FramecountError
from ..runtime.gst import Gst
from .stages import StageGraph, StageHandle

LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FrameObservation:
    sequence: int
    width: int
    height: int


def extract_dimensions(caps: Any) -> Tuple[int, int]:
    """Read integer ``width``/``height`` from the first caps structure."""

    if not caps or caps.get_size() == 0:
        raise ExtractionFailure("Sample carries no caps.")
    structure = caps.get_structure(0)
    if not structure:
        raise ExtractionFailure("Sample caps have no structure.")

    values = []
    for field in ("width", "height"):
        found, value = structure.get_int(field)
        if not found:
            raise ExtractionFailure(
                f"Caps '{structure.to_string()}' lack an integer '{field}' field."
            )
        values.append(value)
    return values[0], values[1]


class FrameSink:
    """
    Pull every decoded sample, count it and emit a :class:`FrameObservation`.
    """

    def __init__(
        self,
        on_frame: Callable[[FrameObservation], None],
        on_fault: Optional[Callable[[FramecountError], None]] = None,
    ) -> None:
        self._on_frame = on_frame
        self._on_fault = on_fault
        self._count = 0
        self._lock = threading.Lock()

    @property
    def frame_count(self) -> int:
        return self._count

    def attach(self, graph: StageGraph, sink: StageHandle) -> int:
        return graph.connect(sink, "new-sample", self.on_buffer_ready)

    def on_buffer_ready(self, appsink: Any) -> Any:
        with self._lock:
            sample = appsink.emit("pull-sample")
            if sample is None:
                LOG.debug("new-sample fired without a sample; treating as end-of-stream.")
                return Gst.FlowReturn.EOS

            try:
                width, height = extract_dimensions(sample.get_caps())
            except ExtractionFailure as exc:
                LOG.error("Frame %d: %s", self._count + 1, exc)
                if self._on_fault is not None:
                    self._on_fault(exc)
                return Gst.FlowReturn.ERROR

            self._count += 1
            self._on_frame(FrameObservation(sequence=self._count, width=width, height=height))
        return Gst.FlowReturn.OK
