"""
Line-oriented report written to standard output.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from .graph.sink import FrameObservation
from .messages import StateChanged


class Reporter:
    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def _write(self, line: str) -> None:
        print(line, file=self.stream, flush=True)

    def file_arg(self, path: str) -> None:
        self._write(f"File arg: {path}")

    def state_changed(self, message: StateChanged) -> None:
        self._write(
            f"State changed from {message.source}: "
            f"{message.old.label} -> {message.new.label} ({message.pending.label})"
        )

    def frame(self, observation: FrameObservation) -> None:
        self._write(f"Frame {observation.sequence}: {observation.width}x{observation.height}")
