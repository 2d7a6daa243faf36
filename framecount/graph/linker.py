"""
Dynamic linking of the first discovered video pad to the sink.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Optional

from ..errors import FramecountError, LinkInvariantViolation, SetupFailure
from .stages import StageGraph, StageHandle

LOG = logging.getLogger(__name__)


def pad_media_type(pad: Any) -> Optional[str]:
    """Return the structure name of the pad's caps, e.g. ``video/x-raw``."""

    caps = pad.get_current_caps() or pad.query_caps(None)
    if not caps or caps.get_size() == 0:
        return None
    structure = caps.get_structure(0)
    if not structure:
        return None
    return structure.get_name()


class DynamicPadLinker:
    """
    React to ``pad-added`` on the decode stage.

    Only the first video pad is linked to the sink input; audio, subtitle and
    later video pads are left unlinked.  The linker keeps the sink's stage name
    and resolves it through the arena on every call.
    """

    def __init__(
        self,
        graph: StageGraph,
        sink: StageHandle,
        on_fault: Callable[[FramecountError], None],
        sink_pad_name: str = "sink",
    ) -> None:
        self._graph = graph
        self._sink_name = sink.name
        self._sink_pad_name = sink_pad_name
        self._on_fault = on_fault
        # pad-added may fire from several streaming threads.
        self._lock = threading.Lock()
        self.linked_pad: Optional[str] = None
        self.ignored_pads: List[str] = []

    def attach(self, decode: StageHandle) -> int:
        return self._graph.connect(decode, "pad-added", self.on_stream_discovered)

    def on_stream_discovered(self, decode_element: Any, new_pad: Any) -> None:
        pad_name = new_pad.get_name()
        media_type = pad_media_type(new_pad)
        if media_type is None or not media_type.startswith("video/"):
            LOG.info("Ignoring non-video pad '%s' (%s).", pad_name, media_type)
            self.ignored_pads.append(pad_name)
            return

        with self._lock:
            try:
                sink_pad = self._graph.static_pad(self._sink_name, self._sink_pad_name)
            except SetupFailure as exc:
                self._on_fault(LinkInvariantViolation(str(exc)))
                return

            if sink_pad.is_linked():
                LOG.info("Sink already linked; ignoring additional video pad '%s'.", pad_name)
                self.ignored_pads.append(pad_name)
                return

            try:
                self._graph.link_pads(new_pad, sink_pad)
            except LinkInvariantViolation as exc:
                LOG.error("Video pad '%s' could not be linked: %s", pad_name, exc)
                self._on_fault(exc)
                return

            self.linked_pad = pad_name
        LOG.info("Linked video pad '%s' (%s) to '%s'.", pad_name, media_type, self._sink_name)
