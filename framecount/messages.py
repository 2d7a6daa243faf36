"""
Status messages flowing from the stages to the controller.

Raw ``Gst.Message`` objects are translated into a small tagged union so the
controller loop can match on plain dataclasses instead of GObject types.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Deque, Optional, Union

from .errors import FramecountError
from .runtime.gst import Gst

LOG = logging.getLogger(__name__)

FAULT_STRUCTURE = "framecount-fault"
UNKNOWN_SOURCE = "<unknown>"


class PipelineState(IntEnum):
    """Mirror of ``Gst.State``; values match the GStreamer enum."""

    VOID_PENDING = 0
    NULL = 1
    READY = 2
    PAUSED = 3
    PLAYING = 4

    @classmethod
    def from_gst(cls, value: Any) -> "PipelineState":
        return cls(int(value))

    @property
    def label(self) -> str:
        return "".join(part.capitalize() for part in self.name.split("_"))


class StateChangeResult(str, Enum):
    """Outcome of commanding a target state."""

    SUCCESS = "success"
    ASYNC = "async"
    NO_PREROLL = "no-preroll"
    FAILURE = "failure"

    @classmethod
    def from_gst(cls, value: Any) -> "StateChangeResult":
        if value == Gst.StateChangeReturn.SUCCESS:
            return cls.SUCCESS
        if value == Gst.StateChangeReturn.ASYNC:
            return cls.ASYNC
        if value == Gst.StateChangeReturn.NO_PREROLL:
            return cls.NO_PREROLL
        return cls.FAILURE


@dataclass(frozen=True, slots=True)
class StateChanged:
    source: str
    old: PipelineState
    new: PipelineState
    pending: PipelineState


@dataclass(frozen=True, slots=True)
class EndOfStream:
    source: str


@dataclass(frozen=True, slots=True)
class ErrorMessage:
    source: str
    detail: str
    debug: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Fault:
    """A fatal error raised inside a streaming-thread callback."""

    error: FramecountError


@dataclass(frozen=True, slots=True)
class Other:
    type_name: str


StatusMessage = Union[StateChanged, EndOfStream, ErrorMessage, Fault, Other]


def _source_path(message: Any) -> str:
    src = message.src
    if src is None:
        return UNKNOWN_SOURCE
    return src.get_path_string()


def translate_message(message: Any) -> StatusMessage:
    """
    Convert a raw bus message into one of the status message variants.
    """

    msg_type = message.type
    if msg_type == Gst.MessageType.STATE_CHANGED:
        old, new, pending = message.parse_state_changed()
        return StateChanged(
            source=_source_path(message),
            old=PipelineState.from_gst(old),
            new=PipelineState.from_gst(new),
            pending=PipelineState.from_gst(pending),
        )
    if msg_type == Gst.MessageType.EOS:
        return EndOfStream(source=_source_path(message))
    if msg_type == Gst.MessageType.ERROR:
        err, debug = message.parse_error()
        return ErrorMessage(source=_source_path(message), detail=err.message, debug=debug)
    return Other(type_name=Gst.message_type_get_name(msg_type))


class StatusChannel:
    """
    Blocking, ordered view over the pipeline bus.

    Callbacks running on streaming threads cannot raise into the controller,
    so they hand fatal errors to :meth:`report_fault`; the error is queued and
    an application message is posted to wake :meth:`receive`.
    """

    def __init__(self, bus: Any) -> None:
        self._bus = bus
        self._faults: Deque[FramecountError] = deque()
        self._lock = threading.Lock()

    def receive(self) -> Optional[StatusMessage]:
        """
        Block until the next message arrives.

        Returns ``None`` once the bus stops delivering (flushing or closed).
        """

        message = self._bus.timed_pop(Gst.CLOCK_TIME_NONE)
        if message is None:
            return None
        if self._is_fault_message(message):
            with self._lock:
                if self._faults:
                    return Fault(error=self._faults.popleft())
            LOG.debug("Fault wake-up without a queued fault; ignoring.")
            return Other(type_name="application")
        return translate_message(message)

    def pending_error(self) -> Optional[ErrorMessage]:
        """Return an error already queued on the bus without blocking."""

        message = self._bus.pop_filtered(Gst.MessageType.ERROR)
        if message is None:
            return None
        return translate_message(message)

    def report_fault(self, error: FramecountError) -> None:
        with self._lock:
            self._faults.append(error)
        structure = Gst.Structure.new_empty(FAULT_STRUCTURE)
        if not self._bus.post(Gst.Message.new_application(None, structure)):
            LOG.error("Failed to post fault notification for %s", error.kind)

    @staticmethod
    def _is_fault_message(message: Any) -> bool:
        if message.type != Gst.MessageType.APPLICATION:
            return False
        structure = message.get_structure()
        return structure is not None and structure.get_name() == FAULT_STRUCTURE
