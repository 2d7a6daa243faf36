"""
Error hierarchy shared by the graph helpers, the controller and the CLI.
"""

from __future__ import annotations


class FramecountError(RuntimeError):
    """Base class for every terminal condition of a run."""

    kind = "FramecountError"


class SetupFailure(FramecountError):
    """Raised when stages or static links cannot be constructed."""

    kind = "SetupFailure"


class RuntimeUnavailable(SetupFailure):
    """Raised when PyGObject or the GStreamer typelib cannot be loaded."""


class ConfigError(SetupFailure):
    """Raised when the run configuration cannot be loaded or validated."""


class LinkInvariantViolation(FramecountError):
    """Raised when a discovered video pad cannot be linked to the free sink."""

    kind = "LinkInvariantViolation"


class ExtractionFailure(FramecountError):
    """Raised when a decoded sample lacks integer width/height caps fields."""

    kind = "ExtractionFailure"


class BusError(FramecountError):
    """Raised when the runtime posts an error message during playback."""

    kind = "BusError"


class EndOfStream(FramecountError):
    """Raised when the pipeline reports end-of-stream."""

    kind = "EndOfStream"
