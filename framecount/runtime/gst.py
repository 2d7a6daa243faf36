"""
Guarded access to the GStreamer bindings.

``Gst`` is ``None`` when PyGObject or the ``Gst-1.0`` typelib is missing so
that the package stays importable (tests, ``--help``) on hosts without the
native runtime.  Every graph operation must run after
:func:`ensure_gst_initialised`; it is the only process-wide setup the package
performs.
"""

from __future__ import annotations

import logging
import sys
import threading

from ..errors import RuntimeUnavailable

LOG = logging.getLogger(__name__)

IS_DARWIN = sys.platform == "darwin"
_INIT_LOCK = threading.RLock()
_GST_INITIALISED = False

try:  # pragma: no cover - availability depends on host environment
    import gi  # type: ignore

    gi.require_version("Gst", "1.0")
    from gi.repository import Gst  # type: ignore
except (ImportError, ValueError) as exc:  # pragma: no cover
    Gst = None  # type: ignore[assignment]
    _GST_IMPORT_ERROR: Exception | None = exc
else:  # pragma: no cover - executed only when GStreamer is present
    _GST_IMPORT_ERROR = None


def _macos_init_via_gst() -> bool:
    try:
        import ctypes
        import ctypes.util

        library_path = ctypes.util.find_library("gstreamer-1.0")
        if not library_path:
            return False
        gst_lib = ctypes.CDLL(library_path)
        gst_main = getattr(gst_lib, "gst_macos_main", None)
        if gst_main is None:
            return False
        gst_main.restype = None
        gst_main.argtypes = []
        gst_main()
        LOG.info("Initialised macOS NSApplication via gst_macos_main().")
        return True
    except OSError:
        LOG.debug("gst_macos_main() initialisation failed.", exc_info=True)
        return False


def is_available() -> bool:
    return Gst is not None


def require_gstreamer() -> None:
    if Gst is None:
        raise RuntimeUnavailable(
            "GStreamer runtime is not available. Install PyGObject and the "
            "GStreamer 1.x typelibs to decode media."
        ) from _GST_IMPORT_ERROR


def ensure_gst_initialised() -> None:
    """
    Initialise GStreamer once per process.

    Safe to call repeatedly; only the first call touches the runtime.
    """

    global _GST_INITIALISED
    require_gstreamer()
    with _INIT_LOCK:
        if _GST_INITIALISED:
            return
        if IS_DARWIN and not _macos_init_via_gst():
            LOG.warning(
                "Unable to initialise NSApplication; some GStreamer elements may misbehave on macOS."
            )
        Gst.init(None)
        _GST_INITIALISED = True
        LOG.debug("GStreamer initialised.")
