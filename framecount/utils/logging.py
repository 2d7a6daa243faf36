"""
Logging helpers for framecount.

Standard output is reserved for the frame report, so diagnostics are routed to
standard error.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

DEFAULT_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"


def configure_logging(
    level: int | str = logging.INFO,
    format: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Ensure the root logger is configured exactly once.
    """

    if logging.getLogger().handlers:
        # Respect any user provided configuration.
        return

    logging.basicConfig(
        level=level,
        format=format or DEFAULT_FORMAT,
        handlers=[logging.StreamHandler(stream or sys.stderr)],
    )
