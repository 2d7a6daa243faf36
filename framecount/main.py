"""
Command line entrypoint.

``framecount <path>`` decodes the file, prints one line per frame and exits
non-zero once the run terminates, end-of-stream included.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from .config import load_config
from .errors import FramecountError
from .pipeline import PipelineController
from .report import Reporter
from .runtime.gst import ensure_gst_initialised
from .utils.logging import configure_logging

LOG = logging.getLogger(__name__)

EXIT_TERMINATED = 1


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="framecount",
        description="Decode a media file and print the dimensions of every video frame.",
    )
    parser.add_argument("path", help="media file to decode")
    return parser.parse_args(argv)


def run(argv: Optional[list[str]] = None, reporter: Optional[Reporter] = None) -> int:
    args = parse_args(argv)
    reporter = reporter or Reporter()

    try:
        config = load_config(args.path)
    except FramecountError as exc:
        configure_logging()
        return _terminate(exc)

    configure_logging(level=config.log_level, format=config.log_format)
    reporter.file_arg(config.path)

    try:
        ensure_gst_initialised()
        PipelineController(config, reporter).run()
    except FramecountError as exc:
        return _terminate(exc)
    except KeyboardInterrupt:
        LOG.info("Interrupted by user.")
        return EXIT_TERMINATED
    return 0


def _terminate(exc: FramecountError) -> int:
    LOG.debug("Run terminated", exc_info=exc)
    print(f"{exc.kind}: {exc}", file=sys.stderr)
    return EXIT_TERMINATED


def main() -> int:
    return run()


if __name__ == "__main__":
    sys.exit(main())
