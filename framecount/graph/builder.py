"""
Static portion of the decode graph.

``filesrc`` feeds ``decodebin`` through a static link; the ``appsink`` is only
declared here because its upstream pad does not exist until ``decodebin`` has
parsed the container.
"""

from __future__ import annotations

from ..errors import SetupFailure
from ..runtime.gst import Gst
from .stages import StageGraph, StageHandle

SOURCE_STAGE = "src_element"
DECODE_STAGE = "decode_element"
SINK_STAGE = "appsink_element"

# Raw video with any format and size.
VIDEO_CAPS = "video/x-raw"


def build_source_and_decoder(graph: StageGraph, path: str) -> StageHandle:
    """Add ``filesrc -> decodebin`` and return the decode stage handle."""

    if not path:
        raise SetupFailure("Input path must not be empty.")
    src = graph.add_stage("filesrc", SOURCE_STAGE, {"location": path})
    decode = graph.add_stage("decodebin", DECODE_STAGE)
    graph.link_stages(src, decode)
    return decode


def build_sink(graph: StageGraph) -> StageHandle:
    """
    Add the ``appsink`` that receives decoded video.

    ``emit-signals`` is required for ``new-sample`` to fire at all and
    ``sync`` keeps delivery in presentation order.
    """

    caps = Gst.Caps.from_string(VIDEO_CAPS)
    if caps is None:
        raise SetupFailure(f"Failed to parse caps '{VIDEO_CAPS}'.")
    return graph.add_stage(
        "appsink",
        SINK_STAGE,
        {
            "caps": caps,
            "emit-signals": True,
            "sync": True,
        },
    )
