"""
Stage arena wrapping the ``Gst.Pipeline``.

Stages are registered under a stable name and every later lookup goes through
that name, so callbacks installed on the graph only ever hold the arena and a
name rather than the element itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ..errors import LinkInvariantViolation, SetupFailure
from ..messages import PipelineState, StateChangeResult
from ..runtime.gst import Gst, require_gstreamer

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageHandle:
    name: str
    factory: str


class StageGraph:
    """
    Exclusive owner of the pipeline and the stages registered with it.
    """

    def __init__(self, name: str = "framecount") -> None:
        require_gstreamer()
        pipeline = Gst.Pipeline.new(name)
        if not pipeline:
            raise SetupFailure("Failed to create GstPipeline instance.")
        self.pipeline = pipeline
        self._stages: Dict[str, Any] = {}
        self._handlers: List[Tuple[Any, int]] = []

    # --------------------------------------------------------------------- API

    def __contains__(self, name: object) -> bool:
        return name in self._stages

    @property
    def stage_names(self) -> List[str]:
        return list(self._stages)

    def add_stage(
        self,
        factory: str,
        name: str,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> StageHandle:
        if name in self._stages:
            raise SetupFailure(f"Stage name '{name}' is already registered.")
        element = Gst.ElementFactory.make(factory, name)
        if not element:
            raise SetupFailure(f"GStreamer element factory '{factory}' is not available.")
        for key, value in (properties or {}).items():
            try:
                element.set_property(key, value)
            except (TypeError, ValueError) as exc:
                raise SetupFailure(
                    f"Cannot set property '{key}' on stage '{name}': {exc}"
                ) from exc
        if not self.pipeline.add(element):
            raise SetupFailure(f"Failed to add stage '{name}' to the pipeline.")
        self._stages[name] = element
        LOG.debug("Registered stage '%s' (%s)", name, factory)
        return StageHandle(name=name, factory=factory)

    def element(self, stage: StageHandle | str) -> Any:
        name = stage.name if isinstance(stage, StageHandle) else stage
        try:
            return self._stages[name]
        except KeyError:
            raise SetupFailure(f"Unknown stage '{name}'.") from None

    def static_pad(self, stage: StageHandle | str, pad_name: str) -> Any:
        pad = self.element(stage).get_static_pad(pad_name)
        if pad is None:
            raise SetupFailure(f"Stage '{stage}' has no static pad '{pad_name}'.")
        return pad

    def link_stages(self, upstream: StageHandle, downstream: StageHandle) -> None:
        if not self.element(upstream).link(self.element(downstream)):
            raise SetupFailure(f"Failed to link '{upstream.name}' to '{downstream.name}'.")

    def link_pads(self, src_pad: Any, sink_pad: Any) -> None:
        """
        Link two pads, rejecting anything but a fresh, compatible link.
        """

        result = src_pad.link(sink_pad)
        if result != Gst.PadLinkReturn.OK:
            raise LinkInvariantViolation(
                f"Failed to link pad '{src_pad.get_name()}' to '{sink_pad.get_name()}': {result}"
            )

    def connect(
        self, stage: StageHandle, signal: str, callback: Callable[..., Any], *data: Any
    ) -> int:
        element = self.element(stage)
        handler_id = element.connect(signal, callback, *data)
        self._handlers.append((element, handler_id))
        return handler_id

    def disconnect_all(self) -> None:
        for element, handler_id in self._handlers:
            element.disconnect(handler_id)
        self._handlers.clear()

    def set_state(self, state: PipelineState) -> StateChangeResult:
        return StateChangeResult.from_gst(self.pipeline.set_state(getattr(Gst.State, state.name)))

    def get_bus(self) -> Any:
        bus = self.pipeline.get_bus()
        if bus is None:
            raise SetupFailure("Pipeline bus is not available.")
        return bus
