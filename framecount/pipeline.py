"""
Pipeline orchestration.

The controller owns the stage graph for the whole run.  Construction happens
in two phases: :meth:`PipelineController.build` wires the stages known up
front (``filesrc -> decodebin`` and the declared ``appsink``), then playback
starts and the :class:`~framecount.graph.DynamicPadLinker` links the video pad
once ``decodebin`` announces it.  The calling thread blocks in
:meth:`PipelineController.run_loop` until end-of-stream or the first error.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .config import RunConfig
from .errors import BusError, SetupFailure
from .errors import EndOfStream as EndOfStreamError
from .graph import DynamicPadLinker, FrameSink, StageGraph, build_sink, build_source_and_decoder
from .messages import (
    EndOfStream,
    ErrorMessage,
    Fault,
    PipelineState,
    StateChanged,
    StateChangeResult,
    StatusChannel,
)
from .report import Reporter

LOG = logging.getLogger(__name__)


class StateTransitionLog:
    """
    Aggregate pipeline transitions observed on the bus.

    Startup walks Null -> Ready -> Paused -> Playing and teardown walks back;
    a transition that skips a neighbour is logged and kept.
    """

    def __init__(self) -> None:
        self.transitions: List[Tuple[PipelineState, PipelineState]] = []

    @staticmethod
    def is_adjacent(old: PipelineState, new: PipelineState) -> bool:
        if PipelineState.VOID_PENDING in (old, new):
            return False
        return abs(int(new) - int(old)) == 1

    @property
    def current(self) -> PipelineState:
        if not self.transitions:
            return PipelineState.NULL
        return self.transitions[-1][1]

    def record(self, old: PipelineState, new: PipelineState) -> bool:
        self.transitions.append((old, new))
        if self.is_adjacent(old, new):
            return True
        LOG.warning("Pipeline state skipped a step: %s -> %s", old.label, new.label)
        return False


class PipelineController:
    def __init__(self, config: RunConfig, reporter: Optional[Reporter] = None) -> None:
        self.config = config
        self.reporter = reporter or Reporter()
        self.graph: Optional[StageGraph] = None
        self.channel: Optional[StatusChannel] = None
        self.linker: Optional[DynamicPadLinker] = None
        self.sink: Optional[FrameSink] = None
        self.transitions = StateTransitionLog()
        self._pipeline_path: Optional[str] = None
        self._torn_down = False

    # --------------------------------------------------------------------- API

    @property
    def frame_count(self) -> int:
        return self.sink.frame_count if self.sink else 0

    def run(self) -> None:
        """
        Build, play and block until the run ends.

        Always raises on termination: :class:`~framecount.errors.EndOfStream`
        for a complete decode, another
        :class:`~framecount.errors.FramecountError` otherwise.  The graph is
        back in Null whenever this raises, including when the bus closes
        before end-of-stream.
        """

        self.build()
        try:
            self.start()
            self.run_loop()
        finally:
            self.teardown()

    def build(self) -> None:
        graph = StageGraph(self.config.pipeline_name)
        channel = StatusChannel(graph.get_bus())

        decode = build_source_and_decoder(graph, self.config.path)
        sink_stage = build_sink(graph)

        sink = FrameSink(self.reporter.frame, on_fault=channel.report_fault)
        sink.attach(graph, sink_stage)

        linker = DynamicPadLinker(graph, sink_stage, on_fault=channel.report_fault)
        linker.attach(decode)

        self.graph = graph
        self.channel = channel
        self.sink = sink
        self.linker = linker
        self._pipeline_path = graph.pipeline.get_path_string()
        LOG.info("Pipeline '%s' built for %s", self.config.pipeline_name, self.config.path)

    def start(self) -> StateChangeResult:
        graph = self._require_graph()
        result = graph.set_state(PipelineState.PLAYING)
        LOG.debug("Requested Playing: %s", result.value)
        if result != StateChangeResult.FAILURE:
            return result

        error = self.channel.pending_error() if self.channel else None
        self.teardown()
        if error is not None:
            raise BusError(self._describe_error(error))
        raise SetupFailure("Pipeline refused the transition to Playing.")

    def run_loop(self) -> None:
        channel = self.channel
        if channel is None:
            raise SetupFailure("Pipeline has not been built.")

        while True:
            message = channel.receive()
            if message is None:
                LOG.warning("Status channel closed before end-of-stream.")
                self.teardown()
                raise BusError("Status channel closed before end-of-stream.")

            if isinstance(message, StateChanged):
                self._on_state_changed(message)
            elif isinstance(message, EndOfStream):
                LOG.info("End of stream after %d frame(s).", self.frame_count)
                self.teardown()
                raise EndOfStreamError(f"End of stream reached after {self.frame_count} frame(s).")
            elif isinstance(message, ErrorMessage):
                LOG.error("Pipeline error: %s", self._describe_error(message))
                self.teardown()
                raise BusError(self._describe_error(message))
            elif isinstance(message, Fault):
                self.teardown()
                raise message.error
            else:
                LOG.debug("Ignoring %s message.", message.type_name)

    def teardown(self) -> None:
        graph = self.graph
        if graph is None or self._torn_down:
            return
        self._torn_down = True
        result = graph.set_state(PipelineState.NULL)
        if result == StateChangeResult.FAILURE:
            LOG.error("Failed to set pipeline to Null during teardown.")
        graph.disconnect_all()
        LOG.debug("Pipeline torn down after %d frame(s).", self.frame_count)

    # ----------------------------------------------------------------- plumbing

    def _require_graph(self) -> StageGraph:
        if self.graph is None:
            raise SetupFailure("Pipeline has not been built.")
        return self.graph

    def _on_state_changed(self, message: StateChanged) -> None:
        self.reporter.state_changed(message)
        if message.source == self._pipeline_path:
            self.transitions.record(message.old, message.new)

    @staticmethod
    def _describe_error(message: ErrorMessage) -> str:
        if message.debug:
            return f"{message.detail} (from {message.source}: {message.debug})"
        return f"{message.detail} (from {message.source})"
