"""Tests covering the counting appsink handler."""

from __future__ import annotations

import threading
import time
from typing import List

import pytest
from gst_fakes import Caps, Sample

from framecount.errors import ExtractionFailure, FramecountError
from framecount.graph import FrameObservation, FrameSink, StageGraph, build_sink
from framecount.graph.sink import extract_dimensions


@pytest.fixture
def appsink_with_sink(fake_gst):
    graph = StageGraph("test")
    stage = build_sink(graph)
    observations: List[FrameObservation] = []
    faults: List[FramecountError] = []
    frame_sink = FrameSink(observations.append, on_fault=faults.append)
    frame_sink.attach(graph, stage)
    return graph.element(stage), frame_sink, observations, faults


def test_counts_frames_in_order(fake_gst, appsink_with_sink) -> None:
    appsink, frame_sink, observations, faults = appsink_with_sink

    results = [appsink.push_frame(640, 480) for _ in range(3)]

    assert results == [fake_gst.FlowReturn.OK] * 3
    assert [obs.sequence for obs in observations] == [1, 2, 3]
    assert observations[0] == FrameObservation(sequence=1, width=640, height=480)
    assert frame_sink.frame_count == 3
    assert faults == []


def test_dimension_changes_are_reported(appsink_with_sink) -> None:
    appsink, _frame_sink, observations, _faults = appsink_with_sink

    appsink.push_frame(640, 480)
    appsink.push_frame(1280, 720)

    assert [(obs.width, obs.height) for obs in observations] == [(640, 480), (1280, 720)]


def test_spurious_notification_stops_delivery(fake_gst, appsink_with_sink) -> None:
    appsink, frame_sink, observations, faults = appsink_with_sink

    results = appsink.fire("new-sample")

    assert results == [fake_gst.FlowReturn.EOS]
    assert frame_sink.frame_count == 0
    assert observations == []
    assert faults == []


def test_missing_height_is_an_extraction_failure(fake_gst, appsink_with_sink) -> None:
    appsink, frame_sink, observations, faults = appsink_with_sink

    result = appsink.push("video/x-raw,width=640")

    assert result == fake_gst.FlowReturn.ERROR
    assert observations == []
    assert frame_sink.frame_count == 0
    assert len(faults) == 1
    assert isinstance(faults[0], ExtractionFailure)
    assert "height" in str(faults[0])


def test_extract_dimensions_rejects_non_integer_fields(fake_gst) -> None:
    caps = fake_gst.Caps.from_string("video/x-raw,width=wide,height=480")

    with pytest.raises(ExtractionFailure, match="width"):
        extract_dimensions(caps)


def test_extract_dimensions_rejects_missing_caps() -> None:
    with pytest.raises(ExtractionFailure):
        extract_dimensions(None)


def test_concurrent_notifications_keep_sequences_unique(fake_gst) -> None:
    graph = StageGraph("test")
    stage = build_sink(graph)
    appsink = graph.element(stage)
    observations: List[FrameObservation] = []

    def observe(observation: FrameObservation) -> None:
        time.sleep(0.001)
        observations.append(observation)

    frame_sink = FrameSink(observe)
    frame_sink.attach(graph, stage)

    count = 16
    for _ in range(count):
        appsink.samples.append(Sample(Caps.from_string("video/x-raw,width=640,height=480")))
    barrier = threading.Barrier(count)
    results: List[object] = []

    def deliver() -> None:
        barrier.wait()
        results.extend(appsink.fire("new-sample"))

    threads = [threading.Thread(target=deliver) for _ in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5.0)

    assert [obs.sequence for obs in observations] == list(range(1, count + 1))
    assert frame_sink.frame_count == count
    assert results == [fake_gst.FlowReturn.OK] * count
    assert not appsink.samples
