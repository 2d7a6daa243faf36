from __future__ import annotations

import io

import pytest

from gst_fakes import FakeGst

from framecount import messages
from framecount.config import RunConfig
from framecount.graph import builder, sink, stages
from framecount.report import Reporter
from framecount.runtime import gst as gst_runtime


@pytest.fixture
def fake_gst(monkeypatch: pytest.MonkeyPatch) -> FakeGst:
    fake = FakeGst()
    for module in (gst_runtime, messages, stages, builder, sink):
        monkeypatch.setattr(module, "Gst", fake)
    monkeypatch.setattr(gst_runtime, "_GST_INITIALISED", False)
    return fake


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(output: io.StringIO) -> Reporter:
    return Reporter(stream=output)


@pytest.fixture
def run_config(tmp_path) -> RunConfig:
    return RunConfig(path=str(tmp_path / "clip.mp4"))
