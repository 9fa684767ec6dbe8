import pytest

from sensortiming.config import DEFAULT_PARAMS
from sensortiming.pipeline import PipelineStage, frame_progress, pipeline_stages, stage_progress
from sensortiming.timing import calculate_timing


def test_stage_latencies_follow_readout():
    t = calculate_timing(DEFAULT_PARAMS)
    stages = pipeline_stages(t)
    assert [s.name for s in stages] == ["Sensor", "ADC", "MIPI CSI-2", "Receiver"]
    assert stages[0].latency == t.readout_duration
    assert stages[1].latency == pytest.approx(t.readout_duration * 0.1)
    assert stages[2].latency == pytest.approx(t.readout_duration * 0.05)
    # receiver keeps up with the sensor
    assert stages[3].latency == pytest.approx(0.0, abs=1e-12)


def test_receiver_latency_grows_when_receiver_is_slower():
    t = calculate_timing(DEFAULT_PARAMS.replace(receiver_max_fps=2.0))
    assert pipeline_stages(t)[3].latency == pytest.approx(0.5 - t.frame_time)


def test_mipi_stage_reports_bottleneck():
    t = calculate_timing(DEFAULT_PARAMS.replace(lanes=1, lane_rate_mbps=100.0))
    mipi = pipeline_stages(t)[2]
    assert mipi.bottlenecked
    assert mipi.throughput_mbps == t.link_capacity_mbps


def test_stage_progress_fills_in_order():
    stages = [PipelineStage(n, "", 1.0, 0.0) for n in ("a", "b", "c", "d")]
    progress = [stage_progress(stages, i, 2.5, 10.0) for i in range(4)]
    assert progress == [1.0, 1.0, 0.5, 0.0]


def test_stage_progress_zero_total_latency():
    stages = [PipelineStage("a", "", 0.0, 0.0)]
    assert stage_progress(stages, 0, 1.0, 10.0) == 0.0


def test_frame_progress_wraps():
    assert frame_progress(12.5, 10.0) == pytest.approx(0.25)
    assert frame_progress(1.0, 0.0) == 0.0
