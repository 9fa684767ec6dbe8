from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from sensortiming.models import SensorTiming

# Illustrative share of readout time spent in each downstream stage.
ADC_LATENCY_FRACTION = 0.10
MIPI_LATENCY_FRACTION = 0.05


@dataclass(frozen=True)
class PipelineStage:
    name: str
    description: str
    latency: float           # seconds
    throughput_mbps: float
    bottlenecked: bool = False


def pipeline_stages(timing: SensorTiming) -> List[PipelineStage]:
    """
    Sensor -> ADC -> MIPI CSI-2 -> Receiver, with rough per-stage latency.

    Only the sensor stage comes from the timing model; ADC and link latencies
    are fixed fractions of readout time, and the receiver absorbs whatever
    the effective frame period adds on top of the sensor frame time.
    """
    readout = timing.readout_duration
    with np.errstate(divide="ignore", invalid="ignore"):
        receiver_latency = float(np.float64(1.0) / np.float64(timing.effective_fps) - timing.frame_time)

    return [
        PipelineStage(
            name="Sensor",
            description="Pixel readout",
            latency=readout,
            throughput_mbps=timing.link_bandwidth_mbps,
        ),
        PipelineStage(
            name="ADC",
            description="Analog to Digital",
            latency=readout * ADC_LATENCY_FRACTION,
            throughput_mbps=timing.link_bandwidth_mbps,
        ),
        PipelineStage(
            name="MIPI CSI-2",
            description=f"{timing.link_bandwidth_mbps:.1f} Mbps / {timing.link_capacity_mbps:.1f} Mbps",
            latency=readout * MIPI_LATENCY_FRACTION,
            throughput_mbps=min(timing.link_bandwidth_mbps, timing.link_capacity_mbps),
            bottlenecked=timing.link_bottlenecked,
        ),
        PipelineStage(
            name="Receiver",
            description=f"Effective: {timing.effective_fps:.1f} fps",
            latency=receiver_latency,
            throughput_mbps=timing.link_bandwidth_mbps,
        ),
    ]


def frame_progress(current_time: float, frame_time: float) -> float:
    """Position of the cursor within its frame, 0..1."""
    if not frame_time > 0:
        return 0.0
    return float(np.mod(current_time, frame_time) / frame_time)


def stage_progress(stages: Sequence[PipelineStage], index: int, current_time: float, frame_time: float) -> float:
    """Fill level (0..1) of stage ``index`` as the frame moves through the pipeline."""
    total = sum(s.latency for s in stages)
    if total == 0 or not np.isfinite(total):
        return 0.0

    start = sum(s.latency for s in stages[:index]) / total
    end = sum(s.latency for s in stages[: index + 1]) / total
    progress = frame_progress(current_time, frame_time) * frame_time / total

    if progress < start:
        return 0.0
    if progress > end:
        return 1.0
    if end == start:
        return 1.0
    return (progress - start) / (end - start)
