from __future__ import annotations

import logging

import numpy as np

from sensortiming.config import DEFAULT_NUM_FRAMES
from sensortiming.models import (
    SensorMode,
    SensorParams,
    SensorSimulation,
    SensorTiming,
    ShutterType,
)
from sensortiming.schedule import generate_row_schedule

logger = logging.getLogger(__name__)

# Fraction of the frame a global shutter may integrate for.
GLOBAL_EXPOSURE_FRACTION = 0.9

# Link counts as bottlenecked above this share of lane capacity.
LINK_UTILIZATION_LIMIT = 0.95


def calculate_timing(params: SensorParams) -> SensorTiming:
    """
    Derive line/frame timing and CSI-2 link load from a sensor mode.

        line_time  = line_length_pck / pixel_clock
        frame_time = frame_length_lines * line_time
        sensor_fps = 1 / frame_time

    Effective FPS is the minimum of the sensor rate, the rate the link can
    carry, and the receiver limit.

    Division by zero (pixel clock or FLL of 0) is not an error: the result
    carries inf/nan, which callers may check for.
    """
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        pixel_clock_hz = np.float64(params.pixel_clock_mhz) * 1e6
        line_time = np.float64(params.line_length_pck) / pixel_clock_hz
        frame_time = np.float64(params.frame_length_lines) * line_time
        sensor_fps = np.float64(1.0) / frame_time

        if params.shutter_type == ShutterType.ROLLING:
            max_exposure_time = (params.frame_length_lines - params.exposure_margin_lines) * line_time
        else:
            max_exposure_time = frame_time * GLOBAL_EXPOSURE_FRACTION

        readout_duration = params.height * line_time

        payload_bits = np.float64(params.width) * params.height * params.bits_per_pixel
        link_bandwidth_mbps = payload_bits * sensor_fps / 1e6
        link_capacity_mbps = np.float64(params.lanes) * params.lane_rate_mbps

        link_limited_fps = link_capacity_mbps / (payload_bits / 1e6)
        # np.min propagates nan
        effective_fps = np.min(np.array([sensor_fps, link_limited_fps, params.receiver_max_fps], dtype=np.float64))

        link_bottlenecked = bool(link_bandwidth_mbps > link_capacity_mbps * LINK_UTILIZATION_LIMIT)

    timing = SensorTiming(
        line_time=float(line_time),
        frame_time=float(frame_time),
        sensor_fps=float(sensor_fps),
        max_exposure_time=float(max_exposure_time),
        readout_duration=float(readout_duration),
        effective_fps=float(effective_fps),
        link_bandwidth_mbps=float(link_bandwidth_mbps),
        link_capacity_mbps=float(link_capacity_mbps),
        link_bottlenecked=link_bottlenecked,
    )
    logger.debug("timing %sx%s fll=%s ll=%s -> %s", params.width, params.height,
                 params.frame_length_lines, params.line_length_pck, timing)
    return timing


def create_simulation(params: SensorParams, num_frames: int = DEFAULT_NUM_FRAMES) -> SensorSimulation:
    """Bundle a custom mode snapshot, its timing and a multi-frame schedule."""
    mode = SensorMode(
        id="custom",
        description="Custom Mode",
        width=params.width,
        height=params.height,
        frame_length_lines=params.frame_length_lines,
        line_length_pck=params.line_length_pck,
        pixel_clock_mhz=params.pixel_clock_mhz,
        lanes=params.lanes,
        bits_per_pixel=params.bits_per_pixel,
        shutter_type=params.shutter_type,
    )
    timing = calculate_timing(params)
    schedule = generate_row_schedule(params, timing, num_frames)
    return SensorSimulation(mode=mode, timing=timing, row_schedule=schedule, current_time=0.0)
