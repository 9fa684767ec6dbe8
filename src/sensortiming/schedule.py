from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from sensortiming.config import DEFAULT_NUM_FRAMES
from sensortiming.models import RowSchedule, RowState, SensorParams, SensorTiming, ShutterType

logger = logging.getLogger(__name__)

# Rows whose sample time is this close ahead of the cursor render as exposed.
# Visual cue only, not an exposure duration.
EXPOSURE_LOOKBACK_S = 0.01


def generate_row_schedule(
    params: SensorParams,
    timing: SensorTiming,
    num_frames: int = DEFAULT_NUM_FRAMES,
) -> List[RowSchedule]:
    """
    Per-row readout windows for ``num_frames`` consecutive frames.

    Row indices run across frames (``row + frame * height``) so the whole
    window is index-addressable.

    sample_time is an approximation: rolling shutter samples at read start
    (exposure end), global shutter at frame start. No exposure-start offset
    is modelled.
    """
    height = int(params.height)
    line_time = timing.line_time
    frame_time = timing.frame_time

    schedule: List[RowSchedule] = []
    for frame in range(int(num_frames)):
        frame_start = frame * frame_time
        for row in range(height):
            read_start = frame_start + row * line_time
            read_end = read_start + line_time

            sample: Optional[float] = None
            if params.shutter_type == ShutterType.ROLLING and params.exposure_time is not None:
                sample = read_start
            elif params.shutter_type == ShutterType.GLOBAL:
                sample = frame_start

            schedule.append(RowSchedule(
                row=row + frame * height,
                read_start_time=read_start,
                read_end_time=read_end,
                sample_time=sample,
            ))
    return schedule


def get_row_state_at_time(schedule: Sequence[RowSchedule], time: float, height: int) -> RowState:
    """Classify rows ``0..height-1`` as reading, exposed or idle at ``time``.

    The first ``height`` entries of ``schedule`` must be exactly one frame
    (as produced by generate_row_schedule); the frame period is taken from
    the end of row ``height - 1`` and ``time`` is wrapped into it.
    """
    reading: List[int] = []
    exposed: List[int] = []
    idle: List[int] = []

    frame_time = schedule[height - 1].read_end_time if 0 < height <= len(schedule) else 0.0
    # a zero frame time gives nan, which puts every row in idle
    with np.errstate(invalid="ignore", divide="ignore"):
        t = float(np.mod(np.float64(time), np.float64(frame_time)))

    for row in range(height):
        entry = schedule[row] if row < len(schedule) else None
        if entry is None:
            idle.append(row)
            continue

        if entry.read_start_time <= t < entry.read_end_time:
            reading.append(row)
        elif entry.sample_time is not None and entry.sample_time - EXPOSURE_LOOKBACK_S <= t < entry.read_start_time:
            exposed.append(row)
        else:
            idle.append(row)

    return RowState(reading_rows=reading, exposed_rows=exposed, idle_rows=idle)
