from __future__ import annotations

from typing import Callable, Dict, Iterator, List

import pandas as pd

from sensortiming.models import SensorParams, SensorTiming, SweepRange
from sensortiming.timing import calculate_timing


def _samples(r: SweepRange) -> Iterator[float]:
    if not r.step > 0:
        raise ValueError(f"Sweep step must be positive, got {r.step!r}")
    v = r.min
    while v <= r.max:
        yield v
        v += r.step


def _sweep(
    base: SensorParams,
    r: SweepRange,
    field: str,
    project: Callable[[float, SensorTiming], Dict[str, float]],
) -> List[Dict[str, float]]:
    out: List[Dict[str, float]] = []
    for v in _samples(r):
        timing = calculate_timing(base.replace(**{field: v}))
        out.append(project(v, timing))
    return out


def calculate_exposure_vs_fll(base: SensorParams, fll_range: SweepRange) -> List[Dict[str, float]]:
    """Max exposure and sensor FPS for each FLL in ``fll_range`` (inclusive)."""
    return _sweep(
        base, fll_range, "frame_length_lines",
        lambda v, t: {"fll": v, "max_exposure": t.max_exposure_time, "fps": t.sensor_fps},
    )


def calculate_fps_vs_line_length(base: SensorParams, ll_range: SweepRange) -> List[Dict[str, float]]:
    """Sensor FPS and max exposure for each line length in ``ll_range`` (inclusive)."""
    return _sweep(
        base, ll_range, "line_length_pck",
        lambda v, t: {"line_length": v, "fps": t.sensor_fps, "max_exposure": t.max_exposure_time},
    )


def default_fll_range(params: SensorParams) -> SweepRange:
    h = int(params.height)
    return SweepRange(min=h, max=h * 2, step=max(1, h // 20))


def default_line_length_range(params: SensorParams) -> SweepRange:
    w = int(params.width)
    return SweepRange(min=w, max=w * 2, step=max(10, w // 20))


def sweep_to_frame(series: List[Dict[str, float]]) -> pd.DataFrame:
    """Series as a DataFrame, adding max exposure in milliseconds for charts."""
    df = pd.DataFrame(series)
    if "max_exposure" in df.columns:
        df["max_exposure_ms"] = df["max_exposure"] * 1000.0
    return df
