import pytest

from sensortiming.config import DEFAULT_PARAMS
from sensortiming.models import SweepRange
from sensortiming.sweep import (
    calculate_exposure_vs_fll,
    calculate_fps_vs_line_length,
    default_fll_range,
    default_line_length_range,
    sweep_to_frame,
)
from sensortiming.timing import calculate_timing


def test_fll_sweep_sample_points_are_inclusive():
    series = calculate_exposure_vs_fll(DEFAULT_PARAMS, SweepRange(min=100, max=200, step=50))
    assert [s["fll"] for s in series] == [100, 150, 200]
    t = calculate_timing(DEFAULT_PARAMS.replace(frame_length_lines=150))
    assert series[1]["fps"] == t.sensor_fps
    assert series[1]["max_exposure"] == t.max_exposure_time


def test_line_length_sweep_projection():
    series = calculate_fps_vs_line_length(DEFAULT_PARAMS, SweepRange(min=100, max=200, step=50))
    assert [s["line_length"] for s in series] == [100, 150, 200]
    assert set(series[0]) == {"line_length", "fps", "max_exposure"}
    # longer lines -> slower frames
    assert series[0]["fps"] > series[1]["fps"] > series[2]["fps"]


def test_sweep_rejects_non_positive_step():
    with pytest.raises(ValueError):
        calculate_exposure_vs_fll(DEFAULT_PARAMS, SweepRange(min=100, max=200, step=0))


def test_sweep_empty_when_min_above_max():
    assert calculate_fps_vs_line_length(DEFAULT_PARAMS, SweepRange(min=300, max=200, step=10)) == []


def test_default_ranges_follow_mode_size():
    fll = default_fll_range(DEFAULT_PARAMS)
    assert (fll.min, fll.max, fll.step) == (3120, 6240, 156)
    assert len(calculate_exposure_vs_fll(DEFAULT_PARAMS, fll)) == 21

    ll = default_line_length_range(DEFAULT_PARAMS.replace(width=100))
    assert ll.step == 10


def test_sweep_to_frame_adds_milliseconds():
    df = sweep_to_frame(calculate_exposure_vs_fll(DEFAULT_PARAMS, SweepRange(3224, 3224, 1)))
    assert list(df["fll"]) == [3224]
    assert df["max_exposure_ms"].iloc[0] == pytest.approx(df["max_exposure"].iloc[0] * 1000)
