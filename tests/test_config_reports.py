import json

import pytest
from rich.console import Console

from sensortiming.config import DEFAULT_PARAMS, load_params
from sensortiming.models import SensorParams, ShutterType
from sensortiming.reports.json_report import JSONReporter
from sensortiming.reports.terminal_report import print_timing_summary
from sensortiming.timing import calculate_timing


def test_load_params_merges_defaults_and_camel_case(tmp_path):
    p = tmp_path / "params.json"
    p.write_text(json.dumps({"frameLengthLines": 4000, "shutter_type": "global"}), encoding="utf-8")
    params = load_params(str(p))
    assert params.frame_length_lines == 4000
    assert params.shutter_type == ShutterType.GLOBAL
    assert params.width == DEFAULT_PARAMS.width
    assert params.exposure_time == DEFAULT_PARAMS.exposure_time


def test_load_params_rejects_unknown_keys(tmp_path):
    p = tmp_path / "params.json"
    p.write_text(json.dumps({"frame_rate": 30}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_params(str(p))


def test_from_dict_requires_geometry():
    with pytest.raises(KeyError):
        SensorParams.from_dict({"width": 10})


def test_json_report_writes_null_for_non_finite(tmp_path):
    params = DEFAULT_PARAMS.replace(pixel_clock_mhz=0.0)
    out = tmp_path / "report.json"
    JSONReporter().generate(str(out), params=params, timing=calculate_timing(params))

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["timing"]["line_time"] is None
    assert data["params"]["receiver_max_fps"] is None
    assert data["total_issues"] == 0
    assert [s["name"] for s in data["pipeline"]][0] == "Sensor"


def test_timing_summary_renders():
    console = Console(record=True, width=120)
    print_timing_summary(calculate_timing(DEFAULT_PARAMS), DEFAULT_PARAMS, console=console)
    text = console.export_text()
    assert "Sensor FPS" in text
    assert "4.46 fps" in text
