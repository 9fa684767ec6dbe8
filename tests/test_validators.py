from sensortiming.audit_engine import ModeAuditEngine
from sensortiming.config import DEFAULT_PARAMS
from sensortiming.models import SensorMode


def _types(issues):
    return {i.issue_type for i in issues}


def test_default_mode_is_clean():
    assert ModeAuditEngine().audit_params(DEFAULT_PARAMS) == []


def test_blanking_shorter_than_active_area():
    issues = ModeAuditEngine().audit_params(
        DEFAULT_PARAMS.replace(frame_length_lines=3000, line_length_pck=4000), mode_id="bad")
    assert {"fll_below_height", "line_length_below_width"} <= _types(issues)
    assert all(i.mode_id == "bad" for i in issues)
    assert all(i.severity == "error" for i in issues if i.issue_type.endswith(("height", "width")))


def test_exposure_longer_than_frame():
    issues = ModeAuditEngine().audit_params(DEFAULT_PARAMS.replace(exposure_time=1.0))
    assert _types(issues) == {"exposure_exceeds_max"}


def test_negative_exposure_margin():
    issues = ModeAuditEngine().audit_params(DEFAULT_PARAMS.replace(frame_length_lines=5))
    assert "negative_exposure_margin" in _types(issues)


def test_slow_link_is_bottleneck_and_caps_fps():
    issues = ModeAuditEngine().audit_params(DEFAULT_PARAMS.replace(lanes=1, lane_rate_mbps=100.0))
    by_type = {i.issue_type: i for i in issues}
    assert by_type["link_bottleneck"].severity == "warning"
    assert by_type["fps_capped"].severity == "info"


def test_zero_clock_and_lanes():
    issues = ModeAuditEngine().audit_params(DEFAULT_PARAMS.replace(pixel_clock_mhz=0.0, lanes=0))
    assert {"non_positive_clock", "zero_lanes"} <= _types(issues)


def test_audit_modes_tags_issues_with_mode_id():
    modes = [
        SensorMode("A30", "ok", 4208, 3120, 3224, 9016, 129.6, 2),
        SensorMode("B30", "short", 4208, 3120, 3000, 9016, 129.6, 2),
    ]
    issues = ModeAuditEngine().audit_modes(modes)
    assert {i.mode_id for i in issues} == {"B30"}
