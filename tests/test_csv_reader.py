import logging

import pytest

from sensortiming.io.csv_reader import (
    COL_FLL,
    COL_FPS,
    COL_HEIGHT,
    COL_LANES,
    COL_LLPCK,
    COL_WIDTH,
    ModeCSVReader,
    parse_mode_csv,
)
from sensortiming.models import ShutterType

HEADER = "reg,mode1,mode2," + ",".join(f"c{i}" for i in range(3, 52))


def _row(reg, mode1="Normal", mode2="Full", width="", height="", lanes="", fps="", fll="", llpck=""):
    vals = [""] * 52
    vals[0], vals[1], vals[2] = reg, mode1, mode2
    vals[COL_WIDTH] = str(width)
    vals[COL_HEIGHT] = str(height)
    vals[COL_LANES] = str(lanes)
    vals[COL_FPS] = str(fps)
    vals[COL_FLL] = str(fll)
    vals[COL_LLPCK] = str(llpck)
    return ",".join(vals)


def _csv(*rows):
    return "\n".join(["IMX258 mode list", "", HEADER, *rows]) + "\n"


def test_parses_full_mode_and_back_derives_pixel_clock():
    modes = parse_mode_csv(_csv(_row("A30", width=4208, height=3120, lanes=4, fps=30, fll=3224, llpck=4500)))
    assert len(modes) == 1
    m = modes[0]
    assert m.id == "A30"
    assert m.description == "Normal - Full"
    assert (m.width, m.height, m.lanes) == (4208, 3120, 4)
    assert m.frame_length_lines == 3224
    assert m.line_length_pck == 4500
    assert m.pixel_clock_mhz == pytest.approx(4500 * 30 * 3224 / 1e6)
    assert m.bits_per_pixel == 10
    assert m.shutter_type == ShutterType.ROLLING


def test_estimates_blanking_and_defaults_clock_when_missing():
    m = parse_mode_csv(_csv(_row("B30", width=2104, height=1560, fps=30)))[0]
    assert m.frame_length_lines == pytest.approx(1560 * 1.1)
    assert m.line_length_pck == pytest.approx(2104 * 1.2)
    assert m.pixel_clock_mhz == 129.6
    assert m.lanes == 2


def test_hdr_modes_use_global_shutter():
    m = parse_mode_csv(_csv(_row("H30", mode1="HDR", width=2104, height=1560)))[0]
    assert m.shutter_type == ShutterType.GLOBAL


def test_bad_rows_are_skipped_with_warning(caplog):
    content = _csv(
        _row("Z0", width=0, height=3120),
        _row("Z1", width="abc", height=3120),
        "short,row",
        _row("", width=100, height=100),
        _row("A30", width=4208, height=3120),
    )
    with caplog.at_level(logging.WARNING, logger="sensortiming"):
        modes = parse_mode_csv(content)
    assert [m.id for m in modes] == ["A30"]
    assert sum("Skipping invalid mode row" in r.getMessage() for r in caplog.records) == 2


def test_non_finite_cells_do_not_abort_the_parse(caplog):
    with caplog.at_level(logging.WARNING, logger="sensortiming"):
        modes = parse_mode_csv(_csv(
            _row("Z2", width="inf", height=3120),
            _row("A30", width=4208, height=3120),
        ))
    assert [m.id for m in modes] == ["A30"]
    assert sum("Skipping invalid mode row" in r.getMessage() for r in caplog.records) == 1

    m = parse_mode_csv(_csv(_row("A30", width=4208, height=3120, lanes="Infinity")))[0]
    assert m.lanes == 2


def test_numeric_cells_read_leading_number():
    m = parse_mode_csv(_csv(_row("A30", width="4208px", height=" 3120", fps="30fps", fll="3224", llpck="4500 pck")))[0]
    assert (m.width, m.height) == (4208, 3120)
    assert m.line_length_pck == 4500
    assert m.pixel_clock_mhz == pytest.approx(4500 * 30 * 3224 / 1e6)


def test_missing_header_returns_no_modes(caplog):
    with caplog.at_level(logging.WARNING, logger="sensortiming"):
        assert parse_mode_csv(_row("A30", width=4208, height=3120)) == []
    assert any("header" in r.getMessage() for r in caplog.records)


def test_reader_reads_file(tmp_path):
    p = tmp_path / "modes.csv"
    p.write_text(_csv(_row("A30", width=4208, height=3120, lanes=4, fps=30, fll=3224, llpck=4500)), encoding="utf-8")
    modes = ModeCSVReader(str(p)).read()
    assert modes[0].to_params().frame_length_lines == 3224


def test_reader_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ModeCSVReader(str(tmp_path / "nope.csv")).read()
