from __future__ import annotations

import logging
import math
import re
from pathlib import Path
from typing import List, Optional

from sensortiming.config import DEFAULT_PIXEL_CLOCK_MHZ
from sensortiming.models import SensorMode, ShutterType

logger = logging.getLogger(__name__)

# Fixed column offsets of the IMX258 mode list export.
COL_REG = 0
COL_MODE1 = 1
COL_MODE2 = 2
COL_WIDTH = 6
COL_HEIGHT = 7
COL_LANES = 8
COL_FPS = 18
COL_FLL = 50
COL_LLPCK = 51

MIN_FIELDS = 10
DEFAULT_LANES = 2
DEFAULT_BITS_PER_PIXEL = 10

# Estimates used when blanking columns are empty.
FLL_ESTIMATE_FACTOR = 1.1
LLPCK_ESTIMATE_FACTOR = 1.2


# Leading decimal number of a cell; trailing units or notes ("30fps") are ignored.
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _num(values: List[str], idx: int) -> float:
    """Leading number at column ``idx``; missing, unparseable or non-finite reads as 0."""
    if idx >= len(values):
        return 0.0
    m = _LEADING_NUMBER.match(values[idx])
    if m is None:
        return 0.0
    v = float(m.group(0))
    return v if math.isfinite(v) else 0.0


def _find_header(lines: List[str]) -> Optional[int]:
    for i, line in enumerate(lines):
        if "reg" in line and "mode1" in line:
            return i
    return None


def parse_mode_line(line: str) -> Optional[SensorMode]:
    """Convert one data line into a SensorMode, or None when it is not a usable mode."""
    values = [v.strip() for v in line.split(",")]
    if len(values) < MIN_FIELDS or not values[COL_REG] or values[COL_REG].startswith("reg"):
        return None

    reg = values[COL_REG]
    mode1 = values[COL_MODE1]
    mode2 = values[COL_MODE2]

    width = _num(values, COL_WIDTH)
    height = _num(values, COL_HEIGHT)
    if width <= 0 or height <= 0:
        raise ValueError(f"mode {reg!r} has no active size (width={width:g}, height={height:g})")

    lanes = _num(values, COL_LANES) or DEFAULT_LANES
    fps = _num(values, COL_FPS)
    fll = _num(values, COL_FLL)
    llpck = _num(values, COL_LLPCK)

    # frame_time = fll * llpck / pclk = 1 / fps
    if llpck > 0 and fps > 0 and fll > 0:
        pixel_clock_mhz = llpck * fps * fll / 1e6
    else:
        pixel_clock_mhz = DEFAULT_PIXEL_CLOCK_MHZ

    return SensorMode(
        id=reg,
        description=f"{mode1} - {mode2}",
        width=int(width),
        height=int(height),
        frame_length_lines=fll or height * FLL_ESTIMATE_FACTOR,
        line_length_pck=llpck or width * LLPCK_ESTIMATE_FACTOR,
        pixel_clock_mhz=pixel_clock_mhz or DEFAULT_PIXEL_CLOCK_MHZ,
        lanes=int(lanes),
        bits_per_pixel=DEFAULT_BITS_PER_PIXEL,
        shutter_type=ShutterType.GLOBAL if "HDR" in mode1 else ShutterType.ROLLING,
    )


def parse_mode_csv(content: str) -> List[SensorMode]:
    """Parse a mode list export; bad rows are logged and skipped."""
    lines = content.splitlines()
    header = _find_header(lines)
    if header is None:
        logger.warning("Could not find header line (expected 'reg' and 'mode1')")
        return []

    modes: List[SensorMode] = []
    for lineno, line in enumerate(lines[header + 1:], start=header + 2):
        try:
            mode = parse_mode_line(line)
        except ValueError as e:
            # Keep going; one broken row shouldn't drop the whole table
            logger.warning("Skipping invalid mode row at line %d: %s", lineno, e)
            continue
        if mode is not None:
            modes.append(mode)

    logger.debug("Parsed %d mode(s)", len(modes))
    return modes


class ModeCSVReader:
    """Reads sensor mode presets from a CSV file."""

    def __init__(self, filepath: str):
        self.filepath = Path(filepath)

    def read(self) -> List[SensorMode]:
        if not self.filepath.exists():
            raise FileNotFoundError(f"CSV not found: {self.filepath}")
        return parse_mode_csv(self.filepath.read_text(encoding="utf-8-sig"))
