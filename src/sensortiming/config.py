from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from sensortiming.models import SensorParams, ShutterType, normalize_keys

# Frames generated per schedule; playback loops over this window.
DEFAULT_NUM_FRAMES = 3

# Animation tick (~60 Hz display refresh).
TICK_SECONDS = 0.016

# Fallback pixel clock when a preset row cannot back-derive one (MHz).
DEFAULT_PIXEL_CLOCK_MHZ = 129.6

# IMX258 full-resolution 4208x3120 mode.
DEFAULT_PARAMS = SensorParams(
    width=4208,
    height=3120,
    frame_length_lines=3224,
    line_length_pck=9016,
    pixel_clock_mhz=DEFAULT_PIXEL_CLOCK_MHZ,
    lanes=2,
    bits_per_pixel=10,
    shutter_type=ShutterType.ROLLING,
    exposure_time=0.016,
    exposure_margin_lines=10,
    lane_rate_mbps=1000.0,
)


def load_params(path: str) -> SensorParams:
    """
    Params JSON schema (any subset; missing keys come from DEFAULT_PARAMS):

    {
      "width": 4208,
      "height": 3120,
      "frameLengthLines": 3224,
      "line_length_pck": 9016,
      "pixel_clock_mhz": 129.6,
      "lanes": 2,
      "shutter_type": "rolling",
      "exposure_time": 0.016
    }
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object, got {type(data).__name__}")

    merged: Dict[str, Any] = DEFAULT_PARAMS.to_dict()
    merged.update(normalize_keys(data))
    return SensorParams.from_dict(merged)
