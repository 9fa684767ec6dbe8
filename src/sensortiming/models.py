from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, List, Optional


class ShutterType(str, Enum):
    ROLLING = "rolling"
    GLOBAL = "global"


# camelCase aliases accepted from UI / JSON exports
_CAMEL_ALIASES = {
    "frameLengthLines": "frame_length_lines",
    "lineLengthPck": "line_length_pck",
    "pixelClockMHz": "pixel_clock_mhz",
    "bitsPerPixel": "bits_per_pixel",
    "shutterType": "shutter_type",
    "exposureTime": "exposure_time",
    "exposureMarginLines": "exposure_margin_lines",
    "laneRateMbps": "lane_rate_mbps",
    "receiverMaxFps": "receiver_max_fps",
}


def normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    out = {}
    for k, v in data.items():
        key = str(k).strip()
        out[_CAMEL_ALIASES.get(key, key)] = v
    return out


@dataclass(frozen=True)
class SensorParams:
    """Inputs of one timing calculation.

    Values are taken as given: FLL < height or LL < width are physically
    invalid modes, but they still produce (degenerate) timing results.
    """

    width: int
    height: int
    frame_length_lines: int
    line_length_pck: int
    pixel_clock_mhz: float
    lanes: int = 2
    bits_per_pixel: int = 10
    shutter_type: ShutterType = ShutterType.ROLLING
    exposure_time: Optional[float] = None  # seconds
    exposure_margin_lines: int = 10
    lane_rate_mbps: float = 1000.0
    receiver_max_fps: float = math.inf

    def replace(self, **changes: Any) -> "SensorParams":
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SensorParams":
        """Build params from a dict with snake_case or camelCase keys.

        Required keys: width, height, frame_length_lines, line_length_pck,
        pixel_clock_mhz. Unknown keys raise ValueError.
        """
        norm = normalize_keys(data)
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(norm) - known)
        if unknown:
            raise ValueError(f"Unknown sensor parameter(s): {', '.join(unknown)}")

        for key in ("width", "height", "frame_length_lines", "line_length_pck", "pixel_clock_mhz"):
            if norm.get(key) is None:
                raise KeyError(f"Missing required field '{key}'")

        def as_num(key: str, cast):
            try:
                return cast(norm[key])
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid value for '{key}': {norm[key]!r}") from e

        kwargs: Dict[str, Any] = {
            "width": as_num("width", int),
            "height": as_num("height", int),
            "frame_length_lines": as_num("frame_length_lines", int),
            "line_length_pck": as_num("line_length_pck", int),
            "pixel_clock_mhz": as_num("pixel_clock_mhz", float),
        }
        if norm.get("lanes") is not None:
            kwargs["lanes"] = as_num("lanes", int)
        if norm.get("bits_per_pixel") is not None:
            kwargs["bits_per_pixel"] = as_num("bits_per_pixel", int)
        if norm.get("shutter_type") is not None:
            kwargs["shutter_type"] = ShutterType(str(norm["shutter_type"]).strip().lower())
        if norm.get("exposure_time") is not None:
            kwargs["exposure_time"] = as_num("exposure_time", float)
        if norm.get("exposure_margin_lines") is not None:
            kwargs["exposure_margin_lines"] = as_num("exposure_margin_lines", int)
        if norm.get("lane_rate_mbps") is not None:
            kwargs["lane_rate_mbps"] = as_num("lane_rate_mbps", float)
        if norm.get("receiver_max_fps") is not None:
            kwargs["receiver_max_fps"] = as_num("receiver_max_fps", float)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["shutter_type"] = self.shutter_type.value
        return d


@dataclass(frozen=True)
class SensorMode:
    """A named sensor readout mode (one row of a preset table)."""

    id: str
    description: str
    width: int
    height: int
    frame_length_lines: float
    line_length_pck: float
    pixel_clock_mhz: float
    lanes: int
    bits_per_pixel: int = 10
    shutter_type: ShutterType = ShutterType.ROLLING

    def to_params(self, **overrides: Any) -> SensorParams:
        p = SensorParams(
            width=self.width,
            height=self.height,
            frame_length_lines=self.frame_length_lines,
            line_length_pck=self.line_length_pck,
            pixel_clock_mhz=self.pixel_clock_mhz,
            lanes=self.lanes,
            bits_per_pixel=self.bits_per_pixel,
            shutter_type=self.shutter_type,
        )
        return p.replace(**overrides) if overrides else p

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["shutter_type"] = self.shutter_type.value
        return d


@dataclass(frozen=True)
class SensorTiming:
    """Derived timing of a mode. Times in seconds, rates in 1/s and Mbps."""

    line_time: float
    frame_time: float
    sensor_fps: float
    max_exposure_time: float
    readout_duration: float
    effective_fps: float
    link_bandwidth_mbps: float
    link_capacity_mbps: float
    link_bottlenecked: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RowSchedule:
    """Readout window of one row in one frame."""

    row: int
    read_start_time: float
    read_end_time: float
    sample_time: Optional[float] = None


@dataclass(frozen=True)
class RowState:
    reading_rows: List[int]
    exposed_rows: List[int]
    idle_rows: List[int]


@dataclass(frozen=True)
class SweepRange:
    min: float
    max: float
    step: float


@dataclass
class SensorSimulation:
    """Snapshot of a mode with its timing and schedule.

    ``current_time`` is the animation cursor; nothing in the timing
    calculation reads it.
    """

    mode: SensorMode
    timing: SensorTiming
    row_schedule: List[RowSchedule] = field(default_factory=list)
    current_time: float = 0.0


@dataclass(frozen=True)
class ValidationIssue:
    """A single audit finding on a sensor mode."""

    severity: str  # "error" | "warning" | "info"
    issue_type: str
    message: str
    mode_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity,
            "type": self.issue_type,
            "message": self.message,
            "mode_id": self.mode_id,
        }
