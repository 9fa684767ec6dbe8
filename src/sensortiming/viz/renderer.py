from __future__ import annotations

import logging
from typing import Optional

import matplotlib
matplotlib.use("Agg")

import matplotlib.colors as mcolors
import matplotlib.pyplot as plt
import numpy as np

from sensortiming.config import DEFAULT_NUM_FRAMES, TICK_SECONDS
from sensortiming.models import RowState, SensorSimulation
from sensortiming.schedule import get_row_state_at_time

logger = logging.getLogger(__name__)

COLOR_IDLE = "#1a1a1a"
COLOR_EXPOSED = "#4a90e2"
COLOR_READING = "#50c878"
COLOR_READ = "#888888"
COLOR_BACKGROUND = "#0a0a0a"


def _rgb(hex_color: str) -> np.ndarray:
    return np.round(np.array(mcolors.to_rgb(hex_color)) * 255).astype(np.uint8)


class AnimationClock:
    """Playback cursor over the generated schedule window.

    Each tick advances by ``tick_seconds * playback_speed`` of sensor time and
    wraps to 0 once it reaches ``window_frames * frame_time``.
    """

    def __init__(self, frame_time: float, playback_speed: float = 1.0,
                 window_frames: int = DEFAULT_NUM_FRAMES, tick_seconds: float = TICK_SECONDS):
        self.frame_time = frame_time
        self.playback_speed = playback_speed
        self.window_frames = window_frames
        self.tick_seconds = tick_seconds
        self.time = 0.0

    @property
    def window(self) -> float:
        return self.frame_time * self.window_frames

    def tick(self) -> float:
        self.time += self.tick_seconds * self.playback_speed
        # a nan window compares False, so this wraps there too
        if not self.time < self.window:
            self.time = 0.0
        return self.time

    def reset(self) -> None:
        self.time = 0.0


class RowStateRenderer:
    """
    Draws the sensor as a stack of rows colored by readout state.

    The renderer owns its drawing surface: a matplotlib figure and an RGB
    buffer with one image row per sensor line. ``start()`` creates the
    surface, ``update(t)`` repaints every row for cursor time ``t``, and
    ``stop()`` releases it. Also usable as a context manager.

    A row being read shows the part already shifted out in grey and the scan
    line in green.
    """

    def __init__(self, simulation: SensorSimulation, width_px: int = 480, scan_px: int = 10):
        self.simulation = simulation
        self.height = int(simulation.mode.height)
        self.width_px = int(width_px)
        self.scan_px = int(scan_px)

        self._fig = None
        self._ax = None
        self._image = None
        self._buffer: Optional[np.ndarray] = None

    @property
    def running(self) -> bool:
        return self._fig is not None

    def start(self) -> "RowStateRenderer":
        if self.running:
            return self
        self._buffer = np.zeros((self.height, self.width_px, 3), dtype=np.uint8)
        self._buffer[:] = _rgb(COLOR_IDLE)

        aspect = self.height / max(self.width_px, 1)
        self._fig, self._ax = plt.subplots(figsize=(5, max(2.0, min(8.0, 5 * aspect))))
        self._fig.patch.set_facecolor(COLOR_BACKGROUND)
        self._ax.set_axis_off()
        self._image = self._ax.imshow(self._buffer, aspect="auto", interpolation="nearest")
        logger.debug("Renderer started (%d rows x %d px)", self.height, self.width_px)
        return self

    def stop(self) -> None:
        if self._fig is not None:
            plt.close(self._fig)
        self._fig = None
        self._ax = None
        self._image = None
        self._buffer = None

    def __enter__(self) -> "RowStateRenderer":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def update(self, current_time: float) -> RowState:
        """Repaint all rows for ``current_time`` and return the resolved state."""
        if not self.running:
            raise RuntimeError("Renderer is not started; call start() first")

        sim = self.simulation
        sim.current_time = current_time
        schedule = sim.row_schedule
        state = get_row_state_at_time(schedule, current_time, self.height)

        buf = self._buffer
        buf[state.idle_rows] = _rgb(COLOR_IDLE)
        buf[state.exposed_rows] = _rgb(COLOR_EXPOSED)

        # same wrap as the resolver, so the scan position matches the reading row
        t = 0.0
        if state.reading_rows:
            t = float(np.mod(current_time, schedule[self.height - 1].read_end_time))
        read_rgb, scan_rgb = _rgb(COLOR_READ), _rgb(COLOR_READING)
        for row in state.reading_rows:
            entry = schedule[row]
            span = entry.read_end_time - entry.read_start_time
            progress = (t - entry.read_start_time) / span if span > 0 else 1.0
            scan_x = int(max(0.0, min(progress, 1.0)) * self.width_px)

            buf[row] = _rgb(COLOR_IDLE)
            buf[row, :scan_x] = read_rgb
            buf[row, scan_x:scan_x + self.scan_px] = scan_rgb

        self._image.set_data(buf)
        self._ax.set_title(f"t = {current_time * 1000:.2f} ms", color="white", fontsize=9)
        return state

    def save(self, out_png: str, dpi: int = 120) -> None:
        if not self.running:
            raise RuntimeError("Renderer is not started; call start() first")
        self._fig.savefig(out_png, dpi=dpi, facecolor=self._fig.get_facecolor())

    def snapshot(self) -> np.ndarray:
        """Copy of the current RGB row buffer (height x width_px x 3)."""
        if self._buffer is None:
            raise RuntimeError("Renderer is not started; call start() first")
        return self._buffer.copy()
