import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np

from sensortiming.sweep import sweep_to_frame

_X_LABELS = {
    "fll": "Frame Length Lines",
    "line_length": "Line Length PCK",
}


def plot_sweep(series, x_key, out_png, *, current_fps=None, title=None):
    """Twin-axis sweep chart: sensor FPS line over max-exposure bars (ms).

    ``series`` is the output of one of the sweep functions; ``x_key`` is its
    sample column ("fll" or "line_length"). ``current_fps`` draws a reference
    line for the active mode.
    """
    df = sweep_to_frame(series)
    if df.empty:
        raise ValueError("Nothing to plot: sweep series is empty")

    x = df[x_key].to_numpy(dtype=float)
    fps = df["fps"].to_numpy(dtype=float)
    exp_ms = df["max_exposure_ms"].to_numpy(dtype=float)

    fig, ax = plt.subplots(figsize=(9, 5), constrained_layout=True)
    ax2 = ax.twinx()

    width = float(np.min(np.diff(x))) * 0.8 if len(x) > 1 else 1.0
    bars = ax2.bar(x, exp_ms, width=width, color="#82ca9d", alpha=0.55, label="Max Exposure (ms)", zorder=1)
    (line,) = ax.plot(x, fps, color="#1f77b4", linewidth=2, label="Sensor FPS", zorder=3)

    handles = [line, bars]
    if current_fps is not None and np.isfinite(current_fps):
        ref = ax.axhline(current_fps, color="#d62728", linestyle="--", linewidth=1, label=f"Current FPS ({current_fps:.2f})")
        handles.append(ref)

    # keep the FPS line drawn above the bars
    ax.set_zorder(ax2.get_zorder() + 1)
    ax.patch.set_visible(False)

    ax.set_xlabel(_X_LABELS.get(x_key, x_key))
    ax.set_ylabel("FPS")
    ax2.set_ylabel("Max Exposure (ms)")
    ax.grid(True, linestyle="--", alpha=0.35)
    if title is None:
        title = f"FPS vs {_X_LABELS.get(x_key, x_key)}"
    ax.set_title(title)
    ax.legend(handles, [h.get_label() for h in handles], loc="upper right", framealpha=0.9)

    fig.savefig(out_png, dpi=160)
    plt.close(fig)
