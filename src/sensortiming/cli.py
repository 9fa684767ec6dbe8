import logging
from pathlib import Path

import typer
from rich.console import Console

from sensortiming.audit_engine import ModeAuditEngine
from sensortiming.config import DEFAULT_PARAMS, load_params
from sensortiming.io.csv_reader import ModeCSVReader
from sensortiming.logging_config import setup_logging
from sensortiming.models import ShutterType, SweepRange
from sensortiming.pipeline import pipeline_stages
from sensortiming.reports.json_report import JSONReporter
from sensortiming.reports.terminal_report import (
    print_issue_summary,
    print_modes_table,
    print_timing_summary,
)
from sensortiming.sweep import (
    calculate_exposure_vs_fll,
    calculate_fps_vs_line_length,
    default_fll_range,
    default_line_length_range,
    sweep_to_frame,
)
from sensortiming.timing import calculate_timing, create_simulation
from sensortiming.viz.charts import plot_sweep
from sensortiming.viz.renderer import AnimationClock, RowStateRenderer

app = typer.Typer(add_completion=False, help="Image sensor readout timing simulator.")
console = Console()
logger = logging.getLogger("sensortiming.cli")


@app.callback()
def _setup(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: str = typer.Option(None, "--log-file", help="Also write logs to this file"),
):
    setup_logging(logging.DEBUG if verbose else logging.INFO, log_file)


def _resolve_params(params_json, overrides):
    """DEFAULT_PARAMS (or --params-json) with any explicit CLI options applied."""
    try:
        base = load_params(params_json) if params_json else DEFAULT_PARAMS
    except FileNotFoundError:
        raise typer.BadParameter(f"Params file not found: {params_json}")
    except (KeyError, ValueError) as e:
        raise typer.BadParameter(f"Invalid params file {params_json}: {e}")

    changes = {k: v for k, v in overrides.items() if v is not None}
    if "shutter_type" in changes:
        try:
            changes["shutter_type"] = ShutterType(changes["shutter_type"].lower())
        except ValueError:
            raise typer.BadParameter("Invalid --shutter. Use 'rolling' or 'global'")
    return base.replace(**changes) if changes else base


@app.command()
def timing(
    params_json: str = typer.Option(None, "--params-json", help="JSON file with sensor parameters"),
    width: int = typer.Option(None, "--width", help="Active pixels per line"),
    height: int = typer.Option(None, "--height", help="Active lines"),
    fll: int = typer.Option(None, "--fll", help="Frame length lines (incl. blanking)"),
    llpck: int = typer.Option(None, "--llpck", help="Line length in pixel clocks (incl. blanking)"),
    pclk: float = typer.Option(None, "--pclk", help="Pixel clock in MHz"),
    lanes: int = typer.Option(None, "--lanes", help="Number of CSI-2 lanes"),
    bpp: int = typer.Option(None, "--bpp", help="Bits per pixel"),
    shutter: str = typer.Option(None, "--shutter", help="rolling | global"),
    exposure: float = typer.Option(None, "--exposure", help="Exposure time in seconds"),
    lane_rate: float = typer.Option(None, "--lane-rate", help="Per-lane rate in Mbps"),
    receiver_max_fps: float = typer.Option(None, "--receiver-max-fps", help="Receiver frame rate limit"),
    out_json: str = typer.Option(None, "--out-json", help="Output JSON report path"),
):
    """Compute line/frame timing, exposure limit and link load for one mode."""
    params = _resolve_params(params_json, {
        "width": width,
        "height": height,
        "frame_length_lines": fll,
        "line_length_pck": llpck,
        "pixel_clock_mhz": pclk,
        "lanes": lanes,
        "bits_per_pixel": bpp,
        "shutter_type": shutter,
        "exposure_time": exposure,
        "lane_rate_mbps": lane_rate,
        "receiver_max_fps": receiver_max_fps,
    })

    t = calculate_timing(params)
    issues = ModeAuditEngine().audit_params(params)

    print_timing_summary(t, params, console=console)
    for stage in pipeline_stages(t):
        flag = " [red](bottleneck)[/red]" if stage.bottlenecked else ""
        console.print(f"  {stage.name:<11} {stage.latency * 1000:8.2f} ms  {stage.description}{flag}")

    for issue in issues:
        color = "red" if issue.severity == "error" else ("yellow" if issue.severity == "warning" else "cyan")
        console.print(f"[{color}]{issue.severity.upper()}[/{color}] {issue.issue_type}: {issue.message}")

    if out_json:
        JSONReporter().generate(out_json, params=params, timing=t, issues=issues)
        console.print(f"[green]OK[/green] JSON report saved to: {out_json}")


@app.command()
def modes(
    csv_file: str = typer.Argument(..., help="Mode list CSV (IMX258 register table export)"),
    out_json: str = typer.Option(None, "--out-json", help="Output JSON report path"),
):
    """Load sensor mode presets from CSV, list them, and audit their timing."""
    csv_path = Path(csv_file)
    if not csv_path.exists():
        raise typer.BadParameter(f"CSV file not found: {csv_path}")

    mode_list = ModeCSVReader(str(csv_path)).read()
    if not mode_list:
        console.print("[yellow]No usable modes found in CSV[/yellow]")

    issues = ModeAuditEngine().audit_modes(mode_list)
    print_modes_table(mode_list, console=console)
    print_issue_summary(issues, console=console)

    if out_json:
        JSONReporter().generate(out_json, modes=mode_list, issues=issues)
        console.print(f"[green]OK[/green] JSON report saved to: {out_json}")


@app.command()
def sweep(
    kind: str = typer.Option("fll", "--kind", help="fll (exposure vs FLL) | ll (FPS vs line length)"),
    params_json: str = typer.Option(None, "--params-json", help="JSON file with base sensor parameters"),
    start: float = typer.Option(None, "--min", help="First sample (default: height or width)"),
    stop: float = typer.Option(None, "--max", help="Last sample, inclusive (default: 2x start)"),
    step: float = typer.Option(None, "--step", help="Sample spacing (> 0)"),
    out_csv: str = typer.Option("sweep.csv", "--out-csv", help="Series CSV path"),
    out_png: str = typer.Option("sweep.png", "--out-png", help="Chart PNG path"),
):
    """Sweep FLL or line length and chart FPS against max exposure."""
    kind = kind.lower()
    if kind not in ("fll", "ll"):
        raise typer.BadParameter("Invalid --kind. Use 'fll' or 'll'")

    params = _resolve_params(params_json, {})
    default = default_fll_range(params) if kind == "fll" else default_line_length_range(params)
    r = SweepRange(
        min=default.min if start is None else start,
        max=default.max if stop is None else stop,
        step=default.step if step is None else step,
    )
    if not r.step > 0:
        raise typer.BadParameter("--step must be positive")

    if kind == "fll":
        series = calculate_exposure_vs_fll(params, r)
        x_key = "fll"
    else:
        series = calculate_fps_vs_line_length(params, r)
        x_key = "line_length"

    if not series:
        raise typer.BadParameter(f"Empty sweep: min {r.min} is above max {r.max}")

    sweep_to_frame(series).to_csv(out_csv, index=False)
    plot_sweep(series, x_key, out_png, current_fps=calculate_timing(params).sensor_fps)

    console.print(f"[green]OK[/green] {len(series)} sample(s) from {r.min:g} to {r.max:g} step {r.step:g}")
    console.print(f"[green]OK[/green] Series CSV: {out_csv}")
    console.print(f"[green]OK[/green] Chart PNG: {out_png}")


@app.command()
def render(
    params_json: str = typer.Option(None, "--params-json", help="JSON file with sensor parameters"),
    at_time: float = typer.Option(0.0, "--time", help="Cursor time in seconds"),
    frames: int = typer.Option(1, "--frames", help="Number of animation ticks to write"),
    speed: float = typer.Option(1.0, "--speed", help="Playback speed multiplier per tick"),
    out_png: str = typer.Option("rows.png", "--out-png", help="Output PNG (numbered when --frames > 1)"),
):
    """Render the per-row readout state at a point in time."""
    if frames < 1:
        raise typer.BadParameter("--frames must be at least 1")

    params = _resolve_params(params_json, {})
    sim = create_simulation(params)
    clock = AnimationClock(sim.timing.frame_time, playback_speed=speed)
    clock.time = at_time

    out = Path(out_png)
    with RowStateRenderer(sim) as renderer:
        for i in range(frames):
            state = renderer.update(clock.time)
            path = out if frames == 1 else out.with_name(f"{out.stem}_{i:03d}{out.suffix}")
            renderer.save(str(path))
            logger.debug("t=%.6f reading=%d exposed=%d", clock.time, len(state.reading_rows), len(state.exposed_rows))
            clock.tick()

    console.print(f"[green]OK[/green] Rendered {frames} frame(s) to {out_png}")


if __name__ == "__main__":
    app()
