from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Sequence

from rich.console import Console
from rich.table import Table

from sensortiming.models import SensorMode, SensorParams, SensorTiming, ValidationIssue


def print_timing_summary(timing: SensorTiming, params: Optional[SensorParams] = None,
                         console: Optional[Console] = None) -> None:
    """Timing summary table: line/frame time, frame rates, exposure limit, link load."""
    console = console or Console()

    title = "Timing Summary"
    if params is not None:
        title += f" ({params.width}x{params.height}, {params.shutter_type.value} shutter)"

    table = Table(title=title)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Line time", f"{timing.line_time * 1000:.3f} ms")
    table.add_row("Frame time", f"{timing.frame_time * 1000:.2f} ms")
    table.add_row("Sensor FPS", f"{timing.sensor_fps:.2f} fps")

    eff_style = "yellow" if timing.effective_fps < timing.sensor_fps else "green"
    table.add_row("Effective FPS", f"[{eff_style}]{timing.effective_fps:.2f} fps[/{eff_style}]")
    table.add_row("Max exposure", f"{timing.max_exposure_time * 1000:.2f} ms")
    table.add_row("Readout", f"{timing.readout_duration * 1000:.2f} ms")

    link_style = "red" if timing.link_bottlenecked else "green"
    table.add_row(
        "Link bandwidth",
        f"[{link_style}]{timing.link_bandwidth_mbps:.1f} / {timing.link_capacity_mbps:.1f} Mbps[/{link_style}]",
    )

    console.print(table)


def print_modes_table(modes: Sequence[SensorMode], console: Optional[Console] = None) -> None:
    console = console or Console()

    table = Table(title=f"Sensor Modes ({len(modes)})")
    table.add_column("Mode")
    table.add_column("Description")
    table.add_column("Size", justify="right")
    table.add_column("FLL", justify="right")
    table.add_column("LL PCK", justify="right")
    table.add_column("PCLK (MHz)", justify="right")
    table.add_column("Lanes", justify="right")
    table.add_column("Shutter")

    for m in modes:
        table.add_row(
            m.id,
            m.description,
            f"{m.width}x{m.height}",
            f"{m.frame_length_lines:g}",
            f"{m.line_length_pck:g}",
            f"{m.pixel_clock_mhz:.2f}",
            str(m.lanes),
            m.shutter_type.value,
        )
    console.print(table)


def print_issue_summary(issues: Iterable[ValidationIssue], console: Optional[Console] = None) -> None:
    """Counts by severity and type, then a verdict line."""
    console = console or Console()
    issues = list(issues)

    severity_counts = Counter(i.severity for i in issues)
    type_counts = Counter(i.issue_type for i in issues)

    table = Table(title="Mode Audit Summary")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Errors", str(severity_counts.get("error", 0)))
    table.add_row("Warnings", str(severity_counts.get("warning", 0)))
    table.add_row("Info", str(severity_counts.get("info", 0)))
    table.add_row("Total issues", str(len(issues)))
    console.print(table)

    if type_counts:
        t = Table(title="Issues by Type")
        t.add_column("Type")
        t.add_column("Count", justify="right")
        for k, v in sorted(type_counts.items()):
            t.add_row(str(k), str(v))
        console.print(t)

    if severity_counts.get("error", 0) > 0:
        console.print("[bold red]Audit FAILED: invalid mode timing[/bold red]")
    elif severity_counts.get("warning", 0) > 0:
        console.print("[bold yellow]Audit completed with warnings[/bold yellow]")
    else:
        console.print("[bold green]Audit PASSED: no issues found[/bold green]")
