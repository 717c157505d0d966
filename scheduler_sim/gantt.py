from __future__ import annotations

from typing import Dict, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import GanttBlock, SchedulerState


def render_gantt(blocks: Sequence[GanttBlock], names: Dict[str, str] | None = None) -> str:
    """
    Plain-text Gantt chart. Idle time shows as dots.
    """
    if not blocks:
        return "(no execution)"

    names = names or {}
    line = "|"
    labels = ""
    time_marks = "0"
    last_time = 0

    for block in blocks:
        idle_gap = block.start_time - last_time
        if idle_gap > 0:
            line += "." * idle_gap
            labels += " " * idle_gap
            last_time = block.start_time
            time_marks += f"{last_time:>3}"

        width = max(1, block.duration)
        line += "=" * width
        labels += names.get(block.pid, block.pid)[:width].ljust(width)
        last_time = block.end_time
        time_marks += f"{last_time:>3}"

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels,
            time_marks,
        ]
    )


def build_rich_gantt(blocks: Sequence[GanttBlock], names: Dict[str, str] | None = None) -> tuple[Panel, str]:
    """
    Build a Rich Panel with each block painted in its process colour, and a string with time marks.
    """
    if not blocks:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    names = names or {}
    timeline = Text()
    labels = Text()
    time_marks = "0"
    last_time = 0

    for block in blocks:
        idle_gap = block.start_time - last_time
        if idle_gap > 0:
            timeline.append("·" * idle_gap, style="dim")
            labels.append(" " * idle_gap)
            last_time = block.start_time
            time_marks += f"{last_time:>3}"

        width = max(1, block.duration)
        timeline.append(" " * width, style=f"on {block.color}")
        labels.append(names.get(block.pid, block.pid)[:width].ljust(width), style="bold")

        last_time = block.end_time
        time_marks += f"{last_time:>3}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks


def build_queue_table(state: SchedulerState) -> Table:
    """
    One-row snapshot of the clock, the CPU and the queues.
    """
    names = {p.pid: p.name for p in state.processes}
    running = state.current_process

    table = Table(show_header=True, header_style="bold", expand=False)
    table.add_column("Time", justify="right")
    table.add_column("CPU")
    table.add_column("Rem", justify="right")
    table.add_column("Ready queue")
    table.add_column("Completed")

    if running is not None:
        cpu = Text(running.name, style=f"bold {running.color}")
        rem = str(running.remaining_time)
    else:
        cpu = Text("idle", style="dim")
        rem = ""

    table.add_row(
        str(state.current_time),
        cpu,
        rem,
        " ".join(names[pid] for pid in state.ready_queue) or "-",
        " ".join(names[pid] for pid in state.completed_queue) or "-",
    )
    return table
