from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Sequence, Tuple

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from .engine import reset, run_to_completion, step
from .gantt import build_queue_table, build_rich_gantt, render_gantt
from .metrics import compute_system_metrics, summarize_processes
from .models import Algorithm, Process, SchedulerState
from .presets import ALGORITHM_NAMES, DEFAULT_QUANTUM, default_processes, example_processes
from .report import build_report
from .workload_io import load_workload, save_workload

logger = logging.getLogger(__name__)

ALGORITHM_CHOICES = [alg.value.lower() for alg in Algorithm]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scheduler-sim",
        description="Step-by-step CPU scheduling simulator (FCFS, SJF, SRTF, RR, Priority, HRRN, LJF, LRTF).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every dispatch and preemption.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_workload_args(sub: argparse.ArgumentParser) -> None:
        source = sub.add_mutually_exclusive_group()
        source.add_argument(
            "--workload",
            "-w",
            default=None,
            help="Path to JSON or CSV workload file (default: built-in three-process workload).",
        )
        source.add_argument(
            "--example",
            "-e",
            type=str.lower,
            choices=ALGORITHM_CHOICES,
            default=None,
            help="Use the showcase workload of an algorithm instead of a file.",
        )
        sub.add_argument(
            "--quantum",
            "-q",
            type=int,
            default=DEFAULT_QUANTUM,
            help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
        )

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        type=str.lower,
        choices=ALGORITHM_CHOICES,
        help="Algorithm to use.",
    )
    add_workload_args(run_parser)
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Advance the simulation one tick at a time and show the queues after each tick.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=0.3,
        help="Seconds to wait between ticks when --step is used (default: 0.3).",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print the Gantt chart as plain text instead of a coloured panel.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        type=str.lower,
        choices=ALGORITHM_CHOICES,
        default=ALGORITHM_CHOICES,
        help="Algorithms to compare (default: all).",
    )
    add_workload_args(compare_parser)

    example_parser = subparsers.add_parser("example", help="Print or save the showcase workload of an algorithm.")
    example_parser.add_argument("algorithm", type=str.lower, choices=ALGORITHM_CHOICES)
    example_parser.add_argument("--output", "-o", default=None, help="Write the workload to this JSON file.")

    report_parser = subparsers.add_parser("report", help="Run an algorithm and print a written analysis.")
    report_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        type=str.lower,
        choices=ALGORITHM_CHOICES,
        help="Algorithm to use.",
    )
    add_workload_args(report_parser)

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def _load_processes(args: argparse.Namespace) -> Tuple[Process, ...]:
    if args.workload:
        return load_workload(Path(args.workload))
    if args.example:
        return example_processes(args.example)
    return default_processes()


def _print_result(state: SchedulerState, algorithm: Algorithm, console: Console, plain: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {ALGORITHM_NAMES[algorithm]}")
    if algorithm is Algorithm.RR:
        console.print(f"[bold]Quantum:[/bold] {state.quantum}")

    console.print()

    names = {p.pid: p.name for p in state.processes}
    if plain:
        console.print(escape(render_gantt(state.gantt_chart, names)), highlight=False)
    else:
        panel, time_marks = build_rich_gantt(state.gantt_chart, names)
        console.print(panel)
        if time_marks:
            console.print(time_marks)

    console.print()

    headers = [
        "Process",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "Complete",
        "Wait",
        "Turnaround",
        "Status",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"Process", "Status"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in state.processes:
        proc_table.add_row(
            f"[{p.color}]{p.name}[/]",
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            "" if p.start_time is None else str(p.start_time),
            "" if p.completion_time is None else str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            p.state.value,
        )

    console.print(proc_table)
    console.print()

    summary = summarize_processes(state.processes)
    system = compute_system_metrics(state)
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.2f}")
    sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
    sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
    sys_table.add_row("Makespan", str(system.makespan))
    sys_table.add_row("Throughput (proc/time)", f"{system.throughput:.3f}")
    sys_table.add_row("CPU utilization", f"{system.cpu_utilization*100:.1f}%")
    sys_table.add_row("Context switches", str(system.context_switches))
    sys_table.add_row("Starvation count", str(system.starvation_count))

    console.print(sys_table)


def _animate(state: SchedulerState, algorithm: Algorithm, delay: float, console: Console) -> SchedulerState:
    """
    Drive step() at a fixed cadence, printing the queues after every tick.
    """
    console.print(f"[bold]Simulating {algorithm.value}[/bold]")
    console.print("[dim]Press Ctrl+C to skip to the result.[/dim]")

    while not state.is_finished:
        state = step(state, algorithm)
        console.print(build_queue_table(state))
        time.sleep(delay)
    return state


def _run_compare(processes: Sequence[Process], algorithms: Sequence[str], quantum: int, console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("Switches", justify="right")

    initial = reset(processes, quantum)
    for name in algorithms:
        alg = Algorithm.parse(name)
        final = run_to_completion(initial, alg)
        summary = summarize_processes(final.processes)
        summary_table.add_row(
            alg.value,
            str(quantum) if alg is Algorithm.RR else "",
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
            str(compute_system_metrics(final).context_switches),
        )

    console.print(summary_table)


def _print_workload(processes: Sequence[Process], title: str, console: Console) -> None:
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    for h in ("Id", "Name", "Arrive", "Burst", "Priority"):
        table.add_column(h, justify="left" if h in {"Id", "Name"} else "right")
    for p in processes:
        table.add_row(p.pid, f"[{p.color}]{p.name}[/]", str(p.arrival_time), str(p.burst_time), str(p.priority))
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    console = Console()

    try:
        if args.command == "run":
            algorithm = Algorithm.parse(args.algorithm)
            state = reset(_load_processes(args), args.quantum)
            if args.step:
                try:
                    state = _animate(state, algorithm, args.step_delay, console)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            state = run_to_completion(state, algorithm)
            _print_result(state, algorithm, console, plain=args.plain)
            return 0

        if args.command == "compare":
            _run_compare(_load_processes(args), args.algorithms, args.quantum, console)
            return 0

        if args.command == "example":
            algorithm = Algorithm.parse(args.algorithm)
            processes = example_processes(algorithm)
            if args.output:
                path = save_workload(args.output, processes)
                console.print(f"Saved {len(processes)} processes to [green]{path}[/green]")
            else:
                _print_workload(processes, f"Example: {ALGORITHM_NAMES[algorithm]}", console)
            return 0

        if args.command == "report":
            algorithm = Algorithm.parse(args.algorithm)
            state = run_to_completion(reset(_load_processes(args), args.quantum), algorithm)
            console.print(Markdown(build_report(state, algorithm)))
            return 0
    except (ValueError, OSError) as exc:
        logger.debug("Command failed", exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
