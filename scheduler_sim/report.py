"""
Textual critique of a finished simulation.

The report reads the final state only. To suggest a better policy it
replays the same workload under every other algorithm, on fresh states.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Union

from .engine import reset, run_to_completion
from .metrics import compute_system_metrics, summarize_processes
from .models import Algorithm, SchedulerState
from .presets import ALGORITHM_NAMES

logger = logging.getLogger(__name__)


def compare_algorithms(state: SchedulerState) -> Dict[Algorithm, float]:
    """
    Average waiting time of the state's workload under every algorithm.
    """
    results: Dict[Algorithm, float] = {}
    for alg in Algorithm:
        final = run_to_completion(reset(state.processes, state.quantum), alg)
        results[alg] = summarize_processes(final.processes)["avg_waiting"]
    return results


def _observations(state: SchedulerState, algorithm: Algorithm, summary: dict) -> List[str]:
    notes: List[str] = []
    system = compute_system_metrics(state)
    avg_wait = summary["avg_waiting"]

    if not algorithm.preemptive and state.gantt_chart:
        first = state.process(state.gantt_chart[0].pid)
        others = [p for p in state.processes if p.pid != first.pid]
        shorter = [p for p in others if p.burst_time < first.burst_time and p.arrival_time < first.completion_time]
        if shorter and first.burst_time >= 2 * min(p.burst_time for p in shorter):
            notes.append(
                f"Convoy effect: {first.name} (burst {first.burst_time}) held the CPU while "
                f"{len(shorter)} shorter process(es) waited behind it."
            )

    starved = [p for p in state.processes if avg_wait > 0 and p.waiting_time > 2 * avg_wait]
    if starved:
        names = ", ".join(f"{p.name} (waited {p.waiting_time})" for p in starved)
        notes.append(f"Possible starvation: {names} waited more than twice the average.")

    notes.append(f"{system.context_switches} context switch(es) over {system.makespan} time units.")
    if system.cpu_utilization < 1.0:
        idle = system.makespan - system.cpu_busy_time
        notes.append(f"The CPU sat idle for {idle} time unit(s) waiting for arrivals.")
    return notes


def build_report(state: SchedulerState, algorithm: Union[Algorithm, str]) -> str:
    """
    Markdown report for a finished run.

    Raises ValueError if the simulation has not finished yet.
    """
    if not state.is_finished:
        raise ValueError("Report is only available once the simulation has finished")

    algorithm = Algorithm.parse(algorithm)
    summary = summarize_processes(state.processes)
    system = compute_system_metrics(state)

    lines = [
        f"# {ALGORITHM_NAMES[algorithm]}",
        "",
        f"- Total execution time: {system.makespan} time units",
        f"- CPU utilization: {system.cpu_utilization * 100:.2f}%",
        f"- Average waiting time: {summary['avg_waiting']:.2f}",
        f"- Average turnaround time: {summary['avg_turnaround']:.2f}",
    ]
    if algorithm is Algorithm.RR:
        lines.append(f"- Quantum: {state.quantum}")

    lines += ["", "## Processes", ""]
    for p in state.processes:
        lines.append(
            f"- {p.name}: arrived {p.arrival_time}, burst {p.burst_time}, priority {p.priority}, "
            f"wait {p.waiting_time}, TA {p.turnaround_time}"
        )

    if not state.processes:
        lines.append("- (no processes)")
        return "\n".join(lines) + "\n"

    lines += ["", "## Observations", ""]
    lines += [f"- {note}" for note in _observations(state, algorithm, summary)]

    averages = compare_algorithms(state)
    best = min(averages, key=lambda alg: (averages[alg], list(Algorithm).index(alg)))
    lines += ["", "## Recommendation", ""]
    if averages[best] < averages[algorithm]:
        lines.append(
            f"{ALGORITHM_NAMES[best]} would have lowered the average waiting time "
            f"from {averages[algorithm]:.2f} to {averages[best]:.2f} on this batch."
        )
    else:
        lines.append(f"{ALGORITHM_NAMES[algorithm]} already achieves the lowest average waiting time on this batch.")

    logger.debug("Built report for %s (%d processes)", algorithm.value, len(state.processes))
    return "\n".join(lines) + "\n"
