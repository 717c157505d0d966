from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, Sequence

from .models import GanttBlock, Process, ProcessState, SchedulerState


@dataclass(frozen=True)
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float
    context_switches: int = 0
    starvation_count: int = 0


def executed_time_by_process(gantt_chart: Iterable[GanttBlock]) -> Dict[str, int]:
    """
    Total CPU time each process received, summed over its Gantt blocks.
    """
    totals: Dict[str, int] = defaultdict(int)
    for block in gantt_chart:
        totals[block.pid] += block.duration
    return dict(totals)


def count_context_switches(gantt_chart: Sequence[GanttBlock]) -> int:
    """
    Number of times the CPU passed from one process to a different one.
    """
    return sum(1 for prev, cur in zip(gantt_chart, gantt_chart[1:]) if prev.pid != cur.pid)


def _completed(processes: Iterable[Process]) -> list:
    return [p for p in processes if p.state is ProcessState.COMPLETED]


def summarize_processes(processes: Iterable[Process]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.

    Only completed processes count; waiting and turnaround times are not
    defined before completion.
    """
    done = _completed(processes)
    if not done:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(done)
    return {
        "avg_waiting": sum(p.waiting_time for p in done) / n,
        "avg_turnaround": sum(p.turnaround_time for p in done) / n,
        "avg_response": sum(p.start_time - p.arrival_time for p in done) / n,
    }


def compute_system_metrics(state: SchedulerState) -> SystemMetrics:
    """
    Compute throughput and CPU utilization from the completed processes
    and Gantt blocks of a state.
    """
    done = _completed(state.processes)
    if not done:
        return SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)

    makespan = max(p.completion_time for p in done)
    cpu_busy_time = sum(block.duration for block in state.gantt_chart)

    throughput = len(done) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    # Starvation: waiting time more than 2x the average.
    avg_wait = sum(p.waiting_time for p in done) / len(done)
    starvation_count = sum(1 for p in done if p.waiting_time > 2 * avg_wait)

    return SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
        context_switches=count_context_switches(state.gantt_chart),
        starvation_count=starvation_count,
    )
