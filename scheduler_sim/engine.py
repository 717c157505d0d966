"""
Discrete-time scheduling engine.

reset() builds the initial snapshot of a run and step() advances it by one
time unit. Both are pure: every snapshot is a frozen SchedulerState, and
step() returns a new one instead of touching its input. The tick at
current_time t covers the interval [t, t+1).
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterator, List, Optional, Sequence, Union

from .models import Algorithm, GanttBlock, Process, ProcessState, SchedulerState
from .policies import select_next, should_preempt
from .registry import validate_processes

logger = logging.getLogger(__name__)


def reset(processes: Sequence[Process], quantum: int) -> SchedulerState:
    """
    Start a run: copy the descriptors and normalise their dynamic fields.
    """
    if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum < 1:
        raise ValueError(f"Quantum must be a positive integer, got {quantum!r}")
    processes = tuple(processes)
    validate_processes(processes)

    fresh = tuple(
        replace(
            p,
            remaining_time=p.burst_time,
            start_time=None,
            completion_time=None,
            waiting_time=0,
            turnaround_time=0,
            state=ProcessState.WAITING,
        )
        for p in processes
    )
    return SchedulerState(current_time=0, processes=fresh, quantum=quantum)


def _extend_gantt(gantt: List[GanttBlock], p: Process, now: int) -> None:
    last = gantt[-1] if gantt else None
    if last is not None and last.pid == p.pid and last.end_time == now:
        gantt[-1] = replace(last, end_time=now + 1)
    else:
        gantt.append(GanttBlock(pid=p.pid, start_time=now, end_time=now + 1, color=p.color))


def step(state: SchedulerState, algorithm: Union[Algorithm, str]) -> SchedulerState:
    """
    Advance the simulation by one time unit.

    Phases, in order: arrivals join the ready queue; the running process
    may lose the CPU (quantum expiry or preemption); a free CPU takes the
    next process chosen by the policy; the process on the CPU runs for
    the tick and possibly completes; the clock moves on unless every
    process is done. A finished state is returned as is.
    """
    if state.is_finished:
        return state

    algorithm = Algorithm.parse(algorithm)
    now = state.current_time

    procs: Dict[str, Process] = {p.pid: p for p in state.processes}
    ready: List[str] = list(state.ready_queue)
    completed: List[str] = list(state.completed_queue)
    gantt: List[GanttBlock] = list(state.gantt_chart)
    current: Optional[str] = state.current_pid
    quantum_clock = state.quantum_clock

    for p in state.processes:
        if p.arrival_time == now and p.state is ProcessState.WAITING:
            procs[p.pid] = replace(p, state=ProcessState.READY)
            if p.pid not in ready:
                ready.append(p.pid)

    if current is not None:
        running = procs[current]
        if should_preempt(algorithm, running, [procs[pid] for pid in ready], quantum_clock, state.quantum):
            logger.debug("t=%d: %s leaves the CPU (%s, remaining=%d)", now, current, algorithm.value, running.remaining_time)
            procs[current] = replace(running, state=ProcessState.READY)
            ready.append(current)
            current = None
            quantum_clock = 0

    if current is None and ready:
        idx = select_next(algorithm, [procs[pid] for pid in ready], now)
        current = ready.pop(idx)
        chosen = procs[current]
        procs[current] = replace(
            chosen,
            state=ProcessState.RUNNING,
            start_time=now if chosen.start_time is None else chosen.start_time,
        )
        logger.debug("t=%d: dispatch %s", now, current)

    if current is not None:
        running = procs[current]
        running = replace(running, remaining_time=running.remaining_time - 1)
        quantum_clock += 1
        _extend_gantt(gantt, running, now)

        if running.remaining_time == 0:
            completion = now + 1
            turnaround = completion - running.arrival_time
            running = replace(
                running,
                state=ProcessState.COMPLETED,
                completion_time=completion,
                turnaround_time=turnaround,
                waiting_time=turnaround - running.burst_time,
            )
            completed.append(current)
            logger.debug("t=%d: %s completed at %d", now, current, completion)
            current = None
            quantum_clock = 0
        procs[running.pid] = running

    processes = tuple(procs[p.pid] for p in state.processes)
    all_done = all(p.state is ProcessState.COMPLETED for p in processes)

    return SchedulerState(
        current_time=now if all_done else now + 1,
        processes=processes,
        ready_queue=tuple(ready),
        completed_queue=tuple(completed),
        current_pid=current,
        gantt_chart=tuple(gantt),
        is_finished=all_done,
        quantum=state.quantum,
        quantum_clock=quantum_clock,
    )


def iter_steps(state: SchedulerState, algorithm: Union[Algorithm, str]) -> Iterator[SchedulerState]:
    """
    Yield every snapshot after state, one per step, ending with the finished one.
    """
    algorithm = Algorithm.parse(algorithm)
    while not state.is_finished:
        state = step(state, algorithm)
        yield state


def run_to_completion(
    state: SchedulerState,
    algorithm: Union[Algorithm, str],
    max_steps: Optional[int] = None,
) -> SchedulerState:
    for count, state in enumerate(iter_steps(state, algorithm), start=1):
        if max_steps is not None and count >= max_steps and not state.is_finished:
            raise RuntimeError(f"Simulation did not finish within {max_steps} steps")
    return state


def simulate(
    processes: Sequence[Process],
    algorithm: Union[Algorithm, str],
    quantum: int = 2,
) -> SchedulerState:
    """
    Run a whole workload under one algorithm and return the finished state.
    """
    return run_to_completion(reset(processes, quantum), algorithm)
