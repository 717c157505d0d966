"""
Editing the list of process descriptors before a run starts.

All functions take a sequence of processes and return a new tuple;
the input is never modified.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional, Sequence, Tuple

from .models import Process
from .presets import palette_color

logger = logging.getLogger(__name__)


def validate_processes(processes: Iterable[Process]) -> None:
    """
    Reject workloads the engine cannot simulate.

    Raises ValueError for negative arrival times, burst times below 1,
    non-integer times or priorities, and duplicate pids.
    """
    seen: set[str] = set()
    for p in processes:
        for field_name in ("arrival_time", "burst_time", "priority"):
            value = getattr(p, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Process {p.pid!r}: {field_name} must be an integer, got {value!r}")
        if p.arrival_time < 0:
            raise ValueError(f"Process {p.pid!r}: arrival_time must be >= 0, got {p.arrival_time}")
        if p.burst_time < 1:
            raise ValueError(f"Process {p.pid!r}: burst_time must be >= 1, got {p.burst_time}")
        if p.pid in seen:
            raise ValueError(f"Duplicate process id {p.pid!r}")
        seen.add(p.pid)


def _next_index(processes: Sequence[Process]) -> int:
    taken = {p.pid for p in processes}
    n = len(processes) + 1
    while f"p{n}" in taken:
        n += 1
    return n


def add_process(
    processes: Sequence[Process],
    arrival_time: int,
    burst_time: int,
    priority: int = 0,
    color: Optional[str] = None,
) -> Tuple[Process, ...]:
    n = _next_index(processes)
    new = Process(
        pid=f"p{n}",
        name=f"P{n}",
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
        color=color or palette_color(len(processes)),
        remaining_time=burst_time,
    )
    validate_processes([new])
    logger.debug("Added %s (arrival=%d, burst=%d, priority=%d)", new.pid, arrival_time, burst_time, priority)
    return tuple(processes) + (new,)


def update_process(processes: Sequence[Process], pid: str, **changes) -> Tuple[Process, ...]:
    """
    Replace fields of one process. A new burst_time also resets remaining_time.
    """
    if pid not in {p.pid for p in processes}:
        raise KeyError(pid)
    if "burst_time" in changes:
        changes.setdefault("remaining_time", changes["burst_time"])

    updated = tuple(replace(p, **changes) if p.pid == pid else p for p in processes)
    validate_processes(updated)
    return updated


def remove_process(processes: Sequence[Process], pid: str) -> Tuple[Process, ...]:
    if pid not in {p.pid for p in processes}:
        raise KeyError(pid)
    return tuple(p for p in processes if p.pid != pid)
