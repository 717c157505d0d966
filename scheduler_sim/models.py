from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class Algorithm(str, Enum):
    FCFS = "FCFS"
    SJF = "SJF"
    SRTF = "SRTF"
    RR = "RR"
    PRIORITY = "PRIORITY"
    HRRN = "HRRN"
    PRIORITY_P = "PRIORITY_P"
    LJF = "LJF"
    LRTF = "LRTF"

    @classmethod
    def parse(cls, value: Union["Algorithm", str]) -> "Algorithm":
        """
        Accept an Algorithm or a case-insensitive name ("rr", "priority-p").
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown algorithm '{value}'") from None

    @property
    def preemptive(self) -> bool:
        return self in {Algorithm.SRTF, Algorithm.RR, Algorithm.PRIORITY_P, Algorithm.LRTF}


class ProcessState(str, Enum):
    WAITING = "waiting"
    READY = "ready"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Process:
    """
    A schedulable unit of work.

    The first six fields describe the process; the rest are dynamic and
    only meaningful inside a SchedulerState. waiting_time and
    turnaround_time are filled in at completion.
    """

    pid: str
    name: str
    arrival_time: int
    burst_time: int
    priority: int = 0
    color: str = "#3b82f6"

    remaining_time: int = 0
    start_time: Optional[int] = None
    completion_time: Optional[int] = None
    waiting_time: int = 0
    turnaround_time: int = 0
    state: ProcessState = ProcessState.WAITING


@dataclass(frozen=True)
class GanttBlock:
    """
    One contiguous interval [start_time, end_time) during which a process held the CPU.
    """

    pid: str
    start_time: int
    end_time: int
    color: str

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class SchedulerState:
    current_time: int
    processes: Tuple[Process, ...]
    ready_queue: Tuple[str, ...] = ()
    completed_queue: Tuple[str, ...] = ()
    current_pid: Optional[str] = None
    gantt_chart: Tuple[GanttBlock, ...] = ()
    is_finished: bool = False
    quantum: int = 2
    quantum_clock: int = 0

    def process(self, pid: str) -> Process:
        for p in self.processes:
            if p.pid == pid:
                return p
        raise KeyError(pid)

    @property
    def current_process(self) -> Optional[Process]:
        if self.current_pid is None:
            return None
        return self.process(self.current_pid)
