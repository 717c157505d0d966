"""
Scheduler simulator package.

A pure, tick-by-tick CPU scheduling engine (reset/step) with a terminal
front end for watching how each policy picks the next process to run.
"""

from .engine import reset, run_to_completion, simulate, step
from .models import Algorithm, GanttBlock, Process, ProcessState, SchedulerState

__all__ = [
    "Algorithm",
    "GanttBlock",
    "Process",
    "ProcessState",
    "SchedulerState",
    "reset",
    "run_to_completion",
    "simulate",
    "step",
]
