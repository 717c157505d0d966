"""
Built-in workloads, colour palette and display names.

The per-algorithm examples are small four-process batches picked to show
what each policy is good or bad at (convoy effect for FCFS, preemption
for SRTF, starvation for Priority, and so on).
"""

from __future__ import annotations

from typing import Dict, List, Tuple, Union

from .models import Algorithm, Process

DEFAULT_QUANTUM = 2

PROCESS_COLORS = [
    "#ef4444",
    "#f97316",
    "#eab308",
    "#22c55e",
    "#14b8a6",
    "#06b6d4",
    "#3b82f6",
    "#8b5cf6",
    "#d946ef",
    "#f43f5e",
    # lighter
    "#fca5a5",
    "#fdba74",
    "#fde047",
    "#86efac",
    "#5eead4",
    "#67e8f9",
    "#93c5fd",
    "#c4b5fd",
    "#f0abfc",
    "#fda4af",
    # darker
    "#4f46e5",
    "#059669",
    "#0284c7",
    "#65a30d",
    "#7c3aed",
    "#db2777",
    "#dc2626",
    "#ea580c",
    "#ca8a04",
    "#16a34a",
]

ALGORITHM_NAMES: Dict[Algorithm, str] = {
    Algorithm.FCFS: "First Come First Serve (FCFS)",
    Algorithm.SJF: "Shortest Job First (Non-Preemptive)",
    Algorithm.SRTF: "Shortest Remaining Time First (Preemptive)",
    Algorithm.RR: "Round Robin (RR)",
    Algorithm.PRIORITY: "Priority Scheduling (Non-Preemptive)",
    Algorithm.HRRN: "Highest Response Ratio Next (HRRN)",
    Algorithm.PRIORITY_P: "Priority Scheduling (Preemptive)",
    Algorithm.LJF: "Longest Job First (Non-Preemptive)",
    Algorithm.LRTF: "Longest Remaining Time First (Preemptive)",
}

# (name, arrival_time, burst_time, priority)
Row = Tuple[str, int, int, int]

DEFAULT_WORKLOAD: List[Row] = [
    ("P1", 0, 6, 2),
    ("P2", 2, 4, 1),
    ("P3", 4, 2, 3),
]

ALGORITHM_EXAMPLES: Dict[Algorithm, List[Row]] = {
    # Convoy effect: a long job arrives first and short ones queue behind it.
    Algorithm.FCFS: [("Long", 0, 10, 1), ("Quick1", 1, 2, 1), ("Quick2", 2, 1, 1), ("Quick3", 3, 2, 1)],
    Algorithm.SJF: [("Medium", 0, 6, 1), ("Short", 2, 2, 1), ("Long", 3, 8, 1), ("Tiny", 4, 1, 1)],
    Algorithm.SRTF: [("First", 0, 8, 1), ("Short1", 1, 2, 1), ("Short2", 2, 1, 1), ("Med", 3, 3, 1)],
    Algorithm.RR: [("P1", 0, 5, 1), ("P2", 1, 4, 1), ("P3", 2, 3, 1), ("P4", 3, 6, 1)],
    Algorithm.PRIORITY: [("LowPrio", 0, 4, 5), ("HighPrio", 1, 3, 1), ("MidPrio", 2, 2, 3), ("TopPrio", 4, 5, 1)],
    Algorithm.HRRN: [("First", 0, 8, 1), ("Short", 1, 2, 1), ("Long", 2, 6, 1), ("Late", 6, 3, 1)],
    Algorithm.PRIORITY_P: [("Low", 0, 6, 4), ("High", 2, 3, 1), ("Mid", 3, 2, 2), ("VHigh", 5, 2, 1)],
    Algorithm.LJF: [("Short", 0, 2, 1), ("Long", 1, 8, 1), ("Medium", 2, 5, 1), ("Tiny", 3, 1, 1)],
    Algorithm.LRTF: [("First", 0, 4, 1), ("Long", 1, 6, 1), ("Short", 3, 2, 1), ("Med", 4, 3, 1)],
}


def palette_color(index: int) -> str:
    return PROCESS_COLORS[index % len(PROCESS_COLORS)]


def _rows_to_processes(rows: List[Row]) -> Tuple[Process, ...]:
    return tuple(
        Process(
            pid=f"p{idx}",
            name=name,
            arrival_time=arrival,
            burst_time=burst,
            priority=priority,
            color=palette_color(idx - 1),
            remaining_time=burst,
        )
        for idx, (name, arrival, burst, priority) in enumerate(rows, start=1)
    )


def default_processes() -> Tuple[Process, ...]:
    return _rows_to_processes(DEFAULT_WORKLOAD)


def example_processes(algorithm: Union[Algorithm, str]) -> Tuple[Process, ...]:
    """
    Showcase workload for the given algorithm, with ids p1..pn.
    """
    return _rows_to_processes(ALGORITHM_EXAMPLES[Algorithm.parse(algorithm)])
