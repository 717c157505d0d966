"""
Selection and preemption rules for every scheduling policy.

Each policy is an entry in two tables keyed by Algorithm: a key function
used to pick the next process from the ready queue, and a comparison that
decides whether a ready process may take the CPU from the running one.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Callable, Dict, Optional, Sequence

from .models import Algorithm, Process


def response_ratio(p: Process, now: int) -> Fraction:
    """
    HRRN response ratio: (time waited since arrival + burst) / burst.
    """
    return Fraction((now - p.arrival_time) + p.burst_time, p.burst_time)


# Smaller key wins. Maximising policies negate their metric.
SELECTION_KEYS: Dict[Algorithm, Optional[Callable[[Process, int], object]]] = {
    Algorithm.FCFS: None,
    Algorithm.RR: None,
    Algorithm.SJF: lambda p, now: p.burst_time,
    Algorithm.SRTF: lambda p, now: p.remaining_time,
    Algorithm.PRIORITY: lambda p, now: p.priority,
    Algorithm.PRIORITY_P: lambda p, now: p.priority,
    Algorithm.HRRN: lambda p, now: -response_ratio(p, now),
    Algorithm.LJF: lambda p, now: -p.burst_time,
    Algorithm.LRTF: lambda p, now: -p.remaining_time,
}

# candidate, running -> True if the candidate should preempt.
PREEMPTION_RULES: Dict[Algorithm, Callable[[Process, Process], bool]] = {
    Algorithm.SRTF: lambda cand, cur: cand.remaining_time < cur.remaining_time,
    Algorithm.PRIORITY_P: lambda cand, cur: cand.priority < cur.priority,
    Algorithm.LRTF: lambda cand, cur: cand.remaining_time > cur.remaining_time,
}


def select_next(algorithm: Algorithm, candidates: Sequence[Process], now: int) -> int:
    """
    Return the index in candidates (the ready queue, in order) of the process to dispatch.

    Ties on the policy metric go to the earlier arrival, then to the
    earlier queue position.
    """
    if not candidates:
        raise ValueError("Cannot select from an empty ready queue")

    key = SELECTION_KEYS[algorithm]
    if key is None:
        return 0

    return min(
        range(len(candidates)),
        key=lambda idx: (key(candidates[idx], now), candidates[idx].arrival_time, idx),
    )


def should_preempt(
    algorithm: Algorithm,
    running: Process,
    candidates: Sequence[Process],
    quantum_clock: int,
    quantum: int,
) -> bool:
    if algorithm is Algorithm.RR:
        return quantum_clock >= quantum

    rule = PREEMPTION_RULES.get(algorithm)
    if rule is None:
        return False
    return any(rule(cand, running) for cand in candidates)
