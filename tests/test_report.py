from dataclasses import replace

import pytest

from scheduler_sim.engine import reset, simulate
from scheduler_sim.models import Algorithm
from scheduler_sim.presets import example_processes
from scheduler_sim.report import build_report, compare_algorithms


def test_report_requires_finished_state():
    with pytest.raises(ValueError):
        build_report(reset(example_processes("fcfs"), 2), Algorithm.FCFS)


def test_fcfs_report_flags_convoy_and_recommends_alternative():
    final = simulate(example_processes("fcfs"), Algorithm.FCFS)
    text = build_report(final, "fcfs")
    assert text.startswith("# First Come First Serve (FCFS)")
    assert "Total execution time: 15 time units" in text
    assert "Average waiting time: 7.25" in text
    assert "Convoy effect: Long (burst 10)" in text
    assert "would have lowered the average waiting time" in text
    assert "- Quick2: arrived 2, burst 1, priority 1, wait 10, TA 11" in text


def test_report_does_not_change_state():
    final = simulate(example_processes("rr"), Algorithm.RR)
    snapshot = replace(final)
    processes_before = final.processes
    build_report(final, Algorithm.RR)
    assert final == snapshot
    assert final.processes is processes_before
    assert final.processes == snapshot.processes
    assert "Quantum: 2" in build_report(final, Algorithm.RR)


def test_report_on_empty_workload():
    final = simulate([], Algorithm.SJF)
    text = build_report(final, Algorithm.SJF)
    assert "(no processes)" in text


def test_compare_algorithms_covers_every_policy():
    final = simulate(example_processes("fcfs"), Algorithm.FCFS)
    averages = compare_algorithms(final)
    assert set(averages) == set(Algorithm)
    assert averages[Algorithm.FCFS] == pytest.approx(7.25)
    assert averages[Algorithm.SJF] == pytest.approx(7.0)
    assert averages[Algorithm.SRTF] < averages[Algorithm.FCFS]
