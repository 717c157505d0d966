import pytest

from scheduler_sim.models import Process
from scheduler_sim.presets import PROCESS_COLORS, default_processes, example_processes
from scheduler_sim.registry import add_process, remove_process, update_process, validate_processes


def test_add_process_numbers_and_colours():
    procs = add_process((), arrival_time=0, burst_time=3)
    procs = add_process(procs, arrival_time=2, burst_time=5, priority=1)
    assert [p.pid for p in procs] == ["p1", "p2"]
    assert [p.name for p in procs] == ["P1", "P2"]
    assert [p.color for p in procs] == PROCESS_COLORS[:2]
    assert procs[1].remaining_time == 5


def test_add_after_remove_skips_taken_ids():
    procs = default_processes()
    procs = remove_process(procs, "p1")
    procs = add_process(procs, arrival_time=0, burst_time=1, color="#123456")
    assert [p.pid for p in procs] == ["p2", "p3", "p4"]
    assert procs[-1].color == "#123456"


def test_update_burst_resets_remaining_and_keeps_input():
    original = default_processes()
    updated = update_process(original, "p2", burst_time=9, priority=4)
    assert updated[1].burst_time == 9
    assert updated[1].remaining_time == 9
    assert updated[1].priority == 4
    assert original[1].burst_time == 4


def test_update_unknown_pid():
    with pytest.raises(KeyError):
        update_process(default_processes(), "p9", burst_time=1)


def test_remove_unknown_pid():
    with pytest.raises(KeyError):
        remove_process(default_processes(), "p9")


def test_update_rejects_invalid_values():
    with pytest.raises(ValueError):
        update_process(default_processes(), "p1", burst_time=0)


def test_add_rejects_negative_arrival():
    with pytest.raises(ValueError):
        add_process((), arrival_time=-1, burst_time=1)


def test_validate_rejects_duplicates_and_non_integers():
    with pytest.raises(ValueError, match="Duplicate"):
        validate_processes([Process("a", "A", 0, 1), Process("a", "A2", 1, 1)])
    with pytest.raises(ValueError, match="integer"):
        validate_processes([Process("a", "A", 0.5, 1)])


def test_examples_are_valid_workloads():
    procs = example_processes("srtf")
    validate_processes(procs)
    assert [p.name for p in procs] == ["First", "Short1", "Short2", "Med"]
    assert [p.pid for p in procs] == ["p1", "p2", "p3", "p4"]
