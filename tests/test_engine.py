from dataclasses import replace

import pytest

from scheduler_sim.engine import iter_steps, reset, run_to_completion, simulate, step
from scheduler_sim.metrics import executed_time_by_process
from scheduler_sim.models import Algorithm, GanttBlock, Process, ProcessState
from scheduler_sim.presets import ALGORITHM_EXAMPLES, example_processes


def _proc(pid, arrival, burst, priority=0):
    return Process(pid, pid.upper(), arrival_time=arrival, burst_time=burst, priority=priority, color="#000000")


def _procs():
    return [_proc("p1", 0, 4), _proc("p2", 1, 3), _proc("p3", 2, 2)]


def _blocks(state):
    return [(b.pid, b.start_time, b.end_time) for b in state.gantt_chart]


def test_fcfs_gantt_and_times():
    final = simulate(_procs(), Algorithm.FCFS)
    assert _blocks(final) == [("p1", 0, 4), ("p2", 4, 7), ("p3", 7, 9)]
    assert [p.waiting_time for p in final.processes] == [0, 3, 5]
    assert [p.turnaround_time for p in final.processes] == [4, 6, 7]
    assert [p.start_time for p in final.processes] == [0, 4, 7]
    assert final.completed_queue == ("p1", "p2", "p3")
    assert final.is_finished
    # clock stays on the tick in which the last process finished
    assert final.current_time == 8


def test_first_tick_dispatches_and_runs():
    state = step(reset(_procs(), 2), "fcfs")
    assert state.current_time == 1
    assert state.current_pid == "p1"
    assert state.process("p1").state is ProcessState.RUNNING
    assert state.process("p1").remaining_time == 3
    assert state.process("p1").start_time == 0
    assert state.gantt_chart == (GanttBlock("p1", 0, 1, "#000000"),)


def test_arrivals_join_ready_queue_in_order():
    state = reset(_procs(), 2)
    for _ in range(3):
        state = step(state, Algorithm.FCFS)
    assert state.ready_queue == ("p2", "p3")
    assert state.process("p2").state is ProcessState.READY
    assert state.process("p3").state is ProcessState.READY


def test_rr_quantum_slicing():
    procs = [_proc("p1", 0, 5), _proc("p2", 1, 3), _proc("p3", 2, 2)]
    final = simulate(procs, Algorithm.RR, quantum=2)
    assert _blocks(final) == [
        ("p1", 0, 2),
        ("p2", 2, 4),
        ("p3", 4, 6),
        ("p1", 6, 8),
        ("p2", 8, 9),
        ("p1", 9, 10),
    ]
    assert all(b.duration <= 2 for b in final.gantt_chart)
    p1_starts = [b.start_time for b in final.gantt_chart if b.pid == "p1"]
    assert p1_starts == [0, 6, 9]


def test_rr_single_process_keeps_cpu_after_expiry():
    final = simulate([_proc("p1", 0, 5)], Algorithm.RR, quantum=2)
    assert _blocks(final) == [("p1", 0, 5)]
    assert final.process("p1").start_time == 0


def test_srtf_preempts_on_shorter_arrival():
    procs = [_proc("p1", 0, 8), _proc("p2", 1, 2)]
    state = reset(procs, 2)
    state = step(state, Algorithm.SRTF)
    state = step(state, Algorithm.SRTF)
    assert state.current_pid == "p2"
    assert state.process("p1").state is ProcessState.READY
    assert state.ready_queue == ("p1",)
    assert _blocks(state)[0] == ("p1", 0, 1)

    final = run_to_completion(state, Algorithm.SRTF)
    assert _blocks(final) == [("p1", 0, 1), ("p2", 1, 3), ("p1", 3, 10)]
    assert final.process("p2").waiting_time == 0
    assert final.process("p1").waiting_time == 2


def test_sjf_does_not_preempt():
    procs = [_proc("p1", 0, 8), _proc("p2", 1, 2)]
    final = simulate(procs, Algorithm.SJF)
    assert _blocks(final) == [("p1", 0, 8), ("p2", 8, 10)]


def test_priority_non_preemptive():
    final = simulate(example_processes(Algorithm.PRIORITY_P), Algorithm.PRIORITY)
    assert _blocks(final) == [("p1", 0, 6), ("p2", 6, 9), ("p4", 9, 11), ("p3", 11, 13)]


def test_priority_preemptive():
    final = simulate(example_processes(Algorithm.PRIORITY_P), Algorithm.PRIORITY_P)
    assert _blocks(final) == [("p1", 0, 2), ("p2", 2, 5), ("p4", 5, 7), ("p3", 7, 9), ("p1", 9, 13)]


def test_hrrn_prefers_long_waiting_job_over_fresh_short_one():
    procs = [_proc("p1", 0, 10), _proc("p2", 1, 9), _proc("p3", 10, 1)]
    hrrn = simulate(procs, Algorithm.HRRN)
    sjf = simulate(procs, Algorithm.SJF)
    assert hrrn.completed_queue == ("p1", "p2", "p3")
    assert sjf.completed_queue == ("p1", "p3", "p2")


def test_ljf_picks_longest_burst():
    final = simulate(example_processes(Algorithm.LJF), Algorithm.LJF)
    assert _blocks(final) == [("p1", 0, 2), ("p2", 2, 10), ("p3", 10, 15), ("p4", 15, 16)]


def test_lrtf_preempts_on_longer_remaining_time():
    state = reset(example_processes(Algorithm.LRTF), 2)
    state = step(state, Algorithm.LRTF)
    state = step(state, Algorithm.LRTF)
    assert state.current_pid == "p2"
    assert state.ready_queue == ("p1",)

    final = run_to_completion(state, Algorithm.LRTF)
    assert final.completed_queue == ("p3", "p1", "p2", "p4")
    assert max(p.completion_time for p in final.processes) == 15


def test_idle_cpu_leaves_gap_in_gantt():
    final = simulate([_proc("p1", 3, 1)], Algorithm.FCFS)
    assert _blocks(final) == [("p1", 3, 4)]
    assert final.process("p1").completion_time == 4
    assert final.process("p1").waiting_time == 0
    assert final.current_time == 3


@pytest.mark.parametrize("algorithm", list(Algorithm))
@pytest.mark.parametrize("example", list(ALGORITHM_EXAMPLES))
def test_run_invariants(algorithm, example):
    procs = example_processes(example)
    state = reset(procs, 2)
    previous = state
    for state in iter_steps(state, algorithm):
        if state.is_finished:
            assert state.current_time == previous.current_time
        else:
            assert state.current_time == previous.current_time + 1
            assert any(p.state is not ProcessState.COMPLETED for p in state.processes)
        assert len(set(state.ready_queue)) == len(state.ready_queue)
        assert state.current_pid not in state.ready_queue
        for p in state.processes:
            assert 0 <= p.remaining_time <= p.burst_time
        previous = state

    assert state.is_finished
    executed = executed_time_by_process(state.gantt_chart)
    for p in state.processes:
        assert p.state is ProcessState.COMPLETED
        assert executed[p.pid] == p.burst_time
        assert p.turnaround_time == p.completion_time - p.arrival_time
        assert p.waiting_time == p.turnaround_time - p.burst_time
        assert p.waiting_time >= 0
    assert sorted(state.completed_queue) == sorted(p.pid for p in procs)


def test_step_does_not_touch_input_state():
    state = reset(_procs(), 2)
    for _ in range(5):
        state = step(state, Algorithm.RR)
    snapshot = replace(state)
    processes_before = state.processes
    ready_before = state.ready_queue

    after = step(state, Algorithm.RR)

    assert after is not state
    assert state == snapshot
    assert state.processes is processes_before
    assert state.ready_queue is ready_before
    assert after.current_time == state.current_time + 1


def test_step_on_finished_state_is_noop():
    final = simulate(_procs(), Algorithm.FCFS)
    assert step(final, Algorithm.FCFS) is final


def test_reset_normalises_dynamic_fields_and_keeps_input():
    stale = [
        replace(
            _proc("p1", 0, 4),
            remaining_time=0,
            start_time=3,
            completion_time=7,
            waiting_time=9,
            turnaround_time=9,
            state=ProcessState.COMPLETED,
        )
    ]
    state = reset(stale, 3)
    p = state.process("p1")
    assert p.remaining_time == 4
    assert p.start_time is None and p.completion_time is None
    assert p.waiting_time == 0 and p.turnaround_time == 0
    assert p.state is ProcessState.WAITING
    assert stale[0].state is ProcessState.COMPLETED
    assert state.quantum == 3
    assert state.quantum_clock == 0
    assert state.ready_queue == () and state.gantt_chart == () and state.completed_queue == ()
    assert state.current_pid is None and not state.is_finished


def test_reset_is_idempotent():
    procs = _procs()
    a = reset(procs, 2)
    b = reset(procs, 2)
    assert a == b
    assert isinstance(a.processes, tuple)
    assert [p.pid for p in a.processes] == ["p1", "p2", "p3"]


def test_zero_processes_finish_on_first_step():
    state = reset([], 2)
    assert not state.is_finished
    state = step(state, Algorithm.FCFS)
    assert state.is_finished
    assert state.current_time == 0
    assert state.gantt_chart == ()


@pytest.mark.parametrize(
    "procs, quantum",
    [
        ([_proc("p1", 0, 1)], 0),
        ([_proc("p1", -1, 1)], 2),
        ([_proc("p1", 0, 0)], 2),
        ([_proc("p1", 0, 1), _proc("p1", 2, 1)], 2),
    ],
)
def test_reset_rejects_bad_input(procs, quantum):
    with pytest.raises(ValueError):
        reset(procs, quantum)


def test_unknown_algorithm_rejected():
    with pytest.raises(ValueError):
        step(reset(_procs(), 2), "lottery")


def test_run_to_completion_step_limit():
    with pytest.raises(RuntimeError):
        run_to_completion(reset(_procs(), 2), Algorithm.FCFS, max_steps=3)


def test_reset_accepts_one_pass_iterable():
    state = reset((p for p in _procs()), 2)
    assert [p.pid for p in state.processes] == ["p1", "p2", "p3"]
    final = run_to_completion(state, Algorithm.FCFS)
    assert final.completed_queue == ("p1", "p2", "p3")
