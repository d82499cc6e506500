from __future__ import annotations

import tracemalloc

import pytest

from handheld.instructions import Acc, Jump, Nop
from handheld.program import Program
from handheld.repair import RepairSettings, find_repair, iter_candidates, repair
from handheld.vm import Terminated, execute


def test_sample_program_repaired_at_index_7(sample_program) -> None:
    found = find_repair(sample_program)
    assert found is not None
    assert found.index == 7
    assert found.original == Jump(-4)
    assert found.replacement == Nop(-4)
    assert found.result == Terminated(accumulator=8)
    assert found.accumulator == 8

    expected = sample_program.replace(7, Nop(-4))
    assert found.program == expected
    assert execute(found.program) == Terminated(accumulator=8)


def test_repair_returns_program(sample_program) -> None:
    fixed = repair(sample_program)
    assert fixed is not None
    diffs = [i for i, (a, b) in enumerate(zip(sample_program, fixed)) if a != b]
    assert diffs == [7]
    assert len(fixed) == len(sample_program)


def test_candidates_skip_acc_and_run_in_index_order(sample_program) -> None:
    candidates = list(iter_candidates(sample_program))
    assert [c.index for c in candidates] == [0, 2, 4, 7]
    assert [c.replacement for c in candidates] == [Jump(0), Nop(4), Nop(-3), Nop(-4)]
    for c in candidates:
        assert c.program[c.index] == c.replacement
        assert sample_program[c.index] == c.original


def test_no_repair_found_is_a_value() -> None:
    # Every swap still loops: the acc block can never be escaped.
    program = Program.of(Acc(1), Jump(-1), Acc(2), Jump(-1))
    assert find_repair(program) is None
    assert repair(program) is None


def test_acc_only_program_has_no_candidates() -> None:
    program = Program.of(Acc(1), Acc(2))
    assert list(iter_candidates(program)) == []
    assert find_repair(program) is None


def test_lowest_index_wins_when_several_swaps_terminate() -> None:
    # Swapping index 0 or index 1 both terminate; index 0 must be chosen.
    program = Program.of(Nop(3), Jump(0), Acc(5))
    found = find_repair(program)
    assert found is not None
    assert found.index == 0
    assert found.result == Terminated(accumulator=0)


def test_already_terminating_program_rejects_swaps_that_loop() -> None:
    # Swapping nop +0 -> jmp +0 loops, so index 0 is rejected; index 2 still terminates.
    program = Program.of(Nop(0), Acc(3), Nop(1))
    assert execute(program) == Terminated(accumulator=3)
    found = find_repair(program)
    assert found is not None
    assert found.index == 2
    assert execute(found.program) == Terminated(accumulator=3)


def test_out_of_bounds_candidate_is_not_accepted() -> None:
    # Swapping index 0 jumps past the end; only the index 2 swap terminates cleanly.
    program = Program.of(Nop(5), Acc(1), Jump(0))
    found = find_repair(program)
    assert found is not None
    assert found.index == 2


@pytest.mark.parametrize("workers", [2, 4, 16])
def test_pooled_search_matches_sequential(sample_program, workers: int) -> None:
    sequential = find_repair(sample_program)
    pooled = find_repair(sample_program, settings=RepairSettings(max_concurrency=workers))
    assert pooled == sequential


@pytest.mark.parametrize("workers", [1, 3])
def test_pooled_search_keeps_lowest_index(workers: int) -> None:
    program = Program.of(Nop(3), Jump(0), Acc(5))
    found = find_repair(program, settings=RepairSettings(max_concurrency=workers))
    assert found is not None
    assert found.index == 0


def test_repair_leaves_input_program_untouched(sample_program) -> None:
    before = sample_program.instructions
    find_repair(sample_program, settings=RepairSettings(max_concurrency=3))
    assert sample_program.instructions == before


def test_pooled_search_does_not_hold_every_candidate_copy() -> None:
    program = Program.of(*[Jump(0)] * 3000)
    # One full copy of this program is roughly 24 KB; all 3000 at once would be ~70 MB.
    tracemalloc.start()
    try:
        found = find_repair(program, settings=RepairSettings(max_concurrency=4))
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()
    assert found is None
    assert peak < 20 * 1024 * 1024
