from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from handheld.instructions import Instruction, swap_kind
from handheld.program import Program
from handheld.vm import ExecutionResult, Terminated, execute

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepairSettings:
    # 1 keeps the search strictly sequential with early exit on the first success.
    max_concurrency: int = 1


@dataclass(frozen=True, slots=True)
class Candidate:
    index: int
    original: Instruction
    replacement: Instruction
    program: Program


@dataclass(frozen=True, slots=True)
class Repair:
    index: int
    original: Instruction
    replacement: Instruction
    program: Program
    result: Terminated

    @property
    def accumulator(self) -> int:
        return self.result.accumulator


def iter_candidates(program: Program) -> Iterator[Candidate]:
    for index, instr in enumerate(program):
        replacement = swap_kind(instr)
        if replacement is None:
            continue
        yield Candidate(
            index=index,
            original=instr,
            replacement=replacement,
            program=program.replace(index, replacement),
        )


def _to_repair(candidate: Candidate, result: Terminated) -> Repair:
    return Repair(
        index=candidate.index,
        original=candidate.original,
        replacement=candidate.replacement,
        program=candidate.program,
        result=result,
    )


def _search_sequential(program: Program) -> Repair | None:
    for candidate in iter_candidates(program):
        result = execute(candidate.program)
        logger.debug(
            "candidate %d (%s -> %s): %s",
            candidate.index,
            candidate.original.render(),
            candidate.replacement.render(),
            result.status.value,
        )
        if isinstance(result, Terminated):
            return _to_repair(candidate, result)
    return None


def _evaluate(program: Program, index: int, replacement: Instruction) -> ExecutionResult:
    # The candidate copy lives only for the duration of its own run.
    return execute(program.replace(index, replacement))


def _search_pooled(program: Program, *, max_workers: int) -> Repair | None:
    # All candidates run; the lowest successful index wins regardless of completion order.
    swaps: list[tuple[int, Instruction]] = []
    for index, instr in enumerate(program):
        replacement = swap_kind(instr)
        if replacement is not None:
            swaps.append((index, replacement))

    best: tuple[int, Instruction, Terminated] | None = None
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="handheld_repair") as pool:
        results = pool.map(
            _evaluate,
            itertools.repeat(program),
            (index for index, _ in swaps),
            (replacement for _, replacement in swaps),
        )
        for (index, replacement), result in zip(swaps, results):
            if not isinstance(result, Terminated):
                continue
            if best is None or index < best[0]:
                best = (index, replacement, result)

    if best is None:
        return None
    index, replacement, result = best
    return _to_repair(
        Candidate(
            index=index,
            original=program[index],
            replacement=replacement,
            program=program.replace(index, replacement),
        ),
        result,
    )


def find_repair(program: Program, *, settings: RepairSettings | None = None) -> Repair | None:
    """
    Try every nop/jmp swap in ascending index order and return the first one
    whose program terminates, or None when no single swap does.
    """
    settings = settings or RepairSettings()
    max_workers = max(1, int(settings.max_concurrency))
    if max_workers == 1:
        found = _search_sequential(program)
    else:
        found = _search_pooled(program, max_workers=max_workers)

    if found is None:
        logger.info("no single-instruction repair terminates (%d instructions)", len(program))
    else:
        logger.info(
            "repaired index %d: %s -> %s (accumulator %d)",
            found.index,
            found.original.render(),
            found.replacement.render(),
            found.accumulator,
        )
    return found


def repair(program: Program, *, settings: RepairSettings | None = None) -> Program | None:
    found = find_repair(program, settings=settings)
    return None if found is None else found.program
