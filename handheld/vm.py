from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from handheld.instructions import Acc, Jump, Nop
from handheld.program import Program

logger = logging.getLogger(__name__)


class ExitStatus(str, Enum):
    TERMINATED = "terminated"
    LOOPED = "looped"
    OUT_OF_BOUNDS = "out_of_bounds"


@dataclass(frozen=True, slots=True)
class Terminated:
    accumulator: int

    @property
    def status(self) -> ExitStatus:
        return ExitStatus.TERMINATED


@dataclass(frozen=True, slots=True)
class Looped:
    # Accumulator as seen before the repeated instruction would run again.
    accumulator: int
    address: int

    @property
    def status(self) -> ExitStatus:
        return ExitStatus.LOOPED


@dataclass(frozen=True, slots=True)
class OutOfBounds:
    pointer: int
    accumulator: int

    @property
    def status(self) -> ExitStatus:
        return ExitStatus.OUT_OF_BOUNDS


ExecutionResult = Terminated | Looped | OutOfBounds


@dataclass(slots=True)
class ExecutionState:
    pointer: int = 0
    accumulator: int = 0
    visited: set[int] = field(default_factory=set)
    path: list[int] = field(default_factory=list)

    @property
    def steps(self) -> int:
        return len(self.path)


@dataclass(frozen=True, slots=True)
class ExecutionTrace:
    result: ExecutionResult
    path: tuple[int, ...]

    @property
    def steps(self) -> int:
        return len(self.path)


def _run(program: Program) -> tuple[ExecutionResult, ExecutionState]:
    state = ExecutionState()
    end = len(program)

    while True:
        ip = state.pointer
        if ip == end:
            return Terminated(accumulator=state.accumulator), state
        if ip < 0 or ip > end:
            return OutOfBounds(pointer=ip, accumulator=state.accumulator), state
        if ip in state.visited:
            return Looped(accumulator=state.accumulator, address=ip), state

        state.visited.add(ip)
        state.path.append(ip)

        instr = program[ip]
        if isinstance(instr, Acc):
            state.accumulator += instr.arg
            state.pointer = ip + 1
        elif isinstance(instr, Jump):
            state.pointer = ip + instr.arg
        elif isinstance(instr, Nop):
            state.pointer = ip + 1
        else:
            raise TypeError(f"unknown instruction: {type(instr).__name__}")


def execute(program: Program) -> ExecutionResult:
    result, state = _run(program)
    logger.debug("executed %d instructions -> %s", state.steps, result)
    return result


def trace(program: Program) -> ExecutionTrace:
    result, state = _run(program)
    return ExecutionTrace(result=result, path=tuple(state.path))
