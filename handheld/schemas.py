from __future__ import annotations

from pydantic import BaseModel, Field

from handheld.instructions import Instruction, Opcode
from handheld.repair import Repair
from handheld.vm import ExecutionResult, ExitStatus, Looped, OutOfBounds, Terminated


class InstructionModel(BaseModel):
    opcode: Opcode
    arg: int

    @classmethod
    def from_instruction(cls, instruction: Instruction) -> "InstructionModel":
        return cls(opcode=instruction.opcode, arg=instruction.arg)


class ExecutionReport(BaseModel):
    status: ExitStatus
    accumulator: int
    # Revisited address for looped runs, offending pointer for out-of-bounds runs.
    address: int | None = None

    @classmethod
    def from_result(cls, result: ExecutionResult) -> "ExecutionReport":
        if isinstance(result, Terminated):
            return cls(status=result.status, accumulator=result.accumulator)
        if isinstance(result, Looped):
            return cls(status=result.status, accumulator=result.accumulator, address=result.address)
        if isinstance(result, OutOfBounds):
            return cls(status=result.status, accumulator=result.accumulator, address=result.pointer)
        raise TypeError(f"unknown result: {type(result).__name__}")


class TraceStep(BaseModel):
    address: int = Field(ge=0)
    instruction: InstructionModel


class TraceReport(BaseModel):
    execution: ExecutionReport
    steps: list[TraceStep] = Field(default_factory=list)


class RepairReport(BaseModel):
    found: bool
    index: int | None = Field(default=None, ge=0)
    original: InstructionModel | None = None
    replacement: InstructionModel | None = None
    accumulator: int | None = None

    @classmethod
    def from_repair(cls, repair: Repair | None) -> "RepairReport":
        if repair is None:
            return cls(found=False)
        return cls(
            found=True,
            index=repair.index,
            original=InstructionModel.from_instruction(repair.original),
            replacement=InstructionModel.from_instruction(repair.replacement),
            accumulator=repair.accumulator,
        )


class ConsoleReport(BaseModel):
    program_length: int = Field(ge=0)
    execution: ExecutionReport
    # Absent when the unmodified program already terminates.
    repair: RepairReport | None = None

    @property
    def loop_accumulator(self) -> int | None:
        if self.execution.status != ExitStatus.LOOPED:
            return None
        return self.execution.accumulator

    @property
    def repaired_accumulator(self) -> int | None:
        if self.repair is None:
            return None
        return self.repair.accumulator
