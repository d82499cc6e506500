from __future__ import annotations

from handheld.parser import parse_program
from handheld.program import Program
from handheld.repair import Repair, RepairSettings, find_repair
from handheld.schemas import ConsoleReport, ExecutionReport, RepairReport
from handheld.vm import ExecutionResult, Terminated, execute


def run_source(*, src: str) -> ExecutionResult:
    return execute(parse_program(src))


def repair_source(*, src: str, settings: RepairSettings | None = None) -> Repair | None:
    return find_repair(parse_program(src), settings=settings)


def diagnose(program: Program, *, settings: RepairSettings | None = None) -> ConsoleReport:
    result = execute(program)
    report = ConsoleReport(
        program_length=len(program),
        execution=ExecutionReport.from_result(result),
    )
    if isinstance(result, Terminated):
        return report
    found = find_repair(program, settings=settings)
    return report.model_copy(update={"repair": RepairReport.from_repair(found)})


def diagnose_source(*, src: str, settings: RepairSettings | None = None) -> ConsoleReport:
    return diagnose(parse_program(src), settings=settings)
