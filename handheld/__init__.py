from __future__ import annotations

from handheld.api import diagnose, diagnose_source, repair_source, run_source
from handheld.errors import ParseError
from handheld.instructions import Acc, Instruction, Jump, Nop, Opcode
from handheld.parser import load_program, parse_instruction, parse_program
from handheld.program import Program
from handheld.repair import Candidate, Repair, RepairSettings, find_repair, iter_candidates, repair
from handheld.schemas import ConsoleReport, ExecutionReport, RepairReport
from handheld.vm import (
    ExecutionResult,
    ExecutionState,
    ExecutionTrace,
    ExitStatus,
    Looped,
    OutOfBounds,
    Terminated,
    execute,
    trace,
)

__all__ = [
    "__version__",
    # Instructions
    "Instruction",
    "Opcode",
    "Nop",
    "Acc",
    "Jump",
    "Program",
    # Parsing
    "ParseError",
    "parse_instruction",
    "parse_program",
    "load_program",
    # Interpreter
    "ExecutionResult",
    "ExecutionState",
    "ExecutionTrace",
    "ExitStatus",
    "Terminated",
    "Looped",
    "OutOfBounds",
    "execute",
    "trace",
    # Repair
    "Candidate",
    "Repair",
    "RepairSettings",
    "iter_candidates",
    "find_repair",
    "repair",
    # Reports
    "ConsoleReport",
    "ExecutionReport",
    "RepairReport",
    # Facade
    "run_source",
    "repair_source",
    "diagnose",
    "diagnose_source",
]

__version__ = "0.1.0"
