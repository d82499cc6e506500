from __future__ import annotations

import argparse
import sys
from pathlib import Path

from handheld.api import diagnose
from handheld.config import configure_logging, load_settings
from handheld.errors import ParseError
from handheld.parser import load_program
from handheld.program import Program
from handheld.repair import RepairSettings, find_repair
from handheld.schemas import (
    ExecutionReport,
    InstructionModel,
    RepairReport,
    TraceReport,
    TraceStep,
)
from handheld.vm import ExecutionResult, Looped, OutOfBounds, Terminated, execute, trace


def _existing_path(value: str) -> Path:
    p = Path(value)
    if not p.is_file():
        raise argparse.ArgumentTypeError(f"program file not found: {value}")
    return p


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from e
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {n}")
    return n


def _describe(result: ExecutionResult) -> str:
    if isinstance(result, Terminated):
        return f"terminated {result.accumulator}"
    if isinstance(result, Looped):
        return f"looped {result.accumulator}"
    if isinstance(result, OutOfBounds):
        return f"out_of_bounds {result.pointer}"
    raise TypeError(f"unknown result: {type(result).__name__}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="handheld", description="Run and repair handheld console boot programs."
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("program", type=_existing_path)
    common.add_argument("--json", action="store_true", help="Print a JSON report.")
    common.add_argument("--log-level", default=None, help="Overrides HANDHELD_LOG_LEVEL.")

    sub.add_parser("run", parents=[common], help="Execute the program once.")
    sub.add_parser("trace", parents=[common], help="Execute and list every visited address.")

    for name, text in (
        ("repair", "Find the lowest-index nop/jmp swap that makes the program terminate."),
        ("diagnose", "Report the loop accumulator and the repaired accumulator."),
    ):
        p = sub.add_parser(name, parents=[common], help=text)
        p.add_argument(
            "--jobs",
            type=_positive_int,
            default=None,
            help="Worker threads for the repair search (overrides HANDHELD_MAX_CONCURRENCY).",
        )

    return parser


def _cmd_run(program: Program, *, as_json: bool) -> int:
    result = execute(program)
    if as_json:
        print(ExecutionReport.from_result(result).model_dump_json(indent=2))
    else:
        print(_describe(result))
    return 0


def _cmd_trace(program: Program, *, as_json: bool) -> int:
    tr = trace(program)
    if as_json:
        report = TraceReport(
            execution=ExecutionReport.from_result(tr.result),
            steps=[
                TraceStep(
                    address=addr,
                    instruction=InstructionModel.from_instruction(program[addr]),
                )
                for addr in tr.path
            ],
        )
        print(report.model_dump_json(indent=2))
        return 0
    for addr in tr.path:
        print(f"{addr:>5}  {program[addr].render()}")
    print(_describe(tr.result))
    return 0


def _cmd_repair(program: Program, *, settings: RepairSettings, as_json: bool) -> int:
    found = find_repair(program, settings=settings)
    if as_json:
        print(RepairReport.from_repair(found).model_dump_json(indent=2))
        return 0 if found is not None else 1
    if found is None:
        print("no repair found")
        return 1
    print(f"index {found.index}: {found.original.render()} -> {found.replacement.render()}")
    print(_describe(found.result))
    return 0


def _cmd_diagnose(program: Program, *, settings: RepairSettings, as_json: bool) -> int:
    report = diagnose(program, settings=settings)
    ok = report.repair is None or report.repair.found
    if as_json:
        print(report.model_dump_json(indent=2))
        return 0 if ok else 1

    if report.loop_accumulator is not None:
        print(f"loop accumulator: {report.loop_accumulator}")
    else:
        print(f"unmodified: {report.execution.status.value} {report.execution.accumulator}")
    if report.repair is None:
        print(f"repaired accumulator: {report.execution.accumulator} (no repair needed)")
    elif report.repair.found:
        print(f"repaired accumulator: {report.repaired_accumulator}")
    else:
        print("no repair found")
    return 0 if ok else 1


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as e:
        print(f"handheld: {e}", file=sys.stderr)
        return 2

    try:
        configure_logging(args.log_level or settings.log_level)
    except ValueError as e:
        print(f"handheld: {e}", file=sys.stderr)
        return 2

    try:
        program = load_program(args.program)
    except ParseError as e:
        print(f"handheld: {args.program}: {e}", file=sys.stderr)
        return 2
    except (OSError, UnicodeDecodeError) as e:
        print(f"handheld: {e}", file=sys.stderr)
        return 2

    if args.cmd == "run":
        return _cmd_run(program, as_json=args.json)
    if args.cmd == "trace":
        return _cmd_trace(program, as_json=args.json)

    repair_settings = settings.repair_settings()
    if args.jobs is not None:
        repair_settings = RepairSettings(max_concurrency=args.jobs)

    if args.cmd == "repair":
        return _cmd_repair(program, settings=repair_settings, as_json=args.json)
    if args.cmd == "diagnose":
        return _cmd_diagnose(program, settings=repair_settings, as_json=args.json)

    raise AssertionError(f"unhandled cmd: {args.cmd}")
