from __future__ import annotations

import re
from pathlib import Path

from handheld.errors import ParseError
from handheld.instructions import Instruction, Opcode, make_instruction
from handheld.program import Program

_OPERAND_RE = re.compile(r"[+-]?[0-9]+")

# Operands are 32-bit signed in the console's native encoding.
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def parse_instruction(line: str, *, lineno: int | None = None) -> Instruction:
    tokens = line.split()
    if not tokens:
        raise ParseError("empty instruction", line=lineno, text=line)
    if len(tokens) != 2:
        raise ParseError("expected '<mnemonic> <operand>'", line=lineno, text=line)

    mnemonic, raw_arg = tokens
    try:
        opcode = Opcode(mnemonic)
    except ValueError as e:
        raise ParseError(f"unknown mnemonic: {mnemonic!r}", line=lineno, text=line) from e

    if not _OPERAND_RE.fullmatch(raw_arg):
        raise ParseError(f"invalid operand: {raw_arg!r}", line=lineno, text=line)
    arg = int(raw_arg)
    if not INT32_MIN <= arg <= INT32_MAX:
        raise ParseError(f"operand out of range: {raw_arg}", line=lineno, text=line)

    return make_instruction(opcode, arg)


def parse_program(src: str) -> Program:
    instructions: list[Instruction] = []
    # Only "\n" (with an optional trailing "\r") ends a line.
    for lineno, raw in enumerate(src.split("\n"), start=1):
        line = raw.rstrip("\r")
        if not line.strip():
            continue
        instructions.append(parse_instruction(line, lineno=lineno))
    return Program(instructions=tuple(instructions))


def load_program(path: Path) -> Program:
    return parse_program(path.read_text(encoding="utf-8"))
