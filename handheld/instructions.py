from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Opcode(str, Enum):
    NOP = "nop"
    ACC = "acc"
    JMP = "jmp"


class Instruction:
    __slots__ = ()

    opcode: Opcode
    arg: int

    def render(self) -> str:
        return f"{self.opcode.value} {self.arg:+d}"


@dataclass(frozen=True, slots=True)
class Nop(Instruction):
    # Operand is inert but kept so a swap to Jump is lossless.
    arg: int = 0

    @property
    def opcode(self) -> Opcode:
        return Opcode.NOP


@dataclass(frozen=True, slots=True)
class Acc(Instruction):
    arg: int

    @property
    def opcode(self) -> Opcode:
        return Opcode.ACC


@dataclass(frozen=True, slots=True)
class Jump(Instruction):
    arg: int

    @property
    def opcode(self) -> Opcode:
        return Opcode.JMP


def make_instruction(opcode: Opcode, arg: int) -> Instruction:
    if opcode is Opcode.NOP:
        return Nop(arg)
    if opcode is Opcode.ACC:
        return Acc(arg)
    if opcode is Opcode.JMP:
        return Jump(arg)
    raise TypeError(f"unknown opcode: {opcode!r}")


def swap_kind(instruction: Instruction) -> Instruction | None:
    """Return the Nop/Jump counterpart with the same operand, or None for Acc."""
    if isinstance(instruction, Nop):
        return Jump(instruction.arg)
    if isinstance(instruction, Jump):
        return Nop(instruction.arg)
    return None
