from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from handheld.instructions import Instruction


@dataclass(frozen=True, slots=True)
class Program:
    instructions: tuple[Instruction, ...] = ()

    @classmethod
    def of(cls, *instructions: Instruction) -> "Program":
        return cls(instructions=tuple(instructions))

    def __len__(self) -> int:
        return len(self.instructions)

    def __getitem__(self, index: int) -> Instruction:
        return self.instructions[index]

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def replace(self, index: int, instruction: Instruction) -> "Program":
        if not 0 <= index < len(self.instructions):
            raise IndexError(f"instruction index out of range: {index}")
        items = list(self.instructions)
        items[index] = instruction
        return Program(instructions=tuple(items))

    def to_source(self) -> str:
        return "".join(instr.render() + "\n" for instr in self.instructions)
