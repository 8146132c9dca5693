from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Type

from .translator import (
    Add,
    Instruction,
    LoopBegin,
    LoopEnd,
    Read,
    ShiftLeft,
    ShiftRight,
    Sub,
    Write,
)

# https://en.wikipedia.org/wiki/Brainfuck#Language_design
DEFAULT_TAPE_LENGTH = 30000


class Emitter:
    """Serializes a translated instruction list into target text."""

    target = ""

    def emit(self, instructions: Sequence[Instruction]) -> str:
        raise NotImplementedError

    def write(self, instructions: Sequence[Instruction], path: Path) -> None:
        Path(path).write_text(self.emit(instructions), encoding="utf-8")


@dataclass
class CEmitter(Emitter):
    """C backend.

    Loops become structured pre-test ``while`` blocks, so the body runs only
    while the cell under the pointer is non-zero, checked before the first
    iteration and after every one. Labels and ``goto`` are never emitted.
    """

    tape_length: int = DEFAULT_TAPE_LENGTH
    cell_type: str = "uint8_t"
    timestamp: bool = True

    target = "c"

    def __post_init__(self) -> None:
        if self.tape_length < 1:
            raise ValueError("tape_length must be positive")

    def emit(self, instructions: Sequence[Instruction]) -> str:
        lines = self._prologue()
        depth = 1
        for instruction in instructions:
            if isinstance(instruction, LoopEnd):
                depth -= 1
            lines.append("\t" * depth + self._render(instruction))
            if isinstance(instruction, LoopBegin):
                depth += 1
        lines.append("\treturn 0;")
        lines.append("}")
        return "\n".join(lines) + "\n"

    def _prologue(self) -> List[str]:
        lines = ["/*", " * BFOC intermediate code"]
        if self.timestamp:
            lines.append(f" * generated on {time.ctime()}")
        lines.append(" */")
        lines.append("")
        lines.append("#include <stdlib.h>")
        lines.append("#include <stdio.h>")
        lines.append("#include <stdint.h>")
        lines.append("")
        lines.append(f"static {self.cell_type} tape[{self.tape_length}];")
        lines.append("static int ptr;")
        lines.append("")
        lines.append("int main(void) {")
        return lines

    def _render(self, instruction: Instruction) -> str:
        if isinstance(instruction, Add):
            return f"tape[ptr] += {instruction.count};"
        if isinstance(instruction, Sub):
            return f"tape[ptr] -= {instruction.count};"
        if isinstance(instruction, ShiftRight):
            return f"ptr += {instruction.count};"
        if isinstance(instruction, ShiftLeft):
            return f"ptr -= {instruction.count};"
        if isinstance(instruction, Write):
            return "putchar(tape[ptr]);"
        if isinstance(instruction, Read):
            return "tape[ptr] = getchar();"
        if isinstance(instruction, LoopBegin):
            return f"while (tape[ptr]) {{ /* loop {instruction.id} */"
        if isinstance(instruction, LoopEnd):
            return f"}} /* loop {instruction.id} */"
        raise TypeError(f"Cannot emit instruction {instruction!r}")


_SYMBOLS: Dict[Type[Instruction], str] = {
    Add: "+",
    Sub: "-",
    ShiftRight: ">",
    ShiftLeft: "<",
    Write: ".",
    Read: ",",
    LoopBegin: "[",
    LoopEnd: "]",
}


class BrainfuckEmitter(Emitter):
    """Canonical re-serialization back to the source language."""

    target = "brainfuck"

    def emit(self, instructions: Sequence[Instruction]) -> str:
        pieces: List[str] = []
        for instruction in instructions:
            symbol = _SYMBOLS.get(type(instruction))
            if symbol is None:
                raise TypeError(f"Cannot emit instruction {instruction!r}")
            pieces.append(symbol * getattr(instruction, "count", 1))
        return "".join(pieces)


def serialize(instructions: Iterable[Instruction]) -> str:
    return BrainfuckEmitter().emit(list(instructions))


EMITTERS: Dict[str, Type[Emitter]] = {
    CEmitter.target: CEmitter,
    BrainfuckEmitter.target: BrainfuckEmitter,
}


__all__ = [
    "DEFAULT_TAPE_LENGTH",
    "EMITTERS",
    "BrainfuckEmitter",
    "CEmitter",
    "Emitter",
    "serialize",
]
