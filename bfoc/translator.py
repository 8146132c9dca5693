from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple, Type, Union

from .scanner import Operator, scan

# Largest count a fused run may carry; the C backend prints counts as int literals.
MAX_RUN_LENGTH = 2**31 - 1


class TranslationError(Exception):
    def __init__(self, message: str, position: int) -> None:
        super().__init__(message)
        self.position = position

    @property
    def kind(self) -> str:
        return type(self).__name__


class UnmatchedLoopClose(TranslationError):
    def __init__(self, position: int) -> None:
        super().__init__(f"Unmatched ']' at position {position}", position)


class UnmatchedLoopOpen(TranslationError):
    def __init__(self, position: int) -> None:
        super().__init__(f"Unmatched '[' at position {position}", position)


class RunLengthOverflow(TranslationError):
    def __init__(self, position: int, count: int, limit: int) -> None:
        super().__init__(
            f"Run of {count} operators at position {position} exceeds the limit of {limit}",
            position,
        )
        self.count = count
        self.limit = limit


# === Instructions ===


class Instruction:
    pass


@dataclass
class Add(Instruction):
    count: int
    position: int = field(default=0, compare=False)


@dataclass
class Sub(Instruction):
    count: int
    position: int = field(default=0, compare=False)


@dataclass
class ShiftRight(Instruction):
    count: int
    position: int = field(default=0, compare=False)


@dataclass
class ShiftLeft(Instruction):
    count: int
    position: int = field(default=0, compare=False)


@dataclass
class Write(Instruction):
    position: int = field(default=0, compare=False)


@dataclass
class Read(Instruction):
    position: int = field(default=0, compare=False)


@dataclass
class LoopBegin(Instruction):
    id: int
    position: int = field(default=0, compare=False)


@dataclass
class LoopEnd(Instruction):
    id: int
    position: int = field(default=0, compare=False)


CountedInstruction = Union[Add, Sub, ShiftRight, ShiftLeft]

_FUSED: Dict[Operator, Type[CountedInstruction]] = {
    Operator.INC_CELL: Add,
    Operator.DEC_CELL: Sub,
    Operator.MOVE_RIGHT: ShiftRight,
    Operator.MOVE_LEFT: ShiftLeft,
}


# === Translator ===


class Translator:
    """Single forward pass turning an operator stream into instructions.

    Runs of ``+ - > <`` are fused into one counted instruction; ``.`` and
    ``,`` always stay separate. Brackets are paired with an explicit stack,
    loop ids are handed out in order of appearance starting at 0.
    """

    def __init__(self, max_run_length: int = MAX_RUN_LENGTH) -> None:
        self.max_run_length = max_run_length

    def translate(self, stream: Sequence[Operator]) -> List[Instruction]:
        instructions: List[Instruction] = []
        # (loop id, position of the '[') for every loop still open
        open_loops: List[Tuple[int, int]] = []
        next_loop_id = 0
        length = len(stream)
        index = 0

        while index < length:
            op = stream[index]
            fused = _FUSED.get(op)
            if fused is not None:
                start = index
                while index < length and stream[index] == op:
                    index += 1
                count = index - start
                if count > self.max_run_length:
                    raise RunLengthOverflow(start, count, self.max_run_length)
                instructions.append(fused(count=count, position=start))
                continue

            if op == Operator.OUTPUT:
                instructions.append(Write(position=index))
            elif op == Operator.INPUT:
                instructions.append(Read(position=index))
            elif op == Operator.LOOP_OPEN:
                open_loops.append((next_loop_id, index))
                instructions.append(LoopBegin(id=next_loop_id, position=index))
                next_loop_id += 1
            elif op == Operator.LOOP_CLOSE:
                if not open_loops:
                    raise UnmatchedLoopClose(index)
                loop_id, _ = open_loops.pop()
                instructions.append(LoopEnd(id=loop_id, position=index))
            index += 1

        if open_loops:
            _, position = open_loops.pop()
            raise UnmatchedLoopOpen(position)
        return instructions


def translate(data: Union[bytes, bytearray, str]) -> List[Instruction]:
    """Scan raw program text and translate it in one call."""
    return Translator().translate(scan(data))


__all__ = [
    "MAX_RUN_LENGTH",
    "Add",
    "Instruction",
    "LoopBegin",
    "LoopEnd",
    "Read",
    "RunLengthOverflow",
    "ShiftLeft",
    "ShiftRight",
    "Sub",
    "TranslationError",
    "Translator",
    "UnmatchedLoopClose",
    "UnmatchedLoopOpen",
    "Write",
    "translate",
]
