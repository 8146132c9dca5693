from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from .scanner import Operator
from .translator import Instruction, LoopBegin, LoopEnd


@dataclass
class TranslationSummary:
    operator_count: int
    instruction_count: int
    loop_count: int
    max_depth: int


def summarize(stream: Sequence[Operator], instructions: Sequence[Instruction]) -> TranslationSummary:
    depth = 0
    max_depth = 0
    loops = 0
    for instruction in instructions:
        if isinstance(instruction, LoopBegin):
            loops += 1
            depth += 1
            max_depth = max(max_depth, depth)
        elif isinstance(instruction, LoopEnd):
            depth -= 1
    return TranslationSummary(
        operator_count=len(stream),
        instruction_count=len(instructions),
        loop_count=loops,
        max_depth=max_depth,
    )


def format_instruction(instruction: Instruction) -> str:
    name = type(instruction).__name__
    if hasattr(instruction, "count"):
        return f"{name} {instruction.count}"
    if hasattr(instruction, "id"):
        return f"{name} #{instruction.id}"
    return name


def format_listing(instructions: Sequence[Instruction]) -> str:
    """One line per instruction: stream position, then the instruction indented by loop depth."""
    lines: List[str] = []
    depth = 0
    for instruction in instructions:
        if isinstance(instruction, LoopEnd):
            depth -= 1
        lines.append(f"{instruction.position:>6}  {'  ' * depth}{format_instruction(instruction)}")
        if isinstance(instruction, LoopBegin):
            depth += 1
    return "\n".join(lines)


def format_summary(summary: TranslationSummary) -> str:
    return (
        f"operators={summary.operator_count} instructions={summary.instruction_count} "
        f"loops={summary.loop_count} max_depth={summary.max_depth}"
    )


def format_code_window(stream: Sequence[Operator], position: int, window: int = 16) -> str:
    """Render the operators around ``position`` with the one at ``position`` bracketed."""
    if not stream:
        return "(empty)"
    start = max(0, position - window)
    end = min(len(stream), position + window + 1)
    pieces: List[str] = []
    for index in range(start, end):
        symbol = stream[index].value
        if index == position:
            pieces.append(f"({symbol})")
        else:
            pieces.append(symbol)
    if position >= len(stream):
        pieces.append("(END)")
    return "".join(pieces)


__all__ = [
    "TranslationSummary",
    "format_code_window",
    "format_instruction",
    "format_listing",
    "format_summary",
    "summarize",
]
