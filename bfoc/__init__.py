from .emitter import BrainfuckEmitter, CEmitter, Emitter, serialize
from .scanner import Operator, scan
from .toolchain import Toolchain, ToolchainError
from .translator import (
    Add,
    Instruction,
    LoopBegin,
    LoopEnd,
    Read,
    RunLengthOverflow,
    ShiftLeft,
    ShiftRight,
    Sub,
    TranslationError,
    Translator,
    UnmatchedLoopClose,
    UnmatchedLoopOpen,
    Write,
    translate,
)

__all__ = [
    "Add",
    "BrainfuckEmitter",
    "CEmitter",
    "Emitter",
    "Instruction",
    "LoopBegin",
    "LoopEnd",
    "Operator",
    "Read",
    "RunLengthOverflow",
    "ShiftLeft",
    "ShiftRight",
    "Sub",
    "Toolchain",
    "ToolchainError",
    "TranslationError",
    "Translator",
    "UnmatchedLoopClose",
    "UnmatchedLoopOpen",
    "Write",
    "scan",
    "serialize",
    "translate",
]
