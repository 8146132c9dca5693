from __future__ import annotations

from enum import Enum
from typing import Dict, List, Union


class Operator(str, Enum):
    INC_CELL = "+"
    DEC_CELL = "-"
    MOVE_RIGHT = ">"
    MOVE_LEFT = "<"
    OUTPUT = "."
    INPUT = ","
    LOOP_OPEN = "["
    LOOP_CLOSE = "]"


OperatorStream = List[Operator]

_SYMBOLS: Dict[str, Operator] = {op.value: op for op in Operator}


def scan(data: Union[bytes, bytearray, str]) -> OperatorStream:
    """Filter raw program text down to the eight recognized operators.

    Anything that is not an operator (comments, whitespace, arbitrary bytes)
    is dropped silently. Relative order of the operators is preserved.
    """
    if isinstance(data, (bytes, bytearray)):
        chars = data.decode("latin-1")
    else:
        chars = data
    stream: OperatorStream = []
    for char in chars:
        op = _SYMBOLS.get(char)
        if op is not None:
            stream.append(op)
    return stream


__all__ = [
    "Operator",
    "OperatorStream",
    "scan",
]
