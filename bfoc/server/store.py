from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from typing import Dict, List

from bfoc.emitter import Emitter
from bfoc.listing import TranslationSummary, summarize
from bfoc.scanner import scan
from bfoc.translator import Instruction, Translator


@dataclass
class TranslationRecord:
    translation_id: str
    source: str
    target: str
    instructions: List[Instruction]
    output: str
    summary: TranslationSummary


class TranslationStore:
    """Thread-safe registry of finished translations.

    Translation itself happens outside the lock; every call builds its own
    Translator, so concurrent requests never share state.
    """

    def __init__(self) -> None:
        self._records: Dict[str, TranslationRecord] = {}
        self._lock = threading.RLock()

    def create(self, *, source: str, emitter: Emitter) -> TranslationRecord:
        stream = scan(source)
        instructions = Translator().translate(stream)
        record = TranslationRecord(
            translation_id=uuid.uuid4().hex,
            source=source,
            target=emitter.target,
            instructions=instructions,
            output=emitter.emit(instructions),
            summary=summarize(stream, instructions),
        )
        with self._lock:
            self._records[record.translation_id] = record
        return record

    def get(self, translation_id: str) -> TranslationRecord:
        with self._lock:
            try:
                return self._records[translation_id]
            except KeyError as exc:
                raise KeyError(f"Unknown translation id: {translation_id}") from exc

    def list_ids(self) -> List[str]:
        with self._lock:
            return list(self._records)

    def remove(self, translation_id: str) -> bool:
        with self._lock:
            return self._records.pop(translation_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


__all__ = ["TranslationRecord", "TranslationStore"]
