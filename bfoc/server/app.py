from __future__ import annotations

from typing import List, Optional

from fastapi import FastAPI, HTTPException, Response, status
from pydantic import BaseModel, Field, field_validator

from bfoc.emitter import DEFAULT_TAPE_LENGTH, EMITTERS, BrainfuckEmitter, CEmitter, Emitter
from bfoc.translator import Instruction, TranslationError

from .store import TranslationRecord, TranslationStore


def _instruction_to_dict(instruction: Instruction) -> dict:
    data = {"op": type(instruction).__name__, "position": instruction.position}
    if hasattr(instruction, "count"):
        data["count"] = instruction.count
    if hasattr(instruction, "id"):
        data["id"] = instruction.id
    return data


class TranslationRequest(BaseModel):
    code: str
    target: str = "c"
    tape_length: int = Field(default=DEFAULT_TAPE_LENGTH, ge=1)
    timestamp: bool = True

    @field_validator("target")
    @classmethod
    def validate_target(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in EMITTERS:
            raise ValueError(f"target must be one of {sorted(EMITTERS)}")
        return normalized


class InstructionModel(BaseModel):
    op: str
    position: int
    count: Optional[int] = None
    id: Optional[int] = None


class SummaryModel(BaseModel):
    operator_count: int
    instruction_count: int
    loop_count: int
    max_depth: int


class TranslationPayload(BaseModel):
    translation_id: str
    target: str
    source: str
    instructions: List[InstructionModel]
    output: str
    summary: SummaryModel


def _build_emitter(payload: TranslationRequest) -> Emitter:
    if payload.target == CEmitter.target:
        return CEmitter(tape_length=payload.tape_length, timestamp=payload.timestamp)
    return BrainfuckEmitter()


def _build_payload(record: TranslationRecord) -> TranslationPayload:
    summary = record.summary
    return TranslationPayload(
        translation_id=record.translation_id,
        target=record.target,
        source=record.source,
        instructions=[InstructionModel(**_instruction_to_dict(item)) for item in record.instructions],
        output=record.output,
        summary=SummaryModel(
            operator_count=summary.operator_count,
            instruction_count=summary.instruction_count,
            loop_count=summary.loop_count,
            max_depth=summary.max_depth,
        ),
    )


def create_app(store: Optional[TranslationStore] = None) -> FastAPI:
    translation_store = store or TranslationStore()
    app = FastAPI(title="bfoc translation API", version="0.1.0")

    def _get_record(translation_id: str) -> TranslationRecord:
        try:
            return translation_store.get(translation_id)
        except KeyError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @app.post(
        "/api/translations",
        response_model=TranslationPayload,
        status_code=status.HTTP_201_CREATED,
    )
    def create_translation(payload: TranslationRequest) -> TranslationPayload:
        try:
            record = translation_store.create(source=payload.code, emitter=_build_emitter(payload))
        except TranslationError as exc:
            raise HTTPException(
                status_code=422,
                detail={"kind": exc.kind, "position": exc.position, "message": str(exc)},
            ) from exc
        return _build_payload(record)

    @app.get("/api/translations", response_model=List[str])
    def list_translations() -> List[str]:
        return translation_store.list_ids()

    @app.get("/api/translations/{translation_id}", response_model=TranslationPayload)
    def get_translation(translation_id: str) -> TranslationPayload:
        return _build_payload(_get_record(translation_id))

    @app.delete("/api/translations/{translation_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_translation(translation_id: str) -> Response:
        removed = translation_store.remove(translation_id)
        if not removed:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown translation id: {translation_id}",
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


def serve(host: str = "127.0.0.1", port: int = 8000, *, reload: bool = False) -> None:
    import uvicorn

    if reload:
        # reload needs an import string so the worker can rebuild the app
        uvicorn.run("bfoc.server.app:create_app", factory=True, host=host, port=port, reload=True)
    else:
        uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "serve"]
