from __future__ import annotations

from fastapi import APIRouter, Depends

from ..auth import get_api_key_dependency
from ..schemas import TaskDraftOut, VoiceParseRequest
from ..settings import get_settings
from ..voice_parser import parse_transcript

router = APIRouter(
    prefix="/api/v1/voice",
    tags=["voice"],
    dependencies=[Depends(get_api_key_dependency())],
)


# PUBLIC_INTERFACE
@router.post(
    "/parse",
    response_model=TaskDraftOut,
    summary="Parse Voice Transcript",
    description=(
        "Turn a speech-recognition transcript into a task draft (name, details, date, "
        "time, full-day and urgency flags). Supports English and French; the language "
        "defaults to DEFAULT_LANGUAGE. Unrecognised input is kept as the task name."
    ),
    responses={
        200: {"description": "Draft parsed"},
        422: {"description": "Blank transcript"},
    },
)
def parse_voice(payload: VoiceParseRequest) -> TaskDraftOut:
    """
    Parse a transcript into a draft. Nothing is saved.
    """
    language = payload.language or get_settings().default_language
    draft = parse_transcript(payload.transcript, language)
    return TaskDraftOut(**draft)
