"""AI router - audio transcription, visit analysis and per-person insights."""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from sqlalchemy.orm import Session

from ministering.core.config import settings
from ministering.core.deps import (
    get_analysis_service,
    get_current_session,
    get_db,
    get_transcription_service,
    require_csrf_header,
)
from ministering.core.structured_logging import build_log_context
from ministering.schemas.ai import (
    AnalyzeRequest,
    InsightEntry,
    TranscribeResponse,
    VisitAnalysis,
    VisitInsights,
)
from ministering.schemas.auth import UserSession
from ministering.services import entry_service, person_service
from ministering.services.analysis_service import AnalysisError, AnalysisService
from ministering.services.transcription_service import TranscriptionError, TranscriptionService
from ministering.utils.file_upload import (
    content_length_exceeds_limit,
    delete_temp_file,
    get_upload_file_size,
    is_allowed_audio,
    save_upload,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _size_limit_detail() -> str:
    max_mb = settings.MAX_UPLOAD_BYTES / (1024 * 1024)
    return f"File size exceeds {max_mb:.0f} MB limit"


@router.post(
    "/transcribe",
    response_model=TranscribeResponse,
    dependencies=[Depends(require_csrf_header)],
)
async def transcribe(
    request: Request,
    audio: UploadFile | None = File(default=None),
    session: UserSession = Depends(get_current_session),
    transcriber: TranscriptionService = Depends(get_transcription_service),
):
    """
    Transcribe one uploaded recording.

    The upload is written to UPLOAD_DIR and removed again whether or not
    transcription succeeds. Silence yields an empty transcript.
    """
    if content_length_exceeds_limit(
        request.headers.get("content-length"),
        max_size_bytes=settings.MAX_UPLOAD_BYTES,
    ):
        raise HTTPException(status_code=400, detail=_size_limit_detail())

    if audio is None or not audio.filename:
        raise HTTPException(status_code=400, detail="Audio file is required")

    if not is_allowed_audio(audio.filename, audio.content_type):
        raise HTTPException(status_code=400, detail="Only audio files are allowed")

    if await get_upload_file_size(audio) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail=_size_limit_detail())

    temp_path = None
    try:
        temp_path = await save_upload(audio, settings.UPLOAD_DIR)
        result = await transcriber.transcribe(temp_path)
    except TranscriptionError as exc:
        logger.exception(
            "Transcription failed",
            extra=build_log_context(user_id=session.user_id, route="/api/transcribe", method="POST"),
        )
        raise HTTPException(
            status_code=500,
            detail={"message": "Failed to transcribe audio", "error": str(exc)},
        )
    finally:
        delete_temp_file(temp_path)

    return TranscribeResponse(transcript=result.text)


@router.post(
    "/analyze",
    response_model=VisitAnalysis,
    dependencies=[Depends(require_csrf_header)],
)
async def analyze(
    data: AnalyzeRequest | None = None,
    session: UserSession = Depends(get_current_session),
    analyzer: AnalysisService = Depends(get_analysis_service),
):
    """Summary, follow-ups, scriptures and talks for a transcript."""
    if data is None or not data.transcript or not data.transcript.strip():
        raise HTTPException(status_code=400, detail="Transcript is required")

    try:
        return await analyzer.analyze(data.transcript)
    except AnalysisError as exc:
        logger.exception(
            "Visit analysis failed",
            extra=build_log_context(user_id=session.user_id, route="/api/analyze", method="POST"),
        )
        raise HTTPException(
            status_code=500,
            detail={"message": "Failed to analyze entry", "error": str(exc)},
        )


@router.get("/insights/{person_id}", response_model=VisitInsights)
async def get_insights(
    person_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    analyzer: AnalysisService = Depends(get_analysis_service),
):
    """
    Patterns and suggestions across all of a person's visits.

    A person with no visits gets empty lists without a model call.
    """
    if not person_service.get_ministered_person(db, person_id, session.user_id):
        raise HTTPException(status_code=404, detail="Person not found")

    entries = entry_service.get_entries_for_person(db, person_id, session.user_id)
    if not entries:
        return VisitInsights()

    try:
        return await analyzer.generate_insights(
            [InsightEntry(transcript=e.transcript, date=e.date.isoformat()) for e in entries]
        )
    except AnalysisError as exc:
        logger.exception(
            "Insight generation failed",
            extra=build_log_context(
                user_id=session.user_id,
                person_id=person_id,
                route="/api/insights",
                method="GET",
            ),
        )
        raise HTTPException(
            status_code=500,
            detail={"message": "Failed to generate insights", "error": str(exc)},
        )
