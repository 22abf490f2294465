"""Editing session routes."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from pydantic import ValidationError

from reelcut.api.dependencies import export_service, otio_exporter, precondition_http_error, session_registry
from reelcut.api.schemas import CreateSessionRequest, SessionResponse, StartSessionExportRequest
from reelcut.editor.otio_export import TimelineOtioExporter
from reelcut.editor.schemas import parse_action
from reelcut.editor.session import EditorSession, SessionNotFoundError, SessionRegistry
from reelcut.export_builder.builder import build_export_request
from reelcut.pipeline.errors import ExportPreconditionError
from reelcut.pipeline.schemas import ExportAck
from reelcut.pipeline.service import ExportService
from reelcut.playback.schemas import PreviewFrame
from reelcut.playback.synchronizer import resolve_frame
from reelcut.timeline.population import build_project_data
from reelcut.timeline.schemas import ProjectData

logger = logging.getLogger(__name__)

router = APIRouter()

# History snapshots stay server-side
_EXCLUDE_HISTORY = {"state": {"history"}}


def _to_response(session: EditorSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.id,
        state=session.state,
        can_undo=session.can_undo,
        can_redo=session.can_redo,
    )


def _get_session(registry: SessionRegistry, session_id: str) -> EditorSession:
    try:
        return registry.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found") from None


@router.post("", response_model=SessionResponse, response_model_exclude=_EXCLUDE_HISTORY)
async def create_session(
    request: CreateSessionRequest,
    registry: SessionRegistry = Depends(session_registry),
) -> SessionResponse:
    """Open a new editing session."""
    if request.lines:
        data = build_project_data(list(request.lines), request.default_line_duration, request.subtitle_style)
    else:
        data = ProjectData(tracks=request.tracks, subtitles=request.subtitles)
    session = registry.create(data, lines=request.lines)
    return _to_response(session)


@router.get("/{session_id}", response_model=SessionResponse, response_model_exclude=_EXCLUDE_HISTORY)
async def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(session_registry),
) -> SessionResponse:
    session = _get_session(registry, session_id)
    return _to_response(session)


@router.delete("/{session_id}")
async def close_session(
    session_id: str,
    registry: SessionRegistry = Depends(session_registry),
) -> dict[str, str]:
    _get_session(registry, session_id)
    registry.close(session_id)
    return {"status": "closed", "session_id": session_id}


@router.post("/{session_id}/actions", response_model=SessionResponse, response_model_exclude=_EXCLUDE_HISTORY)
async def apply_action(
    session_id: str,
    payload: dict[str, Any] = Body(...),
    registry: SessionRegistry = Depends(session_registry),
) -> SessionResponse:
    """Apply one edit action, e.g. ``{"type": "split_clip", ...}``."""
    session = _get_session(registry, session_id)
    try:
        action = parse_action(payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False)) from e

    async with session.lock:
        session.dispatch(action)
    return _to_response(session)


@router.post("/{session_id}/undo", response_model=SessionResponse, response_model_exclude=_EXCLUDE_HISTORY)
async def undo(
    session_id: str,
    registry: SessionRegistry = Depends(session_registry),
) -> SessionResponse:
    session = _get_session(registry, session_id)
    async with session.lock:
        session.undo()
    return _to_response(session)


@router.post("/{session_id}/redo", response_model=SessionResponse, response_model_exclude=_EXCLUDE_HISTORY)
async def redo(
    session_id: str,
    registry: SessionRegistry = Depends(session_registry),
) -> SessionResponse:
    session = _get_session(registry, session_id)
    async with session.lock:
        session.redo()
    return _to_response(session)


@router.get("/{session_id}/preview", response_model=PreviewFrame)
async def preview(
    session_id: str,
    time: float | None = Query(default=None, ge=0),
    registry: SessionRegistry = Depends(session_registry),
) -> PreviewFrame:
    """Resolve what the preview shows at ``time`` (default: the playhead)."""
    session = _get_session(registry, session_id)
    return resolve_frame(session.state, time)


@router.get("/{session_id}/timeline.otio")
async def download_otio(
    session_id: str,
    registry: SessionRegistry = Depends(session_registry),
    exporter: TimelineOtioExporter = Depends(otio_exporter),
) -> Response:
    """Download the current timeline as an OpenTimelineIO document."""
    session = _get_session(registry, session_id)
    content = exporter.to_json(session.state, name=f"Reelcut {session.id}")
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="reelcut_{session.id}.otio"'},
    )


@router.post("/{session_id}/exports", response_model=ExportAck)
async def export_session(
    session_id: str,
    request: StartSessionExportRequest,
    registry: SessionRegistry = Depends(session_registry),
    service: ExportService = Depends(export_service),
) -> ExportAck:
    """Build an export request from the session's timeline and submit it."""
    session = _get_session(registry, session_id)
    lines = {line.line_id: line for line in (*session.lines, *request.lines)}

    try:
        export_request = build_export_request(
            session.state,
            lines=lines.values(),
            trims=request.trims,
            subtitles=request.subtitles,
            audio_mix=request.audio_mix,
        )
        ack = await service.submit(export_request)
    except ExportPreconditionError as e:
        logger.info("[session=%s] Export rejected: %s", session.id, e)
        raise precondition_http_error(e) from e

    logger.info("[session=%s] Export %s submitted (%s)", session.id, ack.export_id, ack.status.value)
    return ack
