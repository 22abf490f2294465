"""Export routes."""

from fastapi import APIRouter, Depends, HTTPException

from reelcut.api.dependencies import export_service, precondition_http_error
from reelcut.api.schemas import CancelExportResponse
from reelcut.export_builder.schemas import ExportRequest
from reelcut.pipeline.errors import ExportPreconditionError
from reelcut.pipeline.schemas import ExportAck, ExportProgress
from reelcut.pipeline.service import ExportService

router = APIRouter()


@router.post("", response_model=ExportAck)
async def submit_export(
    request: ExportRequest,
    service: ExportService = Depends(export_service),
) -> ExportAck:
    """Submit a prepared export request."""
    try:
        return await service.submit(request)
    except ExportPreconditionError as e:
        raise precondition_http_error(e) from e


@router.get("/{export_id}", response_model=ExportProgress)
async def get_export(
    export_id: str,
    service: ExportService = Depends(export_service),
) -> ExportProgress:
    progress = await service.status(export_id)
    if progress is None:
        raise HTTPException(status_code=404, detail="Export not found")
    return progress


@router.post("/{export_id}/cancel", response_model=CancelExportResponse)
async def cancel_export(
    export_id: str,
    service: ExportService = Depends(export_service),
) -> CancelExportResponse:
    """Cancel a running export."""
    cancelled = await service.cancel(export_id)
    if not cancelled:
        raise HTTPException(status_code=400, detail="Export is not running")
    return CancelExportResponse(export_id=export_id, cancelled=True)
