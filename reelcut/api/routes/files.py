"""File download routes."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from reelcut.api.dependencies import gridfs_service
from reelcut.mongodb.gridfs_service import GridFSService

router = APIRouter()


@router.get("/download/{file_id}")
async def download_file(
    file_id: str,
    gridfs: GridFSService = Depends(gridfs_service),
) -> StreamingResponse:
    """Download a stored export artifact by ID."""
    file_info = await gridfs.get_file_info(file_id)
    if file_info is None:
        raise HTTPException(status_code=404, detail="File not found")

    return StreamingResponse(
        gridfs.stream_file(file_id),
        media_type=file_info.content_type,
        headers={"Content-Disposition": f'attachment; filename="{file_info.filename}"'},
    )
