"""FastAPI dependencies and error translation shared by the routes."""

from fastapi import HTTPException

from reelcut.editor.providers import otio_exporter, session_registry
from reelcut.export_builder.errors import NoExportableContentError
from reelcut.mongodb.gridfs_service import GridFSService, get_gridfs_service
from reelcut.pipeline.errors import ExportAlreadyRunningError, ExportPreconditionError, TranscoderUnavailableError
from reelcut.pipeline.providers import export_event_bus, export_service

__all__ = [
    "export_event_bus",
    "export_service",
    "gridfs_service",
    "otio_exporter",
    "precondition_http_error",
    "session_registry",
]


def gridfs_service() -> GridFSService:
    return get_gridfs_service()


def precondition_http_error(error: ExportPreconditionError) -> HTTPException:
    """Map an export precondition failure to its HTTP status."""
    if isinstance(error, NoExportableContentError):
        status_code = 400
    elif isinstance(error, TranscoderUnavailableError):
        status_code = 503
    elif isinstance(error, ExportAlreadyRunningError):
        status_code = 409
    else:
        status_code = 400
    return HTTPException(status_code=status_code, detail=str(error))
