"""API schemas for requests and responses."""

from reelcut.api.schemas.requests import CreateSessionRequest, StartSessionExportRequest
from reelcut.api.schemas.responses import CancelExportResponse, SessionResponse

__all__ = [
    "CancelExportResponse",
    "CreateSessionRequest",
    "SessionResponse",
    "StartSessionExportRequest",
]
