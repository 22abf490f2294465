"""MongoDB document schemas."""

from reelcut.mongodb.schemas.documents import ExportDocument

__all__ = [
    "ExportDocument",
]
