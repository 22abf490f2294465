"""Durable storage for finished exports."""

import logging
from pathlib import Path
from typing import Protocol

from reelcut.common.base_reelcut_model import BaseReelcutModel
from reelcut.mongodb.gridfs_service import FileType, GridFSService

logger = logging.getLogger(__name__)


class StoredArtifact(BaseReelcutModel):
    file_id: str
    url: str
    size_bytes: int = 0


class ArtifactStore(Protocol):
    """Persists a rendered file and returns a long-lived URL for it."""

    async def store(self, path: Path, export_id: str) -> StoredArtifact: ...


class GridFSArtifactStore:
    """Stores exports in GridFS and serves them through the files route."""

    def __init__(self, gridfs: GridFSService, public_base_url: str) -> None:
        self.gridfs = gridfs
        self.public_base_url = public_base_url.rstrip("/")

    async def store(self, path: Path, export_id: str) -> StoredArtifact:
        stored = await self.gridfs.upload_file(
            path,
            FileType.EXPORT_VIDEO,
            export_id=export_id,
            custom_filename=f"reelcut_export_{export_id}{path.suffix}",
        )
        return StoredArtifact(
            file_id=stored.file_id,
            url=f"{self.public_base_url}/api/files/download/{stored.file_id}",
            size_bytes=stored.size_bytes,
        )
