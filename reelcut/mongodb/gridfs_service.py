"""GridFS storage for rendered export artifacts."""

import logging
from collections.abc import AsyncIterator
from enum import StrEnum, auto
from pathlib import Path

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorGridFSBucket

from reelcut.common.base_reelcut_model import BaseReelcutModel
from reelcut.mongodb.client import get_mongodb_client

logger = logging.getLogger(__name__)


class FileType(StrEnum):
    """Type of file stored in GridFS."""

    EXPORT_VIDEO = auto()


class StoredFileInfo(BaseReelcutModel):
    """Information about a file stored in GridFS."""

    file_id: str
    filename: str
    file_type: FileType
    content_type: str
    size_bytes: int
    export_id: str | None = None


class GridFSService:
    """Stores and retrieves large files via GridFS."""

    def __init__(self, bucket_name: str | None = None) -> None:
        self._bucket_name = bucket_name
        self._bucket: AsyncIOMotorGridFSBucket | None = None

    @property
    def bucket(self) -> AsyncIOMotorGridFSBucket:
        if self._bucket is None:
            client = get_mongodb_client()
            self._bucket = AsyncIOMotorGridFSBucket(
                client.database,
                bucket_name=self._bucket_name or client.config.gridfs_bucket_name,
                chunk_size_bytes=client.config.gridfs_chunk_size_bytes,
            )
        return self._bucket

    async def upload_file(
        self,
        file_path: Path,
        file_type: FileType,
        export_id: str | None = None,
        custom_filename: str | None = None,
    ) -> StoredFileInfo:
        """Upload a file to GridFS.

        Args:
            file_path: Path to the file to upload.
            file_type: Type of file being uploaded.
            export_id: Optional export the file belongs to.
            custom_filename: Optional name to store instead of the file's own.

        Returns:
            StoredFileInfo with file metadata.
        """
        filename = custom_filename or file_path.name
        content_type = self._get_content_type(file_path)

        metadata = {
            "file_type": str(file_type),
            "content_type": content_type,
        }
        if export_id:
            metadata["export_id"] = export_id

        file_size = file_path.stat().st_size
        with file_path.open("rb") as f:
            file_id = await self.bucket.upload_from_stream(filename, f, metadata=metadata)

        logger.info("Stored %s in GridFS as %s (%d bytes)", filename, file_id, file_size)
        return StoredFileInfo(
            file_id=str(file_id),
            filename=filename,
            file_type=file_type,
            content_type=content_type,
            size_bytes=file_size,
            export_id=export_id,
        )

    async def get_file_info(self, file_id: str) -> StoredFileInfo | None:
        """Get metadata for a stored file, or None if the id is unknown."""
        try:
            object_id = ObjectId(file_id)
        except InvalidId:
            return None

        cursor = self.bucket.find({"_id": object_id})
        async for grid_out in cursor:
            metadata = grid_out.metadata or {}
            return StoredFileInfo(
                file_id=str(grid_out._id),
                filename=grid_out.filename,
                file_type=FileType(metadata.get("file_type", FileType.EXPORT_VIDEO)),
                content_type=metadata.get("content_type", "application/octet-stream"),
                size_bytes=grid_out.length,
                export_id=metadata.get("export_id"),
            )
        return None

    async def stream_file(self, file_id: str) -> AsyncIterator[bytes]:
        """Yield a stored file in chunks."""
        stream = await self.bucket.open_download_stream(ObjectId(file_id))
        while True:
            chunk = await stream.readchunk()
            if not chunk:
                break
            yield chunk

    def _get_content_type(self, file_path: Path) -> str:
        """Determine content type from file extension."""
        content_types = {
            ".mp4": "video/mp4",
            ".mov": "video/quicktime",
        }
        return content_types.get(file_path.suffix.lower(), "application/octet-stream")


def get_gridfs_service(bucket_name: str | None = None) -> GridFSService:
    """Get a GridFS service instance."""
    return GridFSService(bucket_name)
