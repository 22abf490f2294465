"""Repository for export documents."""

from datetime import UTC, datetime

from pydantic_mongo import AsyncAbstractRepository

from reelcut.mongodb.client import get_mongodb_client
from reelcut.mongodb.schemas import ExportDocument
from reelcut.pipeline.schemas import ExportStage, ExportStatus


class ExportRepository(AsyncAbstractRepository[ExportDocument]):
    """Stores export progress and results keyed by export id."""

    class Meta:  # pyright: ignore[reportIncompatibleVariableOverride]
        collection_name = "exports"

    @classmethod
    def create(cls) -> "ExportRepository":
        """Create a repository instance with the default database."""
        client = get_mongodb_client()
        return cls(client.database)  # pyright: ignore[reportArgumentType]

    async def create_export(
        self,
        export_id: str,
        clip_count: int,
        subtitles_enabled: bool,
        audio_mix: float,
    ) -> ExportDocument:
        """Record a newly accepted export.

        Returns:
            The created ExportDocument with ID populated.
        """
        doc = ExportDocument(
            export_id=export_id,
            clip_count=clip_count,
            subtitles_enabled=subtitles_enabled,
            audio_mix=audio_mix,
        )
        await self.save(doc)
        return doc

    async def get_export(self, export_id: str) -> ExportDocument | None:
        return await self.find_one_by({"export_id": export_id})

    async def update_progress(
        self,
        export_id: str,
        stage: ExportStage,
        progress_percent: float,
        message: str = "",
    ) -> ExportDocument | None:
        """Update stage and percent.

        Returns:
            The updated ExportDocument if found, None otherwise.
        """
        doc = await self.get_export(export_id)
        if doc is None:
            return None

        doc.stage = stage
        doc.progress_percent = progress_percent
        doc.message = message
        doc.updated_at = datetime.now(UTC)
        await self.save(doc)
        return doc

    async def set_completed(
        self,
        export_id: str,
        url: str,
        is_mock: bool = False,
        artifact_file_id: str | None = None,
    ) -> ExportDocument | None:
        """Mark an export completed with its final URL."""
        doc = await self.get_export(export_id)
        if doc is None:
            return None

        now = datetime.now(UTC)
        doc.stage = ExportStage.COMPLETED
        doc.status = ExportStatus.COMPLETED
        doc.progress_percent = 100.0
        doc.url = url
        doc.is_mock = is_mock
        doc.artifact_file_id = artifact_file_id
        doc.completed_at = now
        doc.updated_at = now
        await self.save(doc)
        return doc

    async def set_error(self, export_id: str, error_message: str) -> ExportDocument | None:
        """Mark an export failed."""
        doc = await self.get_export(export_id)
        if doc is None:
            return None

        now = datetime.now(UTC)
        doc.stage = ExportStage.FAILED
        doc.status = ExportStatus.FAILED
        doc.error_message = error_message
        doc.completed_at = now
        doc.updated_at = now
        await self.save(doc)
        return doc
