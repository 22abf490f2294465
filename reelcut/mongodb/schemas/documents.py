"""MongoDB document schemas for reelcut entities."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic_mongo import PydanticObjectId

from reelcut.pipeline.schemas import ExportStage, ExportStatus


class ExportDocument(BaseModel):
    """Persistent record of one export run."""

    model_config = ConfigDict(populate_by_name=True)

    id: PydanticObjectId | None = Field(default=None, alias="_id")
    export_id: str

    stage: ExportStage = ExportStage.DOWNLOADING
    status: ExportStatus = ExportStatus.PROCESSING
    progress_percent: float = 0.0
    message: str = ""

    # Request summary
    clip_count: int = 0
    subtitles_enabled: bool = False
    audio_mix: float = 0.8

    # Result
    url: str | None = None
    artifact_file_id: str | None = None
    is_mock: bool = False
    error_message: str | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
