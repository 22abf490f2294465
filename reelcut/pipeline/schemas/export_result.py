"""Export submission and result schemas."""

from datetime import UTC, datetime

from pydantic import Field

from reelcut.common.base_reelcut_model import BaseReelcutModel
from reelcut.pipeline.schemas.export_stage import ExportStage, ExportStatus


class ExportAck(BaseReelcutModel):
    """Returned as soon as an export is accepted."""

    export_id: str
    url: str | None = None
    status: ExportStatus
    is_mock: bool = False


class LastExport(BaseReelcutModel):
    """Shape stored on the project record after a successful export."""

    id: str
    url: str
    exported_at: datetime
    is_mock: bool = False


class ExportResult(BaseReelcutModel):
    """Final outcome of a completed export."""

    export_id: str
    url: str
    is_mock: bool = False
    exported_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_last_export(self) -> LastExport:
        return LastExport(id=self.export_id, url=self.url, exported_at=self.exported_at, is_mock=self.is_mock)


class ExportProgress(BaseReelcutModel):
    """Current view of an export, as reported by the export service."""

    export_id: str
    status: ExportStatus
    stage: ExportStage
    percent: float = Field(ge=0, le=100, default=0.0)
    message: str = ""
    url: str | None = None
    is_mock: bool = False
    error: str | None = None
