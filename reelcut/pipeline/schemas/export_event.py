"""Export progress events."""

from datetime import UTC, datetime

from pydantic import Field

from reelcut.common.base_reelcut_model import BaseReelcutModel
from reelcut.pipeline.schemas.export_stage import EventTopic, ExportStage


class ExportEvent(BaseReelcutModel):
    """One progress, completion or failure notification for an export."""

    export_id: str
    topic: EventTopic
    stage: ExportStage
    percent: float = Field(ge=0, le=100)
    message: str = ""
    url: str | None = None
    is_mock: bool = False
    error: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_terminal(self) -> bool:
        return self.topic in (EventTopic.COMPLETED, EventTopic.FAILED)
