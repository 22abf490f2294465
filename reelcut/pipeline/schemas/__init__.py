"""Pipeline schemas."""

from reelcut.pipeline.schemas.export_event import ExportEvent
from reelcut.pipeline.schemas.export_result import ExportAck, ExportProgress, ExportResult, LastExport
from reelcut.pipeline.schemas.export_stage import (
    DOWNLOAD_END_PERCENT,
    PROCESSING_END_PERCENT,
    STAGE_PERCENT,
    EventTopic,
    ExportStage,
    ExportStatus,
)
from reelcut.pipeline.schemas.media import MediaInfo, TranscodeResult

__all__ = [
    "DOWNLOAD_END_PERCENT",
    "PROCESSING_END_PERCENT",
    "STAGE_PERCENT",
    "EventTopic",
    "ExportAck",
    "ExportEvent",
    "ExportProgress",
    "ExportResult",
    "ExportStage",
    "ExportStatus",
    "LastExport",
    "MediaInfo",
    "TranscodeResult",
]
