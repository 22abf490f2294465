"""Export stage and status enums."""

from enum import StrEnum, auto


class ExportStage(StrEnum):
    """Stages of one export run, in order."""

    DOWNLOADING = auto()
    PROCESSING = auto()
    CONCATENATING = auto()
    SUBTITLE_BURN = auto()
    UPLOADING = auto()
    COMPLETED = auto()
    FAILED = auto()


class EventTopic(StrEnum):
    PROGRESS = auto()
    COMPLETED = auto()
    FAILED = auto()


class ExportStatus(StrEnum):
    """Coarse status reported back to the submitter."""

    PROCESSING = auto()
    COMPLETED = auto()
    FAILED = auto()


# Progress percent at the start of each stage
STAGE_PERCENT: dict[ExportStage, float] = {
    ExportStage.DOWNLOADING: 5.0,
    ExportStage.PROCESSING: 25.0,
    ExportStage.CONCATENATING: 70.0,
    ExportStage.SUBTITLE_BURN: 85.0,
    ExportStage.UPLOADING: 92.0,
    ExportStage.COMPLETED: 100.0,
}

DOWNLOAD_END_PERCENT = 20.0
PROCESSING_END_PERCENT = 65.0
