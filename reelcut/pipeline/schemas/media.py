"""Transcoder result schemas."""

from pathlib import Path

from reelcut.common.base_reelcut_model import BaseReelcutModel
from reelcut.pipeline.schemas.export_stage import ExportStage


class MediaInfo(BaseReelcutModel):
    """Probed properties of a media file."""

    duration: float | None = None
    has_video: bool = False
    has_audio: bool = False
    width: int | None = None
    height: int | None = None


class TranscodeResult(BaseReelcutModel):
    """Outcome of one successful transcoder invocation."""

    stage: ExportStage
    output_path: Path
    returncode: int = 0
    stderr_tail: str = ""
