"""Export builder schemas."""

from reelcut.export_builder.schemas.export_request import (
    DEFAULT_AUDIO_MIX,
    MIN_EXPORT_CLIP_DURATION,
    ClipTrim,
    ExportClip,
    ExportRequest,
    SubtitleOptions,
)

__all__ = [
    "DEFAULT_AUDIO_MIX",
    "MIN_EXPORT_CLIP_DURATION",
    "ClipTrim",
    "ExportClip",
    "ExportRequest",
    "SubtitleOptions",
]
