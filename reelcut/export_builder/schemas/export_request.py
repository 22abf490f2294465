"""Export request schemas."""

from pydantic import Field

from reelcut.captions.word_timing import SubtitleWord
from reelcut.common.base_reelcut_model import BaseReelcutModel
from reelcut.timeline.schemas import SubtitleStyle

# Shortest segment the pipeline will cut for one clip
MIN_EXPORT_CLIP_DURATION = 0.5

DEFAULT_AUDIO_MIX = 0.8


class ClipTrim(BaseReelcutModel):
    """Interactive trim adjustment made in the export dialog."""

    trim_start: float = Field(default=0.0, ge=0)
    trim_end: float = Field(default=0.0, ge=0)


class ExportClip(BaseReelcutModel):
    """One segment of the exported video.

    ``duration`` is the un-trimmed source length; ``start_time`` is where
    the segment lands in the output.
    """

    line_id: str
    video_url: str
    audio_url: str | None = None
    start_time: float = Field(default=0.0, ge=0)
    duration: float = Field(gt=0)
    trim_start: float = Field(default=0.0, ge=0)
    trim_end: float = Field(default=0.0, ge=0)
    # Position in the narration audio where this segment starts
    audio_offset: float = Field(default=0.0, ge=0)

    @property
    def effective_duration(self) -> float:
        """Length actually cut from the source."""
        return max(MIN_EXPORT_CLIP_DURATION, self.duration - self.trim_start - self.trim_end)


class SubtitleOptions(BaseReelcutModel):
    """Whether and how to burn subtitles into the export."""

    enabled: bool = False
    style: SubtitleStyle | None = None
    words: tuple[SubtitleWord, ...] | None = None


class ExportRequest(BaseReelcutModel):
    """Everything the transcode pipeline needs to produce one output file."""

    clips: tuple[ExportClip, ...]
    subtitles: SubtitleOptions = SubtitleOptions()
    audio_mix: float = Field(default=DEFAULT_AUDIO_MIX, ge=0, le=1)
