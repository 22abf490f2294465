"""API request schemas."""

from pydantic import Field

from reelcut.common.base_reelcut_model import BaseReelcutModel
from reelcut.export_builder.schemas import DEFAULT_AUDIO_MIX, ClipTrim, SubtitleOptions
from reelcut.timeline.population import DEFAULT_LINE_DURATION, ScriptLineMedia
from reelcut.timeline.schemas import Subtitle, SubtitleStyle, Track


class CreateSessionRequest(BaseReelcutModel):
    """Open a session from explicit content or from script line media.

    When ``lines`` is given the timeline is laid out from it and
    ``tracks``/``subtitles`` are ignored.
    """

    tracks: tuple[Track, ...] = ()
    subtitles: tuple[Subtitle, ...] = ()
    lines: tuple[ScriptLineMedia, ...] = ()
    default_line_duration: float = Field(default=DEFAULT_LINE_DURATION, gt=0)
    subtitle_style: SubtitleStyle | None = None


class StartSessionExportRequest(BaseReelcutModel):
    """Export the current timeline of a session."""

    subtitles: SubtitleOptions = SubtitleOptions()
    audio_mix: float = Field(default=DEFAULT_AUDIO_MIX, ge=0, le=1)
    trims: dict[str, ClipTrim] = Field(default_factory=dict)
    # Extra line media merged over the session's own
    lines: tuple[ScriptLineMedia, ...] = ()
