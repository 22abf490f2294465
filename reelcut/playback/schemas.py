"""Preview frame schemas."""

from pydantic import Field

from reelcut.common.base_reelcut_model import BaseReelcutModel
from reelcut.timeline.schemas import ClipKind, Subtitle


class PreviewClip(BaseReelcutModel):
    """A clip as it should be rendered at one playhead position."""

    clip_id: str
    track_id: str
    kind: ClipKind
    source_url: str | None
    media_time: float
    volume: float = Field(ge=0)


class PreviewFrame(BaseReelcutModel):
    """Everything the preview shows at one playhead position."""

    playhead: float
    video: PreviewClip | None = None
    audio: tuple[PreviewClip, ...] = ()
    subtitles: tuple[Subtitle, ...] = ()
    active_words: tuple[str, ...] = ()
