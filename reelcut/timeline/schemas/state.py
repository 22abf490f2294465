"""Editor state schemas."""

from pydantic import Field, computed_field

from reelcut.common.base_reelcut_model import BaseReelcutModel
from reelcut.timeline.queries import calculate_duration
from reelcut.timeline.schemas.clip import Clip
from reelcut.timeline.schemas.subtitle import Subtitle
from reelcut.timeline.schemas.track import Track, TrackKind

HISTORY_LIMIT = 50

MIN_ZOOM = 0.1
MAX_ZOOM = 10.0


class TimelineSnapshot(BaseReelcutModel):
    """Immutable copy of the content part of the editor state."""

    tracks: tuple[Track, ...]
    subtitles: tuple[Subtitle, ...]


class EditHistory(BaseReelcutModel):
    """Undo/redo stacks. ``past`` is oldest-first, ``future`` is next-first."""

    past: tuple[TimelineSnapshot, ...] = ()
    future: tuple[TimelineSnapshot, ...] = ()


class ProjectData(BaseReelcutModel):
    """Bulk timeline content used to open an editing session."""

    tracks: tuple[Track, ...] = ()
    subtitles: tuple[Subtitle, ...] = ()


def default_tracks() -> tuple[Track, ...]:
    """Return the tracks of an empty editing session."""
    return (
        Track(id="video-track-1", name="Video 1", kind=TrackKind.VIDEO),
        Track(id="audio-track-1", name="Audio 1", kind=TrackKind.AUDIO, volume=1.0),
    )


class EditorState(BaseReelcutModel):
    """Complete state of one editing session."""

    tracks: tuple[Track, ...] = Field(default_factory=default_tracks)
    subtitles: tuple[Subtitle, ...] = ()
    playhead: float = Field(default=0.0, ge=0)
    zoom: float = Field(default=1.0, ge=MIN_ZOOM, le=MAX_ZOOM)
    is_playing: bool = False
    selected_clip_id: str | None = None
    selected_subtitle_id: str | None = None
    clipboard: Clip | None = None
    history: EditHistory = EditHistory()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration(self) -> float:
        """Max end time over all clips, derived from the tracks."""
        return calculate_duration(self.tracks)

    def snapshot(self) -> TimelineSnapshot:
        """Capture the undoable content of this state."""
        return TimelineSnapshot(tracks=self.tracks, subtitles=self.subtitles)
