"""Timeline schemas."""

from reelcut.timeline.schemas.clip import MIN_CLIP_DURATION, Clip, ClipDraft, ClipKind
from reelcut.timeline.schemas.state import (
    HISTORY_LIMIT,
    EditHistory,
    EditorState,
    ProjectData,
    TimelineSnapshot,
    default_tracks,
)
from reelcut.timeline.schemas.subtitle import Subtitle, SubtitleDraft, SubtitleStyle
from reelcut.timeline.schemas.track import Track, TrackKind

__all__ = [
    "HISTORY_LIMIT",
    "MIN_CLIP_DURATION",
    "Clip",
    "ClipDraft",
    "ClipKind",
    "EditHistory",
    "EditorState",
    "ProjectData",
    "Subtitle",
    "SubtitleDraft",
    "SubtitleStyle",
    "TimelineSnapshot",
    "Track",
    "TrackKind",
    "default_tracks",
]
