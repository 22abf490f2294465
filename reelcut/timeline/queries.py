"""Pure lookups over tracks and clips."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reelcut.timeline.schemas.clip import Clip
    from reelcut.timeline.schemas.track import Track


@dataclass(frozen=True)
class ClipLocation:
    """Where a clip lives: its track, the clip itself and its index."""

    track: Track
    clip: Clip
    index: int


def calculate_duration(tracks: Iterable[Track]) -> float:
    """Return the max end time across all clips, or 0.0 if there are none."""
    max_end = 0.0
    for track in tracks:
        for clip in track.clips:
            clip_end = clip.start_time + clip.duration
            if clip_end > max_end:
                max_end = clip_end
    return max_end


def find_clip(tracks: Iterable[Track], clip_id: str) -> ClipLocation | None:
    """Find a clip by id. The first match wins."""
    for track in tracks:
        for index, clip in enumerate(track.clips):
            if clip.id == clip_id:
                return ClipLocation(track=track, clip=clip, index=index)
    return None


def find_track(tracks: Iterable[Track], track_id: str) -> Track | None:
    """Find a track by id."""
    for track in tracks:
        if track.id == track_id:
            return track
    return None


def sort_clips(clips: Iterable[Clip]) -> tuple[Clip, ...]:
    """Stable sort by start time."""
    return tuple(sorted(clips, key=lambda c: c.start_time))


def replace_track(tracks: Sequence[Track], updated: Track) -> tuple[Track, ...]:
    """Return ``tracks`` with the track sharing ``updated.id`` swapped out."""
    return tuple(updated if t.id == updated.id else t for t in tracks)
