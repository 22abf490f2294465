"""Resolve which clips and subtitles are live at a playhead position."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from reelcut.timeline.schemas import Clip, ClipKind, EditorState, Subtitle, Track, TrackKind


@dataclass(frozen=True)
class ActiveClip:
    """A clip playing at the queried time, with the track that holds it."""

    track: Track
    clip: Clip
    track_index: int

    @property
    def is_video(self) -> bool:
        return self.track.kind == TrackKind.VIDEO and self.clip.kind == ClipKind.VIDEO


def active_clips(state: EditorState, playhead: float | None = None) -> list[ActiveClip]:
    """Return clips containing ``playhead`` on visible tracks, in track order.

    Args:
        state: Editor state to read.
        playhead: Time to resolve; defaults to ``state.playhead``.
    """
    time = state.playhead if playhead is None else playhead
    active: list[ActiveClip] = []
    for track_index, track in enumerate(state.tracks):
        if not track.visible:
            continue
        for clip in track.clips:
            if clip.contains(time):
                active.append(ActiveClip(track=track, clip=clip, track_index=track_index))
    return active


def select_video_layer(active: Sequence[ActiveClip]) -> ActiveClip | None:
    """Pick the one video clip to draw.

    The clip on the lowest-index video track wins. Overlapping clips on that
    same track resolve to the later-starting one, which sits on top.
    """
    best: ActiveClip | None = None
    for candidate in active:
        if not candidate.is_video:
            continue
        if best is None or candidate.track_index < best.track_index:
            best = candidate
        elif candidate.track_index == best.track_index and candidate.clip.start_time >= best.clip.start_time:
            best = candidate
    return best


def active_subtitles(subtitles: Iterable[Subtitle], playhead: float) -> list[Subtitle]:
    """Return every subtitle whose ``[start_time, end_time)`` contains ``playhead``."""
    return [s for s in subtitles if s.contains(playhead)]


def expected_media_time(clip: Clip, playhead: float) -> float:
    """Position inside the source media that should be showing at ``playhead``."""
    return playhead - clip.start_time + clip.trim_start
