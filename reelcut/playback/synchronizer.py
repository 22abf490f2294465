"""Keep per-clip media handles in step with the virtual playhead."""

import logging
from collections.abc import Callable
from typing import Protocol

from reelcut.captions.word_timing import active_word
from reelcut.playback.resolver import (
    ActiveClip,
    active_clips,
    active_subtitles,
    expected_media_time,
    select_video_layer,
)
from reelcut.playback.schemas import PreviewClip, PreviewFrame
from reelcut.timeline.queries import find_clip
from reelcut.timeline.schemas import Clip, EditorState

logger = logging.getLogger(__name__)

# Drift allowed before a reseek, in seconds
VIDEO_SYNC_TOLERANCE = 0.1
AUDIO_SYNC_TOLERANCE = 0.5


class MediaHandle(Protocol):
    """A playable media element owned by one clip.

    ``load`` starts an asynchronous fetch; ``ready`` turns True once the
    media can report a meaningful ``position``.
    """

    loaded_url: str | None
    position: float
    paused: bool
    ready: bool
    volume: float

    def load(self, url: str) -> None: ...

    def seek(self, time: float) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...


def effective_volume(active: ActiveClip) -> float:
    return 0.0 if active.track.muted else active.track.volume


def _preview_clip(active: ActiveClip, playhead: float) -> PreviewClip:
    return PreviewClip(
        clip_id=active.clip.id,
        track_id=active.track.id,
        kind=active.clip.kind,
        source_url=active.clip.source_url,
        media_time=expected_media_time(active.clip, playhead),
        volume=effective_volume(active),
    )


def resolve_frame(state: EditorState, playhead: float | None = None) -> PreviewFrame:
    """Describe the preview at ``playhead`` without touching any media."""
    time = state.playhead if playhead is None else playhead
    active = active_clips(state, time)
    video = select_video_layer(active)
    audio = [_preview_clip(a, time) for a in active if not a.is_video]
    subtitles = active_subtitles(state.subtitles, time)
    words = [active_word(s.text, s.end_time - s.start_time, time - s.start_time) for s in subtitles]
    return PreviewFrame(
        playhead=time,
        video=_preview_clip(video, time) if video is not None else None,
        audio=tuple(audio),
        subtitles=tuple(subtitles),
        active_words=tuple(w for w in words if w),
    )


class PlaybackSynchronizer:
    """Drives media handles from the editor state, one tick at a time.

    A tick only reads state and issues load/seek/play/pause calls; it never
    waits for media to load.
    """

    def __init__(self, handle_factory: Callable[[Clip], MediaHandle]) -> None:
        self._handle_factory = handle_factory
        self._handles: dict[str, MediaHandle] = {}

    @property
    def handles(self) -> dict[str, MediaHandle]:
        return dict(self._handles)

    def tick(self, state: EditorState) -> PreviewFrame:
        playhead = state.playhead
        active = active_clips(state, playhead)
        active_ids: set[str] = set()

        for entry in active:
            clip = entry.clip
            if not clip.source_url:
                continue
            active_ids.add(clip.id)
            handle = self._handles.get(clip.id)
            if handle is None:
                handle = self._handle_factory(clip)
                self._handles[clip.id] = handle
            self._sync_handle(handle, entry, playhead, state.is_playing)

        for clip_id, handle in list(self._handles.items()):
            if clip_id in active_ids:
                continue
            if not handle.paused:
                handle.pause()
            if find_clip(state.tracks, clip_id) is None:
                # Clip was removed from the timeline
                del self._handles[clip_id]

        return resolve_frame(state, playhead)

    def pause_all(self) -> None:
        for handle in self._handles.values():
            if not handle.paused:
                handle.pause()

    def _sync_handle(self, handle: MediaHandle, entry: ActiveClip, playhead: float, is_playing: bool) -> None:
        clip = entry.clip
        expected = expected_media_time(clip, playhead)
        tolerance = VIDEO_SYNC_TOLERANCE if entry.is_video else AUDIO_SYNC_TOLERANCE

        if handle.loaded_url != clip.source_url:
            logger.debug("Loading %s for clip %s at %.3f", clip.source_url, clip.id, expected)
            handle.load(clip.source_url or "")
            handle.seek(expected)
        elif handle.ready and abs(handle.position - expected) > tolerance:
            handle.seek(expected)

        handle.volume = effective_volume(entry)

        if is_playing and handle.paused:
            handle.play()
        elif not is_playing and not handle.paused:
            handle.pause()
