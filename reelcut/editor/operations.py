"""Pure edit operations over the editor state.

Each handler takes the current state and an action and returns the next
state. Handlers never raise: an action that references a missing clip,
track or subtitle returns the state unchanged.
"""

import logging
from collections.abc import Callable
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from reelcut.editor.schemas import (
    AddClip,
    AddSubtitle,
    AddTrack,
    BaseAction,
    CopyClip,
    MoveClip,
    PasteClip,
    RemoveClip,
    RemoveSubtitle,
    RemoveTrack,
    SelectClip,
    SelectSubtitle,
    SetPlayhead,
    SetPlaying,
    SetTrackVolume,
    SetZoom,
    SplitClip,
    ToggleTrackLock,
    ToggleTrackMute,
    ToggleTrackVisibility,
    TrimClip,
    UpdateSubtitle,
)
from reelcut.timeline.queries import find_clip, find_track, replace_track, sort_clips
from reelcut.timeline.schemas import Clip, EditorState, Subtitle, Track
from reelcut.timeline.schemas.state import MAX_ZOOM, MIN_ZOOM

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid4())


def _sort_subtitles(subtitles: tuple[Subtitle, ...] | list[Subtitle]) -> tuple[Subtitle, ...]:
    return tuple(sorted(subtitles, key=lambda s: s.start_time))


def _with_clips(track: Track, clips: tuple[Clip, ...] | list[Clip]) -> Track:
    return track.model_copy(update={"clips": sort_clips(clips)})


def _update_track(state: EditorState, track_id: str, **changes: Any) -> EditorState:
    track = find_track(state.tracks, track_id)
    if track is None:
        return state
    return state.model_copy(update={"tracks": replace_track(state.tracks, track.model_copy(update=changes))})


def _clamp_playhead(state: EditorState) -> EditorState:
    duration = state.duration
    if state.playhead > duration:
        return state.model_copy(update={"playhead": duration})
    return state


# Clips


def add_clip(state: EditorState, action: AddClip) -> EditorState:
    track = find_track(state.tracks, action.track_id)
    if track is None:
        logger.debug("add_clip: unknown track %s", action.track_id)
        return state
    clip = Clip.from_draft(_new_id(), action.clip)
    updated = _with_clips(track, (*track.clips, clip))
    return state.model_copy(update={"tracks": replace_track(state.tracks, updated)})


def remove_clip(state: EditorState, action: RemoveClip) -> EditorState:
    location = find_clip(state.tracks, action.clip_id)
    if location is None:
        return state
    clips = [c for i, c in enumerate(location.track.clips) if i != location.index]
    updated = location.track.model_copy(update={"clips": tuple(clips)})
    selected = None if state.selected_clip_id == action.clip_id else state.selected_clip_id
    return state.model_copy(
        update={"tracks": replace_track(state.tracks, updated), "selected_clip_id": selected}
    )


def move_clip(state: EditorState, action: MoveClip) -> EditorState:
    """Move a clip in time, and across tracks when the target is compatible.

    A missing, identical or different-kind target track degrades to a
    reposition on the clip's current track.
    """
    location = find_clip(state.tracks, action.clip_id)
    if location is None:
        return state

    source = location.track
    moved = location.clip.model_copy(update={"start_time": max(0.0, action.new_start_time)})
    remaining = [c for i, c in enumerate(source.clips) if i != location.index]

    target = find_track(state.tracks, action.new_track_id) if action.new_track_id else None
    if target is not None and target.id != source.id and target.kind.value == moved.kind.value:
        tracks = replace_track(state.tracks, _with_clips(source, remaining))
        tracks = replace_track(tracks, _with_clips(target, (*target.clips, moved)))
        return state.model_copy(update={"tracks": tracks})

    remaining.insert(location.index, moved)
    return state.model_copy(update={"tracks": replace_track(state.tracks, _with_clips(source, remaining))})


def trim_clip(state: EditorState, action: TrimClip) -> EditorState:
    location = find_clip(state.tracks, action.clip_id)
    if location is None:
        return state
    trimmed = location.clip.with_trims(action.trim_start, action.trim_end)
    clips = list(location.track.clips)
    clips[location.index] = trimmed
    updated = location.track.model_copy(update={"clips": tuple(clips)})
    return state.model_copy(update={"tracks": replace_track(state.tracks, updated)})


def split_clip(state: EditorState, action: SplitClip) -> EditorState:
    """Cut a clip in two at an absolute timeline position.

    The left part keeps the id and absorbs the removed tail into its
    ``trim_end``; the right part gets a fresh id and starts at the split.
    """
    location = find_clip(state.tracks, action.clip_id)
    if location is None:
        return state

    clip = location.clip
    offset = action.split_point - clip.start_time
    if offset <= 0 or offset >= clip.duration:
        return state

    tail = clip.duration - offset
    left = clip.model_copy(update={"duration": offset, "trim_end": clip.trim_end + tail})
    right = clip.model_copy(
        update={
            "id": _new_id(),
            "start_time": action.split_point,
            "duration": tail,
            "trim_start": clip.trim_start + offset,
        }
    )

    clips = list(location.track.clips)
    clips[location.index : location.index + 1] = [left, right]
    updated = _with_clips(location.track, clips)
    return state.model_copy(update={"tracks": replace_track(state.tracks, updated)})


def copy_clip(state: EditorState, action: CopyClip) -> EditorState:
    location = find_clip(state.tracks, action.clip_id)
    if location is None:
        return state
    return state.model_copy(update={"clipboard": location.clip})


def paste_clip(state: EditorState, action: PasteClip) -> EditorState:
    if state.clipboard is None:
        return state
    track = find_track(state.tracks, action.track_id)
    if track is None:
        return state
    pasted = state.clipboard.model_copy(update={"id": _new_id(), "start_time": action.start_time})
    updated = _with_clips(track, (*track.clips, pasted))
    return state.model_copy(update={"tracks": replace_track(state.tracks, updated)})


# Tracks


def add_track(state: EditorState, action: AddTrack) -> EditorState:
    if find_track(state.tracks, action.track.id) is not None:
        return state
    track = _with_clips(action.track, action.track.clips)
    return state.model_copy(update={"tracks": (*state.tracks, track)})


def remove_track(state: EditorState, action: RemoveTrack) -> EditorState:
    track = find_track(state.tracks, action.track_id)
    if track is None:
        return state
    selected = state.selected_clip_id
    if selected is not None and any(c.id == selected for c in track.clips):
        selected = None
    tracks = tuple(t for t in state.tracks if t.id != action.track_id)
    return state.model_copy(update={"tracks": tracks, "selected_clip_id": selected})


def toggle_track_lock(state: EditorState, action: ToggleTrackLock) -> EditorState:
    track = find_track(state.tracks, action.track_id)
    if track is None:
        return state
    return _update_track(state, track.id, locked=not track.locked)


def toggle_track_visibility(state: EditorState, action: ToggleTrackVisibility) -> EditorState:
    track = find_track(state.tracks, action.track_id)
    if track is None:
        return state
    return _update_track(state, track.id, visible=not track.visible)


def toggle_track_mute(state: EditorState, action: ToggleTrackMute) -> EditorState:
    track = find_track(state.tracks, action.track_id)
    if track is None:
        return state
    return _update_track(state, track.id, muted=not track.muted)


def set_track_volume(state: EditorState, action: SetTrackVolume) -> EditorState:
    return _update_track(state, action.track_id, volume=max(0.0, action.volume))


# Subtitles


def add_subtitle(state: EditorState, action: AddSubtitle) -> EditorState:
    try:
        subtitle = Subtitle.model_validate({"id": _new_id(), **action.subtitle.model_dump()})
    except ValidationError:
        logger.debug("add_subtitle: rejected invalid span %s-%s", action.subtitle.start_time, action.subtitle.end_time)
        return state
    return state.model_copy(update={"subtitles": _sort_subtitles((*state.subtitles, subtitle))})


def update_subtitle(state: EditorState, action: UpdateSubtitle) -> EditorState:
    """Merge changes into a subtitle; a change leaving an empty span is ignored."""
    for index, existing in enumerate(state.subtitles):
        if existing.id == action.subtitle_id:
            break
    else:
        return state

    changes = action.changes.model_dump(exclude_none=True)
    try:
        updated = Subtitle.model_validate({**existing.model_dump(), **changes})
    except ValidationError:
        logger.debug("update_subtitle: ignored invalid update for %s", action.subtitle_id)
        return state

    subtitles = list(state.subtitles)
    subtitles[index] = updated
    return state.model_copy(update={"subtitles": _sort_subtitles(subtitles)})


def remove_subtitle(state: EditorState, action: RemoveSubtitle) -> EditorState:
    if not any(s.id == action.subtitle_id for s in state.subtitles):
        return state
    subtitles = tuple(s for s in state.subtitles if s.id != action.subtitle_id)
    selected = None if state.selected_subtitle_id == action.subtitle_id else state.selected_subtitle_id
    return state.model_copy(update={"subtitles": subtitles, "selected_subtitle_id": selected})


# View state


def select_clip(state: EditorState, action: SelectClip) -> EditorState:
    return state.model_copy(update={"selected_clip_id": action.clip_id, "selected_subtitle_id": None})


def select_subtitle(state: EditorState, action: SelectSubtitle) -> EditorState:
    return state.model_copy(update={"selected_subtitle_id": action.subtitle_id, "selected_clip_id": None})


def set_playhead(state: EditorState, action: SetPlayhead) -> EditorState:
    playhead = min(max(action.time, 0.0), state.duration)
    return state.model_copy(update={"playhead": playhead})


def set_playing(state: EditorState, action: SetPlaying) -> EditorState:
    return state.model_copy(update={"is_playing": action.is_playing})


def set_zoom(state: EditorState, action: SetZoom) -> EditorState:
    return state.model_copy(update={"zoom": min(max(action.zoom, MIN_ZOOM), MAX_ZOOM)})


_HANDLERS: dict[type[BaseAction], Callable[[EditorState, Any], EditorState]] = {
    AddClip: add_clip,
    RemoveClip: remove_clip,
    MoveClip: move_clip,
    TrimClip: trim_clip,
    SplitClip: split_clip,
    CopyClip: copy_clip,
    PasteClip: paste_clip,
    AddTrack: add_track,
    RemoveTrack: remove_track,
    ToggleTrackLock: toggle_track_lock,
    ToggleTrackVisibility: toggle_track_visibility,
    ToggleTrackMute: toggle_track_mute,
    SetTrackVolume: set_track_volume,
    AddSubtitle: add_subtitle,
    UpdateSubtitle: update_subtitle,
    RemoveSubtitle: remove_subtitle,
    SelectClip: select_clip,
    SelectSubtitle: select_subtitle,
    SetPlayhead: set_playhead,
    SetPlaying: set_playing,
    SetZoom: set_zoom,
}


def apply_operation(state: EditorState, action: BaseAction) -> EditorState:
    """Run the transform registered for ``action``.

    Content changes that shorten the timeline pull the playhead back inside
    ``[0, duration]``.

    Raises:
        TypeError: If the action has no registered transform (history
            actions such as Undo are handled by ``reelcut.editor.history``).
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        msg = f"No edit operation registered for {type(action).__name__}"
        raise TypeError(msg)
    next_state = handler(state, action)
    if action.records_history:
        next_state = _clamp_playhead(next_state)
    return next_state
