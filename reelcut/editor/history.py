"""Snapshot-based undo/redo around the edit operations."""

import logging

from reelcut.editor.operations import apply_operation
from reelcut.editor.schemas import BaseAction, LoadProjectData, Redo, Reset, Undo
from reelcut.timeline.queries import sort_clips
from reelcut.timeline.schemas import HISTORY_LIMIT, EditHistory, EditorState, ProjectData, TimelineSnapshot

logger = logging.getLogger(__name__)


def _push_past(history: EditHistory, snapshot: TimelineSnapshot) -> EditHistory:
    past = (*history.past, snapshot)[-HISTORY_LIMIT:]
    return EditHistory(past=past, future=())


def _restore(state: EditorState, snapshot: TimelineSnapshot, history: EditHistory) -> EditorState:
    restored = state.model_copy(
        update={"tracks": snapshot.tracks, "subtitles": snapshot.subtitles, "history": history}
    )
    if restored.playhead > restored.duration:
        restored = restored.model_copy(update={"playhead": restored.duration})
    return restored


def can_undo(state: EditorState) -> bool:
    return bool(state.history.past)


def can_redo(state: EditorState) -> bool:
    return bool(state.history.future)


def undo(state: EditorState) -> EditorState:
    """Restore the newest past snapshot. No-op when there is nothing to undo."""
    if not state.history.past:
        return state
    *past, previous = state.history.past
    history = EditHistory(past=tuple(past), future=(state.snapshot(), *state.history.future))
    return _restore(state, previous, history)


def redo(state: EditorState) -> EditorState:
    """Re-apply the next future snapshot. No-op when there is nothing to redo."""
    if not state.history.future:
        return state
    following, *future = state.history.future
    history = EditHistory(past=(*state.history.past, state.snapshot())[-HISTORY_LIMIT:], future=tuple(future))
    return _restore(state, following, history)


def load_project_data(state: EditorState, data: ProjectData) -> EditorState:
    """Bulk-replace the timeline content and start a fresh history.

    An empty ``data.tracks`` keeps the current tracks.
    """
    tracks = data.tracks if data.tracks else state.tracks
    tracks = tuple(t.model_copy(update={"clips": sort_clips(t.clips)}) for t in tracks)
    loaded = state.model_copy(
        update={
            "tracks": tracks,
            "subtitles": tuple(sorted(data.subtitles, key=lambda s: s.start_time)),
            "history": EditHistory(),
            "selected_clip_id": None,
            "selected_subtitle_id": None,
        }
    )
    return loaded.model_copy(update={"playhead": min(loaded.playhead, loaded.duration)})


def reset() -> EditorState:
    """Return the state of a freshly opened, empty session."""
    return EditorState()


def apply(state: EditorState, action: BaseAction) -> EditorState:
    """Apply any edit action, recording history for content changes.

    The snapshot is taken before the transform runs, so an action that turns
    out to be a no-op still occupies one undo step.
    """
    if isinstance(action, Undo):
        return undo(state)
    if isinstance(action, Redo):
        return redo(state)
    if isinstance(action, Reset):
        return reset()
    if isinstance(action, LoadProjectData):
        return load_project_data(state, action.data)

    if action.records_history:
        state = state.model_copy(update={"history": _push_past(state.history, state.snapshot())})
    return apply_operation(state, action)
