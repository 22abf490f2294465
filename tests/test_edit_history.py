"""Tests for snapshot-based undo/redo."""

from conftest import make_clip, make_state

from reelcut.editor import history
from reelcut.editor.schemas import (
    AddClip,
    LoadProjectData,
    MoveClip,
    Redo,
    RemoveClip,
    Reset,
    SelectClip,
    SetPlayhead,
    SetZoom,
    ToggleTrackMute,
    ToggleTrackVisibility,
    Undo,
)
from reelcut.timeline.schemas import HISTORY_LIMIT, ClipDraft, EditorState, ProjectData, Track, TrackKind


def _add(state: EditorState, start: float) -> EditorState:
    draft = ClipDraft(source_id=f"src-{start}", start_time=start, duration=1.0)
    return history.apply(state, AddClip(track_id="video-track-1", clip=draft))


def test_mutation_pushes_snapshot_and_clears_future(single_clip_state):
    state = history.apply(single_clip_state, MoveClip(clip_id="clip-a", new_start_time=2.0))
    state = history.undo(state)
    assert history.can_redo(state)

    state = history.apply(state, MoveClip(clip_id="clip-a", new_start_time=4.0))

    assert len(state.history.past) == 1
    assert state.history.future == ()


def test_undo_and_redo_round_trip(single_clip_state):
    moved = history.apply(single_clip_state, MoveClip(clip_id="clip-a", new_start_time=3.0))
    assert moved.tracks[0].clips[0].start_time == 3.0

    undone = history.apply(moved, Undo())
    assert undone.tracks == single_clip_state.tracks
    assert undone.duration == 8.0
    assert history.can_redo(undone)

    redone = history.apply(undone, Redo())
    assert redone.tracks == moved.tracks
    assert redone.duration == 11.0
    assert not history.can_redo(redone)


def test_undo_and_redo_on_empty_history_are_no_ops():
    state = EditorState()
    assert history.undo(state) is state
    assert history.redo(state) is state


def test_history_is_capped_at_fifty_snapshots():
    state = EditorState()
    for i in range(60):
        state = _add(state, float(i))

    assert len(state.history.past) == HISTORY_LIMIT

    undos = 0
    while history.can_undo(state):
        state = history.undo(state)
        undos += 1

    assert undos == HISTORY_LIMIT
    # The ten oldest additions can no longer be undone
    assert len(state.tracks[0].clips) == 10
    assert history.undo(state) is state


def test_view_state_actions_do_not_snapshot(single_clip_state):
    state = single_clip_state
    for action in (
        SelectClip(clip_id="clip-a"),
        SetPlayhead(time=4.0),
        SetZoom(zoom=2.0),
        ToggleTrackMute(track_id="audio-track-1"),
        ToggleTrackVisibility(track_id="video-track-1"),
    ):
        state = history.apply(state, action)

    assert state.history.past == ()
    assert state.playhead == 4.0
    assert state.zoom == 2.0
    assert state.tracks[1].muted is True
    assert state.tracks[0].visible is False


def test_no_op_mutation_still_records_a_step(single_clip_state):
    state = history.apply(single_clip_state, RemoveClip(clip_id="does-not-exist"))
    assert state.tracks == single_clip_state.tracks
    assert len(state.history.past) == 1


def test_undo_clamps_playhead_into_restored_duration():
    state = make_state(video_clips=(make_clip("a", 0.0, 2.0),))
    state = history.apply(state, MoveClip(clip_id="a", new_start_time=10.0))
    state = history.apply(state, SetPlayhead(time=11.0))

    state = history.undo(state)

    assert state.playhead == 2.0


def test_load_project_data_resets_history_and_keeps_tracks_when_empty(single_clip_state):
    state = history.apply(single_clip_state, MoveClip(clip_id="clip-a", new_start_time=1.0))

    loaded = history.apply(state, LoadProjectData(data=ProjectData()))

    assert loaded.tracks == state.tracks
    assert loaded.history.past == ()
    assert loaded.history.future == ()


def test_load_project_data_replaces_and_sorts_tracks():
    track = Track(
        id="v",
        name="V",
        kind=TrackKind.VIDEO,
        clips=(make_clip("late", 5.0), make_clip("early", 0.0)),
    )

    loaded = history.load_project_data(EditorState(playhead=0.0), ProjectData(tracks=(track,)))

    assert [c.id for c in loaded.tracks[0].clips] == ["early", "late"]
    assert loaded.duration == 10.0


def test_reset_returns_default_state(single_clip_state):
    state = history.apply(single_clip_state, Reset())
    assert state == EditorState()
