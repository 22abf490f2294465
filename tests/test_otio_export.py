import opentimelineio as otio
from conftest import make_clip, make_state

from reelcut.editor.otio_export import TimelineOtioExporter
from reelcut.timeline.schemas import Subtitle


def test_gaps_fill_space_between_clips():
    state = make_state(video_clips=(make_clip("a", 1.0, 2.0, trim_start=0.5), make_clip("b", 5.0, 1.0)))

    timeline = TimelineOtioExporter(frame_rate=10).create_timeline(state)

    video = timeline.video_tracks()[0]
    kinds = [type(item).__name__ for item in video]
    assert kinds == ["Gap", "Clip", "Gap", "Clip"]
    assert video[0].duration().to_seconds() == 1.0
    assert video[1].source_range.start_time.to_seconds() == 0.5
    assert video[1].metadata["reelcut"]["clip_id"] == "a"
    assert video[2].duration().to_seconds() == 2.0
    assert timeline.duration().to_seconds() == 6.0


def test_overlapping_clip_head_is_cut():
    state = make_state(video_clips=(make_clip("a", 0.0, 4.0), make_clip("b", 2.0, 4.0)))

    video = TimelineOtioExporter(frame_rate=10).create_timeline(state).video_tracks()[0]

    assert [item.name for item in video] == ["src-a", "src-b"]
    assert video[1].source_range.start_time.to_seconds() == 2.0
    assert video[1].source_range.duration.to_seconds() == 2.0


def test_subtitles_become_markers_and_hidden_tracks_are_disabled():
    state = make_state(
        video_clips=(make_clip("a", 0.0, 4.0),),
        subtitles=(Subtitle(id="s1", text="hi", start_time=1.0, end_time=2.0),),
    )
    state = state.model_copy(update={"tracks": (state.tracks[0].model_copy(update={"visible": False}), state.tracks[1])})

    timeline = TimelineOtioExporter().create_timeline(state, name="cut")

    marker = timeline.tracks.markers[0]
    assert marker.name == "hi"
    assert marker.marked_range.start_time.to_seconds() == 1.0
    assert timeline.video_tracks()[0].enabled is False
    assert timeline.audio_tracks()[0].metadata["reelcut"]["track_id"] == "audio-track-1"


def test_json_round_trips_through_otio_adapter():
    state = make_state(video_clips=(make_clip("a", 0.0, 4.0),))

    document = TimelineOtioExporter().to_json(state)

    assert otio.adapters.read_from_string(document, "otio_json").name == "Reelcut Edit"
