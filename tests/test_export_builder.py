import pytest
from conftest import make_clip, make_state

from reelcut.captions.word_timing import SubtitleWord
from reelcut.editor import history
from reelcut.editor.schemas import SplitClip
from reelcut.export_builder.builder import build_export_clips, build_export_request, build_subtitle_words
from reelcut.export_builder.errors import NoExportableContentError
from reelcut.export_builder.schemas import ClipTrim, ExportClip, SubtitleOptions
from reelcut.timeline.population import ScriptLineMedia
from reelcut.timeline.schemas import ClipKind, Subtitle


def _voice(clip_id, source_id, start, duration):
    return make_clip(
        clip_id,
        start,
        duration,
        source_id=source_id,
        source_url=f"https://cdn.example.com/{clip_id}.mp3",
        kind=ClipKind.AUDIO,
    )


class TestExportClip:
    def test_effective_duration_subtracts_trims(self):
        clip = ExportClip(line_id="l", video_url="v", duration=8.0, trim_start=1.5, trim_end=0.5)
        assert clip.effective_duration == 6.0

    def test_effective_duration_has_a_floor(self):
        clip = ExportClip(line_id="l", video_url="v", duration=2.0, trim_start=1.0, trim_end=1.0)
        assert clip.effective_duration == 0.5


class TestBuildExportClips:
    def test_clips_are_laid_end_to_end(self):
        state = make_state(
            video_clips=(
                make_clip("a", 0.0, 4.0, source_id="line-1", trim_start=1.0),
                make_clip("b", 10.0, 3.0, source_id="line-2"),
            ),
            audio_clips=(_voice("va", "line-1", 0.0, 4.0),),
        )

        clips = build_export_clips(state)

        assert [(c.line_id, c.start_time, c.effective_duration) for c in clips] == [
            ("line-1", 0.0, 4.0),
            ("line-2", 4.0, 3.0),
        ]
        assert clips[0].duration == 5.0
        assert clips[0].trim_start == 1.0
        assert clips[0].audio_url == "https://cdn.example.com/va.mp3"
        assert clips[1].audio_url is None

    def test_trim_overrides_replace_clip_trims(self):
        state = make_state(video_clips=(make_clip("a", 0.0, 8.0), make_clip("b", 8.0, 2.0)))

        clips = build_export_clips(state, trims={"a": ClipTrim(trim_start=1.5, trim_end=0.5)})

        assert (clips[0].trim_start, clips[0].trim_end) == (1.5, 0.5)
        assert clips[1].start_time == 6.0

    def test_muted_narration_is_left_out(self):
        state = make_state(
            video_clips=(make_clip("a", 0.0, 4.0, source_id="line-1"),),
            audio_clips=(_voice("va", "line-1", 0.0, 4.0),),
        )
        muted = state.model_copy(
            update={"tracks": (state.tracks[0], state.tracks[1].model_copy(update={"muted": True}))}
        )

        assert build_export_clips(muted)[0].audio_url is None

    def test_line_media_fills_missing_urls(self):
        state = make_state(video_clips=(make_clip("a", 0.0, 4.0, source_id="line-1", source_url=""),))
        lines = [ScriptLineMedia(line_id="line-1", video_url="https://v/1.mp4", audio_url="https://a/1.mp3")]

        clips = build_export_clips(state, lines)

        assert clips[0].video_url == "https://v/1.mp4"
        assert clips[0].audio_url == "https://a/1.mp3"

    def test_clips_without_video_are_skipped(self):
        state = make_state(video_clips=(make_clip("a", 0.0, 4.0, source_url=""), make_clip("b", 4.0, 2.0)))

        clips = build_export_clips(state)

        assert [c.line_id for c in clips] == ["src-b"]
        assert clips[0].start_time == 0.0

    def test_split_halves_continue_the_narration(self):
        state = make_state(
            video_clips=(make_clip("a", 0.0, 5.0, source_id="line-1"),),
            audio_clips=(_voice("va", "line-1", 0.0, 5.0),),
        )
        state = history.apply(state, SplitClip(clip_id="a", split_point=2.0))

        clips = build_export_clips(state)

        assert [(c.start_time, c.effective_duration) for c in clips] == [(0.0, 2.0), (2.0, 3.0)]
        assert [c.audio_url for c in clips] == ["https://cdn.example.com/va.mp3"] * 2
        assert [c.audio_offset for c in clips] == [0.0, 2.0]

    def test_line_narration_follows_the_video_trim(self):
        state = make_state(video_clips=(make_clip("a", 0.0, 4.0, source_id="line-1", trim_start=1.5),))
        lines = [ScriptLineMedia(line_id="line-1", video_url="https://v/1.mp4", audio_url="https://a/1.mp3")]

        assert build_export_clips(state, lines)[0].audio_offset == 1.5


class TestSubtitleWords:
    def test_line_text_is_spread_over_each_clip(self):
        clips = [
            ExportClip(line_id="line-1", video_url="v1", start_time=0.0, duration=4.0),
            ExportClip(line_id="line-2", video_url="v2", start_time=4.0, duration=2.0),
        ]
        lines = [ScriptLineMedia(line_id="line-1", text="hi there"), ScriptLineMedia(line_id="line-2", text="bye")]

        words = build_subtitle_words(clips, lines)

        assert [w.word for w in words] == ["hi", "there", "bye"]
        assert words[1].end_time == pytest.approx(4.0)
        assert (words[2].start_time, words[2].end_time) == (4.0, 6.0)

    def test_timeline_subtitles_are_the_fallback(self):
        subtitles = [Subtitle(id="s1", text="one two", start_time=2.0, end_time=4.0)]

        words = build_subtitle_words([], [], subtitles)

        assert words[0].start_time == 2.0
        assert words[-1].end_time == pytest.approx(4.0)


class TestBuildExportRequest:
    def test_empty_timeline_cannot_be_exported(self):
        with pytest.raises(NoExportableContentError, match="No clips with video"):
            build_export_request(make_state())

    def test_enabled_subtitles_get_words(self):
        state = make_state(
            video_clips=(make_clip("a", 0.0, 4.0),),
            subtitles=(Subtitle(id="s1", text="hello world", start_time=0.0, end_time=4.0),),
        )

        request = build_export_request(state, subtitles=SubtitleOptions(enabled=True), audio_mix=0.3)

        assert request.audio_mix == 0.3
        assert [w.word for w in request.subtitles.words] == ["hello", "world"]

    def test_provided_words_pass_through(self):
        state = make_state(video_clips=(make_clip("a", 0.0, 4.0),))
        words = (SubtitleWord(word="custom", start_time=0.0, end_time=1.0),)

        request = build_export_request(state, subtitles=SubtitleOptions(enabled=True, words=words))

        assert request.subtitles.words == words

    def test_disabled_subtitles_leave_words_unset(self):
        state = make_state(video_clips=(make_clip("a", 0.0, 4.0),))
        assert build_export_request(state).subtitles.words is None

    def test_state_is_not_modified(self, single_clip_state):
        before = single_clip_state.model_dump()
        build_export_request(single_clip_state)
        assert single_clip_state.model_dump() == before
