"""Tests for the ffmpeg argument builders."""

from pathlib import Path

import pytest

from reelcut.export_builder.schemas import ExportClip
from reelcut.pipeline.config import TranscodeConfig
from reelcut.pipeline.ffmpeg_commands import (
    burn_args,
    clip_args,
    concat_args,
    concat_list,
    escape_filter_value,
    mix_gains,
)
from reelcut.pipeline.transcoder import FFmpegTranscoder


@pytest.fixture
def config() -> TranscodeConfig:
    return TranscodeConfig()


@pytest.fixture
def clip() -> ExportClip:
    return ExportClip(line_id="line-1", video_url="https://v/1.mp4", duration=8.0, trim_start=1.5, trim_end=0.5)


def _filter_complex(args: list[str]) -> str:
    return args[args.index("-filter_complex") + 1]


class TestMixGains:
    @pytest.mark.parametrize(
        "audio_mix, expected",
        [(0.0, (1.0, 0.0)), (1.0, (0.0, 1.0)), (0.25, (0.75, 0.25)), (-1.0, (1.0, 0.0)), (3.0, (0.0, 1.0))],
    )
    def test_gains(self, audio_mix, expected):
        assert mix_gains(audio_mix) == expected


class TestClipArgs:
    def test_seeks_and_cuts_effective_duration(self, clip, config):
        args = clip_args(clip, Path("in.mp4"), None, Path("out.mp4"), config, 0.8)

        assert args[:4] == ["-ss", "1.5", "-i", "in.mp4"]
        assert args[args.index("-t") + 1] == "6"
        assert args[-1] == "out.mp4"

    def test_letterboxes_to_output_frame(self, clip, config):
        args = clip_args(clip, Path("in.mp4"), None, Path("out.mp4"), config, 0.8)

        assert _filter_complex(args).startswith(
            "[0:v]scale=1080:1920:force_original_aspect_ratio=decrease,pad=1080:1920:(ow-iw)/2:(oh-ih)/2"
        )
        assert args[args.index("-c:v") + 1] == "libx264"
        assert args[args.index("-c:a") + 1] == "aac"

    @pytest.mark.parametrize(
        "audio_mix, native, narration",
        [(0.0, "1", "0"), (1.0, "0", "1"), (0.8, "0.2", "0.8")],
    )
    def test_mixes_native_and_narration(self, clip, config, audio_mix, native, narration):
        args = clip_args(clip, Path("in.mp4"), Path("voice.mp3"), Path("out.mp4"), config, audio_mix)
        graph = _filter_complex(args)

        assert f"[0:a]volume={native}[va]" in graph
        assert f"[1:a]volume={narration}[vo]" in graph
        assert "amix=inputs=2" in graph
        assert args[4:6] == ["-i", "voice.mp3"]

    @pytest.mark.parametrize("audio_mix, gain", [(0.0, "0"), (0.5, "0.5"), (1.0, "1")])
    def test_narration_alone_follows_the_mix(self, clip, config, audio_mix, gain):
        args = clip_args(
            clip, Path("in.mp4"), Path("voice.mp3"), Path("out.mp4"), config, audio_mix, has_native_audio=False
        )

        assert _filter_complex(args).endswith(f"[1:a]volume={gain}[aout]")
        assert "amix" not in _filter_complex(args)

    def test_narration_is_read_from_its_offset(self, config):
        second_half = ExportClip(
            line_id="line-1", video_url="v", duration=5.0, trim_start=2.0, audio_offset=2.0
        )

        args = clip_args(second_half, Path("in.mp4"), Path("voice.mp3"), Path("out.mp4"), config, 0.8)

        assert args[:8] == ["-ss", "2", "-i", "in.mp4", "-ss", "2", "-i", "voice.mp3"]

    def test_native_audio_alone(self, clip, config):
        args = clip_args(clip, Path("in.mp4"), None, Path("out.mp4"), config, 0.8)
        assert _filter_complex(args).endswith("[0:a]anull[aout]")

    def test_silent_track_when_no_audio(self, clip, config):
        args = clip_args(clip, Path("in.mp4"), None, Path("out.mp4"), config, 0.8, has_native_audio=False)

        assert "-f" in args
        assert args[args.index("-f") + 1] == "lavfi"
        assert "anullsrc=channel_layout=stereo:sample_rate=44100" in args
        assert args[-9:-1] == ["-c:a", "aac", "-b:a", "128k", "-ar", "44100", "-ac", "2"]


class TestConcatAndBurn:
    def test_concat_list_escapes_quotes(self, tmp_path):
        path = tmp_path / "it's.mp4"

        listing = concat_list([path])

        expected = str(path.resolve()).replace("'", "'\\''")
        assert listing == f"file '{expected}'\n"
        assert "'\\''" in listing

    def test_concat_reencodes_with_faststart(self, config):
        args = concat_args(Path("list.txt"), Path("joined.mp4"), config)

        assert args[:6] == ["-f", "concat", "-safe", "0", "-i", "list.txt"]
        assert "copy" not in args
        assert args[args.index("-movflags") + 1] == "+faststart"
        assert args[-1] == "joined.mp4"

    def test_burn_uses_subtitles_filter(self, tmp_path, config):
        srt = tmp_path / "subs.srt"

        args = burn_args(Path("joined.mp4"), srt, Path("final.mp4"), "FontSize=24", config)

        vf = args[args.index("-vf") + 1]
        assert vf.startswith("subtitles=filename='")
        assert vf.endswith(":force_style='FontSize=24'")
        assert args[args.index("-c:a") + 1] == "copy"

    def test_escape_filter_value(self):
        assert escape_filter_value("C:\\tmp\\a'b.srt") == "C\\:/tmp/a\\'b.srt"


def test_transcoder_unavailable_without_binaries():
    transcoder = FFmpegTranscoder(TranscodeConfig(ffmpeg_binary="reelcut-missing-ffmpeg"))
    assert not transcoder.available()
