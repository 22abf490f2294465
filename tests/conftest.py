"""Shared fixtures and builders for the reelcut tests."""

import asyncio
from pathlib import Path

import pytest

from reelcut.pipeline.artifact_store import StoredArtifact
from reelcut.pipeline.config import TranscodeConfig
from reelcut.pipeline.schemas import ExportStage, MediaInfo, TranscodeResult
from reelcut.timeline.schemas import Clip, ClipKind, EditorState, Subtitle, Track, TrackKind


def make_clip(
    clip_id: str,
    start_time: float = 0.0,
    duration: float = 5.0,
    source_id: str | None = None,
    source_url: str | None = None,
    kind: ClipKind = ClipKind.VIDEO,
    trim_start: float = 0.0,
    trim_end: float = 0.0,
) -> Clip:
    return Clip(
        id=clip_id,
        source_id=source_id or f"src-{clip_id}",
        source_url=source_url if source_url is not None else f"https://cdn.example.com/{clip_id}.mp4",
        start_time=start_time,
        duration=duration,
        trim_start=trim_start,
        trim_end=trim_end,
        kind=kind,
    )


def make_state(
    video_clips: tuple[Clip, ...] = (),
    audio_clips: tuple[Clip, ...] = (),
    subtitles: tuple[Subtitle, ...] = (),
    **kwargs,
) -> EditorState:
    tracks = (
        Track(id="video-track-1", name="Video 1", kind=TrackKind.VIDEO, clips=video_clips),
        Track(id="audio-track-1", name="Audio 1", kind=TrackKind.AUDIO, clips=audio_clips),
    )
    return EditorState(tracks=tracks, subtitles=subtitles, **kwargs)


@pytest.fixture
def single_clip_state() -> EditorState:
    """One 8 second video clip at the start of the timeline."""
    return make_state(video_clips=(make_clip("clip-a", start_time=0.0, duration=8.0),))


class FakeTranscoder:
    """Transcoder double that writes an empty output file per invocation."""

    def __init__(self, available: bool = True, has_audio: bool = True) -> None:
        self._available = available
        self.has_audio = has_audio
        self.calls: list[tuple[ExportStage, list[str]]] = []
        self.started = asyncio.Event()
        self.release: asyncio.Event | None = None

    def available(self) -> bool:
        return self._available

    async def run(self, stage: ExportStage, args: list[str]) -> TranscodeResult:
        self.calls.append((stage, list(args)))
        self.started.set()
        if self.release is not None:
            await self.release.wait()
        output = Path(args[-1])
        output.write_bytes(b"")
        return TranscodeResult(stage=stage, output_path=output)

    async def probe(self, path: Path) -> MediaInfo:
        return MediaInfo(duration=8.0, has_video=True, has_audio=self.has_audio, width=1080, height=1920)

    @property
    def stages(self) -> list[ExportStage]:
        return [stage for stage, _ in self.calls]


class InMemoryArtifactStore:
    def __init__(self) -> None:
        self.stored: dict[str, bytes] = {}

    async def store(self, path: Path, export_id: str) -> StoredArtifact:
        self.stored[export_id] = path.read_bytes()
        return StoredArtifact(file_id=f"file-{export_id}", url=f"https://files.example.com/{export_id}.mp4")


@pytest.fixture
def media_sources(tmp_path) -> dict[str, str]:
    """Local video and narration files addressed by file:// URLs."""
    media = tmp_path / "media"
    media.mkdir()
    video = media / "line-1.mp4"
    video.write_bytes(b"video")
    voice = media / "line-1.mp3"
    voice.write_bytes(b"voice")
    return {"video": video.as_uri(), "voice": voice.as_uri(), "missing": (media / "gone.mp3").as_uri()}


@pytest.fixture
def transcode_config(tmp_path) -> TranscodeConfig:
    return TranscodeConfig(scratch_dir=str(tmp_path / "scratch"))
