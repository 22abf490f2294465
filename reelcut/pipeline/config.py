"""Transcode pipeline configuration."""

import os
from enum import StrEnum, auto

from dotenv import load_dotenv
from pydantic import Field

from reelcut.common.base_reelcut_model import BaseReelcutModel

load_dotenv()


class Environment(StrEnum):
    DEVELOPMENT = auto()
    PRODUCTION = auto()


class TranscodeConfig(BaseReelcutModel):
    """Settings for the export pipeline and its ffmpeg invocations."""

    environment: Environment = Environment.DEVELOPMENT

    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"
    # None means the system temp directory
    scratch_dir: str | None = None

    download_concurrency: int = Field(default=4, ge=1)
    download_timeout_seconds: float = Field(default=60.0, gt=0)

    public_base_url: str = "http://localhost:8000"
    allow_mock_export: bool = True

    # Output format (vertical short-form video)
    width: int = 1080
    height: int = 1920
    fps: int = 30
    preset: str = "fast"
    crf: int = 23
    audio_bitrate: str = "128k"
    audio_sample_rate: int = 44100
    audio_channels: int = 2

    # Burned-in subtitle layout
    subtitle_outline: int = 2
    subtitle_margin_v: int = 60


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_transcode_config() -> TranscodeConfig:
    """Get pipeline configuration from environment variables.

    Environment variables:
        REELCUT_ENV: development or production (default: development)
        REELCUT_FFMPEG_BINARY / REELCUT_FFPROBE_BINARY: transcoder executables
        REELCUT_SCRATCH_DIR: parent directory of per-export scratch dirs
        REELCUT_DOWNLOAD_CONCURRENCY: parallel source downloads (default: 4)
        REELCUT_DOWNLOAD_TIMEOUT_SECONDS: per-download timeout (default: 60)
        REELCUT_PUBLIC_BASE_URL: base of artifact download URLs
        REELCUT_ALLOW_MOCK_EXPORT: allow mock exports without ffmpeg
            (default: true in development, false in production)
    """
    environment = Environment(os.environ.get("REELCUT_ENV", "development").strip().lower())

    return TranscodeConfig(
        environment=environment,
        ffmpeg_binary=os.environ.get("REELCUT_FFMPEG_BINARY", "ffmpeg"),
        ffprobe_binary=os.environ.get("REELCUT_FFPROBE_BINARY", "ffprobe"),
        scratch_dir=os.environ.get("REELCUT_SCRATCH_DIR") or None,
        download_concurrency=int(os.environ.get("REELCUT_DOWNLOAD_CONCURRENCY", "4")),
        download_timeout_seconds=float(os.environ.get("REELCUT_DOWNLOAD_TIMEOUT_SECONDS", "60")),
        public_base_url=os.environ.get("REELCUT_PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/"),
        allow_mock_export=_env_bool("REELCUT_ALLOW_MOCK_EXPORT", environment == Environment.DEVELOPMENT),
    )
