"""Transcoder capability and its ffmpeg subprocess implementation."""

import asyncio
import json
import logging
import shutil
from pathlib import Path
from typing import Protocol

from reelcut.pipeline.config import TranscodeConfig
from reelcut.pipeline.errors import TranscodeError
from reelcut.pipeline.schemas import ExportStage, MediaInfo, TranscodeResult

logger = logging.getLogger(__name__)

STDERR_TAIL_CHARS = 2000


class Transcoder(Protocol):
    """Runs transcode steps for the export pipeline.

    ``run`` receives ffmpeg-style arguments whose last element is the
    output path.
    """

    def available(self) -> bool: ...

    async def run(self, stage: ExportStage, args: list[str]) -> TranscodeResult: ...

    async def probe(self, path: Path) -> MediaInfo: ...


def _tail(stderr: bytes) -> str:
    return stderr.decode("utf-8", errors="replace").strip()[-STDERR_TAIL_CHARS:]


class FFmpegTranscoder:
    """Runs ffmpeg and ffprobe as child processes."""

    def __init__(self, config: TranscodeConfig) -> None:
        self.config = config

    def available(self) -> bool:
        return (
            shutil.which(self.config.ffmpeg_binary) is not None
            and shutil.which(self.config.ffprobe_binary) is not None
        )

    async def run(self, stage: ExportStage, args: list[str]) -> TranscodeResult:
        """Run ffmpeg to completion.

        Args:
            stage: Export stage the invocation belongs to, for errors and logs.
            args: Arguments after the global flags; the last one is the output.

        Returns:
            TranscodeResult pointing at the output file.

        Raises:
            TranscodeError: If ffmpeg exits with a non-zero status.
        """
        cmd = [self.config.ffmpeg_binary, "-y", "-hide_banner", "-loglevel", "error", *args]
        logger.debug("Running %s", " ".join(cmd))
        returncode, stderr = await self._exec(cmd)
        if returncode != 0:
            raise TranscodeError(stage.value, returncode, _tail(stderr))
        return TranscodeResult(stage=stage, output_path=Path(args[-1]), returncode=returncode, stderr_tail=_tail(stderr))

    async def probe(self, path: Path) -> MediaInfo:
        """Inspect a media file with ffprobe.

        Raises:
            TranscodeError: If ffprobe fails or prints unparseable output.
        """
        cmd = [
            self.config.ffprobe_binary,
            "-v", "error",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]
        returncode, stderr, stdout = await self._exec_with_output(cmd)
        if returncode != 0:
            raise TranscodeError("probe", returncode, _tail(stderr))

        try:
            data = json.loads(stdout or b"{}")
        except json.JSONDecodeError as e:
            raise TranscodeError("probe", returncode, f"invalid ffprobe output: {e}") from e

        streams = data.get("streams", [])
        video = next((s for s in streams if s.get("codec_type") == "video"), None)
        duration = data.get("format", {}).get("duration")
        return MediaInfo(
            duration=float(duration) if duration is not None else None,
            has_video=video is not None,
            has_audio=any(s.get("codec_type") == "audio" for s in streams),
            width=video.get("width") if video else None,
            height=video.get("height") if video else None,
        )

    async def _exec(self, cmd: list[str]) -> tuple[int, bytes]:
        returncode, stderr, _ = await self._exec_with_output(cmd, capture_stdout=False)
        return returncode, stderr

    async def _exec_with_output(self, cmd: list[str], capture_stdout: bool = True) -> tuple[int, bytes, bytes]:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE if capture_stdout else asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            # The export was cancelled mid-encode
            if proc.returncode is None:
                logger.info("Killing %s (pid %d)", cmd[0], proc.pid)
                proc.kill()
                await proc.wait()
            raise
        return proc.returncode or 0, stderr or b"", stdout or b""
