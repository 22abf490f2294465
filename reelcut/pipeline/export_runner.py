"""Staged export runner: download, process, concatenate, burn, upload."""

import asyncio
import logging
import shutil
import tempfile
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Protocol

from reelcut.captions.burn_in_style import BurnInStyle, build_force_style
from reelcut.captions.srt import render_srt
from reelcut.export_builder.schemas import ExportRequest
from reelcut.pipeline import ffmpeg_commands
from reelcut.pipeline.artifact_store import ArtifactStore, StoredArtifact
from reelcut.pipeline.config import TranscodeConfig
from reelcut.pipeline.downloader import Downloader
from reelcut.pipeline.errors import ExportError, StageFailedError, TranscodeError, UploadError
from reelcut.pipeline.progress_reporter import ProgressReporter
from reelcut.pipeline.schemas import (
    DOWNLOAD_END_PERCENT,
    PROCESSING_END_PERCENT,
    STAGE_PERCENT,
    ExportResult,
    ExportStage,
)
from reelcut.pipeline.transcoder import Transcoder

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Export cancelled"


class ExportRecorder(Protocol):
    """Persists export state; implemented by the export repository."""

    async def update_progress(
        self, export_id: str, stage: ExportStage, progress_percent: float, message: str = ""
    ) -> object: ...

    async def set_completed(
        self, export_id: str, url: str, is_mock: bool = False, artifact_file_id: str | None = None
    ) -> object: ...

    async def set_error(self, export_id: str, error_message: str) -> object: ...


def scratch_dir_for(config: TranscodeConfig, export_id: str) -> Path:
    """Scratch directory exclusive to one export."""
    root = Path(config.scratch_dir) if config.scratch_dir else Path(tempfile.gettempdir())
    return root / f"reelcut-export-{export_id}"


class ExportRunner:
    """Runs one export request through every stage of the pipeline."""

    def __init__(
        self,
        export_id: str,
        request: ExportRequest,
        config: TranscodeConfig,
        transcoder: Transcoder,
        downloader: Downloader,
        artifact_store: ArtifactStore,
        reporter: ProgressReporter,
        recorder: ExportRecorder | None = None,
    ) -> None:
        self.export_id = export_id
        self.request = request
        self.config = config
        self.transcoder = transcoder
        self.downloader = downloader
        self.artifact_store = artifact_store
        self.reporter = reporter
        self.recorder = recorder
        self.scratch_dir = scratch_dir_for(config, export_id)
        self.stage = ExportStage.DOWNLOADING

    @property
    def burns_subtitles(self) -> bool:
        options = self.request.subtitles
        return options.enabled and bool(options.words)

    async def run(self) -> ExportResult:
        """Execute every stage and return the final result.

        Raises:
            StageFailedError: If any stage fails; the failure is published
                before raising.
            asyncio.CancelledError: If the run is cancelled; a failed event
                is published first.
        """
        logger.info(
            "[export=%s] Starting export: clips=%d, subtitles=%s, audio_mix=%.2f",
            self.export_id,
            len(self.request.clips),
            self.burns_subtitles,
            self.request.audio_mix,
        )

        try:
            self.scratch_dir.mkdir(parents=True, exist_ok=True)

            sources = await self._download_sources()
            segments = await self._process_clips(sources)
            output = await self._concatenate(segments)
            if self.burns_subtitles:
                output = await self._burn_subtitles(output)
            artifact = await self._upload(output)

            result = ExportResult(export_id=self.export_id, url=artifact.url)
            await self._persist(lambda r: r.set_completed(self.export_id, artifact.url, False, artifact.file_id))
            await self.reporter.send_complete(artifact.url)
            logger.info("[export=%s] Export completed successfully", self.export_id)
            return result

        except asyncio.CancelledError:
            logger.warning("[export=%s] Export cancelled during %s", self.export_id, self.stage.value)
            await self._handle_error(CANCELLED_MESSAGE)
            raise

        except Exception as e:
            logger.exception("[export=%s] Export failed during %s", self.export_id, self.stage.value)
            error = e if isinstance(e, StageFailedError) else StageFailedError(self.stage.value, str(e))
            await self._handle_error(error.message)
            raise error from e

        finally:
            self._cleanup()

    async def _enter_stage(self, stage: ExportStage, percent: float | None = None, message: str = "") -> None:
        self.stage = stage
        percent = STAGE_PERCENT[stage] if percent is None else percent
        await self.reporter.send_progress(stage, percent, message)
        await self._persist(lambda r: r.update_progress(self.export_id, stage, self.reporter.percent, message))

    async def _download_sources(self) -> dict[str, Path]:
        urls: list[str] = []
        for clip in self.request.clips:
            urls.append(clip.video_url)
            if clip.audio_url:
                urls.append(clip.audio_url)

        await self._enter_stage(ExportStage.DOWNLOADING, message=f"Downloading {len(set(urls))} source files")
        span = DOWNLOAD_END_PERCENT - STAGE_PERCENT[ExportStage.DOWNLOADING]

        async def on_progress(completed: int, total: int, url: str) -> None:
            percent = STAGE_PERCENT[ExportStage.DOWNLOADING] + span * completed / total
            await self.reporter.send_progress(
                ExportStage.DOWNLOADING, percent, f"Downloaded {completed}/{total}"
            )

        sources = await self.downloader.download_all(urls, self.scratch_dir, on_progress)
        logger.info("[export=%s] Downloaded %d files to %s", self.export_id, len(sources), self.scratch_dir)
        return sources

    async def _process_clips(self, sources: dict[str, Path]) -> list[Path]:
        clips = self.request.clips
        await self._enter_stage(ExportStage.PROCESSING, message=f"Processing {len(clips)} clips")
        span = PROCESSING_END_PERCENT - STAGE_PERCENT[ExportStage.PROCESSING]

        segments: list[Path] = []
        for index, clip in enumerate(clips):
            video_path = sources[clip.video_url]
            narration_path = sources.get(clip.audio_url) if clip.audio_url else None
            info = await self.transcoder.probe(video_path)
            output = self.scratch_dir / f"segment_{index:03d}.mp4"

            args = ffmpeg_commands.clip_args(
                clip,
                video_path,
                narration_path,
                output,
                self.config,
                self.request.audio_mix,
                has_native_audio=info.has_audio,
            )
            await self._run_transcoder(ExportStage.PROCESSING, args, output)
            segments.append(output)

            percent = STAGE_PERCENT[ExportStage.PROCESSING] + span * (index + 1) / len(clips)
            await self.reporter.send_progress(
                ExportStage.PROCESSING, percent, f"Processed clip {index + 1}/{len(clips)}"
            )
        return segments

    async def _concatenate(self, segments: list[Path]) -> Path:
        await self._enter_stage(ExportStage.CONCATENATING, message="Joining clips")
        list_path = self.scratch_dir / "concat.txt"
        list_path.write_text(ffmpeg_commands.concat_list(segments), encoding="utf-8")
        output = self.scratch_dir / "joined.mp4"
        await self._run_transcoder(
            ExportStage.CONCATENATING, ffmpeg_commands.concat_args(list_path, output, self.config), output
        )
        return output

    async def _burn_subtitles(self, video_path: Path) -> Path:
        options = self.request.subtitles
        words = options.words or ()
        await self._enter_stage(ExportStage.SUBTITLE_BURN, message=f"Burning {len(words)} subtitle words")

        srt_path = self.scratch_dir / "subtitles.srt"
        srt_path.write_text(render_srt(words), encoding="utf-8")

        style = BurnInStyle(outline=self.config.subtitle_outline, margin_v=self.config.subtitle_margin_v)
        if options.style is not None:
            style = style.model_copy(
                update={
                    "color": options.style.color_token,
                    "background_color": options.style.background_color_token,
                    "font_size": options.style.font_size,
                }
            )

        output = self.scratch_dir / "subtitled.mp4"
        args = ffmpeg_commands.burn_args(video_path, srt_path, output, build_force_style(style), self.config)
        await self._run_transcoder(ExportStage.SUBTITLE_BURN, args, output)
        return output

    async def _upload(self, output: Path) -> StoredArtifact:
        await self._enter_stage(ExportStage.UPLOADING, message="Saving export")
        try:
            artifact = await self.artifact_store.store(output, self.export_id)
        except ExportError:
            raise
        except Exception as e:
            raise UploadError(str(e)) from e
        logger.info("[export=%s] Stored artifact %s", self.export_id, artifact.file_id)
        return artifact

    async def _run_transcoder(self, stage: ExportStage, args: list[str], output: Path) -> None:
        await self.transcoder.run(stage, args)
        if not output.exists():
            raise TranscodeError(stage.value, 0, f"no output written to {output.name}")

    async def _handle_error(self, error_message: str) -> None:
        failed_stage = self.stage
        await self._persist(lambda r: r.set_error(self.export_id, error_message))
        await self.reporter.send_error(error_message, failed_stage)

    async def _persist(self, action: Callable[[ExportRecorder], Awaitable[object]]) -> None:
        """Persist state through the recorder; failures only log."""
        if self.recorder is None:
            return
        try:
            await action(self.recorder)
        except Exception as e:
            logger.warning("[export=%s] Failed to persist export state: %s", self.export_id, e)

    def _cleanup(self) -> None:
        if not self.scratch_dir.exists():
            return
        logger.info("[export=%s] Cleaning up scratch directory: %s", self.export_id, self.scratch_dir)
        try:
            shutil.rmtree(self.scratch_dir)
        except OSError as e:
            logger.warning("[export=%s] Failed to remove scratch directory %s: %s", self.export_id, self.scratch_dir, e)


async def run_mock_export(
    export_id: str,
    request: ExportRequest,
    reporter: ProgressReporter,
    recorder: ExportRecorder | None = None,
) -> ExportResult:
    """Complete an export without a transcoder.

    Emits the usual milestones and returns the first clip's video URL,
    flagged ``is_mock``.
    """
    logger.warning("[export=%s] No transcoder available, completing as mock export", export_id)
    for stage in (ExportStage.DOWNLOADING, ExportStage.PROCESSING, ExportStage.CONCATENATING, ExportStage.UPLOADING):
        await reporter.send_progress(stage, STAGE_PERCENT[stage], "Mock export")

    url = request.clips[0].video_url
    result = ExportResult(export_id=export_id, url=url, is_mock=True)
    if recorder is not None:
        try:
            await recorder.set_completed(export_id, url, True)
        except Exception as e:
            logger.warning("[export=%s] Failed to persist mock export: %s", export_id, e)
    await reporter.send_complete(url, is_mock=True)
    return result
