"""Export service: accepts requests and tracks running exports."""

import asyncio
import logging
from uuid import uuid4

from reelcut.export_builder.errors import NoExportableContentError
from reelcut.export_builder.schemas import ExportRequest
from reelcut.mongodb.repositories import ExportRepository
from reelcut.pipeline.artifact_store import ArtifactStore
from reelcut.pipeline.config import TranscodeConfig
from reelcut.pipeline.downloader import Downloader
from reelcut.pipeline.errors import ExportAlreadyRunningError, StageFailedError, TranscoderUnavailableError
from reelcut.pipeline.event_bus import ExportEventBus
from reelcut.pipeline.export_runner import ExportRunner, run_mock_export
from reelcut.pipeline.progress_reporter import ProgressReporter
from reelcut.pipeline.schemas import (
    EventTopic,
    ExportAck,
    ExportEvent,
    ExportProgress,
    ExportResult,
    ExportStage,
    ExportStatus,
)
from reelcut.pipeline.transcoder import Transcoder

logger = logging.getLogger(__name__)


def _progress_from_event(event: ExportEvent) -> ExportProgress:
    status = {
        EventTopic.COMPLETED: ExportStatus.COMPLETED,
        EventTopic.FAILED: ExportStatus.FAILED,
    }.get(event.topic, ExportStatus.PROCESSING)
    return ExportProgress(
        export_id=event.export_id,
        status=status,
        stage=event.stage,
        percent=event.percent,
        message=event.message,
        url=event.url,
        is_mock=event.is_mock,
        error=event.error,
    )


class ExportService:
    """Starts export runs and answers status and cancel requests."""

    def __init__(
        self,
        config: TranscodeConfig,
        transcoder: Transcoder,
        artifact_store: ArtifactStore,
        bus: ExportEventBus,
        downloader: Downloader | None = None,
        repository: ExportRepository | None = None,
        max_results: int = 256,
    ) -> None:
        self.config = config
        self.transcoder = transcoder
        self.artifact_store = artifact_store
        self.bus = bus
        self.downloader = downloader or Downloader(config)
        self.repository = repository
        self._tasks: dict[str, asyncio.Task[ExportResult | None]] = {}
        self._results: dict[str, ExportResult] = {}
        self.max_results = max_results

    async def submit(self, request: ExportRequest, export_id: str | None = None) -> ExportAck:
        """Accept an export request.

        A real export starts in the background and is acknowledged as
        processing. Without a transcoder, development setups complete a mock
        export inline.

        Raises:
            NoExportableContentError: If the request has no clips.
            TranscoderUnavailableError: If there is no transcoder and mock
                exports are not allowed.
            ExportAlreadyRunningError: If ``export_id`` is already running.
        """
        if not request.clips:
            raise NoExportableContentError()

        export_id = export_id or str(uuid4())
        if self.is_running(export_id):
            raise ExportAlreadyRunningError(export_id)

        transcoder_available = self.transcoder.available()
        if not transcoder_available and not self.config.allow_mock_export:
            msg = "FFmpeg is not available on this server; video export is disabled"
            raise TranscoderUnavailableError(msg)

        await self._create_record(export_id, request)
        reporter = ProgressReporter(export_id, self.bus)

        if not transcoder_available:
            result = await run_mock_export(export_id, request, reporter, self.repository)
            self._keep_result(export_id, result)
            return ExportAck(export_id=export_id, url=result.url, status=ExportStatus.COMPLETED, is_mock=True)

        runner = ExportRunner(
            export_id=export_id,
            request=request,
            config=self.config,
            transcoder=self.transcoder,
            downloader=self.downloader,
            artifact_store=self.artifact_store,
            reporter=reporter,
            recorder=self.repository,
        )
        task = asyncio.create_task(self._run(runner), name=f"export-{export_id}")
        self._tasks[export_id] = task
        task.add_done_callback(lambda _: self._tasks.pop(export_id, None))
        logger.info("[export=%s] Export accepted", export_id)
        return ExportAck(export_id=export_id, status=ExportStatus.PROCESSING)

    def is_running(self, export_id: str) -> bool:
        task = self._tasks.get(export_id)
        return task is not None and not task.done()

    def _keep_result(self, export_id: str, result: ExportResult) -> None:
        """Store a finished result, dropping the oldest past ``max_results``."""
        self._results.pop(export_id, None)
        self._results[export_id] = result
        while len(self._results) > self.max_results:
            del self._results[next(iter(self._results))]

    def result(self, export_id: str) -> ExportResult | None:
        return self._results.get(export_id)

    async def status(self, export_id: str) -> ExportProgress | None:
        """Report the latest known state of an export, or None if unknown."""
        event = self.bus.latest(export_id)
        if event is not None:
            return _progress_from_event(event)
        if self.is_running(export_id):
            return ExportProgress(export_id=export_id, status=ExportStatus.PROCESSING, stage=ExportStage.DOWNLOADING)
        if self.repository is not None:
            doc = await self.repository.get_export(export_id)
            if doc is not None:
                return ExportProgress(
                    export_id=export_id,
                    status=doc.status,
                    stage=doc.stage,
                    percent=doc.progress_percent,
                    message=doc.message,
                    url=doc.url,
                    is_mock=doc.is_mock,
                    error=doc.error_message,
                )
        return None

    async def cancel(self, export_id: str) -> bool:
        """Cancel a running export and wait for its cleanup.

        Returns:
            True if a running export was cancelled.
        """
        task = self._tasks.get(export_id)
        if task is None or task.done():
            return False
        logger.info("[export=%s] Cancelling export", export_id)
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        return True

    async def wait(self, export_id: str) -> ExportResult | None:
        """Wait for a running export to finish and return its result."""
        task = self._tasks.get(export_id)
        if task is not None:
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
        return self._results.get(export_id)

    async def shutdown(self) -> None:
        """Cancel every running export."""
        for export_id in list(self._tasks):
            await self.cancel(export_id)

    async def _run(self, runner: ExportRunner) -> ExportResult | None:
        try:
            result = await runner.run()
        except StageFailedError as e:
            # Already logged and published by the runner
            logger.info("[export=%s] Export ended with failure: %s", runner.export_id, e)
            return None
        self._keep_result(runner.export_id, result)
        return result

    async def _create_record(self, export_id: str, request: ExportRequest) -> None:
        if self.repository is None:
            return
        try:
            await self.repository.create_export(
                export_id,
                clip_count=len(request.clips),
                subtitles_enabled=request.subtitles.enabled,
                audio_mix=request.audio_mix,
            )
        except Exception as e:
            logger.warning("[export=%s] Failed to create export record: %s", export_id, e)
