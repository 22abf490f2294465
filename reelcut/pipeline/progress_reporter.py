"""Stage progress reporting for one export run."""

import logging

from reelcut.pipeline.event_bus import ExportEventBus
from reelcut.pipeline.schemas import EventTopic, ExportEvent, ExportStage

logger = logging.getLogger(__name__)


class ProgressReporter:
    """Publishes progress for one export and keeps percent non-decreasing."""

    def __init__(self, export_id: str, bus: ExportEventBus) -> None:
        """Initialize the progress reporter.

        Args:
            export_id: The export ID.
            bus: Event bus to publish on.
        """
        self.export_id = export_id
        self.bus = bus
        self.stage = ExportStage.DOWNLOADING
        self.percent = 0.0
        self.message = ""

    async def send_progress(self, stage: ExportStage, percent: float, message: str = "") -> None:
        """Publish a progress event.

        Args:
            stage: Current export stage.
            percent: Overall progress (0-100); never moves backwards.
            message: Optional status message.
        """
        self.stage = stage
        self.percent = max(self.percent, min(percent, 100.0))
        self.message = message

        logger.info(
            "[export=%s] PROGRESS: stage=%s, percent=%.1f%%, message=%s",
            self.export_id,
            stage.value,
            self.percent,
            message or "-",
        )
        self.bus.publish(
            ExportEvent(
                export_id=self.export_id,
                topic=EventTopic.PROGRESS,
                stage=stage,
                percent=self.percent,
                message=message,
            )
        )

    async def send_complete(self, url: str, is_mock: bool = False) -> None:
        """Publish the completion event carrying the final URL."""
        self.stage = ExportStage.COMPLETED
        self.percent = 100.0
        self.message = "Export complete"
        logger.info("[export=%s] COMPLETED: url=%s, mock=%s", self.export_id, url, is_mock)
        self.bus.publish(
            ExportEvent(
                export_id=self.export_id,
                topic=EventTopic.COMPLETED,
                stage=ExportStage.COMPLETED,
                percent=100.0,
                message=self.message,
                url=url,
                is_mock=is_mock,
            )
        )

    async def send_error(self, error_message: str, failed_stage: ExportStage | None = None) -> None:
        """Publish the failure event.

        Args:
            error_message: Human readable cause.
            failed_stage: Stage that failed; defaults to the current one.
        """
        failed_stage = failed_stage or self.stage
        self.message = error_message
        logger.info("[export=%s] FAILED during %s: %s", self.export_id, failed_stage.value, error_message)
        self.bus.publish(
            ExportEvent(
                export_id=self.export_id,
                topic=EventTopic.FAILED,
                stage=ExportStage.FAILED,
                percent=self.percent,
                message=f"{failed_stage.value} failed",
                error=error_message,
            )
        )
        self.stage = ExportStage.FAILED
