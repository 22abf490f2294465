"""Providers for the export pipeline."""

from functools import cache

from reelcut.mongodb.config import mongodb_configured
from reelcut.mongodb.gridfs_service import get_gridfs_service
from reelcut.mongodb.repositories import ExportRepository
from reelcut.pipeline.artifact_store import GridFSArtifactStore
from reelcut.pipeline.config import get_transcode_config
from reelcut.pipeline.event_bus import ExportEventBus
from reelcut.pipeline.service import ExportService
from reelcut.pipeline.transcoder import FFmpegTranscoder


@cache
def export_event_bus() -> ExportEventBus:
    """Provide the process-wide export event bus."""
    return ExportEventBus()


@cache
def export_service() -> ExportService:
    """Provide a cached ExportService wired from environment configuration.

    Export records are persisted only when MongoDB is configured.
    """
    config = get_transcode_config()
    return ExportService(
        config=config,
        transcoder=FFmpegTranscoder(config),
        artifact_store=GridFSArtifactStore(get_gridfs_service(), config.public_base_url),
        bus=export_event_bus(),
        repository=ExportRepository.create() if mongodb_configured() else None,
    )
