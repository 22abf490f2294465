"""Providers for editing sessions."""

from functools import cache

from reelcut.editor.otio_export import TimelineOtioExporter
from reelcut.editor.session import SessionRegistry


@cache
def session_registry() -> SessionRegistry:
    """Provide the process-wide session registry."""
    return SessionRegistry()


@cache
def otio_exporter() -> TimelineOtioExporter:
    """Provide a cached TimelineOtioExporter."""
    return TimelineOtioExporter()
