"""Export request builder exceptions."""

from reelcut.pipeline.errors import ExportPreconditionError


class NoExportableContentError(ExportPreconditionError):
    """The timeline has no clip with a resolvable video source."""

    def __init__(self, message: str = "No clips with video available for export") -> None:
        super().__init__(message)
