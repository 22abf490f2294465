"""Export pipeline exceptions."""


class ExportError(Exception):
    """Base class for every export failure."""


class ExportPreconditionError(ExportError):
    """The export cannot start; raised before any stage runs."""


class TranscoderUnavailableError(ExportPreconditionError):
    """No transcoder is installed and mock exports are not allowed."""


class ExportAlreadyRunningError(ExportPreconditionError):
    """An export with the same id is already in flight."""

    def __init__(self, export_id: str) -> None:
        self.export_id = export_id
        super().__init__(f"Export already running: {export_id}")


class DownloadError(ExportError):
    """A source asset could not be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to download {url}: {reason}")


class TranscodeError(ExportError):
    """The transcoder exited unsuccessfully."""

    def __init__(self, stage: str, returncode: int | None, stderr_tail: str = "") -> None:
        self.stage = stage
        self.returncode = returncode
        self.stderr_tail = stderr_tail
        detail = f": {stderr_tail}" if stderr_tail else ""
        super().__init__(f"Transcoder failed during {stage} (exit code {returncode}){detail}")


class UploadError(ExportError):
    """The final artifact could not be persisted."""


class StageFailedError(ExportError):
    """Wraps the cause of any stage failure with the stage it happened in."""

    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        self.message = message
        super().__init__(f"{stage} failed: {message}")
