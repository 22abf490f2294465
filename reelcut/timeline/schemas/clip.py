"""Clip schema."""

from enum import StrEnum, auto
from typing import Any

from pydantic import Field, model_validator

from reelcut.common.base_reelcut_model import BaseReelcutModel

# Shortest clip a trim is allowed to leave behind.
MIN_CLIP_DURATION = 0.1


class ClipKind(StrEnum):
    """Kind of media a clip references."""

    VIDEO = auto()
    AUDIO = auto()


class ClipDraft(BaseReelcutModel):
    """A clip that has not been placed on a track yet (no id)."""

    source_id: str
    source_url: str | None = None
    start_time: float = Field(default=0.0, ge=0)
    duration: float = Field(gt=0)
    trim_start: float = Field(default=0.0, ge=0)
    trim_end: float = Field(default=0.0, ge=0)
    kind: ClipKind = ClipKind.VIDEO

    # Full, un-trimmed length of the source media
    source_duration: float | None = Field(default=None, gt=0)


class Clip(BaseReelcutModel):
    """A time-bounded reference to a source media asset placed on a track.

    ``duration`` is always ``source_duration - trim_start - trim_end``.
    Callers that do not know the source length may omit
    ``source_duration``; it is then derived from the other three fields.
    """

    id: str
    source_id: str
    source_url: str | None = None
    start_time: float = Field(default=0.0, ge=0)
    duration: float = Field(gt=0)
    trim_start: float = Field(default=0.0, ge=0)
    trim_end: float = Field(default=0.0, ge=0)
    kind: ClipKind = ClipKind.VIDEO
    source_duration: float = Field(gt=0)

    @model_validator(mode="before")
    @classmethod
    def _derive_source_duration(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("source_duration") is None:
            data = dict(data)
            data["source_duration"] = (
                float(data.get("duration", 0.0))
                + float(data.get("trim_start", 0.0))
                + float(data.get("trim_end", 0.0))
            )
        return data

    @property
    def end_time(self) -> float:
        """Timeline position where the clip stops playing."""
        return self.start_time + self.duration

    def contains(self, time: float) -> bool:
        """Return True if ``time`` falls in ``[start_time, end_time)``."""
        return self.start_time <= time < self.end_time

    def with_trims(self, trim_start: float, trim_end: float) -> "Clip":
        """Return a copy with new absolute trim offsets.

        Offsets are clamped so the clip keeps at least MIN_CLIP_DURATION.
        """
        available = max(self.source_duration - MIN_CLIP_DURATION, 0.0)
        trim_start = min(max(trim_start, 0.0), available)
        trim_end = min(max(trim_end, 0.0), available - trim_start)
        return self.model_copy(
            update={
                "trim_start": trim_start,
                "trim_end": trim_end,
                "duration": self.source_duration - trim_start - trim_end,
            }
        )

    @classmethod
    def from_draft(cls, clip_id: str, draft: ClipDraft) -> "Clip":
        """Place a draft on the timeline under the given id."""
        return cls.model_validate({"id": clip_id, **draft.model_dump()})
