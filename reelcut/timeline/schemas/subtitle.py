"""Subtitle schema."""

from typing import Literal

from pydantic import Field, model_validator

from reelcut.common.base_reelcut_model import BaseReelcutModel


class SubtitleStyle(BaseReelcutModel):
    """Rendering style for a subtitle."""

    color_token: str = "#ffffff"
    font_size: int = Field(default=24, gt=0)
    background_color_token: str = "transparent"
    preset: str = "classic"
    position: Literal["top", "center", "bottom"] = "bottom"


class Subtitle(BaseReelcutModel):
    """Timeline-absolute caption text, not attached to any clip."""

    id: str
    text: str
    start_time: float = Field(ge=0)
    end_time: float
    style: SubtitleStyle = SubtitleStyle()

    @model_validator(mode="after")
    def _check_span(self) -> "Subtitle":
        if self.end_time <= self.start_time:
            msg = f"Subtitle end_time ({self.end_time}) must be after start_time ({self.start_time})"
            raise ValueError(msg)
        return self

    def contains(self, time: float) -> bool:
        """Return True if ``time`` falls in ``[start_time, end_time)``."""
        return self.start_time <= time < self.end_time


class SubtitleDraft(BaseReelcutModel):
    """A subtitle before it has been assigned an id."""

    text: str
    start_time: float = Field(ge=0)
    end_time: float
    style: SubtitleStyle = SubtitleStyle()
