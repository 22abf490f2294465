"""Track schema."""

from enum import StrEnum, auto

from pydantic import Field

from reelcut.common.base_reelcut_model import BaseReelcutModel
from reelcut.timeline.schemas.clip import Clip


class TrackKind(StrEnum):
    """Kind of lane on the timeline."""

    VIDEO = auto()
    AUDIO = auto()
    SUBTITLE = auto()


class Track(BaseReelcutModel):
    """An ordered lane of same-kind clips.

    Clips are kept sorted by ``start_time``; they may overlap.
    """

    id: str
    name: str
    kind: TrackKind
    clips: tuple[Clip, ...] = ()
    muted: bool = False
    volume: float = Field(default=1.0, ge=0)
    locked: bool = False
    visible: bool = True
