"""Typed edit actions.

Every action carries a ``type`` discriminator so a JSON payload can be
parsed straight into the matching model with ``parse_action``.
``records_history`` marks content changes that push an undo snapshot.
"""

from typing import Annotated, ClassVar, Literal

from pydantic import Field, TypeAdapter

from reelcut.common.base_reelcut_model import BaseReelcutModel
from reelcut.timeline.schemas import ClipDraft, ProjectData, SubtitleDraft, SubtitleStyle, Track


class BaseAction(BaseReelcutModel):
    """Common base for edit actions."""

    records_history: ClassVar[bool] = False


# Content actions


class AddClip(BaseAction):
    records_history: ClassVar[bool] = True
    type: Literal["add_clip"] = "add_clip"
    track_id: str
    clip: ClipDraft


class RemoveClip(BaseAction):
    records_history: ClassVar[bool] = True
    type: Literal["remove_clip"] = "remove_clip"
    clip_id: str


class MoveClip(BaseAction):
    """Reposition a clip, optionally onto another track of the same kind."""

    records_history: ClassVar[bool] = True
    type: Literal["move_clip"] = "move_clip"
    clip_id: str
    new_start_time: float
    new_track_id: str | None = None


class TrimClip(BaseAction):
    """Set absolute trim offsets measured from the source media edges."""

    records_history: ClassVar[bool] = True
    type: Literal["trim_clip"] = "trim_clip"
    clip_id: str
    trim_start: float
    trim_end: float


class SplitClip(BaseAction):
    records_history: ClassVar[bool] = True
    type: Literal["split_clip"] = "split_clip"
    clip_id: str
    split_point: float


class PasteClip(BaseAction):
    records_history: ClassVar[bool] = True
    type: Literal["paste_clip"] = "paste_clip"
    track_id: str
    start_time: float = Field(ge=0)


class AddTrack(BaseAction):
    records_history: ClassVar[bool] = True
    type: Literal["add_track"] = "add_track"
    track: Track


class RemoveTrack(BaseAction):
    records_history: ClassVar[bool] = True
    type: Literal["remove_track"] = "remove_track"
    track_id: str


class AddSubtitle(BaseAction):
    records_history: ClassVar[bool] = True
    type: Literal["add_subtitle"] = "add_subtitle"
    subtitle: SubtitleDraft


class SubtitleChanges(BaseReelcutModel):
    """Partial subtitle update; unset fields keep their value."""

    text: str | None = None
    start_time: float | None = None
    end_time: float | None = None
    style: SubtitleStyle | None = None


class UpdateSubtitle(BaseAction):
    records_history: ClassVar[bool] = True
    type: Literal["update_subtitle"] = "update_subtitle"
    subtitle_id: str
    changes: SubtitleChanges


class RemoveSubtitle(BaseAction):
    records_history: ClassVar[bool] = True
    type: Literal["remove_subtitle"] = "remove_subtitle"
    subtitle_id: str


# View-state actions


class CopyClip(BaseAction):
    type: Literal["copy_clip"] = "copy_clip"
    clip_id: str


class ToggleTrackLock(BaseAction):
    type: Literal["toggle_track_lock"] = "toggle_track_lock"
    track_id: str


class ToggleTrackVisibility(BaseAction):
    type: Literal["toggle_track_visibility"] = "toggle_track_visibility"
    track_id: str


class ToggleTrackMute(BaseAction):
    type: Literal["toggle_track_mute"] = "toggle_track_mute"
    track_id: str


class SetTrackVolume(BaseAction):
    type: Literal["set_track_volume"] = "set_track_volume"
    track_id: str
    volume: float


class SelectClip(BaseAction):
    type: Literal["select_clip"] = "select_clip"
    clip_id: str | None = None


class SelectSubtitle(BaseAction):
    type: Literal["select_subtitle"] = "select_subtitle"
    subtitle_id: str | None = None


class SetPlayhead(BaseAction):
    type: Literal["set_playhead"] = "set_playhead"
    time: float


class SetPlaying(BaseAction):
    type: Literal["set_playing"] = "set_playing"
    is_playing: bool


class SetZoom(BaseAction):
    type: Literal["set_zoom"] = "set_zoom"
    zoom: float


# Session-level actions, handled by the history engine


class LoadProjectData(BaseAction):
    type: Literal["load_project_data"] = "load_project_data"
    data: ProjectData


class Undo(BaseAction):
    type: Literal["undo"] = "undo"


class Redo(BaseAction):
    type: Literal["redo"] = "redo"


class Reset(BaseAction):
    type: Literal["reset"] = "reset"


EditAction = Annotated[
    AddClip
    | RemoveClip
    | MoveClip
    | TrimClip
    | SplitClip
    | PasteClip
    | AddTrack
    | RemoveTrack
    | AddSubtitle
    | UpdateSubtitle
    | RemoveSubtitle
    | CopyClip
    | ToggleTrackLock
    | ToggleTrackVisibility
    | ToggleTrackMute
    | SetTrackVolume
    | SelectClip
    | SelectSubtitle
    | SetPlayhead
    | SetPlaying
    | SetZoom
    | LoadProjectData
    | Undo
    | Redo
    | Reset,
    Field(discriminator="type"),
]

_action_adapter: TypeAdapter[EditAction] = TypeAdapter(EditAction)


def parse_action(payload: dict) -> EditAction:
    """Validate a JSON-like payload into the action its ``type`` names."""
    return _action_adapter.validate_python(payload)
