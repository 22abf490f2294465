"""Editor schemas."""

from reelcut.editor.schemas.actions import (
    AddClip,
    AddSubtitle,
    AddTrack,
    BaseAction,
    CopyClip,
    EditAction,
    LoadProjectData,
    MoveClip,
    PasteClip,
    Redo,
    RemoveClip,
    RemoveSubtitle,
    RemoveTrack,
    Reset,
    SelectClip,
    SelectSubtitle,
    SetPlayhead,
    SetPlaying,
    SetTrackVolume,
    SetZoom,
    SplitClip,
    SubtitleChanges,
    ToggleTrackLock,
    ToggleTrackMute,
    ToggleTrackVisibility,
    TrimClip,
    Undo,
    UpdateSubtitle,
    parse_action,
)

__all__ = [
    "AddClip",
    "AddSubtitle",
    "AddTrack",
    "BaseAction",
    "CopyClip",
    "EditAction",
    "LoadProjectData",
    "MoveClip",
    "PasteClip",
    "Redo",
    "RemoveClip",
    "RemoveSubtitle",
    "RemoveTrack",
    "Reset",
    "SelectClip",
    "SelectSubtitle",
    "SetPlayhead",
    "SetPlaying",
    "SetTrackVolume",
    "SetZoom",
    "SplitClip",
    "SubtitleChanges",
    "ToggleTrackLock",
    "ToggleTrackMute",
    "ToggleTrackVisibility",
    "TrimClip",
    "Undo",
    "UpdateSubtitle",
    "parse_action",
]
