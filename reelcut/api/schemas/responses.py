"""API response schemas."""

from reelcut.common.base_reelcut_model import BaseReelcutModel
from reelcut.timeline.schemas import EditorState


class SessionResponse(BaseReelcutModel):
    """Response containing a session's full editor state."""

    session_id: str
    state: EditorState
    can_undo: bool = False
    can_redo: bool = False


class CancelExportResponse(BaseReelcutModel):
    export_id: str
    cancelled: bool
