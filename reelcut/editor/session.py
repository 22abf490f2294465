"""Editing sessions: one explicit owner per ``EditorState``."""

import asyncio
import logging
from collections.abc import Iterable
from uuid import uuid4

from reelcut.editor import history
from reelcut.editor.schemas import BaseAction
from reelcut.timeline.population import ScriptLineMedia
from reelcut.timeline.schemas import EditorState, ProjectData, Subtitle, Track

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """Raised when a session id is not registered."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class EditorSession:
    """Owns the state and undo history of one editing session.

    Calls are synchronous and must be serialized by the caller; the HTTP
    layer holds ``lock`` around every mutation.
    """

    def __init__(
        self,
        session_id: str | None = None,
        state: EditorState | None = None,
        lines: Iterable[ScriptLineMedia] = (),
    ) -> None:
        self.id = session_id or str(uuid4())
        self.state = state or EditorState()
        # Script line media the timeline was built from, used for export
        self.lines: tuple[ScriptLineMedia, ...] = tuple(lines)
        self.lock = asyncio.Lock()

    def dispatch(self, action: BaseAction) -> EditorState:
        """Apply an edit action and return the new state."""
        self.state = history.apply(self.state, action)
        logger.debug("[session=%s] applied %s", self.id, type(action).__name__)
        return self.state

    def undo(self) -> EditorState:
        self.state = history.undo(self.state)
        return self.state

    def redo(self) -> EditorState:
        self.state = history.redo(self.state)
        return self.state

    @property
    def can_undo(self) -> bool:
        return history.can_undo(self.state)

    @property
    def can_redo(self) -> bool:
        return history.can_redo(self.state)

    def load_project_data(self, tracks: Iterable[Track], subtitles: Iterable[Subtitle]) -> EditorState:
        """Replace the timeline content and clear the undo history."""
        data = ProjectData(tracks=tuple(tracks), subtitles=tuple(subtitles))
        self.state = history.load_project_data(self.state, data)
        logger.info(
            "[session=%s] loaded project data: %d tracks, %d subtitles",
            self.id,
            len(self.state.tracks),
            len(self.state.subtitles),
        )
        return self.state

    def reset(self) -> EditorState:
        self.state = history.reset()
        return self.state


class SessionRegistry:
    """In-memory registry of open editing sessions."""

    def __init__(self) -> None:
        self._sessions: dict[str, EditorSession] = {}

    def create(self, data: ProjectData | None = None, lines: Iterable[ScriptLineMedia] = ()) -> EditorSession:
        session = EditorSession(lines=lines)
        if data is not None:
            session.load_project_data(data.tracks, data.subtitles)
        self._sessions[session.id] = session
        logger.info("[session=%s] opened", session.id)
        return session

    def get(self, session_id: str) -> EditorSession:
        """Return a session.

        Raises:
            SessionNotFoundError: If no session has that id.
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def close(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            logger.info("[session=%s] closed", session_id)

    def __len__(self) -> int:
        return len(self._sessions)
