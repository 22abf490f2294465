"""Asyncio playback clock for a live editing session."""

import asyncio
import logging
import time
from collections.abc import Callable

from reelcut.editor.schemas import SetPlayhead, SetPlaying
from reelcut.editor.session import EditorSession
from reelcut.playback.schemas import PreviewFrame
from reelcut.playback.synchronizer import PlaybackSynchronizer
from reelcut.timeline.schemas import EditorState

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 0.05


def advance(state: EditorState, elapsed: float) -> EditorState:
    """Move the playhead forward by ``elapsed`` seconds while playing.

    Reaching the end stops playback and rewinds to 0.
    """
    if not state.is_playing or elapsed <= 0:
        return state
    playhead = state.playhead + elapsed
    if playhead >= state.duration:
        return state.model_copy(update={"playhead": 0.0, "is_playing": False})
    return state.model_copy(update={"playhead": playhead})


class PlaybackLoop:
    """Advances a session's virtual playhead and syncs media every tick."""

    def __init__(
        self,
        session: EditorSession,
        synchronizer: PlaybackSynchronizer,
        interval: float = DEFAULT_TICK_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session = session
        self.synchronizer = synchronizer
        self.interval = interval
        self._clock = clock
        self._last_tick: float | None = None
        self._task: asyncio.Task[None] | None = None
        self.last_frame: PreviewFrame | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self) -> PreviewFrame:
        """Run one frame: advance the clock, then sync media handles."""
        now = self._clock()
        elapsed = 0.0 if self._last_tick is None else now - self._last_tick
        self._last_tick = now

        state = self.session.state
        advanced = advance(state, elapsed)
        if advanced.is_playing != state.is_playing:
            logger.info("[session=%s] playback reached the end, rewinding", self.session.id)
            self.session.dispatch(SetPlaying(is_playing=False))
        if advanced.playhead != state.playhead:
            self.session.dispatch(SetPlayhead(time=advanced.playhead))

        self.last_frame = self.synchronizer.tick(self.session.state)
        return self.last_frame

    async def run(self) -> None:
        """Tick until cancelled."""
        self._last_tick = None
        try:
            while True:
                self.tick()
                await asyncio.sleep(self.interval)
        finally:
            self.synchronizer.pause_all()

    def start(self) -> asyncio.Task[None]:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
