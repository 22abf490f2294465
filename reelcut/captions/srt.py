"""SRT rendering of word timings."""

from collections.abc import Iterable

from reelcut.captions.word_timing import SubtitleWord


def format_srt_time(seconds: float) -> str:
    """Format seconds as ``HH:MM:SS,mmm``."""
    total_ms = max(int(round(seconds * 1000)), 0)
    hours, remainder = divmod(total_ms, 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    secs, ms = divmod(remainder, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{ms:03d}"


def render_srt(words: Iterable[SubtitleWord]) -> str:
    """Render one SRT cue per word."""
    cues = [
        f"{index}\n{format_srt_time(w.start_time)} --> {format_srt_time(w.end_time)}\n{w.word}\n"
        for index, w in enumerate(words, start=1)
    ]
    return "\n".join(cues)
