"""Character-weighted word timing for karaoke captions and burned subtitles.

Each word gets a slice of the speech duration proportional to
``len(word) + 2`` so long words hold the screen longer than short ones.
"""

from reelcut.common.base_reelcut_model import BaseReelcutModel

WORD_BASE_WEIGHT = 2


class SubtitleWord(BaseReelcutModel):
    """A single word with its absolute start and end time."""

    word: str
    start_time: float
    end_time: float


def split_words(text: str) -> list[str]:
    """Split caption text on whitespace, dropping empty pieces."""
    return text.split()


def word_weight(word: str) -> int:
    """Return the timing weight of a word."""
    return len(word) + WORD_BASE_WEIGHT


def word_timings(text: str, duration: float, offset: float = 0.0) -> list[SubtitleWord]:
    """Slice ``duration`` across the words of ``text``.

    Args:
        text: Spoken text of one clip.
        duration: Speech duration to distribute.
        offset: Absolute time of the first word.

    Returns:
        Contiguous word timings starting at ``offset``.
    """
    words = split_words(text)
    if not words or duration <= 0:
        return []

    total_weight = sum(word_weight(w) for w in words)
    timings: list[SubtitleWord] = []
    current = offset
    for word in words:
        word_duration = (word_weight(word) / total_weight) * duration
        timings.append(SubtitleWord(word=word, start_time=current, end_time=current + word_duration))
        current += word_duration
    return timings


def active_word(text: str, duration: float, time: float) -> str:
    """Return the word being spoken at ``time`` seconds into the clip.

    Past the end the last word stays active; empty text yields ``""``.
    """
    words = split_words(text)
    if not words:
        return ""

    total_weight = sum(word_weight(w) for w in words)
    accumulated = 0.0
    for word in words:
        word_duration = (word_weight(word) / total_weight) * duration
        if time < accumulated + word_duration:
            return word
        accumulated += word_duration
    return words[-1]
