"""Project an editor timeline into an export request."""

import logging
from collections.abc import Iterable, Mapping

from reelcut.captions.word_timing import SubtitleWord, word_timings
from reelcut.export_builder.errors import NoExportableContentError
from reelcut.export_builder.schemas import DEFAULT_AUDIO_MIX, ClipTrim, ExportClip, ExportRequest, SubtitleOptions
from reelcut.timeline.population import ScriptLineMedia
from reelcut.timeline.schemas import Clip, EditorState, Subtitle, Track, TrackKind

logger = logging.getLogger(__name__)


def _source_track(state: EditorState) -> Track | None:
    for track in state.tracks:
        if track.visible and track.kind == TrackKind.VIDEO:
            return track
    return None


def _narration_clips(state: EditorState) -> dict[str, Clip]:
    """Map source id to the first narration clip with a URL on an unmuted audio track."""
    narration: dict[str, Clip] = {}
    for track in state.tracks:
        if track.kind != TrackKind.AUDIO or track.muted:
            continue
        for clip in track.clips:
            if clip.source_url:
                narration.setdefault(clip.source_id, clip)
    return narration


def _narration_source(
    clip: Clip,
    trim_start: float,
    narration: Clip | None,
    line: ScriptLineMedia | None,
) -> tuple[str | None, float]:
    """Return the narration URL for a video clip and the offset to read it from.

    Timeline narration is read from where the video clip sits under it, so
    the second half of a split picks up where the first half stopped. Line
    narration runs in step with the line's video from its start.
    """
    if narration is not None:
        offset = clip.start_time - narration.start_time + narration.trim_start + (trim_start - clip.trim_start)
        return narration.source_url, max(0.0, offset)
    if line is not None and line.audio_url:
        return line.audio_url, trim_start
    return None, 0.0


def build_export_clips(
    state: EditorState,
    lines: Iterable[ScriptLineMedia] = (),
    trims: Mapping[str, ClipTrim] | None = None,
) -> list[ExportClip]:
    """Lay the source track's clips end to end as export segments.

    Clips without a video URL, on the clip or its script line, are skipped.
    """
    track = _source_track(state)
    if track is None:
        return []

    lines_by_id = {line.line_id: line for line in lines}
    narration = _narration_clips(state)
    trims = trims or {}

    clips: list[ExportClip] = []
    cursor = 0.0
    for clip in track.clips:
        line = lines_by_id.get(clip.source_id)
        video_url = clip.source_url or (line.video_url if line else None)
        if not video_url:
            logger.debug("Skipping clip %s: no video source", clip.id)
            continue

        trim = trims.get(clip.id)
        trim_start = trim.trim_start if trim else clip.trim_start
        audio_url, audio_offset = _narration_source(clip, trim_start, narration.get(clip.source_id), line)
        export_clip = ExportClip(
            line_id=clip.source_id,
            video_url=video_url,
            audio_url=audio_url,
            start_time=cursor,
            duration=clip.source_duration,
            trim_start=trim_start,
            trim_end=trim.trim_end if trim else clip.trim_end,
            audio_offset=audio_offset,
        )
        clips.append(export_clip)
        cursor += export_clip.effective_duration
    return clips


def build_subtitle_words(
    clips: list[ExportClip],
    lines: Iterable[ScriptLineMedia] = (),
    subtitles: Iterable[Subtitle] = (),
) -> list[SubtitleWord]:
    """Derive word timings for the exported output.

    Each clip's line text is spread over the clip's effective length. When
    no line has text, the timeline's own subtitle items are used instead.
    """
    texts = {line.line_id: line.text for line in lines if line.text.strip()}
    words: list[SubtitleWord] = []
    if texts:
        for clip in clips:
            text = texts.get(clip.line_id)
            if text:
                words.extend(word_timings(text, clip.effective_duration, clip.start_time))
        return words

    for subtitle in subtitles:
        words.extend(word_timings(subtitle.text, subtitle.end_time - subtitle.start_time, subtitle.start_time))
    return words


def build_export_request(
    state: EditorState,
    lines: Iterable[ScriptLineMedia] = (),
    trims: Mapping[str, ClipTrim] | None = None,
    subtitles: SubtitleOptions | None = None,
    audio_mix: float = DEFAULT_AUDIO_MIX,
) -> ExportRequest:
    """Build an export request from the current timeline.

    Args:
        state: Editor state to read; it is not modified.
        lines: Script line media used to fill in missing URLs and text.
        trims: Per-clip trim overrides keyed by clip id.
        subtitles: Subtitle options; provided words are passed through.
        audio_mix: Narration share of the mixed audio, 0 to 1.

    Returns:
        The export request.

    Raises:
        NoExportableContentError: If no clip has a video source.
    """
    lines = list(lines)
    clips = build_export_clips(state, lines, trims)
    if not clips:
        raise NoExportableContentError()

    options = subtitles or SubtitleOptions()
    if options.enabled and options.words is None:
        words = build_subtitle_words(clips, lines, state.subtitles)
        options = options.model_copy(update={"words": tuple(words)})

    return ExportRequest(clips=tuple(clips), subtitles=options, audio_mix=audio_mix)
