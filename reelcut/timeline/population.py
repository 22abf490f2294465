"""Build the initial timeline of a project from its script lines."""

from uuid import uuid4

from pydantic import Field

from reelcut.common.base_reelcut_model import BaseReelcutModel
from reelcut.timeline.schemas import (
    Clip,
    ClipKind,
    ProjectData,
    Subtitle,
    SubtitleStyle,
    Track,
    TrackKind,
)

DEFAULT_LINE_DURATION = 5.0


class ScriptLineMedia(BaseReelcutModel):
    """Media produced for one script line by the generation services.

    ``duration`` is the narration length; it drives the default length of
    the line's clip.
    """

    line_id: str
    text: str = ""
    video_url: str | None = None
    audio_url: str | None = None
    duration: float | None = Field(default=None, gt=0)


def build_project_data(
    lines: list[ScriptLineMedia],
    default_duration: float = DEFAULT_LINE_DURATION,
    subtitle_style: SubtitleStyle | None = None,
) -> ProjectData:
    """Lay script lines end to end on a video track and a narration track.

    Args:
        lines: Script lines in playback order.
        default_duration: Length used for lines without narration.
        subtitle_style: Style applied to the generated subtitles.

    Returns:
        ProjectData with one video clip per line, one narration clip per
        line that has audio, and one subtitle per line with text.
    """
    style = subtitle_style or SubtitleStyle()
    video_clips: list[Clip] = []
    audio_clips: list[Clip] = []
    subtitles: list[Subtitle] = []

    cursor = 0.0
    for line in lines:
        duration = line.duration or default_duration
        video_clips.append(
            Clip(
                id=str(uuid4()),
                source_id=line.line_id,
                source_url=line.video_url,
                start_time=cursor,
                duration=duration,
                kind=ClipKind.VIDEO,
            )
        )
        if line.audio_url:
            audio_clips.append(
                Clip(
                    id=str(uuid4()),
                    source_id=line.line_id,
                    source_url=line.audio_url,
                    start_time=cursor,
                    duration=duration,
                    kind=ClipKind.AUDIO,
                )
            )
        if line.text.strip():
            subtitles.append(
                Subtitle(
                    id=str(uuid4()),
                    text=line.text.strip(),
                    start_time=cursor,
                    end_time=cursor + duration,
                    style=style,
                )
            )
        cursor += duration

    tracks = (
        Track(id="video-track-1", name="Video 1", kind=TrackKind.VIDEO, clips=tuple(video_clips)),
        Track(id="audio-track-1", name="Audio 1", kind=TrackKind.AUDIO, clips=tuple(audio_clips)),
    )
    return ProjectData(tracks=tracks, subtitles=tuple(subtitles))
