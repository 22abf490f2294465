"""Convert an editor timeline to OpenTimelineIO for NLE interchange."""

import opentimelineio as otio

from reelcut.timeline.schemas import Clip, EditorState, Subtitle, Track, TrackKind

DEFAULT_FRAME_RATE = 30.0


class TimelineOtioExporter:
    """Builds OTIO timelines from editor state."""

    def __init__(self, frame_rate: float = DEFAULT_FRAME_RATE) -> None:
        self.frame_rate = frame_rate

    def to_json(self, state: EditorState, name: str = "Reelcut Edit") -> str:
        """Serialize the timeline as an ``.otio`` JSON document."""
        timeline = self.create_timeline(state, name)
        return otio.adapters.write_to_string(timeline, "otio_json")

    def create_timeline(self, state: EditorState, name: str = "Reelcut Edit") -> otio.schema.Timeline:
        """Create an OTIO timeline with one OTIO track per media track.

        Subtitles become markers on the timeline stack.
        """
        timeline = otio.schema.Timeline(name=name)
        timeline.global_start_time = otio.opentime.RationalTime(0, self.frame_rate)

        for track in state.tracks:
            if track.kind == TrackKind.SUBTITLE:
                continue
            timeline.tracks.append(self._create_track(track))

        for subtitle in state.subtitles:
            timeline.tracks.markers.append(self._create_marker(subtitle))

        return timeline

    def _create_track(self, track: Track) -> otio.schema.Track:
        kind = otio.schema.TrackKind.Video if track.kind == TrackKind.VIDEO else otio.schema.TrackKind.Audio
        otio_track = otio.schema.Track(name=track.name, kind=kind)
        otio_track.enabled = track.visible
        otio_track.metadata["reelcut"] = {
            "track_id": track.id,
            "muted": track.muted,
            "volume": track.volume,
            "locked": track.locked,
        }

        # OTIO tracks are strictly sequential: overlapping heads are cut off
        current_time = 0.0
        for clip in track.clips:
            start = max(clip.start_time, current_time)
            if start >= clip.end_time:
                continue
            if start > current_time:
                otio_track.append(self._create_gap(start - current_time))
            otio_track.append(self._create_clip(clip, head_cut=start - clip.start_time))
            current_time = clip.end_time

        return otio_track

    def _create_clip(self, clip: Clip, head_cut: float = 0.0) -> otio.schema.Clip:
        media_ref = otio.schema.ExternalReference(target_url=clip.source_url or "")
        source_range = otio.opentime.TimeRange(
            start_time=self._time(clip.trim_start + head_cut),
            duration=self._time(clip.duration - head_cut),
        )
        otio_clip = otio.schema.Clip(
            name=clip.source_id,
            media_reference=media_ref,
            source_range=source_range,
        )
        otio_clip.metadata["reelcut"] = {
            "clip_id": clip.id,
            "source_id": clip.source_id,
            "source_duration": clip.source_duration,
        }
        return otio_clip

    def _create_marker(self, subtitle: Subtitle) -> otio.schema.Marker:
        return otio.schema.Marker(
            name=subtitle.text,
            marked_range=otio.opentime.TimeRange(
                start_time=self._time(subtitle.start_time),
                duration=self._time(subtitle.end_time - subtitle.start_time),
            ),
            metadata={"reelcut": {"subtitle_id": subtitle.id, "style": subtitle.style.model_dump()}},
        )

    def _create_gap(self, duration_seconds: float) -> otio.schema.Gap:
        return otio.schema.Gap(
            source_range=otio.opentime.TimeRange(
                start_time=otio.opentime.RationalTime(0, self.frame_rate),
                duration=self._time(duration_seconds),
            ),
        )

    def _time(self, seconds: float) -> otio.opentime.RationalTime:
        return otio.opentime.RationalTime(seconds * self.frame_rate, self.frame_rate)
