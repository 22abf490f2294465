"""Argument builders for the ffmpeg invocations of an export.

The builders return argument lists without the executable; the transcoder
prepends the binary and global flags.
"""

from collections.abc import Iterable
from pathlib import Path

from reelcut.export_builder.schemas import ExportClip
from reelcut.pipeline.config import TranscodeConfig


def mix_gains(audio_mix: float) -> tuple[float, float]:
    """Return ``(native_gain, narration_gain)`` for a narration share ``audio_mix``."""
    narration = min(max(audio_mix, 0.0), 1.0)
    return 1.0 - narration, narration


def _fmt(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".") or "0"


def video_filter(config: TranscodeConfig) -> str:
    """Letterbox any source into the output frame."""
    w, h = config.width, config.height
    return (
        f"scale={w}:{h}:force_original_aspect_ratio=decrease,"
        f"pad={w}:{h}:(ow-iw)/2:(oh-ih)/2,setsar=1,fps={config.fps},format=yuv420p"
    )


def video_encode_args(config: TranscodeConfig) -> list[str]:
    return [
        "-c:v", "libx264",
        "-preset", config.preset,
        "-crf", str(config.crf),
        "-pix_fmt", "yuv420p",
        "-r", str(config.fps),
    ]


def audio_encode_args(config: TranscodeConfig) -> list[str]:
    return [
        "-c:a", "aac",
        "-b:a", config.audio_bitrate,
        "-ar", str(config.audio_sample_rate),
        "-ac", str(config.audio_channels),
    ]


def clip_args(
    clip: ExportClip,
    video_path: Path,
    narration_path: Path | None,
    output_path: Path,
    config: TranscodeConfig,
    audio_mix: float,
    has_native_audio: bool = True,
) -> list[str]:
    """Cut, normalize and mix one export clip into an intermediate file.

    Whenever narration is present its gain is the ``audio_mix`` share from
    ``mix_gains``, with or without native audio to mix against. A clip
    without narration keeps its native audio as is, and a clip with neither
    gets a silent track so every intermediate has audio for the concat step.
    Narration is read from ``clip.audio_offset`` so split halves continue
    where the previous half stopped.
    """
    effective = _fmt(clip.effective_duration)
    args = ["-ss", _fmt(clip.trim_start), "-i", str(video_path)]
    if narration_path is not None:
        if clip.audio_offset > 0:
            args += ["-ss", _fmt(clip.audio_offset)]
        args += ["-i", str(narration_path)]

    filters = [f"[0:v]{video_filter(config)}[vout]"]
    native_gain, narration_gain = mix_gains(audio_mix)
    if narration_path is not None and has_native_audio:
        filters += [
            f"[0:a]volume={_fmt(native_gain)}[va]",
            f"[1:a]volume={_fmt(narration_gain)}[vo]",
            "[va][vo]amix=inputs=2:duration=longest:dropout_transition=0[aout]",
        ]
    elif narration_path is not None:
        filters.append(f"[1:a]volume={_fmt(narration_gain)}[aout]")
    elif has_native_audio:
        filters.append("[0:a]anull[aout]")
    else:
        layout = "stereo" if config.audio_channels == 2 else "mono"
        args += [
            "-f", "lavfi",
            "-t", effective,
            "-i", f"anullsrc=channel_layout={layout}:sample_rate={config.audio_sample_rate}",
        ]
        filters.append("[1:a]anull[aout]")

    return [
        *args,
        "-t", effective,
        "-filter_complex", ";".join(filters),
        "-map", "[vout]",
        "-map", "[aout]",
        *video_encode_args(config),
        *audio_encode_args(config),
        str(output_path),
    ]


def concat_list(paths: Iterable[Path]) -> str:
    """Render a concat demuxer list file."""
    lines = []
    for path in paths:
        escaped = str(path.resolve()).replace("'", "'\\''")
        lines.append(f"file '{escaped}'")
    return "\n".join(lines) + "\n"


def concat_args(list_path: Path, output_path: Path, config: TranscodeConfig) -> list[str]:
    """Join intermediates with the concat demuxer, re-encoding the result."""
    return [
        "-f", "concat",
        "-safe", "0",
        "-i", str(list_path),
        *video_encode_args(config),
        *audio_encode_args(config),
        "-movflags", "+faststart",
        str(output_path),
    ]


def escape_filter_value(value: str) -> str:
    """Escape a value for use inside a quoted filtergraph option."""
    return value.replace("\\", "/").replace(":", "\\:").replace("'", "\\'")


def burn_args(
    input_path: Path,
    srt_path: Path,
    output_path: Path,
    force_style: str,
    config: TranscodeConfig,
) -> list[str]:
    """Burn an SRT file into the video with an ASS style override."""
    subtitles_filter = f"subtitles=filename='{escape_filter_value(str(srt_path.resolve()))}':force_style='{force_style}'"
    return [
        "-i", str(input_path),
        "-vf", subtitles_filter,
        *video_encode_args(config),
        "-c:a", "copy",
        "-movflags", "+faststart",
        str(output_path),
    ]
