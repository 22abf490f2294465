"""Translate subtitle style tokens into an ASS ``force_style`` string."""

import re

from pydantic import Field

from reelcut.common.base_reelcut_model import BaseReelcutModel

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})([0-9a-fA-F]{2})?$")
_RGBA_RE = re.compile(
    r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*([0-9.]+)\s*)?\)$"
)

_NAMED_COLORS = {
    "white": (255, 255, 255, 1.0),
    "black": (0, 0, 0, 1.0),
    "yellow": (255, 255, 0, 1.0),
}


class BurnInStyle(BaseReelcutModel):
    """Subtitle appearance for burn-in."""

    color: str = "#ffffff"
    background_color: str = "transparent"
    font_size: int = Field(default=24, gt=0)
    outline: int = 2
    margin_v: int = 60


def parse_color(token: str) -> tuple[int, int, int, float] | None:
    """Parse ``#rrggbb[aa]``, ``rgb()``/``rgba()`` or a few names.

    Returns:
        ``(r, g, b, alpha)`` with alpha in ``[0, 1]``, or None for
        ``transparent`` and unparseable tokens.
    """
    token = token.strip().lower()
    if token in ("", "transparent", "none"):
        return None
    if token in _NAMED_COLORS:
        return _NAMED_COLORS[token]

    match = _HEX_RE.match(token)
    if match:
        rgb = match.group(1)
        alpha = int(match.group(2), 16) / 255 if match.group(2) else 1.0
        return int(rgb[0:2], 16), int(rgb[2:4], 16), int(rgb[4:6], 16), alpha

    match = _RGBA_RE.match(token)
    if match:
        r, g, b = (min(int(match.group(i)), 255) for i in (1, 2, 3))
        alpha = float(match.group(4)) if match.group(4) is not None else 1.0
        return r, g, b, min(max(alpha, 0.0), 1.0)
    return None


def to_ass_color(token: str, default: str = "&H00FFFFFF") -> str:
    """Convert a color token to ASS ``&HAABBGGRR`` (alpha 00 is opaque)."""
    parsed = parse_color(token)
    if parsed is None:
        return default
    r, g, b, alpha = parsed
    ass_alpha = round((1.0 - alpha) * 255)
    return f"&H{ass_alpha:02X}{b:02X}{g:02X}{r:02X}"


def build_force_style(style: BurnInStyle) -> str:
    """Build the comma-separated ASS override list for the subtitles filter."""
    parts = [
        f"FontSize={style.font_size}",
        f"PrimaryColour={to_ass_color(style.color)}",
        "OutlineColour=&H00000000",
        f"Outline={style.outline}",
        f"MarginV={style.margin_v}",
    ]
    if parse_color(style.background_color) is not None:
        # BorderStyle=3 draws an opaque box in BackColour behind the text
        parts.append("BorderStyle=3")
        parts.append(f"BackColour={to_ass_color(style.background_color)}")
    return ",".join(parts)
