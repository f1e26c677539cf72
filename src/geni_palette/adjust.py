# adjust.py – display-time brightness / saturation / warmth sliders
#   Pure projection: the stored color is never touched, a new hex comes back.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .conversions import Hex, clamp_percent, hex_to_hsl, hsl_to_hex, normalize_hue

log = logging.getLogger(__name__)

NEUTRAL = 50.0
MAX_WARMTH_SHIFT = 30.0  # degrees


@dataclass(frozen=True)
class ColorControl:
    brightness: float = NEUTRAL
    saturation: float = NEUTRAL
    warmth: float = NEUTRAL

    def __post_init__(self) -> None:
        for name in ("brightness", "saturation", "warmth"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, (int, float)):
                raise ValueError(f"{name} must be a number")
            if not 0.0 <= v <= 100.0:
                raise ValueError(f"{name} must be between 0 and 100")

    @property
    def neutral(self) -> bool:
        return (self.brightness, self.saturation, self.warmth) == (NEUTRAL,) * 3


def adjust_color(
    hex_color: str,
    brightness: float = NEUTRAL,
    saturation: float = NEUTRAL,
    warmth: float = NEUTRAL,
) -> Hex:
    """
    Apply slider offsets to `hex_color` and return the preview hex.

      brightness – lightness += (b-50)/2, i.e. at most ±25 points
      saturation – relative boost/cut of (s-50)/100, i.e. ×0.5 … ×1.5
      warmth     – hue += (w-50)/50·30°, wrapped into [0, 360)

    Neutral sliders give back the input untouched; any conversion failure
    does the same, since a preview must always show something.
    """
    if (brightness, saturation, warmth) == (NEUTRAL, NEUTRAL, NEUTRAL):
        return hex_color
    try:
        h, s, l = hex_to_hsl(hex_color)

        l = clamp_percent(l + (float(brightness) - NEUTRAL) / 2.0)
        s = clamp_percent(s * (1.0 + (float(saturation) - NEUTRAL) / 100.0))
        h = normalize_hue(h + (float(warmth) - NEUTRAL) / NEUTRAL * MAX_WARMTH_SHIFT)

        return hsl_to_hex(h, s, l)
    except (ValueError, TypeError):
        log.warning("color adjustment failed for %r; showing it unadjusted", hex_color)
        return hex_color


def adjust_colors(colors: Iterable[str], control: ColorControl) -> list[Hex]:
    return [
        adjust_color(c, control.brightness, control.saturation, control.warmth)
        for c in colors
    ]


__all__ = ["ColorControl", "NEUTRAL", "adjust_color", "adjust_colors"]
