# conversions.py – HEX / HSL / RGB helpers shared by the whole engine
#   - hex is always '#RRGGBB' with uppercase digits on the way out
#   - hue lives in [0, 360), saturation/lightness in [0, 100]
#   - RGB is handled as float arrays in [0, 1] and quantized round-to-nearest

from __future__ import annotations

import math
import string
from dataclasses import dataclass

import numpy as np
from coloraide import Color as CAColor

from .errors import ConversionError

Hex = str


@dataclass(frozen=True)
class HSL:
    hue: float
    saturation: float
    lightness: float

    def __iter__(self):
        yield self.hue
        yield self.saturation
        yield self.lightness


def canon_hex(s: str) -> Hex:
    """Normalize to '#RRGGBB'; exactly six hex digits, leading '#' optional."""
    if not isinstance(s, str):
        raise ConversionError(f"hex must be a string, got {type(s).__name__}")
    raw = s.strip()
    raw = raw[1:] if raw.startswith("#") else raw
    if len(raw) != 6 or not all(c in string.hexdigits for c in raw):
        raise ConversionError(f"invalid hex: {s!r}")
    return "#" + raw.upper()


def normalize_hue(h: float) -> float:
    h = float(h) % 360.0
    # -1e-20 % 360 == 360.0 in IEEE arithmetic
    return 0.0 if h >= 360.0 else h


def clamp_percent(v: float) -> float:
    return max(0.0, min(100.0, float(v)))


def _check_finite(*values: float) -> None:
    if not all(math.isfinite(float(v)) for v in values):
        raise ConversionError(f"HSL components must be finite: {values}")


# --- RGB ---------------------------------------------------------------------
def hex_to_rgb01(hex_str: str) -> np.ndarray:
    raw = canon_hex(hex_str)[1:]
    r, g, b = (int(raw[i : i + 2], 16) / 255.0 for i in (0, 2, 4))
    return np.array([r, g, b], dtype=np.float64)


def rgb01_to_hex(rgb: np.ndarray) -> Hex:
    u8 = np.round(np.clip(rgb, 0.0, 1.0) * 255.0).astype(np.uint8)
    return f"#{u8[0]:02X}{u8[1]:02X}{u8[2]:02X}"


# --- HSL ---------------------------------------------------------------------
def rgb01_to_hsl(rgb: np.ndarray) -> HSL:
    r, g, b = (float(v) for v in rgb)
    hi = max(r, g, b)
    lo = min(r, g, b)
    delta = hi - lo
    lightness = (hi + lo) / 2.0

    if delta == 0.0:
        return HSL(0.0, 0.0, lightness * 100.0)

    if lightness > 0.5:
        saturation = delta / (2.0 - hi - lo)
    else:
        saturation = delta / (hi + lo)

    if hi == r:
        hue = (g - b) / delta + (6.0 if g < b else 0.0)
    elif hi == g:
        hue = (b - r) / delta + 2.0
    else:
        hue = (r - g) / delta + 4.0

    return HSL(normalize_hue(hue * 60.0), saturation * 100.0, lightness * 100.0)


def hsl_to_rgb01(hue: float, saturation: float, lightness: float) -> np.ndarray:
    _check_finite(hue, saturation, lightness)
    h = normalize_hue(hue)
    s = clamp_percent(saturation) / 100.0
    l = clamp_percent(lightness) / 100.0

    c = (1.0 - abs(2.0 * l - 1.0)) * s
    x = c * (1.0 - abs((h / 60.0) % 2.0 - 1.0))
    m = l - c / 2.0

    sector = min(int(h // 60.0), 5)
    rgb = (
        (c, x, 0.0),
        (x, c, 0.0),
        (0.0, c, x),
        (0.0, x, c),
        (x, 0.0, c),
        (c, 0.0, x),
    )[sector]
    return np.asarray(rgb, dtype=np.float64) + m


def hex_to_hsl(hex_str: str) -> HSL:
    return rgb01_to_hsl(hex_to_rgb01(hex_str))


def hsl_to_hex(hue: float, saturation: float, lightness: float) -> Hex:
    return rgb01_to_hex(hsl_to_rgb01(hue, saturation, lightness))


def hex_to_rgb_string(hex_str: str) -> str:
    """'#FF5733' → 'rgb(255, 87, 51)'."""
    coords = CAColor(canon_hex(hex_str)).convert("srgb").coords()
    r, g, b = (int(round(c * 255.0)) for c in coords)
    return f"rgb({r}, {g}, {b})"


def same_color(hex_str: str, hsl: HSL, *, tolerance: int = 1) -> bool:
    """True when `hsl` encodes `hex_str` within `tolerance` units per channel."""
    a = np.round(hex_to_rgb01(hex_str) * 255.0)
    b = np.round(np.clip(hsl_to_rgb01(*hsl), 0.0, 1.0) * 255.0)
    return bool(np.all(np.abs(a - b) <= tolerance))


__all__ = [
    "HSL",
    "Hex",
    "canon_hex",
    "normalize_hue",
    "clamp_percent",
    "hex_to_rgb01",
    "rgb01_to_hex",
    "rgb01_to_hsl",
    "hsl_to_rgb01",
    "hex_to_hsl",
    "hsl_to_hex",
    "hex_to_rgb_string",
    "same_color",
]
