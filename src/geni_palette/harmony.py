# harmony.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class HarmonyType(str, Enum):
    MONOCHROMATIC = "monochromatic"
    ANALOGOUS = "analogous"
    COMPLEMENTARY = "complementary"
    TRIADIC = "triadic"
    TETRADIC = "tetradic"
    SPLIT_COMPLEMENTARY = "split_complementary"

    @classmethod
    def parse(cls, value: "str | HarmonyType") -> "HarmonyType":
        if isinstance(value, HarmonyType):
            return value
        if not isinstance(value, str):
            raise ValueError(f"harmony must be a string, got {type(value).__name__}")
        key = value.strip().lower().replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"unknown harmony '{value}'") from None

    def __str__(self) -> str:
        return self.value


Range = tuple[float, float]


@dataclass(frozen=True)
class HarmonyRule:
    """Geometric constraints of one harmony family, in HSL degrees/points."""

    hue_offsets: tuple[float, ...]
    min_hue_spacing: float
    min_saturation_span: float
    min_lightness_span: float
    min_distance: float
    hue_tolerance: float = 0.0
    max_hue_deviation: float | None = None
    hue_window: Range | None = None
    neighbor_offset: Range | None = None
    split_offset: Range | None = None


DEFAULT_MIN_DISTANCE = 0.30

HARMONY_RULES: Mapping[HarmonyType, HarmonyRule] = MappingProxyType(
    {
        HarmonyType.MONOCHROMATIC: HarmonyRule(
            hue_offsets=(0.0,),
            max_hue_deviation=5.0,
            min_hue_spacing=0.0,
            min_saturation_span=45.0,
            min_lightness_span=40.0,
            min_distance=0.25,
        ),
        HarmonyType.ANALOGOUS: HarmonyRule(
            hue_offsets=(0.0,),
            hue_window=(30.0, 45.0),
            min_hue_spacing=25.0,
            min_saturation_span=40.0,
            min_lightness_span=35.0,
            min_distance=0.35,
        ),
        HarmonyType.COMPLEMENTARY: HarmonyRule(
            hue_offsets=(0.0, 180.0),
            hue_tolerance=4.0,
            neighbor_offset=(18.0, 28.0),
            min_hue_spacing=15.0,
            min_saturation_span=35.0,
            min_lightness_span=30.0,
            min_distance=0.30,
        ),
        HarmonyType.TRIADIC: HarmonyRule(
            hue_offsets=(0.0, 120.0, 240.0),
            hue_tolerance=4.0,
            neighbor_offset=(12.0, 20.0),
            min_hue_spacing=15.0,
            min_saturation_span=35.0,
            min_lightness_span=30.0,
            min_distance=0.28,
        ),
        HarmonyType.TETRADIC: HarmonyRule(
            hue_offsets=(0.0, 90.0, 180.0, 270.0),
            hue_tolerance=4.0,
            neighbor_offset=(10.0, 18.0),
            min_hue_spacing=12.0,
            min_saturation_span=35.0,
            min_lightness_span=30.0,
            min_distance=0.25,
        ),
        HarmonyType.SPLIT_COMPLEMENTARY: HarmonyRule(
            hue_offsets=(0.0, 180.0),
            hue_tolerance=4.0,
            split_offset=(15.0, 30.0),
            min_hue_spacing=15.0,
            min_saturation_span=35.0,
            min_lightness_span=30.0,
            min_distance=0.30,
        ),
    }
)

HARMONY_LABELS: Mapping[HarmonyType, str] = MappingProxyType(
    {
        HarmonyType.ANALOGOUS: "Analogous",
        HarmonyType.MONOCHROMATIC: "Monochromatic",
        HarmonyType.COMPLEMENTARY: "Complementary",
        HarmonyType.TRIADIC: "Triadic",
        HarmonyType.SPLIT_COMPLEMENTARY: "Split-Complementary",
        HarmonyType.TETRADIC: "Tetradic",
    }
)


def rule_for(harmony: "str | HarmonyType") -> HarmonyRule:
    return HARMONY_RULES[HarmonyType.parse(harmony)]


def min_distance(harmony: "str | HarmonyType") -> float:
    """Perceptual distance every pair must clear; unknown harmonies get 0.30."""
    try:
        return rule_for(harmony).min_distance
    except ValueError:
        return DEFAULT_MIN_DISTANCE


def _n(x: float) -> str:
    return f"{x:g}"


def _targets(offsets: tuple[float, ...]) -> str:
    return ", ".join("H0" if o == 0 else f"H0+{_n(o)}°" for o in offsets)


def describe_rules(harmony: "str | HarmonyType", color_count: int) -> str:
    """Render the catalog entry as the rule text handed to the generator."""
    kind = HarmonyType.parse(harmony)
    r = HARMONY_RULES[kind]
    s_span, l_span = _n(r.min_saturation_span), _n(r.min_lightness_span)
    spacing = _n(r.min_hue_spacing)

    if kind is HarmonyType.MONOCHROMATIC:
        return (
            f"Work in HSL. Keep hue within ±{_n(r.max_hue_deviation)}° of base H0. "
            "YOU MUST create STRONG diversity through saturation and lightness: "
            f"S must span ≥ {s_span} points and L must span ≥ {l_span} points. "
            "CRITICAL: Ensure every pair of colors differs by at least 15 points in S "
            "OR 15 points in L. Example good palette: H=210° constant, "
            "S=[25,45,65,85], L=[30,50,70,85]."
        )
    if kind is HarmonyType.ANALOGOUS:
        lo, hi = r.hue_window
        return (
            f"Work in HSL. Choose base hue H0. Select window width W between "
            f"{_n(lo)}–{_n(hi)}°. Distribute {color_count} hues EVENLY across "
            f"[H0−W/2, H0+W/2]. MANDATORY minimum spacing between adjacent hues: "
            f"≥ {spacing}°. Vary S across {s_span}+ points and L across {l_span}+ points."
        )

    tol = _n(r.hue_tolerance)
    if kind is HarmonyType.SPLIT_COMPLEMENTARY:
        lo, hi = r.split_offset
        return (
            f"Work in HSL. Use base H0 and two complements: "
            f"{{H0, H0+180°−({_n(lo)}–{_n(hi)})°, H0+180°+({_n(lo)}–{_n(hi)})°}} "
            f"(±{tol}° tolerance). MINIMUM pairwise hue spacing: ≥ {spacing}°. "
            f"Vary S by {s_span}+ points and L by {l_span}+ points."
        )

    lo, hi = r.neighbor_offset
    n_primary = len(r.hue_offsets)
    return (
        f"Work in HSL. Target hues {{{_targets(r.hue_offsets)}}} (±{tol}° tolerance). "
        f"If {color_count}>{n_primary}, add variations at ±{_n(lo)}–{_n(hi)}° around "
        f"each target. MINIMUM pairwise hue spacing: ≥ {spacing}°. "
        f"Vary S by {s_span}+ points and L by {l_span}+ points."
    )


__all__ = [
    "HarmonyType",
    "HarmonyRule",
    "HARMONY_RULES",
    "HARMONY_LABELS",
    "DEFAULT_MIN_DISTANCE",
    "rule_for",
    "min_distance",
    "describe_rules",
]
