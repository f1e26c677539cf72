# diversity.py – bounded repair loop that pushes look-alike colors apart
#   - a pass collects every pair (i, j), i < j, closer than the harmony threshold
#   - the later color j is nudged away from i, at most once per pass
#   - the loop stops at a fixed point or after MAX_ITERATIONS passes, whichever first

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .conversions import HSL, hsl_to_hex, normalize_hue
from .distance import hue_gap, pairwise_distances, signed_hue_delta
from .harmony import HarmonyType, min_distance
from .schema import Color

log = logging.getLogger(__name__)

MAX_ITERATIONS = 10

Pair = tuple[int, int]


@dataclass(frozen=True)
class DiversityResult:
    colors: list[Color]
    passes: int
    remaining: list[Pair]

    @property
    def converged(self) -> bool:
        return not self.remaining


def find_similar_pairs(colors: Sequence[Color], threshold: float) -> list[Pair]:
    """Index pairs (i < j) whose perceptual distance is below `threshold`."""
    n = len(colors)
    if n < 2:
        return []
    dist = pairwise_distances([c.hsl for c in colors])
    rows, cols = np.triu_indices(n, k=1)
    return [(int(i), int(j)) for i, j in zip(rows, cols) if dist[i, j] < threshold]


@dataclass(frozen=True)
class DiversityEnforcer:
    harmony: "str | HarmonyType"
    max_iterations: int = MAX_ITERATIONS
    # monochromatic: S/L only
    mono_gap: float = 20.0
    mono_step: float = 15.0
    mono_sat_bounds: tuple[float, float] = (10.0, 95.0)
    mono_light_bounds: tuple[float, float] = (15.0, 90.0)
    # everything else: hue first, then S/L
    hue_gap_min: float = 20.0
    hue_step: float = 35.0
    sl_gap: float = 15.0
    sl_step: float = 12.0
    sat_bounds: tuple[float, float] = (15.0, 95.0)
    light_bounds: tuple[float, float] = (20.0, 85.0)

    @property
    def threshold(self) -> float:
        return min_distance(self.harmony)

    @property
    def monochromatic(self) -> bool:
        try:
            return HarmonyType.parse(self.harmony) is HarmonyType.MONOCHROMATIC
        except ValueError:
            return False

    def run(self, colors: Sequence[Color]) -> DiversityResult:
        current = list(colors)
        threshold = self.threshold
        passes = 0

        pairs = find_similar_pairs(current, threshold)
        while pairs and passes < self.max_iterations:
            adjusted: set[int] = set()
            for i, j in pairs:
                if j in adjusted:
                    continue
                current[j] = self._push_apart(current[j], current[i])
                adjusted.add(j)
            passes += 1
            log.debug(
                "diversity pass %d: %d close pairs, adjusted %s",
                passes,
                len(pairs),
                sorted(adjusted),
            )
            pairs = find_similar_pairs(current, threshold)

        if pairs:
            log.info(
                "diversity gave up after %d passes with %d close pairs", passes, len(pairs)
            )
        return DiversityResult(colors=current, passes=passes, remaining=pairs)

    def enforce(self, colors: Sequence[Color]) -> list[Color]:
        return self.run(colors).colors

    # ---- internals ----

    def _push_apart(self, color: Color, other: Color) -> Color:
        hsl = self.adjust_hsl(color.hsl, other.hsl)
        return color.model_copy(update={"hsl": hsl, "hex": hsl_to_hex(*hsl)})

    def adjust_hsl(self, hsl: HSL, target: HSL) -> HSL:
        """Move `hsl` away from `target` according to the harmony family."""
        h, s, l = hsl

        if self.monochromatic:
            if abs(s - target.saturation) < self.mono_gap:
                s = _step(s, self.mono_step, self.mono_sat_bounds)
            if abs(l - target.lightness) < self.mono_gap:
                l = _step(l, self.mono_step, self.mono_light_bounds)
            return HSL(h, s, l)

        if hue_gap(h, target.hue) < self.hue_gap_min:
            direction = 1.0 if signed_hue_delta(h, target.hue) > 0 else -1.0
            h = normalize_hue(h + direction * self.hue_step)
        if abs(s - target.saturation) < self.sl_gap:
            s = _step(s, self.sl_step, self.sat_bounds)
        if abs(l - target.lightness) < self.sl_gap:
            l = _step(l, self.sl_step, self.light_bounds)
        return HSL(h, s, l)


def _step(v: float, step: float, bounds: tuple[float, float]) -> float:
    # upper half moves up, lower half moves down
    lo, hi = bounds
    return min(hi, v + step) if v > 50.0 else max(lo, v - step)


def enforce_diversity(
    colors: Sequence[Color],
    harmony: "str | HarmonyType",
    *,
    max_iterations: int = MAX_ITERATIONS,
) -> list[Color]:
    return DiversityEnforcer(harmony=harmony, max_iterations=max_iterations).enforce(colors)


__all__ = [
    "MAX_ITERATIONS",
    "DiversityEnforcer",
    "DiversityResult",
    "find_similar_pairs",
    "enforce_diversity",
]
