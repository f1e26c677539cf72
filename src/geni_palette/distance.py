# distance.py – weighted HSL distance used as a "looks different enough" proxy

from __future__ import annotations

from typing import Sequence

import numpy as np

from .conversions import HSL

HUE_WEIGHT = 2.0
SATURATION_WEIGHT = 1.0
LIGHTNESS_WEIGHT = 1.0

_WEIGHTS = np.array([HUE_WEIGHT, SATURATION_WEIGHT, LIGHTNESS_WEIGHT], dtype=np.float64)


def hue_gap(h1: float, h2: float) -> float:
    """Angular gap on the hue circle, in [0, 180]."""
    d = abs(float(h1) - float(h2)) % 360.0
    return min(d, 360.0 - d)


def signed_hue_delta(h: float, ref: float) -> float:
    """Shortest signed rotation from `ref` to `h`, in [-180, 180)."""
    return ((float(h) - float(ref) + 180.0) % 360.0) - 180.0


def color_distance(a: HSL, b: HSL) -> float:
    diff = np.array(
        [
            hue_gap(a.hue, b.hue) / 180.0,
            abs(a.saturation - b.saturation) / 100.0,
            abs(a.lightness - b.lightness) / 100.0,
        ],
        dtype=np.float64,
    )
    return float(np.linalg.norm(diff * _WEIGHTS))


def pairwise_distances(hsls: Sequence[HSL]) -> np.ndarray:
    """Symmetric n×n matrix of `color_distance` values (zero diagonal)."""
    if not hsls:
        return np.zeros((0, 0), dtype=np.float64)
    arr = np.array([tuple(c) for c in hsls], dtype=np.float64)  # n×3

    dh = np.abs(arr[:, None, 0] - arr[None, :, 0]) % 360.0
    dh = np.minimum(dh, 360.0 - dh) / 180.0
    ds = np.abs(arr[:, None, 1] - arr[None, :, 1]) / 100.0
    dl = np.abs(arr[:, None, 2] - arr[None, :, 2]) / 100.0

    stacked = np.stack([dh, ds, dl], axis=-1) * _WEIGHTS  # n×n×3
    return np.linalg.norm(stacked, axis=-1)


__all__ = [
    "HUE_WEIGHT",
    "SATURATION_WEIGHT",
    "LIGHTNESS_WEIGHT",
    "hue_gap",
    "signed_hue_delta",
    "color_distance",
    "pairwise_distances",
]
