from geni_palette.conversions import HSL, hsl_to_hex, same_color
from geni_palette.distance import color_distance, hue_gap
from geni_palette.diversity import (
    MAX_ITERATIONS,
    DiversityEnforcer,
    enforce_diversity,
    find_similar_pairs,
)
from geni_palette.harmony import HarmonyType, min_distance
from geni_palette.schema import Color


def mk(h, s, l, name="Test Color"):
    return Color(name=name, hex=hsl_to_hex(h, s, l), hsl=HSL(h, s, l))


def min_pairwise(colors):
    return min(
        color_distance(a.hsl, b.hsl)
        for i, a in enumerate(colors)
        for b in colors[i + 1 :]
    )


def test_analogous_scenario():
    a, b = mk(200, 50, 50), mk(202, 52, 51)
    assert color_distance(a.hsl, b.hsl) < 0.05

    out = enforce_diversity([a, b], "analogous")

    assert out[0] == a
    assert hue_gap(out[1].hsl.hue, b.hsl.hue) >= 25.0
    assert color_distance(out[0].hsl, out[1].hsl) > 0.35


def test_hue_moves_away_across_zero():
    enforcer = DiversityEnforcer("complementary")
    moved = enforcer.adjust_hsl(HSL(355, 40, 40), HSL(5, 70, 70))
    assert moved.hue == 320.0
    moved = enforcer.adjust_hsl(HSL(5, 40, 40), HSL(355, 70, 70))
    assert moved.hue == 40.0


def test_saturation_and_lightness_nudges_are_clamped():
    enforcer = DiversityEnforcer("triadic")
    moved = enforcer.adjust_hsl(HSL(100, 90, 80), HSL(100, 88, 78))
    assert (moved.saturation, moved.lightness) == (95.0, 85.0)
    moved = enforcer.adjust_hsl(HSL(100, 20, 25), HSL(100, 22, 27))
    assert (moved.saturation, moved.lightness) == (15.0, 20.0)


def test_monochromatic_keeps_hue():
    colors = [mk(210, 50, 50), mk(212, 52, 52), mk(208, 49, 48)]
    result = DiversityEnforcer(HarmonyType.MONOCHROMATIC).run(colors)
    assert [c.hsl.hue for c in result.colors] == [210, 212, 208]
    assert result.passes >= 1
    for c in result.colors:
        assert 10.0 <= c.hsl.saturation <= 95.0
        assert 15.0 <= c.hsl.lightness <= 90.0


def test_monochromatic_step_sizes():
    enforcer = DiversityEnforcer("monochromatic")
    moved = enforcer.adjust_hsl(HSL(210, 52, 40), HSL(210, 50, 45))
    assert moved == HSL(210, 67, 25)
    moved = enforcer.adjust_hsl(HSL(210, 92, 88), HSL(210, 90, 85))
    assert moved == HSL(210, 95, 90)


def test_terminates_on_eight_identical_colors():
    colors = [mk(200, 50, 50, f"Twin {i}") for i in range(8)]
    for harmony in list(HarmonyType) + ["unknown"]:
        result = DiversityEnforcer(harmony).run(colors)
        assert result.passes <= MAX_ITERATIONS
        assert len(result.colors) == 8


def test_fixed_point_returns_input_unchanged():
    colors = [mk(0, 60, 40), mk(90, 30, 70), mk(180, 80, 50), mk(270, 40, 30)]
    assert min_pairwise(colors) > min_distance("tetradic")
    result = DiversityEnforcer("tetradic").run(colors)
    assert result.passes == 0
    assert result.converged
    assert result.colors == colors


def test_input_is_not_mutated():
    colors = [mk(200, 50, 50), mk(201, 50, 50), mk(202, 50, 50)]
    before = list(colors)
    enforce_diversity(colors, "analogous")
    assert colors == before


def test_adjusted_hex_matches_hsl():
    colors = [mk(30, 60, 50), mk(33, 62, 52), mk(36, 58, 49), mk(40, 61, 51)]
    for c in enforce_diversity(colors, "complementary"):
        assert same_color(c.hex, c.hsl)


def test_reduces_violations():
    colors = [mk(100 + i, 50, 50) for i in range(5)]
    before = len(find_similar_pairs(colors, min_distance("triadic")))
    result = DiversityEnforcer("triadic").run(colors)
    assert len(result.remaining) < before


def test_single_and_empty_inputs():
    assert enforce_diversity([], "analogous") == []
    one = [mk(10, 10, 10)]
    assert enforce_diversity(one, "analogous") == one


def test_find_similar_pairs_order():
    colors = [mk(0, 50, 50), mk(1, 50, 50), mk(2, 50, 50)]
    assert find_similar_pairs(colors, 0.3) == [(0, 1), (0, 2), (1, 2)]
