import pytest

from color_config import EngineConfig
from color_space import get_hue, parse_color
from contrast_utils import (adjust_for_contrast, calculate_contrast,
                            check_aa_compliance, check_aaa_compliance,
                            generate_accessible_palette,
                            generate_semantic_colors,
                            get_accessible_text_color, get_contrast_level,
                            get_optimal_text_color, required_ratio,
                            suggest_passing_color, validate_palette_contrast)
from diagnostics import FallbackLog

SAMPLES = ["#000000", "#FFFFFF", "#3B82F6", "#F59E0B", "#767676", "#10B981"]


@pytest.mark.parametrize("color", SAMPLES)
def test_contrast_with_itself_is_one(color):
    assert calculate_contrast(color, color) == pytest.approx(1.0)


def test_contrast_is_symmetric():
    for a in SAMPLES:
        for b in SAMPLES:
            assert calculate_contrast(a, b) == pytest.approx(calculate_contrast(b, a))


def test_black_on_white():
    assert calculate_contrast("#000000", "#FFFFFF") == pytest.approx(21.0)


def test_aa_boundary_gray():
    # ~4.54:1, just over the normal-text threshold
    assert check_aa_compliance("#767676", "#FFFFFF", False)
    assert not check_aaa_compliance("#767676", "#FFFFFF", False)
    assert check_aaa_compliance("#767676", "#FFFFFF", True)


def test_required_ratio():
    assert required_ratio("AA") == 4.5
    assert required_ratio("AA", True) == 3.0
    assert required_ratio("AAA") == 7.0
    assert required_ratio("AAA", True) == 4.5


def test_malformed_contrast_is_one():
    log = FallbackLog()
    assert calculate_contrast("nope", "#FFFFFF", on_fallback=log) == 1.0
    assert log.operations() == ["calculate_contrast"]


def test_contrast_level():
    assert get_contrast_level("#000000", "#FFFFFF").level == "AAA"
    assert get_contrast_level("#767676", "#FFFFFF").level == "AA"
    assert get_contrast_level("#EEEEEE", "#FFFFFF").level == "fail"
    assert get_contrast_level("#767676", "#FFFFFF", is_large_text=True).level == "AAA"


def test_optimal_text_color():
    assert get_optimal_text_color("#FFFFFF") == "#000000"
    assert get_optimal_text_color("#000000") == "#FFFFFF"
    assert get_optimal_text_color("#1E3A8A") == "#FFFFFF"


def test_accessible_text_keeps_passing_preference():
    assert get_accessible_text_color("#FFFFFF", preferred="#111827") == "#111827"
    assert get_accessible_text_color("#FFFFFF", preferred="#EEEEEE") == "#000000"
    assert get_accessible_text_color("#000000") == "#FFFFFF"


@pytest.mark.parametrize("fg, bg", [
    ("#BBBBBB", "#FFFFFF"),
    ("#3B82F6", "#FFFFFF"),
    ("#333333", "#111111"),
    ("#1E3A8A", "#0F172A"),
])
def test_adjust_for_contrast_reaches_target(fg, bg):
    adjusted = adjust_for_contrast(fg, bg, 4.5)
    assert calculate_contrast(adjusted, bg) >= 4.5


def test_adjust_for_contrast_leaves_passing_color():
    assert adjust_for_contrast("#111827", "#FFFFFF") == "#111827"


def test_adjust_for_contrast_falls_back_to_black_or_white():
    # One step of 1 L unit can't get anywhere near 7:1
    config = EngineConfig(contrast_step=1.0, contrast_max_steps=1)
    assert adjust_for_contrast("#EEEEEE", "#FFFFFF", 7.0, config=config) == "#000000"
    assert adjust_for_contrast("#111111", "#000000", 7.0, config=config) == "#FFFFFF"


def test_generate_accessible_palette():
    palette = generate_accessible_palette("#FFFFFF", ["#FDE68A", "#A7F3D0", "#111827"])
    assert len(palette) == 3
    assert palette[2] == "#111827"
    for color in palette:
        assert calculate_contrast(color, "#FFFFFF") >= 4.5


def test_validate_palette_contrast():
    result = validate_palette_contrast(["#FFFFFF", "#FEFEFE", "#000000"])
    assert not result["is_valid"]
    assert len(result["issues"]) == 1
    assert result["issues"][0]["color1"] == "#FFFFFF"
    assert validate_palette_contrast(["#FFFFFF", "#000000"])["is_valid"]


def test_suggest_passing_color():
    suggested = suggest_passing_color("#60A5FA", "#FFFFFF", 4.5)
    assert calculate_contrast(suggested, "#FFFFFF") >= 4.5
    assert get_hue(suggested) == pytest.approx(get_hue("#60A5FA"), abs=3)
    # Already passing: unchanged
    assert suggest_passing_color("#000000", "#FFFFFF", 4.5) == "#000000"


def test_suggest_passing_color_prefers_nearest_lightness():
    original = parse_color("#AAAAAA").hsl[2]
    suggested = parse_color(suggest_passing_color("#AAAAAA", "#FFFFFF", 4.5)).hsl[2]
    assert suggested < original
    assert original - suggested < 0.3


def test_suggest_passing_color_bad_input():
    log = FallbackLog()
    assert suggest_passing_color("nope", "#FFFFFF", on_fallback=log) == "nope"
    assert log.operations() == ["suggest_passing_color"]


def test_semantic_colors_meet_target():
    colors = generate_semantic_colors("#FFFFFF")
    assert set(colors) == {"primary", "secondary", "success", "warning", "error", "info"}
    for color in colors.values():
        assert calculate_contrast(color, "#FFFFFF") >= 4.5
    # Already ~4.8:1 on white, so left alone
    assert colors["secondary"] == "#6B7280"
    assert colors["primary"] != "#3B82F6"


def test_semantic_colors_on_dark_background():
    for color in generate_semantic_colors("#0F172A", 3.0).values():
        assert calculate_contrast(color, "#0F172A") >= 3.0
