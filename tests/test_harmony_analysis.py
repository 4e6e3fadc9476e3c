import pytest

from harmony_analysis import (analyze_color_relationships,
                              calculate_color_angle, calculate_hue_distance,
                              can_form_complementary, can_form_split_complementary,
                              can_form_tetradic, can_form_triadic,
                              generate_harmony_tooltip,
                              generate_incompatibility_reason,
                              get_compatible_harmonies, get_harmony_options,
                              get_hue_range, is_harmony_compatible)
from models import ColorSystem, HarmonyScheme, PinningState

RED = "#FF0000"
CHARTREUSE = "#80FF00"  # ~90° from red
CYAN = "#00FFFF"        # 180° from red
ORANGE = "#FF5500"      # 20° from red


def system(primary=RED, secondary="#64748B", accent="#F59E0B"):
    return ColorSystem(primary, secondary, accent, "#FFFFFF", "#111827")


def analysis_for(primary, secondary):
    return analyze_color_relationships(system(primary, secondary), PinningState(primary=True, secondary=True))


def test_hue_distance_wraps():
    assert calculate_hue_distance(350, 10) == 20
    assert calculate_hue_distance(10, 350) == 20
    assert calculate_hue_distance(0, 180) == 180
    assert calculate_hue_distance(90, 90) == 0


def test_color_angle():
    assert calculate_color_angle(RED, CYAN) == pytest.approx(180)


def test_hue_range_wraps():
    assert get_hue_range([350, 10]) == 20
    assert get_hue_range([10, 40]) == 30
    assert get_hue_range([42]) == 0


def test_no_pins_allows_every_scheme():
    analysis = analyze_color_relationships(system(), PinningState())
    assert analysis.pinned_colors == []
    assert get_compatible_harmonies(analysis) == HarmonyScheme.concrete()


def test_single_pin_allows_every_scheme():
    analysis = analyze_color_relationships(system(), PinningState(accent=True))
    assert len(get_compatible_harmonies(analysis)) == 6


def test_right_angle_pins():
    analysis = analysis_for(RED, CHARTREUSE)
    assert not is_harmony_compatible(HarmonyScheme.MONOCHROMATIC, analysis).is_compatible
    assert not is_harmony_compatible(HarmonyScheme.ANALOGOUS, analysis).is_compatible
    assert is_harmony_compatible(HarmonyScheme.TETRADIC, analysis).is_compatible


def test_opposite_pins_are_complementary():
    analysis = analysis_for(RED, CYAN)
    assert is_harmony_compatible("complementary", analysis).is_compatible
    assert analysis.relationships[0].angle_difference == pytest.approx(180)


def test_close_pins_are_analogous():
    analysis = analysis_for(RED, ORANGE)
    compatible = get_compatible_harmonies(analysis)
    assert HarmonyScheme.MONOCHROMATIC in compatible
    assert HarmonyScheme.ANALOGOUS in compatible
    assert HarmonyScheme.COMPLEMENTARY not in compatible


def test_random_is_always_compatible():
    analysis = analysis_for(RED, CHARTREUSE)
    assert is_harmony_compatible(HarmonyScheme.RANDOM, analysis).is_compatible


def test_incompatibility_reason():
    analysis = analysis_for(RED, CHARTREUSE)
    result = is_harmony_compatible(HarmonyScheme.MONOCHROMATIC, analysis)
    assert "too wide" in result.reason
    assert "single hue" in result.educational_tooltip
    assert generate_incompatibility_reason(HarmonyScheme.MONOCHROMATIC, analysis) == result.reason


def test_tooltip_for_compatible_scheme():
    analysis = analysis_for(RED, CYAN)
    assert "opposite" in generate_harmony_tooltip(HarmonyScheme.COMPLEMENTARY, analysis)


def test_triadic_check():
    assert can_form_triadic([0, 120])
    assert not can_form_triadic([0, 60])
    assert can_form_triadic([0, 120, 240])
    assert can_form_triadic([0, 120, 240, 30])


def test_complementary_needs_an_opposite_for_every_hue():
    assert can_form_complementary([0, 180])
    assert can_form_complementary([10, 185, 190])
    assert not can_form_complementary([0, 180, 90])
    assert not can_form_complementary([0, 0])


def test_checks_use_folded_distances():
    # 240° apart is 120° the short way round
    assert can_form_triadic([0, 240])
    assert can_form_split_complementary([0, 210])
    assert can_form_tetradic([0, 270])
    assert can_form_tetradic([10, 100, 190, 280])


def test_tetradic_check():
    assert can_form_tetradic([0, 90, 180, 270])
    assert not can_form_tetradic([0, 30, 60, 300])


def test_split_complementary_check():
    assert can_form_split_complementary([0, 150])
    assert not can_form_split_complementary([0, 20])


def test_accepts_dict_inputs():
    colors = {"primary": RED, "secondary": CYAN, "accent": "#F59E0B", "background": "#FFFFFF", "text": "#111827"}
    pinning = {"colors": {"primary": True, "secondary": True}}
    analysis = analyze_color_relationships(colors, pinning)
    assert [p.role for p in analysis.pinned_colors] == ["primary", "secondary"]
    assert analysis.pinned_colors[0].color == "#FF0000"


def test_harmony_options():
    state = get_harmony_options(system(RED, CHARTREUSE), PinningState(primary=True, secondary=True))
    assert state.pinned_color_count == 2
    assert state.has_incompatible_options
    assert len(state.harmony_options) == 6

    by_scheme = {o.scheme: o for o in state.harmony_options}
    mono = by_scheme[HarmonyScheme.MONOCHROMATIC]
    assert mono.label == "Monochromatic"
    assert not mono.is_compatible
    assert mono.incompatibility_reason
    assert by_scheme[HarmonyScheme.TETRADIC].incompatibility_reason is None
    assert HarmonyScheme.TETRADIC in state.compatible_harmonies


def test_harmony_options_without_pins():
    state = get_harmony_options(system(), PinningState())
    assert not state.has_incompatible_options
    assert state.compatible_harmonies == HarmonyScheme.concrete()
