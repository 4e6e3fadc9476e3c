import re

import pytest

import semantic_roles
from accessibility import Priority
from color_space import get_hue
from contrast_utils import calculate_contrast
from diagnostics import FallbackLog
from models import DEFAULT_COLOR_SYSTEM, ColorSystem
from semantic_roles import (DARK_BACKGROUND, FALLBACK_SEMANTIC_PALETTE,
                            RolePreferences, adjust_color_for_role,
                            assign_color_roles, complementary_color,
                            generate_semantic_palette, get_most_vibrant,
                            suggest_color_improvements)

HEX = re.compile(r"^#[0-9A-F]{6}$")
RGB = ["#FF0000", "#00FF00", "#0000FF"]


def test_semantic_palette_keeps_harmony_order():
    palette = generate_semantic_palette(RGB)
    assert (palette.primary, palette.secondary, palette.accent) == tuple(RGB)
    assert palette.background == "#FFFFFF"
    assert palette.text == "#000000"
    for color in palette.states().values():
        assert calculate_contrast(color, palette.background) >= 3.0
    # Blue info already clears 3:1 on white
    assert palette.info == "#3B82F6"
    assert palette.success != "#10B981"


def test_emphasize_primary_picks_most_saturated():
    palette = generate_semantic_palette(["#808080", "#3B82F6", "#FF0000"], {"emphasizePrimary": True})
    assert palette.primary == "#FF0000"
    assert palette.secondary == "#808080"
    assert palette.accent == "#3B82F6"


def test_dark_preference():
    palette = generate_semantic_palette(RGB, RolePreferences(prefer_light_theme=False))
    assert palette.background == DARK_BACKGROUND
    assert palette.text == "#FFFFFF"


def test_repeated_harmony_colors_get_derived_roles():
    palette = generate_semantic_palette(["#FF0000"] * 3)
    assert palette.primary == "#FF0000"
    assert HEX.match(palette.secondary) and palette.secondary != "#FF0000"
    assert get_hue(palette.accent) == pytest.approx(30, abs=2)


def test_too_few_colors_falls_back():
    log = FallbackLog()
    palette = generate_semantic_palette(["#FF0000", "nope", "#00FF00"], on_fallback=log)
    assert palette == FALLBACK_SEMANTIC_PALETTE
    assert log.operations() == ["generate_semantic_palette", "generate_semantic_palette"]


def test_semantic_palette_as_color_system():
    system = generate_semantic_palette(RGB).to_color_system()
    assert isinstance(system, ColorSystem)
    assert set(system.palette) == {"success", "warning", "error", "info"}


def test_most_vibrant():
    assert get_most_vibrant(["#808080", "#FF0000", "#FE0000"]) == "#FF0000"
    assert get_most_vibrant(["#808080", "#909090"]) == "#808080"


def test_adjust_color_for_role():
    assert adjust_color_for_role("#3B82F6", "secondary") != "#3B82F6"
    assert get_hue(adjust_color_for_role("#00FF00", "accent")) == pytest.approx(150, abs=2)


def test_assign_color_roles_rationale():
    assignment = assign_color_roles(RGB, {"highContrast": True})
    assert assignment.primary == "#FF0000"
    assert assignment.rationale[0] == "Primary color chosen for dark appearance"
    assert "21.0:1" in assignment.rationale[2]
    assert assignment.rationale[-1] == "High contrast mode enabled for enhanced accessibility"


def test_high_contrast_holds_text_to_aaa():
    palette = generate_semantic_palette(RGB, RolePreferences(prefer_light_theme=False, high_contrast=True))
    assert calculate_contrast(palette.text, palette.background) >= 7.0


def test_complementary_color():
    assert complementary_color("#FF0000") == "#00FFFF"


def test_no_improvements_for_sound_system():
    assert suggest_color_improvements(DEFAULT_COLOR_SYSTEM) == []


def test_improvements_for_unreadable_text():
    colors = ColorSystem("#3B82F6", "#10B981", "#F59E0B", "#FFFFFF", "#EEEEEE")
    improvements = suggest_color_improvements(colors)
    assert [i.type for i in improvements] == ["contrast", "accessibility"]

    contrast = improvements[0]
    assert contrast.priority is Priority.HIGH
    assert contrast.current_value == "#EEEEEE"
    assert calculate_contrast(contrast.suggested_value, "#FFFFFF") >= 4.5

    assert improvements[1].suggested_value == "#000000"


def test_improvements_for_aa_only_text_are_medium():
    colors = ColorSystem("#3B82F6", "#10B981", "#F59E0B", "#FFFFFF", "#767676")
    improvements = suggest_color_improvements(colors.to_dict())
    assert [i.priority for i in improvements] == [Priority.MEDIUM]


def test_harmony_improvement(monkeypatch):
    monkeypatch.setattr(semantic_roles, "assess_color_harmony", lambda colors: 0.5)
    improvements = suggest_color_improvements(DEFAULT_COLOR_SYSTEM)
    assert improvements[0].type == "harmony"
    assert improvements[0].current_value == DEFAULT_COLOR_SYSTEM.secondary
    assert improvements[0].suggested_value == complementary_color(DEFAULT_COLOR_SYSTEM.primary)
