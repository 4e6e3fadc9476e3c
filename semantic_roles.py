"""
Semantic role assignment: turns a list of harmony colors into a full role
palette (primary, secondary, accent, background, text) plus UI state colors,
and suggests concrete replacements for a system that fails usability checks.
"""
from dataclasses import dataclass, field
from typing import List

from accessibility import Priority, assess_color_harmony, validate_color_system
from color_config import DEFAULT_CONFIG
from color_space import (Color, InvalidColorError, desaturate, parse_color,
                         saturate)
from contrast_utils import (AA_LARGE, AA_NORMAL, AAA_NORMAL, adjust_for_contrast,
                            calculate_contrast, check_aa_compliance,
                            get_optimal_text_color)
from diagnostics import report_fallback
from models import ColorSystem

STATE_ROLES = ("success", "warning", "error", "info")

# Info is blue here, unlike the cyan of SEMANTIC_BASE_COLORS
STATE_BASE_COLORS = {
    "success": "#10B981",
    "warning": "#F59E0B",
    "error": "#EF4444",
    "info": "#3B82F6",
}

LIGHT_BACKGROUND = "#FFFFFF"
DARK_BACKGROUND = "#0F172A"

_PREFERENCE_KEYS = {
    "preferLightTheme": "prefer_light_theme",
    "emphasizePrimary": "emphasize_primary",
    "highContrast": "high_contrast",
}


@dataclass(frozen=True)
class RolePreferences:
    prefer_light_theme: bool = True
    # Pick the most saturated harmony color as primary instead of the first
    emphasize_primary: bool = False
    # Text held to AAA instead of AA
    high_contrast: bool = False

    @classmethod
    def from_dict(cls, data):
        kwargs = {}
        for key, value in data.items():
            name = _PREFERENCE_KEYS.get(key, key)
            if name in cls.__dataclass_fields__:
                kwargs[name] = bool(value)
        return cls(**kwargs)


@dataclass(frozen=True)
class SemanticPalette:
    primary: str
    secondary: str
    accent: str
    background: str
    text: str
    success: str
    warning: str
    error: str
    info: str

    def states(self):
        return {role: getattr(self, role) for role in STATE_ROLES}

    def to_color_system(self):
        return ColorSystem(
            primary=self.primary,
            secondary=self.secondary,
            accent=self.accent,
            background=self.background,
            text=self.text,
            palette=self.states(),
        )


@dataclass(frozen=True)
class ColorRoleAssignment:
    primary: str
    secondary: str
    accent: str
    background: str
    text: str
    rationale: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ColorImprovement:
    type: str  # "contrast" | "harmony" | "accessibility"
    priority: Priority
    description: str
    current_value: str
    suggested_value: str
    impact: str


FALLBACK_SEMANTIC_PALETTE = SemanticPalette(
    primary="#3B82F6",
    secondary="#64748B",
    accent="#F59E0B",
    background="#FFFFFF",
    text="#000000",
    success="#10B981",
    warning="#F59E0B",
    error="#EF4444",
    info="#3B82F6",
)


def _preferences(preferences):
    if preferences is None:
        return RolePreferences()
    if isinstance(preferences, dict):
        return RolePreferences.from_dict(preferences)
    return preferences


def _valid_colors(colors, operation, on_fallback):
    valid = []
    for value in colors:
        try:
            valid.append(parse_color(value).hex)
        except InvalidColorError as e:
            report_fallback(on_fallback, operation, value, None, str(e))
    return valid


def get_most_vibrant(colors):
    """
    The color with the highest HSL saturation; the earliest one wins ties.
    """
    best = colors[0]
    for color in colors[1:]:
        if parse_color(color).hsl[1] > parse_color(best).hsl[1]:
            best = color
    return best


def adjust_color_for_role(base, role):
    """
    Derive a stand-in when the harmony ran out of distinct colors: a muted
    secondary, or an accent that is more saturated and 30° along the wheel.
    """
    if role == "secondary":
        return desaturate(base, 0.3)
    _, s, l = parse_color(saturate(base, 0.2)).hsl
    return Color.from_hsl(parse_color(base).hue + 30, s, l).hex


def generate_semantic_palette(harmony_colors, preferences=None, config=DEFAULT_CONFIG, on_fallback=None):
    """
    Assign harmony colors to roles and add contrast-checked state colors.

    Needs at least three valid harmony colors; with fewer, the fallback
    palette is returned and reported.
    """
    preferences = _preferences(preferences)
    colors = _valid_colors(harmony_colors, "generate_semantic_palette", on_fallback)
    if len(colors) < 3:
        report_fallback(on_fallback, "generate_semantic_palette", harmony_colors, "fallback palette",
                        "need at least 3 harmony colors")
        return FALLBACK_SEMANTIC_PALETTE

    primary = get_most_vibrant(colors) if preferences.emphasize_primary else colors[0]
    remaining = [c for c in colors if c != primary]
    secondary = remaining[0] if remaining else adjust_color_for_role(primary, "secondary")
    accent = remaining[1] if len(remaining) > 1 else adjust_color_for_role(primary, "accent")

    background = LIGHT_BACKGROUND if preferences.prefer_light_theme else DARK_BACKGROUND
    target = AAA_NORMAL if preferences.high_contrast else AA_NORMAL
    text = adjust_for_contrast(get_optimal_text_color(background), background, target, config=config)

    # State colors only need to read as UI elements, not body text
    states = {
        role: adjust_for_contrast(base, background, AA_LARGE, config=config, on_fallback=on_fallback)
        for role, base in STATE_BASE_COLORS.items()
    }
    return SemanticPalette(
        primary=primary,
        secondary=secondary,
        accent=accent,
        background=background,
        text=text,
        **states,
    )


def assign_color_roles(harmony_colors, preferences=None, config=DEFAULT_CONFIG, on_fallback=None):
    preferences = _preferences(preferences)
    palette = generate_semantic_palette(harmony_colors, preferences, config, on_fallback)

    primary = parse_color(palette.primary)
    rationale = [
        f"Primary color chosen for {'light' if primary.luminance > 0.5 else 'dark'} appearance",
        f"Background selected to provide {calculate_contrast(palette.primary, palette.background):.1f}:1 "
        f"contrast with primary",
        f"Text color optimized for readability "
        f"({calculate_contrast(palette.text, palette.background):.1f}:1 contrast)",
    ]
    if preferences.high_contrast:
        rationale.append("High contrast mode enabled for enhanced accessibility")

    return ColorRoleAssignment(
        primary=palette.primary,
        secondary=palette.secondary,
        accent=palette.accent,
        background=palette.background,
        text=palette.text,
        rationale=rationale,
    )


def complementary_color(color):
    h, s, l = parse_color(color).hsl
    return Color.from_hsl(h + 180, s, l).hex


def suggest_color_improvements(colors, config=DEFAULT_CONFIG):
    """
    Concrete replacement values for a ColorSystem: contrast fixes for each
    failing pair, a complementary secondary when the hues clash, and a
    black/white text color when body text misses AA.
    """
    if isinstance(colors, dict):
        colors = ColorSystem.from_dict(colors)

    improvements = []
    for issue in validate_color_system(colors, config).issues:
        if issue.type != "contrast" or len(issue.colors) != 2:
            continue
        fg, bg = issue.colors
        adjusted = adjust_for_contrast(fg, bg, AA_NORMAL, config=config)
        improvements.append(ColorImprovement(
            type="contrast",
            priority=Priority.HIGH if issue.severity == "error" else Priority.MEDIUM,
            description="Improve contrast ratio for better accessibility",
            current_value=fg,
            suggested_value=adjusted,
            impact=f"Increases contrast from {calculate_contrast(fg, bg):.1f}:1 "
                   f"to {calculate_contrast(adjusted, bg):.1f}:1",
        ))

    if assess_color_harmony([colors.primary, colors.secondary, colors.accent]) < 0.7:
        improvements.append(ColorImprovement(
            type="harmony",
            priority=Priority.MEDIUM,
            description="Improve color harmony between primary and secondary colors",
            current_value=colors.secondary,
            suggested_value=complementary_color(colors.primary),
            impact="Creates better visual harmony and professional appearance",
        ))

    if not check_aa_compliance(colors.text, colors.background):
        improvements.append(ColorImprovement(
            type="accessibility",
            priority=Priority.HIGH,
            description="Improve text readability for WCAG AA compliance",
            current_value=colors.text,
            suggested_value=get_optimal_text_color(colors.background),
            impact="Ensures text is readable for users with visual impairments",
        ))

    return improvements
