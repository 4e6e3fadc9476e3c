"""
WCAG 2.1 contrast ratios, compliance checks and contrast-driven adjustment.
"""
import colorsys
import logging
from dataclasses import dataclass

from color_space import (BLACK, WHITE, Color, InvalidColorError, coerce_color,
                         parse_color)
from color_config import DEFAULT_CONFIG
from diagnostics import report_fallback

logger = logging.getLogger(__name__)

AA_NORMAL = 4.5
AA_LARGE = 3.0
AAA_NORMAL = 7.0
AAA_LARGE = 4.5

# Luminance considered fully saturated when adjusting toward black or white
LUMINANCE_FLOOR = 0.001
LUMINANCE_CEILING = 0.999


@dataclass(frozen=True)
class ContrastResult:
    ratio: float
    level: str  # "AAA" | "AA" | "fail"
    is_large_text: bool = False


def contrast_ratio(fg, bg):
    """
    Contrast ratio between two parsed Colors.
    """
    l1 = fg.luminance
    l2 = bg.luminance
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def calculate_contrast(fg, bg, on_fallback=None):
    """
    Returns contrast ratio (float, 1-21) between two colors.
    Malformed input yields 1.0.
    """
    try:
        fg_color = parse_color(fg)
        bg_color = parse_color(bg)
    except InvalidColorError as e:
        report_fallback(on_fallback, "calculate_contrast", (fg, bg), 1.0, str(e))
        return 1.0
    return contrast_ratio(fg_color, bg_color)


def required_ratio(level="AA", is_large_text=False):
    if level == "AAA":
        return AAA_LARGE if is_large_text else AAA_NORMAL
    return AA_LARGE if is_large_text else AA_NORMAL


def check_aa_compliance(fg, bg, is_large_text=False, on_fallback=None):
    return calculate_contrast(fg, bg, on_fallback) >= required_ratio("AA", is_large_text)


def check_aaa_compliance(fg, bg, is_large_text=False, on_fallback=None):
    return calculate_contrast(fg, bg, on_fallback) >= required_ratio("AAA", is_large_text)


def get_contrast_level(fg, bg, is_large_text=False, on_fallback=None):
    ratio = calculate_contrast(fg, bg, on_fallback)
    if ratio >= required_ratio("AAA", is_large_text):
        level = "AAA"
    elif ratio >= required_ratio("AA", is_large_text):
        level = "AA"
    else:
        level = "fail"
    return ContrastResult(ratio, level, is_large_text)


def _best_of_black_white(bg):
    if contrast_ratio(BLACK, bg) > contrast_ratio(WHITE, bg):
        return BLACK
    return WHITE


def get_optimal_text_color(bg, on_fallback=None):
    """
    Black or white, whichever has more contrast against bg.
    """
    bg_color = coerce_color(bg, default=WHITE, on_fallback=on_fallback, operation="get_optimal_text_color")
    return _best_of_black_white(bg_color).hex


def get_accessible_text_color(bg, preferred=None, on_fallback=None):
    """
    Keep the preferred text color if it already passes AA, else black/white.
    """
    if preferred is not None and check_aa_compliance(preferred, bg, on_fallback=on_fallback):
        return coerce_color(preferred).hex
    return get_optimal_text_color(bg, on_fallback)


def adjust_for_contrast(fg, bg, target_ratio=AA_NORMAL, config=DEFAULT_CONFIG, on_fallback=None):
    """
    Darken or lighten fg in fixed Lab-lightness steps until it reaches
    target_ratio against bg.

    The direction follows bg: light backgrounds (luminance > 0.5) push fg
    darker, dark ones push it lighter. Stops at the step cap or when fg
    luminance saturates; if the target is still missed, returns whichever of
    black/white contrasts better with bg.
    """
    fg_color = coerce_color(fg, on_fallback=on_fallback, operation="adjust_for_contrast")
    bg_color = coerce_color(bg, default=WHITE, on_fallback=on_fallback, operation="adjust_for_contrast")

    if contrast_ratio(fg_color, bg_color) >= target_ratio:
        return fg_color.hex

    darken = bg_color.luminance > 0.5
    step = -config.contrast_step if darken else config.contrast_step
    L, a, b = fg_color.lab

    adjusted = fg_color
    for _ in range(config.contrast_max_steps):
        L = max(0.0, min(100.0, L + step))
        adjusted = Color.from_lab(L, a, b)
        if contrast_ratio(adjusted, bg_color) >= target_ratio:
            return adjusted.hex
        lum = adjusted.luminance
        if (darken and lum <= LUMINANCE_FLOOR) or (not darken and lum >= LUMINANCE_CEILING):
            break

    fallback = _best_of_black_white(bg_color)
    logger.debug("adjust_for_contrast: %s on %s missed %.2f, using %s", fg_color.hex, bg_color.hex, target_ratio, fallback.hex)
    return fallback.hex


def generate_accessible_palette(bg, colors, target_ratio=AA_NORMAL, on_fallback=None):
    return [adjust_for_contrast(c, bg, target_ratio, on_fallback=on_fallback) for c in colors]


# Conventional UI state hues before contrast adjustment
SEMANTIC_BASE_COLORS = {
    "primary": "#3B82F6",
    "secondary": "#6B7280",
    "success": "#10B981",
    "warning": "#F59E0B",
    "error": "#EF4444",
    "info": "#06B6D4",
}


def generate_semantic_colors(bg, target_ratio=AA_NORMAL, config=DEFAULT_CONFIG, on_fallback=None):
    """
    Standard semantic colors (primary, secondary, success, warning, error,
    info), each pushed to target_ratio against bg.
    """
    return {
        name: adjust_for_contrast(base, bg, target_ratio, config=config, on_fallback=on_fallback)
        for name, base in SEMANTIC_BASE_COLORS.items()
    }


def validate_palette_contrast(colors, min_ratio=AA_LARGE, on_fallback=None):
    """
    Pairs of palette colors whose mutual contrast falls under min_ratio.
    """
    issues = []
    for i in range(len(colors)):
        for j in range(i + 1, len(colors)):
            ratio = calculate_contrast(colors[i], colors[j], on_fallback)
            if ratio < min_ratio:
                issues.append({"color1": colors[i], "color2": colors[j], "ratio": ratio})
    return {"is_valid": not issues, "issues": issues}


def suggest_passing_color(fg, bg, target_ratio=AA_NORMAL, on_fallback=None):
    """
    Adjusts FG lightness (hue and saturation kept) to meet target_ratio
    against BG, choosing the passing lightness closest to the original.
    Returns suggested hex string, or fg unchanged if nothing passes.
    """
    try:
        fg_color = parse_color(fg)
        bg_color = parse_color(bg)
    except InvalidColorError as e:
        report_fallback(on_fallback, "suggest_passing_color", (fg, bg), fg, str(e))
        return fg

    h, l, s = colorsys.rgb_to_hls(*(c / 255.0 for c in fg_color.rgb))

    def passes_at(lightness):
        r, g, b = colorsys.hls_to_rgb(h, lightness, s)
        candidate = Color(int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))
        if contrast_ratio(candidate, bg_color) >= target_ratio:
            return candidate
        return None

    # Scan outward from the original lightness in 1% steps, both directions
    for k in range(101):
        delta = k / 100.0
        for lightness in (l + delta, l - delta):
            if 0.0 <= lightness <= 1.0:
                found = passes_at(lightness)
                if found is not None:
                    return found.hex

    return fg_color.hex
