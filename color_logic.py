"""
Harmony generation: turns a base hue and a scheme into a small set of related
colors.

Every scheme is a fixed list of (hue offset, saturation multiplier, lightness
offset) entries applied to a base saturation/lightness. The base values are
drawn from the configured ranges, so two calls with the same hue still give
different, non-flat palettes unless a fixed random source is supplied.
"""
import math

from color_config import DEFAULT_CONFIG
from color_space import Color, coerce_color, mix, desaturate
from diagnostics import report_fallback
from entropy import choice, ensure_rng, uniform
from models import HarmonyScheme

FALLBACK_HUE = 180.0

# (hue offset in degrees, saturation multiplier, lightness offset in points)
SCHEME_OFFSETS = {
    HarmonyScheme.MONOCHROMATIC: [
        (0, 1.0, 0),
        (0, 1.0, 12),
        (0, 1.0, -12),
        (0, 0.5, 25),
    ],
    HarmonyScheme.ANALOGOUS: [
        (0, 1.0, 0),
        (30, 0.8, 10),
        (-30, 0.9, -10),
        (60, 0.6, 20),
    ],
    HarmonyScheme.COMPLEMENTARY: [
        (0, 1.0, 0),
        (180, 0.8, 10),
        (0, 0.5, 25),
        (180, 0.4, 30),
    ],
    HarmonyScheme.TRIADIC: [
        (0, 1.0, 0),
        (120, 0.8, 5),
        (240, 0.9, -5),
        (0, 0.5, 20),
    ],
    HarmonyScheme.TETRADIC: [
        (0, 1.0, 0),
        (90, 0.8, 5),
        (180, 0.9, 0),
        (270, 0.7, -5),
    ],
    HarmonyScheme.SPLIT_COMPLEMENTARY: [
        (0, 1.0, 0),
        (150, 0.8, 8),
        (210, 0.9, -8),
        (0, 0.5, 25),
    ],
}


def rotate_hue(h, degrees):
    """
    Rotate hue (degrees) and wrap into [0, 360).
    """
    return (h + degrees) % 360.0


def _finite(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def get_random_hue(rng=None):
    rng = ensure_rng(rng)
    return float(int(rng.random() * 360) % 360)


def apply_scheme(base_hue, saturation, lightness, scheme):
    """
    Expand one scheme around a base (hue degrees, saturation and lightness
    in 0-1). Returns a list of Colors.
    """
    colors = []
    for hue_offset, sat_mult, light_offset in SCHEME_OFFSETS[scheme]:
        h = rotate_hue(base_hue, hue_offset)
        s = max(0.0, min(1.0, saturation * sat_mult))
        l = max(0.0, min(1.0, lightness + light_offset / 100.0))
        colors.append(Color.from_hsl(h, s, l))
    return colors


def resolve_scheme(scheme, rng=None, on_fallback=None):
    """
    Map a scheme name/enum to a concrete HarmonyScheme. RANDOM is drawn
    uniformly; unknown names become analogous.
    """
    try:
        scheme = HarmonyScheme(scheme)
    except ValueError:
        report_fallback(on_fallback, "resolve_scheme", scheme, HarmonyScheme.ANALOGOUS.value, "unknown harmony scheme")
        return HarmonyScheme.ANALOGOUS
    if scheme is HarmonyScheme.RANDOM:
        return choice(ensure_rng(rng), HarmonyScheme.concrete())
    return scheme


def generate_harmony_colors(base_hue, scheme, rng=None, saturation=None, lightness=None,
                            config=DEFAULT_CONFIG, on_fallback=None):
    """
    Generate the harmony tuple for a base hue.

    saturation/lightness (0-1) pin the base instead of drawing it from the
    configured ranges. Always returns at least three valid hex strings.
    """
    rng = ensure_rng(rng)

    if not _finite(base_hue):
        report_fallback(on_fallback, "generate_harmony_colors", base_hue, FALLBACK_HUE, "invalid base hue")
        base_hue = FALLBACK_HUE
    base_hue = base_hue % 360.0

    if scheme == HarmonyScheme.RANDOM:
        resolved = resolve_scheme(scheme, rng)
        report_fallback(on_fallback, "generate_harmony_colors", scheme, resolved.value,
                        "random scheme should be resolved by the caller")
        scheme = resolved
    else:
        scheme = resolve_scheme(scheme, rng, on_fallback)

    if saturation is None:
        saturation = uniform(rng, *config.harmony_saturation)
    elif not _finite(saturation):
        report_fallback(on_fallback, "generate_harmony_colors", saturation, config.default_saturation, "invalid saturation")
        saturation = config.default_saturation

    if lightness is None:
        lightness = uniform(rng, *config.harmony_lightness)
    elif not _finite(lightness):
        report_fallback(on_fallback, "generate_harmony_colors", lightness, config.default_lightness, "invalid lightness")
        lightness = config.default_lightness

    return [c.hex for c in apply_scheme(base_hue, saturation, lightness, scheme)]


def generate_random_color_scheme(rng=None, config=DEFAULT_CONFIG):
    rng = ensure_rng(rng)
    scheme = choice(rng, HarmonyScheme.concrete())
    return generate_harmony_colors(get_random_hue(rng), scheme, rng, config=config)


def generate_palettes(color, on_fallback=None):
    """
    All six schemes around a picked color, keeping its own saturation and
    lightness. Keys are the scheme labels used in menus.
    """
    base = coerce_color(color, on_fallback=on_fallback, operation="generate_palettes")
    h, s, l = base.hsl

    palettes = {}
    for scheme in HarmonyScheme.concrete():
        palettes[scheme.label] = [
            {"hex": c.hex, "rgb": c.rgb} for c in apply_scheme(h, s, l, scheme)
        ]
    return palettes


def _clamp_count(count, on_fallback, operation):
    if not _finite(count) or count <= 0:
        report_fallback(on_fallback, operation, count, 5, "invalid count")
        count = 5
    return max(1, min(20, int(count)))


def generate_tints(color, count=5, on_fallback=None):
    """
    Lighter variations, mixing toward white.
    """
    base = coerce_color(color, default=Color(128, 128, 128), on_fallback=on_fallback, operation="generate_tints")
    count = _clamp_count(count, on_fallback, "generate_tints")
    return [mix(base, "#FFFFFF", (i + 1) / (count + 1), space="rgb") for i in range(count)]


def generate_shades(color, count=5, on_fallback=None):
    """
    Darker variations, mixing toward black.
    """
    base = coerce_color(color, default=Color(128, 128, 128), on_fallback=on_fallback, operation="generate_shades")
    count = _clamp_count(count, on_fallback, "generate_shades")
    return [mix(base, "#000000", (i + 1) / (count + 1), space="rgb") for i in range(count)]


def generate_tones(color, count=5, on_fallback=None):
    """
    Grayed variations, each progressively less chromatic.
    """
    base = coerce_color(color, default=Color(128, 128, 128), on_fallback=on_fallback, operation="generate_tones")
    count = _clamp_count(count, on_fallback, "generate_tones")
    return [desaturate(base, (i + 1) / (count + 1)) for i in range(count)]


def generate_complete_palette(color, on_fallback=None):
    base = coerce_color(color, default=Color(128, 128, 128), on_fallback=on_fallback, operation="generate_complete_palette")
    return {
        "base": base.hex,
        "tints": generate_tints(base),
        "shades": generate_shades(base),
        "tones": generate_tones(base),
    }
