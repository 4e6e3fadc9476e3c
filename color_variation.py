"""
Palette generation: combines the harmony generator with contrast rules to
produce a complete ColorSystem, leaving every pinned role untouched.

Order of operations:
  1. base hue from the first pinned harmony role (primary > secondary > accent),
     else the caller's hue, else a random one
  2. scheme, resolving "random" among the schemes still compatible with the pins
  3. harmony colors for the unpinned primary/secondary/accent slots
  4. background tinted from the primary hue within a light or dark band
  5. text as black/white pushed to AA against the background
  6. muted/border mixed between background and text
"""
import logging
import math
from dataclasses import dataclass
from typing import Optional

from color_config import DEFAULT_CONFIG
from color_logic import generate_harmony_colors, get_random_hue, resolve_scheme
from color_space import Color, get_hue, mix
from contrast_utils import AA_NORMAL, adjust_for_contrast, get_optimal_text_color
from diagnostics import report_fallback
from entropy import choice, ensure_rng, uniform
from harmony_analysis import analyze_color_relationships, get_compatible_harmonies
from models import (DEFAULT_COLOR_SYSTEM, HARMONY_ROLES, ROLES, ColorSystem,
                    HarmonyScheme, PinningState, ThemePreference)

logger = logging.getLogger(__name__)

# camelCase keys sent by the UI state layer
_OPTION_KEYS = {
    "pinnedPrimary": "pinned_primary",
    "pinnedSecondary": "pinned_secondary",
    "pinnedAccent": "pinned_accent",
    "pinnedBackground": "pinned_background",
    "pinnedText": "pinned_text",
    "colorScheme": "color_scheme",
    "backgroundThemePreference": "background_theme_preference",
    "baseHue": "base_hue",
}


@dataclass(frozen=True)
class VariationOptions:
    pinned_primary: bool = False
    pinned_secondary: bool = False
    pinned_accent: bool = False
    pinned_background: bool = False
    pinned_text: bool = False
    color_scheme: HarmonyScheme = HarmonyScheme.RANDOM
    background_theme_preference: ThemePreference = ThemePreference.RANDOM
    base_hue: Optional[float] = None

    @classmethod
    def from_dict(cls, data):
        kwargs = {}
        for key, value in data.items():
            name = _OPTION_KEYS.get(key, key)
            if name in cls.__dataclass_fields__:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def pinned(cls, pinning, **kwargs):
        flags = {f"pinned_{role}": pinning.is_pinned(role) for role in ROLES}
        return cls(**flags, **kwargs)

    @property
    def pinning(self):
        return PinningState(**{role: bool(getattr(self, f"pinned_{role}")) for role in ROLES})


def extract_base_hue(current, pinning, on_fallback=None):
    """
    Hue of the first pinned harmony role, or None when none is pinned.
    """
    if current is None:
        return None
    for role in HARMONY_ROLES:
        if pinning.is_pinned(role):
            return get_hue(current.role(role), on_fallback)
    return None


def resolve_variation_scheme(requested, current, pinning, rng, on_fallback=None):
    """
    A concrete scheme for this run. "random" draws among the schemes the pins
    still allow; if none is allowed, analogous is used and reported.
    """
    if requested != HarmonyScheme.RANDOM:
        return resolve_scheme(requested, rng, on_fallback)

    if current is None:
        compatible = HarmonyScheme.concrete()
    else:
        compatible = get_compatible_harmonies(analyze_color_relationships(current, pinning, on_fallback))

    if not compatible:
        report_fallback(on_fallback, "resolve_variation_scheme", requested, HarmonyScheme.ANALOGOUS.value,
                        "no harmony scheme is compatible with the pinned colors")
        return HarmonyScheme.ANALOGOUS
    return choice(rng, compatible)


def map_harmony_to_roles(harmony_colors, current, pinning, anchored):
    """
    Hand harmony colors to the unpinned primary/secondary/accent slots in
    order. When a pinned color supplied the base hue it occupies slot 0, so
    the free roles start at slot 1.
    """
    index = 1 if anchored else 0
    mapped = {}
    for role in HARMONY_ROLES:
        if pinning.is_pinned(role):
            mapped[role] = current.role(role)
        else:
            mapped[role] = harmony_colors[min(index, len(harmony_colors) - 1)]
            index += 1
    return mapped


def choose_theme(preference, rng, config=DEFAULT_CONFIG, on_fallback=None):
    try:
        preference = ThemePreference(preference)
    except ValueError:
        report_fallback(on_fallback, "choose_theme", preference, ThemePreference.RANDOM.value, "unknown theme preference")
        preference = ThemePreference.RANDOM

    if preference is ThemePreference.RANDOM:
        return "light" if rng.random() < config.light_theme_bias else "dark"
    return preference.value


def generate_background(primary, theme, rng, config=DEFAULT_CONFIG, on_fallback=None):
    """
    A near-neutral background tinted toward the primary hue.
    """
    band = config.theme(theme)
    hue = get_hue(primary, on_fallback) + uniform(rng, -band.hue_variation, band.hue_variation)
    saturation = uniform(rng, band.saturation_min, band.saturation_max)
    lightness = uniform(rng, band.lightness_min, band.lightness_max)
    return Color.from_hsl(hue % 360.0, saturation, lightness).hex


def generate_text(background, config=DEFAULT_CONFIG, on_fallback=None):
    text = get_optimal_text_color(background, on_fallback)
    return adjust_for_contrast(text, background, AA_NORMAL, config=config, on_fallback=on_fallback)


def generate_muted_color(background, text, config=DEFAULT_CONFIG):
    return mix(background, text, config.muted_mix)


def generate_border_color(background, text, config=DEFAULT_CONFIG):
    return mix(background, text, config.border_mix)


def _pinned_fallback(current, pinning):
    """
    The default system with the caller's pinned roles laid over it.
    """
    roles = DEFAULT_COLOR_SYSTEM.roles()
    if current is not None:
        for role in pinning.pinned_roles():
            roles[role] = current.role(role)
    palette = dict(DEFAULT_COLOR_SYSTEM.palette)
    palette.update(roles)
    return ColorSystem(palette=palette, **roles)


def _generate(current, options, rng, config, on_fallback):
    pinning = options.pinning
    if current is None and pinning.pinned_roles():
        report_fallback(on_fallback, "generate_color_variation", pinning.pinned_roles(), [],
                        "pinned flags ignored without a current color system")
        pinning = PinningState()

    base_hue = extract_base_hue(current, pinning, on_fallback)
    anchored = base_hue is not None
    if base_hue is None:
        base_hue = options.base_hue
        if base_hue is not None and (isinstance(base_hue, bool) or not isinstance(base_hue, (int, float))
                                     or not math.isfinite(base_hue)):
            report_fallback(on_fallback, "generate_color_variation", base_hue, "random hue", "invalid base hue")
            base_hue = None
        if base_hue is None:
            base_hue = get_random_hue(rng)

    scheme = resolve_variation_scheme(options.color_scheme, current, pinning, rng, on_fallback)
    harmony = generate_harmony_colors(base_hue, scheme, rng, config=config, on_fallback=on_fallback)
    mapped = map_harmony_to_roles(harmony, current, pinning, anchored)

    if pinning.background:
        background = current.background
    else:
        theme = choose_theme(options.background_theme_preference, rng, config, on_fallback)
        background = generate_background(mapped["primary"], theme, rng, config, on_fallback)

    if pinning.text:
        text = current.text
    else:
        text = generate_text(background, config, on_fallback)

    logger.debug("variation: hue=%.1f scheme=%s pinned=%s", base_hue, scheme.value, pinning.pinned_roles())

    roles = dict(mapped, background=background, text=text)
    palette = dict(roles)
    palette["muted"] = generate_muted_color(background, text, config)
    palette["border"] = generate_border_color(background, text, config)
    return ColorSystem(palette=palette, **roles)


def generate_color_variation(current=None, options=None, rng=None, config=DEFAULT_CONFIG, on_fallback=None):
    """
    Generate a new ColorSystem around the current one.

    current: the ColorSystem (or its dict form) being iterated on, or None.
    options: VariationOptions or the UI's camelCase dict.
    rng: random source; pass a seeded random.Random or SequenceRandom for
    reproducible output.

    Never raises: if generation itself fails, the default palette is returned
    with the pinned roles still applied.
    """
    rng = ensure_rng(rng)
    if options is None:
        options = VariationOptions()
    elif isinstance(options, dict):
        options = VariationOptions.from_dict(options)
    if isinstance(current, dict):
        current = ColorSystem.from_dict(current)

    try:
        return _generate(current, options, rng, config, on_fallback)
    except (ValueError, TypeError, ArithmeticError) as e:
        report_fallback(on_fallback, "generate_color_variation", current, "default palette", str(e))
        return _pinned_fallback(current, options.pinning)


def get_random_color_variation(rng=None, config=DEFAULT_CONFIG):
    return generate_color_variation(rng=rng, config=config)
