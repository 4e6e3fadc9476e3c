"""
Which harmony schemes can still be reached once some colors are pinned.

The checks are purely geometric: pinned hues must plausibly sit on the
scheme's pattern around the color wheel, within HUE_TOLERANCE degrees.
"""
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, List, Optional

from color_space import get_hue
from models import ROLES, ColorSystem, HarmonyScheme, PinningState

HUE_TOLERANCE = 20.0
MONOCHROMATIC_RANGE = 30.0
ANALOGOUS_RANGE = 60.0


@dataclass(frozen=True)
class PinnedColor:
    role: str
    color: str
    hue: float


@dataclass(frozen=True)
class HueRelationship:
    color1: str
    color2: str
    hue1: float
    hue2: float
    angle_difference: float


@dataclass(frozen=True)
class ColorRelationshipAnalysis:
    pinned_colors: List[PinnedColor] = field(default_factory=list)
    relationships: List[HueRelationship] = field(default_factory=list)
    pattern_compatibility: Dict[HarmonyScheme, bool] = field(default_factory=dict)

    @property
    def hues(self):
        return [p.hue for p in self.pinned_colors]


@dataclass(frozen=True)
class HarmonyCompatibilityResult:
    is_compatible: bool
    reason: Optional[str] = None
    educational_tooltip: Optional[str] = None


@dataclass(frozen=True)
class HarmonyOption:
    scheme: HarmonyScheme
    label: str
    is_compatible: bool
    tooltip: str
    incompatibility_reason: Optional[str] = None


@dataclass(frozen=True)
class HarmonyCompatibilityState:
    analysis: ColorRelationshipAnalysis
    compatible_harmonies: List[HarmonyScheme]
    harmony_options: List[HarmonyOption]
    has_incompatible_options: bool
    pinned_color_count: int


def calculate_hue_distance(hue1, hue2):
    """
    Shortest angular distance between two hues, 0-180.
    """
    diff = abs(hue2 - hue1) % 360.0
    if diff > 180:
        diff = 360 - diff
    return diff


def calculate_color_angle(color1, color2, on_fallback=None):
    return calculate_hue_distance(get_hue(color1, on_fallback), get_hue(color2, on_fallback))


def get_hue_range(hues):
    """
    Spread of a set of hues, wraparound-aware: {350, 10} spans 20, not 340.
    """
    if len(hues) <= 1:
        return 0.0
    ordered = sorted(h % 360.0 for h in hues)
    direct = ordered[-1] - ordered[0]
    return min(direct, 360.0 - direct)


def _near(distance, *targets):
    return any(abs(distance - t) <= HUE_TOLERANCE for t in targets)


def _pairwise(hues):
    return [calculate_hue_distance(a, b) for a, b in combinations(hues, 2)]


def can_form_monochromatic(hues):
    return get_hue_range(hues) <= MONOCHROMATIC_RANGE


def can_form_analogous(hues):
    return get_hue_range(hues) <= ANALOGOUS_RANGE


def can_form_complementary(hues):
    if len(hues) <= 1:
        return True
    # Every pinned hue needs some other pinned hue roughly opposite it
    for i, h1 in enumerate(hues):
        if not any(_near(calculate_hue_distance(h1, h2), 180) for j, h2 in enumerate(hues) if j != i):
            return False
    return True


def can_form_triadic(hues):
    if len(hues) <= 1:
        return True
    if len(hues) == 2:
        return _near(calculate_hue_distance(*hues), 120)
    if len(hues) == 3:
        return sum(1 for d in _pairwise(hues) if _near(d, 120)) >= 2
    return any(can_form_triadic(list(subset)) for subset in combinations(hues, 3))


def can_form_tetradic(hues):
    if len(hues) <= 1:
        return True
    if len(hues) == 2:
        return _near(calculate_hue_distance(*hues), 90, 180)
    if len(hues) == 3:
        return any(_near(d, 90, 180) for d in _pairwise(hues))
    if len(hues) == 4:
        return sum(1 for d in _pairwise(hues) if _near(d, 90, 180)) >= 3
    # TODO: check 4-color subsets instead of accepting every larger set
    return True


def can_form_split_complementary(hues):
    if len(hues) <= 1:
        return True
    if len(hues) <= 3:
        return any(_near(d, 60, 150) for d in _pairwise(hues))
    return True


PATTERN_CHECKS = {
    HarmonyScheme.MONOCHROMATIC: can_form_monochromatic,
    HarmonyScheme.ANALOGOUS: can_form_analogous,
    HarmonyScheme.COMPLEMENTARY: can_form_complementary,
    HarmonyScheme.TRIADIC: can_form_triadic,
    HarmonyScheme.TETRADIC: can_form_tetradic,
    HarmonyScheme.SPLIT_COMPLEMENTARY: can_form_split_complementary,
}

TOOLTIPS = {
    HarmonyScheme.MONOCHROMATIC: (
        "Monochromatic schemes create harmony through variations in lightness and saturation of a single hue.",
        "Monochromatic schemes use variations of a single hue (within ~30°). "
        "Your pinned colors span multiple hues on the color wheel.",
    ),
    HarmonyScheme.ANALOGOUS: (
        "Analogous schemes create serene, comfortable designs using colors that sit next to each other on the color wheel.",
        "Analogous colors are adjacent on the color wheel (typically within 60°). "
        "Your pinned colors span too wide a range.",
    ),
    HarmonyScheme.COMPLEMENTARY: (
        "Complementary colors create vibrant contrast by using colors from opposite sides of the color wheel.",
        "Complementary colors sit directly opposite each other on the color wheel (180° apart). "
        "Your pinned colors don't form complementary relationships.",
    ),
    HarmonyScheme.TRIADIC: (
        "Triadic schemes create balanced, vibrant palettes using three colors equally spaced on the color wheel.",
        "Triadic schemes use three colors evenly spaced around the color wheel (120° apart). "
        "Your pinned colors don't fit this pattern.",
    ),
    HarmonyScheme.TETRADIC: (
        "Tetradic schemes offer rich color variety using four colors that form a rectangle on the color wheel.",
        "Tetradic (rectangle) schemes use four colors forming two complementary pairs. "
        "Your pinned colors don't fit this geometric pattern.",
    ),
    HarmonyScheme.SPLIT_COMPLEMENTARY: (
        "Split-complementary schemes offer high contrast like complementary colors but with less tension, "
        "using a base color plus two colors adjacent to its complement.",
        "Split-complementary schemes use a base color plus the two colors adjacent to its complement "
        "(150° and 210° from the base). Your pinned colors don't fit this pattern.",
    ),
}

DESCRIPTIONS = {
    HarmonyScheme.MONOCHROMATIC: "Uses variations of a single hue for harmonious, calming designs.",
    HarmonyScheme.ANALOGOUS: "Uses colors adjacent on the color wheel for naturally pleasing combinations.",
    HarmonyScheme.COMPLEMENTARY: "Uses opposite colors for high contrast and vibrant designs.",
    HarmonyScheme.TRIADIC: "Uses three evenly spaced colors for balanced, lively palettes.",
    HarmonyScheme.TETRADIC: "Uses four colors in rectangle formation for rich, diverse schemes.",
    HarmonyScheme.SPLIT_COMPLEMENTARY: "Uses a base color plus two adjacent to its complement for softer contrast.",
}

DEFAULT_INCOMPATIBILITY_REASON = "This harmony type is not compatible with your pinned colors."


def analyze_color_relationships(colors, pinning, on_fallback=None):
    """
    Collect pinned roles with their hues, every pairwise hue angle, and
    whether each scheme's pattern can still accommodate them.
    """
    if isinstance(colors, dict):
        colors = ColorSystem.from_dict(colors)
    if isinstance(pinning, dict):
        pinning = PinningState.from_dict(pinning)

    pinned = []
    for role in ROLES:
        if pinning.is_pinned(role):
            color = colors.role(role)
            pinned.append(PinnedColor(role, color, get_hue(color, on_fallback)))

    relationships = [
        HueRelationship(a.color, b.color, a.hue, b.hue, calculate_hue_distance(a.hue, b.hue))
        for a, b in combinations(pinned, 2)
    ]

    hues = [p.hue for p in pinned]
    compatibility = {scheme: check(hues) for scheme, check in PATTERN_CHECKS.items()}
    return ColorRelationshipAnalysis(pinned, relationships, compatibility)


def is_harmony_compatible(scheme, analysis):
    scheme = HarmonyScheme(scheme)
    if scheme is HarmonyScheme.RANDOM or len(analysis.pinned_colors) <= 1:
        return HarmonyCompatibilityResult(True)

    compatible_tip, incompatible_tip = TOOLTIPS[scheme]
    if analysis.pattern_compatibility.get(scheme, True):
        return HarmonyCompatibilityResult(True, educational_tooltip=compatible_tip)

    if scheme in (HarmonyScheme.MONOCHROMATIC, HarmonyScheme.ANALOGOUS):
        span = get_hue_range(analysis.hues)
        reason = f"Pinned colors span {span:.0f}° which is too wide for {scheme.value} harmony"
    elif scheme is HarmonyScheme.COMPLEMENTARY:
        reason = "Pinned colors cannot form valid complementary pairs"
    else:
        reason = f"Pinned colors cannot form a valid {scheme.value} pattern"
    return HarmonyCompatibilityResult(False, reason, incompatible_tip)


def get_compatible_harmonies(analysis):
    return [s for s in HarmonyScheme.concrete() if is_harmony_compatible(s, analysis).is_compatible]


def generate_harmony_tooltip(scheme, analysis):
    result = is_harmony_compatible(scheme, analysis)
    if result.educational_tooltip:
        return result.educational_tooltip
    return DESCRIPTIONS.get(HarmonyScheme(scheme), "")


def generate_incompatibility_reason(scheme, analysis):
    return is_harmony_compatible(scheme, analysis).reason or DEFAULT_INCOMPATIBILITY_REASON


def get_harmony_options(colors, pinning, on_fallback=None):
    """
    Everything a scheme picker needs to enable/disable its entries.
    """
    analysis = analyze_color_relationships(colors, pinning, on_fallback)
    options = []
    for scheme in HarmonyScheme.concrete():
        result = is_harmony_compatible(scheme, analysis)
        options.append(HarmonyOption(
            scheme=scheme,
            label=scheme.label,
            is_compatible=result.is_compatible,
            tooltip=generate_harmony_tooltip(scheme, analysis),
            incompatibility_reason=None if result.is_compatible else generate_incompatibility_reason(scheme, analysis),
        ))
    return HarmonyCompatibilityState(
        analysis=analysis,
        compatible_harmonies=[o.scheme for o in options if o.is_compatible],
        harmony_options=options,
        has_incompatible_options=any(not o.is_compatible for o in options),
        pinned_color_count=len(analysis.pinned_colors),
    )
