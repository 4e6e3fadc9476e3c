"""
Accessibility report for a ColorSystem: WCAG AA/AAA buckets, simulated
color-vision deficiency checks, a 0-100 composite score and prioritized
improvement suggestions.
"""
from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations
from typing import List, Optional

from PIL import Image

from color_config import DEFAULT_CONFIG
from color_space import (Color, InvalidColorError, coerce_color, delta_e,
                         get_hue, parse_color)
from contrast_utils import (AA_LARGE, AA_NORMAL, AAA_NORMAL, calculate_contrast,
                            check_aa_compliance, check_aaa_compliance,
                            suggest_passing_color)
from diagnostics import report_fallback
from models import HARMONY_ROLES, ColorSystem



class VisionDeficiency(str, Enum):
    PROTANOPIA = "protanopia"
    DEUTERANOPIA = "deuteranopia"
    TRITANOPIA = "tritanopia"


class Severity(str, Enum):
    NONE = "none"
    MINOR = "minor"
    MAJOR = "major"
    SEVERE = "severe"


class Priority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Row-major RGB mixing matrices, applied to raw (gamma-encoded) channels
DEFICIENCY_MATRICES = {
    VisionDeficiency.PROTANOPIA: (
        (0.567, 0.433, 0.0),
        (0.558, 0.442, 0.0),
        (0.0, 0.242, 0.758),
    ),
    VisionDeficiency.DEUTERANOPIA: (
        (0.625, 0.375, 0.0),
        (0.7, 0.3, 0.0),
        (0.0, 0.3, 0.7),
    ),
    VisionDeficiency.TRITANOPIA: (
        (0.95, 0.05, 0.0),
        (0.0, 0.433, 0.567),
        (0.0, 0.475, 0.525),
    ),
}

# Share of users affected, in percent
PREVALENCE = {
    VisionDeficiency.PROTANOPIA: 1.0,
    VisionDeficiency.DEUTERANOPIA: 6.0,
    VisionDeficiency.TRITANOPIA: 0.1,
}

SEVERITY_SCORES = {
    Severity.NONE: 100,
    Severity.MINOR: 80,
    Severity.MAJOR: 50,
    Severity.SEVERE: 20,
}

PRIORITY_ORDER = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}

NORMAL_TEXT = "normal-text"
LARGE_TEXT = "large-text"
UI_ELEMENT = "ui-element"

HARMONIOUS_ANGLES = (30, 60, 90, 120, 150, 180)


@dataclass(frozen=True)
class ColorPair:
    foreground: str
    background: str
    ratio: float
    context: str

    @property
    def is_large_text(self):
        return self.context == LARGE_TEXT


@dataclass(frozen=True)
class ComplianceReport:
    passes: List[ColorPair] = field(default_factory=list)
    fails: List[ColorPair] = field(default_factory=list)
    warnings: List[ColorPair] = field(default_factory=list)


@dataclass(frozen=True)
class ColorBlindnessTest:
    distinguishable: bool
    issues: List[str]
    severity: Severity


@dataclass(frozen=True)
class ColorBlindnessReport:
    protanopia: ColorBlindnessTest
    deuteranopia: ColorBlindnessTest
    tritanopia: ColorBlindnessTest

    def by_type(self):
        return {d: getattr(self, d.value) for d in VisionDeficiency}


@dataclass(frozen=True)
class ScoreBreakdown:
    wcag_aa: int
    wcag_aaa: int
    protanopia: int
    deuteranopia: int
    tritanopia: int
    general_usability: int


@dataclass(frozen=True)
class AccessibilityScore:
    total: int
    contrast: int
    color_blindness: int
    usability: int
    breakdown: ScoreBreakdown


@dataclass(frozen=True)
class AccessibilityImprovement:
    type: str  # "contrast" | "color-blindness" | "usability" | "wcag"
    priority: Priority
    title: str
    description: str
    current_issue: str
    suggested_fix: str
    impact: str
    colors: Optional[List[str]] = None


@dataclass(frozen=True)
class ValidationIssue:
    type: str  # "contrast" | "accessibility" | "harmony" | "usability"
    severity: str  # "error" | "warning" | "info"
    message: str
    colors: List[str]
    suggestion: Optional[str] = None


@dataclass(frozen=True)
class ColorSystemValidation:
    is_valid: bool
    issues: List[ValidationIssue]
    score: int


@dataclass(frozen=True)
class AccessibilityReport:
    overall: str  # "excellent" | "good" | "fair" | "poor"
    score: int
    score_breakdown: AccessibilityScore
    wcag_aa: ComplianceReport
    wcag_aaa: ComplianceReport
    color_blindness: ColorBlindnessReport
    improvements: List[AccessibilityImprovement]


def _as_system(colors):
    if isinstance(colors, dict):
        return ColorSystem.from_dict(colors)
    return colors


def generate_color_pairs(colors):
    """
    The pairs the report grades: body text, the three brand colors as UI
    elements on the background, and white button text on primary.
    """
    pairs = [
        (colors.text, colors.background, NORMAL_TEXT),
        (colors.primary, colors.background, UI_ELEMENT),
        (colors.secondary, colors.background, UI_ELEMENT),
        (colors.accent, colors.background, UI_ELEMENT),
        ("#FFFFFF", colors.primary, LARGE_TEXT),
    ]
    return [ColorPair(fg, bg, calculate_contrast(fg, bg), context) for fg, bg, context in pairs]


def check_wcag_compliance(pairs, level="AA"):
    """
    Bucket pairs for one level. Under AAA, pairs that still meet AA are
    warnings rather than failures.
    """
    passes, fails, warnings = [], [], []
    for pair in pairs:
        large = pair.is_large_text
        if level == "AAA":
            compliant = check_aaa_compliance(pair.foreground, pair.background, large)
        else:
            compliant = check_aa_compliance(pair.foreground, pair.background, large)

        if compliant:
            passes.append(pair)
        elif level == "AAA" and check_aa_compliance(pair.foreground, pair.background, large):
            warnings.append(pair)
        else:
            fails.append(pair)
    return ComplianceReport(passes, fails, warnings)


def simulate_color_blindness(colors, deficiency, on_fallback=None):
    """
    Simulate how a list of colors appears under a vision deficiency.

    The colors are laid out as a one-row image and converted through the
    deficiency's mixing matrix, which also clamps every channel to 0-255.
    Accepts a single color too, returning a single hex string. Malformed
    colors are simulated as black.
    """
    single = not isinstance(colors, (list, tuple))
    parsed = [coerce_color(c, on_fallback=on_fallback, operation="simulate_color_blindness")
              for c in ([colors] if single else colors)]
    if not parsed:
        return []

    matrix = DEFICIENCY_MATRICES[VisionDeficiency(deficiency)]
    flat = []
    for row in matrix:
        flat.extend(row)
        flat.append(0.0)

    im = Image.new("RGB", (len(parsed), 1))
    for x, c in enumerate(parsed):
        im.putpixel((x, 0), c.rgb)
    out_im = im.convert("RGB", tuple(flat))

    simulated = [Color(*out_im.getpixel((x, 0))[:3]).hex for x in range(len(parsed))]
    return simulated[0] if single else simulated


def severity_for(issue_count):
    if issue_count == 0:
        return Severity.NONE
    if issue_count == 1:
        return Severity.MINOR
    if issue_count <= 3:
        return Severity.MAJOR
    return Severity.SEVERE


def evaluate_deficiency(colors, deficiency, config=DEFAULT_CONFIG):
    simulated = simulate_color_blindness(list(colors), deficiency)
    issues = []
    for (i, a), (j, b) in combinations(enumerate(simulated), 2):
        if delta_e(a, b) < config.indistinguishable_delta_e:
            issues.append(f"Colors {i + 1} and {j + 1} become indistinguishable")
    return ColorBlindnessTest(distinguishable=not issues, issues=issues, severity=severity_for(len(issues)))


def _failed_test():
    return ColorBlindnessTest(False, ["Analysis failed"], Severity.SEVERE)


def check_color_blindness_compatibility(colors, config=DEFAULT_CONFIG, on_fallback=None):
    """
    Run all three deficiency simulations over a list of colors (or the five
    roles of a ColorSystem). Malformed colors are skipped.
    """
    if isinstance(colors, (ColorSystem, dict)):
        colors = list(_as_system(colors).roles().values())

    valid = []
    for c in colors:
        try:
            valid.append(parse_color(c))
        except InvalidColorError as e:
            report_fallback(on_fallback, "check_color_blindness_compatibility", c, None, str(e))

    if not valid:
        report_fallback(on_fallback, "check_color_blindness_compatibility", colors, "analysis failed", "no valid colors")
        return ColorBlindnessReport(_failed_test(), _failed_test(), _failed_test())

    return ColorBlindnessReport(**{
        d.value: evaluate_deficiency(valid, d, config) for d in VisionDeficiency
    })


def assess_color_harmony(colors):
    """
    0-1 score of how close each pair of hues sits to a classic harmonious
    angle (30° steps up to 180°).
    """
    if len(colors) < 2:
        return 1.0
    scores = []
    for a, b in combinations(colors, 2):
        diff = abs(get_hue(a) - get_hue(b))
        diff = min(diff, 360 - diff)
        closest = min(HARMONIOUS_ANGLES, key=lambda angle: abs(diff - angle))
        scores.append(1 - abs(diff - closest) / 180)
    return sum(scores) / len(scores)


def _indistinct_pairs(colors, config):
    brand = [colors.role(role) for role in HARMONY_ROLES]
    return [(a, b) for a, b in combinations(brand, 2) if delta_e(a, b) < config.distinct_delta_e]


def validate_color_system(colors, config=DEFAULT_CONFIG):
    """
    Usability checks: base contrast, hue harmony and how distinct the brand
    colors are from each other. Score starts at 100 and loses points per issue.
    """
    colors = _as_system(colors)
    issues = []
    score = 100

    text_ratio = calculate_contrast(colors.text, colors.background)
    if text_ratio < AA_NORMAL:
        issues.append(ValidationIssue(
            "contrast", "error",
            f"Text/background contrast ratio is too low: {text_ratio:.1f}:1",
            [colors.text, colors.background],
            "Increase contrast by adjusting text or background color",
        ))
        score -= 30
    elif text_ratio < AAA_NORMAL:
        issues.append(ValidationIssue(
            "contrast", "warning",
            f"Text/background contrast could be improved: {text_ratio:.1f}:1",
            [colors.text, colors.background],
            "Consider increasing contrast for AAA compliance",
        ))
        score -= 10

    primary_ratio = calculate_contrast(colors.primary, colors.background)
    if primary_ratio < AA_LARGE:
        issues.append(ValidationIssue(
            "contrast", "warning",
            f"Primary color has low contrast with background: {primary_ratio:.1f}:1",
            [colors.primary, colors.background],
            "Adjust primary color for better visibility",
        ))
        score -= 15

    brand = [colors.role(role) for role in HARMONY_ROLES]
    if assess_color_harmony(brand) < 0.6:
        issues.append(ValidationIssue(
            "harmony", "info",
            "Colors may not work well together harmoniously",
            brand,
            "Consider using colors with better harmonic relationships",
        ))
        score -= 10

    similar = _indistinct_pairs(colors, config)
    if similar:
        issues.append(ValidationIssue(
            "usability", "warning",
            "Brand colors are too similar to tell apart",
            sorted({c for pair in similar for c in pair}),
            "Increase visual distinction between primary, secondary and accent colors",
        ))
        score -= 15

    return ColorSystemValidation(
        is_valid=not any(issue.severity == "error" for issue in issues),
        issues=issues,
        score=max(0, score),
    )


def _pass_rate(pairs, level):
    if not pairs:
        return 0.0
    return len(check_wcag_compliance(pairs, level).passes) / len(pairs) * 100


def calculate_accessibility_score(colors, config=DEFAULT_CONFIG):
    """
    total = contrast*0.5 + color_blindness*0.3 + usability*0.2
    """
    colors = _as_system(colors)
    pairs = generate_color_pairs(colors)

    wcag_aa = _pass_rate(pairs, "AA")
    wcag_aaa = _pass_rate(pairs, "AAA")

    blindness = check_color_blindness_compatibility(colors, config)
    per_type = {d: SEVERITY_SCORES[t.severity] for d, t in blindness.by_type().items()}

    usability = validate_color_system(colors, config).score

    contrast = wcag_aa * 0.7 + wcag_aaa * 0.3
    color_blindness = sum(per_type.values()) / len(per_type)
    total = contrast * 0.5 + color_blindness * 0.3 + usability * 0.2

    return AccessibilityScore(
        total=round(total),
        contrast=round(contrast),
        color_blindness=round(color_blindness),
        usability=round(usability),
        breakdown=ScoreBreakdown(
            wcag_aa=round(wcag_aa),
            wcag_aaa=round(wcag_aaa),
            protanopia=per_type[VisionDeficiency.PROTANOPIA],
            deuteranopia=per_type[VisionDeficiency.DEUTERANOPIA],
            tritanopia=per_type[VisionDeficiency.TRITANOPIA],
            general_usability=round(usability),
        ),
    )


def get_color_blindness_prevalence(deficiency):
    return PREVALENCE.get(VisionDeficiency(deficiency), 0.0)


def suggest_accessibility_improvements(colors, config=DEFAULT_CONFIG):
    """
    One suggestion per violated rule, most urgent first.
    """
    colors = _as_system(colors)
    improvements = []

    text_ratio = calculate_contrast(colors.text, colors.background)
    if text_ratio < AA_NORMAL:
        suggested = suggest_passing_color(colors.text, colors.background, AA_NORMAL)
        improvements.append(AccessibilityImprovement(
            type="contrast",
            priority=Priority.CRITICAL if text_ratio < AA_LARGE else Priority.HIGH,
            title="Improve text contrast",
            description="Text and background colors do not meet WCAG AA standards",
            current_issue=f"Current contrast ratio: {text_ratio:.1f}:1",
            suggested_fix=f"Increase color difference between text and background, e.g. text {suggested}",
            impact="Critical for users with visual impairments and low vision",
            colors=[colors.text, colors.background],
        ))
    elif text_ratio < AAA_NORMAL:
        improvements.append(AccessibilityImprovement(
            type="wcag",
            priority=Priority.LOW,
            title="Reach AAA text contrast",
            description="Text meets WCAG AA but not AAA",
            current_issue=f"Current contrast ratio: {text_ratio:.1f}:1",
            suggested_fix="Darken text or lighten background (or the reverse) to reach 7:1",
            impact="Improves reading comfort for users with low vision",
            colors=[colors.text, colors.background],
        ))

    primary_ratio = calculate_contrast(colors.primary, colors.background)
    if primary_ratio < AA_LARGE:
        improvements.append(AccessibilityImprovement(
            type="contrast",
            priority=Priority.HIGH,
            title="Improve primary color visibility",
            description="Primary color has insufficient contrast with background",
            current_issue=f"Current contrast ratio: {primary_ratio:.1f}:1",
            suggested_fix="Adjust primary color saturation or lightness",
            impact="Important UI elements may be hard to see",
            colors=[colors.primary, colors.background],
        ))

    blindness = check_color_blindness_compatibility(colors, config)
    for deficiency, test in blindness.by_type().items():
        if test.severity not in (Severity.MAJOR, Severity.SEVERE):
            continue
        improvements.append(AccessibilityImprovement(
            type="color-blindness",
            priority=Priority.HIGH if test.severity is Severity.SEVERE else Priority.MEDIUM,
            title=f"Improve {deficiency.value} compatibility",
            description=f"Colors may be difficult to distinguish for users with {deficiency.value}",
            current_issue=", ".join(test.issues),
            suggested_fix="Use patterns, textures, or alternative visual cues beyond color",
            impact=f"Affects approximately {get_color_blindness_prevalence(deficiency):g}% of users",
        ))

    similar = _indistinct_pairs(colors, config)
    if similar:
        improvements.append(AccessibilityImprovement(
            type="usability",
            priority=Priority.MEDIUM,
            title="Increase color distinctiveness",
            description="Some colors in the palette are too similar",
            current_issue="Colors may be confused for one another",
            suggested_fix="Choose colors with greater visual separation",
            impact="Helps users distinguish between different UI elements",
            colors=sorted({c for pair in similar for c in pair}),
        ))

    return sorted(improvements, key=lambda imp: PRIORITY_ORDER[imp.priority])


def determine_overall_rating(score):
    if score >= 90:
        return "excellent"
    if score >= 75:
        return "good"
    if score >= 60:
        return "fair"
    return "poor"


def failsafe_report():
    failed = _failed_test()
    zero = AccessibilityScore(0, 0, 0, 0, ScoreBreakdown(0, 0, 0, 0, 0, 0))
    return AccessibilityReport(
        overall="poor",
        score=0,
        score_breakdown=zero,
        wcag_aa=ComplianceReport(),
        wcag_aaa=ComplianceReport(),
        color_blindness=ColorBlindnessReport(failed, failed, failed),
        improvements=[AccessibilityImprovement(
            type="wcag",
            priority=Priority.CRITICAL,
            title="System analysis failed",
            description="Unable to analyze color system accessibility",
            current_issue="Analysis error occurred",
            suggested_fix="Check color format validity and try again",
            impact="Cannot ensure accessibility compliance",
        )],
    )


def analyze_color_accessibility(colors, config=DEFAULT_CONFIG, on_fallback=None):
    """
    Full accessibility report for a ColorSystem (or its dict form).
    """
    try:
        colors = _as_system(colors)
        pairs = generate_color_pairs(colors)
        score = calculate_accessibility_score(colors, config)
        return AccessibilityReport(
            overall=determine_overall_rating(score.total),
            score=score.total,
            score_breakdown=score,
            wcag_aa=check_wcag_compliance(pairs, "AA"),
            wcag_aaa=check_wcag_compliance(pairs, "AAA"),
            color_blindness=check_color_blindness_compatibility(colors, config, on_fallback),
            improvements=suggest_accessibility_improvements(colors, config),
        )
    except (ValueError, TypeError, AttributeError, ArithmeticError) as e:
        report_fallback(on_fallback, "analyze_color_accessibility", colors, "failsafe report", str(e))
        return failsafe_report()
