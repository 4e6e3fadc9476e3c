"""
Color values and conversions: hex, RGB, HSL, CIE Lab/LCh, WCAG luminance,
perceptual mixing and distance.

Colors are parsed once at the boundary into a Color. The module-level helpers
(to_hex, get_hue, mix, ...) are total: malformed input never raises, it is
replaced with a documented default and reported through the optional
on_fallback sink (see diagnostics).
"""
import colorsys
import math
from dataclasses import dataclass

from PIL import ImageColor

from diagnostics import report_fallback

# D65 reference white
XN = 0.950470
YN = 1.0
ZN = 1.088830

LAB_T0 = 4 / 29
LAB_T1 = 6 / 29
LAB_T2 = 3 * LAB_T1 ** 2
LAB_T3 = LAB_T1 ** 3

# Lab lightness (or LCh chroma) per unit of lighten/darken/saturate
LAB_STEP = 18


class InvalidColorError(ValueError):
    pass


def rgb_to_hex(r, g, b):
    return f"#{r:02X}{g:02X}{b:02X}"


def rgb_to_cmyk(r, g, b):
    """
    Convert RGB to CMYK (0-100).
    """
    if (r, g, b) == (0, 0, 0):
        return 0, 0, 0, 100

    r = r / 255.0
    g = g / 255.0
    b = b / 255.0

    k = 1 - max(r, g, b)
    c = (1 - r - k) / (1 - k)
    m = (1 - g - k) / (1 - k)
    y = (1 - b - k) / (1 - k)

    return (round(c * 100), round(m * 100), round(y * 100), round(k * 100))


def calculate_luminance(r, g, b):
    """
    Calculates relative luminance using WCAG 2.0 formula.
    """
    components = []
    for c in [r, g, b]:
        v = c / 255.0
        if v <= 0.03928:
            components.append(v / 12.92)
        else:
            components.append(((v + 0.055) / 1.055) ** 2.4)

    r_lin, g_lin, b_lin = components
    return (0.2126 * r_lin) + (0.7152 * g_lin) + (0.0722 * b_lin)


def _clamp(value, lo=0.0, hi=1.0):
    return max(lo, min(hi, value))


def _srgb_to_linear(c):
    c = c / 255.0
    if c <= 0.04045:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def _linear_to_srgb(c):
    if c <= 0.0031308:
        c = 12.92 * c
    else:
        c = 1.055 * (c ** (1 / 2.4)) - 0.055
    return int(round(_clamp(c) * 255))


def rgb_to_lab(r, g, b):
    r_lin, g_lin, b_lin = _srgb_to_linear(r), _srgb_to_linear(g), _srgb_to_linear(b)

    x = (0.4124564 * r_lin + 0.3575761 * g_lin + 0.1804375 * b_lin) / XN
    y = (0.2126729 * r_lin + 0.7151522 * g_lin + 0.0721750 * b_lin) / YN
    z = (0.0193339 * r_lin + 0.1191920 * g_lin + 0.9503041 * b_lin) / ZN

    def f(t):
        return t ** (1 / 3) if t > LAB_T3 else t / LAB_T2 + LAB_T0

    fx, fy, fz = f(x), f(y), f(z)
    L = max(0.0, 116 * fy - 16)
    return L, 500 * (fx - fy), 200 * (fy - fz)


def lab_to_rgb(L, a, b):
    """
    Lab (D65) back to an sRGB triple; out-of-gamut values are clipped.
    """
    fy = (L + 16) / 116
    fx = fy + a / 500
    fz = fy - b / 200

    def f_inv(t):
        return t ** 3 if t > LAB_T1 else LAB_T2 * (t - LAB_T0)

    x = XN * f_inv(fx)
    y = YN * f_inv(fy)
    z = ZN * f_inv(fz)

    r_lin = 3.2404542 * x - 1.5371385 * y - 0.4985314 * z
    g_lin = -0.9692660 * x + 1.8760108 * y + 0.0415560 * z
    b_lin = 0.0556434 * x - 0.2040259 * y + 1.0572252 * z
    return _linear_to_srgb(r_lin), _linear_to_srgb(g_lin), _linear_to_srgb(b_lin)


def lab_to_lch(L, a, b):
    c = math.hypot(a, b)
    h = math.degrees(math.atan2(b, a)) % 360.0
    return L, c, h


def lch_to_lab(L, c, h):
    rad = math.radians(h)
    return L, c * math.cos(rad), c * math.sin(rad)


def ciede2000(lab1, lab2, kL=1.0, kC=1.0, kH=1.0):
    """
    CIEDE2000 color difference between two Lab triples.
    """
    L1, a1, b1 = lab1
    L2, a2, b2 = lab2

    c1 = math.hypot(a1, b1)
    c2 = math.hypot(a2, b2)
    c_bar7 = ((c1 + c2) / 2) ** 7
    g = 0.5 * (1 - math.sqrt(c_bar7 / (c_bar7 + 25 ** 7)))

    a1p = (1 + g) * a1
    a2p = (1 + g) * a2
    c1p = math.hypot(a1p, b1)
    c2p = math.hypot(a2p, b2)
    h1p = math.degrees(math.atan2(b1, a1p)) % 360 if c1p else 0.0
    h2p = math.degrees(math.atan2(b2, a2p)) % 360 if c2p else 0.0

    dLp = L2 - L1
    dCp = c2p - c1p
    if c1p * c2p == 0:
        dhp = 0.0
    else:
        dhp = h2p - h1p
        if dhp > 180:
            dhp -= 360
        elif dhp < -180:
            dhp += 360
    dHp = 2 * math.sqrt(c1p * c2p) * math.sin(math.radians(dhp / 2))

    L_bar = (L1 + L2) / 2
    c_bar_p = (c1p + c2p) / 2
    if c1p * c2p == 0:
        h_bar_p = h1p + h2p
    elif abs(h1p - h2p) <= 180:
        h_bar_p = (h1p + h2p) / 2
    elif h1p + h2p < 360:
        h_bar_p = (h1p + h2p + 360) / 2
    else:
        h_bar_p = (h1p + h2p - 360) / 2

    t = (1
         - 0.17 * math.cos(math.radians(h_bar_p - 30))
         + 0.24 * math.cos(math.radians(2 * h_bar_p))
         + 0.32 * math.cos(math.radians(3 * h_bar_p + 6))
         - 0.20 * math.cos(math.radians(4 * h_bar_p - 63)))
    d_theta = 30 * math.exp(-(((h_bar_p - 275) / 25) ** 2))
    c_bar_p7 = c_bar_p ** 7
    r_c = 2 * math.sqrt(c_bar_p7 / (c_bar_p7 + 25 ** 7))
    s_l = 1 + (0.015 * (L_bar - 50) ** 2) / math.sqrt(20 + (L_bar - 50) ** 2)
    s_c = 1 + 0.045 * c_bar_p
    s_h = 1 + 0.015 * c_bar_p * t
    r_t = -math.sin(math.radians(2 * d_theta)) * r_c

    return math.sqrt(
        (dLp / (kL * s_l)) ** 2
        + (dCp / (kC * s_c)) ** 2
        + (dHp / (kH * s_h)) ** 2
        + r_t * (dCp / (kC * s_c)) * (dHp / (kH * s_h))
    )


@dataclass(frozen=True)
class Color:
    """
    A validated sRGB color. Channels are ints in 0-255.
    """
    r: int
    g: int
    b: int

    def __post_init__(self):
        for channel in (self.r, self.g, self.b):
            if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
                raise InvalidColorError(f"channel out of range: {channel!r}")

    @classmethod
    def from_hsl(cls, h, s, l):
        """
        Hue in degrees, saturation and lightness in 0-1 (clamped).
        """
        h = (h % 360.0) / 360.0
        r, g, b = colorsys.hls_to_rgb(h, _clamp(l), _clamp(s))
        return cls(int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))

    @classmethod
    def from_lab(cls, L, a, b):
        return cls(*lab_to_rgb(L, a, b))

    @property
    def rgb(self):
        return self.r, self.g, self.b

    @property
    def hex(self):
        return rgb_to_hex(self.r, self.g, self.b)

    @property
    def hsl(self):
        h, l, s = colorsys.rgb_to_hls(self.r / 255.0, self.g / 255.0, self.b / 255.0)
        return (h * 360.0) % 360.0, s, l

    @property
    def hsv(self):
        h, s, v = colorsys.rgb_to_hsv(self.r / 255.0, self.g / 255.0, self.b / 255.0)
        return (h * 360.0) % 360.0, s, v

    @property
    def hue(self):
        return self.hsl[0]

    @property
    def luminance(self):
        return calculate_luminance(self.r, self.g, self.b)

    @property
    def lab(self):
        return rgb_to_lab(self.r, self.g, self.b)

    @property
    def lch(self):
        return lab_to_lch(*self.lab)

    def __str__(self):
        return self.hex


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)
GRAY = Color(128, 128, 128)


def parse_color(value):
    """
    Parse a Color, an (r, g, b) sequence, or any CSS color string Pillow
    understands (#rgb, #rrggbb, rgb(), hsl(), names). Alpha is dropped.

    Raises InvalidColorError on anything else.
    """
    if isinstance(value, Color):
        return value

    if isinstance(value, (tuple, list)):
        if len(value) != 3:
            raise InvalidColorError(f"expected 3 channels, got {value!r}")
        channels = []
        for c in value:
            if isinstance(c, bool) or not isinstance(c, (int, float)) or not math.isfinite(c):
                raise InvalidColorError(f"invalid channel in {value!r}")
            channels.append(int(round(c)))
        return Color(*channels)

    if isinstance(value, str) and value.strip():
        try:
            rgb = ImageColor.getrgb(value.strip())
        except ValueError as e:
            raise InvalidColorError(f"invalid color: {value!r}") from e
        return Color(*rgb[:3])

    raise InvalidColorError(f"invalid color: {value!r}")


def is_valid_color(value):
    try:
        parse_color(value)
    except InvalidColorError:
        return False
    return True


def coerce_color(value, default=BLACK, on_fallback=None, operation="parse_color"):
    """
    Total version of parse_color: returns `default` for malformed input.
    """
    try:
        return parse_color(value)
    except InvalidColorError as e:
        report_fallback(on_fallback, operation, value, default.hex, str(e))
        return default


def _valid_number(value, default, on_fallback, operation):
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return value
    report_fallback(on_fallback, operation, value, default, "non-finite number")
    return default


def to_hex(color, on_fallback=None):
    """
    Normalize any color input to upper-case #RRGGBB; #000000 if malformed.
    """
    return coerce_color(color, on_fallback=on_fallback, operation="to_hex").hex


def to_rgb(color, on_fallback=None):
    c = coerce_color(color, on_fallback=on_fallback, operation="to_rgb")
    return f"rgb({c.r}, {c.g}, {c.b})"


def to_hsl(color, on_fallback=None):
    c = coerce_color(color, on_fallback=on_fallback, operation="to_hsl")
    h, s, l = c.hsl
    return f"hsl({round(h) % 360}, {round(s * 100)}%, {round(l * 100)}%)"


def get_rgb(color, on_fallback=None):
    return coerce_color(color, on_fallback=on_fallback, operation="get_rgb").rgb


def get_hsl(color, on_fallback=None):
    return coerce_color(color, on_fallback=on_fallback, operation="get_hsl").hsl


def get_hue(color, on_fallback=None):
    """
    Hue in degrees, [0, 360). Achromatic colors report 0.
    """
    return coerce_color(color, on_fallback=on_fallback, operation="get_hue").hue


def get_luminance(color, on_fallback=None):
    return coerce_color(color, on_fallback=on_fallback, operation="get_luminance").luminance


def is_light(color, on_fallback=None):
    return get_luminance(color, on_fallback) > 0.5


def is_dark(color, on_fallback=None):
    return not is_light(color, on_fallback)


def _shift_lightness(color, delta, operation, on_fallback):
    c = coerce_color(color, on_fallback=on_fallback, operation=operation)
    L, a, b = c.lab
    return Color.from_lab(_clamp(L + delta, 0.0, 100.0), a, b).hex


def lighten(color, amount=1.0, on_fallback=None):
    amount = _valid_number(amount, 1.0, on_fallback, "lighten")
    return _shift_lightness(color, LAB_STEP * amount, "lighten", on_fallback)


def darken(color, amount=1.0, on_fallback=None):
    amount = _valid_number(amount, 1.0, on_fallback, "darken")
    return _shift_lightness(color, -LAB_STEP * amount, "darken", on_fallback)


def _shift_chroma(color, delta, operation, on_fallback):
    c = coerce_color(color, on_fallback=on_fallback, operation=operation)
    L, chroma, h = c.lch
    return Color.from_lab(*lch_to_lab(L, max(0.0, chroma + delta), h)).hex


def saturate(color, amount=1.0, on_fallback=None):
    amount = _valid_number(amount, 1.0, on_fallback, "saturate")
    return _shift_chroma(color, LAB_STEP * amount, "saturate", on_fallback)


def desaturate(color, amount=1.0, on_fallback=None):
    amount = _valid_number(amount, 1.0, on_fallback, "desaturate")
    return _shift_chroma(color, -LAB_STEP * amount, "desaturate", on_fallback)


def mix(color1, color2, ratio=0.5, space="lab", on_fallback=None):
    """
    Interpolate from color1 (ratio 0) to color2 (ratio 1).

    Mixing happens in Lab by default so results are perceptually even; "rgb"
    is also accepted. If either color is malformed, color1 is returned as is.
    """
    try:
        a = parse_color(color1)
        b = parse_color(color2)
    except InvalidColorError as e:
        report_fallback(on_fallback, "mix", (color1, color2), color1, str(e))
        return color1

    t = _clamp(_valid_number(ratio, 0.5, on_fallback, "mix"))
    if space == "rgb":
        channels = [int(round(x + (y - x) * t)) for x, y in zip(a.rgb, b.rgb)]
        return Color(*channels).hex
    if space != "lab":
        report_fallback(on_fallback, "mix", space, "lab", "unknown color space")

    lab = [x + (y - x) * t for x, y in zip(a.lab, b.lab)]
    return Color.from_lab(*lab).hex


def _coordinates(c, mode):
    if mode == "rgb":
        return c.rgb
    if mode == "hsl":
        h, s, l = c.hsl
        rad = math.radians(h)
        return s * math.cos(rad), s * math.sin(rad), l
    return c.lab


def distance(color1, color2, mode="lab", on_fallback=None):
    """
    Euclidean distance between two colors in the given space (lab, rgb, hsl).
    Malformed input gives 0.0.
    """
    try:
        a = parse_color(color1)
        b = parse_color(color2)
    except InvalidColorError as e:
        report_fallback(on_fallback, "distance", (color1, color2), 0.0, str(e))
        return 0.0
    if mode not in ("lab", "rgb", "hsl"):
        report_fallback(on_fallback, "distance", mode, "lab", "unknown distance mode")
        mode = "lab"
    return math.dist(_coordinates(a, mode), _coordinates(b, mode))


def delta_e(color1, color2, on_fallback=None):
    """
    Perceptual difference (CIEDE2000). Below ~2 is imperceptible, 10 and up
    reads as clearly different.
    """
    try:
        a = parse_color(color1)
        b = parse_color(color2)
    except InvalidColorError as e:
        report_fallback(on_fallback, "delta_e", (color1, color2), 0.0, str(e))
        return 0.0
    return ciede2000(a.lab, b.lab)


def from_hsl(h, s, l, on_fallback=None):
    """
    Build a hex color from hue degrees and saturation/lightness in 0-1.
    """
    values = (h, s, l)
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v) for v in values):
        report_fallback(on_fallback, "from_hsl", values, BLACK.hex, "non-finite number")
        return BLACK.hex
    return Color.from_hsl(h, s, l).hex


def from_rgb(r, g, b, on_fallback=None):
    return coerce_color((r, g, b), on_fallback=on_fallback, operation="from_rgb").hex


def random_color(rng):
    value = min(int(rng.random() * 0x1000000), 0xFFFFFF)
    return rgb_to_hex((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def all_formats(color, on_fallback=None):
    """
    Every textual representation of a color the exporters care about.
    """
    c = coerce_color(color, on_fallback=on_fallback, operation="all_formats")
    h, s, v = c.hsv
    L, a, b = c.lab
    _, chroma, hue = c.lch
    cy, m, y, k = rgb_to_cmyk(*c.rgb)
    return {
        "hex": c.hex,
        "rgb": to_rgb(c),
        "hsl": to_hsl(c),
        "hsv": f"hsv({round(h) % 360}, {round(s * 100)}%, {round(v * 100)}%)",
        "lab": f"lab({L:.2f}% {a:.2f} {b:.2f})",
        "lch": f"lch({L:.2f}% {chroma:.2f} {hue:.2f})",
        "cmyk": f"cmyk({cy}%, {m}%, {y}%, {k}%)",
    }
