import math
import re

import pytest

from color_space import (Color, InvalidColorError, all_formats, darken, delta_e,
                         desaturate, distance, from_hsl, from_rgb, get_hsl,
                         get_hue, get_luminance, get_rgb, is_dark, is_light,
                         is_valid_color, lighten, mix, parse_color,
                         random_color, saturate, to_hex, to_hsl, to_rgb)
from diagnostics import FallbackLog
from entropy import SequenceRandom

HEX = re.compile(r"^#[0-9A-F]{6}$")


@pytest.mark.parametrize("value, expected", [
    ("#fff", (255, 255, 255)),
    ("#3b82f6", (59, 130, 246)),
    ("red", (255, 0, 0)),
    ("rgb(10, 20, 30)", (10, 20, 30)),
    ((1, 2, 3), (1, 2, 3)),
    ([0.4, 254.6, 0], (0, 255, 0)),
])
def test_parse_color(value, expected):
    assert parse_color(value).rgb == expected


@pytest.mark.parametrize("value", ["", "   ", "not a color", "#12", None, 42, (1, 2), (256, 0, 0), (float("nan"), 0, 0)])
def test_parse_color_rejects_garbage(value):
    with pytest.raises(InvalidColorError):
        parse_color(value)
    assert not is_valid_color(value)


def test_color_validates_channels():
    with pytest.raises(InvalidColorError):
        Color(-1, 0, 0)
    with pytest.raises(InvalidColorError):
        Color(True, 0, 0)


def test_to_hex_normalizes():
    assert to_hex("#abcdef") == "#ABCDEF"
    assert to_hex("white") == "#FFFFFF"


def test_malformed_input_falls_back_and_reports():
    log = FallbackLog()
    assert to_hex("garbage", on_fallback=log) == "#000000"
    assert to_rgb(None, on_fallback=log) == "rgb(0, 0, 0)"
    assert log.operations() == ["to_hex", "to_rgb"]
    assert log[0].value == "garbage"


def test_css_strings():
    assert to_rgb("#FF0000") == "rgb(255, 0, 0)"
    assert to_hsl("#FF0000") == "hsl(0, 100%, 50%)"


def test_hues():
    assert get_hue("#FF0000") == pytest.approx(0)
    assert get_hue("#00FF00") == pytest.approx(120)
    assert get_hue("#0000FF") == pytest.approx(240)
    # Achromatic colors report 0
    assert get_hue("#808080") == 0


def test_get_rgb_and_hsl():
    assert get_rgb("#3B82F6") == (59, 130, 246)
    assert get_rgb("nope") == (0, 0, 0)
    h, s, l = get_hsl("#FF0000")
    assert (h, s, l) == (0.0, 1.0, 0.5)
    h, s, l = get_hsl("#808080")
    assert s == 0
    assert l == pytest.approx(128 / 255)


def test_luminance_and_lightness():
    assert get_luminance("#000000") == 0
    assert get_luminance("#FFFFFF") == pytest.approx(1)
    assert is_light("#FFFFFF")
    assert is_dark("#111827")


def test_lab_of_white():
    L, a, b = Color(255, 255, 255).lab
    assert L == pytest.approx(100, abs=0.5)
    assert a == pytest.approx(0, abs=0.5)
    assert b == pytest.approx(0, abs=0.5)


def test_lighten_and_darken():
    base = "#3B82F6"
    assert get_luminance(lighten(base)) > get_luminance(base)
    assert get_luminance(darken(base)) < get_luminance(base)
    assert darken("#000000", 3) == "#000000"
    assert lighten("#FFFFFF", 3) == "#FFFFFF"


def test_saturate_and_desaturate():
    base = Color(0x3B, 0x82, 0xF6)
    assert parse_color(saturate("#808080")).lch[1] > 5
    assert parse_color(desaturate(base)).lch[1] < base.lch[1]


def test_non_finite_amount_is_replaced():
    log = FallbackLog()
    assert lighten("#808080", float("nan"), on_fallback=log) == lighten("#808080", 1.0)
    assert log.operations() == ["lighten"]


def test_mix():
    assert mix("#000000", "#FFFFFF", 0, space="rgb") == "#000000"
    assert mix("#000000", "#FFFFFF", 1, space="rgb") == "#FFFFFF"
    assert mix("#000000", "#FFFFFF", 0.5, space="rgb") == "#808080"
    assert HEX.match(mix("#FF0000", "#0000FF"))


def test_mix_returns_first_color_on_bad_input():
    log = FallbackLog()
    assert mix("bad", "#FFFFFF", on_fallback=log) == "bad"
    assert log.operations() == ["mix"]


def test_delta_e():
    assert delta_e("#3B82F6", "#3B82F6") == 0
    assert delta_e("#000000", "#FFFFFF") > 90
    assert delta_e("#FF0000", "#FE0000") < 2
    assert delta_e("nope", "#FFFFFF") == 0.0


def test_distance_modes():
    assert distance("#000000", "#FFFFFF", mode="rgb") == pytest.approx(math.sqrt(3) * 255)
    assert distance("#FF0000", "#FF0000", mode="hsl") == 0
    assert distance("#000000", "#FFFFFF") == pytest.approx(100, abs=0.5)
    assert distance(None, "#FFFFFF") == 0.0


def test_from_hsl():
    assert from_hsl(0, 1, 0.5) == "#FF0000"
    assert from_hsl(360, 1, 0.5) == "#FF0000"
    assert from_hsl(120, 2, 0.5) == "#00FF00"


def test_from_hsl_rejects_non_finite():
    log = FallbackLog()
    assert from_hsl(float("nan"), 0.5, 0.5, on_fallback=log) == "#000000"
    assert from_hsl(0, float("inf"), 0.5) == "#000000"
    assert log.operations() == ["from_hsl"]


def test_from_rgb():
    assert from_rgb(255, 128, 0) == "#FF8000"
    assert from_rgb(300, 0, 0) == "#000000"


def test_hsl_round_trip():
    red = Color(255, 0, 0)
    h, s, l = red.hsl
    assert (h, s, l) == (0.0, 1.0, 0.5)
    assert Color.from_hsl(h, s, l) == red


def test_random_color():
    assert random_color(SequenceRandom([0.0])) == "#000000"
    assert HEX.match(random_color(SequenceRandom([0.5])))


def test_all_formats():
    formats = all_formats("#FF0000")
    assert formats["hex"] == "#FF0000"
    assert formats["rgb"] == "rgb(255, 0, 0)"
    assert formats["hsl"] == "hsl(0, 100%, 50%)"
    assert formats["hsv"] == "hsv(0, 100%, 100%)"
    assert formats["cmyk"] == "cmyk(0%, 100%, 100%, 0%)"
    assert formats["lab"].startswith("lab(")
    assert formats["lch"].startswith("lch(")
