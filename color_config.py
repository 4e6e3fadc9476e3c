"""
Tunable ranges used by the palette generators.

WCAG thresholds are deliberately not here; they live in contrast_utils as
constants.
"""
import json
import logging
import os
from dataclasses import dataclass, asdict, replace

logger = logging.getLogger(__name__)

CONFIG_FILE = "palette_engine.json"


@dataclass(frozen=True)
class ThemeBand:
    lightness_min: float
    lightness_max: float
    saturation_min: float
    saturation_max: float
    hue_variation: float = 10.0


LIGHT_THEME = ThemeBand(0.85, 0.98, 0.02, 0.15)
DARK_THEME = ThemeBand(0.02, 0.18, 0.02, 0.20)


@dataclass(frozen=True)
class EngineConfig:
    light_theme: ThemeBand = LIGHT_THEME
    dark_theme: ThemeBand = DARK_THEME
    # Chance of a light background when the theme preference is "random"
    light_theme_bias: float = 0.7

    harmony_saturation: tuple = (0.65, 0.90)
    harmony_lightness: tuple = (0.45, 0.65)
    default_saturation: float = 0.75
    default_lightness: float = 0.52

    muted_mix: float = 0.05
    border_mix: float = 0.15

    # Lab lightness per adjustment step, and the step cap
    contrast_step: float = 10.0
    contrast_max_steps: int = 20

    indistinguishable_delta_e: float = 10.0
    distinct_delta_e: float = 15.0

    def theme(self, name):
        return self.dark_theme if name == "dark" else self.light_theme

    def to_dict(self):
        return asdict(self)


DEFAULT_CONFIG = EngineConfig()


def _band_from(data, base):
    if not isinstance(data, dict):
        raise TypeError(f"theme band must be an object, got {type(data).__name__}")
    known = {k: float(v) for k, v in data.items() if k in ThemeBand.__dataclass_fields__}
    return replace(base, **known)


def config_from_dict(data, base=DEFAULT_CONFIG):
    """
    Merge a (possibly partial) dict of overrides over an existing config.
    Unknown keys are ignored.
    """
    if not isinstance(data, dict):
        raise TypeError(f"config must be an object, got {type(data).__name__}")
    overrides = {}
    for key, value in data.items():
        if key not in EngineConfig.__dataclass_fields__:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        if key in ("light_theme", "dark_theme"):
            value = _band_from(value, getattr(base, key))
        elif key in ("harmony_saturation", "harmony_lightness"):
            lo, hi = value
            value = (float(lo), float(hi))
        elif key == "contrast_max_steps":
            value = int(value)
        else:
            value = float(value)
        overrides[key] = value
    return replace(base, **overrides)


def load_config(path=CONFIG_FILE):
    """
    Load overrides from a JSON file on top of the defaults.
    A missing or unreadable file leaves the defaults in place.
    """
    if not os.path.exists(path):
        return DEFAULT_CONFIG
    try:
        with open(path, "r") as f:
            data = json.load(f)
        return config_from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        logger.warning("Config Error: %s", e)
        return DEFAULT_CONFIG


def save_config(config, path=CONFIG_FILE):
    with open(path, "w") as f:
        json.dump(config.to_dict(), f, indent=2)
