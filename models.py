"""
Value types exchanged with the state and rendering layers.
"""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from color_space import Color, coerce_color

ROLES = ("primary", "secondary", "accent", "background", "text")
HARMONY_ROLES = ("primary", "secondary", "accent")


class HarmonyScheme(str, Enum):
    MONOCHROMATIC = "monochromatic"
    ANALOGOUS = "analogous"
    COMPLEMENTARY = "complementary"
    TRIADIC = "triadic"
    TETRADIC = "tetradic"
    SPLIT_COMPLEMENTARY = "split-complementary"
    # Meta-choice, resolved to one of the above before generation
    RANDOM = "random"

    @classmethod
    def concrete(cls):
        return [s for s in cls if s is not cls.RANDOM]

    @property
    def label(self):
        return self.value.replace("-", " ").title()


class ThemePreference(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    RANDOM = "random"


@dataclass(frozen=True)
class ColorSystem:
    """
    The five semantic roles plus derived palette entries (muted, border, ...).

    Role values are normalized to canonical hex on construction; malformed
    values are replaced with a safe default so every role is always valid.
    The palette is stored read-only so the whole value stays hashable.
    """
    primary: str
    secondary: str
    accent: str
    background: str
    text: str
    palette: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        for role in ROLES:
            value = coerce_color(getattr(self, role), default=_ROLE_DEFAULTS[role], operation=f"ColorSystem.{role}")
            object.__setattr__(self, role, value.hex)
        palette = {}
        for name, value in dict(self.palette or {}).items():
            palette[name] = coerce_color(value, operation=f"ColorSystem.palette.{name}").hex
        object.__setattr__(self, "palette", MappingProxyType(palette))

    def __hash__(self):
        return hash((tuple(self.roles().values()), tuple(sorted(self.palette.items()))))

    @classmethod
    def from_dict(cls, data):
        return cls(
            primary=data.get("primary"),
            secondary=data.get("secondary"),
            accent=data.get("accent"),
            background=data.get("background"),
            text=data.get("text"),
            palette=data.get("palette") or {},
        )

    def role(self, name):
        return getattr(self, name)

    def roles(self):
        return {name: getattr(self, name) for name in ROLES}

    def to_dict(self):
        data = self.roles()
        data["palette"] = dict(self.palette)
        return data


@dataclass(frozen=True)
class PinningState:
    primary: bool = False
    secondary: bool = False
    accent: bool = False
    background: bool = False
    text: bool = False

    @classmethod
    def from_dict(cls, data):
        # The UI keeps flags under a "colors" key; accept either shape
        flags = data.get("colors", data)
        return cls(**{role: bool(flags.get(role, False)) for role in ROLES})

    def is_pinned(self, role):
        return bool(getattr(self, role, False))

    def pinned_roles(self):
        return [role for role in ROLES if getattr(self, role)]

    def to_dict(self):
        return {role: getattr(self, role) for role in ROLES}


_ROLE_DEFAULTS = {
    "primary": Color(0x3B, 0x82, 0xF6),
    "secondary": Color(0x64, 0x74, 0x8B),
    "accent": Color(0xF5, 0x9E, 0x0B),
    "background": Color(0xFF, 0xFF, 0xFF),
    "text": Color(0x11, 0x18, 0x27),
}

DEFAULT_COLOR_SYSTEM = ColorSystem(
    primary="#3B82F6",
    secondary="#64748B",
    accent="#F59E0B",
    background="#FFFFFF",
    text="#111827",
    palette={
        "primary": "#3B82F6",
        "secondary": "#64748B",
        "accent": "#F59E0B",
        "background": "#FFFFFF",
        "text": "#111827",
        "muted": "#F1F5F9",
        "border": "#E2E8F0",
    },
)
