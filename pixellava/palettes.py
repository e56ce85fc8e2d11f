"""
Lava colours.

The lamp paints with a single opaque ARGB colour.  Colours are stored
as packed 32-bit ``0xAARRGGBB`` integers (the shape the config file
uses); renderers work with ``(r, g, b, a)`` tuples.

``0`` is reserved to mean "unset" and resolves to the default orange.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Dict, List, Tuple

RGBA = Tuple[int, int, int, int]


def pack_argb(a: int, r: int, g: int, b: int) -> int:
    """Pack channels into an unsigned ``0xAARRGGBB`` integer."""
    for ch in (a, r, g, b):
        if not 0 <= ch <= 255:
            raise ValueError(f"Channel out of range 0-255: {ch}")
    return (a << 24) | (r << 16) | (g << 8) | b


def normalize_argb(argb: int) -> int:
    """Map signed 32-bit ARGB values (e.g. ``-688610``) onto unsigned."""
    return int(argb) & 0xFFFFFFFF


def unpack_argb(argb: int) -> Tuple[int, int, int, int]:
    """Return ``(a, r, g, b)``."""
    v = normalize_argb(argb)
    return ((v >> 24) & 0xFF, (v >> 16) & 0xFF, (v >> 8) & 0xFF, v & 0xFF)


def argb_to_rgba(argb: int) -> RGBA:
    a, r, g, b = unpack_argb(argb)
    return (r, g, b, a)


def argb_to_hex(argb: int) -> str:
    return f"#{normalize_argb(argb):08X}"


DEFAULT_COLOR_ARGB = pack_argb(255, 245, 110, 30)  # 0xFFF56E1E


def resolve_color(argb: int) -> int:
    """Substitute the default colour for the "unset" value ``0``."""
    v = normalize_argb(argb)
    return DEFAULT_COLOR_ARGB if v == 0 else v


# ── Presets ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ColorPreset:
    """Named lava colour."""
    name: str
    argb: int

    @property
    def rgba(self) -> RGBA:
        return argb_to_rgba(self.argb)

    @property
    def hex(self) -> str:
        return argb_to_hex(self.argb)


PRESETS: Dict[str, ColorPreset] = {
    "lava": ColorPreset("Lava Orange", DEFAULT_COLOR_ARGB),
    "classic": ColorPreset("Classic Red", pack_argb(255, 180, 30, 10)),
    "blue": ColorPreset("Cosmic Blue", pack_argb(255, 20, 40, 180)),
    "green": ColorPreset("Acid Green", pack_argb(255, 30, 160, 20)),
    "purple": ColorPreset("Nebula", pack_argb(255, 120, 20, 160)),
    "gold": ColorPreset("Molten Gold", pack_argb(255, 180, 120, 10)),
    "cyan": ColorPreset("Cyan Glow", pack_argb(255, 10, 150, 160)),
    "magenta": ColorPreset("Hot Magenta", pack_argb(255, 180, 20, 100)),
    "white": ColorPreset("Ghost", pack_argb(255, 180, 180, 190)),
}

DEFAULT_PRESET = "lava"


def get_preset(name: str) -> ColorPreset:
    if name not in PRESETS:
        available = ", ".join(sorted(PRESETS.keys()))
        raise KeyError(f"Unknown color '{name}'. Available: {available}")
    return PRESETS[name]


def list_presets() -> List[str]:
    return sorted(PRESETS.keys())


def parse_color(text: str) -> int:
    """Parse a preset name, ``#RRGGBB`` or ``#AARRGGBB`` into ARGB.

    ``#RRGGBB`` is taken as fully opaque.
    """
    value = text.strip()
    if value.lower() in PRESETS:
        return PRESETS[value.lower()].argb
    digits = value[1:] if value.startswith("#") else value
    if len(digits) not in (6, 8) or not all(c in string.hexdigits for c in digits):
        raise ValueError(f"Not a colour name or #RRGGBB / #AARRGGBB: {text!r}")
    packed = int(digits, 16)
    if len(digits) == 6:
        packed |= 0xFF000000
    return packed
