from __future__ import annotations

import math
import re

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

RGB = tuple[int, int, int]
RGBA = tuple[int, int, int, int]


def _clamp(v: int) -> int:
    return max(0, min(255, int(v)))


def parse_hex(value: str) -> RGB:
    m = _HEX_RE.match((value or "").strip())
    if not m:
        raise ValueError(f"Invalid hex color: {value!r}")
    digits = m.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    num = int(digits, 16)
    return (num >> 16) & 0xFF, (num >> 8) & 0xFF, num & 0xFF


def to_hex(rgb: tuple[int, ...]) -> str:
    r, g, b = (_clamp(c) for c in rgb[:3])
    return f"#{r:02x}{g:02x}{b:02x}"


def normalize_hex(value: str) -> str:
    return to_hex(parse_hex(value))


def adjust_brightness(color: str, amount: float) -> str:
    """
    Shift every channel of a ``#rrggbb`` color by ``round(2.55 * amount)``.

    ``amount`` is a percentage in [-100, 100]; channels clamp to [0, 255].
    """
    r, g, b = parse_hex(color)
    # Halves round toward +inf (-76.5 -> -76).
    delta = int(_round_half_up(2.55 * amount))
    return to_hex((_clamp(r + delta), _clamp(g + delta), _clamp(b + delta)))


def _round_half_up(x: float) -> float:
    return math.floor(x + 0.5)


def with_alpha(color: str, alpha: int = 255) -> RGBA:
    r, g, b = parse_hex(color)
    return r, g, b, _clamp(alpha)
