from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from .canvas import GlyphCanvas, Path
from .colors import adjust_brightness

CENTER = 256.0


@dataclass(frozen=True)
class GlyphPalette:
    foreground: str
    background: str


GlyphFn = Callable[[GlyphCanvas, GlyphPalette], None]


@dataclass(frozen=True)
class GlyphRule:
    name: str
    keywords: tuple[str, ...]
    draw: GlyphFn

    def matches(self, description: str) -> bool:
        text = (description or "").lower()
        return any(k in text for k in self.keywords)


def star_points(cx: float, cy: float, spikes: int, outer: float, inner: float) -> list[tuple[float, float]]:
    rot = math.pi / 2 * 3
    step = math.pi / spikes
    points = [(cx, cy - outer)]
    for _ in range(spikes):
        points.append((cx + math.cos(rot) * outer, cy + math.sin(rot) * outer))
        rot += step
        points.append((cx + math.cos(rot) * inner, cy + math.sin(rot) * inner))
        rot += step
    return points


def heart_path(x: float, y: float, size: float) -> Path:
    top = size * 0.3
    mid = y + (size + top) / 2
    half = size / 2
    return (
        Path(x, y + top)
        .cubic_to(x, y, x - half, y, x - half, y + top)
        .cubic_to(x - half, mid, x, mid, x, y + size)
        .cubic_to(x, mid, x + half, mid, x + half, y + top)
        .cubic_to(x + half, y, x, y, x, y + top)
    )


def gear_points(cx: float, cy: float, outer: float, inner: float, teeth: int) -> list[tuple[float, float]]:
    points = []
    for i in range(teeth * 2):
        angle = i * math.pi / teeth
        radius = outer if i % 2 == 0 else inner
        points.append((cx + math.cos(angle) * radius, cy + math.sin(angle) * radius))
    return points


def draw_circle(canvas: GlyphCanvas, palette: GlyphPalette) -> None:
    canvas.fill_circle(CENTER, CENTER, 180, palette.foreground)
    canvas.stroke_circle(CENTER, CENTER, 120, 30, palette.background)


def draw_star(canvas: GlyphCanvas, palette: GlyphPalette) -> None:
    canvas.fill_polygon(star_points(CENTER, CENTER, 5, 180, 90), palette.foreground)


def draw_heart(canvas: GlyphCanvas, palette: GlyphPalette) -> None:
    canvas.fill_path(heart_path(CENTER, 106, 300), palette.foreground)


def draw_arrow(canvas: GlyphCanvas, palette: GlyphPalette) -> None:
    canvas.fill_polygon(
        [(362, 256), (192, 180), (192, 220), (132, 220), (132, 292), (192, 292), (192, 332)],
        palette.foreground,
    )


def draw_gear(canvas: GlyphCanvas, palette: GlyphPalette) -> None:
    canvas.fill_polygon(gear_points(CENTER, CENTER, 160, 80, 8), palette.foreground)
    canvas.fill_circle(CENTER, CENTER, 50, palette.background)


def draw_house(canvas: GlyphCanvas, palette: GlyphPalette) -> None:
    canvas.fill_rect(150, 250, 212, 180, palette.foreground)
    canvas.fill_polygon([(256, 150), (120, 270), (392, 270)], palette.foreground)
    # door, then windows
    canvas.fill_rect(220, 350, 72, 80, palette.background)
    canvas.fill_rect(180, 280, 40, 40, palette.background)
    canvas.fill_rect(292, 280, 40, 40, palette.background)


def draw_envelope(canvas: GlyphCanvas, palette: GlyphPalette) -> None:
    canvas.fill_rect(120, 200, 272, 200, palette.foreground)
    canvas.fill_polygon([(120, 200), (256, 300), (392, 200)], adjust_brightness(palette.foreground, -15))
    canvas.stroke_polyline([(140, 220), (256, 320), (372, 220)], 4, palette.background)


def draw_music_note(canvas: GlyphCanvas, palette: GlyphPalette) -> None:
    canvas.fill_ellipse(200, 350, 30, 20, -math.pi / 6, palette.foreground)
    canvas.fill_rect(225, 180, 8, 170, palette.foreground)
    flag = Path(233, 180).quad_to(280, 160, 300, 200).quad_to(280, 180, 233, 200)
    canvas.fill_path(flag, palette.foreground)


def draw_camera(canvas: GlyphCanvas, palette: GlyphPalette) -> None:
    trim = adjust_brightness(palette.foreground, -20)
    canvas.fill_rect(150, 200, 212, 150, palette.foreground)
    canvas.fill_circle(256, 275, 60, trim)
    canvas.fill_circle(256, 275, 35, palette.background)
    canvas.fill_rect(320, 210, 30, 20, trim)


def draw_lock(canvas: GlyphCanvas, palette: GlyphPalette) -> None:
    canvas.fill_rect(180, 280, 152, 120, palette.foreground)
    canvas.stroke_arc(256, 240, 50, 180, 360, 16, palette.foreground)
    canvas.stroke_polyline([(206, 240), (206, 282)], 16, palette.foreground)
    canvas.stroke_polyline([(306, 240), (306, 282)], 16, palette.foreground)
    # keyhole
    canvas.fill_circle(256, 330, 15, palette.background)
    canvas.fill_rect(251, 330, 10, 25, palette.background)


def draw_geometric(canvas: GlyphCanvas, palette: GlyphPalette) -> None:
    canvas.fill_rounded_rect(150, 150, 212, 212, 20, palette.foreground)
    canvas.fill_rounded_rect(180, 180, 152, 152, 20, adjust_brightness(palette.foreground, 40))
    canvas.fill_rounded_rect(210, 210, 92, 92, 20, palette.background)


# Evaluated top to bottom; the first rule with a keyword hit wins.
GLYPH_RULES: tuple[GlyphRule, ...] = (
    GlyphRule("circle", ("circle", "round", "ball", "dot"), draw_circle),
    GlyphRule("star", ("star", "rating", "favorite"), draw_star),
    GlyphRule("heart", ("heart", "love", "like"), draw_heart),
    GlyphRule("arrow", ("arrow", "play", "forward", "next"), draw_arrow),
    GlyphRule("gear", ("gear", "settings", "config", "cog"), draw_gear),
    GlyphRule("house", ("house", "home", "building"), draw_house),
    GlyphRule("envelope", ("envelope", "mail", "message", "email"), draw_envelope),
    GlyphRule("music", ("music", "note", "sound", "audio"), draw_music_note),
    GlyphRule("camera", ("camera", "photo", "picture", "image"), draw_camera),
    GlyphRule("lock", ("lock", "security", "protect", "safe"), draw_lock),
)

DEFAULT_GLYPH = GlyphRule("geometric", (), draw_geometric)


def select_glyph(description: str, rules: tuple[GlyphRule, ...] = GLYPH_RULES) -> GlyphRule:
    for rule in rules:
        if rule.matches(description):
            return rule
    return DEFAULT_GLYPH


def glyph_table() -> list[dict[str, object]]:
    return [{"name": r.name, "keywords": list(r.keywords)} for r in (*GLYPH_RULES, DEFAULT_GLYPH)]
