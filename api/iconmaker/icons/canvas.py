from __future__ import annotations

import math

from PIL import Image, ImageDraw

from .colors import with_alpha
from .raster import WORKING_SIZE

SUPERSAMPLE = 2
CURVE_STEPS = 32
ELLIPSE_STEPS = 96

Point = tuple[float, float]


def quadratic_points(p0: Point, p1: Point, p2: Point, *, steps: int = CURVE_STEPS) -> list[Point]:
    """Flatten a quadratic Bezier; the start point is not repeated."""
    out: list[Point] = []
    for i in range(1, steps + 1):
        t = i / steps
        u = 1.0 - t
        out.append(
            (
                u * u * p0[0] + 2 * u * t * p1[0] + t * t * p2[0],
                u * u * p0[1] + 2 * u * t * p1[1] + t * t * p2[1],
            )
        )
    return out


def cubic_points(p0: Point, p1: Point, p2: Point, p3: Point, *, steps: int = CURVE_STEPS) -> list[Point]:
    """Flatten a cubic Bezier; the start point is not repeated."""
    out: list[Point] = []
    for i in range(1, steps + 1):
        t = i / steps
        u = 1.0 - t
        a, b, c, d = u * u * u, 3 * u * u * t, 3 * u * t * t, t * t * t
        out.append(
            (
                a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
                a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1],
            )
        )
    return out


class Path:
    """Single closed outline built from line and curve segments."""

    def __init__(self, x: float, y: float) -> None:
        self.points: list[Point] = [(x, y)]

    @property
    def current(self) -> Point:
        return self.points[-1]

    def line_to(self, x: float, y: float) -> "Path":
        self.points.append((x, y))
        return self

    def quad_to(self, cx: float, cy: float, x: float, y: float) -> "Path":
        self.points.extend(quadratic_points(self.current, (cx, cy), (x, y)))
        return self

    def cubic_to(self, c1x: float, c1y: float, c2x: float, c2y: float, x: float, y: float) -> "Path":
        self.points.extend(cubic_points(self.current, (c1x, c1y), (c2x, c2y), (x, y)))
        return self


def rounded_rect_path(x: float, y: float, w: float, h: float, r: float) -> Path:
    return (
        Path(x + r, y)
        .line_to(x + w - r, y)
        .quad_to(x + w, y, x + w, y + r)
        .line_to(x + w, y + h - r)
        .quad_to(x + w, y + h, x + w - r, y + h)
        .line_to(x + r, y + h)
        .quad_to(x, y + h, x, y + h - r)
        .line_to(x, y + r)
        .quad_to(x, y, x + r, y)
    )


class GlyphCanvas:
    """
    Transparent RGBA layer addressed in working-resolution units (0..512).

    Drawing happens on a supersampled buffer; ``finish()`` box-filters it back
    down so edges come out anti-aliased while flat interiors keep exact colors.
    """

    def __init__(self, size: int = WORKING_SIZE, *, supersample: int = SUPERSAMPLE) -> None:
        self.size = size
        self.scale = max(1, int(supersample))
        self._layer = Image.new("RGBA", (size * self.scale, size * self.scale), (0, 0, 0, 0))
        self._draw = ImageDraw.Draw(self._layer)

    def _pt(self, p: Point) -> Point:
        return p[0] * self.scale, p[1] * self.scale

    def _box(self, x0: float, y0: float, x1: float, y1: float) -> list[float]:
        s = self.scale
        # ImageDraw boxes include their far edge.
        return [x0 * s, y0 * s, x1 * s - 1, y1 * s - 1]

    def fill_polygon(self, points: list[Point], color: str) -> None:
        self._draw.polygon([self._pt(p) for p in points], fill=with_alpha(color))

    def fill_path(self, path: Path, color: str) -> None:
        self.fill_polygon(path.points, color)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        self._draw.rectangle(self._box(x, y, x + w, y + h), fill=with_alpha(color))

    def fill_rounded_rect(self, x: float, y: float, w: float, h: float, r: float, color: str) -> None:
        self.fill_path(rounded_rect_path(x, y, w, h, r), color)

    def fill_circle(self, cx: float, cy: float, r: float, color: str) -> None:
        self._draw.ellipse(self._box(cx - r, cy - r, cx + r, cy + r), fill=with_alpha(color))

    def fill_ellipse(self, cx: float, cy: float, rx: float, ry: float, rotation: float, color: str) -> None:
        cos_r, sin_r = math.cos(rotation), math.sin(rotation)
        points: list[Point] = []
        for i in range(ELLIPSE_STEPS):
            a = 2 * math.pi * i / ELLIPSE_STEPS
            ex, ey = rx * math.cos(a), ry * math.sin(a)
            points.append((cx + ex * cos_r - ey * sin_r, cy + ex * sin_r + ey * cos_r))
        self.fill_polygon(points, color)

    def stroke_circle(self, cx: float, cy: float, r: float, width: float, color: str) -> None:
        # Strokes are centered on the radius; ImageDraw grows the outline inward.
        outer = r + width / 2
        self._draw.ellipse(
            self._box(cx - outer, cy - outer, cx + outer, cy + outer),
            outline=with_alpha(color),
            width=int(round(width * self.scale)),
        )

    def stroke_arc(self, cx: float, cy: float, r: float, start_deg: float, end_deg: float, width: float, color: str) -> None:
        """Angles in degrees, clockwise from 3 o'clock (y grows downward)."""
        outer = r + width / 2
        self._draw.arc(
            self._box(cx - outer, cy - outer, cx + outer, cy + outer),
            start=start_deg,
            end=end_deg,
            fill=with_alpha(color),
            width=int(round(width * self.scale)),
        )

    def stroke_polyline(self, points: list[Point], width: float, color: str) -> None:
        self._draw.line(
            [self._pt(p) for p in points],
            fill=with_alpha(color),
            width=int(round(width * self.scale)),
            joint="curve",
        )

    def finish(self) -> Image.Image:
        if self.scale == 1:
            return self._layer.copy()
        return self._layer.resize((self.size, self.size), Image.Resampling.BOX)
