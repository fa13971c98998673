from __future__ import annotations

import numpy as np
from PIL import Image, ImageFilter

from .canvas import GlyphCanvas
from .colors import adjust_brightness, parse_hex
from .glyphs import GlyphPalette, select_glyph
from .models import IconSpec
from .raster import WORKING_SIZE, RasterImage

BACKGROUND_EDGE_DARKEN = -30
NOISE_AMPLITUDE = 6

SHADOW_RGB = (0, 0, 0)
SHADOW_OPACITY = 0.3
SHADOW_BLUR = 10
SHADOW_OFFSET = (0, 5)


def radial_background(color: str, size: int = WORKING_SIZE) -> np.ndarray:
    """Radial gradient from ``color`` at the center to a darker shade at the edge."""
    inner = np.array(parse_hex(color), dtype=np.float64)
    outer = np.array(parse_hex(adjust_brightness(color, BACKGROUND_EDGE_DARKEN)), dtype=np.float64)

    half = size / 2.0
    ys, xs = np.mgrid[0:size, 0:size].astype(np.float64) + 0.5
    t = np.clip(np.hypot(xs - half, ys - half) / half, 0.0, 1.0)
    rgb = inner + (outer - inner) * t[..., None]
    return np.rint(rgb).astype(np.uint8)


def apply_noise(rgb: np.ndarray, *, seed: int, amplitude: int = NOISE_AMPLITUDE) -> np.ndarray:
    rng = np.random.default_rng(seed)
    offsets = rng.integers(-amplitude, amplitude + 1, size=rgb.shape)
    return np.clip(rgb.astype(np.int16) + offsets, 0, 255).astype(np.uint8)


def drop_shadow(glyph: Image.Image) -> Image.Image:
    """Blurred, offset, translucent silhouette of the glyph layer."""
    # Canvas-style shadow blur maps to a Gaussian sigma of half the blur value.
    blurred = glyph.getchannel("A").filter(ImageFilter.GaussianBlur(radius=SHADOW_BLUR / 2))
    silhouette = Image.new("RGBA", glyph.size, SHADOW_RGB + (0,))
    silhouette.putalpha(blurred.point(lambda a: round(a * SHADOW_OPACITY)))

    shadow = Image.new("RGBA", glyph.size, (0, 0, 0, 0))
    shadow.paste(silhouette, SHADOW_OFFSET)
    return shadow


def render_icon(spec: IconSpec, *, noise_seed: int | None = None) -> RasterImage:
    """
    Procedural renderer. Never fails: descriptions without a keyword hit get
    the layered geometric glyph.

    Output is always WORKING_SIZE square regardless of ``spec.size``; exports
    resample afterwards. Pass ``noise_seed`` to add the grain texture.
    """
    rgb = radial_background(spec.background_color)
    if noise_seed is not None:
        rgb = apply_noise(rgb, seed=noise_seed)
    base = Image.fromarray(rgb).convert("RGBA")

    canvas = GlyphCanvas(WORKING_SIZE)
    palette = GlyphPalette(foreground=spec.foreground_color, background=spec.background_color)
    select_glyph(spec.description).draw(canvas, palette)
    glyph = canvas.finish()

    base.alpha_composite(drop_shadow(glyph))
    base.alpha_composite(glyph)
    return RasterImage.from_image(base)


def procedural_data_url(spec: IconSpec) -> str:
    return render_icon(spec).to_data_url()
