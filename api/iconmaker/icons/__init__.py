"""Procedural icon renderer, ICO encoder and the remote-or-procedural generation flow."""

from .colors import adjust_brightness
from .errors import EncodingFailed, QuotaExceeded, RateLimited, RemoteGenerationFailed
from .export import export_filename, export_icon
from .generator import GenerationResult, generate_icon
from .glyphs import GLYPH_RULES, select_glyph
from .ico import encode_ico
from .models import IconSpec, SavedIcon
from .raster import RasterImage
from .renderer import render_icon

__all__ = [
    "GLYPH_RULES",
    "EncodingFailed",
    "GenerationResult",
    "IconSpec",
    "QuotaExceeded",
    "RasterImage",
    "RateLimited",
    "RemoteGenerationFailed",
    "SavedIcon",
    "adjust_brightness",
    "encode_ico",
    "export_filename",
    "export_icon",
    "generate_icon",
    "render_icon",
    "select_glyph",
]
