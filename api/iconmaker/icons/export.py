from __future__ import annotations

import logging
from dataclasses import dataclass

from .errors import EncodingFailed
from .ico import ICO_MIME_TYPE, encode_ico
from .raster import RasterImage

_logger = logging.getLogger(__name__)

EXPORT_FORMATS = {
    "png": "image/png",
    "ico": ICO_MIME_TYPE,
}


@dataclass(frozen=True)
class ExportedFile:
    filename: str
    media_type: str
    body: bytes


def export_filename(name: str | None, size: int, fmt: str) -> str:
    base = (name or "").strip() or "icon"
    return f"{base}_{size}x{size}.{fmt}"


def export_png(raster: RasterImage, size: int) -> bytes:
    return raster.resized(size).to_png()


def export_ico(raster: RasterImage, size: int) -> bytes:
    scaled = raster.resized(size)
    return encode_ico(scaled.pixels, scaled.size)


def export_icon(raster: RasterImage, *, size: int, fmt: str, name: str | None = None) -> ExportedFile:
    fmt = (fmt or "").strip().lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt!r} (use png or ico)")

    try:
        body = export_ico(raster, size) if fmt == "ico" else export_png(raster, size)
    except EncodingFailed as e:
        _logger.warning("%s export failed at %sx%s: %s", fmt.upper(), size, size, e)
        raise
    except (OSError, ValueError) as e:
        _logger.warning("%s export failed at %sx%s: %s", fmt.upper(), size, size, e)
        raise EncodingFailed(f"Failed to create {fmt.upper()} file: {e}") from e

    return ExportedFile(filename=export_filename(name, size, fmt), media_type=EXPORT_FORMATS[fmt], body=body)
