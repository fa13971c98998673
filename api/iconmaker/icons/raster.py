from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from io import BytesIO
from typing import Iterable

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import EncodingFailed

WORKING_SIZE = 512
PREVIEW_SIZES = (16, 32, 64, 128)


@dataclass(frozen=True, eq=False)
class RasterImage:
    """Square RGBA pixel grid, 8 bits per channel, shape (size, size, 4)."""

    pixels: np.ndarray
    size: int

    def __post_init__(self) -> None:
        expected = (self.size, self.size, 4)
        if self.pixels.shape != expected or self.pixels.dtype != np.uint8:
            raise ValueError(f"RasterImage pixels must be uint8 {expected}; got {self.pixels.dtype} {self.pixels.shape}")

    @classmethod
    def from_image(cls, img: Image.Image) -> "RasterImage":
        rgba = img.convert("RGBA")
        side = max(rgba.size)
        if rgba.size != (side, side):
            rgba = rgba.resize((side, side), Image.Resampling.LANCZOS)
        return cls(pixels=np.asarray(rgba, dtype=np.uint8).copy(), size=side)

    @classmethod
    def from_bytes(cls, data: bytes) -> "RasterImage":
        try:
            with Image.open(BytesIO(data)) as img:
                img.load()
                return cls.from_image(img)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise EncodingFailed(f"Unreadable source image: {e}") from e

    @classmethod
    def from_data_url(cls, url: str) -> "RasterImage":
        return cls.from_bytes(decode_data_url(url))

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    def rgba_bytes(self) -> bytes:
        return self.pixels.tobytes()

    def resized(self, size: int) -> "RasterImage":
        if size < 1:
            raise EncodingFailed(f"Invalid target size: {size}")
        if size == self.size:
            return self
        img = self.to_image().resize((size, size), Image.Resampling.LANCZOS)
        return RasterImage.from_image(img)

    def to_png(self) -> bytes:
        buf = BytesIO()
        self.to_image().save(buf, format="PNG", optimize=True)
        return buf.getvalue()

    def to_data_url(self) -> str:
        return "data:image/png;base64," + base64.b64encode(self.to_png()).decode("ascii")

    def same_pixels(self, other: "RasterImage") -> bool:
        return self.size == other.size and bool(np.array_equal(self.pixels, other.pixels))


def is_data_url(url: str) -> bool:
    return (url or "").strip().lower().startswith("data:")


def decode_data_url(url: str) -> bytes:
    header, sep, payload = (url or "").strip().partition(",")
    if not sep or not header.lower().startswith("data:"):
        raise EncodingFailed("Not a data URL")
    if not header.lower().endswith(";base64"):
        raise EncodingFailed("Only base64 data URLs are supported")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingFailed(f"Invalid base64 payload: {e}") from e


def preview_set(raster: RasterImage, sizes: Iterable[int] = PREVIEW_SIZES) -> dict[int, str]:
    """PNG data URLs of the same raster at several display sizes."""
    return {int(s): raster.resized(int(s)).to_data_url() for s in sizes}
