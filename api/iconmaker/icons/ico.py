"""
Single-image ICO container holding an uncompressed 32-bit BMP entry.

Layout (all integers little-endian):

    ICONDIR          6 bytes   reserved, type=1, count=1
    ICONDIRENTRY    16 bytes   width, height, palette, reserved, planes,
                               bit depth, image byte size, image offset
    BITMAPINFOHEADER 40 bytes  height is doubled (XOR image + AND mask)
    pixel array      N*N*4     BGRA, bottom-up rows
    AND mask         ceil(N/8)*N, all zero
"""

from __future__ import annotations

import struct
from typing import Union

import numpy as np

from .errors import EncodingFailed

ICO_MIME_TYPE = "image/x-icon"

ICONDIR_SIZE = 6
ICONDIRENTRY_SIZE = 16
BITMAPINFOHEADER_SIZE = 40

ICO_TYPE_ICON = 1
BITS_PER_PIXEL = 32
COLOR_PLANES = 1
BI_RGB = 0

# Directory width/height are single bytes; 0 means 256 or larger.
MAX_DIRECTORY_DIMENSION = 255

PixelBuffer = Union[bytes, bytearray, memoryview, np.ndarray]


class _ByteWriter:
    def __init__(self) -> None:
        self._buf = bytearray()

    @property
    def offset(self) -> int:
        return len(self._buf)

    def _pack(self, fmt: str, value: int) -> None:
        self._buf += struct.pack(fmt, value)

    def u8(self, value: int) -> None:
        self._pack("<B", value)

    def u16(self, value: int) -> None:
        self._pack("<H", value)

    def u32(self, value: int) -> None:
        self._pack("<I", value)

    def i32(self, value: int) -> None:
        self._pack("<i", value)

    def raw(self, data: bytes) -> None:
        self._buf += data

    def expect_offset(self, region: str, expected: int) -> None:
        if self.offset != expected:
            raise EncodingFailed(f"ICO {region} ends at byte {self.offset}; expected {expected}")

    def getvalue(self) -> bytes:
        return bytes(self._buf)


def and_mask_size(size: int) -> int:
    return ((size + 7) // 8) * size


def pixel_data_size(size: int) -> int:
    return size * size * 4


def image_data_size(size: int) -> int:
    return BITMAPINFOHEADER_SIZE + pixel_data_size(size) + and_mask_size(size)


def directory_dimension(size: int) -> int:
    return size if size <= MAX_DIRECTORY_DIMENSION else 0


def _rgba_array(pixels: PixelBuffer, size: int) -> np.ndarray:
    if isinstance(pixels, np.ndarray):
        arr = np.ascontiguousarray(pixels, dtype=np.uint8)
    else:
        arr = np.frombuffer(bytes(pixels), dtype=np.uint8)
    expected = pixel_data_size(size)
    if arr.size != expected:
        raise EncodingFailed(f"Pixel buffer has {arr.size} bytes; expected {expected} for {size}x{size} RGBA")
    return arr.reshape(size, size, 4)


def bgra_bottom_up(pixels: PixelBuffer, size: int) -> bytes:
    """Flip rows (last source row first) and swap RGBA to BGRA."""
    arr = _rgba_array(pixels, size)
    return np.ascontiguousarray(arr[::-1, :, [2, 1, 0, 3]]).tobytes()


def encode_ico(pixels: PixelBuffer, size: int) -> bytes:
    size = int(size)
    if size < 1:
        raise EncodingFailed(f"Invalid icon size: {size!r}")

    pixel_bytes = bgra_bottom_up(pixels, size)
    mask_bytes = and_mask_size(size)
    image_offset = ICONDIR_SIZE + ICONDIRENTRY_SIZE

    w = _ByteWriter()

    # ICONDIR
    w.u16(0)
    w.u16(ICO_TYPE_ICON)
    w.u16(1)
    w.expect_offset("ICONDIR", ICONDIR_SIZE)

    # ICONDIRENTRY
    w.u8(directory_dimension(size))
    w.u8(directory_dimension(size))
    w.u8(0)  # palette colors
    w.u8(0)  # reserved
    w.u16(COLOR_PLANES)
    w.u16(BITS_PER_PIXEL)
    w.u32(image_data_size(size))
    w.u32(image_offset)
    w.expect_offset("ICONDIRENTRY", image_offset)

    # BITMAPINFOHEADER
    w.u32(BITMAPINFOHEADER_SIZE)
    w.i32(size)
    w.i32(size * 2)
    w.u16(COLOR_PLANES)
    w.u16(BITS_PER_PIXEL)
    w.u32(BI_RGB)
    w.u32(pixel_data_size(size) + mask_bytes)
    w.i32(0)  # x pixels per meter
    w.i32(0)  # y pixels per meter
    w.u32(0)  # colors used
    w.u32(0)  # important colors
    w.expect_offset("BITMAPINFOHEADER", image_offset + BITMAPINFOHEADER_SIZE)

    w.raw(pixel_bytes)
    w.raw(bytes(mask_bytes))
    w.expect_offset("image data", image_offset + image_data_size(size))
    return w.getvalue()
