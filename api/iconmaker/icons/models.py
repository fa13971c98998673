from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .colors import normalize_hex

MIN_ICON_SIZE = 16
MAX_ICON_SIZE = 1024

DEFAULT_BACKGROUND = "#6366f1"
DEFAULT_FOREGROUND = "#ffffff"
DEFAULT_SIZE = 256

ICON_SIZES: list[tuple[int, str]] = [
    (16, "16x16 (Favicon)"),
    (32, "32x32 (Small)"),
    (48, "48x48 (Medium)"),
    (64, "64x64 (Large)"),
    (128, "128x128 (Retina)"),
    (256, "256x256 (Standard)"),
    (512, "512x512 (High-res)"),
    (1024, "1024x1024 (Ultra)"),
]


def _validate_rgb_hex(value: str) -> str:
    value = (value or "").strip()
    if len(value) != 7 or not value.startswith("#"):
        raise ValueError("color must be a #rrggbb hex string")
    return normalize_hex(value)


class IconSpec(BaseModel):
    """Immutable rendering input: what to draw, in which colors, at which export size."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    description: str = Field(default="", max_length=1000)
    background_color: str = DEFAULT_BACKGROUND
    foreground_color: str = DEFAULT_FOREGROUND
    size: int = Field(default=DEFAULT_SIZE, ge=MIN_ICON_SIZE, le=MAX_ICON_SIZE)

    @field_validator("background_color", "foreground_color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        return _validate_rgb_hex(value)

    def remote_payload(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


class SavedIcon(BaseModel):
    """Library record, serialized with the camelCase keys the UI stores."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    description: str = ""
    image_url: str
    background_color: str = DEFAULT_BACKGROUND
    foreground_color: str = DEFAULT_FOREGROUND
    size: int = DEFAULT_SIZE
    created_at: str

    def spec(self) -> IconSpec:
        return IconSpec(
            description=self.description,
            background_color=self.background_color,
            foreground_color=self.foreground_color,
            size=self.size,
        )
