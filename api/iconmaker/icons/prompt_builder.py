from __future__ import annotations

from .models import IconSpec

STYLE_LINES = (
    "Style: Clean, modern, minimalist app icon design",
    "Format: Square icon with rounded corners, suitable for mobile apps",
    "The icon should be simple, recognizable, and professional",
    "Use flat design or subtle gradients",
    "Make sure the main element is centered and clearly visible",
)


def build_icon_prompt(spec: IconSpec) -> str:
    return "\n".join(
        [
            "Create a professional app icon with the following characteristics:",
            f"- Description: {spec.description}",
            f"- Background color: {spec.background_color}",
            f"- Foreground/main element color: {spec.foreground_color}",
            *(f"- {line}" for line in STYLE_LINES),
            f"- The design should work well at small sizes like {spec.size}x{spec.size} pixels",
            "- Ultra high resolution, crisp edges",
        ]
    )
