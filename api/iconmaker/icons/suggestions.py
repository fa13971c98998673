"""Example descriptions offered next to the description box."""

from __future__ import annotations

PROMPT_SUGGESTIONS: dict[str, list[str]] = {
    "Business": [
        "Modern briefcase with clean lines",
        "Minimalist chart with upward arrow",
        "Simple handshake silhouette",
        "Abstract dollar sign in circle",
    ],
    "Technology": [
        "Stylized smartphone with rounded corners",
        "Clean wifi signal icon",
        "Modern cloud with data points",
        "Simple rocket ship pointing up",
    ],
    "Social": [
        "Two overlapping chat bubbles",
        "Stylized group of people",
        "Heart with rounded edges",
        "Simple thumbs up gesture",
    ],
    "Creative": [
        "Artist palette with brush",
        "Musical note with flowing lines",
        "Camera lens with aperture",
        "Pen and paper illustration",
    ],
    "Utility": [
        "Minimalist gear wheel",
        "Simple magnifying glass",
        "Clean calendar grid",
        "Modern lock with keyhole",
    ],
}

SUGGESTION_TIP = (
    "Be specific about shapes, style, and elements. "
    "Avoid complex scenes - simple, recognizable symbols work best for app icons."
)
