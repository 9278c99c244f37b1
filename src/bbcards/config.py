"""
Configuration constants for bbcards.

Paper formats, card sizes, caption vocabularies and the geometry settings
(margins, rounded corner radius) used when laying cards out on a sheet.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, NamedTuple, Tuple

from reportlab.lib.pagesizes import A4, landscape, letter
from reportlab.lib.units import inch, mm

MM_PER_INCH = 25.4

PRODUCER = "Bigger, Blacker Cards"
DEFAULT_DECK_NAME = "Cards Against Humanity"
DEFAULT_STREAM_TITLE = PRODUCER
DEFAULT_OUTPUT_NAME = "cards"

DEFAULT_WHITE_FILE = "white.txt"
DEFAULT_BLACK_FILE = "black.txt"
DEFAULT_ICON_FILE = "icon.png"


@dataclass(frozen=True)
class GeometryConfig:
    """Fixed lengths (in points) the grid computation depends on."""

    margin_width: float = 10 * mm
    margin_height: float = 15 * mm
    rounded_radius: float = inch / 8.0
    points_per_inch: float = inch


DEFAULT_GEOMETRY_CONFIG = GeometryConfig()


# --- Paper formats ---
# Ordered, first match wins. Keys are compared case-insensitively.
DEFAULT_PAPER_FORMAT = "LETTER"

PAPER_FORMATS: Tuple[Tuple[Tuple[str, ...], Tuple[float, float]], ...] = (
    (("LETTER", "letter"), letter),
    (("LETTER_", "letter-landscape"), landscape(letter)),
    (("DINA4", "a4", "din-a4"), A4),
    (("DINA4_", "a4-landscape", "din-a4-landscape"), landscape(A4)),
)


# --- Card sizes ---
class CardSize(NamedTuple):
    width_inches: float
    height_inches: float
    font_size: int


DEFAULT_CARD_SIZE = "small"

CARD_SIZES: Dict[str, CardSize] = {
    "small": CardSize(2.0, 2.0, 14),
    "medium1": CardSize(41 / MM_PER_INCH, 63 / MM_PER_INCH, 12),
    "medium2": CardSize(43 / MM_PER_INCH, 65 / MM_PER_INCH, 12),
    "medium3": CardSize(45 / MM_PER_INCH, 68 / MM_PER_INCH, 14),
    "large": CardSize(2.5, 3.5, 14),
}


# --- Caption vocabularies ---
class CardTexts(NamedTuple):
    draw: str
    pick: str


DEFAULT_LANGUAGE = "en"

LANGUAGE_TEXTS: Dict[str, CardTexts] = {
    "en": CardTexts(draw="DRAW", pick="PICK"),
    "es": CardTexts(draw="COGE", pick="ELIGE"),
}

LANGUAGE_ALIASES: Dict[str, str] = {
    "en": "en",
    "en-uk": "en",
    "en-us": "en",
    "es": "es",
    "es-es": "es",
}


def get_card_texts(lang: str | None = DEFAULT_LANGUAGE) -> CardTexts:
    """Return the caption vocabulary for `lang`, English when unknown."""
    key = LANGUAGE_ALIASES.get((lang or "").strip().lower(), DEFAULT_LANGUAGE)
    return LANGUAGE_TEXTS[key]
