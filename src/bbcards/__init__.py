"""
Package initialization for bbcards.

This package turns plain-text card lists into printable PDF card sheets for
party card games, one deck per directory of card files.

Modules:
    - config: Paper formats, card sizes and caption vocabularies
    - geometry: Card grid computation
    - markup: Inline formatting tag sanitizing
    - directives: Pick count and image directives of a card line
    - paginator: Card list reading and pagination
    - sources: Deck discovery, icon lookup and the directory walk
    - pdf_generator: Drawing card sheets onto a PDF
    - layout: High-level API orchestrating the above modules
"""

from .config import CardTexts, get_card_texts
from .directives import (
    CardDirective,
    ImageDirective,
    ImageDirectiveError,
    ImageNotFoundError,
    parse_card,
)
from .geometry import CardGeometry, GeometryError, get_card_geometry
from .layout import (
    DeckResult,
    build_deck_bytes,
    build_decks,
    build_directory_decks,
    build_file_deck,
)
from .markup import sanitize
from .paginator import paginate
from .pdf_generator import RenderedCard, render_deck, write_deck_pdf
from .sources import Deck, load_deck

__all__ = [
    "CardTexts",
    "get_card_texts",
    "CardDirective",
    "ImageDirective",
    "ImageDirectiveError",
    "ImageNotFoundError",
    "parse_card",
    "CardGeometry",
    "GeometryError",
    "get_card_geometry",
    "DeckResult",
    "build_deck_bytes",
    "build_decks",
    "build_directory_decks",
    "build_file_deck",
    "sanitize",
    "paginate",
    "RenderedCard",
    "render_deck",
    "write_deck_pdf",
    "Deck",
    "load_deck",
]
