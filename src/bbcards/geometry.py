"""Card and paper geometry: how many cards fit on a sheet and where."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple, Tuple, Union

from .config import (
    DEFAULT_GEOMETRY_CONFIG,
    PAPER_FORMATS,
    GeometryConfig,
)

# Inset of the printable area of a card from its cut lines (points).
SLOT_MARGIN = 10.0

CornerSpec = Union[bool, float, int, None]


class GeometryError(ValueError):
    """Raised when not even one card fits on the printable area."""


@dataclass(frozen=True)
class CardGeometry:
    """Grid layout of one deck. All lengths are in points (1/72 inch)."""

    card_width: float
    card_height: float
    paper_width: float
    paper_height: float
    rounded_corners: float
    cards_across: int
    cards_high: int
    page_width: float
    page_height: float
    margin_left: float
    margin_top: float
    font_size: float
    one_card_per_page: bool = False

    @property
    def capacity(self) -> int:
        """Number of cards per sheet."""
        if self.one_card_per_page:
            return 1
        return self.cards_across * self.cards_high


class CardSlot(NamedTuple):
    row: int
    column: int


class SlotBox(NamedTuple):
    """Printable area of a card; `y` is the bottom edge."""

    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y

    @property
    def top(self) -> float:
        return self.y + self.height


def resolve_paper_size(paper_format: str | None) -> Tuple[float, float]:
    """
    Look up the (width, height) of a paper format in points.

    Names are compared case-insensitively against the ordered format table;
    anything unrecognized (including None) is US letter.
    """
    wanted = (paper_format or "").strip().lower()
    for names, size in PAPER_FORMATS:
        if wanted in (name.lower() for name in names):
            return size
    return PAPER_FORMATS[0][1]


def resolve_corner_radius(
    rounded_corners: CornerSpec,
    config: GeometryConfig = DEFAULT_GEOMETRY_CONFIG,
) -> float:
    """True gives the standard radius, False/None square corners; numbers pass through."""
    if rounded_corners is True:
        return config.rounded_radius
    if rounded_corners is False or rounded_corners is None:
        return 0.0
    return float(rounded_corners)


def get_card_geometry(
    card_width_inches: float = 2.0,
    card_height_inches: float = 2.0,
    card_font_size: float = 14,
    paper_format: str | None = None,
    rounded_corners: CornerSpec = False,
    one_card_per_page: bool = False,
    config: GeometryConfig = DEFAULT_GEOMETRY_CONFIG,
) -> CardGeometry:
    """
    Compute the card grid for a card size on a paper format.

    Args:
        card_width_inches: Card width in inches
        card_height_inches: Card height in inches
        card_font_size: Starting font size of the card text
        paper_format: Paper format name (see `config.PAPER_FORMATS`)
        rounded_corners: True/False or an explicit radius in points
        one_card_per_page: Size every page to exactly one card
        config: Margins and unit conversion

    Returns:
        The CardGeometry of the deck

    Raises:
        GeometryError: If the card does not fit on the printable area
    """
    card_width = card_width_inches * config.points_per_inch
    card_height = card_height_inches * config.points_per_inch

    if card_width <= 0 or card_height <= 0:
        raise GeometryError(
            f"Card size must be positive, got {card_width_inches}x{card_height_inches} in"
        )

    if one_card_per_page:
        paper_width, paper_height = card_width, card_height
        cards_across = cards_high = 1
    else:
        paper_width, paper_height = resolve_paper_size(paper_format)
        cards_across = math.floor((paper_width - config.margin_width) / card_width)
        cards_high = math.floor((paper_height - config.margin_height) / card_height)

    if cards_across < 1 or cards_high < 1:
        raise GeometryError(
            f"A {card_width_inches:.2f}x{card_height_inches:.2f} in card does not fit "
            f"on {paper_width / config.points_per_inch:.2f}x"
            f"{paper_height / config.points_per_inch:.2f} in paper "
            f"({cards_across} across, {cards_high} high)"
        )

    page_width = card_width * cards_across
    page_height = card_height * cards_high

    return CardGeometry(
        card_width=card_width,
        card_height=card_height,
        paper_width=paper_width,
        paper_height=paper_height,
        rounded_corners=resolve_corner_radius(rounded_corners, config),
        cards_across=cards_across,
        cards_high=cards_high,
        page_width=page_width,
        page_height=page_height,
        margin_left=(paper_width - page_width) / 2,
        margin_top=(paper_height - page_height) / 2,
        font_size=card_font_size,
        one_card_per_page=one_card_per_page,
    )


def card_slot(geometry: CardGeometry, index: int) -> CardSlot:
    """Grid cell of the `index`-th card on a page; rows count from the bottom."""
    column = index % geometry.cards_across
    row = geometry.cards_high - index // geometry.cards_across
    return CardSlot(row=row, column=column)


def slot_box(geometry: CardGeometry, index: int) -> SlotBox:
    """Printable box of the `index`-th card, relative to the grid origin."""
    slot = card_slot(geometry, index)
    top = geometry.card_height * slot.row - SLOT_MARGIN
    height = geometry.card_height - SLOT_MARGIN
    return SlotBox(
        x=geometry.card_width * slot.column + SLOT_MARGIN,
        y=top - height,
        width=geometry.card_width - 2 * SLOT_MARGIN,
        height=height,
    )
