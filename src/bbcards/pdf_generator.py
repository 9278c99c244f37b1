"""PDF generation for card sheets."""
from __future__ import annotations

import itertools
from dataclasses import dataclass, replace
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Protocol, Sequence, Union

from reportlab.lib.colors import HexColor
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph

from .config import PRODUCER
from .directives import CardDirective, parse_card
from .geometry import CardGeometry, SlotBox, slot_box
from .markup import card_text_field, normalize_escapes, sanitize, trim
from .sources import Deck

BLACK = "#000000"
WHITE = "#ffffff"
RED = "#ff0000"

LINE_WIDTH = 0.5
DASH_PATTERN = [3, 2]

# Crop marks run from CUT_MARK_START to CUT_MARK_END points outside the grid.
CUT_MARK_START = 8
CUT_MARK_END = 100

# Space kept free below the card text, by pick count.
TEXT_MARGIN_BOTTOM = {0: 35, 1: 35, 2: 55, 3: 68}

MIN_FONT_SIZE = 4.0
FONT_STEP = 0.5

LOGO_MAX_HEIGHT = 15
DECK_NAME_SIZE = 6
CARD_NUMBER_SIZE = 6
CARD_NUMBER_ANGLE = 15
CAPTION_SIZE = 9
BADGE_SIZE = 10
BADGE_RADIUS = 6.0


class DrawingSurface(Protocol):
    """
    Drawing primitives the card renderer needs.

    Coordinates are in points relative to the bottom-left corner of the card
    grid, except for `fill_page` which always covers the whole sheet.
    """

    def begin_page(self) -> None: ...

    def end_page(self) -> None: ...

    def fill_page(self, color: str) -> None: ...

    def set_colors(self, stroke: str, fill: str) -> None: ...

    def rounded_rect(self, x: float, y: float, width: float, height: float, radius: float) -> None: ...

    def dashed_line(self, x1: float, y1: float, x2: float, y2: float) -> None: ...

    def circle(self, x: float, y: float, radius: float, color: str) -> None: ...

    def text(
        self,
        value: str,
        x: float,
        y: float,
        size: float,
        bold: bool = False,
        align: str = "left",
        angle: float = 0,
        color: Optional[str] = None,
    ) -> None: ...

    def text_box(
        self, markup: str, x: float, top: float, width: float, height: float, font_size: float
    ) -> float: ...

    def image(self, path: Path, x: float, top: float, max_width: float, max_height: float) -> None: ...

    def icon(
        self, path: Optional[Path], x: float, top: float, max_width: float, max_height: float
    ) -> None: ...


@dataclass(frozen=True)
class RenderedCard:
    """A card as it was put on the page."""

    number: int
    is_black: bool
    sanitized: str
    directive: CardDirective

    @property
    def pick_count(self) -> int:
        return self.directive.pick_count


class ReportLabSurface:
    """DrawingSurface backed by a ReportLab canvas."""

    def __init__(
        self,
        output: Union[str, BinaryIO],
        geometry: CardGeometry,
        title: Optional[str] = None,
        author: Optional[str] = None,
    ) -> None:
        self.geometry = geometry
        self.c = canvas.Canvas(output, pagesize=(geometry.paper_width, geometry.paper_height))
        if title:
            self.c.setTitle(title)
        if author:
            self.c.setAuthor(author)
        self.c.setCreator(PRODUCER)
        self.c.setProducer(PRODUCER)
        self._stroke = BLACK
        self._fill = BLACK

    def begin_page(self) -> None:
        self.c.translate(self.geometry.margin_left, self.geometry.margin_top)
        self.c.setLineWidth(LINE_WIDTH)
        self.set_colors(BLACK, BLACK)

    def end_page(self) -> None:
        self.c.showPage()

    def save(self) -> None:
        self.c.save()

    def fill_page(self, color: str) -> None:
        g = self.geometry
        self.c.saveState()
        self.c.setFillColor(HexColor(color))
        self.c.setStrokeColor(HexColor(color))
        self.c.rect(-g.margin_left, -g.margin_top, g.paper_width, g.paper_height, stroke=1, fill=1)
        self.c.restoreState()

    def set_colors(self, stroke: str, fill: str) -> None:
        self._stroke = stroke
        self._fill = fill
        self.c.setStrokeColor(HexColor(stroke))
        self.c.setFillColor(HexColor(fill))

    def rounded_rect(self, x: float, y: float, width: float, height: float, radius: float) -> None:
        if radius > 0:
            self.c.roundRect(x, y, width, height, radius, stroke=1, fill=0)
        else:
            self.c.rect(x, y, width, height, stroke=1, fill=0)

    def dashed_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.c.saveState()
        self.c.setDash(DASH_PATTERN)
        self.c.line(x1, y1, x2, y2)
        self.c.restoreState()

    def circle(self, x: float, y: float, radius: float, color: str) -> None:
        self.c.saveState()
        self.c.setFillColor(HexColor(color))
        self.c.setStrokeColor(HexColor(color))
        self.c.circle(x, y, radius, stroke=1, fill=1)
        self.c.restoreState()

    def text(
        self,
        value: str,
        x: float,
        y: float,
        size: float,
        bold: bool = False,
        align: str = "left",
        angle: float = 0,
        color: Optional[str] = None,
    ) -> None:
        self.c.saveState()
        self.c.setFont("Helvetica-Bold" if bold else "Helvetica", size)
        if color is not None:
            self.c.setFillColor(HexColor(color))
        self.c.translate(x, y)
        if angle:
            self.c.rotate(angle)
        if align == "right":
            self.c.drawRightString(0, 0, value)
        elif align == "center":
            self.c.drawCentredString(0, 0, value)
        else:
            self.c.drawString(0, 0, value)
        self.c.restoreState()

    def text_box(
        self, markup: str, x: float, top: float, width: float, height: float, font_size: float
    ) -> float:
        """
        Draw a paragraph into the box, shrinking the font until it fits.

        Returns the font size used.
        """
        markup = markup.replace("\n", "<br/>").replace("\t", "&nbsp;" * 4)
        size = float(font_size)
        while True:
            style = ParagraphStyle(
                "card",
                fontName="Helvetica",
                fontSize=size,
                leading=size * 1.2,
                textColor=HexColor(self._fill),
            )
            paragraph = Paragraph(markup, style)
            _, used_height = paragraph.wrap(width, height)
            if used_height <= height or size - FONT_STEP < MIN_FONT_SIZE:
                break
            size -= FONT_STEP
        paragraph.drawOn(self.c, x, top - used_height)
        return size

    def image(self, path: Path, x: float, top: float, max_width: float, max_height: float) -> None:
        self.c.drawImage(
            str(path),
            x,
            top - max_height,
            width=max_width,
            height=max_height,
            preserveAspectRatio=True,
            anchor="nw",
            mask="auto",  # Respect transparent corners (e.g., PNG with alpha)
        )

    def icon(
        self, path: Optional[Path], x: float, top: float, max_width: float, max_height: float
    ) -> None:
        if path is not None:
            self.image(path, x, top, max_width, max_height)
            return
        self._draw_default_icon(x, top, max_width, max_height)

    def _draw_default_icon(self, x: float, top: float, max_width: float, max_height: float) -> None:
        """Three fanned cards, drawn in the current colors."""
        card_h = max_height * 0.8
        card_w = min(card_h * 0.7, max_width / 2.5)
        paper = WHITE if self._fill == BLACK else BLACK
        for i, angle in enumerate((-15, 0, 15)):
            self.c.saveState()
            self.c.translate(x + card_w * (0.7 + 0.55 * i), top - max_height / 2)
            self.c.rotate(angle)
            self.c.setFillColor(HexColor(paper))
            self.c.setStrokeColor(HexColor(self._stroke))
            self.c.roundRect(-card_w / 2, -card_h / 2, card_w, card_h, card_w / 6, stroke=1, fill=1)
            self.c.restoreState()


def render_deck(deck: Deck, geometry: CardGeometry, surface: DrawingSurface) -> List[RenderedCard]:
    """
    Draw all pages of a deck, white cards first, then black cards.

    Card numbers start at 1 for each color.

    Returns:
        The rendered cards in drawing order
    """
    rendered: List[RenderedCard] = []
    groups = (
        (deck.white_pages, False, deck.white_icon),
        (deck.black_pages, True, deck.black_icon),
    )
    for pages, is_black, icon in groups:
        numbers = itertools.count(1)
        for page in pages:
            rendered += render_card_page(
                surface, deck, geometry, page, is_black=is_black, icon=icon, numbers=numbers
            )
    return rendered


def render_card_page(
    surface: DrawingSurface,
    deck: Deck,
    geometry: CardGeometry,
    lines: Sequence[str],
    is_black: bool,
    icon: Optional[Path],
    numbers: Iterator[int],
) -> List[RenderedCard]:
    """Draw one sheet: background, cut grid, logos and the cards on it."""
    surface.begin_page()
    if is_black:
        surface.fill_page(BLACK)
        surface.set_colors(WHITE, WHITE)
    else:
        surface.set_colors(BLACK, BLACK)

    draw_cut_guides(surface, geometry)
    draw_logos(surface, geometry, icon, deck.deck_name)

    rendered = [
        render_card(surface, deck, geometry, index, line, is_black, next(numbers))
        for index, line in enumerate(lines)
    ]

    surface.set_colors(BLACK, BLACK)
    surface.end_page()
    return rendered


def draw_cut_guides(surface: DrawingSurface, geometry: CardGeometry) -> None:
    """
    Draw the card outlines and dashed cut marks around the grid.

    The marks continue every vertical and horizontal cutting line beyond
    the edges of the grid, on both sides.
    """
    g = geometry
    for column in range(g.cards_across):
        for row in range(g.cards_high):
            surface.rounded_rect(
                column * g.card_width,
                row * g.card_height,
                g.card_width,
                g.card_height,
                g.rounded_corners,
            )

    # Vertical marks below and above the grid
    for i in range(g.cards_across + 1):
        x = g.card_width * i
        surface.dashed_line(x, -CUT_MARK_END, x, -CUT_MARK_START)
        surface.dashed_line(x, g.page_height + CUT_MARK_START, x, g.page_height + CUT_MARK_END)

    # Horizontal marks left and right of the grid
    for i in range(g.cards_high + 1):
        y = g.card_height * i
        surface.dashed_line(-CUT_MARK_END, y, -CUT_MARK_START, y)
        surface.dashed_line(g.page_width + CUT_MARK_START, y, g.page_width + CUT_MARK_END, y)


def draw_logos(
    surface: DrawingSurface, geometry: CardGeometry, icon: Optional[Path], deck_name: str
) -> None:
    """Stamp icon and deck name into every cell of the grid, used or not."""
    for index in range(geometry.cards_across * geometry.cards_high):
        box = slot_box(geometry, index)
        surface.icon(icon, box.left, box.bottom + 25, geometry.card_width / 2, LOGO_MAX_HEIGHT)
        if deck_name:
            surface.text(deck_name, box.left + 22, box.bottom + 13, DECK_NAME_SIZE)


def render_card(
    surface: DrawingSurface,
    deck: Deck,
    geometry: CardGeometry,
    index: int,
    line: str,
    is_black: bool,
    number: int,
) -> RenderedCard:
    """
    Draw a single card into grid slot `index`.

    Raises:
        ImageDirectiveError: If the line has a malformed image directive
        ImageNotFoundError: If the image it names does not exist
    """
    box = slot_box(geometry, index)
    # Directives are read from the raw line; only the display text is markup.
    parsed = parse_card(trim(normalize_escapes(card_text_field(line))), is_black)
    sanitized = sanitize(parsed.text)
    directive = replace(parsed, text=sanitized)

    if directive.image is not None:
        image = directive.image
        surface.image(
            image.resolve(deck.source_dir),
            box.right + image.offset_x,
            box.bottom + image.offset_y,
            image.width,
            image.height,
        )

    surface.text_box(
        f"<b>{directive.text}</b>",
        box.left,
        box.top,
        box.width,
        geometry.card_height - TEXT_MARGIN_BOTTOM[directive.pick_count],
        geometry.font_size,
    )

    surface.text(
        f"#{number}",
        box.right + 5,
        box.bottom + 3,
        CARD_NUMBER_SIZE,
        bold=True,
        align="right",
        angle=CARD_NUMBER_ANGLE,
    )

    if directive.pick_count == 2:
        draw_badge(surface, box, deck.texts.pick, "2", 0)
    elif directive.pick_count == 3:
        draw_badge(surface, box, deck.texts.pick, "3", 0, digit_color=RED)
        draw_badge(surface, box, deck.texts.draw, "2", 16)

    return RenderedCard(number=number, is_black=is_black, sanitized=sanitized, directive=directive)


def draw_badge(
    surface: DrawingSurface,
    box: SlotBox,
    caption: str,
    digit: str,
    raise_by: float,
    digit_color: str = BLACK,
) -> None:
    """Caption plus a circled digit at the bottom right of a card."""
    base = box.bottom + raise_by
    surface.text(caption, box.right - 20, base + 28, CAPTION_SIZE, bold=True, align="right")
    surface.circle(box.right - 10, base + 32, BADGE_RADIUS, WHITE)
    surface.text(digit, box.right - 10, base + 28.5, BADGE_SIZE, bold=True, align="center", color=digit_color)


def write_deck_pdf(
    deck: Deck,
    geometry: CardGeometry,
    output: Union[Path, BinaryIO],
) -> List[RenderedCard]:
    """
    Render a deck to a PDF file or binary stream.

    The PDF is assembled in memory and only written once every card has
    been drawn.

    Raises:
        ValueError: If the deck has no cards
    """
    if deck.is_empty:
        raise ValueError(f"Deck {deck.name!r} has no cards.")

    buffer = BytesIO()
    surface = ReportLabSurface(buffer, geometry, title=deck.title, author=deck.deck_name)
    rendered = render_deck(deck, geometry, surface)
    surface.save()

    if isinstance(output, (str, Path)):
        output = Path(output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(buffer.getvalue())
    else:
        output.write(buffer.getvalue())
    return rendered


def get_file_size_str(file_path: Path) -> str:
    """
    Get a human-readable file size string.

    Args:
        file_path: Path to the file

    Returns:
        Size string like "1.5 MB" or "256 KB"
    """
    file_size = file_path.stat().st_size
    if file_size >= 1024 * 1024:
        return f"{file_size / (1024 * 1024):.1f} MB"
    else:
        return f"{file_size / 1024:.1f} KB"
