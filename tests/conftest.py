from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest
from PIL import Image

from bbcards.config import get_card_texts
from bbcards.geometry import CardGeometry, get_card_geometry
from bbcards.paginator import paginate
from bbcards.sources import Deck


class RecordingSurface:
    """DrawingSurface that remembers every call instead of drawing."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.pages = 0

    def _record(self, name: str, **kwargs: Any) -> None:
        self.calls.append((name, kwargs))

    def begin_page(self) -> None:
        self.pages += 1
        self._record("begin_page")

    def end_page(self) -> None:
        self._record("end_page")

    def fill_page(self, color: str) -> None:
        self._record("fill_page", color=color)

    def set_colors(self, stroke: str, fill: str) -> None:
        self._record("set_colors", stroke=stroke, fill=fill)

    def rounded_rect(self, x, y, width, height, radius) -> None:
        self._record("rounded_rect", x=x, y=y, width=width, height=height, radius=radius)

    def dashed_line(self, x1, y1, x2, y2) -> None:
        self._record("dashed_line", x1=x1, y1=y1, x2=x2, y2=y2)

    def circle(self, x, y, radius, color) -> None:
        self._record("circle", x=x, y=y, radius=radius, color=color)

    def text(self, value, x, y, size, bold=False, align="left", angle=0, color=None) -> None:
        self._record("text", value=value, x=x, y=y, size=size, bold=bold, align=align, angle=angle, color=color)

    def text_box(self, markup, x, top, width, height, font_size) -> float:
        self._record("text_box", markup=markup, x=x, top=top, width=width, height=height, font_size=font_size)
        return font_size

    def image(self, path, x, top, max_width, max_height) -> None:
        self._record("image", path=path, x=x, top=top, max_width=max_width, max_height=max_height)

    def icon(self, path, x, top, max_width, max_height) -> None:
        self._record("icon", path=path, x=x, top=top, max_width=max_width, max_height=max_height)

    def named(self, name: str) -> List[Dict[str, Any]]:
        return [kwargs for call, kwargs in self.calls if call == name]

    def texts(self) -> List[str]:
        return [kwargs["value"] for kwargs in self.named("text")]

    def card_numbers(self) -> List[str]:
        return [value for value in self.texts() if value.startswith("#")]


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def geometry() -> CardGeometry:
    return get_card_geometry()


def make_deck(
    geometry: CardGeometry,
    white: Optional[List[str]] = None,
    black: Optional[List[str]] = None,
    source_dir: Optional[Path] = None,
    lang: str = "en",
    white_icon: Optional[Path] = None,
    black_icon: Optional[Path] = None,
) -> Deck:
    return Deck(
        name="test",
        title="test",
        deck_name="Test Deck",
        texts=get_card_texts(lang),
        white_icon=white_icon,
        black_icon=black_icon,
        source_dir=source_dir or Path("."),
        white_pages=paginate(white or [], geometry.capacity),
        black_pages=paginate(black or [], geometry.capacity),
    )


def write_lines(path: Path, lines: List[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def write_png(path: Path, size: Tuple[int, int] = (8, 8)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, (200, 30, 30)).save(path, format="PNG")
    return path
