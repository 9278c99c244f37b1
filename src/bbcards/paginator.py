"""Reading card lists and splitting them into pages."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List

from .geometry import CardGeometry

Page = List[str]

LINE_BREAK_PATTERN = re.compile(r"[\r\n]+")


def clean_lines(lines: Iterable[str]) -> List[str]:
    """Strip surrounding tabs and line breaks and drop blank lines."""
    cleaned = []
    for line in lines:
        line = line.strip("\t\r\n")
        if line != "":
            cleaned.append(line)
    return cleaned


def paginate(lines: List[str], capacity: int) -> List[Page]:
    """
    Split lines into pages of `capacity` cards, keeping their order.

    The last page may be partial; no lines gives no pages.

    Raises:
        ValueError: If capacity is less than 1
    """
    if capacity < 1:
        raise ValueError(f"Page capacity must be at least 1, got {capacity}")
    return [lines[i : i + capacity] for i in range(0, len(lines), capacity)]


def load_pages_from_lines(lines: Iterable[str], geometry: CardGeometry) -> List[Page]:
    return paginate(clean_lines(lines), geometry.capacity)


def load_pages_from_string(text: str, geometry: CardGeometry) -> List[Page]:
    return load_pages_from_lines(LINE_BREAK_PATTERN.split(text), geometry)


def load_pages_from_file(path: Path, geometry: CardGeometry) -> List[Page]:
    """Pages of a card list file. A missing file is an empty card list."""
    path = Path(path)
    if not path.is_file():
        return []
    with path.open("r", encoding="utf-8-sig") as f:
        return load_pages_from_lines(f, geometry)
