"""Card list discovery: decks, icons, output names and the directory walk."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .config import (
    DEFAULT_BLACK_FILE,
    DEFAULT_DECK_NAME,
    DEFAULT_ICON_FILE,
    DEFAULT_OUTPUT_NAME,
    DEFAULT_STREAM_TITLE,
    DEFAULT_WHITE_FILE,
    CardTexts,
    get_card_texts,
)
from .geometry import CardGeometry
from .paginator import Page, load_pages_from_file, load_pages_from_string


@dataclass
class Deck:
    """Everything needed to render one PDF."""

    name: str
    title: Optional[str]
    deck_name: str
    texts: CardTexts
    white_icon: Optional[Path]
    black_icon: Optional[Path]
    source_dir: Path
    white_pages: List[Page] = field(default_factory=list)
    black_pages: List[Page] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.white_pages and not self.black_pages

    @property
    def page_count(self) -> int:
        return len(self.white_pages) + len(self.black_pages)


def icon_candidates(directory: Path, icon_file: str, color: str) -> List[Path]:
    """Icon files to try for one card color, most specific first."""
    return [directory / f"{color}_{icon_file}", directory / icon_file]


def first_existing(candidates: Sequence[Path]) -> Optional[Path]:
    """First candidate that is a file, None when there is none."""
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def resolve_icon(directory: Path, icon_file: str, color: str) -> Optional[Path]:
    """
    Icon for `color` cards in `directory`.

    `<color>_<icon>` wins over the shared `<icon>`. None means the built-in
    default icon is drawn.
    """
    return first_existing(icon_candidates(directory, icon_file, color))


def output_name_for(directory: Path, explicit: Optional[str] = None) -> str:
    """File stem of the PDF made from `directory`."""
    if explicit:
        name = Path(explicit).name
        return name[:-4] if name.lower().endswith(".pdf") else name
    # abspath normalizes "." without following symlinks
    return Path(os.path.abspath(directory)).name or DEFAULT_OUTPUT_NAME


def load_deck(
    directory: Path,
    geometry: CardGeometry,
    texts: CardTexts | None = None,
    deck_name: str = DEFAULT_DECK_NAME,
    white_file: str = DEFAULT_WHITE_FILE,
    black_file: str = DEFAULT_BLACK_FILE,
    icon_file: str = DEFAULT_ICON_FILE,
    output_name: Optional[str] = None,
    title: Optional[str] = None,
) -> Deck:
    """
    Read the deck of a single directory. Missing card files are empty decks.
    """
    directory = Path(directory)
    name = output_name_for(directory, output_name)
    return Deck(
        name=name,
        title=title or name,
        deck_name=deck_name,
        texts=texts or get_card_texts(),
        white_icon=resolve_icon(directory, icon_file, "white"),
        black_icon=resolve_icon(directory, icon_file, "black"),
        source_dir=directory,
        white_pages=load_pages_from_file(directory / white_file, geometry),
        black_pages=load_pages_from_file(directory / black_file, geometry),
    )


def load_file_deck(
    geometry: CardGeometry,
    white: Optional[Path] = None,
    black: Optional[Path] = None,
    icon: Optional[Path] = None,
    output_name: Optional[str] = None,
    texts: CardTexts | None = None,
    deck_name: str = DEFAULT_DECK_NAME,
    title: Optional[str] = None,
) -> Deck:
    """
    Read a deck from explicitly named files.

    Embedded images resolve relative to the directory of the first card
    file given.
    """
    card_files = [Path(p) for p in (white, black) if p is not None]
    source_dir = card_files[0].parent if card_files else Path.cwd()
    icon_path = Path(icon) if icon is not None and Path(icon).is_file() else None
    name = output_name_for(source_dir, output_name or DEFAULT_OUTPUT_NAME)
    return Deck(
        name=name,
        title=title or name,
        deck_name=deck_name,
        texts=texts or get_card_texts(),
        white_icon=icon_path,
        black_icon=icon_path,
        source_dir=source_dir,
        white_pages=load_pages_from_file(white, geometry) if white else [],
        black_pages=load_pages_from_file(black, geometry) if black else [],
    )


def load_string_deck(
    geometry: CardGeometry,
    white_text: str = "",
    black_text: str = "",
    icon: Optional[Path] = None,
    texts: CardTexts | None = None,
    deck_name: str = DEFAULT_DECK_NAME,
    title: Optional[str] = None,
    source_dir: Optional[Path] = None,
) -> Deck:
    """Build a deck from inline card lists instead of files."""
    icon_path = Path(icon) if icon is not None and Path(icon).is_file() else None
    return Deck(
        name=DEFAULT_OUTPUT_NAME,
        title=title or DEFAULT_STREAM_TITLE,
        deck_name=deck_name,
        texts=texts or get_card_texts(),
        white_icon=icon_path,
        black_icon=icon_path,
        source_dir=Path(source_dir) if source_dir else Path.cwd(),
        white_pages=load_pages_from_string(white_text, geometry),
        black_pages=load_pages_from_string(black_text, geometry),
    )


def iter_deck_directories(root: Path) -> Iterator[Path]:
    """
    Yield `root` and every directory below it, depth first, parents first.

    Subdirectories are visited in sorted order. Each real directory is
    yielded once, so symlink loops end.
    """
    stack = [Path(root)]
    visited = set()
    while stack:
        directory = stack.pop()
        real = os.path.realpath(directory)
        if real in visited:
            continue
        visited.add(real)
        yield directory

        children = sorted(
            (child for child in directory.iterdir() if child.is_dir()),
            key=lambda p: p.name,
        )
        stack.extend(reversed(children))
