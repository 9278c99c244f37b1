"""Card directives: pick counts and embedded images written inline as `[[...]]`."""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# [[N]] then [[img=...]] then the card text
DIRECTIVE_PATTERN = re.compile(
    r"(?:\[\[(?P<pick>\d+)\]\])?(?:\[\[img=(?P<img>[^\]]+)\]\])?(?P<text>.*)",
    re.DOTALL,
)
BLANK_PATTERN = re.compile(r"__+")

# Padding so that blanks at the very start or end still split into segments.
SENTINEL = "a"


class ImageDirectiveError(ValueError):
    """Raised for an `[[img=...]]` directive that cannot be parsed."""


class ImageNotFoundError(FileNotFoundError):
    """Raised when the file named by an image directive does not exist."""


@dataclass(frozen=True)
class ImageDirective:
    """An image drawn on a card, positioned from the card's bottom-right corner."""

    file: str
    width: float
    height: float
    offset_x: float = 0.0
    offset_y: float = 0.0

    @classmethod
    def parse(cls, value: str) -> "ImageDirective":
        """
        Parse `FILE;W;H;DX;DY`.

        FILE, W and H are required; the offsets default to 0.
        """
        fields = [field.strip() for field in value.split(";")]
        if len(fields) < 3 or not fields[0]:
            raise ImageDirectiveError(
                f"Image directive needs at least FILE;WIDTH;HEIGHT, got {value!r}"
            )
        if len(fields) > 5:
            raise ImageDirectiveError(f"Too many fields in image directive {value!r}")

        numbers = []
        for field in fields[1:]:
            try:
                numbers.append(float(field) if field else 0.0)
            except ValueError:
                raise ImageDirectiveError(
                    f"Non-numeric value {field!r} in image directive {value!r}"
                ) from None
        numbers += [0.0] * (4 - len(numbers))
        width, height, offset_x, offset_y = numbers

        if width <= 0 or height <= 0:
            raise ImageDirectiveError(
                f"Image width and height must be positive in {value!r}"
            )
        return cls(fields[0], width, height, offset_x, offset_y)

    def resolve(self, base_dir: Path) -> Path:
        """Path of the image relative to the deck's source directory."""
        path = Path(base_dir) / self.file
        if not path.is_file():
            raise ImageNotFoundError(f"Image file not found: {path}")
        return path


@dataclass(frozen=True)
class CardDirective:
    """What a single card line says once directives are taken out."""

    text: str
    pick_count: int = 0
    image: Optional[ImageDirective] = None


def infer_pick_count(text: str) -> int:
    """Count blanks (runs of two or more underscores) in black card text."""
    parts = BLANK_PATTERN.split(SENTINEL + text + SENTINEL)
    if len(parts) == 3:
        return 2
    if len(parts) >= 4:
        return 3
    return 1


def resolve_pick_count(explicit: Optional[str], text: str) -> int:
    if not explicit:
        return infer_pick_count(text)
    if explicit == "2":
        return 2
    if explicit == "3":
        return 3
    return 1


def parse_card(text: str, is_black: bool) -> CardDirective:
    """
    Split a trimmed card line into directives and display text.

    The display text is returned as written; sanitize it before rendering.

    White cards always have a pick count of 0, whatever they say.

    Raises:
        ImageDirectiveError: If the image directive is malformed
    """
    match = DIRECTIVE_PATTERN.match(text)
    display = match.group("text").strip(" \t")

    image = None
    if match.group("img") is not None:
        image = ImageDirective.parse(match.group("img"))

    pick_count = resolve_pick_count(match.group("pick"), display) if is_black else 0
    return CardDirective(text=display, pick_count=pick_count, image=image)
