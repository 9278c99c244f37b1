"""CLI entry point for bbcards."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console

from bbcards.config import (
    CARD_SIZES,
    DEFAULT_BLACK_FILE,
    DEFAULT_CARD_SIZE,
    DEFAULT_DECK_NAME,
    DEFAULT_ICON_FILE,
    DEFAULT_LANGUAGE,
    DEFAULT_PAPER_FORMAT,
    DEFAULT_WHITE_FILE,
    LANGUAGE_TEXTS,
    get_card_texts,
)
from bbcards.geometry import get_card_geometry
from bbcards.layout import build_decks
from bbcards.pdf_generator import write_deck_pdf
from bbcards.sources import load_file_deck

console = Console(stderr=True)

EPILOG = """\
Give EITHER a directory or white/black card files. If both are given the
files are ignored and the directory is used.

In directory mode white cards are read from white.txt and black cards from
black.txt; icon.png (or white_icon.png / black_icon.png) is printed on the
lower left of each card. One PDF named after the directory is written for
every directory in the tree that has cards.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bbcards",
        description="Bigger, Blacker Cards – Generate printable party game card sheets",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    inputs = parser.add_argument_group("input")
    inputs.add_argument("-d", "--directory", type=Path, help="Directory to search for card files.")
    inputs.add_argument("-w", "--white", type=Path, help="White card file.")
    inputs.add_argument("-b", "--black", type=Path, help="Black card file.")
    inputs.add_argument("-i", "--icon", type=Path, help="Icon file, should be .jpg or .png.")
    inputs.add_argument(
        "--white-file-name",
        default=DEFAULT_WHITE_FILE,
        help=f"White card file name in directory mode (default: {DEFAULT_WHITE_FILE}).",
    )
    inputs.add_argument(
        "--black-file-name",
        default=DEFAULT_BLACK_FILE,
        help=f"Black card file name in directory mode (default: {DEFAULT_BLACK_FILE}).",
    )
    inputs.add_argument(
        "--icon-file-name",
        default=DEFAULT_ICON_FILE,
        help=f"Icon file name in directory mode (default: {DEFAULT_ICON_FILE}).",
    )

    outputs = parser.add_argument_group("output")
    outputs.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output file, will be a .pdf file (default: cards.pdf, or the directory name).",
    )
    outputs.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Where to write PDFs in directory mode (default: current directory).",
    )
    outputs.add_argument(
        "--stdout",
        action="store_true",
        help="Write the PDF to standard output (file mode only).",
    )
    outputs.add_argument("-q", "--quiet", action="store_true", help="Only print errors.")

    cards = parser.add_argument_group("cards")
    cards.add_argument(
        "-f",
        "--format",
        dest="paper_format",
        default=DEFAULT_PAPER_FORMAT,
        help="Paper format: LETTER, LETTER_ (landscape), DINA4, DINA4_ (landscape).",
    )
    cards.add_argument(
        "--lang",
        default=DEFAULT_LANGUAGE,
        help=f"Language of the printed captions: {', '.join(LANGUAGE_TEXTS)} (default: {DEFAULT_LANGUAGE}).",
    )
    cards.add_argument(
        "-n",
        "--name",
        dest="deck_name",
        default=DEFAULT_DECK_NAME,
        help=f"Deck name (default: {DEFAULT_DECK_NAME}).",
    )
    cards.add_argument("-r", "--rounded", action="store_true", help="Generate cards with rounded corners.")
    cards.add_argument(
        "--corner-radius",
        type=float,
        default=None,
        help="Rounded corner radius in points (implies --rounded).",
    )
    cards.add_argument("-p", "--oneperpage", action="store_true", help="Generate one card per page.")

    sizes = parser.add_argument_group("sizes").add_mutually_exclusive_group()
    sizes.add_argument(
        "-s", "--small", dest="size", action="store_const", const="small",
        help='Generate small 2"x2" cards (default).',
    )
    sizes.add_argument(
        "--medium1", dest="size", action="store_const", const="medium1",
        help="Generate medium 41mm x 63mm cards.",
    )
    sizes.add_argument(
        "--medium2", dest="size", action="store_const", const="medium2",
        help="Generate medium 43mm x 65mm cards.",
    )
    sizes.add_argument(
        "--medium3", dest="size", action="store_const", const="medium3",
        help="Generate medium 45mm x 68mm cards.",
    )
    sizes.add_argument(
        "-l", "--large", dest="size", action="store_const", const="large",
        help='Generate large 2.5"x3.5" cards.',
    )
    parser.set_defaults(size=DEFAULT_CARD_SIZE)

    return parser


def run_stdout(args: argparse.Namespace, geometry, texts) -> int:
    """Render the file-mode deck to standard output."""
    deck = load_file_deck(
        geometry,
        white=args.white,
        black=args.black,
        icon=args.icon,
        output_name=args.output.name if args.output else None,
        texts=texts,
        deck_name=args.deck_name,
    )
    if deck.is_empty:
        console.print("[yellow]⚠[/yellow] No cards found, nothing was rendered.")
        return 1
    write_deck_pdf(deck, geometry, sys.stdout.buffer)
    sys.stdout.buffer.flush()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.directory is None and args.white is None and args.black is None:
        parser.print_help()
        return 1

    size = CARD_SIZES[args.size]
    rounded = args.corner_radius if args.corner_radius is not None else args.rounded
    texts = get_card_texts(args.lang)

    try:
        geometry = get_card_geometry(
            size.width_inches,
            size.height_inches,
            size.font_size,
            paper_format=args.paper_format,
            rounded_corners=rounded,
            one_card_per_page=args.oneperpage,
        )
        if args.stdout and args.directory is None:
            return run_stdout(args, geometry, texts)

        build_decks(
            geometry,
            directory=args.directory,
            white=args.white,
            black=args.black,
            icon=args.icon,
            output=args.output,
            output_dir=args.output_dir,
            texts=texts,
            deck_name=args.deck_name,
            white_file=args.white_file_name,
            black_file=args.black_file_name,
            icon_file=args.icon_file_name,
            quiet=args.quiet,
        )
    except (ValueError, FileNotFoundError) as exc:
        console.print(f"[red]✘[/red] {exc}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
