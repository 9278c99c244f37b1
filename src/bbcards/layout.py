from __future__ import annotations

from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TimeElapsedColumn
from rich.panel import Panel
from rich.table import Table
from rich import box

from .config import (
    DEFAULT_BLACK_FILE,
    DEFAULT_DECK_NAME,
    DEFAULT_ICON_FILE,
    DEFAULT_WHITE_FILE,
    CardTexts,
)
from .geometry import CardGeometry
from .pdf_generator import RenderedCard, get_file_size_str, write_deck_pdf
from .sources import (
    Deck,
    iter_deck_directories,
    load_deck,
    load_file_deck,
    load_string_deck,
)


@dataclass
class DeckResult:
    """Outcome of one deck: written to `output_path` or skipped."""

    name: str
    directory: Optional[Path]
    output_path: Optional[Path]
    pages: int = 0
    cards: List[RenderedCard] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.output_path is None

    @property
    def white_count(self) -> int:
        return sum(1 for card in self.cards if not card.is_black)

    @property
    def black_count(self) -> int:
        return sum(1 for card in self.cards if card.is_black)


# Rich console instance for beautiful output
console = Console()


def render_deck_file(deck: Deck, geometry: CardGeometry, output_path: Path) -> DeckResult:
    """Write one deck to `output_path`."""
    cards = write_deck_pdf(deck, geometry, output_path)
    return DeckResult(
        name=deck.name,
        directory=deck.source_dir,
        output_path=output_path,
        pages=deck.page_count,
        cards=cards,
    )


def build_directory_decks(
    directory: Path,
    geometry: CardGeometry,
    texts: CardTexts | None = None,
    deck_name: str = DEFAULT_DECK_NAME,
    output_dir: Path | None = None,
    output_name: Optional[str] = None,
    white_file: str = DEFAULT_WHITE_FILE,
    black_file: str = DEFAULT_BLACK_FILE,
    icon_file: str = DEFAULT_ICON_FILE,
    progress: Optional[Progress] = None,
) -> List[DeckResult]:
    """
    Render one PDF per directory in the tree below `directory`.

    - Each directory is its own deck, named after the directory; only the
      top directory uses `output_name` when one is given.
    - Directories without any cards are skipped, their subdirectories are
      still visited.
    - Geometry, captions and deck name are shared; icons are looked up per
      directory.

    Args:
        directory: Root of the card directory tree
        geometry: Card grid used for every deck
        texts: Caption vocabulary
        deck_name: Name printed on every card
        output_dir: Where the PDFs go (default: current directory)
        output_name: Output file name of the top directory's deck
        white_file: Name of the white card list in each directory
        black_file: Name of the black card list in each directory
        icon_file: Name of the icon file in each directory
        progress: Rich Progress instance for progress display
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Card directory not found: {directory}")
    output_dir = Path(output_dir) if output_dir is not None else Path.cwd()

    task_id = None
    if progress is not None:
        task_id = progress.add_task("[cyan]Rendering decks...", total=None)

    results: List[DeckResult] = []
    written = {}
    for current in iter_deck_directories(directory):
        if progress is not None and task_id is not None:
            progress.update(task_id, advance=1, description=f"[cyan]Reading [bold]{current}[/bold]...")

        deck = load_deck(
            current,
            geometry,
            texts=texts,
            deck_name=deck_name,
            white_file=white_file,
            black_file=black_file,
            icon_file=icon_file,
            output_name=output_name if current == directory else None,
        )
        if deck.is_empty:
            results.append(DeckResult(name=deck.name, directory=current, output_path=None))
            continue

        output_path = output_dir / f"{deck.name}.pdf"
        if output_path in written:
            console.print(
                f"[yellow]⚠[/yellow] [bold]{current}[/bold] overwrites {output_path.name} "
                f"from {written[output_path]}"
            )
        written[output_path] = current
        results.append(render_deck_file(deck, geometry, output_path))

    return results


def build_file_deck(
    geometry: CardGeometry,
    output_path: Path,
    white: Optional[Path] = None,
    black: Optional[Path] = None,
    icon: Optional[Path] = None,
    texts: CardTexts | None = None,
    deck_name: str = DEFAULT_DECK_NAME,
) -> DeckResult:
    """Render a deck from explicitly named card files, without recursion."""
    output_path = Path(output_path)
    deck = load_file_deck(
        geometry,
        white=white,
        black=black,
        icon=icon,
        output_name=output_path.name,
        texts=texts,
        deck_name=deck_name,
    )
    if deck.is_empty:
        return DeckResult(name=deck.name, directory=None, output_path=None)
    return render_deck_file(deck, geometry, output_path)


def build_deck_bytes(
    geometry: CardGeometry,
    white_text: str = "",
    black_text: str = "",
    icon: Optional[Path] = None,
    texts: CardTexts | None = None,
    deck_name: str = DEFAULT_DECK_NAME,
    title: Optional[str] = None,
    source_dir: Optional[Path] = None,
) -> bytes:
    """
    Render inline card lists straight to PDF bytes.

    Returns empty bytes when neither list has a card.
    """
    deck = load_string_deck(
        geometry,
        white_text=white_text,
        black_text=black_text,
        icon=icon,
        texts=texts,
        deck_name=deck_name,
        title=title,
        source_dir=source_dir,
    )
    if deck.is_empty:
        return b""
    stream = BytesIO()
    write_deck_pdf(deck, geometry, stream)
    return stream.getvalue()


def build_decks(
    geometry: CardGeometry,
    directory: Optional[Path] = None,
    white: Optional[Path] = None,
    black: Optional[Path] = None,
    icon: Optional[Path] = None,
    output: Optional[Path] = None,
    output_dir: Optional[Path] = None,
    texts: CardTexts | None = None,
    deck_name: str = DEFAULT_DECK_NAME,
    white_file: str = DEFAULT_WHITE_FILE,
    black_file: str = DEFAULT_BLACK_FILE,
    icon_file: str = DEFAULT_ICON_FILE,
    quiet: bool = False,
) -> List[DeckResult]:
    """
    High-level helper:
    - Renders a directory tree (one PDF per directory), or
    - Renders a single deck from explicit white/black files.

    Prints a banner, progress and a summary unless `quiet` is set.
    """
    if not quiet:
        console.print()
        console.print(Panel.fit(
            "[bold magenta]🃏 Bigger, Blacker Cards[/bold magenta]\n"
            "[dim]Creating printable card sheets[/dim]",
            border_style="magenta",
        ))
        console.print()

    if directory is not None:
        if quiet:
            results = build_directory_decks(
                directory, geometry, texts=texts, deck_name=deck_name,
                output_dir=output_dir, output_name=output,
                white_file=white_file, black_file=black_file, icon_file=icon_file,
            )
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TimeElapsedColumn(),
                console=console,
                transient=True,
            ) as progress:
                results = build_directory_decks(
                    directory, geometry, texts=texts, deck_name=deck_name,
                    output_dir=output_dir, output_name=output,
                    white_file=white_file, black_file=black_file, icon_file=icon_file,
                    progress=progress,
                )
    else:
        results = [
            build_file_deck(
                geometry,
                output_path=Path(output) if output else Path("cards.pdf"),
                white=white,
                black=black,
                icon=icon,
                texts=texts,
                deck_name=deck_name,
            )
        ]

    if not quiet:
        print_summary(results)
    return results


def print_summary(results: Sequence[DeckResult]) -> None:
    """Print a table of written decks and a note about skipped ones."""
    written = [r for r in results if not r.skipped]
    skipped = [r for r in results if r.skipped]

    console.print()
    if written:
        table = Table(box=box.ROUNDED, border_style="green")
        table.add_column("Deck", style="cyan")
        table.add_column("White", justify="right")
        table.add_column("Black", justify="right")
        table.add_column("Pages", justify="right")
        table.add_column("Output file", style="white")
        table.add_column("Size", justify="right")
        for r in written:
            table.add_row(
                r.name,
                str(r.white_count),
                str(r.black_count),
                str(r.pages),
                str(r.output_path),
                get_file_size_str(r.output_path),
            )
        console.print(table)

    if skipped:
        console.print(f"[dim]{len(skipped)} director{'y' if len(skipped) == 1 else 'ies'} without cards skipped.[/dim]")

    console.print()
    if written:
        console.print("[green]✔[/green] [bold green]Done![/bold green] Your card sheets are ready to print.")
    else:
        console.print("[yellow]⚠[/yellow] No cards found, nothing was rendered.")
    console.print()
