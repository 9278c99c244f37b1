import os

import pytest

from bbcards.config import CardTexts, get_card_texts
from bbcards.sources import (
    first_existing,
    icon_candidates,
    iter_deck_directories,
    load_deck,
    load_file_deck,
    load_string_deck,
    output_name_for,
    resolve_icon,
)

from conftest import write_lines


def test_icon_candidates_order(tmp_path):
    assert icon_candidates(tmp_path, "icon.png", "black") == [
        tmp_path / "black_icon.png",
        tmp_path / "icon.png",
    ]


def test_first_existing(tmp_path):
    (tmp_path / "b").write_text("x")
    candidates = [tmp_path / "a", tmp_path / "b", tmp_path / "c"]
    assert first_existing(candidates) == tmp_path / "b"
    assert first_existing([tmp_path / "a"]) is None


def test_color_icon_wins_over_shared_icon(tmp_path):
    (tmp_path / "icon.png").write_bytes(b"shared")
    (tmp_path / "black_icon.png").write_bytes(b"black")
    assert resolve_icon(tmp_path, "icon.png", "black") == tmp_path / "black_icon.png"
    assert resolve_icon(tmp_path, "icon.png", "white") == tmp_path / "icon.png"


def test_no_icon_falls_back_to_builtin(tmp_path):
    assert resolve_icon(tmp_path, "icon.png", "white") is None


def test_output_name_for(tmp_path):
    deck_dir = tmp_path / "my_deck"
    deck_dir.mkdir()
    assert output_name_for(deck_dir) == "my_deck"
    assert output_name_for(deck_dir, "custom.pdf") == "custom"
    assert output_name_for(deck_dir, "out/custom") == "custom"


def test_output_name_keeps_symlink_name(tmp_path):
    target = tmp_path / "target"
    target.mkdir()
    try:
        os.symlink(target, tmp_path / "link", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported")

    assert output_name_for(tmp_path / "link") == "link"
    assert output_name_for(tmp_path / "link" / ".") == "link"


@pytest.mark.parametrize(
    "lang, expected",
    [
        ("en", CardTexts("DRAW", "PICK")),
        ("EN", CardTexts("DRAW", "PICK")),
        ("en-US", CardTexts("DRAW", "PICK")),
        ("es", CardTexts("COGE", "ELIGE")),
        ("ES", CardTexts("COGE", "ELIGE")),
        ("es-ES", CardTexts("COGE", "ELIGE")),
        ("fr", CardTexts("DRAW", "PICK")),
        ("", CardTexts("DRAW", "PICK")),
        (None, CardTexts("DRAW", "PICK")),
    ],
)
def test_card_texts_fall_back_to_english(lang, expected):
    assert get_card_texts(lang) == expected


def test_load_deck(tmp_path, geometry):
    write_lines(tmp_path / "party" / "white.txt", ["a", "", "b", "c"])
    deck = load_deck(tmp_path / "party", geometry, texts=get_card_texts("es"), deck_name="Fiesta")

    assert deck.name == "party"
    assert deck.title == "party"
    assert deck.deck_name == "Fiesta"
    assert deck.texts.pick == "ELIGE"
    assert deck.white_pages == [["a", "b", "c"]]
    assert deck.black_pages == []
    assert deck.white_icon is None
    assert deck.source_dir == tmp_path / "party"
    assert not deck.is_empty
    assert deck.page_count == 1


def test_load_deck_with_custom_file_names(tmp_path, geometry):
    write_lines(tmp_path / "answers.txt", ["a"])
    write_lines(tmp_path / "questions.txt", ["q __?"])
    deck = load_deck(tmp_path, geometry, white_file="answers.txt", black_file="questions.txt")
    assert deck.white_pages == [["a"]]
    assert deck.black_pages == [["q __?"]]


def test_directory_without_cards_is_empty(tmp_path, geometry):
    write_lines(tmp_path / "white.txt", ["", "\t", ""])
    assert load_deck(tmp_path, geometry).is_empty


def test_load_file_deck(tmp_path, geometry):
    white = write_lines(tmp_path / "cards" / "w.txt", ["a", "b"])
    icon = tmp_path / "logo.png"
    icon.write_bytes(b"png")
    deck = load_file_deck(geometry, white=white, icon=icon, output_name="out.pdf")

    assert deck.name == "out"
    assert deck.source_dir == tmp_path / "cards"
    assert deck.white_icon == deck.black_icon == icon
    assert deck.black_pages == []


def test_load_file_deck_missing_icon_uses_builtin(tmp_path, geometry):
    white = write_lines(tmp_path / "w.txt", ["a"])
    deck = load_file_deck(geometry, white=white, icon=tmp_path / "missing.png")
    assert deck.white_icon is None
    assert deck.name == "cards"


def test_load_string_deck(geometry):
    deck = load_string_deck(geometry, white_text="a\nb\r\n\nc", black_text="")
    assert deck.white_pages == [["a", "b", "c"]]
    assert deck.title == "Bigger, Blacker Cards"


def test_walk_is_depth_first_and_sorted(tmp_path):
    for name in ["b", "a/y", "a/x", "c"]:
        (tmp_path / name).mkdir(parents=True)
    (tmp_path / "a" / "file.txt").write_text("not a directory")

    visited = [p.relative_to(tmp_path).as_posix() for p in iter_deck_directories(tmp_path)]
    assert visited == [".", "a", "a/x", "a/y", "b", "c"]


def test_walk_survives_symlink_loops(tmp_path):
    (tmp_path / "a").mkdir()
    try:
        os.symlink(tmp_path, tmp_path / "a" / "loop", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported")

    visited = [p.relative_to(tmp_path).as_posix() for p in iter_deck_directories(tmp_path)]
    assert visited == [".", "a"]
