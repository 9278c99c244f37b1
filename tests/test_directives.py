import pytest

from bbcards.directives import (
    CardDirective,
    ImageDirective,
    ImageDirectiveError,
    ImageNotFoundError,
    infer_pick_count,
    parse_card,
)


@pytest.mark.parametrize(
    "text, pick_count",
    [
        ("a__b__c", 2),
        ("a__b__c__d", 3),
        ("a__b__c__d__e", 3),
        ("No blanks here.", 1),
        ("Why did the ___ cross the ___?", 2),
        ("__ starts with a blank.", 1),
        ("Ends with a blank __", 1),
        ("__ and __", 2),
        ("single_underscore_only", 1),
        ("", 1),
    ],
)
def test_black_card_pick_count_from_blanks(text, pick_count):
    assert parse_card(text, is_black=True).pick_count == pick_count


@pytest.mark.parametrize(
    "text, pick_count, display",
    [
        ("[[3]]Plain text", 3, "Plain text"),
        ("[[2]] One blank __ only", 2, "One blank __ only"),
        ("[[1]]a__b__c", 1, "a__b__c"),
        ("[[3]]a__b__c", 3, "a__b__c"),
        ("[[7]]Odd", 1, "Odd"),
        ("[[0]]Zero", 1, "Zero"),
    ],
)
def test_explicit_pick_count(text, pick_count, display):
    card = parse_card(text, is_black=True)
    assert card.pick_count == pick_count
    assert card.text == display


@pytest.mark.parametrize("text", ["[[3]]x", "a__b__c__d", "[[2]]y", "plain"])
def test_white_cards_never_pick(text):
    assert parse_card(text, is_black=False).pick_count == 0


def test_directive_is_stripped_from_white_card_text():
    assert parse_card("[[3]]  Answer", is_black=False) == CardDirective(text="Answer")


def test_non_numeric_prefix_is_text():
    card = parse_card("[[x]]Text", is_black=True)
    assert card.text == "[[x]]Text"
    assert card.pick_count == 1


def test_infer_pick_count_pads_edges():
    assert infer_pick_count("__") == 1
    assert infer_pick_count("__x__") == 2


def test_image_directive():
    card = parse_card("[[img=logo.png;20;30.5;-5;2.5]]Caption", is_black=False)
    assert card.image == ImageDirective("logo.png", 20.0, 30.5, -5.0, 2.5)
    assert card.text == "Caption"


def test_pick_and_image_directives_together():
    card = parse_card("[[2]][[img=pics/x.png;10;12]]Both __ here", is_black=True)
    assert card.pick_count == 2
    assert card.image == ImageDirective("pics/x.png", 10.0, 12.0, 0.0, 0.0)
    assert card.text == "Both __ here"


def test_image_only_card_has_empty_text():
    card = parse_card("[[img=a.png;5;5;0;0]]", is_black=True)
    assert card.text == ""
    assert card.pick_count == 1


@pytest.mark.parametrize(
    "value",
    ["logo.png", "logo.png;10", "logo.png;ten;10", ";10;10", "a.png;0;10", "a.png;1;2;3;4;5"],
)
def test_malformed_image_directive(value):
    with pytest.raises(ImageDirectiveError):
        ImageDirective.parse(value)


def test_malformed_image_directive_in_card():
    with pytest.raises(ImageDirectiveError):
        parse_card("[[img=logo.png;wide;10]]Text", is_black=False)


def test_image_resolves_relative_to_deck_directory(tmp_path):
    (tmp_path / "pics").mkdir()
    (tmp_path / "pics" / "x.png").write_bytes(b"png")
    image = ImageDirective("pics/x.png", 10, 10)
    assert image.resolve(tmp_path) == tmp_path / "pics" / "x.png"


def test_missing_image_is_an_error(tmp_path):
    image = ImageDirective("missing.png", 10, 10)
    with pytest.raises(ImageNotFoundError):
        image.resolve(tmp_path)
    assert issubclass(ImageNotFoundError, FileNotFoundError)
