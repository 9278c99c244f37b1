from pypdf import PdfReader

from bbcards.__main__ import build_parser, main

from conftest import write_lines


def test_no_input_prints_usage(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()
    assert list(tmp_path.iterdir()) == []


def test_defaults():
    args = build_parser().parse_args(["-d", "cards"])
    assert args.size == "small"
    assert args.lang == "en"
    assert args.deck_name == "Cards Against Humanity"
    assert args.paper_format == "LETTER"
    assert not args.rounded
    assert not args.oneperpage


def test_size_flags():
    assert build_parser().parse_args(["-l"]).size == "large"
    assert build_parser().parse_args(["--medium2"]).size == "medium2"


def test_directory_mode(tmp_path):
    deck_dir = tmp_path / "party"
    write_lines(deck_dir / "white.txt", ["a", "b"])
    write_lines(deck_dir / "black.txt", ["[[3]]q"])
    write_lines(deck_dir / "more" / "white.txt", ["c"])
    out = tmp_path / "out"

    assert main(["-d", str(deck_dir), "--output-dir", str(out), "--lang", "es", "-r", "-q"]) == 0
    assert len(PdfReader(str(out / "party.pdf")).pages) == 2
    assert (out / "more.pdf").is_file()


def test_file_mode(tmp_path):
    white = write_lines(tmp_path / "w.txt", ["a"])
    output = tmp_path / "custom.pdf"
    assert main(["-w", str(white), "-o", str(output), "--large", "-f", "DINA4", "-q"]) == 0
    reader = PdfReader(str(output))
    assert reader.metadata.title == "custom"


def test_stdout_mode(tmp_path, capsysbinary):
    black = write_lines(tmp_path / "b.txt", ["Why __?"])
    assert main(["-b", str(black), "--stdout"]) == 0
    assert capsysbinary.readouterr().out.startswith(b"%PDF")


def test_fatal_error_exits_with_status_1(tmp_path, capsys):
    black = write_lines(tmp_path / "b.txt", ["[[img=missing.png;10;10]]Where?"])
    output = tmp_path / "deck.pdf"
    assert main(["-b", str(black), "-o", str(output), "-q"]) == 1
    assert "not found" in capsys.readouterr().err
    assert not output.exists()
