"""
Inline markup sanitizing for card text.

Card lines may carry a small set of formatting tags. Everything else that
looks like markup is turned into literal text so that the paragraph renderer
never sees a tag it does not know.
"""
from __future__ import annotations

import re
from typing import Dict, List, NamedTuple, Optional, Tuple

from reportlab.lib.colors import getAllNamedColors
from reportlab.pdfbase.pdfmetrics import standardFonts

# Input spelling -> renderer spelling
WHITELIST: Dict[str, str] = {
    "b": "b",
    "i": "i",
    "u": "u",
    "strikethrough": "strike",
    "strike": "strike",
    "sub": "sub",
    "sup": "super",
    "super": "super",
    "font": "font",
    "color": "font",
    "br": "br",
}
VOID_TAGS = {"br"}

TAG_PATTERN = re.compile(
    r"<\s*(?P<close>/)?\s*(?P<name>[A-Za-z]+)(?P<attrs>(?:\s+[^<>]*?)?)\s*(?P<selfclose>/)?\s*>"
)
ATTR_PATTERN = re.compile(
    r"""(?P<key>[A-Za-z_]+)\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'>]+))"""
)
ENTITY_PATTERN = re.compile(
    r"&(?:#(?P<dec>[0-9]+)|#[xX](?P<hex>[0-9a-fA-F]+)|[A-Za-z][A-Za-z0-9]*);"
)
MAX_CODE_POINT = 0x10FFFF
HEX_COLOR_PATTERN = re.compile(r"^#?([0-9a-fA-F]{6})$")
ESCAPED_NEWLINE_PATTERN = re.compile(r"\\n *")

_STANDARD_FONTS = {name.lower(): name for name in standardFonts}
_NAMED_COLORS = {name.lower() for name in getAllNamedColors()}


class Span(NamedTuple):
    """One token of card text: `literal`, `open` or `close`."""

    kind: str
    raw: str
    name: str = ""
    attrs: Tuple[Tuple[str, str], ...] = ()


def card_text_field(line: str) -> str:
    """Only the first tab-separated column of a card line is card text."""
    return line.split("\t", 1)[0]


def normalize_escapes(text: str) -> str:
    r"""Turn the two-character escapes `\n` and `\t` into real whitespace."""
    text = ESCAPED_NEWLINE_PATTERN.sub("\n", text)
    return text.replace("\\t", "\t")


def trim(text: str) -> str:
    return text.strip(" \t")


def tokenize(text: str) -> List[Span]:
    """
    Split text into literal text and whitelisted tag spans.

    Anything starting with `<` that is not a whitelisted tag stays part of
    the literal text.
    """
    spans: List[Span] = []
    literal: List[str] = []
    pos = 0
    while pos < len(text):
        start = text.find("<", pos)
        if start == -1:
            literal.append(text[pos:])
            break
        literal.append(text[pos:start])
        span = _match_tag(text, start)
        if span is None:
            literal.append("<")
            pos = start + 1
            continue
        if literal:
            spans.append(Span("literal", "".join(literal)))
            literal = []
        spans.append(span)
        pos = start + len(span.raw)

    joined = "".join(literal)
    if joined:
        spans.append(Span("literal", joined))
    return [span for span in spans if span.kind != "literal" or span.raw]


def _match_tag(text: str, start: int) -> Optional[Span]:
    match = TAG_PATTERN.match(text, start)
    if match is None:
        return None
    name = match.group("name").lower()
    if name not in WHITELIST:
        return None
    is_close = match.group("close") is not None
    is_void = name in VOID_TAGS
    if is_close and (is_void or match.group("selfclose")):
        return None
    if match.group("selfclose") and not is_void:
        return None
    attrs = tuple(
        (m.group("key").lower(), _attr_value(m))
        for m in ATTR_PATTERN.finditer(match.group("attrs") or "")
    )
    kind = "close" if is_close else "open"
    return Span(kind, match.group(0), name, attrs)


def _attr_value(match: re.Match) -> str:
    for group in ("dq", "sq", "bare"):
        value = match.group(group)
        if value is not None:
            return value
    return ""


def _valid_entity(match: re.Match) -> bool:
    """Numeric references must name a non-zero, non-surrogate code point."""
    if match.group("dec") is not None:
        code = int(match.group("dec"))
    elif match.group("hex") is not None:
        code = int(match.group("hex"), 16)
    else:
        return True
    return 0 < code <= MAX_CODE_POINT and not 0xD800 <= code <= 0xDFFF


def _escape_literal(text: str) -> str:
    out: List[str] = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char == "<":
            out.append("&lt;")
        elif char == "&":
            entity = ENTITY_PATTERN.match(text, pos)
            if entity and _valid_entity(entity):
                out.append(entity.group(0))
                pos = entity.end()
                continue
            out.append("&amp;")
        else:
            out.append(char)
        pos += 1
    return "".join(out)


def _valid_color(value: str) -> Optional[str]:
    value = value.strip()
    hex_match = HEX_COLOR_PATTERN.match(value)
    if hex_match:
        return "#" + hex_match.group(1).lower()
    if value.lower() in _NAMED_COLORS:
        return value.lower()
    return None


def _font_attrs(name: str, attrs: Tuple[Tuple[str, str], ...]) -> str:
    font_name = size = color = None
    for key, value in attrs:
        if name == "color":
            if key == "rgb":
                color = _valid_color(value) or color
            continue
        if key in ("name", "face"):
            font_name = _STANDARD_FONTS.get(value.strip().lower(), font_name)
        elif key == "size":
            try:
                size = f"{float(value):g}"
            except ValueError:
                pass
        elif key == "color":
            color = _valid_color(value) or color

    parts = []
    if font_name:
        parts.append(f'name="{font_name}"')
    if size:
        parts.append(f'size="{size}"')
    if color:
        parts.append(f'color="{color}"')
    return "".join(" " + part for part in parts)


def _render_open(span: Span) -> str:
    tag = WHITELIST[span.name]
    if tag == "br":
        return "<br/>"
    if tag == "font":
        return f"<font{_font_attrs(span.name, span.attrs)}>"
    return f"<{tag}>"


def serialize(spans: List[Span]) -> str:
    """
    Write spans back as renderer markup.

    Tags are kept properly nested: a close tag with no matching open tag is
    written as literal text, and tags still open at the end are closed.
    """
    out: List[str] = []
    stack: List[str] = []
    for span in spans:
        if span.kind == "literal":
            out.append(_escape_literal(span.raw))
        elif span.kind == "open":
            out.append(_render_open(span))
            tag = WHITELIST[span.name]
            if tag not in VOID_TAGS:
                stack.append(tag)
        else:
            tag = WHITELIST[span.name]
            if tag not in stack:
                out.append(_escape_literal(span.raw))
                continue
            while stack:
                inner = stack.pop()
                out.append(f"</{inner}>")
                if inner == tag:
                    break
    while stack:
        out.append(f"</{stack.pop()}>")
    return "".join(out)


def sanitize(text: str) -> str:
    """
    Make a raw card line safe for the paragraph renderer.

    Example:
        >>> sanitize(r"<b>Bold</b> <blink>x</blink>\\nnext")
        '<b>Bold</b> &lt;blink>x&lt;/blink>\\nnext'
    """
    text = trim(normalize_escapes(text))
    return serialize(tokenize(text))
