"""Reading XPM images into Image objects."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Iterable, Iterator

from pacmaze.colors import lookup_color
from pacmaze.image import Image

TRANSPARENT = 0xFF000000
_NAME_LIMIT = 63
_NATIVE_BIG_ENDIAN = sys.byteorder == "big"

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_HEX_RE = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")
_WORD_SPLIT_RE = re.compile(r"[ \t]+")


class XpmError(ValueError):
    """Raised when XPM data cannot be read or parsed."""


def split_words(text: str) -> list[str]:
    """Split text into words separated by spaces and tabs."""
    return [word for word in _WORD_SPLIT_RE.split(text) if word]


def _find_outside_quotes(text: str, token: str) -> int:
    quoted = False
    last_start = len(text) - len(token)
    for pos, char in enumerate(text):
        if pos > last_start:
            break
        if char == '"':
            quoted = not quoted
        if not quoted and text.startswith(token, pos):
            return pos
    return -1


def strip_comments(text: str) -> str:
    """Blank out C comments that lie outside double quotes, keeping length."""
    while (begin := _find_outside_quotes(text, "/*")) != -1:
        end = text.find("*/", begin + 2)
        stop = len(text) if end == -1 else end + 2
        text = text[:begin] + " " * (stop - begin) + text[stop:]
    while (begin := _find_outside_quotes(text, "//")) != -1:
        end = text.find("\n", begin + 2)
        stop = len(text) if end == -1 else end + 1
        text = text[:begin] + " " * (stop - begin) + text[stop:]
    return text


def _atoi(text: str) -> int:
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else 0


def _hex_value(text: str) -> int:
    match = _HEX_RE.match(text)
    if not match or not match.group(2):
        return 0
    value = int(match.group(2), 16)
    return -value if match.group(1) == "-" else value


def text_to_rgb(name: str, suffix: str | None = None) -> int:
    """Turn an XPM colour spec into 0xRRGGBB; -1 for none, 0 if unknown."""
    if name.startswith("#"):
        return _hex_value(name[1:])
    if suffix is not None:
        name = f"{name} {suffix}"[:_NAME_LIMIT]
    try:
        return lookup_color(name)
    except KeyError:
        return 0


def quoted_lines(text: str) -> Iterator[str]:
    """Yield the contents of each double-quoted string in text, in order."""
    pos = 0
    while True:
        start = text.find('"', pos)
        if start == -1:
            return
        end = text.find('"', start + 1)
        if end == -1:
            return
        yield text[start + 1:end]
        pos = end + 1


def parse_xpm_lines(lines: Iterable[str]) -> Image:
    """Build an Image from XPM lines: header, colour table, then pixel rows."""
    source = iter(lines)

    def next_line(what: str) -> str:
        line = next(source, None)
        if line is None:
            raise XpmError(f"missing {what}")
        return line

    header = split_words(next_line("header"))
    if len(header) < 4:
        raise XpmError("header needs width, height, colour count and chars per pixel")
    width, height, ncolors, cpp = (_atoi(word) for word in header[:4])
    if min(width, height, ncolors, cpp) <= 0:
        raise XpmError(f"invalid header values: {' '.join(header[:4])}")

    later_wins = cpp <= 2
    palette: dict[str, int] = {}
    for _ in range(ncolors):
        line = next_line("colour definition")
        if len(line) < cpp:
            raise XpmError(f"colour definition too short: {line!r}")
        key = line[:cpp]
        words = split_words(line[cpp:])
        try:
            index = words.index("c")
        except ValueError:
            raise XpmError(f"no colour visual in definition: {line!r}") from None
        if index + 1 >= len(words):
            raise XpmError(f"colour visual without a value: {line!r}")
        suffix = words[index + 2] if index + 2 < len(words) else None
        rgb = text_to_rgb(words[index + 1], suffix)
        if later_wins or key not in palette:
            palette[key] = rgb

    image = Image(width, height, _NATIVE_BIG_ENDIAN)
    for y in range(height):
        line = next_line("pixel row")
        if len(line) < width * cpp:
            raise XpmError(f"pixel row {y} too short")
        for x in range(width):
            color = palette.get(line[x * cpp:(x + 1) * cpp], 0)
            if color == -1:
                color = TRANSPARENT
            image.put_pixel(x, y, color)
    return image


def parse_xpm_text(text: str) -> Image:
    """Parse the text of an XPM file."""
    return parse_xpm_lines(quoted_lines(strip_comments(text)))


def load_xpm(path: str | os.PathLike[str]) -> Image:
    """Read and parse an XPM file."""
    try:
        with open(path, encoding="latin-1") as handle:
            text = handle.read()
    except OSError as exc:
        raise XpmError(f"cannot read {os.fspath(path)}: {exc.strerror}") from exc
    return parse_xpm_text(text)