import pytest

from pacmaze.colors import lookup_color
from pacmaze.xpm import (
    TRANSPARENT,
    XpmError,
    load_xpm,
    parse_xpm_lines,
    parse_xpm_text,
    quoted_lines,
    split_words,
    strip_comments,
    text_to_rgb,
)

SAMPLE_LINES = ["2 2 2 1", "a c #FF0000", "b c None", "ab", "ba"]

SAMPLE_FILE = """/* XPM */
static char *sample[] = {
/* columns rows colors chars-per-pixel */
"2 2 2 1",
"a c #FF0000", // red
"b c None",
/* pixels */
"ab",
"ba"
};
"""


def test_split_words_spaces_and_tabs():
    assert split_words("  a\tb  c ") == ["a", "b", "c"]


def test_split_words_empty():
    assert split_words(" \t ") == []


def test_strip_comments_block():
    text = 'x /* note */ "a/*b" y'
    result = strip_comments(text)
    assert len(result) == len(text)
    assert "note" not in result
    assert '"a/*b"' in result


def test_strip_comments_line():
    text = "x // hi\ny"
    result = strip_comments(text)
    assert len(result) == len(text)
    assert "hi" not in result and "\n" not in result
    assert result.startswith("x") and result.endswith("y")


def test_strip_comments_keeps_plain_text():
    text = '"2 2 2 1",\n"ab"'
    assert strip_comments(text) == text


def test_text_to_rgb_hex():
    assert text_to_rgb("#FF0000") == 0xFF0000


def test_text_to_rgb_named():
    assert text_to_rgb("red") == lookup_color("red")
    assert text_to_rgb("RED") == lookup_color("red")


def test_text_to_rgb_two_word_name():
    assert text_to_rgb("ghost", "white") == lookup_color("ghost white")


def test_text_to_rgb_none_is_minus_one():
    assert text_to_rgb("None") == -1


def test_text_to_rgb_unknown_is_zero():
    assert text_to_rgb("nosuchcolour") == 0


def test_quoted_lines():
    assert list(quoted_lines('x "ab" y "cd" "unterminated')) == ["ab", "cd"]


def test_parse_lines_pixels():
    img = parse_xpm_lines(SAMPLE_LINES)
    assert (img.width, img.height) == (2, 2)
    assert img.get_pixel(0, 0) == 0xFF0000
    assert img.get_pixel(1, 0) == TRANSPARENT
    assert img.get_pixel(0, 1) == TRANSPARENT
    assert img.get_pixel(1, 1) == 0xFF0000


def test_parse_text_matches_lines():
    from_text = parse_xpm_text(SAMPLE_FILE)
    from_lines = parse_xpm_lines(SAMPLE_LINES)
    assert from_text.data == from_lines.data


def test_load_xpm_round_trip(tmp_path):
    path = tmp_path / "sample.xpm"
    path.write_text(SAMPLE_FILE)
    assert load_xpm(path).data == parse_xpm_lines(SAMPLE_LINES).data


def test_load_xpm_missing_file(tmp_path):
    with pytest.raises(XpmError):
        load_xpm(tmp_path / "absent.xpm")


def test_duplicate_key_short_codes_last_wins():
    img = parse_xpm_lines(["1 1 2 1", "a c #FF0000", "a c #00FF00", "a"])
    assert img.get_pixel(0, 0) == 0x00FF00


def test_duplicate_key_long_codes_first_wins():
    img = parse_xpm_lines(["1 1 2 3", "abc c #FF0000", "abc c #00FF00", "abc"])
    assert img.get_pixel(0, 0) == 0xFF0000


def test_unknown_pixel_key_is_black():
    img = parse_xpm_lines(["2 1 1 1", "a c #FF0000", "az"])
    assert img.get_pixel(0, 0) == 0xFF0000
    assert img.get_pixel(1, 0) == 0


@pytest.mark.parametrize(
    "lines",
    [
        [],
        ["0 2 1 1", "a c red", "aa", "aa"],
        ["2 2 1"],
        ["2 2 1 1", "a s red", "aa", "aa"],
        ["2 2 1 1", "a c", "aa", "aa"],
        ["2 2 1 1", "a c red", "aa"],
        ["2 2 1 1", "a c red", "a", "aa"],
    ],
)
def test_parse_errors(lines):
    with pytest.raises(XpmError):
        parse_xpm_lines(lines)