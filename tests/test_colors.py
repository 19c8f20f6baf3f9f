import pytest

from pacmaze.colors import lookup_color


@pytest.mark.parametrize(
    "name, expected",
    [
        ("snow", 0xFFFAFA),
        ("black", 0x0),
        ("white", 0xFFFFFF),
        ("red", 0xFF0000),
        ("navy", 0x80),
        ("lightgoldenrodyellow", 0xFAFAD2),
        ("gray50", 0x7F7F7F),
    ],
)
def test_known_names(name, expected):
    assert lookup_color(name) == expected


def test_none_is_transparent_marker():
    assert lookup_color("none") == -1


@pytest.mark.parametrize("name", ["SNOW", "Snow", "sNoW", "NONE", "Ghost White"])
def test_lookup_ignores_case(name):
    assert lookup_color(name) == lookup_color(name.lower())


def test_first_duplicate_wins():
    assert lookup_color("dark slate") == 0x2F4F4F
    assert lookup_color("light slate") == 0x778899
    assert lookup_color("light goldenrod") == 0xFAFAD2


@pytest.mark.parametrize("level", range(101))
def test_gray_and_grey_agree(level):
    assert lookup_color(f"gray{level}") == lookup_color(f"grey{level}")


def test_spaced_and_joined_names_agree():
    assert lookup_color("ghost white") == lookup_color("ghostwhite")
    assert lookup_color("dark orange") == lookup_color("darkorange")


@pytest.mark.parametrize("name", ["", "snow ", " snow", "notacolor", "gray101"])
def test_unknown_name_raises(name):
    with pytest.raises(KeyError):
        lookup_color(name)


def test_non_ascii_case_folding_does_not_match():
    # The Kelvin sign lowers to "k" under Unicode rules, but not under ASCII.
    with pytest.raises(KeyError):
        lookup_color("\u212ahaki")