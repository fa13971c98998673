import re

import pytest

from iconmaker.icons.colors import adjust_brightness, normalize_hex, parse_hex, to_hex

HEX_RE = re.compile(r"^#[0-9a-f]{6}$")


def test_zero_amount_is_identity():
    for color in ("#6366f1", "#000000", "#ffffff", "#0a0b0c"):
        assert adjust_brightness(color, 0) == color


def test_amount_is_applied_to_every_channel():
    assert adjust_brightness("#102030", 20) == "#435363"
    assert adjust_brightness("#808080", 10) == "#999999"


def test_channels_clamp_at_both_ends():
    assert adjust_brightness("#000000", 100) == "#ffffff"
    assert adjust_brightness("#ffffff", -100) == "#000000"
    assert adjust_brightness("#f0f0f0", 50) == "#ffffff"
    assert adjust_brightness("#0f2040", -30) == "#000000"


@pytest.mark.parametrize("color", ["#000000", "#ffffff", "#6366f1", "#ff8800", "#123456"])
def test_output_stays_a_valid_color_for_all_amounts(color):
    for amount in range(-100, 101, 7):
        out = adjust_brightness(color, amount)
        assert HEX_RE.match(out)
        assert all(0 <= c <= 255 for c in parse_hex(out))


def test_parse_hex_accepts_short_and_bare_forms():
    assert parse_hex("#abc") == (0xAA, 0xBB, 0xCC)
    assert parse_hex("6366F1") == (0x63, 0x66, 0xF1)
    assert normalize_hex("#ABCDEF") == "#abcdef"


@pytest.mark.parametrize("bad", ["", "#12345", "#gggggg", "red", "#1234567"])
def test_parse_hex_rejects_garbage(bad):
    with pytest.raises(ValueError):
        parse_hex(bad)


def test_to_hex_clamps():
    assert to_hex((300, -5, 16)) == "#ff0010"
