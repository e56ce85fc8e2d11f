import pytest

from pixellava.palettes import (
    DEFAULT_COLOR_ARGB,
    PRESETS,
    argb_to_hex,
    argb_to_rgba,
    get_preset,
    list_presets,
    normalize_argb,
    pack_argb,
    parse_color,
    resolve_color,
    unpack_argb,
)


def test_default_color_is_lava_orange():
    assert DEFAULT_COLOR_ARGB == 0xFFF56E1E
    assert argb_to_rgba(DEFAULT_COLOR_ARGB) == (245, 110, 30, 255)
    assert argb_to_hex(DEFAULT_COLOR_ARGB) == "#FFF56E1E"


def test_zero_means_unset():
    assert resolve_color(0) == DEFAULT_COLOR_ARGB
    assert resolve_color(0xFF102030) == 0xFF102030


def test_signed_values_normalised():
    assert normalize_argb(-692706) == 0xFFF56E1E
    assert unpack_argb(-1) == (255, 255, 255, 255)


def test_pack_rejects_out_of_range():
    with pytest.raises(ValueError):
        pack_argb(256, 0, 0, 0)


def test_parse_color_forms():
    assert parse_color("blue") == PRESETS["blue"].argb
    assert parse_color(" Lava ") == DEFAULT_COLOR_ARGB
    assert parse_color("#102030") == 0xFF102030
    assert parse_color("80102030") == 0x80102030


@pytest.mark.parametrize("text", ["#12345", "chartreuse", "#GGHHII", "+1234a", "F_FFFF", "#-FFFFF", " 0x1234"])
def test_parse_color_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_color(text)


def test_get_preset_unknown():
    with pytest.raises(KeyError):
        get_preset("plaid")


def test_presets_listed_sorted_and_opaque():
    names = list_presets()
    assert names == sorted(PRESETS)
    assert "lava" in names
    assert all(PRESETS[n].rgba[3] == 255 for n in names)
