from colors import DEFAULT_TINT, background_tint, hex_to_rgba_tint, id_to_color_tint


def test_hex_tint_defaults_for_empty_input():
    assert hex_to_rgba_tint("") == DEFAULT_TINT
    assert hex_to_rgba_tint(None) == DEFAULT_TINT


def test_hex_tint_extracts_channels():
    assert hex_to_rgba_tint("ff0000") == "rgb(255, 0, 0, 0.2)"
    assert hex_to_rgba_tint("1db954") == "rgb(29, 185, 84, 0.2)"


def test_hex_tint_reads_leading_digits_only():
    assert hex_to_rgba_tint("#00ff00") == "rgb(0, 255, 0, 0.2)"
    assert hex_to_rgba_tint("ffzz") == "rgb(0, 0, 255, 0.2)"
    assert hex_to_rgba_tint("nothex") == "rgb(0, 0, 0, 0.2)"


def test_id_tint_defaults_for_empty_id():
    assert id_to_color_tint("") == DEFAULT_TINT


def test_id_tint_hash():
    # 'a' -> 97; 'ab' -> 98 + 97 * 31 = 3105 = 0x0c21
    assert id_to_color_tint("a") == "rgb(97, 0, 0, 0.2)"
    assert id_to_color_tint("ab") == "rgb(33, 12, 0, 0.2)"


def test_id_tint_is_deterministic_and_spreads():
    first = id_to_color_tint("4uLU6hMCjMI75M1A2tKUQC")
    assert id_to_color_tint("4uLU6hMCjMI75M1A2tKUQC") == first
    assert id_to_color_tint("7GhIk7Il098yCjg4BQjzvb") != first


def test_id_tint_folds_to_32_bits():
    tint = id_to_color_tint("a fairly long track identifier that overflows 32 bits")
    channels = tint[len("rgb("):-len(", 0.2)")].split(", ")
    assert len(channels) == 3
    assert all(0 <= int(c) <= 255 for c in channels)


def test_background_prefers_artwork_color():
    assert background_tint("ff0000", "a") == "rgb(255, 0, 0, 0.2)"
    assert background_tint(None, "a") == "rgb(97, 0, 0, 0.2)"
    assert background_tint("", "") == DEFAULT_TINT


def test_tints_are_cached():
    hex_to_rgba_tint.cache_clear()
    hex_to_rgba_tint("123456")
    hex_to_rgba_tint("123456")
    assert hex_to_rgba_tint.cache_info().hits == 1
    assert hex_to_rgba_tint.cache_info().maxsize is not None


def test_id_tint_accepts_lone_surrogates():
    # '\ud800' is a single UTF-16 code unit: 0xd800 = 55296
    assert id_to_color_tint("\ud800") == "rgb(0, 216, 0, 0.2)"
    assert id_to_color_tint("\ud800abc").startswith("rgb(")
