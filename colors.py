"""Background tints derived from an artwork color or a track id."""

import re
from functools import lru_cache

from config import COLOR_CACHE_SIZE

DEFAULT_TINT = "#FFF"
TINT_ALPHA = 0.2

_HEX_PREFIX = re.compile(r"^\s*(?:#|0[xX])?([0-9a-fA-F]+)")


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _tint(r: int, g: int, b: int) -> str:
    return f"rgb({r}, {g}, {b}, {TINT_ALPHA})"


@lru_cache(maxsize=COLOR_CACHE_SIZE)
def hex_to_rgba_tint(hex_color):
    """Turn an 'rrggbb' color into a low-alpha tint.

    Only the leading hex digits are read; a string with none parses as 0.
    """
    if not hex_color:
        return DEFAULT_TINT

    match = _HEX_PREFIX.match(hex_color)
    value = int(match.group(1), 16) if match else 0
    return _tint((value >> 16) & 255, (value >> 8) & 255, value & 255)


@lru_cache(maxsize=COLOR_CACHE_SIZE)
def id_to_color_tint(track_id):
    """Deterministic tint for an arbitrary id (31x string hash, 32-bit fold)."""
    if not track_id:
        return DEFAULT_TINT

    encoded = track_id.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        h = _to_int32(code_unit + ((h << 5) - h))

    r, g, b = ((h >> (i * 8)) & 255 for i in range(3))
    return _tint(r, g, b)


def background_tint(background_color, track_id):
    if background_color:
        return hex_to_rgba_tint(background_color)
    return id_to_color_tint(track_id or "")
