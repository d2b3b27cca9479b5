"""Checked conversions between numbers, indices and characters."""

from __future__ import annotations

import math
import string
from typing import Optional

MAX_SAFE_INTEGER = 0x1F_FFFF_FFFF_FFFF
_MAX_SAFE_FLOAT = float(MAX_SAFE_INTEGER)
_MAX_U32 = 0xFFFF_FFFF


def f64_to_usize(v: float) -> Optional[int]:
    """Return `v` as a non-negative integer if it is exactly one, else None."""
    if not math.isfinite(v):
        return None
    if v > _MAX_SAFE_FLOAT:
        return None
    if v < 0:
        return None
    if v != math.floor(v):
        return None
    return int(v)


def usize_to_f64(v: int) -> Optional[float]:
    """Return `v` as a float if it is representable exactly, else None."""
    if v < 0 or v > MAX_SAFE_INTEGER:
        return None
    return float(v)


def f64_to_char(v: float) -> Optional[str]:
    """Return the character with code point `v`, or None if there is none."""
    code = f64_to_usize(v)
    if code is None or code > _MAX_U32:
        return None
    if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        return None
    return chr(code)


def hex_char_to_u8(c: str) -> Optional[int]:
    """Return the value of an ASCII hexadecimal digit, or None."""
    if len(c) != 1 or c not in string.hexdigits:
        return None
    return int(c, 16)