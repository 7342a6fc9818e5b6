"""Preparation of ROM (PZU) simulator images from firmware files."""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path

ROM_WORDS = 1536
_HTF_MIN_LINE = 17


class LoadingType(IntEnum):
    """Kinds of firmware source accepted by the ROM simulator."""

    TA528_SINGLE = 0  # one binary file
    TA528_DUAL = 1  # low and high chip images in two files
    TA528_HTF = 2  # HTF text file of bit strings
    TA539 = 3


class PzuLoadError(Exception):
    """A firmware file could not be read or has the wrong layout."""


def _bits_to_byte(bits: str) -> int:
    value = 0
    for ch in bits:
        value = ((value << 1) | (ch == "1")) & 0xFF
    return value


def convert_htf(lines):
    """Convert HTF lines into a little-endian word image.

    The first line is a header and is skipped. Each following line holds
    the high byte in columns 0-7 and the low byte in columns 9-16; lines
    shorter than 17 characters are ignored.
    """
    content = bytearray()
    rows = iter(lines)
    next(rows, None)
    for raw in rows:
        line = raw.rstrip("\r\n")
        if len(line) < _HTF_MIN_LINE:
            continue
        high = _bits_to_byte(line[0:8])
        low = _bits_to_byte(line[9:17])
        content += bytes((low, high))
    return bytes(content)


def read_htf(path):
    """Read an HTF file and return its word image."""
    try:
        text = Path(path).read_text(encoding="ascii", errors="replace")
    except OSError as exc:
        raise PzuLoadError(f"cannot open HTF file {path}") from exc
    return convert_htf(text.splitlines())


def merge_roms(low, high):
    """Interleave the low and high chip images into one word image."""
    if len(low) < ROM_WORDS or len(high) < ROM_WORDS:
        raise PzuLoadError(
            f"ROM images must hold at least {ROM_WORDS} bytes "
            f"(low: {len(low)}, high: {len(high)})"
        )
    content = bytearray()
    for lo, hi in zip(low[:ROM_WORDS], high[:ROM_WORDS]):
        content += bytes((lo, hi))
    return bytes(content)


def _read_binary(path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise PzuLoadError(f"cannot open ROM firmware file {path}") from exc


def build_pzu_image(loading_type, file1, file2=None):
    """Build the image to write into the ROM simulator for ``loading_type``."""
    kind = LoadingType(loading_type)
    if kind is LoadingType.TA528_SINGLE:
        return _read_binary(file1)
    if kind is LoadingType.TA528_DUAL:
        if file2 is None:
            raise PzuLoadError("a second ROM file is required")
        return merge_roms(_read_binary(file1), _read_binary(file2))
    if kind is LoadingType.TA528_HTF:
        return read_htf(file1)
    return b""