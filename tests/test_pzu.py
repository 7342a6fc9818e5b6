import pytest

from pultctl.pzu import (
    ROM_WORDS,
    LoadingType,
    PzuLoadError,
    build_pzu_image,
    convert_htf,
    merge_roms,
    read_htf,
)


def test_convert_htf_skips_header_and_swaps_bytes():
    lines = ["11111111 11111111", "10000000 00000001"]
    assert convert_htf(lines) == bytes([0x01, 0x80])


def test_convert_htf_ignores_short_lines():
    lines = ["header", "1010", "11110000 00001111\n"]
    assert convert_htf(lines) == bytes([0x0F, 0xF0])


def test_convert_htf_empty_input():
    assert convert_htf([]) == b""


def test_read_htf_roundtrip(tmp_path):
    path = tmp_path / "rom.htf"
    path.write_text("HEADER\n00000001 00000010\n00000011 00000100\n")
    assert read_htf(path) == bytes([2, 1, 4, 3])


def test_read_htf_missing_file(tmp_path):
    with pytest.raises(PzuLoadError):
        read_htf(tmp_path / "missing.htf")


def test_merge_roms_interleaves():
    low = bytes(i % 256 for i in range(ROM_WORDS + 10))
    high = bytes((255 - i) % 256 for i in range(ROM_WORDS))
    merged = merge_roms(low, high)
    assert len(merged) == 2 * ROM_WORDS
    assert merged[0::2] == low[:ROM_WORDS]
    assert merged[1::2] == high


def test_merge_roms_short_image():
    with pytest.raises(PzuLoadError):
        merge_roms(bytes(10), bytes(ROM_WORDS))


def test_build_single_file(tmp_path):
    path = tmp_path / "rom.bin"
    path.write_bytes(b"\x01\x02\x03")
    assert build_pzu_image(LoadingType.TA528_SINGLE, path) == b"\x01\x02\x03"


def test_build_dual_files(tmp_path):
    low = tmp_path / "rom.01"
    high = tmp_path / "rom.02"
    low.write_bytes(bytes([7]) * ROM_WORDS)
    high.write_bytes(bytes([9]) * ROM_WORDS)
    image = build_pzu_image(1, low, high)
    assert image[:4] == bytes([7, 9, 7, 9])
    assert len(image) == 2 * ROM_WORDS


def test_build_htf(tmp_path):
    path = tmp_path / "rom.htf"
    path.write_text("H\n11111111 00000000\n")
    assert build_pzu_image(LoadingType.TA528_HTF, path) == bytes([0x00, 0xFF])


def test_build_missing_file(tmp_path):
    with pytest.raises(PzuLoadError):
        build_pzu_image(LoadingType.TA528_SINGLE, tmp_path / "absent.bin")


def test_build_ta539_yields_nothing(tmp_path):
    assert build_pzu_image(LoadingType.TA539, tmp_path / "any.bin") == b""


def test_build_unknown_type(tmp_path):
    with pytest.raises(ValueError):
        build_pzu_image(7, tmp_path / "any.bin")