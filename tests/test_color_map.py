# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

import pytest

from dntarga import ColorMapEntrySize, MalformedLengthError, UnsupportedPixelFormatError
from dntarga.color_map import (
    bytes_per_pixel,
    entry_byte_size,
    pack_color_map,
    pack_entry,
    scale_5_to_8,
    unpack_color_map,
    unpack_entry,
)


def test_pixel_stride_rounds_up():
    assert bytes_per_pixel(1) == 1
    assert bytes_per_pixel(8) == 1
    assert bytes_per_pixel(15) == 2
    assert bytes_per_pixel(24) == 3
    assert bytes_per_pixel(32) == 4


def test_24_bit_entries_are_bgr():
    assert pack_entry((10, 20, 30, 255), ColorMapEntrySize.R8G8B8) == bytes((30, 20, 10))
    assert unpack_entry(bytes((30, 20, 10)), 24) == (10, 20, 30, 255)


def test_32_bit_entries_are_bgra():
    assert pack_entry((1, 2, 3, 4), ColorMapEntrySize.A8R8G8B8) == bytes((3, 2, 1, 4))
    assert unpack_entry(bytes((3, 2, 1, 4)), 32) == (1, 2, 3, 4)


def test_15_bit_entry_layout():
    assert pack_entry((255, 0, 0, 0), ColorMapEntrySize.X1R5G5B5) == b'\x00\x7c'
    assert pack_entry((0, 255, 0, 255), ColorMapEntrySize.X1R5G5B5) == b'\xe0\x03'
    assert unpack_entry(b'\x00\x7c', 15) == (255, 0, 0, 255)


def test_16_bit_entry_alpha_flag():
    assert pack_entry((0, 0, 255, 200), ColorMapEntrySize.A1R5G5B5) == b'\x1f\x80'
    assert pack_entry((0, 0, 255, 100), ColorMapEntrySize.A1R5G5B5) == b'\x1f\x00'
    assert unpack_entry(b'\x1f\x80', 16) == (0, 0, 255, 255)
    assert unpack_entry(b'\x1f\x00', 16) == (0, 0, 255, 0)


def test_5_bit_expansion_scales_instead_of_shifting():
    assert scale_5_to_8(0) == 0
    assert scale_5_to_8(31) == 255
    assert scale_5_to_8(16) == 131


def test_5_bit_packing_is_lossy():
    packed = pack_entry((100, 150, 200, 255), ColorMapEntrySize.X1R5G5B5)
    assert unpack_entry(packed, 15) != (100, 150, 200, 255)


def test_color_map_round_trip_32_bit():
    colors = [(0, 0, 0, 0), (255, 128, 1, 77), (9, 8, 7, 255)]
    data = pack_color_map(colors, 32)
    assert len(data) == 12
    assert unpack_color_map(data, 32) == colors


def test_unsupported_entry_size():
    assert entry_byte_size(16) == 2
    with pytest.raises(UnsupportedPixelFormatError):
        entry_byte_size(8)
    with pytest.raises(UnsupportedPixelFormatError):
        pack_entry((0, 0, 0, 0), 12)


def test_partial_color_map_data():
    with pytest.raises(MalformedLengthError):
        unpack_color_map(bytes(5), 24)
    with pytest.raises(MalformedLengthError):
        unpack_entry(bytes(2), 24)
