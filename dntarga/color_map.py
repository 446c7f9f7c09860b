# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Pixel and color-map packing

Stateless bit arithmetic for color-map entries and pixel strides.
No file or stream handling lives here.

Supported color-map entry layouts (little-endian):
- 15-bit X1R5G5B5: bits 14-10 red, 9-5 green, 4-0 blue, bit 15 unused (0)
- 16-bit A1R5G5B5: as above, bit 15 is the alpha flag
- 24-bit R8G8B8: bytes B, G, R
- 32-bit A8R8G8B8: bytes B, G, R, A

The 8-to-5-bit direction is lossy; 5-bit channels are expanded with
``value * 255 / 31`` when decoding.

Copyright 2025 DNAi inc.
"""

from typing import Iterable, List, Tuple

from dntarga.enums import ColorMapEntrySize
from dntarga.exceptions import MalformedLengthError, UnsupportedPixelFormatError

Color = Tuple[int, int, int, int]  # (red, green, blue, alpha)

SUPPORTED_ENTRY_SIZES = (
    ColorMapEntrySize.X1R5G5B5,
    ColorMapEntrySize.A1R5G5B5,
    ColorMapEntrySize.R8G8B8,
    ColorMapEntrySize.A8R8G8B8,
)


def bytes_per_pixel(pixel_depth: int) -> int:
    """Byte stride of one pixel: ``ceil(pixel_depth / 8)``."""
    return (int(pixel_depth) + 7) // 8


def entry_byte_size(entry_size: int) -> int:
    """
    Bytes occupied by one color-map entry.

    Raises:
        UnsupportedPixelFormatError: If the entry size has no packing rule
    """
    _check_entry_size(entry_size)
    return bytes_per_pixel(entry_size)


def scale_5_to_8(value: int) -> int:
    return value * 255 // 31


def scale_8_to_5(value: int) -> int:
    return (value & 0xFF) >> 3


def pack_entry(color: Color, entry_size: int) -> bytes:
    """
    Encode one RGBA color as a color-map entry.

    Args:
        color: (red, green, blue, alpha), 0-255 each
        entry_size: 15, 16, 24 or 32

    Returns:
        Encoded entry bytes
    """
    _check_entry_size(entry_size)
    r, g, b, a = color
    if entry_size in (ColorMapEntrySize.X1R5G5B5, ColorMapEntrySize.A1R5G5B5):
        value = (scale_8_to_5(r) << 10) | (scale_8_to_5(g) << 5) | scale_8_to_5(b)
        if entry_size == ColorMapEntrySize.A1R5G5B5 and a & 0x80:
            value |= 0x8000
        return value.to_bytes(2, byteorder='little')
    if entry_size == ColorMapEntrySize.R8G8B8:
        return bytes((b, g, r))
    return bytes((b, g, r, a))


def unpack_entry(data: bytes, entry_size: int) -> Color:
    """
    Decode one color-map entry to (red, green, blue, alpha).

    Entries without alpha information decode as fully opaque.
    """
    size = entry_byte_size(entry_size)
    if len(data) != size:
        raise MalformedLengthError(f"A {int(entry_size)}-bit color-map entry is {size} bytes, got {len(data)}")
    if entry_size in (ColorMapEntrySize.X1R5G5B5, ColorMapEntrySize.A1R5G5B5):
        value = int.from_bytes(data, byteorder='little')
        r = scale_5_to_8((value >> 10) & 0x1F)
        g = scale_5_to_8((value >> 5) & 0x1F)
        b = scale_5_to_8(value & 0x1F)
        if entry_size == ColorMapEntrySize.A1R5G5B5:
            a = 255 if value & 0x8000 else 0
        else:
            a = 255
        return (r, g, b, a)
    if entry_size == ColorMapEntrySize.R8G8B8:
        return (data[2], data[1], data[0], 255)
    return (data[2], data[1], data[0], data[3])


def pack_color_map(colors: Iterable[Color], entry_size: int) -> bytes:
    """Encode a palette as contiguous color-map data."""
    return b''.join(pack_entry(color, entry_size) for color in colors)


def unpack_color_map(data: bytes, entry_size: int) -> List[Color]:
    """
    Decode contiguous color-map data.

    Raises:
        MalformedLengthError: If the data is not a whole number of entries
    """
    size = entry_byte_size(entry_size)
    if len(data) % size:
        raise MalformedLengthError(
            f"Color-map data of {len(data)} bytes is not a multiple of the {size}-byte entry size"
        )
    return [unpack_entry(data[i:i + size], entry_size) for i in range(0, len(data), size)]


def _check_entry_size(entry_size: int) -> None:
    if entry_size not in SUPPORTED_ENTRY_SIZES:
        raise UnsupportedPixelFormatError(f"No packing rule for {int(entry_size)}-bit color-map entries")
