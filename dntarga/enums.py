# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TGA enumerations

Numeric codes used by the TGA header, image descriptor and extension area.

Copyright 2025 DNAi inc.
"""

from enum import IntEnum
from typing import Type, Union


class ImageType(IntEnum):
    """Header image type codes."""
    NO_IMAGE_DATA = 0
    UNCOMPRESSED_COLOR_MAPPED = 1
    UNCOMPRESSED_TRUE_COLOR = 2
    UNCOMPRESSED_BLACK_WHITE = 3
    RLE_COLOR_MAPPED = 9
    RLE_TRUE_COLOR = 10
    RLE_BLACK_WHITE = 11

    @property
    def is_rle(self) -> bool:
        return self in (ImageType.RLE_COLOR_MAPPED, ImageType.RLE_TRUE_COLOR, ImageType.RLE_BLACK_WHITE)

    @property
    def is_color_mapped(self) -> bool:
        return self in (ImageType.UNCOMPRESSED_COLOR_MAPPED, ImageType.RLE_COLOR_MAPPED)

    @property
    def is_black_white(self) -> bool:
        return self in (ImageType.UNCOMPRESSED_BLACK_WHITE, ImageType.RLE_BLACK_WHITE)


class ColorMapType(IntEnum):
    """Header color-map type codes."""
    NO_COLOR_MAP = 0
    COLOR_MAP = 1


class ColorMapEntrySize(IntEnum):
    """Bits per color-map entry."""
    OTHER = 0
    X1R5G5B5 = 15
    A1R5G5B5 = 16
    R8G8B8 = 24
    A8R8G8B8 = 32


class PixelDepth(IntEnum):
    """Common pixel depths (bits per pixel, attribute bits included)."""
    OTHER = 0
    BPP8 = 8
    BPP16 = 16
    BPP24 = 24
    BPP32 = 32


class ImageOrigin(IntEnum):
    """Screen origin of the first pixel (image descriptor bits 5-4)."""
    BOTTOM_LEFT = 0
    BOTTOM_RIGHT = 1
    TOP_LEFT = 2
    TOP_RIGHT = 3


class AttributeType(IntEnum):
    """Extension area attributes type (meaning of the alpha bits)."""
    NO_ALPHA = 0
    UNDEFINED_ALPHA_CAN_BE_IGNORED = 1
    UNDEFINED_ALPHA_BUT_SHOULD_BE_RETAINED = 2
    USEFUL_ALPHA = 3
    PRE_MULTIPLIED_ALPHA = 4


def coerce_enum(enum_class: Type[IntEnum], value: int) -> Union[IntEnum, int]:
    """
    Map a raw byte value onto an enum member when one exists.
    
    Unknown codes are returned unchanged so a file round-trips
    byte-for-byte even when it uses values this library does not name.
    
    Args:
        enum_class: Enumeration to look the value up in
        value: Raw integer read from the file
        
    Returns:
        Enum member, or the integer itself if the code is unknown
    """
    try:
        return enum_class(value)
    except ValueError:
        return value


def is_rle_type(image_type: int) -> bool:
    """Return True for the three run-length-encoded image types."""
    return image_type in (ImageType.RLE_COLOR_MAPPED, ImageType.RLE_TRUE_COLOR, ImageType.RLE_BLACK_WHITE)
