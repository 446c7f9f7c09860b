# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TGA header records

The 18-byte file header and the records packed inside it:
- ID length, color-map type and image type (1 byte each)
- Color-map specification (5 bytes)
- Image specification (10 bytes), ending with the image descriptor byte

Copyright 2025 DNAi inc.
"""

import struct
from dataclasses import dataclass, field
from typing import ClassVar

from dntarga.enums import (
    ColorMapEntrySize,
    ColorMapType,
    ImageOrigin,
    ImageType,
    PixelDepth,
    coerce_enum,
)
from dntarga.exceptions import MalformedLengthError
from dntarga.fields import require_length


@dataclass
class ImageDescriptor:
    """
    Image descriptor byte.

    Bits 3-0 hold the number of attribute (alpha/overlay) bits per pixel,
    bits 5-4 the screen origin; bits 7-6 are reserved and always written as 0.
    """
    origin: int = ImageOrigin.BOTTOM_LEFT
    alpha_bits: int = 0

    def byte_size(self) -> int:
        return 1

    def to_byte(self) -> int:
        return ((int(self.origin) & 0x03) << 4) | (self.alpha_bits & 0x0F)

    def to_bytes(self) -> bytes:
        return bytes((self.to_byte(),))

    @classmethod
    def from_byte(cls, value: int) -> 'ImageDescriptor':
        return cls(origin=ImageOrigin((value & 0x30) >> 4), alpha_bits=value & 0x0F)

    @classmethod
    def from_bytes(cls, data: bytes) -> 'ImageDescriptor':
        require_length(data, 1, "Image descriptor")
        return cls.from_byte(data[0])


@dataclass
class ColorMapSpec:
    """Color-map specification: first entry index, entry count, bits per entry."""
    BYTE_SIZE: ClassVar[int] = 5

    first_entry_index: int = 0
    length: int = 0
    entry_size: int = 0

    def byte_size(self) -> int:
        return self.BYTE_SIZE

    @property
    def entry_bytes(self) -> int:
        """Bytes per color-map entry (``ceil(entry_size / 8)``)."""
        return (self.entry_size + 7) // 8

    @property
    def data_length(self) -> int:
        """Byte length of the color-map data this specification announces."""
        return self.length * self.entry_bytes

    def to_bytes(self) -> bytes:
        return struct.pack('<HHB', self.first_entry_index, self.length, self.entry_size)

    @classmethod
    def from_bytes(cls, data: bytes) -> 'ColorMapSpec':
        require_length(data, cls.BYTE_SIZE, "Color map specification")
        first_entry_index, length, entry_size = struct.unpack('<HHB', data)
        return cls(first_entry_index, length, coerce_enum(ColorMapEntrySize, entry_size))


@dataclass
class ImageSpec:
    """Image specification: origin coordinates, dimensions, pixel depth, descriptor."""
    BYTE_SIZE: ClassVar[int] = 10

    x_origin: int = 0
    y_origin: int = 0
    width: int = 0
    height: int = 0
    pixel_depth: int = 0
    descriptor: ImageDescriptor = field(default_factory=ImageDescriptor)

    def byte_size(self) -> int:
        return self.BYTE_SIZE

    @property
    def bytes_per_pixel(self) -> int:
        """Pixel stride in bytes (``ceil(pixel_depth / 8)``)."""
        return (self.pixel_depth + 7) // 8

    @property
    def data_length(self) -> int:
        """Uncompressed pixel payload length."""
        return self.width * self.height * self.bytes_per_pixel

    def to_bytes(self) -> bytes:
        return struct.pack(
            '<HHHHBB',
            self.x_origin,
            self.y_origin,
            self.width,
            self.height,
            self.pixel_depth,
            self.descriptor.to_byte(),
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> 'ImageSpec':
        require_length(data, cls.BYTE_SIZE, "Image specification")
        x_origin, y_origin, width, height, pixel_depth, descriptor = struct.unpack('<HHHHBB', data)
        return cls(
            x_origin=x_origin,
            y_origin=y_origin,
            width=width,
            height=height,
            pixel_depth=coerce_enum(PixelDepth, pixel_depth),
            descriptor=ImageDescriptor.from_byte(descriptor),
        )


@dataclass
class HeaderArea:
    """The fixed 18-byte TGA file header."""
    BYTE_SIZE: ClassVar[int] = 18

    id_length: int = 0
    color_map_type: int = ColorMapType.NO_COLOR_MAP
    image_type: int = ImageType.NO_IMAGE_DATA
    color_map_spec: ColorMapSpec = field(default_factory=ColorMapSpec)
    image_spec: ImageSpec = field(default_factory=ImageSpec)

    def byte_size(self) -> int:
        return self.BYTE_SIZE

    def to_bytes(self) -> bytes:
        if not 0 <= self.id_length <= 255:
            raise MalformedLengthError(f"Image ID length must fit in one byte, got {self.id_length}")
        return (
            struct.pack('<BBB', self.id_length, self.color_map_type, self.image_type)
            + self.color_map_spec.to_bytes()
            + self.image_spec.to_bytes()
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> 'HeaderArea':
        require_length(data, cls.BYTE_SIZE, "Header")
        id_length, color_map_type, image_type = struct.unpack('<BBB', data[0:3])
        return cls(
            id_length=id_length,
            color_map_type=coerce_enum(ColorMapType, color_map_type),
            image_type=coerce_enum(ImageType, image_type),
            color_map_spec=ColorMapSpec.from_bytes(data[3:8]),
            image_spec=ImageSpec.from_bytes(data[8:18]),
        )
