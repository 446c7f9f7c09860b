# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TGA image aggregate

TgaImage owns every section of a TGA file:
- header (always present)
- image ID, color-map data and pixel data (the "image or color-map area")
- the optional TGA 2.0 tail: footer, developer area and extension area

A legacy (v1.0) image has no tail at all; ``tail is None`` is the single
place where the format version is decided.

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from dntarga.color_map import Color, bytes_per_pixel, pack_color_map, unpack_color_map
from dntarga.developer import DeveloperArea, DeveloperTag
from dntarga.enums import (
    AttributeType,
    ColorMapEntrySize,
    ColorMapType,
    ImageOrigin,
    ImageType,
    PixelDepth,
    coerce_enum,
)
from dntarga.exceptions import MalformedLengthError, MissingRequiredFieldError
from dntarga.extension import ExtensionArea, PostageStampImage
from dntarga.fields import TgaString, TimeStamp
from dntarga.footer import FooterArea
from dntarga.header import HeaderArea


@dataclass
class ImageOrColorMapArea:
    """Variable-length body that follows the header."""
    image_id: Optional[TgaString] = None
    color_map_data: Optional[bytes] = None
    image_data: Optional[bytes] = None


@dataclass
class NewFormatTail:
    """Sections that only exist in TGA 2.0 files."""
    footer: FooterArea = field(default_factory=FooterArea)
    developer_area: Optional[DeveloperArea] = None
    extension_area: Optional[ExtensionArea] = None


@dataclass
class TgaImage:
    """
    In-memory TGA file.

    Instances are plain values owned by the caller; nothing here touches
    files or streams. Use ``dntarga.parse``/``dntarga.serialize`` to move
    between bytes and TgaImage.
    """
    header: HeaderArea = field(default_factory=HeaderArea)
    body: ImageOrColorMapArea = field(default_factory=ImageOrColorMapArea)
    tail: Optional[NewFormatTail] = None

    @classmethod
    def create(
        cls,
        width: int,
        height: int,
        pixel_depth: int = PixelDepth.BPP24,
        image_type: int = ImageType.UNCOMPRESSED_TRUE_COLOR,
        alpha_bits: int = 0,
        new_format: bool = True,
        now=None
    ) -> 'TgaImage':
        """
        Build an image with a zeroed pixel buffer.

        A zero dimension or pixel depth yields an image with no image data.

        Args:
            width: Width in pixels
            height: Height in pixels
            pixel_depth: Bits per pixel, attribute bits included
            image_type: Header image type
            alpha_bits: Attribute bits per pixel (image descriptor bits 3-0)
            new_format: Add the TGA 2.0 footer and extension area
            now: Optional datetime used for the extension date/time stamp

        Returns:
            New TgaImage
        """
        if width > 0xFFFF or height > 0xFFFF:
            raise MalformedLengthError(f"TGA dimensions are limited to 65535, got {width}x{height}")

        image = cls()
        header = image.header
        if width <= 0 or height <= 0 or pixel_depth <= 0:
            width = height = 0
            pixel_depth = PixelDepth.OTHER
            image_type = ImageType.NO_IMAGE_DATA
            alpha_bits = 0
        else:
            image.body.image_data = bytes(width * height * bytes_per_pixel(pixel_depth))
            if image_type in (ImageType.UNCOMPRESSED_COLOR_MAPPED, ImageType.RLE_COLOR_MAPPED):
                header.color_map_type = ColorMapType.COLOR_MAP
                header.color_map_spec.first_entry_index = 0
                header.color_map_spec.entry_size = ColorMapEntrySize.R8G8B8

        header.image_type = coerce_enum(ImageType, image_type)
        header.image_spec.width = width
        header.image_spec.height = height
        header.image_spec.pixel_depth = pixel_depth
        header.image_spec.descriptor.alpha_bits = alpha_bits

        if new_format:
            image.upgrade_to_new_format(now=now)
        return image

    @property
    def width(self) -> int:
        return self.header.image_spec.width

    @property
    def height(self) -> int:
        return self.header.image_spec.height

    @property
    def pixel_depth(self) -> int:
        return self.header.image_spec.pixel_depth

    @property
    def bytes_per_pixel(self) -> int:
        return bytes_per_pixel(self.header.image_spec.pixel_depth)

    @property
    def image_type(self) -> int:
        return self.header.image_type

    @property
    def is_new_format(self) -> bool:
        return self.tail is not None

    @property
    def footer(self) -> Optional[FooterArea]:
        return None if self.tail is None else self.tail.footer

    @property
    def developer_area(self) -> Optional[DeveloperArea]:
        return None if self.tail is None else self.tail.developer_area

    @property
    def extension_area(self) -> Optional[ExtensionArea]:
        return None if self.tail is None else self.tail.extension_area

    def set_image_id(self, text: str, use_terminator: bool = False) -> None:
        """Set the image identifier; its length is fixed up on save."""
        self.body.image_id = TgaString(value=text, length=len(text), use_terminator=use_terminator)

    def upgrade_to_new_format(self, now=None) -> NewFormatTail:
        """
        Add the TGA 2.0 footer and extension area if they are absent.

        Existing sections are kept as they are.

        Args:
            now: Optional datetime for the date/time stamp of a new extension area

        Returns:
            The image's tail
        """
        if self.tail is None:
            self.tail = NewFormatTail()
        if self.tail.extension_area is None:
            extension = ExtensionArea()
            if now is not None:
                extension.date_time = TimeStamp.from_datetime(now)
            if self.header.image_spec.descriptor.alpha_bits > 0:
                extension.attributes_type = AttributeType.USEFUL_ALPHA
            else:
                extension.attributes_type = AttributeType.NO_ALPHA
            self.tail.extension_area = extension
        return self.tail

    def add_developer_entry(self, tag: int, data: bytes) -> DeveloperTag:
        """Add a developer entry, upgrading to the new format when needed."""
        tail = self.upgrade_to_new_format()
        if tail.developer_area is None:
            tail.developer_area = DeveloperArea()
        return tail.developer_area.add(tag, data)

    def delete_postage_stamp(self) -> None:
        if self.extension_area is not None:
            self.extension_area.postage_stamp = None

    def update_postage_stamp(self) -> Optional[PostageStampImage]:
        """
        Rebuild the postage stamp from the current pixel data.

        The stamp is a nearest-neighbour reduction that keeps the aspect
        ratio, fits in 64x64 and is at least 4 pixels on each side.

        Returns:
            The new postage stamp, or None for images without image data

        Raises:
            MissingRequiredFieldError: If the pixel buffer is missing
        """
        if self.header.image_type == ImageType.NO_IMAGE_DATA:
            self.delete_postage_stamp()
            return None

        data = self.body.image_data
        bpp = self.bytes_per_pixel
        width, height = self.width, self.height
        if data is None or len(data) != width * height * bpp or width == 0 or height == 0:
            raise MissingRequiredFieldError("A postage stamp needs complete image data", field="image_data")

        stamp_width, stamp_height = width, height
        limit = PostageStampImage.MAX_SIZE
        if width > limit or height > limit:
            aspect = width / height
            stamp_width = int(limit * min(aspect, 1.0))
            stamp_height = int(limit / max(aspect, 1.0))
        stamp_width = max(stamp_width, 4)
        stamp_height = max(stamp_height, 4)

        x_scale = width / stamp_width
        y_scale = height / stamp_height
        stamp = bytearray()
        for y in range(stamp_height):
            row = int(y * y_scale) * width * bpp
            for x in range(stamp_width):
                start = row + int(x * x_scale) * bpp
                stamp += data[start:start + bpp]

        postage_stamp = PostageStampImage(width=stamp_width, height=stamp_height, data=bytes(stamp))
        self.upgrade_to_new_format().extension_area.postage_stamp = postage_stamp
        return postage_stamp

    def flip(self, horizontal: bool = False, vertical: bool = False) -> None:
        """Mirror the image by toggling the origin bits of the descriptor."""
        descriptor = self.header.image_spec.descriptor
        origin = int(descriptor.origin)
        if horizontal:
            origin ^= ImageOrigin.BOTTOM_RIGHT
        if vertical:
            origin ^= ImageOrigin.TOP_LEFT
        descriptor.origin = ImageOrigin(origin)

    def set_color_map(
        self,
        colors: Sequence[Color],
        entry_size: int = ColorMapEntrySize.R8G8B8,
        first_entry_index: int = 0
    ) -> None:
        """
        Replace the palette.

        Args:
            colors: (red, green, blue, alpha) tuples
            entry_size: 15, 16, 24 or 32 bits per entry
            first_entry_index: Index of the first entry
        """
        if len(colors) > 0xFFFF:
            raise MalformedLengthError(f"A color map holds at most 65535 entries, got {len(colors)}")
        self.body.color_map_data = pack_color_map(colors, entry_size)
        spec = self.header.color_map_spec
        spec.first_entry_index = first_entry_index
        spec.length = len(colors)
        spec.entry_size = ColorMapEntrySize(entry_size)
        self.header.color_map_type = ColorMapType.COLOR_MAP

    def get_color_map(self) -> List[Color]:
        """Decode the palette to (red, green, blue, alpha) tuples."""
        if not self.body.color_map_data:
            return []
        return unpack_color_map(self.body.color_map_data, self.header.color_map_spec.entry_size)
