# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TGA section resolver

Computes the byte offset and length of every section of a TgaImage
before anything is written. Sections are laid out left to right:

    header (18)
    image ID
    color-map data
    image data (RLE-encoded for the RLE image types)
    developer entry data, developer directory      (new format only)
    extension area, scan-line table, postage stamp,
    color-correction table, footer                 (new format only)

resolve_layout() only reads the image. Derived values are collected in a
SectionLayout and copied onto the image by SectionLayout.apply(), so a
failed resolution leaves the image untouched.

Copyright 2025 DNAi inc.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from dntarga.config import WriterConfig
from dntarga.developer import DeveloperArea, DeveloperTag
from dntarga.enums import ColorMapType, ImageType, coerce_enum
from dntarga.exceptions import (
    DuplicateDeveloperTagError,
    MalformedLengthError,
    MissingRequiredFieldError,
    UnsupportedPixelFormatError,
)
from dntarga.extension import COLOR_CORRECTION_ENTRIES, ExtensionArea
from dntarga.fields import TgaString, TimeStamp
from dntarga.footer import FooterArea
from dntarga.header import HeaderArea
from dntarga.image import TgaImage
from dntarga.rle import encode_rle

logger = logging.getLogger(__name__)

MAX_ID_LENGTH = 255
MAX_PIXEL_DEPTH = 32
MAX_OFFSET = 0xFFFFFFFF


@dataclass
class SectionLayout:
    """
    Derived lengths and offsets of one serialization.

    Offsets are absolute file positions; 0 means the section is absent.
    """
    image_id: Optional[TgaString] = None
    id_length: int = 0
    color_map_data: bytes = b''
    image_data: bytes = b''
    developer_entries: List[Tuple[DeveloperTag, int]] = field(default_factory=list)
    developer_directory_offset: int = 0
    extension_offset: int = 0
    extension_size: int = 0
    date_time: Optional[TimeStamp] = None
    scan_line_offset: int = 0
    postage_stamp_offset: int = 0
    color_correction_offset: int = 0
    total_size: int = 0

    def developer_directory_bytes(self) -> bytes:
        """Directory as written: count, then (tag, offset, size) per entry."""
        area = DeveloperArea([
            DeveloperTag(tag=entry.tag, data=entry.data, offset=offset)
            for entry, offset in self.developer_entries
        ])
        return area.directory_bytes()

    def apply(self, image: TgaImage) -> None:
        """Copy the derived values onto the image's records."""
        image.header.id_length = self.id_length
        image.body.image_id = self.image_id

        tail = image.tail
        if tail is None:
            return

        tail.footer.developer_directory_offset = self.developer_directory_offset
        tail.footer.extension_offset = self.extension_offset

        if tail.developer_area is not None:
            for entry, offset in self.developer_entries:
                entry.offset = offset
            tail.developer_area.entries = [entry for entry, _ in self.developer_entries]

        extension = tail.extension_area
        if extension is not None:
            extension.extension_size = self.extension_size
            if self.date_time is not None:
                extension.date_time = self.date_time
            extension.scan_line_offset = self.scan_line_offset
            extension.postage_stamp_offset = self.postage_stamp_offset
            extension.color_correction_offset = self.color_correction_offset


def resolve_layout(image: TgaImage, config: Optional[WriterConfig] = None) -> SectionLayout:
    """
    Validate an image and compute where each of its sections goes.

    Args:
        image: Image to lay out
        config: Writer configuration (time stamp policy and clock)

    Returns:
        SectionLayout for the image

    Raises:
        MissingRequiredFieldError: If color-map or pixel data is required but absent
        MalformedLengthError: If a section's length disagrees with the header
            or a derived offset no longer fits in 32 bits
        DuplicateDeveloperTagError: If developer tags repeat
        UnsupportedPixelFormatError: If the image type or pixel depth is not writable
    """
    config = config or WriterConfig()
    layout = SectionLayout()
    offset = HeaderArea.BYTE_SIZE

    layout.image_id = _clamp_image_id(image.body.image_id)
    if layout.image_id is not None:
        layout.id_length = layout.image_id.byte_size()
        offset += layout.id_length

    layout.color_map_data = _resolve_color_map(image)
    offset += len(layout.color_map_data)

    layout.image_data = _resolve_image_data(image)
    offset += len(layout.image_data)

    tail = image.tail
    if tail is not None:
        offset = _resolve_developer_area(tail.developer_area, layout, offset)
        if tail.extension_area is not None:
            offset = _resolve_extension_area(image, tail.extension_area, layout, offset, config)
        _check_footer(tail.footer)
        offset += FooterArea.BYTE_SIZE

    if offset > MAX_OFFSET:
        raise MalformedLengthError(f"File size {offset} exceeds the 32-bit offset range")
    layout.total_size = offset
    logger.debug("Resolved TGA layout: %d bytes (image data %d, new format %s)",
                 offset, len(layout.image_data), tail is not None)
    return layout


def _clamp_image_id(image_id: Optional[TgaString]) -> Optional[TgaString]:
    if image_id is None:
        return None
    terminator = 1 if image_id.use_terminator else 0
    size = min(max(image_id.length, len(image_id.value) + terminator), MAX_ID_LENGTH)
    if size == 0:
        return None
    return TgaString(
        value=image_id.value[:size - terminator],
        length=size,
        use_terminator=image_id.use_terminator,
        blank_char=image_id.blank_char,
    )


def _resolve_color_map(image: TgaImage) -> bytes:
    header = image.header
    if header.color_map_type == ColorMapType.NO_COLOR_MAP:
        return b''
    spec = header.color_map_spec
    if spec.length == 0:
        raise MissingRequiredFieldError("Color-map type is set but the color-map length is 0",
                                        field="color_map_spec.length")
    if spec.entry_size == 0:
        raise UnsupportedPixelFormatError("Color-map entry size is 0")
    data = image.body.color_map_data
    if data is None:
        raise MissingRequiredFieldError("Color-map type is set but no color-map data is present",
                                        field="color_map_data")
    if len(data) != spec.data_length:
        raise MalformedLengthError(
            f"Color-map data is {len(data)} bytes, expected {spec.length} x {spec.entry_bytes} = {spec.data_length}"
        )
    return bytes(data)


def _resolve_image_data(image: TgaImage) -> bytes:
    header = image.header
    image_type = coerce_enum(ImageType, header.image_type)
    if image_type == ImageType.NO_IMAGE_DATA:
        return b''
    if not isinstance(image_type, ImageType):
        raise UnsupportedPixelFormatError(f"Unknown image type {image_type}")

    spec = header.image_spec
    if spec.pixel_depth <= 0 or spec.pixel_depth > MAX_PIXEL_DEPTH:
        raise UnsupportedPixelFormatError(f"Cannot write pixel depth {int(spec.pixel_depth)}")
    if spec.width <= 0 or spec.height <= 0:
        raise MalformedLengthError(f"Image dimensions must be non-zero, got {spec.width}x{spec.height}")

    data = image.body.image_data
    if data is None:
        raise MissingRequiredFieldError("Image type requires image data but none is present",
                                        field="image_data")
    if len(data) != spec.data_length:
        raise MalformedLengthError(
            f"Image data is {len(data)} bytes, expected "
            f"{spec.width} x {spec.height} x {spec.bytes_per_pixel} = {spec.data_length}"
        )
    if image_type.is_rle:
        return encode_rle(data, spec.width, spec.height, spec.bytes_per_pixel)
    return bytes(data)


def _resolve_developer_area(area: Optional[DeveloperArea], layout: SectionLayout, offset: int) -> int:
    if area is None:
        return offset

    entries = [entry for entry in area.entries if entry.data]
    dropped = len(area.entries) - len(entries)
    if dropped:
        logger.debug("Dropping %d empty developer entries", dropped)

    if len(entries) > 2:
        entries = sorted(entries, key=lambda entry: entry.tag)
        logger.debug("Sorted %d developer entries by tag", len(entries))
        for previous, current in zip(entries, entries[1:]):
            if previous.tag == current.tag:
                raise DuplicateDeveloperTagError(
                    f"Developer tag {current.tag} appears more than once", tag=current.tag
                )

    for entry in entries:
        layout.developer_entries.append((entry, offset))
        offset += entry.field_size
    layout.developer_directory_offset = offset
    return offset + DeveloperArea.directory_size(len(entries))


def _resolve_extension_area(
    image: TgaImage,
    extension: ExtensionArea,
    layout: SectionLayout,
    offset: int,
    config: WriterConfig
) -> int:
    layout.extension_size = extension.byte_size()
    if layout.extension_size > 0xFFFF:
        raise MalformedLengthError(f"Extension area of {layout.extension_size} bytes exceeds the u16 size field")
    if config.stamp_timestamp:
        layout.date_time = TimeStamp.from_datetime(config.now())
    layout.extension_offset = offset
    offset += layout.extension_size

    spec = image.header.image_spec
    if extension.scan_line_table is not None:
        if len(extension.scan_line_table) != spec.height:
            raise MalformedLengthError(
                f"Scan-line table has {len(extension.scan_line_table)} entries, image height is {spec.height}"
            )
        layout.scan_line_offset = offset
        offset += spec.height * 4

    stamp = extension.postage_stamp
    if stamp is not None:
        if stamp.width <= 0 or stamp.height <= 0 or stamp.width > 0xFF or stamp.height > 0xFF:
            raise MalformedLengthError(f"Postage stamp dimensions {stamp.width}x{stamp.height} are invalid")
        if image.header.image_type != ImageType.NO_IMAGE_DATA:
            expected = stamp.width * stamp.height * spec.bytes_per_pixel
            if len(stamp.data) != expected:
                raise MalformedLengthError(
                    f"Postage stamp data is {len(stamp.data)} bytes, expected {expected}"
                )
        layout.postage_stamp_offset = offset
        offset += stamp.byte_size()

    if extension.color_correction_table is not None:
        if len(extension.color_correction_table) != COLOR_CORRECTION_ENTRIES:
            raise MalformedLengthError(
                f"Color-correction table has {len(extension.color_correction_table)} entries, "
                f"expected {COLOR_CORRECTION_ENTRIES}"
            )
        layout.color_correction_offset = offset
        offset += COLOR_CORRECTION_ENTRIES * 2

    return offset


def _check_footer(footer: FooterArea) -> None:
    size = 8 + len(footer.signature) + len(footer.reserved_character) + len(footer.terminator)
    if size != FooterArea.BYTE_SIZE:
        raise MalformedLengthError(f"Footer must be {FooterArea.BYTE_SIZE} bytes, got {size}")
