# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TGA (Targa) parser

This module reads a complete TGA file into a TgaImage.
The mandatory sections (header, image ID, color map, image data) are
always read; the TGA 2.0 tail (developer area, extension area and the
tables it points to) is read only when the last 26 bytes carry a valid
footer signature.

Copyright 2025 DNAi inc.
"""

import io
import logging
import struct
from pathlib import Path
from typing import Optional

from dntarga.config import ReaderConfig
from dntarga.developer import DeveloperArea
from dntarga.enums import ColorMapType, ImageType
from dntarga.exceptions import (
    InvalidSignatureError,
    MalformedLengthError,
    TruncatedStreamError,
    UnsupportedPixelFormatError,
)
from dntarga.extension import COLOR_CORRECTION_ENTRIES, ExtensionArea, PostageStampImage
from dntarga.fields import TgaString
from dntarga.footer import FooterArea
from dntarga.header import HeaderArea
from dntarga.image import NewFormatTail, TgaImage
from dntarga.rle import decode_rle

logger = logging.getLogger(__name__)


class TGAParser:
    """
    Parser for TGA files.

    Reads:
    - File header, image ID, color-map data and pixel data (RLE expanded)
    - TGA 2.0 footer, developer area and extension area
    - Scan-line table, postage stamp and color-correction table
    """

    def __init__(
        self,
        file_path: Optional[str] = None,
        file_data: Optional[bytes] = None,
        config: Optional[ReaderConfig] = None
    ):
        """
        Initialize TGA parser.

        Args:
            file_path: Path to TGA file
            file_data: File data bytes
            config: Reader configuration
        """
        if file_path:
            self.file_path = Path(file_path)
            self.file_data = None
        elif file_data is not None:
            self.file_data = bytes(file_data)
            self.file_path = None
        else:
            raise ValueError("Either file_path or file_data must be provided")
        self.config = config or ReaderConfig()

    def parse(self) -> TgaImage:
        """
        Parse the TGA file.

        Returns:
            Parsed TgaImage

        Raises:
            TruncatedStreamError: If a mandatory section runs past the end of the data
            UnsupportedPixelFormatError: If the image type or pixel depth cannot be decoded
            MalformedLengthError: If a record has an impossible size
            InvalidSignatureError: If the footer is invalid and the reader
                requires the new format
        """
        if self.file_data is None:
            with open(self.file_path, 'rb') as f:
                file_data = f.read()
        else:
            file_data = self.file_data

        try:
            return self._parse(file_data)
        except struct.error as e:
            raise MalformedLengthError(f"Invalid TGA record: {e}")

    def _parse(self, file_data: bytes) -> TgaImage:
        if len(file_data) < HeaderArea.BYTE_SIZE:
            raise TruncatedStreamError("Invalid TGA file: too short for the header",
                                       expected=HeaderArea.BYTE_SIZE, actual=len(file_data))

        header = HeaderArea.from_bytes(file_data[:HeaderArea.BYTE_SIZE])
        image = TgaImage(header=header)
        position = HeaderArea.BYTE_SIZE

        if header.id_length > 0:
            raw_id = self._take(file_data, position, header.id_length, "Image ID")
            image.body.image_id = TgaString.from_bytes(raw_id, use_terminator=raw_id[-1] == 0)
            position += header.id_length

        spec = header.color_map_spec
        if header.color_map_type != ColorMapType.NO_COLOR_MAP and spec.length > 0:
            image.body.color_map_data = self._take(file_data, position, spec.data_length, "Color map")
            position += spec.data_length

        if header.image_type != ImageType.NO_IMAGE_DATA:
            position = self._parse_image_data(file_data, position, image)

        footer_start = len(file_data) - FooterArea.BYTE_SIZE
        if footer_start < position:
            if self.config.require_new_format:
                raise InvalidSignatureError("File has no room for a TGA 2.0 footer")
            return self._legacy(image, "file too short for a footer")

        footer = FooterArea.from_bytes(file_data[footer_start:])
        try:
            footer.validate()
        except InvalidSignatureError as e:
            if self.config.require_new_format:
                raise
            return self._legacy(image, e.message)

        image.tail = NewFormatTail(footer=footer)
        if footer.developer_directory_offset:
            image.tail.developer_area = DeveloperArea.from_file_data(
                file_data, footer.developer_directory_offset
            )
        if footer.extension_offset:
            image.tail.extension_area = self._parse_extension_area(
                file_data, footer.extension_offset, image
            )
        return image

    def _parse_image_data(self, file_data: bytes, position: int, image: TgaImage) -> int:
        header = image.header
        if not isinstance(header.image_type, ImageType):
            raise UnsupportedPixelFormatError(f"Unknown image type {header.image_type}")
        spec = header.image_spec
        if spec.bytes_per_pixel == 0:
            raise UnsupportedPixelFormatError(f"Image type {int(header.image_type)} with pixel depth 0")

        if header.image_type.is_rle:
            stream = io.BytesIO(file_data)
            stream.seek(position)
            image.body.image_data = decode_rle(stream, spec.width, spec.height, spec.bytes_per_pixel)
            return stream.tell()

        image.body.image_data = self._take(file_data, position, spec.data_length, "Image data")
        return position + spec.data_length

    def _parse_extension_area(self, file_data: bytes, offset: int, image: TgaImage) -> ExtensionArea:
        """
        Parse the TGA 2.0 extension area and the tables it points to.

        Args:
            file_data: TGA file data
            offset: Offset to extension area
            image: Image parsed so far (supplies height and pixel stride)

        Returns:
            ExtensionArea
        """
        size_field = self._take(file_data, offset, 2, "Extension area size")
        declared_size = struct.unpack('<H', size_field)[0]
        size = max(ExtensionArea.MIN_SIZE, declared_size)
        extension = ExtensionArea.from_bytes(self._take(file_data, offset, size, "Extension area"))

        spec = image.header.image_spec
        if extension.scan_line_offset:
            extension.scan_line_table = ExtensionArea.read_u32_table(
                file_data, extension.scan_line_offset, spec.height, "Scan-line table"
            )
        if extension.postage_stamp_offset:
            extension.postage_stamp = PostageStampImage.from_file_data(
                file_data, extension.postage_stamp_offset, spec.bytes_per_pixel
            )
        if extension.color_correction_offset:
            extension.color_correction_table = ExtensionArea.read_u16_table(
                file_data, extension.color_correction_offset, COLOR_CORRECTION_ENTRIES,
                "Color-correction table"
            )
        return extension

    @staticmethod
    def _take(file_data: bytes, offset: int, size: int, name: str) -> bytes:
        end = offset + size
        if end > len(file_data):
            raise TruncatedStreamError(f"{name} is truncated", expected=end, actual=len(file_data))
        return file_data[offset:end]

    @staticmethod
    def _legacy(image: TgaImage, reason: str) -> TgaImage:
        logger.debug("Reading TGA as legacy v1.0 format: %s", reason)
        return image
