# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TGA (Targa) writer

Serializes a TgaImage. The section resolver runs first; bytes are then
emitted from the resolved layout in file order, so a stale offset left
on a record from an earlier save is never written.

Copyright 2025 DNAi inc.
"""

import logging
import struct
from pathlib import Path
from typing import Optional

from dntarga.config import WriterConfig
from dntarga.exceptions import MalformedLengthError
from dntarga.image import TgaImage
from dntarga.layout import SectionLayout, resolve_layout

logger = logging.getLogger(__name__)


class TGAWriter:
    """
    Writes TgaImage objects as TGA files.
    """

    def __init__(self, config: Optional[WriterConfig] = None):
        self.config = config or WriterConfig()

    def serialize(self, image: TgaImage) -> bytes:
        """
        Serialize an image.

        The derived offsets, sizes and the extension time stamp are stored
        back on the image.

        Args:
            image: Image to serialize

        Returns:
            Complete TGA file bytes

        Raises:
            TargaError: Any resolver failure, or MalformedLengthError if a
                field value does not fit its binary width
        """
        layout = resolve_layout(image, self.config)
        layout.apply(image)
        try:
            data = self._assemble(image, layout)
        except struct.error as e:
            raise MalformedLengthError(f"Field value out of range: {e}")

        if len(data) != layout.total_size:
            raise MalformedLengthError(
                f"Serialized {len(data)} bytes, layout expected {layout.total_size}"
            )
        logger.debug("Serialized TGA image %dx%d into %d bytes", image.width, image.height, len(data))
        return data

    def write_tga(self, image: TgaImage, output_path: str) -> None:
        """
        Write an image to a TGA file.

        Args:
            image: Image to write
            output_path: Output file path
        """
        Path(output_path).write_bytes(self.serialize(image))

    @staticmethod
    def _assemble(image: TgaImage, layout: SectionLayout) -> bytes:
        parts = [image.header.to_bytes()]
        if layout.image_id is not None:
            parts.append(layout.image_id.to_bytes())
        parts.append(layout.color_map_data)
        parts.append(layout.image_data)

        tail = image.tail
        if tail is not None:
            if tail.developer_area is not None:
                parts.extend(bytes(entry.data) for entry, _ in layout.developer_entries)
                parts.append(layout.developer_directory_bytes())

            extension = tail.extension_area
            if extension is not None:
                parts.append(extension.to_bytes())
                if extension.scan_line_table is not None:
                    parts.append(extension.scan_line_bytes())
                if extension.postage_stamp is not None:
                    parts.append(extension.postage_stamp.to_bytes())
                if extension.color_correction_table is not None:
                    parts.append(extension.color_correction_bytes())

            parts.append(tail.footer.to_bytes())
        return b''.join(parts)
