# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Core DNTarga API

Bytes and files in, TgaImage out, and back again.

Copyright 2025 DNAi inc.
"""

from pathlib import Path
from typing import Optional, Union

from dntarga.config import ReaderConfig, WriterConfig
from dntarga.image import TgaImage
from dntarga.tga_parser import TGAParser
from dntarga.tga_writer import TGAWriter


def parse(data: bytes, config: Optional[ReaderConfig] = None) -> TgaImage:
    """
    Parse TGA file bytes.

    Args:
        data: Complete file contents
        config: Reader configuration

    Returns:
        Parsed TgaImage
    """
    return TGAParser(file_data=data, config=config).parse()


def serialize(image: TgaImage, config: Optional[WriterConfig] = None) -> bytes:
    """
    Serialize an image to TGA file bytes.

    Offsets, sizes and the extension time stamp are updated on ``image``.
    """
    return TGAWriter(config).serialize(image)


def load(file_path: Union[str, Path], config: Optional[ReaderConfig] = None) -> TgaImage:
    return TGAParser(file_path=str(file_path), config=config).parse()


def save(image: TgaImage, file_path: Union[str, Path], config: Optional[WriterConfig] = None) -> None:
    TGAWriter(config).write_tga(image, str(file_path))
