# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
DNTarga - A 100% Pure Python TGA Codec

Reads and writes Truevision TGA (Targa) files, including run-length
encoded images, color maps and the TGA 2.0 developer and extension
areas, by directly reading and writing the binary file structure.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from dntarga.core import parse, serialize, load, save
from dntarga.config import ReaderConfig, WriterConfig
from dntarga.rle import encode_rle, decode_rle
from dntarga.image import TgaImage, ImageOrColorMapArea, NewFormatTail
from dntarga.layout import SectionLayout, resolve_layout
from dntarga.header import HeaderArea, ColorMapSpec, ImageSpec, ImageDescriptor
from dntarga.footer import FooterArea
from dntarga.developer import DeveloperArea, DeveloperTag
from dntarga.extension import ExtensionArea, PostageStampImage
from dntarga.fields import (
    TgaString,
    AuthorComments,
    TimeStamp,
    JobTime,
    Fraction,
    SoftwareVersion,
    KeyColor,
)
from dntarga.enums import (
    ImageType,
    ColorMapType,
    ColorMapEntrySize,
    PixelDepth,
    ImageOrigin,
    AttributeType,
)
from dntarga.exceptions import (
    TargaError,
    MalformedLengthError,
    InvalidLengthError,
    DuplicateDeveloperTagError,
    MissingRequiredFieldError,
    TruncatedStreamError,
    InvalidSignatureError,
    UnsupportedPixelFormatError,
)

__all__ = [
    "parse",
    "serialize",
    "load",
    "save",
    "encode_rle",
    "decode_rle",
    "resolve_layout",
    "SectionLayout",
    "ReaderConfig",
    "WriterConfig",
    "TgaImage",
    "ImageOrColorMapArea",
    "NewFormatTail",
    "HeaderArea",
    "ColorMapSpec",
    "ImageSpec",
    "ImageDescriptor",
    "FooterArea",
    "DeveloperArea",
    "DeveloperTag",
    "ExtensionArea",
    "PostageStampImage",
    "TgaString",
    "AuthorComments",
    "TimeStamp",
    "JobTime",
    "Fraction",
    "SoftwareVersion",
    "KeyColor",
    "ImageType",
    "ColorMapType",
    "ColorMapEntrySize",
    "PixelDepth",
    "ImageOrigin",
    "AttributeType",
    "TargaError",
    "MalformedLengthError",
    "InvalidLengthError",
    "DuplicateDeveloperTagError",
    "MissingRequiredFieldError",
    "TruncatedStreamError",
    "InvalidSignatureError",
    "UnsupportedPixelFormatError",
]
