# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TGA 2.0 extension area

The extension area is a fixed 495-byte block (optionally followed by
vendor bytes counted in its size field) with authoring metadata and the
offsets of three further optional sections:
- Scan-line table: one u32 offset per image row
- Postage stamp: a thumbnail in the main image's pixel format
- Color-correction table: 256 x 4 u16 values (A, R, G, B)

Layout of the fixed block:
    0   extension size (u16)
    2   author name (41)
    43  author comments (324)
    367 date/time stamp (12)
    379 job name / ID (41)
    420 job time (6)
    426 software ID (41)
    467 software version (3)
    470 key color (4)
    474 pixel aspect ratio (4)
    478 gamma value (4)
    482 color-correction table offset (u32)
    486 postage stamp offset (u32)
    490 scan-line table offset (u32)
    494 attributes type (u8)

Copyright 2025 DNAi inc.
"""

import struct
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional

from dntarga.enums import AttributeType, coerce_enum
from dntarga.exceptions import MalformedLengthError, TruncatedStreamError
from dntarga.fields import (
    AuthorComments,
    Fraction,
    JobTime,
    KeyColor,
    SoftwareVersion,
    TgaString,
    TimeStamp,
    fixed_string,
)

COLOR_CORRECTION_ENTRIES = 1024


@dataclass
class PostageStampImage:
    """Thumbnail stored as width (u8), height (u8) and raw pixel bytes."""
    MAX_SIZE: ClassVar[int] = 64

    width: int = 0
    height: int = 0
    data: bytes = b''

    def byte_size(self) -> int:
        return 2 + len(self.data)

    def to_bytes(self) -> bytes:
        return struct.pack('<BB', self.width, self.height) + bytes(self.data)

    @classmethod
    def from_file_data(cls, file_data: bytes, offset: int, bytes_per_pixel: int) -> Optional['PostageStampImage']:
        """
        Read a postage stamp at ``offset``.

        Returns:
            PostageStampImage, or None when the stamp declares no pixels
        """
        if offset + 2 > len(file_data):
            raise TruncatedStreamError("Postage stamp lies past the end of the file",
                                       expected=offset + 2, actual=len(file_data))
        width, height = file_data[offset], file_data[offset + 1]
        size = width * height * bytes_per_pixel
        if size <= 0:
            return None
        start = offset + 2
        if start + size > len(file_data):
            raise TruncatedStreamError("Postage stamp is truncated", expected=start + size, actual=len(file_data))
        return cls(width=width, height=height, data=bytes(file_data[start:start + size]))


@dataclass
class ExtensionArea:
    """
    TGA 2.0 extension area and the sections it points to.

    The three offsets and ``extension_size`` are derived when an image is
    saved; the attached tables (``scan_line_table``, ``postage_stamp``,
    ``color_correction_table``) are the authoritative content.
    """
    MIN_SIZE: ClassVar[int] = 495

    extension_size: int = 495
    author_name: TgaString = field(default_factory=fixed_string)
    author_comments: AuthorComments = field(default_factory=AuthorComments)
    date_time: TimeStamp = field(default_factory=TimeStamp)
    job_name: TgaString = field(default_factory=fixed_string)
    job_time: JobTime = field(default_factory=JobTime)
    software_id: TgaString = field(default_factory=fixed_string)
    software_version: SoftwareVersion = field(default_factory=SoftwareVersion)
    key_color: KeyColor = field(default_factory=KeyColor)
    pixel_aspect_ratio: Fraction = field(default_factory=Fraction)
    gamma: Fraction = field(default_factory=Fraction)
    color_correction_offset: int = 0
    postage_stamp_offset: int = 0
    scan_line_offset: int = 0
    attributes_type: int = AttributeType.NO_ALPHA
    other_data: bytes = b''

    scan_line_table: Optional[List[int]] = None
    postage_stamp: Optional[PostageStampImage] = None
    color_correction_table: Optional[List[int]] = None

    def byte_size(self) -> int:
        return self.MIN_SIZE + len(self.other_data)

    def to_bytes(self) -> bytes:
        data = b''.join((
            struct.pack('<H', self.extension_size),
            self.author_name.to_bytes(),
            self.author_comments.to_bytes(),
            self.date_time.to_bytes(),
            self.job_name.to_bytes(),
            self.job_time.to_bytes(),
            self.software_id.to_bytes(),
            self.software_version.to_bytes(),
            self.key_color.to_bytes(),
            self.pixel_aspect_ratio.to_bytes(),
            self.gamma.to_bytes(),
            struct.pack(
                '<IIIB',
                self.color_correction_offset,
                self.postage_stamp_offset,
                self.scan_line_offset,
                self.attributes_type,
            ),
            bytes(self.other_data),
        ))
        if len(data) != self.byte_size():
            raise MalformedLengthError(
                f"Extension area serialized to {len(data)} bytes, expected {self.byte_size()}"
            )
        return data

    @classmethod
    def from_bytes(cls, data: bytes) -> 'ExtensionArea':
        """
        Decode the extension block.

        Args:
            data: At least 495 bytes; bytes past 495 are kept as vendor data
                when the declared size is larger than 495

        Raises:
            MalformedLengthError: If fewer than 495 bytes are supplied
        """
        if len(data) < cls.MIN_SIZE:
            raise MalformedLengthError(f"Extension area must be at least {cls.MIN_SIZE} bytes, got {len(data)}")
        extension_size = struct.unpack('<H', data[0:2])[0]
        cc_offset, ps_offset, sl_offset, attributes = struct.unpack('<IIIB', data[482:495])
        return cls(
            extension_size=extension_size,
            author_name=TgaString.from_bytes(data[2:43], use_terminator=True),
            author_comments=AuthorComments.from_bytes(data[43:367]),
            date_time=TimeStamp.from_bytes(data[367:379]),
            job_name=TgaString.from_bytes(data[379:420], use_terminator=True),
            job_time=JobTime.from_bytes(data[420:426]),
            software_id=TgaString.from_bytes(data[426:467], use_terminator=True),
            software_version=SoftwareVersion.from_bytes(data[467:470]),
            key_color=KeyColor.from_bytes(data[470:474]),
            pixel_aspect_ratio=Fraction.from_bytes(data[474:478]),
            gamma=Fraction.from_bytes(data[478:482]),
            color_correction_offset=cc_offset,
            postage_stamp_offset=ps_offset,
            scan_line_offset=sl_offset,
            attributes_type=coerce_enum(AttributeType, attributes),
            other_data=bytes(data[cls.MIN_SIZE:]) if extension_size > cls.MIN_SIZE else b'',
        )

    def scan_line_bytes(self) -> bytes:
        return struct.pack(f'<{len(self.scan_line_table)}I', *self.scan_line_table)

    def color_correction_bytes(self) -> bytes:
        return struct.pack(f'<{len(self.color_correction_table)}H', *self.color_correction_table)

    @staticmethod
    def read_u32_table(file_data: bytes, offset: int, count: int, name: str) -> List[int]:
        return list(_read_table(file_data, offset, count, 'I', name))

    @staticmethod
    def read_u16_table(file_data: bytes, offset: int, count: int, name: str) -> List[int]:
        return list(_read_table(file_data, offset, count, 'H', name))


def _read_table(file_data: bytes, offset: int, count: int, code: str, name: str):
    size = count * struct.calcsize(code)
    if offset + size > len(file_data):
        raise TruncatedStreamError(f"{name} is truncated", expected=offset + size, actual=len(file_data))
    return struct.unpack(f'<{count}{code}', file_data[offset:offset + size])
