# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TGA 2.0 footer

The last 26 bytes of a "new format" file:
- Extension area offset (u32)
- Developer directory offset (u32)
- Signature "TRUEVISION-XFILE" (16 bytes)
- Reserved character '.' (1 byte)
- Binary zero terminator (1 byte)

Copyright 2025 DNAi inc.
"""

import struct
from dataclasses import dataclass
from typing import ClassVar

from dntarga.exceptions import InvalidSignatureError, MalformedLengthError
from dntarga.fields import require_length

XFILE_SIGNATURE = b'TRUEVISION-XFILE'
RESERVED_CHARACTER = b'.'
ZERO_TERMINATOR = b'\x00'
FOOTER_SIGNATURE = XFILE_SIGNATURE + RESERVED_CHARACTER + ZERO_TERMINATOR


@dataclass
class FooterArea:
    """26-byte trailer whose signature marks the TGA 2.0 format."""
    BYTE_SIZE: ClassVar[int] = 26

    extension_offset: int = 0
    developer_directory_offset: int = 0
    signature: bytes = XFILE_SIGNATURE
    reserved_character: bytes = RESERVED_CHARACTER
    terminator: bytes = ZERO_TERMINATOR

    def byte_size(self) -> int:
        return self.BYTE_SIZE

    @property
    def is_signature_valid(self) -> bool:
        return self.signature == XFILE_SIGNATURE

    def validate(self) -> None:
        """
        Check the signature.

        Raises:
            InvalidSignatureError: If the signature is not "TRUEVISION-XFILE"
        """
        if not self.is_signature_valid:
            raise InvalidSignatureError(f"Footer signature mismatch: {bytes(self.signature)!r}")

    def to_bytes(self) -> bytes:
        data = (
            struct.pack('<II', self.extension_offset, self.developer_directory_offset)
            + bytes(self.signature)
            + bytes(self.reserved_character)
            + bytes(self.terminator)
        )
        if len(data) != self.BYTE_SIZE:
            raise MalformedLengthError(f"Footer must serialize to {self.BYTE_SIZE} bytes, got {len(data)}")
        return data

    @classmethod
    def from_bytes(cls, data: bytes) -> 'FooterArea':
        require_length(data, cls.BYTE_SIZE, "Footer")
        extension_offset, developer_directory_offset = struct.unpack('<II', data[0:8])
        return cls(
            extension_offset=extension_offset,
            developer_directory_offset=developer_directory_offset,
            signature=bytes(data[8:24]),
            reserved_character=bytes(data[24:25]),
            terminator=bytes(data[25:26]),
        )
