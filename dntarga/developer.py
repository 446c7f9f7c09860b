# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TGA developer area

Vendor-defined binary blobs identified by a u16 tag, followed in the
file by a directory:
- Number of entries (u16)
- Per entry: tag (u16), offset (u32), size (u32)

Copyright 2025 DNAi inc.
"""

import struct
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional

from dntarga.exceptions import MalformedLengthError, TruncatedStreamError


@dataclass
class DeveloperTag:
    """One developer entry. ``offset`` is derived on every save."""
    DIRECTORY_ENTRY_SIZE: ClassVar[int] = 10

    tag: int = 0
    data: Optional[bytes] = None
    offset: int = 0

    @property
    def field_size(self) -> int:
        return 0 if self.data is None else len(self.data)

    def directory_entry(self) -> bytes:
        return struct.pack('<HII', self.tag, self.offset, self.field_size)


@dataclass
class DeveloperArea:
    """Ordered collection of developer entries."""
    entries: List[DeveloperTag] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def tags(self) -> List[int]:
        return [entry.tag for entry in self.entries]

    def add(self, tag: int, data: bytes) -> DeveloperTag:
        """
        Append an entry.

        Args:
            tag: Developer tag (0-65535)
            data: Entry payload

        Returns:
            The new entry
        """
        if not 0 <= tag <= 0xFFFF:
            raise ValueError(f"Developer tag must fit in 16 bits, got {tag}")
        entry = DeveloperTag(tag=tag, data=bytes(data))
        self.entries.append(entry)
        return entry

    def get(self, tag: int) -> Optional[DeveloperTag]:
        for entry in self.entries:
            if entry.tag == tag:
                return entry
        return None

    def remove(self, tag: int) -> int:
        """Remove every entry with ``tag``; return how many were removed."""
        before = len(self.entries)
        self.entries = [entry for entry in self.entries if entry.tag != tag]
        return before - len(self.entries)

    @staticmethod
    def directory_size(count: int) -> int:
        return 2 + count * DeveloperTag.DIRECTORY_ENTRY_SIZE

    def directory_bytes(self) -> bytes:
        if len(self.entries) > 0xFFFF:
            raise MalformedLengthError(f"Developer directory holds at most 65535 entries, got {len(self.entries)}")
        return struct.pack('<H', len(self.entries)) + b''.join(
            entry.directory_entry() for entry in self.entries
        )

    @classmethod
    def from_file_data(cls, file_data: bytes, directory_offset: int) -> 'DeveloperArea':
        """
        Read the directory at ``directory_offset`` and every entry it points to.

        Args:
            file_data: Complete file bytes
            directory_offset: Absolute offset of the directory

        Returns:
            Parsed DeveloperArea, entries in directory order

        Raises:
            TruncatedStreamError: If the directory or an entry extends past the end of the data
        """
        if directory_offset + 2 > len(file_data):
            raise TruncatedStreamError("Developer directory lies past the end of the file",
                                       expected=directory_offset + 2, actual=len(file_data))
        count = struct.unpack('<H', file_data[directory_offset:directory_offset + 2])[0]
        table_end = directory_offset + cls.directory_size(count)
        if table_end > len(file_data):
            raise TruncatedStreamError("Developer directory is truncated",
                                       expected=table_end, actual=len(file_data))

        area = cls()
        position = directory_offset + 2
        for _ in range(count):
            tag, offset, size = struct.unpack('<HII', file_data[position:position + 10])
            position += 10
            if offset + size > len(file_data):
                raise TruncatedStreamError(f"Developer entry {tag} is truncated",
                                           expected=offset + size, actual=len(file_data))
            area.entries.append(DeveloperTag(tag=tag, data=bytes(file_data[offset:offset + size]), offset=offset))
        return area
