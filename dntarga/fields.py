# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TGA field codec primitives

Small fixed-size records shared by the extension area and the image
identifier: padded ASCII strings, author comments, time stamps, job
time, fractions, software version and key color.

Every record exposes the same contract:
- ``byte_size()`` returns the exact serialized size
- ``to_bytes()`` encodes the record
- ``from_bytes(data)`` decodes it, validating the byte count

Copyright 2025 DNAi inc.
"""

import struct
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import ClassVar, List, Optional

from dntarga.exceptions import MalformedLengthError


def require_length(data: bytes, size: int, name: str) -> None:
    """
    Check that a record is decoded from exactly ``size`` bytes.

    Args:
        data: Raw record bytes
        size: Required byte count
        name: Record name used in the error message

    Raises:
        MalformedLengthError: If the byte count differs
    """
    if data is None or len(data) != size:
        actual = -1 if data is None else len(data)
        raise MalformedLengthError(f"{name} must be exactly {size} bytes, got {actual}")


def _to_ascii(text: str) -> bytes:
    return text.encode('ascii', errors='replace')


def _from_ascii(data: bytes) -> str:
    return bytes(data).decode('ascii', errors='replace')


@dataclass
class TgaString:
    """
    Fixed-length, padded ASCII string.

    The encoded form is always ``length`` bytes. Characters past the end
    of ``value`` are filled with ``blank_char``; with ``use_terminator``
    the final byte is forced to NUL.
    """
    value: str = ''
    length: int = 0
    use_terminator: bool = False
    blank_char: str = '\0'

    def byte_size(self) -> int:
        return max(self.length, 1 if self.use_terminator else 0)

    def to_bytes(self) -> bytes:
        size = self.byte_size()
        chars = [self.value[i] if i < len(self.value) else self.blank_char for i in range(size)]
        if self.use_terminator:
            chars[-1] = '\0'
        return _to_ascii(''.join(chars))

    @classmethod
    def from_bytes(cls, data: bytes, use_terminator: bool = False) -> 'TgaString':
        """
        Decode a padded string.

        The trailing blank character (NUL or space) is detected and
        stripped from the value so that re-encoding reproduces the input.

        Args:
            data: Raw field bytes
            use_terminator: Whether the last byte is a NUL terminator

        Returns:
            Decoded TgaString
        """
        end = len(data) - (1 if use_terminator and len(data) > 0 else 0)
        text = _from_ascii(data[:end])
        blank_char = '\0'
        if text and text[-1] in ('\0', ' '):
            blank_char = text[-1]
            text = text.rstrip(blank_char)
        return cls(value=text, length=len(data), use_terminator=use_terminator, blank_char=blank_char)

    def __str__(self) -> str:
        text = _from_ascii(self.to_bytes())
        end = text.find('\0')
        return text if end == -1 else text[:end]


def fixed_string(value: str = '', length: int = 41) -> TgaString:
    """Build a NUL-terminated extension-area string (author, job, software id)."""
    return TgaString(value=value, length=length, use_terminator=True)


@dataclass
class AuthorComments:
    """
    Four lines of author comments, 80 characters plus a NUL each.

    ``text`` holds the concatenated 320-character body; line breaks
    are implied every 80 characters.
    """
    BYTE_SIZE: ClassVar[int] = 324
    LINE_LENGTH: ClassVar[int] = 80

    text: str = ''
    blank_char: str = '\0'

    def byte_size(self) -> int:
        return self.BYTE_SIZE

    def to_bytes(self) -> bytes:
        chars = []
        for i in range(self.BYTE_SIZE):
            if i % 81 == self.LINE_LENGTH:
                chars.append('\0')
            else:
                index = i - i // 81
                chars.append(self.text[index] if index < len(self.text) else self.blank_char)
        return _to_ascii(''.join(chars))

    @classmethod
    def from_bytes(cls, data: bytes) -> 'AuthorComments':
        require_length(data, cls.BYTE_SIZE, "Author comments")
        text = ''.join(_from_ascii(data[line * 81:line * 81 + cls.LINE_LENGTH]) for line in range(4))
        blank_char = '\0'
        if text[-1] in ('\0', ' '):
            blank_char = text[-1]
            text = text.rstrip(blank_char)
        return cls(text=text, blank_char=blank_char)

    @classmethod
    def from_lines(cls, lines: List[str]) -> 'AuthorComments':
        """Build comments from up to four lines, each padded to 80 characters."""
        if len(lines) > 4:
            raise MalformedLengthError("Author comments hold at most 4 lines")
        padded = [line[:cls.LINE_LENGTH].ljust(cls.LINE_LENGTH, '\0') for line in lines]
        return cls(text=''.join(padded).rstrip('\0'))

    @property
    def lines(self) -> List[str]:
        result = []
        for line in range(4):
            chunk = self.text[line * self.LINE_LENGTH:(line + 1) * self.LINE_LENGTH]
            chunk = chunk.replace('\0', '')
            if chunk:
                result.append(chunk)
        return result


@dataclass
class TimeStamp:
    """Extension-area date/time: month, day, year, hour, minute, second (u16 each)."""
    BYTE_SIZE: ClassVar[int] = 12

    month: int = 0
    day: int = 0
    year: int = 0
    hour: int = 0
    minute: int = 0
    second: int = 0

    def byte_size(self) -> int:
        return self.BYTE_SIZE

    def to_bytes(self) -> bytes:
        return struct.pack('<6H', self.month, self.day, self.year, self.hour, self.minute, self.second)

    @classmethod
    def from_bytes(cls, data: bytes) -> 'TimeStamp':
        require_length(data, cls.BYTE_SIZE, "Time stamp")
        return cls(*struct.unpack('<6H', data))

    @classmethod
    def from_datetime(cls, value: datetime) -> 'TimeStamp':
        return cls(value.month, value.day, value.year, value.hour, value.minute, value.second)

    def to_datetime(self) -> Optional[datetime]:
        """Return the stamp as a naive datetime, or None when the stamp is blank."""
        if self.year == 0 and self.month == 0 and self.day == 0:
            return None
        return datetime(self.year, self.month, self.day, self.hour, self.minute, self.second)

    def __str__(self) -> str:
        return (f"{self.year:04d}-{self.month:02d}-{self.day:02d} "
                f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}")


@dataclass
class JobTime:
    """Elapsed job time: hours, minutes, seconds (u16 each)."""
    BYTE_SIZE: ClassVar[int] = 6

    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    def byte_size(self) -> int:
        return self.BYTE_SIZE

    def to_bytes(self) -> bytes:
        return struct.pack('<3H', self.hours, self.minutes, self.seconds)

    @classmethod
    def from_bytes(cls, data: bytes) -> 'JobTime':
        require_length(data, cls.BYTE_SIZE, "Job time")
        return cls(*struct.unpack('<3H', data))

    @classmethod
    def from_timedelta(cls, value: timedelta) -> 'JobTime':
        total = int(value.total_seconds())
        return cls(total // 3600, (total % 3600) // 60, total % 60)

    def to_timedelta(self) -> timedelta:
        return timedelta(hours=self.hours, minutes=self.minutes, seconds=self.seconds)


@dataclass
class Fraction:
    """
    Ratio stored as two u16 values (pixel aspect ratio, gamma).

    A zero denominator means the value is not specified.
    """
    BYTE_SIZE: ClassVar[int] = 4

    numerator: int = 0
    denominator: int = 0

    def byte_size(self) -> int:
        return self.BYTE_SIZE

    def to_bytes(self) -> bytes:
        return struct.pack('<HH', self.numerator, self.denominator)

    @classmethod
    def from_bytes(cls, data: bytes) -> 'Fraction':
        require_length(data, cls.BYTE_SIZE, "Fraction")
        return cls(*struct.unpack('<HH', data))

    @property
    def value(self) -> Optional[float]:
        if self.numerator == self.denominator:
            return 1.0
        if self.denominator == 0:
            return None
        return self.numerator / self.denominator


@dataclass
class SoftwareVersion:
    """Software version: number x 100 (u16) followed by a single ASCII letter."""
    BYTE_SIZE: ClassVar[int] = 3

    number: int = 0
    letter: str = ' '

    def byte_size(self) -> int:
        return self.BYTE_SIZE

    def to_bytes(self) -> bytes:
        return struct.pack('<H', self.number) + _to_ascii((self.letter or ' ')[0])

    @classmethod
    def from_bytes(cls, data: bytes) -> 'SoftwareVersion':
        require_length(data, cls.BYTE_SIZE, "Software version")
        number = struct.unpack('<H', data[0:2])[0]
        return cls(number=number, letter=_from_ascii(data[2:3]))

    @classmethod
    def from_string(cls, text: str) -> 'SoftwareVersion':
        """
        Parse a version such as ``"410"`` or ``"410b"``.

        Raises:
            MalformedLengthError: If the text is not 3 digits plus an optional letter
        """
        if len(text) not in (3, 4) or not text[:3].isdigit():
            raise MalformedLengthError(f"Software version must be 3 digits and an optional letter, got {text!r}")
        letter = text[3] if len(text) == 4 else ' '
        return cls(number=int(text[:3]), letter=letter)

    def __str__(self) -> str:
        return f"{self.number:03d}{self.letter}".rstrip(' \0')


@dataclass
class KeyColor:
    """Key (transparent background) color; serialized as little-endian ARGB, i.e. B, G, R, A."""
    BYTE_SIZE: ClassVar[int] = 4

    a: int = 0
    r: int = 0
    g: int = 0
    b: int = 0

    def byte_size(self) -> int:
        return self.BYTE_SIZE

    def to_bytes(self) -> bytes:
        return bytes((self.b, self.g, self.r, self.a))

    @classmethod
    def from_bytes(cls, data: bytes) -> 'KeyColor':
        require_length(data, cls.BYTE_SIZE, "Key color")
        return cls(a=data[3], r=data[2], g=data[1], b=data[0])

    @classmethod
    def from_int(cls, argb: int) -> 'KeyColor':
        return cls.from_bytes(struct.pack('<I', argb & 0xFFFFFFFF))

    def to_int(self) -> int:
        return struct.unpack('<I', self.to_bytes())[0]
