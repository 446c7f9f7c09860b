# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TGA run-length codec

Packets operate on whole pixels of ``bytes_per_pixel`` bytes:
- Header byte with bit 7 set: run packet, one pixel repeated
  ``(header & 0x7F) + 1`` times
- Header byte with bit 7 clear: raw packet, ``header + 1`` literal pixels

The encoder works one scanline at a time and never lets a packet cross
a row boundary; a packet never covers more than 128 pixels. The decoder
is a flat byte-count loop and ignores row boundaries.

Copyright 2025 DNAi inc.
"""

import io
import logging
from typing import BinaryIO, Optional, Union

from dntarga.exceptions import InvalidLengthError, MalformedLengthError, TruncatedStreamError

logger = logging.getLogger(__name__)

MAX_PACKET_PIXELS = 128
RUN_FLAG = 0x80


def encode_rle(
    pixels: bytes,
    width: int,
    height: int,
    bytes_per_pixel: Optional[int] = None
) -> bytes:
    """
    Run-length encode a pixel buffer.

    Args:
        pixels: Raw pixel buffer, ``width * height * bytes_per_pixel`` bytes
        width: Image width in pixels
        height: Image height in pixels
        bytes_per_pixel: Pixel stride; derived from the buffer length when omitted

    Returns:
        Encoded packet stream

    Raises:
        InvalidLengthError: If the buffer is not an exact multiple of width x height
            (or does not match ``bytes_per_pixel``)
    """
    if width <= 0 or height <= 0:
        raise InvalidLengthError(f"Width and height must be > 0, got {width}x{height}")
    data = bytes(pixels)
    pixel_count = width * height
    if bytes_per_pixel is None:
        if len(data) % pixel_count:
            raise InvalidLengthError(
                f"Pixel buffer of {len(data)} bytes is not a multiple of {width}x{height}"
            )
        bytes_per_pixel = len(data) // pixel_count
    if bytes_per_pixel <= 0 or len(data) != pixel_count * bytes_per_pixel:
        raise InvalidLengthError(
            f"Pixel buffer of {len(data)} bytes does not match {width}x{height}x{bytes_per_pixel}"
        )

    encoded = bytearray()
    stride = width * bytes_per_pixel
    for row_start in range(0, len(data), stride):
        _encode_scanline(data, row_start, width, bytes_per_pixel, encoded)

    logger.debug("RLE encoded %d bytes into %d bytes (%dx%d, %d bytes/pixel)",
                 len(data), len(encoded), width, height, bytes_per_pixel)
    return bytes(encoded)


def _encode_scanline(data: bytes, start: int, width: int, bpp: int, out: bytearray) -> None:
    def pixel(x: int) -> bytes:
        offset = start + x * bpp
        return data[offset:offset + bpp]

    x = 0
    while x < width:
        if x == width - 1:
            # Lone trailing pixel
            out.append(0)
            out += pixel(x)
            break

        limit = min(MAX_PACKET_PIXELS, width - x)
        current = pixel(x)
        if current == pixel(x + 1):
            count = 2
            while count < limit and pixel(x + count) == current:
                count += 1
            out.append(RUN_FLAG | (count - 1))
            out += current
        else:
            count = 1
            while count < limit:
                candidate = x + count
                # Stop before a pixel that starts a run
                if candidate + 1 < width and pixel(candidate) == pixel(candidate + 1):
                    break
                count += 1
            out.append(count - 1)
            out += data[start + x * bpp:start + (x + count) * bpp]
        x += count


def decode_rle(
    source: Union[bytes, bytearray, memoryview, BinaryIO],
    width: int,
    height: int,
    bytes_per_pixel: int
) -> bytes:
    """
    Expand a run-length packet stream.

    Reads packets until exactly ``width * height * bytes_per_pixel`` bytes
    are produced. When ``source`` is a stream, it is left positioned
    right after the last packet consumed.

    Args:
        source: Packet bytes or a readable binary stream
        width: Image width in pixels
        height: Image height in pixels
        bytes_per_pixel: Pixel stride in bytes

    Returns:
        Decoded pixel buffer

    Raises:
        TruncatedStreamError: If the source ends before the buffer is complete
        MalformedLengthError: If the last packet overruns the expected size
    """
    if width < 0 or height < 0 or bytes_per_pixel <= 0:
        raise InvalidLengthError(
            f"Cannot decode {width}x{height} pixels of {bytes_per_pixel} bytes"
        )
    stream = source if hasattr(source, 'read') else io.BytesIO(bytes(source))
    expected = width * height * bytes_per_pixel
    output = bytearray()

    while len(output) < expected:
        header = stream.read(1)
        if not header:
            raise TruncatedStreamError("RLE stream ended before the image was complete",
                                       expected=expected, actual=len(output))
        count = (header[0] & 0x7F) + 1
        if header[0] & RUN_FLAG:
            value = stream.read(bytes_per_pixel)
            if len(value) != bytes_per_pixel:
                raise TruncatedStreamError("RLE run packet is truncated",
                                           expected=bytes_per_pixel, actual=len(value))
            output += value * count
        else:
            size = count * bytes_per_pixel
            value = stream.read(size)
            if len(value) != size:
                raise TruncatedStreamError("RLE raw packet is truncated", expected=size, actual=len(value))
            output += value

    if len(output) != expected:
        raise MalformedLengthError(
            f"RLE packets produced {len(output)} bytes, expected {expected}"
        )
    return bytes(output)
