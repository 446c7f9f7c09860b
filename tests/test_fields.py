# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

import struct
from datetime import datetime, timedelta

import pytest

from dntarga import (
    AttributeType,
    AuthorComments,
    ColorMapSpec,
    ExtensionArea,
    FooterArea,
    Fraction,
    HeaderArea,
    ImageDescriptor,
    ImageOrigin,
    ImageType,
    InvalidSignatureError,
    JobTime,
    KeyColor,
    MalformedLengthError,
    SoftwareVersion,
    TgaString,
    TimeStamp,
)
from dntarga.fields import fixed_string
from dntarga.footer import FOOTER_SIGNATURE


def test_string_padding_and_terminator():
    assert TgaString('abc', 5).to_bytes() == b'abc\x00\x00'
    assert TgaString('abcd', 4, use_terminator=True).to_bytes() == b'abc\x00'
    assert TgaString('ab', 4, blank_char=' ').to_bytes() == b'ab  '


def test_string_decoding_remembers_blank_char():
    decoded = TgaString.from_bytes(b'ab  ')
    assert decoded.value == 'ab'
    assert decoded.blank_char == ' '
    assert decoded.to_bytes() == b'ab  '


def test_extension_strings_are_41_bytes():
    data = fixed_string('Bob').to_bytes()
    assert len(data) == 41
    assert data.startswith(b'Bob\x00')
    assert data[-1] == 0
    assert str(fixed_string('Bob')) == 'Bob'


def test_author_comments_lines():
    comments = AuthorComments.from_lines(['hello', 'world'])
    data = comments.to_bytes()
    assert len(data) == 324
    assert data[0:5] == b'hello'
    assert data[80] == 0
    assert data[81:86] == b'world'
    assert data[161] == 0
    assert comments.lines == ['hello', 'world']
    assert AuthorComments.from_bytes(data) == comments


def test_time_stamp():
    stamp = TimeStamp.from_datetime(datetime(2024, 3, 5, 6, 7, 8))
    assert stamp.to_bytes() == struct.pack('<6H', 3, 5, 2024, 6, 7, 8)
    assert stamp.to_datetime() == datetime(2024, 3, 5, 6, 7, 8)
    assert TimeStamp().to_datetime() is None
    assert TimeStamp.from_bytes(stamp.to_bytes()) == stamp


def test_job_time():
    job_time = JobTime.from_timedelta(timedelta(hours=2, minutes=3, seconds=4))
    assert job_time == JobTime(2, 3, 4)
    assert job_time.to_bytes() == struct.pack('<3H', 2, 3, 4)
    assert job_time.to_timedelta() == timedelta(hours=2, minutes=3, seconds=4)


def test_fraction_value():
    assert Fraction(1, 1).value == 1.0
    assert Fraction(0, 0).value == 1.0
    assert Fraction(3, 0).value is None
    assert Fraction(1, 2).value == 0.5
    assert Fraction(22, 10).to_bytes() == b'\x16\x00\x0a\x00'


def test_software_version():
    version = SoftwareVersion.from_string('410b')
    assert version == SoftwareVersion(410, 'b')
    assert version.to_bytes() == b'\x9a\x01b'
    assert str(version) == '410b'
    assert str(SoftwareVersion.from_string('100')) == '100'
    with pytest.raises(MalformedLengthError):
        SoftwareVersion.from_string('4.1')


def test_key_color_byte_order():
    key = KeyColor(a=1, r=2, g=3, b=4)
    assert key.to_bytes() == b'\x04\x03\x02\x01'
    assert key.to_int() == 0x01020304
    assert KeyColor.from_int(0x01020304) == key


def test_image_descriptor_bits():
    descriptor = ImageDescriptor(origin=ImageOrigin.TOP_LEFT, alpha_bits=8)
    assert descriptor.to_byte() == 0x28
    # Reserved bits 7-6 are dropped
    decoded = ImageDescriptor.from_byte(0xE8)
    assert decoded == descriptor
    assert decoded.to_byte() == 0x28


def test_header_layout():
    header = HeaderArea(
        id_length=3,
        image_type=ImageType.RLE_TRUE_COLOR,
        color_map_spec=ColorMapSpec(first_entry_index=1, length=2, entry_size=24),
    )
    header.image_spec.width = 640
    header.image_spec.height = 480
    header.image_spec.pixel_depth = 32
    data = header.to_bytes()
    assert len(data) == 18
    assert data[:3] == b'\x03\x00\x0a'
    assert data[3:8] == b'\x01\x00\x02\x00\x18'
    assert data[12:17] == b'\x80\x02\xe0\x01\x20'
    assert HeaderArea.from_bytes(data) == header


def test_header_rejects_wrong_size():
    with pytest.raises(MalformedLengthError):
        HeaderArea.from_bytes(bytes(17))
    with pytest.raises(MalformedLengthError):
        HeaderArea(id_length=256).to_bytes()


def test_header_keeps_unknown_codes():
    data = bytes([0, 0, 5]) + bytes(15)
    assert HeaderArea.from_bytes(data).image_type == 5
    assert HeaderArea.from_bytes(data).to_bytes() == data


def test_footer():
    footer = FooterArea(extension_offset=24, developer_directory_offset=7)
    data = footer.to_bytes()
    assert len(data) == 26
    assert data[:8] == struct.pack('<II', 24, 7)
    assert data[8:] == FOOTER_SIGNATURE
    assert FooterArea.from_bytes(data) == footer
    FooterArea.from_bytes(data).validate()


def test_footer_signature_mismatch():
    data = bytearray(FooterArea().to_bytes())
    data[10] = ord('x')
    with pytest.raises(InvalidSignatureError):
        FooterArea.from_bytes(bytes(data)).validate()


def test_extension_area_layout():
    extension = ExtensionArea(
        author_name=fixed_string('Ann'),
        key_color=KeyColor(a=1, r=2, g=3, b=4),
        attributes_type=AttributeType.USEFUL_ALPHA,
    )
    data = extension.to_bytes()
    assert len(data) == 495
    assert data[0:2] == b'\xef\x01'
    assert data[2:5] == b'Ann'
    assert data[470:474] == b'\x04\x03\x02\x01'
    assert data[494] == 3
    assert ExtensionArea.from_bytes(data) == extension


def test_extension_area_vendor_bytes():
    extension = ExtensionArea(extension_size=498, other_data=b'xyz')
    data = extension.to_bytes()
    assert len(data) == 498
    assert ExtensionArea.from_bytes(data).other_data == b'xyz'


def test_extension_area_too_short():
    with pytest.raises(MalformedLengthError):
        ExtensionArea.from_bytes(bytes(494))
