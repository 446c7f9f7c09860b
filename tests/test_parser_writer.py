# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

import struct
from datetime import timedelta

import pytest

from dntarga import (
    AttributeType,
    AuthorComments,
    DeveloperArea,
    Fraction,
    ImageOrigin,
    ImageType,
    InvalidSignatureError,
    JobTime,
    KeyColor,
    MalformedLengthError,
    ReaderConfig,
    SoftwareVersion,
    TgaImage,
    TruncatedStreamError,
    UnsupportedPixelFormatError,
    WriterConfig,
    load,
    parse,
    save,
    serialize,
)
from dntarga.fields import fixed_string
from dntarga.footer import FOOTER_SIGNATURE
from dntarga.tga_parser import TGAParser
from dntarga.tga_writer import TGAWriter


def filled(image: TgaImage, modulo: int = 7) -> TgaImage:
    size = len(image.body.image_data)
    image.body.image_data = bytes(i % modulo for i in range(size))
    return image


def rich_image() -> TgaImage:
    image = filled(TgaImage.create(5, 3, pixel_depth=32, alpha_bits=8))
    image.set_image_id('rich image')
    image.flip(vertical=True)
    image.add_developer_entry(300, b'first')
    image.add_developer_entry(100, b'second')
    image.add_developer_entry(200, b'third')

    extension = image.extension_area
    extension.author_name = fixed_string('Ann Author')
    extension.author_comments = AuthorComments.from_lines(['line one', 'line two'])
    extension.job_name = fixed_string('job 42')
    extension.job_time = JobTime.from_timedelta(timedelta(hours=1, minutes=2, seconds=3))
    extension.software_id = fixed_string('dntarga')
    extension.software_version = SoftwareVersion.from_string('010a')
    extension.key_color = KeyColor(a=255, r=1, g=2, b=3)
    extension.pixel_aspect_ratio = Fraction(1, 1)
    extension.gamma = Fraction(22, 10)
    extension.other_data = b'VENDOR'
    extension.scan_line_table = [100, 200, 300]
    extension.color_correction_table = list(range(1024))
    image.update_postage_stamp()
    return image


@pytest.mark.parametrize('pixel_depth', [8, 16, 24, 32])
@pytest.mark.parametrize('image_type', [ImageType.UNCOMPRESSED_TRUE_COLOR, ImageType.RLE_TRUE_COLOR])
def test_round_trip_pixel_depths(pixel_depth, image_type, writer_config):
    image = filled(TgaImage.create(7, 4, pixel_depth=pixel_depth, image_type=image_type))
    data = serialize(image, writer_config)
    assert parse(data) == image


@pytest.mark.parametrize('entry_size', [15, 16, 24, 32])
def test_round_trip_color_mapped(entry_size, writer_config):
    image = TgaImage.create(4, 4, pixel_depth=8, image_type=ImageType.RLE_COLOR_MAPPED)
    image.set_color_map([(255, 0, 0, 255), (0, 255, 0, 0), (0, 0, 255, 255)], entry_size)
    filled(image, modulo=3)
    parsed = parse(serialize(image, writer_config))
    assert parsed == image
    assert len(parsed.get_color_map()) == 3


def test_round_trip_every_section(writer_config):
    image = rich_image()
    data = serialize(image, writer_config)
    parsed = parse(data)
    assert parsed == image
    assert parsed.developer_area.tags == [100, 200, 300]
    assert str(parsed.extension_area.author_name) == 'Ann Author'
    assert parsed.extension_area.author_comments.lines == ['line one', 'line two']
    assert parsed.extension_area.attributes_type == AttributeType.USEFUL_ALPHA
    assert parsed.extension_area.other_data == b'VENDOR'
    assert parsed.header.image_spec.descriptor.origin == ImageOrigin.TOP_LEFT
    assert serialize(parsed, writer_config) == data


def test_sections_written_in_file_order(writer_config):
    image = rich_image()
    data = serialize(image, writer_config)
    footer = image.footer
    extension = image.extension_area

    assert data[-18:] == FOOTER_SIGNATURE
    assert struct.unpack('<II', data[-26:-18]) == (footer.extension_offset, footer.developer_directory_offset)
    assert (footer.developer_directory_offset < footer.extension_offset < extension.scan_line_offset
            < extension.postage_stamp_offset < extension.color_correction_offset < len(data) - 26)

    directory = footer.developer_directory_offset
    assert struct.unpack('<H', data[directory:directory + 2])[0] == 3
    for entry in image.developer_area:
        assert data[entry.offset:entry.offset + entry.field_size] == entry.data

    assert struct.unpack('<H', data[footer.extension_offset:footer.extension_offset + 2])[0] == 501
    assert extension.color_correction_offset + 2048 == len(data) - 26


def test_legacy_image_has_no_tail():
    image = filled(TgaImage.create(3, 2, new_format=False))
    data = serialize(image)
    assert len(data) == 18 + 18
    parsed = parse(data)
    assert parsed.tail is None
    assert parsed == image


def test_legacy_rle_bytes():
    image = TgaImage.create(2, 1, image_type=ImageType.RLE_TRUE_COLOR, new_format=False)
    header = b'\x00\x00\x0a' + bytes(5) + b'\x00\x00\x00\x00\x02\x00\x01\x00\x18\x00'
    assert serialize(image) == header + b'\x81\x00\x00\x00'


def test_new_format_footer_offsets(writer_config):
    data = serialize(TgaImage.create(2, 1), writer_config)
    assert len(data) == 18 + 6 + 495 + 26
    assert data[-26:-18] == struct.pack('<II', 24, 0)


def test_invalid_footer_falls_back_to_legacy(writer_config):
    image = filled(TgaImage.create(3, 2))
    image.add_developer_entry(1, b'payload')
    data = serialize(image, writer_config) + b'junk'
    parsed = parse(data)
    assert parsed.tail is None
    assert parsed.header == image.header
    assert parsed.body == image.body


def test_strict_reader_rejects_legacy(writer_config):
    data = serialize(TgaImage.create(2, 2, new_format=False))
    with pytest.raises(InvalidSignatureError):
        parse(data, ReaderConfig(require_new_format=True))

    data = serialize(TgaImage.create(2, 2), writer_config)
    assert parse(data, ReaderConfig(require_new_format=True)).is_new_format


def test_truncated_files():
    with pytest.raises(TruncatedStreamError):
        parse(b'\x00' * 10)

    data = serialize(filled(TgaImage.create(4, 4, new_format=False)))
    with pytest.raises(TruncatedStreamError):
        parse(data[:-1])

    data = serialize(filled(TgaImage.create(4, 4, image_type=ImageType.RLE_TRUE_COLOR, new_format=False)))
    with pytest.raises(TruncatedStreamError):
        parse(data[:-1])


def test_truncated_image_id():
    header = b'\x08\x00\x00' + bytes(15)
    with pytest.raises(TruncatedStreamError):
        parse(header + b'abc')


def test_unknown_image_type():
    header = b'\x00\x00\x05' + bytes(13) + b'\x18\x00'
    with pytest.raises(UnsupportedPixelFormatError):
        parse(header)


def test_zero_pixel_depth_with_image_data():
    header = b'\x00\x00\x02' + bytes(9) + b'\x01\x00\x01\x00\x00\x00'
    with pytest.raises(UnsupportedPixelFormatError):
        parse(header)


def test_empty_developer_area_round_trip(writer_config):
    image = TgaImage.create(2, 2)
    image.tail.developer_area = DeveloperArea()
    parsed = parse(serialize(image, writer_config))
    assert parsed.developer_area is not None
    assert len(parsed.developer_area) == 0
    assert parsed == image


def test_extension_without_stamp(writer_config):
    image = TgaImage.create(2, 2)
    parsed = parse(serialize(image, writer_config))
    assert parsed.extension_area.postage_stamp is None
    assert parsed.extension_area.scan_line_table is None
    assert parsed.extension_area.color_correction_table is None


def test_resave_after_edit_recomputes_offsets(writer_config):
    image = filled(TgaImage.create(3, 3))
    serialize(image, writer_config)
    image.add_developer_entry(7, b'late')
    image.extension_area.color_correction_table = [1] * 1024
    data = serialize(image, writer_config)
    parsed = parse(data)
    assert parsed == image
    assert parsed.developer_area.get(7).data == b'late'


def test_out_of_range_field_value(writer_config):
    image = TgaImage.create(2, 2)
    image.extension_area.job_time = JobTime(hours=70000)
    with pytest.raises(MalformedLengthError):
        serialize(image, writer_config)


def test_writer_timestamps_with_clock(fixed_stamp, writer_config):
    image = TgaImage.create(1, 1)
    TGAWriter(writer_config).serialize(image)
    assert image.extension_area.date_time == fixed_stamp


def test_parser_requires_input():
    with pytest.raises(ValueError):
        TGAParser()


def test_save_and_load(tmp_path, writer_config):
    image = rich_image()
    path = tmp_path / 'image.tga'
    save(image, path, writer_config)
    assert path.read_bytes()[-18:] == FOOTER_SIGNATURE
    assert load(path) == image
    assert TGAParser(file_path=str(path)).parse() == image


def test_default_writer_config_stamps_current_time():
    image = TgaImage.create(1, 1)
    serialize(image, WriterConfig())
    assert image.extension_area.date_time.year >= 2024
