import struct
import zlib

import pytest

from easygfx.image import Image, rgba
from easygfx.imageio import (
    PNG_SIGNATURE,
    decode_png,
    encode_bmp,
    encode_png,
    load_png,
    save_bmp,
    save_png,
    saveimage,
)


def _chunk(tag, body):
    return struct.pack(">I", len(body)) + tag + body + struct.pack(">I", zlib.crc32(tag + body) & 0xFFFFFFFF)


def _png(width, height, depth, color_type, raw, extra=b"", interlace=0):
    header = struct.pack(">IIBBBBB", width, height, depth, color_type, 0, 0, interlace)
    return (
        PNG_SIGNATURE
        + _chunk(b"IHDR", header)
        + extra
        + _chunk(b"IDAT", zlib.compress(raw))
        + _chunk(b"IEND", b"")
    )


def _sample_image():
    img = Image(3, 2)
    pixels = [
        rgba(1, 2, 3, 255),
        rgba(200, 100, 50, 128),
        rgba(9, 8, 7, 0),
        rgba(0, 0, 0, 255),
        rgba(255, 255, 255, 1),
        rgba(17, 34, 51, 77),
    ]
    img.buffer[:] = pixels
    return img


def test_png_alpha_round_trip():
    img = _sample_image()
    out = decode_png(encode_png(img, True))
    assert (out.width, out.height) == (3, 2)
    expected = [p if p >> 24 else 0 for p in img.buffer]
    assert out.buffer == expected


def test_png_without_alpha_drops_alpha_byte():
    img = _sample_image()
    out = decode_png(encode_png(img, False))
    assert out.buffer == [p & 0xFFFFFF for p in img.buffer]


def test_png_starts_with_signature_and_ihdr():
    data = encode_png(_sample_image(), True)
    assert data.startswith(PNG_SIGNATURE)
    assert data[12:16] == b"IHDR"
    width, height = struct.unpack(">II", data[16:24])
    assert (width, height) == (3, 2)


def test_encode_png_rejects_empty_image():
    with pytest.raises(ValueError):
        encode_png(Image(0, 5))


def test_decode_rejects_non_png():
    with pytest.raises(ValueError):
        decode_png(b"BM" + bytes(60))


def test_decode_rejects_bad_crc():
    data = bytearray(encode_png(_sample_image()))
    data[20] ^= 0xFF
    with pytest.raises(ValueError):
        decode_png(bytes(data))


def test_decode_rejects_truncated():
    data = encode_png(_sample_image())
    with pytest.raises(ValueError):
        decode_png(data[:30])


def test_palette_png():
    plte = _chunk(b"PLTE", bytes([10, 20, 30, 40, 50, 60]))
    img = decode_png(_png(2, 1, 8, 3, b"\x00\x00\x01", plte))
    assert img.buffer == [rgba(10, 20, 30, 0), rgba(40, 50, 60, 0)]


def test_palette_png_with_transparency():
    extra = _chunk(b"PLTE", bytes([10, 20, 30, 40, 50, 60])) + _chunk(b"tRNS", bytes([0, 128]))
    img = decode_png(_png(2, 1, 8, 3, b"\x00\x00\x01", extra))
    assert img.buffer == [0, rgba(40, 50, 60, 128)]


def test_palette_index_out_of_range():
    plte = _chunk(b"PLTE", bytes([10, 20, 30]))
    with pytest.raises(ValueError):
        decode_png(_png(1, 1, 8, 3, b"\x00\x05", plte))


def test_one_bit_gray_expands():
    img = decode_png(_png(8, 1, 1, 0, b"\x00\xa0"))
    white = rgba(255, 255, 255, 0)
    assert img.buffer == [white, 0, white, 0, 0, 0, 0, 0]


def test_sixteen_bit_rgb_takes_high_byte():
    raw = b"\x00" + struct.pack(">HHH", 0x1234, 0xABCD, 0x00FF)
    img = decode_png(_png(1, 1, 16, 2, raw))
    assert img.buffer == [rgba(0x12, 0xAB, 0x00, 0)]


def test_filters_give_same_pixels():
    plain = b"\x00" + bytes([10, 20, 30, 40, 50, 60]) + b"\x00" + bytes([15, 25, 35, 45, 55, 65])
    sub_row0 = bytes([10, 20, 30, 30, 30, 30])
    up_row1 = bytes([5, 5, 5, 5, 5, 5])
    filtered = b"\x01" + sub_row0 + b"\x02" + up_row1
    assert decode_png(_png(2, 2, 8, 2, filtered)).buffer == decode_png(_png(2, 2, 8, 2, plain)).buffer


def test_paeth_on_first_row_matches_sub():
    row = bytes([10, 20, 30, 30, 30, 30])
    sub = decode_png(_png(2, 1, 8, 2, b"\x01" + row))
    paeth = decode_png(_png(2, 1, 8, 2, b"\x04" + row))
    assert paeth.buffer == sub.buffer


def test_unknown_filter_rejected():
    with pytest.raises(ValueError):
        decode_png(_png(1, 1, 8, 2, b"\x09\x01\x02\x03"))


def test_interlaced_single_pixel():
    img = decode_png(_png(1, 1, 8, 6, b"\x00\x01\x02\x03\x04", interlace=1))
    assert img.buffer == [rgba(1, 2, 3, 4)]


def test_bmp_header_and_pixels():
    img = Image(1, 2)
    img.buffer[:] = [rgba(1, 2, 3, 255), rgba(4, 5, 6, 255)]
    data = encode_bmp(img)
    assert data[:2] == b"BM"
    assert struct.unpack("<I", data[2:6])[0] == len(data)
    offset = struct.unpack("<I", data[10:14])[0]
    width, height = struct.unpack("<ii", data[18:26])
    assert (width, height) == (1, 2)
    assert struct.unpack("<H", data[28:30])[0] == 24
    # bottom row first, stored as B, G, R, then row padding
    assert data[offset:offset + 3] == bytes([6, 5, 4])
    assert data[offset + 4:offset + 7] == bytes([3, 2, 1])


def test_bmp_rows_are_padded_to_four_bytes():
    for width in range(1, 6):
        img = Image(width, 3)
        data = encode_bmp(img)
        offset = struct.unpack("<I", data[10:14])[0]
        row_bytes = (len(data) - offset) // 3
        assert row_bytes % 4 == 0
        assert row_bytes >= width * 3


def test_save_and_load_png(tmp_path):
    img = _sample_image()
    path = tmp_path / "out.png"
    save_png(img, path, True)
    loaded = load_png(path)
    assert loaded.buffer == [p if p >> 24 else 0 for p in img.buffer]


def test_save_bmp_writes_encoded_bytes(tmp_path):
    img = _sample_image()
    path = tmp_path / "out.bmp"
    save_bmp(img, path)
    assert path.read_bytes() == encode_bmp(img)


def test_saveimage_picks_format_by_suffix(tmp_path):
    img = _sample_image()
    bmp_path = tmp_path / "picture.BMP"
    png_path = tmp_path / "picture.jpg"
    saveimage(img, bmp_path)
    saveimage(img, png_path)
    assert bmp_path.read_bytes() == encode_bmp(img)
    assert png_path.read_bytes().startswith(PNG_SIGNATURE)
    assert load_png(png_path).buffer == [p & 0xFFFFFF for p in img.buffer]


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_png(tmp_path / "missing.png")