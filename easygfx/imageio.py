"""Reading and writing images as 24-bit BMP and 8-bit PNG files."""

from __future__ import annotations

import os
import struct
import zlib
from collections.abc import Callable, Sequence
from pathlib import Path

from .image import Image

__all__ = [
    "encode_bmp",
    "encode_png",
    "decode_png",
    "save_bmp",
    "save_png",
    "load_png",
    "saveimage",
]

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

_BMP_HEADERS_SIZE = 14 + 40

_PNG_GRAY = 0
_PNG_RGB = 2
_PNG_PALETTE = 3
_PNG_GRAY_ALPHA = 4
_PNG_RGBA = 6

_CHANNELS = {_PNG_GRAY: 1, _PNG_RGB: 3, _PNG_PALETTE: 1, _PNG_GRAY_ALPHA: 2, _PNG_RGBA: 4}
_DEPTHS = {
    _PNG_GRAY: (1, 2, 4, 8, 16),
    _PNG_RGB: (8, 16),
    _PNG_PALETTE: (1, 2, 4, 8),
    _PNG_GRAY_ALPHA: (8, 16),
    _PNG_RGBA: (8, 16),
}
_ADAM7 = (
    (0, 0, 8, 8),
    (4, 0, 8, 8),
    (0, 4, 4, 8),
    (2, 0, 4, 4),
    (0, 2, 2, 4),
    (1, 0, 2, 2),
    (0, 1, 1, 2),
)

PathLike = str | os.PathLike


def encode_bmp(image: Image) -> bytes:
    """Encode as an uncompressed, bottom-up 24-bit BMP; alpha is dropped."""
    width, height = image.width, image.height
    pitch = (width * 3 + 3) & ~3
    padding = bytes(pitch - width * 3)
    data_size = pitch * height
    out = bytearray()
    out += struct.pack("<2sIHHI", b"BM", _BMP_HEADERS_SIZE + data_size, 0, 0, _BMP_HEADERS_SIZE)
    out += struct.pack("<IiiHHIIiiII", 40, width, height, 1, 24, 0, data_size, 0, 0, 0, 0)
    for y in reversed(range(height)):
        for pixel in image.buffer[y * width:(y + 1) * width]:
            out += bytes((pixel & 0xFF, (pixel >> 8) & 0xFF, (pixel >> 16) & 0xFF))
        out += padding
    return bytes(out)


def _chunk(tag: bytes, body: bytes) -> bytes:
    crc = zlib.crc32(tag + body) & 0xFFFFFFFF
    return struct.pack(">I", len(body)) + tag + body + struct.pack(">I", crc)


def encode_png(image: Image, alpha: bool = False) -> bytes:
    """Encode as an 8-bit RGB PNG, or RGBA when ``alpha`` is true."""
    width, height = image.width, image.height
    if width <= 0 or height <= 0:
        raise ValueError("a PNG image needs a positive width and height")
    color_type = _PNG_RGBA if alpha else _PNG_RGB
    raw = bytearray()
    for y in range(height):
        raw.append(0)
        for pixel in image.buffer[y * width:(y + 1) * width]:
            raw += bytes(((pixel >> 16) & 0xFF, (pixel >> 8) & 0xFF, pixel & 0xFF))
            if alpha:
                raw.append((pixel >> 24) & 0xFF)
    header = struct.pack(">IIBBBBB", width, height, 8, color_type, 0, 0, 0)
    return (
        PNG_SIGNATURE
        + _chunk(b"IHDR", header)
        + _chunk(b"IDAT", zlib.compress(bytes(raw)))
        + _chunk(b"IEND", b"")
    )


def _paeth(a: int, b: int, c: int) -> int:
    p = a + b - c
    pa, pb, pc = abs(p - a), abs(p - b), abs(p - c)
    if pa <= pb and pa <= pc:
        return a
    if pb <= pc:
        return b
    return c


def _unfilter(
    raw: bytes, pos: int, width: int, height: int, bits_per_pixel: int
) -> tuple[list[bytearray], int]:
    stride = (width * bits_per_pixel + 7) // 8
    bpp = max(1, bits_per_pixel // 8)
    prev = bytearray(stride)
    rows: list[bytearray] = []
    for _ in range(height):
        if pos + 1 + stride > len(raw):
            raise ValueError("truncated PNG image data")
        ftype = raw[pos]
        line = bytearray(raw[pos + 1:pos + 1 + stride])
        pos += 1 + stride
        if ftype == 1:
            for i in range(bpp, stride):
                line[i] = (line[i] + line[i - bpp]) & 0xFF
        elif ftype == 2:
            for i in range(stride):
                line[i] = (line[i] + prev[i]) & 0xFF
        elif ftype == 3:
            for i in range(stride):
                left = line[i - bpp] if i >= bpp else 0
                line[i] = (line[i] + ((left + prev[i]) >> 1)) & 0xFF
        elif ftype == 4:
            for i in range(stride):
                left = line[i - bpp] if i >= bpp else 0
                upper_left = prev[i - bpp] if i >= bpp else 0
                line[i] = (line[i] + _paeth(left, prev[i], upper_left)) & 0xFF
        elif ftype != 0:
            raise ValueError(f"unknown PNG filter type {ftype}")
        rows.append(line)
        prev = line
    return rows, pos


def _samples(row: bytes, width: int, depth: int, channels: int) -> list[tuple[int, ...]]:
    count = width * channels
    if depth == 8:
        values: Sequence[int] = row[:count]
    elif depth == 16:
        values = struct.unpack(f">{count}H", bytes(row[:2 * count]))
    else:
        per_byte = 8 // depth
        mask = (1 << depth) - 1
        values = [
            (row[i // per_byte] >> (8 - depth * (i % per_byte + 1))) & mask for i in range(count)
        ]
    return [tuple(values[i:i + channels]) for i in range(0, count, channels)]


def _argb(r: int, g: int, b: int, a: int) -> int:
    if a == 0:
        return 0
    return (a << 24) | (r << 16) | (g << 8) | b


def _converter(
    color_type: int,
    depth: int,
    palette: list[tuple[int, int, int]] | None,
    trns: bytes | None,
) -> Callable[[tuple[int, ...]], int]:
    if depth == 16:
        def scale(v: int) -> int:
            return v >> 8
    else:
        factor = 255 // ((1 << depth) - 1)

        def scale(v: int) -> int:
            return v * factor

    if color_type == _PNG_PALETTE:
        if palette is None:
            raise ValueError("palette PNG without a PLTE chunk")
        alphas = list(trns) if trns is not None else None

        def convert_palette(s: tuple[int, ...]) -> int:
            index = s[0]
            if index >= len(palette):
                raise ValueError(f"palette index {index} out of range")
            r, g, b = palette[index]
            if alphas is None:
                return (r << 16) | (g << 8) | b
            a = alphas[index] if index < len(alphas) else 255
            return _argb(r, g, b, a)

        return convert_palette

    if color_type == _PNG_GRAY:
        key = struct.unpack(">H", trns[:2])[0] if trns is not None and len(trns) >= 2 else None

        def convert_gray(s: tuple[int, ...]) -> int:
            v = scale(s[0])
            if key is None:
                return (v << 16) | (v << 8) | v
            return _argb(v, v, v, 0 if s[0] == key else 255)

        return convert_gray

    if color_type == _PNG_RGB:
        rgb_key = struct.unpack(">HHH", trns[:6]) if trns is not None and len(trns) >= 6 else None

        def convert_rgb(s: tuple[int, ...]) -> int:
            r, g, b = (scale(v) for v in s)
            if rgb_key is None:
                return (r << 16) | (g << 8) | b
            return _argb(r, g, b, 0 if s == rgb_key else 255)

        return convert_rgb

    if color_type == _PNG_GRAY_ALPHA:
        def convert_gray_alpha(s: tuple[int, ...]) -> int:
            v = scale(s[0])
            return _argb(v, v, v, scale(s[1]))

        return convert_gray_alpha

    def convert_rgba(s: tuple[int, ...]) -> int:
        r, g, b, a = (scale(v) for v in s)
        return _argb(r, g, b, a)

    return convert_rgba


def decode_png(data: bytes) -> Image:
    """Decode PNG data into an image.

    Opaque RGB and grey images give pixels with a zero alpha byte; images
    with an alpha channel or transparency keep their alpha, and fully
    transparent pixels become zero.
    """
    if data[:8] != PNG_SIGNATURE:
        raise ValueError("not a PNG file")
    pos = 8
    header: bytes | None = None
    palette: list[tuple[int, int, int]] | None = None
    trns: bytes | None = None
    idat = bytearray()
    while True:
        if pos + 8 > len(data):
            raise ValueError("truncated PNG data")
        length, tag = struct.unpack(">I4s", data[pos:pos + 8])
        body = bytes(data[pos + 8:pos + 8 + length])
        crc_bytes = data[pos + 8 + length:pos + 12 + length]
        if len(body) < length or len(crc_bytes) < 4:
            raise ValueError("truncated PNG data")
        if struct.unpack(">I", crc_bytes)[0] != zlib.crc32(tag + body) & 0xFFFFFFFF:
            raise ValueError(f"CRC error in PNG chunk {tag!r}")
        pos += 12 + length
        if tag == b"IHDR":
            header = body
        elif tag == b"PLTE":
            usable = len(body) - len(body) % 3
            palette = [tuple(body[i:i + 3]) for i in range(0, usable, 3)]
        elif tag == b"tRNS":
            trns = body
        elif tag == b"IDAT":
            idat += body
        elif tag == b"IEND":
            break

    if header is None or len(header) != 13:
        raise ValueError("PNG data without a valid IHDR chunk")
    width, height, depth, color_type, compression, filtering, interlace = struct.unpack(
        ">IIBBBBB", header
    )
    if width == 0 or height == 0:
        raise ValueError("PNG image with zero size")
    if color_type not in _CHANNELS or depth not in _DEPTHS[color_type]:
        raise ValueError(f"unsupported PNG colour type {color_type} with depth {depth}")
    if compression != 0 or filtering != 0 or interlace not in (0, 1):
        raise ValueError("unsupported PNG compression, filter or interlace method")
    try:
        raw = zlib.decompress(bytes(idat))
    except zlib.error as exc:
        raise ValueError(f"corrupt PNG image data: {exc}") from exc

    channels = _CHANNELS[color_type]
    bits_per_pixel = depth * channels
    convert = _converter(color_type, depth, palette, trns)
    image = Image(width, height)
    buffer = image.buffer

    if interlace == 0:
        rows, _ = _unfilter(raw, 0, width, height, bits_per_pixel)
        for y, row in enumerate(rows):
            buffer[y * width:(y + 1) * width] = [
                convert(s) for s in _samples(row, width, depth, channels)
            ]
        return image

    pos = 0
    for x0, y0, dx, dy in _ADAM7:
        pass_width = max(0, (width - x0 + dx - 1) // dx)
        pass_height = max(0, (height - y0 + dy - 1) // dy)
        if pass_width == 0 or pass_height == 0:
            continue
        rows, pos = _unfilter(raw, pos, pass_width, pass_height, bits_per_pixel)
        for r, row in enumerate(rows):
            base = (y0 + r * dy) * width
            for c, sample in enumerate(_samples(row, pass_width, depth, channels)):
                buffer[base + x0 + c * dx] = convert(sample)
    return image


def save_bmp(image: Image, path: PathLike) -> None:
    """Write the image to ``path`` as a 24-bit BMP."""
    Path(path).write_bytes(encode_bmp(image))


def save_png(image: Image, path: PathLike, alpha: bool = False) -> None:
    """Write the image to ``path`` as a PNG, with an alpha channel if asked."""
    Path(path).write_bytes(encode_png(image, alpha))


def load_png(path: PathLike) -> Image:
    """Read a PNG file into a new image."""
    return decode_png(Path(path).read_bytes())


def saveimage(image: Image, path: PathLike) -> None:
    """Save as BMP when the name ends in ``.bmp`` (any case), otherwise as PNG."""
    if str(path).lower().endswith(".bmp"):
        save_bmp(image, path)
    else:
        save_png(image, path)