"""Neighbourhood blur filter for images."""

from __future__ import annotations

from enum import Enum

from .image import Image

__all__ = ["imagefilter_blurring"]

_MASK32 = 0xFFFFFFFF
_RB = 0x00FF00FF
_G = 0x0000FF00

Offset = tuple[int, int]


class _Edge(Enum):
    FIRST = "first"
    MIDDLE = "middle"
    LAST = "last"


def _edge(index: int, size: int) -> _Edge:
    if index == 0:
        return _Edge.FIRST
    if index == size - 1:
        return _Edge.LAST
    return _Edge.MIDDLE


def _allowed(step: int, edge: _Edge) -> bool:
    if step < 0:
        return edge is not _Edge.FIRST
    if step > 0:
        return edge is not _Edge.LAST
    return True


def _four(col: _Edge, row: _Edge) -> tuple[list[Offset], list[Offset]]:
    offsets = [
        (dx, dy)
        for dx, dy in ((-1, 0), (1, 0), (0, -1), (0, 1))
        if _allowed(dx, col) and _allowed(dy, row)
    ]
    return offsets, offsets


# On the last column of inner rows the eight-neighbour kernel sums a
# slightly different set of pixels for red/blue than for green.
_EIGHT_EDGE_RB: list[Offset] = [(-1, -1), (0, -1), (-1, 0), (-1, -1), (0, 1)]
_EIGHT_EDGE_G: list[Offset] = [(-1, 0), (0, -1), (-1, 0), (-1, 1), (0, 1)]


def _eight(col: _Edge, row: _Edge) -> tuple[list[Offset], list[Offset]]:
    if col is _Edge.LAST and row is _Edge.MIDDLE:
        return _EIGHT_EDGE_RB, _EIGHT_EDGE_G
    offsets = [
        (dx, dy)
        for dy in (-1, 0, 1)
        for dx in (-1, 0, 1)
        if (dx, dy) != (0, 0) and _allowed(dx, col) and _allowed(dy, row)
    ]
    return offsets, offsets


def _weights(strength: int, alpha: int, count: int) -> tuple[int, int]:
    scaled = strength * alpha
    return (scaled // count) >> 8, (scaled % (count * alpha)) // count


def _mix(
    pixel: int,
    rb_terms: list[int],
    g_terms: list[int],
    whole: int,
    frac: int,
    center: int,
) -> int:
    sum_rb = sum(p & _RB for p in rb_terms)
    sum_g = sum(p & _G for p in g_terms)
    rb = (
        sum_rb * whole
        + ((((sum_rb * frac) & _MASK32) >> 8) & _RB)
        + (pixel & _RB) * center
    ) & _MASK32
    g = (
        sum_g * whole
        + (((sum_g * frac) & _MASK32) >> 8)
        + (pixel & _G) * center
    ) & _MASK32
    return ((rb & 0xFF00FF00) | (g & 0xFF0000)) >> 8


def _fix_region(image: Image, x: int, y: int, width: int, height: int) -> tuple[int, int, int, int]:
    if width == 0:
        width = image.width
    if height == 0:
        height = image.height
    x = max(x, 0)
    y = max(y, 0)
    if x + width > image.width:
        width = image.width - x
    if y + height > image.height:
        height = image.height - y
    if width <= 0 or height <= 0:
        raise ValueError("blur region lies outside the image")
    if width < 2 or height < 2:
        raise ValueError("blur region must be at least 2x2 pixels")
    return x, y, width, height


def imagefilter_blurring(
    image: Image,
    intensity: int,
    alpha: int = 0x100,
    x: int = 0,
    y: int = 0,
    width: int = 0,
    height: int = 0,
) -> None:
    """Blur a region of ``image`` in place.

    ``intensity`` (0..255) up to 0x80 mixes in the four direct neighbours,
    above it the eight surrounding pixels. ``alpha`` scales the result and
    is taken as 0x100 when outside 0..0x100. A zero width or height means
    the full image size; a negative origin is moved to zero. The region is
    filtered on its own, and the alpha byte of filtered pixels is cleared.
    """
    if not 0 <= intensity <= 0xFF:
        raise ValueError(f"intensity must be in 0..255, got {intensity}")
    x, y, width, height = _fix_region(image, x, y, width, height)
    if alpha < 0 or alpha > 0x100:
        alpha = 0x100
    if alpha == 0:
        raise ValueError("alpha must not be zero")

    if intensity <= 0x80:
        strength = intensity * 2
        neighbours = _four
    else:
        strength = (intensity - 0x80) * 2
        neighbours = _eight

    center = ((0xFF - strength) * alpha) >> 8
    stride = image.width
    buffer = image.buffer
    original = [
        buffer[(y + r) * stride + x:(y + r) * stride + x + width] for r in range(height)
    ]
    weights: dict[int, tuple[int, int]] = {}

    for r, row in enumerate(original):
        row_edge = _edge(r, height)
        base = (y + r) * stride + x
        for c, pixel in enumerate(row):
            rb_offsets, g_offsets = neighbours(_edge(c, width), row_edge)
            count = len(rb_offsets)
            if count not in weights:
                weights[count] = _weights(strength, alpha, count)
            whole, frac = weights[count]
            buffer[base + c] = _mix(
                pixel,
                [original[r + dy][c + dx] for dx, dy in rb_offsets],
                [original[r + dy][c + dx] for dx, dy in g_offsets],
                whole,
                frac,
                center,
            )