"""Block transfers that blend a source image onto a destination image."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from .image import Image, egecolora, get_a, get_b, get_g, get_r

__all__ = [
    "alphablend",
    "putimage_transparent",
    "putimage_alphablend",
    "putimage_alphatransparent",
    "putimage_withalpha",
    "putimage_alphafilter",
]

_RGB_MASK = 0x00FFFFFF


def _check_alpha(alpha: int) -> int:
    if not 0 <= alpha <= 0xFF:
        raise ValueError(f"alpha must be in 0..255, got {alpha}")
    return alpha


def alphablend(dest: int, src: int, alpha: int) -> int:
    """Mix the colour channels of ``src`` over ``dest`` with weight ``alpha`` (0..255).

    Alpha 0 leaves ``dest`` unchanged, 255 takes the source colour; the
    alpha byte of ``dest`` is always kept.
    """
    _check_alpha(alpha)
    inverse = 0xFF - alpha

    def mix(d: int, s: int) -> int:
        return (s * alpha + d * inverse + 127) // 0xFF

    r = mix(get_r(dest), get_r(src))
    g = mix(get_g(dest), get_g(src))
    b = mix(get_b(dest), get_b(src))
    return (dest & 0xFF000000) | (r << 16) | (g << 8) | b


def _fix_rect(
    dest: Image, src: Image, dx: int, dy: int, sx: int, sy: int, w: int, h: int
) -> tuple[int, int, int, int, int, int]:
    """Translate by the destination viewport and clip to source and viewport."""
    vp = dest.viewport
    dx += vp.left
    dy += vp.top
    if w == 0:
        w, h = src.width, src.height
    w = min(w, src.width)
    h = min(h, src.height)
    if sx < 0:
        w += sx
        dx += sx
        sx = 0
    if sy < 0:
        h += sy
        dy += sy
        sy = 0
    left = max(vp.left, 0)
    top = max(vp.top, 0)
    right = min(vp.right, dest.width)
    bottom = min(vp.bottom, dest.height)
    if dx < left:
        shift = left - dx
        dx += shift
        sx += shift
        w -= shift
    if dy < top:
        shift = top - dy
        dy += shift
        sy += shift
        h -= shift
    w = min(w, right - dx, src.width - sx)
    h = min(h, bottom - dy, src.height - sy)
    return dx, dy, sx, sy, w, h


def _pixels(
    dest: Image, src: Image, dx: int, dy: int, sx: int, sy: int, w: int, h: int
) -> Iterator[tuple[int, int, int, int]]:
    """Yield (dest index, source pixel, source x, source y) over the clipped block."""
    dx, dy, sx, sy, w, h = _fix_rect(dest, src, dx, dy, sx, sy, w, h)
    if w <= 0 or h <= 0:
        return
    source = list(src.buffer) if src is dest else src.buffer
    for row in range(h):
        d_base = (dy + row) * dest.width + dx
        s_base = (sy + row) * src.width + sx
        for col in range(w):
            yield d_base + col, source[s_base + col], sx + col, sy + row


def _transfer(
    dest: Image,
    src: Image,
    dx: int,
    dy: int,
    sx: int,
    sy: int,
    w: int,
    h: int,
    combine: Callable[[int, int, int, int], int | None],
) -> None:
    buffer = dest.buffer
    for index, s, x, y in _pixels(dest, src, dx, dy, sx, sy, w, h):
        result = combine(buffer[index], s, x, y)
        if result is not None:
            buffer[index] = result


def putimage_transparent(
    dest: Image,
    src: Image,
    dst_x: int,
    dst_y: int,
    transparent: int,
    src_x: int = 0,
    src_y: int = 0,
    src_width: int = 0,
    src_height: int = 0,
) -> None:
    """Copy ``src`` onto ``dest`` skipping pixels whose colour equals ``transparent``.

    Copied pixels keep the destination's alpha byte. A zero width means
    the whole source.
    """
    key = transparent & _RGB_MASK

    def combine(d: int, s: int, _x: int, _y: int) -> int | None:
        if s & _RGB_MASK == key:
            return None
        return egecolora(s, get_a(d))

    _transfer(dest, src, dst_x, dst_y, src_x, src_y, src_width, src_height, combine)


def putimage_alphablend(
    dest: Image,
    src: Image,
    dst_x: int,
    dst_y: int,
    alpha: int,
    src_x: int = 0,
    src_y: int = 0,
    src_width: int = 0,
    src_height: int = 0,
) -> None:
    """Blend ``src`` onto ``dest`` with one constant ``alpha`` (0..255)."""
    _check_alpha(alpha)

    def combine(d: int, s: int, _x: int, _y: int) -> int:
        return alphablend(d, s, alpha)

    _transfer(dest, src, dst_x, dst_y, src_x, src_y, src_width, src_height, combine)


def putimage_alphatransparent(
    dest: Image,
    src: Image,
    dst_x: int,
    dst_y: int,
    transparent: int,
    alpha: int,
    src_x: int = 0,
    src_y: int = 0,
    src_width: int = 0,
    src_height: int = 0,
) -> None:
    """Blend with constant ``alpha``, skipping pixels of colour ``transparent``."""
    _check_alpha(alpha)
    key = transparent & _RGB_MASK

    def combine(d: int, s: int, _x: int, _y: int) -> int | None:
        if s & _RGB_MASK == key:
            return None
        return alphablend(d, s, alpha)

    _transfer(dest, src, dst_x, dst_y, src_x, src_y, src_width, src_height, combine)


def putimage_withalpha(
    dest: Image,
    src: Image,
    dst_x: int,
    dst_y: int,
    src_x: int = 0,
    src_y: int = 0,
    src_width: int = 0,
    src_height: int = 0,
) -> None:
    """Blend each source pixel using its own alpha byte."""

    def combine(d: int, s: int, _x: int, _y: int) -> int:
        return alphablend(d, s, get_a(s))

    _transfer(dest, src, dst_x, dst_y, src_x, src_y, src_width, src_height, combine)


def putimage_alphafilter(
    dest: Image,
    src: Image,
    dst_x: int,
    dst_y: int,
    alpha_image: Image,
    src_x: int = 0,
    src_y: int = 0,
    src_width: int = 0,
    src_height: int = 0,
) -> None:
    """Blend using per-pixel weights from the low byte of ``alpha_image``.

    ``alpha_image`` is addressed with the source coordinates; where its
    pixel is zero, or lies outside it, the destination is left alone.
    """
    weights = alpha_image.buffer
    a_width, a_height = alpha_image.width, alpha_image.height

    def combine(d: int, s: int, x: int, y: int) -> int | None:
        if not (x < a_width and y < a_height):
            return None
        weight = weights[y * a_width + x]
        if not weight:
            return None
        return alphablend(d, s, weight & 0xFF)

    _transfer(dest, src, dst_x, dst_y, src_x, src_y, src_width, src_height, combine)