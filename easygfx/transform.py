"""Texture-mapped triangle drawing and rotated or zoomed image transfers."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .image import Image

__all__ = [
    "Point2D",
    "Triangle2D",
    "putimage_triangle",
    "putimage_rotate",
    "putimage_rotatezoom",
    "putimage_rotatetransparent",
]

_MASK32 = 0xFFFFFFFF
_RB = 0x00FF00FF
_G = 0x0000FF00
_EPS = 1e-6


@dataclass(frozen=True)
class Point2D:
    """A point in the plane."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Triangle2D:
    """Three points and an optional colour."""

    points: tuple[Point2D, Point2D, Point2D]
    color: int = 0

    def __post_init__(self) -> None:
        points = tuple(self.points)
        if len(points) != 3:
            raise ValueError(f"a triangle needs exactly 3 points, got {len(points)}")
        object.__setattr__(self, "points", points)


@dataclass(frozen=True)
class _Style:
    transparent: bool
    alpha: int | None
    smooth: bool


def _float2int(f: float) -> int:
    """Round half away from zero."""
    return int(f + 0.5) if f >= 0 else int(f - 0.5)


def _truncate_round(f: float) -> int:
    return int(f + 0.5)


def _pixel(texture: Image, x: int, y: int) -> int:
    x = min(max(x, 0), texture.width - 1)
    y = min(max(y, 0), texture.height - 1)
    return texture.buffer[y * texture.width + x]


def _nearest(texture: Image, x: float, y: float) -> int:
    return _pixel(texture, int(x), int(y))


def _weight(fraction: float) -> int:
    return min(max(int(fraction * 0x100), 0), 0xFF)


def _bilinear(texture: Image, x: float, y: float) -> int:
    ix, iy = int(x), int(y)
    lt = _pixel(texture, ix, iy)
    rt = _pixel(texture, ix + 1, iy)
    lb = _pixel(texture, ix, iy + 1)
    rb = _pixel(texture, ix + 1, iy + 1)

    a = _weight(x - ix)
    b = 0xFF - a
    top_rb = (((lt & _RB) * b + (rt & _RB) * a) & 0xFF00FF00) >> 8
    top_g = (((lt & _G) * b + (rt & _G) * a) & 0xFF0000) >> 8
    bottom_rb = (((lb & _RB) * b + (rb & _RB) * a) & 0xFF00FF00) >> 8
    bottom_g = (((lb & _G) * b + (rb & _G) * a) & 0xFF0000) >> 8

    a = _weight(y - iy)
    b = 0xFF - a
    crb = (top_rb * b + bottom_rb * a) & 0xFF00FF00
    cg = (top_g * b + bottom_g * a) & 0xFF0000
    return ((crb | cg) >> 8) & _MASK32


def _blend(dest: int, src: int, alpha: int) -> int:
    inverse = 0xFF - alpha
    d = (((dest & _RB) * inverse) & 0xFF00FF00) | (((dest & _G) * inverse) & 0xFF0000)
    s = (((src & _RB) * alpha) & 0xFF00FF00) | (((src & _G) * alpha) & 0xFF0000)
    return ((d + s) >> 8) & _MASK32


def _draw_span(
    dest: Image,
    texture: Image,
    left: Point2D,
    right: Point2D,
    tex_left: Point2D,
    tex_right: Point2D,
    x_lo: int,
    x_hi: int,
    style: _Style,
) -> None:
    rnd = _truncate_round if style.transparent and not style.smooth else _float2int
    s = rnd(left.x)
    e = rnd(right.x)
    y = rnd(left.y)
    w = e - s
    if w <= 0:
        return
    dw = right.x - left.x
    rw = tex_right.x - tex_left.x
    tlx = tex_left.x + (s - left.x) * rw / dw
    trx = tex_right.x + (e - right.x) * rw / dw

    bias = 0.0 if style.smooth else 0.5
    dx = (trx - tlx) / w
    dy = (tex_right.y - tex_left.y) / w
    start = max(s, x_lo)
    end = min(e, x_hi)
    curx = tlx + bias + (start - s) * dx
    cury = tex_left.y + bias + (start - s) * dy

    sample = _bilinear if style.smooth else _nearest
    buffer = dest.buffer
    row = y * dest.width
    for i in range(start, end):
        col = sample(texture, curx, cury)
        if not (style.transparent and col == 0):
            if style.alpha is None:
                buffer[row + i] = col
            else:
                buffer[row + i] = _blend(buffer[row + i], col, style.alpha)
        curx += dx
        cury += dy


def _draw_triangle(
    dest: Image,
    texture: Image,
    dest_points: Iterable[Point2D],
    tex_points: Iterable[Point2D],
    x_lo: int,
    y_lo: int,
    x_hi: int,
    y_hi: int,
    style: _Style,
) -> None:
    (p0, t0), (p1, t1), (p2, t2) = sorted(zip(dest_points, tex_points), key=lambda pair: pair[0].y)

    def span(lx: float, rx: float, y: float, tl: Point2D, tr: Point2D) -> None:
        _draw_span(dest, texture, Point2D(lx, y), Point2D(rx, y), tl, tr, x_lo, x_hi, style)

    s = _float2int(p0.y)
    e = _float2int(p2.y)
    m = _float2int(p1.y)

    # Upper half: from the top vertex down to the middle one.
    plx, ply = p1.x - p0.x, p1.y - p0.y
    prx, pry = p2.x - p0.x, p2.y - p0.y
    splx, sply = t1.x - t0.x, t1.y - t0.y
    sprx, spry = t2.x - t0.x, t2.y - t0.y
    h = m - s
    rs = s
    s = max(s, y_lo)
    if m >= y_hi:
        m = y_hi
    if plx > prx:
        plx, ply, prx, pry = prx, pry, plx, ply
        splx, sply, sprx, spry = sprx, spry, splx, sply
    lh = _float2int(ply + p0.y) - _float2int(p0.y)
    rh = _float2int(pry + p0.y) - _float2int(p0.y)
    if h > 0 and lh and rh:
        for i in range(s, m):
            dlt = (i - rs) / lh
            drt = (i - rs) / rh
            span(
                p0.x + plx * dlt,
                p0.x + prx * drt,
                float(i),
                Point2D(t0.x + splx * dlt, t0.y + sply * dlt),
                Point2D(t0.x + sprx * drt, t0.y + spry * drt),
            )

    if ply > pry:
        dd = pry / ply
        plx *= dd
        splx *= dd
        sply *= dd
    elif pry != 0:
        dd = ply / pry
        prx *= dd
        sprx *= dd
        spry *= dd
    if y_lo <= m < y_hi and m < e:
        span(
            p0.x + plx,
            p0.x + prx,
            float(m),
            Point2D(t0.x + splx, t0.y + sply),
            Point2D(t0.x + sprx, t0.y + spry),
        )

    # Lower half: from the bottom vertex up to the middle one.
    plx, ply = p0.x - p2.x, p0.y - p2.y
    prx, pry = p1.x - p2.x, p1.y - p2.y
    splx, sply = t0.x - t2.x, t0.y - t2.y
    sprx, spry = t1.x - t2.x, t1.y - t2.y
    h = e - m
    re = e
    if m < y_lo:
        m = y_lo - 1
    if e >= y_hi:
        e = y_hi - 1
    if plx > prx:
        plx, ply, prx, pry = prx, pry, plx, ply
        splx, sply, sprx, spry = sprx, spry, splx, sply
    lh = _float2int(p2.y) - _float2int(ply + p2.y)
    rh = _float2int(p2.y) - _float2int(pry + p2.y)
    if h > 0 and lh and rh:
        for i in range(e, m, -1):
            dlt = (re - i) / lh
            drt = (re - i) / rh
            span(
                p2.x + plx * dlt,
                p2.x + prx * drt,
                float(i),
                Point2D(t2.x + splx * dlt, t2.y + sply * dlt),
                Point2D(t2.x + sprx * drt, t2.y + spry * drt),
            )


def putimage_triangle(
    dest: Image,
    texture: Image,
    dest_triangle: Triangle2D,
    texture_triangle: Triangle2D,
    transparent: bool = False,
    alpha: int = -1,
    smooth: bool = False,
) -> None:
    """Map a triangle of ``texture`` (coordinates 0..1) onto a triangle of ``dest``.

    With ``transparent`` zero-valued texels are skipped; an ``alpha`` in
    0..255 blends, any other value copies; ``smooth`` samples bilinearly
    and needs a texture of at least 2x2 pixels, otherwise nothing is drawn.
    """
    if texture.width <= 0 or texture.height <= 0:
        raise ValueError("texture must have a positive width and height")
    style = _Style(bool(transparent), alpha if 0 <= alpha < 0x100 else None, bool(smooth))
    margin = 2 if smooth else 1
    sx = texture.width - margin
    sy = texture.height - margin
    tex_points = [
        Point2D(float(_float2int(p.x * sx)), float(_float2int(p.y * sy)))
        for p in texture_triangle.points
    ]
    if smooth and (texture.width <= 1 or texture.height <= 1):
        return
    _draw_triangle(
        dest, texture, dest_triangle.points, tex_points, 0, 0, dest.width, dest.height, style
    )


_UV_TRIANGLES = (
    (Point2D(0, 0), Point2D(0, 1), Point2D(1, 1)),
    (Point2D(1, 1), Point2D(1, 0), Point2D(0, 0)),
)


def _rotated_quad(
    texture: Image, x: int, y: int, center_x: float, center_y: float, radian: float, zoom: float
) -> list[tuple[Triangle2D, Triangle2D]]:
    cr = math.cos(radian)
    sr = -math.sin(radian)

    def place(p: Point2D) -> Point2D:
        px = (p.x - center_x) * texture.width
        py = (p.y - center_y) * texture.height
        dx = cr * px - sr * py
        dy = sr * px + cr * py
        return Point2D(
            float(_float2int(dx * zoom + x + _EPS)),
            float(_float2int(dy * zoom + y + _EPS)),
        )

    return [
        (Triangle2D(tuple(place(p) for p in uv)), Triangle2D(uv)) for uv in _UV_TRIANGLES
    ]


def putimage_rotate(
    dest: Image,
    texture: Image,
    x: int,
    y: int,
    center_x: float,
    center_y: float,
    radian: float,
    transparent: bool = False,
    alpha: int = -1,
    smooth: bool = False,
) -> None:
    """Draw ``texture`` rotated by ``radian`` with its relative centre at (x, y)."""
    putimage_rotatezoom(
        dest, texture, x, y, center_x, center_y, radian, 1.0, transparent, alpha, smooth
    )


def putimage_rotatezoom(
    dest: Image,
    texture: Image,
    x: int,
    y: int,
    center_x: float,
    center_y: float,
    radian: float,
    zoom: float,
    transparent: bool = False,
    alpha: int = -1,
    smooth: bool = False,
) -> None:
    """Draw ``texture`` rotated by ``radian`` and scaled by ``zoom``.

    (center_x, center_y) is the pivot as a fraction of the texture size;
    it lands on (x, y) of ``dest``.
    """
    if texture.width <= 0 or texture.height <= 0:
        raise ValueError("texture must have a positive width and height")
    for dest_triangle, uv_triangle in _rotated_quad(
        texture, x, y, center_x, center_y, radian, zoom
    ):
        putimage_triangle(dest, texture, dest_triangle, uv_triangle, transparent, alpha, smooth)


def _plotter(dest: Image) -> Callable[[float, float, int], None]:
    vp = dest.viewport
    if vp.clip:
        left, top = max(vp.left, 0), max(vp.top, 0)
        right, bottom = min(vp.right, dest.width), min(vp.bottom, dest.height)
    else:
        left, top, right, bottom = 0, 0, dest.width, dest.height
    buffer = dest.buffer
    width = dest.width

    def plot(fx: float, fy: float, color: int) -> None:
        px = int(fx) + vp.left
        py = int(fy) + vp.top
        if left <= px < right and top <= py < bottom:
            buffer[py * width + px] = color & _MASK32

    return plot


def putimage_rotatetransparent(
    dest: Image,
    src: Image,
    center_x: int,
    center_y: int,
    src_center_x: int,
    src_center_y: int,
    transparent: int,
    radian: float,
    zoom: float = 1.0,
) -> None:
    """Zoom ``src``, then rotate it about (src_center_x, src_center_y) onto (center_x, center_y).

    Pixels equal to ``transparent`` are skipped; the others are written
    whole, alpha included, at viewport-relative positions.
    """
    zoomed_width = int(src.width * zoom)
    zoomed_height = int(src.height * zoom)
    if zoomed_width <= 0 or zoomed_height <= 0:
        return
    zoomed_cx = int(src_center_x * zoom)
    zoomed_cy = int(src_center_y * zoom)
    zoomed = Image(zoomed_width, zoomed_height)
    src.putimage_stretch(
        zoomed, 0, 0, zoomed_width, zoomed_height, 0, 0, src.width, src.height
    )

    plot = _plotter(dest)
    cos_r = math.cos(radian)
    sin_r = math.sin(radian)
    for x in range(zoomed_width):
        for y in range(zoomed_height):
            color = zoomed.buffer[y * zoomed_width + x]
            if color == transparent:
                continue
            rx = x - zoomed_cx
            ry = y - zoomed_cy
            tx = rx * cos_r - ry * sin_r + center_x
            ty = rx * sin_r + ry * cos_r + center_y
            plot(tx, ty, color)
            plot(tx + 0.5, ty, color)
            plot(tx, ty + 0.5, color)
            plot(tx + 0.5, ty + 0.5, color)