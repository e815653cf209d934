"""In-memory 32-bit ARGB images: pixel access, resizing and block copies."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "Viewport",
    "Image",
    "egecolora",
    "get_a",
    "get_r",
    "get_g",
    "get_b",
    "rgba",
]

_MASK32 = 0xFFFFFFFF


def get_a(color: int) -> int:
    """Alpha channel of a 0xAARRGGBB colour."""
    return (color >> 24) & 0xFF


def get_r(color: int) -> int:
    """Red channel of a 0xAARRGGBB colour."""
    return (color >> 16) & 0xFF


def get_g(color: int) -> int:
    """Green channel of a 0xAARRGGBB colour."""
    return (color >> 8) & 0xFF


def get_b(color: int) -> int:
    """Blue channel of a 0xAARRGGBB colour."""
    return color & 0xFF


def rgba(r: int, g: int, b: int, a: int) -> int:
    """Pack four 8-bit channels into a 0xAARRGGBB colour."""
    return ((a & 0xFF) << 24) | ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF)


def egecolora(color: int, alpha: int) -> int:
    """Return ``color`` with its alpha channel replaced by ``alpha``."""
    return (color & 0x00FFFFFF) | ((alpha & 0xFF) << 24)


@dataclass
class Viewport:
    """A drawing region: coordinates are offset by (left, top); with ``clip`` drawing stays inside."""

    left: int = 0
    top: int = 0
    right: int = 0
    bottom: int = 0
    clip: bool = True


def _clip_bounds(image: Image) -> tuple[int, int, int, int]:
    vp = image.viewport
    if vp.clip:
        return (
            max(vp.left, 0),
            max(vp.top, 0),
            min(vp.right, image.width),
            min(vp.bottom, image.height),
        )
    return 0, 0, image.width, image.height


class Image:
    """A width x height grid of 0xAARRGGBB pixels stored row by row in ``buffer``.

    Negative sizes are clamped to zero. A new image is filled with zero
    (transparent black) and its viewport covers the whole image.
    """

    def __init__(self, width: int = 1, height: int = 1) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self.buffer: list[int] = [0] * (self.width * self.height)
        self.bk_color = 0
        self.viewport = Viewport(0, 0, self.width, self.height, True)

    def __repr__(self) -> str:
        return f"Image(width={self.width}, height={self.height})"

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return y * self.width + x

    def getpixel(self, x: int, y: int) -> int:
        """Return the pixel at absolute coordinates (x, y)."""
        return self.buffer[self._index(x, y)]

    def putpixel(self, x: int, y: int, color: int) -> None:
        """Set the pixel at absolute coordinates (x, y)."""
        self.buffer[self._index(x, y)] = color & _MASK32

    def clear(self) -> None:
        """Fill the whole image with the background colour."""
        self.buffer[:] = [self.bk_color & _MASK32] * (self.width * self.height)

    def resize_f(self, width: int, height: int) -> None:
        """Change the size; pixels are kept if the size is unchanged, otherwise zeroed."""
        width = max(0, width)
        height = max(0, height)
        if width != self.width or height != self.height:
            self.width = width
            self.height = height
            self.buffer = [0] * (width * height)
        self.viewport = Viewport(0, 0, self.width, self.height, True)

    def resize(self, width: int, height: int) -> None:
        """Change the size and clear to the background colour."""
        self.resize_f(width, height)
        self.clear()

    def copy(self) -> Image:
        """Return an independent image with the same size and pixels."""
        other = Image(self.width, self.height)
        other.buffer = list(self.buffer)
        other.bk_color = self.bk_color
        return other

    def copyimage(self, src: Image) -> None:
        """Make this image a copy of the whole of ``src``."""
        self.getimage(src, 0, 0, src.width, src.height)

    def getimage(
        self,
        src: Image,
        src_x: int = 0,
        src_y: int = 0,
        src_width: int | None = None,
        src_height: int | None = None,
    ) -> None:
        """Resize to the given region of ``src`` and copy it in.

        Pixels of the region that fall outside ``src`` become zero.
        """
        if src_width is None:
            src_width = src.width
        if src_height is None:
            src_height = src.height
        if src is self:
            src = self.copy()
        self.resize_f(src_width, src_height)
        self.buffer[:] = [0] * (self.width * self.height)
        src.putimage(self, 0, 0, src_width, src_height, src_x, src_y)

    def putimage(
        self,
        dest: Image,
        dst_x: int = 0,
        dst_y: int = 0,
        dst_width: int | None = None,
        dst_height: int | None = None,
        src_x: int = 0,
        src_y: int = 0,
    ) -> None:
        """Copy a block of this image onto ``dest`` at a viewport-relative position.

        The block is clipped to this image and to the destination viewport.
        """
        w = self.width if dst_width is None else dst_width
        h = self.height if dst_height is None else dst_height
        vp = dest.viewport
        dx = dst_x + vp.left
        dy = dst_y + vp.top

        if src_x < 0:
            dx -= src_x
            w += src_x
            src_x = 0
        if src_y < 0:
            dy -= src_y
            h += src_y
            src_y = 0
        w = min(w, self.width - src_x)
        h = min(h, self.height - src_y)

        left, top, right, bottom = _clip_bounds(dest)
        if dx < left:
            shift = left - dx
            dx += shift
            src_x += shift
            w -= shift
        if dy < top:
            shift = top - dy
            dy += shift
            src_y += shift
            h -= shift
        w = min(w, right - dx)
        h = min(h, bottom - dy)
        if w <= 0 or h <= 0:
            return

        source = list(self.buffer) if dest is self else self.buffer
        for row in range(h):
            d = (dy + row) * dest.width + dx
            s = (src_y + row) * self.width + src_x
            dest.buffer[d:d + w] = source[s:s + w]

    def putimage_stretch(
        self,
        dest: Image,
        dst_x: int,
        dst_y: int,
        dst_width: int,
        dst_height: int,
        src_x: int,
        src_y: int,
        src_width: int,
        src_height: int,
    ) -> None:
        """Copy a source block scaled to the destination block, nearest pixel."""
        if min(dst_width, dst_height, src_width, src_height) < 0:
            raise ValueError("stretch sizes must not be negative")
        if 0 in (dst_width, dst_height, src_width, src_height):
            return
        vp = dest.viewport
        ox = dst_x + vp.left
        oy = dst_y + vp.top
        left, top, right, bottom = _clip_bounds(dest)
        source = list(self.buffer) if dest is self else self.buffer

        x_lo, x_hi = max(ox, left), min(ox + dst_width, right)
        y_lo, y_hi = max(oy, top), min(oy + dst_height, bottom)
        for py in range(y_lo, y_hi):
            sy = src_y + (py - oy) * src_height // dst_height
            if not 0 <= sy < self.height:
                continue
            row_base = py * dest.width
            src_base = sy * self.width
            for px in range(x_lo, x_hi):
                sx = src_x + (px - ox) * src_width // dst_width
                if 0 <= sx < self.width:
                    dest.buffer[row_base + px] = source[src_base + sx]