# easygfx

A small pure-Python graphics toolkit built around 32-bit `0xAARRGGBB` raster
images held in memory. It uses only the standard library.

## Modules

- `easygfx.image` – the `Image` class: a width × height list of pixels in
  `buffer`, with a `Viewport` that offsets and clips drawing. It offers
  `getpixel`, `putpixel`, `clear`, `resize_f` (keeps pixels only when the size
  is unchanged), `resize` (also clears to the background colour), `copy`,
  `copyimage`, `getimage`, `putimage` (clipped block copy) and
  `putimage_stretch` (nearest-pixel scaling). Colour helpers: `rgba`,
  `egecolora` (replace the alpha byte), `get_a`, `get_r`, `get_g`, `get_b`.
- `easygfx.blend` – compositing one image onto another: `putimage_transparent`
  (skip a colour key), `putimage_alphablend` (constant alpha),
  `putimage_alphatransparent` (both), `putimage_withalpha` (each source
  pixel's own alpha), `putimage_alphafilter` (weights from a mask image), and
  the single-pixel `alphablend`. Alpha values outside 0..255 raise
  `ValueError`.
- `easygfx.filters` – `imagefilter_blurring`, an in-place blur of a region:
  intensities up to 0x80 use the four direct neighbours, higher ones the eight
  surrounding pixels. The region must be at least 2×2.
- `easygfx.transform` – texture-mapped triangles (`Point2D`, `Triangle2D`,
  `putimage_triangle`, with optional colour-key transparency, alpha and
  bilinear smoothing) and rotated drawing: `putimage_rotate`,
  `putimage_rotatezoom`, `putimage_rotatetransparent`.
- `easygfx.imageio` – `encode_bmp` (24-bit, alpha dropped), `encode_png`
  (8-bit RGB, or RGBA with `alpha=True`), `decode_png` (all standard colour
  types and bit depths, interlaced or not), and the file helpers `save_bmp`,
  `save_png`, `load_png` and `saveimage` (BMP when the name ends in `.bmp`,
  in any case, PNG otherwise).
- `easygfx.mtrandom` – the MT19937 generator `MTRandom` (seeded from an
  integer or a key sequence; `rand`, `real`, `res53`, `reset`) and the
  shared-generator functions `mtsrand`, `mtirand`, `mtdrand`, `randomize`,
  `random` and `randomf`.

## Installation

```
pip install .
```

## Example

```python
from easygfx.image import Image, rgba
from easygfx.blend import putimage_alphablend
from easygfx.imageio import saveimage

canvas = Image(64, 64)
sprite = Image(16, 16)
for y in range(16):
    for x in range(16):
        sprite.putpixel(x, y, rgba(255, 0, 0, 255))

putimage_alphablend(canvas, sprite, 24, 24, 128)
saveimage(canvas, "out.png")
```

```python
from easygfx.mtrandom import mtsrand, random, randomf

mtsrand(5489)
print(random(6), randomf())
```

## What it does not do

- It opens no window and draws nothing on screen; images live only in memory
  and leave it through the BMP and PNG writers.
- It reads PNG only; there is no reader for BMP, JPEG, GIF or other formats.
- There are no line, shape, text or font drawing routines, and no sound.

## Running the tests

```
pip install .[test]
pytest
```