import pytest

from easygfx.filters import imagefilter_blurring
from easygfx.image import Image, get_b, get_g, get_r


def make_image(width, height, fill=0):
    image = Image(width, height)
    image.buffer[:] = [fill] * (width * height)
    return image


def patterned(width, height):
    image = Image(width, height)
    image.buffer[:] = [(i * 0x1F3A5B7) & 0xFFFFFF for i in range(width * height)]
    return image


def spot(color, size=5):
    image = make_image(size, size)
    image.putpixel(size // 2, size // 2, color)
    return image


@pytest.mark.parametrize("intensity", [0, 0x40, 0x80, 0xC0, 0xFF])
def test_black_image_stays_black(intensity):
    image = make_image(6, 5)
    imagefilter_blurring(image, intensity)
    assert image.buffer == [0] * 30


def test_alpha_byte_is_cleared():
    image = make_image(4, 4, 0xFF000000)
    imagefilter_blurring(image, 0x60)
    assert image.buffer == [0] * 16


def test_pixels_outside_region_untouched():
    image = patterned(6, 6)
    before = list(image.buffer)
    imagefilter_blurring(image, 0x90, 0x100, 1, 1, 3, 3)
    for py in range(6):
        for px in range(6):
            if not (1 <= px < 4 and 1 <= py < 4):
                assert image.getpixel(px, py) == before[py * 6 + px]
    assert image.buffer != before


def test_four_neighbour_spot():
    image = spot(0x00FFFFFF)
    imagefilter_blurring(image, 0x40)
    assert image.getpixel(1, 1) == 0
    assert image.getpixel(3, 3) == 0
    sides = {image.getpixel(1, 2), image.getpixel(3, 2), image.getpixel(2, 1), image.getpixel(2, 3)}
    assert len(sides) == 1
    assert sides.pop() != 0
    assert 0 < get_r(image.getpixel(2, 2)) < 0xFF


def test_eight_neighbour_spot_reaches_diagonals():
    image = spot(0x00FFFFFF)
    imagefilter_blurring(image, 0xC0)
    diagonals = {image.getpixel(1, 1), image.getpixel(3, 1), image.getpixel(1, 3), image.getpixel(3, 3)}
    assert len(diagonals) == 1
    assert get_g(diagonals.pop()) > 0
    assert image.getpixel(0, 0) == 0


def test_channels_stay_separate():
    image = spot(0x00FF0000)
    imagefilter_blurring(image, 0xB0)
    assert all(get_g(p) == 0 and get_b(p) == 0 for p in image.buffer)
    assert get_r(image.getpixel(2, 1)) > 0


def test_intensity_zero_never_brightens():
    image = patterned(5, 4)
    before = list(image.buffer)
    imagefilter_blurring(image, 0)
    for old, new in zip(before, image.buffer):
        assert get_r(new) <= get_r(old)
        assert get_g(new) <= get_g(old)
        assert get_b(new) <= get_b(old)


@pytest.mark.parametrize("alpha", [-5, 0x101, 1000])
def test_alpha_out_of_range_means_full(alpha):
    reference = patterned(5, 5)
    imagefilter_blurring(reference, 0xA0, 0x100)
    image = patterned(5, 5)
    imagefilter_blurring(image, 0xA0, alpha)
    assert image.buffer == reference.buffer


def test_smaller_alpha_darkens():
    full = make_image(4, 4, 0x00808080)
    half = make_image(4, 4, 0x00808080)
    imagefilter_blurring(full, 0x50, 0x100)
    imagefilter_blurring(half, 0x50, 0x80)
    assert all(get_r(h) < get_r(f) for h, f in zip(half.buffer, full.buffer))


def test_zero_size_means_whole_image():
    explicit = patterned(5, 4)
    imagefilter_blurring(explicit, 0x70, 0x100, 0, 0, 5, 4)
    implicit = patterned(5, 4)
    imagefilter_blurring(implicit, 0x70)
    assert implicit.buffer == explicit.buffer


def test_negative_origin_moves_to_zero_keeping_size():
    shifted = patterned(6, 6)
    imagefilter_blurring(shifted, 0xD0, 0x100, -3, -2, 4, 3)
    plain = patterned(6, 6)
    imagefilter_blurring(plain, 0xD0, 0x100, 0, 0, 4, 3)
    assert shifted.buffer == plain.buffer


def test_region_ignores_neighbours_outside_it():
    image = make_image(6, 4)
    for py in range(4):
        image.putpixel(3, py, 0x00FFFFFF)
    imagefilter_blurring(image, 0xFF, 0x100, 0, 0, 3, 4)
    for py in range(4):
        for px in range(3):
            assert image.getpixel(px, py) == 0
        assert image.getpixel(3, py) == 0x00FFFFFF


def test_region_clipped_to_image():
    clipped = patterned(5, 5)
    imagefilter_blurring(clipped, 0x30, 0x100, 2, 2, 100, 100)
    exact = patterned(5, 5)
    imagefilter_blurring(exact, 0x30, 0x100, 2, 2, 3, 3)
    assert clipped.buffer == exact.buffer


@pytest.mark.parametrize(
    "kwargs",
    [
        {"intensity": 0x40, "x": 10},
        {"intensity": 0x40, "y": 7},
        {"intensity": 0x40, "width": -2},
        {"intensity": 0x40, "x": 4},
        {"intensity": 0x40, "height": 1},
        {"intensity": 0x40, "alpha": 0},
        {"intensity": -1},
        {"intensity": 256},
    ],
)
def test_invalid_arguments_raise(kwargs):
    image = patterned(5, 5)
    before = list(image.buffer)
    with pytest.raises(ValueError):
        imagefilter_blurring(image, **kwargs)
    assert image.buffer == before