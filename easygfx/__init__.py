"""Raster images, compositing, blur, rotation, PNG/BMP I/O and an MT19937 generator."""

__version__ = "0.1.0"
__all__ = ["blend", "filters", "image", "imageio", "mtrandom", "transform"]