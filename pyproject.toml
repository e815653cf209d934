[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "easygfx"
version = "0.1.0"
description = "Software raster images with blending, blurring, rotation, PNG/BMP I/O and a Mersenne Twister generator"
requires-python = ">=3.10"
dependencies = []
keywords = ["graphics", "raster", "image", "alpha-blending", "png", "bmp", "mersenne-twister"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["easygfx"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
