[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "icsdata"
version = "0.1.0"
description = "Reading and writing the binary image data of Image Cytometry Standard (ICS) files"
requires-python = ">=3.10"
dependencies = []
keywords = ["ics", "ids", "image cytometry standard", "microscopy", "image", "lzw", "gzip"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["icsdata"]

[tool.pytest.ini_options]
addopts = "-ra"
