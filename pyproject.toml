[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "visionkit"
version = "0.1.0"
description = "Split-and-merge segmentation, distance maps, histograms and toolkit-independent image-browsing models"
requires-python = ">=3.10"
keywords = [
    "image processing",
    "segmentation",
    "split and merge",
    "canny",
    "histogram",
    "distance transform",
    "region of interest",
]
classifiers = [
    "Development Status :: 3 - Alpha",
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
dependencies = [
    "numpy",
    "pillow",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["visionkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
