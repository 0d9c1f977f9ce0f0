[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tensorconv"
version = "0.1.0"
description = "Small dense matrices, 4-D tensors and 2-D convolution via im2col and a direct loop"
requires-python = ">=3.10"
dependencies = []
keywords = ["tensor", "matrix", "convolution", "im2col", "col2im", "gemm"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tensorconv = "tensorconv.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tensorconv"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
