[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ebmlkit"
version = "0.1.0"
description = "Read and write EBML (Extensible Binary Meta Language) elements"
requires-python = ">=3.10"
dependencies = []
keywords = ["ebml", "matroska", "webm", "binary", "container", "parser", "crc32"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: File Formats",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ebmlkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
