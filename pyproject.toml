[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ps2hdl"
version = "0.9.2"
description = "Data structures and checks for PlayStation 2 APA partition tables, HDLoader game headers and IOPRP images"
requires-python = ">=3.10"
dependencies = []
keywords = ["ps2", "apa", "hdloader", "partition", "ioprp", "romdir"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ps2hdl"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
