[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "qcsv"
version = "0.1.0"
description = "Command-line toolkit for reshaping, joining, counting and partitioning CSV data"
requires-python = ">=3.10"
dependencies = []
keywords = ["csv", "cli", "join", "frequency", "partition", "jsonl", "sample"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Filters",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
qcsv = "qcsv.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["qcsv"]

[tool.pytest.ini_options]
addopts = "-ra"
