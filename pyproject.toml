[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clice"
version = "0.0.1"
description = "Reflection, structural comparison and hashing, JSON conversion, binary packing and logging helpers for plain data objects"
requires-python = ">=3.10"
dependencies = []
keywords = ["reflection", "serialization", "json", "dataclasses", "binary", "enum", "logging"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["clice"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
