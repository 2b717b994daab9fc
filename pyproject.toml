[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jfegal"
version = "0.1.0"
description = "A small visual-novel engine: YAML chapter scripts, scene playback state and a YAML node model"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["visual novel", "galgame", "yaml", "script", "game engine"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["jfegal"]

[tool.hatch.build.targets.sdist]
include = [
    "jfegal",
    "tests",
    "pyproject.toml",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
