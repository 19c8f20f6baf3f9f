[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pacmaze"
version = "0.1.0"
description = "A tile-based Pac-Man maze game with .ber map validation, XPM sprite loading and an in-memory display layer"
requires-python = ">=3.10"
keywords = ["game", "pacman", "maze", "xpm", "puzzle"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Puzzle Games",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
pacmaze = "pacmaze.app:main"

[tool.hatch.build.targets.wheel]
packages = ["pacmaze"]

[tool.pytest.ini_options]
addopts = "-ra"
