"""Loading and validating ``.ber`` maze maps.

A map is a rectangle of tiles: ``1`` wall, ``0`` floor, ``C`` collectible,
``E`` exit and ``P`` the player's start. A valid map is closed by walls,
holds exactly one player and one exit and at least one collectible, and
lets the player reach every collectible and the exit.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass

MAP_SUFFIX = ".ber"
WALL = "1"
FLOOR = "0"
COLLECTIBLE = "C"
EXIT = "E"
PLAYER = "P"
VALID_TILES = frozenset({PLAYER, COLLECTIBLE, EXIT, FLOOR, WALL})


class MapError(ValueError):
    """Raised when a map file is missing, malformed or unplayable."""


@dataclass
class GameMap:
    """A validated map: mutable tile rows, size, player start and goal count."""

    grid: list[list[str]]
    width: int
    height: int
    player: tuple[int, int]
    collectibles: int


def check_file_format(filename: str) -> None:
    """Require the file name to end in ``.ber``."""
    if len(filename) < len(MAP_SUFFIX) or not filename.endswith(MAP_SUFFIX):
        raise MapError("Wrong input format!")


def check_is_file(path: str | os.PathLike[str]) -> None:
    """Require the path to exist and not to be a directory."""
    try:
        is_dir = os.path.isdir(path) if os.path.exists(path) else None
    except OSError:
        is_dir = None
    if is_dir is None:
        raise MapError("File does not exist!")
    if is_dir:
        raise MapError("Provided file map is not a file!")


def read_map_lines(path: str | os.PathLike[str]) -> list[str]:
    """Return the lines of a map file, each keeping its trailing newline.

    Raises MapError when the file cannot be read, is empty, or starts
    with an empty line.
    """
    try:
        with open(path, "rb") as handle:
            text = handle.read().decode("latin-1")
    except OSError:
        raise MapError("Unknown file.") from None
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    if not lines or lines[0].startswith("\n"):
        raise MapError("Empty map!")
    return lines


def check_rectangular(lines: Sequence[str], width: int) -> None:
    """Require every line, without its newline, to be ``width`` long."""
    for line in lines:
        line_width = len(line) - 1 if line.endswith("\n") else len(line)
        if line_width != width:
            raise MapError("Map not rectangular!")


def check_closed(grid: Sequence[Sequence[str]]) -> None:
    """Require walls along the top and bottom rows and the sides.

    The top and bottom rows are checked up to, not including, the last
    column; an inner row only fails when neither of its ends is a wall.
    """
    height = len(grid)
    width = len(grid[0]) if grid else 0
    if height < 2 or width < 2:
        return
    top, bottom = grid[0], grid[height - 1]
    if any(top[x] != WALL or bottom[x] != WALL for x in range(width - 1)):
        raise MapError("Map not closed!")
    if any(
        grid[y][0] != WALL and grid[y][width - 1] != WALL
        for y in range(1, height - 1)
    ):
        raise MapError("Map not closed!")


def count_elements(grid: Sequence[Sequence[str]]) -> tuple[tuple[int, int], int]:
    """Validate the tiles and return the player's (x, y) and the collectible count.

    The last row and the last column are left out of the scan, as they are
    border walls. Raises MapError listing every problem found.
    """
    height = len(grid)
    width = len(grid[0]) if grid else 0
    players = exits = collectibles = 0
    player = (0, 0)
    valid = True
    for y in range(height - 1):
        for x in range(width - 1):
            tile = grid[y][x]
            if tile == PLAYER:
                player = (x, y)
                players += 1
            elif tile == COLLECTIBLE:
                collectibles += 1
            elif tile == EXIT:
                exits += 1
            if tile not in VALID_TILES:
                valid = False
    problems = []
    if not valid:
        problems.append("Non valid element in map!")
    if players != 1:
        problems.append("Map has no player!")
    if exits != 1:
        problems.append("Map has no exit!")
    if collectibles == 0:
        problems.append("Map has no collectibles!")
    if problems:
        raise MapError("\n".join(problems))
    return player, collectibles


def flood_fill(grid: Sequence[Sequence[str]], x: int, y: int) -> tuple[int, bool]:
    """Explore from (x, y) through non-wall tiles.

    Returns how many collectibles were reached and whether an exit was.
    Positions outside the grid count as walls. The grid is not changed.
    """
    seen: set[tuple[int, int]] = set()
    stack = [(x, y)]
    collected = 0
    exit_reached = False
    while stack:
        cx, cy = stack.pop()
        if (cx, cy) in seen or not 0 <= cy < len(grid) or not 0 <= cx < len(grid[cy]):
            continue
        tile = grid[cy][cx]
        if tile == WALL:
            continue
        seen.add((cx, cy))
        if tile == COLLECTIBLE:
            collected += 1
        elif tile == EXIT:
            exit_reached = True
        stack.extend(((cx + 1, cy), (cx, cy + 1), (cx, cy - 1), (cx - 1, cy)))
    return collected, exit_reached


def parse_map(filename: str) -> GameMap:
    """Read, validate and return the map stored in ``filename``."""
    check_file_format(filename)
    check_is_file(filename)
    lines = read_map_lines(filename)
    width = len(lines[0]) - 1
    check_rectangular(lines, width)
    rows = [line[:-1] if line.endswith("\n") else line for line in lines]
    check_closed(rows)
    player, collectibles = count_elements(rows)
    reached, exit_reached = flood_fill(rows, *player)
    if reached != collectibles or not exit_reached:
        raise MapError("No feasible path to collectibles and exit!")
    return GameMap(
        grid=[list(row) for row in rows],
        width=width,
        height=len(rows),
        player=player,
        collectibles=collectibles,
    )