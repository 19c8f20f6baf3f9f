"""The Pac-Man maze game: drawing the map, reading keys, running the loop."""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TextIO

from pacmaze.game import TILE_SIZE, WIN_MESSAGE, Direction, Game, GameEnded
from pacmaze.gamemap import COLLECTIBLE, EXIT, FLOOR, WALL, MapError, parse_map
from pacmaze.image import Image
from pacmaze.window import (
    DELETE_WINDOW,
    KEY_PRESS_MASK,
    STRUCTURE_NOTIFY_MASK,
    Display,
    DisplayError,
    EventType,
    Window,
)
from pacmaze.xpm import XpmError, load_xpm

WINDOW_TITLE = "Pac-Man"
FRAME_DELAY = 0.004

KEY_ESCAPE = 0xFF1B
KEY_LEFT = 0xFF51
KEY_UP = 0xFF52
KEY_RIGHT = 0xFF53
KEY_DOWN = 0xFF54

KEY_DIRECTIONS = {
    KEY_UP: Direction.UP,
    KEY_DOWN: Direction.DOWN,
    KEY_LEFT: Direction.LEFT,
    KEY_RIGHT: Direction.RIGHT,
}

_SPRITE_FILES = {
    "wall": "wall50.xpm",
    "path": "path50.xpm",
    "collect": "collect50.xpm",
    "exit": "exit50.xpm",
    "player_left": "pacmanleft.xpm",
    "player_right": "pacmanright.xpm",
    "player_up": "pacmanup.xpm",
    "player_down": "pacmandown.xpm",
    "player_closed": "pacmanclosed.xpm",
    "enemy_red": "red_enemy.xpm",
    "enemy_blue": "blue_enemy.xpm",
    "enemy_yellow": "yellow_enemy.xpm",
    "enemy_pink": "pink_enemy.xpm",
    "enemy_red_move": "red_enemy_move.xpm",
    "enemy_blue_move": "blue_enemy_move.xpm",
    "enemy_yellow_move": "yellow_enemy_move.xpm",
    "enemy_pink_move": "pink_enemy_move.xpm",
}

SPRITE_NAMES = tuple(_SPRITE_FILES)

_ENEMY_COLORS = {"R": "red", "B": "blue", "K": "pink", "Y": "yellow"}

_TILE_SPRITES = {WALL: "wall", FLOOR: "path", COLLECTIBLE: "collect"}


def sprite_paths(base: str | Path = ".") -> dict[str, Path]:
    """Return the image file of every sprite, found under ``base/xpm``."""
    folder = Path(base) / "xpm"
    return {name: folder / filename for name, filename in _SPRITE_FILES.items()}


@dataclass
class Enemy:
    """A ghost standing on the map, with its tile and pixel position."""

    x: int
    y: int
    color: str
    pix_mov: int = TILE_SIZE
    d_wall: int = 0
    direction: Direction | None = None
    map_x: int = field(init=False)
    map_y: int = field(init=False)

    def __post_init__(self) -> None:
        if self.color not in _ENEMY_COLORS:
            raise ValueError(f"unknown enemy colour {self.color!r}")
        self.map_x = self.x * TILE_SIZE
        self.map_y = self.y * TILE_SIZE

    @property
    def sprite(self) -> str:
        return f"enemy_{_ENEMY_COLORS[self.color]}"

    @property
    def move_sprite(self) -> str:
        return f"enemy_{_ENEMY_COLORS[self.color]}_move"


def find_enemies(grid: Sequence[Sequence[str]]) -> list[Enemy]:
    """Collect the enemies on the map, row by row; the last row and column are skipped."""
    height = len(grid)
    width = len(grid[0]) if grid else 0
    return [
        Enemy(x, y, grid[y][x])
        for y in range(height - 1)
        for x in range(width - 1)
        if grid[y][x] in _ENEMY_COLORS
    ]


def render_order(
    direction: Direction | None, width: int, height: int
) -> Iterator[tuple[int, int]]:
    """Yield the (x, y) tiles in the order a frame is drawn.

    Moving down or right, tiles are drawn from the bottom right backwards,
    leaving out the bottom row; otherwise from the top left forwards. This
    way the player is met only once per frame even after entering a tile.
    """
    if direction in (Direction.DOWN, Direction.RIGHT):
        for y in range(height - 2, -1, -1):
            for x in range(width - 1, -1, -1):
                yield x, y
    else:
        for y in range(height):
            for x in range(width):
                yield x, y


def tile_sprite(tile: str, all_collected: bool) -> str | None:
    """Name the sprite drawn for a map tile, or None if nothing is drawn."""
    if tile == EXIT:
        return "exit" if all_collected else "path"
    return _TILE_SPRITES.get(tile)


class PacManApp:
    """Ties a game to a display window: draws frames and handles keys."""

    def __init__(self, game: Game, display: Display, images: Mapping[str, Image]) -> None:
        missing = [name for name in SPRITE_NAMES if name not in images]
        if missing:
            raise ValueError(f"missing sprites: {', '.join(missing)}")
        screen_width, screen_height = display.screen_size()
        width = game.width * TILE_SIZE
        height = game.height * TILE_SIZE
        if width > screen_width or height > screen_height:
            raise DisplayError("Map too big for screen!")
        self.game = game
        self.display = display
        self.images = dict(images)
        self.enemies = find_enemies(game.grid)
        self.window: Window = display.new_window(width, height, WINDOW_TITLE)
        self.frame_delay = FRAME_DELAY
        self.on_frame: Callable[[PacManApp], Any] | None = None
        self.output: TextIO = sys.stdout

    def _draw(self, name: str, x: int, y: int) -> None:
        self.display.put_image(self.window, self.images[name], x, y)

    def _render_player(self) -> None:
        pixel_x, pixel_y = self.game.step()
        self._draw(f"player_{self.game.current_sprite().value}", pixel_x, pixel_y)

    def render_frame(self) -> None:
        """Draw the map and the player, advancing the player by one frame."""
        game = self.game
        self.window.texts.clear()
        for x, y in render_order(game.direction, game.width, game.height):
            name = tile_sprite(game.grid[y][x], game.all_collected)
            if name is not None:
                self._draw(name, x * TILE_SIZE, y * TILE_SIZE)
            if (x, y) == game.position:
                self._render_player()
        self.display.string_put(
            self.window,
            int(game.width * TILE_SIZE - TILE_SIZE * 2.55),
            28,
            -1,
            str(game.keypress_count),
        )

    def handle_key(self, keysym: int) -> bool:
        """Act on a key; return True if it started or queued a move.

        Raises GameEnded on Escape, or when the player already stands on
        the open exit.
        """
        game = self.game
        direction = KEY_DIRECTIONS.get(keysym)
        if direction is not None:
            accepted = game.press(direction)
        elif game.direction is not None:
            game.queued = None
            game.keypress_count += 1
            accepted = True
        else:
            accepted = False
        if keysym == KEY_ESCAPE:
            game.quit()
        if game.won():
            raise GameEnded(WIN_MESSAGE, won=True)
        return accepted

    def _flush_messages(self) -> None:
        for message in self.game.messages:
            print(message, file=self.output)
        self.game.messages.clear()

    def _on_key(self, keysym: int, _param: Any) -> None:
        try:
            self.handle_key(keysym)
        finally:
            self._flush_messages()

    def _on_close(self, _param: Any) -> None:
        self.game.quit()

    def _on_loop(self, _param: Any) -> None:
        try:
            self.render_frame()
        finally:
            self._flush_messages()
        if self.on_frame is not None:
            self.on_frame(self)
        if self.frame_delay > 0:
            time.sleep(self.frame_delay)

    def run(self) -> GameEnded | None:
        """Run the event loop until the game ends; the display is closed after.

        Returns how the game ended, or None if the loop stopped otherwise.
        """
        self.window.hook(EventType.KEY_PRESS, KEY_PRESS_MASK, self._on_key)
        self.window.hook(EventType.DESTROY_NOTIFY, STRUCTURE_NOTIFY_MASK, self._on_close)
        self.display.loop_hook(self._on_loop)
        try:
            self.display.loop()
        except GameEnded as ended:
            print(ended.message, file=self.output)
            return ended
        finally:
            self.display.close()
        return None


class _PygameFrontend:
    """Shows a window's framebuffer on screen and feeds keys back as events."""

    def __init__(self, window: Window) -> None:
        import pygame

        self._pygame = pygame
        self._surface = pygame.display.set_mode((window.width, window.height))
        pygame.display.set_caption(window.title)
        self._font = pygame.font.Font(None, 24)
        self._keys = {
            pygame.K_UP: KEY_UP,
            pygame.K_DOWN: KEY_DOWN,
            pygame.K_LEFT: KEY_LEFT,
            pygame.K_RIGHT: KEY_RIGHT,
            pygame.K_ESCAPE: KEY_ESCAPE,
        }

    def __call__(self, app: PacManApp) -> None:
        pygame = self._pygame
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                app.display.post_event(app.window, EventType.CLIENT_MESSAGE, DELETE_WINDOW)
            elif event.type == pygame.KEYDOWN:
                keysym = self._keys.get(event.key)
                if keysym is not None:
                    app.display.post_event(app.window, EventType.KEY_PRESS, keysym)
        self._present(app.window)

    def _present(self, window: Window) -> None:
        pygame = self._pygame
        buffer = window.buffer
        data = buffer.data
        rgb = bytearray(buffer.width * buffer.height * 3)
        if buffer.big_endian:
            rgb[0::3], rgb[1::3], rgb[2::3] = data[1::4], data[2::4], data[3::4]
        else:
            rgb[0::3], rgb[1::3], rgb[2::3] = data[2::4], data[1::4], data[0::4]
        frame = pygame.image.frombuffer(bytes(rgb), (buffer.width, buffer.height), "RGB")
        self._surface.blit(frame, (0, 0))
        for x, y, color, text in window.texts:
            color &= 0xFFFFFF
            rendered = self._font.render(
                text, True, ((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF)
            )
            self._surface.blit(rendered, (x, y - self._font.get_ascent()))
        pygame.display.flip()


def _report(message: str) -> int:
    print("Error")
    print(message)
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Play the maze stored in a ``.ber`` map file."""
    parser = argparse.ArgumentParser(prog="pacmaze", description="Play a Pac-Man maze.")
    parser.add_argument("map", help="path of a .ber map file")
    parser.add_argument(
        "--assets", default=".", help="directory holding the xpm/ sprite folder"
    )
    args = parser.parse_args(argv)

    try:
        game_map = parse_map(args.map)
    except MapError as exc:
        return _report(str(exc))

    import pygame

    pygame.init()
    try:
        info = pygame.display.Info()
        display = Display(info.current_w, info.current_h)
        try:
            images = {name: load_xpm(path) for name, path in sprite_paths(args.assets).items()}
            app = PacManApp(Game(game_map), display, images)
        except (XpmError, DisplayError) as exc:
            display.close()
            return _report(str(exc))
        app.on_frame = _PygameFrontend(app.window)
        app.run()
    finally:
        pygame.quit()
    return 0