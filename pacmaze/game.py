"""Player movement and game rules for the maze.

The player slides in a straight line until it meets a wall, one pixel
per frame, eating collectibles on its way. A direction pressed while
sliding is queued and taken at the next tile it allows. The game is won
by standing on the exit once every collectible has been eaten.
"""

from __future__ import annotations

from enum import Enum

from pacmaze.gamemap import COLLECTIBLE, EXIT, FLOOR, WALL, GameMap

TILE_SIZE = 50

WIN_MESSAGE = "Congrats! YOU WIN!!"
QUIT_MESSAGE = "Thanks for playing! Game closed."
COLLECT_MESSAGE = "+1 collectible!"
EXIT_LOCKED_MESSAGE = "Collect remaining collectibles to exit..."


class Sprite(Enum):
    """The player images: facing one way, or with the mouth closed."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    CLOSED = "closed"


class Direction(Enum):
    """A direction of movement as a (dx, dy) step on the grid."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def sprite(self) -> Sprite:
        return Sprite[self.name]


_WALL_MESSAGES = {
    Direction.UP: "Can't move up! There's a wall...",
    Direction.DOWN: "Can't move down! There's a wall...",
    Direction.RIGHT: "Can't move up! There's a wall...",
    Direction.LEFT: "Can't move up! There's a wall...",
}


class GameEnded(Exception):
    """Raised when the game is over, won or quit."""

    def __init__(self, message: str, won: bool) -> None:
        super().__init__(message)
        self.message = message
        self.won = won


class Game:
    """The state of one game on a validated map."""

    def __init__(self, game_map: GameMap) -> None:
        self.grid = [list(row) for row in game_map.grid]
        self.width = game_map.width
        self.height = game_map.height
        self.x, self.y = game_map.player
        self.collectibles = game_map.collectibles
        self.collected = 0
        self.keypress_count = 0
        self.direction: Direction | None = None
        self.queued: Direction | None = None
        self.remaining = 0
        self.pixels_to_tile = TILE_SIZE
        self.pixel_x = self.x * TILE_SIZE
        self.pixel_y = self.y * TILE_SIZE
        self.messages: list[str] = []
        self._sprite = Sprite.UP

    @property
    def position(self) -> tuple[int, int]:
        """The player's (x, y) tile."""
        return self.x, self.y

    @property
    def all_collected(self) -> bool:
        return self.collected == self.collectibles

    def _tile(self, x: int, y: int) -> str:
        if 0 <= y < len(self.grid) and 0 <= x < len(self.grid[y]):
            return self.grid[y][x]
        return WALL

    def blocked_reason(self, direction: Direction) -> str | None:
        """Return why the player cannot step that way, or None if it can."""
        tile = self._tile(self.x + direction.dx, self.y + direction.dy)
        if tile == WALL:
            return _WALL_MESSAGES[direction]
        if tile == EXIT and not self.all_collected:
            return EXIT_LOCKED_MESSAGE
        return None

    def can_move(self, direction: Direction) -> bool:
        """Whether the player may start moving that way."""
        return self.blocked_reason(direction) is None

    def _check_move(self, direction: Direction) -> bool:
        reason = self.blocked_reason(direction)
        if reason is not None:
            self.messages.append(reason)
            return False
        return True

    def distance_to_wall(self, direction: Direction) -> int:
        """Count the open tiles between the player and the next wall."""
        x, y = self.x, self.y
        distance = -1
        while self._tile(x, y) != WALL:
            x += direction.dx
            y += direction.dy
            distance += 1
        return distance

    def press(self, direction: Direction) -> bool:
        """Handle a direction key; return True if it was taken or queued."""
        accepted = False
        if self.direction is not None:
            self.queued = direction
            self.keypress_count += 1
            accepted = True
        elif self._check_move(direction):
            self.direction = direction
            self._sprite = direction.sprite
            self.remaining = self.distance_to_wall(direction) * TILE_SIZE
            self.pixels_to_tile = TILE_SIZE
            self.keypress_count += 1
            accepted = True
        self._check_win()
        return accepted

    def quit(self) -> None:
        """End the game at the player's request."""
        raise GameEnded(QUIT_MESSAGE, won=False)

    def current_sprite(self) -> Sprite:
        """The image the player is drawn with."""
        return self._sprite

    def _frame_sprite(self) -> Sprite:
        if self.pixels_to_tile % 2 == 0 or self.direction is None:
            return Sprite.CLOSED
        return self.direction.sprite

    def _arrive(self) -> None:
        direction = self.direction
        if direction is not None:
            self.x += direction.dx
            self.y += direction.dy
        self.pixels_to_tile = TILE_SIZE
        if self.queued is not None and self._check_move(self.queued):
            self.direction = self.queued
            self.queued = None
            self.remaining = self.distance_to_wall(self.direction) * TILE_SIZE

    def step(self) -> tuple[int, int]:
        """Advance one frame and return the player's pixel position.

        Raises GameEnded when the player stands on the open exit.
        """
        if self._tile(self.x, self.y) == COLLECTIBLE and self.collected < self.collectibles:
            self.collected += 1
            self.grid[self.y][self.x] = FLOOR
            self.messages.append(COLLECT_MESSAGE)
        if self.remaining > 0 and self.direction is not None:
            self._sprite = self._frame_sprite()
            self.pixel_x += self.direction.dx
            self.pixel_y += self.direction.dy
            self.remaining -= 1
            self.pixels_to_tile -= 1
            if self.pixels_to_tile == 0:
                self._arrive()
        self._check_win()
        if self.remaining == 0:
            self.direction = None
        return self.pixel_x, self.pixel_y

    def won(self) -> bool:
        """Whether the player stands on the exit with everything collected."""
        return self.all_collected and self._tile(self.x, self.y) == EXIT

    def _check_win(self) -> None:
        if self.won():
            raise GameEnded(WIN_MESSAGE, won=True)