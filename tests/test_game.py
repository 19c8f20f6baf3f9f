import pytest

from pacmaze.game import (
    COLLECT_MESSAGE,
    EXIT_LOCKED_MESSAGE,
    QUIT_MESSAGE,
    TILE_SIZE,
    WIN_MESSAGE,
    Direction,
    Game,
    GameEnded,
    Sprite,
)
from pacmaze.gamemap import GameMap

MAIN_ROWS = [
    "11111",
    "1P0C1",
    "10001",
    "1E001",
    "11111",
]

LOCKED_ROWS = [
    "1111",
    "1PC1",
    "1E01",
    "1111",
]


def make_map(rows):
    grid = [list(row) for row in rows]
    player = next(
        (x, y) for y, row in enumerate(grid) for x, tile in enumerate(row) if tile == "P"
    )
    count = sum(row.count("C") for row in grid)
    return GameMap(grid=grid, width=len(rows[0]), height=len(rows), player=player,
                   collectibles=count)


def slide(game, limit=2000):
    for _ in range(limit):
        game.step()
        if game.direction is None:
            return
    raise AssertionError("player never stopped")


def test_direction_offsets_drive_movement():
    game = Game(make_map(MAIN_ROWS))
    assert game.press(Direction.DOWN) is True
    assert game.current_sprite() is Sprite.DOWN
    assert game.step() == (TILE_SIZE, TILE_SIZE + 1)

    game = Game(make_map(MAIN_ROWS))
    assert game.press(Direction.RIGHT) is True
    assert game.current_sprite() is Sprite.RIGHT
    assert game.step() == (TILE_SIZE + 1, TILE_SIZE)


def test_initial_state():
    game = Game(make_map(MAIN_ROWS))
    assert game.position == (1, 1)
    assert (game.pixel_x, game.pixel_y) == (TILE_SIZE, TILE_SIZE)
    assert game.current_sprite() is Sprite.UP
    assert game.direction is None
    assert game.keypress_count == 0


def test_game_copies_grid():
    game_map = make_map(MAIN_ROWS)
    game = Game(game_map)
    game.grid[1][2] = "X"
    assert game_map.grid[1][2] == "0"


def test_distance_to_wall():
    game = Game(make_map(MAIN_ROWS))
    assert game.distance_to_wall(Direction.RIGHT) == 2
    assert game.distance_to_wall(Direction.DOWN) == 2
    assert game.distance_to_wall(Direction.UP) == 0
    assert game.distance_to_wall(Direction.LEFT) == 0


def test_blocked_by_wall_messages():
    game = Game(make_map(MAIN_ROWS))
    assert game.blocked_reason(Direction.UP) == "Can't move up! There's a wall..."
    assert game.blocked_reason(Direction.LEFT) == "Can't move up! There's a wall..."
    assert game.blocked_reason(Direction.RIGHT) is None
    assert game.can_move(Direction.DOWN)
    assert not game.can_move(Direction.UP)


def test_exit_locked_until_collected():
    game = Game(make_map(LOCKED_ROWS))
    assert game.blocked_reason(Direction.DOWN) == EXIT_LOCKED_MESSAGE
    assert not game.can_move(Direction.DOWN)
    assert game.can_move(Direction.RIGHT)


def test_blocked_press_is_not_counted():
    game = Game(make_map(MAIN_ROWS))
    assert game.press(Direction.UP) is False
    assert game.keypress_count == 0
    assert game.direction is None
    assert game.messages == ["Can't move up! There's a wall..."]


def test_press_starts_moving():
    game = Game(make_map(MAIN_ROWS))
    assert game.press(Direction.RIGHT) is True
    assert game.keypress_count == 1
    assert game.direction is Direction.RIGHT
    assert game.current_sprite() is Sprite.RIGHT
    assert game.remaining == 2 * TILE_SIZE


def test_mouth_alternates_while_moving():
    game = Game(make_map(MAIN_ROWS))
    game.press(Direction.RIGHT)
    game.step()
    assert game.current_sprite() is Sprite.CLOSED
    game.step()
    assert game.current_sprite() is Sprite.RIGHT


def test_step_moves_one_pixel():
    game = Game(make_map(MAIN_ROWS))
    game.press(Direction.RIGHT)
    assert game.step() == (TILE_SIZE + 1, TILE_SIZE)


def test_tile_changes_after_full_tile():
    game = Game(make_map(MAIN_ROWS))
    game.press(Direction.RIGHT)
    for _ in range(TILE_SIZE - 1):
        game.step()
    assert game.position == (1, 1)
    game.step()
    assert game.position == (2, 1)


def test_slide_to_wall_then_collect():
    game = Game(make_map(MAIN_ROWS))
    game.press(Direction.RIGHT)
    slide(game)
    assert game.position == (3, 1)
    assert (game.pixel_x, game.pixel_y) == (3 * TILE_SIZE, 1 * TILE_SIZE)
    assert game.collected == 0
    game.step()
    assert game.collected == 1
    assert game.grid[1][3] == "0"
    assert COLLECT_MESSAGE in game.messages


def test_stationary_step_keeps_position():
    game = Game(make_map(MAIN_ROWS))
    before = (game.pixel_x, game.pixel_y)
    assert game.step() == before
    assert game.position == (1, 1)


def test_queued_turn_taken_at_next_tile():
    game = Game(make_map(MAIN_ROWS))
    game.press(Direction.RIGHT)
    assert game.press(Direction.DOWN) is True
    assert game.keypress_count == 2
    assert game.queued is Direction.DOWN
    slide(game)
    assert game.position == (2, 3)
    assert game.queued is None
    assert game.collected == 0


def test_win_on_reaching_exit():
    game = Game(make_map(MAIN_ROWS))
    game.press(Direction.RIGHT)
    slide(game)
    game.step()
    game.press(Direction.DOWN)
    slide(game)
    assert game.position == (3, 3)
    game.press(Direction.LEFT)
    with pytest.raises(GameEnded) as info:
        slide(game)
    assert info.value.won is True
    assert info.value.message == WIN_MESSAGE
    assert game.won()
    assert game.position == (1, 3)


def test_not_won_before_collecting():
    game = Game(make_map(MAIN_ROWS))
    game.press(Direction.DOWN)
    slide(game)
    assert game.position == (1, 3)
    assert not game.won()


def test_quit_raises():
    game = Game(make_map(MAIN_ROWS))
    with pytest.raises(GameEnded) as info:
        game.quit()
    assert info.value.won is False
    assert str(info.value) == QUIT_MESSAGE