# pacmaze

A small Pac-Man style maze game. You steer Pac-Man through a walled map,
eat every collectible and then reach the exit. Once a direction is chosen,
Pac-Man keeps gliding until he meets a wall. A direction pressed while he
is moving is queued and taken at the next tile that allows it.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Playing

```
pacmaze maps/level.ber
pacmaze maps/level.ber --assets path/to/game
```

Use the arrow keys to move. Escape, or closing the window, ends the game.
A counter in the top-right corner of the window shows how many direction
keys have been taken or queued. Messages such as `+1 collectible!` or
`Collect remaining collectibles to exit...` are printed to standard output,
and `Congrats! YOU WIN!!` once Pac-Man stands on the exit with everything
eaten.

The window is shown with pygame, and the map must fit on the screen.

Sprites are read as XPM files from the `xpm/` directory under the
`--assets` directory (by default the current directory). Each tile is
50×50 pixels. All of these files must be present:

```
wall50.xpm  path50.xpm  collect50.xpm  exit50.xpm
pacmanleft.xpm  pacmanright.xpm  pacmanup.xpm  pacmandown.xpm  pacmanclosed.xpm
red_enemy.xpm  blue_enemy.xpm  yellow_enemy.xpm  pink_enemy.xpm
red_enemy_move.xpm  blue_enemy_move.xpm  yellow_enemy_move.xpm  pink_enemy_move.xpm
```

No sprite files come with the package.

When something is wrong the command prints `Error` followed by the reason
and exits with status 1.

## Map format

A map is a text file whose name ends in `.ber`. It uses these tiles:

| Tile | Meaning      |
|------|--------------|
| `1`  | wall         |
| `0`  | open floor   |
| `P`  | player start |
| `C`  | collectible  |
| `E`  | exit         |

Example:

```
1111111111
1P0C0000E1
1111111111
```

A map is rejected when:

- the file is missing, is a directory, or its name does not end in `.ber`
- the map is empty or starts with an empty line, or is not rectangular
- it is not closed by walls
- it holds an unknown tile, does not have exactly one player and one exit,
  or has no collectibles
- the player cannot reach every collectible and the exit

## What it does not do

There are no enemies in play. The enemy sprites are loaded and
`pacmaze.app.find_enemies` can list ghost tiles (`R`, `B`, `K`, `Y`) in a
grid, but the map checker rejects those tiles as unknown, and nothing
moves or draws enemies.

## Library use

The pieces of the game can also be used on their own:

- `pacmaze.gamemap.parse_map(filename)` validates a map file and returns a
  `GameMap` (grid, width, height, player start, collectible count). A bad
  map raises `MapError`. The single checks (`check_file_format`,
  `check_is_file`, `read_map_lines`, `check_rectangular`, `check_closed`,
  `count_elements`, `flood_fill`) are public too.
- `pacmaze.game.Game` holds the game state and is driven with `press`,
  `step` and `quit`; `blocked_reason`, `can_move`, `distance_to_wall`,
  `current_sprite` and `won` inspect it. The end of a game is raised as
  `GameEnded`, whose `won` attribute tells a win from a quit.
- `pacmaze.app.PacManApp` joins a `Game`, a `Display` and a mapping of
  sprite images; `render_frame`, `handle_key` and `run` drive it.
  `sprite_paths`, `render_order` and `tile_sprite` are the helpers it uses.
- `pacmaze.xpm.load_xpm(path)`, `parse_xpm_text(text)` and
  `parse_xpm_lines(lines)` decode XPM images into `pacmaze.image.Image`
  pixel buffers. Broken input raises `XpmError`. Colours named `None`
  become the transparent value `0xFF000000`.
- `pacmaze.image.Image` is a 32-bit pixel buffer with `put_pixel`,
  `get_pixel` and `row`; `channel_shifts` and `convert_color` turn
  `0xRRGGBB` colours into pixel values for visuals below 24 bits.
- `pacmaze.colors.lookup_color(name)` resolves X11 colour names such as
  `"lightskyblue"` or `"gray50"`, ignoring case; unknown names raise
  `KeyError`.
- `pacmaze.window.Display` and `pacmaze.window.Window` are an in-memory
  display: windows with framebuffers, per-event hooks (`hook`, `key_hook`,
  `mouse_hook`, `expose_hook`), an event queue (`post_event`) and an event
  loop (`loop`, `loop_hook`, `loop_end`), plus drawing with `put_image`,
  `pixel_put`, `string_put` and `clear_window`.