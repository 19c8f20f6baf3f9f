"""Pac-Man maze game: .ber map validation, game rules, XPM sprites and an in-memory display."""

__version__ = "0.1.0"

__all__ = ["app", "colors", "game", "gamemap", "image", "window", "xpm"]