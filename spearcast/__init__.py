"""Grid raycasting game core: maps, level files, collision, software rendering, editor and game flow."""

__version__ = "0.1.0"