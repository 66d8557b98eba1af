"""Reading and writing level files.

A level file starts with the grid width and height as text lines, followed by the
player start (two little-endian int32) and one 36-byte record per node, stored
column by column (x outer, y inner).
"""

from __future__ import annotations

import struct
from itertools import product
from os import PathLike
from pathlib import Path
from typing import Union

from .leveldata import (
    MAP_HEIGHT_MAX_SUPPORTED,
    MAP_WIDTH_MAX_SUPPORTED,
    EditorMapData,
    GridNode,
    MapData,
)

PathArg = Union[str, "PathLike[str]"]

DEFAULT_LEVEL_DIRECTORY = Path("../Assets/MAPS")

_POINT = struct.Struct("<2i")
_NODE = struct.Struct("<9i")


class LevelFileError(ValueError):
    """Raised when a level file is malformed."""


def level_path(level_name: str, directory: PathArg = DEFAULT_LEVEL_DIRECTORY) -> Path:
    """Return the path of the named level inside directory."""
    return Path(directory) / f"{level_name}.dat"


def _pack_node(node: GridNode) -> bytes:
    return _NODE.pack(
        *node.tex_id_roof,
        node.tex_id_wall,
        *node.tex_id_floor,
        int(node.draw_flags),
        node.extend_up,
        node.extend_down,
        int(node.collision_mask),
    )


def _unpack_node(values: tuple[int, ...]) -> GridNode:
    roof0, roof1, wall, floor0, floor1, flags, up, down, mask = values
    return GridNode(
        tex_id_roof=[roof0, roof1],
        tex_id_wall=wall,
        tex_id_floor=[floor0, floor1],
        draw_flags=flags,
        extend_up=up,
        extend_down=down,
        collision_mask=mask,
    )


def _read_level(path: PathArg) -> tuple[int, int, tuple[int, int], dict[tuple[int, int], GridNode]]:
    data = Path(path).read_bytes()
    parts = data.split(b"\n", 2)
    if len(parts) < 3:
        raise LevelFileError(f"{path}: missing width/height header")
    try:
        width, height = int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise LevelFileError(f"{path}: invalid width/height header") from exc
    if not (0 < width <= MAP_WIDTH_MAX_SUPPORTED and 0 < height <= MAP_HEIGHT_MAX_SUPPORTED):
        raise LevelFileError(f"{path}: unsupported grid size {width}x{height}")

    body = parts[2]
    needed = _POINT.size + _NODE.size * width * height
    if len(body) < needed:
        raise LevelFileError(f"{path}: truncated, expected {needed} bytes of grid data")

    start = _POINT.unpack_from(body, 0)
    nodes = (_unpack_node(values) for values in _NODE.iter_unpack(body[_POINT.size:needed]))
    by_position = dict(zip(product(range(width), range(height)), nodes))
    return width, height, (start[0], start[1]), by_position


def editor_save_level(path: PathArg, map_data: EditorMapData) -> None:
    """Write an editor map to path."""
    with open(path, "wb") as stream:
        stream.write(f"{map_data.grid_width}\n{map_data.grid_height}\n".encode("ascii"))
        stream.write(_POINT.pack(*map_data.player_start))
        for x, y in product(range(map_data.grid_width), range(map_data.grid_height)):
            stream.write(_pack_node(map_data.get_node(x, y)))


def editor_load_level(path: PathArg, map_data: EditorMapData) -> EditorMapData:
    """Clear map_data and fill it from the level file at path; returns map_data."""
    map_data.clear_data()
    width, height, start, by_position = _read_level(path)
    map_data.set_size(width, height)
    map_data.player_start = start
    for (x, y), node in by_position.items():
        map_data.grid_nodes[y * MAP_WIDTH_MAX_SUPPORTED + x] = node
    return map_data


def load_level(path: PathArg) -> MapData:
    """Load the level file at path into a tightly packed runtime map."""
    width, height, start, by_position = _read_level(path)
    nodes = [by_position[x, y] for y in range(height) for x in range(width)]
    return MapData(player_start=start, grid_width=width, grid_height=height, nodes=nodes)