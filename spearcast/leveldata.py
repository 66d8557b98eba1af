"""Level grid data: tile nodes, editor maps, runtime maps and DDA collision search."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntFlag

MAP_WIDTH_MAX_SUPPORTED = 40
MAP_HEIGHT_MAX_SUPPORTED = 40
TEX_NONE = -1

Vec2 = tuple[float, float]


class DrawFlags(IntFlag):
    """Which wall faces a tile draws; DEFAULT draws any face towards the camera."""

    DEFAULT = 0
    N = 1 << 0
    E = 1 << 1
    S = 1 << 2
    W = 1 << 3


class CollisionMask(IntFlag):
    """Collision categories a tile can belong to."""

    NONE = 0
    WALL = 1 << 0
    SOLID = 1 << 1


def _empty_pair() -> list[int]:
    return [TEX_NONE, TEX_NONE]


@dataclass
class GridNode:
    """One tile of a level grid."""

    tex_id_roof: list[int] = field(default_factory=_empty_pair)
    tex_id_wall: int = TEX_NONE
    tex_id_floor: list[int] = field(default_factory=_empty_pair)
    draw_flags: int = int(DrawFlags.DEFAULT)
    extend_up: int = 0
    extend_down: int = 0
    collision_mask: int = int(CollisionMask.NONE)

    def reset(self) -> None:
        """Clear textures, extensions and collision; draw flags are left as they are."""
        self.tex_id_roof = _empty_pair()
        self.tex_id_wall = TEX_NONE
        self.tex_id_floor = _empty_pair()
        self.extend_up = 0
        self.extend_down = 0
        self.collision_mask = int(CollisionMask.NONE)


def _full_grid() -> list[GridNode]:
    return [GridNode() for _ in range(MAP_WIDTH_MAX_SUPPORTED * MAP_HEIGHT_MAX_SUPPORTED)]


@dataclass
class EditorMapData:
    """Editable map holding the largest supported grid so it can be resized freely."""

    player_start: tuple[int, int] = (5, 5)
    grid_width: int = 10
    grid_height: int = 10
    grid_nodes: list[GridNode] = field(default_factory=_full_grid)

    def set_size(self, width: int, height: int) -> None:
        self.grid_width = width
        self.grid_height = height

    def get_node(self, x: int, y: int) -> GridNode:
        """Return the node at (x, y); raise IndexError outside the current size."""
        if not (0 <= x < self.grid_width and 0 <= y < self.grid_height):
            raise IndexError(f"grid index ({x}, {y}) outside {self.grid_width}x{self.grid_height}")
        return self.grid_nodes[x + y * MAP_WIDTH_MAX_SUPPORTED]

    def clear_data(self) -> None:
        for node in self.grid_nodes:
            node.reset()


@dataclass(frozen=True)
class DdaHit:
    """Result of a DDA collision search; truthy when something was hit."""

    hit: bool
    position: Vec2
    vertical: bool

    def __bool__(self) -> bool:
        return self.hit


@dataclass
class MapData:
    """Runtime map with a tightly packed grid of width * height nodes."""

    player_start: tuple[int, int] = (5, 5)
    grid_width: int = 10
    grid_height: int = 10
    nodes: list[GridNode] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.nodes:
            self.nodes = [GridNode() for _ in range(self.total_nodes())]
        elif len(self.nodes) != self.total_nodes():
            raise ValueError(
                f"expected {self.total_nodes()} nodes for a "
                f"{self.grid_width}x{self.grid_height} grid, got {len(self.nodes)}"
            )

    def total_nodes(self) -> int:
        return self.grid_width * self.grid_height

    def get_node(self, x: int, y: int) -> GridNode | None:
        """Return the node at (x, y), or None outside the grid."""
        if 0 <= x < self.grid_width and 0 <= y < self.grid_height:
            return self.nodes[x + y * self.grid_width]
        return None

    def collision_search_dda(
        self, start: Vec2, trajectory: Vec2, collision_test_mask: int
    ) -> DdaHit:
        """Walk the grid along trajectory and report the first tile matching the mask."""
        sx, sy = start
        tx, ty = trajectory
        end = (sx + tx, sy + ty)
        distance_limit = math.hypot(tx, ty)
        if distance_limit == 0:
            return DdaHit(False, end, False)

        dx, dy = tx / distance_limit, ty / distance_limit
        # Ray length needed to travel one unit along each axis.
        step_size_x = 1.0 / abs(dx) if dx else math.inf
        step_size_y = 1.0 / abs(dy) if dy else math.inf

        map_x, map_y = int(sx), int(sy)
        if dx < 0:
            step_x = -1
            progress_x = (sx - map_x) * step_size_x
        else:
            step_x = 1
            progress_x = (map_x + 1 - sx) * step_size_x
        if dy < 0:
            step_y = -1
            progress_y = (sy - map_y) * step_size_y
        else:
            step_y = 1
            progress_y = (map_y + 1 - sy) * step_size_y

        distance = 0.0
        vertical = False
        while distance < distance_limit:
            if progress_x < progress_y:
                map_x += step_x
                distance = progress_x
                progress_x += step_size_x
                vertical = False
            else:
                map_y += step_y
                distance = progress_y
                progress_y += step_size_y
                vertical = True

            if distance > distance_limit:
                return DdaHit(False, end, vertical)

            node = self.get_node(map_x, map_y)
            if node is not None and node.collision_mask & collision_test_mask:
                return DdaHit(True, (sx + dx * distance, sy + dy * distance), vertical)

        return DdaHit(False, end, vertical)