"""The player: movement with wall collision, mouse look and turning."""

from __future__ import annotations

import math
from collections.abc import Collection
from dataclasses import dataclass, field
from enum import Enum, auto

from .leveldata import CollisionMask, MapData

Vec2 = tuple[float, float]


class PlayerAction(Enum):
    FORWARD = auto()
    BACKWARD = auto()
    STRAFE_RIGHT = auto()
    STRAFE_LEFT = auto()
    ROTATE_LEFT = auto()
    ROTATE_RIGHT = auto()
    SPRINT = auto()


@dataclass(frozen=True)
class PlayerInput:
    """Actions held this frame and the relative mouse movement."""

    held: Collection[PlayerAction] = frozenset()
    mouse_axis: Vec2 = (0.0, 0.0)


def _sign(value: float) -> float:
    return (value > 0) - (value < 0)


def _normalize_non_zero(x: float, y: float) -> Vec2:
    length = math.hypot(x, y)
    if length == 0:
        return 0.0, 0.0
    return x / length, y / length


@dataclass
class Player:
    pos: Vec2 = (0.0, 0.0)
    walk_speed: float = 1.5
    sprint_speed: float = 4.0
    look_speed: float = 0.0035
    pitch: float = 0.0
    pitch_limit: float = 0.5
    rotation: float = math.radians(-90.0)
    turn_speed: float = math.radians(2.0)
    coll_box: float = 0.12

    def update(self, delta_time: float, player_input: PlayerInput, map_data: MapData) -> None:
        """Advance one frame of movement and looking."""
        held = player_input.held
        speed = self.sprint_speed if PlayerAction.SPRINT in held else self.walk_speed
        move_distance = speed * delta_time

        cos_r, sin_r = math.cos(self.rotation), math.sin(self.rotation)
        move_x = move_y = 0.0
        if PlayerAction.FORWARD in held:
            move_x, move_y = cos_r, sin_r
        elif PlayerAction.BACKWARD in held:
            move_x, move_y = -cos_r, -sin_r
        if PlayerAction.STRAFE_LEFT in held:
            move_x += sin_r
            move_y -= cos_r
        elif PlayerAction.STRAFE_RIGHT in held:
            move_x -= sin_r
            move_y += cos_r
        move_x, move_y = _normalize_non_zero(move_x, move_y)

        if move_x or move_y:
            flags = CollisionMask.WALL | CollisionMask.SOLID
            box = self.coll_box
            px, py = self.pos

            reach_x = (move_x * move_distance + _sign(move_x) * box, 0.0)
            if not map_data.collision_search_dda(
                (px, py + box), reach_x, flags
            ) and not map_data.collision_search_dda((px, py - box), reach_x, flags):
                px += move_x * move_distance

            reach_y = (0.0, move_y * move_distance + _sign(move_y) * box)
            if not map_data.collision_search_dda(
                (px + box, py), reach_y, flags
            ) and not map_data.collision_search_dda((px - box, py), reach_y, flags):
                py += move_y * move_distance

            self.pos = (px, py)

        axis_x, axis_y = player_input.mouse_axis
        self.rotation += axis_x * self.look_speed
        self.pitch = min(max(self.pitch + axis_y * self.look_speed, -self.pitch_limit), self.pitch_limit)

        if PlayerAction.ROTATE_LEFT in held:
            self.rotation -= self.turn_speed
        elif PlayerAction.ROTATE_RIGHT in held:
            self.rotation += self.turn_speed


@dataclass
class GameState:
    """Everything a running game session tracks."""

    delta_time: float = 0.0
    game_time: float = 0.0
    player: Player = field(default_factory=Player)
    map_data: MapData = field(default_factory=MapData)