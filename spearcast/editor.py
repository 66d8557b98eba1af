"""Level editor: paints textures, heights, collision and draw flags onto a map grid."""

from __future__ import annotations

import math
from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from os import PathLike
from typing import Optional, Union

from .leveldata import (
    MAP_HEIGHT_MAX_SUPPORTED,
    MAP_WIDTH_MAX_SUPPORTED,
    TEX_NONE,
    CollisionMask,
    DrawFlags,
    EditorMapData,
)
from .levelfile import editor_load_level, editor_save_level, level_path
from .uibutton import UiButton

Vec2 = tuple[float, float]
PathArg = Union[str, "PathLike[str]"]

MAP_SIZE_MIN = 4
SCROLL_SPEED = 1000.0
ZOOM_MIN = 0.75
ZOOM_MAX = 3.0
SAVE_COOLDOWN = 3.0


class EditorMode(IntEnum):
    """What a click on the grid edits."""

    PLAYERSTART = 0
    FLOOR2 = 1
    FLOOR = 2
    WALL = 3
    ROOF = 4
    ROOF2 = 5
    RISE = 6
    FALL = 7
    COLLISION = 8
    DRAW_DIRECTION = 9


_MODE_TEXT = {
    EditorMode.PLAYERSTART: "PlayerStart",
    EditorMode.FLOOR: "Floor",
    EditorMode.FLOOR2: "Floor2",
    EditorMode.WALL: "Wall",
    EditorMode.ROOF: "Roof",
    EditorMode.ROOF2: "Roof2",
    EditorMode.RISE: "Rise",
    EditorMode.FALL: "Fall",
    EditorMode.COLLISION: "Collision",
    EditorMode.DRAW_DIRECTION: "DrawDir",
}


def mode_text(mode: int) -> str:
    """Return the display name of an editor mode, or "Unknown"."""
    try:
        return _MODE_TEXT[EditorMode(mode)]
    except ValueError:
        return "Unknown"


class EditorAction(Enum):
    APPLY = auto()
    CLEAR = auto()
    QUIT = auto()
    MODIFIER = auto()
    INCREASE_MAPSIZE = auto()
    DECREASE_MAPSIZE = auto()
    SCROLL_LEFT = auto()
    SCROLL_RIGHT = auto()
    SCROLL_UP = auto()
    SCROLL_DOWN = auto()
    ZOOM_IN = auto()
    ZOOM_OUT = auto()
    MODE_NEXT = auto()
    MODE_PREV = auto()
    FACE_NORTH = auto()
    FACE_EAST = auto()
    FACE_SOUTH = auto()
    FACE_WEST = auto()
    SAVE = auto()
    LOAD = auto()


@dataclass(frozen=True)
class EditorInput:
    """One frame of editor input: actions started, held and released, mouse and wheel."""

    held: Collection[EditorAction] = frozenset()
    started: Collection[EditorAction] = frozenset()
    released: Collection[EditorAction] = frozenset()
    mouse_pos: Vec2 = (0.0, 0.0)
    wheel: int = 0


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


_FACE_FLAGS = (
    (EditorAction.FACE_NORTH, DrawFlags.N),
    (EditorAction.FACE_EAST, DrawFlags.E),
    (EditorAction.FACE_SOUTH, DrawFlags.S),
    (EditorAction.FACE_WEST, DrawFlags.W),
)


class Editor:
    """Editor state: the map being edited, the camera and the texture palette buttons."""

    def __init__(
        self,
        texture_count: int = 1,
        tile_width: float = 64.0,
        button_size: float = 64.0,
        level_file: Optional[PathArg] = None,
    ) -> None:
        self.map = EditorMapData()
        self.map.clear_data()
        self.tile_width = tile_width
        self.level_file = level_path("level") if level_file is None else level_file
        self.menu_scroll_speed = 20.0
        self.cam_offset: Vec2 = (400.0, 200.0)
        self.cam_zoom = 1.0
        self.cursor_in_menu = False
        self.cur_mode = EditorMode.WALL
        self.cur_tex = 0
        self.click_cache = 0
        self.save_cooldown = 0.0
        self.texture_buttons: list[UiButton] = []
        for layer in range(texture_count):
            button = UiButton(button_size, button_size)
            button.sprite.tex_layer = layer
            button.sprite.pos = (50.0, 100.0 + layer * 75.0)
            button.sprite.depth = 0.0
            self.texture_buttons.append(button)

    def map_spacing(self) -> float:
        """Screen distance between neighbouring tile centres."""
        return self.cam_zoom * (self.tile_width + 10.0)

    def tile_radius(self) -> float:
        return self.cam_zoom * (self.tile_width * 0.707)

    def mouse_to_grid_index(self, mouse_pos: Vec2) -> tuple[int, int]:
        spacing = self.map_spacing()
        mx = mouse_pos[0] - self.cam_offset[0]
        my = mouse_pos[1] - self.cam_offset[1]
        return _round_half_away(mx / spacing), _round_half_away(my / spacing)

    def valid_grid_index(self, index: tuple[int, int]) -> bool:
        x, y = index
        return 0 <= x < self.map.grid_width and 0 <= y < self.map.grid_height

    def next_mode(self) -> EditorMode:
        self.cur_mode = EditorMode((self.cur_mode + 1) % len(EditorMode))
        return self.cur_mode

    def prev_mode(self) -> EditorMode:
        self.cur_mode = EditorMode((self.cur_mode - 1) % len(EditorMode))
        return self.cur_mode

    def _update_buttons(self, editor_input: EditorInput) -> None:
        self.cursor_in_menu = False
        click_hold = EditorAction.APPLY in editor_input.held
        right_hold = EditorAction.CLEAR in editor_input.held
        click_release = EditorAction.APPLY in editor_input.released
        for layer, button in enumerate(self.texture_buttons):
            x, y = button.sprite.pos
            button.sprite.pos = (x, y + self.menu_scroll_speed * editor_input.wheel)
            button.update(editor_input.mouse_pos, click_hold, right_hold, click_release)
            if button.mouse_over(editor_input.mouse_pos):
                self.cursor_in_menu = True
            if button.clicked(editor_input.mouse_pos, click_release):
                self.cur_tex = layer

    def _resize_map(self, held: Collection[EditorAction]) -> None:
        width, height = self.map.grid_width, self.map.grid_height
        if EditorAction.INCREASE_MAPSIZE in held:
            if width < MAP_WIDTH_MAX_SUPPORTED and height < MAP_HEIGHT_MAX_SUPPORTED:
                self.map.set_size(width + 1, height + 1)
        elif EditorAction.DECREASE_MAPSIZE in held:
            if width > MAP_SIZE_MIN and height > MAP_SIZE_MIN:
                self.map.set_size(width - 1, height - 1)

    def _edit_grid(self, editor_input: EditorInput) -> None:
        index = self.mouse_to_grid_index(editor_input.mouse_pos)
        if not self.valid_grid_index(index):
            return
        node = self.map.get_node(*index)
        mode = self.cur_mode

        # Rise/Fall cache the first value so a drag sets many tiles alike.
        if EditorAction.APPLY in editor_input.started:
            if mode is EditorMode.RISE:
                self.click_cache = node.extend_up + 1
            elif mode is EditorMode.FALL:
                self.click_cache = node.extend_down + 1

        if EditorAction.APPLY in editor_input.held:
            tex = self.cur_tex
            if mode is EditorMode.PLAYERSTART:
                self.map.player_start = index
            elif mode is EditorMode.WALL:
                node.tex_id_wall = tex
                node.collision_mask = int(CollisionMask.WALL)
            elif mode is EditorMode.FLOOR:
                node.tex_id_floor[0] = tex
            elif mode is EditorMode.FLOOR2:
                node.tex_id_floor[1] = tex
            elif mode is EditorMode.ROOF:
                node.tex_id_roof[0] = tex
            elif mode is EditorMode.ROOF2:
                node.tex_id_roof[1] = tex
            elif mode is EditorMode.RISE:
                node.extend_up = self.click_cache
            elif mode is EditorMode.FALL:
                node.extend_down = self.click_cache
            elif mode is EditorMode.COLLISION:
                node.collision_mask = int(CollisionMask.WALL)
        elif EditorAction.CLEAR in editor_input.held:
            if mode is EditorMode.WALL:
                node.tex_id_wall = TEX_NONE
                node.collision_mask = int(CollisionMask.NONE)
            elif mode is EditorMode.FLOOR:
                node.tex_id_floor[0] = TEX_NONE
            elif mode is EditorMode.FLOOR2:
                node.tex_id_floor[1] = TEX_NONE
            elif mode is EditorMode.ROOF:
                node.tex_id_roof[0] = TEX_NONE
            elif mode is EditorMode.ROOF2:
                node.tex_id_roof[1] = TEX_NONE
            elif mode is EditorMode.RISE:
                node.extend_up = 0
            elif mode is EditorMode.FALL:
                node.extend_down = 0
            elif mode is EditorMode.COLLISION:
                node.collision_mask = int(CollisionMask.NONE)
            elif mode is EditorMode.DRAW_DIRECTION:
                node.draw_flags = int(DrawFlags.DEFAULT)
        elif mode is EditorMode.DRAW_DIRECTION:
            for action, flag in _FACE_FLAGS:
                if action in editor_input.held:
                    node.draw_flags |= int(flag)

    def _move_camera(self, delta_time: float, held: Collection[EditorAction]) -> None:
        cx, cy = self.cam_offset
        step = SCROLL_SPEED * delta_time
        if EditorAction.SCROLL_LEFT in held:
            cx += step
        if EditorAction.SCROLL_RIGHT in held:
            cx -= step
        if EditorAction.SCROLL_UP in held:
            cy += step
        if EditorAction.SCROLL_DOWN in held:
            cy -= step
        self.cam_offset = (cx, cy)
        if EditorAction.ZOOM_IN in held:
            self.cam_zoom *= 1.05
        if EditorAction.ZOOM_OUT in held:
            self.cam_zoom *= 0.95
        self.cam_zoom = max(min(self.cam_zoom, ZOOM_MAX), ZOOM_MIN)

    def update(self, delta_time: float, editor_input: EditorInput) -> bool:
        """Advance one editor frame; return True when the editor asks to quit to the menu."""
        if self.save_cooldown > 0.0:
            self.save_cooldown -= delta_time

        held = editor_input.held
        self._update_buttons(editor_input)
        self._resize_map(held)

        if EditorAction.MODE_NEXT in editor_input.released:
            self.next_mode()
        elif EditorAction.MODE_PREV in editor_input.released:
            self.prev_mode()

        if not self.cursor_in_menu:
            self._edit_grid(editor_input)

        modifier = EditorAction.MODIFIER in held
        if not modifier:
            self._move_camera(delta_time, held)

        if modifier and EditorAction.SAVE in editor_input.started:
            self.save_level()
        elif modifier and EditorAction.LOAD in held:
            self.load_level()

        return EditorAction.QUIT in editor_input.released

    def save_level(self) -> bool:
        """Save the map unless a recent save is still cooling down; return whether it saved."""
        if self.save_cooldown > 0.0:
            return False
        editor_save_level(self.level_file, self.map)
        self.save_cooldown = SAVE_COOLDOWN
        return True

    def load_level(self) -> None:
        editor_load_level(self.level_file, self.map)