"""Raycaster state: configuration, per-frame view data, output buffers and 2D ray casting."""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass
from typing import Optional

from .config import RaycasterConfig
from .leveldata import TEX_NONE, MapData

Vec2 = tuple[float, float]

FOV_MIN = 35.0
FOV_MAX = 95.0

# Field of view (degrees) against wall height multiplier. FoV changes the apparent
# floor/ceiling height but not wall height; this table keeps them in step.
_FOV_WALL_HEIGHT_LUT: tuple[Vec2, ...] = (
    (35.0, 1.19),
    (45.0, 1.16),
    (50.0, 1.13),
    (55.0, 1.11),
    (62.5, 1.07),
    (75.0, 1.0),
    (90.0, 0.888),
    (105.0, 0.777),
    (120.0, 0.63),
)
_LUT_KEYS = [key for key, _ in _FOV_WALL_HEIGHT_LUT]


def fov_wall_multiplier(fov_degrees: float) -> float:
    """Interpolate the wall height multiplier for a field of view in degrees."""
    if fov_degrees <= _LUT_KEYS[0]:
        return _FOV_WALL_HEIGHT_LUT[0][1]
    if fov_degrees >= _LUT_KEYS[-1]:
        return _FOV_WALL_HEIGHT_LUT[-1][1]
    upper = bisect.bisect_right(_LUT_KEYS, fov_degrees)
    (x0, y0), (x1, y1) = _FOV_WALL_HEIGHT_LUT[upper - 1], _FOV_WALL_HEIGHT_LUT[upper]
    t = (fov_degrees - x0) / (x1 - x0)
    return y0 + (y1 - y0) * t


def _round_half_away(value: float) -> float:
    return float(math.copysign(math.floor(abs(value) + 0.5), value))


def _normalize(x: float, y: float) -> Vec2:
    length = math.hypot(x, y)
    if length == 0:
        return 0.0, 0.0
    return x / length, y / length


def _direction(angle: float) -> Vec2:
    return math.cos(angle), math.sin(angle)


@dataclass
class FrameData:
    """View values computed once per frame and shared by every ray."""

    view_pitch: float = 0.0
    view_height: float = 0.0
    fov: float = 0.0
    fov_wall_multiplier: float = 1.0
    view_pos: Vec2 = (0.0, 0.0)
    view_forward: Vec2 = (1.0, 0.0)
    screen_plane_left: Vec2 = (0.0, 0.0)
    screen_plane_right: Vec2 = (0.0, 0.0)
    screen_plane_vector: Vec2 = (0.0, 0.0)
    fov_min_angle: Vec2 = (1.0, 0.0)
    fov_max_angle: Vec2 = (1.0, 0.0)
    ray_spacing_dir: Vec2 = (0.0, 0.0)
    ray_spacing_length: float = 0.0


@dataclass(frozen=True)
class RayLine:
    """A 2D ray in world units; hit tells whether it stopped at a wall."""

    start: Vec2
    end: Vec2
    hit: bool


class Raycaster:
    """Holds the map, settings, per-frame data and the colour/depth output buffers."""

    def __init__(self, map_data: MapData, config: Optional[RaycasterConfig] = None) -> None:
        self.map_data = map_data
        self.config = RaycasterConfig() if config is None else config.copy()
        self.frame = FrameData()
        self.software_rendering = False
        self.software_rendering_threads = 15
        self.rgba: list[int] = []
        self.depth: list[float] = []
        self._recreate_buffers(self.config.x_resolution, self.config.y_resolution)
        self.apply_config(self.config)

    def _recreate_buffers(self, width: int, height: int) -> None:
        self.rgba = [0] * (width * height)
        self.depth = [float(self.config.far_clip)] * (width * height)

    def apply_config(self, config: RaycasterConfig) -> None:
        """Adopt a copy of config, clamping the field of view and resizing buffers if needed."""
        resized = (
            config.x_resolution != self.config.x_resolution
            or config.y_resolution != self.config.y_resolution
        )
        self.config = config.copy()
        self.config.field_of_view = min(max(self.config.field_of_view, FOV_MIN), FOV_MAX)
        if resized or len(self.rgba) != config.x_resolution * config.y_resolution:
            self._recreate_buffers(self.config.x_resolution, self.config.y_resolution)
        self.apply_fov_modifier(0.0)

    def apply_fov_modifier(self, fov_modifier: float) -> None:
        """Offset the configured field of view, keeping the result within limits."""
        base = self.config.field_of_view
        modifier = min(max(fov_modifier, FOV_MIN - base), FOV_MAX - base)
        fov = base + modifier
        self.frame.fov_wall_multiplier = fov_wall_multiplier(fov)
        self.frame.fov = math.radians(fov)

    def resolution(self) -> tuple[int, int]:
        return self.config.x_resolution, self.config.y_resolution

    def clear_buffers(self) -> None:
        """Reset colours to zero and depths to the far clip distance."""
        size = self.config.x_resolution * self.config.y_resolution
        self.rgba = [0] * size
        self.depth = [float(self.config.far_clip)] * size

    def prepare_frame(self, pos: Vec2, pitch: float, angle: float) -> FrameData:
        """Compute the per-frame view data for a camera at pos; pitch is a fraction of screen height."""
        cfg = self.config
        frame = self.frame
        px, py = pos
        frame.view_pitch = _round_half_away(pitch * cfg.y_resolution)
        frame.view_height = 0.625 * cfg.y_resolution
        frame.view_forward = _normalize(*_direction(angle))
        frame.view_pos = (px, py)

        half_fov = frame.fov / 2
        lx, ly = _direction(angle - half_fov)
        rx, ry = _direction(angle + half_fov)
        frame.screen_plane_left = (px + lx * cfg.far_clip, py + ly * cfg.far_clip)
        frame.screen_plane_right = (px + rx * cfg.far_clip, py + ry * cfg.far_clip)
        frame.screen_plane_vector = (
            frame.screen_plane_right[0] - frame.screen_plane_left[0],
            frame.screen_plane_right[1] - frame.screen_plane_left[1],
        )

        fx, fy = frame.view_forward
        # Perpendicular of forward, negated: points from the right edge towards the left.
        frame.ray_spacing_dir = (fy, -fx)
        frame.ray_spacing_length = math.hypot(*frame.screen_plane_vector) / cfg.x_resolution

        frame.fov_min_angle = (lx, ly)
        frame.fov_max_angle = (rx, ry)
        return frame

    def _wall_distance(self, start: Vec2, direction: Vec2) -> Optional[float]:
        sx, sy = start
        dx, dy = direction
        step_size_x = 1.0 / abs(dx) if dx else math.inf
        step_size_y = 1.0 / abs(dy) if dy else math.inf
        map_x, map_y = int(sx), int(sy)
        if dx < 0:
            step_x, length_x = -1, (sx - map_x) * step_size_x
        else:
            step_x, length_x = 1, (map_x + 1 - sx) * step_size_x
        if dy < 0:
            step_y, length_y = -1, (sy - map_y) * step_size_y
        else:
            step_y, length_y = 1, (map_y + 1 - sy) * step_size_y

        distance = 0.0
        far_clip = self.config.far_clip
        while distance < far_clip:
            if length_x < length_y:
                map_x += step_x
                distance = length_x
                length_x += step_size_x
            else:
                map_y += step_y
                distance = length_y
                length_y += step_size_y
            node = self.map_data.get_node(map_x, map_y)
            if node is not None and node.tex_id_wall != TEX_NONE:
                return distance
        return None

    def cast_2d_rays(self, pos: Vec2, angle: float, max_rays: int = 500) -> list[RayLine]:
        """Cast max_rays rays across the field of view and stop each at the first wall."""
        cfg = self.config
        px, py = pos
        forward = _normalize(*_direction(angle))
        half_fov = self.frame.fov / 2
        lx, ly = _direction(angle - half_fov)
        rx, ry = _direction(angle + half_fov)
        left = (px + lx * cfg.far_clip, py + ly * cfg.far_clip)
        right = (px + rx * cfg.far_clip, py + ry * cfg.far_clip)
        spacing = math.hypot(right[0] - left[0], right[1] - left[1]) / cfg.x_resolution
        spacing_dir = (forward[1], -forward[0])

        lines = []
        for ray in range(max_rays):
            offset = spacing * (ray * cfg.x_resolution // max_rays)
            end = (left[0] - spacing_dir[0] * offset, left[1] - spacing_dir[1] * offset)
            direction = _normalize(end[0] - px, end[1] - py)
            distance = self._wall_distance((px, py), direction)
            if distance is not None:
                end = (px + direction[0] * distance, py + direction[1] * distance)
            lines.append(RayLine((px, py), end, distance is not None))
        return lines