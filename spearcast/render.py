"""Software rendering of the 3D view: textured floors, ceilings and walls."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .leveldata import TEX_NONE, DrawFlags, GridNode
from .view import Raycaster

Vec2 = tuple[float, float]
Rgba = tuple[int, int, int, int]

_SEAM_CORRECTION_LIMIT = 10


@dataclass(frozen=True)
class Texture:
    """An RGBA image stored row by row."""

    width: int
    height: int
    pixels: Sequence[Rgba]

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"texture size must be positive, got {self.width}x{self.height}")
        if len(self.pixels) != self.width * self.height:
            raise ValueError(
                f"expected {self.width * self.height} pixels, got {len(self.pixels)}"
            )

    def pixel(self, x: int, y: int) -> Rgba:
        """Return the (r, g, b, a) colour at (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} texture")
        return self.pixels[y * self.width + x]


class _RayHit(IntEnum):
    NONE = 0
    FRONT = 1
    SIDE = 2


def _pack(r: int, g: int, b: int, a: int) -> int:
    return r | (g << 8) | (b << 16) | (a << 24)


_HIGHLIGHT = _pack(255, 0, 0, 255)


def _normalize(x: float, y: float) -> Vec2:
    length = math.hypot(x, y)
    if length == 0:
        return 0.0, 0.0
    return x / length, y / length


def _projection(vector: Vec2, onto: Vec2) -> Vec2:
    denom = onto[0] * onto[0] + onto[1] * onto[1]
    if denom == 0:
        return 0.0, 0.0
    scale = (vector[0] * onto[0] + vector[1] * onto[1]) / denom
    return onto[0] * scale, onto[1] * scale


def _wrap_texel(value: int, size: int) -> int:
    if value < 0:
        value += size
    return min(max(value, 0), size - 1)


def render_planes(raycaster: Raycaster, textures: Sequence[Texture]) -> None:
    """Draw floor and ceiling textures into the raycaster buffers, nearest layer first."""
    cfg = raycaster.config
    frame = raycaster.frame
    map_data = raycaster.map_data
    xres, yres = cfg.x_resolution, cfg.y_resolution
    half_res = yres // 2
    vx, vy = frame.view_pos
    min_x, min_y = frame.fov_min_angle
    max_x, max_y = frame.fov_max_angle
    fx, fy = frame.view_forward
    sideways = (-fy, fx)
    rgba, depth = raycaster.rgba, raycaster.depth

    for y in range(yres):
        is_floor = y < yres / 2 + frame.view_pitch
        if is_floor:
            ray_pitch = int((yres - y - 1) - half_res + frame.view_pitch)
        else:
            ray_pitch = int((y - half_res) - frame.view_pitch)
        if ray_pitch == 0:
            continue
        base_distance = frame.view_height / ray_pitch
        # Rows whose floor would lie behind the camera are skipped.
        if base_distance <= 0:
            continue

        layers = []
        for distance in (base_distance, base_distance * 2):
            offset = (distance * min_x, distance * min_y)
            along = _projection(offset, sideways)
            ray_depth = math.hypot(offset[0] - along[0], offset[1] - along[1]) / cfg.far_clip
            step = ((max_x - min_x) * distance / xres, (max_y - min_y) * distance / xres)
            layers.append((vx + offset[0], vy + offset[1], step, ray_depth))

        row_index = y * xres
        for x in range(xres):
            for layer, (start_x, start_y, (step_x, step_y), ray_depth) in enumerate(layers):
                px = start_x + step_x * x
                py = start_y + step_y * x
                cell_x, cell_y = int(px), int(py)
                node = map_data.get_node(cell_x, cell_y)
                if node is None:
                    continue
                tex_id = node.tex_id_floor[layer] if is_floor else node.tex_id_roof[layer]
                if tex_id == TEX_NONE:
                    continue
                texture = textures[tex_id]
                tex_x = _wrap_texel(int((px - cell_x) * texture.width), texture.width)
                tex_y = _wrap_texel(int((py - cell_y) * texture.height), texture.height)
                index = row_index + x
                rgba[index] |= _pack(*texture.pixel(tex_x, tex_y))
                depth[index] = ray_depth
                break


def _wall_exists(node: GridNode) -> bool:
    return (
        node.tex_id_wall != TEX_NONE
        or (node.extend_up and node.tex_id_roof[0] != TEX_NONE)
        or (node.extend_down and node.tex_id_floor[0] != TEX_NONE)
    )


def _face_visible(node: GridNode, hit: _RayHit, direction: Vec2) -> bool:
    flags = node.draw_flags
    if flags == DrawFlags.DEFAULT:
        return True
    dx, dy = direction
    if hit is _RayHit.SIDE:
        if dx > 0 and not flags & DrawFlags.W:
            return False
        if dx < 0 and not flags & DrawFlags.E:
            return False
    else:
        if dy > 0 and not flags & DrawFlags.N:
            return False
        if dy < 0 and not flags & DrawFlags.S:
            return False
    return True


def _pick_texture(textures: Sequence[Texture], *tex_ids: int) -> Optional[Texture]:
    for tex_id in tex_ids:
        if tex_id != TEX_NONE:
            return textures[tex_id]
    return None


def _draw_strip(
    raycaster: Raycaster,
    texture: Texture,
    screen_x: int,
    tex_x: int,
    bottom: float,
    top: float,
    render_depth: float,
) -> None:
    xres, yres = raycaster.resolution()
    rgba, depth = raycaster.rgba, raycaster.depth
    low, high = int(bottom), int(top)
    span = high - low
    column = min(tex_x, texture.width - 1)
    last_row = texture.height - 1
    for screen_y in range(max(0, low), min(high, yres - 1) + 1):
        index = screen_x + screen_y * xres
        if render_depth >= depth[index]:
            continue
        fraction = (screen_y - low) / span if span else 0.0
        tex_y = last_row - int(fraction * last_row)
        r, g, b, a = texture.pixel(column, min(max(tex_y, 0), last_row))
        if not a:
            continue
        rgba[index] = _pack(r, g, b, a)
        depth[index] = render_depth


def _fix_seams(
    raycaster: Raycaster,
    screen_x: int,
    y_start: int,
    y_step: int,
    corrective: int,
    render_depth: float,
) -> None:
    """Fill small gaps between an extended wall and the floor/ceiling it meets."""
    cfg = raycaster.config
    xres, yres = cfg.x_resolution, cfg.y_resolution
    rgba, depth = raycaster.rgba, raycaster.depth
    tolerance = cfg.corrective_pixel_depth_tolerance

    y_start += y_step
    y_end = y_start + _SEAM_CORRECTION_LIMIT * y_step
    indices = [screen_x + y * xres for y in range(y_start, y_end, y_step) if 0 <= y < yres]

    def near(index: int) -> bool:
        return abs(depth[index] - render_depth) < tolerance

    if not any(rgba[index] and near(index) for index in indices):
        return
    for index in indices:
        if rgba[index] and near(index):
            break
        if cfg.highlight_corrective_pixels:
            rgba[index] |= _HIGHLIGHT
        else:
            rgba[index] = corrective
        depth[index] = render_depth


def _draw_wall(
    raycaster: Raycaster,
    textures: Sequence[Texture],
    screen_x: int,
    node: GridNode,
    hit: _RayHit,
    intersection: Vec2,
    cell: tuple[int, int],
    direction: Vec2,
) -> None:
    cfg = raycaster.config
    frame = raycaster.frame
    yres = cfg.y_resolution
    vx, vy = frame.view_pos
    fx, fy = frame.view_forward
    ix, iy = intersection

    # Distance along the view direction, which avoids fish-eye distortion.
    depth = abs((ix - vx) * fx + (iy - vy) * fy)
    if not (depth > 0 and math.isfinite(depth)):
        return
    render_depth = depth / cfg.far_clip
    half_height = (1 + (yres // 2) / depth) * frame.fov_wall_multiplier
    full_height = half_height * 2
    mid = int(frame.view_pitch + yres // 2)
    bottom, top = mid - half_height, mid + half_height

    visible = _face_visible(node, hit, direction)
    offset_in_cell = ix - cell[0] if hit is _RayHit.FRONT else iy - cell[1]

    def column_of(texture: Texture) -> int:
        value = int(offset_in_cell * (texture.width - 1))
        return value + texture.width if value < 0 else value

    texture = _pick_texture(textures, node.tex_id_wall)
    tex_x = column_of(texture) if texture is not None else -1
    rendering_up = rendering_down = 0

    while True:
        if visible and texture is not None:
            _draw_strip(raycaster, texture, screen_x, tex_x, bottom, top, render_depth)

        extend_up = node.extend_up > rendering_up
        rendering_up += 1
        if extend_up:
            bottom = top + 1
            top = bottom + full_height
            texture = _pick_texture(textures, node.tex_id_roof[0], node.tex_id_wall)
            if tex_x == -1 and texture is not None:
                tex_x = column_of(texture)
            if texture is not None and rendering_up == 1 and node.tex_id_wall == TEX_NONE:
                seam = texture.pixel(min(tex_x, texture.width - 1), texture.height - 1)
                _fix_seams(raycaster, screen_x, int(bottom), -1, _pack(*seam), render_depth)
            continue

        extend_down = node.extend_down > rendering_down
        rendering_down += 1
        if not extend_down:
            return
        if rendering_down == 1:
            bottom, top = mid - half_height, mid + half_height
        top = bottom - 1
        bottom = top - full_height
        texture = _pick_texture(textures, node.tex_id_floor[0], node.tex_id_wall)
        if tex_x == -1 and texture is not None:
            tex_x = column_of(texture)
        if texture is not None and rendering_down == 1 and node.tex_id_wall == TEX_NONE:
            seam = texture.pixel(min(tex_x, texture.width - 1), 0)
            _fix_seams(raycaster, screen_x, int(top), 1, _pack(*seam), render_depth)


def _cast_column(raycaster: Raycaster, textures: Sequence[Texture], screen_x: int) -> None:
    cfg = raycaster.config
    frame = raycaster.frame
    map_data = raycaster.map_data
    sx, sy = frame.view_pos
    left_x, left_y = frame.screen_plane_left
    spacing_x, spacing_y = frame.ray_spacing_dir
    offset = frame.ray_spacing_length * screen_x
    dx, dy = _normalize(left_x - spacing_x * offset - sx, left_y - spacing_y * offset - sy)

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

    encounters = 0
    distance = 0.0
    while encounters < cfg.ray_encounter_limit and distance < cfg.far_clip:
        hit = _RayHit.NONE
        node: Optional[GridNode] = None
        while hit is _RayHit.NONE and distance < cfg.far_clip:
            if length_x < length_y:
                map_x += step_x
                distance = length_x
                length_x += step_size_x
                side = True
            else:
                map_y += step_y
                distance = length_y
                length_y += step_size_y
                side = False
            candidate = map_data.get_node(map_x, map_y)
            if candidate is not None:
                node = candidate
                if _wall_exists(candidate):
                    hit = _RayHit.SIDE if side else _RayHit.FRONT
                    encounters += 1

        if hit is not _RayHit.NONE and node is not None:
            intersection = (sx + dx * distance, sy + dy * distance)
            _draw_wall(raycaster, textures, screen_x, node, hit, intersection, (map_x, map_y), (dx, dy))


def render_walls(raycaster: Raycaster, textures: Sequence[Texture]) -> None:
    """Cast one ray per screen column and draw every wall it meets, depth-tested."""
    for screen_x in range(raycaster.config.x_resolution):
        _cast_column(raycaster, textures, screen_x)


def render_3d(
    raycaster: Raycaster,
    textures: Sequence[Texture],
    pos: Vec2,
    pitch: float,
    angle: float,
) -> tuple[list[int], list[float]]:
    """Render a full frame and return its colour and depth buffers; the raycaster is then cleared."""
    raycaster.prepare_frame(pos, pitch, angle)
    render_planes(raycaster, textures)
    render_walls(raycaster, textures)
    image = (list(raycaster.rgba), list(raycaster.depth))
    raycaster.clear_buffers()
    return image