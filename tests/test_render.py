import pytest

from spearcast.config import RaycasterConfig
from spearcast.leveldata import DrawFlags, MapData
from spearcast.render import Texture, render_3d, render_planes, render_walls
from spearcast.view import Raycaster

COLOUR = (10, 20, 30, 255)
FAR_CLIP = 10.0
POS = (5.5, 5.5)


def solid(colour=COLOUR):
    return Texture(2, 2, [colour] * 4)


def unpack(value):
    return (value & 0xFF, (value >> 8) & 0xFF, (value >> 16) & 0xFF, (value >> 24) & 0xFF)


def make_raycaster(map_data, xres=8, yres=6):
    config = RaycasterConfig(x_resolution=xres, y_resolution=yres, far_clip=FAR_CLIP)
    return Raycaster(map_data, config)


def wall_map(**attrs):
    map_data = MapData()
    for y in range(map_data.grid_height):
        node = map_data.get_node(8, y)
        node.tex_id_wall = 0
        for name, value in attrs.items():
            setattr(node, name, value)
    return map_data


def row(raycaster, y):
    xres = raycaster.config.x_resolution
    return raycaster.rgba[y * xres:(y + 1) * xres]


def test_texture_pixel_lookup():
    texture = Texture(2, 1, [(1, 2, 3, 4), (5, 6, 7, 8)])
    assert texture.pixel(1, 0) == (5, 6, 7, 8)
    assert texture.pixel(0, 0) == (1, 2, 3, 4)


def test_texture_pixel_out_of_range():
    with pytest.raises(IndexError):
        solid().pixel(2, 0)


def test_texture_wrong_pixel_count():
    with pytest.raises(ValueError):
        Texture(2, 2, [COLOUR] * 3)


def test_floor_rows_are_textured():
    map_data = MapData()
    for node in map_data.nodes:
        node.tex_id_floor[0] = 0
    rc = make_raycaster(map_data)
    rc.prepare_frame(POS, 0.0, 0.0)
    render_planes(rc, [solid()])
    for y in (0, 1):
        assert all(unpack(value) == COLOUR for value in row(rc, y))
    for y in (2, 3, 4, 5):
        assert all(value == 0 for value in row(rc, y))


def test_floor_depth_grows_towards_horizon():
    map_data = MapData()
    for node in map_data.nodes:
        node.tex_id_floor[0] = 0
    rc = make_raycaster(map_data)
    rc.prepare_frame(POS, 0.0, 0.0)
    render_planes(rc, [solid()])
    xres = rc.config.x_resolution
    assert rc.depth[0] < rc.depth[xres] < FAR_CLIP


def test_roof_rows_are_textured():
    map_data = MapData()
    for node in map_data.nodes:
        node.tex_id_roof[0] = 0
    rc = make_raycaster(map_data)
    rc.prepare_frame(POS, 0.0, 0.0)
    render_planes(rc, [solid()])
    for y in (4, 5):
        assert all(unpack(value) == COLOUR for value in row(rc, y))
    for y in (0, 1, 2, 3):
        assert all(value == 0 for value in row(rc, y))


def test_wall_drawn_in_every_column_at_perpendicular_depth():
    rc = make_raycaster(wall_map())
    rc.prepare_frame(POS, 0.0, 0.0)
    render_walls(rc, [solid()])
    assert all(unpack(value) == COLOUR for value in row(rc, 3))
    drawn = [d for value, d in zip(rc.rgba, rc.depth) if value]
    assert drawn
    assert all(d == pytest.approx(2.5 / FAR_CLIP) for d in drawn)


def test_draw_flags_show_listed_face():
    rc = make_raycaster(wall_map(draw_flags=int(DrawFlags.W)))
    rc.prepare_frame(POS, 0.0, 0.0)
    render_walls(rc, [solid()])
    assert any(unpack(value) == COLOUR for value in rc.rgba)


def test_transparent_wall_pixels_are_skipped():
    rc = make_raycaster(wall_map())
    rc.prepare_frame(POS, 0.0, 0.0)
    render_walls(rc, [solid((1, 2, 3, 0))])
    assert all(value == 0 for value in rc.rgba)


def test_nearer_existing_depth_wins():
    rc = make_raycaster(wall_map())
    rc.prepare_frame(POS, 0.0, 0.0)
    rc.depth = [0.0] * len(rc.depth)
    render_walls(rc, [solid()])
    assert all(value == 0 for value in rc.rgba)


def test_extend_up_draws_more_wall():
    plain = make_raycaster(wall_map(), yres=20)
    plain.prepare_frame(POS, 0.0, 0.0)
    render_walls(plain, [solid()])
    raised = make_raycaster(wall_map(extend_up=1), yres=20)
    raised.prepare_frame(POS, 0.0, 0.0)
    render_walls(raised, [solid()])
    plain_count = sum(1 for value in plain.rgba if value)
    raised_count = sum(1 for value in raised.rgba if value)
    assert raised_count > plain_count


def test_render_3d_returns_image_and_clears_buffers():
    map_data = wall_map()
    for node in map_data.nodes:
        node.tex_id_floor[0] = 0
    rc = make_raycaster(map_data)
    rgba, depth = render_3d(rc, [solid()], POS, 0.0, 0.0)
    assert len(rgba) == len(depth) == 8 * 6
    assert any(unpack(value) == COLOUR for value in rgba)
    assert any(d < FAR_CLIP for d in depth)
    assert all(value == 0 for value in rc.rgba)
    assert all(d == FAR_CLIP for d in rc.depth)