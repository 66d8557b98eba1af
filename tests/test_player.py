import math

import pytest

from spearcast.leveldata import CollisionMask, MapData
from spearcast.player import GameState, Player, PlayerAction, PlayerInput

START = (5.5, 5.5)


def _player():
    return Player(pos=START, rotation=0.0)


def _hold(*actions):
    return PlayerInput(held=frozenset(actions))


def test_default_rotation_faces_negative_y():
    assert Player().rotation == pytest.approx(math.radians(-90.0))


def test_forward_moves_along_facing():
    player = _player()
    player.update(1.0, _hold(PlayerAction.FORWARD), MapData())
    assert player.pos == pytest.approx((START[0] + player.walk_speed, START[1]))


def test_backward_moves_against_facing():
    player = _player()
    player.update(0.5, _hold(PlayerAction.BACKWARD), MapData())
    assert player.pos == pytest.approx((START[0] - player.walk_speed * 0.5, START[1]))


def test_sprint_uses_sprint_speed():
    player = _player()
    player.update(0.25, _hold(PlayerAction.FORWARD, PlayerAction.SPRINT), MapData())
    assert player.pos[0] - START[0] == pytest.approx(player.sprint_speed * 0.25)


def test_strafe_right_moves_perpendicular():
    player = _player()
    player.update(1.0, _hold(PlayerAction.STRAFE_RIGHT), MapData())
    assert player.pos == pytest.approx((START[0], START[1] + player.walk_speed))


def test_diagonal_movement_is_normalised():
    player = _player()
    player.update(1.0, _hold(PlayerAction.FORWARD, PlayerAction.STRAFE_LEFT), MapData())
    moved = math.hypot(player.pos[0] - START[0], player.pos[1] - START[1])
    assert moved == pytest.approx(player.walk_speed)


def test_wall_blocks_movement():
    level = MapData()
    for y in range(level.grid_height):
        level.get_node(6, y).collision_mask = CollisionMask.WALL
    player = _player()
    player.update(1.0, _hold(PlayerAction.FORWARD), level)
    assert player.pos == pytest.approx(START)


def test_solid_tiles_also_block():
    level = MapData()
    for y in range(level.grid_height):
        level.get_node(6, y).collision_mask = CollisionMask.SOLID
    player = _player()
    player.update(1.0, _hold(PlayerAction.FORWARD), level)
    assert player.pos == pytest.approx(START)


def test_no_input_keeps_position_and_rotation():
    player = _player()
    player.update(1.0, PlayerInput(), MapData())
    assert player.pos == START
    assert player.rotation == 0.0


@pytest.mark.parametrize("direction", [1.0, -1.0])
def test_pitch_is_clamped(direction):
    player = _player()
    player.update(1.0, PlayerInput(mouse_axis=(0.0, direction * 1e6)), MapData())
    assert player.pitch == direction * player.pitch_limit


def test_mouse_x_turns_player():
    player = _player()
    player.update(1.0, PlayerInput(mouse_axis=(100.0, 0.0)), MapData())
    assert player.rotation == pytest.approx(100.0 * player.look_speed)


def test_rotate_keys_turn_by_turn_speed():
    player = _player()
    player.update(1.0, _hold(PlayerAction.ROTATE_LEFT), MapData())
    assert player.rotation == pytest.approx(-player.turn_speed)
    player.update(1.0, _hold(PlayerAction.ROTATE_RIGHT), MapData())
    assert player.rotation == pytest.approx(0.0)


def test_game_state_player_moves_within_its_map():
    state = GameState()
    state.player.pos = START
    state.player.rotation = 0.0
    state.player.update(1.0, _hold(PlayerAction.FORWARD), state.map_data)
    assert state.player.pos[0] == pytest.approx(START[0] + state.player.walk_speed)