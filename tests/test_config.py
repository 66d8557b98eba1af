from spearcast.config import RaycasterConfig


def test_defaults_match_engine_settings():
    config = RaycasterConfig()
    assert config.field_of_view == 75.0
    assert config.far_clip == 50.0
    assert (config.x_resolution, config.y_resolution) == (1920, 1080)
    assert config.ray_encounter_limit == 20
    assert config.scale_2d == 75.0
    assert config.highlight_corrective_pixels is False
    assert config.corrective_pixel_depth_tolerance == 0.01


def test_copy_is_equal_and_independent():
    config = RaycasterConfig(field_of_view=60.0, x_resolution=640)
    duplicate = config.copy()
    assert duplicate == config
    duplicate.x_resolution = 320
    assert config.x_resolution == 640