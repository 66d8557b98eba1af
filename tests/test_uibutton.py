import pytest

from spearcast.uibutton import UiButton

CENTRE = (100.0, 100.0)


@pytest.fixture
def button():
    widget = UiButton(64, 64)
    widget.sprite.pos = CENTRE
    return widget


def test_mouse_inside_is_over(button):
    assert button.mouse_over((110.0, 90.0)) is True


@pytest.mark.parametrize("mouse", [(132.0, 100.0), (68.0, 100.0), (100.0, 132.0), (200.0, 100.0)])
def test_mouse_on_or_past_edge_is_not_over(button, mouse):
    assert button.mouse_over(mouse) is False


def test_sprite_size_scales_hit_area(button):
    button.sprite.size = (2.0, 2.0)
    assert button.mouse_over((150.0, 100.0)) is True


def test_initialise_changes_hit_area(button):
    button.initialise(300, 300)
    assert button.mouse_over((200.0, 100.0)) is True


def test_clicked_needs_hover_and_release(button):
    assert button.clicked(CENTRE, True) is True
    assert button.clicked(CENTRE, False) is False
    assert button.clicked((0.0, 0.0), True) is False


def test_right_clicked_needs_hover_and_release(button):
    assert button.right_clicked(CENTRE, True) is True
    assert button.right_clicked((0.0, 0.0), True) is False


def test_update_opacity_states(button):
    button.update(CENTRE, True, False, False)
    assert button.sprite.opacity == 0.8
    button.update(CENTRE, False, True, False)
    assert button.sprite.opacity == 0.8
    button.update(CENTRE, False, False, False)
    assert button.sprite.opacity == 0.9
    button.update((0.0, 0.0), True, False, False)
    assert button.sprite.opacity == 1.0


def test_update_runs_callback_on_release_over_button(button):
    calls = []
    button.set_click_callback(lambda: calls.append("click"))
    button.update(CENTRE, False, False, True)
    button.update((0.0, 0.0), False, False, True)
    button.update(CENTRE, False, False, False)
    assert calls == ["click"]


def test_update_without_callback_still_highlights(button):
    button.update(CENTRE, False, False, True)
    assert button.sprite.opacity == 0.9