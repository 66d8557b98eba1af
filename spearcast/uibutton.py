"""Clickable sprite buttons."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

Vec2 = tuple[float, float]

OPACITY_DEFAULT = 1.0
OPACITY_HIGHLIGHT = 0.9
OPACITY_CLICK = 0.8


@dataclass
class Sprite:
    """Placement and appearance of a textured sprite."""

    pos: Vec2 = (0.0, 0.0)
    size: Vec2 = (1.0, 1.0)
    opacity: float = OPACITY_DEFAULT
    tex_layer: int = 0
    depth: float = 0.0


class UiButton:
    """A sprite that reacts to the mouse hovering and clicking over it."""

    def __init__(self, width: float = 1.0, height: float = 1.0) -> None:
        self.sprite = Sprite()
        self.width = width
        self.height = height
        self._callback: Optional[Callable[[], None]] = None

    def initialise(self, width: float, height: float) -> None:
        """Set the unscaled image size the button covers."""
        self.width = width
        self.height = height

    def set_click_callback(self, callback: Optional[Callable[[], None]]) -> None:
        self._callback = callback

    def mouse_over(self, mouse_pos: Vec2) -> bool:
        half_x = self.width * self.sprite.size[0] / 2
        half_y = self.height * self.sprite.size[1] / 2
        mx, my = mouse_pos
        px, py = self.sprite.pos
        return px - half_x < mx < px + half_x and py - half_y < my < py + half_y

    def clicked(self, mouse_pos: Vec2, click_release: bool) -> bool:
        return self.mouse_over(mouse_pos) and click_release

    def right_clicked(self, mouse_pos: Vec2, right_click_release: bool) -> bool:
        return self.mouse_over(mouse_pos) and right_click_release

    def update(
        self,
        mouse_pos: Vec2,
        click_hold: bool,
        right_click_hold: bool,
        click_release: bool,
    ) -> None:
        """Adjust opacity for hover/press and run the callback on a click release."""
        if not self.mouse_over(mouse_pos):
            self.sprite.opacity = OPACITY_DEFAULT
            return
        self.sprite.opacity = OPACITY_CLICK if click_hold or right_click_hold else OPACITY_HIGHLIGHT
        if click_release and self._callback is not None:
            self._callback()