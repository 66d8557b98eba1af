"""Top-level game flow: the states, the running game session and the main menu."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto
from typing import Optional

from .leveldata import MapData
from .player import GameState, PlayerInput
from .uibutton import UiButton

Vec2 = tuple[float, float]

MENU_BUTTON_TOTAL = 2
MENU_BUTTON_OFFSET = 250
MENU_BUTTON_SCALE = 2.5
MENU_BUTTON_OPACITY = 0.75


class Flowstate(IntEnum):
    """Identifiers of the top-level states; THIS means stay in the current one."""

    THIS = -1
    MENU = 0
    PLAY = 1
    EDIT = 2


class DebugInputMode(IntEnum):
    """How much game input gets through while the debug overlay is shown."""

    DISABLED = 0
    KEYBOARD = 1
    FULL = 2


_DEBUG_INPUT_TEXT = {
    DebugInputMode.DISABLED: "Game Input: Disabled (F2)",
    DebugInputMode.KEYBOARD: "Game Input: Keyboard Only (F2)",
    DebugInputMode.FULL: "Game Input: Full (F2)",
}


def debug_input_mode_text(mode: int) -> str:
    """Return the menu bar label describing a debug input mode."""
    try:
        return _DEBUG_INPUT_TEXT[DebugInputMode(mode)]
    except ValueError:
        return "Game Input: Unknown (F2)"


def next_debug_input_mode(mode: int) -> DebugInputMode:
    """Cycle to the following debug input mode, wrapping around."""
    return DebugInputMode((int(mode) + 1) % len(DebugInputMode))


class SessionAction(Enum):
    TOGGLE_RAYCASTER = auto()
    TOGGLE_IMGUI = auto()
    TOGGLE_IMGUI_INPUT = auto()
    QUIT = auto()


@dataclass(frozen=True)
class SessionInput:
    """One frame of in-game input: session actions started or released, and player input."""

    started: Collection[SessionAction] = frozenset()
    released: Collection[SessionAction] = frozenset()
    player: PlayerInput = field(default_factory=PlayerInput)


class GameSession:
    """A running game: the game state plus the debug overlay and view toggles."""

    def __init__(self, map_data: Optional[MapData] = None) -> None:
        self.state = GameState(map_data=MapData() if map_data is None else map_data)
        start_x, start_y = self.state.map_data.player_start
        self.state.player.pos = (start_x + 0.5, start_y + 0.5)
        self.debug_input_mode = DebugInputMode.KEYBOARD
        self.imgui_enabled = False
        self.menu_bar_label: Optional[str] = None
        self.relative_mouse = True
        self.view_3d = False

    def _toggle_imgui(self) -> None:
        self.imgui_enabled = not self.imgui_enabled
        self.menu_bar_label = debug_input_mode_text(self.debug_input_mode)
        if self.imgui_enabled:
            self.relative_mouse = self.debug_input_mode is DebugInputMode.FULL
        else:
            self.relative_mouse = True

    def _cycle_debug_input(self) -> None:
        self.debug_input_mode = next_debug_input_mode(self.debug_input_mode)
        self.relative_mouse = self.debug_input_mode is DebugInputMode.FULL
        self.menu_bar_label = debug_input_mode_text(self.debug_input_mode)

    def update(self, delta_time: float, session_input: SessionInput) -> Flowstate:
        """Advance one frame; return the state to switch to, or Flowstate.THIS."""
        self.state.delta_time = delta_time
        self.state.game_time += delta_time

        if SessionAction.QUIT in session_input.released:
            return Flowstate.MENU

        if SessionAction.TOGGLE_IMGUI in session_input.started:
            self._toggle_imgui()

        started = session_input.started
        player_input = session_input.player
        if self.imgui_enabled:
            if SessionAction.TOGGLE_IMGUI_INPUT in started:
                self._cycle_debug_input()
            if self.debug_input_mode is DebugInputMode.DISABLED:
                started = frozenset()
                player_input = PlayerInput()
            elif self.debug_input_mode is DebugInputMode.KEYBOARD:
                player_input = PlayerInput(held=player_input.held)

        if SessionAction.TOGGLE_RAYCASTER in started:
            self.view_3d = not self.view_3d

        self.state.player.update(delta_time, player_input, self.state.map_data)
        return Flowstate.THIS


class MenuState:
    """Main menu with an editor button on the left and a play button on the right."""

    def __init__(self, window_size: tuple[int, int] = (1920, 1080), texture_size: float = 64.0) -> None:
        self.shutdown_requested = False
        width, height = window_size
        centre_x, centre_y = width // 2, height // 2
        self.buttons: list[UiButton] = []
        for layer, x in enumerate((centre_x - MENU_BUTTON_OFFSET, centre_x + MENU_BUTTON_OFFSET)):
            button = UiButton(texture_size, texture_size)
            button.sprite.tex_layer = layer
            button.sprite.pos = (float(x), float(centre_y))
            button.sprite.size = (MENU_BUTTON_SCALE, MENU_BUTTON_SCALE)
            button.sprite.opacity = MENU_BUTTON_OPACITY
            self.buttons.append(button)

    def update(
        self,
        mouse_pos: Vec2,
        click_hold: bool,
        click_release: bool,
        quit_released: bool,
    ) -> Flowstate:
        """Advance one frame; return EDIT or PLAY when a button is clicked, else THIS."""
        if quit_released:
            self.shutdown_requested = True

        for button in self.buttons:
            button.update(mouse_pos, click_hold, False, click_release)

        editor_button, play_button = self.buttons
        if editor_button.clicked(mouse_pos, click_release):
            return Flowstate.EDIT
        if play_button.clicked(mouse_pos, click_release):
            return Flowstate.PLAY
        return Flowstate.THIS