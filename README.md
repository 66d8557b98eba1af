# spearcast

The core of a grid-based raycasting game. It covers tile maps, level files,
DDA collision, a software renderer for walls, floors and ceilings, and the
state logic of the level editor, the main menu and a running game session.
Nothing in it needs a window, a GPU or an input library. You pass each
frame's input in and read the results back out.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `spearcast.leveldata` holds the map types: `GridNode` (one tile),
  `EditorMapData` (a resizable map up to 40x40) and `MapData` (a tightly
  packed runtime map). It also defines the `DrawFlags` and `CollisionMask`
  flags. `MapData.collision_search_dda(start, trajectory, mask)` walks the
  grid and always returns a `DdaHit`. The hit is truthy when a tile matching
  the mask was found. It carries the hit `position` (or the trajectory's end
  if nothing was hit) and `vertical`, which tells whether the last step
  crossed a horizontal grid line.
- `spearcast.levelfile` reads and writes level files:
  - `editor_save_level(path, map_data)` writes an editor map.
  - `editor_load_level(path, map_data)` clears an editor map, fills it from
    a file and returns it.
  - `load_level(path)` returns a `MapData`.
  - `level_path(name, directory)` builds `<directory>/<name>.dat`.

  Malformed files, and files whose grid is larger than 40x40, raise
  `LevelFileError`, which is a `ValueError`.
- `spearcast.config` defines `RaycasterConfig`. It holds the field of view,
  the far clip distance, the internal resolution, the ray encounter limit,
  the top-down scale and the seam-correction debug settings.
- `spearcast.uibutton` provides `UiButton` and its `Sprite`. A button tests
  whether the mouse is over it, detects clicks and right clicks, and sets its
  opacity for hover and press. It can run a click callback.
- `spearcast.player` defines `Player`, `PlayerInput`, `PlayerAction` and
  `GameState`. `Player.update` handles walking, sprinting, strafing, mouse
  look, pitch limits and turning, and checks collisions against a `MapData`.
- `spearcast.view` provides `Raycaster`. It holds the map, the config, the
  per-frame `FrameData` and the colour and depth buffers (`rgba`, `depth`).
  - `apply_config` clamps the field of view to 35–95 degrees.
  - `fov_wall_multiplier` interpolates the wall-height correction for a
    field of view.
  - `prepare_frame` computes the view data for a camera.
  - `cast_2d_rays` returns `RayLine`s for a top-down view.
- `spearcast.render` draws into a raycaster's buffers from a sequence of
  `Texture` objects, which are RGBA pixels stored row by row. The functions
  are `render_planes`, `render_walls` and `render_3d`. `render_3d` prepares
  the frame, draws it, returns copies of the colour and depth buffers and
  then clears the raycaster. Each colour is packed as
  `r | g << 8 | b << 16 | a << 24`, and each depth is a fraction of the far
  clip.
- `spearcast.editor` provides `Editor`, the level editor as an object. It is
  driven once per frame by `Editor.update(delta_time, EditorInput(...))`,
  which takes `EditorAction`s that were started, held or released, plus the
  mouse position and wheel. `update` returns `True` when the editor asks to
  quit. The editor has the modes in `EditorMode` (`mode_text` names them), a
  camera with scroll and zoom, map resizing, and save and load with a
  three-second save cooldown.
- `spearcast.flowstate` holds the top-level states:
  - `Flowstate`, with `THIS` meaning "stay".
  - `GameSession`, which tracks game time, the debug overlay and its
    `DebugInputMode`, and the 2D/3D view toggle, and updates the player.
  - `MenuState`, which has an editor button and a play button.
- `spearcast.profiler_table` builds frame-timing table rows (`ProfileRow`)
  from nested `ProfileCategory` timings with `build_rows`. The table ends
  with an untracked-time row and a totals row, and each row gets a colour
  from `budget_colour`.

## Example

```python
from spearcast.config import RaycasterConfig
from spearcast.leveldata import CollisionMask, EditorMapData
from spearcast.levelfile import editor_save_level, load_level
from spearcast.render import Texture, render_3d
from spearcast.view import Raycaster

editor_map = EditorMapData()
editor_map.set_size(8, 8)
wall = editor_map.get_node(3, 3)
wall.tex_id_wall = 0
wall.collision_mask = CollisionMask.WALL
editor_save_level("level.dat", editor_map)

game_map = load_level("level.dat")
hit = game_map.collision_search_dda((1.5, 3.5), (5.0, 0.0), CollisionMask.WALL)
if hit:
    print(hit.position, hit.vertical)

raycaster = Raycaster(game_map, RaycasterConfig(x_resolution=64, y_resolution=48))
textures = [Texture(2, 2, [(200, 50, 50, 255)] * 4)]
rgba, depth = render_3d(raycaster, textures, pos=(1.5, 3.5), pitch=0.0, angle=0.0)
```

## What it does not do

The package does not open a window, display anything, play audio or read
keyboard and mouse devices. It also does not load textures from image files:
you build `Texture` objects from pixel data yourself. The renderer works on
the CPU only, and only fills the colour and depth buffers, so showing them is
up to the caller. The editor and the menu hold state and logic but draw
nothing. The profiler table only arranges timings that you supply and does no
measuring itself. There is no command-line program.