[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spearcast"
version = "0.1.0"
description = "Grid-based raycasting game core: tile maps, level files, DDA collision, software rendering and editor, menu and session logic"
requires-python = ">=3.10"
dependencies = []
keywords = ["raycaster", "dda", "game", "tilemap", "level-editor", "pseudo-3d"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: First Person Shooters",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["spearcast"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
