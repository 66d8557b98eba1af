"""Raycaster settings."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass


@dataclass
class RaycasterConfig:
    """Tunable settings for the raycaster."""

    field_of_view: float = 75.0
    far_clip: float = 50.0
    x_resolution: int = 1920
    y_resolution: int = 1080
    # How many wall encounters a ray may pass (tall walls behind short walls).
    ray_encounter_limit: int = 20
    # Top-down view only: pixels per tile.
    scale_2d: float = 75.0
    # Paint seam-fixing pixels bright red instead of cloning neighbours.
    highlight_corrective_pixels: bool = False
    corrective_pixel_depth_tolerance: float = 0.01

    def copy(self) -> RaycasterConfig:
        return dataclasses.replace(self)