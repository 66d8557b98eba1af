"""Frame profiler table: per-category timings against a frame budget."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

Colour = tuple[int, int, int, int]

DEFAULT_FPS_TARGET = 60
DEFAULT_UNKNOWN_THRESHOLD = 0.166


@dataclass
class ProfileCategory:
    """A named timing with optional nested sub-timings."""

    name: str
    duration_ms: float
    children: list[ProfileCategory] = field(default_factory=list)


@dataclass(frozen=True)
class ProfileRow:
    """One line of the profiler table."""

    label: str
    duration_ms: float
    percentage: float
    colour: Colour
    depth: int = 0


def frame_budget_ms(fps_target: float) -> float:
    """Milliseconds available per frame at the target frame rate."""
    if fps_target <= 0:
        raise ValueError(f"fps target must be positive, got {fps_target}")
    return 1000.0 / fps_target


def budget_colour(fraction: float) -> Colour:
    """Colour a share of the frame budget: green when small, red when large."""
    red = int(min(max(100 * fraction, 0.0), 255.0))
    green = int(min(max(100 * (1 - fraction), 0.0), 255.0))
    return red, green, 0, 255


def _row(label: str, duration_ms: float, budget: float, depth: int) -> ProfileRow:
    fraction = duration_ms / budget
    return ProfileRow(label, duration_ms, fraction * 100, budget_colour(fraction), depth)


def _category_rows(
    category: ProfileCategory, budget: float, unknown_threshold: float, depth: int
) -> Iterator[ProfileRow]:
    yield _row(category.name, category.duration_ms, budget, depth)
    if not category.children:
        return
    for child in category.children:
        yield from _category_rows(child, budget, unknown_threshold, depth + 1)
    unknown = category.duration_ms - sum(child.duration_ms for child in category.children)
    if unknown > unknown_threshold:
        yield _row("Unknown", unknown, budget, depth + 1)


def build_rows(
    categories: Sequence[ProfileCategory],
    current_frame_ms: float,
    fps_target: float = DEFAULT_FPS_TARGET,
    unknown_threshold: float = DEFAULT_UNKNOWN_THRESHOLD,
) -> list[ProfileRow]:
    """Build the table rows: every category, untracked time, then the totals."""
    budget = frame_budget_ms(fps_target)
    rows: list[ProfileRow] = []
    for category in categories:
        rows.extend(_category_rows(category, budget, unknown_threshold, 0))
    total = sum(category.duration_ms for category in categories)
    rows.append(_row("Unknown", current_frame_ms - total, budget, 0))
    rows.append(_row("Totals", total, budget, 0))
    return rows