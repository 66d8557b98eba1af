import pytest

from spearcast.profiler_table import (
    ProfileCategory,
    ProfileRow,
    budget_colour,
    build_rows,
    frame_budget_ms,
)


def test_frame_budget():
    assert frame_budget_ms(60) == pytest.approx(1000 / 60)
    assert frame_budget_ms(120) * 2 == pytest.approx(frame_budget_ms(60))


@pytest.mark.parametrize("fps", [0, -5])
def test_frame_budget_rejects_non_positive(fps):
    with pytest.raises(ValueError):
        frame_budget_ms(fps)


def test_budget_colour_ends():
    assert budget_colour(0.0) == (0, 100, 0, 255)
    assert budget_colour(1.0) == (100, 0, 0, 255)


def test_budget_colour_clamps():
    red, green, blue, alpha = budget_colour(10.0)
    assert red == 255 and green == 0
    red, green, _, _ = budget_colour(-10.0)
    assert red == 0 and green == 255
    assert blue == 0 and alpha == 255


def test_rows_layout_with_children():
    categories = [
        ProfileCategory("Update", 5.0, [ProfileCategory("Physics", 2.0)]),
        ProfileCategory("Render", 3.0),
    ]
    rows = build_rows(categories, 10.0, fps_target=50, unknown_threshold=0.1)
    assert [(r.label, r.depth) for r in rows] == [
        ("Update", 0),
        ("Physics", 1),
        ("Unknown", 1),
        ("Render", 0),
        ("Unknown", 0),
        ("Totals", 0),
    ]
    assert rows[2].duration_ms == pytest.approx(3.0)
    assert rows[4].duration_ms == pytest.approx(2.0)
    assert rows[5].duration_ms == pytest.approx(8.0)


def test_row_percentages_follow_budget():
    rows = build_rows([ProfileCategory("Render", 4.0)], 4.0, fps_target=50)
    budget = frame_budget_ms(50)
    render = rows[0]
    assert render.percentage == pytest.approx(4.0 / budget * 100)
    assert render.colour == budget_colour(4.0 / budget)


def test_child_unknown_hidden_below_threshold():
    categories = [ProfileCategory("Update", 2.05, [ProfileCategory("AI", 2.0)])]
    rows = build_rows(categories, 2.05, unknown_threshold=0.166)
    labels = [r.label for r in rows]
    assert labels == ["Update", "AI", "Unknown", "Totals"]
    assert rows[2].depth == 0


def test_empty_categories_give_unknown_and_totals():
    rows = build_rows([], 16.0)
    assert [r.label for r in rows] == ["Unknown", "Totals"]
    assert rows[0].duration_ms == 16.0
    assert rows[1].duration_ms == 0
    assert all(isinstance(r, ProfileRow) for r in rows)


def test_rows_reject_bad_fps():
    with pytest.raises(ValueError):
        build_rows([ProfileCategory("X", 1.0)], 1.0, fps_target=0)