"""Test grid pathfinding around the base."""
import numpy as np
import pytest
from minibattles.base import Base
from minibattles.pathfinder import Pathfinder


def make_pathfinder(gate_width: float = 40) -> Pathfinder:
    """Default 600x400 arena with the base in the middle."""
    base = Base((300, 200), half_width=100, half_height=75, wall_thickness=10,
                gate_width=gate_width)
    return Pathfinder(base, 600, 400, cell_size=10)


def crossings_x(path, start, y_line):
    """Every x where the walked path crosses the horizontal line y_line."""
    xs = []
    prev = start
    for wp in path:
        if (prev[1] - y_line) * (wp[1] - y_line) <= 0 and prev[1] != wp[1]:
            t = (y_line - prev[1]) / (wp[1] - prev[1])
            xs.append(prev[0] + (wp[0] - prev[0]) * t)
        prev = wp
    return xs


def test_grid_marks_wall_cells():
    pf = make_pathfinder()
    assert pf.walkable.shape == (60, 40)
    assert not pf.walkable[20, 20]   # left wall
    assert not pf.walkable[30, 12]   # top wall
    assert not pf.walkable[25, 27]   # bottom-left segment
    assert pf.walkable[30, 20]       # courtyard
    assert pf.walkable[29, 27]       # gate
    assert pf.walkable[19, 20]       # just outside the left wall


def test_out_of_bounds_returns_direct_target():
    pf = make_pathfinder()
    assert pf.compute_path((-5, 10), (100, 100)) == [(100, 100)]
    assert pf.compute_path((10, 10), (700, 10)) == [(700, 10)]


def test_zero_length_path():
    pf = make_pathfinder()
    assert pf.compute_path((50, 50), (50, 50)) == [(50, 50)]


def test_clear_line_is_single_waypoint():
    pf = make_pathfinder()
    assert pf.compute_path((50, 50), (123.4, 321.7)) == [(123.4, 321.7)]


def test_path_into_base_goes_through_gate():
    """From above the base to its centre the path must enter via the gate."""
    pf = make_pathfinder()
    start, center = (300, 30), (300, 200)
    path = pf.compute_path(start, center)

    assert path[-1] == center
    # The bottom wall sits at y 265..275; crossing it anywhere but the gate is a bug
    under_base = [x for x in crossings_x(path, start, 270) if 200 <= x <= 400]
    assert under_base
    assert all(280 - pf.cell_size <= x <= 320 + pf.cell_size for x in under_base)


def test_path_out_of_base_goes_through_gate():
    pf = make_pathfinder()
    start, goal = (300, 200), (300, 30)
    path = pf.compute_path(start, goal)
    assert path[-1] == goal
    # The bottom wall sits at y 265..275; crossing it anywhere but the gate is a bug
    under_base = [x for x in crossings_x(path, start, 270) if 200 <= x <= 400]
    assert under_base
    assert all(280 - pf.cell_size <= x <= 320 + pf.cell_size for x in under_base)


def test_gate_position_is_reachable():
    pf = make_pathfinder()
    gate = pf.base.gate_position()
    assert pf.compute_path((100, 350), gate)[-1] == gate
    assert pf.compute_path(gate, (300, 200))[-1] == (300, 200)


def test_simplified_path_is_short_and_clear():
    """Smoothing never adds points and every leg stays on walkable cells."""
    pf = make_pathfinder()
    start, goal = (300, 30), (300, 200)
    cells = pf.cell_path(start, goal)
    path = pf.compute_path(start, goal)

    assert cells is not None
    assert len(path) <= len(cells)
    prev = start
    for wp in path:
        assert pf.has_line_of_sight(prev, wp)
        prev = wp


def test_start_inside_wall_still_routes():
    pf = make_pathfinder()
    before = pf.walkable.copy()
    path = pf.compute_path((205, 200), (100, 200))
    assert path[-1] == (100, 200)
    assert np.array_equal(pf.walkable, before)


def test_grid_is_read_only():
    pf = make_pathfinder()
    with pytest.raises(ValueError):
        pf.walkable[0, 0] = False


def test_sealed_base_falls_back_to_gate_waypoints():
    """With no gate there is no route, so the gate points are used as hints."""
    pf = make_pathfinder(gate_width=0)
    assert pf.cell_path((300, 200), (50, 50)) is None
    assert pf.compute_path((300, 200), (50, 50)) == [(300, 290), (50, 50)]
    assert pf.compute_path((50, 50), (300, 200)) == [(300, 260), (300, 200)]


def test_paths_are_deterministic():
    pf = make_pathfinder()
    assert pf.compute_path((20, 380), (330, 180)) == pf.compute_path((20, 380), (330, 180))
