import heapq
import itertools
import math
from typing import Dict, Iterator, List, Optional, Tuple
import numpy as np
from .base import Base
from .geometry import distance_2d, rects_collide
from .model import Position, WallSegment

Cell = Tuple[int, int]

# 4-connected moves, uniform cost
STEPS = ((1, 0), (-1, 0), (0, 1), (0, -1))

def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])

class Pathfinder:
    """Grid A* over the base walls, with line-of-sight path smoothing.

    ``walkable[x][y]`` is False for every cell a wall rectangle overlaps.
    The grid is built once and made read-only; queries that need to open
    up their start or end cell work on a copy.
    """

    def __init__(self, base: Base, width: float, height: float, cell_size: float = 10):
        self.base = base
        self.cell_size = cell_size
        self.cols = int(math.ceil(width / cell_size))
        self.rows = int(math.ceil(height / cell_size))
        self.walkable = self._build_grid()
        self.walkable.setflags(write=False)

    def _build_grid(self) -> np.ndarray:
        cs = self.cell_size
        grid = np.ones((self.cols, self.rows), dtype=bool)
        for wall in self.base.walls:
            x0 = max(0, int(wall.x // cs))
            x1 = min(self.cols - 1, int((wall.x + wall.w) // cs))
            y0 = max(0, int(wall.y // cs))
            y1 = min(self.rows - 1, int((wall.y + wall.h) // cs))
            for x in range(x0, x1 + 1):
                for y in range(y0, y1 + 1):
                    if rects_collide(WallSegment(x * cs, y * cs, cs, cs), wall):
                        grid[x, y] = False
        return grid

    def cell_of(self, pos: Position) -> Cell:
        return (int(pos[0] // self.cell_size), int(pos[1] // self.cell_size))

    def cell_center(self, cell: Cell) -> Position:
        return ((cell[0] + 0.5) * self.cell_size, (cell[1] + 0.5) * self.cell_size)

    def in_bounds(self, cell: Cell) -> bool:
        return 0 <= cell[0] < self.cols and 0 <= cell[1] < self.rows

    def _query_grid(self, start: Cell, goal: Cell) -> np.ndarray:
        # Units standing in a wall cell, or targets inside one, must still route
        grid = self.walkable.copy()
        grid[start] = True
        grid[goal] = True
        return grid

    def _neighbors(self, grid: np.ndarray, cell: Cell) -> Iterator[Cell]:
        for dx, dy in STEPS:
            nb = (cell[0] + dx, cell[1] + dy)
            if self.in_bounds(nb) and grid[nb]:
                yield nb

    def _astar(self, grid: np.ndarray, start: Cell, goal: Cell) -> Optional[List[Cell]]:
        # Counter breaks f-score ties by insertion order, keeping results stable
        counter = itertools.count()
        open_set = [(manhattan(start, goal), next(counter), start)]
        came_from: Dict[Cell, Cell] = {}
        g_score: Dict[Cell, int] = {start: 0}
        closed = set()

        while open_set:
            _, _, current = heapq.heappop(open_set)
            if current == goal:
                path = [current]
                while current in came_from:
                    current = came_from[current]
                    path.append(current)
                path.reverse()
                return path
            if current in closed:
                continue
            closed.add(current)

            for nb in self._neighbors(grid, current):
                tentative = g_score[current] + 1
                if tentative < g_score.get(nb, math.inf):
                    came_from[nb] = current
                    g_score[nb] = tentative
                    heapq.heappush(open_set, (tentative + manhattan(nb, goal), next(counter), nb))
        return None

    def cell_path(self, start: Position, end: Position) -> Optional[List[Cell]]:
        """Raw A* cell sequence from start to end, both cells included."""
        s = self.cell_of(start)
        g = self.cell_of(end)
        if not self.in_bounds(s) or not self.in_bounds(g):
            return None
        return self._astar(self._query_grid(s, g), s, g)

    def has_line_of_sight(self, a: Position, b: Position,
                          grid: Optional[np.ndarray] = None) -> bool:
        """Sample a-b every quarter cell; any unwalkable or off-grid sample blocks it."""
        if grid is None:
            grid = self.walkable
        step = self.cell_size / 4
        n = max(1, int(math.ceil(distance_2d(a, b) / step)))
        for k in range(n + 1):
            t = k / n
            cell = self.cell_of((a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t))
            if not self.in_bounds(cell) or not grid[cell]:
                return False
        return True

    def _simplify(self, grid: np.ndarray, points: List[Position]) -> List[Position]:
        result = [points[0]]
        i = 0
        last = len(points) - 1
        while i < last:
            j = last
            while j > i + 1 and not self.has_line_of_sight(points[i], points[j], grid):
                j -= 1
            result.append(points[j])
            i = j
        return result

    def _fallback(self, start: Position, end: Position) -> List[Position]:
        start_inside = self.base.contains(start)
        end_inside = self.base.contains(end)
        if start_inside and not end_inside:
            return [self.base.gate_position(), end]
        if end_inside and not start_inside:
            return [self.base.entry_gate(), end]
        return [end]

    def compute_path(self, start: Position, end: Position) -> List[Position]:
        """Waypoints from start to end; the origin is omitted and the last point is end."""
        end = (end[0], end[1])
        s = self.cell_of(start)
        g = self.cell_of(end)
        if not self.in_bounds(s) or not self.in_bounds(g) or s == g:
            return [end]

        grid = self._query_grid(s, g)
        cells = self._astar(grid, s, g)
        if cells is None:
            return self._fallback(start, end)

        points = [(start[0], start[1])]
        points += [self.cell_center(c) for c in cells[1:-1]]
        points.append(end)
        return self._simplify(grid, points)[1:]
