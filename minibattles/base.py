from typing import Tuple
from .model import Position, WallSegment

class Base:
    """Walled compound with a single gate cut into the bottom wall.

    Walls are built once, in the order top, left, right, bottom-left,
    bottom-right. The two bottom segments leave a gap of exactly
    ``gate_width`` centred on ``center[0]``.
    """

    def __init__(self, center: Position, half_width: float = 100, half_height: float = 75,
                 wall_thickness: float = 10, gate_width: float = 40):
        self.center = center
        self.half_width = half_width
        self.half_height = half_height
        self.wall_thickness = wall_thickness
        self.gate_width = gate_width
        self.walls: Tuple[WallSegment, ...] = tuple(self._create_walls())

    def _create_walls(self):
        cx, cy = self.center
        bw = self.half_width
        bh = self.half_height
        wt = self.wall_thickness
        gw = self.gate_width

        top = WallSegment(cx - bw, cy - bh, bw * 2, wt)
        left = WallSegment(cx - bw, cy - bh, wt, bh * 2)
        right = WallSegment(cx + bw - wt, cy - bh, wt, bh * 2)

        segment_w = bw - gw / 2
        bottom_left = WallSegment(cx - bw, cy + bh - wt, segment_w, wt)
        bottom_right = WallSegment(cx + gw / 2, cy + bh - wt, segment_w, wt)
        return [top, left, right, bottom_left, bottom_right]

    def contains(self, pos: Position) -> bool:
        """Strictly inside the outer boundary of the walls."""
        cx, cy = self.center
        return (cx - self.half_width < pos[0] < cx + self.half_width and
                cy - self.half_height < pos[1] < cy + self.half_height)

    def gate_position(self) -> Position:
        """A point just outside the gate."""
        cx, cy = self.center
        return (cx, cy + self.half_height + self.wall_thickness + 5)

    def entry_gate(self) -> Position:
        """A point just inside the gate."""
        cx, cy = self.center
        return (cx, cy + self.half_height - self.wall_thickness - 5)

    def interior_bounds(self, margin: float) -> Tuple[float, float, float, float]:
        """(x0, x1, y0, y1) of the floor, kept margin pixels clear of the walls."""
        cx, cy = self.center
        inset = self.wall_thickness + margin
        return (cx - self.half_width + inset, cx + self.half_width - inset,
                cy - self.half_height + inset, cy + self.half_height - inset)
