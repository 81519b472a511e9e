import math
from typing import List, Optional, Sequence, Tuple
from .model import Position, Unit, WallSegment
from .rng import DRNG

Segment = Tuple[Position, Position]

def distance_2d(pos1: Position, pos2: Position) -> float:
    """Calculate Euclidean distance between two 2D positions."""
    dx = pos2[0] - pos1[0]
    dy = pos2[1] - pos1[1]
    return math.sqrt(dx * dx + dy * dy)

def normalize_2d(vec: Tuple[float, float]) -> Tuple[float, float]:
    """Normalize a 2D vector to unit length."""
    mag = math.sqrt(vec[0] * vec[0] + vec[1] * vec[1])
    if mag < 1e-9:
        return (0.0, 0.0)
    return (vec[0] / mag, vec[1] / mag)

def circles_collide(pos1: Position, r1: float, pos2: Position, r2: float) -> bool:
    """True if two circles overlap (touching does not count)."""
    return distance_2d(pos1, pos2) < r1 + r2

def point_in_circle(point: Position, circle_pos: Position, radius: float) -> bool:
    """True if point lies strictly inside the circle."""
    return distance_2d(point, circle_pos) < radius

def point_in_rect(point: Position, wall: WallSegment) -> bool:
    """True if point lies inside the rectangle or on its border."""
    return (wall.x <= point[0] <= wall.x + wall.w and
            wall.y <= point[1] <= wall.y + wall.h)

def rects_collide(a: WallSegment, b: WallSegment) -> bool:
    """True if two rectangles overlap with a non-zero area."""
    return (a.x < b.x + b.w and a.x + a.w > b.x and
            a.y < b.y + b.h and a.y + a.h > b.y)

def line_intersects_circle(p1: Position, p2: Position,
                           circle_pos: Position, radius: float) -> bool:
    """True if segment p1-p2 crosses the circle's boundary.

    A segment lying entirely inside the circle does not cross it.
    """
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]
    fx = p1[0] - circle_pos[0]
    fy = p1[1] - circle_pos[1]

    a = dx * dx + dy * dy
    if a == 0:
        return False
    b = 2 * (fx * dx + fy * dy)
    c = fx * fx + fy * fy - radius * radius

    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return False
    discriminant = math.sqrt(discriminant)
    t1 = (-b - discriminant) / (2 * a)
    t2 = (-b + discriminant) / (2 * a)
    return 0 <= t1 <= 1 or 0 <= t2 <= 1

def _orientation(p: Position, q: Position, r: Position) -> int:
    val = (q[1] - p[1]) * (r[0] - q[0]) - (q[0] - p[0]) * (r[1] - q[1])
    if abs(val) < 1e-9:
        return 0
    return 1 if val > 0 else 2

def _on_segment(p: Position, q: Position, r: Position) -> bool:
    """q lies on segment pr, given the three points are collinear."""
    return (min(p[0], r[0]) <= q[0] <= max(p[0], r[0]) and
            min(p[1], r[1]) <= q[1] <= max(p[1], r[1]))

def segments_intersect(p1: Position, p2: Position, q1: Position, q2: Position) -> bool:
    """Check whether segment p1-p2 touches or crosses segment q1-q2."""
    o1 = _orientation(p1, p2, q1)
    o2 = _orientation(p1, p2, q2)
    o3 = _orientation(q1, q2, p1)
    o4 = _orientation(q1, q2, p2)

    if o1 != o2 and o3 != o4:
        return True

    # Collinear special cases
    if o1 == 0 and _on_segment(p1, q1, p2):
        return True
    if o2 == 0 and _on_segment(p1, q2, p2):
        return True
    if o3 == 0 and _on_segment(q1, p1, q2):
        return True
    if o4 == 0 and _on_segment(q1, p2, q2):
        return True
    return False

def rect_edges(wall: WallSegment) -> List[Segment]:
    """The four edges of a wall rectangle: top, right, bottom, left."""
    tl = (wall.x, wall.y)
    tr = (wall.x + wall.w, wall.y)
    br = (wall.x + wall.w, wall.y + wall.h)
    bl = (wall.x, wall.y + wall.h)
    return [(tl, tr), (tr, br), (br, bl), (bl, tl)]

def segment_crosses_rect(a: Position, b: Position, wall: WallSegment) -> bool:
    """True if segment a-b touches any edge of the wall rectangle."""
    return any(segments_intersect(a, b, e1, e2) for e1, e2 in rect_edges(wall))

def line_of_fire_blocked(a: Position, b: Position, walls: Sequence[WallSegment]) -> bool:
    """True if any wall edge lies between a and b."""
    return any(segment_crosses_rect(a, b, w) for w in walls)

def closest_point_on_rect(pos: Position, wall: WallSegment) -> Position:
    """Nearest point of the (filled) rectangle to pos."""
    x = min(max(pos[0], wall.x), wall.x + wall.w)
    y = min(max(pos[1], wall.y), wall.y + wall.h)
    return (x, y)

def push_circle_out_of_rect(pos: Position, radius: float,
                            wall: WallSegment) -> Optional[Position]:
    """Return the corrected centre of a circle penetrating wall, or None if clear."""
    nearest = closest_point_on_rect(pos, wall)
    dx = pos[0] - nearest[0]
    dy = pos[1] - nearest[1]
    dist = math.sqrt(dx * dx + dy * dy)
    if dist >= radius:
        return None

    depth = radius - dist
    if dist == 0:
        # Centre sits on or inside the rectangle: no direction to use
        nx, ny = 1.0, 0.0
    else:
        nx, ny = dx / dist, dy / dist
    return (pos[0] + nx * depth, pos[1] + ny * depth)

def resolve_circle_collisions(units: List[Unit], rng: DRNG) -> None:
    """Push overlapping units apart by half the overlap each, in a single pass."""
    for i in range(len(units)):
        for j in range(i + 1, len(units)):
            a = units[i]
            b = units[j]
            if not circles_collide(a.pos, a.radius, b.pos, b.radius):
                continue

            d = distance_2d(a.pos, b.pos)
            if d == 0:
                a.pos = (a.pos[0] + rng.uniform(-1, 1), a.pos[1] + rng.uniform(-1, 1))
                d = distance_2d(a.pos, b.pos)
                if d == 0:
                    continue

            overlap = a.radius + b.radius - d
            nx, ny = normalize_2d((a.pos[0] - b.pos[0], a.pos[1] - b.pos[1]))
            half = overlap / 2
            a.pos = (a.pos[0] + nx * half, a.pos[1] + ny * half)
            b.pos = (b.pos[0] - nx * half, b.pos[1] - ny * half)
