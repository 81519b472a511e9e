import math
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .rng import DRNG

Team = Literal["player", "enemy"]
Position = Tuple[float, float]  # (x, y) in pixels, y grows downwards

@dataclass
class TeamStats:
    """Template defining the fixed characteristics of a team's units"""
    speed: float  # pixels per frame
    radius: float
    max_health: float

TEAM_STATS = {
    "player": TeamStats(speed=2.0, radius=10.0, max_health=100.0),
    "enemy": TeamStats(speed=1.5, radius=10.0, max_health=100.0),
}

@dataclass
class GameConfig:
    """Tunable constants of a battle. Frame counts assume 60 frames per second."""
    width: float = 600
    height: float = 400
    cell_size: float = 10

    # Base geometry, centred on the arena unless overridden
    base_center: Optional[Position] = None
    base_half_width: float = 100
    base_half_height: float = 75
    wall_thickness: float = 10
    gate_width: float = 40

    player_unit_count: int = 5
    player_group_count: int = 2
    base_enemy_count: int = 4

    laser_range: float = 150
    laser_damage: float = 10
    laser_cooldown_frames: int = 60
    laser_effect_frames: int = 10

    melee_range: float = 20  # strict, touching units sit exactly 2r apart
    melee_damage: float = 0.5

    respawn_delay_frames: int = 180
    respawn_margin: float = 15

    waypoint_tolerance: float = 2.0
    formation_min_radius: float = 40
    formation_spacing: float = 10

    def center(self) -> Position:
        if self.base_center is not None:
            return self.base_center
        return (self.width / 2, self.height / 2)

@dataclass(frozen=True)
class WallSegment:
    """Axis-aligned wall rectangle; (x, y) is the top-left corner."""
    x: float
    y: float
    w: float
    h: float

@dataclass(eq=False)
class Unit:
    id: str
    team: Team
    pos: Position
    health: float = 100.0
    target: Optional[Position] = None
    waypoints: List[Position] = field(default_factory=list)
    laser_cooldown: int = 0  # frames until the next shot, player units only

    def get_stats(self) -> TeamStats:
        """Get the TeamStats definition for this unit"""
        return TEAM_STATS[self.team]

    @property
    def radius(self) -> float:
        return self.get_stats().radius

    @property
    def speed(self) -> float:
        return self.get_stats().speed

    def set_target(self, target: Position) -> None:
        """Drop any queued waypoints and head straight for target."""
        self.waypoints = []
        self.target = (target[0], target[1])

    def set_path(self, waypoints: List[Position]) -> None:
        """Replace the waypoint queue; the first point becomes the target right away."""
        self.waypoints = [(p[0], p[1]) for p in waypoints]
        self.target = self.waypoints.pop(0) if self.waypoints else None

    def advance(self, rng: "DRNG", config: GameConfig) -> None:
        """Move one frame along the waypoint queue."""
        if self.target is None and self.waypoints:
            self.target = self.waypoints.pop(0)

        if self.target is not None:
            dx = self.target[0] - self.pos[0]
            dy = self.target[1] - self.pos[1]
            dist = math.sqrt(dx * dx + dy * dy)
            speed = self.speed

            # Grid-derived waypoints are imprecise, snap rather than oscillate
            if dist < speed or dist < config.waypoint_tolerance:
                self.pos = self.target
                self.target = None
            else:
                self.pos = (self.pos[0] + dx / dist * speed,
                            self.pos[1] + dy / dist * speed)

        if self.team == "enemy":
            # Wander around the upper half of the arena
            if self.target is None and not self.waypoints:
                self.target = rng.point(0, config.width, 0, config.height / 2)
        elif self.laser_cooldown > 0:
            self.laser_cooldown -= 1

@dataclass
class LaserEffect:
    start: Position
    end: Position
    frames_remaining: int

@dataclass
class Order:
    kind: Literal["move", "toggle_group", "kill_one"]
    target_pos: Optional[Position] = None
    group_index: Optional[int] = None
    client_ts_ms: int = 0

@dataclass
class Event:
    kind: str
    frame: int
    data: Dict

@dataclass
class State:
    frame: int = 0
    player_groups: List[List[Unit]] = field(default_factory=list)
    enemies: List[Unit] = field(default_factory=list)
    lasers: List[LaserEffect] = field(default_factory=list)
    active_group: Optional[int] = None
    enemy_wave: int = 1
    respawn_timer: Optional[int] = None
    battle_id: str = "local"

    def player_units(self) -> List[Unit]:
        return [u for group in self.player_groups for u in group]
