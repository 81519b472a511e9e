import copy
import math
from typing import List, Optional, Tuple
from .base import Base
from .geometry import (distance_2d, line_of_fire_blocked, point_in_circle,
                       push_circle_out_of_rect, resolve_circle_collisions)
from .model import (Event, GameConfig, LaserEffect, Order, Position, State, Team,
                    TEAM_STATS, Unit, WallSegment)
from .pathfinder import Pathfinder
from .rng import DRNG

class Game:
    """Deterministic RTS skirmish: two player groups, one base, endless enemy waves.

    One ``tick()`` is one frame. Commands (``issue_move_order``,
    ``toggle_group``, ``kill_one_unit``) are applied between ticks.
    """

    def __init__(self, seed: int, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self._rng = DRNG(seed)
        c = self.config
        self.base = Base(c.center(), c.base_half_width, c.base_half_height,
                         c.wall_thickness, c.gate_width)
        self.pathfinder = Pathfinder(self.base, c.width, c.height, c.cell_size)
        self.state = State()
        self._events: List[Event] = []
        self._next_id = {"player": 0, "enemy": 0}

        self.state.player_groups = self._make_player_groups()
        self.initial_group_sizes = [len(g) for g in self.state.player_groups]
        self.state.enemy_wave = 1
        self._events += self._spawn_enemy_wave()

    @property
    def walls(self) -> Tuple[WallSegment, ...]:
        return self.base.walls

    def _new_unit(self, team: Team, pos: Position) -> Unit:
        self._next_id[team] += 1
        prefix = "P" if team == "player" else "E"
        return Unit(id=f"{prefix}-{self._next_id[team]}", team=team, pos=pos,
                    health=TEAM_STATS[team].max_health)

    def _make_player_groups(self) -> List[List[Unit]]:
        """Line the player units up along the bottom edge, split into groups."""
        c = self.config
        n = c.player_unit_count
        per_group = math.ceil(n / c.player_group_count)
        groups: List[List[Unit]] = [[] for _ in range(c.player_group_count)]
        for i in range(n):
            x = c.width / 2 + (i - (n - 1) / 2) * 30
            y = c.height - 60
            groups[min(i // per_group, len(groups) - 1)].append(self._new_unit("player", (x, y)))
        return groups

    def _spawn_enemy_wave(self) -> List[Event]:
        c = self.config
        count = c.base_enemy_count + self.state.enemy_wave
        for _ in range(count):
            pos = self._rng.point(c.width / 2 - 100, c.width / 2 + 100, 50, 100)
            self.state.enemies.append(self._new_unit("enemy", pos))
        return [Event("WaveSpawned", self.state.frame,
                      {"wave": self.state.enemy_wave, "count": count})]

    # ---- commands -------------------------------------------------------

    def issue_move_order(self, target: Position) -> None:
        """Send the active group (or every group when none is active) towards target."""
        s = self.state
        if s.active_group is not None:
            groups = [s.player_groups[s.active_group]]
        else:
            groups = s.player_groups
        for group in groups:
            self._issue_formation_order(group, target)
        self._events.append(Event("OrderAccepted", s.frame,
                                  {"kind": "move", "to": list(target),
                                   "group": s.active_group}))

    def _issue_formation_order(self, units: List[Unit], target: Position) -> None:
        """Spread units on a circle around target so they don't stack on one point."""
        count = len(units)
        if count == 0:
            return
        if count == 1:
            units[0].set_path(self.pathfinder.compute_path(units[0].pos, target))
            return

        c = self.config
        radius = max(c.formation_min_radius, count * c.formation_spacing)
        angle_step = 2 * math.pi / count
        for i, u in enumerate(units):
            angle = i * angle_step
            slot = (target[0] + math.cos(angle) * radius,
                    target[1] + math.sin(angle) * radius)
            u.set_path(self.pathfinder.compute_path(u.pos, slot))

    def toggle_group(self, index: int) -> None:
        """Select group index, or deselect it if it is already active.

        An index that names no group is ignored.
        """
        s = self.state
        if not 0 <= index < len(s.player_groups):
            return
        s.active_group = None if s.active_group == index else index
        self._events.append(Event("GroupToggled", s.frame, {"active_group": s.active_group}))

    def kill_one_unit(self) -> None:
        """Debug hook: zero the health of one player unit (removed on the next tick)."""
        s = self.state
        if s.active_group is not None:
            candidates = s.player_groups[s.active_group]
        else:
            candidates = s.player_units()
        if candidates:
            candidates[0].health = 0
            self._events.append(Event("OrderAccepted", s.frame,
                                      {"kind": "kill_one", "unit_id": candidates[0].id}))

    def apply_order(self, order: Order) -> None:
        if order.kind == "move" and order.target_pos is not None:
            self.issue_move_order(order.target_pos)
        elif order.kind == "toggle_group" and order.group_index is not None:
            self.toggle_group(order.group_index)
        elif order.kind == "kill_one":
            self.kill_one_unit()

    # ---- tick phases ----------------------------------------------------

    def _all_units(self) -> List[Unit]:
        return self.state.player_units() + self.state.enemies

    def _move(self) -> List[Event]:
        """Advance every unit one frame, player groups first."""
        for u in self._all_units():
            u.advance(self._rng, self.config)
        return []

    def _collide(self) -> List[Event]:
        resolve_circle_collisions(self._all_units(), self._rng)
        return []

    def _fire_lasers(self) -> Tuple[List[LaserEffect], List[Event]]:
        """Each ready player unit shoots the first visible enemy in range."""
        c = self.config
        fired: List[LaserEffect] = []
        evts: List[Event] = []
        for shooter in self.state.player_units():
            if shooter.laser_cooldown != 0:
                continue
            for enemy in self.state.enemies:
                if distance_2d(shooter.pos, enemy.pos) > c.laser_range:
                    continue
                if line_of_fire_blocked(shooter.pos, enemy.pos, self.walls):
                    continue

                enemy.health -= c.laser_damage
                fired.append(LaserEffect(shooter.pos, enemy.pos, c.laser_effect_frames))
                shooter.laser_cooldown = c.laser_cooldown_frames
                evts.append(Event("LaserFired", self.state.frame,
                                  {"shooter": shooter.id, "target": enemy.id,
                                   "dmg": c.laser_damage, "hp": enemy.health}))
                break
        return fired, evts

    def _age_lasers(self, fired: List[LaserEffect]) -> List[Event]:
        """Age effects from earlier frames; this frame's shots join un-aged."""
        remaining = []
        for laser in self.state.lasers:
            laser.frames_remaining -= 1
            if laser.frames_remaining > 0:
                remaining.append(laser)
        self.state.lasers = remaining + fired
        return []

    def _contain(self) -> List[Event]:
        """Push any unit overlapping a wall back out of it."""
        for u in self._all_units():
            for wall in self.walls:
                pushed = push_circle_out_of_rect(u.pos, u.radius, wall)
                if pushed is not None:
                    u.pos = pushed
        return []

    def _melee(self) -> List[Event]:
        """Units in contact hurt each other, on top of any laser damage this frame."""
        c = self.config
        for p in self.state.player_units():
            for e in self.state.enemies:
                if point_in_circle(e.pos, p.pos, c.melee_range):
                    p.health -= c.melee_damage
                    e.health -= c.melee_damage
        return []

    def _cleanup(self) -> List[Event]:
        evts: List[Event] = []
        s = self.state
        for u in self._all_units():
            if u.health <= 0:
                evts.append(Event("Destroyed", s.frame, {"unit_id": u.id, "team": u.team}))
        s.player_groups = [[u for u in g if u.health > 0] for g in s.player_groups]
        s.enemies = [u for u in s.enemies if u.health > 0]
        return evts

    def _respawn(self) -> List[Event]:
        """Refill under-strength groups, one unit each, on a single shared timer."""
        evts: List[Event] = []
        s = self.state
        short = [i for i, g in enumerate(s.player_groups)
                 if len(g) < self.initial_group_sizes[i]]
        if not short:
            return evts

        if s.respawn_timer is None:
            s.respawn_timer = self.config.respawn_delay_frames
        s.respawn_timer -= 1
        if s.respawn_timer > 0:
            return evts

        x0, x1, y0, y1 = self.base.interior_bounds(self.config.respawn_margin)
        for i in short:
            u = self._new_unit("player", self._rng.point(x0, x1, y0, y1))
            s.player_groups[i].append(u)
            evts.append(Event("Respawned", s.frame, {"unit_id": u.id, "group": i}))
        s.respawn_timer = None
        return evts

    def _waves(self) -> List[Event]:
        if self.state.enemies:
            return []
        self.state.enemy_wave += 1
        return self._spawn_enemy_wave()

    def tick(self) -> None:
        """Advance the simulation by one frame."""
        evts: List[Event] = []
        evts += self._move()
        evts += self._collide()
        fired, shots = self._fire_lasers()
        evts += shots
        evts += self._age_lasers(fired)
        evts += self._contain()
        evts += self._melee()
        evts += self._cleanup()
        evts += self._respawn()
        evts += self._waves()
        self._events += evts
        self.state.frame += 1

    def drain_events(self) -> List[Event]:
        """Return and forget the events recorded since the last call."""
        evts = self._events
        self._events = []
        return evts

    def snapshot(self) -> State:
        """Return a copy of the current state that later ticks won't touch."""
        return copy.deepcopy(self.state)
