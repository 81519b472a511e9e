from typing import Literal, Optional, Tuple
from pydantic import BaseModel, Field

class OrderIn(BaseModel):
    """Order request schema."""
    kind: Literal["move", "toggle_group", "kill_one"]
    target_pos: Optional[Tuple[float, float]] = None  # (x, y) pixels, for "move"
    group_index: Optional[int] = Field(default=None, ge=0)  # for "toggle_group"
    client_ts_ms: int = Field(default=0)

class GameConfigIn(BaseModel):
    """Overrides for GameConfig; unset fields keep their defaults."""
    player_unit_count: Optional[int] = Field(default=None, ge=1)
    base_enemy_count: Optional[int] = Field(default=None, ge=0)
    laser_range: Optional[float] = Field(default=None, gt=0)
    laser_damage: Optional[float] = Field(default=None, ge=0)
    laser_cooldown_frames: Optional[int] = Field(default=None, ge=0)
    melee_damage: Optional[float] = Field(default=None, ge=0)
    respawn_delay_frames: Optional[int] = Field(default=None, ge=1)
    gate_width: Optional[float] = Field(default=None, ge=0, le=200)

class StartRequest(BaseModel):
    """Battle start request schema."""
    seed: int = 42
    time_compression: float = Field(default=1.0, gt=0)
    config: Optional[GameConfigIn] = None

class EventsResponse(BaseModel):
    """Events response schema."""
    next_offset: int
    total: int
    events: list[dict]
