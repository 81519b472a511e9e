from typing import List
from .model import State

def hud_lines(state: State, fps: int = 60) -> List[str]:
    """Text overlay for a renderer: group selection, wave, respawn countdown."""
    active = "All" if state.active_group is None else str(state.active_group + 1)
    lines = [
        f"Press 1 or 2 to toggle unit group. Active Group: {active}",
        f"Wave: {state.enemy_wave}",
    ]
    if state.respawn_timer is not None:
        lines.append(f"Respawn in: {state.respawn_timer / fps:.1f}s")
    lines.append("Press D to kill a player unit (dev)")
    return lines
