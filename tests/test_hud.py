"""Test the HUD text lines."""
from minibattles.game import Game
from minibattles.hud import hud_lines


def test_default_hud():
    lines = hud_lines(Game(1).snapshot())
    assert lines[0].endswith("Active Group: All")
    assert "Wave: 1" in lines
    assert not any(l.startswith("Respawn in") for l in lines)


def test_hud_shows_selection_and_respawn():
    game = Game(1)
    game.toggle_group(1)
    state = game.snapshot()
    state.respawn_timer = 90
    lines = hud_lines(state)
    assert lines[0].endswith("Active Group: 2")
    assert "Respawn in: 1.5s" in lines
