"""Shared fixtures: sample mechanics in wire and model form."""

import copy

import pytest

from raid_timeline.timeline.codec import parse_mechanic
from raid_timeline.timeline.model import (
    Enemy,
    Field,
    MechanicData,
    Player,
    Position,
)

SAMPLE_MECHANIC = {
    "id": "sample",
    "name": "Sample Mechanic",
    "description": "Spread, then stack",
    "durationFrames": 300,
    "fps": 30,
    "field": {"type": "circle", "size": 40, "backgroundColor": "#1a1a3e", "gridEnabled": True},
    "markers": [{"type": "A", "position": {"x": 0, "y": -10}}],
    "initialPlayers": [
        {"id": "MT", "role": "tank", "position": {"x": 0, "y": -5}},
        {"id": "H1", "role": "healer", "position": {"x": 5, "y": 0}},
    ],
    "enemies": [{"id": "boss", "name": "Boss", "position": {"x": 0, "y": 0}, "size": 4}],
    "timeline": [
        {
            "id": "e1",
            "type": "move",
            "frame": 30,
            "targetId": "MT",
            "to": {"x": 10, "y": -5},
            "duration": 30,
        },
        {
            "id": "e2",
            "type": "aoe_show",
            "frame": 100,
            "aoe": {
                "id": "a1",
                "type": "circle",
                "position": {"x": 0, "y": 0},
                "radius": 5,
                "opacity": 0.5,
            },
            "fadeInDuration": 10,
        },
        {"id": "e3", "type": "aoe_hide", "frame": 200, "aoeId": "a1", "fadeOutDuration": 20},
        {
            "id": "e4",
            "type": "debuff_add",
            "frame": 10,
            "targetId": "all",
            "debuff": {"id": "d1", "name": "Doom", "duration": 5},
        },
        {"id": "e5", "type": "cast", "frame": 0, "casterId": "boss", "skillName": "Flare", "duration": 60},
        {
            "id": "e6",
            "type": "text",
            "frame": 0,
            "textType": "main",
            "content": "Spread!",
            "position": "top",
            "duration": 90,
            "fadeIn": 10,
            "fadeOut": 10,
        },
        {
            "id": "e7",
            "type": "field_change",
            "frame": 150,
            "fieldChangeId": "fc1",
            "override": {"backgroundColor": "#440000"},
            "fadeInDuration": 10,
        },
        {
            "id": "e8",
            "type": "field_revert",
            "frame": 250,
            "fieldChangeId": "fc1",
            "fadeOutDuration": 10,
        },
    ],
}


@pytest.fixture
def mechanic_dict():
    """A fresh copy of the sample mechanic in its JSON shape."""
    return copy.deepcopy(SAMPLE_MECHANIC)


@pytest.fixture
def sample_mechanic(mechanic_dict):
    return parse_mechanic(mechanic_dict)


@pytest.fixture
def make_mechanic():
    """Factory for small mechanics built directly from model objects."""

    def _make(timeline=(), players=None, enemies=None, duration_frames=300, fps=30, field=None):
        if players is None:
            players = (
                Player(id="MT", role="tank", position=Position(0, -5)),
                Player(id="ST", role="tank", position=Position(0, 5)),
                Player(id="H1", role="healer", position=Position(5, 0)),
            )
        if enemies is None:
            enemies = (Enemy(id="boss", name="Boss", position=Position(0, 0)),)
        return MechanicData(
            id="test",
            name="Test",
            description="",
            duration_frames=duration_frames,
            fps=fps,
            field=field or Field(type="circle", size=40, background_color="#1a1a3e"),
            initial_players=tuple(players),
            enemies=tuple(enemies),
            timeline=tuple(timeline),
        )

    return _make
