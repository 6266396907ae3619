"""Tests for hiding entities before export."""

from raid_timeline.timeline.filters import filter_hidden_objects
from raid_timeline.timeline.model import AoEHideEvent, AoEShowEvent, CastEvent, TextEvent


def test_no_hidden_keys_returns_same_mechanic(sample_mechanic):
    assert filter_hidden_objects(sample_mechanic, []) is sample_mechanic


def test_hidden_player_drops_entity_and_its_events(sample_mechanic):
    filtered = filter_hidden_objects(sample_mechanic, ["player:MT"])
    assert [p.id for p in filtered.initial_players] == ["H1"]
    assert all(getattr(e, "target_id", None) != "MT" for e in filtered.timeline)
    # Roster-wide debuffs are not a player's own events.
    assert any(getattr(e, "target_id", None) == "all" for e in filtered.timeline)


def test_hidden_aoe_and_marker(sample_mechanic):
    filtered = filter_hidden_objects(sample_mechanic, ["aoe:a1", "marker:A"])
    assert filtered.markers == ()
    assert not any(isinstance(e, (AoEShowEvent, AoEHideEvent)) for e in filtered.timeline)


def test_hidden_enemy_drops_casts(sample_mechanic):
    filtered = filter_hidden_objects(sample_mechanic, ["enemy:boss"])
    assert filtered.enemies == ()
    assert not any(isinstance(e, CastEvent) for e in filtered.timeline)
    assert any(isinstance(e, TextEvent) for e in filtered.timeline)
