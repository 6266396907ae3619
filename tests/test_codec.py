"""Tests for mechanic JSON validation, parsing and export."""

import json

import pytest

from raid_timeline.timeline.codec import (
    MechanicValidationError,
    dump_mechanic,
    load_mechanic,
    mechanic_to_dict,
    parse_mechanic,
    snapshot_to_dict,
    validate_mechanic,
)
from raid_timeline.timeline.engine import TimelineEngine
from raid_timeline.timeline.model import (
    AoEShowEvent,
    BossMoveEvent,
    MoveEvent,
    Position,
    TextEvent,
)


def test_sample_is_valid(mechanic_dict):
    result = validate_mechanic(mechanic_dict)
    assert result.is_valid
    assert result.warnings == ()


def test_parse_builds_typed_events(sample_mechanic):
    move = sample_mechanic.timeline[0]
    assert isinstance(move, MoveEvent)
    assert move.to_pos == Position(10, -5)
    assert move.easing == "linear"

    show = sample_mechanic.timeline[1]
    assert isinstance(show, AoEShowEvent)
    assert show.fade_in == 10
    assert show.aoe.tracking_mode == "static"

    caption = sample_mechanic.timeline[5]
    assert isinstance(caption, TextEvent)
    assert caption.position == "top"
    assert caption.fade_out == 10


def test_boss_move_defaults(mechanic_dict):
    mechanic_dict["timeline"].append(
        {"id": "b", "type": "boss_move", "frame": 0, "targetId": "boss", "to": {"x": 0, "y": 5}, "duration": 30}
    )
    event = parse_mechanic(mechanic_dict).timeline[-1]
    assert isinstance(event, BossMoveEvent)
    assert event.easing == "easeInOut"
    assert event.teleport is False


def test_round_trip(sample_mechanic):
    assert parse_mechanic(mechanic_to_dict(sample_mechanic)) == sample_mechanic


def test_export_uses_camel_case_and_omits_unset_fields(sample_mechanic):
    data = mechanic_to_dict(sample_mechanic)
    assert data["durationFrames"] == 300
    assert data["initialPlayers"][0]["id"] == "MT"
    move = data["timeline"][0]
    assert move["type"] == "move"
    assert move["targetId"] == "MT"
    assert move["to"] == {"x": 10, "y": -5}
    assert "from" not in move
    assert data["timeline"][3]["debuff"]["duration"] == 5


def test_missing_optional_sections_use_defaults(mechanic_dict):
    del mechanic_dict["markers"]
    del mechanic_dict["enemies"]
    del mechanic_dict["description"]
    result = validate_mechanic(mechanic_dict)
    assert result.is_valid
    assert [w.field for w in result.warnings] == ["description"]

    mechanic = parse_mechanic(mechanic_dict)
    assert mechanic.markers == ()
    assert mechanic.enemies == ()
    assert mechanic.description == ""


@pytest.mark.parametrize(
    "mutate, field",
    [
        (lambda d: d.pop("id"), "id"),
        (lambda d: d.update(fps=0), "fps"),
        (lambda d: d.update(field=None), "field"),
        (lambda d: d["initialPlayers"][0].pop("position"), "initialPlayers[0].position"),
        (lambda d: d["timeline"][0].update(frame=-1), "timeline[0].frame"),
        (lambda d: d["timeline"][0].update(type="explode"), "timeline[0].type"),
        (lambda d: d["timeline"][1]["aoe"].pop("type"), "timeline[1].aoe.type"),
        (lambda d: d["timeline"][2].pop("aoeId"), "timeline[2].aoeId"),
    ],
)
def test_validation_errors(mechanic_dict, mutate, field):
    mutate(mechanic_dict)
    result = validate_mechanic(mechanic_dict)
    assert not result.is_valid
    assert field in [issue.field for issue in result.errors]

    with pytest.raises(MechanicValidationError):
        parse_mechanic(mechanic_dict)


def test_non_finite_numbers_rejected(mechanic_dict):
    mechanic_dict["timeline"][0]["to"]["x"] = float("nan")
    result = validate_mechanic(mechanic_dict)
    assert "timeline[0].to.x" in [issue.field for issue in result.errors]


@pytest.mark.parametrize(
    "mutate, field",
    [
        (lambda d: d["timeline"][0].update(to=[10, -5]), "timeline[0].to"),
        (lambda d: d["timeline"][0].update({"from": "MT"}), "timeline[0].from"),
        (lambda d: d["initialPlayers"][1].update(position="north"), "initialPlayers[1].position"),
        (lambda d: d["timeline"][1]["aoe"].update(position=None), "timeline[1].aoe.position"),
        (lambda d: d["timeline"][1]["aoe"].update(offsetFromSource=[0, 1]), "timeline[1].aoe.offsetFromSource"),
        (lambda d: d["timeline"][3].update(debuff="Doom"), "timeline[3].debuff"),
        (lambda d: d["timeline"][6].update(override=["#440000"]), "timeline[6].override"),
        (lambda d: d["markers"][0].update(position=0), "markers[0].position"),
    ],
)
def test_nested_shapes_are_validated(mechanic_dict, mutate, field):
    mutate(mechanic_dict)
    result = validate_mechanic(mechanic_dict)
    assert field in [issue.field for issue in result.errors]

    with pytest.raises(MechanicValidationError):
        parse_mechanic(mechanic_dict)


def test_malformed_move_target_never_reaches_engine(mechanic_dict):
    mechanic_dict["timeline"][0]["to"] = [10, -5]
    with pytest.raises(MechanicValidationError, match=r"timeline\[0\]\.to"):
        TimelineEngine(parse_mechanic(mechanic_dict))


def test_unknown_event_type_message(mechanic_dict):
    mechanic_dict["timeline"][0]["type"] = "explode"
    (issue,) = validate_mechanic(mechanic_dict).errors
    assert issue.field == "timeline[0].type"
    assert issue.message == "Unknown event type: 'explode'"


def test_missing_event_type(mechanic_dict):
    del mechanic_dict["timeline"][2]["type"]
    (issue,) = validate_mechanic(mechanic_dict).errors
    assert issue.field == "timeline[2].type"
    assert issue.message == "Event type is required"


def test_duration_and_fps_default(mechanic_dict):
    del mechanic_dict["durationFrames"]
    del mechanic_dict["fps"]
    mechanic = parse_mechanic(mechanic_dict)
    assert mechanic.duration_frames == 300
    assert mechanic.fps == 30


def test_non_object_root_rejected():
    result = validate_mechanic("sample")
    assert [issue.field for issue in result.errors] == ["root"]

def test_validation_error_is_value_error():
    with pytest.raises(ValueError, match="Invalid mechanic data"):
        parse_mechanic([])


def test_load_and_dump(tmp_path, sample_mechanic):
    path = tmp_path / "mechanic.json"
    dump_mechanic(sample_mechanic, path)
    assert json.loads(path.read_text(encoding="utf-8"))["id"] == "sample"
    assert load_mechanic(path) == sample_mechanic


def test_snapshot_to_dict(sample_mechanic):
    payload = snapshot_to_dict(TimelineEngine(sample_mechanic).resolve(105))
    assert payload["frame"] == 105
    assert payload["players"][0]["position"] == {"x": 10, "y": -5}
    assert payload["activeAoes"][0]["opacity"] == pytest.approx(0.25)
    assert payload["field"]["backgroundColor"] == "#1a1a3e"
    json.dumps(payload)
