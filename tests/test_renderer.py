"""Tests for Pillow rendering and frame generation."""

from PIL import Image
import pytest

from raid_timeline.render.coordinates import game_to_screen, polar_to_game, rotate_point, screen_to_game
from raid_timeline.render.frames import (
    frame_range,
    generate_raster_frames,
    iter_snapshots,
    resolve_frames_parallel,
)
from raid_timeline.render.render_context import RenderContext, rgba
from raid_timeline.render.renderer import Renderer
from raid_timeline.timeline.engine import TimelineEngine
from raid_timeline.timeline.model import AoE, AoEShowEvent, MoveEvent, Player, Position


class TestCoordinates:
    def test_game_to_screen_centres_origin(self):
        assert game_to_screen(Position(0, 0), 40, 800) == (400, 400)
        assert game_to_screen(Position(-20, 20), 40, 800) == (0, 800)

    def test_screen_to_game_inverts(self):
        assert screen_to_game((600, 200), 40, 800) == Position(10, -10)

    def test_polar_north_is_negative_y(self):
        north = polar_to_game(0, 10)
        assert north.x == pytest.approx(0, abs=1e-9)
        assert north.y == pytest.approx(-10)
        east = polar_to_game(90, 10)
        assert east.x == pytest.approx(10)

    def test_rotate_point_is_clockwise_on_screen(self):
        x, y = rotate_point((0, -1), (0, 0), 90)
        assert x == pytest.approx(1)
        assert y == pytest.approx(0, abs=1e-9)


def test_rgba_parses_and_falls_back():
    assert rgba("#ff0000", 0.5) == (255, 0, 0, 128)
    assert rgba(None, 1.0, "#00ff00") == (0, 255, 0, 255)
    assert rgba("not-a-colour", 1.0, "#0000ff") == (0, 0, 255, 255)


def test_render_returns_rgb_frame(sample_mechanic):
    context = RenderContext.sized(200)
    renderer = Renderer(sample_mechanic, context)
    image = renderer.render(TimelineEngine(sample_mechanic).resolve(150))
    assert image.mode == "RGB"
    assert image.size == (200, 200)


def test_aoe_is_drawn_in_its_colour(make_mechanic):
    aoe = AoE(id="a", type="circle", position=Position(10, 10), radius=3, color="#ff0000", opacity=1.0)
    mechanic = make_mechanic(timeline=[AoEShowEvent(id="s", frame=0, aoe=aoe)], players=(), enemies=())
    renderer = Renderer(mechanic, RenderContext.sized(400))

    with_aoe = renderer.render(TimelineEngine(mechanic).resolve(0))
    red, green, blue = with_aoe.getpixel((300, 300))
    assert red > 200 and green < 60 and blue < 60


@pytest.mark.parametrize("shape", ["circle", "donut", "cone", "line", "cross"])
def test_every_aoe_shape_renders(make_mechanic, shape):
    aoe = AoE(
        id="a",
        type=shape,
        position=Position(0, 0),
        radius=5,
        inner_radius=2,
        outer_radius=8,
        angle=90,
        direction=0,
        length=10,
        width=4,
        arm_width=3,
        arm_length=10,
        color="#ff0000",
        opacity=1.0,
    )
    mechanic = make_mechanic(timeline=[AoEShowEvent(id="s", frame=0, aoe=aoe)], players=(), enemies=())
    context = RenderContext.sized(400)
    blank = Renderer(mechanic, context).render(TimelineEngine(make_mechanic(players=(), enemies=())).resolve(0))
    drawn = Renderer(mechanic, context).render(TimelineEngine(mechanic).resolve(0))
    assert drawn.tobytes() != blank.tobytes()


def test_frame_range_bounds(sample_mechanic):
    assert frame_range(sample_mechanic) == range(0, 300)
    assert frame_range(sample_mechanic, 10, 1000, 5) == range(10, 300, 5)
    with pytest.raises(ValueError):
        frame_range(sample_mechanic, step=0)
    with pytest.raises(ValueError):
        frame_range(sample_mechanic, start=-1)


def test_iter_snapshots_in_order(sample_mechanic):
    frames = [snapshot.frame for snapshot in iter_snapshots(sample_mechanic, 0, 50, 10)]
    assert frames == [0, 10, 20, 30, 40]


def test_parallel_resolution_matches_inline(sample_mechanic):
    frames = list(range(0, 120, 3))
    inline = list(resolve_frames_parallel(sample_mechanic, frames, workers=1))
    parallel = list(resolve_frames_parallel(sample_mechanic, frames, workers=2, batch_size=8))
    assert [s.frame for s in parallel] == frames
    assert parallel == inline


def test_generate_raster_frames(sample_mechanic):
    snapshots = iter_snapshots(sample_mechanic, 0, 3)
    images = list(generate_raster_frames(sample_mechanic, snapshots, RenderContext.sized(100)))
    assert len(images) == 3
    assert all(isinstance(image, Image.Image) for image in images)


def test_movement_paths_are_drawn_when_enabled(make_mechanic):
    player = Player(id="MT", role="tank", position=Position(0, -5))
    move = MoveEvent(id="m", frame=30, target_id="MT", to_pos=Position(10, -5), duration=30)
    mechanic = make_mechanic(timeline=[move], players=(player,), enemies=())
    snapshot = TimelineEngine(mechanic).resolve(0)

    plain = Renderer(mechanic, RenderContext.sized(400)).render(snapshot)
    with_paths = Renderer(mechanic, RenderContext.sized(400, show_movement_paths=True))
    assert with_paths.paths == {"MT": [Position(0, -5), Position(10, -5)]}

    # Waypoint marker at the move target, (300, 150) on screen.
    _, _, plain_blue = plain.getpixel((300, 150))
    _, _, path_blue = with_paths.render(snapshot).getpixel((300, 150))
    assert path_blue > plain_blue


def test_movement_paths_off_by_default(sample_mechanic):
    assert Renderer(sample_mechanic).paths == {}
