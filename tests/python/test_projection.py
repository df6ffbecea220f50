from __future__ import annotations

import math

from pytest import approx

from aquarium.render import colors
from aquarium.render.primitives import (
    LAYER_BUBBLES,
    LAYER_HUD,
    Circle,
    Ellipse,
    FilledRect,
    Gradient,
    Path,
    Polygon,
    Text,
)
from aquarium.render.projection import project


def _without_bubbles(frame):
    return [primitive for primitive in frame if primitive.layer != LAYER_BUBBLES]


def test_projection_is_deterministic_apart_from_bubbles(fish_factory, state_factory):
    state = state_factory(
        fish_factory(x=60, y=70, vx=3, vy=-4, fish_id="a"),
        fish_factory(x=120, y=90, vx=-5, vy=1, health=0.25, fish_id="b"),
    )

    first = project(state, 640, 480, now=10.0)
    second = project(state, 640, 480, now=987.5)

    assert _without_bubbles(first) == _without_bubbles(second)
    assert repr(_without_bubbles(first)) == repr(_without_bubbles(second))


def test_frame_layer_order(fish_factory, state_factory):
    state = state_factory(fish_factory())

    frame = project(state, 400, 300, now=0.0)
    layers = [primitive.layer for primitive in frame]

    assert layers[0] == "water"
    assert layers[1:7] == ["background"] * 6
    assert layers[7:11] == ["fish"] * 4
    assert layers[11:21] == [LAYER_BUBBLES] * 10
    assert layers[21:] == [LAYER_HUD] * 4


def test_water_opacity_tracks_quality(state_factory):
    clear = project(state_factory(water_quality=1.0), 100, 100, now=0.0)[0]
    murky = project(state_factory(water_quality=0.0), 100, 100, now=0.0)[0]

    assert isinstance(clear, Gradient)
    assert clear.rect == (0.0, 0.0, 100, 100)
    assert clear.stops[0] == (0.0, colors.rgba(135, 206, 235, 0.1))
    assert clear.stops[1] == (1.0, colors.rgba(70, 130, 180, 0.1))
    assert murky.stops[0][1][3] == colors.rgba(0, 0, 0, 0.4)[3]
    assert murky.stops[0][1][3] > clear.stops[0][1][3]


def test_seaweed_and_sand(state_factory):
    frame = project(state_factory(), 600, 200, now=0.0)
    strands = [primitive for primitive in frame if isinstance(primitive, Path) and primitive.layer == "background"]
    sand = [primitive for primitive in frame if isinstance(primitive, FilledRect) and primitive.layer == "background"]

    assert len(strands) == 5
    for i, strand in enumerate(strands):
        x = 100.0 * (i + 1)
        assert strand.points[0] == (x, 180)
        assert strand.width == 3.0
        # y = 180, 170, ..., 130 while above 60% of the height
        assert len(strand.points) == 7
        assert strand.points[1] == approx((x + math.sin(180 / 30 + i * 0.5) * 15, 180))
        assert strand.points[-1][1] == approx(130)
    assert sand == [FilledRect(rect=(0.0, 180, 600, 20), color=colors.parse("#d4a373"))]


def test_fish_geometry_follows_heading(fish_factory, state_factory):
    fish = fish_factory(x=100, y=100, vx=10, vy=0, size=20)
    frame = project(state_factory(fish), 400, 400, now=0.0)
    body, tail, eye, pupil = [primitive for primitive in frame if primitive.layer == "fish"]

    assert isinstance(body, Ellipse)
    assert body.center == (100, 100)
    assert body.radii == approx((20, 12))
    assert body.rotation == 0.0
    assert body.fill == colors.parse("#ff6b6b")

    assert isinstance(tail, Polygon)
    for point, expected in zip(tail.points, ((80, 100), (70, 92), (70, 108))):
        assert point == approx(expected)
    assert tail.fill == body.fill

    assert isinstance(eye, Circle) and isinstance(pupil, Circle)
    assert eye.center == approx((106, 96))
    assert eye.radius == approx(3)
    assert eye.fill == colors.WHITE
    assert pupil.center == approx((107, 96))
    assert pupil.radius == approx(1.6)
    assert pupil.fill == colors.BLACK


def test_fish_rotation_uses_velocity_angle(fish_factory, state_factory):
    fish = fish_factory(x=100, y=100, vx=0, vy=5, size=10)
    frame = project(state_factory(fish), 400, 400, now=0.0)
    body, tail = frame[7], frame[8]

    assert body.rotation == approx(math.pi / 2)
    # Swimming down, the tail sits above the body.
    assert tail.points[0] == approx((100, 90))


def test_distress_ring_colours(fish_factory, state_factory):
    healthy = project(state_factory(fish_factory(health=0.6)), 200, 200, now=0.0)
    weak = project(state_factory(fish_factory(health=0.4, size=10)), 200, 200, now=0.0)
    dying = project(state_factory(fish_factory(health=0.2)), 200, 200, now=0.0)

    def rings(frame):
        return [p for p in frame if isinstance(p, Circle) and p.layer == "fish" and p.stroke is not None]

    assert rings(healthy) == []
    (amber,) = rings(weak)
    assert amber.stroke == colors.parse("#ffaa00")
    assert amber.radius == 15
    assert amber.fill is None
    assert amber.stroke_width == 2.0
    (red,) = rings(dying)
    assert red.stroke == colors.parse("#ff0000")


def test_fish_are_drawn_in_state_order(fish_factory, state_factory):
    state = state_factory(
        fish_factory(x=30, y=30, fish_id="first"),
        fish_factory(x=150, y=150, fish_id="second"),
    )

    bodies = [p for p in project(state, 300, 300, now=0.0) if isinstance(p, Ellipse)]

    assert [body.center for body in bodies] == [(30, 30), (150, 150)]


def test_bubbles_follow_wall_clock(state_factory):
    frame = project(state_factory(), 500, 300, now=0.0)
    bubbles = [p for p in frame if p.layer == LAYER_BUBBLES]

    assert len(bubbles) == 10
    assert bubbles[0].center == approx((0.0, -50.0))
    assert bubbles[0].radius == approx(3.0)
    assert bubbles[1].center == approx((50 + math.sin(1) * 20, 50.0))
    assert bubbles[1].radius == approx(3 + math.sin(1) * 2)

    later = [p for p in project(state_factory(), 500, 300, now=2.0) if p.layer == LAYER_BUBBLES]
    assert later[3].center[1] == approx(((2.0 * 30 + 300) % 350) - 50)


def test_balance_indicator(state_factory):
    frame = project(state_factory(work_life_balance=0.5), 800, 600, now=0.0)
    background, fill, border, label = [p for p in frame if p.layer == LAYER_HUD]

    assert background.rect == (580, 20, 200, 10)
    assert background.color == colors.rgba(0, 0, 0, 0.3)
    assert fill.rect == (580, 20, 100, 10)
    assert fill.color == colors.hsl(60, 70, 50)
    assert border.closed
    assert border.points[0] == (580, 20)
    assert border.stroke == colors.rgba(255, 255, 255, 0.5)
    assert isinstance(label, Text)
    assert label.content == "Work-Life Balance"
    assert label.position == (570, 28)
    assert label.style.align == "right"
    assert label.style.size == 12


def test_balance_hue_runs_red_to_green(state_factory):
    def fill_color(balance):
        return [p for p in project(state_factory(work_life_balance=balance), 400, 400, now=0.0) if p.layer == LAYER_HUD][1]

    red = fill_color(0.0)
    green = fill_color(1.0)

    assert red.rect[2] == 0
    assert red.color[0] > red.color[1]
    assert green.rect[2] == 200
    assert green.color[1] > green.color[0]
