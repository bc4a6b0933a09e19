import math
import random

import pytest

from sketchkit.balls import RADIUS, Ball, Simulation, Vec2, ball_mesh


@pytest.fixture
def rng():
    return random.Random(1234)


def make_ball(rng, position, velocity, width=400, height=400):
    ball = Ball(width, height, rng)
    ball.position = Vec2(*position)
    ball.prev_position = ball.position
    ball.velocity = Vec2(*velocity)
    return ball


def test_reset_starts_above_window(rng):
    ball = Ball(400, 300, rng)
    assert ball.position.y == pytest.approx(-0.1 * 300)
    assert 0.0 <= ball.position.x <= 400
    assert ball.prev_position == ball.position
    assert -7.5 <= ball.velocity.x <= 7.5
    assert -7.5 <= ball.velocity.y <= 0.0
    assert ball.has_been_drawn is False


def test_color_channels_in_range(rng):
    ball = Ball(400, 300, rng)
    assert len(ball.color) == 3
    assert all(0.0 <= channel <= 1.0 for channel in ball.color)
    assert max(ball.color) >= 0.75


def test_update_applies_gravity(rng):
    ball = make_ball(rng, (200, 200), (1, 0))
    ball.update()
    assert ball.velocity.y == pytest.approx(ball.gravity)
    assert ball.position.x == pytest.approx(201)
    assert ball.position.y == pytest.approx(200 + ball.gravity)


def test_update_keeps_previous_position_until_drawn(rng):
    ball = make_ball(rng, (200, 200), (1, 0))
    ball.update()
    assert ball.prev_position == Vec2(200, 200)
    ball.trail()
    ball.update()
    assert ball.prev_position.x == pytest.approx(201)


def test_is_colliding_with(rng):
    a = make_ball(rng, (100, 100), (0, 0))
    b = make_ball(rng, (100 + 2 * RADIUS - 1, 100), (0, 0))
    c = make_ball(rng, (100 + 2 * RADIUS, 100), (0, 0))
    assert a.is_colliding_with(b)
    assert not a.is_colliding_with(c)


def test_head_on_collision_exchanges_velocities(rng):
    a = make_ball(rng, (100, 200), (5, 0))
    b = make_ball(rng, (115, 200), (-5, 0))
    a.collide_with(b)
    assert a.velocity == Vec2(-5, 0)
    assert b.velocity == Vec2(5, 0)
    assert a.position.distance(b.position) >= 2 * RADIUS


def test_collision_conserves_momentum(rng):
    a = make_ball(rng, (150, 150), (3, 1))
    b = make_ball(rng, (162, 158), (-2, -1))
    before = a.velocity + b.velocity
    a.collide_with(b)
    after = a.velocity + b.velocity
    assert after.x == pytest.approx(before.x)
    assert after.y == pytest.approx(before.y)


def test_equal_projected_velocities_do_nothing_more(rng):
    a = make_ball(rng, (150, 150), (2, 0))
    b = make_ball(rng, (160, 150), (2, 0))
    a.collide_with(b)
    assert a.velocity == Vec2(2, 0)
    assert b.velocity == Vec2(2, 0)


def test_window_collision_left_wall(rng):
    ball = make_ball(rng, (5, 200), (-3, 0))
    assert ball.is_colliding_with_window()
    ball.collide_with_window()
    assert ball.position.x >= RADIUS
    assert ball.velocity.x == pytest.approx(-3 * -0.95)


def test_window_collision_clamps_far_outside(rng):
    ball = make_ball(rng, (500, 500), (0.1, 0.1), width=400, height=400)
    ball.collide_with_window()
    assert ball.position == Vec2(400 - RADIUS, 400 - RADIUS)
    assert ball.velocity == Vec2(0.0, 0.0)


def test_top_is_open(rng):
    ball = make_ball(rng, (200, -50), (0, -1))
    assert not ball.is_colliding_with_window()


def test_trail_spans_previous_to_current(rng):
    ball = make_ball(rng, (100, 100), (0, 0))
    ball.prev_position = Vec2(100, 100)
    ball.position = Vec2(110, 100)
    color, positions = ball.trail(True)
    assert 3 <= len(positions) <= 30
    assert positions[0] == ball.prev_position
    assert positions[-1].x == pytest.approx(110)
    assert color[0] == pytest.approx(ball.color[0] / len(positions))
    assert ball.has_been_drawn


def test_trail_without_blur(rng):
    ball = make_ball(rng, (100, 100), (0, 0))
    color, positions = ball.trail(False)
    assert color == ball.color
    assert positions == [ball.position]


def test_ball_mesh_shape():
    mesh = ball_mesh(20, RADIUS)
    assert len(mesh.positions) == 22
    assert mesh.indices == list(range(22))
    assert mesh.positions[0] == (0.0, 0.0, 0.0)
    assert mesh.tex_coords[0] == (0.5, 0.5)
    for x, y, z in mesh.positions[1:]:
        assert math.hypot(x, y) == pytest.approx(RADIUS)
        assert z == 0.0
    assert mesh.positions[1][0] == pytest.approx(mesh.positions[-1][0])
    assert mesh.positions[1][1] == pytest.approx(mesh.positions[-1][1])


def test_simulation_steps_per_second(rng):
    sim = Simulation(400, 400, count=5, rng=rng, start=0.0)
    assert sim.update(1.0) == 60
    assert sim.steps_performed == 60


def test_simulation_skips_when_far_behind(rng):
    sim = Simulation(400, 400, count=3, rng=rng, start=0.0)
    assert sim.update(5.0) == 60
    assert sim.steps_performed == 300


def test_simulation_pause_and_resume(rng):
    sim = Simulation(400, 400, count=3, rng=rng, start=0.0)
    sim.update(1.0)
    assert sim.toggle_pause(2.0) is True
    sim.update(10.0)
    assert sim.steps_performed == 120
    assert sim.toggle_pause(10.0) is False
    assert sim.steps_performed == 0
    assert sim.update(10.5) == 30


def test_add_and_remove_balls(rng):
    sim = Simulation(400, 400, count=2, rng=rng)
    first = sim.balls[0]
    sim.add_ball()
    assert len(sim.balls) == 3
    sim.remove_oldest()
    assert len(sim.balls) == 2
    assert first not in sim.balls
    sim.remove_oldest()
    sim.remove_oldest()
    sim.remove_oldest()
    assert sim.balls == []


def test_reset_all(rng):
    sim = Simulation(400, 300, count=4, rng=rng)
    for ball in sim.balls:
        ball.position = Vec2(10, 10)
    sim.reset_all()
    assert all(ball.position.y == pytest.approx(-30) for ball in sim.balls)


def test_perform_collisions_changes_velocities(rng):
    sim = Simulation(400, 400, count=0, rng=rng)
    a = make_ball(rng, (100, 200), (5, 0))
    b = make_ball(rng, (115, 200), (-5, 0))
    sim.balls = [a, b]
    sim.perform_collisions()
    assert a.velocity.x < 0
    assert b.velocity.x > 0