import random

import pytest

from bridgetraffic.canvas import BLUE, RED, RecordingCanvas
from bridgetraffic.vehicle import (
    CRASH_DISTANCE,
    DEFAULT_STOPPING_SPEED,
    LANE_CHANGE_STEPS,
    PREDICTION_STEPS,
    SAFE_DISTANCE,
    TOP_BAR_HEIGHT,
    Bridge,
    Vehicle,
    VirtualVehicle,
    clear_lane,
)

LANE_HEIGHT = 100


def lane_y(lane):
    return TOP_BAR_HEIGHT + LANE_HEIGHT * lane + LANE_HEIGHT // 2


def car(lane=0, x=100, speed=10, length=40, width=20, **kw):
    return Vehicle(lane=lane, length=length, width=width, x=x, y=lane_y(lane), speed=speed, **kw)


@pytest.mark.parametrize("t", [0.0, 0.1, 0.25, 0.4, 0.7])
def test_curve_is_symmetric(t):
    v = Vehicle()
    assert v.curve(t) + v.curve(1 - t) == pytest.approx(1.0)


def test_curve_endpoints():
    v = Vehicle()
    assert v.curve(0.0) == 0.0
    assert v.curve(1.0) == 1.0


def test_safe_distance_uses_default():
    assert Vehicle().safe_distance(SAFE_DISTANCE) == SAFE_DISTANCE


def test_move_forward_direction():
    upper = car(lane=0, x=100, speed=7)
    upper.move_forward(middle_y=lane_y(3))
    assert upper.x == 107
    lower = car(lane=4, x=100, speed=7)
    lower.move_forward(middle_y=lane_y(3))
    assert lower.x == 93


def test_handle_dangerous_situation():
    v = car(speed=40)
    v.handle_dangerous_situation()
    assert v.is_broken_down
    assert v.speed == 0


def test_virtual_vehicles_overlap_and_separate():
    a = VirtualVehicle(0, 0, 10, 10, [(0, 0), (5, 0)])
    b = VirtualVehicle(0, 0, 10, 10, [(100, 100), (6, 2)])
    assert a.intersects(b, 5)
    assert not a.intersects(b, 1)
    c = VirtualVehicle(0, 0, 10, 10, [(200, 200), (300, 300)])
    assert not a.intersects(c, 5)
    assert not a.intersects(b, 0)


def test_draw_trajectory_colors_and_segments():
    canvas = RecordingCanvas()
    path = VirtualVehicle(0, 0, 10, 10, [(0, 0), (1, 1), (2, 2), (3, 3)])
    path.draw_trajectory(canvas, True)
    lines = canvas.calls_named("line")
    assert len(lines) == 3
    assert all(call.args[4] == BLUE for call in lines)
    red = RecordingCanvas()
    path.draw_trajectory(red, False)
    assert all(call.args[4] == RED for call in red.calls_named("line"))


def test_draw_trajectory_single_point_draws_nothing():
    canvas = RecordingCanvas()
    VirtualVehicle(0, 0, 10, 10, [(0, 0)]).draw_trajectory(canvas, True)
    assert canvas.calls == []


def test_clear_lane_removes_only_that_lane():
    vehicles = [car(lane=0), car(lane=1), car(lane=0, x=400), car(lane=2)]
    removed = clear_lane(vehicles, 0)
    assert len(removed) == 2
    assert [v.lane for v in vehicles] == [1, 2]


def test_crash_breaks_both_down_and_flashes():
    me = car(x=0, length=10, speed=30)
    other = car(x=10 + CRASH_DISTANCE - 5, length=10, speed=30)
    canvas = RecordingCanvas()
    me.check_front_vehicle_distance([me, other], SAFE_DISTANCE, DEFAULT_STOPPING_SPEED, canvas)
    assert me.is_broken_down and other.is_broken_down
    assert me.speed == 0 and other.speed == 0
    assert len(canvas.calls_named("rectangle")) == 1


def test_slow_down_behind_similar_speed():
    me = car(x=0, length=10, speed=50)
    other = car(x=200, length=10, speed=40)
    me.check_front_vehicle_distance([me, other], SAFE_DISTANCE, DEFAULT_STOPPING_SPEED)
    assert me.speed == 50 - DEFAULT_STOPPING_SPEED
    assert not me.is_going_to_change


def test_change_lane_when_much_faster():
    me = car(x=0, length=10, speed=70)
    other = car(x=200, length=10, speed=20)
    me.check_front_vehicle_distance([me, other], SAFE_DISTANCE, DEFAULT_STOPPING_SPEED)
    assert me.is_going_to_change
    assert me.speed == 70


def test_change_lane_behind_broken_vehicle():
    me = car(x=0, length=10, speed=10)
    other = car(x=200, length=10, speed=0, is_broken_down=True)
    me.check_front_vehicle_distance([me, other], SAFE_DISTANCE, DEFAULT_STOPPING_SPEED)
    assert me.is_going_to_change
    assert me.speed == 10


def test_vehicle_behind_is_ignored():
    me = car(x=300, length=10, speed=50)
    behind = car(x=250, length=10, speed=40)
    me.check_front_vehicle_distance([me, behind], SAFE_DISTANCE, DEFAULT_STOPPING_SPEED)
    assert me.speed == 50
    assert not behind.is_broken_down


def test_left_moving_front_is_smaller_x():
    me = car(lane=3, x=300, length=10, speed=50)
    ahead = car(lane=3, x=100, length=10, speed=40)
    me.check_front_vehicle_distance([me, ahead], SAFE_DISTANCE, 5)
    assert me.speed == 45


def test_broken_vehicle_does_not_react():
    me = car(x=0, length=10, speed=0, is_broken_down=True)
    other = car(x=5, length=10, speed=10)
    me.check_front_vehicle_distance([me, other], SAFE_DISTANCE)
    assert not other.is_broken_down


def test_smooth_lane_change_completes():
    me = car(lane=0, x=100, speed=10)
    assert me.smooth_lane_change(LANE_HEIGHT, [me], random.Random(1)) is False
    assert me.is_changing_lane
    assert me.target_lane == 1
    assert len(me.trajectory) == LANE_CHANGE_STEPS + 1
    assert me.end_y == lane_y(1)
    assert (me.end_x, me.end_y) == me.trajectory[-1]

    finished = False
    for _ in range(200):
        if me.smooth_lane_change(LANE_HEIGHT, [me]):
            finished = True
            break
    assert finished
    assert me.lane == 1
    assert not me.is_changing_lane
    assert me.trajectory == []


def test_smooth_lane_change_positions_follow_trajectory():
    me = car(lane=0, x=100, speed=10)
    me.smooth_lane_change(LANE_HEIGHT, [me], random.Random(1))
    me.smooth_lane_change(LANE_HEIGHT, [me])
    assert (me.x, me.y) in me.trajectory


def test_smooth_lane_change_broken_vehicle():
    me = car(is_broken_down=True, is_going_to_change=True)
    assert me.smooth_lane_change(LANE_HEIGHT, [me]) is False
    assert not me.is_going_to_change
    assert not me.is_changing_lane


def test_smooth_lane_change_blocked():
    me = car(lane=0, x=100, speed=10, is_going_to_change=True)
    blocker = car(lane=1, x=100, speed=20)
    assert me.smooth_lane_change(LANE_HEIGHT, [me, blocker], random.Random(1)) is False
    assert not me.is_changing_lane
    assert not me.is_going_to_change
    assert me.trajectory == []


@pytest.mark.parametrize("lane, targets", [(0, {1}), (2, {1}), (3, {4}), (5, {4}), (1, {0, 2}), (4, {3, 5})])
def test_lane_change_target(lane, targets):
    me = car(lane=lane, x=100, speed=10)
    me.smooth_lane_change(LANE_HEIGHT, [me], random.Random(3))
    assert me.target_lane in targets


def test_is_lane_change_safe():
    me = car(lane=0, x=100, speed=10)
    assert me.is_lane_change_safe(LANE_HEIGHT, [me], random.Random(0))
    blocker = car(lane=1, x=100, speed=10)
    assert not me.is_lane_change_safe(LANE_HEIGHT, [me, blocker], random.Random(0))
    me.has_changed = True
    assert me.is_lane_change_safe(LANE_HEIGHT, [me, blocker], random.Random(0))


def test_predict_trajectory_straight_and_clear():
    me = car(lane=0, x=100, speed=10)
    path, free = me.predict_trajectory(lane_y(3), [me])
    assert free
    assert len(path.trajectory) == PREDICTION_STEPS + 1
    assert path.trajectory[0] == (100, me.y)
    assert all(y == me.y for _, y in path.trajectory)
    xs = [x for x, _ in path.trajectory]
    assert xs == sorted(xs)


def test_predict_trajectory_detects_collision():
    me = car(lane=0, x=100, speed=10)
    stopped = car(lane=0, x=120, speed=0)
    assert me.predict_trajectory(lane_y(3), [me, stopped]).collision_free is False


def test_predict_trajectory_uses_lane_change_path():
    me = car(lane=0, x=100, speed=10)
    me.smooth_lane_change(LANE_HEIGHT, [me], random.Random(1))
    path, _ = me.predict_trajectory(lane_y(3), [me])
    assert path.trajectory[1:] == me.trajectory[1:]


def test_draw_normal_and_broken():
    canvas = RecordingCanvas()
    me = car(x=100, speed=33, color=(1, 2, 3))
    me.draw(canvas)
    fills = canvas.calls_named("fill_rectangle")
    assert fills[0].args[4] == (1, 2, 3)
    assert canvas.calls_named("text")[0].args[2] == "33"

    broken = RecordingCanvas()
    me.handle_dangerous_situation()
    me.draw(broken)
    assert len(broken.calls_named("fill_round_rect")) == 1
    assert [c.args[4] for c in broken.calls_named("line")] == [RED, RED]


def test_draw_message_inverts_color():
    canvas = RecordingCanvas()
    me = car(color=(10, 20, 30))
    me.draw_message(canvas, "hi")
    call = canvas.calls_named("text")[0]
    assert call.args[2] == "hi"
    assert call.args[3] == (245, 235, 225)


def test_bridge_window_size():
    width, height, scale = Bridge(100, 50, 1).calculate_window_size(1100, 600)
    assert scale == 10
    assert (width, height) == (1000, 500)


def test_bridge_window_size_keeps_aspect():
    width, height, scale = Bridge(100, 50, 2).calculate_window_size(1920, 1080)
    assert width == int(100 * scale)
    assert height == int(100 * scale)
    assert width <= 1920 and height <= 1080


def test_bridge_invalid_size():
    with pytest.raises(ValueError):
        Bridge(0, 50, 1).calculate_window_size(1100, 600)