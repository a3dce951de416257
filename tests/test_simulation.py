import random

import pytest

from bridgetraffic.canvas import BLACK, RecordingCanvas
from bridgetraffic.simulation import Settings, Simulation
from bridgetraffic.vehicle import Vehicle
from bridgetraffic.vehicle_types import SUV, Sedan, Truck

ROAD_WIDTH = 1000
WINDOW_HEIGHT = 680


def _sim(seed=3):
    return Simulation(ROAD_WIDTH, WINDOW_HEIGHT, 10.0, 1.0, random.Random(seed))


def _car(sim, lane, x, speed, length=20):
    return Vehicle(lane=lane, length=length, width=10, x=x, y=sim.lane_center(lane), speed=speed)


def test_settings_defaults():
    settings = Settings()
    assert (settings.generation_frequency, settings.safe_distance, settings.stopping_speed) == (10, 700, 15)


def test_settings_are_clamped():
    settings = Settings()
    for _ in range(200):
        settings.increase_frequency()
        settings.increase_safe_distance()
        settings.increase_stopping_speed()
    assert (settings.generation_frequency, settings.safe_distance, settings.stopping_speed) == (100, 2000, 50)
    for _ in range(200):
        settings.decrease_frequency()
        settings.decrease_safe_distance()
        settings.decrease_stopping_speed()
    assert (settings.generation_frequency, settings.safe_distance, settings.stopping_speed) == (1, 100, 1)


def test_too_small_window_is_rejected():
    with pytest.raises(ValueError):
        Simulation(100, 80, 1.0)


def test_lane_centers_are_one_lane_apart():
    sim = _sim()
    centers = [sim.lane_center(lane) for lane in range(sim.lane_count)]
    assert all(b - a == sim.lane_height for a, b in zip(centers, centers[1:]))
    assert centers[2] < sim.middle_y < centers[3]


def test_spawn_vehicle_on_empty_road():
    sim = _sim()
    vehicle = sim.spawn_vehicle()
    assert vehicle in sim.vehicles
    assert isinstance(vehicle, (Sedan, SUV, Truck))
    assert vehicle.y == sim.lane_center(vehicle.lane)
    if vehicle.lane < 3:
        assert vehicle.x == -(vehicle.length // 2) - 5
    else:
        assert vehicle.x == ROAD_WIDTH - vehicle.length // 2 - 1
    assert 20 <= vehicle.speed <= 120
    assert sim.statistics.count.total == 1


def test_spawn_refused_when_entries_are_occupied():
    sim = _sim()
    for lane in range(sim.lane_count):
        sim.vehicles.append(_car(sim, lane, 0 if lane < 3 else ROAD_WIDTH, 0, length=10))
    assert sim.spawn_vehicle() is None
    assert len(sim.vehicles) == sim.lane_count
    assert sim.statistics.count.total == 0


def test_update_moves_vehicles_by_direction():
    sim = _sim()
    right = _car(sim, 0, 100, 30)
    left = _car(sim, 4, 600, 25)
    sim.vehicles.extend([right, left])
    removed = sim.update_vehicles()
    assert removed == []
    assert right.x == 130
    assert left.x == 575


def test_vehicle_reaching_right_edge_is_removed():
    sim = _sim()
    car = _car(sim, 0, ROAD_WIDTH - 20, 30)
    sim.vehicles.append(car)
    assert sim.update_vehicles() == [car]
    assert sim.vehicles == []


def test_vehicle_leaving_left_edge_is_removed():
    sim = _sim()
    car = _car(sim, 3, 10, 30)
    sim.vehicles.append(car)
    assert sim.update_vehicles() == [car]
    assert sim.vehicles == []


def test_stopped_vehicle_breaks_down():
    sim = _sim()
    car = _car(sim, 1, 300, 0)
    sim.vehicles.append(car)
    sim.update_vehicles()
    assert car.is_broken_down
    assert car.x == 300


def test_close_vehicles_crash():
    sim = _sim()
    rear, front = _car(sim, 0, 100, 30), _car(sim, 0, 110, 30)
    sim.vehicles.extend([rear, front])
    sim.update_vehicles()
    assert rear.is_broken_down and front.is_broken_down
    assert rear.speed == 0 and front.speed == 0


def test_follower_slows_down_by_stopping_speed():
    sim = _sim()
    rear, front = _car(sim, 0, 100, 50), _car(sim, 0, 400, 40)
    sim.vehicles.extend([rear, front])
    sim.update_vehicles()
    assert rear.speed == 50 - sim.settings.stopping_speed
    assert front.speed == 40


def test_clear_lane():
    sim = _sim()
    sim.vehicles.extend([_car(sim, 0, 100, 30), _car(sim, 0, 500, 30), _car(sim, 2, 100, 30)])
    removed = sim.clear_lane(0)
    assert len(removed) == 2
    assert [v.lane for v in sim.vehicles] == [2]


@pytest.mark.parametrize("lane", [-1, 6])
def test_clear_lane_out_of_range(lane):
    with pytest.raises(ValueError):
        _sim().clear_lane(lane)


def test_step_advances_time():
    sim = _sim()
    for _ in range(5):
        sim.step()
    assert sim.time == pytest.approx(1.0)


def test_step_records_parameters_on_change_only():
    sim = _sim()
    sim.step()
    sim.step()
    assert len(sim.statistics.records) == 1
    sim.settings.increase_safe_distance()
    sim.step()
    assert len(sim.statistics.records) == 2
    assert sim.statistics.records[-1].safe_distance == sim.settings.safe_distance


def test_step_draws_road_first():
    sim = _sim()
    canvas = RecordingCanvas()
    sim.step(canvas)
    first = canvas.calls[0]
    assert first.name == "fill_rectangle"
    assert first.args == (0, 80, ROAD_WIDTH, WINDOW_HEIGHT, BLACK)
    assert len(canvas.calls_named("line")) > 0


def test_draw_shows_every_vehicle():
    sim = _sim()
    sim.vehicles.extend([_car(sim, 0, 100, 30), _car(sim, 4, 600, 25)])
    canvas = RecordingCanvas()
    sim.draw(canvas)
    speeds = sorted(call.args[2] for call in canvas.calls_named("text"))
    assert speeds == ["25", "30"]