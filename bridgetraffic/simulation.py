"""The traffic simulation: settings, vehicle generation and per-frame updates."""

from __future__ import annotations

import random
from dataclasses import dataclass

from .canvas import BLACK, WHITE, Canvas, draw_dashed_line
from .lighting import WeatherEffectManager
from .statistics import VehicleStatistics
from .vehicle import (
    DEFAULT_GENERATION_FREQUENCY,
    DEFAULT_STOPPING_SPEED,
    PREDICTION_STEPS,
    SAFE_DISTANCE,
    TOP_BAR_HEIGHT,
    Vehicle,
    clear_lane,
)
from .vehicle_types import SUV, Sedan, Truck

CONTROL_BAR_WIDTH = 60
LANE_COUNT = 6
TIME_STEP = 0.2

MIN_FREQUENCY, MAX_FREQUENCY = 1, 100
MIN_SAFE_DISTANCE, MAX_SAFE_DISTANCE, SAFE_DISTANCE_STEP = 100, 2000, 50
MIN_STOPPING_SPEED, MAX_STOPPING_SPEED = 1, 50

WIDTH_MEAN, WIDTH_STDDEV = 3.0, 0.1
LENGTH_MEAN, LENGTH_STDDEV = 6.0, 0.1
MIN_SPEED, MAX_SPEED = 20, 120

_VEHICLE_KINDS = (Sedan, SUV, Truck)


@dataclass
class Settings:
    """Parameters the user can adjust while the simulation runs."""

    generation_frequency: int = DEFAULT_GENERATION_FREQUENCY
    safe_distance: int = SAFE_DISTANCE
    stopping_speed: int = DEFAULT_STOPPING_SPEED

    def increase_frequency(self) -> None:
        self.generation_frequency = min(self.generation_frequency + 1, MAX_FREQUENCY)

    def decrease_frequency(self) -> None:
        self.generation_frequency = max(self.generation_frequency - 1, MIN_FREQUENCY)

    def increase_safe_distance(self) -> None:
        self.safe_distance = min(self.safe_distance + SAFE_DISTANCE_STEP, MAX_SAFE_DISTANCE)

    def decrease_safe_distance(self) -> None:
        self.safe_distance = max(self.safe_distance - SAFE_DISTANCE_STEP, MIN_SAFE_DISTANCE)

    def increase_stopping_speed(self) -> None:
        self.stopping_speed = min(self.stopping_speed + 1, MAX_STOPPING_SPEED)

    def decrease_stopping_speed(self) -> None:
        self.stopping_speed = max(self.stopping_speed - 1, MIN_STOPPING_SPEED)


class Simulation:
    """Six lanes of traffic on a bridge, three in each direction."""

    def __init__(
        self,
        road_width: int,
        window_height: int,
        scale: float,
        width_scale: float = 1.0,
        rng: random.Random | None = None,
    ) -> None:
        lane_height = (window_height - TOP_BAR_HEIGHT) // LANE_COUNT
        if road_width <= 0 or lane_height <= 0:
            raise ValueError("road area is too small for the lanes")
        self.road_width = road_width
        self.window_width = road_width + CONTROL_BAR_WIDTH
        self.window_height = window_height
        self.scale = scale
        self.width_scale = width_scale
        self.lane_count = LANE_COUNT
        self.lane_height = lane_height
        self.rng = rng if rng is not None else random.Random()
        self.settings = Settings()
        self.statistics = VehicleStatistics()
        self.weather = WeatherEffectManager(road_width, window_height, self.rng)
        self.vehicles: list[Vehicle] = []
        self.time = 0.0

    @property
    def middle_y(self) -> int:
        """Vertical split between right-bound (above) and left-bound (below) traffic."""
        return (self.window_height + TOP_BAR_HEIGHT) // 2

    def lane_center(self, lane: int) -> int:
        """Y coordinate of the centre of a lane."""
        return TOP_BAR_HEIGHT + self.lane_height * lane + int(0.5 * self.lane_height)

    def spawn_vehicle(self) -> Vehicle | None:
        """Try to put a random vehicle at the entry of a random lane.

        Returns the new vehicle, or None when the entry is too close to another one.
        """
        lane = self.rng.randrange(self.lane_count)
        width = int(self.rng.gauss(WIDTH_MEAN, WIDTH_STDDEV) * self.scale * self.width_scale)
        length = int(self.rng.gauss(LENGTH_MEAN, LENGTH_STDDEV) * self.scale)
        if lane < 3:
            x = -(length // 2) - 5
        else:
            x = self.road_width - length // 2 - 1
        y = self.lane_center(lane)

        for existing in self.vehicles:
            if existing.lane != lane:
                continue
            distance = abs(existing.x - x) - (existing.length // 2 + length // 2)
            if distance < self.settings.safe_distance:
                return None

        kind = _VEHICLE_KINDS[self.rng.randrange(len(_VEHICLE_KINDS))]
        speed = self.rng.randint(MIN_SPEED, MAX_SPEED)
        vehicle = kind(lane=lane, length=length, width=width, x=x, y=y, speed=speed, rng=self.rng)
        self.vehicles.append(vehicle)
        self.statistics.record_vehicle(vehicle)
        return vehicle

    def _has_close_vehicle_ahead(self, vehicle: Vehicle) -> bool:
        moving_right = vehicle.lane < 3
        for other in self.vehicles:
            if other is vehicle or other.lane != vehicle.lane:
                continue
            ahead = other.x > vehicle.x if moving_right else other.x < vehicle.x
            if ahead:
                distance = abs(other.x - vehicle.x) - (other.length // 2 + vehicle.length // 2)
                if distance <= SAFE_DISTANCE:
                    return True
        return False

    def _has_left_road(self, vehicle: Vehicle) -> bool:
        half = vehicle.length // 2
        if vehicle.lane < 3:
            return vehicle.x + half >= self.road_width - 1
        return vehicle.x + half < 0

    def _draw_vehicle(self, canvas: Canvas, vehicle: Vehicle, middle_y: int) -> None:
        prediction = vehicle.predict_trajectory(middle_y, self.vehicles)
        prediction.path.draw_trajectory(
            canvas, not vehicle.is_changing_lane and not vehicle.is_going_to_change
        )
        vehicle.draw(canvas)

    def update_vehicles(self, canvas: Canvas | None = None) -> list[Vehicle]:
        """Move every vehicle one frame and drop those that left the road.

        Returns the vehicles that were removed.
        """
        middle_y = self.middle_y
        leaving: list[Vehicle] = []
        for vehicle in self.vehicles:
            vehicle.check_front_vehicle_distance(
                self.vehicles, self.settings.safe_distance, self.settings.stopping_speed, canvas
            )
            if vehicle.speed == 0:
                vehicle.handle_dangerous_situation()
            if not vehicle.is_changing_lane:
                vehicle.move_forward(middle_y)
            if vehicle.is_going_to_change:
                vehicle.smooth_lane_change(self.lane_height, self.vehicles, self.rng)
            if vehicle.is_too_close and not self._has_close_vehicle_ahead(vehicle):
                vehicle.color = vehicle.original_color
                vehicle.is_too_close = False
            if self._has_left_road(vehicle):
                leaving.append(vehicle)
                continue
            if canvas is not None:
                self._draw_vehicle(canvas, vehicle, middle_y)

        gone = set(leaving)
        self.vehicles[:] = [v for v in self.vehicles if v not in gone]
        strays = [v for v in self.vehicles if v.x < 0 or v.x > self.window_width]
        if strays:
            stray_set = set(strays)
            self.vehicles[:] = [v for v in self.vehicles if v not in stray_set]
        return leaving + strays

    def _draw_road(self, canvas: Canvas) -> None:
        canvas.fill_rectangle(0, TOP_BAR_HEIGHT, self.road_width, self.window_height, BLACK)
        self.weather.draw(canvas)
        for i in range(1, self.lane_count):
            y = TOP_BAR_HEIGHT + i * self.lane_height
            draw_dashed_line(canvas, 0, y, self.road_width, y, WHITE)

    def _draw_vehicles(self, canvas: Canvas) -> None:
        for vehicle in self.vehicles:
            self._draw_vehicle(canvas, vehicle, self.window_height // 2)

    def step(self, canvas: Canvas | None = None) -> None:
        """Advance the whole simulation by one frame, drawing it when a canvas is given."""
        self.weather.update()
        if canvas is not None:
            self._draw_road(canvas)
        self.statistics.check_and_record_parameters(
            self.time, self.settings.safe_distance, self.settings.stopping_speed, self.vehicles
        )
        if self.rng.randrange(self.settings.generation_frequency) == 0:
            self.spawn_vehicle()
        self.update_vehicles(canvas)
        if canvas is not None:
            self._draw_vehicles(canvas)
        self.time += TIME_STEP

    def clear_lane(self, lane: int) -> list[Vehicle]:
        """Remove every vehicle in a lane and return them."""
        if not 0 <= lane < self.lane_count:
            raise ValueError(f"lane must be between 0 and {self.lane_count - 1}")
        return clear_lane(self.vehicles, lane)

    def draw(self, canvas: Canvas) -> None:
        """Draw the road, the weather and every vehicle with its predicted path."""
        self._draw_road(canvas)
        self._draw_vehicles(canvas)


__all__ = ["Settings", "Simulation", "PREDICTION_STEPS"]