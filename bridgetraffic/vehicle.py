"""Vehicles on the bridge: motion, lane changes, collision checks and drawing."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from itertools import pairwise
from typing import ClassVar, NamedTuple, Sequence

from .canvas import BLUE, RED, WHITE, Canvas, Color

logger = logging.getLogger(__name__)

SAFE_DISTANCE = 700
CRASH_DISTANCE = 25
WAIT = 20
CRASH = 80

DEFAULT_GENERATION_FREQUENCY = 10
DEFAULT_STOPPING_SPEED = 15

TOP_BAR_HEIGHT = 80
LANE_CHANGE_STEPS = 50
PREDICTION_STEPS = 30
HORIZONTAL_FACTOR = 15
SCREEN_MARGIN = 100

FRAME_COLOR: Color = (255, 165, 0)
BROKEN_FILL: Color = (100, 100, 100)


@dataclass(eq=False)
class VirtualVehicle:
    """A footprint that follows a list of predicted positions."""

    x: int
    y: int
    length: int
    width: int
    trajectory: list[tuple[int, int]] = field(default_factory=list)

    def add_point(self, x: int, y: int) -> None:
        self.trajectory.append((x, y))

    def intersects(self, other: VirtualVehicle, future_steps: int) -> bool:
        """Whether the two footprints overlap at any shared step of their paths."""
        steps = min(future_steps, len(self.trajectory), len(other.trajectory))
        for (my_x, my_y), (other_x, other_y) in zip(
            self.trajectory[:steps], other.trajectory[:steps]
        ):
            my_left, my_right = my_x - self.length // 2, my_x + self.length // 2
            my_top, my_bottom = my_y - self.width // 2, my_y + self.width // 2
            other_left = other_x - other.length // 2
            other_right = other_x + other.length // 2
            other_top = other_y - other.width // 2
            other_bottom = other_y + other.width // 2
            separated = (
                my_left > other_right
                or my_right < other_left
                or my_top > other_bottom
                or my_bottom < other_top
            )
            if not separated:
                return True
        return False

    def draw_trajectory(self, canvas: Canvas, safe: bool) -> None:
        """Draw the path in blue when safe, in red otherwise."""
        color = BLUE if safe else RED
        for (x1, y1), (x2, y2) in pairwise(self.trajectory):
            canvas.line(x1, y1, x2, y2, color, 1)


class TrajectoryPrediction(NamedTuple):
    """A vehicle's predicted path and whether it stays clear of all others."""

    path: VirtualVehicle
    collision_free: bool


def _straight_path(vehicle: Vehicle, direction_split: int, steps: int) -> VirtualVehicle:
    path = VirtualVehicle(vehicle.x, vehicle.y, vehicle.length, vehicle.width)
    speed = vehicle.speed if vehicle.y < direction_split else -vehicle.speed
    for i in range(1, steps + 1):
        path.add_point(int(vehicle.x + i * speed * (1.0 / steps) * HORIZONTAL_FACTOR), vehicle.y)
    return path


def _predicted_path(vehicle: Vehicle, direction_split: int, steps: int) -> VirtualVehicle:
    """Path of another vehicle: continuing its lane change, or driving straight."""
    if not vehicle.is_changing_lane:
        return _straight_path(vehicle, direction_split, steps)
    path = VirtualVehicle(vehicle.x, vehicle.y, vehicle.length, vehicle.width)
    speed = vehicle.speed if vehicle.y < direction_split else -vehicle.speed
    for i in range(1, steps + 1):
        t = min(1.0, vehicle.change_progress + i * (1.0 / steps))
        new_y = vehicle.start_y + int((vehicle.end_y - vehicle.start_y) * vehicle.curve(t))
        new_x = int(vehicle.x + i * speed * (1.0 / steps) * HORIZONTAL_FACTOR)
        path.add_point(new_x, new_y)
    return path


@dataclass(eq=False)
class Vehicle:
    """A vehicle driving along one of the six lanes of the bridge."""

    lane: int = 0
    length: int = 0
    width: int = 0
    x: int = 0
    y: int = 0
    speed: int = 0
    has_changed: bool = False
    color: Color = WHITE
    is_changing_lane: bool = False
    is_going_to_change: bool = False
    target_lane: int = 0
    change_progress: float = 0.0
    start_x: int = 0
    start_y: int = 0
    end_x: int = 0
    end_y: int = 0
    is_too_close: bool = False
    original_color: Color = WHITE
    is_broken_down: bool = False
    trajectory: list[tuple[int, int]] = field(default_factory=list)

    lane_change_step: ClassVar[float] = 0.02

    def curve(self, t: float) -> float:
        """Vertical progress of a lane change at time fraction t."""
        return 3 * t * t - 2 * t * t * t

    def safe_distance(self, default: int) -> int:
        """Safe following distance in pixels; a plain vehicle uses the global setting."""
        return int(default)

    def move_forward(self, middle_y: int) -> None:
        self.x += self.speed if self.y < middle_y else -self.speed

    def _pick_target_lane(self, rng: random.Random) -> int:
        if self.lane in (0, 3):
            return self.lane + 1
        if self.lane in (2, 5):
            return self.lane - 1
        if self.lane in (1, 4):
            return self.lane + (1 if rng.randrange(2) else -1)
        return 0

    def _others(self, vehicles: Sequence[Vehicle]):
        return (other for other in vehicles if other is not self)

    def smooth_lane_change(
        self,
        lane_height: int,
        vehicles: Sequence[Vehicle],
        rng: random.Random | None = None,
    ) -> bool:
        """Advance or start a lane change; return True when one has just finished."""
        logger.debug("changing lane smoothly")
        if self.is_broken_down:
            self.is_going_to_change = False
            return False

        if self.is_changing_lane:
            self.change_progress += self.lane_change_step
            if self.change_progress >= 1.0:
                self.change_progress = 1.0
                self.is_changing_lane = False
                self.is_going_to_change = False
                self.lane = self.target_lane
                self.trajectory.clear()
                return True
            if self.trajectory:
                index = min(
                    int(self.change_progress * (len(self.trajectory) - 1)),
                    len(self.trajectory) - 1,
                )
                self.x, self.y = self.trajectory[index]
            return False

        rng = rng if rng is not None else random.Random()
        target = self._pick_target_lane(rng)
        split = lane_height * 3

        current_x, current_y = self.x, self.y
        target_y = TOP_BAR_HEIGHT + lane_height * target + int(0.5 * lane_height)
        delta_y = target_y - current_y
        horizontal_speed = self.speed if self.y < split else -self.speed
        total_horizontal = horizontal_speed * 30

        self.trajectory = [
            (
                current_x + int(total_horizontal * t),
                current_y + int(delta_y * self.curve(t)),
            )
            for t in (i * (1.0 / LANE_CHANGE_STEPS) for i in range(LANE_CHANGE_STEPS + 1))
        ]

        own = VirtualVehicle(self.x, self.y, self.length, self.width, list(self.trajectory))
        for other in self._others(vehicles):
            if own.intersects(_predicted_path(other, split, LANE_CHANGE_STEPS), LANE_CHANGE_STEPS):
                logger.debug("lane change refused")
                self.is_going_to_change = False
                self.trajectory.clear()
                return False

        self.target_lane = target
        self.start_x, self.start_y = self.x, self.y
        self.end_x, self.end_y = self.trajectory[-1]
        self.is_changing_lane = True
        self.change_progress = 0.0
        return False

    def predict_trajectory(
        self, middle_y: int, vehicles: Sequence[Vehicle]
    ) -> TrajectoryPrediction:
        """Predict this vehicle's path and check it against straight paths of the others."""
        path = VirtualVehicle(self.x, self.y, self.length, self.width)
        path.add_point(self.x, self.y)
        if self.is_changing_lane:
            for px, py in self.trajectory[1:]:
                path.add_point(px, py)
        else:
            speed = self.speed if self.y < middle_y else -self.speed
            for i in range(1, PREDICTION_STEPS + 1):
                path.add_point(
                    int(self.x + i * speed * (1.0 / PREDICTION_STEPS) * HORIZONTAL_FACTOR),
                    self.y,
                )

        collision_free = not any(
            path.intersects(_straight_path(other, middle_y, PREDICTION_STEPS), PREDICTION_STEPS)
            for other in self._others(vehicles)
        )
        return TrajectoryPrediction(path, collision_free)

    def is_lane_change_safe(
        self,
        lane_height: int,
        vehicles: Sequence[Vehicle],
        rng: random.Random | None = None,
    ) -> bool:
        """Whether a lane change started now would stay clear of every other vehicle."""
        if self.has_changed:
            return True
        rng = rng if rng is not None else random.Random()
        target = self._pick_target_lane(rng)
        split = lane_height * 3

        path = VirtualVehicle(self.x, self.y, self.length, self.width)
        path.add_point(self.x, self.y)
        target_y = TOP_BAR_HEIGHT + lane_height * target + int(0.5 * lane_height)
        speed = self.speed if self.y < split else -self.speed
        for i in range(1, PREDICTION_STEPS + 1):
            t = min(1.0, i * (1.0 / PREDICTION_STEPS))
            new_y = self.y + int((target_y - self.y) * self.curve(t))
            new_x = int(self.x + i * speed * (1.0 / PREDICTION_STEPS) * HORIZONTAL_FACTOR)
            path.add_point(new_x, new_y)

        return not any(
            path.intersects(_predicted_path(other, split, PREDICTION_STEPS), PREDICTION_STEPS)
            for other in self._others(vehicles)
        )

    def check_front_vehicle_distance(
        self,
        vehicles: Sequence[Vehicle],
        safe_distance: int,
        stopping_speed: int = DEFAULT_STOPPING_SPEED,
        canvas: Canvas | None = None,
    ) -> None:
        """React to the nearest vehicle ahead: slow down, prepare a lane change, or crash."""
        if self.is_broken_down:
            return
        moving_right = self.lane < 3
        for other in self._others(vehicles):
            if other.lane != self.lane:
                continue
            ahead = other.x > self.x if moving_right else other.x < self.x
            if not ahead:
                continue

            distance = abs(other.x - self.x) - (other.length // 2 + self.length // 2)
            if CRASH_DISTANCE < distance <= safe_distance:
                if canvas is not None:
                    self.draw_flashing_frame(canvas)
                relative_speed = abs(self.speed - other.speed)
                if relative_speed:
                    logger.debug("relative speed: %d", relative_speed)
                if relative_speed <= WAIT:
                    if other.is_broken_down:
                        self.is_going_to_change = True
                    else:
                        self.speed -= stopping_speed
                elif relative_speed <= CRASH:
                    logger.debug("trying to change lane")
                    self.is_going_to_change = True
                return
            if distance <= CRASH_DISTANCE:
                if canvas is not None:
                    self.draw_flashing_frame(canvas)
                other.handle_dangerous_situation()
                self.handle_dangerous_situation()
                return

    def handle_dangerous_situation(self) -> None:
        self.is_broken_down = True
        self.speed = 0

    def _bounds(self) -> tuple[int, int, int, int]:
        return (
            self.x - self.length // 2,
            self.y - self.width // 2,
            self.x + self.length // 2,
            self.y + self.width // 2,
        )

    def _draw_broken(self, canvas: Canvas) -> None:
        left, top, right, bottom = self._bounds()
        canvas.fill_round_rect(left, top, right, bottom, 4, BROKEN_FILL)
        qx, qy = self.length // 4, self.width // 4
        canvas.line(self.x - qx, self.y - qy, self.x + qx, self.y + qy, RED, 3)
        canvas.line(self.x - qx, self.y + qy, self.x + qx, self.y - qy, RED, 3)

    def draw(self, canvas: Canvas) -> None:
        if self.is_broken_down:
            self._draw_broken(canvas)
        else:
            canvas.fill_rectangle(*self._bounds(), self.color)
        self.draw_speed(canvas)

    def draw_speed(self, canvas: Canvas) -> None:
        canvas.text(self.x - 10, self.y - self.width // 2 - 25, str(self.speed), WHITE, 20)

    def draw_flashing_frame(self, canvas: Canvas) -> None:
        """Outline the vehicle in orange as a distance warning."""
        left, top, right, bottom = self._bounds()
        canvas.rectangle(left - 5, top - 5, right + 5, bottom + 5, FRAME_COLOR, 2)

    def draw_message(self, canvas: Canvas, message: str) -> None:
        """Show a message above the vehicle in the inverse of its colour."""
        r, g, b = self.color
        size = self.width
        # Text is assumed to be about half the font size wide per character.
        text_width = len(message) * size // 2
        canvas.text(
            self.x - text_width // 2,
            self.y - self.length // 2 - self.width,
            message,
            (255 - r, 255 - g, 255 - b),
            size,
        )


@dataclass
class Bridge:
    """Bridge dimensions in metres and the lateral magnification of the drawing."""

    bridge_length: float = 100.0
    bridge_width: float = 50.0
    width_scale: float = 1.0

    def calculate_window_size(self, screen_width: int, screen_height: int) -> tuple[int, int, float]:
        """Return (window_width, window_height, scale) that fit the screen less a margin."""
        width = int(self.bridge_length)
        height = int(self.bridge_width * self.width_scale)
        if width <= 0 or height <= 0:
            raise ValueError("bridge dimensions must be positive")
        scale = min(
            (screen_width - SCREEN_MARGIN) / width,
            (screen_height - SCREEN_MARGIN) / height,
        )
        return int(width * scale), int(height * scale), scale


def clear_lane(vehicles: list[Vehicle], lane: int) -> list[Vehicle]:
    """Remove every vehicle in the lane from the list in place; return those removed."""
    removed = [v for v in vehicles if v.lane == lane]
    vehicles[:] = [v for v in vehicles if v.lane != lane]
    return removed