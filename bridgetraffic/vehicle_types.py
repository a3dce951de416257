"""Sedans, SUVs and trucks: their lane-change curves, safe distances and side views."""

from __future__ import annotations

import random
from dataclasses import InitVar, dataclass
from typing import ClassVar

from .canvas import BLACK, Canvas, Color
from .vehicle import SAFE_DISTANCE, Vehicle

COMMON_COLORS: tuple[Color, ...] = (
    (255, 255, 255),  # white
    (0, 0, 0),  # black
    (255, 0, 0),  # red
    (0, 0, 255),  # blue
    (255, 255, 0),  # yellow
    (0, 255, 0),  # green
    (255, 165, 0),  # orange
    (128, 0, 128),  # purple
    (165, 42, 42),  # brown
    (192, 192, 192),  # silver
    (128, 128, 128),  # grey
    (255, 192, 203),  # pink
    (75, 0, 130),  # indigo
    (240, 230, 140),  # ivory yellow
    (210, 180, 140),  # khaki
    (255, 182, 193),  # light pink
    (176, 224, 230),  # powder blue
    (144, 238, 144),  # light green
    (221, 160, 221),  # plum
    (255, 105, 180),  # hot pink
)

OUTLINE: Color = (30, 30, 30)
DETAIL: Color = (100, 100, 100)
WHEEL_RIM: Color = (50, 50, 50)
HUB: Color = (180, 180, 180)
HEADLIGHT: Color = (255, 255, 200)
TAILLIGHT: Color = (255, 0, 0)
ORANGE: Color = (255, 165, 0)
SEDAN_GLASS: Color = (173, 216, 230)
SKY_GLASS: Color = (135, 206, 250)
WINDOW_FRAME: Color = (80, 80, 80)
WAIST_LINE: Color = (120, 120, 120)
TRIM_LINE: Color = (60, 60, 60)
CAB_FILL: Color = (220, 220, 220)

_color_rng = random.Random()


def generate_vehicle_color(rng: random.Random | None = None) -> Color:
    """Pick a realistic car colour from the common palette."""
    return (rng if rng is not None else _color_rng).choice(COMMON_COLORS)


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating towards zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


class _Frame:
    """Body bounds plus helpers that measure from the rear or the front of the vehicle."""

    def __init__(self, vehicle: Vehicle) -> None:
        self.left, self.top, self.right, self.bottom = vehicle._bounds()
        self.moving_right = vehicle.lane < 3

    def rear(self, offset: int) -> int:
        return self.left + offset if self.moving_right else self.right - offset

    def front(self, offset: int) -> int:
        return self.right - offset if self.moving_right else self.left + offset


def _draw_spokes(canvas: Canvas, cx: int, cy: int, hub: int) -> None:
    d = hub / 1.4
    canvas.line(cx, cy - hub, cx, cy + hub, DETAIL, 2)
    canvas.line(cx - hub, cy, cx + hub, cy, DETAIL, 2)
    canvas.line(int(cx - d), int(cy - d), int(cx + d), int(cy + d), DETAIL, 2)
    canvas.line(int(cx + d), int(cy - d), int(cx - d), int(cy + d), DETAIL, 2)


@dataclass(eq=False)
class _PaletteVehicle(Vehicle):
    """A vehicle whose colour is drawn at random from the common palette on creation."""

    rng: InitVar[random.Random | None] = None

    def __post_init__(self, rng: random.Random | None) -> None:
        self.color = generate_vehicle_color(rng)

    def draw(self, canvas: Canvas) -> None:
        if self.is_broken_down:
            self._draw_broken(canvas)
        else:
            self._draw_body(canvas, _Frame(self))
        self.draw_speed(canvas)

    def _draw_body(self, canvas: Canvas, f: _Frame) -> None:
        raise NotImplementedError


@dataclass(eq=False)
class Sedan(_PaletteVehicle):
    """A saloon car: changes lane quickly and keeps a shorter distance."""

    lane_change_step: ClassVar[float] = 0.025

    def curve(self, t: float) -> float:
        return 4 * t * t * t - 3 * t * t * t * t

    def safe_distance(self, default: int) -> int:
        return int(SAFE_DISTANCE * 0.8)

    def draw(self, canvas: Canvas) -> None:
        super().draw(canvas)

    def _draw_body(self, canvas: Canvas, f: _Frame) -> None:
        length, width = self.length, self.width
        top, bottom = f.top, f.bottom

        body = [
            (f.rear(0), bottom - width // 8),
            (f.rear(length // 8), top + width // 3),
            (f.rear(length // 4), top + width // 8),
            (f.rear(length * 2 // 3), top + width // 8),
            (f.front(length // 10), top + width // 4),
            (f.front(length // 20), top + width // 3),
            (f.front(0), bottom - width // 4),
        ]
        canvas.fill_polygon(body, self.color)
        canvas.polygon(body, OUTLINE, 2)

        window = [
            (f.rear(length * 2 // 3), top + width // 6),
            (f.front(length // 10), top + width // 4),
            (f.front(length // 20), top + width // 3),
            (f.rear(length // 3), top + width // 12),
            (f.rear(length * 2 // 3), top + width // 12),
            (f.rear(length // 4), top + width // 6),
            (f.rear(length // 3), top + width // 12),
        ]
        canvas.fill_polygon(window, SEDAN_GLASS)

        for door_x in (f.rear(length // 3), f.rear(length * 2 // 3)):
            canvas.line(door_x, top + width // 8, door_x, bottom - width // 6, DETAIL, 1)

        waist_y = top + width // 2
        canvas.line(f.rear(length // 8), waist_y, f.front(length // 8), waist_y, WAIST_LINE, 2)

        head_x1, head_x2 = sorted((f.front(length // 10), f.front(length // 30)))
        canvas.fill_rectangle(
            head_x1, top + width // 4, head_x2, top + width // 3,
            HEADLIGHT if f.moving_right else TAILLIGHT,
        )
        tail_x1, tail_x2 = sorted((f.rear(0), f.rear(length // 12)))
        canvas.fill_rectangle(
            tail_x1, top + width // 4, tail_x2, top + width // 3,
            TAILLIGHT if f.moving_right else HEADLIGHT,
        )

        wheel_radius = max(5, width // 5)
        wheel_y = bottom - wheel_radius // 3
        wheels = (f.front(length // 4), f.rear(length // 4))
        for wheel_x in wheels:
            canvas.fill_circle(wheel_x, wheel_y, wheel_radius, BLACK)
        hub_radius = max(3, wheel_radius // 2)
        for wheel_x in wheels:
            canvas.fill_circle(wheel_x, wheel_y, hub_radius, HUB)
        for wheel_x in wheels:
            _draw_spokes(canvas, wheel_x, wheel_y, hub_radius)


@dataclass(eq=False)
class SUV(_PaletteVehicle):
    """A sport utility vehicle with an orange side stripe and a ladder."""

    def curve(self, t: float) -> float:
        return 3 * t * t - 2 * t * t * t

    def safe_distance(self, default: int) -> int:
        return SAFE_DISTANCE

    def draw(self, canvas: Canvas) -> None:
        super().draw(canvas)

    def _draw_body(self, canvas: Canvas, f: _Frame) -> None:
        length, width = self.length, self.width
        top, bottom = f.top, f.bottom

        body = [
            (f.rear(0), bottom - width // 6),
            (f.rear(length // 8), top + width // 8),
            (f.rear(length // 4), top),
            (f.rear(length * 3 // 4), top),
            (f.front(length // 10), top + width // 6),
            (f.front(0), top + width // 3),
            (f.front(0), bottom - width // 8),
        ]
        canvas.fill_polygon(body, self.color)
        canvas.polygon(body, OUTLINE, 2)

        window = [
            (f.rear(length * 3 // 4), top + width // 12),
            (f.front(length // 12), top + width // 4),
            (f.front(length // 15), top + width // 3),
            (f.rear(length // 3), top + width // 12),
            (f.rear(length * 3 // 4), top + width // 12),
            (f.rear(length // 3), top + width // 12),
        ]
        canvas.fill_polygon(window, SKY_GLASS)

        for door_x in (f.rear(length // 3), f.rear(length * 2 // 3)):
            canvas.line(door_x, top + width // 8, door_x, bottom - width // 6, DETAIL, 1)

        canvas.fill_rectangle(f.rear(0), bottom - width // 4, f.front(0), bottom - width // 5, ORANGE)

        trim_y = bottom - width // 8
        canvas.line(f.rear(length // 8), trim_y, f.front(length // 8), trim_y, TRIM_LINE, 1)

        head_x1, head_x2 = sorted((f.front(length // 12), f.front(0)))
        canvas.fill_rectangle(
            head_x1, top + width // 5, head_x2, top + width // 3,
            HEADLIGHT if f.moving_right else TAILLIGHT,
        )
        tail_x1, tail_x2 = sorted((f.rear(0), f.rear(length // 15)))
        canvas.fill_rectangle(
            tail_x1, top + width // 5, tail_x2, top + width // 3,
            TAILLIGHT if f.moving_right else HEADLIGHT,
        )

        wheel_radius = max(5, width // 4)
        wheel_y = bottom - wheel_radius // 3
        wheels = (f.front(length // 5), f.rear(length // 4))
        for wheel_x in wheels:
            canvas.fill_circle(wheel_x, wheel_y, wheel_radius, BLACK)
        hub_radius = max(3, wheel_radius // 2)
        for wheel_x in wheels:
            canvas.fill_circle(wheel_x, wheel_y, hub_radius, HUB)

        ladder_top = top + width // 3
        ladder_bottom = bottom - width // 3
        if f.moving_right:
            ladder_left = f.left + length // 4
            ladder_right = ladder_left + 5
        else:
            ladder_right = f.right - length // 4
            ladder_left = ladder_right - 5
        canvas.line(ladder_left, ladder_top, ladder_left, ladder_bottom, DETAIL, 1)
        canvas.line(ladder_right, ladder_top, ladder_right, ladder_bottom, DETAIL, 1)
        rung_count = 4
        for i in range(1, rung_count + 1):
            rung_y = ladder_top + _tdiv(i * (ladder_bottom - ladder_top), rung_count + 1)
            canvas.line(ladder_left, rung_y, ladder_right, rung_y, DETAIL, 1)


@dataclass(eq=False)
class Truck(_PaletteVehicle):
    """A box truck: changes lane slowly and keeps a longer distance."""

    lane_change_step: ClassVar[float] = 0.015

    def curve(self, t: float) -> float:
        return 2 * t * t - t * t * t

    def safe_distance(self, default: int) -> int:
        return int(SAFE_DISTANCE * 1.5)

    def draw(self, canvas: Canvas) -> None:
        super().draw(canvas)

    def _draw_body(self, canvas: Canvas, f: _Frame) -> None:
        length, width = self.length, self.width
        top, bottom = f.top, f.bottom

        cab_length = max(15, length // 3)
        if f.moving_right:
            cab_left, cab_right = f.right - cab_length, f.right
            cargo_left, cargo_right = f.left, cab_left
        else:
            cab_left, cab_right = f.left, f.left + cab_length
            cargo_left, cargo_right = cab_right, f.right

        canvas.fill_rectangle(cargo_left, top, cargo_right, bottom, self.color)

        cargo_span = cargo_right - cargo_left
        rib_count = max(3, abs(cargo_span) // 25)
        for i in range(1, rib_count):
            rib_x = cargo_left + _tdiv(i * cargo_span, rib_count)
            canvas.line(rib_x, top, rib_x, bottom, DETAIL, 2)

        canvas.fill_round_rect(cab_left, top, cab_right, bottom, 3, CAB_FILL)

        window_top = top + width // 3
        window_bottom = top + width * 2 // 3
        canvas.fill_rectangle(
            cab_left + cab_length // 6, window_top, cab_right - cab_length // 6, window_bottom, SKY_GLASS
        )

        cab_door = _tdiv(cab_left + cab_right, 2)
        canvas.line(cab_door, window_top, cab_door, window_bottom, DETAIL, 1)
        canvas.line(cab_door, window_bottom, cab_door, bottom - width // 5, DETAIL, 1)

        light_size = max(3, width // 6)
        light_y = window_top
        if f.moving_right:
            canvas.fill_rectangle(cab_right - 3, light_y, cab_right, light_y + light_size, HEADLIGHT)
            canvas.fill_rectangle(cargo_left, light_y, cargo_left + 3, light_y + light_size, TAILLIGHT)
        else:
            canvas.fill_rectangle(cab_left, light_y, cab_left + 3, light_y + light_size, HEADLIGHT)
            canvas.fill_rectangle(cargo_right - 3, light_y, cargo_right, light_y + light_size, TAILLIGHT)

        wheel_radius = max(4, width // 4)
        wheel_y = bottom - wheel_radius // 2
        wheels = (
            cab_door,
            cargo_left + abs(cargo_span) * 2 // 3,
            cargo_left + abs(cargo_span) * 5 // 6,
        )
        for wheel_x in wheels:
            canvas.fill_circle(wheel_x, wheel_y, wheel_radius, BLACK)
        hub_radius = max(2, wheel_radius // 2)
        for wheel_x in wheels:
            canvas.fill_circle(wheel_x, wheel_y, hub_radius, HUB)