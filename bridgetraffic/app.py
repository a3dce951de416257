"""Interactive window: control layout, click handling, UI drawing and the main loop."""

from __future__ import annotations

import argparse
import os
import random
import sys
from dataclasses import dataclass
from enum import Enum, auto
from typing import Sequence

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame  # noqa: E402

from .canvas import WHITE, Canvas, Color, Point  # noqa: E402
from .lighting import WeatherMode  # noqa: E402
from .simulation import CONTROL_BAR_WIDTH, LANE_COUNT, Settings, Simulation  # noqa: E402
from .vehicle import TOP_BAR_HEIGHT, Bridge  # noqa: E402

FRAME_RATE = 25

WEATHER_BUTTON_WIDTH = 80
WEATHER_BUTTON_HEIGHT = 35
WEATHER_BUTTON_SPACING = 10

CONTROL_BUTTON_WIDTH = 60
CONTROL_BUTTON_HEIGHT = 25
CONTROL_BUTTON_SPACING = 5
CONTROL_START_X = 10
CONTROL_START_Y = 10
CONTROL_GROUP_GAP = 20

EXIT_BUTTON_WIDTH = 60
EXIT_BUTTON_HEIGHT = 30
EXIT_BUTTON_MARGIN = 10

LANE_BUTTON_WIDTH = 40

TOP_BAR_FILL: Color = (40, 40, 40)
TOP_BAR_EDGE: Color = (80, 80, 80)
CONTROL_BAR_FILL: Color = (50, 50, 50)
CONTROL_BAR_EDGE: Color = (100, 100, 100)
EXIT_FILL: Color = (180, 70, 70)
ACTIVE_FILL: Color = (0, 120, 215)
IDLE_FILL: Color = (70, 70, 70)

WEATHER_LABELS = {
    WeatherMode.NOTHING: "Clear",
    WeatherMode.RAIN: "Rain",
    WeatherMode.SNOW: "Snow",
}


class Action(Enum):
    """What a click on the interface asks for."""

    EXIT = auto()
    CLEAR_LANE = auto()
    WEATHER = auto()
    FREQUENCY_UP = auto()
    FREQUENCY_DOWN = auto()
    DISTANCE_UP = auto()
    DISTANCE_DOWN = auto()
    STOPPING_UP = auto()
    STOPPING_DOWN = auto()


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle whose edges count as inside."""

    left: int
    top: int
    right: int
    bottom: int

    def contains(self, x: int, y: int) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    @property
    def center(self) -> Point:
        return (self.left + self.right) // 2, (self.top + self.bottom) // 2


@dataclass(frozen=True)
class WeatherButton:
    rect: Rect
    mode: WeatherMode


@dataclass(frozen=True)
class Hit:
    """One action triggered by a click, with the lane or weather it concerns."""

    action: Action
    lane: int | None = None
    weather: WeatherMode | None = None


@dataclass(frozen=True)
class ClickResult:
    """Outcome of a click: whether to quit and whether the interface changed."""

    quit_requested: bool = False
    redraw: bool = False


def _tdiv(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


_CONTROL_STYLE: dict[Action, tuple[str, Color]] = {
    Action.FREQUENCY_UP: ("Freq+", (70, 70, 180)),
    Action.FREQUENCY_DOWN: ("Freq-", (70, 180, 70)),
    Action.DISTANCE_UP: ("Dist+", (180, 70, 70)),
    Action.DISTANCE_DOWN: ("Dist-", (180, 180, 70)),
    Action.STOPPING_UP: ("Dec+", (70, 180, 180)),
    Action.STOPPING_DOWN: ("Dec-", (180, 70, 180)),
}

_SETTING_ACTIONS = {
    Action.FREQUENCY_UP: Settings.increase_frequency,
    Action.FREQUENCY_DOWN: Settings.decrease_frequency,
    Action.DISTANCE_UP: Settings.increase_safe_distance,
    Action.DISTANCE_DOWN: Settings.decrease_safe_distance,
    Action.STOPPING_UP: Settings.increase_stopping_speed,
    Action.STOPPING_DOWN: Settings.decrease_stopping_speed,
}


class Layout:
    """Positions of the top bar, the right control bar and every button."""

    def __init__(self, window_width: int, window_height: int) -> None:
        self.window_width = window_width
        self.window_height = window_height
        self.top_bar_height = TOP_BAR_HEIGHT
        self.road_width = window_width - CONTROL_BAR_WIDTH
        self.lane_count = LANE_COUNT
        self.lane_height = (window_height - TOP_BAR_HEIGHT) // LANE_COUNT

        total = 3 * WEATHER_BUTTON_WIDTH + 2 * WEATHER_BUTTON_SPACING
        start_x = _tdiv(self.road_width - total, 2)
        self.weather_top = (TOP_BAR_HEIGHT - WEATHER_BUTTON_HEIGHT) // 2
        self.weather_buttons = [
            WeatherButton(
                Rect(
                    left,
                    self.weather_top,
                    left + WEATHER_BUTTON_WIDTH,
                    self.weather_top + WEATHER_BUTTON_HEIGHT,
                ),
                mode,
            )
            for left, mode in (
                (start_x + i * (WEATHER_BUTTON_WIDTH + WEATHER_BUTTON_SPACING), mode)
                for i, mode in enumerate((WeatherMode.NOTHING, WeatherMode.RAIN, WeatherMode.SNOW))
            )
        ]

        exit_x = window_width - EXIT_BUTTON_WIDTH - EXIT_BUTTON_MARGIN
        exit_y = (TOP_BAR_HEIGHT - EXIT_BUTTON_HEIGHT) // 2
        self.exit_button = Rect(exit_x, exit_y, exit_x + EXIT_BUTTON_WIDTH, exit_y + EXIT_BUTTON_HEIGHT)

        group_step = 2 * CONTROL_BUTTON_WIDTH + CONTROL_BUTTON_SPACING + CONTROL_GROUP_GAP
        pairs = (
            (Action.FREQUENCY_UP, Action.FREQUENCY_DOWN),
            (Action.DISTANCE_UP, Action.DISTANCE_DOWN),
            (Action.STOPPING_UP, Action.STOPPING_DOWN),
        )
        self.controls: dict[Action, Rect] = {}
        for group, (up, down) in enumerate(pairs):
            x = CONTROL_START_X + group * group_step
            self.controls[up] = self._control_rect(x)
            self.controls[down] = self._control_rect(x + CONTROL_BUTTON_WIDTH + CONTROL_BUTTON_SPACING)
        self.status_x = (
            CONTROL_START_X + 2 * group_step + 2 * CONTROL_BUTTON_WIDTH + CONTROL_BUTTON_SPACING + 10
        )

        button_height = self.lane_height // 2
        button_x = self.road_width + (CONTROL_BAR_WIDTH - LANE_BUTTON_WIDTH) // 2
        self.lane_buttons = [
            Rect(button_x, y, button_x + LANE_BUTTON_WIDTH, y + button_height)
            for y in (
                TOP_BAR_HEIGHT
                + self.lane_height * lane
                + int(0.5 * self.lane_height)
                - button_height // 2
                for lane in range(self.lane_count)
            )
        ]

    @staticmethod
    def _control_rect(x: int) -> Rect:
        return Rect(x, CONTROL_START_Y, x + CONTROL_BUTTON_WIDTH, CONTROL_START_Y + CONTROL_BUTTON_HEIGHT)

    def hit_test(self, x: int, y: int) -> list[Hit]:
        """Return every action a left click at (x, y) triggers, in the order they apply."""
        hits: list[Hit] = []
        if self.exit_button.contains(x, y):
            hits.append(Hit(Action.EXIT))
        if self.road_width <= x <= self.window_width and self.lane_height > 0:
            lane = int((y - self.top_bar_height) / self.lane_height)
            if 0 <= lane < self.lane_count:
                hits.append(Hit(Action.CLEAR_LANE, lane=lane))
        for button in self.weather_buttons:
            if button.rect.contains(x, y):
                hits.append(Hit(Action.WEATHER, weather=button.mode))
                break
        for action, rect in self.controls.items():
            if rect.contains(x, y):
                hits.append(Hit(action))
                break
        return hits


def handle_click(layout: Layout, simulation: Simulation, x: int, y: int) -> ClickResult:
    """Apply a left click at (x, y) to the simulation."""
    quit_requested = False
    redraw = False
    for hit in layout.hit_test(x, y):
        if hit.action is Action.EXIT:
            quit_requested = True
        elif hit.action is Action.CLEAR_LANE:
            simulation.clear_lane(hit.lane)
            redraw = True
        elif hit.action is Action.WEATHER:
            simulation.weather.set_weather(hit.weather)
            redraw = True
        else:
            _SETTING_ACTIONS[hit.action](simulation.settings)
            redraw = True
    return ClickResult(quit_requested, redraw)


def _text_width(message: str, size: int) -> int:
    return len(message) * size // 2


def _centered_text(canvas: Canvas, rect: Rect, message: str, size: int) -> None:
    x = rect.left + (rect.right - rect.left - _text_width(message, size)) // 2
    y = rect.top + (rect.bottom - rect.top - size) // 2
    canvas.text(x, y, message, WHITE, size)


def draw_ui(canvas: Canvas, layout: Layout, simulation: Simulation, bridge: Bridge) -> None:
    """Draw the top parameter bar, the right control bar and all their buttons."""
    width, height, top = layout.window_width, layout.window_height, layout.top_bar_height

    canvas.fill_rectangle(0, 0, width, top, TOP_BAR_FILL)
    canvas.rectangle(0, 0, width, top, TOP_BAR_EDGE, 1)

    ex = layout.exit_button
    canvas.fill_rectangle(ex.left, ex.top, ex.right, ex.bottom, EXIT_FILL)
    canvas.rectangle(ex.left, ex.top, ex.right, ex.bottom, WHITE, 1)
    _centered_text(canvas, ex, "Exit", 16)

    canvas.fill_rectangle(layout.road_width, top, width, height, CONTROL_BAR_FILL)
    canvas.rectangle(layout.road_width, top, width, height, CONTROL_BAR_EDGE, 1)

    info = (
        f"Bridge length: {bridge.bridge_length:.0f}m  "
        f"Bridge width: {bridge.bridge_width:.0f}m  "
        f"Width scale: {bridge.width_scale:.1f}"
    )
    canvas.text(10, (top - 5) // 2, info, WHITE, 20)
    canvas.text(layout.road_width - 160, top + 10, f"Time: {simulation.time:.0f}s", WHITE, 20)

    current = simulation.weather.mode
    weather_info = f"Weather: {WEATHER_LABELS[current]}"
    canvas.text(
        (layout.road_width - _text_width(weather_info, 18)) // 2,
        layout.weather_top - 24,
        weather_info,
        WHITE,
        18,
    )
    for button in layout.weather_buttons:
        r = button.rect
        fill = ACTIVE_FILL if button.mode is current else IDLE_FILL
        canvas.fill_round_rect(r.left, r.top, r.right, r.bottom, 4, fill)
        _centered_text(canvas, r, WEATHER_LABELS[button.mode], 22)

    for action, r in layout.controls.items():
        label, fill = _CONTROL_STYLE[action]
        canvas.fill_rectangle(r.left, r.top, r.right, r.bottom, fill)
        canvas.rectangle(r.left, r.top, r.right, r.bottom, WHITE, 1)
        canvas.text(r.left + 5, r.top + 5, label, WHITE, 14)

    settings = simulation.settings
    status = (
        f"Frequency:{settings.generation_frequency} "
        f"Detection distance:{settings.safe_distance} "
        f"Deceleration:{settings.stopping_speed}"
    )
    canvas.text(layout.status_x, CONTROL_START_Y + 5, status, WHITE, 14)

    arrow_size = layout.lane_height // 2
    for lane, r in enumerate(layout.lane_buttons):
        canvas.fill_round_rect(r.left, r.top, r.right, r.bottom, 4, IDLE_FILL)
        arrow = "\u2192" if lane < layout.lane_count // 2 else "\u2190"
        canvas.text(r.left + 10, r.top, arrow, WHITE, arrow_size)


class PygameCanvas(Canvas):
    """A canvas that renders onto a pygame surface."""

    def __init__(self, surface: pygame.Surface) -> None:
        self.surface = surface
        self._fonts: dict[int, pygame.font.Font] = {}

    @staticmethod
    def _rect(left: int, top: int, right: int, bottom: int) -> pygame.Rect:
        return pygame.Rect(
            min(left, right), min(top, bottom), abs(right - left) + 1, abs(bottom - top) + 1
        )

    def line(self, x1, y1, x2, y2, color, width=1):
        pygame.draw.line(self.surface, color, (x1, y1), (x2, y2), max(1, width))

    def rectangle(self, left, top, right, bottom, color, width=1):
        pygame.draw.rect(self.surface, color, self._rect(left, top, right, bottom), max(1, width))

    def fill_rectangle(self, left, top, right, bottom, color):
        pygame.draw.rect(self.surface, color, self._rect(left, top, right, bottom))

    def fill_round_rect(self, left, top, right, bottom, radius, color):
        pygame.draw.rect(
            self.surface, color, self._rect(left, top, right, bottom), border_radius=radius
        )

    def fill_circle(self, x, y, radius, color):
        pygame.draw.circle(self.surface, color, (x, y), radius)

    def fill_polygon(self, points: Sequence[Point], color):
        if len(points) >= 3:
            pygame.draw.polygon(self.surface, color, list(points))

    def polygon(self, points: Sequence[Point], color, width=1):
        if len(points) >= 3:
            pygame.draw.polygon(self.surface, color, list(points), max(1, width))

    def _font(self, size: int) -> pygame.font.Font:
        if not pygame.font.get_init():
            pygame.font.init()
        font = self._fonts.get(size)
        if font is None:
            font = pygame.font.SysFont("arial", max(1, size))
            self._fonts[size] = font
        return font

    def text(self, x, y, message, color, size=20):
        self.surface.blit(self._font(size).render(message, True, color), (x, y))


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate traffic on a six-lane bridge.")
    parser.add_argument("--length", type=float, default=100.0, help="bridge length in metres")
    parser.add_argument("--width", type=float, default=50.0, help="bridge width in metres")
    parser.add_argument("--width-scale", type=float, default=1.0, help="lateral magnification")
    parser.add_argument("--log-dir", default="log", help="directory for the statistics files")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Open the simulation window and run until the user quits."""
    args = _parse_args(argv)
    bridge = Bridge(args.length, args.width, args.width_scale)
    pygame.init()
    try:
        info = pygame.display.Info()
        window_width, window_height, scale = bridge.calculate_window_size(
            info.current_w, info.current_h
        )
        screen = pygame.display.set_mode((window_width, window_height))
        pygame.display.set_caption("Bridge traffic")
        layout = Layout(window_width, window_height)
        simulation = Simulation(
            layout.road_width, window_height, scale, bridge.width_scale, random.Random(args.seed)
        )
        canvas = PygameCanvas(screen)
        clock = pygame.time.Clock()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    if handle_click(layout, simulation, *event.pos).quit_requested:
                        running = False
                elif event.type == pygame.KEYDOWN and event.key in (pygame.K_ESCAPE, pygame.K_q):
                    running = False
            simulation.step(canvas)
            draw_ui(canvas, layout, simulation, bridge)
            pygame.display.flip()
            clock.tick(FRAME_RATE)

        simulation.statistics.save_all(args.log_dir)
    finally:
        pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())