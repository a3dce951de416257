"""Drawing surface abstraction and the dashed lane-divider helper."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence

Color = tuple[int, int, int]
Point = tuple[int, int]

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)
RED: Color = (170, 0, 0)
BLUE: Color = (0, 0, 170)

DASH_LENGTH = 10
GAP_LENGTH = 10


class Canvas(ABC):
    """A surface that the simulation draws on."""

    @abstractmethod
    def line(self, x1: int, y1: int, x2: int, y2: int, color: Color, width: int = 1) -> None:
        """Draw a straight line."""

    @abstractmethod
    def rectangle(
        self, left: int, top: int, right: int, bottom: int, color: Color, width: int = 1
    ) -> None:
        """Draw a rectangle outline."""

    @abstractmethod
    def fill_rectangle(self, left: int, top: int, right: int, bottom: int, color: Color) -> None:
        """Draw a filled rectangle."""

    @abstractmethod
    def fill_round_rect(
        self, left: int, top: int, right: int, bottom: int, radius: int, color: Color
    ) -> None:
        """Draw a filled rectangle with rounded corners."""

    @abstractmethod
    def fill_circle(self, x: int, y: int, radius: int, color: Color) -> None:
        """Draw a filled circle."""

    @abstractmethod
    def fill_polygon(self, points: Sequence[Point], color: Color) -> None:
        """Draw a filled polygon."""

    @abstractmethod
    def polygon(self, points: Sequence[Point], color: Color, width: int = 1) -> None:
        """Draw a polygon outline."""

    @abstractmethod
    def text(self, x: int, y: int, message: str, color: Color, size: int = 20) -> None:
        """Draw text with its top-left corner at (x, y)."""


@dataclass(frozen=True)
class DrawCall:
    """One recorded drawing operation."""

    name: str
    args: tuple


@dataclass
class RecordingCanvas(Canvas):
    """A canvas that records every drawing operation instead of rendering it."""

    calls: list[DrawCall] = field(default_factory=list)

    def _record(self, name: str, *args) -> None:
        self.calls.append(DrawCall(name, args))

    def line(self, x1, y1, x2, y2, color, width=1):
        self._record("line", x1, y1, x2, y2, color, width)

    def rectangle(self, left, top, right, bottom, color, width=1):
        self._record("rectangle", left, top, right, bottom, color, width)

    def fill_rectangle(self, left, top, right, bottom, color):
        self._record("fill_rectangle", left, top, right, bottom, color)

    def fill_round_rect(self, left, top, right, bottom, radius, color):
        self._record("fill_round_rect", left, top, right, bottom, radius, color)

    def fill_circle(self, x, y, radius, color):
        self._record("fill_circle", x, y, radius, color)

    def fill_polygon(self, points, color):
        self._record("fill_polygon", tuple(tuple(p) for p in points), color)

    def polygon(self, points, color, width=1):
        self._record("polygon", tuple(tuple(p) for p in points), color, width)

    def text(self, x, y, message, color, size=20):
        self._record("text", x, y, message, color, size)

    def calls_named(self, name: str) -> list[DrawCall]:
        """Return the recorded calls with the given operation name, in order."""
        return [call for call in self.calls if call.name == name]


def _round_half_away(value: float) -> int:
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))


def dashed_line_segments(x1: int, y1: int, x2: int, y2: int) -> list[tuple[int, int, int, int]]:
    """Return the dash segments of a dashed line from (x1, y1) towards (x2, y2).

    Dashes stop as soon as one would reach beyond the end point in the
    positive x or y direction.
    """
    dx = x2 - x1
    dy = y2 - y1
    steps = max(abs(dx), abs(dy))
    if steps == 0:
        return []
    x_inc = dx / steps
    y_inc = dy / steps

    segments = []
    for i in range(0, steps, DASH_LENGTH + GAP_LENGTH):
        start_x = _round_half_away(x1 + i * x_inc)
        start_y = _round_half_away(y1 + i * y_inc)
        end_x = _round_half_away(start_x + DASH_LENGTH * x_inc)
        end_y = _round_half_away(start_y + DASH_LENGTH * y_inc)
        if end_x > x2 or end_y > y2:
            break
        segments.append((start_x, start_y, end_x, end_y))
    return segments


def draw_dashed_line(canvas: Canvas, x1: int, y1: int, x2: int, y2: int, color: Color = WHITE) -> None:
    """Draw a dashed line on the canvas."""
    for segment in dashed_line_segments(x1, y1, x2, y2):
        canvas.line(*segment, color, 1)