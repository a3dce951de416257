"""Bridge lighting recommendations and animated weather effects."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum, auto

from .canvas import WHITE, Canvas

MENU_HEIGHT = 80
SNOW_TOP = 90
RAIN_COUNT = 250
SNOW_COUNT = 150
RAIN_COLOR = (135, 206, 250)


class WeatherMode(Enum):
    """Visual weather effect shown on the road."""

    RAIN = auto()
    SNOW = auto()
    NOTHING = auto()


class WeatherCondition(Enum):
    SUNNY = auto()
    CLOUDY = auto()
    OVERCAST = auto()
    LIGHT_RAIN = auto()
    MODERATE_RAIN = auto()
    HEAVY_RAIN = auto()
    CLEAR_NIGHT = auto()
    CLOUDY_NIGHT = auto()
    RAINY_NIGHT = auto()
    LIT_BRIDGE = auto()


class TimeOfDay(Enum):
    DAY = auto()
    NIGHT = auto()


@dataclass(frozen=True)
class EnvironmentConfig:
    """Illuminance and the traffic limits recommended for it."""

    illuminance_lux: float
    recommended_speed_kmh: float
    min_safe_distance_m: float

    def __str__(self) -> str:
        return (
            f"Illuminance: {self.illuminance_lux:g} lux, "
            f"Speed: {self.recommended_speed_kmh:g} km/h, "
            f"Distance: {self.min_safe_distance_m:g} m"
        )


_DAY_LUX = {
    WeatherCondition.SUNNY: 100000.0,
    WeatherCondition.CLOUDY: 20000.0,
    WeatherCondition.OVERCAST: 5000.0,
    WeatherCondition.LIGHT_RAIN: 2000.0,
    WeatherCondition.MODERATE_RAIN: 1500.0,
    WeatherCondition.HEAVY_RAIN: 500.0,
}

_NIGHT_LUX = {
    WeatherCondition.CLEAR_NIGHT: 0.2,
    WeatherCondition.CLOUDY_NIGHT: 0.15,
    WeatherCondition.RAINY_NIGHT: 0.03,
    WeatherCondition.LIT_BRIDGE: 15.0,
}


def get_environment_config(time: TimeOfDay, weather: WeatherCondition) -> EnvironmentConfig:
    """Return the recommended speed and distance for a time of day and weather.

    Raises ValueError when the weather does not occur at that time of day.
    """
    lux_table = _DAY_LUX if time is TimeOfDay.DAY else _NIGHT_LUX
    try:
        lux = lux_table[weather]
    except KeyError:
        raise ValueError("Unsupported weather/time combination") from None

    if time is TimeOfDay.DAY:
        if lux >= 80000:
            speed, distance = 100.0, 50.0
        elif lux >= 10000:
            speed, distance = 90.0, 45.0
        elif lux >= 3000:
            speed, distance = 70.0, 40.0
        elif lux <= 500:
            speed, distance = 40.0, 60.0
        elif lux <= 1500:
            speed, distance = 50.0, 55.0
        else:
            speed, distance = 60.0, 50.0
    elif weather is WeatherCondition.LIT_BRIDGE:
        speed, distance = 80.0, 45.0
    elif lux >= 0.15:
        speed, distance = 60.0, 50.0
    else:
        speed, distance = 40.0, 60.0

    return EnvironmentConfig(lux, speed, distance)


@dataclass
class Particle:
    x: float
    y: float


class WeatherEffectManager:
    """Rain and snow particles falling over the road area."""

    def __init__(self, width: int, height: int, rng: random.Random | None = None) -> None:
        if height <= MENU_HEIGHT or width <= 0:
            raise ValueError("weather area must be wider than 0 and taller than the menu bar")
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else random.Random()
        self.mode = WeatherMode.NOTHING
        self.rain = [self._spawn() for _ in range(RAIN_COUNT)]
        self.snow = [self._spawn() for _ in range(SNOW_COUNT)]

    def _spawn(self) -> Particle:
        return Particle(
            float(self.rng.randrange(self.width)),
            float(MENU_HEIGHT + self.rng.randrange(self.height - MENU_HEIGHT)),
        )

    def set_weather(self, mode: WeatherMode) -> None:
        self.mode = mode

    def update(self) -> None:
        """Advance the particles of the current weather by one frame."""
        if self.mode is WeatherMode.RAIN:
            for drop in self.rain:
                drop.y += 10
                if drop.y > self.height:
                    drop.y = MENU_HEIGHT
                    drop.x = float(self.rng.randrange(self.width))
        elif self.mode is WeatherMode.SNOW:
            for flake in self.snow:
                flake.y += 1.5
                flake.x += self.rng.randint(-1, 1)
                if flake.y > self.height:
                    flake.y = MENU_HEIGHT
                    flake.x = float(self.rng.randrange(self.width))
                flake.y = max(flake.y, SNOW_TOP)
                flake.x = min(max(flake.x, 0), self.width)

    def draw(self, canvas: Canvas) -> None:
        """Draw the particles of the current weather."""
        if self.mode is WeatherMode.RAIN:
            for drop in self.rain:
                if drop.y >= MENU_HEIGHT:
                    x, y = int(drop.x), int(drop.y)
                    canvas.line(x, y, x, int(drop.y + 6), RAIN_COLOR, 1)
        elif self.mode is WeatherMode.SNOW:
            for flake in self.snow:
                if flake.y >= SNOW_TOP:
                    canvas.fill_circle(int(flake.x), int(flake.y), 2, WHITE)