# bridgetraffic

An interactive simulation of traffic on a six-lane bridge. The three upper
lanes carry traffic to the right and the three lower lanes carry it to the
left. Sedans, SUVs and trucks are spawned at random with random speeds and
colours. Each vehicle watches the vehicle ahead of it. When it gets within the
detection distance, it either slows down or prepares a smooth lane change. If
it comes within the crash distance, both vehicles break down and are drawn
grey with a red cross. Every vehicle is drawn with its speed and a predicted
trajectory. The trajectory is blue while the vehicle drives straight and red
while it is preparing or making a lane change. Rain and snow can be shown over
the road.

## Installation

```
pip install .
```

This installs `pygame` as well. To run the tests, install the `test` extra
(`pip install .[test]`) and run `pytest`.

## Running

```
bridgetraffic
```

The window opens at a size that fits your screen, less a margin of 100 pixels.
The command takes these options:

| Option          | Default | Meaning                                  |
|-----------------|---------|------------------------------------------|
| `--length`      | 100     | bridge length in metres                  |
| `--width`       | 50      | bridge width in metres                   |
| `--width-scale` | 1.0     | lateral magnification of the drawing     |
| `--log-dir`     | `log`   | directory for the statistics files       |
| `--seed`        | none    | seed for the random number generator     |

### Top bar

- **Freq+ / Freq-** set the vehicle generation frequency, from 1 to 100. A
  vehicle spawn is tried on one frame in *frequency*, so a lower value spawns
  vehicles more often.
- **Dist+ / Dist-** set the detection (safe) distance in pixels, in steps of 50,
  from 100 to 2000.
- **Dec+ / Dec-** set the deceleration, from 1 to 50. This is how much speed a
  vehicle loses per frame when it closes in on a vehicle ahead of nearly the
  same speed.
- **Clear / Rain / Snow** switch the weather effect.
- **Exit** quits. Closing the window, `Esc` and `q` also quit.

The current settings, the weather and the elapsed simulation time are shown
in the window.

### Right control bar

There is one button per lane, marked with the lane's direction. Clicking it
removes every vehicle in that lane, including broken-down ones.

## Statistics

When the window is closed, two CSV files are written to the log directory:

- `vehicle_probability_statistics.csv` has the columns
  `VehicleType,Count,Probability`. It holds how many sedans, SUVs and trucks
  were spawned and their share of all spawned vehicles.
- `breakdown_rate_statistics.csv` has the columns
  `Time(s),SafeDistance,Deceleration,BreakdownCount,VehicleCount,BreakdownRate`.
  It holds one row for the starting settings and one more for every later
  change of the safe distance or the deceleration.

## Using the pieces as a library

The simulation logic does not depend on pygame. It draws through the small
`bridgetraffic.canvas.Canvas` interface. `RecordingCanvas` records the drawing
calls instead of rendering them, so the simulation can be stepped without a
window. Pass no canvas at all to skip drawing:

```python
import random
from bridgetraffic.canvas import RecordingCanvas
from bridgetraffic.simulation import Simulation

sim = Simulation(road_width=1200, window_height=700, scale=12.0,
                 width_scale=1.0, rng=random.Random(1))
canvas = RecordingCanvas()
for _ in range(100):
    sim.step(canvas)

print(len(sim.vehicles), sim.statistics.count)
sim.settings.increase_safe_distance()
sim.clear_lane(0)
sim.statistics.save_all("log")
```

The modules are:

- `bridgetraffic.canvas`: the `Canvas` interface, `RecordingCanvas` and the
  dashed lane-divider helpers.
- `bridgetraffic.vehicle`: `Vehicle`, with motion, lane changes, front-distance
  checks and drawing. It also holds `VirtualVehicle` for trajectory overlap
  tests, `Bridge` for window sizing, and `clear_lane`.
- `bridgetraffic.vehicle_types`: `Sedan`, `SUV` and `Truck`. Each type has its
  own lane-change curve, lane-change speed, safe distance and side view.
- `bridgetraffic.statistics`: `VehicleStatistics`, which counts vehicles and
  records breakdown rates.
- `bridgetraffic.simulation`: `Settings` and `Simulation`.
- `bridgetraffic.lighting`: the weather particle effects
  (`WeatherEffectManager`, `WeatherMode`) and the lighting table.
- `bridgetraffic.app`: the pygame window, its layout and click handling, and
  `main`.

`get_environment_config` returns the illuminance, the recommended speed and
the minimum safe distance for a time of day and a weather condition. It
raises `ValueError` for a weather that does not occur at that time:

```python
from bridgetraffic.lighting import TimeOfDay, WeatherCondition, get_environment_config

print(get_environment_config(TimeOfDay.DAY, WeatherCondition.SUNNY))
# Illuminance: 100000 lux, Speed: 100 km/h, Distance: 50 m
```

## Limits

- The lighting table is a standalone lookup. The running simulation does not
  use it, and the weather effects are visual only. They do not change vehicle
  speeds or distances.
- The statistics files are written only when the window is closed normally.
  Nothing is saved while the simulation runs.