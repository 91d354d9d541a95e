# sailnav

Navigation and control logic for a small autonomous sailboat, written in
plain Python with no dependencies beyond the standard library
(Python 3.10 or later).

What is in the package:

- `sailnav.geo`: bearing and great-circle distance between two positions,
  the no-go zone around the wind, and a simple polar model of boat speed.
- `sailnav.planner.LaylinePathPlanner`: decides between sailing straight to
  a waypoint and tacking upwind, using VMG-optimal tack angles, layline
  crossing detection with several confirmations before a tack, a decision
  cooldown, protection against tacking too early in a leg, and heading
  smoothing.
- `sailnav.servo`: a PI rudder controller and a sail trim that follows the
  wind angle (`RudderSailController`, `calculate_shortest_path`,
  `sail_position_for_wind`, `map_range`).
- `sailnav.xbee.XbeeLink`: reads `key:value|` commands from a radio serial
  port and sends back the telemetry fields that have changed.
- `sailnav.bus.I2CBus`: an abstract I2C bus, with `I2CError`, used by the
  sensor drivers `sailnav.cmps12.CMPS12`, `sailnav.qmc5883l.QMC5883L` and
  `sailnav.gnss.GNSS`.
- `sailnav.shared_data.SharedData`: the record of boat state, targets and
  readings that everything reads from and writes to. A value of zero means
  "not yet known".
- `sailnav.app.Boat`: one path-planning step and one compass-reading step
  against the shared state, plus the `sailnav` command.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Command line

The `sailnav` command runs the path planner for a number of simulated steps
on fixed inputs and prints each step's inputs and chosen heading:

```
sailnav --iterations 10 --step 0.5 --boat 48.8566 2.3522 --waypoint 48.8600 2.3530 --compass 0 --wind-vane 0 --wind-speed 5
```

Options:

- `--iterations N`: number of steps (default 10; must not be negative).
- `--step SECONDS`: simulated time between steps (default 0.5).
- `--boat LAT LON`, `--waypoint LAT LON`: positions in degrees.
- `--compass DEG` (integer), `--wind-vane DEG`, `--wind-speed M/S`.

Any input left out or given as zero falls back to a built-in default:
boat 48.8566, 2.3522; waypoint 47.253699, -1.370199; compass 90; wind vane
180; wind speed 5 m/s. The position does not change between steps.

## Using the library

### Bearings, distances and the no-go zone

```python
from sailnav.geo import (
    calculate_azimuth,
    calculate_distance,
    define_no_go_zone,
    is_in_no_go_zone,
)

bearing = calculate_azimuth(48.8566, 2.3522, 48.8570, 2.3530)    # degrees, in [0, 360)
metres = calculate_distance(48.8566, 2.3522, 48.8570, 2.3530)    # haversine distance

min_angle, max_angle = define_no_go_zone(90.0, 5.0)              # (45.0, 135.0)
is_in_no_go_zone(90.0, min_angle, max_angle)                     # True
is_in_no_go_zone(350.0, 340.0, 10.0)                             # True, zone wraps past north
```

The no-go zone is 45 degrees either side of the wind; it is 20 % wider above
15 m/s and 20 % narrower below 5 m/s.

### Planning a heading

```python
from sailnav.planner import LaylinePathPlanner

planner = LaylinePathPlanner()
heading = planner.calculate_direction(
    48.8566, 2.3522,    # boat position
    48.8600, 2.3700,    # waypoint
    90.0,               # compass heading, degrees
    270.0,              # wind direction relative to the boat, degrees
    5.0,                # wind speed, m/s
    0.0,                # current time, seconds
)
```

Call `calculate_direction` once per control cycle with the current time; the
planner keeps its tack, pending confirmations and smoothing history between
calls. Call `reset_planner_state()` when a new waypoint is set. Decisions
are logged at debug level through the `logging` module.

### Steering

```python
from sailnav.servo import calculate_shortest_path, map_range, sail_position_for_wind

calculate_shortest_path(350, 0)     # 10
calculate_shortest_path(180, 1)     # -179
map_range(50, 0, 100, 1200, 1780)   # 1490
```

`RudderSailController(rudder, sail, shared)` takes two objects with a
`write_microseconds(us)` method. Each call to `control(kp, ki)` steers from
`shared.angle_from_north` toward `shared.target_angle`, updates the PI loop,
trims the sail from `shared.wind_vane`, writes both pulse widths and returns
them as a `ServoCommand`.

### Radio link

`XbeeLink(port, rtk_port, shared)` works with any object offering
`in_waiting`, `read(size)` and `write(data)`, such as a serial port.
`read()` reads one `|`-terminated message, forwards it to the RTK port and
applies it. Accepted keys are `kp`, `ki`, `tension`, `cap`, `point_lat`,
`point_lon` and `rtk`; `handle_message` raises `ValueError` for a message
without a colon or with an unknown key. `send(data)` writes `label:value`
lines only for fields that changed since the last call and returns them.

### Sensors and GNSS

The drivers talk to a concrete subclass of `I2CBus` that implements `write`
and `read`. `CMPS12` reads bearing (tenths of a degree), pitch, roll and
calibration state and drives calibration; `QMC5883L.heading()` returns a
magnetic heading in degrees. `GNSS(bus, receiver)` sends the UBX
configuration frames and `read_position(shared)` stores the latest position
from the receiver object. `build_ubx_frame` and `ubx_checksum` build UBX
frames, and `classify_fix` turns a fix type and carrier solution into a
`FixQuality`.

## What the package does not do

It does not talk to hardware by itself: there is no concrete I2C bus, no
serial port, no servo output and no GNSS receiver driver here. Those are
supplied by the caller through the interfaces described above. There is also
no task scheduler running the control, sensing and telemetry loops
together; `Boat` offers single steps, and the `sailnav` command only runs the
planner on simulated inputs.