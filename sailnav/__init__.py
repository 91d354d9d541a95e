"""Path planning, steering, telemetry and sensor drivers for an autonomous sailboat."""

__version__ = "0.1.0"