"""Core show components."""

from .drone import DronePosition, DroneStatus, GeoPoint, LightEffect
from .config import FlightLimits, ShowConfig, TelemetryConfig
from .telemetry import MockTelemetrySource

__all__ = [
    "DronePosition",
    "DroneStatus",
    "GeoPoint",
    "LightEffect",
    "FlightLimits",
    "ShowConfig",
    "TelemetryConfig",
    "MockTelemetrySource",
]
