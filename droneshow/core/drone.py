"""Drone position value types shared by the show engine and its renderers."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional


class DroneStatus(Enum):
    """Drone operational status as shown on the dashboard."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    WARNING = "warning"
    ERROR = "error"


class LightEffect(Enum):
    """Light animation applied by the 3D renderer."""
    STEADY = "steady"
    PULSE = "pulse"
    FADE = "fade"
    STROBE = "strobe"


@dataclass(frozen=True)
class GeoPoint:
    """GPS position."""
    latitude: float   # degrees
    longitude: float  # degrees
    altitude: float   # meters


@dataclass(frozen=True)
class DronePosition:
    """A drone placed in world coordinates at one instant.

    Produced per frame by the show timeline (or by the mock telemetry feed)
    and handed to the 3D scene and map renderers, which key on ``id``.

    Attributes:
        id: Stable drone identifier
        name: Display name
        latitude: Degrees
        longitude: Degrees
        altitude: Meters
        status: Operational status
        battery: Battery level (0-100)
        last_update: Time the record was produced
        light_color: CSS color string, e.g. ``hsl(30, 100%, 60%)``
        light_intensity: Relative light intensity
        light_effect: Light animation
    """
    id: str
    name: str
    latitude: float
    longitude: float
    altitude: float
    status: DroneStatus = DroneStatus.ACTIVE
    battery: float = 100.0
    last_update: Optional[datetime] = None
    light_color: Optional[str] = None
    light_intensity: Optional[float] = None
    light_effect: Optional[LightEffect] = None

    @property
    def geo_point(self) -> GeoPoint:
        """Position as a GeoPoint."""
        return GeoPoint(self.latitude, self.longitude, self.altitude)

    def moved_to(self, point: GeoPoint, **changes) -> "DronePosition":
        """Return a copy placed at ``point`` with optional field changes."""
        return replace(
            self,
            latitude=point.latitude,
            longitude=point.longitude,
            altitude=point.altitude,
            **changes,
        )
