"""Configuration management for drone show simulation."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ShowConfig:
    """Configuration for show playback.

    Attributes:
        formation_duration: Scheduled time per formation (seconds)
        hold_fraction: Fraction of each formation slot spent holding still
        default_speed: Initial playback speed multiplier
        frame_rate: Target frame rate for the background frame driver (Hz)
        seed: Seed for the random source (None = OS entropy)
    """

    # Timeline
    formation_duration: float = 5.0  # seconds
    hold_fraction: float = 0.8  # last 20% is the transition
    default_speed: float = 1.0

    # Frame driver
    frame_rate: float = 60.0  # Hz

    # Cosmetic randomness (battery, fallback light hue)
    seed: Optional[int] = None

    def __post_init__(self):
        """Validate configuration."""
        if self.formation_duration <= 0:
            raise ValueError("formation_duration must be positive")
        if not 0.0 <= self.hold_fraction < 1.0:
            raise ValueError("hold_fraction must be in [0, 1)")
        if self.default_speed <= 0:
            raise ValueError("default_speed must be positive")
        if self.frame_rate <= 0:
            raise ValueError("frame_rate must be positive")

    @property
    def frame_interval(self) -> float:
        """Seconds between frames at the configured frame rate."""
        return 1.0 / self.frame_rate

    @classmethod
    def for_testing(cls, seed: int = 42) -> "ShowConfig":
        """Create a deterministic configuration for tests."""
        return cls(seed=seed)


@dataclass
class FlightLimits:
    """Regulatory limits checked by flight plan validation."""

    max_altitude: float = 400.0  # meters
    min_altitude: float = 0.0  # meters
    max_speed: float = 20.0  # m/s
    min_waypoint_spacing: float = 1.0  # meters (horizontal)


@dataclass
class TelemetryConfig:
    """Configuration for the mock telemetry feed.

    Attributes:
        poll_interval: Seconds between telemetry ticks
        position_jitter: Max lat/lon change per tick (degrees, +/- half)
        altitude_jitter: Max altitude change per tick (meters, +/- half)
        battery_drain: Max battery drain per tick (percent)
        min_altitude: Altitude floor for jittered drones (meters)
        max_altitude: Altitude ceiling for jittered drones (meters)
        seed: Seed for the random source (None = OS entropy)
    """

    poll_interval: float = 3.0
    position_jitter: float = 0.0001
    altitude_jitter: float = 5.0
    battery_drain: float = 0.1
    min_altitude: float = 30.0
    max_altitude: float = 200.0
    seed: Optional[int] = None

    def __post_init__(self):
        """Validate configuration."""
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if self.min_altitude > self.max_altitude:
            raise ValueError("min_altitude must not exceed max_altitude")
