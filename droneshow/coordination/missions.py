"""Flight plan generation and validation.

Plans are derived from a caller-supplied waypoint list: path distance,
estimated flight time and fixed safety margins. Validation collects every
limit violation instead of stopping at the first one.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..core.config import FlightLimits
from ..core.drone import GeoPoint
from ..navigation.geo import haversine_distance, segment_distance_3d

logger = logging.getLogger(__name__)


class WaypointActionType(Enum):
    """Actions to perform at a waypoint."""
    HOVER = "hover"
    LIGHT = "light"
    ROTATE = "rotate"
    WAIT = "wait"


@dataclass(frozen=True)
class WaypointAction:
    """Action performed on arrival at a waypoint.

    Attributes:
        type: Kind of action
        duration: Time the action takes (seconds)
        parameters: Free-form action parameters
    """
    type: WaypointActionType
    duration: float = 0.0
    parameters: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Waypoint:
    """Single waypoint in a flight plan.

    Attributes:
        id: Waypoint identifier
        position: Geographic position
        timestamp: Scheduled time (seconds from plan start)
        speed: Speed on the leg leaving this waypoint (m/s, 0 = default)
        action: Optional action on arrival
    """
    id: str
    position: GeoPoint
    timestamp: float = 0.0
    speed: float = 0.0
    action: Optional[WaypointAction] = None


@dataclass(frozen=True)
class SafetyMargins:
    """Fixed buffers attached to every plan."""
    altitude_buffer: float = 5.0  # meters
    lateral_buffer: float = 10.0  # meters
    temporal_buffer: float = 2.0  # seconds


@dataclass(frozen=True)
class FlightPlan:
    """Computed plan for a single drone. Read-only once built."""
    drone_id: str
    waypoints: tuple
    total_distance: float
    estimated_flight_time: float
    safety_margins: SafetyMargins = field(default_factory=SafetyMargins)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of flight plan validation."""
    valid: bool
    errors: List[str] = field(default_factory=list)


class FlightPlanner:
    """Builds and checks flight plans."""

    @staticmethod
    def generate_flight_plan(
        drone_id: str,
        waypoints: Sequence[Waypoint],
        default_speed: float = 5.0,
    ) -> FlightPlan:
        """Create a flight plan from ordered waypoints.

        Each leg's time uses the departing waypoint's speed, falling back to
        ``default_speed`` when it is not set. Action durations of the
        arriving waypoint are added on top.

        Args:
            drone_id: Drone the plan is for
            waypoints: Ordered waypoints
            default_speed: Speed for legs with no waypoint speed (m/s)

        Returns:
            FlightPlan with distance and time totals

        Raises:
            ValueError: default_speed is not positive. Waypoints themselves
                never cause a failure.
        """
        if default_speed <= 0:
            raise ValueError("default_speed must be positive")

        waypoints = tuple(waypoints)
        total_distance = 0.0
        estimated_flight_time = 0.0

        for prev, curr in zip(waypoints, waypoints[1:]):
            distance = segment_distance_3d(prev.position, curr.position)
            total_distance += distance

            speed = prev.speed or default_speed
            estimated_flight_time += distance / speed

            if curr.action is not None:
                estimated_flight_time += curr.action.duration

        logger.debug(
            f"Flight plan for {drone_id}: {len(waypoints)} waypoints, "
            f"{total_distance:.1f}m, {estimated_flight_time:.1f}s"
        )

        return FlightPlan(
            drone_id=drone_id,
            waypoints=waypoints,
            total_distance=total_distance,
            estimated_flight_time=estimated_flight_time,
        )

    @staticmethod
    def validate_flight_plan(
        plan: FlightPlan,
        limits: Optional[FlightLimits] = None,
    ) -> ValidationResult:
        """Check a plan against altitude, speed and spacing limits.

        Never raises; every violation is reported.
        """
        limits = limits or FlightLimits()
        errors: List[str] = []

        for wp in plan.waypoints:
            if wp.position.altitude > limits.max_altitude:
                errors.append(
                    f"Waypoint {wp.id}: Altitude exceeds {limits.max_altitude:g}m limit"
                )
            if wp.position.altitude < limits.min_altitude:
                if limits.min_altitude == 0.0:
                    errors.append(f"Waypoint {wp.id}: Altitude cannot be negative")
                else:
                    errors.append(
                        f"Waypoint {wp.id}: Altitude below {limits.min_altitude:g}m limit"
                    )

        for wp in plan.waypoints:
            if wp.speed > limits.max_speed:
                errors.append(
                    f"Waypoint {wp.id}: Speed exceeds {limits.max_speed:g} m/s limit"
                )

        for prev, curr in zip(plan.waypoints, plan.waypoints[1:]):
            if haversine_distance(prev.position, curr.position) < limits.min_waypoint_spacing:
                errors.append(f"Waypoints {prev.id} and {curr.id}: Too close together")

        if errors:
            logger.info(f"Flight plan for {plan.drone_id} has {len(errors)} violation(s)")

        return ValidationResult(valid=not errors, errors=errors)
