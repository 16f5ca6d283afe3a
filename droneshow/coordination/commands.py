"""Drone command records.

Commands are plain data handed to whatever transport the host application
uses; nothing here talks to hardware.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class CommandType(Enum):
    """Commands a drone understands."""
    TAKEOFF = "takeoff"
    LAND = "land"
    HOVER = "hover"
    MOVE = "move"
    ROTATE = "rotate"
    LIGHT = "light"
    EMERGENCY_LAND = "emergency_land"
    RETURN_HOME = "return_home"


class CommandPriority(Enum):
    """Dispatch priority."""
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    EMERGENCY = "emergency"


@dataclass(frozen=True)
class DroneCommand:
    """A single command addressed to one drone."""
    drone_id: str
    command: CommandType
    parameters: Dict[str, Any] = field(default_factory=dict)
    timestamp: Optional[datetime] = None
    priority: CommandPriority = CommandPriority.NORMAL


def create_move_command(
    drone_id: str,
    latitude: float,
    longitude: float,
    altitude: float,
    speed: float = 5.0,
) -> DroneCommand:
    """Move to an absolute position at ``speed`` m/s."""
    return DroneCommand(
        drone_id=drone_id,
        command=CommandType.MOVE,
        parameters={
            "position": {
                "latitude": latitude,
                "longitude": longitude,
                "altitude": altitude,
            },
            "speed": speed,
        },
        timestamp=datetime.now(),
    )


def create_light_command(
    drone_id: str,
    color: str,
    intensity: float = 100.0,
) -> DroneCommand:
    """Set light color and intensity."""
    return DroneCommand(
        drone_id=drone_id,
        command=CommandType.LIGHT,
        parameters={"light_color": color, "light_intensity": intensity},
        timestamp=datetime.now(),
    )


def create_emergency_land_command(drone_id: str) -> DroneCommand:
    """Land immediately, ahead of any queued commands."""
    return DroneCommand(
        drone_id=drone_id,
        command=CommandType.EMERGENCY_LAND,
        timestamp=datetime.now(),
        priority=CommandPriority.EMERGENCY,
    )
