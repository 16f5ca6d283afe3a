"""Coordination modules for drone shows.

This package provides:
- Formation generation (star, triangle, circle) and JSON export
- Formation interpolation and eased transitions
- Flight plan generation and validation
- Keyframed show patterns and drone command records
"""

from .formations import (
    FormationType,
    SlotRole,
    RelativeOffset,
    FormationSlot,
    Formation,
    FormationGenerator,
    generate_formation,
    formation_to_dict,
    formation_from_dict,
    formation_to_json,
    formation_from_json,
    export_filename,
)

from .transitions import (
    interpolate_formation,
    interpolate_formations,
    ease_in_out,
    FormationTransition,
)

from .missions import (
    Waypoint,
    WaypointAction,
    WaypointActionType,
    SafetyMargins,
    FlightPlan,
    ValidationResult,
    FlightPlanner,
)

from .patterns import (
    PatternType,
    PatternKeyframe,
    ShowPattern,
    create_pattern_from_formation,
)

from .commands import (
    CommandType,
    CommandPriority,
    DroneCommand,
    create_move_command,
    create_light_command,
    create_emergency_land_command,
)

__all__ = [
    # Formations
    "FormationType",
    "SlotRole",
    "RelativeOffset",
    "FormationSlot",
    "Formation",
    "FormationGenerator",
    "generate_formation",
    "formation_to_dict",
    "formation_from_dict",
    "formation_to_json",
    "formation_from_json",
    "export_filename",
    # Transitions
    "interpolate_formation",
    "interpolate_formations",
    "ease_in_out",
    "FormationTransition",
    # Flight plans
    "Waypoint",
    "WaypointAction",
    "WaypointActionType",
    "SafetyMargins",
    "FlightPlan",
    "ValidationResult",
    "FlightPlanner",
    # Patterns
    "PatternType",
    "PatternKeyframe",
    "ShowPattern",
    "create_pattern_from_formation",
    # Commands
    "CommandType",
    "CommandPriority",
    "DroneCommand",
    "create_move_command",
    "create_light_command",
    "create_emergency_land_command",
]
