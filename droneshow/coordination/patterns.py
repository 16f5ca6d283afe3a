"""Show patterns: formations flattened to timed keyframes."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .formations import Formation

# Keyframe arrival times are spread across this window (seconds)
STAGGER_WINDOW = 5.0


class PatternType(Enum):
    """Pattern categories recognised from formation names."""
    STAR = "star"
    TRIANGLE = "triangle"
    CIRCLE = "circle"
    LINE = "line"
    CUSTOM = "custom"


@dataclass(frozen=True)
class PatternKeyframe:
    """Position a drone reaches at ``time`` seconds into the pattern."""
    time: float
    latitude: float
    longitude: float
    altitude: float


@dataclass(frozen=True)
class ShowPattern:
    """Keyframed pattern derived from a formation."""
    id: str
    name: str
    type: PatternType
    positions: Tuple[PatternKeyframe, ...]
    duration: float
    color: Optional[str] = None


def pattern_type_for(name: str) -> PatternType:
    """Guess the pattern type from a formation name."""
    lowered = name.lower()
    for pattern_type in (PatternType.STAR, PatternType.TRIANGLE, PatternType.CIRCLE):
        if pattern_type.value in lowered:
            return pattern_type
    return PatternType.CUSTOM


def create_pattern_from_formation(
    formation: Formation,
    duration: float,
    color: Optional[str] = None,
) -> ShowPattern:
    """Convert a formation to a keyframed show pattern.

    Slot ``i`` of ``n`` arrives at ``i / n * 5`` seconds so drones do not
    all reach their positions at once. Rotation and scale are not applied;
    keyframes use the raw tangent-plane offsets.
    """
    count = len(formation.slots)
    unrotated = formation.with_rotation(0.0).with_scale(1.0)

    keyframes = []
    for index, slot in enumerate(unrotated.slots):
        point = unrotated.slot_position(slot)
        keyframes.append(PatternKeyframe(
            time=(index / count) * STAGGER_WINDOW,
            latitude=point.latitude,
            longitude=point.longitude,
            altitude=point.altitude,
        ))

    return ShowPattern(
        id=f"pattern-{formation.id}",
        name=f"Pattern: {formation.name}",
        type=pattern_type_for(formation.name),
        positions=tuple(keyframes),
        duration=duration,
        color=color,
    )
