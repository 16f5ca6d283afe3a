"""Interpolation between formations.

Slots are matched by index, not by drone id. When the target formation
has fewer slots, the unmatched source slots are passed through unchanged,
and extra target slots are ignored. This truncation is a known limitation
of positional matching and is kept as-is because playback depends on it.
"""

from dataclasses import dataclass, field
from typing import Callable, List

from ..core.drone import DronePosition, GeoPoint
from .formations import Formation, FormationSlot, RelativeOffset


def _lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


def lerp_point(a: GeoPoint, b: GeoPoint, t: float) -> GeoPoint:
    return GeoPoint(
        latitude=_lerp(a.latitude, b.latitude, t),
        longitude=_lerp(a.longitude, b.longitude, t),
        altitude=_lerp(a.altitude, b.altitude, t),
    )


def interpolate_formation(
    from_formation: Formation,
    to_formation: Formation,
    t: float,
    formation_id: str = "",
    name: str = "",
    description: str = "",
) -> Formation:
    """Linearly interpolate two formations.

    Args:
        from_formation: Formation at t = 0
        to_formation: Formation at t = 1
        t: Progress, clamped to [0, 1]
        formation_id: Id for the result (defaults to the source id)
        name: Name for the result (defaults to the source name)
        description: Description for the result

    Returns:
        New Formation; inputs are not modified
    """
    t = min(1.0, max(0.0, t))

    slots = []
    for index, from_slot in enumerate(from_formation.slots):
        if index >= len(to_formation.slots):
            slots.append(from_slot)
            continue

        to_offset = to_formation.slots[index].offset
        slots.append(FormationSlot(
            drone_id=from_slot.drone_id,
            offset=RelativeOffset(
                x=_lerp(from_slot.offset.x, to_offset.x, t),
                y=_lerp(from_slot.offset.y, to_offset.y, t),
                z=_lerp(from_slot.offset.z, to_offset.z, t),
            ),
            role=from_slot.role,
        ))

    return Formation(
        id=formation_id or from_formation.id,
        name=name or from_formation.name,
        description=description or from_formation.description,
        slots=tuple(slots),
        center=lerp_point(from_formation.center, to_formation.center, t),
        scale=_lerp(from_formation.scale, to_formation.scale, t),
        rotation=_lerp(from_formation.rotation, to_formation.rotation, t),
    )


def interpolate_formations(
    from_formation: Formation,
    to_formation: Formation,
    steps: int = 10,
) -> List[Formation]:
    """Sample a transition at ``t = 0, 1/steps, ..., 1``.

    Returns:
        ``steps + 1`` formations
    """
    if steps < 1:
        raise ValueError(f"steps must be at least 1, got {steps}")

    return [
        interpolate_formation(
            from_formation,
            to_formation,
            step / steps,
            formation_id=f"formation-interpolated-{step}",
            name=f"Interpolated {step}/{steps}",
            description=(
                f"Interpolation step {step} from {from_formation.name} "
                f"to {to_formation.name}"
            ),
        )
        for step in range(steps + 1)
    ]


def ease_in_out(t: float) -> float:
    """Quadratic ease-in-out on [0, 1]."""
    t = min(1.0, max(0.0, t))
    if t < 0.5:
        return 2 * t * t
    return -1 + (4 - 2 * t) * t


@dataclass
class FormationTransition:
    """Animates drones from where they are toward a formation.

    Drones are matched to target slots by index; drones with no slot
    stay where they started.

    Example:
        transition = FormationTransition(current_drones, star, duration=8.0)
        positions = transition.positions_at(elapsed)
        if transition.is_complete(elapsed):
            ...
    """

    start_positions: List[DronePosition]
    target: Formation
    duration: float = 5.0
    easing: Callable[[float], float] = ease_in_out
    _targets: List[GeoPoint] = field(init=False, repr=False)

    def __post_init__(self):
        if self.duration <= 0:
            raise ValueError("Transition duration must be positive")
        self._targets = self.target.target_positions()

    def progress_at(self, elapsed: float) -> float:
        """Eased progress at ``elapsed`` seconds."""
        return self.easing(min(1.0, max(0.0, elapsed / self.duration)))

    def positions_at(self, elapsed: float) -> List[DronePosition]:
        """Drone positions ``elapsed`` seconds into the transition."""
        progress = self.progress_at(elapsed)

        positions = []
        for index, drone in enumerate(self.start_positions):
            start = drone.geo_point
            target = self._targets[index] if index < len(self._targets) else start
            positions.append(drone.moved_to(lerp_point(start, target, progress)))

        return positions

    def is_complete(self, elapsed: float) -> bool:
        """Check if transition is complete."""
        return elapsed >= self.duration
