"""Projection of formations into renderable drone positions."""

from datetime import datetime
from typing import List, Optional, Sequence

import numpy as np

from ..coordination.formations import Formation
from ..coordination.transitions import lerp_point
from ..core.drone import DronePosition, DroneStatus
from .lighting import formation_color_theme


def project_formation(
    formation: Formation,
    progress: float = 1.0,
    rng: Optional[np.random.Generator] = None,
    now: Optional[datetime] = None,
) -> List[DronePosition]:
    """Place every slot of a formation in world coordinates.

    Each drone sits ``progress`` of the way from the formation center to its
    slot, so ``progress=0`` collapses the show onto the center and
    ``progress=1`` is the full formation.

    Args:
        formation: Formation to render
        progress: Expansion from the center (0-1)
        rng: Random source for battery and fallback light hues
        now: Timestamp for ``last_update`` (defaults to now)

    Returns:
        One DronePosition per slot, in slot order
    """
    rng = rng if rng is not None else np.random.default_rng()
    now = now or datetime.now()
    total = len(formation.slots)

    drones = []
    for index, slot in enumerate(formation.slots):
        target = formation.slot_position(slot)
        point = lerp_point(formation.center, target, progress)
        theme = formation_color_theme(formation.name, index, total, rng)

        drones.append(DronePosition(
            id=slot.drone_id,
            name=f"Light {index + 1}",
            latitude=point.latitude,
            longitude=point.longitude,
            altitude=point.altitude,
            status=DroneStatus.ACTIVE,
            battery=90.0 + float(rng.random()) * 10.0,
            last_update=now,
            light_color=theme.color,
            light_intensity=theme.intensity,
            light_effect=theme.effect,
        ))

    return drones


def interpolate_drone_positions(
    from_drones: Sequence[DronePosition],
    to_drones: Sequence[DronePosition],
    progress: float,
) -> List[DronePosition]:
    """Blend two frames positionally; unmatched drones pass through.

    Everything except the position is carried from ``from_drones``.
    """
    blended = []
    for index, drone in enumerate(from_drones):
        if index >= len(to_drones):
            blended.append(drone)
            continue
        point = lerp_point(drone.geo_point, to_drones[index].geo_point, progress)
        blended.append(drone.moved_to(point))
    return blended
