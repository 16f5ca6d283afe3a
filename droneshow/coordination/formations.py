"""Formation calculations for drone light shows.

Provides geometric generators for named formation patterns. Each slot is
stored as an offset in the local tangent plane around the formation's
center point (x = east, y = north, z = up, meters). All generated
formations are flat: z is always 0.

Available formations:
- STAR: Alternating outer/inner vertices
- TRIANGLE: Equilateral triangle with optional edge fill
- CIRCLE: Drones evenly spaced on a circle
"""

import json
import math
import re
import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from ..core.drone import GeoPoint
from ..navigation.geo import offset_to_geo_point, rotate_offset


class FormationType(Enum):
    """Available formation types."""
    STAR = "star"
    TRIANGLE = "triangle"
    CIRCLE = "circle"


class SlotRole(Enum):
    """Role of a drone within a formation."""
    LEADER = "leader"
    FOLLOWER = "follower"
    ANCHOR = "anchor"


@dataclass(frozen=True)
class RelativeOffset:
    """Offset from the formation center (meters).

    Attributes:
        x: East
        y: North
        z: Up, relative to the center altitude
    """
    x: float
    y: float
    z: float = 0.0


@dataclass(frozen=True)
class FormationSlot:
    """One position-and-role entry within a formation."""
    drone_id: str
    offset: RelativeOffset
    role: SlotRole = SlotRole.FOLLOWER


@dataclass(frozen=True)
class Formation:
    """Named geometric arrangement of drones.

    Slot order is generation order and is significant: interpolation
    matches slots by index, not by drone id.

    Attributes:
        id: Unique identifier
        name: Display name, also used to pick the light theme
        description: Human-readable description
        slots: Ordered slots
        center: Geographic center of the formation
        scale: Multiplier applied to offsets when projected
        rotation: Rotation applied to offsets when projected (degrees)
    """
    id: str
    name: str
    description: str
    slots: Tuple[FormationSlot, ...]
    center: GeoPoint
    scale: float = 1.0
    rotation: float = 0.0

    @property
    def drone_ids(self) -> List[str]:
        """Drone ids in slot order."""
        return [slot.drone_id for slot in self.slots]

    def __len__(self) -> int:
        return len(self.slots)

    def with_rotation(self, rotation: float) -> "Formation":
        """Return a copy with a different rotation."""
        return replace(self, rotation=rotation)

    def with_scale(self, scale: float) -> "Formation":
        """Return a copy with a different scale."""
        return replace(self, scale=scale)

    def slot_position(self, slot: FormationSlot) -> GeoPoint:
        """World position of a slot.

        Scale and rotation act in the horizontal plane only; the vertical
        offset is added to the center altitude unchanged.
        """
        x, y = rotate_offset(
            slot.offset.x * self.scale, slot.offset.y * self.scale, self.rotation
        )
        return offset_to_geo_point(
            self.center, RelativeOffset(x, y, slot.offset.z)
        )

    def target_positions(self) -> List[GeoPoint]:
        """World positions of all slots, in slot order."""
        return [self.slot_position(slot) for slot in self.slots]


def _formation_id(kind: str) -> str:
    return f"formation-{kind}-{uuid.uuid4().hex}"


def _role_for(index: int) -> SlotRole:
    return SlotRole.LEADER if index == 0 else SlotRole.FOLLOWER


def _check_drone_ids(drone_ids: Sequence[str]) -> List[str]:
    ids = list(drone_ids)
    if not ids:
        raise ValueError("Formation requires at least one drone id")
    if len(set(ids)) != len(ids):
        raise ValueError("Formation drone ids must be unique")
    return ids


def _check_size(name: str, value: float) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")


class FormationGenerator:
    """Creates formations from abstract parameters.

    Generators never fail on too few drone ids: the formation is simply
    partial. Extra ids beyond what a pattern uses are left unassigned.

    Example:
        center = GeoPoint(35.6762, 139.6503, 80.0)
        ids = [f"drone-{i}" for i in range(1, 13)]
        star = FormationGenerator.create_star_formation(center, 40.0, ids)
        for slot in star.slots:
            print(slot.drone_id, slot.offset.x, slot.offset.y)
    """

    @staticmethod
    def create_star_formation(
        center: GeoPoint,
        radius: float,
        drone_ids: Sequence[str],
        points: int = 5,
        rotation: float = 0.0,
    ) -> Formation:
        """Star with ``2 * points`` alternating outer/inner vertices.

        Outer vertices sit at ``radius``, inner ones at half of it, starting
        at angle 0 and spaced evenly.

        Args:
            center: Formation center
            radius: Outer radius (meters)
            drone_ids: Drone identifiers, in slot order
            points: Number of star points
            rotation: Rotation applied at projection (degrees)

        Returns:
            Formation with ``min(2 * points, len(drone_ids))`` slots
        """
        ids = _check_drone_ids(drone_ids)
        _check_size("radius", radius)
        if points < 2:
            raise ValueError(f"Star requires at least 2 points, got {points}")

        total_points = points * 2
        slots = []

        for i in range(min(total_points, len(ids))):
            angle = (i * 2 * math.pi) / total_points
            current_radius = radius if i % 2 == 0 else radius * 0.5

            slots.append(FormationSlot(
                drone_id=ids[i],
                offset=RelativeOffset(
                    x=math.cos(angle) * current_radius,
                    y=math.sin(angle) * current_radius,
                    z=0.0,
                ),
                role=_role_for(i),
            ))

        return Formation(
            id=_formation_id("star"),
            name=f"Star Formation ({points} points)",
            description=f"Star formation with {points} points and radius {radius}m",
            slots=tuple(slots),
            center=center,
            rotation=rotation,
        )

    @staticmethod
    def create_triangle_formation(
        center: GeoPoint,
        side_length: float,
        drone_ids: Sequence[str],
        rotation: float = 0.0,
    ) -> Formation:
        """Equilateral triangle, first vertex at the top.

        Ids beyond the three vertices are spread along the edges,
        ``(n - 3) // 3`` per edge; any remainder is left unused.
        """
        ids = _check_drone_ids(drone_ids)
        _check_size("side_length", side_length)

        # Circumradius of an equilateral triangle
        radius = side_length / math.sqrt(3)
        vertices = []

        for i in range(min(3, len(ids))):
            angle = (i * 2 * math.pi) / 3 - math.pi / 2
            vertices.append(FormationSlot(
                drone_id=ids[i],
                offset=RelativeOffset(
                    x=math.cos(angle) * radius,
                    y=math.sin(angle) * radius,
                    z=0.0,
                ),
                role=_role_for(i),
            ))

        slots = list(vertices)
        drone_index = 3
        edge_drones = (len(ids) - 3) // 3

        for edge in range(3):
            if drone_index >= len(ids):
                break
            start = vertices[edge].offset
            end = vertices[(edge + 1) % 3].offset

            for j in range(1, edge_drones + 1):
                t = j / (edge_drones + 1)
                slots.append(FormationSlot(
                    drone_id=ids[drone_index],
                    offset=RelativeOffset(
                        x=start.x + t * (end.x - start.x),
                        y=start.y + t * (end.y - start.y),
                        z=0.0,
                    ),
                    role=SlotRole.FOLLOWER,
                ))
                drone_index += 1

        return Formation(
            id=_formation_id("triangle"),
            name="Triangle Formation",
            description=f"Equilateral triangle formation with {side_length}m sides",
            slots=tuple(slots),
            center=center,
            rotation=rotation,
        )

    @staticmethod
    def create_circle_formation(
        center: GeoPoint,
        radius: float,
        drone_ids: Sequence[str],
        rotation: float = 0.0,
    ) -> Formation:
        """One slot per drone id, evenly spaced around the circle."""
        ids = _check_drone_ids(drone_ids)
        _check_size("radius", radius)

        n = len(ids)
        slots = []
        for i, drone_id in enumerate(ids):
            angle = (i * 2 * math.pi) / n
            slots.append(FormationSlot(
                drone_id=drone_id,
                offset=RelativeOffset(
                    x=math.cos(angle) * radius,
                    y=math.sin(angle) * radius,
                    z=0.0,
                ),
                role=_role_for(i),
            ))

        return Formation(
            id=_formation_id("circle"),
            name="Circle Formation",
            description=f"Circular formation with {radius}m radius",
            slots=tuple(slots),
            center=center,
            rotation=rotation,
        )


def generate_formation(
    pattern: Union[FormationType, str],
    center: GeoPoint,
    size: float,
    drone_ids: Sequence[str],
    points: int = 5,
    rotation: float = 0.0,
) -> Formation:
    """Convenience function dispatching on formation type.

    Args:
        pattern: FormationType or its string value ("star", ...)
        center: Formation center
        size: Radius for star/circle, side length for triangle (meters)
        drone_ids: Drone identifiers
        points: Star points (star only)
        rotation: Rotation applied at projection (degrees)

    Returns:
        Generated Formation

    Raises:
        ValueError: Unknown pattern or invalid parameters

    Example:
        formation = generate_formation("circle", center, 35.0, ids)
    """
    if not isinstance(pattern, FormationType):
        try:
            pattern = FormationType(str(pattern).lower())
        except ValueError:
            raise ValueError(f"Unknown pattern type: {pattern!r}") from None

    if pattern == FormationType.STAR:
        return FormationGenerator.create_star_formation(
            center, size, drone_ids, points=points, rotation=rotation
        )
    if pattern == FormationType.TRIANGLE:
        return FormationGenerator.create_triangle_formation(
            center, size, drone_ids, rotation=rotation
        )
    return FormationGenerator.create_circle_formation(
        center, size, drone_ids, rotation=rotation
    )


# Export

def formation_to_dict(formation: Formation) -> dict:
    """Serialize a formation to plain JSON-compatible data."""
    return {
        "id": formation.id,
        "name": formation.name,
        "description": formation.description,
        "slots": [
            {
                "drone_id": slot.drone_id,
                "offset": {"x": slot.offset.x, "y": slot.offset.y, "z": slot.offset.z},
                "role": slot.role.value,
            }
            for slot in formation.slots
        ],
        "center": {
            "latitude": formation.center.latitude,
            "longitude": formation.center.longitude,
            "altitude": formation.center.altitude,
        },
        "scale": formation.scale,
        "rotation": formation.rotation,
    }


def formation_from_dict(data: dict) -> Formation:
    """Rebuild a formation from ``formation_to_dict`` output.

    Raises:
        ValueError: Document is missing fields or has bad values
    """
    try:
        slots = tuple(
            FormationSlot(
                drone_id=str(item["drone_id"]),
                offset=RelativeOffset(
                    x=float(item["offset"]["x"]),
                    y=float(item["offset"]["y"]),
                    z=float(item["offset"]["z"]),
                ),
                role=SlotRole(item["role"]),
            )
            for item in data["slots"]
        )
        center = data["center"]
        return Formation(
            id=str(data["id"]),
            name=str(data["name"]),
            description=str(data["description"]),
            slots=slots,
            center=GeoPoint(
                latitude=float(center["latitude"]),
                longitude=float(center["longitude"]),
                altitude=float(center["altitude"]),
            ),
            scale=float(data["scale"]),
            rotation=float(data["rotation"]),
        )
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed formation document: {e}") from e


def formation_to_json(formation: Formation, indent: Optional[int] = 2) -> str:
    """Serialize a formation to indented JSON text."""
    return json.dumps(formation_to_dict(formation), indent=indent)


def formation_from_json(text: str) -> Formation:
    """Parse a formation from JSON text."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid formation JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Formation JSON must be an object")
    return formation_from_dict(data)


def export_filename(formation: Formation) -> str:
    """Download filename for an exported formation."""
    return re.sub(r"\s+", "_", formation.name) + ".json"
