"""Canned pattern demo.

Flies the available drones through a fixed sequence of formations, easing
from wherever the drones are into each formation, then pausing briefly
before the next one. Unlike ShowTimeline, each step has its own duration
and starts from the drones' actual positions.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from ..coordination.formations import Formation, FormationGenerator
from ..coordination.transitions import FormationTransition
from ..core.drone import DronePosition, DroneStatus, GeoPoint

logger = logging.getLogger(__name__)

DEFAULT_CENTER = GeoPoint(35.6762, 139.6503, 80.0)

# Drones beyond this count sit the demo out
MAX_DEMO_DRONES = 12


@dataclass(frozen=True)
class DemoPattern:
    """One step of the demo."""
    id: str
    name: str
    formation: Formation
    duration: float  # seconds
    description: str = ""


def build_demo_patterns(
    drone_ids: Sequence[str],
    center: GeoPoint = DEFAULT_CENTER,
) -> List[DemoPattern]:
    """Five-point star, triangle, circle, eight-point star."""
    ids = list(drone_ids)[:MAX_DEMO_DRONES]

    return [
        DemoPattern(
            id="star-5",
            name="5-point star",
            formation=FormationGenerator.create_star_formation(center, 40.0, ids, points=5),
            duration=8.0,
            description="Star with five points",
        ),
        DemoPattern(
            id="triangle",
            name="Triangle",
            formation=FormationGenerator.create_triangle_formation(center, 60.0, ids),
            duration=6.0,
            description="Basic equilateral triangle",
        ),
        DemoPattern(
            id="circle",
            name="Circle",
            formation=FormationGenerator.create_circle_formation(center, 35.0, ids),
            duration=7.0,
            description="Drones evenly spaced on a circle",
        ),
        DemoPattern(
            id="star-8",
            name="8-point star",
            formation=FormationGenerator.create_star_formation(center, 50.0, ids, points=8),
            duration=10.0,
            description="Star with eight points",
        ),
    ]


class PatternDemoPlayer:
    """Steps drones through demo patterns as time is advanced.

    Example:
        player = PatternDemoPlayer(telemetry.drones)
        player.play()
        while player.is_playing:
            scene.update(player.advance(1 / 60))
    """

    def __init__(
        self,
        drones: Sequence[DronePosition],
        patterns: Optional[Sequence[DemoPattern]] = None,
        pause: float = 1.0,
    ):
        """Initialize demo player.

        Args:
            drones: Starting drone positions
            patterns: Demo steps (defaults to build_demo_patterns)
            pause: Wait after each pattern before the next (seconds)
        """
        self._initial = list(drones)
        self.drones: List[DronePosition] = list(drones)
        if patterns is None:
            patterns = build_demo_patterns([d.id for d in drones]) if drones else []
        self.patterns = list(patterns)
        self.pause_duration = pause

        self.is_playing = False
        self.current_pattern_index = 0
        self._elapsed = 0.0
        self._transition: Optional[FormationTransition] = None

    @property
    def current_pattern(self) -> Optional[DemoPattern]:
        """Pattern being flown, or None when idle past the end."""
        if self.current_pattern_index < len(self.patterns):
            return self.patterns[self.current_pattern_index]
        return None

    @property
    def progress(self) -> float:
        """Percent through the current pattern's animation (0-100)."""
        pattern = self.current_pattern
        if pattern is None or self._transition is None:
            return 0.0
        return min(100.0, self._elapsed / pattern.duration * 100.0)

    def play(self) -> None:
        """Start the demo from the current pattern."""
        if not self.drones:
            raise ValueError("No drone data for demo")
        if not self.patterns:
            raise ValueError("No demo patterns")

        self.is_playing = True
        if self._transition is None:
            self._begin(self.current_pattern_index)
        logger.info(f"Demo playing pattern {self.current_pattern_index}")

    def pause(self) -> None:
        """Freeze the demo where it is."""
        self.is_playing = False

    def stop(self) -> None:
        """Stop and rewind to the first pattern."""
        self.is_playing = False
        self.current_pattern_index = 0
        self._elapsed = 0.0
        self._transition = None
        logger.info("Demo stopped")

    def reset(self) -> None:
        """Stop and put the drones back where they started."""
        self.stop()
        self.drones = list(self._initial)

    def advance(self, delta_seconds: float) -> List[DronePosition]:
        """Move demo time forward and return the drone positions."""
        if not self.is_playing or self._transition is None:
            return list(self.drones)

        self._elapsed += delta_seconds
        pattern = self.patterns[self.current_pattern_index]

        self.drones = [
            replace(drone, status=DroneStatus.ACTIVE)
            for drone in self._transition.positions_at(self._elapsed)
        ]

        if self._elapsed >= pattern.duration + self.pause_duration:
            next_index = self.current_pattern_index + 1
            if next_index >= len(self.patterns):
                logger.info("Demo complete")
                self.stop()
            else:
                self._begin(next_index)

        return list(self.drones)

    def _begin(self, index: int) -> None:
        pattern = self.patterns[index]
        self.current_pattern_index = index
        self._elapsed = 0.0
        self._transition = FormationTransition(
            start_positions=list(self.drones),
            target=pattern.formation,
            duration=pattern.duration,
        )
        logger.debug(f"Demo pattern {pattern.id} ({pattern.duration:g}s)")
