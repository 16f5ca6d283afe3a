"""Show timeline: playback of an ordered formation sequence.

The timeline owns a virtual clock. Every formation gets an equal share of
the show duration; the first part of each share is a hold (drones parked
on the formation) and the rest is a transition toward the next formation.
The last formation never transitions.

Time only moves through ``advance(delta_seconds)`` (or ``tick(timestamp)``
which derives the delta from a monotonic timestamp), so the same timeline
can be driven by a real frame clock or stepped manually in tests.

Example:
    timeline = ShowTimeline([star, triangle, circle])
    timeline.on_formation_change(lambda f, i: print(i, f.name))
    timeline.play()
    while timeline.is_playing:
        frame = timeline.advance(1 / 60)
        render(frame.drones)
"""

import logging
import math
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Sequence

import numpy as np

from ..coordination.formations import Formation
from ..coordination.transitions import interpolate_formation
from ..core.config import ShowConfig
from ..core.drone import DronePosition
from .renderer import project_formation

logger = logging.getLogger(__name__)

FormationCallback = Callable[[Formation, int], None]


class PlaybackState(Enum):
    """Timeline playback state."""
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


class FramePhase(Enum):
    """Part of a formation's time share."""
    HOLD = "hold"
    TRANSITION = "transition"


@dataclass
class SimulationState:
    """Snapshot of timeline playback.

    Attributes:
        is_playing: Whether the clock is advancing
        current_time: Show time (seconds, 0 <= t <= duration)
        duration: Total show length (seconds)
        speed: Show seconds per wall-clock second
        current_formation_index: Formation whose time share contains current_time
        transition_progress: Progress through that share (0-1)
        state: Playback state
    """
    is_playing: bool = False
    current_time: float = 0.0
    duration: float = 0.0
    speed: float = 1.0
    current_formation_index: int = 0
    transition_progress: float = 0.0
    state: PlaybackState = PlaybackState.STOPPED


@dataclass(frozen=True)
class Frame:
    """Everything rendered for one instant of the show.

    Attributes:
        time: Show time (seconds)
        formation_index: Index of the active formation
        local_progress: Progress through the active formation's share (0-1)
        phase: Hold or transition
        transition_progress: Renormalised transition progress (0 in hold)
        formation: Formation that was projected (an interpolated one
            during transitions)
        drones: Projected drone positions
    """
    time: float
    formation_index: int
    local_progress: float
    phase: FramePhase
    transition_progress: float
    formation: Formation
    drones: List[DronePosition]


class ShowTimeline:
    """Plays an ordered sequence of formations.

    All control methods are safe to call from a different thread than the
    one advancing the clock; state changes are serialised by a lock.
    """

    def __init__(
        self,
        formations: Sequence[Formation],
        config: Optional[ShowConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """Initialize timeline.

        Args:
            formations: Formations in show order (at least one)
            config: Show configuration. Uses defaults if not provided.
            rng: Random source for cosmetic values (battery, light hue).
                Defaults to one seeded from ``config.seed``.
        """
        if not formations:
            raise ValueError("Timeline requires at least one formation")

        self.config = config or ShowConfig()
        self.formations: List[Formation] = list(formations)
        self._rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self._lock = threading.RLock()

        self._state = SimulationState(
            duration=len(self.formations) * self.config.formation_duration,
            speed=self.config.default_speed,
        )
        self._last_timestamp: Optional[float] = None
        self._callback: Optional[FormationCallback] = None
        self._drones = project_formation(self.formations[0], 1.0, self._rng)

    # Properties

    @property
    def state(self) -> SimulationState:
        """Copy of the current playback state."""
        with self._lock:
            return replace(self._state)

    @property
    def drones(self) -> List[DronePosition]:
        """Drone positions from the most recent frame."""
        with self._lock:
            return list(self._drones)

    @property
    def duration(self) -> float:
        """Total show length (seconds)."""
        return self._state.duration

    @property
    def formation_duration(self) -> float:
        """Time share of each formation (seconds)."""
        return self._state.duration / len(self.formations)

    @property
    def is_playing(self) -> bool:
        """Whether the clock is advancing."""
        return self._state.is_playing

    @property
    def current_formation(self) -> Formation:
        """Formation whose time share contains the current time."""
        return self.formations[self._state.current_formation_index]

    def on_formation_change(self, callback: Optional[FormationCallback]) -> None:
        """Register callback invoked with (formation, index) on every advance.

        Pass None to remove it.
        """
        self._callback = callback

    # Playback control

    def play(self) -> None:
        """Start or resume playback. Restarts from 0 when finished."""
        with self._lock:
            if self._state.state == PlaybackState.PLAYING:
                return
            if self._state.state == PlaybackState.FINISHED:
                self._state.current_time = 0.0
                self._state.current_formation_index = 0
                self._state.transition_progress = 0.0

            self._state.state = PlaybackState.PLAYING
            self._state.is_playing = True
            self._last_timestamp = None

        logger.info(f"Show playing from t={self._state.current_time:.2f}s")

    def pause(self) -> None:
        """Freeze the clock at the current time."""
        with self._lock:
            if self._state.state != PlaybackState.PLAYING:
                return
            self._state.state = PlaybackState.PAUSED
            self._state.is_playing = False
            self._last_timestamp = None

        logger.info(f"Show paused at t={self._state.current_time:.2f}s")

    def stop(self) -> None:
        """Return to the start and show the first formation."""
        with self._lock:
            self._state.state = PlaybackState.STOPPED
            self._state.is_playing = False
            self._state.current_time = 0.0
            self._state.current_formation_index = 0
            self._state.transition_progress = 0.0
            self._last_timestamp = None
            self._drones = project_formation(self.formations[0], 1.0, self._rng)

        logger.info("Show stopped")

    def seek(self, time: float) -> Frame:
        """Jump to ``time`` (clamped to [0, duration]) without advancing.

        Works in any state. A paused or stopped timeline stays frozen at the
        new time; a playing one continues from it.
        """
        with self._lock:
            frame = self.frame_at(time)
            self._apply_frame(frame)

            if not self._state.is_playing:
                if frame.time > 0.0:
                    self._state.state = PlaybackState.PAUSED
                else:
                    self._state.state = PlaybackState.STOPPED

        logger.debug(f"Seek to t={frame.time:.2f}s (formation {frame.formation_index})")
        return frame

    def set_speed(self, multiplier: float) -> None:
        """Set show seconds per wall-clock second. Applies on next advance."""
        if multiplier <= 0:
            raise ValueError(f"Speed must be positive, got {multiplier}")
        with self._lock:
            self._state.speed = multiplier
        logger.debug(f"Show speed set to {multiplier}x")

    def step_next(self) -> Frame:
        """Jump to the start of the next formation."""
        return self._step(1)

    def step_previous(self) -> Frame:
        """Jump to the start of the previous formation."""
        return self._step(-1)

    def _step(self, direction: int) -> Frame:
        with self._lock:
            index = self._state.current_formation_index + direction
            index = min(len(self.formations) - 1, max(0, index))
            return self.seek(index * self.formation_duration)

    # Clock

    def tick(self, timestamp: float) -> Optional[Frame]:
        """Advance using a monotonic timestamp (seconds).

        The first tick after ``play()`` only records the reference time.
        """
        with self._lock:
            if not self._state.is_playing:
                return None
            if self._last_timestamp is None:
                self._last_timestamp = timestamp
                return None
            delta = max(0.0, timestamp - self._last_timestamp)
            self._last_timestamp = timestamp
            return self.advance(delta)

    def advance(self, delta_seconds: float) -> Optional[Frame]:
        """Move show time forward by ``delta_seconds`` of wall-clock time.

        Does nothing unless playing. Reaching the end finishes playback and
        clamps the time to the duration.

        Returns:
            The rendered frame, or None if not playing
        """
        with self._lock:
            if not self._state.is_playing:
                return None

            new_time = self._state.current_time + delta_seconds * self._state.speed

            if new_time >= self._state.duration:
                frame = self.frame_at(self._state.duration)
                self._apply_frame(frame)
                self._state.transition_progress = 1.0
                self._state.state = PlaybackState.FINISHED
                self._state.is_playing = False
                self._last_timestamp = None
                logger.info(f"Show finished at t={self._state.duration:.2f}s")
            else:
                frame = self.frame_at(new_time)
                self._apply_frame(frame)

            self._notify(frame.formation_index)
            return frame

    # Frame computation

    def frame_at(
        self,
        time: float,
        rng: Optional[np.random.Generator] = None,
    ) -> Frame:
        """Render the show at ``time`` without changing playback state.

        Battery and fallback light hues are drawn from ``rng``. Without one
        the timeline's own generator is used, which moves it forward; pass
        a separate generator to preview a frame without affecting the
        values later frames get.
        """
        duration = self._state.duration
        time = min(duration, max(0.0, time))
        per_formation = duration / len(self.formations)
        last_index = len(self.formations) - 1

        index = min(last_index, int(math.floor(time / per_formation)))
        if time >= duration:
            local_progress = 1.0
        else:
            local_progress = (time % per_formation) / per_formation

        hold = self.config.hold_fraction
        if index >= last_index or local_progress < hold:
            phase = FramePhase.HOLD
            transition = 0.0
            formation = self.formations[index]
        else:
            phase = FramePhase.TRANSITION
            transition = min(1.0, (local_progress - hold) / (1.0 - hold))
            formation = interpolate_formation(
                self.formations[index], self.formations[index + 1], transition
            )

        return Frame(
            time=time,
            formation_index=index,
            local_progress=local_progress,
            phase=phase,
            transition_progress=transition,
            formation=formation,
            drones=project_formation(
                formation, 1.0, rng if rng is not None else self._rng
            ),
        )

    def _apply_frame(self, frame: Frame) -> None:
        self._state.current_time = frame.time
        self._state.current_formation_index = frame.formation_index
        self._state.transition_progress = frame.local_progress
        self._drones = frame.drones

    def _notify(self, index: int) -> None:
        if self._callback is None:
            return
        try:
            self._callback(self.formations[index], index)
        except Exception as e:
            logger.error(f"Formation change callback error: {e}")
