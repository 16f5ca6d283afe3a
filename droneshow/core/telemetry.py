"""Mock telemetry feed for the dashboard and map views.

Generates a fleet of drones around central Tokyo and nudges them on a
poll timer, standing in for a live telemetry source. All randomness comes
from an injected numpy Generator so a seeded feed is reproducible.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, List, Optional

import numpy as np

from .config import TelemetryConfig
from .drone import DronePosition, DroneStatus

logger = logging.getLogger(__name__)

TelemetryCallback = Callable[[List[DronePosition]], None]

# (latitude, longitude) base positions
BASE_POSITIONS = [
    (35.6762, 139.6503),
    (35.6586, 139.7454),
    (35.6598, 139.7006),
    (35.6284, 139.7387),
    (35.6938, 139.7036),
    (35.6470, 139.7164),
    (35.6654, 139.7707),
    (35.6809, 139.7669),
    (35.6980, 139.7731),
    (35.6433, 139.6917),
    (35.6851, 139.7528),
    (35.6617, 139.7040),
]

BASE_STATUSES = [
    DroneStatus.ACTIVE,
    DroneStatus.ACTIVE,
    DroneStatus.ACTIVE,
    DroneStatus.ACTIVE,
    DroneStatus.ACTIVE,
    DroneStatus.ACTIVE,
    DroneStatus.ACTIVE,
    DroneStatus.WARNING,
    DroneStatus.ACTIVE,
    DroneStatus.INACTIVE,
    DroneStatus.ACTIVE,
    DroneStatus.ERROR,
]


class MockTelemetrySource:
    """Produces a refreshed list of drone records every poll interval.

    Ids are stable (``drone-1`` ... ``drone-12``) across ticks and
    refreshes. Callbacks run on the poll thread; ``stop()`` guarantees no
    further callbacks once it returns.
    """

    def __init__(
        self,
        config: Optional[TelemetryConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """Initialize telemetry source.

        Args:
            config: Telemetry configuration. Uses defaults if not provided.
            rng: Random source. Defaults to one seeded from ``config.seed``.
        """
        self.config = config or TelemetryConfig()
        self._rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self._lock = threading.Lock()
        self._drones: List[DronePosition] = self._generate()

        self._callback: Optional[TelemetryCallback] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def drones(self) -> List[DronePosition]:
        """Latest drone records."""
        with self._lock:
            return list(self._drones)

    @property
    def is_running(self) -> bool:
        """Whether the poll thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def _generate(self) -> List[DronePosition]:
        """Build a fresh fleet scattered around the base positions."""
        now = datetime.now()
        drones = []

        for index, (lat, lon) in enumerate(BASE_POSITIONS):
            drones.append(DronePosition(
                id=f"drone-{index + 1}",
                name=f"Drone {index + 1}",
                latitude=lat + (self._rng.random() - 0.5) * 0.01,
                longitude=lon + (self._rng.random() - 0.5) * 0.01,
                altitude=float(self._rng.integers(50, 150)),
                status=BASE_STATUSES[index],
                battery=float(self._rng.integers(40, 100)),
                last_update=now - timedelta(seconds=float(self._rng.random()) * 300),
            ))

        return drones

    def refresh(self) -> List[DronePosition]:
        """Replace the fleet with newly generated records."""
        drones = self._generate()
        with self._lock:
            self._drones = drones
        logger.debug("Telemetry refreshed")
        return list(drones)

    def tick(self) -> List[DronePosition]:
        """Nudge every drone once, as a live feed update would."""
        cfg = self.config
        now = datetime.now()

        with self._lock:
            updated = []
            for drone in self._drones:
                altitude = drone.altitude + (self._rng.random() - 0.5) * cfg.altitude_jitter
                updated.append(DronePosition(
                    id=drone.id,
                    name=drone.name,
                    latitude=drone.latitude + (self._rng.random() - 0.5) * cfg.position_jitter,
                    longitude=drone.longitude + (self._rng.random() - 0.5) * cfg.position_jitter,
                    altitude=float(min(cfg.max_altitude, max(cfg.min_altitude, altitude))),
                    status=drone.status,
                    battery=max(0.0, drone.battery - float(self._rng.random()) * cfg.battery_drain),
                    last_update=now,
                ))
            self._drones = updated
            return list(updated)

    def start(self, callback: Optional[TelemetryCallback] = None) -> bool:
        """Start polling.

        Args:
            callback: Called with the drone list after every tick

        Returns:
            True if polling is running after the call
        """
        if self.is_running:
            logger.warning("Telemetry polling already running")
            return True

        self._callback = callback
        # One event per run; stop() only ends the run it belongs to
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._poll_loop, args=(self._stop_event,), daemon=True
        )
        self._thread.start()
        logger.info(f"Telemetry polling every {self.config.poll_interval:g}s")
        return True

    def stop(self) -> None:
        """Stop polling. Idempotent."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=2.0)
        self._thread = None
        self._callback = None
        logger.info("Telemetry polling stopped")

    def _poll_loop(self, stop_event: threading.Event) -> None:
        """Tick every poll interval until stopped."""
        while not stop_event.wait(self.config.poll_interval):
            drones = self.tick()
            callback = self._callback
            if callback is None or stop_event.is_set():
                continue
            try:
                callback(drones)
            except Exception as e:
                logger.error(f"Telemetry callback error: {e}")
