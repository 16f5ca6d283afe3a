"""Background frame clock for show playback.

Drives a ShowTimeline from wall-clock time, one advance per frame. A
single thread does all advancing, so frames never overlap: each frame's
state changes complete before the next one is scheduled.
"""

import logging
import threading
import time
from typing import Callable, List, Optional

from ..core.drone import DronePosition
from .timeline import ShowTimeline

logger = logging.getLogger(__name__)

FrameCallback = Callable[[List[DronePosition]], None]


class FrameDriver:
    """Advances a timeline at a fixed frame rate on a daemon thread.

    The thread exits on its own once the timeline stops playing, whether
    it finished, was paused or was stopped. Call ``start()`` again after
    the next ``timeline.play()`` to resume frames.

    Example:
        driver = FrameDriver(timeline, on_frame=scene.update)
        timeline.play()
        driver.start()
        ...
        timeline.pause()    # driver thread exits
        timeline.play()
        driver.start()      # frames resume
        ...
        driver.stop()
    """

    def __init__(
        self,
        timeline: ShowTimeline,
        frame_rate: Optional[float] = None,
        on_frame: Optional[FrameCallback] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize frame driver.

        Args:
            timeline: Timeline to advance
            frame_rate: Frames per second (defaults to the timeline config)
            on_frame: Called with the drone positions of every frame
            clock: Monotonic time source (seconds)
        """
        self.timeline = timeline
        self.frame_rate = frame_rate or timeline.config.frame_rate
        if self.frame_rate <= 0:
            raise ValueError("frame_rate must be positive")

        self._on_frame = on_frame
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._frames = 0

    @property
    def is_running(self) -> bool:
        """Whether the frame thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def frame_count(self) -> int:
        """Frames rendered since the last start."""
        return self._frames

    def start(self) -> bool:
        """Start the frame thread.

        Returns:
            True if the thread is running after the call
        """
        if self.is_running:
            logger.warning("Frame driver already running")
            return True

        # One event per run; stop() only ends the run it belongs to
        self._stop_event = threading.Event()
        self._frames = 0
        self._thread = threading.Thread(
            target=self._run_loop, args=(self._stop_event,), daemon=True
        )
        self._thread.start()
        logger.info(f"Frame driver started at {self.frame_rate:g} Hz")
        return True

    def stop(self) -> None:
        """Stop scheduling frames. Safe to call repeatedly or from a callback."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=2.0)
        self._thread = None
        logger.info("Frame driver stopped")

    def _run_loop(self, stop_event: threading.Event) -> None:
        """Advance once per frame until stopped or playback ends."""
        interval = 1.0 / self.frame_rate

        while not stop_event.is_set():
            frame_start = self._clock()
            frame = self.timeline.tick(frame_start)

            if frame is not None:
                self._frames += 1
                if self._on_frame:
                    try:
                        self._on_frame(frame.drones)
                    except Exception as e:
                        logger.error(f"Frame callback error: {e}")

            if not self.timeline.is_playing:
                logger.debug("Timeline no longer playing, frame driver exiting")
                break

            elapsed = self._clock() - frame_start
            stop_event.wait(max(0.0, interval - elapsed))
