#!/usr/bin/env python3
"""Play a formation show headless and log what happens.

Builds a star / triangle / circle show over central Tokyo, plays it on the
background frame driver and logs every formation change. Optionally writes
each formation as JSON, or validates a simple climb plan per drone.

Usage:
    python scripts/run_show.py
    python scripts/run_show.py --num-drones 8 --duration 3 --speed 2
    python scripts/run_show.py --export-dir /tmp/formations
    python scripts/run_show.py --demo
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from droneshow.core import GeoPoint, MockTelemetrySource, ShowConfig, TelemetryConfig
from droneshow.coordination import (
    FlightPlanner,
    Waypoint,
    export_filename,
    formation_to_json,
    generate_formation,
)
from droneshow.simulation import FrameDriver, PatternDemoPlayer, ShowTimeline

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

CENTER = GeoPoint(35.6762, 139.6503, 80.0)


def build_show(num_drones: int) -> list:
    """Star, triangle and circle with the same drones."""
    ids = [f"drone-{i}" for i in range(1, num_drones + 1)]
    return [
        generate_formation("star", CENTER, 40.0, ids, points=5),
        generate_formation("triangle", CENTER, 60.0, ids),
        generate_formation("circle", CENTER, 35.0, ids),
    ]


def export_formations(formations: list, export_dir: Path) -> None:
    """Write every formation as JSON."""
    export_dir.mkdir(parents=True, exist_ok=True)
    for formation in formations:
        path = export_dir / export_filename(formation)
        path.write_text(formation_to_json(formation))
        logger.info(f"Exported {formation.name} -> {path}")


def check_plans(formations: list) -> bool:
    """Validate a take-off-to-slot plan for every drone of the first formation."""
    formation = formations[0]
    all_valid = True

    for slot, target in zip(formation.slots, formation.target_positions()):
        ground = GeoPoint(target.latitude, target.longitude, 0.0)
        plan = FlightPlanner.generate_flight_plan(
            slot.drone_id,
            [Waypoint("ground", ground), Waypoint("slot", target, speed=3.0)],
        )
        result = FlightPlanner.validate_flight_plan(plan)
        if result.valid:
            logger.info(
                f"{slot.drone_id}: {plan.total_distance:.1f}m, "
                f"{plan.estimated_flight_time:.1f}s"
            )
        else:
            all_valid = False
            for error in result.errors:
                logger.error(f"{slot.drone_id}: {error}")

    return all_valid


def play_show(formations: list, duration: float, speed: float) -> None:
    """Play the show on the frame driver until it finishes."""
    timeline = ShowTimeline(formations, ShowConfig(formation_duration=duration))
    timeline.set_speed(speed)
    timeline.on_formation_change(
        lambda formation, index: logger.debug(f"Formation {index}: {formation.name}")
    )

    shown = {"index": -1}

    def on_frame(drones):
        index = timeline.state.current_formation_index
        if index != shown["index"]:
            shown["index"] = index
            logger.info(f"Now showing {formations[index].name} ({len(drones)} drones)")

    driver = FrameDriver(timeline, on_frame=on_frame)
    timeline.play()
    driver.start()

    try:
        while driver.is_running:
            time.sleep(0.1)
    finally:
        driver.stop()

    logger.info(f"Show {timeline.state.state.value} after {driver.frame_count} frames")


def play_demo(step: float) -> None:
    """Fly the mock telemetry fleet through the canned demo."""
    telemetry = MockTelemetrySource(TelemetryConfig(seed=1))
    player = PatternDemoPlayer(telemetry.drones)
    player.play()

    current = None
    while player.is_playing:
        if player.current_pattern is not current:
            current = player.current_pattern
            logger.info(f"Demo pattern: {current.name} ({current.duration:g}s)")
        player.advance(step)

    logger.info("Demo finished")


def main():
    parser = argparse.ArgumentParser(description="Play a drone formation show headless")
    parser.add_argument(
        "-n", "--num-drones",
        type=int,
        default=12,
        help="Number of drones (default: 12)",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=5.0,
        help="Seconds per formation (default: 5.0)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Playback speed multiplier (default: 1.0)",
    )
    parser.add_argument(
        "--export-dir",
        type=Path,
        help="Write each formation as JSON into this directory",
    )
    parser.add_argument(
        "--check-plans",
        action="store_true",
        help="Validate a take-off plan for every drone",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run the canned pattern demo instead of the show",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.demo:
        play_demo(step=0.5)
        return 0

    try:
        formations = build_show(args.num_drones)
    except ValueError as e:
        logger.error(f"Cannot build show: {e}")
        return 1

    if args.export_dir:
        export_formations(formations, args.export_dir)

    if args.check_plans and not check_plans(formations):
        return 1

    play_show(formations, args.duration, args.speed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
