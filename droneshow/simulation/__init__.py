"""Show playback: timeline, rendering, frame clock and demo."""

from .lighting import LightTheme, formation_color_theme
from .renderer import project_formation, interpolate_drone_positions
from .timeline import (
    PlaybackState,
    FramePhase,
    SimulationState,
    Frame,
    ShowTimeline,
)
from .frame_driver import FrameDriver
from .demo import DemoPattern, PatternDemoPlayer, build_demo_patterns

__all__ = [
    "LightTheme",
    "formation_color_theme",
    "project_formation",
    "interpolate_drone_positions",
    "PlaybackState",
    "FramePhase",
    "SimulationState",
    "Frame",
    "ShowTimeline",
    "FrameDriver",
    "DemoPattern",
    "PatternDemoPlayer",
    "build_demo_patterns",
]
