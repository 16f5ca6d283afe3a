"""Light themes for rendered drones.

The theme is picked from the formation name and is purely cosmetic: it
never affects geometry.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..core.drone import LightEffect


@dataclass(frozen=True)
class LightTheme:
    """Light settings for one drone."""
    color: str
    intensity: float
    effect: LightEffect


def _hsl(hue: float, saturation: int, lightness: int) -> str:
    return f"hsl({hue:g}, {saturation}%, {lightness}%)"


def formation_color_theme(
    formation_name: str,
    index: int,
    total: int,
    rng: Optional[np.random.Generator] = None,
) -> LightTheme:
    """Light theme for slot ``index`` of ``total``.

    - Star: warm hues 30-90 deg, every 3rd slot pulses
    - Triangle: cool hues 200-280 deg, all fade
    - Circle: full spectrum by slot fraction, every 4th slot strobes
    - Anything else: random hue from ``rng``, steady

    Args:
        formation_name: Name of the active formation
        index: Slot index
        total: Number of slots in the formation
        rng: Random source for the fallback hue

    Returns:
        LightTheme for the slot
    """
    if "Star" in formation_name:
        hue = 30 + (index % 5) * 15
        effect = LightEffect.PULSE if index % 3 == 0 else LightEffect.STEADY
        return LightTheme(_hsl(hue, 100, 60), 2.5, effect)

    if "Triangle" in formation_name:
        hue = 200 + (index % 3) * 40
        return LightTheme(_hsl(hue, 80, 65), 2.0, LightEffect.FADE)

    if "Circle" in formation_name:
        hue = (index / total) * 360 if total else 0.0
        effect = LightEffect.STROBE if index % 4 == 0 else LightEffect.STEADY
        return LightTheme(_hsl(round(hue, 3), 90, 60), 1.8, effect)

    rng = rng if rng is not None else np.random.default_rng()
    hue = float(rng.uniform(0.0, 360.0))
    return LightTheme(_hsl(round(hue, 3), 85, 65), 2.0, LightEffect.STEADY)
