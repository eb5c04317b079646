"""Per-face light levels of a block."""

from dataclasses import dataclass

from ..anvil.constants import FULL_BRIGHTNESS
from .faces import BlockFace

# Darkest shade a face can get, at light level 0
MIN_LIGHT_FACTOR = 0.3


def light_factor(level: int) -> float:
    """Brightness multiplier for a light level (0 -> 0.3, 15 -> 1.0)."""
    # Counted down from full brightness so level 15 is exactly 1.0
    return 1.0 - (1.0 - MIN_LIGHT_FACTOR) * (FULL_BRIGHTNESS - level) / FULL_BRIGHTNESS


@dataclass(frozen=True)
class LightData:
    """Light levels (0-15) reaching the three visible faces.

    Each level is sampled from the block the face looks into.
    """
    top: int = FULL_BRIGHTNESS
    east: int = FULL_BRIGHTNESS
    south: int = FULL_BRIGHTNESS

    def level(self, face: BlockFace) -> int:
        if face is BlockFace.TOP:
            return self.top
        if face is BlockFace.EAST:
            return self.east
        return self.south

    def factor(self, face: BlockFace) -> float:
        """Brightness multiplier for one face."""
        return light_factor(self.level(face))
