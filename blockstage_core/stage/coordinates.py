"""
Conversion between stage-pixel space (origin top-left, y down) and the centered
logical space shown to the user (origin at stage center, y up).
"""

from typing import Tuple
import numpy as np

def _round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))

def to_logical(screen_x: float, screen_y: float, width: float, height: float) -> Tuple[int, int]:
    """
    Convert a stage-pixel point to logical coordinates, rounded to integers.

    Args:
        screen_x: float, x in pixels from the left edge
        screen_y: float, y in pixels from the top edge
        width: float, current stage width
        height: float, current stage height

    Returns:
        (x, y): logical coordinates
    """
    return _round_half_up(screen_x - width / 2), _round_half_up(-(screen_y - height / 2))

def to_screen(logical_x: float, logical_y: float, width: float, height: float) -> Tuple[float, float]:
    """
    Convert logical coordinates to a stage-pixel point. Exact inverse of to_logical
    up to its rounding; screen coordinates are not rounded.
    """
    return logical_x + width / 2, height / 2 - logical_y


class CoordinateTransform:
    """Coordinate conversion bound to a stage size."""

    def __init__(self, width: float = 0.0, height: float = 0.0):
        self.width = float(width)
        self.height = float(height)

    def to_logical(self, screen_x: float, screen_y: float) -> Tuple[int, int]:
        return to_logical(screen_x, screen_y, self.width, self.height)

    def to_screen(self, logical_x: float, logical_y: float) -> Tuple[float, float]:
        return to_screen(logical_x, logical_y, self.width, self.height)
