from __future__ import annotations
from typing import Tuple

from blockstage_core.constants import DEFAULT_STAGE_HEIGHT, DEFAULT_STAGE_WIDTH, SPRITE_SIZE
from blockstage_core.stage.coordinates import CoordinateTransform


class Stage:
    """
    The 2-D surface sprites move within. Sprite positions are the top-left corner of
    a `sprite_size` square in stage pixels.
    """

    def __init__(self,
                 width: float = DEFAULT_STAGE_WIDTH,
                 height: float = DEFAULT_STAGE_HEIGHT,
                 sprite_size: float = SPRITE_SIZE):
        self.sprite_size = float(sprite_size)
        self.transform = CoordinateTransform(width, height)

    @property
    def width(self) -> float:
        return self.transform.width

    @property
    def height(self) -> float:
        return self.transform.height

    @property
    def half_sprite(self) -> float:
        return self.sprite_size / 2

    def resize(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Stage dimensions must be positive, got {width}x{height}")
        self.transform = CoordinateTransform(width, height)

    def center_position(self) -> Tuple[float, float]:
        """Top-left corner that places a sprite in the middle of the stage."""
        return self.width / 2 - self.half_sprite, self.height / 2 - self.half_sprite

    def clamp(self, x: float, y: float) -> Tuple[float, float]:
        """Clamp a sprite position into [0, extent - sprite_size] on each axis."""
        max_x = self.width - self.sprite_size
        max_y = self.height - self.sprite_size
        return max(0.0, min(x, max_x)), max(0.0, min(y, max_y))

    def logical_position(self, x: float, y: float) -> Tuple[int, int]:
        """Logical coordinates of the center of a sprite positioned at (x, y)."""
        return self.transform.to_logical(x + self.half_sprite, y + self.half_sprite)

    def screen_position(self, logical_x: float, logical_y: float) -> Tuple[float, float]:
        """Sprite position whose center lands on the given logical point."""
        screen_x, screen_y = self.transform.to_screen(logical_x, logical_y)
        return screen_x - self.half_sprite, screen_y - self.half_sprite
