from .coordinates import CoordinateTransform, to_logical, to_screen
from .stage import Stage
from .sprite import Position, Sprite, SpriteLiveState, SpriteRegistry, SpriteState

__all__ = [
    'CoordinateTransform', 'to_logical', 'to_screen', 'Stage',
    'Position', 'Sprite', 'SpriteLiveState', 'SpriteRegistry', 'SpriteState',
]
