from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, List

from blockstage_core.stage.stage import Stage


@dataclass(frozen=True)
class Sprite:
    """An independently programmable actor on the stage."""
    id: str
    name: str
    asset: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "asset": self.asset}


@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class SpriteState:
    """Live visual state of a sprite. Replaced, never mutated, so render reads are consistent."""
    position: Position
    rotation: float = 0.0  # degrees, 0 = facing +x, not normalized
    message: str = ""
    is_visible: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": {"x": self.position.x, "y": self.position.y},
            "rotation": self.rotation,
            "message": self.message,
            "isVisible": self.is_visible,
        }


class SpriteRegistry:
    """Ordered collection of sprites. Sprites are never removed."""

    def __init__(self):
        self._sprites: List[Sprite] = []
        self._counter = 0

    def list(self) -> List[Sprite]:
        return list(self._sprites)

    def add(self, name: str, asset: str) -> Sprite:
        self._counter += 1
        sprite = Sprite(id=f"sprite-{asset}-{self._counter}", name=name, asset=asset)
        self._sprites.append(sprite)
        return sprite


class SpriteLiveState:
    """Mapping from sprite id to its current SpriteState."""

    def __init__(self, stage: Stage):
        self.stage = stage
        self._states: Dict[str, SpriteState] = {}

    def __contains__(self, sprite_id: str) -> bool:
        return sprite_id in self._states

    def initialize(self, sprite_id: str) -> SpriteState:
        """Place a sprite at stage center the first time it appears."""
        if sprite_id not in self._states:
            x, y = self.stage.center_position()
            self._states[sprite_id] = SpriteState(position=Position(x, y))
        return self._states[sprite_id]

    def get(self, sprite_id: str) -> SpriteState:
        try:
            return self._states[sprite_id]
        except KeyError:
            raise KeyError(f"No live state for sprite {sprite_id}") from None

    def update(self, sprite_id: str, **changes) -> SpriteState:
        state = replace(self.get(sprite_id), **changes)
        self._states[sprite_id] = state
        return state

    def move_to(self, sprite_id: str, x: float, y: float) -> SpriteState:
        return self.update(sprite_id, position=Position(float(x), float(y)))

    def items(self):
        return list(self._states.items())
