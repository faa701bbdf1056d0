from __future__ import annotations
import time
from typing import Callable, Dict, List, Optional, Tuple

from blockstage_core.engine.config import EngineConfig
from blockstage_core.program.store import ProgramStore
from blockstage_core.stage.sprite import Sprite, SpriteLiveState, SpriteRegistry
from blockstage_core.stage.stage import Stage

PairKey = Tuple[str, str]


class SimulationContext:
    """
    Shared state of one stage session, passed to every interpreter and to the
    collision monitor.

    Access rules during a run: the collision monitor is the only writer of the
    program store; each interpreter writes only its own sprite's live state.
    """

    def __init__(self,
                 stage: Optional[Stage] = None,
                 config: Optional[EngineConfig] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.stage = stage or Stage()
        self.config = config or EngineConfig()
        self.clock = clock
        self.sprites = SpriteRegistry()
        self.programs = ProgramStore()
        self.live_state = SpriteLiveState(self.stage)
        self.cooldowns: Dict[PairKey, float] = {}
        self.is_playing = False
        self._run_token = 0

    def add_sprite(self, name: str, asset: str) -> Sprite:
        """Register a sprite together with its empty program and initial live state."""
        sprite = self.sprites.add(name, asset)
        self.programs.create(sprite.id)
        self.live_state.initialize(sprite.id)
        return sprite

    def sprite_list(self) -> List[Sprite]:
        return self.sprites.list()

    # Run tokens
    def begin_run(self) -> int:
        self._run_token += 1
        self.is_playing = True
        self.programs.lock()
        return self._run_token

    def end_run(self) -> None:
        self._run_token += 1
        self.is_playing = False
        self.cooldowns.clear()
        self.programs.unlock()

    def is_current(self, token: int) -> bool:
        return self.is_playing and token == self._run_token

    @staticmethod
    def pair_key(sprite_a: str, sprite_b: str) -> PairKey:
        return tuple(sorted((sprite_a, sprite_b)))
