"""
Stage Session

Entry point for the editing and rendering collaborators: sprites, their programs,
their live state, and the play/stop trigger.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, List, Mapping, Optional
import time

from omegaconf import DictConfig

from blockstage_core.blocks.block import BlockCategory, BlockInstance
from blockstage_core.blocks.catalog import block_from_spec, instantiate, template_at
from blockstage_core.constants import (
    DEFAULT_SPRITE_ASSET, DEFAULT_SPRITE_NAME, DEFAULT_STAGE_HEIGHT, DEFAULT_STAGE_WIDTH, SPRITE_SIZE,
)
from blockstage_core.engine.config import EngineConfig
from blockstage_core.engine.context import SimulationContext
from blockstage_core.engine.orchestrator import ExecutionOrchestrator
from blockstage_core.program.store import ProgramStore
from blockstage_core.stage.sprite import Sprite, SpriteLiveState, SpriteState
from blockstage_core.stage.stage import Stage
from blockstage_core.utils import get_logger

logger = get_logger('session')


class StageSession:
    def __init__(self,
                 stage: Optional[Stage] = None,
                 config: Optional[EngineConfig] = None,
                 clock: Callable[[], float] = time.monotonic,
                 default_sprite: bool = True):
        self.context = SimulationContext(stage=stage, config=config, clock=clock)
        self.orchestrator = ExecutionOrchestrator(self.context)
        if default_sprite:
            self.add_sprite(DEFAULT_SPRITE_NAME, DEFAULT_SPRITE_ASSET)

    @classmethod
    def from_config(cls, cfg: DictConfig, **kwargs) -> 'StageSession':
        stage_cfg = cfg.get("stage", {})
        stage = Stage(
            width=stage_cfg.get("width", DEFAULT_STAGE_WIDTH),
            height=stage_cfg.get("height", DEFAULT_STAGE_HEIGHT),
            sprite_size=stage_cfg.get("sprite_size", SPRITE_SIZE),
        )
        return cls(stage=stage, config=EngineConfig.from_config(cfg), **kwargs)

    @classmethod
    def from_project(cls, project: Mapping[str, Any], cfg: Optional[DictConfig] = None, **kwargs) -> 'StageSession':
        """
        Build a session from a loaded project file (see utils.io.load_project_file).
        The project's `stage` section overrides the configured stage size.
        """
        session = cls.from_config(cfg, default_sprite=False, **kwargs) if cfg is not None \
            else cls(default_sprite=False, **kwargs)

        stage_spec = project.get("stage") or {}
        if "width" in stage_spec or "height" in stage_spec:
            session.resize(stage_spec.get("width", session.stage.width),
                           stage_spec.get("height", session.stage.height))

        for sprite_spec in project["sprites"]:
            sprite = session.add_sprite(sprite_spec.get("name", DEFAULT_SPRITE_NAME),
                                        sprite_spec.get("asset", DEFAULT_SPRITE_ASSET))
            blocks = [block_from_spec(b) for b in sprite_spec.get("blocks", [])]
            session.programs.set(sprite.id, blocks)
            if "position" in sprite_spec:
                x, y = sprite_spec["position"]
                session.live_state.move_to(sprite.id, *session.stage.screen_position(x, y))
            if "rotation" in sprite_spec:
                session.live_state.update(sprite.id, rotation=float(sprite_spec["rotation"]))
        logger.info(f"Loaded project with {len(project['sprites'])} sprites")
        return session

    # Shared state
    @property
    def stage(self) -> Stage:
        return self.context.stage

    @property
    def programs(self) -> ProgramStore:
        return self.context.programs

    @property
    def live_state(self) -> SpriteLiveState:
        return self.context.live_state

    @property
    def is_playing(self) -> bool:
        return self.context.is_playing

    # Sprites
    def sprites(self) -> List[Sprite]:
        return self.context.sprite_list()

    def add_sprite(self, name: str, asset: str) -> Sprite:
        sprite = self.context.add_sprite(name, asset)
        logger.debug(f"Added sprite {sprite.id} ({name})")
        return sprite

    def state(self, sprite_id: str) -> SpriteState:
        return self.live_state.get(sprite_id)

    def drag_sprite(self, sprite_id: str, x: float, y: float) -> bool:
        """Move a sprite to a screen position with the pointer. Refused while playing."""
        if self.is_playing:
            logger.debug(f"Ignoring drag of {sprite_id} while playing")
            return False
        x, y = self.stage.clamp(x, y)
        self.live_state.move_to(sprite_id, x, y)
        return True

    def resize(self, width: float, height: float) -> None:
        self.stage.resize(width, height)

    # Editing
    def drop_block(self,
                   sprite_id: str,
                   category: BlockCategory | str,
                   template_index: int,
                   index: Optional[int] = None,
                   inputs: Optional[Mapping[int, object]] = None) -> Optional[BlockInstance]:
        """Copy a palette template into a sprite's program at `index`."""
        block = instantiate(template_at(category, template_index), inputs)
        if not self.programs.insert(sprite_id, block, index):
            return None
        return block

    def add_block(self, sprite_id: str, key: str, index: Optional[int] = None,
                  inputs: Optional[Mapping[int, object]] = None) -> Optional[BlockInstance]:
        """Same as drop_block, addressing the template by key ("move", "repeat", ...)."""
        block = instantiate(key, inputs)
        if not self.programs.insert(sprite_id, block, index):
            return None
        return block

    # Execution
    async def play(self) -> bool:
        return await self.orchestrator.play()

    async def stop(self) -> None:
        await self.orchestrator.stop()

    async def run(self) -> None:
        await self.orchestrator.run()

    async def wait(self) -> None:
        await self.orchestrator.wait()

    # Rendering
    def snapshot(self) -> List[Dict[str, Any]]:
        frames = []
        for sprite in self.sprites():
            state = self.live_state.get(sprite.id)
            logical_x, logical_y = self.stage.logical_position(state.position.x, state.position.y)
            frames.append({
                **sprite.to_dict(),
                **state.to_dict(),
                "logical": {"x": logical_x, "y": logical_y},
            })
        return frames
