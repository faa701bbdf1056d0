from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from omegaconf import DictConfig

from blockstage_core.constants import (
    AUTO_STOP_AFTER, COLLISION_COOLDOWN, COLLISION_DISTANCE, COLLISION_TICK_INTERVAL, STEP_DELAY,
)


@dataclass
class EngineConfig:
    """Timing and collision settings for a run. Durations are in seconds."""

    # Interpreter
    step_delay: float = STEP_DELAY  # suspension after Move / Turn / Go to

    # Collision monitor
    tick_interval: float = COLLISION_TICK_INTERVAL
    collision_distance: float = COLLISION_DISTANCE
    collision_cooldown: float = COLLISION_COOLDOWN

    # Orchestrator; None runs until every interpreter has finished
    auto_stop: Optional[float] = AUTO_STOP_AFTER

    @classmethod
    def from_config(cls, cfg: Optional[DictConfig]) -> 'EngineConfig':
        """Build from the `engine` section of the stage config; missing keys keep defaults."""
        if cfg is None:
            return cls()
        engine = cfg.get("engine", cfg)
        defaults = cls()
        auto_stop = engine.get("auto_stop", defaults.auto_stop)
        return cls(
            step_delay=float(engine.get("step_delay", defaults.step_delay)),
            tick_interval=float(engine.get("tick_interval", defaults.tick_interval)),
            collision_distance=float(engine.get("collision_distance", defaults.collision_distance)),
            collision_cooldown=float(engine.get("collision_cooldown", defaults.collision_cooldown)),
            auto_stop=None if auto_stop is None else float(auto_stop),
        )
