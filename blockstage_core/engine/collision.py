"""
Collision Monitor

Polls sprite positions while a run is in progress. When two sprites come within
`collision_distance` of each other, their Move blocks are rewritten:

- both have a Move block with different steps: the step values are swapped
- only one has a Move block with nonzero steps: its steps become 0 and the other
  sprite receives a new Move block carrying them

A pair that was mutated is ignored for `collision_cooldown` seconds.
"""

from __future__ import annotations
import asyncio
import itertools
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from blockstage_core.blocks.block import BlockCategory, BlockInstance, format_number
from blockstage_core.blocks.catalog import instantiate
from blockstage_core.constants import DEFAULT_MOVE_STEPS
from blockstage_core.engine.context import SimulationContext
from blockstage_core.stage.sprite import Sprite
from blockstage_core.utils import get_logger

logger = get_logger('engine.collision')


@dataclass
class CollisionEvent:
    """A collision that changed the program store."""
    kind: str  # "swap" or "transfer"
    source_id: str
    target_id: str
    source_steps: float
    target_steps: float
    time: float


def is_move_block(block: BlockInstance) -> bool:
    return block.matches(BlockCategory.MOTION, "Move")


class CollisionMonitor:
    def __init__(self, context: SimulationContext):
        self.context = context
        self._updating = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, run_token: int) -> asyncio.Task:
        self._task = asyncio.create_task(self._poll(run_token), name="collision-monitor")
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self._updating = False

    async def _poll(self, run_token: int) -> None:
        interval = self.context.config.tick_interval
        while self.context.is_current(run_token):
            self.tick()
            await asyncio.sleep(interval)

    def tick(self) -> List[CollisionEvent]:
        """
        Evaluate every unordered sprite pair once.

        Returns:
            List[CollisionEvent], the mutations applied during this tick
        """
        if self._updating:
            return []
        self._updating = True
        try:
            now = self.context.clock()
            events = []
            for sprite_a, sprite_b in itertools.combinations(self.context.sprite_list(), 2):
                event = self._check_pair(sprite_a, sprite_b, now)
                if event is not None:
                    events.append(event)
            return events
        finally:
            self._updating = False

    def distance(self, sprite_a: Sprite, sprite_b: Sprite) -> float:
        pos_a = self.context.live_state.get(sprite_a.id).position
        pos_b = self.context.live_state.get(sprite_b.id).position
        return float(np.hypot(pos_a.x - pos_b.x, pos_a.y - pos_b.y))

    def _in_cooldown(self, key, now: float) -> bool:
        last = self.context.cooldowns.get(key)
        return last is not None and now - last < self.context.config.collision_cooldown

    def _check_pair(self, sprite_a: Sprite, sprite_b: Sprite, now: float) -> Optional[CollisionEvent]:
        key = self.context.pair_key(sprite_a.id, sprite_b.id)
        if self._in_cooldown(key, now):
            return None
        if sprite_a.id not in self.context.live_state or sprite_b.id not in self.context.live_state:
            return None
        if self.distance(sprite_a, sprite_b) > self.context.config.collision_distance:
            return None

        programs = self.context.programs
        move_a = programs.find_first(sprite_a.id, is_move_block)
        move_b = programs.find_first(sprite_b.id, is_move_block)
        step_a = move_a.number_input(0, DEFAULT_MOVE_STEPS) if move_a else 0.0
        step_b = move_b.number_input(0, DEFAULT_MOVE_STEPS) if move_b else 0.0

        event = None
        if move_a is not None and move_b is not None:
            if step_a != step_b:
                move_a.inputs[0] = format_number(step_b)
                move_b.inputs[0] = format_number(step_a)
                event = CollisionEvent("swap", sprite_a.id, sprite_b.id, step_a, step_b, now)
                logger.info(f"Collision: swapping steps between {sprite_a.name} and {sprite_b.name}")
        elif move_a is not None and step_a != 0:
            self._transfer(move_a, sprite_b, step_a)
            event = CollisionEvent("transfer", sprite_a.id, sprite_b.id, step_a, 0.0, now)
            logger.info(f"Collision: transferring steps from {sprite_a.name} to {sprite_b.name}")
        elif move_b is not None and step_b != 0:
            self._transfer(move_b, sprite_a, step_b)
            event = CollisionEvent("transfer", sprite_b.id, sprite_a.id, step_b, 0.0, now)
            logger.info(f"Collision: transferring steps from {sprite_b.name} to {sprite_a.name}")

        if event is not None:
            self.context.cooldowns[key] = now
        return event

    def _transfer(self, move_block: BlockInstance, receiver: Sprite, steps: float) -> None:
        move_block.inputs[0] = "0"
        self.context.programs.push(receiver.id, instantiate("move", {0: format_number(steps)}))
