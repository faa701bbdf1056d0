"""
Block Interpreter

Runs one sprite's program as a coroutine. The program is re-read from the live
Program Store before every step, so collision mutations made while the sprite is
running apply to the blocks it has not executed yet.

A Repeat block loops over its `children` when it has any. A flat Repeat, as
produced by the editing UI, repeats the rest of the enclosing sequence (starting
with the block right after it) `times` times; that tail is then used up.
"""

from __future__ import annotations
import asyncio
from enum import Enum
from typing import Callable, List

import numpy as np

from blockstage_core.blocks.block import BlockCategory, BlockInstance
from blockstage_core.constants import (
    DEFAULT_GOTO_X, DEFAULT_GOTO_Y, DEFAULT_MOVE_STEPS, DEFAULT_REPEAT_TIMES,
    DEFAULT_SAY_MESSAGE, DEFAULT_SAY_SECONDS, DEFAULT_TURN_DEGREES, TEXT_WHEN_CLICKED,
)
from blockstage_core.engine.context import SimulationContext
from blockstage_core.stage.sprite import Position
from blockstage_core.utils import get_logger

logger = get_logger('engine.interpreter')

SequenceReader = Callable[[], List[BlockInstance]]


class InterpreterState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUSPENDED = "suspended"
    FINISHED = "finished"


def is_start_event(block: BlockInstance) -> bool:
    return block.matches(BlockCategory.EVENT, TEXT_WHEN_CLICKED)


class BlockInterpreter:
    def __init__(self, context: SimulationContext, sprite_id: str, run_token: int):
        self.context = context
        self.sprite_id = sprite_id
        self.run_token = run_token
        self.state = InterpreterState.IDLE
        self.executed_steps = 0

    @property
    def active(self) -> bool:
        return self.context.is_current(self.run_token)

    async def run(self) -> bool:
        """
        Execute the sprite's program.

        Returns:
            bool, whether the program had a start event and was executed
        """
        program = self.context.programs.get(self.sprite_id)
        if not any(is_start_event(block) for block in program):
            logger.debug(f"Sprite {self.sprite_id} has no start event, nothing to run")
            self.state = InterpreterState.FINISHED
            return False

        self.state = InterpreterState.RUNNING
        try:
            if self.active:
                self.context.live_state.update(self.sprite_id, message="")
            await self._run_sequence(lambda: self.context.programs.get(self.sprite_id), 0)
        finally:
            self.state = InterpreterState.FINISHED
        logger.debug(f"Sprite {self.sprite_id} finished after {self.executed_steps} steps")
        return True

    async def _run_sequence(self, read: SequenceReader, start: int) -> None:
        index = start
        while self.active:
            blocks = read()
            if index >= len(blocks):
                return
            block = blocks[index]
            index += 1

            if block.is_event():
                continue

            if block.matches(BlockCategory.CONTROL, "Repeat"):
                times = int(block.number_input(0, DEFAULT_REPEAT_TIMES))
                if block.children:
                    for _ in range(max(times, 0)):
                        await self._run_sequence(lambda: list(block.children), 0)
                    continue
                for _ in range(max(times, 0)):
                    await self._run_sequence(read, index)
                return

            await self.execute(block)

    async def execute(self, block: BlockInstance) -> None:
        """Apply a single non-control block, including its suspension."""
        if block.category is BlockCategory.MOTION:
            await self._execute_motion(block)
        elif block.category is BlockCategory.LOOKS:
            await self._execute_looks(block)
        else:
            logger.debug(f"Skipping unrecognized block '{block.text}' ({block.category.value})")

    async def _suspend(self, seconds: float) -> None:
        self.state = InterpreterState.SUSPENDED
        await asyncio.sleep(max(seconds, 0.0))
        self.state = InterpreterState.RUNNING

    async def _execute_motion(self, block: BlockInstance) -> None:
        live = self.context.live_state
        stage = self.context.stage

        if "Move" in block.text:
            steps = block.number_input(0, DEFAULT_MOVE_STEPS)
            current = live.get(self.sprite_id)
            radians = np.radians(current.rotation)
            x = current.position.x + float(np.cos(radians)) * steps
            y = current.position.y + float(np.sin(radians)) * steps
            x, y = stage.clamp(x, y)
            live.update(self.sprite_id, position=Position(x, y))
        elif "Turn" in block.text:
            degrees = block.number_input(0, DEFAULT_TURN_DEGREES)
            current = live.get(self.sprite_id)
            live.update(self.sprite_id, rotation=current.rotation + degrees)
        elif "Go to x:" in block.text:
            logical_x = block.number_input(0, DEFAULT_GOTO_X)
            logical_y = block.number_input(1, DEFAULT_GOTO_Y)
            x, y = stage.screen_position(logical_x, logical_y)
            live.update(self.sprite_id, position=Position(x, y))
        else:
            logger.debug(f"Skipping unrecognized motion block '{block.text}'")
            return

        self.executed_steps += 1
        await self._suspend(self.context.config.step_delay)

    async def _execute_looks(self, block: BlockInstance) -> None:
        if not block.text.startswith("Say"):
            logger.debug(f"Skipping unrecognized looks block '{block.text}'")
            return

        message = DEFAULT_SAY_MESSAGE
        duration = DEFAULT_SAY_SECONDS
        if "for ___ sec" in block.text:
            message = block.text_input(0, DEFAULT_SAY_MESSAGE)
            duration = block.number_input(1, DEFAULT_SAY_SECONDS)

        self.context.live_state.update(self.sprite_id, message=message)
        self.executed_steps += 1
        await self._suspend(duration)
        if self.active:
            self.context.live_state.update(self.sprite_id, message="")
