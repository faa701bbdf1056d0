from __future__ import annotations
import asyncio
import traceback
from typing import Dict, List, Optional

from blockstage_core.engine.collision import CollisionMonitor
from blockstage_core.engine.context import SimulationContext
from blockstage_core.engine.interpreter import BlockInterpreter
from blockstage_core.utils import get_logger

logger = get_logger('engine.orchestrator')


class ExecutionOrchestrator:
    """
    Starts and stops a run: one interpreter task per sprite plus the collision monitor.

    `play()` returns as soon as everything is started. The run stops after
    `config.auto_stop` seconds, whether or not the interpreters are done; with
    `auto_stop=None` it stops once every interpreter has finished. `stop()` cancels
    anything still in flight.
    """

    def __init__(self, context: SimulationContext):
        self.context = context
        self.collision_monitor = CollisionMonitor(context)
        self.interpreters: Dict[str, BlockInterpreter] = {}
        self._tasks: List[asyncio.Task] = []
        self._supervisor: Optional[asyncio.Task] = None
        self._stopped: Optional[asyncio.Event] = None

    @property
    def is_playing(self) -> bool:
        return self.context.is_playing

    async def play(self) -> bool:
        """
        Start a run.

        Returns:
            bool, False if a run was already in progress
        """
        if self.context.is_playing:
            logger.warning("Play requested while already playing, ignoring")
            return False

        token = self.context.begin_run()
        self._stopped = asyncio.Event()
        sprites = self.context.sprite_list()
        logger.info(f"Starting run {token} with {len(sprites)} sprites")

        self.interpreters = {}
        self._tasks = []
        for sprite in sprites:
            interpreter = BlockInterpreter(self.context, sprite.id, token)
            self.interpreters[sprite.id] = interpreter
            self._tasks.append(asyncio.create_task(interpreter.run(), name=f"interpreter-{sprite.id}"))

        self.collision_monitor.start(token)
        self._supervisor = asyncio.create_task(self._supervise(token), name="run-supervisor")
        return True

    async def _supervise(self, token: int) -> None:
        auto_stop = self.context.config.auto_stop
        if auto_stop is not None:
            await asyncio.sleep(auto_stop)
        else:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self.context.is_current(token):
            await self.stop()

    async def stop(self) -> None:
        """Stop the current run and cancel every pending suspension."""
        if not self.context.is_playing:
            return

        self.context.end_run()
        current = asyncio.current_task()

        await self.collision_monitor.stop()

        pending = [t for t in self._tasks if not t.done()]
        for task in pending:
            task.cancel()
        results = await asyncio.gather(*self._tasks, return_exceptions=True)
        for sprite_id, result in zip(self.interpreters, results):
            if isinstance(result, Exception):
                logger.error(f"Interpreter for sprite {sprite_id} failed: {result}")
                logger.error("".join(traceback.format_exception(type(result), result, result.__traceback__)))

        supervisor, self._supervisor = self._supervisor, None
        if supervisor is not None and supervisor is not current and not supervisor.done():
            supervisor.cancel()
            try:
                await supervisor
            except asyncio.CancelledError:
                pass

        for sprite_id, state in self.context.live_state.items():
            if state.message:
                self.context.live_state.update(sprite_id, message="")

        self._tasks = []
        if self._stopped is not None:
            self._stopped.set()
        logger.info(f"Run stopped ({len(pending)} interpreters cancelled)")

    async def wait(self) -> None:
        """Wait until the current run has stopped."""
        if self._stopped is not None:
            await self._stopped.wait()

    async def run(self) -> None:
        """Play and wait for the run to stop."""
        if await self.play():
            await self.wait()
