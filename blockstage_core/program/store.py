"""
Program Store

Per-sprite ordered block sequences. Editing operations come from the editing UI and
are ignored while a run is in progress; the engine writes through `push` and by
mutating block inputs in place, which the lock does not cover.
"""

from __future__ import annotations
from typing import Callable, Dict, Iterator, List, Optional

from blockstage_core.blocks.block import BlockInstance, sanitize_number_input
from blockstage_core.utils import get_logger

logger = get_logger('program.store')


class ProgramStore:
    def __init__(self):
        self._programs: Dict[str, List[BlockInstance]] = {}
        self._locked = False

    # Lifetime
    def create(self, sprite_id: str) -> None:
        """Create an empty program for a new sprite (no-op if it already exists)."""
        self._programs.setdefault(sprite_id, [])

    # Editing lock
    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self) -> None:
        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    def _check_editable(self, operation: str, sprite_id: str) -> bool:
        self._program(sprite_id)
        if self._locked:
            logger.warning(f"Ignoring {operation} on sprite {sprite_id}: program is running")
            return False
        return True

    def _program(self, sprite_id: str) -> List[BlockInstance]:
        try:
            return self._programs[sprite_id]
        except KeyError:
            raise KeyError(f"No program for sprite {sprite_id}") from None

    # Reads
    def get(self, sprite_id: str) -> List[BlockInstance]:
        """
        Current top-level sequence of a sprite.

        Returns a new list on every call; the block objects themselves are shared, so
        input changes made by the engine are visible through earlier reads too.
        """
        return list(self._program(sprite_id))

    def find_block(self, sprite_id: str, block_id: str) -> Optional[BlockInstance]:
        for block in self.walk(sprite_id):
            if block.id == block_id:
                return block
        return None

    def walk(self, sprite_id: str) -> Iterator[BlockInstance]:
        """All blocks of a program depth-first, nested bodies included."""
        for block in self.get(sprite_id):
            yield from block.walk()

    def find_first(self, sprite_id: str, predicate: Callable[[BlockInstance], bool]) -> Optional[BlockInstance]:
        for block in self.walk(sprite_id):
            if predicate(block):
                return block
        return None

    # Editing (UI)
    def set(self, sprite_id: str, blocks: List[BlockInstance]) -> bool:
        """Replace a program; Event blocks are moved to the top, keeping relative order."""
        if not self._check_editable("set", sprite_id):
            return False
        events = [b for b in blocks if b.is_event()]
        others = [b for b in blocks if not b.is_event()]
        self._programs[sprite_id] = events + others
        return True

    def insert(self, sprite_id: str, block: BlockInstance, index: Optional[int] = None) -> bool:
        """
        Insert a dropped block. Event blocks always go to index 0; other blocks are
        placed at `index` but never above the leading Event blocks.
        """
        if not self._check_editable("insert", sprite_id):
            return False
        program = self._programs[sprite_id]
        if block.is_event():
            program.insert(0, block)
        else:
            position = len(program) if index is None else index
            program.insert(self._clamp_below_events(program, position), block)
        return True

    def move(self, sprite_id: str, source_index: int, destination_index: int) -> bool:
        """Reorder a block within a program, keeping Event blocks pinned to the top."""
        if not self._check_editable("move", sprite_id):
            return False
        program = self._programs[sprite_id]
        if not 0 <= source_index < len(program):
            logger.debug(f"Ignoring move from out-of-range index {source_index} on sprite {sprite_id}")
            return False
        block = program.pop(source_index)
        if block.is_event():
            program.insert(0, block)
        else:
            program.insert(self._clamp_below_events(program, destination_index), block)
        return True

    def remove(self, sprite_id: str, block_id: str) -> bool:
        if not self._check_editable("remove", sprite_id):
            return False
        program = self._programs[sprite_id]
        for i, block in enumerate(program):
            if block.id == block_id:
                del program[i]
                return True
        return False

    def update_input(self, sprite_id: str, block_id: str, index: int, value: str) -> bool:
        """Set an input typed by the user; number inputs are sanitized first."""
        if not self._check_editable("update_input", sprite_id):
            return False
        block = self.find_block(sprite_id, block_id)
        if block is None:
            return False
        input_type = block.input_types[index] if index < len(block.input_types) else "text"
        if input_type == "number":
            value = sanitize_number_input(value)
        block.inputs[index] = value
        return True

    # Engine writes
    def push(self, sprite_id: str, block: BlockInstance) -> None:
        """Append a block during a run. Not subject to the editing lock."""
        self._program(sprite_id).append(block)

    @staticmethod
    def _clamp_below_events(program: List[BlockInstance], index: int) -> int:
        leading_events = 0
        while leading_events < len(program) and program[leading_events].is_event():
            leading_events += 1
        return min(max(index, leading_events), len(program))
