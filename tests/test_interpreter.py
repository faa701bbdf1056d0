"""
Tests for the block interpreter.

Cover:
- event gating
- motion semantics, ordering and clamping
- Repeat (flat tail and nested children)
- Say blocks
- live re-reading of the program store
"""

import asyncio

import pytest

from blockstage_core.blocks import instantiate
from blockstage_core.engine import BlockInterpreter, InterpreterState, SimulationContext
from blockstage_core.stage import Stage


@pytest.fixture
def context(fast_config):
    return SimulationContext(stage=Stage(480, 360), config=fast_config)


@pytest.fixture
def sprite(context):
    return context.add_sprite("Cat", "cat")


def run_program(context, sprite, blocks):
    context.programs.set(sprite.id, blocks)
    token = context.begin_run()
    interpreter = BlockInterpreter(context, sprite.id, token)
    try:
        result = asyncio.run(interpreter.run())
    finally:
        context.end_run()
    return interpreter, result


def position(context, sprite):
    pos = context.live_state.get(sprite.id).position
    return pos.x, pos.y


class TestEventGating:

    def test_program_without_event_is_a_no_op(self, context, sprite):
        before = context.live_state.get(sprite.id)
        interpreter, result = run_program(context, sprite, [instantiate("move"), instantiate("turn")])
        assert result is False
        assert interpreter.state is InterpreterState.FINISHED
        assert interpreter.executed_steps == 0
        assert context.live_state.get(sprite.id) is before

    def test_empty_program(self, context, sprite):
        _, result = run_program(context, sprite, [])
        assert result is False

    def test_event_block_is_skipped(self, context, sprite):
        interpreter, result = run_program(context, sprite, [instantiate("when_clicked")])
        assert result is True
        assert interpreter.executed_steps == 0


class TestMotion:

    def test_move_defaults_to_ten_steps_east(self, context, sprite):
        run_program(context, sprite, [instantiate("when_clicked"), instantiate("move")])
        assert position(context, sprite) == pytest.approx((220, 150))

    def test_turn_changes_direction_of_following_move(self, context, sprite):
        run_program(context, sprite, [
            instantiate("when_clicked"),
            instantiate("move", {0: "10"}),
            instantiate("turn", {0: "90"}),
            instantiate("move", {0: "10"}),
        ])
        assert position(context, sprite) == pytest.approx((220, 160))
        assert context.live_state.get(sprite.id).rotation == 90

    def test_turn_accumulates_without_normalizing(self, context, sprite):
        run_program(context, sprite, [
            instantiate("when_clicked"),
            instantiate("turn", {0: "300"}),
            instantiate("turn"),
        ])
        assert context.live_state.get(sprite.id).rotation == 390

    def test_unparsable_steps_use_default(self, context, sprite):
        run_program(context, sprite, [instantiate("when_clicked"), instantiate("move", {0: "fast"})])
        assert position(context, sprite) == pytest.approx((220, 150))

    @pytest.mark.parametrize("steps,rotation,expected", [
        ("100000", 0, (420, 150)),
        ("100000", 180, (0, 150)),
        ("100000", 90, (210, 300)),
        ("100000", 270, (210, 0)),
    ])
    def test_move_is_clamped_to_stage(self, context, sprite, steps, rotation, expected):
        context.live_state.update(sprite.id, rotation=rotation)
        run_program(context, sprite, [
            instantiate("when_clicked"),
            instantiate("move", {0: steps}),
            instantiate("move", {0: steps}),
        ])
        assert position(context, sprite) == pytest.approx(expected, abs=1e-6)

    def test_go_to_uses_logical_coordinates(self, context, sprite):
        run_program(context, sprite, [instantiate("when_clicked"), instantiate("goto", {0: "100", 1: "50"})])
        assert position(context, sprite) == pytest.approx((310, 100))

    def test_go_to_defaults_to_center(self, context, sprite):
        context.live_state.move_to(sprite.id, 0, 0)
        run_program(context, sprite, [instantiate("when_clicked"), instantiate("goto")])
        assert position(context, sprite) == pytest.approx((210, 150))

    def test_go_to_does_not_clamp(self, context, sprite):
        run_program(context, sprite, [instantiate("when_clicked"), instantiate("goto", {0: "1000", 1: "0"})])
        assert position(context, sprite)[0] == pytest.approx(1210)


class TestRepeat:

    def test_flat_repeat_runs_tail_times(self, context, sprite):
        interpreter, _ = run_program(context, sprite, [
            instantiate("when_clicked"),
            instantiate("repeat", {0: "3"}),
            instantiate("move", {0: "10"}),
        ])
        assert position(context, sprite) == pytest.approx((240, 150))
        assert interpreter.executed_steps == 3

    def test_flat_repeat_default_times(self, context, sprite):
        interpreter, _ = run_program(context, sprite, [
            instantiate("when_clicked"),
            instantiate("repeat"),
            instantiate("turn", {0: "1"}),
        ])
        assert context.live_state.get(sprite.id).rotation == 10

    def test_zero_times_skips_tail(self, context, sprite):
        interpreter, _ = run_program(context, sprite, [
            instantiate("when_clicked"),
            instantiate("move"),
            instantiate("repeat", {0: "0"}),
            instantiate("move"),
        ])
        assert interpreter.executed_steps == 1

    def test_nested_flat_repeats(self, context, sprite):
        interpreter, _ = run_program(context, sprite, [
            instantiate("when_clicked"),
            instantiate("repeat", {0: "2"}),
            instantiate("move", {0: "1"}),
            instantiate("repeat", {0: "3"}),
            instantiate("turn", {0: "1"}),
        ])
        # each outer pass: one move, then three turns
        assert interpreter.executed_steps == 2 * (1 + 3)
        assert context.live_state.get(sprite.id).rotation == 6

    def test_repeat_with_children_continues_after_body(self, context, sprite):
        interpreter, _ = run_program(context, sprite, [
            instantiate("when_clicked"),
            instantiate("repeat", {0: "3"}, [instantiate("move", {0: "10"})]),
            instantiate("turn", {0: "45"}),
        ])
        assert position(context, sprite) == pytest.approx((240, 150))
        assert context.live_state.get(sprite.id).rotation == 45
        assert interpreter.executed_steps == 4

    def test_fractional_times_truncated(self, context, sprite):
        interpreter, _ = run_program(context, sprite, [
            instantiate("when_clicked"),
            instantiate("repeat", {0: "2.9"}),
            instantiate("turn"),
        ])
        assert interpreter.executed_steps == 2


class TestLooks:

    def test_say_for_shows_then_clears_message(self, context, sprite):
        context.programs.set(sprite.id, [instantiate("when_clicked"), instantiate("say_for", {0: "Hi", 1: "0.2"})])

        async def scenario():
            token = context.begin_run()
            interpreter = BlockInterpreter(context, sprite.id, token)
            task = asyncio.create_task(interpreter.run())
            await asyncio.sleep(0.05)
            during = context.live_state.get(sprite.id).message
            state_during = interpreter.state
            await task
            context.end_run()
            return during, state_during

        during, state_during = asyncio.run(scenario())
        assert during == "Hi"
        assert state_during is InterpreterState.SUSPENDED
        assert context.live_state.get(sprite.id).message == ""

    def test_say_hello_sets_default_message(self, context, sprite):
        context.programs.set(sprite.id, [instantiate("when_clicked"), instantiate("say_hello")])

        async def scenario():
            token = context.begin_run()
            task = asyncio.create_task(BlockInterpreter(context, sprite.id, token).run())
            await asyncio.sleep(0.05)
            message = context.live_state.get(sprite.id).message
            task.cancel()
            context.end_run()
            return message

        assert asyncio.run(scenario()) == "Hello!"

    def test_unknown_blocks_are_skipped(self, context, sprite):
        from blockstage_core.blocks import block_from_spec
        interpreter, result = run_program(context, sprite, [
            instantiate("when_clicked"),
            block_from_spec({"text": "Wobble ___", "category": "Looks"}),
            block_from_spec({"text": "Forever", "category": "Control"}),
            instantiate("move"),
        ])
        assert result is True
        assert interpreter.executed_steps == 1


class TestLiveProgram:

    def test_mutation_during_run_is_seen_by_next_step(self, context, sprite):
        later = instantiate("move", {0: "10"})
        context.programs.set(sprite.id, [
            instantiate("when_clicked"),
            instantiate("say_for", {0: "wait", 1: "0.1"}),
            later,
        ])

        async def scenario():
            token = context.begin_run()
            task = asyncio.create_task(BlockInterpreter(context, sprite.id, token).run())
            await asyncio.sleep(0.02)
            later.inputs[0] = "50"
            context.programs.push(sprite.id, instantiate("turn", {0: "30"}))
            await task
            context.end_run()

        asyncio.run(scenario())
        assert position(context, sprite) == pytest.approx((260, 150))
        assert context.live_state.get(sprite.id).rotation == 30

    def test_stale_token_applies_no_effects(self, context, sprite):
        context.programs.set(sprite.id, [instantiate("when_clicked"), instantiate("move")])
        token = context.begin_run()
        context.end_run()
        before = context.live_state.get(sprite.id)
        asyncio.run(BlockInterpreter(context, sprite.id, token).run())
        assert context.live_state.get(sprite.id) is before
