import pytest

from blockstage_core import StageSession
from blockstage_core.engine import EngineConfig
from blockstage_core.stage import Stage


class FakeClock:
    """Manually advanced clock for cooldown tests."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fast_config():
    return EngineConfig(
        step_delay=0.001,
        tick_interval=0.001,
        collision_distance=60.0,
        collision_cooldown=0.5,
        auto_stop=None,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(fast_config):
    return StageSession(stage=Stage(480, 360), config=fast_config)


@pytest.fixture
def two_sprites(fast_config, clock):
    """A session with Cat and Ball placed on top of each other, using the fake clock."""
    session = StageSession(stage=Stage(480, 360), config=fast_config, clock=clock)
    cat = session.sprites()[0]
    ball = session.add_sprite("Ball", "ball")
    return session, cat, ball
