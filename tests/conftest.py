"""Pytest configuration and shared fixtures."""

import pytest

from aurorascope.curtain.base import AnimationState, CurtainConfig
from aurorascope.curtain.canvas import Canvas
from aurorascope.curtain.noise_field import constant_noise


@pytest.fixture
def flat_noise():
    """Noise field pinned at 0.5, so noise displacement vanishes."""
    return constant_noise(0.5)


@pytest.fixture
def small_config() -> CurtainConfig:
    """A config cheap enough to draw many frames in a test."""
    return CurtainConfig(width=64, height=48, cols=12, step_y=8)


@pytest.fixture
def small_canvas(small_config) -> Canvas:
    return Canvas(small_config.width, small_config.height, small_config.background_color)


@pytest.fixture
def state_factory():
    """Build an AnimationState with sensible defaults."""
    def _make(width=300, height=500, t=0.0, cursor=None):
        return AnimationState(width=width, height=height, t=t, cursor=cursor)
    return _make


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
