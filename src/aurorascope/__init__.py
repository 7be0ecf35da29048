"""Layered aurora borealis curtains for the screen, zip archives and video."""

from aurorascope.curtain import (
    AnimationState,
    Canvas,
    CurtainConfig,
    CurtainRenderer,
    FrameCapture,
    FrameDriver,
    PerlinNoise,
)

__version__ = "0.1.0"
__all__ = [
    "AnimationState",
    "Canvas",
    "CurtainConfig",
    "CurtainRenderer",
    "FrameCapture",
    "FrameDriver",
    "PerlinNoise",
]
