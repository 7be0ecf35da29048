"""
Aurora curtains: noise-driven ribbon layers, banded colour, cursor interaction.
"""

from aurorascope.curtain.base import AnimationState, CurtainConfig, PRESETS
from aurorascope.curtain.canvas import Canvas
from aurorascope.curtain.capture import FrameCapture
from aurorascope.curtain.driver import FrameDriver
from aurorascope.curtain.noise_field import PerlinNoise
from aurorascope.curtain.renderer import CurtainRenderer
