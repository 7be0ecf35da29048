"""
Frame driver for the aurora curtains.

Owns the animation state and canvas, advances the clock, derives the
global wind and activity for the frame, draws every depth layer and
hands the finished canvas to an optional frame capture.
"""

import time
from pathlib import Path
from typing import Callable, Iterator, Optional, Tuple

import numpy as np

from aurorascope.curtain.base import AnimationState, CurtainConfig
from aurorascope.curtain.canvas import Canvas
from aurorascope.curtain.capture import FrameCapture
from aurorascope.curtain.colorgrade import add_glow
from aurorascope.curtain.noise_field import NoiseFn, PerlinNoise
from aurorascope.curtain.renderer import CurtainRenderer, depth_for_layer


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class FrameDriver:
    """
    Runs the per-frame loop: clock, mood parameters, layers, capture.

    Args:
        config: Tuned constants. Uses defaults if None.
        noise_fn: Coherent noise source shared by renderer and driver.
        seed: Perlin seed when no noise_fn is given.
        capture: Frame capture to feed after each frame.
        clock_ms: Millisecond clock used for capture timing.
    """

    def __init__(
        self,
        config: CurtainConfig | None = None,
        noise_fn: NoiseFn | None = None,
        seed: int | None = None,
        capture: FrameCapture | None = None,
        clock_ms: Callable[[], float] | None = None,
    ):
        self.cfg = config or CurtainConfig()
        self.noise = noise_fn or PerlinNoise(seed=seed or 0)
        self.renderer = CurtainRenderer(self.cfg, self.noise)
        self.canvas = Canvas(self.cfg.width, self.cfg.height, self.cfg.background_color)
        self.state = AnimationState(width=self.cfg.width, height=self.cfg.height)
        self.capture = capture
        self.clock_ms = clock_ms or _monotonic_ms

    def compute_wind(self) -> float:
        """Signed horizontal bias from the cursor x position or slow noise."""
        cfg, state = self.cfg, self.state
        if cfg.wind_source == "noise":
            n = self.noise(state.t * cfg.wind_rate, 50.0, 0.0)
            return (n - 0.5) * 2.0 * cfg.wind_range
        if state.cursor is None:
            return 0.0
        # cursor x in [0, width] -> [-1, 1]
        wind = state.cursor[0] / max(state.width, 1) * 2.0 - 1.0
        return float(np.clip(wind, -1.0, 1.0)) * cfg.wind_range

    def compute_activity(self) -> float:
        """Slow-drifting shimmer modulator in [0.5, 1]."""
        return 0.5 + 0.5 * self.noise(self.state.t * self.cfg.activity_rate, 0.0, 0.0)

    def set_cursor(self, cursor: Optional[Tuple[float, float]]):
        self.state.cursor = cursor

    def resize(self, width: int, height: int):
        self.canvas.resize(width, height)
        self.state.width, self.state.height = self.canvas.size

    def step(self, now_ms: float | None = None) -> AnimationState:
        """Advance one frame and draw it onto the canvas."""
        cfg, state = self.cfg, self.state
        state.advance(cfg.time_step)
        state.wind = self.compute_wind()
        state.activity = self.compute_activity()

        self.canvas.background(cfg.background_color, cfg.trail_alpha)
        for layer in range(cfg.layers):
            z = depth_for_layer(layer, cfg.layers)
            self.renderer.render_curtain(self.canvas, z, state.wind, state.activity, state)

        if self.capture is not None:
            self.capture.tick(self.clock_ms() if now_ms is None else now_ms, self.canvas)
        return state

    def frame(self) -> np.ndarray:
        """Current canvas as (H, W, 3) uint8, with glow if enabled."""
        rgb = self.canvas.to_array()
        if self.cfg.glow_enabled:
            rgb = add_glow(rgb, intensity=self.cfg.glow_intensity, radius=self.cfg.glow_radius)
        return rgb

    def run(self, n_frames: int, progress_callback: callable = None) -> Iterator[np.ndarray]:
        """
        Render ``n_frames`` on a simulated clock of ``cfg.fps``.

        Yields:
            (H, W, 3) uint8 frames.
        """
        frame_ms = 1000.0 / self.cfg.fps
        for i in range(n_frames):
            self.step(now_ms=i * frame_ms)
            yield self.frame()
            if progress_callback:
                progress_callback(i + 1, n_frames)

    def start_capture(self, now_ms: float | None = None) -> bool:
        if self.capture is None:
            self.capture = FrameCapture(
                fps=self.cfg.capture_fps,
                seconds=self.cfg.capture_seconds,
                prefix=self.cfg.capture_prefix,
            )
        return self.capture.start(self.clock_ms() if now_ms is None else now_ms, self.canvas)

    def save_capture(self, path: Path) -> Optional[Path]:
        if self.capture is None:
            print("No ZIP ready yet.")
            return None
        return self.capture.save(path)
