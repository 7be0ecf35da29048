"""
Curtain renderer.

Draws one depth layer of the aurora: a row of vertical ribbons whose
sample points are pushed sideways by coherent noise and wind, shimmer
vertically with time, and carry a banded green/blue/lilac colour and a
height fade. Interactive configs also bend ribbons around the cursor.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from aurorascope.curtain.base import AnimationState, CurtainConfig
from aurorascope.curtain.canvas import Canvas
from aurorascope.curtain.colorgrade import (
    band_weights,
    fade_alpha,
    gradient_weights,
    mix_palette,
    smooth01,
)
from aurorascope.curtain.noise_field import NoiseFn, PerlinNoise


@dataclass
class LayerGeometry:
    """Per-layer constants derived from depth z (0 = front)."""
    base_y: float
    amp_x: float
    amp_y: float
    stroke_weight: float


@dataclass
class Ribbon:
    """One traced ribbon: positions, colours and alpha per sample point."""
    index: int
    xs: np.ndarray
    ys: np.ndarray
    colors: np.ndarray  # (N, 3) float RGB
    alphas: np.ndarray  # (N,) 0-255
    stroke_weight: float

    @property
    def points(self) -> List[Tuple[float, float]]:
        return list(zip(self.xs.tolist(), self.ys.tolist()))


def layer_geometry(z: float, width: int, height: int, cfg: CurtainConfig) -> LayerGeometry:
    """Back layers sit lower; front layers sway, wobble and weigh more."""
    near = 1.0 - z
    return LayerGeometry(
        base_y=height * (cfg.base_y[0] + cfg.base_y[1] * z),
        amp_x=width * (cfg.amp_x[0] + cfg.amp_x[1] * near),
        amp_y=height * (cfg.amp_y[0] + cfg.amp_y[1] * near),
        stroke_weight=cfg.stroke[0] + cfg.stroke[1] * near,
    )


def cursor_touch(
    xs: np.ndarray,
    ys: np.ndarray,
    cursor: Optional[Tuple[float, float]],
    radius: float,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Proximity of each point to the cursor.

    Returns:
        (touch, dx, dist): touch in [0, 1] (1 on the cursor, 0 beyond
        ``radius``), signed x offset from the cursor, and distance.
    """
    if cursor is None or radius <= 0:
        zeros = np.zeros_like(xs)
        return zeros, zeros, zeros
    dx = xs - cursor[0]
    dy = ys - cursor[1]
    dist = np.hypot(dx, dy)
    touch = smooth01(1.0 - dist / radius)
    return touch, dx, dist


class CurtainRenderer:
    """
    Computes and draws curtains for a single frame.

    Args:
        config: Tuned constants. Uses defaults if None.
        noise_fn: ``(x, y, z) -> [0, 1]`` coherent noise; Perlin by default.
    """

    def __init__(self, config: CurtainConfig | None = None, noise_fn: NoiseFn | None = None):
        self.cfg = config or CurtainConfig()
        self.noise = noise_fn or PerlinNoise()

    def compute_ribbon(
        self,
        i: int,
        z: float,
        geom: LayerGeometry,
        wind: float,
        activity: float,
        state: AnimationState,
    ) -> Ribbon:
        cfg = self.cfg
        width, height, t = state.width, state.height, state.t
        kx, ky, kt, kz = cfg.noise_scale
        f1, f2, f3 = cfg.shimmer_freq

        ys = np.arange(0, height, cfg.step_y, dtype=np.float64)
        y01 = ys / height

        n = np.array([self.noise(i * kx, y * ky, t * kt + z * kz) for y in ys])

        # Wind leans the tops of the ribbons more than the bottoms
        xs = (i / cfg.cols) * width + (n - 0.5) * geom.amp_x + wind * cfg.wind_gain * (1.0 - y01)

        shimmer = np.sin(t * f1 + i * f2 + ys * f3) * geom.amp_y * cfg.shimmer_damping
        yy = geom.base_y + ys + shimmer * (0.7 + 0.3 * activity)

        touch = np.zeros_like(ys)
        if cfg.interactive and state.cursor is not None:
            touch, dx, dist = cursor_touch(xs, yy, state.cursor, cfg.cursor_radius)
            xs = xs + cfg.push_strength * touch * dx / (dist + 1.0)
            yy = yy - cfg.lift_strength * touch

        if cfg.color_model == "gradient":
            w_g, w_b, w_l = gradient_weights(z, y01, activity)
        else:
            w_g, w_b, w_l = band_weights(i, y01, cfg, touch)

        return Ribbon(
            index=i,
            xs=xs,
            ys=yy,
            colors=mix_palette(w_g, w_b, w_l, cfg),
            alphas=fade_alpha(y01, cfg, touch),
            stroke_weight=geom.stroke_weight,
        )

    def compute_curtain(
        self,
        z: float,
        wind: float,
        activity: float,
        state: AnimationState,
    ) -> List[Ribbon]:
        """All ribbons of one layer, without drawing them."""
        geom = layer_geometry(z, state.width, state.height, self.cfg)
        return [
            self.compute_ribbon(i, z, geom, wind, activity, state)
            for i in range(self.cfg.cols)
        ]

    def render_curtain(
        self,
        canvas: Canvas,
        z: float,
        wind: float,
        activity: float,
        state: AnimationState,
    ) -> List[Ribbon]:
        """Compute one layer and draw it onto the canvas."""
        ribbons = self.compute_curtain(z, wind, activity, state)
        for ribbon in ribbons:
            canvas.stroke_weight(ribbon.stroke_weight)
            if self.cfg.draw_mode == "polyline":
                self._draw_polyline(canvas, ribbon)
            else:
                self._draw_segments(canvas, ribbon)
        return ribbons

    def _draw_segments(self, canvas: Canvas, ribbon: Ribbon):
        xs, ys = ribbon.xs, ribbon.ys
        for k in range(1, len(xs)):
            canvas.stroke(ribbon.colors[k], ribbon.alphas[k])
            canvas.line(xs[k - 1], ys[k - 1], xs[k], ys[k])

    def _draw_polyline(self, canvas: Canvas, ribbon: Ribbon):
        # Short runs sharing their end points; each run takes its own mean
        # colour and alpha so the height fade and cursor glow stay local.
        n = len(ribbon.xs)
        run = self.cfg.polyline_run
        points = ribbon.points
        for start in range(0, n - 1, run):
            stop = min(start + run, n - 1) + 1
            canvas.stroke(
                ribbon.colors[start:stop].mean(axis=0),
                float(ribbon.alphas[start:stop].mean()),
            )
            canvas.polyline(points[start:stop])


def depth_for_layer(layer: int, layers: int) -> float:
    """Layer index -> normalised depth in [0, 1]."""
    return layer / (layers - 1)

