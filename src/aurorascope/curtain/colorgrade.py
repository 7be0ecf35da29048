"""
Colour blending and post-processing for aurora curtains.

Maps ribbon index, height and cursor proximity to green/blue/lilac
blend weights and alpha, and adds an optional glow bloom.
"""

import math
from typing import Tuple, Union

import numpy as np
from PIL import Image, ImageFilter

from aurorascope.curtain.base import CurtainConfig

ArrayLike = Union[float, np.ndarray]


def clamp01(x: ArrayLike) -> ArrayLike:
    """Force a weight or fraction into [0, 1]."""
    return np.clip(x, 0.0, 1.0)


def smooth01(x: ArrayLike) -> ArrayLike:
    """Smoothstep on [0, 1]: gradual near both ends."""
    x = clamp01(x)
    return x * x * (3 - 2 * x)


def tri01(x: ArrayLike) -> ArrayLike:
    """Triangle wave: 0 at integer x, 1 halfway between."""
    x = x - np.floor(x)
    return 1 - np.abs(2 * x - 1)


def band_coords(i: int, band_size: int) -> Tuple[float, float]:
    """Returns (band_pos, band_frac) for ribbon i."""
    band_pos = i / band_size
    return band_pos, band_pos - math.floor(band_pos)


def mode_blend(band_pos: float) -> float:
    """
    0 for two-colour bands, 1 for three-colour bands.

    Alternates every band with a smooth transition between neighbours.
    """
    return float(smooth01(0.5 + 0.5 * math.sin(math.pi * band_pos)))


def lilac_weight(i: int, cfg: CurtainConfig, touch: ArrayLike = 0.0) -> ArrayLike:
    band_pos, band_frac = band_coords(i, cfg.band_size)
    w = cfg.max_lilac * mode_blend(band_pos) * float(tri01(band_frac))
    return clamp01(w + cfg.lilac_boost * touch)


def band_weights(
    i: int,
    y01: ArrayLike,
    cfg: CurtainConfig,
    touch: ArrayLike = 0.0,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Green/blue/lilac weights for ribbon i at normalised heights y01.

    Lilac follows the band scheme (plus any cursor boost); the rest is
    split evenly between green and blue, then a top-biased share moves
    from green to blue. The three weights always sum to 1.

    Returns:
        (w_green, w_blue, w_lilac), each broadcast to the shape of y01.
    """
    y01 = np.asarray(y01, dtype=np.float64)
    w_l = np.broadcast_to(lilac_weight(i, cfg, touch), y01.shape).astype(np.float64)

    w_gb = 1.0 - w_l
    w_b = 0.5 * w_gb
    bias = cfg.top_bias * clamp01(1.0 - y01)
    w_b = np.minimum(w_b + bias, w_gb)
    w_g = w_gb - w_b
    return w_g, w_b, w_l


def gradient_weights(
    z: float,
    y01: ArrayLike,
    activity: float,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Earlier two-colour model: green drifts to cyan with depth and height."""
    y01 = np.asarray(y01, dtype=np.float64)
    depth_mix = 0.2 + 0.55 * z
    height_mix = 0.55 * clamp01(1.0 - y01) ** 1.6
    u = clamp01(depth_mix + height_mix + 0.1 * activity)
    return 1.0 - u, u, np.zeros_like(u)


def mix_palette(
    w_g: np.ndarray,
    w_b: np.ndarray,
    w_l: np.ndarray,
    cfg: CurtainConfig,
) -> np.ndarray:
    """Weighted sum of the three palette colours -> (N, 3) float RGB."""
    palette = np.array([cfg.green, cfg.blue, cfg.lilac], dtype=np.float64)
    weights = np.stack(np.broadcast_arrays(w_g, w_b, w_l), axis=-1)
    return weights @ palette


def fade_alpha(y01: ArrayLike, cfg: CurtainConfig, touch: ArrayLike = 0.0) -> np.ndarray:
    """
    Height fade on the 0-255 alpha scale.

    Brightest at the top, never below ``alpha_max * alpha_floor``. Cursor
    proximity multiplies it up to ``alpha_ceiling``.
    """
    fade = clamp01(1.0 - np.asarray(y01, dtype=np.float64)) ** cfg.fade_power
    alpha = cfg.alpha_max * (cfg.alpha_floor + (1.0 - cfg.alpha_floor) * fade)
    alpha = alpha * (1.0 + cfg.alpha_boost * touch)
    ceiling = max(cfg.alpha_ceiling, cfg.alpha_max)
    return np.clip(alpha, cfg.alpha_max * cfg.alpha_floor, ceiling)


def add_glow(
    frame: np.ndarray,
    intensity: float = 0.35,
    radius: int = 12,
) -> np.ndarray:
    """
    Screen-blend a gaussian-blurred copy for a soft atmospheric halo.

    Args:
        frame: (H, W, 3) uint8 RGB array.
        intensity: Glow opacity (0-1).
        radius: Blur radius in pixels.

    Returns:
        (H, W, 3) uint8 RGB array.
    """
    if intensity <= 0:
        return frame

    blurred = Image.fromarray(frame).filter(ImageFilter.GaussianBlur(radius=radius))
    a = frame.astype(np.float32) / 255.0
    b = np.asarray(blurred, dtype=np.float32) / 255.0 * intensity
    screen = 1.0 - (1.0 - a) * (1.0 - b)
    return (screen * 255).astype(np.uint8)
