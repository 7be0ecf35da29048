"""
Configuration, presets and animation state for the aurora curtains.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple

RGB = Tuple[int, int, int]

COLOR_MODELS = ("banded", "gradient")
DRAW_MODES = ("segments", "polyline")
WIND_SOURCES = ("cursor", "noise")


@dataclass
class CurtainConfig:
    """Every tuned constant of the aurora sketch."""
    width: int = 1280
    height: int = 720
    fps: int = 30  # draw rate

    # Clock
    time_step: float = 0.004
    activity_rate: float = 0.6

    # Background / trails
    background_color: RGB = (7, 10, 18)
    trail_alpha: int = 20  # 0-255, lower = longer trails

    # Layers & sampling
    layers: int = 4
    cols: int = 150
    step_y: int = 10
    draw_mode: str = "segments"  # "segments", "polyline"
    polyline_run: int = 3  # samples per stroke in polyline mode

    # Layer geometry: (constant, depth term)
    base_y: Tuple[float, float] = (0.15, 0.08)    # * height, grows with z
    amp_x: Tuple[float, float] = (0.15, 0.10)     # * width, grows with 1 - z
    amp_y: Tuple[float, float] = (0.20, 0.15)     # * height, grows with 1 - z
    stroke: Tuple[float, float] = (0.9, 1.8)      # px, grows with 1 - z

    # Noise frequencies (kx, ky, kt, kz)
    noise_scale: Tuple[float, float, float, float] = (0.06, 0.01, 1.2, 3.0)

    # Shimmer: sin(t * f1 + i * f2 + y * f3) * amp_y * damping * (0.7 + 0.3 * activity)
    shimmer_freq: Tuple[float, float, float] = (2.0, 0.15, 0.01)
    shimmer_damping: float = 0.1

    # Wind
    wind_source: str = "cursor"  # "cursor", "noise"
    wind_gain: float = 120.0
    wind_range: float = 1.0
    wind_rate: float = 0.25

    # Palette
    color_model: str = "banded"  # "banded", "gradient"
    green: RGB = (40, 255, 120)
    blue: RGB = (0, 170, 255)
    lilac: RGB = (235, 80, 255)
    band_bins: int = 10
    min_band_size: int = 6
    max_lilac: float = 0.5
    top_bias: float = 0.18

    # Alpha fade
    alpha_max: float = 40.0
    alpha_floor: float = 0.15
    fade_power: float = 1.4

    # Cursor interaction
    interactive: bool = False
    cursor_radius: float = 220.0
    push_strength: float = 60.0
    lift_strength: float = 40.0
    lilac_boost: float = 0.35
    alpha_boost: float = 1.0
    alpha_ceiling: float = 80.0

    # Capture
    capture_fps: int = 5
    capture_seconds: float = 5.0
    capture_prefix: str = "aurora"

    # Post-processing (offline output only)
    glow_enabled: bool = False
    glow_intensity: float = 0.35
    glow_radius: int = 12

    def __post_init__(self):
        if self.layers < 2:
            raise ValueError(f"layers must be >= 2, got {self.layers}")
        if self.cols < 1:
            raise ValueError(f"cols must be >= 1, got {self.cols}")
        if self.step_y < 1:
            raise ValueError(f"step_y must be >= 1, got {self.step_y}")
        if self.polyline_run < 1:
            raise ValueError(f"polyline_run must be >= 1, got {self.polyline_run}")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.capture_fps <= 0 or self.capture_seconds <= 0:
            raise ValueError("capture_fps and capture_seconds must be positive")
        if self.alpha_max <= 0 or self.alpha_floor <= 0:
            raise ValueError("alpha_max and alpha_floor must be positive")
        if self.color_model not in COLOR_MODELS:
            raise ValueError(f"Unknown color model: {self.color_model!r}")
        if self.draw_mode not in DRAW_MODES:
            raise ValueError(f"Unknown draw mode: {self.draw_mode!r}")
        if self.wind_source not in WIND_SOURCES:
            raise ValueError(f"Unknown wind source: {self.wind_source!r}")

    @property
    def band_size(self) -> int:
        """Ribbons per colour band."""
        return max(self.min_band_size, round(self.cols / self.band_bins))

    @classmethod
    def from_preset(cls, name: str, **overrides) -> "CurtainConfig":
        """Build a config from a named preset, then apply keyword overrides."""
        values = dict(get_preset(name))
        values.update({k: v for k, v in overrides.items() if v is not None})
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**values)


# Each sketch revision is a bundle of overrides on top of the defaults.
PRESETS: Dict[str, Dict[str, Any]] = {
    # Current sketch: vibrant banded palette, wind follows the cursor.
    "sketch": {},
    # Earlier palette and thicker strokes.
    "muted": {
        "green": (90, 255, 140),
        "blue": (60, 220, 255),
        "lilac": (200, 150, 255),
        "stroke": (1.2, 2.5),
    },
    # First stable revision: green -> cyan gradient, fewer ribbons, drifting wind.
    "classic": {
        "color_model": "gradient",
        "green": (90, 255, 140),
        "blue": (60, 220, 255),
        "cols": 80,
        "wind_source": "noise",
    },
    # Cursor pushes, lifts and energises nearby ribbons.
    "interactive": {
        "interactive": True,
        "draw_mode": "polyline",
    },
}


def get_preset(name: str) -> Dict[str, Any]:
    """Returns the override dict for a preset name."""
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown preset {name!r}, expected one of {sorted(PRESETS)}"
        ) from None


@dataclass
class AnimationState:
    """Mutable per-run state, owned by the frame driver."""
    width: int
    height: int
    t: float = 0.0
    frame_index: int = 0
    cursor: Optional[Tuple[float, float]] = None
    wind: float = 0.0
    activity: float = 0.75

    def advance(self, step: float):
        self.t += step
        self.frame_index += 1
