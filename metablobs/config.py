"""
Render constants and the tunable RenderConfig
"""

from dataclasses import dataclass, replace as _replace
from typing import Tuple

# SCENE
NUM_BLOBS = 3
METABLOB_RADIUS = 1.2
THRESHOLD = 1.0          # field value at the surface
K2 = 8.0                 # eye distance from the origin

# PROJECTION
BASE_SCALE_X = 90.0
BASE_SCALE_Y = 45.0
BASE_WIDTH = 80.0
BASE_HEIGHT = 22.0

# ANIMATION (radians per frame)
ROTATION_SPEED_A = 0.0216
ROTATION_SPEED_B = 0.03312
FRAME_DELAY = 0.033333

# RAY MARCHING
MAX_STEPS = 64
MIN_DISTANCE = 0.01
MAX_DISTANCE = 20.0
EPSILON = 0.001
STEP_SCALE = 0.1         # t += STEP_SCALE / (f + STEP_SCALE)
FIELD_GUARD = 1e-4       # squared distance below which a blob is skipped
NORMAL_GUARD = 1e-4
NO_HIT = -1.0

# SHADING
LUMINANCE_CHARS = ".:;!=Xs*$M@#"   # darkest -> brightest
BACKGROUND = " "
LIGHT_DIRECTION = (-0.3, -0.7, 0.6)
LUMINANCE_SCALE = 8.0
LUMINANCE_OFFSET = 4.0
ROUNDING_MODES = ("round", "truncate")


@dataclass(frozen=True)
class RenderConfig:
    num_blobs: int = NUM_BLOBS
    radius: float = METABLOB_RADIUS
    threshold: float = THRESHOLD
    max_steps: int = MAX_STEPS
    max_distance: float = MAX_DISTANCE
    epsilon: float = EPSILON
    ramp: str = LUMINANCE_CHARS
    background: str = BACKGROUND
    light: Tuple[float, float, float] = LIGHT_DIRECTION
    rounding: str = "round"

    def __post_init__(self):
        if not self.ramp:
            raise ValueError("luminance ramp must not be empty")
        if len(self.background) != 1:
            raise ValueError(f"background must be a single character, got {self.background!r}")
        if self.rounding not in ROUNDING_MODES:
            raise ValueError(f"rounding must be one of {ROUNDING_MODES}, got {self.rounding!r}")
        if not 1 <= self.num_blobs <= NUM_BLOBS:
            raise ValueError(f"num_blobs must be between 1 and {NUM_BLOBS}, got {self.num_blobs}")
        if self.max_steps <= 0:
            raise ValueError(f"max_steps must be positive, got {self.max_steps}")
        if len(self.light) != 3:
            raise ValueError("light direction needs three components")

    @property
    def max_level(self) -> int:
        return len(self.ramp) - 1

    def replace(self, **changes) -> "RenderConfig":
        return _replace(self, **changes)


DEFAULT_CONFIG = RenderConfig()
