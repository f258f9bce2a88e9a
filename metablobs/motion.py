"""
Orbital motion of the three metablobs, driven by two global angles
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import torch

from .config import ROTATION_SPEED_A, ROTATION_SPEED_B

# (orbit multiplier, orbit phase, orbit radius)
ORBITS = (
    (2.3, 0.0, 1.5),
    (1.7, 1.5, 2.2),
    (1.1, 3.7, 2.6),
)

# (y-z rotation multiplier on A, y-z phase, x-y rotation multiplier on B)
TUMBLES = (
    (0.9, 0.0, 0.6),
    (0.5, 1.2, 0.8),
    (0.3, 2.5, 0.4),
)


@dataclass(frozen=True)
class AnimationState:
    angle_a: float = 0.0
    angle_b: float = 0.0

    def advance(self, speed_a: float = ROTATION_SPEED_A,
                speed_b: float = ROTATION_SPEED_B) -> "AnimationState":
        """Next frame's angles, accumulated in single precision."""
        return AnimationState(
            float(np.float32(self.angle_a) + np.float32(speed_a)),
            float(np.float32(self.angle_b) + np.float32(speed_b)),
        )


def rotate(a: torch.Tensor, b: torch.Tensor, angle: torch.Tensor) -> Tuple[torch.Tensor, torch.Tensor]:
    c, s = torch.cos(angle), torch.sin(angle)
    return a * c - b * s, a * s + b * c


def blob_positions(state: AnimationState, device='cpu') -> torch.Tensor:
    A = torch.tensor(state.angle_a, dtype=torch.float32, device=device)
    B = torch.tensor(state.angle_b, dtype=torch.float32, device=device)

    zs = (
        0.8 * torch.sin(B * 3.1),
        1.0 * torch.cos(B * 2.3),
        0.6 * torch.sin(B * -1.8),
    )

    blobs = []
    for (mult, phase, radius), z, (tilt, tilt_phase, spin) in zip(ORBITS, zs, TUMBLES):
        orbit = A * mult + phase
        x = radius * torch.cos(orbit)
        y = radius * torch.sin(orbit)
        y, z = rotate(y, z, A * tilt + tilt_phase)
        x, y = rotate(x, y, B * spin)
        blobs.append(torch.stack([x, y, z]))

    return torch.stack(blobs)
