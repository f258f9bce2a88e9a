"""
Pinhole camera: one ray per character cell, eye at (0, 0, -K2) looking down +Z
"""

from dataclasses import dataclass
from typing import Tuple

import torch

from .config import BASE_HEIGHT, BASE_SCALE_X, BASE_SCALE_Y, BASE_WIDTH, K2

EYE = (0.0, 0.0, -K2)


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int
    k1_x: float
    k1_y: float
    y_center: int

    @classmethod
    def fit(cls, width: int, height: int) -> "Viewport":
        """Aspect-preserving fit of the base 80x22 projection to width x height."""
        if width < 1 or height < 1:
            raise ValueError(f"viewport must be at least 1x1, got {width}x{height}")
        scale = min(width / BASE_WIDTH, height / BASE_HEIGHT)
        return cls(
            width=width,
            height=height,
            k1_x=BASE_SCALE_X * scale,
            k1_y=BASE_SCALE_Y * scale,
            y_center=int(12.0 * height / BASE_HEIGHT),
        )

    @property
    def cells(self) -> int:
        return self.width * self.height


def ray_for_cell(x: int, y: int, viewport: Viewport, device='cpu') -> torch.Tensor:
    d = torch.tensor([
        (x - viewport.width / 2.0) / viewport.k1_x,
        (viewport.y_center - y) / viewport.k1_y,
        1.0,
    ], dtype=torch.float32, device=device)
    return d / torch.norm(d)


def camera_rays(viewport: Viewport, device='cpu') -> Tuple[torch.Tensor, torch.Tensor]:
    """Origins and unit directions for every cell, row-major, each (H*W, 3)."""
    xs = torch.arange(viewport.width, dtype=torch.float32, device=device)
    ys = torch.arange(viewport.height, dtype=torch.float32, device=device)
    yy, xx = torch.meshgrid(ys, xs, indexing='ij')

    dirs = torch.stack([
        (xx - viewport.width / 2.0) / viewport.k1_x,
        (viewport.y_center - yy) / viewport.k1_y,
        torch.ones_like(xx),
    ], dim=-1).reshape(-1, 3)
    dirs = dirs / torch.norm(dirs, dim=-1, keepdim=True)

    origins = torch.tensor(EYE, dtype=torch.float32, device=device).repeat(viewport.cells, 1)
    return origins, dirs
