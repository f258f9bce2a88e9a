"""
Adaptive-step ray marcher for the metablob field

Unlike a signed distance function, the field gives no safe step bound, so the
step is a heuristic: long strides where the field is weak, short ones near a
blob. Thin features can be stepped over.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional

import torch

from .config import DEFAULT_CONFIG, NO_HIT, STEP_SCALE, RenderConfig
from .field import field


@dataclass
class MarchResult:
    hit: torch.Tensor         # (N,) bool
    distance: torch.Tensor    # (N,) t for hits, NO_HIT otherwise
    position: torch.Tensor    # (N, 3) hit point, origin for misses
    steps: torch.Tensor       # (N,) iterations used


class Hit(NamedTuple):
    point: torch.Tensor
    distance: float


def march_rays(origins: torch.Tensor, dirs: torch.Tensor, blobs: torch.Tensor,
               config: RenderConfig = DEFAULT_CONFIG) -> MarchResult:
    n = origins.shape[0]
    device = origins.device

    t = torch.zeros(n, dtype=origins.dtype, device=device)
    hit = torch.zeros(n, dtype=torch.bool, device=device)
    active = torch.ones(n, dtype=torch.bool, device=device)
    hit_pos = origins.clone()
    steps = torch.zeros(n, dtype=torch.long, device=device)

    for _ in range(config.max_steps):
        if not active.any():
            break

        p = origins + t.unsqueeze(-1) * dirs
        f = field(p, blobs, config.radius)
        steps += active.long()

        new_hits = active & (f >= config.threshold)
        hit |= new_hits
        hit_pos[new_hits] = p[new_hits]
        active &= ~new_hits

        t = torch.where(active, t + STEP_SCALE / (f + STEP_SCALE), t)
        active &= ~(t > config.max_distance)

    distance = torch.where(hit, t, torch.full_like(t, NO_HIT))
    return MarchResult(hit=hit, distance=distance, position=hit_pos, steps=steps)


def march(origin, direction, blobs: torch.Tensor,
          config: RenderConfig = DEFAULT_CONFIG) -> Optional[Hit]:
    """March a single ray. Returns None when nothing is hit."""
    o = torch.as_tensor(origin, dtype=torch.float32, device=blobs.device).reshape(1, 3)
    d = torch.as_tensor(direction, dtype=torch.float32, device=blobs.device).reshape(1, 3)
    result = march_rays(o, d, blobs, config)
    if not result.hit[0]:
        return None
    return Hit(result.position[0], result.distance[0].item())
