"""
Metablob scalar field and its surface normal
"""

import torch

from .config import METABLOB_RADIUS, EPSILON, FIELD_GUARD, NORMAL_GUARD


def field(p: torch.Tensor, blobs: torch.Tensor, radius: float = METABLOB_RADIUS) -> torch.Tensor:
    """Sum of radius^2 / dist^2 over every blob. p is (..., 3), blobs is (B, 3)."""
    diff = p.unsqueeze(-2) - blobs
    dist_sq = (diff * diff).sum(dim=-1)
    safe = torch.where(dist_sq > FIELD_GUARD, dist_sq, torch.ones_like(dist_sq))
    contrib = torch.where(dist_sq > FIELD_GUARD, (radius * radius) / safe, torch.zeros_like(dist_sq))
    return contrib.sum(dim=-1)


def normal(p: torch.Tensor, blobs: torch.Tensor, eps: float = EPSILON,
           radius: float = METABLOB_RADIUS) -> torch.Tensor:
    """Forward-difference gradient of the field, unit length unless degenerate.

    All three differences are taken against the unperturbed value fx.
    """
    fx = field(p, blobs, radius)
    n = torch.zeros_like(p)
    for i in range(3):
        pp = p.clone()
        pp[..., i] += eps
        n[..., i] = field(pp, blobs, radius) - fx

    length = torch.norm(n, dim=-1, keepdim=True)
    return torch.where(length > NORMAL_GUARD, n / length.clamp(min=NORMAL_GUARD), n)
