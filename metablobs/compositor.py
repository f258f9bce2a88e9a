"""
Frame compositor: march every cell, depth-test, shade, pick a glyph
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Iterator, NamedTuple, Optional, Tuple

import numpy as np
import torch

from .camera import Viewport, camera_rays
from .config import (
    BACKGROUND, DEFAULT_CONFIG, LUMINANCE_OFFSET, LUMINANCE_SCALE, RenderConfig,
)
from .field import normal
from .marcher import MarchResult, march_rays
from .motion import AnimationState, blob_positions

logger = logging.getLogger(__name__)


@dataclass
class FrameBuffers:
    """Per-cell depth and glyph for one frame, indexed (row, col).

    The raw arrays follow numpy/torch indexing, so negative indices count
    from the end. Use cell() for a strict lookup.
    """

    depth: torch.Tensor   # (H, W) float32, 0.0 = nothing hit
    glyphs: np.ndarray    # (H, W) <U1

    @classmethod
    def allocate(cls, viewport: Viewport, background: str = BACKGROUND,
                 device='cpu') -> "FrameBuffers":
        depth = torch.zeros(viewport.height, viewport.width, dtype=torch.float32, device=device)
        glyphs = np.full((viewport.height, viewport.width), background, dtype='<U1')
        return cls(depth, glyphs)

    @property
    def shape(self) -> Tuple[int, int]:
        return tuple(self.depth.shape)

    def reset(self, background: str = BACKGROUND):
        self.depth.zero_()
        self.glyphs.fill(background)

    def cell(self, row: int, col: int) -> Tuple[float, str]:
        height, width = self.shape
        if not (0 <= row < height and 0 <= col < width):
            raise IndexError(f"cell ({row}, {col}) outside {width}x{height} buffer")
        return self.depth[row, col].item(), str(self.glyphs[row, col])

    def rows(self):
        return [''.join(row) for row in self.glyphs]

    def to_text(self) -> str:
        """Rows top to bottom, no newline after the last one."""
        return '\n'.join(self.rows())


class Frame(NamedTuple):
    index: int
    state: AnimationState
    buffers: FrameBuffers


def luminance_index(luminance, config: RenderConfig = DEFAULT_CONFIG) -> torch.Tensor:
    raw = torch.as_tensor(luminance, dtype=torch.float32) * LUMINANCE_SCALE + LUMINANCE_OFFSET
    if config.rounding == 'round':
        # halves go to the even index
        raw = torch.round(raw)
    else:
        raw = torch.trunc(raw)
    return raw.clamp(0, config.max_level).long()


def composite(buffers: FrameBuffers, result: MarchResult, blobs: torch.Tensor,
              config: RenderConfig = DEFAULT_CONFIG) -> int:
    """Write every hit that is nearer than what the cell already holds.

    Returns the number of cells written.
    """
    height, width = buffers.shape
    if result.hit.shape[0] != height * width:
        raise ValueError(f"{result.hit.shape[0]} rays for a {width}x{height} buffer")

    depth = buffers.depth.view(-1)
    score = 1.0 / (result.distance + 1.0)
    write = result.hit & (result.distance > 0) & (score > depth)
    if not write.any():
        return 0

    depth[write] = score[write]

    n = normal(result.position[write], blobs, config.epsilon, config.radius)
    light = torch.tensor(config.light, dtype=n.dtype, device=n.device)
    levels = luminance_index((n * light).sum(dim=-1), config)

    ramp = np.array(list(config.ramp))
    idx = write.nonzero().squeeze(-1).cpu().numpy()
    rows, cols = np.divmod(idx, width)
    buffers.glyphs[rows, cols] = ramp[levels.cpu().numpy()]
    return len(idx)


def render_blobs(viewport: Viewport, blobs: torch.Tensor, buffers: FrameBuffers,
                 config: RenderConfig = DEFAULT_CONFIG, rays=None) -> FrameBuffers:
    if buffers.shape != (viewport.height, viewport.width):
        raise ValueError(
            f"buffers are {buffers.shape[1]}x{buffers.shape[0]}, "
            f"viewport is {viewport.width}x{viewport.height}")

    buffers.reset(config.background)
    origins, dirs = rays if rays is not None else camera_rays(viewport, blobs.device)
    result = march_rays(origins, dirs, blobs, config)
    written = composite(buffers, result, blobs, config)

    logger.debug("frame: %d/%d cells hit, %d march steps max",
                 written, viewport.cells, int(result.steps.max().item()))
    return buffers


def render_frame(viewport: Viewport, state: AnimationState,
                 buffers: Optional[FrameBuffers] = None,
                 config: RenderConfig = DEFAULT_CONFIG, device='cpu') -> FrameBuffers:
    if buffers is None:
        buffers = FrameBuffers.allocate(viewport, config.background, device)
    blobs = blob_positions(state, buffers.depth.device)[:config.num_blobs]
    return render_blobs(viewport, blobs, buffers, config)


def animate(viewport: Viewport, state: Optional[AnimationState] = None,
            config: RenderConfig = DEFAULT_CONFIG, device='cpu') -> Iterator[Frame]:
    """Endless frames. The same FrameBuffers object is refilled every frame."""
    state = state or AnimationState()
    buffers = FrameBuffers.allocate(viewport, config.background, device)
    rays = camera_rays(viewport, device)

    for index in itertools.count():
        blobs = blob_positions(state, device)[:config.num_blobs]
        render_blobs(viewport, blobs, buffers, config, rays)
        yield Frame(index, state, buffers)
        state = state.advance()
