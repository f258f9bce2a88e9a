"""
Getting frames out: ANSI terminal playback, text dumps, PNG/GIF export
"""

import logging
import shutil
import sys
import time
from pathlib import Path
from typing import Iterable, Tuple

import numpy as np
from PIL import Image

from .compositor import Frame, FrameBuffers
from .config import FRAME_DELAY, LUMINANCE_CHARS

logger = logging.getLogger(__name__)

CLEAR = "\x1b[2J"
HOME = "\x1b[H"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


def terminal_size(fallback: Tuple[int, int] = (80, 22)) -> Tuple[int, int]:
    cols, rows = shutil.get_terminal_size(fallback)
    return cols, rows


class TerminalPresenter:
    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdout

    def start(self):
        self.stream.write(CLEAR + HIDE_CURSOR)
        self.stream.flush()

    def present(self, buffers: FrameBuffers):
        self.stream.write(HOME + buffers.to_text())
        self.stream.flush()

    def close(self):
        self.stream.write(SHOW_CURSOR + "\n")
        self.stream.flush()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def play(frames: Iterable[Frame], presenter: TerminalPresenter, fps: float = 1.0 / FRAME_DELAY) -> int:
    """Present frames at up to fps. Returns how many were shown."""
    budget = 1.0 / fps if fps > 0 else 0.0
    shown = 0
    for frame in frames:
        start = time.perf_counter()
        presenter.present(frame.buffers)
        shown += 1
        remaining = budget - (time.perf_counter() - start)
        if remaining > 0:
            time.sleep(remaining)
    return shown


def write_text(buffers: FrameBuffers, path) -> Path:
    path = Path(path)
    path.write_text(buffers.to_text() + "\n", encoding="utf-8")
    logger.info("wrote %s", path)
    return path


def glyph_levels(glyphs: np.ndarray, ramp: str = LUMINANCE_CHARS) -> np.ndarray:
    """0 for background, 1..len(ramp) for ramp glyphs, darkest first."""
    levels = np.zeros(glyphs.shape, dtype=np.uint8)
    for i, ch in enumerate(ramp):
        levels[glyphs == ch] = i + 1
    return levels


def glyph_image(buffers: FrameBuffers, cell: Tuple[int, int] = (4, 8),
                ramp: str = LUMINANCE_CHARS) -> Image.Image:
    """Grayscale picture of the glyph grid, one cell-sized block per character."""
    levels = glyph_levels(buffers.glyphs, ramp).astype(np.float32) / len(ramp)
    img = Image.fromarray((levels * 255).clip(0, 255).astype(np.uint8), 'L')
    h, w = buffers.shape
    return img.resize((w * cell[0], h * cell[1]), Image.NEAREST)


def save_png(buffers: FrameBuffers, path, cell: Tuple[int, int] = (4, 8)) -> Path:
    path = Path(path)
    glyph_image(buffers, cell).save(path)
    logger.info("wrote %s", path)
    return path


def save_gif(frames: Iterable[Frame], path, cell: Tuple[int, int] = (4, 8),
             duration: int = round(FRAME_DELAY * 1000)) -> Path:
    # buffers are refilled in place, so snapshot each frame as it arrives
    images = [glyph_image(frame.buffers, cell) for frame in frames]
    if not images:
        raise ValueError("no frames to save")
    path = Path(path)
    images[0].save(path, save_all=True, append_images=images[1:], duration=duration, loop=0)
    logger.info("wrote %s (%d frames)", path, len(images))
    return path
