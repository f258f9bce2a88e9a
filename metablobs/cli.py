"""
metablobs command line

    metablobs                       # animate in the terminal until Ctrl-C
    metablobs --frames 300 --fps 60
    metablobs --size 80x22 --text frame.txt
    metablobs --gif blobs.gif --frames 90
"""

import argparse
import itertools
import logging
from typing import Optional, Sequence

from .camera import Viewport
from .compositor import animate, render_frame
from .config import FRAME_DELAY, ROUNDING_MODES, RenderConfig
from .logging_config import setup_logging
from .motion import AnimationState
from .presenter import TerminalPresenter, play, save_gif, save_png, terminal_size, write_text

logger = logging.getLogger(__name__)

DEFAULT_GIF_FRAMES = 60


def parse_size(text: str):
    try:
        w, h = (int(v) for v in text.lower().split('x'))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {text!r}")
    if w < 1 or h < 1:
        raise argparse.ArgumentTypeError(f"size must be at least 1x1, got {text!r}")
    return w, h


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='metablobs', description='Ray-marched ASCII metablobs')
    parser.add_argument('--size', '-s', type=parse_size, help='WIDTHxHEIGHT (default: terminal size)')
    parser.add_argument('--frames', '-f', type=int, default=None, help='stop after N frames')
    parser.add_argument('--fps', type=float, default=1.0 / FRAME_DELAY)
    parser.add_argument('--angle-a', type=float, default=0.0)
    parser.add_argument('--angle-b', type=float, default=0.0)
    parser.add_argument('--device', type=str, default='cpu')
    parser.add_argument('--rounding', choices=ROUNDING_MODES, default='round')
    parser.add_argument('--text', type=str, help='write the first frame as text and exit')
    parser.add_argument('--png', type=str, help='write the first frame as PNG and exit')
    parser.add_argument('--gif', type=str, help='write an animated GIF and exit')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    parser.add_argument('--log-file', type=str)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.frames is not None and args.frames < 0:
        parser.error("--frames must not be negative")
    if args.gif and args.frames == 0:
        parser.error("--gif needs at least one frame")

    setup_logging(getattr(logging, args.log_level), args.log_file)

    width, height = args.size or terminal_size()
    viewport = Viewport.fit(width, height)
    config = RenderConfig(rounding=args.rounding)
    state = AnimationState(args.angle_a, args.angle_b)
    logger.info("viewport %dx%d, k1=(%.2f, %.2f), y_center=%d",
                viewport.width, viewport.height, viewport.k1_x, viewport.k1_y, viewport.y_center)

    if args.text or args.png:
        buffers = render_frame(viewport, state, config=config, device=args.device)
        if args.text:
            write_text(buffers, args.text)
        if args.png:
            save_png(buffers, args.png)
        return 0

    frames = animate(viewport, state, config, args.device)

    if args.gif:
        count = args.frames if args.frames is not None else DEFAULT_GIF_FRAMES
        save_gif(itertools.islice(frames, count), args.gif,
                 duration=round(1000.0 / args.fps) if args.fps > 0 else 0)
        return 0

    if args.frames is not None:
        frames = itertools.islice(frames, args.frames)

    with TerminalPresenter() as presenter:
        try:
            shown = play(frames, presenter, args.fps)
        except KeyboardInterrupt:
            logger.info("interrupted")
            return 0
    logger.info("presented %d frames", shown)
    return 0
