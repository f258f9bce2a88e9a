"""
Ray-marched ASCII metablobs
"""

from .camera import Viewport, camera_rays, ray_for_cell
from .compositor import Frame, FrameBuffers, animate, composite, luminance_index, render_blobs, render_frame
from .config import DEFAULT_CONFIG, RenderConfig
from .field import field, normal
from .marcher import Hit, MarchResult, march, march_rays
from .motion import AnimationState, blob_positions

__version__ = "0.1.0"
