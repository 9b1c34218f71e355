"""
Spotlight: darken everything outside a selected rectangle

Select a region of an image, dim the rest with an exposure mask and save
the result locally or to a remote endpoint.
"""

__version__ = "0.1.0"

from .config import load_config
from .editing import Point, Size, Rectangle, PixelBuffer, MaskConfig
from .session import EditSession, FinalizeResult

__all__ = [
    "load_config",
    "Point",
    "Size",
    "Rectangle",
    "PixelBuffer",
    "MaskConfig",
    "EditSession",
    "FinalizeResult",
]
