"""
Spotlight editing core.

Selection rectangles, the exposure mask filter and display scaling.
"""

from .models import Point, Size, Rectangle, PixelBuffer, MaskConfig
from .exposure_mask import ExposureMaskFilter

__all__ = [
    'Point',
    'Size',
    'Rectangle',
    'PixelBuffer',
    'MaskConfig',
    'ExposureMaskFilter'
]
