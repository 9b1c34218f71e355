"""Image loading and encoding."""

from .image_loader import load_image, ImageLoadError
from .encoder import EncodingFailure

__all__ = ['load_image', 'ImageLoadError', 'EncodingFailure']
