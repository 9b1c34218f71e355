"""
Data models for the spotlight editor.
"""

from dataclasses import dataclass
from typing import Dict, Any, Union

import numpy as np


@dataclass(frozen=True)
class Point:
    """Pointer position, already translated into canvas space."""
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    """Width/height pair in pixels."""
    width: float
    height: float

    def as_tuple(self):
        return (self.width, self.height)


@dataclass(frozen=True)
class Rectangle:
    """
    Selection rectangle in canvas-pixel units.

    Width and height may be negative while the user is still dragging;
    use ``selector.normalize`` before treating it as a mask boundary.
    """
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def is_normalized(self) -> bool:
        return self.width >= 0 and self.height >= 0

    def to_dict(self) -> Dict[str, float]:
        """Serialize to the persistence schema ``{x, y, width, height}``."""
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Rectangle':
        return cls(
            x=data['x'],
            y=data['y'],
            width=data.get('width', 0.0),
            height=data.get('height', 0.0)
        )


class PixelBuffer:
    """
    RGBA raster, row-major.

    Backed by a uint8 array of shape (height, width, 4). The flat byte view
    (``to_bytes``/``from_bytes``) matches a canvas ImageData layout.
    """

    CHANNELS = 4

    def __init__(self, data: np.ndarray):
        if data.ndim != 3 or data.shape[2] != self.CHANNELS:
            raise ValueError(f"Expected (H, W, 4) RGBA array, got shape {data.shape}")
        if data.dtype != np.uint8:
            data = np.clip(data, 0, 255).astype(np.uint8)
        self.data = data

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @classmethod
    def blank(cls, width: int, height: int,
              color=(0, 0, 0, 255)) -> 'PixelBuffer':
        """Create a buffer filled with a single RGBA color."""
        data = np.empty((height, width, cls.CHANNELS), dtype=np.uint8)
        data[:, :] = color
        return cls(data)

    @classmethod
    def from_bytes(cls, flat: Union[bytes, bytearray, np.ndarray],
                   width: int, height: int) -> 'PixelBuffer':
        """
        Build a buffer from a flat RGBA byte sequence.

        Args:
            flat: ``width * height * 4`` bytes, row-major
            width: Buffer width in pixels
            height: Buffer height in pixels

        Returns:
            PixelBuffer owning a private copy of the bytes
        """
        if isinstance(flat, np.ndarray):
            arr = flat.astype(np.uint8).ravel()
        else:
            arr = np.frombuffer(bytes(flat), dtype=np.uint8)
        expected = width * height * cls.CHANNELS
        if arr.size != expected:
            raise ValueError(
                f"Buffer has {arr.size} bytes, expected {expected} for {width}x{height} RGBA"
            )
        return cls(arr.reshape(height, width, cls.CHANNELS).copy())

    def to_bytes(self) -> bytes:
        return np.ascontiguousarray(self.data).tobytes()

    def copy(self) -> 'PixelBuffer':
        return PixelBuffer(self.data.copy())

    def pixel(self, x: int, y: int):
        """Return the (R, G, B, A) tuple at column x, row y."""
        return tuple(int(v) for v in self.data[y, x])

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.data.shape == other.data.shape and np.array_equal(self.data, other.data)

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"


@dataclass
class MaskConfig:
    """Configuration for the exposure mask."""
    factor: float = 0.8  # Brightness multiplier applied outside the selection
    preview_factor: float = 0.3  # Stronger dimming used while previewing

    def __post_init__(self):
        """Validate factor ranges."""
        for key in ('factor', 'preview_factor'):
            value = getattr(self, key)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Mask '{key}' value {value} out of range [0.0, 1.0]")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'MaskConfig':
        mask = config.get('mask', {}) or {}
        return cls(
            factor=float(mask.get('factor', 0.8)),
            preview_factor=float(mask.get('preview_factor', 0.3))
        )
