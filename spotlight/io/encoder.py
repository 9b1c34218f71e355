"""
Image encoding for download and persistence.

Turns a processed buffer into PNG/JPEG bytes or a ``data:`` URI. PNG is
the default output, matching a canvas ``toDataURL()`` call.
"""

import base64
import io
import logging
import re
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from ..editing.models import PixelBuffer
from .image_loader import load_image, ImageLoadError

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "edited-image.png"

_MIME_TYPES = {
    'PNG': 'image/png',
    'JPEG': 'image/jpeg',
}

_DATA_URI_PATTERN = re.compile(r'^data:(?P<mime>[\w/+.-]+);base64,(?P<payload>.*)$', re.DOTALL)


class EncodingFailure(Exception):
    """Raised when the encoder cannot produce output for a buffer."""
    pass


def encode(buffer: PixelBuffer, fmt: str = 'PNG', quality: int = 95) -> bytes:
    """
    Encode a buffer.

    Args:
        buffer: RGBA pixels to encode
        fmt: 'PNG' (lossless, keeps alpha) or 'JPEG' (lossy, alpha dropped)
        quality: JPEG quality

    Returns:
        Encoded image bytes
    """
    fmt = fmt.upper()
    if fmt == 'JPG':
        fmt = 'JPEG'
    if fmt not in _MIME_TYPES:
        raise EncodingFailure(f"Unsupported output format: {fmt}")
    if buffer.width == 0 or buffer.height == 0:
        raise EncodingFailure("Canvas is empty")

    img = Image.fromarray(np.ascontiguousarray(buffer.data))
    save_kwargs = {}
    if fmt == 'JPEG':
        img = img.convert('RGB')
        save_kwargs['quality'] = quality

    out = io.BytesIO()
    try:
        img.save(out, fmt, **save_kwargs)
    except (OSError, ValueError) as e:
        raise EncodingFailure(f"Failed to encode {fmt}: {e}") from e

    data = out.getvalue()
    if not data:
        raise EncodingFailure(f"Encoder produced no {fmt} output")
    return data


def encode_png(buffer: PixelBuffer) -> bytes:
    return encode(buffer, 'PNG')


def encode_jpeg(buffer: PixelBuffer, quality: int = 95) -> bytes:
    return encode(buffer, 'JPEG', quality=quality)


def to_data_uri(buffer: PixelBuffer, fmt: str = 'PNG', quality: int = 95) -> str:
    """Encode a buffer as a base64 ``data:`` URI."""
    data = encode(buffer, fmt, quality=quality)
    mime = _MIME_TYPES['JPEG' if fmt.upper() in ('JPG', 'JPEG') else fmt.upper()]
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(uri: str) -> PixelBuffer:
    """Decode a base64 ``data:`` URI back into an RGBA buffer."""
    match = _DATA_URI_PATTERN.match(uri.strip())
    if not match:
        raise ImageLoadError("Not a base64 data URI")
    try:
        raw = base64.b64decode(match.group('payload'), validate=True)
    except ValueError as e:
        raise ImageLoadError(f"Invalid base64 payload: {e}") from e
    return load_image(raw)


def save_image(buffer: PixelBuffer, path: Union[str, Path, None] = None,
               quality: int = 95) -> Path:
    """
    Write the buffer to disk; the format follows the file extension.

    Returns:
        Path the image was written to
    """
    path = Path(path) if path else Path(DEFAULT_FILENAME)
    fmt = 'JPEG' if path.suffix.lower() in ('.jpg', '.jpeg') else 'PNG'
    data = encode(buffer, fmt, quality=quality)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info(f"Saved edited image to {path}")
    return path
