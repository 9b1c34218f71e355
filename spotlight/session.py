"""
Edit session: owns the state of one spotlight edit.

All mutable state (the pristine image, the current selection, the drawing
flag and the last committed result) lives on the session and is passed to
the pure selector/mask functions explicitly. Pointer handlers therefore
always see the latest state.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .editing.models import MaskConfig, PixelBuffer, Point, Rectangle
from .editing.outline import render_outline, DEFAULT_COLOR, DEFAULT_LINE_WIDTH
from .editing import exposure_mask, selector
from .io import encoder
from .storage.persistence import build_payload
from .utils.logging import StructuredLogger

NO_SELECTION_MESSAGE = "Draw a rectangle on the image before saving."


@dataclass
class FinalizeResult:
    """Outcome of finalizing a selection."""
    skipped: bool
    message: str
    buffer: Optional[PixelBuffer] = None
    rectangle: Optional[Rectangle] = None  # Clipped, native pixels; None if off-image
    encoded: Optional[str] = None  # data URI, None if encoding failed

    @property
    def encoded_ok(self) -> bool:
        return self.encoded is not None


class EditSession:
    """State for a single spotlight edit on one native-resolution image."""

    def __init__(self, source: PixelBuffer, mask_config: Optional[MaskConfig] = None,
                 outline_color=DEFAULT_COLOR, outline_width: int = DEFAULT_LINE_WIDTH,
                 output_format: str = 'PNG'):
        """
        Initialize the session.

        Args:
            source: Decoded image at native resolution; the session keeps a copy
            mask_config: Mask factors for commit and preview
            outline_color: RGBA color of the selection outline
            outline_width: Outline stroke width in pixels
            output_format: Encoding used for the finalized image
        """
        self.session_id = uuid.uuid4().hex
        self.source = source.copy()
        self.mask_config = mask_config or MaskConfig()
        self.outline_color = outline_color
        self.outline_width = outline_width
        self.output_format = output_format

        self.rectangle: Optional[Rectangle] = None
        self.is_drawing = False
        self.result: Optional[FinalizeResult] = None

        self.log = StructuredLogger(__name__, {'session': self.session_id[:8]})

    @property
    def native_size(self):
        return self.source.size

    def pointer_down(self, point: Point) -> Rectangle:
        """Start a new selection at ``point``."""
        self.is_drawing = True
        self.rectangle = selector.begin(point)
        self.log.debug("Selection started", x=point.x, y=point.y)
        return self.rectangle

    def pointer_move(self, point: Point) -> Optional[PixelBuffer]:
        """
        Stretch the selection while drawing.

        Returns:
            Frame with the updated outline, or None when not drawing
        """
        if not self.is_drawing or self.rectangle is None:
            return None
        self.rectangle = selector.update(self.rectangle, point)
        return self.render()

    def pointer_up(self, point: Optional[Point] = None) -> FinalizeResult:
        """Stop drawing and finalize the selection."""
        if self.is_drawing and self.rectangle is not None and point is not None:
            self.rectangle = selector.update(self.rectangle, point)
        self.is_drawing = False
        return self.finalize()

    def render(self) -> PixelBuffer:
        """Redraw the pristine image with the current selection outline."""
        return render_outline(self.source, self.rectangle,
                              color=self.outline_color, line_width=self.outline_width)

    def preview(self) -> PixelBuffer:
        """Mask with the preview factor without committing anything."""
        return exposure_mask.apply(self.source, self.rectangle,
                                   self.mask_config.preview_factor)

    def finalize(self) -> FinalizeResult:
        """
        Apply the mask to the pristine image and encode the result.

        The mask is always computed from the untouched source, so calling
        this repeatedly never compounds the dimming.
        """
        if self.rectangle is None:
            self.log.info("Finalize skipped, no selection")
            return FinalizeResult(skipped=True, message=NO_SELECTION_MESSAGE)

        # The saved rectangle is the undimmed region; off-image selections dim everything
        rect = selector.clip(self.rectangle, self.source.size)
        mask_rect = rect if rect is not None else selector.normalize(self.rectangle)
        masked = exposure_mask.apply(self.source, mask_rect, self.mask_config.factor)

        try:
            encoded = encoder.to_data_uri(masked, self.output_format)
            message = "Selection applied."
        except encoder.EncodingFailure as e:
            self.log.error("Encoding failed", error=str(e))
            encoded = None
            message = f"Could not encode the edited image: {e}"

        self.result = FinalizeResult(
            skipped=False,
            message=message,
            buffer=masked,
            rectangle=rect,
            encoded=encoded
        )
        self.log.info("Selection finalized", factor=self.mask_config.factor,
                      off_image=rect is None, **mask_rect.to_dict())
        return self.result

    def build_payload(self) -> Optional[Dict[str, Any]]:
        """Payload for the save endpoint, or None if nothing is ready to send."""
        if self.result is None or self.result.skipped or not self.result.encoded_ok:
            return None
        return build_payload(
            image=self.result.encoded,
            rectangle=self.result.rectangle,
            image_width=self.source.width,
            image_height=self.source.height
        )

    def reset(self):
        """Drop the selection and any committed result."""
        self.rectangle = None
        self.is_drawing = False
        self.result = None
