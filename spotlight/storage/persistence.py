"""
Client for the remote "save image" endpoint.

The endpoint is an external collaborator: it receives the encoded image,
the finalized selection and the native image dimensions. Failures are
reported back to the caller as results and never retried here.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests

from ..editing.models import Rectangle

logger = logging.getLogger(__name__)


class PersistenceFailure(Exception):
    """Raised when the save endpoint rejects the payload or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class PersistenceResult:
    """Outcome of a save call, for display in the UI layer."""
    success: bool
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def message(self) -> str:
        if self.success:
            return "Image saved to the database successfully!"
        return f"Failed to save image to the database: {self.error}"


def build_payload(image: str, rectangle: Optional[Rectangle],
                  image_width: int, image_height: int) -> Dict[str, Any]:
    """
    Construct the request body for the save endpoint.

    Args:
        image: Encoded image (data URI)
        rectangle: Clipped selection in native image pixels, None when the
            selection missed the image entirely
        image_width: Native image width
        image_height: Native image height
    """
    return {
        'image': image,
        'rectangle': rectangle.to_dict() if rectangle is not None else None,
        'imageWidth': image_width,
        'imageHeight': image_height
    }


class PersistenceClient:
    """Posts edit results to the save endpoint."""

    def __init__(self, url: str, timeout: float = 10, max_workers: int = 1,
                 session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            url: Endpoint receiving the JSON payload
            timeout: Request timeout in seconds
            max_workers: Threads used by ``submit``
            session: Optional requests session to reuse connections
        """
        if not url:
            raise ValueError("Persistence URL is required")
        self.url = url
        self.timeout = timeout
        self.http = session or requests.Session()
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix="spotlight-save")

    def _post(self, payload: Dict[str, Any]) -> int:
        try:
            response = self.http.post(self.url, json=payload, timeout=self.timeout)
        except requests.Timeout as e:
            raise PersistenceFailure(f"Request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise PersistenceFailure(f"Request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise PersistenceFailure(
                f"Endpoint returned HTTP {response.status_code}",
                status_code=response.status_code
            )
        return response.status_code

    def save(self, payload: Dict[str, Any]) -> PersistenceResult:
        """POST the payload and report the outcome."""
        try:
            status = self._post(payload)
        except PersistenceFailure as e:
            logger.error(f"Error saving image to {self.url}: {e}")
            return PersistenceResult(success=False, status_code=e.status_code, error=str(e))

        logger.info(f"Image saved to {self.url} (HTTP {status})")
        return PersistenceResult(success=True, status_code=status)

    def submit(self, payload: Dict[str, Any],
               callback: Optional[Callable[[PersistenceResult], None]] = None) -> Future:
        """
        Fire-and-forget variant of ``save``.

        Returns:
            Future resolving to a PersistenceResult; ``callback`` is invoked
            with the result once the request completes. Errors raised by the
            callback are logged and do not affect the future.
        """
        future = self._executor.submit(self.save, payload)
        if callback is not None:
            future.add_done_callback(lambda f: self._notify(callback, f.result()))
        return future

    def _notify(self, callback: Callable[[PersistenceResult], None], result: PersistenceResult):
        try:
            callback(result)
        except Exception as e:
            logger.error(f"Save callback failed: {e}", exc_info=True)

    def close(self):
        self._executor.shutdown(wait=True)
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
