"""Protocol definitions for dependency injection and testability."""

from typing import Any, Callable, List, Protocol

from .models import ImageDimensions, ImageResult, ImageUpload, RequestConfig


class CodecProtocol(Protocol):
    """Protocol for the image codec capability."""

    def probe(self, data: bytes) -> ImageDimensions:
        """Report the intrinsic dimensions of an encoded image."""
        ...

    def resize_encode(
        self, data: bytes, width: int, fmt: str, quality: int
    ) -> bytes:
        """Resize to `width` (never enlarging) and encode as `fmt`."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...


# Signature shared by every strategy in webready.processors.
ProcessBatchFunction = Callable[
    [List[ImageUpload], RequestConfig, CodecProtocol], List[ImageResult]
]
