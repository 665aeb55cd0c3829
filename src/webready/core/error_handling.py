# src/webready/core/error_handling.py

import functools
import logging
from typing import Dict, List, Type

from PIL import Image, UnidentifiedImageError

from .exceptions import ImageProcessingError, WebReadyError


# Failures Pillow raises for corrupt, truncated or unsupported input.
CODEC_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    SyntaxError,
    ValueError,
    KeyError,
)


def map_codec_errors(error_cls: Type[ImageProcessingError]):
    """
    Decorator translating Pillow failures into a WebReady error type.

    Errors that are already WebReady errors pass through untouched.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(func.__module__ + '.' + func.__name__)
            try:
                return func(*args, **kwargs)
            except WebReadyError:
                raise
            except CODEC_ERRORS as e:
                logger.debug(f"Codec error in '{func.__name__}': {e}", exc_info=True)
                raise error_cls(f"{func.__name__} failed: {e}") from e
        return wrapper
    return decorator


class BatchOperationContextManager:
    """
    Context manager for batch operations to collect and summarize errors.
    """
    def __init__(self, operation_name="Batch Operation", logger=None):
        self.operation_name = operation_name
        self.errors: List[Dict[str, str]] = []
        self.logger = logger or logging.getLogger(
            self.__class__.__module__ + '.' + self.__class__.__name__
        )

    def __enter__(self):
        self.logger.info(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.logger.error(
                f"{self.operation_name} failed due to an unhandled exception: {exc_val}"
            )
        elif self.errors:
            self.logger.warning(
                f"{self.operation_name} completed with {len(self.errors)} error(s)."
            )
            for i, error_detail in enumerate(self.errors):
                self.logger.warning(
                    f"  Error {i+1}/{len(self.errors)} for item "
                    f"'{error_detail['item']}': {error_detail['error']}"
                )
        else:
            self.logger.info(f"{self.operation_name} completed successfully.")

        # Never suppress exceptions raised inside the block.
        return False

    def add_error(self, error_message: str, item_identifier: str = "Unknown item"):
        """
        Report an error for a specific item from within the 'with' block.

        Args:
            error_message (str): The error message or exception string.
            item_identifier (str): A string identifying the item that failed (e.g., filename).
        """
        self.errors.append({"item": item_identifier, "error": str(error_message)})
        self.logger.debug(
            f"Error added for item '{item_identifier}' in {self.operation_name}: {error_message}"
        )

    @property
    def error_count(self) -> int:
        return len(self.errors)
