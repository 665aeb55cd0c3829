"""Batch processors with different concurrency strategies."""

from typing import Dict, Tuple

from ..core.exceptions import ConfigurationError
from ..core.protocols import ProcessBatchFunction
from .serial import process_batch as serial_process_batch
from .multiprocess import process_batch as multiprocess_process_batch
from .multithread import process_batch as multithread_process_batch
from .asyncio_processor import process_batch as asyncio_process_batch

PROCESSORS: Dict[str, Tuple[str, ProcessBatchFunction]] = {
    "serial": ("Serial", serial_process_batch),
    "multithread": ("Multithreaded", multithread_process_batch),
    "multiprocess": ("Multiprocess", multiprocess_process_batch),
    "asyncio": ("AsyncIO", asyncio_process_batch),
}


def get_processor(name: str) -> Tuple[str, ProcessBatchFunction]:
    """Look up a strategy by its CLI name."""
    try:
        return PROCESSORS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown processor '{name}'. Choose from: {', '.join(PROCESSORS)}"
        ) from None


__all__ = [
    "PROCESSORS",
    "get_processor",
    "serial_process_batch",
    "multiprocess_process_batch",
    "multithread_process_batch",
    "asyncio_process_batch",
]
