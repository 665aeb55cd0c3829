"""Multiprocess processor implementation - uses process pool for parallelism."""

from typing import List, Optional, Tuple
from concurrent.futures import ProcessPoolExecutor, as_completed

from ..core import (
    ImageResult,
    ImageUpload,
    RequestConfig,
    configure_multiprocessing_logging,
)
from ..core.protocols import CodecProtocol
from .common import failed_result, process_single_image


def process_single_image_worker(
    args: Tuple[ImageUpload, RequestConfig, CodecProtocol]
) -> ImageResult:
    """
    Worker function designed for use with a `ProcessPoolExecutor`.

    Args:
        args: A tuple `(upload, config, codec)`; every member must be picklable.

    Returns:
        An `ImageResult` describing the outcome.
    """
    upload, config, codec = args

    configure_multiprocessing_logging()

    return process_single_image(codec, upload, config)


def process_batch(
    batch: List[ImageUpload], config: RequestConfig, codec: CodecProtocol
) -> List[ImageResult]:
    """
    Processes a batch of images using a `ProcessPoolExecutor` for parallelism.

    Each upload's bytes are shipped to a worker process, so memory use
    grows with the pool size.

    Returns:
        A list of `ImageResult` objects in input order.
    """
    if not batch:
        return []

    results: List[Optional[ImageResult]] = [None] * len(batch)
    max_workers = min(4, len(batch))

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        future_to_index = {
            executor.submit(process_single_image_worker, (upload, config, codec)): index
            for index, upload in enumerate(batch)
        }

        for future in as_completed(future_to_index):
            index = future_to_index[future]
            try:
                results[index] = future.result()
            except Exception as e:
                results[index] = failed_result(batch[index], e)

    return results  # type: ignore[return-value]
