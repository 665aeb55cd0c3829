"""Multithreaded processor implementation - uses thread pool for parallelism."""

from typing import List, Optional
from concurrent.futures import ThreadPoolExecutor, as_completed

from ..core import ImageResult, ImageUpload, RequestConfig
from ..core.protocols import CodecProtocol
from .common import failed_result, process_single_image


def process_batch(
    batch: List[ImageUpload], config: RequestConfig, codec: CodecProtocol
) -> List[ImageResult]:
    """
    Process a batch of images using multithreading.

    Pillow releases the GIL while encoding, so threads give real overlap.

    Args:
        batch: List of uploads to process
        config: Request configuration
        codec: Codec instance (stateless, safe to share between threads)

    Returns:
        List of image results in input order
    """
    if not batch:
        return []

    results: List[Optional[ImageResult]] = [None] * len(batch)
    max_workers = min(8, len(batch))

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_index = {
            executor.submit(process_single_image, codec, upload, config): index
            for index, upload in enumerate(batch)
        }

        for future in as_completed(future_to_index):
            index = future_to_index[future]
            try:
                results[index] = future.result()
            except Exception as e:
                results[index] = failed_result(batch[index], e)

    return results  # type: ignore[return-value]
