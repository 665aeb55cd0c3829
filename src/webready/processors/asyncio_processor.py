"""AsyncIO processor implementation - runs each image in a worker thread."""

import asyncio
from typing import List

from ..core import ImageResult, ImageUpload, RequestConfig
from ..core.protocols import CodecProtocol
from .common import failed_result, process_single_image


async def process_single_image_async(
    codec: CodecProtocol, upload: ImageUpload, config: RequestConfig
) -> ImageResult:
    """Process a single image without blocking the event loop."""
    return await asyncio.to_thread(process_single_image, codec, upload, config)


async def process_batch_async(
    batch: List[ImageUpload], config: RequestConfig, codec: CodecProtocol
) -> List[ImageResult]:
    """Process a batch of images concurrently."""
    tasks = [process_single_image_async(codec, upload, config) for upload in batch]

    # One failing image must not cancel the others.
    results = await asyncio.gather(*tasks, return_exceptions=True)

    processed_results: List[ImageResult] = []
    for upload, result in zip(batch, results):
        if isinstance(result, BaseException):
            processed_results.append(failed_result(upload, result))
        else:
            processed_results.append(result)

    return processed_results


def process_batch(
    batch: List[ImageUpload], config: RequestConfig, codec: CodecProtocol
) -> List[ImageResult]:
    """
    Process a batch of images using asyncio.

    This is the synchronous wrapper that runs the async function; it must
    not be called from inside a running event loop.
    """
    return asyncio.run(process_batch_async(batch, config, codec))
