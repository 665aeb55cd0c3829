"""Serial processor implementation - processes images one by one."""

from typing import List

from ..core import ImageResult, ImageUpload, RequestConfig
from ..core.protocols import CodecProtocol
from .common import failed_result, process_single_image


def process_batch(
    batch: List[ImageUpload], config: RequestConfig, codec: CodecProtocol
) -> List[ImageResult]:
    """
    Processes a batch of images serially, one by one, in the current thread.

    Args:
        batch: A list of `ImageUpload` objects to process.
        config: `RequestConfig` shared by every image in the batch.
        codec: Codec used to probe and encode.

    Returns:
        A list of `ImageResult` objects, one per upload, in input order.
    """
    results = []

    for upload in batch:
        try:
            result = process_single_image(codec, upload, config)
        except Exception as e:
            result = failed_result(upload, e)
        results.append(result)

    return results
