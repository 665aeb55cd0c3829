"""Pillow-backed implementation of the codec capability."""

import io

from PIL import Image, features

from .error_handling import map_codec_errors
from .exceptions import EncodingFailureError, UnreadableMetadataError
from .models import ImageDimensions

SAVE_FORMATS = {"webp": "WEBP", "avif": "AVIF"}


def supports_format(fmt: str) -> bool:
    """Whether the installed Pillow build can encode `fmt`."""
    return fmt in SAVE_FORMATS and bool(features.check(fmt))


def _prepare_mode(image: "Image.Image") -> "Image.Image":
    # WebP and AVIF encoders take RGB or RGBA only.
    if image.mode in ("RGB", "RGBA"):
        return image
    return image.convert("RGBA" if image.has_transparency_data else "RGB")


class PillowCodec:
    """Probe, resize and re-encode images in memory with Pillow."""

    resample = Image.Resampling.LANCZOS

    @map_codec_errors(UnreadableMetadataError)
    def probe(self, data: bytes) -> ImageDimensions:
        with Image.open(io.BytesIO(data)) as image:
            width, height = image.size

        if not width:
            raise UnreadableMetadataError(
                "Could not determine image width from metadata."
            )
        return ImageDimensions(width=width, height=height)

    @map_codec_errors(EncodingFailureError)
    def resize_encode(self, data: bytes, width: int, fmt: str, quality: int) -> bytes:
        if fmt not in SAVE_FORMATS:
            raise EncodingFailureError(f"Unsupported output format: {fmt}")

        with Image.open(io.BytesIO(data)) as source:
            source.load()
            image = _prepare_mode(source)

            # Never enlarge: widths above the original keep the original size.
            if width < image.width:
                height = max(1, round(image.height * width / image.width))
                image = image.resize((width, height), self.resample)

            buffer = io.BytesIO()
            image.save(buffer, format=SAVE_FORMATS[fmt], quality=quality)

        return buffer.getvalue()
