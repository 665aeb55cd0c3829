"""Testing utilities and fakes for WebReady."""

from .fakes import (
    FakeCodec,
    FakeImage,
    FakeLogger,
    create_test_image,
    make_upload,
)

__all__ = [
    "FakeCodec",
    "FakeImage",
    "FakeLogger",
    "create_test_image",
    "make_upload",
]
