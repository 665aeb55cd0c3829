"""Tests for archive assembly."""

import io
import zipfile

import pytest

from webready.core.archive import archive_entries, build_archive
from webready.core.exceptions import WebReadyError
from webready.core.models import DerivativeOutput


def _read(data: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(data))


def test_archive_entries_puts_document_last():
    outputs = [
        DerivativeOutput(file_name="a-480.webp", format="webp", width=480, data=b"1"),
        DerivativeOutput(file_name="a-480.avif", format="avif", width=480, data=b"2"),
    ]
    entries = archive_entries(outputs, "snippet.html", "<img>")
    assert [name for name, _ in entries] == ["a-480.webp", "a-480.avif", "snippet.html"]


def test_build_archive_round_trips_contents():
    data = build_archive([("a-480.webp", b"\x00\x01"), ("snippet.html", "<img>")])

    with _read(data) as archive:
        assert archive.namelist() == ["a-480.webp", "snippet.html"]
        assert archive.read("a-480.webp") == b"\x00\x01"
        assert archive.read("snippet.html").decode() == "<img>"
        assert all(i.compress_type == zipfile.ZIP_DEFLATED for i in archive.infolist())


def test_build_archive_rejects_duplicate_names():
    with pytest.raises(WebReadyError, match="Duplicate archive entry"):
        build_archive([("a.webp", b"1"), ("a.webp", b"2")])


def test_build_archive_empty():
    with _read(build_archive([])) as archive:
        assert archive.namelist() == []
