"""In-memory ZIP packaging of derivatives and snippet documents."""

import io
import zipfile
from typing import Iterable, List, Tuple, Union

from .exceptions import WebReadyError, with_error_handling
from .models import DerivativeOutput

ArchiveEntry = Tuple[str, Union[bytes, str]]


def archive_entries(
    outputs: Iterable[DerivativeOutput], document_name: str, document: str
) -> List[ArchiveEntry]:
    """Derivatives in generation order followed by the markup document."""
    entries: List[ArchiveEntry] = [(o.file_name, o.data) for o in outputs]
    entries.append((document_name, document))
    return entries


@with_error_handling
def build_archive(entries: Iterable[ArchiveEntry]) -> bytes:
    """
    Write entries into a DEFLATE-compressed ZIP held entirely in memory.

    Raises:
        WebReadyError: two entries share a name.
    """
    buffer = io.BytesIO()
    seen = set()

    with zipfile.ZipFile(
        buffer, mode="w", compression=zipfile.ZIP_DEFLATED, compresslevel=9
    ) as archive:
        for name, payload in entries:
            if name in seen:
                raise WebReadyError(f"Duplicate archive entry: {name}")
            seen.add(name)
            archive.writestr(name, payload)

    return buffer.getvalue()
